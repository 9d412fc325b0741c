from __future__ import annotations

import json

import requests


def new_session() -> requests.Session:
    session = requests.Session()
    session.headers.update({"Accept": "application/json"})
    return session


def describe_error_response(response: requests.Response) -> str:
    """Human-readable summary of an unsuccessful HTTP response."""
    status = f"{response.status_code} {response.reason or ''}".strip()
    content_type = response.headers.get("Content-Type", "")
    if content_type.startswith("application/json"):
        try:
            body = json.dumps(response.json())
        except ValueError:
            return f"received unsuccessful status code. Code: '{status}'. Failed to JSON decode response"
    else:
        body = response.text
    return f"received unsuccessful status code. Code: '{status}'. Response: '{body}'"
