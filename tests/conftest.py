"""Shared fakes and fixtures for the benchmark tests."""

from __future__ import annotations

import itertools
import time
from typing import Any, Iterable, Mapping

import pytest

from solo_bench.metric import Group, Metric, ProbeError


class FakeResponse:
    """Minimal stand-in for ``requests.Response``."""

    def __init__(
        self,
        status_code: int = 200,
        payload: Any = None,
        text: str = "",
        headers: dict[str, str] | None = None,
        reason: str = "OK",
    ) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text
        self.reason = reason
        self.headers = headers if headers is not None else {"Content-Type": "application/json"}

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("response body is not JSON")
        return self._payload

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc_info) -> None:
        return None


class FakeSession:
    """Serves queued responses per URL suffix; the last one repeats forever."""

    def __init__(self, routes: Mapping[str, Iterable[Any]]) -> None:
        self._routes = {suffix: list(responses) for suffix, responses in routes.items()}
        self.calls: list[tuple[str, str, dict[str, Any]]] = []

    def _next(self, method: str, url: str, kwargs: dict[str, Any]) -> FakeResponse:
        self.calls.append((method, url, kwargs))
        for suffix, responses in self._routes.items():
            if url.endswith(suffix):
                item = responses.pop(0) if len(responses) > 1 else responses[0]
                if isinstance(item, BaseException):
                    raise item
                return item
        raise AssertionError(f"unexpected request to {url}")

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._next("GET", url, kwargs)

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._next("POST", url, kwargs)


class CountingMetric(Metric[int]):
    """Collector returning an increasing counter, optionally slowly or failing."""

    group = Group.INFRASTRUCTURE

    def __init__(
        self,
        name: str,
        interval: float,
        delay: float = 0.0,
        fail_every: int = 0,
        **kwargs: Any,
    ) -> None:
        super().__init__(name, interval, **kwargs)
        self._counter = itertools.count(1)
        self._delay = delay
        self._fail_every = fail_every

    def probe(self) -> Mapping[str, int]:
        value = next(self._counter)
        if self._delay:
            time.sleep(self._delay)
        if self._fail_every and value % self._fail_every == 0:
            raise ProbeError(f"probe {value} failed")
        return {"Value": value}

    def failure_values(self) -> Mapping[str, int]:
        return {"Value": 0}

    def aggregate_results(self) -> str:
        return f"samples={len(self.store)}"


class RecordingReport:
    def __init__(self) -> None:
        self.records = []
        self.render_calls = 0
        self.records_at_render: int | None = None

    def add_record(self, record) -> None:
        self.records.append(record)

    def render(self) -> None:
        self.render_calls += 1
        self.records_at_render = len(self.records)


def peer_count_response(count: int) -> FakeResponse:
    return FakeResponse(payload={"data": {"connected": str(count), "disconnected": "0"}})


@pytest.fixture
def report():
    return RecordingReport()
