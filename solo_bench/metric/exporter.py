from __future__ import annotations

import threading
from typing import Mapping


class GaugeExporter:
    """Latest value of each labelled gauge, shared by all collector threads."""

    def __init__(self) -> None:
        self._gauges: dict[tuple[str, tuple[tuple[str, str], ...]], float] = {}
        self._lock = threading.Lock()

    def set(self, name: str, value: float, labels: Mapping[str, str] | None = None) -> None:
        key = (name, tuple(sorted((labels or {}).items())))
        with self._lock:
            self._gauges[key] = float(value)

    def get(self, name: str, labels: Mapping[str, str] | None = None) -> float | None:
        key = (name, tuple(sorted((labels or {}).items())))
        with self._lock:
            return self._gauges.get(key)

    def snapshot(self) -> list[dict[str, object]]:
        with self._lock:
            items = sorted(self._gauges.items())
        return [
            {"name": name, "labels": dict(labels), "value": value}
            for (name, labels), value in items
        ]
