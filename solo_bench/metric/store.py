from __future__ import annotations

import time
from typing import Generic, Iterable, Mapping, Sequence

from .types import DataPoint, HealthCondition, T


class SampleStore(Generic[T]):
    """Append-only, per-metric sequence of data points.

    A store has a single writer (its collector thread) and is read by the
    benchmark service only after that thread has been joined, so no lock is
    taken here.
    """

    def __init__(
        self,
        name: str,
        health_conditions: Iterable[HealthCondition[T]] = (),
    ) -> None:
        self.name = name
        self.health_conditions: tuple[HealthCondition[T], ...] = tuple(health_conditions)
        self._points: list[DataPoint[T]] = []

    def add_data_point(self, values: Mapping[str, T]) -> DataPoint[T]:
        point = DataPoint(timestamp=time.time(), values=values)
        self._points.append(point)
        return point

    def data_points(self) -> Sequence[DataPoint[T]]:
        return tuple(self._points)

    def latest(self) -> DataPoint[T] | None:
        return self._points[-1] if self._points else None

    def values(self, measurement: str) -> list[T]:
        """Values of one measurement in insertion order, skipping points without it."""
        return [point.values[measurement] for point in self._points if measurement in point.values]

    def __len__(self) -> int:
        return len(self._points)
