from __future__ import annotations

from typing import Mapping

import psutil

from ...metric import (
    Group,
    Metric,
    ProbeError,
    calculate_percentiles,
)

USED_MEMORY_MEASUREMENT = "Used"
TOTAL_MEMORY_MEASUREMENT = "Total"
CACHED_MEMORY_MEASUREMENT = "Cached"
FREE_MEMORY_MEASUREMENT = "Free"

_MEASUREMENTS = (
    TOTAL_MEMORY_MEASUREMENT,
    USED_MEMORY_MEASUREMENT,
    CACHED_MEMORY_MEASUREMENT,
    FREE_MEMORY_MEASUREMENT,
)


def to_megabytes(value: int) -> float:
    return value / (1024 * 1024)


class MemoryMetric(Metric[int]):
    """Host memory usage in bytes, summarised as per-category medians."""

    group = Group.INFRASTRUCTURE

    def probe(self) -> Mapping[str, int]:
        try:
            stats = psutil.virtual_memory()
        except (OSError, psutil.Error) as exc:
            raise ProbeError(exc) from exc
        values = {
            TOTAL_MEMORY_MEASUREMENT: stats.total,
            USED_MEMORY_MEASUREMENT: stats.used,
            # "cached" only exists on Linux and BSD
            CACHED_MEMORY_MEASUREMENT: getattr(stats, "cached", 0),
            FREE_MEMORY_MEASUREMENT: stats.free,
        }
        for measurement, value in values.items():
            self.exporter.set("memory_bytes", value, {"type": measurement.lower()})
        return values

    def failure_values(self) -> Mapping[str, int]:
        # a zero "Free" would trip the out-of-memory condition
        return {}

    def aggregate_results(self) -> str:
        medians = {
            measurement: calculate_percentiles(
                [to_megabytes(value) for value in self.store.values(measurement)], 50, zero=0.0
            )[50]
            for measurement in _MEASUREMENTS
        }
        return (
            f"total_P50={medians[TOTAL_MEMORY_MEASUREMENT]:.2f}MB, "
            f"used_P50={medians[USED_MEMORY_MEASUREMENT]:.2f}MB, "
            f"cached_P50={medians[CACHED_MEMORY_MEASUREMENT]:.2f}MB, "
            f"free_P50={medians[FREE_MEMORY_MEASUREMENT]:.2f}MB"
        )
