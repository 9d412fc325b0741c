from __future__ import annotations

from typing import Iterable, Mapping

import psutil

from ...metric import (
    DEFAULT_PERCENTILES,
    GaugeExporter,
    Group,
    HealthCondition,
    Metric,
    ProbeError,
    calculate_percentiles,
    format_percentiles,
)

SYSTEM_CPU_MEASUREMENT = "System"
USER_CPU_MEASUREMENT = "User"


class CPUMetric(Metric[float]):
    """Share of CPU time spent in system and user mode since the previous tick."""

    group = Group.INFRASTRUCTURE

    def __init__(
        self,
        name: str,
        interval: float,
        health_conditions: Iterable[HealthCondition[float]] = (),
        exporter: GaugeExporter | None = None,
    ) -> None:
        super().__init__(name, interval, health_conditions, exporter)
        # primes psutil's baseline so the first tick reports a real delta
        psutil.cpu_times_percent(interval=None)

    def probe(self) -> Mapping[str, float]:
        try:
            times = psutil.cpu_times_percent(interval=None)
        except (OSError, psutil.Error) as exc:
            raise ProbeError(exc) from exc
        self.exporter.set("cpu_percent", times.system, {"mode": "system"})
        self.exporter.set("cpu_percent", times.user, {"mode": "user"})
        return {SYSTEM_CPU_MEASUREMENT: times.system, USER_CPU_MEASUREMENT: times.user}

    def failure_values(self) -> Mapping[str, float]:
        return {SYSTEM_CPU_MEASUREMENT: 0.0, USER_CPU_MEASUREMENT: 0.0}

    def aggregate_results(self) -> str:
        parts = []
        for measurement in (SYSTEM_CPU_MEASUREMENT, USER_CPU_MEASUREMENT):
            percentiles = calculate_percentiles(
                self.store.values(measurement), *DEFAULT_PERCENTILES, zero=0.0
            )
            rendered = format_percentiles([percentiles[p] for p in DEFAULT_PERCENTILES], unit="%")
            parts.append(f"{measurement.lower()}: {rendered}")
        return "; ".join(parts)
