from __future__ import annotations

from typing import Iterable, Mapping

import requests

from ..metric import (
    DEFAULT_PERCENTILES,
    GaugeExporter,
    HealthCondition,
    Metric,
    calculate_percentiles,
    format_percentiles,
)
from .http import new_session


class PeerCountMetric(Metric[int]):
    """Shared aggregation for peer-count collectors.

    Health is judged on the lowest count seen during the run. Failed probes
    record a count of zero.
    """

    measurement: str

    def __init__(
        self,
        url: str,
        name: str,
        interval: float,
        health_conditions: Iterable[HealthCondition[int]] = (),
        exporter: GaugeExporter | None = None,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(name, interval, health_conditions, exporter)
        self.url = url
        self.session = session or new_session()

    def failure_values(self) -> Mapping[str, int]:
        return {self.measurement: 0}

    def _record(self, peer_count: int) -> Mapping[str, int]:
        self.exporter.set("peer_count", peer_count, {"group": self.group.value})
        return {self.measurement: peer_count}

    def health_values(self) -> Mapping[str, int]:
        counts = self.store.values(self.measurement)
        if not counts:
            return {}
        return {self.measurement: min(counts)}

    def aggregate_results(self) -> str:
        percentiles = calculate_percentiles(self.store.values(self.measurement), *DEFAULT_PERCENTILES)
        return format_percentiles([percentiles[p] for p in DEFAULT_PERCENTILES])
