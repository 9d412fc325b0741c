from __future__ import annotations

import logging
import threading
from typing import Generic, Iterable, Mapping, Protocol

from .exporter import GaugeExporter
from .health import check_condition_order, evaluate
from .logger import write_error, write_metric
from .scheduler import IntervalScheduler
from .store import SampleStore
from .types import Group, HealthCondition, HealthStatus, SeverityLevel, T

LOGGER = logging.getLogger("solo_bench.metric")


class ProbeError(Exception):
    """Raised by a probe when a single measurement attempt fails."""


class Collector(Protocol):
    name: str

    def measure(self, stop_event: threading.Event) -> None: ...

    def aggregate_results(self) -> str: ...

    def evaluate_metric(self) -> tuple[HealthStatus, dict[str, SeverityLevel]]: ...


class Metric(Generic[T]):
    """Base collector: one probe per tick, one data point per probe.

    Subclasses implement :meth:`probe`, :meth:`failure_values` and
    :meth:`aggregate_results`; :meth:`health_values` may be overridden to
    evaluate an aggregate instead of the latest sample.
    """

    group: Group

    def __init__(
        self,
        name: str,
        interval: float,
        health_conditions: Iterable[HealthCondition[T]] = (),
        exporter: GaugeExporter | None = None,
    ) -> None:
        self.name = name
        self.interval = interval
        self.exporter = exporter or GaugeExporter()
        self.store: SampleStore[T] = SampleStore(name, health_conditions)
        check_condition_order(name, self.store.health_conditions)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, interval={self.interval})"

    @property
    def probe_timeout(self) -> float:
        return min(self.interval * 0.75, 5.0)

    def measure(self, stop_event: threading.Event) -> None:
        ticks = IntervalScheduler(self.interval, self._tick, self.name).run(stop_event)
        LOGGER.debug("metric %s/%s was stopped after %d tick(s)", self.group.value, self.name, ticks)

    def _tick(self) -> None:
        try:
            values = self.probe()
        except ProbeError as exc:
            write_error(self.group, self.name, exc)
            values = self.failure_values()
        except Exception as exc:  # noqa: BLE001
            LOGGER.exception("unexpected probe failure in %s", self.name)
            write_error(self.group, self.name, exc)
            values = self.failure_values()
        else:
            write_metric(self.group, self.name, values)
        self.store.add_data_point(values)

    def probe(self) -> Mapping[str, T]:
        raise NotImplementedError

    def failure_values(self) -> Mapping[str, T]:
        raise NotImplementedError

    def health_values(self) -> Mapping[str, T]:
        latest = self.store.latest()
        return latest.values if latest is not None else {}

    def evaluate_metric(self) -> tuple[HealthStatus, dict[str, SeverityLevel]]:
        return evaluate(self.store, self.health_values())

    def aggregate_results(self) -> str:
        raise NotImplementedError
