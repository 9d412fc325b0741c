from __future__ import annotations

import enum
import logging
import threading
from typing import Mapping, Protocol, Sequence

from .metric import Collector, Group, HealthStatus, Record

LOGGER = logging.getLogger("solo_bench.service")

UNABLE_TO_EVALUATE = "UNABLE_TO_EVALUATE"


class ReportSink(Protocol):
    def add_record(self, record: Record) -> None: ...

    def render(self) -> None: ...


class ServiceState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    EVALUATING = "evaluating"
    RENDERED = "rendered"


class BenchmarkService:
    """Runs every enabled collector on its own thread and reports once at the end.

    Stores are only read after every collector thread has been joined, so
    the collectors never share state with the evaluation pass.
    """

    def __init__(
        self,
        metrics: Mapping[Group, Sequence[Collector]],
        report: ReportSink,
    ) -> None:
        self._metrics = {group: list(collectors) for group, collectors in metrics.items()}
        self._report = report
        self._threads: list[threading.Thread] = []
        self._state = ServiceState.IDLE
        self._state_lock = threading.Lock()

    @property
    def state(self) -> ServiceState:
        with self._state_lock:
            return self._state

    def _transition(self, expected: ServiceState, target: ServiceState) -> None:
        with self._state_lock:
            if self._state is not expected:
                raise RuntimeError(
                    f"benchmark service is {self._state.value}, expected {expected.value}"
                )
            self._state = target

    def start(self, stop_event: threading.Event, duration_s: float | None = None) -> list[Record]:
        """Measure until ``stop_event`` is set or ``duration_s`` elapses, then report.

        A ``duration_s`` of ``None`` or ``0`` waits for the stop event only.
        Returns the records handed to the report.
        """
        self._transition(ServiceState.IDLE, ServiceState.RUNNING)
        LOGGER.debug("starting benchmark service with metrics %s", self._metrics)

        self._launch(stop_event)

        stop_event.wait(timeout=duration_s or None)
        if not stop_event.is_set():
            LOGGER.info("benchmark duration of %.1fs elapsed", duration_s)
        stop_event.set()

        self._join()
        self._transition(ServiceState.RUNNING, ServiceState.EVALUATING)

        records = self._evaluate()

        LOGGER.info("rendering report")
        try:
            self._report.render()
        except Exception:  # noqa: BLE001
            LOGGER.exception("failed to render benchmark report")
        self._transition(ServiceState.EVALUATING, ServiceState.RENDERED)
        return records

    def _launch(self, stop_event: threading.Event) -> None:
        for group, collectors in self._metrics.items():
            for collector in collectors:
                thread = threading.Thread(
                    target=collector.measure,
                    args=(stop_event,),
                    name=f"metric-{group.value}-{collector.name}".lower(),
                    daemon=True,
                )
                thread.start()
                self._threads.append(thread)
        LOGGER.info("measuring %d metric(s)", len(self._threads))

    def _join(self) -> None:
        for thread in self._threads:
            thread.join()
            LOGGER.debug("metric thread %s finished", thread.name)

    def _evaluate(self) -> list[Record]:
        records: list[Record] = []
        for group, collectors in self._metrics.items():
            for collector in collectors:
                record = self._build_record(group, collector)
                LOGGER.info(
                    "adding report record (metric_group=%s, metric_name=%s)",
                    group.value,
                    collector.name,
                )
                records.append(record)
                try:
                    self._report.add_record(record)
                except Exception:  # noqa: BLE001
                    LOGGER.exception(
                        "failed to add report record for %s/%s", group.value, collector.name
                    )
        return records

    def _build_record(self, group: Group, collector: Collector) -> Record:
        try:
            health, severity = collector.evaluate_metric()
            value = collector.aggregate_results()
        except Exception as exc:  # noqa: BLE001
            LOGGER.exception("failed to evaluate metric %s/%s", group.value, collector.name)
            return Record(
                group=group,
                metric_name=collector.name,
                value=f"{UNABLE_TO_EVALUATE}: {exc}",
                health=HealthStatus.UNHEALTHY,
                severity={},
            )
        return Record(
            group=group,
            metric_name=collector.name,
            value=value,
            health=health,
            severity=severity,
        )
