from __future__ import annotations

import time
from typing import Iterable, Mapping

import requests

from ...metric import GaugeExporter, Group, HealthCondition, Metric, ProbeError
from ...metric.logger import write_error
from ..http import describe_error_response, new_session

VERSION_MEASUREMENT = "Version"
NODE_HEALTH_MEASUREMENT = "NodeHealth"
SYNC_STATUS_MEASUREMENT = "SyncStatus"
LATENCY_MEASUREMENT = "Latency"

HEALTHY = "Healthy"
UNHEALTHY = "Unhealthy"
SYNCED = "Synced"
NOT_SYNCED = "Not Synced"
LATENCY_ERROR = "Error"


class ClientMetric(Metric[str]):
    """Beacon node identity and liveness: version, health, sync state, latency.

    A tick queries each endpoint once, all within one probe timeout; endpoint
    failures are folded into the tick's single data point as degraded values.
    """

    group = Group.CONSENSUS

    def __init__(
        self,
        url: str,
        name: str,
        interval: float,
        health_conditions: Iterable[HealthCondition[str]] = (),
        exporter: GaugeExporter | None = None,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(name, interval, health_conditions, exporter)
        self.url = url
        self.session = session or new_session()

    def _get(self, path: str, deadline: float) -> requests.Response:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise ProbeError(f"no time left in this tick for {path}")
        try:
            return self.session.get(f"{self.url}{path}", timeout=remaining)
        except requests.RequestException as exc:
            raise ProbeError(exc) from exc

    def _node_health(self, deadline: float) -> tuple[str, str]:
        start = time.perf_counter()
        try:
            response = self._get("/eth/v1/node/health", deadline)
        except ProbeError:
            return UNHEALTHY, LATENCY_ERROR
        latency = f"{round((time.perf_counter() - start) * 1000)}ms"
        with response:
            # 206 means the node is up but still syncing
            health = HEALTHY if response.status_code in (200, 206) else UNHEALTHY
        return health, latency

    def _version(self, deadline: float) -> str:
        response = self._get("/eth/v1/node/version", deadline)
        with response:
            if response.status_code != 200:
                raise ProbeError(describe_error_response(response))
            try:
                return str(response.json()["data"]["version"])
            except (ValueError, KeyError, TypeError) as exc:
                raise ProbeError(f"unexpected version response: {exc}") from exc

    def _sync_status(self, deadline: float) -> str:
        try:
            response = self._get("/eth/v1/node/syncing", deadline)
        except ProbeError:
            return NOT_SYNCED
        with response:
            if response.status_code != 200:
                return NOT_SYNCED
            try:
                is_syncing = response.json()["data"]["is_syncing"]
            except (ValueError, KeyError, TypeError):
                return SYNCED
        return NOT_SYNCED if is_syncing else SYNCED

    def probe(self) -> Mapping[str, str]:
        # the three queries share one timeout budget
        deadline = time.monotonic() + self.probe_timeout
        health, latency = self._node_health(deadline)
        sync_status = self._sync_status(deadline)
        try:
            version = self._version(deadline)
        except ProbeError as exc:
            write_error(self.group, self.name, f"version query failed: {exc}")
            version = ""
        return {
            VERSION_MEASUREMENT: version,
            NODE_HEALTH_MEASUREMENT: health,
            SYNC_STATUS_MEASUREMENT: sync_status,
            LATENCY_MEASUREMENT: latency,
        }

    def failure_values(self) -> Mapping[str, str]:
        return {
            VERSION_MEASUREMENT: "",
            NODE_HEALTH_MEASUREMENT: UNHEALTHY,
            SYNC_STATUS_MEASUREMENT: NOT_SYNCED,
            LATENCY_MEASUREMENT: LATENCY_ERROR,
        }

    def aggregate_results(self) -> str:
        latest = self.store.latest()
        values = latest.values if latest is not None else {}
        return (
            f"Version: {values.get(VERSION_MEASUREMENT, '')}, "
            f"Node Health: {values.get(NODE_HEALTH_MEASUREMENT, '')}, "
            f"Sync Status: {values.get(SYNC_STATUS_MEASUREMENT, '')}, "
            f"Latency: {values.get(LATENCY_MEASUREMENT, '')}"
        )
