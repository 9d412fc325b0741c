from __future__ import annotations

import socket
import time
from typing import Callable, Iterable, Mapping

from ..metric import (
    DEFAULT_PERCENTILES,
    GaugeExporter,
    Group,
    HealthCondition,
    Metric,
    ProbeError,
    calculate_percentiles,
    format_percentiles,
)

DURATION_MEASUREMENT = "Duration"
DURATION_MIN_MEASUREMENT = "DurationMin"
DURATION_P10_MEASUREMENT = "DurationP10"
DURATION_P50_MEASUREMENT = "DurationP50"
DURATION_P90_MEASUREMENT = "DurationP90"
DURATION_MAX_MEASUREMENT = "DurationMax"

_PERCENTILE_MEASUREMENTS = {
    0: DURATION_MIN_MEASUREMENT,
    10: DURATION_P10_MEASUREMENT,
    50: DURATION_P50_MEASUREMENT,
    90: DURATION_P90_MEASUREMENT,
    100: DURATION_MAX_MEASUREMENT,
}

Dialer = Callable[[str, int, float], None]


def tcp_dial(host: str, port: int, timeout: float) -> None:
    """Open and close a TCP connection, trying each resolved address in turn.

    ``timeout`` bounds the whole dial, not each address.
    """
    deadline = time.monotonic() + timeout
    error: OSError | None = None
    for family, kind, proto, _, address in socket.getaddrinfo(host, port, type=socket.SOCK_STREAM):
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            break
        sock = socket.socket(family, kind, proto)
        try:
            sock.settimeout(remaining)
            sock.connect(address)
            return
        except OSError as exc:
            error = exc
        finally:
            sock.close()
    if error is not None and deadline > time.monotonic():
        raise error
    raise TimeoutError(f"dial {host}:{port} timed out after {timeout:g}s")


def split_host_port(address: str) -> tuple[str, int]:
    host, sep, port = address.rpartition(":")
    if not sep or not host or not port.isdigit():
        raise ValueError(f"address {address!r} is not in host:port form")
    return host.strip("[]"), int(port)


class LatencyMetric(Metric[float]):
    """Time to open a TCP connection to a client, in seconds.

    Failed dials are recorded as data points without a duration so they do
    not drag the percentiles towards zero.
    """

    def __init__(
        self,
        group: Group,
        address: str,
        name: str,
        interval: float,
        health_conditions: Iterable[HealthCondition[float]] = (),
        exporter: GaugeExporter | None = None,
        dialer: Dialer = tcp_dial,
    ) -> None:
        super().__init__(name, interval, health_conditions, exporter)
        self.group = group
        self._host, self._port = split_host_port(address)
        self._dialer = dialer

    def probe(self) -> Mapping[str, float]:
        start = time.perf_counter()
        try:
            self._dialer(self._host, self._port, self.probe_timeout)
        except OSError as exc:
            raise ProbeError(f"dial {self._host}:{self._port} failed: {exc}") from exc
        latency = time.perf_counter() - start
        self.exporter.set("latency_seconds", latency, {"group": self.group.value})
        return {DURATION_MEASUREMENT: latency}

    def failure_values(self) -> Mapping[str, float]:
        return {}

    def _percentiles(self) -> dict[int, float]:
        return calculate_percentiles(
            self.store.values(DURATION_MEASUREMENT), *DEFAULT_PERCENTILES, zero=0.0
        )

    def health_values(self) -> Mapping[str, float]:
        if not self.store.values(DURATION_MEASUREMENT):
            return {}
        return {
            _PERCENTILE_MEASUREMENTS[percentile]: value
            for percentile, value in self._percentiles().items()
        }

    def aggregate_results(self) -> str:
        percentiles = self._percentiles()
        return format_percentiles(
            [percentiles[p] * 1000 for p in DEFAULT_PERCENTILES], unit="ms"
        )
