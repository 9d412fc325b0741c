from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlsplit

NETWORK_GENESIS_TIME: dict[str, int] = {
    "mainnet": 1606824023,
    "holesky": 1695902400,
}

DEFAULT_DURATION_SECONDS = 15 * 60

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_UNIT_SECONDS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


class ConfigurationError(Exception):
    """Raised when the benchmark configuration cannot be used."""


def parse_duration(value: str | float | int) -> float:
    """Parse ``90``, ``30s``, ``5m`` or ``1h30m`` into seconds."""
    if isinstance(value, (int, float)):
        seconds = float(value)
    else:
        text = value.strip().lower()
        try:
            seconds = float(text)
        except ValueError:
            parts = _DURATION_PART.findall(text)
            if not parts or "".join(number + unit for number, unit in parts) != text:
                raise ConfigurationError(f"invalid duration {value!r}") from None
            seconds = sum(float(number) * _UNIT_SECONDS[unit] for number, unit in parts)
    if seconds < 0:
        raise ConfigurationError(f"duration must not be negative, got {value!r}")
    return seconds


def sanitize_url(address: str) -> str:
    parsed = urlsplit(address.strip())
    if parsed.scheme not in {"http", "https"} or not parsed.hostname:
        raise ConfigurationError(
            f"address {address!r} must include an http(s) scheme and a host, e.g. http://lighthouse:5052"
        )
    try:
        parsed.port
    except ValueError as exc:
        raise ConfigurationError(f"address {address!r} has an invalid port") from exc
    return parsed.geturl().rstrip("/")


def host_port(address: str) -> str:
    """``host:port`` of an http(s) address, defaulting the port from the scheme."""
    parsed = urlsplit(address)
    port = parsed.port or (443 if parsed.scheme == "https" else 80)
    host = parsed.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    return f"{host}:{port}"


@dataclass(frozen=True)
class ConsensusConfig:
    """Beacon node API address and the consensus metrics to collect."""

    address: str = ""
    client: bool = True
    latency: bool = True
    peers: bool = True

    @property
    def any_enabled(self) -> bool:
        return self.client or self.latency or self.peers


@dataclass(frozen=True)
class ExecutionConfig:
    """Execution client JSON-RPC address and the execution metrics to collect."""

    address: str = ""
    peers: bool = True
    latency: bool = True

    @property
    def any_enabled(self) -> bool:
        return self.peers or self.latency


@dataclass(frozen=True)
class InfrastructureConfig:
    cpu: bool = True
    memory: bool = True


@dataclass(frozen=True)
class BenchmarkConfig:
    """Complete configuration of a single benchmark run."""

    consensus: ConsensusConfig = field(default_factory=ConsensusConfig)
    execution: ExecutionConfig = field(default_factory=ExecutionConfig)
    infrastructure: InfrastructureConfig = field(default_factory=InfrastructureConfig)
    network: str = ""
    duration_seconds: float = DEFAULT_DURATION_SECONDS
    output_dir: Path | None = None
    metric_log_path: Path | None = None

    def validate(self) -> "BenchmarkConfig":
        """Return a copy with sanitized addresses, or raise ``ConfigurationError``."""
        consensus = self.consensus
        if consensus.any_enabled:
            try:
                consensus = dataclasses.replace(consensus, address=sanitize_url(consensus.address))
            except ConfigurationError as exc:
                raise ConfigurationError(f"consensus client address was not a valid URL: {exc}") from exc

        execution = self.execution
        if execution.any_enabled:
            try:
                execution = dataclasses.replace(execution, address=sanitize_url(execution.address))
            except ConfigurationError as exc:
                raise ConfigurationError(f"execution client address was not a valid URL: {exc}") from exc

        network = self.network.strip().lower()
        if network not in NETWORK_GENESIS_TIME:
            raise ConfigurationError(
                f"network name {self.network!r} was not valid, expected one of "
                + ", ".join(sorted(NETWORK_GENESIS_TIME))
            )

        if self.duration_seconds < 0:
            raise ConfigurationError("duration must not be negative")

        return dataclasses.replace(
            self, consensus=consensus, execution=execution, network=network
        )
