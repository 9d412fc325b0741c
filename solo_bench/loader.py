from __future__ import annotations

import logging

from .config import BenchmarkConfig, host_port
from .metric import (
    Collector,
    GaugeExporter,
    Group,
    HealthCondition,
    Operator,
    SeverityLevel,
)
from .metrics import LatencyMetric
from .metrics.consensus import PEER_COUNT_MEASUREMENT as CONSENSUS_PEER_COUNT
from .metrics.consensus import VERSION_MEASUREMENT, ClientMetric, ConsensusPeerMetric
from .metrics.execution import PEER_COUNT_MEASUREMENT as EXECUTION_PEER_COUNT
from .metrics.execution import ExecutionPeerMetric
from .metrics.infrastructure import FREE_MEMORY_MEASUREMENT, CPUMetric, MemoryMetric
from .metrics.latency import DURATION_P90_MEASUREMENT

LOGGER = logging.getLogger("solo_bench.loader")

CLIENT_INTERVAL_S = 10.0
LATENCY_INTERVAL_S = 3.0
PEERS_INTERVAL_S = 10.0
CPU_INTERVAL_S = 5.0
MEMORY_INTERVAL_S = 10.0


def peer_count_conditions(measurement: str) -> list[HealthCondition[int]]:
    return [
        HealthCondition(measurement, 5, Operator.LESS_THAN_OR_EQUAL, SeverityLevel.HIGH),
        HealthCondition(measurement, 20, Operator.LESS_THAN_OR_EQUAL, SeverityLevel.MEDIUM),
        HealthCondition(measurement, 40, Operator.LESS_THAN_OR_EQUAL, SeverityLevel.LOW),
    ]


def latency_conditions() -> list[HealthCondition[float]]:
    return [
        HealthCondition(
            DURATION_P90_MEASUREMENT, 1.0, Operator.GREATER_THAN_OR_EQUAL, SeverityLevel.HIGH
        ),
    ]


def load_enabled_metrics(
    config: BenchmarkConfig,
    exporter: GaugeExporter | None = None,
) -> dict[Group, list[Collector]]:
    """Build the collectors switched on in ``config``, grouped for the report.

    ``config`` must already be validated.
    """
    exporter = exporter or GaugeExporter()
    enabled: dict[Group, list[Collector]] = {}

    consensus = config.consensus
    if consensus.client:
        enabled.setdefault(Group.CONSENSUS, []).append(
            ClientMetric(
                consensus.address,
                "Client",
                CLIENT_INTERVAL_S,
                [HealthCondition(VERSION_MEASUREMENT, "", Operator.EQUAL, SeverityLevel.HIGH)],
                exporter=exporter,
            )
        )
    if consensus.latency:
        enabled.setdefault(Group.CONSENSUS, []).append(
            LatencyMetric(
                Group.CONSENSUS,
                host_port(consensus.address),
                "Latency",
                LATENCY_INTERVAL_S,
                latency_conditions(),
                exporter=exporter,
            )
        )
    if consensus.peers:
        enabled.setdefault(Group.CONSENSUS, []).append(
            ConsensusPeerMetric(
                consensus.address,
                "Peers",
                PEERS_INTERVAL_S,
                peer_count_conditions(CONSENSUS_PEER_COUNT),
                exporter=exporter,
            )
        )

    execution = config.execution
    if execution.peers:
        enabled.setdefault(Group.EXECUTION, []).append(
            ExecutionPeerMetric(
                execution.address,
                "Peers",
                PEERS_INTERVAL_S,
                peer_count_conditions(EXECUTION_PEER_COUNT),
                exporter=exporter,
            )
        )
    if execution.latency:
        enabled.setdefault(Group.EXECUTION, []).append(
            LatencyMetric(
                Group.EXECUTION,
                host_port(execution.address),
                "Latency",
                LATENCY_INTERVAL_S,
                latency_conditions(),
                exporter=exporter,
            )
        )

    infrastructure = config.infrastructure
    if infrastructure.cpu:
        enabled.setdefault(Group.INFRASTRUCTURE, []).append(
            CPUMetric("CPU", CPU_INTERVAL_S, exporter=exporter)
        )
    if infrastructure.memory:
        enabled.setdefault(Group.INFRASTRUCTURE, []).append(
            MemoryMetric(
                "Memory",
                MEMORY_INTERVAL_S,
                [HealthCondition(FREE_MEMORY_MEASUREMENT, 0, Operator.EQUAL, SeverityLevel.HIGH)],
                exporter=exporter,
            )
        )

    LOGGER.debug(
        "enabled metrics: %s",
        {group.value: [collector.name for collector in collectors] for group, collectors in enabled.items()},
    )
    return enabled
