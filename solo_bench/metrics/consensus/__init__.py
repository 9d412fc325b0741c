from .client import (
    LATENCY_MEASUREMENT,
    NODE_HEALTH_MEASUREMENT,
    SYNC_STATUS_MEASUREMENT,
    VERSION_MEASUREMENT,
    ClientMetric,
)
from .peers import PEER_COUNT_MEASUREMENT, ConsensusPeerMetric

__all__ = [
    "ClientMetric",
    "ConsensusPeerMetric",
    "LATENCY_MEASUREMENT",
    "NODE_HEALTH_MEASUREMENT",
    "PEER_COUNT_MEASUREMENT",
    "SYNC_STATUS_MEASUREMENT",
    "VERSION_MEASUREMENT",
]
