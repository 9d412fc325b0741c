from .peers import PEER_COUNT_MEASUREMENT, ExecutionPeerMetric

__all__ = ["ExecutionPeerMetric", "PEER_COUNT_MEASUREMENT"]
