"""Concrete collectors for the consensus client, execution client and host."""

from .latency import LatencyMetric
from .peers import PeerCountMetric

__all__ = ["LatencyMetric", "PeerCountMetric"]
