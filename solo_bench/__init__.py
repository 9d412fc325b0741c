"""
Solo staking node benchmark.

Polls the consensus client, execution client and host on independent
schedules for a fixed duration, then evaluates every metric against its
health thresholds and renders a single report.
"""

__version__ = "0.1.0"

from .main import main

__all__ = ["main"]
