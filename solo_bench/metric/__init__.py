"""Measurement core: sample stores, percentiles, health evaluation and the tick loop."""

from .base import Collector, Metric, ProbeError
from .exporter import GaugeExporter
from .health import check_condition_order, evaluate
from .percentile import DEFAULT_PERCENTILES, calculate_percentiles, format_percentiles
from .scheduler import IntervalScheduler
from .store import SampleStore
from .types import (
    DataPoint,
    Group,
    HealthCondition,
    HealthStatus,
    Operator,
    Record,
    SeverityLevel,
)

__all__ = [
    "Collector",
    "DEFAULT_PERCENTILES",
    "DataPoint",
    "GaugeExporter",
    "Group",
    "HealthCondition",
    "HealthStatus",
    "IntervalScheduler",
    "Metric",
    "Operator",
    "ProbeError",
    "Record",
    "SampleStore",
    "SeverityLevel",
    "calculate_percentiles",
    "check_condition_order",
    "evaluate",
    "format_percentiles",
]
