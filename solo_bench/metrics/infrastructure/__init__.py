from .cpu import SYSTEM_CPU_MEASUREMENT, USER_CPU_MEASUREMENT, CPUMetric
from .memory import (
    CACHED_MEMORY_MEASUREMENT,
    FREE_MEMORY_MEASUREMENT,
    TOTAL_MEMORY_MEASUREMENT,
    USED_MEMORY_MEASUREMENT,
    MemoryMetric,
)

__all__ = [
    "CACHED_MEMORY_MEASUREMENT",
    "CPUMetric",
    "FREE_MEMORY_MEASUREMENT",
    "MemoryMetric",
    "SYSTEM_CPU_MEASUREMENT",
    "TOTAL_MEMORY_MEASUREMENT",
    "USED_MEMORY_MEASUREMENT",
    "USER_CPU_MEASUREMENT",
]
