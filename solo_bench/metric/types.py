from __future__ import annotations

import enum
import operator
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Generic, Mapping, TypeVar

T = TypeVar("T")


class Group(str, enum.Enum):
    CONSENSUS = "Consensus"
    EXECUTION = "Execution"
    INFRASTRUCTURE = "Infrastructure"


class HealthStatus(str, enum.Enum):
    HEALTHY = "Healthy"
    UNHEALTHY = "Unhealthy"


class SeverityLevel(str, enum.Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


_COMPARATORS: dict[str, Callable[[Any, Any], bool]] = {
    "==": operator.eq,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


class Operator(str, enum.Enum):
    EQUAL = "=="
    LESS_THAN = "<"
    LESS_THAN_OR_EQUAL = "<="
    GREATER_THAN = ">"
    GREATER_THAN_OR_EQUAL = ">="

    def compare(self, value: Any, threshold: Any) -> bool:
        return _COMPARATORS[self.value](value, threshold)


@dataclass(frozen=True)
class DataPoint(Generic[T]):
    """One timestamped observation; the values mapping is read-only."""

    timestamp: float
    values: Mapping[str, T]

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))


@dataclass(frozen=True)
class HealthCondition(Generic[T]):
    name: str
    threshold: T
    operator: Operator
    severity: SeverityLevel

    def matches(self, value: T) -> bool:
        return self.operator.compare(value, self.threshold)


@dataclass(frozen=True)
class Record:
    group: Group
    metric_name: str
    value: str
    health: HealthStatus
    severity: Mapping[str, SeverityLevel] = field(default_factory=dict)

    def severity_label(self) -> str:
        if not self.severity:
            return "None"
        return ", ".join(f"{name}={level.value}" for name, level in self.severity.items())


__all__ = [
    "DataPoint",
    "Group",
    "HealthCondition",
    "HealthStatus",
    "Operator",
    "Record",
    "SeverityLevel",
]
