from __future__ import annotations

import logging
from typing import Iterable, Mapping

from .store import SampleStore
from .types import HealthCondition, HealthStatus, SeverityLevel, T

LOGGER = logging.getLogger("solo_bench.metric.health")

_SEVERITY_RANK = {
    SeverityLevel.LOW: 0,
    SeverityLevel.MEDIUM: 1,
    SeverityLevel.HIGH: 2,
}


def evaluate(
    store: SampleStore[T],
    values: Mapping[str, T] | None = None,
) -> tuple[HealthStatus, dict[str, SeverityLevel]]:
    """Check ``values`` (the latest data point by default) against the store's conditions.

    Conditions are tried in declared order and the first one that matches a
    measurement decides its severity; later conditions for the same
    measurement are skipped. A condition whose measurement has no value is
    ignored.
    """
    if values is None:
        latest = store.latest()
        values = latest.values if latest is not None else {}

    severities: dict[str, SeverityLevel] = {}
    for condition in store.health_conditions:
        if condition.name in severities:
            continue
        if condition.name not in values:
            LOGGER.debug(
                "no data for measurement %s of metric %s", condition.name, store.name
            )
            continue
        if condition.matches(values[condition.name]):
            severities[condition.name] = condition.severity

    if SeverityLevel.HIGH in severities.values():
        return HealthStatus.UNHEALTHY, severities
    return HealthStatus.HEALTHY, severities


def check_condition_order(
    metric_name: str,
    conditions: Iterable[HealthCondition[T]],
) -> bool:
    """Warn when a tier is declared after a less severe one for the same measurement.

    Declaration order is kept as given; this only reports suspicious tiers.
    """
    last_rank: dict[str, int] = {}
    ordered = True
    for condition in conditions:
        rank = _SEVERITY_RANK[condition.severity]
        previous = last_rank.get(condition.name)
        if previous is not None and rank > previous:
            LOGGER.warning(
                "metric %s declares a %s condition for %s after a less severe one; "
                "it can only match values the earlier tier misses",
                metric_name,
                condition.severity.value,
                condition.name,
            )
            ordered = False
        last_rank[condition.name] = rank
    return ordered
