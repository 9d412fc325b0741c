from __future__ import annotations

from typing import Any, Iterable, Sequence

DEFAULT_PERCENTILES: tuple[int, ...] = (0, 10, 50, 90, 100)


def calculate_percentiles(
    values: Iterable[Any],
    *percentiles: int,
    zero: Any = 0,
) -> dict[int, Any]:
    """Nearest-rank percentiles over ``values``.

    The input is not modified. For an empty input every requested percentile
    maps to ``zero`` (pass ``timedelta(0)`` for durations).
    """
    ordered = sorted(values)
    count = len(ordered)
    result: dict[int, Any] = {}
    for percentile in percentiles:
        if percentile in result:
            continue
        if not 0 <= percentile <= 100:
            raise ValueError(f"percentile must be within [0, 100], got {percentile}")
        if count == 0:
            result[percentile] = zero
            continue
        # ceil(p * n / 100) - 1 in integers
        index = -(-percentile * count // 100) - 1
        result[percentile] = ordered[min(max(index, 0), count - 1)]
    return result


def format_percentiles(values: Sequence[Any], unit: str = "") -> str:
    """Render ``min, p10, p50, p90, max`` as ``min=1, p10=2, ...``."""
    labels = ("min", "p10", "p50", "p90", "max")
    if len(values) != len(labels):
        raise ValueError(f"expected {len(labels)} values, got {len(values)}")
    return ", ".join(f"{label}={_format_value(value)}{unit}" for label, value in zip(labels, values))


def _format_value(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:.3f}"
    return str(value)
