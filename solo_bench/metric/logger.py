from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

from .types import Group

METRICS_LOGGER_NAME = "solo_bench.metrics"

_logger = logging.getLogger(METRICS_LOGGER_NAME)


def configure_metric_log(log_path: Path) -> logging.Logger:
    """Mirror metric samples and probe errors into ``log_path``."""
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(log_path, mode="w", encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    handler.set_name("metric-file")

    for existing in list(_logger.handlers):
        if existing.get_name() == "metric-file":
            existing.close()
            _logger.removeHandler(existing)
    _logger.addHandler(handler)
    return _logger


def close_metric_log() -> None:
    for handler in list(_logger.handlers):
        handler.close()
        _logger.removeHandler(handler)


def write_metric(group: Group, metric_name: str, values: Mapping[str, Any]) -> None:
    rendered = ", ".join(f"{key}={value}" for key, value in values.items())
    _logger.info("[%s/%s] %s", group.value, metric_name, rendered or "<empty>")


def write_error(group: Group, metric_name: str, err: BaseException | str | None) -> None:
    _logger.error("[%s/%s] measurement failed: %s", group.value, metric_name, err)
