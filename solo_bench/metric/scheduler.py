from __future__ import annotations

import logging
import math
import threading
import time
from typing import Callable

LOGGER = logging.getLogger("solo_bench.metric.scheduler")


class IntervalScheduler:
    """Run ``probe`` once per ``interval`` seconds until the stop event is set.

    The first tick fires one interval after :meth:`run` starts. If a probe
    overruns, the ticks it covered are dropped rather than fired back to back.
    """

    def __init__(self, interval: float, probe: Callable[[], None], name: str = "") -> None:
        if interval <= 0:
            raise ValueError("interval must be > 0")
        self._interval = interval
        self._probe = probe
        self._name = name

    @property
    def interval(self) -> float:
        return self._interval

    def run(self, stop_event: threading.Event) -> int:
        ticks = 0
        next_tick = time.monotonic() + self._interval
        while not stop_event.wait(max(next_tick - time.monotonic(), 0.0)):
            try:
                self._probe()
            except Exception:  # noqa: BLE001
                LOGGER.exception("probe for %s failed", self._name or "<unnamed>")
            ticks += 1
            next_tick += self._interval
            now = time.monotonic()
            if next_tick <= now:
                missed = math.floor((now - next_tick) / self._interval) + 1
                LOGGER.debug("%s skipped %d tick(s) after a slow probe", self._name, missed)
                next_tick += missed * self._interval
        return ticks
