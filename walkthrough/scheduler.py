"""Keyed timers for the stage simulations.

One pending timer per key (``"water-rise"``, ``"monitor-fail"``, ...).
Arming a key replaces whatever was pending under it. The clock is anything
with ``call_later(delay, callback)`` returning a handle with ``cancel()``:
the running asyncio loop in production, ``ManualClock`` in tests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Protocol

logger = logging.getLogger(__name__)

WATER_RISE = "water-rise"
MONITOR_FAIL = "monitor-fail"
MONITOR_RECOVER = "monitor-recover"


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Clock(Protocol):
    def time(self) -> float: ...

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...


@dataclass
class _Timer:
    key: str
    callback: Callable[[], None]
    interval: float | None = None  # seconds; set for repeating timers
    handle: TimerHandle | None = None


class TimerScheduler:
    """Own zero or one pending timer per simulation key."""

    def __init__(self, clock: Clock, time_unit: float = 1.0):
        if time_unit <= 0:
            raise ValueError(f"time_unit must be positive, got {time_unit}")
        self._clock = clock
        self._unit = time_unit
        self._timers: dict[str, _Timer] = {}

    @property
    def clock(self) -> Clock:
        return self._clock

    def arm(self, key: str, delay: float, callback: Callable[[], None]) -> None:
        """Run ``callback`` once after ``delay`` time units."""
        self.cancel(key)
        timer = _Timer(key=key, callback=callback)
        timer.handle = self._clock.call_later(delay * self._unit, self._fire, timer)
        self._timers[key] = timer
        logger.debug("Armed %s in %.2f units", key, delay)

    def arm_repeating(self, key: str, interval: float, callback: Callable[[], None]) -> None:
        """Run ``callback`` every ``interval`` time units until cancelled."""
        self.cancel(key)
        timer = _Timer(key=key, callback=callback, interval=interval * self._unit)
        timer.handle = self._clock.call_later(timer.interval, self._fire, timer)
        self._timers[key] = timer
        logger.debug("Armed repeating %s every %.2f units", key, interval)

    def cancel(self, key: str) -> bool:
        timer = self._timers.pop(key, None)
        if timer is None:
            return False
        if timer.handle is not None:
            timer.handle.cancel()
        logger.debug("Cancelled %s", key)
        return True

    def cancel_all(self) -> int:
        keys = list(self._timers)
        for key in keys:
            self.cancel(key)
        return len(keys)

    def is_armed(self, key: str) -> bool:
        return key in self._timers

    def pending(self) -> tuple[str, ...]:
        return tuple(self._timers)

    def _fire(self, timer: _Timer) -> None:
        # A superseded or cancelled timer must never run, even if its
        # handle slipped past cancel().
        if self._timers.get(timer.key) is not timer:
            return

        if timer.interval is None:
            del self._timers[timer.key]
        else:
            timer.handle = self._clock.call_later(timer.interval, self._fire, timer)

        timer.callback()
