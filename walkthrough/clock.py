"""Simulated time for driving the scheduler without a running event loop.

``ManualClock`` exposes the two event-loop methods the scheduler relies on,
``time()`` and ``call_later()``, so it can stand in for an asyncio loop.
Time only moves when ``advance`` is called. Callbacks due at the same
instant run in the order they were scheduled.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)


class ManualHandle:
    """Cancellable handle returned by ManualClock.call_later."""

    def __init__(self, when: float, callback: Callable[..., Any], args: tuple):
        self._when = when
        self._callback = callback
        self._args = args
        self._cancelled = False

    def when(self) -> float:
        return self._when

    def cancel(self) -> None:
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled

    def _run(self) -> None:
        self._callback(*self._args)


class ManualClock:
    def __init__(self, start: float = 0.0):
        self._now = float(start)
        self._queue: list[tuple[float, int, ManualHandle]] = []
        self._seq = itertools.count()

    def time(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> ManualHandle:
        when = self._now + max(0.0, float(delay))
        handle = ManualHandle(when, callback, args)
        heapq.heappush(self._queue, (when, next(self._seq), handle))
        return handle

    @property
    def pending(self) -> int:
        """Number of scheduled, not yet cancelled callbacks."""
        return sum(1 for _, _, handle in self._queue if not handle.cancelled())

    def advance(self, amount: float) -> int:
        """Move time forward by ``amount``, running every callback that falls due.

        Callbacks scheduled while advancing also run if they fall inside the
        window. Returns how many callbacks ran.
        """
        if amount < 0:
            raise ValueError("cannot move time backwards")
        target = self._now + amount
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            when, _, handle = heapq.heappop(self._queue)
            if handle.cancelled():
                continue
            self._now = when
            handle._run()
            ran += 1
        self._now = target
        if ran:
            logger.debug("Advanced clock to %.2f, ran %d callback(s)", target, ran)
        return ran
