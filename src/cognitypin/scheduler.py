"""Cancellable timed callbacks on an injectable clock.

Nothing here runs on a background thread. Due callbacks fire when the owner
calls ``run_pending()``, so every callback runs on the caller's thread in
due-time order.
"""
import heapq
import itertools
import time
from typing import Callable, Optional

from loguru import logger


class ManualClock:
    """A clock that only moves when told to. Used by tests and replays."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TimerHandle:
    def __init__(self, when: float, callback: Callable[[], None], interval: Optional[float] = None):
        self.when = when
        self.callback = callback
        self.interval = interval
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def periodic(self) -> bool:
        return self.interval is not None


class Scheduler:
    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self._heap: list = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self.clock()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(self.now() + max(delay, 0.0), callback)
        self._push(handle)
        return handle

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        if interval <= 0:
            raise ValueError("interval must be positive")
        handle = TimerHandle(self.now() + interval, callback, interval=interval)
        self._push(handle)
        return handle

    def _push(self, handle: TimerHandle) -> None:
        heapq.heappush(self._heap, (handle.when, next(self._seq), handle))

    @property
    def pending(self) -> int:
        return sum(1 for _, _, h in self._heap if not h.cancelled)

    def run_pending(self) -> int:
        """Fire every callback that is due. Returns how many fired.

        A periodic task that missed several periods fires once and is
        rescheduled on its original cadence.
        """
        now = self.now()
        fired = 0
        while self._heap and self._heap[0][0] <= now:
            _, _, handle = heapq.heappop(self._heap)
            if handle.cancelled:
                continue
            fired += 1
            try:
                handle.callback()
            finally:
                if handle.periodic and not handle.cancelled:
                    next_when = handle.when + handle.interval
                    while next_when <= now:
                        next_when += handle.interval
                    handle.when = next_when
                    self._push(handle)
        if fired:
            logger.debug("Scheduler fired {} callback(s)", fired)
        return fired

    def advance(self, seconds: float) -> int:
        """Move a ManualClock forward and run whatever became due."""
        self.clock.advance(seconds)
        return self.run_pending()
