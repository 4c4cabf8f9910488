"""Timer sources for the persistence scheduler.

The scheduler only needs ``call_later`` and a clock. In the application the
asyncio event loop provides both; tests drive a virtual clock instead so
debounce and periodic behaviour can be checked without real delays.
"""

import asyncio
import heapq
import itertools
import time
from typing import Callable, Optional, Protocol, runtime_checkable


@runtime_checkable
class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


@runtime_checkable
class TimerSource(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        ...

    def time(self) -> float:
        """Current wall-clock time in seconds since the epoch."""
        ...


class AsyncioTimerSource:
    """Schedules callbacks on the running asyncio loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)

    def time(self) -> float:
        return time.time()


class _ManualTimer:
    __slots__ = ("deadline", "callback", "cancelled")

    def __init__(self, deadline: float, callback: Callable[[], None]):
        self.deadline = deadline
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualTimerSource:
    """Virtual clock that fires callbacks only when advanced explicitly."""

    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: list[tuple[float, int, _ManualTimer]] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> _ManualTimer:
        timer = _ManualTimer(self._now + max(delay, 0.0), callback)
        heapq.heappush(self._queue, (timer.deadline, next(self._seq), timer))
        return timer

    def time(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        """Number of timers armed and not cancelled."""
        return sum(1 for _, _, t in self._queue if not t.cancelled)

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing every timer that comes due.

        Timers armed by a callback fire too if their deadline falls inside
        the window. Returns how many callbacks ran.
        """
        target = self._now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            deadline, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self._now = deadline
            fired += 1
            timer.callback()
        self._now = target
        return fired
