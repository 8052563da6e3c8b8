"""Clock and timer sources for the game loop.

All times are in milliseconds. ``AsyncioScheduler`` runs timers on the
asyncio event loop the server lives in; ``ManualScheduler`` only moves when
``advance`` is called, which makes the game loop deterministic in tests.
"""

import asyncio
import heapq
import itertools
from typing import Callable, Optional, Protocol


class Timer(Protocol):
    cancelled: bool

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def now(self) -> float: ...

    def call_every(self, interval: float, callback: Callable[[], None]) -> Timer: ...

    def call_later(self, delay: float, callback: Callable[[], None]) -> Timer: ...


class ManualTimer:
    def __init__(self, due: float, callback: Callable[[], None], interval: Optional[float] = None):
        self.due = due
        self.callback = callback
        self.interval = interval
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: list = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_every(self, interval, callback):
        if interval <= 0:
            raise ValueError("interval must be positive")
        timer = ManualTimer(self._now + interval, callback, interval)
        self._push(timer)
        return timer

    def call_later(self, delay, callback):
        timer = ManualTimer(self._now + max(0, delay), callback)
        self._push(timer)
        return timer

    @property
    def pending(self) -> int:
        return sum(1 for _, _, t in self._queue if not t.cancelled)

    def advance(self, ms: float):
        """Move the clock forward, firing every timer that falls due on the way."""
        target = self._now + ms
        while self._queue and self._queue[0][0] <= target:
            due, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self._now = due
            timer.callback()
            if timer.interval is not None and not timer.cancelled:
                timer.due = due + timer.interval
                self._push(timer)
        self._now = target

    def _push(self, timer: ManualTimer):
        heapq.heappush(self._queue, (timer.due, next(self._seq), timer))


class AsyncioTimer:
    def __init__(self, loop: asyncio.AbstractEventLoop, delay: float,
                 callback: Callable[[], None], interval: Optional[float] = None):
        self._loop = loop
        self._callback = callback
        self._interval = interval
        self.cancelled = False
        self._handle = loop.call_later(delay / 1000, self._fire)

    def _fire(self):
        if self.cancelled:
            return
        if self._interval is not None:
            self._handle = self._loop.call_later(self._interval / 1000, self._fire)
        self._callback()

    def cancel(self):
        self.cancelled = True
        self._handle.cancel()


class AsyncioScheduler:
    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.loop = loop or asyncio.get_running_loop()

    def now(self) -> float:
        return self.loop.time() * 1000

    def call_every(self, interval, callback):
        if interval <= 0:
            raise ValueError("interval must be positive")
        return AsyncioTimer(self.loop, interval, callback, interval)

    def call_later(self, delay, callback):
        return AsyncioTimer(self.loop, max(0, delay), callback)
