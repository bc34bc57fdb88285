"""Timer sources for the typewriter state machine.

The state machine only needs three things from its environment: a one-shot
timer, a periodic timer and a "run this after the next refresh" deferral.
The method names follow Textual's widget API so a widget can be adapted
with a thin wrapper (see textual_app.TextualClock).

Every method returns a handle whose ``stop()`` cancels it synchronously; a
stopped handle never fires.
"""

import asyncio
import heapq
import itertools
from abc import ABC, abstractmethod
from typing import Callable, Optional

from .constants import TypewriterConstants

Callback = Callable[[], None]


class Timer(ABC):
    @abstractmethod
    def stop(self) -> None:
        """Cancel the timer. Safe to call more than once."""


class Clock(ABC):
    @abstractmethod
    def set_timer(self, delay: float, callback: Callback) -> Timer:
        """Call ``callback`` once after ``delay`` seconds."""

    @abstractmethod
    def set_interval(self, interval: float, callback: Callback) -> Timer:
        """Call ``callback`` every ``interval`` seconds until stopped."""

    @abstractmethod
    def call_after_refresh(self, callback: Callback) -> Timer:
        """Call ``callback`` once the current state has been rendered."""


class _ManualTimer(Timer):
    def __init__(self, callback: Callback, interval: Optional[float]):
        self.callback = callback
        self.interval = interval
        self.active = True

    def stop(self) -> None:
        self.active = False


class ManualClock(Clock):
    """Deterministic clock driven by virtual time.

    Nothing happens until advance() or run_until_idle() is called. A
    refresh deferral runs at the current virtual time, after every callback
    that was already due.
    """

    def __init__(self):
        self.now = 0.0
        self._queue: list[tuple[float, int, _ManualTimer]] = []
        self._sequence = itertools.count()

    def _schedule(self, due: float, timer: _ManualTimer) -> _ManualTimer:
        heapq.heappush(self._queue, (due, next(self._sequence), timer))
        return timer

    def set_timer(self, delay: float, callback: Callback) -> Timer:
        return self._schedule(self.now + delay, _ManualTimer(callback, None))

    def set_interval(self, interval: float, callback: Callback) -> Timer:
        return self._schedule(self.now + interval, _ManualTimer(callback, interval))

    def call_after_refresh(self, callback: Callback) -> Timer:
        return self._schedule(self.now, _ManualTimer(callback, None))

    @property
    def pending(self) -> int:
        """Number of timers that may still fire."""
        return sum(1 for _, _, timer in self._queue if timer.active)

    def _run_next(self, until: float) -> bool:
        while self._queue:
            due, _, timer = self._queue[0]
            if due > until:
                return False
            heapq.heappop(self._queue)
            if not timer.active:
                continue
            self.now = due
            if timer.interval is None:
                timer.active = False
            timer.callback()
            if timer.interval is not None and timer.active:
                self._schedule(due + timer.interval, timer)
            return True
        return False

    def advance(self, seconds: float) -> None:
        """Move virtual time forward, firing every timer that comes due."""
        target = self.now + seconds
        while self._run_next(target):
            pass
        self.now = target

    def run_until_idle(self, limit: float = TypewriterConstants.HEADLESS_TIME_LIMIT,
                       max_callbacks: int = 1_000_000) -> int:
        """Fire timers until none are pending or ``limit`` seconds have passed.

        Returns:
            Number of callbacks that ran.
        """
        deadline = self.now + limit
        ran = 0
        while ran < max_callbacks and self._run_next(deadline):
            ran += 1
        return ran


class _AsyncioTimer(Timer):
    def __init__(self, handle: asyncio.Handle):
        self._handle = handle

    def stop(self) -> None:
        self._handle.cancel()


class _AsyncioInterval(Timer):
    def __init__(self, loop: asyncio.AbstractEventLoop, interval: float, callback: Callback):
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._stopped = False
        self._handle = loop.call_later(interval, self._fire)

    def _fire(self):
        if self._stopped:
            return
        self._callback()
        if not self._stopped:
            self._handle = self._loop.call_later(self._interval, self._fire)

    def stop(self) -> None:
        self._stopped = True
        self._handle.cancel()


class AsyncioClock(Clock):
    """Clock backed by an asyncio event loop.

    The loop defaults to the running loop, looked up on first use.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def set_timer(self, delay: float, callback: Callback) -> Timer:
        return _AsyncioTimer(self.loop.call_later(delay, callback))

    def set_interval(self, interval: float, callback: Callback) -> Timer:
        return _AsyncioInterval(self.loop, interval, callback)

    def call_after_refresh(self, callback: Callback) -> Timer:
        return _AsyncioTimer(self.loop.call_soon(callback))
