"""
Timers - Cancellable deferred callbacks owned by an engine instance.

Two schedulers:
- ManualScheduler: virtual clock, advanced explicitly (tests, CLI)
- AsyncioScheduler: wraps loop.call_later on the running event loop (API)
"""

from __future__ import annotations
import asyncio
import heapq
import itertools
import logging
from abc import ABC, abstractmethod
from typing import Callable

logger = logging.getLogger(__name__)


class TimerHandle(ABC):
    """Handle for a scheduled callback."""

    @abstractmethod
    def cancel(self) -> None:
        pass

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        pass


class Scheduler(ABC):
    """Schedules callbacks to run after a delay in seconds."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        pass


class _ManualHandle(TimerHandle):
    def __init__(self, when: float, callback: Callable[[], None]):
        self.when = when
        self.callback = callback
        self._cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler(Scheduler):
    """
    Deterministic scheduler with its own virtual clock.

    Usage:
        scheduler = ManualScheduler()
        engine = MemoryMatchEngine(..., scheduler=scheduler, clock=scheduler.now)
        scheduler.advance(1.0)  # fires the mismatch reversion
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: list[tuple[float, int, _ManualHandle]] = []
        self._counter = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = _ManualHandle(self._now + max(0.0, delay), callback)
        heapq.heappush(self._queue, (handle.when, next(self._counter), handle))
        return handle

    @property
    def pending(self) -> int:
        """Number of scheduled callbacks that are neither fired nor cancelled."""
        return sum(1 for _, _, h in self._queue if not h.cancelled and not h.fired)

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing due callbacks in order. Returns fired count."""
        target = self._now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            when, _, handle = heapq.heappop(self._queue)
            self._now = max(self._now, when)
            if handle.cancelled:
                continue
            handle.fired = True
            handle.callback()
            fired += 1
        self._now = target
        return fired

    def run_pending(self) -> int:
        """Fire everything still scheduled, advancing the clock as needed."""
        if not self._queue:
            return 0
        latest = max(when for when, _, _ in self._queue)
        return self.advance(max(0.0, latest - self._now))


class _AsyncioHandle(TimerHandle):
    def __init__(self, handle: asyncio.TimerHandle):
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._handle.cancelled()


class AsyncioScheduler(Scheduler):
    """
    Scheduler backed by the asyncio event loop.

    Must be used from code running on the loop (e.g. async FastAPI
    endpoints); the loop is looked up at call time.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return _AsyncioHandle(loop.call_later(delay, callback))
