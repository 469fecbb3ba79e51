"""Timer callback scheduling.

The engine never sleeps or loops on its own; it asks a ``Scheduler`` for
recurring ticks and one-shot delayed calls and keeps the returned ``Handle``
so it can cancel them.
"""

from __future__ import annotations

import asyncio
import itertools
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass


class Handle:
    """Cancellation handle for a scheduled callback."""

    def __init__(self):
        self._cancelled = False
        self._done = False
        self._timer: asyncio.TimerHandle | None = None

    @property
    def active(self) -> bool:
        """True while the callback may still fire."""
        return not (self._cancelled or self._done)

    def cancel(self) -> None:
        """Cancel the callback. Safe to call more than once."""
        self._cancelled = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _finish(self) -> None:
        self._done = True
        self._timer = None


class Scheduler(ABC):
    """Source of recurring and delayed callbacks."""

    @abstractmethod
    def schedule_every(self, interval: float, callback: Callable[[], None]) -> Handle:
        """Call *callback* every *interval* seconds until cancelled."""

    @abstractmethod
    def schedule_once(self, delay: float, callback: Callable[[], None]) -> Handle:
        """Call *callback* once after *delay* seconds unless cancelled."""


class AsyncioScheduler(Scheduler):
    """Scheduler backed by the running asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def schedule_every(self, interval: float, callback: Callable[[], None]) -> Handle:
        handle = Handle()

        def _run() -> None:
            if not handle.active:
                return
            # Re-arm before the callback so the callback can cancel it.
            handle._timer = self.loop.call_later(interval, _run)
            callback()

        handle._timer = self.loop.call_later(interval, _run)
        return handle

    def schedule_once(self, delay: float, callback: Callable[[], None]) -> Handle:
        handle = Handle()

        def _run() -> None:
            if not handle.active:
                return
            handle._finish()
            callback()

        handle._timer = self.loop.call_later(delay, _run)
        return handle


@dataclass
class _Job:
    due: float
    seq: int
    callback: Callable[[], None]
    handle: Handle
    interval: float | None = None


class ManualScheduler(Scheduler):
    """Deterministic scheduler driven by a virtual clock.

    Nothing fires until ``advance()`` moves the clock forward. Used by tests
    and by headless callers that drive the timer themselves.
    """

    def __init__(self, start: float = 0.0):
        self.now = start
        self._jobs: list[_Job] = []
        self._seq = itertools.count()

    def schedule_every(self, interval: float, callback: Callable[[], None]) -> Handle:
        if interval <= 0:
            raise ValueError("interval must be positive")
        handle = Handle()
        self._jobs.append(
            _Job(self.now + interval, next(self._seq), callback, handle, interval)
        )
        return handle

    def schedule_once(self, delay: float, callback: Callable[[], None]) -> Handle:
        handle = Handle()
        self._jobs.append(_Job(self.now + max(0.0, delay), next(self._seq), callback, handle))
        return handle

    @property
    def pending(self) -> int:
        """Number of callbacks that can still fire."""
        return sum(1 for job in self._jobs if job.handle.active)

    def _next_due(self, until: float) -> _Job | None:
        self._jobs = [job for job in self._jobs if job.handle.active]
        due = [job for job in self._jobs if job.due <= until]
        if not due:
            return None
        return min(due, key=lambda job: (job.due, job.seq))

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing every callback that comes due."""
        target = self.now + seconds
        while True:
            job = self._next_due(target)
            if job is None:
                break
            self.now = job.due
            if job.interval is not None:
                job.due += job.interval
            else:
                job.handle._finish()
            job.callback()
        self.now = target
