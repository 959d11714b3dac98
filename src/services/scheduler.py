"""
Delayed callbacks used to pace the game for a human observer.

The delays have no meaning for the rules. What matters is that every scheduled call hands back a
handle that can be cancelled, so a restart can drop work that was scheduled for the previous game.

Blocking work (stats store writes, with their retry waits) goes through `run_in_background`, so it never
holds up the thread the callbacks run on.
"""

import asyncio
import heapq
import itertools
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol

Callback = Callable[[], None]


class ScheduledHandle(Protocol):
    def cancel(self) -> None: ...

    def cancelled(self) -> bool: ...


class Scheduler(Protocol):
    """Run `callback` once, after `delay` seconds."""

    def call_later(self, delay: float, callback: Callback) -> ScheduledHandle: ...

    def run_in_background(self, job: Callback) -> object: ...


class AsyncioScheduler:
    """
    Schedules on an asyncio event loop. The returned asyncio.TimerHandle already has cancel()/cancelled().

    Background jobs run on a single worker thread, so stats writes happen one at a time and in order.
    """

    def __init__(
        self,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        executor: Optional[Executor] = None,
    ) -> None:
        self._loop = loop
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="knucklebones-io"
        )

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def call_later(self, delay: float, callback: Callback) -> asyncio.TimerHandle:
        return self.loop.call_later(delay, callback)

    def run_in_background(self, job: Callback) -> asyncio.Future:
        return self.loop.run_in_executor(self._executor, job)

    def close(self) -> None:
        self._executor.shutdown(wait=True)


@dataclass(order=True)
class ManualHandle:
    due: float
    seq: int
    callback: Callback = field(compare=False)
    _cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler:
    """
    Virtual clock: nothing runs until the clock is advanced.
    ----
    Used for tests and headless play, where real waiting is pointless.
    Callbacks scheduled while advancing run in the same advance() call if they fall due within it.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[ManualHandle] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Callback) -> ManualHandle:
        handle = ManualHandle(self.now + delay, next(self._counter), callback)
        heapq.heappush(self._queue, handle)
        return handle

    def run_in_background(self, job: Callback) -> None:
        # no event loop to keep responsive: run inline
        job()

    @property
    def pending(self) -> int:
        return sum(1 for handle in self._queue if not handle.cancelled())

    def advance(self, seconds: float) -> int:
        """Move the clock forward and run everything that falls due. Returns how many callbacks ran."""
        deadline = self.now + seconds
        ran = 0
        while self._queue and self._queue[0].due <= deadline:
            handle = heapq.heappop(self._queue)
            self.now = handle.due
            if handle.cancelled():
                continue
            handle.callback()
            ran += 1
        self.now = deadline
        return ran

    def run_pending(self, max_calls: int = 10_000) -> int:
        """Keep jumping to the next due callback until nothing is left (or max_calls is hit)."""
        ran = 0
        while self._queue and ran < max_calls:
            handle = heapq.heappop(self._queue)
            self.now = max(self.now, handle.due)
            if handle.cancelled():
                continue
            handle.callback()
            ran += 1
        return ran
