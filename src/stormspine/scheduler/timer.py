"""Periodic timer that drives the events poll loop.

The timer runs its callback on a background asyncio task. The callback
is awaited before the next interval starts, so ticks never overlap.

Example:
    >>> from stormspine.scheduler import PeriodicTimer
    >>>
    >>> async def poll() -> None:
    ...     print("tick")
    >>>
    >>> timer = PeriodicTimer(poll, interval=10.0)
    >>> timer.start()      # ticks immediately, then every 10 s
    >>> timer.pause()      # suspends ticking
    >>> timer.resume()
    >>> await timer.stop()
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import Enum

logger = logging.getLogger(__name__)


class TimerState(str, Enum):
    """Timer lifecycle state.

    Example:
        >>> [s.value for s in TimerState]
        ['stopped', 'running', 'paused']
    """

    STOPPED = "stopped"
    RUNNING = "running"
    PAUSED = "paused"


class PeriodicTimer:
    """Runs an async callback on a fixed interval.

    The interval is measured from the start of one tick to the start of
    the next; a tick that overruns the interval delays the following one
    instead of overlapping it. A callback failure is logged and does not
    stop the timer.

    Attributes:
        interval: Seconds between tick starts.
        tick_on_start: Whether the first tick runs as soon as the timer starts.
    """

    def __init__(
        self,
        callback: Callable[[], Awaitable[None]],
        interval: float,
        *,
        tick_on_start: bool = True,
        name: str = "timer",
    ) -> None:
        """Create a stopped timer.

        Raises:
            ValueError: If interval is not positive.
        """
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._callback = callback
        self.interval = interval
        self.tick_on_start = tick_on_start
        self._name = name
        self._state = TimerState.STOPPED
        self._task: asyncio.Task[None] | None = None
        self._resumed = asyncio.Event()
        self._tick_count = 0

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def tick_count(self) -> int:
        """Ticks run since the timer was last started."""
        return self._tick_count

    def start(self) -> None:
        """Start ticking on the running event loop.

        Idempotent while running; resumes a paused timer.

        Raises:
            RuntimeError: If called without a running event loop.
        """
        if self._state is TimerState.PAUSED:
            self.resume()
            return
        if self._state is TimerState.RUNNING:
            return
        loop = asyncio.get_running_loop()
        self._tick_count = 0
        self._resumed.set()
        self._task = loop.create_task(self._run(), name=f"{self._name}-loop")
        self._state = TimerState.RUNNING
        logger.debug("%s started (interval %.1fs)", self._name, self.interval)

    def pause(self) -> None:
        """Suspend ticking. A tick already in progress runs to completion."""
        if self._state is TimerState.RUNNING:
            self._resumed.clear()
            self._state = TimerState.PAUSED
            logger.debug("%s paused", self._name)

    def resume(self) -> None:
        """Resume a paused timer; the next tick runs once the current interval ends."""
        if self._state is TimerState.PAUSED:
            self._resumed.set()
            self._state = TimerState.RUNNING
            logger.debug("%s resumed", self._name)

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish. Idempotent."""
        task, self._task = self._task, None
        self._state = TimerState.STOPPED
        self._resumed.clear()
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug("%s stopped after %d ticks", self._name, self._tick_count)

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        if not self.tick_on_start:
            await asyncio.sleep(self.interval)
        while True:
            await self._resumed.wait()
            started = loop.time()
            await self._tick()
            elapsed = loop.time() - started
            await asyncio.sleep(max(0.0, self.interval - elapsed))

    async def _tick(self) -> None:
        self._tick_count += 1
        try:
            await self._callback()
        except Exception:
            logger.exception("%s tick %d failed", self._name, self._tick_count)
