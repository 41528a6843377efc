"""Poll cycle engine.

``Events`` polls the injected feeds on a fixed interval while enabled,
runs every record through the identity trackers and publishes what is
new to the dispatcher. Three sub-routines run on each tick, in order:

1. Convective watches: tornado and severe thunderstorm watches plus the
   SPC watch boxes.
2. Mesoscale discussions.
3. NWS warnings.

A sub-routine runs only if its subscription has observers. Its fetch
stage is bounded by ``Settings.fetch_timeout``; a failure or timeout
is logged and the sub-routine contributes nothing to that tick. Ticks
are serialized, so two admission passes never interleave.

Example:
    >>> from stormspine.adapter import MesoscaleSource, WarningSource, WatchSource
    >>> from stormspine.events import Events
    >>>
    >>> events = Events(WatchSource(), MesoscaleSource(), WarningSource())
    >>>
    >>> @events.on_warning_issued
    ... async def announce(warning, transition):
    ...     print(warning.name, transition.value)
    >>>
    >>> events.enable()
    >>> ...
    >>> await events.close()
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from datetime import datetime
from enum import Enum
from typing import Any, TypeVar

from stormspine.core.clock import Clock, utc_now
from stormspine.core.config import Settings, get_settings
from stormspine.events.classify import classify_transition
from stormspine.events.dispatch import Dispatcher, Observer
from stormspine.events.tracker import MesoscaleTracker, WarningTracker, WatchBoxTracker, WatchTracker
from stormspine.models.watch import Watch, WatchKind, merge_watch_fragments
from stormspine.protocols.sources import MesoscaleFeed, WarningFeed, WatchFeed
from stormspine.scheduler.timer import PeriodicTimer

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EngineState(str, Enum):
    """Engine lifecycle state.

    Example:
        >>> [s.value for s in EngineState]
        ['stopped', 'disabled', 'enabled']
    """

    STOPPED = "stopped"
    DISABLED = "disabled"
    ENABLED = "enabled"


class Events:
    """Polls watch, mesoscale and warning feeds and announces new records.

    Tracker state survives :meth:`disable` and :meth:`close`; only new
    records issued after the engine was first enabled are announced.

    Attributes:
        dispatcher: The three subscription points.
        watch_tracker: Seen-set for watch numbers.
        watch_box_tracker: Seen-set for watch box numbers.
        mesoscale_tracker: Seen-set for discussion numbers.
        warning_tracker: Seen-set for alert ids.
    """

    def __init__(
        self,
        watch_feed: WatchFeed | None = None,
        mesoscale_feed: MesoscaleFeed | None = None,
        warning_feed: WarningFeed | None = None,
        *,
        settings: Settings | None = None,
        dispatcher: Dispatcher | None = None,
        clock: Clock | None = None,
    ) -> None:
        """Initialize a stopped engine.

        Args:
            watch_feed: Source of watches and watch boxes.
            mesoscale_feed: Source of mesoscale discussions.
            warning_feed: Source of NWS warnings.
            settings: Poll interval, timeouts and expiry windows.
            dispatcher: Subscription points; a fresh one by default.
            clock: Returns the current UTC time.
        """
        self.settings = settings or get_settings()
        self.watch_feed = watch_feed
        self.mesoscale_feed = mesoscale_feed
        self.warning_feed = warning_feed
        self.dispatcher = dispatcher or Dispatcher(observer_timeout=self.settings.observer_timeout)
        self._clock = clock or utc_now

        self.watch_tracker = WatchTracker(self.settings.watch_expiry)
        self.watch_box_tracker = WatchBoxTracker()
        self.mesoscale_tracker = MesoscaleTracker()
        self.warning_tracker = WarningTracker(self.settings.statement_expiry)

        self._timer = PeriodicTimer(
            self.tick,
            self.settings.poll_interval,
            tick_on_start=self.settings.tick_on_start,
            name="events",
        )
        self._lock = asyncio.Lock()
        self._state = EngineState.STOPPED
        self._started_at: datetime | None = None
        self._tick_count = 0

    # =========================================================================
    # Lifecycle
    # =========================================================================

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def started_at(self) -> datetime | None:
        """When listening began; records sent at or before it are never announced."""
        return self._started_at

    @property
    def tick_count(self) -> int:
        return self._tick_count

    def enable(self) -> None:
        """Begin or resume polling. Idempotent.

        Raises:
            RuntimeError: If called without a running event loop.
        """
        if self._state is EngineState.ENABLED:
            return
        self._timer.start()
        if self._started_at is None:
            self._started_at = self._clock()
        self._state = EngineState.ENABLED
        logger.info("Events enabled (interval %.1fs)", self._timer.interval)

    def disable(self) -> None:
        """Suspend polling, keeping every seen-set. Idempotent."""
        if self._state is not EngineState.ENABLED:
            return
        self._timer.pause()
        self._state = EngineState.DISABLED
        logger.info("Events disabled")

    async def close(self) -> None:
        """Stop the poll loop. A later :meth:`enable` starts it again."""
        await self._timer.stop()
        if self._state is not EngineState.STOPPED:
            logger.info("Events stopped after %d ticks", self._tick_count)
        self._state = EngineState.STOPPED

    async def __aenter__(self) -> Events:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    # =========================================================================
    # Subscriptions
    # =========================================================================

    def on_watch_issued(self, observer: Observer) -> Observer:
        """Subscribe ``observer(watches, watch_boxes)``; usable as a decorator."""
        return self.dispatcher.watches.subscribe(observer)

    def on_mesoscale_discussion_issued(self, observer: Observer) -> Observer:
        """Subscribe ``observer(discussions)``; usable as a decorator."""
        return self.dispatcher.mesoscale.subscribe(observer)

    def on_warning_issued(self, observer: Observer) -> Observer:
        """Subscribe ``observer(warning, transition)``; usable as a decorator."""
        return self.dispatcher.warnings.subscribe(observer)

    # =========================================================================
    # Poll cycle
    # =========================================================================

    async def tick(self) -> None:
        """Run one poll cycle.

        Called by the timer while enabled; can also be awaited directly.
        Concurrent calls run one after another.
        """
        async with self._lock:
            now = self._clock()
            if self._started_at is None:
                self._started_at = now
            self._tick_count += 1
            logger.debug("Tick %d at %s", self._tick_count, now.isoformat())

            await self._guarded("watches", self._reconcile_watches(self._started_at, now))
            await self._guarded("mesoscale", self._reconcile_mesoscale(self._started_at, now))
            await self._guarded("warnings", self._reconcile_warnings(self._started_at, now))

    async def _guarded(self, name: str, reconcile: Awaitable[None]) -> None:
        try:
            await reconcile
        except Exception as e:
            logger.warning("%s reconciliation failed: %s", name, str(e) or type(e).__name__)
            logger.debug("%s reconciliation traceback", name, exc_info=True)

    async def _bounded(self, fetch: Awaitable[T]) -> T:
        return await asyncio.wait_for(fetch, timeout=self.settings.fetch_timeout)

    async def _reconcile_watches(self, started_at: datetime, now: datetime) -> None:
        feed = self.watch_feed
        if feed is None or not self.dispatcher.watches.has_observers:
            return

        tornado, severe, boxes = await self._bounded(
            asyncio.gather(
                _or_empty("tornado watches", feed.fetch_active_watches(WatchKind.TORNADO)),
                _or_empty("severe thunderstorm watches", feed.fetch_active_watches(WatchKind.SEVERE_THUNDERSTORM)),
                _or_empty("watch boxes", feed.fetch_active_watch_boxes()),
            )
        )

        new_tornado = self.watch_tracker.admit_batch(merge_watch_fragments(tornado), started_at, now)
        new_severe = self.watch_tracker.admit_batch(merge_watch_fragments(severe), started_at, now)
        new_boxes = self.watch_box_tracker.admit_batch(boxes, started_at, now)
        self.watch_tracker.sweep(now)

        for batch in (new_severe, new_tornado):
            if not batch:
                continue
            _log_watches(batch)
            await self.dispatcher.watches.emit(batch, list(new_boxes))

    async def _reconcile_mesoscale(self, started_at: datetime, now: datetime) -> None:
        feed = self.mesoscale_feed
        if feed is None or not self.dispatcher.mesoscale.has_observers:
            return

        discussions = await self._bounded(feed.fetch_active_mesoscale_discussions())
        new = self.mesoscale_tracker.admit_batch(discussions, started_at, now)
        if not new:
            return
        for discussion in new:
            logger.info("Mesoscale discussion %d issued", discussion.number)
        await self.dispatcher.mesoscale.emit(new)

    async def _reconcile_warnings(self, started_at: datetime, now: datetime) -> None:
        feed = self.warning_feed
        if feed is None or not self.dispatcher.warnings.has_observers:
            return

        warnings = await self._bounded(feed.fetch_active_warnings(self.settings.warning_events))
        for warning in warnings:
            admission = self.warning_tracker.admit(warning, started_at, now)
            if admission.evicted:
                logger.debug("Aged out statement %s", warning.id)
            if not admission.is_new:
                continue
            transition = classify_transition(warning)
            logger.info("New alert %s has been issued (%s)", warning.name, transition.value)
            await self.dispatcher.warnings.emit(warning, transition)


async def _or_empty(label: str, fetch: Awaitable[list[T]]) -> list[T]:
    """Await one fetch, degrading a failure to an empty result."""
    try:
        return await fetch
    except Exception as e:
        logger.warning("Fetching %s failed: %s", label, str(e) or type(e).__name__)
        return []


def _log_watches(watches: list[Watch]) -> None:
    for watch in watches:
        logger.info("%s has been issued", watch.name)


__all__ = ["EngineState", "Events"]
