"""Notification dispatch.

Three independent subscription points, one per notification kind:

- ``watches``: ``observer(watches, watch_boxes)`` with the new watches of
  one kind from a single poll plus the new watch boxes of that poll.
- ``mesoscale``: ``observer(discussions)`` with the new mesoscale
  discussions of a poll.
- ``warnings``: ``observer(warning, transition)`` once per new warning.

Observers may be plain callables or coroutine functions. They run in
subscription order and each one finishes (or is awaited) before the
next is called. A failing observer is logged and skipped.

Example:
    >>> from stormspine.events.dispatch import Dispatcher
    >>> dispatcher = Dispatcher()
    >>> received = []
    >>> _ = dispatcher.warnings.subscribe(lambda w, t: received.append((w, t)))
    >>> dispatcher.warnings.has_observers
    True
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

Observer = Callable[..., Any]

DEFAULT_OBSERVER_TIMEOUT = 30.0


class Subscription:
    """Observers registered for one notification kind."""

    def __init__(self, name: str, timeout: float = DEFAULT_OBSERVER_TIMEOUT) -> None:
        """Initialize an empty subscription.

        Args:
            name: Notification kind, used in log messages.
            timeout: Seconds an asynchronous observer may run before it is
                abandoned for this notification.
        """
        self.name = name
        self.timeout = timeout
        self._observers: list[Observer] = []

    def __len__(self) -> int:
        return len(self._observers)

    @property
    def has_observers(self) -> bool:
        return bool(self._observers)

    def subscribe(self, observer: Observer) -> Observer:
        """Register an observer and return it, so this works as a decorator.

        Example:
            >>> sub = Subscription("mesoscale")
            >>> @sub.subscribe
            ... def on_discussions(discussions):
            ...     pass
            >>> len(sub)
            1
        """
        if not callable(observer):
            raise TypeError(f"observer must be callable, got {type(observer).__name__}")
        self._observers.append(observer)
        return observer

    def unsubscribe(self, observer: Observer) -> bool:
        """Remove an observer; returns whether it was registered."""
        try:
            self._observers.remove(observer)
        except ValueError:
            return False
        return True

    def clear(self) -> None:
        self._observers.clear()

    async def emit(self, *args: Any) -> int:
        """Deliver one notification to every observer.

        Returns:
            Number of observers that completed without error.
        """
        delivered = 0
        for observer in list(self._observers):
            try:
                result = observer(*args)
                if inspect.isawaitable(result):
                    await asyncio.wait_for(result, timeout=self.timeout)
            except asyncio.TimeoutError:
                logger.error("%s observer %r timed out after %.1fs", self.name, observer, self.timeout)
            except Exception:
                logger.exception("%s observer %r failed", self.name, observer)
            else:
                delivered += 1
        return delivered


class Dispatcher:
    """The three subscription points the events engine publishes to."""

    def __init__(self, observer_timeout: float = DEFAULT_OBSERVER_TIMEOUT) -> None:
        self.watches = Subscription("watches", observer_timeout)
        self.mesoscale = Subscription("mesoscale", observer_timeout)
        self.warnings = Subscription("warnings", observer_timeout)

    def __iter__(self):
        return iter((self.watches, self.mesoscale, self.warnings))

    def clear(self) -> None:
        """Remove every observer from every subscription."""
        for subscription in self:
            subscription.clear()
