"""Identity and freshness tracking.

Each entity kind has its own seen-set keyed by that kind's identity:
watch number for watches and watch boxes, discussion number for
mesoscale discussions, alert id for warnings. A tracker decides whether
an incoming entity is a genuinely new occurrence worth announcing and
keeps the seen-set current so the next poll can decide the same.

Only entities whose authoritative time is strictly after ``started_at``
(the moment listening began) can be new. Older entities are absorbed
into the seen-set silently.

Example:
    >>> from datetime import datetime, timedelta, timezone
    >>> from stormspine.models.watch import Watch, WatchKind
    >>> start = datetime(2024, 5, 1, tzinfo=timezone.utc)
    >>> watch = Watch(number=100, kind=WatchKind.TORNADO, sent=start + timedelta(minutes=5))
    >>> tracker = WatchTracker()
    >>> tracker.admit(watch, start, now=start + timedelta(minutes=6)).is_new
    True
    >>> tracker.admit(watch, start, now=start + timedelta(minutes=7)).is_new
    False
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Hashable, Iterable, Iterator
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Generic, TypeVar

from stormspine.models.base import AlertLifecycle
from stormspine.models.mesoscale import MesoscaleDiscussion
from stormspine.models.warning import WeatherWarning
from stormspine.models.watch import Watch, WatchBox
from stormspine.parsers.text import contains_any

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
E = TypeVar("E")

DEFAULT_WATCH_EXPIRY = timedelta(days=1)
DEFAULT_STATEMENT_EXPIRY = timedelta(hours=6)
SPECIAL_WEATHER_STATEMENT = "Special Weather Statement"


@dataclass(frozen=True)
class Admission(Generic[K]):
    """Outcome of admitting one entity.

    Attributes:
        key: The entity's identity.
        is_new: Whether the entity should be announced.
        evicted: Whether an age rule removed the identity before admission.
    """

    key: K
    is_new: bool
    evicted: bool = False


class SeenSet(Generic[K]):
    """Identities already observed, with the first authoritative time seen.

    Example:
        >>> from datetime import datetime, timezone
        >>> seen = SeenSet()
        >>> t = datetime(2024, 5, 1, tzinfo=timezone.utc)
        >>> seen.add(42, t)
        True
        >>> seen.add(42, t.replace(hour=5))
        False
        >>> seen.first_seen(42) == t
        True
    """

    def __init__(self) -> None:
        self._entries: dict[K, datetime] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[K]:
        return iter(list(self._entries))

    def add(self, key: K, at: datetime) -> bool:
        """Record ``key``; returns False if it was already recorded."""
        if key in self._entries:
            return False
        self._entries[key] = at
        return True

    def discard(self, key: K) -> bool:
        """Forget ``key``; returns whether it was recorded."""
        return self._entries.pop(key, None) is not None

    def first_seen(self, key: K) -> datetime | None:
        return self._entries.get(key)

    def evict_older_than(self, cutoff: datetime) -> list[K]:
        """Forget every identity first seen strictly before ``cutoff``."""
        expired = [key for key, at in self._entries.items() if at < cutoff]
        for key in expired:
            del self._entries[key]
        return expired

    def clear(self) -> None:
        self._entries.clear()

    def snapshot(self) -> dict[K, datetime]:
        """Copy of the entries, for inspection."""
        return dict(self._entries)


class _Tracker(ABC, Generic[K, E]):
    """Shared batch plumbing; subclasses implement ``admit``."""

    def __init__(self) -> None:
        self.seen: SeenSet[K] = SeenSet()

    @abstractmethod
    def admit(self, entity: E, started_at: datetime, now: datetime) -> Admission[K]:
        """Decide whether ``entity`` is new and record its identity."""
        ...

    def admit_batch(self, entities: Iterable[E], started_at: datetime, now: datetime) -> list[E]:
        """Admit entities in order and return the ones that are new."""
        return [entity for entity in entities if self.admit(entity, started_at, now).is_new]

    def __len__(self) -> int:
        return len(self.seen)


class WatchTracker(_Tracker[int, Watch]):
    """Seen-set for watches, keyed by watch number.

    Only new-issue watches can be announced; updates and cancellations
    of a watch number are recorded without announcement. Watch numbers
    are reused across seasons, so :meth:`sweep` forgets numbers first
    seen more than ``expiry`` ago. A stale watch still lingering in the
    feed after its eviction is never announced again.
    """

    def __init__(self, expiry: timedelta = DEFAULT_WATCH_EXPIRY) -> None:
        super().__init__()
        self.expiry = expiry

    def admit(self, entity: Watch, started_at: datetime, now: datetime) -> Admission[int]:
        number = entity.number
        is_new = (
            number not in self.seen
            and entity.sent > started_at
            and entity.status is AlertLifecycle.NEW_ISSUE
            and now - entity.sent <= self.expiry
        )
        self.seen.add(number, entity.sent)
        return Admission(key=number, is_new=is_new)

    def sweep(self, now: datetime) -> list[int]:
        """Evict watch numbers first seen more than ``expiry`` before ``now``."""
        evicted = self.seen.evict_older_than(now - self.expiry)
        if evicted:
            logger.debug("Evicted watches %s", evicted)
        return evicted


class WatchBoxTracker(_Tracker[int, WatchBox]):
    """Seen-set for watch boxes, independent of the watch seen-set."""

    def admit(self, entity: WatchBox, started_at: datetime, now: datetime) -> Admission[int]:
        is_new = entity.number not in self.seen and entity.issued > started_at
        self.seen.add(entity.number, entity.issued)
        return Admission(key=entity.number, is_new=is_new)


class MesoscaleTracker(_Tracker[int, MesoscaleDiscussion]):
    """Seen-set for mesoscale discussions, keyed by discussion number."""

    def admit(self, entity: MesoscaleDiscussion, started_at: datetime, now: datetime) -> Admission[int]:
        is_new = entity.number not in self.seen and entity.issued > started_at
        self.seen.add(entity.number, entity.issued)
        return Admission(key=entity.number, is_new=is_new)


def is_thunderstorm_statement(warning: WeatherWarning) -> bool:
    """Whether a warning is a Special Weather Statement about thunderstorms.

    These are the only warnings whose ids age out of the seen-set.
    """
    return warning.event == SPECIAL_WEATHER_STATEMENT and contains_any(warning.description, "thunderstorm")


class WarningTracker(_Tracker[str, WeatherWarning]):
    """Seen-set for NWS alerts, keyed by alert id.

    Ids are retained indefinitely, with one named exception: a Special
    Weather Statement mentioning thunderstorms is forgotten once
    ``statement_expiry`` has passed since it was sent. If the feed still
    carries it afterwards it is announced again on every poll.
    """

    def __init__(self, statement_expiry: timedelta = DEFAULT_STATEMENT_EXPIRY) -> None:
        super().__init__()
        self.statement_expiry = statement_expiry

    def admit(self, entity: WeatherWarning, started_at: datetime, now: datetime) -> Admission[str]:
        evicted = False
        if is_thunderstorm_statement(entity) and now - entity.sent >= self.statement_expiry:
            evicted = self.seen.discard(entity.id)

        if entity.sent <= started_at:
            self.seen.add(entity.id, entity.sent)
            return Admission(key=entity.id, is_new=False, evicted=evicted)

        is_new = self.seen.add(entity.id, entity.sent)
        return Admission(key=entity.id, is_new=is_new, evicted=evicted)
