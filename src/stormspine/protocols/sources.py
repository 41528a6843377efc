"""Data source protocols.

Defines the collaborator interfaces the events engine polls. The
concrete sources in ``stormspine.adapter`` satisfy them, and tests
substitute in-memory fakes.

Example:
    >>> from stormspine.protocols.sources import WarningFeed
    >>> from stormspine.adapter.warnings import WarningSource
    >>> isinstance(WarningSource(), WarningFeed)
    True
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from stormspine.models.mesoscale import MesoscaleDiscussion
    from stormspine.models.warning import WeatherWarning
    from stormspine.models.watch import Watch, WatchBox, WatchHazards, WatchKind


@runtime_checkable
class WatchFeed(Protocol):
    """Source of convective watches and their boxes."""

    async def fetch_active_watches(self, kind: WatchKind) -> list[Watch]:
        """Active watches of one kind, one record per watch number."""
        ...

    async def fetch_active_watch_boxes(self) -> list[WatchBox]:
        """Active SPC watch boxes."""
        ...

    async def fetch_watch_risks(self, number: int, year: int) -> WatchHazards | None:
        """Hazard probabilities for a watch, None if the watch has no page."""
        ...


@runtime_checkable
class MesoscaleFeed(Protocol):
    """Source of mesoscale discussions."""

    async def fetch_active_mesoscale_discussions(self) -> list[MesoscaleDiscussion]:
        ...


@runtime_checkable
class WarningFeed(Protocol):
    """Source of NWS alerts."""

    async def fetch_active_warnings(self, events: Sequence[str] | None = None) -> list[WeatherWarning]:
        """Active alerts whose event name is in ``events``."""
        ...
