"""StormSpine - main entry point for the severe-weather client.

The StormSpine class owns one HttpClient, every data source built on it
and an Events engine wired to the watch, mesoscale and warning sources.

Example:
    >>> from stormspine import StormSpine
    >>> async with StormSpine() as spine:
    ...     warnings = await spine.warnings.fetch_active_warnings()
    ...     spine.events.on_warning_issued(print)
    ...     spine.enable_events()
"""

from __future__ import annotations

import logging
from typing import Any

from stormspine.adapter.mesoscale import MesoscaleSource
from stormspine.adapter.outlooks import OutlookSource
from stormspine.adapter.radar import RadarSource
from stormspine.adapter.reports import ReportSource
from stormspine.adapter.space_weather import SpaceWeatherSource
from stormspine.adapter.tropical import TropicalSource
from stormspine.adapter.warnings import WarningSource
from stormspine.adapter.watches import WatchSource
from stormspine.core.clock import Clock, utc_now
from stormspine.core.config import Settings, get_settings
from stormspine.events.engine import Events
from stormspine.http.client import HttpClient

logger = logging.getLogger(__name__)


class StormSpine:
    """Facade over every stormspine data source and the events engine.

    Args:
        settings: Application settings; read from the environment by default.
        http: Shared HTTP client; created from ``settings`` when omitted and
            closed by :meth:`close` only in that case.
        clock: Returns the current UTC time; shared by every component.

    Example:
        >>> import asyncio
        >>> from stormspine.core.stormspine import StormSpine
        >>> async def example():
        ...     async with StormSpine() as spine:
        ...         print(sorted(spine.sources))
        >>> asyncio.run(example())
        ['mesoscale', 'outlooks', 'radar', 'reports', 'space_weather', 'tropical', 'warnings', 'watches']
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        http: HttpClient | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._owns_http = http is None
        self.http = http if http is not None else HttpClient.from_settings(self.settings)
        self._clock = clock or utc_now

        self.watches = WatchSource(self.http, self._clock)
        self.mesoscale = MesoscaleSource(self.http, self._clock)
        self.warnings = WarningSource(
            self.http,
            self._clock,
            events=self.settings.warning_events,
            include_custom_warnings=self.settings.include_custom_warnings,
        )
        self.outlooks = OutlookSource(self.http, self._clock)
        self.reports = ReportSource(self.http, self._clock)
        self.radar = RadarSource(self.http, self._clock)
        self.tropical = TropicalSource(self.http, self._clock)
        self.space_weather = SpaceWeatherSource(self.http, self._clock)

        self.events = Events(
            self.watches,
            self.mesoscale,
            self.warnings,
            settings=self.settings,
            clock=self._clock,
        )

    @property
    def sources(self) -> dict[str, Any]:
        """Every data source, keyed by attribute name."""
        return {
            "watches": self.watches,
            "mesoscale": self.mesoscale,
            "warnings": self.warnings,
            "outlooks": self.outlooks,
            "reports": self.reports,
            "radar": self.radar,
            "tropical": self.tropical,
            "space_weather": self.space_weather,
        }

    def enable_events(self) -> None:
        """Start (or resume) polling for new watches, discussions and warnings."""
        self.events.enable()

    def disable_events(self) -> None:
        """Suspend polling; tracked state is kept."""
        self.events.disable()

    async def close(self) -> None:
        """Stop the events engine and close the HTTP client if owned."""
        await self.events.close()
        if self._owns_http:
            await self.http.close()
        logger.debug("StormSpine closed")

    async def __aenter__(self) -> StormSpine:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
