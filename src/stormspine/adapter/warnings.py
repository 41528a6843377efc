"""NWS warning source.

Example:
    >>> from stormspine.adapter.warnings import WarningSource
    >>> async with WarningSource(include_custom_warnings=True) as source:
    ...     active = await source.fetch_active_warnings(["tornado warning"])
"""

from __future__ import annotations

from collections.abc import Sequence
from urllib.parse import quote

from stormspine.adapter.base import BaseSource
from stormspine.core.clock import Clock
from stormspine.core.config import DEFAULT_WARNING_EVENTS
from stormspine.events.classify import custom_warning_name
from stormspine.http.client import HttpClient
from stormspine.models.warning import WeatherWarning
from stormspine.parsers import nws

ALERTS_URL = "https://api.weather.gov/alerts/active"
CONVECTIVE_WARNING_EVENTS = ("tornado warning", "severe thunderstorm warning")


def alerts_url(events: Sequence[str]) -> str:
    """Active-alerts URL filtered to the given event names.

    Example:
        >>> alerts_url(["tornado warning", "ice storm warning"])
        'https://api.weather.gov/alerts/active?event=tornado%20warning,ice%20storm%20warning'
        >>> alerts_url([])
        'https://api.weather.gov/alerts/active'
    """
    if not events:
        return ALERTS_URL
    return f"{ALERTS_URL}?event=" + ",".join(quote(event.strip()) for event in events)


class WarningSource(BaseSource):
    """Active NWS alerts."""

    def __init__(
        self,
        http: HttpClient | None = None,
        clock: Clock | None = None,
        events: Sequence[str] = DEFAULT_WARNING_EVENTS,
        include_custom_warnings: bool = False,
    ) -> None:
        """Initialize the source.

        Args:
            http: Shared HTTP client.
            clock: Returns the current UTC time.
            events: Default event filter; an empty filter returns every alert.
            include_custom_warnings: Relabel warnings as Tornado Emergency,
                PDS Tornado Warning or Derecho Warning when their text says so.
        """
        super().__init__("nws.warnings", http=http, clock=clock)
        self._events = tuple(events)
        self._include_custom = include_custom_warnings

    @property
    def events(self) -> tuple[str, ...]:
        return self._events

    async def fetch_active_warnings(self, events: Sequence[str] | None = None) -> list[WeatherWarning]:
        """Fetch active alerts matching ``events`` (default: the configured filter).

        Raises:
            FeedError: If the alerts endpoint cannot be fetched or decoded.
        """
        self._start()
        payload = await self._get_json(alerts_url(self._events if events is None else events))
        warnings = self._decode(nws.decode_warnings, payload)
        if self._include_custom:
            warnings = [self._relabel(warning) for warning in warnings]
        return self._finish(warnings)

    async def fetch_convective_warnings(self) -> list[WeatherWarning]:
        return await self.fetch_active_warnings(CONVECTIVE_WARNING_EVENTS)

    @staticmethod
    def _relabel(warning: WeatherWarning) -> WeatherWarning:
        name = custom_warning_name(warning)
        if name is None:
            return warning
        return warning.model_copy(update={"name": name})
