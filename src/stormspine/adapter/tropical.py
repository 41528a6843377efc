"""National Hurricane Center source."""

from __future__ import annotations

from stormspine.adapter.base import BaseSource
from stormspine.core.clock import Clock
from stormspine.core.exceptions import ConfigurationError
from stormspine.http.client import HttpClient
from stormspine.models.tropical import TropicalCyclone, TropicalDisturbance
from stormspine.parsers import kml

ACTIVE_STORMS_URL = "https://www.nhc.noaa.gov/gis/kml/nhc_active.kml"
OUTLOOK_URLS = {
    "atlantic": "https://www.nhc.noaa.gov/xgtwo/gtwo_atl.kmz",
    "east_pacific": "https://www.nhc.noaa.gov/xgtwo/gtwo_pac.kmz",
    "central_pacific": "https://www.nhc.noaa.gov/xgtwo/gtwo_cpac.kmz",
}


class TropicalSource(BaseSource):
    """Active tropical cyclones and outlook disturbances."""

    def __init__(self, http: HttpClient | None = None, clock: Clock | None = None) -> None:
        super().__init__("nhc.tropical", http=http, clock=clock)

    async def fetch_active_storms(self) -> list[TropicalCyclone]:
        self._start()
        document = await self._get_text(ACTIVE_STORMS_URL)
        return self._finish(self._decode(kml.decode_active_storms, document, self.now()))

    async def fetch_disturbances(self, basin: str = "atlantic") -> list[TropicalDisturbance]:
        """Fetch the two/seven-day outlook areas for a basin.

        Raises:
            ConfigurationError: If the basin is not atlantic, east_pacific or central_pacific.
        """
        key = basin.strip().lower().replace(" ", "_")
        url = OUTLOOK_URLS.get(key)
        if url is None:
            raise ConfigurationError(f"Unknown basin {basin!r}; expected one of {', '.join(OUTLOOK_URLS)}")
        self._start()
        document = await self._get_kml(url)
        return self._finish(self._decode(kml.decode_disturbances, document, key))
