"""NWS radar station source."""

from __future__ import annotations

from stormspine.adapter.base import BaseSource
from stormspine.core.clock import Clock
from stormspine.http.client import HttpClient
from stormspine.models.radar import RadarStation
from stormspine.parsers import nws

RADAR_STATIONS_URL = "https://api.weather.gov/radar/stations"


class RadarSource(BaseSource):
    def __init__(self, http: HttpClient | None = None, clock: Clock | None = None) -> None:
        super().__init__("nws.radar", http=http, clock=clock)

    async def fetch_radar_stations(self) -> list[RadarStation]:
        self._start()
        payload = await self._get_json(RADAR_STATIONS_URL)
        return self._finish(self._decode(nws.decode_radar_stations, payload))
