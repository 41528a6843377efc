"""Space Weather Prediction Center source.

Example:
    >>> from stormspine.adapter.space_weather import SpaceWeatherSource
    >>> async with SpaceWeatherSource() as source:
    ...     kp, scale = await source.current_geomagnetic_storm_scale()
"""

from __future__ import annotations

from stormspine.adapter.base import BaseSource
from stormspine.core.clock import Clock
from stormspine.http.client import HttpClient
from stormspine.models.space_weather import (
    AuroraForecast,
    KpIndex,
    ParticleFlux,
    RadioFlux,
    SolarWind,
    XrayFlux,
    geomagnetic_storm_scale,
    radio_blackout_scale,
    solar_radiation_storm_scale,
)
from stormspine.parsers import swpc

SWPC_URL = "https://services.swpc.noaa.gov"
KP_INDEX_URL = f"{SWPC_URL}/json/planetary_k_index_1m.json"
SOLAR_WIND_URL = f"{SWPC_URL}/products/geospace/propagated-solar-wind-1-hour.json"
RADIO_FLUX_URL = f"{SWPC_URL}/json/f107_cm_flux.json"
AURORA_URL = f"{SWPC_URL}/json/ovation_aurora_latest.json"
PROTON_FLUX_URL = f"{SWPC_URL}/json/goes/primary/integral-protons-6-hour.json"
XRAY_FLUX_URL = f"{SWPC_URL}/json/goes/primary/xrays-6-hour.json"

PROTON_ENERGY = ">=10 MeV"
XRAY_BAND = "0.1-0.8nm"


class SpaceWeatherSource(BaseSource):
    """SWPC indices, fluxes and NOAA scales."""

    def __init__(self, http: HttpClient | None = None, clock: Clock | None = None) -> None:
        super().__init__("swpc", http=http, clock=clock)

    async def fetch_kp_index(self) -> list[KpIndex]:
        self._start()
        return self._finish(self._decode(swpc.decode_kp_index, await self._get_json(KP_INDEX_URL)))

    async def fetch_solar_wind(self) -> list[SolarWind]:
        self._start()
        return self._finish(self._decode(swpc.decode_solar_wind, await self._get_json(SOLAR_WIND_URL)))

    async def fetch_radio_flux(self) -> list[RadioFlux]:
        self._start()
        return self._finish(self._decode(swpc.decode_radio_flux, await self._get_json(RADIO_FLUX_URL)))

    async def fetch_aurora_forecast(self) -> AuroraForecast:
        self._start()
        forecast = self._decode(swpc.decode_aurora, await self._get_json(AURORA_URL))
        self._finish(forecast.points)
        return forecast

    async def fetch_proton_flux(self) -> list[ParticleFlux]:
        self._start()
        return self._finish(self._decode(swpc.decode_particle_flux, await self._get_json(PROTON_FLUX_URL)))

    async def fetch_xray_flux(self) -> list[XrayFlux]:
        self._start()
        return self._finish(self._decode(swpc.decode_xray_flux, await self._get_json(XRAY_FLUX_URL)))

    async def current_geomagnetic_storm_scale(self) -> tuple[KpIndex | None, str]:
        """Latest Kp observation and its G-scale level."""
        readings = await self.fetch_kp_index()
        if not readings:
            return None, "None"
        latest = readings[-1]
        return latest, geomagnetic_storm_scale(latest.kp_index)

    async def current_solar_radiation_storm_scale(self) -> tuple[ParticleFlux | None, str]:
        """Latest >=10 MeV proton flux and its S-scale level."""
        readings = [r for r in await self.fetch_proton_flux() if r.energy == PROTON_ENERGY]
        if not readings:
            return None, "None"
        latest = readings[-1]
        return latest, solar_radiation_storm_scale(latest.flux)

    async def current_radio_blackout_scale(self) -> tuple[XrayFlux | None, str]:
        """Latest long-band X-ray flux and its R-scale level."""
        readings = [r for r in await self.fetch_xray_flux() if r.energy == XRAY_BAND]
        if not readings:
            return None, "None"
        latest = readings[-1]
        return latest, radio_blackout_scale(latest.flux)
