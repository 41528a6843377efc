"""Pydantic models for StormSpine."""

from stormspine.models.base import AlertLifecycle, GeoPoint, Polygon, StormSpineModel, centroid
from stormspine.models.mesoscale import MesoscaleDiscussion
from stormspine.models.outlook import CategoricalRisk, OutlookKind, RiskArea
from stormspine.models.radar import RadarStation
from stormspine.models.report import ReportType, StormReport
from stormspine.models.space_weather import (
    AuroraForecast,
    AuroraPoint,
    KpIndex,
    ParticleFlux,
    RadioFlux,
    SolarWind,
    XrayFlux,
    geomagnetic_storm_scale,
    radio_blackout_scale,
    solar_radiation_storm_scale,
)
from stormspine.models.tropical import TropicalCyclone, TropicalDisturbance
from stormspine.models.warning import WeatherWarning
from stormspine.models.watch import (
    CountyInfo,
    Watch,
    WatchBox,
    WatchHazard,
    WatchHazards,
    WatchKind,
    merge_watch_fragments,
)

__all__ = [
    # Base
    "StormSpineModel",
    "AlertLifecycle",
    "GeoPoint",
    "Polygon",
    "centroid",
    # Tracked entities
    "Watch",
    "WatchBox",
    "WatchKind",
    "WatchHazard",
    "WatchHazards",
    "CountyInfo",
    "merge_watch_fragments",
    "MesoscaleDiscussion",
    "WeatherWarning",
    # One-shot products
    "RiskArea",
    "OutlookKind",
    "CategoricalRisk",
    "StormReport",
    "ReportType",
    "RadarStation",
    "TropicalCyclone",
    "TropicalDisturbance",
    # Space weather
    "KpIndex",
    "SolarWind",
    "RadioFlux",
    "AuroraForecast",
    "AuroraPoint",
    "ParticleFlux",
    "XrayFlux",
    "geomagnetic_storm_scale",
    "solar_radiation_storm_scale",
    "radio_blackout_scale",
]
