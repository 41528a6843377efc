"""Data source clients, one per upstream provider family."""

from stormspine.adapter.base import BaseSource
from stormspine.adapter.mesoscale import MesoscaleSource
from stormspine.adapter.outlooks import OutlookSource
from stormspine.adapter.radar import RadarSource
from stormspine.adapter.reports import ReportSource
from stormspine.adapter.space_weather import SpaceWeatherSource
from stormspine.adapter.tropical import TropicalSource
from stormspine.adapter.warnings import WarningSource
from stormspine.adapter.watches import WatchSource

__all__ = [
    "BaseSource",
    "MesoscaleSource",
    "OutlookSource",
    "RadarSource",
    "ReportSource",
    "SpaceWeatherSource",
    "TropicalSource",
    "WarningSource",
    "WatchSource",
]
