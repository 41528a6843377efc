"""
StormSpine - Severe Weather Feed Client.

StormSpine polls the Storm Prediction Center, the National Weather
Service, the National Hurricane Center and the Space Weather Prediction
Center, decodes their feeds into typed records, and announces newly
issued watches, mesoscale discussions and warnings to observers.

Key Features:
- Typed pydantic records for every product
- Async sources built on one rate-limited httpx client
- Identity tracking so each watch, discussion and warning is announced once
- Observers may be plain functions or coroutines

Quick Start:
    >>> from stormspine import StormSpine
    >>> async with StormSpine() as spine:
    ...     @spine.events.on_warning_issued
    ...     def announce(warning, transition):
    ...         print(warning, transition.value)
    ...     spine.enable_events()

Architecture:
    Sources: WatchSource, MesoscaleSource, WarningSource, OutlookSource,
             ReportSource, RadarSource, TropicalSource, SpaceWeatherSource
    Events: Events engine, identity trackers, Dispatcher
"""

# Data sources
from stormspine.adapter import (
    BaseSource,
    MesoscaleSource,
    OutlookSource,
    RadarSource,
    ReportSource,
    SpaceWeatherSource,
    TropicalSource,
    WarningSource,
    WatchSource,
)

# Configuration and errors
from stormspine.core.config import Settings, get_settings
from stormspine.core.exceptions import (
    ConfigurationError,
    DecodeError,
    FeedError,
    InvalidDateError,
    InvalidOutlookDayError,
    NotFoundError,
    OutlookNotFoundError,
    StormSpineError,
    WatchNotFoundError,
)
from stormspine.core.logging import configure_logging

# Core orchestration
from stormspine.core.stormspine import StormSpine

# Events
from stormspine.events import Dispatcher, EngineState, Events

# HTTP
from stormspine.http import HttpClient, HttpClientError, RateLimiter

# Models
from stormspine.models import (
    AlertLifecycle,
    CountyInfo,
    GeoPoint,
    MesoscaleDiscussion,
    OutlookKind,
    Polygon,
    ReportType,
    RiskArea,
    StormReport,
    Watch,
    WatchBox,
    WatchHazards,
    WatchKind,
    WeatherWarning,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Core
    "StormSpine",
    "Settings",
    "get_settings",
    "configure_logging",
    # Sources
    "BaseSource",
    "MesoscaleSource",
    "OutlookSource",
    "RadarSource",
    "ReportSource",
    "SpaceWeatherSource",
    "TropicalSource",
    "WarningSource",
    "WatchSource",
    # Events
    "Dispatcher",
    "EngineState",
    "Events",
    # HTTP
    "HttpClient",
    "HttpClientError",
    "RateLimiter",
    # Models
    "AlertLifecycle",
    "CountyInfo",
    "GeoPoint",
    "MesoscaleDiscussion",
    "OutlookKind",
    "Polygon",
    "ReportType",
    "RiskArea",
    "StormReport",
    "Watch",
    "WatchBox",
    "WatchHazards",
    "WatchKind",
    "WeatherWarning",
    # Errors
    "ConfigurationError",
    "DecodeError",
    "FeedError",
    "InvalidDateError",
    "InvalidOutlookDayError",
    "NotFoundError",
    "OutlookNotFoundError",
    "StormSpineError",
    "WatchNotFoundError",
]
