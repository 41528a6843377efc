"""Core configuration, errors, logging and the StormSpine facade."""

from stormspine.core.clock import Clock, utc_now
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

__all__ = [
    # Configuration
    "Settings",
    "get_settings",
    "configure_logging",
    # Clock
    "Clock",
    "utc_now",
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
