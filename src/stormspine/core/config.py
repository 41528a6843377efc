"""StormSpine configuration.

Application settings loaded from environment variables with STORMSPINE_ prefix.

Example:
    >>> from stormspine.core.config import get_settings
    >>> settings = get_settings(log_level="DEBUG")
    >>> settings.log_level
    'DEBUG'
    >>> settings.poll_interval
    10.0
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_WARNING_EVENTS: tuple[str, ...] = (
    "tornado warning",
    "severe thunderstorm warning",
    "tornado watch",
    "severe thunderstorm watch",
    "special weather statement",
    "severe weather statement",
    "special marine warning",
    "marine weather statement",
    "ice storm warning",
    "snow squall warning",
)


class Settings(BaseSettings):
    """Application settings.

    Loads from environment variables with STORMSPINE_ prefix.

    Example:
        >>> from stormspine.core.config import Settings
        >>> s = Settings(poll_interval=30)
        >>> s.poll_interval
        30.0
        >>> s.watch_expiry
        datetime.timedelta(days=1)
    """

    model_config = SettingsConfigDict(
        env_prefix="STORMSPINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["console", "json"] = Field(default="console", description="Log format: json or console")

    # Transport
    user_agent: str = Field(
        default="stormspine/0.1 (https://github.com/stormspine/stormspine)",
        description="User-Agent sent upstream; api.weather.gov rejects anonymous clients",
    )
    request_timeout: float = Field(default=30.0, ge=1.0)
    max_retries: int = Field(default=2, ge=0, le=10)
    rate_limit: float = Field(default=10.0, gt=0.0, description="Requests per second")

    # Events
    poll_interval: float = Field(default=10.0, ge=1.0, description="Seconds between ticks")
    tick_on_start: bool = Field(default=True, description="Run the first tick as soon as events are enabled")
    fetch_timeout: float = Field(default=60.0, ge=1.0, description="Bound on one sub-routine's fetch stage")
    observer_timeout: float = Field(default=30.0, gt=0.0, description="Bound on one async observer call")
    watch_expiry: timedelta = Field(default=timedelta(days=1))
    statement_expiry: timedelta = Field(default=timedelta(hours=6))
    warning_events: list[str] = Field(default_factory=lambda: list(DEFAULT_WARNING_EVENTS))
    include_custom_warnings: bool = Field(default=False)


def get_settings(**overrides: Any) -> Settings:
    """Get settings with optional overrides.

    Example:
        >>> from stormspine.core.config import get_settings
        >>> s = get_settings(request_timeout=15)
        >>> s.request_timeout
        15.0
    """
    return Settings(**overrides)
