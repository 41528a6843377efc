"""NWS warning model.

Example:
    >>> from datetime import datetime, timezone
    >>> from stormspine.models.warning import WeatherWarning
    >>> w = WeatherWarning(
    ...     id="urn:oid:2.49.0.1.840.0.abc",
    ...     event="Tornado Warning",
    ...     sent=datetime(2024, 5, 1, 0, 5, tzinfo=timezone.utc),
    ... )
    >>> w.name
    'Tornado Warning'
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field, model_validator

from stormspine.models.base import AlertLifecycle, Polygon, StormSpineModel


class WeatherWarning(StormSpineModel):
    """A National Weather Service alert.

    ``event`` is the NWS event name and drives every classification rule;
    ``name`` is the display name and may carry a custom label such as
    ``"Tornado Emergency"``.
    """

    id: str = Field(..., min_length=1, description="Provider-issued alert id")
    event: str = Field(..., min_length=1)
    name: str = ""
    sent: datetime
    effective: datetime | None = None
    onset: datetime | None = None
    expires: datetime | None = None
    ends: datetime | None = None
    lifecycle: AlertLifecycle = Field(default=AlertLifecycle.NEW_ISSUE, description="Feed message type")
    sender: str = ""
    headline: str = ""
    nws_headline: str = ""
    description: str = ""
    instruction: str = ""
    area_description: str = ""
    affected_zones: list[str] = Field(default_factory=list)
    polygons: list[Polygon] = Field(default_factory=list)

    # NWS "parameters" block
    wind_threat: str = ""
    max_wind_gust: float | None = None
    max_wind_gust_units: str = ""
    hail_threat: str = ""
    max_hail_size: float | None = None
    tornado_detection: str = ""
    waterspout_detection: str = ""
    tornado_damage_threat: str = ""
    thunderstorm_damage_threat: str = ""
    flash_flood_detection: str = ""
    flash_flood_damage_threat: str = ""
    cmam_text: str = ""
    cmam_long_text: str = ""
    event_motion_description: str = ""

    @model_validator(mode="after")
    def _default_name(self) -> WeatherWarning:
        if not self.name:
            # object.__setattr__ avoids re-entering validate_assignment
            object.__setattr__(self, "name", self.event)
        return self

    def __str__(self) -> str:
        parts = [self.name]
        if self.tornado_detection:
            parts.append(f"Tornado: {self.tornado_detection}")
        if self.max_wind_gust is not None:
            parts.append(f"Max Wind Gust: {self.max_wind_gust:g} {self.max_wind_gust_units}".rstrip())
        if self.max_hail_size is not None:
            parts.append(f"Max Hail Size: {self.max_hail_size:g} in")
        if len(parts) == 1 and (self.nws_headline or self.headline):
            parts.append(self.nws_headline or self.headline)
        return " | ".join(parts)
