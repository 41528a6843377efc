"""NHC tropical models."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from stormspine.models.base import GeoPoint, Polygon, StormSpineModel


class TropicalCyclone(StormSpineModel):
    """An active tropical cyclone from the NHC active-storm feed."""

    name: str
    storm_type: str = ""
    wallet: str = ""
    center: GeoPoint | None = None
    observed_at: datetime | None = None
    movement: str = ""
    minimum_pressure_mb: int | None = None
    max_sustained_winds_mph: int | None = None
    headline: str = ""

    def __str__(self) -> str:
        return f"{self.storm_type} {self.name}".strip()


class TropicalDisturbance(StormSpineModel):
    """An area highlighted by the tropical weather outlook."""

    basin: str = ""
    index: int = Field(default=0, ge=0)
    two_day_percentage: str = ""
    two_day_category: str = ""
    seven_day_percentage: str = ""
    seven_day_category: str = ""
    discussion: str = ""
    polygon: Polygon | None = None
    point: GeoPoint | None = None

    def __str__(self) -> str:
        return (
            f"Disturbance {self.index} - {self.two_day_percentage} chance of cyclone formation in 48 hours"
            f" - {self.seven_day_percentage} chance of cyclone formation in 7 days"
        )
