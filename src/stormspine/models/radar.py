"""Radar station model."""

from __future__ import annotations

from stormspine.models.base import GeoPoint, StormSpineModel


class RadarStation(StormSpineModel):
    """NWS radar station metadata.

    Example:
        >>> s = RadarStation(id="KTLX", location=GeoPoint(latitude=35.33, longitude=-97.28))
        >>> s.elevation_unit
        ''
    """

    id: str
    name: str = ""
    station_type: str = ""
    time_zone: str = ""
    mode: str = ""
    elevation: float = 0.0
    elevation_unit: str = ""
    location: GeoPoint | None = None
