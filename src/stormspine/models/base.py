"""Base models and shared types.

This module provides the foundational models and enums used throughout StormSpine.

Example:
    >>> from stormspine.models.base import AlertLifecycle, GeoPoint, centroid
    >>> AlertLifecycle.from_message_type("Alert")
    <AlertLifecycle.NEW_ISSUE: 'new_issue'>
    >>> centroid([GeoPoint(latitude=30, longitude=-90), GeoPoint(latitude=32, longitude=-92)])
    GeoPoint(latitude=31.0, longitude=-91.0)
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class StormSpineModel(BaseModel):
    """Base model with standard configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        validate_assignment=True,
        extra="forbid",
    )


class AlertLifecycle(str, Enum):
    """Lifecycle of an alert message.

    Example:
        >>> AlertLifecycle.CANCEL.value
        'cancel'
        >>> AlertLifecycle.from_message_type("Ack")
        <AlertLifecycle.ACKNOWLEDGE: 'acknowledge'>
    """

    NEW_ISSUE = "new_issue"
    UPDATE = "update"
    CANCEL = "cancel"
    ACKNOWLEDGE = "acknowledge"
    ERROR = "error"

    @classmethod
    def from_message_type(cls, message_type: str) -> AlertLifecycle:
        """Map a CAP ``messageType`` onto a lifecycle.

        Raises:
            ValueError: If the message type is not a CAP message type.
        """
        try:
            return _MESSAGE_TYPES[message_type.strip().lower()]
        except KeyError:
            raise ValueError(f"Unknown message type: {message_type!r}") from None


_MESSAGE_TYPES = {
    "alert": AlertLifecycle.NEW_ISSUE,
    "update": AlertLifecycle.UPDATE,
    "cancel": AlertLifecycle.CANCEL,
    "ack": AlertLifecycle.ACKNOWLEDGE,
    "error": AlertLifecycle.ERROR,
}


class GeoPoint(StormSpineModel):
    """A latitude/longitude pair."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class Polygon(StormSpineModel):
    """A ring of ``(latitude, longitude)`` points with optional holes.

    Example:
        >>> ring = Polygon(coordinates=[(35.0, -97.0), (35.5, -97.0), (35.5, -96.0)])
        >>> ring.points[0].latitude
        35.0
    """

    coordinates: list[tuple[float, float]] = Field(default_factory=list)
    holes: list[list[tuple[float, float]]] = Field(default_factory=list)

    @property
    def points(self) -> list[GeoPoint]:
        """Outer ring as GeoPoints."""
        return [GeoPoint(latitude=lat, longitude=lon) for lat, lon in self.coordinates]

    @property
    def is_empty(self) -> bool:
        return not self.coordinates


def centroid(points: Iterable[GeoPoint | tuple[float, float]]) -> GeoPoint | None:
    """Mean position of a set of points.

    Returns None when there are no points rather than dividing by zero.

    Example:
        >>> centroid([]) is None
        True
        >>> centroid([(10.0, 20.0), (20.0, 40.0)])
        GeoPoint(latitude=15.0, longitude=30.0)
    """
    lat_total = lon_total = 0.0
    count = 0
    for point in points:
        if isinstance(point, GeoPoint):
            lat, lon = point.latitude, point.longitude
        else:
            lat, lon = point
        lat_total += lat
        lon_total += lon
        count += 1
    if count == 0:
        return None
    return GeoPoint(latitude=lat_total / count, longitude=lon_total / count)
