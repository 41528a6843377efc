"""GeoJSON helpers.

GeoJSON orders positions ``[longitude, latitude]``; every polygon
produced here is flipped to ``(latitude, longitude)``.

Example:
    >>> polys = polygons_from_geometry(
    ...     {"type": "Polygon", "coordinates": [[[-97.0, 35.0], [-96.0, 35.0], [-96.0, 36.0]]]}
    ... )
    >>> polys[0].coordinates[0]
    (35.0, -97.0)
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

from stormspine.core.exceptions import DecodeError
from stormspine.models.base import Polygon


def _ring(positions: Sequence[Sequence[float]]) -> list[tuple[float, float]]:
    return [(float(position[1]), float(position[0])) for position in positions]


def polygon_from_rings(rings: Sequence[Sequence[Sequence[float]]]) -> Polygon:
    """Build a Polygon from a GeoJSON ring list (outer ring, then holes)."""
    if not rings:
        return Polygon()
    return Polygon(coordinates=_ring(rings[0]), holes=[_ring(hole) for hole in rings[1:]])


def polygons_from_geometry(geometry: dict[str, Any] | None) -> list[Polygon]:
    """Decode a Polygon or MultiPolygon geometry.

    Other geometry types (and a missing geometry) decode to no polygons.

    Raises:
        DecodeError: If the coordinates are malformed.
    """
    if not geometry:
        return []
    kind = geometry.get("type")
    coordinates = geometry.get("coordinates") or []
    try:
        if kind == "Polygon":
            return [polygon_from_rings(coordinates)]
        if kind == "MultiPolygon":
            return [polygon_from_rings(rings) for rings in coordinates]
    except (TypeError, ValueError, IndexError) as e:
        raise DecodeError(f"Malformed {kind} coordinates: {e}", source="geojson") from e
    return []


def parse_time(value: Any, field: str) -> datetime:
    """Parse an ISO-8601 timestamp into an aware datetime (UTC when naive).

    Raises:
        DecodeError: If the value is missing or not ISO-8601.
    """
    if not value:
        raise DecodeError(f"Missing timestamp {field!r}", source="geojson")
    try:
        parsed = datetime.fromisoformat(str(value))
    except ValueError as e:
        raise DecodeError(f"Bad timestamp {field!r}: {value!r}", source="geojson") from e
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def parse_optional_time(value: Any, field: str) -> datetime | None:
    return parse_time(value, field) if value else None


def parse_compact_time(value: Any, field: str) -> datetime:
    """Parse SPC ``yyyyMMddHHmm`` (or ``yyyyMMddHH``) stamps as UTC.

    Example:
        >>> parse_compact_time("202405211200", "VALID").isoformat()
        '2024-05-21T12:00:00+00:00'
    """
    text = str(value or "").strip()
    fmt = {12: "%Y%m%d%H%M", 10: "%Y%m%d%H"}.get(len(text))
    if fmt is None:
        raise DecodeError(f"Bad compact timestamp {field!r}: {value!r}", source="geojson")
    try:
        return datetime.strptime(text, fmt).replace(tzinfo=UTC)
    except ValueError as e:
        raise DecodeError(f"Bad compact timestamp {field!r}: {value!r}", source="geojson") from e


def features(payload: Any) -> list[dict[str, Any]]:
    """Return the feature list of a FeatureCollection.

    Raises:
        DecodeError: If the payload is not a FeatureCollection.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("features"), list):
        raise DecodeError("Payload is not a GeoJSON FeatureCollection", source="geojson")
    return payload["features"]
