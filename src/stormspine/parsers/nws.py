"""Decoders for api.weather.gov payloads.

Example:
    >>> feature = {
    ...     "geometry": None,
    ...     "properties": {
    ...         "id": "urn:oid:1",
    ...         "event": "Tornado Warning",
    ...         "sent": "2024-05-01T00:05:00-05:00",
    ...         "messageType": "Alert",
    ...         "parameters": {"maxHailSize": ["1.00"]},
    ...     },
    ... }
    >>> decode_warning(feature).max_hail_size
    1.0
"""

from __future__ import annotations

import re
from typing import Any

from stormspine.core.exceptions import DecodeError
from stormspine.models.base import AlertLifecycle, GeoPoint
from stormspine.models.radar import RadarStation
from stormspine.models.warning import WeatherWarning
from stormspine.models.watch import CountyInfo, Watch, WatchKind
from stormspine.parsers.batch import decode_batch
from stormspine.parsers.geojson import (
    features,
    parse_optional_time,
    parse_time,
    polygons_from_geometry,
)
from stormspine.parsers.text import extract_watch_number

_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")

# NWS parameter name -> WeatherWarning field for single-valued text parameters
_TEXT_PARAMETERS = {
    "NWSheadline": "nws_headline",
    "windThreat": "wind_threat",
    "hailThreat": "hail_threat",
    "tornadoDetection": "tornado_detection",
    "waterspoutDetection": "waterspout_detection",
    "tornadoDamageThreat": "tornado_damage_threat",
    "thunderstormDamageThreat": "thunderstorm_damage_threat",
    "flashFloodDetection": "flash_flood_detection",
    "flashFloodDamageThreat": "flash_flood_damage_threat",
    "CMAMtext": "cmam_text",
    "CMAMlongtext": "cmam_long_text",
    "eventMotionDescription": "event_motion_description",
}


def _properties(feature: Any) -> dict[str, Any]:
    if not isinstance(feature, dict) or not isinstance(feature.get("properties"), dict):
        raise DecodeError("Feature has no properties", source="nws")
    return feature["properties"]


def _first(value: Any) -> str:
    if isinstance(value, list):
        return str(value[0]) if value else ""
    return "" if value is None else str(value)


def _lifecycle(props: dict[str, Any]) -> AlertLifecycle:
    message_type = props.get("messageType")
    if not message_type:
        return AlertLifecycle.NEW_ISSUE
    try:
        return AlertLifecycle.from_message_type(message_type)
    except ValueError as e:
        raise DecodeError(str(e), source="nws.alert") from e


def parse_wind_gust(text: str) -> tuple[float | None, str]:
    """Split ``"70 MPH"`` into value and unit.

    Example:
        >>> parse_wind_gust("up to 60 kts")
        (60.0, 'kts')
    """
    match = _NUMBER_RE.search(text)
    if match is None:
        return None, ""
    unit = next((word for word in text.split() if word.lower() in ("mph", "kts")), "")
    return float(match.group()), unit


def parse_hail_size(text: str) -> float | None:
    """Last number in a ``maxHailSize`` parameter (``"Up to 1.75"`` -> 1.75)."""
    numbers = _NUMBER_RE.findall(text)
    return float(numbers[-1]) if numbers else None


def decode_warning(feature: Any) -> WeatherWarning:
    """Decode one alert feature into a WeatherWarning.

    Raises:
        DecodeError: If identity, event or sent time is missing.
    """
    props = _properties(feature)
    alert_id = props.get("id") or (feature.get("id") if isinstance(feature, dict) else None)
    if not alert_id:
        raise DecodeError("Alert has no id", source="nws.alert", payload=props)
    event = props.get("event")
    if not event:
        raise DecodeError(f"Alert {alert_id} has no event", source="nws.alert", payload=props)

    fields: dict[str, Any] = {
        "id": alert_id,
        "event": event,
        "sent": parse_time(props.get("sent"), "sent"),
        "effective": parse_optional_time(props.get("effective"), "effective"),
        "onset": parse_optional_time(props.get("onset"), "onset"),
        "expires": parse_optional_time(props.get("expires"), "expires"),
        "ends": parse_optional_time(props.get("ends"), "ends"),
        "lifecycle": _lifecycle(props),
        "sender": props.get("senderName") or "",
        "headline": props.get("headline") or "",
        "description": props.get("description") or "",
        "instruction": props.get("instruction") or "",
        "area_description": props.get("areaDesc") or "",
        "affected_zones": list(props.get("affectedZones") or []),
        "polygons": polygons_from_geometry(feature.get("geometry")),
    }

    parameters = props.get("parameters") or {}
    for name, field in _TEXT_PARAMETERS.items():
        if name in parameters:
            fields[field] = _first(parameters[name])
    if "maxWindGust" in parameters:
        fields["max_wind_gust"], fields["max_wind_gust_units"] = parse_wind_gust(_first(parameters["maxWindGust"]))
    if "maxHailSize" in parameters:
        fields["max_hail_size"] = parse_hail_size(_first(parameters["maxHailSize"]))

    try:
        return WeatherWarning(**fields)
    except ValueError as e:
        raise DecodeError(f"Invalid alert {alert_id}: {e}", source="nws.alert", payload=props) from e


def decode_watch_alert(feature: Any, kind: WatchKind) -> Watch:
    """Decode a watch alert into a Watch fragment without counties.

    The watch number comes from the description text.

    Raises:
        DecodeError: If the number or sent time cannot be found.
    """
    props = _properties(feature)
    description = props.get("description") or ""
    number = extract_watch_number(description, kind)
    try:
        return Watch(
            number=number,
            kind=kind,
            sent=parse_time(props.get("sent"), "sent"),
            effective=parse_optional_time(props.get("effective"), "effective"),
            onset=parse_optional_time(props.get("onset"), "onset"),
            expires=parse_optional_time(props.get("expires"), "expires"),
            ends=parse_optional_time(props.get("ends"), "ends"),
            status=_lifecycle(props),
            sender=props.get("senderName") or "",
            headline=props.get("headline") or "",
            description=description,
        )
    except ValueError as e:
        raise DecodeError(f"Invalid watch alert: {e}", source="nws.watch", payload=props) from e


def decode_zone(payload: Any) -> CountyInfo:
    """Decode a forecast-zone document into CountyInfo.

    Example:
        >>> zone = decode_zone({"properties": {"id": "OKC109", "name": "Oklahoma", "state": "OK",
        ...                                    "timeZone": ["America/Chicago"]}, "geometry": None})
        >>> str(zone)
        'Oklahoma county, OK - America/Chicago - OKC109'
    """
    props = _properties(payload)
    zone_id = props.get("id")
    if not zone_id:
        raise DecodeError("Zone has no id", source="nws.zone", payload=props)
    return CountyInfo(
        id=zone_id,
        name=props.get("name") or "",
        state=props.get("state") or "",
        forecast_offices=[str(office).rstrip("/").rsplit("/", 1)[-1] for office in props.get("forecastOffices") or []],
        time_zone=_first(props.get("timeZone")),
        geometry=polygons_from_geometry(payload.get("geometry")),
    )


def decode_radar_station(feature: Any) -> RadarStation:
    """Decode one feature of the radar station collection."""
    props = _properties(feature)
    station_id = props.get("id")
    if not station_id:
        raise DecodeError("Radar station has no id", source="nws.radar", payload=props)
    coordinates = (feature.get("geometry") or {}).get("coordinates") or []
    elevation = props.get("elevation") or {}
    rda = props.get("rda") or {}
    try:
        return RadarStation(
            id=station_id,
            name=props.get("name") or "",
            station_type=props.get("stationType") or "",
            time_zone=props.get("timeZone") or "",
            mode=((rda.get("properties") or {}).get("mode")) or "",
            elevation=float(elevation.get("value") or 0.0),
            elevation_unit=str(elevation.get("unitCode") or "").rsplit(":", 1)[-1],
            location=GeoPoint(latitude=coordinates[1], longitude=coordinates[0]) if len(coordinates) >= 2 else None,
        )
    except (TypeError, ValueError) as e:
        raise DecodeError(f"Invalid radar station {station_id}: {e}", source="nws.radar") from e


def decode_warnings(payload: Any) -> list[WeatherWarning]:
    """Decode an alerts FeatureCollection; malformed alerts are skipped."""
    return decode_batch(features(payload), decode_warning, "nws.alert")


def decode_radar_stations(payload: Any) -> list[RadarStation]:
    return decode_batch(features(payload), decode_radar_station, "nws.radar")
