"""KML decoders for SPC and NHC products.

KML documents are walked with ElementTree, ignoring namespaces: SPC
publishes KML 2.2 while some NHC products still use the older Google
namespace.

Example:
    >>> doc = '''<kml xmlns="http://www.opengis.net/kml/2.2"><Document>
    ...   <NetworkLink><Link><href>https://www.spc.noaa.gov/products/watch/ww0123.kmz</href></Link></NetworkLink>
    ... </Document></kml>'''
    >>> network_link_hrefs(doc)
    ['https://www.spc.noaa.gov/products/watch/ww0123.kmz']
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from collections.abc import Iterator
from datetime import UTC, datetime

from bs4 import BeautifulSoup

from stormspine.core.exceptions import DecodeError
from stormspine.models.base import GeoPoint, Polygon, centroid
from stormspine.models.mesoscale import MesoscaleDiscussion
from stormspine.models.tropical import TropicalCyclone, TropicalDisturbance
from stormspine.models.watch import WatchBox, WatchKind
from stormspine.parsers.batch import decode_batch
from stormspine.parsers.text import classify_concerning, parse_issued_line, replace_timezone

logger = logging.getLogger(__name__)

_WATCH_NAME_RE = re.compile(r"ww\s*0*(\d{1,4})", re.IGNORECASE)
_ISSUED_TOKEN_RE = re.compile(r"\b(\d{2})(\d{2})(\d{2})Z\b")
_BREAK_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def parse_document(text: str) -> ET.Element:
    """Parse a KML document.

    Raises:
        DecodeError: If the text is not well-formed XML.
    """
    try:
        return ET.fromstring(text.encode("utf-8") if isinstance(text, str) else text)
    except ET.ParseError as e:
        raise DecodeError(f"Malformed KML: {e}", source="kml") from e


def iter_elements(root: ET.Element, name: str) -> Iterator[ET.Element]:
    """All descendants with the given local tag name."""
    for element in root.iter():
        if _local(element.tag) == name:
            yield element


def child(element: ET.Element, name: str) -> ET.Element | None:
    for sub in element:
        if _local(sub.tag) == name:
            return sub
    return None


def child_text(element: ET.Element, name: str) -> str:
    sub = child(element, name)
    return (sub.text or "").strip() if sub is not None else ""


def network_link_hrefs(text: str) -> list[str]:
    """The ``href`` of every NetworkLink in a KML document."""
    root = parse_document(text)
    hrefs = []
    for link in iter_elements(root, "NetworkLink"):
        for href in iter_elements(link, "href"):
            if href.text and href.text.strip():
                hrefs.append(href.text.strip())
    return hrefs


def parse_coordinates(text: str) -> list[tuple[float, float]]:
    """Parse a KML ``coordinates`` string into ``(lat, lon)`` pairs.

    Example:
        >>> parse_coordinates("-97.5,35.2,0 -96.0,36.1,0")
        [(35.2, -97.5), (36.1, -96.0)]
    """
    points = []
    for token in text.split():
        parts = token.split(",")
        if len(parts) < 2:
            raise DecodeError(f"Bad KML coordinate {token!r}", source="kml")
        try:
            points.append((float(parts[1]), float(parts[0])))
        except ValueError as e:
            raise DecodeError(f"Bad KML coordinate {token!r}", source="kml") from e
    return points


def placemark_polygon(placemark: ET.Element) -> Polygon | None:
    """Outer and inner rings of the first Polygon in a placemark."""
    polygon = next(iter_elements(placemark, "Polygon"), None)
    if polygon is None:
        return None
    outer = next(iter_elements(polygon, "outerBoundaryIs"), None)
    if outer is None:
        return None
    coords = next(iter_elements(outer, "coordinates"), None)
    holes = [
        parse_coordinates(c.text or "")
        for inner in iter_elements(polygon, "innerBoundaryIs")
        for c in iter_elements(inner, "coordinates")
    ]
    return Polygon(coordinates=parse_coordinates(coords.text or "") if coords is not None else [], holes=holes)


def placemark_point(placemark: ET.Element) -> GeoPoint | None:
    point = next(iter_elements(placemark, "Point"), None)
    if point is None:
        return None
    coords = parse_coordinates(child_text(point, "coordinates"))
    if not coords:
        return None
    lat, lon = coords[0]
    return GeoPoint(latitude=lat, longitude=lon)


def extended_data(element: ET.Element) -> dict[str, str]:
    """Flatten an ExtendedData block.

    Handles both ``<Data name="..."><value>`` entries and the namespaced
    elements NHC embeds directly (``<tc:centerLat>``).
    """
    block = child(element, "ExtendedData")
    if block is None:
        return {}
    values: dict[str, str] = {}
    for entry in block:
        name = _local(entry.tag)
        if name == "Data":
            values[entry.get("name", "")] = child_text(entry, "value")
        elif name == "SchemaData":
            for simple in entry:
                values[simple.get("name", "")] = (simple.text or "").strip()
        else:
            values[name] = (entry.text or "").strip()
    return values


# ============================================================================
# SPC watch boxes
# ============================================================================


def issued_from_token(name: str, now: datetime) -> datetime:
    """Resolve a ``ddHHmmZ`` token against the current UTC month.

    A day-of-month ahead of ``now`` belongs to the previous month.

    Example:
        >>> now = datetime(2024, 6, 1, 3, tzinfo=UTC)
        >>> issued_from_token("WW 212 TORNADO 312155Z - 010400Z", now).isoformat()
        '2024-05-31T21:55:00+00:00'
    """
    match = _ISSUED_TOKEN_RE.search(name)
    if match is None:
        raise DecodeError(f"No issuance token in {name!r}", source="kml.watch_box")
    day, hour, minute = (int(g) for g in match.groups())
    year, month = now.year, now.month
    if day > now.day:
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    try:
        return datetime(year, month, day, hour, minute, tzinfo=UTC)
    except ValueError as e:
        raise DecodeError(f"Bad issuance token in {name!r}", source="kml.watch_box") from e


def decode_watch_box_placemark(placemark: ET.Element, now: datetime | None = None) -> WatchBox:
    """Decode one SPC watch placemark.

    Raises:
        DecodeError: If the number or issuance time is missing.
    """
    name = child_text(placemark, "name")
    match = _WATCH_NAME_RE.search(name)
    if match is None:
        raise DecodeError(f"No watch number in placemark {name!r}", source="kml.watch_box")
    style = child_text(placemark, "styleUrl").lstrip("#")
    try:
        kind = WatchKind.from_code(style) if style else None
    except ValueError:
        kind = None
    polygon = placemark_polygon(placemark) or Polygon()
    lower = name.lower()
    try:
        return WatchBox(
            number=int(match.group(1)),
            name=name,
            kind=kind,
            style=style,
            issued=issued_from_token(name, now or datetime.now(UTC)),
            is_pds="pds" in lower or "particularly dangerous situation" in lower,
            polygon=polygon,
            center=centroid(polygon.coordinates),
        )
    except ValueError as e:
        raise DecodeError(f"Invalid watch placemark {name!r}: {e}", source="kml.watch_box") from e


def decode_watch_boxes(text: str, now: datetime | None = None) -> list[WatchBox]:
    """Decode every watch placemark in one per-watch KML document."""
    root = parse_document(text)
    return decode_batch(
        iter_elements(root, "Placemark"),
        lambda placemark: decode_watch_box_placemark(placemark, now),
        "kml.watch_box",
    )


# ============================================================================
# SPC mesoscale discussions
# ============================================================================


def _description_lines(placemark: ET.Element) -> list[str]:
    raw = child_text(placemark, "description")
    text = BeautifulSoup(_BREAK_RE.sub("\n", raw), "html.parser").get_text()
    return [line.strip() for line in text.strip().splitlines() if line.strip()]


def decode_mesoscale_placemark(placemark: ET.Element) -> MesoscaleDiscussion:
    """Decode an SPC MD placemark from its description lines.

    The description carries, in order: the product URL, the full name,
    the issuance stamp, the areas affected and the concerning line.

    Raises:
        DecodeError: If the description is missing required lines.
    """
    lines = _description_lines(placemark)
    if len(lines) < 4:
        raise DecodeError("Mesoscale discussion description is truncated", source="kml.md")
    url = lines[0].split(None, 1)[1].strip() if " " in lines[0] else ""
    full_name = lines[1]
    words = full_name.split()
    if len(words) < 3 or not words[2].isdigit():
        raise DecodeError(f"No discussion number in {full_name!r}", source="kml.md")
    issued_text = lines[2].split(":", 1)[1].strip() if ":" in lines[2] else lines[2]
    areas = re.sub(r"^areas affected[.:\s]*", "", lines[3], flags=re.IGNORECASE)
    polygon = placemark_polygon(placemark) or Polygon()
    try:
        return MesoscaleDiscussion(
            number=int(words[2]),
            full_name=full_name,
            url=url,
            issued=parse_issued_line(issued_text),
            issued_text=issued_text,
            areas_affected=areas,
            concerning=classify_concerning(lines[4]) if len(lines) >= 5 else "",
            polygon=polygon,
        )
    except ValueError as e:
        raise DecodeError(f"Invalid mesoscale discussion {full_name!r}: {e}", source="kml.md") from e


def decode_mesoscale_discussions(text: str) -> list[MesoscaleDiscussion]:
    root = parse_document(text)
    return decode_batch(iter_elements(root, "Placemark"), decode_mesoscale_placemark, "kml.md")


# ============================================================================
# NHC
# ============================================================================

_NHC_TIME_FORMATS = ("%I:%M %p %z %a %b %d", "%I%M %p %z %a %b %d %Y", "%I:%M %p %z %a %b %d %Y")


def _nhc_time(value: str, now: datetime) -> datetime | None:
    cleaned, zone = replace_timezone(" ".join(value.split()))
    if not zone:
        return None
    for fmt in _NHC_TIME_FORMATS:
        try:
            parsed = datetime.strptime(cleaned, fmt)
        except ValueError:
            continue
        if "%Y" not in fmt:
            parsed = parsed.replace(year=now.year)
        return parsed
    logger.debug("Unrecognised NHC time %r", value)
    return None


def _leading_int(value: str) -> int | None:
    match = re.match(r"\s*(\d+)", value)
    return int(match.group(1)) if match else None


def decode_active_storms(text: str, now: datetime | None = None) -> list[TropicalCyclone]:
    """Decode ``nhc_active.kml``; only Atlantic and East Pacific folders hold storms."""
    root = parse_document(text)
    now = now or datetime.now(UTC)
    storms = []
    for folder in iter_elements(root, "Folder"):
        folder_id = folder.get("id", "")
        if "at" not in folder_id and "ep" not in folder_id:
            continue
        data = extended_data(folder)
        if not data.get("name"):
            continue
        try:
            lat, lon = data.get("centerLat"), data.get("centerLon")
            storms.append(
                TropicalCyclone(
                    name=data["name"],
                    storm_type=data.get("type", ""),
                    wallet=data.get("wallet", ""),
                    center=GeoPoint(latitude=float(lat), longitude=float(lon)) if lat and lon else None,
                    observed_at=_nhc_time(data.get("dateTime", ""), now),
                    movement=data.get("movement", ""),
                    minimum_pressure_mb=_leading_int(data.get("minimumPressure", "")),
                    max_sustained_winds_mph=_leading_int(data.get("maxSustainedWind", "")),
                    headline=data.get("headline", ""),
                )
            )
        except ValueError as e:
            logger.warning("Skipping NHC storm folder %s: %s", folder_id, e)
    return storms


def decode_disturbances(text: str, basin: str = "") -> list[TropicalDisturbance]:
    """Decode a tropical weather outlook KML."""
    root = parse_document(text)
    disturbances = []
    for placemark in iter_elements(root, "Placemark"):
        data = extended_data(placemark)
        if not data:
            continue
        try:
            disturbances.append(
                TropicalDisturbance(
                    basin=basin,
                    index=_leading_int(data.get("Disturbance", "")) or 0,
                    two_day_percentage=data.get("2day_percentage", ""),
                    two_day_category=data.get("2day_category", ""),
                    seven_day_percentage=data.get("7day_percentage", ""),
                    seven_day_category=data.get("7day_category", ""),
                    discussion=data.get("Discussion", ""),
                    polygon=placemark_polygon(placemark),
                    point=placemark_point(placemark),
                )
            )
        except (DecodeError, ValueError) as e:
            logger.warning("Skipping NHC disturbance: %s", e)
    return disturbances
