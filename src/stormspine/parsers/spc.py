"""Decoders for Storm Prediction Center and Iowa Mesonet products.

Example:
    >>> from stormspine.models.outlook import OutlookKind
    >>> payload = {"features": [{
    ...     "properties": {"DN": 4, "LABEL": "SLGT", "LABEL2": "Slight Risk",
    ...                    "VALID": "202405211300", "EXPIRE": "202405221200",
    ...                    "ISSUE": "202405211254", "stroke": "#DDAA00", "fill": "#FFE066"},
    ...     "geometry": {"type": "Polygon", "coordinates": [[[-97.0, 35.0], [-96.0, 35.0], [-96.0, 36.0]]]},
    ... }]}
    >>> area = decode_outlook(payload, OutlookKind.CATEGORICAL, day=1)[0]
    >>> area.categorical.label
    'SLGT'
"""

from __future__ import annotations

import csv
import io
import logging
from datetime import UTC, date, datetime, time, timedelta
from typing import Any

from bs4 import BeautifulSoup

from stormspine.core.exceptions import DecodeError
from stormspine.models.base import Polygon, centroid
from stormspine.models.outlook import OutlookKind, RiskArea
from stormspine.models.report import ReportType, StormReport
from stormspine.models.watch import WatchBox, WatchHazard, WatchHazards, WatchKind
from stormspine.parsers.batch import decode_batch
from stormspine.parsers.geojson import (
    features,
    parse_compact_time,
    parse_time,
    polygons_from_geometry,
)

logger = logging.getLogger(__name__)

KNOTS_TO_MPH = 1.151

# Hazard order of the six probability links on a watch page
_HAZARD_FIELDS = (
    "tornadoes",
    "ef2_plus_tornadoes",
    "severe_wind",
    "wind_65kt_plus",
    "severe_hail",
    "hail_2in_plus",
)


def hazard_category(chance: int) -> str:
    """SPC wording for a watch probability.

    Example:
        >>> [hazard_category(c) for c in (2, 20, 40, 80)]
        ['Very Low', 'Low', 'Moderate', 'High']
    """
    if chance < 5:
        return "Very Low"
    if chance <= 20:
        return "Low"
    if chance <= 60:
        return "Moderate"
    return "High"


# ============================================================================
# Watch probability page
# ============================================================================


def decode_watch_hazards(html: str) -> WatchHazards:
    """Decode a ``wwNNNN.html`` watch probability page.

    A page without the probability table belongs to a watch that was
    issued moments ago, so it decodes to the placeholder hazards.

    Raises:
        DecodeError: If the table is present but incomplete.
    """
    soup = BeautifulSoup(html, "html.parser")
    table = soup.find("table", attrs={"width": "529"})
    if table is None:
        return WatchHazards.placeholder()

    links = table.select("a.wblack") or soup.select("a.wblack")
    if len(links) < len(_HAZARD_FIELDS):
        raise DecodeError(
            f"Expected {len(_HAZARD_FIELDS)} hazard links, found {len(links)}",
            source="spc.watch_risks",
        )

    hazards: dict[str, WatchHazard] = {}
    for field, link in zip(_HAZARD_FIELDS, links, strict=False):
        title = link.get("title", "")
        try:
            chance = int(str(title).split("%", 1)[0].strip())
        except ValueError as e:
            raise DecodeError(f"Bad hazard title {title!r}", source="spc.watch_risks") from e
        label = link.get_text(" ", strip=True)
        hazards[field] = WatchHazard(chance=chance, category=label or hazard_category(chance))

    is_pds = "particularly dangerous situation" in soup.get_text(" ").lower()
    return WatchHazards(is_pds=is_pds, **hazards)


# ============================================================================
# Outlooks
# ============================================================================


def _risk_value(props: dict[str, Any], kind: OutlookKind) -> int:
    raw = props.get("DN")
    if raw is None or raw == "":
        return 0
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 0
    if kind is not OutlookKind.CATEGORICAL and 0 < value < 1:
        value *= 100
    return round(value)


def decode_risk_area(feature: Any, kind: OutlookKind, day: int) -> RiskArea:
    """Decode one outlook contour."""
    if not isinstance(feature, dict):
        raise DecodeError("Outlook feature is not an object", source="spc.outlook")
    props = feature.get("properties") or {}
    label = str(props.get("LABEL") or "")
    try:
        return RiskArea(
            kind=kind,
            day=day,
            risk=_risk_value(props, kind),
            label=label,
            label2=str(props.get("LABEL2") or ""),
            valid=parse_compact_time(props["VALID"], "VALID") if props.get("VALID") else None,
            expire=parse_compact_time(props["EXPIRE"], "EXPIRE") if props.get("EXPIRE") else None,
            issue=parse_compact_time(props["ISSUE"], "ISSUE") if props.get("ISSUE") else None,
            stroke=str(props.get("stroke") or ""),
            fill=str(props.get("fill") or ""),
            is_significant=label.upper() == "SIGN",
            polygons=polygons_from_geometry(feature.get("geometry")),
        )
    except ValueError as e:
        raise DecodeError(f"Invalid outlook feature: {e}", source="spc.outlook") from e


def decode_outlook(payload: Any, kind: OutlookKind, day: int) -> list[RiskArea]:
    """Decode an outlook ``.nolyr.geojson`` product."""
    return decode_batch(
        features(payload),
        lambda feature: decode_risk_area(feature, kind, day),
        "spc.outlook",
    )


# ============================================================================
# Storm reports
# ============================================================================


def _magnitude(value: str, report_type: ReportType) -> float | None:
    value = value.strip()
    if not value or value.upper() == "UNK":
        return None
    try:
        magnitude = float(value)
    except ValueError:
        return None
    if report_type is ReportType.HAIL:
        # size is published in hundredths of an inch
        return magnitude / 100
    return magnitude


def decode_storm_reports(text: str, report_type: ReportType, day: date) -> list[StormReport]:
    """Decode an SPC raw storm report CSV.

    Report times are UTC within the convective day that starts at 12Z on
    ``day``; times before 1200 therefore fall on the following date.

    Example:
        >>> csv_text = "Time,Size,Location,County,State,Lat,Lon,Comments\\n1310,175,Norman,Cleveland,OK,35.2,-97.4,\\n"
        >>> report = decode_storm_reports(csv_text, ReportType.HAIL, date(2024, 5, 21))[0]
        >>> report.magnitude, report.time.isoformat()
        (1.75, '2024-05-21T13:10:00+00:00')
    """
    reports: list[StormReport] = []
    rows = csv.reader(io.StringIO(text))
    for row in rows:
        if not row or not row[0].strip().isdigit():
            # headers, and the blank separator lines SPC emits
            continue
        if len(row) < 7:
            logger.warning("Skipping short %s report row: %r", report_type.value, row)
            continue
        stamp = row[0].strip().zfill(4)
        try:
            clock = time(int(stamp[:2]), int(stamp[2:4]))
            report_day = day if clock.hour >= 12 else day + timedelta(days=1)
            reports.append(
                StormReport(
                    report_type=report_type,
                    time=datetime.combine(report_day, clock, tzinfo=UTC),
                    magnitude=_magnitude(row[1], report_type),
                    location=row[2],
                    county=row[3],
                    state=row[4],
                    latitude=float(row[5]),
                    longitude=float(row[6]),
                    remarks=",".join(row[7:]).strip(),
                )
            )
        except ValueError as e:
            logger.warning("Skipping %s report row %r: %s", report_type.value, row, e)
    return reports


# ============================================================================
# IEM archived watches
# ============================================================================


def decode_archived_watch(feature: Any) -> WatchBox:
    """Decode one IEM ``spcwatch.py`` feature into a WatchBox."""
    if not isinstance(feature, dict):
        raise DecodeError("Archived watch is not an object", source="iem.watch")
    props = feature.get("properties") or {}
    try:
        number = int(props["number"])
        code = str(props.get("type") or "")
        kind = WatchKind.from_code(code)
        is_pds = bool(props.get("is_pds"))
        polygons = polygons_from_geometry(feature.get("geometry"))
        polygon = polygons[0] if polygons else Polygon()
        gust_knots = props.get("max_wind_gust_knots")
        hail = props.get("max_hail_size")
        return WatchBox(
            number=number,
            name=f"{'PDS ' if is_pds else ''}{kind.label} {number}",
            kind=kind,
            style=code,
            issued=parse_time(props.get("issue"), "issue"),
            expires=parse_time(props.get("expire"), "expire") if props.get("expire") else None,
            is_pds=is_pds,
            max_hail_size_inches=float(hail) if hail is not None else None,
            max_wind_gust_mph=float(gust_knots) * KNOTS_TO_MPH if gust_knots is not None else None,
            polygon=polygon,
            center=centroid(polygon.coordinates),
        )
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise DecodeError(f"Invalid archived watch: {e}", source="iem.watch", payload=props) from e


def decode_archived_watches(payload: Any) -> list[WatchBox]:
    return decode_batch(features(payload), decode_archived_watch, "iem.watch")
