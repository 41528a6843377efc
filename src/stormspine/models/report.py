"""Local storm report model."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import Field

from stormspine.models.base import StormSpineModel


class ReportType(str, Enum):
    """SPC storm report category; the value is the CSV file infix."""

    TORNADO = "torn"
    WIND = "wind"
    HAIL = "hail"


class StormReport(StormSpineModel):
    """A preliminary storm report.

    ``magnitude`` is an F/EF rating for tornadoes (``None`` when unknown),
    a gust in mph for wind and a size in inches for hail.
    """

    report_type: ReportType
    time: datetime
    magnitude: float | None = None
    location: str = ""
    county: str = ""
    state: str = ""
    latitude: float = Field(default=0.0, ge=-90, le=90)
    longitude: float = Field(default=0.0, ge=-180, le=180)
    remarks: str = ""
