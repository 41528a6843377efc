"""SPC storm report source."""

from __future__ import annotations

from datetime import date, timedelta

from stormspine.adapter.base import BaseSource
from stormspine.core.clock import Clock
from stormspine.core.exceptions import InvalidDateError
from stormspine.http.client import HttpClient
from stormspine.models.report import ReportType, StormReport
from stormspine.parsers import spc

TODAY_URL = "https://www.spc.noaa.gov/climo/reports/today_raw_{kind}.csv"
ARCHIVE_URL = "https://www.spc.noaa.gov/climo/reports/{day:%y%m%d}_rpts_raw_{kind}.csv"


class ReportSource(BaseSource):
    """Preliminary tornado, wind and hail reports."""

    def __init__(self, http: HttpClient | None = None, clock: Clock | None = None) -> None:
        super().__init__("spc.reports", http=http, clock=clock)

    def convective_day(self) -> date:
        """The SPC convective day in progress (12Z to 12Z)."""
        now = self.now()
        return now.date() if now.hour >= 12 else now.date() - timedelta(days=1)

    async def fetch_reports(self, report_type: ReportType, day: date | None = None) -> list[StormReport]:
        """Fetch reports for the current convective day or a past one.

        Raises:
            InvalidDateError: If ``day`` is after the current convective day.
        """
        today = self.convective_day()
        if day is not None and day > today:
            raise InvalidDateError(f"{day.isoformat()} is in the future")
        if day is None or day == today:
            url, report_day = TODAY_URL.format(kind=report_type.value), today
        else:
            url, report_day = ARCHIVE_URL.format(day=day, kind=report_type.value), day

        self._start()
        text = await self._get_text(url)
        return self._finish(spc.decode_storm_reports(text, report_type, report_day))
