"""SPC convective outlook source.

Example:
    >>> from stormspine.adapter.outlooks import OutlookSource
    >>> async with OutlookSource() as source:
    ...     day1 = await source.fetch_categorical_outlook(day=1)
    ...     tornado = await source.fetch_tornado_outlook(day=1)
"""

from __future__ import annotations

from stormspine.adapter.base import BaseSource
from stormspine.core.clock import Clock
from stormspine.core.exceptions import InvalidOutlookDayError, OutlookNotFoundError
from stormspine.http.client import HttpClient
from stormspine.models.outlook import OutlookKind, RiskArea
from stormspine.parsers import spc

OUTLOOK_URL = "https://www.spc.noaa.gov/products/outlook/day{day}otlk_{kind}.nolyr.geojson"
EXTENDED_OUTLOOK_URL = "https://www.spc.noaa.gov/products/exper/day4-8/day{day}prob.nolyr.geojson"

# Valid days per product
_DAY_RANGES = {
    OutlookKind.CATEGORICAL: range(1, 4),
    OutlookKind.PROBABILISTIC: range(4, 9),
    OutlookKind.TORNADO: range(1, 3),
    OutlookKind.WIND: range(1, 3),
    OutlookKind.HAIL: range(1, 3),
}


class OutlookSource(BaseSource):
    """Latest SPC outlooks as RiskArea contours."""

    def __init__(self, http: HttpClient | None = None, clock: Clock | None = None) -> None:
        super().__init__("spc.outlooks", http=http, clock=clock)

    async def fetch_outlook(self, kind: OutlookKind, day: int) -> list[RiskArea]:
        """Fetch one outlook product.

        Raises:
            InvalidOutlookDayError: If the product is not issued for ``day``.
            OutlookNotFoundError: If SPC has not published the product.
            FeedError: On transport or decode failure.
        """
        days = _DAY_RANGES[kind]
        if day not in days:
            raise InvalidOutlookDayError(
                f"Day {day} is not a valid {kind.name.lower()} outlook day ({days.start}-{days.stop - 1})"
            )
        if kind is OutlookKind.PROBABILISTIC:
            url = EXTENDED_OUTLOOK_URL.format(day=day)
        else:
            url = OUTLOOK_URL.format(day=day, kind=kind.value)

        self._start()
        payload = await self._get_json(url)
        return self._finish(self._decode(spc.decode_outlook, payload, kind, day))

    def _not_found(self, url: str) -> Exception:
        return OutlookNotFoundError(f"Outlook {url} does not exist")

    async def fetch_categorical_outlook(self, day: int = 1) -> list[RiskArea]:
        return await self.fetch_outlook(OutlookKind.CATEGORICAL, day)

    async def fetch_extended_outlook(self, day: int = 4) -> list[RiskArea]:
        """Day 4-8 probabilistic outlook."""
        return await self.fetch_outlook(OutlookKind.PROBABILISTIC, day)

    async def fetch_tornado_outlook(self, day: int = 1) -> list[RiskArea]:
        return await self.fetch_outlook(OutlookKind.TORNADO, day)

    async def fetch_wind_outlook(self, day: int = 1) -> list[RiskArea]:
        return await self.fetch_outlook(OutlookKind.WIND, day)

    async def fetch_hail_outlook(self, day: int = 1) -> list[RiskArea]:
        return await self.fetch_outlook(OutlookKind.HAIL, day)
