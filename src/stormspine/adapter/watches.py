"""Convective watch source.

Watches are assembled from three upstream products:

- NWS alerts (``/alerts/active?event=tornado%20watch``), one alert per
  zone group, each pointing at forecast-zone documents for geometry
- SPC watch probability pages (``wwNNNN.html``) for hazard odds
- SPC ``ActiveWW.kmz`` network links for the official watch boxes

Example:
    >>> from stormspine.adapter.watches import WatchSource
    >>> from stormspine.models.watch import WatchKind
    >>> async with WatchSource() as source:
    ...     tornado_watches = await source.fetch_active_watches(WatchKind.TORNADO)
    ...     boxes = await source.fetch_active_watch_boxes()
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from urllib.parse import quote

from stormspine.adapter.base import BaseSource
from stormspine.core.clock import Clock
from stormspine.core.exceptions import DecodeError, InvalidDateError, NotFoundError
from stormspine.http.client import HttpClient
from stormspine.models.watch import CountyInfo, Watch, WatchBox, WatchHazards, WatchKind, merge_watch_fragments
from stormspine.parsers import kml, nws, spc
from stormspine.parsers.geojson import features

logger = logging.getLogger(__name__)

ALERTS_URL = "https://api.weather.gov/alerts/active"
WATCH_PAGE_URL = "https://www.spc.noaa.gov/products/watch/{year}/ww{number:04d}.html"
ACTIVE_WATCHES_URL = "https://www.spc.noaa.gov/products/watch/ActiveWW.kmz"
ARCHIVED_WATCHES_URL = "https://mesonet.agron.iastate.edu/json/spcwatch.py"


class WatchSource(BaseSource):
    """Tornado and severe thunderstorm watches."""

    def __init__(self, http: HttpClient | None = None, clock: Clock | None = None) -> None:
        super().__init__("spc.watches", http=http, clock=clock)

    async def fetch_active_watches(self, kind: WatchKind) -> list[Watch]:
        """Fetch every active watch of one kind.

        Zone documents and probability pages are fetched concurrently.
        Each sub-fetch returns its own fragment; fragments are merged per
        watch number once all of them have arrived.

        Raises:
            FeedError: If the alerts endpoint cannot be fetched or decoded.
        """
        self._start()
        payload = await self._get_json(f"{ALERTS_URL}?event={quote(kind.event)}")
        alerts = self._decode(features, payload)

        pending: list[tuple[Watch, list[str]]] = []
        errors = 0
        for alert in alerts:
            try:
                watch = nws.decode_watch_alert(alert, kind)
            except DecodeError as e:
                errors += 1
                logger.warning("Skipping %s alert: %s", kind.event, e)
                continue
            zones = list((alert.get("properties") or {}).get("affectedZones") or [])
            pending.append((watch, zones))

        zone_urls = sorted({url for _, zones in pending for url in zones})
        counties = await asyncio.gather(*(self._fetch_zone(url) for url in zone_urls))
        by_url = dict(zip(zone_urls, counties, strict=True))
        errors += sum(1 for county in counties if county is None)

        fragments = [
            watch.model_copy(update={"counties": [by_url[url] for url in zones if by_url.get(url) is not None]})
            for watch, zones in pending
        ]
        watches = merge_watch_fragments(fragments)

        hazards = await asyncio.gather(*(self._hazards_or_none(watch) for watch in watches))
        for watch, watch_hazards in zip(watches, hazards, strict=True):
            watch.hazards = watch_hazards

        return self._finish(watches, errors)

    async def fetch_active_tornado_watches(self) -> list[Watch]:
        return await self.fetch_active_watches(WatchKind.TORNADO)

    async def fetch_active_severe_thunderstorm_watches(self) -> list[Watch]:
        return await self.fetch_active_watches(WatchKind.SEVERE_THUNDERSTORM)

    async def _fetch_zone(self, url: str) -> CountyInfo | None:
        try:
            return nws.decode_zone(await self._get_json(url))
        except Exception as e:
            logger.warning("Skipping zone %s: %s", url, str(e) or type(e).__name__)
            return None

    async def _hazards_or_none(self, watch: Watch) -> WatchHazards | None:
        try:
            return await self.fetch_watch_risks(watch.number, watch.sent.year)
        except Exception as e:
            logger.warning("No hazards for %s: %s", watch.name, str(e) or type(e).__name__)
            return None

    async def fetch_watch_risks(self, number: int, year: int) -> WatchHazards | None:
        """Fetch the hazard probabilities of a watch.

        Returns:
            None when the page does not exist, placeholder hazards when the
            page exists but is not populated yet.

        Raises:
            FeedError: If the page cannot be fetched or is malformed.
        """
        url = WATCH_PAGE_URL.format(year=year, number=number)
        try:
            html = await self._get_text(url)
        except NotFoundError:
            return None
        if not html.strip():
            return None
        return self._decode(spc.decode_watch_hazards, html)

    async def fetch_active_watch_boxes(self) -> list[WatchBox]:
        """Fetch the SPC watch boxes linked from ``ActiveWW.kmz``.

        Per-watch archives are downloaded concurrently; a failed archive
        is skipped.
        """
        self._start()
        document = await self._get_kml(ACTIVE_WATCHES_URL)
        hrefs = self._decode(kml.network_link_hrefs, document)
        results = await asyncio.gather(*(self._get_kml(href) for href in hrefs), return_exceptions=True)

        now = self.now()
        boxes: dict[int, WatchBox] = {}
        errors = 0
        for href, result in zip(hrefs, results, strict=True):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                errors += 1
                logger.warning("Skipping watch archive %s: %s", href, result)
                continue
            try:
                decoded = kml.decode_watch_boxes(result, now)
            except DecodeError as e:
                errors += 1
                logger.warning("Skipping watch archive %s: %s", href, e)
                continue
            for box in decoded:
                boxes.setdefault(box.number, box)
        return self._finish(boxes.values(), errors)

    async def fetch_archived_watch_boxes(self, day: date, hour: int | None = None) -> list[WatchBox]:
        """Fetch watches valid on a past day from the Iowa Environmental Mesonet.

        Args:
            day: UTC date.
            hour: UTC hour; when omitted all 24 hours are queried
                concurrently and de-duplicated by watch number.

        Raises:
            InvalidDateError: If the date is in the future or the hour is invalid.
        """
        if hour is not None and not 0 <= hour <= 23:
            raise InvalidDateError(f"Hour {hour} is not between 0 and 23")
        if day > self.now().date():
            raise InvalidDateError(f"{day.isoformat()} is in the future")

        self._start()
        hours = [hour] if hour is not None else list(range(24))
        payloads = await asyncio.gather(
            *(self._get_json(f"{ARCHIVED_WATCHES_URL}?ts={day:%Y%m%d}{h:02d}00&fmt=geojson") for h in hours)
        )
        boxes: dict[int, WatchBox] = {}
        for payload in payloads:
            for box in self._decode(spc.decode_archived_watches, payload):
                boxes.setdefault(box.number, box)
        return self._finish(sorted(boxes.values(), key=lambda b: b.number))
