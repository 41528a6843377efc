"""Mesoscale discussion source."""

from __future__ import annotations

import asyncio
import logging

from stormspine.adapter.base import BaseSource
from stormspine.core.clock import Clock
from stormspine.core.exceptions import DecodeError
from stormspine.http.client import HttpClient
from stormspine.models.mesoscale import MesoscaleDiscussion
from stormspine.parsers import kml

logger = logging.getLogger(__name__)

ACTIVE_MDS_URL = "https://www.spc.noaa.gov/products/md/ActiveMD.kmz"


class MesoscaleSource(BaseSource):
    """Active SPC mesoscale discussions.

    ``ActiveMD.kmz`` only links to one archive per discussion, so every
    discussion costs one extra request; those run concurrently.
    """

    def __init__(self, http: HttpClient | None = None, clock: Clock | None = None) -> None:
        super().__init__("spc.mesoscale", http=http, clock=clock)

    async def fetch_active_mesoscale_discussions(self) -> list[MesoscaleDiscussion]:
        self._start()
        document = await self._get_kml(ACTIVE_MDS_URL)
        hrefs = self._decode(kml.network_link_hrefs, document)
        results = await asyncio.gather(*(self._get_kml(href) for href in hrefs), return_exceptions=True)

        discussions: dict[int, MesoscaleDiscussion] = {}
        errors = 0
        for href, result in zip(hrefs, results, strict=True):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                errors += 1
                logger.warning("Skipping discussion archive %s: %s", href, result)
                continue
            try:
                decoded = kml.decode_mesoscale_discussions(result)
            except DecodeError as e:
                errors += 1
                logger.warning("Skipping discussion archive %s: %s", href, e)
                continue
            for md in decoded:
                discussions.setdefault(md.number, md)
        return self._finish(discussions.values(), errors)
