"""Base data source implementation.

Every upstream provider family gets one source class built on
BaseSource, which owns (or borrows) the shared HttpClient, wraps
transport failures as FeedError and tracks per-fetch metadata.

Example:
    >>> from stormspine.adapter.base import BaseSource
    >>> hasattr(BaseSource, "last_fetch_at")
    True
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any

from stormspine.core.clock import Clock, utc_now
from stormspine.core.exceptions import DecodeError, FeedError, NotFoundError
from stormspine.http.client import HttpClient, HttpClientError

logger = logging.getLogger(__name__)


class BaseSource:
    """Base class for data sources.

    Example:
        >>> class RadarLikeSource(BaseSource):
        ...     async def fetch_everything(self):
        ...         payload = await self._get_json("https://api.weather.gov/radar/stations")
        ...         return self._finish(payload["features"])
    """

    def __init__(
        self,
        name: str,
        http: HttpClient | None = None,
        clock: Clock | None = None,
    ) -> None:
        """Initialize the base source.

        Args:
            name: Source name used in logs and FeedError.source.
            http: Shared client; when omitted the source creates and owns one.
            clock: Returns the current UTC time.
        """
        self._name = name
        self._owns_http = http is None
        self._http = http if http is not None else HttpClient()
        self._clock = clock or utc_now

        # Metadata tracking
        self._last_fetch_at: datetime | None = None
        self._last_fetch_count: int = 0
        self._last_fetch_errors: int = 0

    @property
    def name(self) -> str:
        """Source name."""
        return self._name

    @property
    def http(self) -> HttpClient:
        return self._http

    @property
    def last_fetch_at(self) -> datetime | None:
        """When the last fetch completed."""
        return self._last_fetch_at

    @property
    def last_fetch_count(self) -> int:
        """Number of records from the last fetch."""
        return self._last_fetch_count

    @property
    def last_fetch_errors(self) -> int:
        """Number of records or sub-fetches skipped in the last fetch."""
        return self._last_fetch_errors

    @property
    def info(self) -> dict[str, Any]:
        """Source information."""
        return {
            "name": self._name,
            "last_fetch_at": self._last_fetch_at,
            "last_fetch_count": self._last_fetch_count,
            "last_fetch_errors": self._last_fetch_errors,
        }

    def now(self) -> datetime:
        return self._clock()

    async def close(self) -> None:
        """Close the HTTP client if this source created it."""
        if self._owns_http:
            await self._http.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Transport helpers: every transport failure becomes a FeedError
    # ------------------------------------------------------------------

    def _wrap(self, e: Exception) -> FeedError:
        return FeedError(f"{self._name}: {e}", source=self._name, cause=e)

    async def _get_json(self, url: str, **kwargs: Any) -> Any:
        try:
            return await self._http.get_json(url, **kwargs)
        except HttpClientError as e:
            raise self._not_found_or_wrap(e, url) from e

    async def _get_text(self, url: str, **kwargs: Any) -> str:
        try:
            return await self._http.get_text(url, **kwargs)
        except HttpClientError as e:
            raise self._not_found_or_wrap(e, url) from e

    async def _get_kml(self, url: str, **kwargs: Any) -> str:
        try:
            return await self._http.get_kml(url, **kwargs)
        except HttpClientError as e:
            raise self._not_found_or_wrap(e, url) from e

    def _not_found_or_wrap(self, e: HttpClientError, url: str) -> Exception:
        if e.status_code == 404:
            return self._not_found(url)
        return self._wrap(e)

    def _not_found(self, url: str) -> Exception:
        """Exception raised for a 404; subclasses narrow the type."""
        return NotFoundError(f"{self._name}: {url} does not exist")

    def _decode(self, decoder: Callable[..., Any], *args: Any) -> Any:
        """Run a whole-payload decoder, turning DecodeError into FeedError."""
        try:
            return decoder(*args)
        except DecodeError as e:
            raise FeedError(f"{self._name}: {e}", source=self._name, cause=e) from e

    def _start(self) -> None:
        self._last_fetch_count = 0
        self._last_fetch_errors = 0

    def _finish(self, records: Iterable[Any], errors: int = 0) -> list[Any]:
        """Record fetch metadata and return the records as a list."""
        result = list(records)
        self._last_fetch_count = len(result)
        self._last_fetch_errors += errors
        self._last_fetch_at = self._clock()
        logger.debug("%s fetched %d records (%d errors)", self._name, len(result), self._last_fetch_errors)
        return result
