"""HTTP client with rate limiting and retry support.

Provides the async HTTP client every data source shares:
- Automatic rate limiting
- Retry with exponential backoff on 5xx, timeouts and transport errors
- KMZ download and KML extraction

Example:
    >>> from stormspine.http import HttpClient
    >>>
    >>> async with HttpClient(rate_limit=10.0) as client:
    ...     alerts = await client.get_json("https://api.weather.gov/alerts/active")
    ...     kml = await client.get_kml("https://www.spc.noaa.gov/products/md/ActiveMD.kmz")
"""

from __future__ import annotations

import asyncio
import io
import logging
import zipfile
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit

import httpx

from stormspine.http.rate_limiter import RateLimiter

if TYPE_CHECKING:
    from stormspine.core.config import Settings

logger = logging.getLogger(__name__)


class HttpClientError(Exception):
    """Base exception for HTTP client errors."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class RateLimitError(HttpClientError):
    """Raised when rate limited by server."""

    def __init__(self, retry_after: float):
        self.retry_after = retry_after
        super().__init__(f"Rate limited, retry after {retry_after}s", status_code=429)


DEFAULT_RETRY_AFTER = 10.0


def parse_retry_after(value: str | None, now: datetime | None = None) -> float:
    """Seconds to wait from a ``Retry-After`` header.

    The header is either a number of seconds or an HTTP-date. Missing or
    unreadable values give ``DEFAULT_RETRY_AFTER``; dates in the past give 0.

    Example:
        >>> parse_retry_after("3")
        3.0
        >>> parse_retry_after("Wed, 21 Oct 2015 07:28:00 GMT", datetime(2015, 10, 21, 7, 27, 30, tzinfo=UTC))
        30.0
        >>> parse_retry_after("soon")
        10.0
    """
    if not value:
        return DEFAULT_RETRY_AFTER
    try:
        return max(float(value), 0.0)
    except ValueError:
        pass
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return DEFAULT_RETRY_AFTER
    if when.tzinfo is None:
        when = when.replace(tzinfo=UTC)
    return max((when - (now or datetime.now(UTC))).total_seconds(), 0.0)


class HttpClient:
    """Async HTTP client with rate limiting and retry support.

    Example:
        >>> async with HttpClient(rate_limit=10.0) as client:
        ...     response = await client.get("https://api.weather.gov/radar/stations")

    Attributes:
        rate_limit: Requests per second limit
        user_agent: User-Agent header value
        timeout: Default request timeout in seconds
        max_retries: Maximum retry attempts
    """

    def __init__(
        self,
        base_url: str = "",
        rate_limit: float = 10.0,
        user_agent: str = "stormspine/0.1",
        timeout: float = 30.0,
        max_retries: int = 2,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize HTTP client.

        Args:
            base_url: Base URL for relative requests
            rate_limit: Maximum requests per second
            user_agent: User-Agent header
            timeout: Default request timeout
            max_retries: Maximum retry attempts on failure
            headers: Additional default headers
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        self._base_url = base_url
        self._rate_limiter = RateLimiter(rate_limit)
        self._user_agent = user_agent
        self._timeout = timeout
        self._max_retries = max_retries
        self._extra_headers = headers or {}
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> HttpClient:
        """Build a client from transport settings."""
        return cls(
            rate_limit=settings.rate_limit,
            user_agent=settings.user_agent,
            timeout=settings.request_timeout,
            max_retries=settings.max_retries,
            **kwargs,
        )

    @property
    def rate_limit(self) -> float:
        """Current rate limit (requests per second)."""
        return self._rate_limiter.rate

    @property
    def user_agent(self) -> str:
        """User-Agent header value."""
        return self._user_agent

    @property
    def timeout(self) -> float:
        """Default request timeout in seconds."""
        return self._timeout

    @property
    def max_retries(self) -> int:
        """Maximum retry attempts."""
        return self._max_retries

    @property
    def headers(self) -> dict[str, str]:
        """Default headers for requests."""
        return {
            "User-Agent": self._user_agent,
            "Accept-Encoding": "gzip, deflate",
            "Accept": "*/*",
            **self._extra_headers,
        }

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=self.headers,
                timeout=httpx.Timeout(self._timeout),
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> HttpClient:
        """Async context manager entry."""
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    async def _request(
        self,
        method: str,
        url: str,
        *,
        retry: bool = True,
        **kwargs: Any,
    ) -> httpx.Response:
        """Make a rate-limited request with retries.

        Args:
            method: HTTP method
            url: URL (relative to base_url or absolute)
            retry: Whether to retry on failure
            **kwargs: Additional arguments for httpx

        Returns:
            HTTP response

        Raises:
            RateLimitError: If rate limited by server
            HttpClientError: For other HTTP errors
        """
        client = await self._ensure_client()

        max_retries = self._max_retries if retry else 0
        last_error: Exception | None = None

        for attempt in range(max_retries + 1):
            await self._rate_limiter.acquire()

            try:
                response = await client.request(method, url, **kwargs)

                if response.status_code == 429:
                    retry_after = parse_retry_after(response.headers.get("Retry-After"))
                    if attempt < max_retries:
                        await asyncio.sleep(retry_after)
                        continue
                    raise RateLimitError(retry_after)

                response.raise_for_status()
                return response

            except httpx.HTTPStatusError as e:
                last_error = e
                status = e.response.status_code
                if status in (500, 502, 503, 504) and attempt < max_retries:
                    logger.debug("HTTP %s from %s, retrying (attempt %d)", status, url, attempt + 1)
                    await asyncio.sleep(2**attempt)
                    continue
                raise HttpClientError(f"HTTP {status}: {url}", status_code=status) from e

            except httpx.TimeoutException as e:
                last_error = e
                if attempt < max_retries:
                    await asyncio.sleep(2**attempt)
                    continue
                raise HttpClientError(f"Request timeout: {url}") from e

            except httpx.RequestError as e:
                last_error = e
                if attempt < max_retries:
                    await asyncio.sleep(2**attempt)
                    continue
                raise HttpClientError(f"Request failed: {e}") from e

        raise HttpClientError(f"Max retries exceeded: {last_error}")

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """Make a GET request.

        Args:
            url: URL (relative or absolute)
            **kwargs: Additional arguments for httpx

        Returns:
            HTTP response
        """
        return await self._request("GET", url, **kwargs)

    async def get_text(self, url: str, **kwargs: Any) -> str:
        """Get text content from URL."""
        response = await self.get(url, **kwargs)
        return response.text

    async def get_json(self, url: str, **kwargs: Any) -> Any:
        """Get JSON content from URL.

        Raises:
            HttpClientError: If the body is not valid JSON.
        """
        response = await self.get(url, **kwargs)
        try:
            return response.json()
        except ValueError as e:
            raise HttpClientError(f"Invalid JSON from {url}: {e}") from e

    async def get_bytes(self, url: str, **kwargs: Any) -> bytes:
        """Get binary content from URL."""
        response = await self.get(url, **kwargs)
        return response.content

    async def get_kml(self, url: str, **kwargs: Any) -> str:
        """Download a KMZ archive and return its KML document.

        The entry named after the archive (``ActiveMD.kmz`` -> ``ActiveMD.kml``)
        is preferred; otherwise the first ``.kml`` member is used.

        Args:
            url: KMZ URL

        Returns:
            KML text

        Raises:
            HttpClientError: If the download fails or the archive is unreadable.
        """
        payload = await self.get_bytes(url, **kwargs)
        return extract_kml(payload, PurePosixPath(urlsplit(url).path).name)


def extract_kml(payload: bytes, archive_name: str = "") -> str:
    """Return the KML document stored in a KMZ payload.

    Example:
        >>> import io, zipfile
        >>> buf = io.BytesIO()
        >>> with zipfile.ZipFile(buf, "w") as zf:
        ...     zf.writestr("ww0123.kml", "<kml/>")
        >>> extract_kml(buf.getvalue(), "ww0123.kmz")
        '<kml/>'
    """
    try:
        with zipfile.ZipFile(io.BytesIO(payload)) as archive:
            names = archive.namelist()
            preferred = str(PurePosixPath(archive_name).with_suffix(".kml")) if archive_name else ""
            if preferred in names:
                member = preferred
            else:
                kml_members = [n for n in names if n.lower().endswith(".kml")]
                if not kml_members:
                    raise HttpClientError(f"No KML document inside {archive_name or 'archive'}")
                member = kml_members[0]
            return archive.read(member).decode("utf-8", errors="replace")
    except zipfile.BadZipFile as e:
        raise HttpClientError(f"Corrupt KMZ archive {archive_name}: {e}") from e


@asynccontextmanager
async def http_client(
    base_url: str = "",
    **kwargs: Any,
) -> AsyncIterator[HttpClient]:
    """Context manager for HTTP client.

    Example:
        >>> async with http_client(rate_limit=10.0) as client:
        ...     text = await client.get_text("https://www.spc.noaa.gov/")
    """
    client = HttpClient(base_url=base_url, **kwargs)
    try:
        async with client:
            yield client
    finally:
        await client.close()


__all__ = [
    "HttpClient",
    "HttpClientError",
    "RateLimitError",
    "extract_kml",
    "http_client",
]
