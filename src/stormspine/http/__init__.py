"""StormSpine HTTP utilities.

Provides rate limiting, retry logic, and KMZ helpers for HTTP operations.

Example:
    >>> from stormspine.http import RateLimiter, HttpClient
    >>>
    >>> limiter = RateLimiter(rate=10.0)  # 10 requests/second
    >>> await limiter.acquire()
    >>>
    >>> async with HttpClient(rate_limit=10.0) as client:
    ...     stations = await client.get_json("https://api.weather.gov/radar/stations")
"""

from stormspine.http.client import HttpClient, HttpClientError, RateLimitError, extract_kml
from stormspine.http.rate_limiter import RateLimiter

__all__ = [
    "HttpClient",
    "HttpClientError",
    "RateLimitError",
    "RateLimiter",
    "extract_kml",
]
