"""Rate limiter for controlling request frequency.

Keeps the fan-out of per-zone and per-watch lookups polite towards the
NWS and SPC servers.

Example:
    >>> from stormspine.http import RateLimiter
    >>>
    >>> limiter = RateLimiter(rate=10.0)  # 10 requests per second
    >>>
    >>> # In async code
    >>> await limiter.acquire()  # Waits if needed
    >>> # ... make request ...
"""

from __future__ import annotations

import asyncio
import time


class RateLimiter:
    """Minimum-interval rate limiter.

    Serialises callers through a lock so that concurrent fetches issued with
    ``asyncio.gather`` are still spaced at least ``1 / rate`` seconds apart.

    Attributes:
        rate: Maximum requests per second
        min_interval: Minimum interval between requests
    """

    def __init__(self, rate: float = 10.0):
        """Initialize rate limiter.

        Args:
            rate: Maximum requests per second (default: 10)

        Raises:
            ValueError: If rate is not positive.
        """
        if rate <= 0:
            raise ValueError(f"rate must be positive, got {rate}")
        self.rate = rate
        self.min_interval = 1.0 / rate
        self._last_request: float = 0.0
        self._lock = asyncio.Lock()

    async def acquire(self) -> float:
        """Wait until a request can be made.

        Returns:
            Time waited in seconds
        """
        async with self._lock:
            now = time.monotonic()
            elapsed = now - self._last_request
            wait_time = 0.0

            if elapsed < self.min_interval:
                wait_time = self.min_interval - elapsed
                await asyncio.sleep(wait_time)

            self._last_request = time.monotonic()
            return wait_time

    def reset(self) -> None:
        """Forget the last request time."""
        self._last_request = 0.0
