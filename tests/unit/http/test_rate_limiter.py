"""Tests for stormspine.http.rate_limiter."""

from __future__ import annotations

import asyncio
import time

import pytest

from stormspine.http.rate_limiter import RateLimiter


class TestRateLimiter:
    def test_rejects_non_positive_rate(self) -> None:
        with pytest.raises(ValueError):
            RateLimiter(0)

    def test_min_interval(self) -> None:
        assert RateLimiter(rate=4.0).min_interval == 0.25

    async def test_first_acquire_does_not_wait(self) -> None:
        limiter = RateLimiter(rate=1.0)
        assert await limiter.acquire() == 0.0

    async def test_spaces_concurrent_callers(self) -> None:
        """Requests gathered together are still spaced by min_interval."""
        limiter = RateLimiter(rate=20.0)
        started = time.monotonic()
        await asyncio.gather(*(limiter.acquire() for _ in range(4)))
        assert time.monotonic() - started >= 3 * limiter.min_interval * 0.9

    async def test_reset(self) -> None:
        limiter = RateLimiter(rate=1.0)
        await limiter.acquire()
        limiter.reset()
        assert await limiter.acquire() == 0.0
