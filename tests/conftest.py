"""Shared fixtures."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from datetime import UTC, datetime, timedelta

import httpx
import pytest

from stormspine.core.logging import ROOT_LOGGER
from stormspine.http.client import HttpClient


class FakeClock:
    """Controllable UTC clock."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> datetime:
        self.now += delta
        return self.now


@pytest.fixture(autouse=True)
def _restore_stormspine_logger() -> Iterator[None]:
    """Undo configure_logging so caplog keeps seeing stormspine records."""
    logger = logging.getLogger(ROOT_LOGGER)
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def start() -> datetime:
    return datetime(2024, 5, 1, tzinfo=UTC)


@pytest.fixture
def clock(start: datetime) -> FakeClock:
    return FakeClock(start)


@pytest.fixture
def make_http() -> Callable[..., HttpClient]:
    """Build an HttpClient whose requests are answered by ``handler``."""

    def factory(handler: Callable[[httpx.Request], httpx.Response], **kwargs) -> HttpClient:
        kwargs.setdefault("rate_limit", 1000.0)
        kwargs.setdefault("max_retries", 0)
        return HttpClient(transport=httpx.MockTransport(handler), **kwargs)

    return factory
