"""Batch decoding with per-record failure isolation."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from stormspine.core.exceptions import DecodeError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def decode_batch(items: Iterable[Any], decoder: Callable[[Any], T], source: str) -> list[T]:
    """Decode every item, skipping (and logging) the ones that fail.

    Example:
        >>> def positive(value):
        ...     if value <= 0:
        ...         raise DecodeError("not positive")
        ...     return value
        >>> decode_batch([1, -1, 2], positive, "numbers")
        [1, 2]
    """
    decoded: list[T] = []
    for item in items:
        try:
            decoded.append(decoder(item))
        except DecodeError as e:
            logger.warning("Skipping %s record: %s", source, e)
    return decoded
