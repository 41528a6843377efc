"""Custom exceptions.

StormSpine uses a hierarchy of exceptions to separate whole-feed failures
from single-record decode failures:

Example:
    >>> from stormspine.core.exceptions import FeedError, StormSpineError
    >>> isinstance(FeedError("alerts endpoint down"), StormSpineError)
    True
    >>> try:
    ...     raise FeedError("timeout", source="nws.alerts")
    ... except StormSpineError as e:
    ...     print(f"Caught: {type(e).__name__} from {e.source}")
    Caught: FeedError from nws.alerts
"""

from __future__ import annotations

from typing import Any


class StormSpineError(Exception):
    """Base exception for StormSpine.

    Example:
        >>> from stormspine.core.exceptions import StormSpineError
        >>> e = StormSpineError("something went wrong")
        >>> str(e)
        'something went wrong'
    """


class FeedError(StormSpineError):
    """A whole upstream feed could not be fetched or parsed.

    Example:
        >>> from stormspine.core.exceptions import FeedError
        >>> err = FeedError("Connection failed", source="spc.watch_boxes")
        >>> err.source
        'spc.watch_boxes'
    """

    def __init__(
        self,
        message: str,
        source: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.source = source
        self.cause = cause


class DecodeError(StormSpineError):
    """A single upstream record could not be decoded.

    Siblings in the same batch are still processed.

    Example:
        >>> from stormspine.core.exceptions import DecodeError
        >>> err = DecodeError("missing 'sent'", source="nws.alert")
        >>> err.source
        'nws.alert'
    """

    def __init__(
        self,
        message: str,
        source: str | None = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.source = source
        self.payload = payload


class ConfigurationError(StormSpineError):
    """Arguments or settings are invalid.

    Example:
        >>> from stormspine.core.exceptions import ConfigurationError
        >>> raise ConfigurationError("bad basin")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ConfigurationError: bad basin
    """


class InvalidOutlookDayError(ConfigurationError):
    """Outlook day is outside the range the product is issued for."""


class InvalidDateError(ConfigurationError):
    """Requested date predates the product archive or is malformed."""


class NotFoundError(StormSpineError):
    """Requested product does not exist."""


class OutlookNotFoundError(NotFoundError):
    """The requested outlook has not been issued."""


class WatchNotFoundError(NotFoundError):
    """The watch number does not exist for the requested year."""
