"""Logging setup.

Library modules only ever call ``logging.getLogger(__name__)``; this module
installs a single handler on the ``stormspine`` logger for applications and
the CLI.

Example:
    >>> from stormspine.core.config import Settings
    >>> from stormspine.core.logging import configure_logging
    >>> logger = configure_logging(Settings(log_format="json", log_level="WARNING"))
    >>> logger.name
    'stormspine'
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from rich.logging import RichHandler

if TYPE_CHECKING:
    from stormspine.core.config import Settings

ROOT_LOGGER = "stormspine"

_HANDLER_MARK = "_stormspine_handler"


class JsonFormatter(logging.Formatter):
    """Render each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(settings: Settings) -> logging.Logger:
    """Install the stormspine log handler.

    Calling this again replaces the handler it installed before, so level and
    format changes take effect without duplicating output.

    Args:
        settings: Source of ``log_level`` and ``log_format``.

    Returns:
        The ``stormspine`` logger.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            logger.removeHandler(handler)

    handler: logging.Handler
    if settings.log_format == "json":
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
    else:
        handler = RichHandler(show_path=False, rich_tracebacks=True)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    setattr(handler, _HANDLER_MARK, True)

    logger.addHandler(handler)
    logger.setLevel(settings.log_level.upper())
    logger.propagate = False
    return logger
