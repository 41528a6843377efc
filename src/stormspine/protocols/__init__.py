"""Protocol definitions for StormSpine collaborators."""

from stormspine.protocols.sources import MesoscaleFeed, WarningFeed, WatchFeed

__all__ = [
    "MesoscaleFeed",
    "WarningFeed",
    "WatchFeed",
]
