"""Events: poll the severe-weather feeds and announce what is new.

Example:
    >>> from stormspine.events import Dispatcher, EngineState, Events
    >>> Events().state is EngineState.STOPPED
    True
"""

from stormspine.events.classify import classify_transition, custom_warning_name
from stormspine.events.dispatch import Dispatcher, Subscription
from stormspine.events.engine import EngineState, Events
from stormspine.events.tracker import (
    Admission,
    MesoscaleTracker,
    SeenSet,
    WarningTracker,
    WatchBoxTracker,
    WatchTracker,
)

__all__ = [
    "Admission",
    "Dispatcher",
    "EngineState",
    "Events",
    "MesoscaleTracker",
    "SeenSet",
    "Subscription",
    "WarningTracker",
    "WatchBoxTracker",
    "WatchTracker",
    "classify_transition",
    "custom_warning_name",
]
