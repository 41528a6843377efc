"""Text heuristics layered over the structured NWS alert fields.

The NWS feed carries a structured message type, but forecasters often
signal the real state of an alert only in free text ("the storm has
weakened below severe limits", "the tornado warning has been
cancelled"). The functions here read that text and return a refined
classification. They are best-effort: none of them changes the decoded
record, and all of them tolerate missing fields.

Example:
    >>> from datetime import datetime, timezone
    >>> from stormspine.models.warning import WeatherWarning
    >>> w = WeatherWarning(
    ...     id="a",
    ...     event="Severe Thunderstorm Warning",
    ...     sent=datetime(2024, 5, 1, tzinfo=timezone.utc),
    ...     description="The storm which prompted the warning has weakened below severe limits.",
    ... )
    >>> classify_transition(w)
    <AlertLifecycle.UPDATE: 'update'>
"""

from __future__ import annotations

import logging

from stormspine.models.base import AlertLifecycle
from stormspine.models.warning import WeatherWarning
from stormspine.parsers.text import contains_any

logger = logging.getLogger(__name__)

KNOTS_TO_MPH = 1.151

TORNADO_WARNING = "Tornado Warning"
SEVERE_THUNDERSTORM_WARNING = "Severe Thunderstorm Warning"

TORNADO_EMERGENCY = "Tornado Emergency"
PDS_TORNADO_WARNING = "PDS Tornado Warning"
DERECHO_WARNING = "Derecho Warning"

DERECHO_MIN_GUST_MPH = 70.0
DERECHO_MAX_HAIL_INCHES = 1.25
DERECHO_MIN_SPEED_MPH = 50.0


def classify_transition(warning: WeatherWarning) -> AlertLifecycle:
    """Resolve the lifecycle transition to announce for a warning.

    Starts from the feed's message type. A description saying the storm
    fell "below severe limits" or was "allowed to expire" makes it an
    update; one saying the alert was "canceled" or "cancelled" makes it a
    cancellation, which wins over the update phrases.

    Example:
        >>> from datetime import datetime, timezone
        >>> w = WeatherWarning(
        ...     id="a",
        ...     event="Tornado Warning",
        ...     sent=datetime(2024, 5, 1, tzinfo=timezone.utc),
        ...     description="The tornado warning will be allowed to expire. It has been cancelled.",
        ... )
        >>> classify_transition(w)
        <AlertLifecycle.CANCEL: 'cancel'>
    """
    transition = warning.lifecycle
    if contains_any(warning.description, "below severe limits", "allowed to expire"):
        transition = AlertLifecycle.UPDATE
    if contains_any(warning.description, "canceled", "cancelled"):
        transition = AlertLifecycle.CANCEL
    return transition


def storm_speed_mph(motion: str) -> float | None:
    """Storm speed from an NWS ``eventMotionDescription`` parameter.

    The parameter looks like
    ``2024-05-01T00:05:00-00:00...storm...245DEG...43KT...35.1,-97.2``;
    the fourth ``...``-separated field is the speed in knots.

    Example:
        >>> round(storm_speed_mph("2024-05-01T00:05:00-00:00...storm...245DEG...43KT...35.1,-97.2"), 2)
        49.49
        >>> storm_speed_mph("") is None
        True
    """
    fields = (motion or "").split("...")
    if len(fields) < 4:
        return None
    try:
        knots = float(fields[3].upper().replace("KT", "").strip())
    except ValueError:
        return None
    return knots * KNOTS_TO_MPH


def is_derecho(warning: WeatherWarning) -> bool:
    """Whether a severe thunderstorm warning describes a derecho-like line.

    Requires all of: a CMAM long text describing storms "along a line",
    gusts of at least 70 mph, hail under 1.25 in (missing hail counts as
    none), storm motion of at least 50 mph and an instruction warning of
    "widespread wind damage". Experimental.
    """
    if warning.event != SEVERE_THUNDERSTORM_WARNING:
        return False
    speed = storm_speed_mph(warning.event_motion_description)
    if speed is None or warning.max_wind_gust is None:
        return False
    hail = warning.max_hail_size or 0.0
    return (
        contains_any(warning.cmam_long_text, "along a line")
        and warning.max_wind_gust >= DERECHO_MIN_GUST_MPH
        and hail < DERECHO_MAX_HAIL_INCHES
        and speed >= DERECHO_MIN_SPEED_MPH
        and contains_any(warning.instruction, "widespread wind damage")
    )


def custom_warning_name(warning: WeatherWarning) -> str | None:
    """Enhanced display name for a warning, or None to keep the NWS name.

    Example:
        >>> from datetime import datetime, timezone
        >>> w = WeatherWarning(
        ...     id="a",
        ...     event="Tornado Warning",
        ...     sent=datetime(2024, 5, 1, tzinfo=timezone.utc),
        ...     description="...THIS IS A PARTICULARLY DANGEROUS SITUATION...",
        ... )
        >>> custom_warning_name(w)
        'PDS Tornado Warning'
    """
    if warning.event == TORNADO_WARNING:
        if contains_any(warning.description, "tornado emergency"):
            return TORNADO_EMERGENCY
        if contains_any(warning.description, "particularly dangerous situation"):
            return PDS_TORNADO_WARNING
        return None
    if is_derecho(warning):
        logger.debug("Warning %s meets derecho criteria", warning.id)
        return DERECHO_WARNING
    return None
