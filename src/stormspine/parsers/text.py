"""Free-text helpers shared by the decoders.

Example:
    >>> from stormspine.models.watch import WatchKind
    >>> extract_watch_number("...TORNADO WATCH 212 REMAINS VALID UNTIL 9 PM", WatchKind.TORNADO)
    212
    >>> classify_concerning("CONCERNING...SEVERE POTENTIAL...WATCH LIKELY")
    'Severe Potential'
"""

from __future__ import annotations

import re
from datetime import datetime

from stormspine.core.exceptions import DecodeError
from stormspine.models.watch import WatchKind

_WATCH_NUMBER_PATTERNS = {
    WatchKind.TORNADO: re.compile(r"tornado\s+watch\s+(?:number\s+)?(\d+)", re.IGNORECASE),
    WatchKind.SEVERE_THUNDERSTORM: re.compile(
        r"severe\s+thunderstorm\s+watch\s+(?:number\s+)?(\d+)", re.IGNORECASE
    ),
}

# Offsets for the abbreviations SPC uses in issuance lines.
TIMEZONE_OFFSETS: dict[str, str] = {
    "AST": "-0400",
    "ADT": "-0300",
    "GMT": "+0000",
    "UTC": "+0000",
    "EST": "-0500",
    "EDT": "-0400",
    "CST": "-0600",
    "CDT": "-0500",
    "MST": "-0700",
    "MDT": "-0600",
    "PST": "-0800",
    "PDT": "-0700",
    "AZOT": "-0100",
    "AZOST": "+0000",
    "CVT": "-0100",
    "HST": "-1000",
    "AKST": "-0900",
    "AKDT": "-0800",
}


def extract_watch_number(text: str, kind: WatchKind) -> int:
    """Find the watch number following ``"<kind> watch"`` in free text.

    Raises:
        DecodeError: If the text never names a watch of that kind.
    """
    match = _WATCH_NUMBER_PATTERNS[kind].search(text or "")
    if match is None:
        raise DecodeError(f"No {kind.label.lower()} number in text", source="text.watch_number")
    return int(match.group(1))


def replace_timezone(text: str) -> tuple[str, str]:
    """Replace a timezone abbreviation with its numeric offset.

    Returns the rewritten text and the abbreviation that was replaced
    (empty when none was found).

    Example:
        >>> replace_timezone("0345 PM CDT Tue May 21 2024")
        ('0345 PM -0500 Tue May 21 2024', 'CDT')
    """
    for token in text.split():
        offset = TIMEZONE_OFFSETS.get(token.upper())
        if offset is not None:
            return re.sub(rf"\b{re.escape(token)}\b", offset, text, count=1), token.upper()
    return text, ""


def parse_issued_line(text: str) -> datetime:
    """Parse an SPC issuance stamp such as ``"0345 PM CDT Tue May 21 2024"``.

    Example:
        >>> parse_issued_line("0345 PM CDT Tue May 21 2024").isoformat()
        '2024-05-21T15:45:00-05:00'

    Raises:
        DecodeError: If the stamp is not in the SPC format.
    """
    cleaned, zone = replace_timezone(" ".join(text.split()))
    if not zone:
        raise DecodeError(f"Unknown timezone in issuance line {text!r}", source="text.issued")
    try:
        return datetime.strptime(cleaned, "%I%M %p %z %a %b %d %Y")
    except ValueError as e:
        raise DecodeError(f"Bad issuance line {text!r}: {e}", source="text.issued") from e


def classify_concerning(line: str) -> str:
    """Normalize a mesoscale discussion ``Concerning`` line.

    Example:
        >>> classify_concerning("Concerning...Tornado Watch 212...")
        'Concerning Tornado Watch 212'
        >>> classify_concerning("Concerning...Heavy snow")
        'Heavy Snow'
    """
    lower = line.lower()
    if "severe potential" in lower:
        return "Severe Potential"
    if "tornado watch" in lower:
        return "Concerning Tornado Watch " + re.sub(r"[^0-9]", "", line)
    if "severe thunderstorm watch" in lower:
        return "Concerning Severe Thunderstorm Watch " + re.sub(r"[^0-9]", "", line)
    if "snow" in lower:
        return "Heavy Snow"
    if "freezing rain" in lower:
        return "Freezing Rain"
    if "blizzard" in lower:
        return "Blizzard"
    return ""


def contains_any(text: str, *phrases: str) -> bool:
    """Case-insensitive containment test for any phrase."""
    lower = (text or "").lower()
    return any(phrase in lower for phrase in phrases)
