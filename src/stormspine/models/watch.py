"""Watch models.

A convective watch reaches us twice: as NWS alert records (one per
forecast zone, carrying the lifecycle status) and as an SPC watch box
(the official polygon). Both are keyed by the watch number.

Example:
    >>> from datetime import datetime, timezone
    >>> from stormspine.models.watch import Watch, WatchKind
    >>> w = Watch(number=100, kind=WatchKind.TORNADO, sent=datetime(2024, 5, 1, tzinfo=timezone.utc))
    >>> w.name
    'Tornado Watch 100'
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import Field

from stormspine.models.base import AlertLifecycle, GeoPoint, Polygon, StormSpineModel, centroid

NO_DETAILS_MESSAGE = "Newly issued. No details are available yet."


class WatchKind(str, Enum):
    """Kind of convective watch.

    Example:
        >>> WatchKind.SEVERE_THUNDERSTORM.label
        'Severe Thunderstorm Watch'
        >>> WatchKind.from_code("TOR")
        <WatchKind.TORNADO: 'tornado'>
    """

    TORNADO = "tornado"
    SEVERE_THUNDERSTORM = "severe_thunderstorm"

    @property
    def label(self) -> str:
        return "Tornado Watch" if self is WatchKind.TORNADO else "Severe Thunderstorm Watch"

    @property
    def event(self) -> str:
        """Event name used by the NWS alerts endpoint."""
        return self.label.lower()

    @classmethod
    def from_code(cls, code: str) -> WatchKind:
        """Map an SPC/IEM type code (``TOR``/``SVR``) or a KML style name."""
        normalized = code.strip().lstrip("#").lower()
        if normalized.startswith("tor"):
            return cls.TORNADO
        if normalized.startswith(("svr", "sev", "ts")):
            return cls.SEVERE_THUNDERSTORM
        raise ValueError(f"Unknown watch type code: {code!r}")


class WatchHazard(StormSpineModel):
    """One hazard probability from the watch probability table."""

    chance: int = Field(default=0, ge=0, le=100, description="Probability in percent")
    category: str = Field(default="", description="Low / Moderate / High")


class WatchHazards(StormSpineModel):
    """Hazard probabilities published for a watch.

    Example:
        >>> WatchHazards.placeholder().message
        'Newly issued. No details are available yet.'
    """

    message: str = ""
    is_pds: bool = False
    tornadoes: WatchHazard = Field(default_factory=WatchHazard)
    ef2_plus_tornadoes: WatchHazard = Field(default_factory=WatchHazard)
    severe_wind: WatchHazard = Field(default_factory=WatchHazard)
    wind_65kt_plus: WatchHazard = Field(default_factory=WatchHazard)
    severe_hail: WatchHazard = Field(default_factory=WatchHazard)
    hail_2in_plus: WatchHazard = Field(default_factory=WatchHazard)

    @classmethod
    def placeholder(cls) -> WatchHazards:
        """Hazards for a watch whose probability page is not populated yet."""
        return cls(message=NO_DETAILS_MESSAGE)

    def __str__(self) -> str:
        pds = "PDS | " if self.is_pds else ""
        return (
            f"{pds}Tornadoes: {self.tornadoes.chance}% | EF2+ Tornadoes: {self.ef2_plus_tornadoes.chance}% | "
            f"Severe Wind: {self.severe_wind.chance}% | 65 kt+ Wind: {self.wind_65kt_plus.chance}% | "
            f"Severe Hail: {self.severe_hail.chance}% | 2\"+ Hail: {self.hail_2in_plus.chance}%"
        )


class CountyInfo(StormSpineModel):
    """A forecast zone or county covered by a watch."""

    id: str
    name: str = ""
    state: str = ""
    forecast_offices: list[str] = Field(default_factory=list)
    time_zone: str = ""
    geometry: list[Polygon] = Field(default_factory=list, description="Every part of a multi-part zone")

    @property
    def points(self) -> list[tuple[float, float]]:
        """Outer-ring points of every part."""
        return [point for polygon in self.geometry for point in polygon.coordinates]

    def __str__(self) -> str:
        return f"{self.name} county, {self.state} - {self.time_zone} - {self.id}"


class Watch(StormSpineModel):
    """A tornado or severe thunderstorm watch built from NWS alert records."""

    number: int = Field(..., ge=1, description="Watch number, unique within a year")
    kind: WatchKind
    sent: datetime = Field(..., description="Authoritative issuance time")
    effective: datetime | None = None
    onset: datetime | None = None
    expires: datetime | None = None
    ends: datetime | None = None
    status: AlertLifecycle = AlertLifecycle.NEW_ISSUE
    sender: str = ""
    headline: str = ""
    description: str = ""
    hazards: WatchHazards | None = None
    counties: list[CountyInfo] = Field(default_factory=list)
    center: GeoPoint | None = None

    @property
    def name(self) -> str:
        pds = "PDS " if self.hazards is not None and self.hazards.is_pds else ""
        return f"{pds}{self.kind.label} {self.number}"

    def __str__(self) -> str:
        if self.hazards is None:
            return self.name
        return f"{self.name} | {self.hazards}"


class WatchBox(StormSpineModel):
    """The SPC polygon and metadata for an issued watch.

    Example:
        >>> from datetime import datetime, timezone
        >>> box = WatchBox(number=7, name="WW 7 TORNADO", issued=datetime(2024, 3, 14, 20, tzinfo=timezone.utc))
        >>> box.number, box.is_pds
        (7, False)
    """

    number: int = Field(..., ge=1)
    name: str = ""
    kind: WatchKind | None = None
    style: str = Field(default="", description="KML style or IEM type code")
    issued: datetime
    expires: datetime | None = None
    is_pds: bool = False
    max_hail_size_inches: float | None = None
    max_wind_gust_mph: float | None = None
    polygon: Polygon = Field(default_factory=Polygon)
    center: GeoPoint | None = None

    def __str__(self) -> str:
        pds = "PDS " if self.is_pds else ""
        label = self.kind.label if self.kind else (self.style or "Watch")
        return f"{pds}{label} {self.number} | Issued: {self.issued.isoformat()}"


def merge_watch_fragments(fragments: list[Watch]) -> list[Watch]:
    """Reduce per-zone watch fragments to one watch per number.

    Fragments sharing a number are merged in arrival order: the first
    fragment supplies the scalar fields and later fragments contribute
    their counties. The centroid is recomputed from every county point.

    Example:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2024, 5, 1, tzinfo=timezone.utc)
        >>> a = Watch(number=1, kind=WatchKind.TORNADO, sent=t, counties=[CountyInfo(id="OKC001")])
        >>> b = Watch(number=1, kind=WatchKind.TORNADO, sent=t, counties=[CountyInfo(id="OKC003")])
        >>> [c.id for c in merge_watch_fragments([a, b])[0].counties]
        ['OKC001', 'OKC003']
    """
    merged: dict[int, Watch] = {}
    for fragment in fragments:
        current = merged.get(fragment.number)
        if current is None:
            merged[fragment.number] = fragment.model_copy(update={"counties": list(fragment.counties)})
            continue
        current.counties = [*current.counties, *fragment.counties]
        if current.hazards is None and fragment.hazards is not None:
            current.hazards = fragment.hazards

    for watch in merged.values():
        points = [point for county in watch.counties for point in county.points]
        watch.center = centroid(points)
    return list(merged.values())
