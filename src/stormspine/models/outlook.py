"""Convective outlook models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum, IntEnum

from pydantic import Field

from stormspine.models.base import Polygon, StormSpineModel


class OutlookKind(str, Enum):
    """Outlook product family."""

    CATEGORICAL = "cat"
    PROBABILISTIC = "prob"
    TORNADO = "torn"
    WIND = "wind"
    HAIL = "hail"


class CategoricalRisk(IntEnum):
    """Categorical risk level keyed by the GeoJSON ``DN`` value.

    Example:
        >>> CategoricalRisk(4).label
        'SLGT'
    """

    GENERAL_THUNDERSTORMS = 2
    MARGINAL = 3
    SLIGHT = 4
    ENHANCED = 5
    MODERATE = 6
    HIGH = 8

    @property
    def label(self) -> str:
        return _CATEGORICAL_LABELS[self]


_CATEGORICAL_LABELS = {
    CategoricalRisk.GENERAL_THUNDERSTORMS: "TSTM",
    CategoricalRisk.MARGINAL: "MRGL",
    CategoricalRisk.SLIGHT: "SLGT",
    CategoricalRisk.ENHANCED: "ENH",
    CategoricalRisk.MODERATE: "MDT",
    CategoricalRisk.HIGH: "HIGH",
}

TORNADO_PROBABILITIES = (2, 5, 10, 15, 30, 45, 60)
WIND_HAIL_PROBABILITIES = (5, 15, 30, 45, 60)


class RiskArea(StormSpineModel):
    """One contour of an SPC outlook.

    ``risk`` is the categorical ``DN`` level for categorical outlooks and
    the probability in percent for the probabilistic products.
    """

    kind: OutlookKind
    day: int = Field(..., ge=1, le=8)
    risk: int = Field(default=0, ge=0)
    label: str = ""
    label2: str = ""
    valid: datetime | None = None
    expire: datetime | None = None
    issue: datetime | None = None
    stroke: str = ""
    fill: str = ""
    is_significant: bool = False
    polygons: list[Polygon] = Field(default_factory=list)

    @property
    def categorical(self) -> CategoricalRisk | None:
        if self.kind is not OutlookKind.CATEGORICAL:
            return None
        try:
            return CategoricalRisk(self.risk)
        except ValueError:
            return None

    def __str__(self) -> str:
        return f"{self.label2} | {self.label} | Expires: {self.expire}, Issued: {self.issue}, Valid: {self.valid}"
