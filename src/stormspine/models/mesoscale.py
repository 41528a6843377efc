"""Mesoscale discussion model."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from stormspine.models.base import Polygon, StormSpineModel


class MesoscaleDiscussion(StormSpineModel):
    """An SPC mesoscale discussion.

    Discussions are immutable snapshots keyed by their yearly number.

    Example:
        >>> from datetime import datetime, timezone
        >>> md = MesoscaleDiscussion(
        ...     number=812,
        ...     full_name="Mesoscale Discussion 812",
        ...     issued=datetime(2024, 5, 21, 20, 45, tzinfo=timezone.utc),
        ...     concerning="Severe Potential",
        ... )
        >>> str(md)
        'Mesoscale Discussion 812 | Type: Severe Potential | Issued: 2024-05-21T20:45:00+00:00 | More at: '
    """

    number: int = Field(..., ge=1, description="Mesoscale discussion number, unique within a year")
    full_name: str = ""
    url: str = ""
    issued: datetime
    issued_text: str = Field(default="", description="Issuance line as published")
    areas_affected: str = ""
    concerning: str = Field(default="", description="Normalized 'concerning' line")
    polygon: Polygon = Field(default_factory=Polygon)

    def __str__(self) -> str:
        return (
            f"{self.full_name} | Type: {self.concerning} | Issued: {self.issued.isoformat()} | More at: {self.url}"
        )
