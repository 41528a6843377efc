"""Space weather models and NOAA scale helpers.

Example:
    >>> geomagnetic_storm_scale(5.33)
    'G1'
    >>> solar_radiation_storm_scale(12.0)
    'S1'
    >>> radio_blackout_scale(2.1e-5)
    'R1'
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from stormspine.models.base import StormSpineModel


class KpIndex(StormSpineModel):
    """Planetary K index observation."""

    time: datetime
    kp_index: float
    estimated_kp: float | None = None
    kp: str = ""


class SolarWind(StormSpineModel):
    """Propagated solar wind observation."""

    time: datetime
    speed: float | None = Field(default=None, description="km/s")
    density: float | None = Field(default=None, description="protons/cm^3")
    temperature: float | None = Field(default=None, description="Kelvin")


class RadioFlux(StormSpineModel):
    """10.7 cm solar radio flux."""

    time: datetime
    frequency: float | None = None
    flux: float


class AuroraPoint(StormSpineModel):
    latitude: float
    longitude: float
    probability: int = Field(..., ge=0, le=100)


class AuroraForecast(StormSpineModel):
    """OVATION aurora nowcast."""

    observation_time: datetime
    forecast_time: datetime
    points: list[AuroraPoint] = Field(default_factory=list)


class ParticleFlux(StormSpineModel):
    """GOES integral proton flux."""

    time: datetime
    flux: float
    energy: str = ""


class XrayFlux(StormSpineModel):
    """GOES X-ray flux."""

    time: datetime
    flux: float
    energy: str = ""


def geomagnetic_storm_scale(kp: float) -> str:
    """NOAA G-scale for a Kp value.

    Example:
        >>> [geomagnetic_storm_scale(v) for v in (1, 3, 4.5, 9)]
        ['Very Quiet', 'Quiet', 'Active', 'G5']
    """
    if kp < 2:
        return "Very Quiet"
    if kp < 4:
        return "Quiet"
    if kp < 5:
        return "Active"
    if kp >= 9:
        return "G5"
    return f"G{int(kp) - 4}"


def solar_radiation_storm_scale(proton_flux: float) -> str:
    """NOAA S-scale for >=10 MeV proton flux in pfu."""
    for threshold, level in ((1e5, "S5"), (1e4, "S4"), (1e3, "S3"), (100, "S2"), (10, "S1")):
        if proton_flux >= threshold:
            return level
    return "None"


def radio_blackout_scale(xray_flux: float) -> str:
    """NOAA R-scale for 0.1-0.8 nm X-ray flux in W/m^2."""
    for threshold, level in ((2e-3, "R5"), (1e-3, "R4"), (1e-4, "R3"), (5e-5, "R2"), (1e-5, "R1")):
        if xray_flux >= threshold:
            return level
    return "None"
