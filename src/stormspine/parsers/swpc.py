"""Decoders for Space Weather Prediction Center JSON products.

Results are sorted oldest first.

Example:
    >>> rows = [{"time_tag": "2024-05-11T02:00:00", "kp_index": 8, "estimated_kp": 8.67, "kp": "9-"}]
    >>> decode_kp_index(rows)[0].estimated_kp
    8.67
"""

from __future__ import annotations

from typing import Any

from stormspine.core.exceptions import DecodeError
from stormspine.models.space_weather import (
    AuroraForecast,
    AuroraPoint,
    KpIndex,
    ParticleFlux,
    RadioFlux,
    SolarWind,
    XrayFlux,
)
from stormspine.parsers.batch import decode_batch
from stormspine.parsers.geojson import parse_time


def _rows(payload: Any, source: str) -> list[Any]:
    if not isinstance(payload, list):
        raise DecodeError("Expected a JSON array", source=source)
    return payload


def _float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _record(row: Any, source: str) -> dict[str, Any]:
    if not isinstance(row, dict):
        raise DecodeError("Expected a JSON object row", source=source)
    return row


def decode_kp_index(payload: Any) -> list[KpIndex]:
    def decode(row: Any) -> KpIndex:
        row = _record(row, "swpc.kp")
        kp_index = _float(row.get("kp_index"))
        if kp_index is None:
            raise DecodeError("Kp row without kp_index", source="swpc.kp")
        return KpIndex(
            time=parse_time(row.get("time_tag"), "time_tag"),
            kp_index=kp_index,
            estimated_kp=_float(row.get("estimated_kp")),
            kp=str(row.get("kp") or ""),
        )

    return sorted(decode_batch(_rows(payload, "swpc.kp"), decode, "swpc.kp"), key=lambda r: r.time)


def decode_solar_wind(payload: Any) -> list[SolarWind]:
    """Decode the propagated solar wind table (first row is the header)."""
    rows = _rows(payload, "swpc.solar_wind")
    if not rows:
        return []
    header = [str(name) for name in rows[0]]
    try:
        time_col = header.index("time_tag")
    except ValueError as e:
        raise DecodeError("Solar wind table has no time_tag column", source="swpc.solar_wind") from e
    columns = {name: header.index(name) if name in header else None for name in ("speed", "density", "temperature")}

    def decode(row: Any) -> SolarWind:
        if not isinstance(row, list) or len(row) != len(header):
            raise DecodeError("Solar wind row does not match header", source="swpc.solar_wind")
        values = {name: _float(row[index]) if index is not None else None for name, index in columns.items()}
        return SolarWind(time=parse_time(row[time_col], "time_tag"), **values)

    return sorted(decode_batch(rows[1:], decode, "swpc.solar_wind"), key=lambda r: r.time)


def decode_radio_flux(payload: Any) -> list[RadioFlux]:
    def decode(row: Any) -> RadioFlux:
        row = _record(row, "swpc.f107")
        flux = _float(row.get("flux"))
        if flux is None:
            raise DecodeError("F10.7 row without flux", source="swpc.f107")
        return RadioFlux(
            time=parse_time(row.get("time_tag"), "time_tag"),
            frequency=_float(row.get("frequency")),
            flux=flux,
        )

    return sorted(decode_batch(_rows(payload, "swpc.f107"), decode, "swpc.f107"), key=lambda r: r.time)


def decode_aurora(payload: Any) -> AuroraForecast:
    """Decode the OVATION nowcast; longitudes are folded into -180..180."""
    if not isinstance(payload, dict):
        raise DecodeError("Expected a JSON object", source="swpc.aurora")
    points = []
    for entry in payload.get("coordinates") or []:
        if not isinstance(entry, list) or len(entry) < 3:
            continue
        try:
            lon, lat, probability = float(entry[0]), float(entry[1]), int(entry[2])
            points.append(AuroraPoint(latitude=lat, longitude=lon - 360 if lon > 180 else lon, probability=probability))
        except (TypeError, ValueError) as e:
            raise DecodeError(f"Bad aurora cell {entry!r}", source="swpc.aurora") from e
    return AuroraForecast(
        observation_time=parse_time(payload.get("Observation Time"), "Observation Time"),
        forecast_time=parse_time(payload.get("Forecast Time"), "Forecast Time"),
        points=points,
    )


def _flux_rows(payload: Any, source: str) -> list[tuple[Any, float, str]]:
    def decode(row: Any) -> tuple[Any, float, str]:
        row = _record(row, source)
        flux = _float(row.get("flux"))
        if flux is None:
            raise DecodeError("Row without flux", source=source)
        return parse_time(row.get("time_tag"), "time_tag"), flux, str(row.get("energy") or "")

    decoded = decode_batch(_rows(payload, source), decode, source)
    return sorted(decoded, key=lambda r: r[0])


def decode_particle_flux(payload: Any) -> list[ParticleFlux]:
    return [ParticleFlux(time=t, flux=f, energy=e) for t, f, e in _flux_rows(payload, "swpc.protons")]


def decode_xray_flux(payload: Any) -> list[XrayFlux]:
    return [XrayFlux(time=t, flux=f, energy=e) for t, f, e in _flux_rows(payload, "swpc.xrays")]
