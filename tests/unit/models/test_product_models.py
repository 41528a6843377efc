"""Tests for the one-shot product models."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from stormspine.models.outlook import CategoricalRisk, OutlookKind, RiskArea
from stormspine.models.space_weather import (
    geomagnetic_storm_scale,
    radio_blackout_scale,
    solar_radiation_storm_scale,
)
from stormspine.models.warning import WeatherWarning


class TestWeatherWarning:
    def test_name_defaults_to_event(self) -> None:
        warning = WeatherWarning(id="a", event="Tornado Warning", sent=datetime(2024, 5, 1, tzinfo=UTC))
        assert warning.name == "Tornado Warning"

    def test_custom_name_kept(self) -> None:
        warning = WeatherWarning(
            id="a", event="Tornado Warning", name="Tornado Emergency", sent=datetime(2024, 5, 1, tzinfo=UTC)
        )
        assert warning.name == "Tornado Emergency"
        assert warning.event == "Tornado Warning"

    def test_str_includes_parameters(self) -> None:
        warning = WeatherWarning(
            id="a",
            event="Severe Thunderstorm Warning",
            sent=datetime(2024, 5, 1, tzinfo=UTC),
            max_wind_gust=70,
            max_wind_gust_units="MPH",
            max_hail_size=1.0,
        )
        assert str(warning) == "Severe Thunderstorm Warning | Max Wind Gust: 70 MPH | Max Hail Size: 1 in"


class TestRiskArea:
    def test_categorical(self) -> None:
        area = RiskArea(kind=OutlookKind.CATEGORICAL, day=1, risk=5)
        assert area.categorical is CategoricalRisk.ENHANCED
        assert area.categorical.label == "ENH"

    def test_probabilistic_has_no_category(self) -> None:
        assert RiskArea(kind=OutlookKind.TORNADO, day=1, risk=10).categorical is None

    def test_unknown_level(self) -> None:
        assert RiskArea(kind=OutlookKind.CATEGORICAL, day=1, risk=7).categorical is None


class TestSpaceWeatherScales:
    @pytest.mark.parametrize(
        "kp,expected",
        [(0.5, "Very Quiet"), (3.67, "Quiet"), (4.0, "Active"), (5.0, "G1"), (6.33, "G2"), (8.67, "G4"), (9.0, "G5")],
    )
    def test_geomagnetic(self, kp: float, expected: str) -> None:
        assert geomagnetic_storm_scale(kp) == expected

    @pytest.mark.parametrize("flux,expected", [(1.0, "None"), (10, "S1"), (150, "S2"), (2e5, "S5")])
    def test_solar_radiation(self, flux: float, expected: str) -> None:
        assert solar_radiation_storm_scale(flux) == expected

    @pytest.mark.parametrize("flux,expected", [(1e-6, "None"), (1e-5, "R1"), (6e-5, "R2"), (1e-4, "R3"), (5e-3, "R5")])
    def test_radio_blackout(self, flux: float, expected: str) -> None:
        assert radio_blackout_scale(flux) == expected
