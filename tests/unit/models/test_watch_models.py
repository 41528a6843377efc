"""Tests for stormspine.models.watch."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from stormspine.models.base import GeoPoint, Polygon
from stormspine.models.watch import (
    NO_DETAILS_MESSAGE,
    CountyInfo,
    Watch,
    WatchBox,
    WatchHazard,
    WatchHazards,
    WatchKind,
    merge_watch_fragments,
)

SENT = datetime(2024, 5, 1, 0, 5, tzinfo=UTC)


def county(zone: str, *points: tuple[float, float]) -> CountyInfo:
    return CountyInfo(id=zone, geometry=[Polygon(coordinates=list(points))])


class TestWatchKind:
    @pytest.mark.parametrize(
        "code,expected",
        [
            ("TOR", WatchKind.TORNADO),
            ("#tornado", WatchKind.TORNADO),
            ("SVR", WatchKind.SEVERE_THUNDERSTORM),
            ("severe", WatchKind.SEVERE_THUNDERSTORM),
            ("tstm", WatchKind.SEVERE_THUNDERSTORM),
        ],
    )
    def test_from_code(self, code: str, expected: WatchKind) -> None:
        assert WatchKind.from_code(code) is expected

    def test_unknown_code(self) -> None:
        with pytest.raises(ValueError):
            WatchKind.from_code("FFW")

    def test_event_name(self) -> None:
        assert WatchKind.TORNADO.event == "tornado watch"
        assert WatchKind.SEVERE_THUNDERSTORM.event == "severe thunderstorm watch"


class TestWatch:
    def test_name(self) -> None:
        watch = Watch(number=212, kind=WatchKind.SEVERE_THUNDERSTORM, sent=SENT)
        assert watch.name == "Severe Thunderstorm Watch 212"
        assert str(watch) == "Severe Thunderstorm Watch 212"

    def test_pds_name(self) -> None:
        watch = Watch(number=5, kind=WatchKind.TORNADO, sent=SENT, hazards=WatchHazards(is_pds=True))
        assert watch.name == "PDS Tornado Watch 5"

    def test_number_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            Watch(number=0, kind=WatchKind.TORNADO, sent=SENT)


class TestWatchHazards:
    def test_placeholder(self) -> None:
        hazards = WatchHazards.placeholder()
        assert hazards.message == NO_DETAILS_MESSAGE
        assert hazards.tornadoes.chance == 0

    def test_str(self) -> None:
        hazards = WatchHazards(tornadoes=WatchHazard(chance=70, category="High"))
        assert "Tornadoes: 70%" in str(hazards)

    def test_chance_range(self) -> None:
        with pytest.raises(ValidationError):
            WatchHazard(chance=101)


class TestMergeWatchFragments:
    """Per-zone fragments are reduced to one watch per number."""

    def test_counties_are_unioned(self) -> None:
        a = Watch(number=100, kind=WatchKind.TORNADO, sent=SENT, counties=[county("OKC001", (35.0, -97.0))])
        b = Watch(number=100, kind=WatchKind.TORNADO, sent=SENT, counties=[county("OKC003", (37.0, -99.0))])

        merged = merge_watch_fragments([a, b])

        assert len(merged) == 1
        assert [c.id for c in merged[0].counties] == ["OKC001", "OKC003"]
        assert merged[0].center == GeoPoint(latitude=36.0, longitude=-98.0)

    def test_center_uses_every_part_of_a_zone(self) -> None:
        island = CountyInfo(
            id="FLC087",
            geometry=[Polygon(coordinates=[(25.0, -81.0)]), Polygon(coordinates=[(27.0, -83.0)])],
        )
        merged = merge_watch_fragments([Watch(number=4, kind=WatchKind.TORNADO, sent=SENT, counties=[island])])
        assert merged[0].center == GeoPoint(latitude=26.0, longitude=-82.0)

    def test_first_fragment_wins_scalars(self) -> None:
        a = Watch(number=1, kind=WatchKind.TORNADO, sent=SENT, headline="first")
        b = Watch(number=1, kind=WatchKind.TORNADO, sent=SENT, headline="second")
        assert merge_watch_fragments([a, b])[0].headline == "first"

    def test_hazards_filled_from_later_fragment(self) -> None:
        hazards = WatchHazards(is_pds=True)
        a = Watch(number=1, kind=WatchKind.TORNADO, sent=SENT)
        b = Watch(number=1, kind=WatchKind.TORNADO, sent=SENT, hazards=hazards)
        assert merge_watch_fragments([a, b])[0].hazards == hazards

    def test_distinct_numbers_kept_in_order(self) -> None:
        fragments = [Watch(number=n, kind=WatchKind.TORNADO, sent=SENT) for n in (3, 1, 3, 2)]
        assert [w.number for w in merge_watch_fragments(fragments)] == [3, 1, 2]

    def test_no_geometry_leaves_center_unset(self) -> None:
        merged = merge_watch_fragments([Watch(number=1, kind=WatchKind.TORNADO, sent=SENT)])
        assert merged[0].center is None

    def test_inputs_not_mutated(self) -> None:
        a = Watch(number=1, kind=WatchKind.TORNADO, sent=SENT, counties=[county("A")])
        b = Watch(number=1, kind=WatchKind.TORNADO, sent=SENT, counties=[county("B")])
        merge_watch_fragments([a, b])
        assert [c.id for c in a.counties] == ["A"]


class TestWatchBox:
    def test_str(self) -> None:
        box = WatchBox(number=7, kind=WatchKind.TORNADO, is_pds=True, issued=SENT)
        assert str(box).startswith("PDS Tornado Watch 7")
