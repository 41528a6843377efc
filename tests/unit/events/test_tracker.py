"""Tests for the identity and freshness trackers."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from stormspine.events.tracker import (
    MesoscaleTracker,
    SeenSet,
    WarningTracker,
    WatchBoxTracker,
    WatchTracker,
    _Tracker,
    is_thunderstorm_statement,
)
from stormspine.models.base import AlertLifecycle
from stormspine.models.mesoscale import MesoscaleDiscussion
from stormspine.models.warning import WeatherWarning
from stormspine.models.watch import Watch, WatchBox, WatchKind

START = datetime(2024, 5, 1, tzinfo=UTC)


def watch(number: int, sent: datetime, status: AlertLifecycle = AlertLifecycle.NEW_ISSUE) -> Watch:
    return Watch(number=number, kind=WatchKind.TORNADO, sent=sent, status=status)


def box(number: int, issued: datetime) -> WatchBox:
    return WatchBox(number=number, issued=issued)


def discussion(number: int, issued: datetime) -> MesoscaleDiscussion:
    return MesoscaleDiscussion(number=number, issued=issued)


def warning(alert_id: str, sent: datetime, event: str = "Tornado Warning", description: str = "") -> WeatherWarning:
    return WeatherWarning(id=alert_id, event=event, sent=sent, description=description)


# =============================================================================
# SeenSet
# =============================================================================


class TestSeenSet:
    def test_add_keeps_first_time(self) -> None:
        seen: SeenSet[int] = SeenSet()

        assert seen.add(1, START) is True
        assert seen.add(1, START + timedelta(hours=1)) is False
        assert seen.first_seen(1) == START
        assert 1 in seen
        assert len(seen) == 1

    def test_discard(self) -> None:
        seen: SeenSet[str] = SeenSet()
        seen.add("a", START)

        assert seen.discard("a") is True
        assert seen.discard("a") is False
        assert seen.first_seen("a") is None

    def test_evict_is_strict(self) -> None:
        seen: SeenSet[int] = SeenSet()
        seen.add(1, START)
        seen.add(2, START + timedelta(hours=1))

        assert seen.evict_older_than(START) == []
        assert seen.evict_older_than(START + timedelta(minutes=1)) == [1]
        assert list(seen) == [2]

    def test_snapshot_is_a_copy(self) -> None:
        seen: SeenSet[int] = SeenSet()
        seen.add(1, START)
        snapshot = seen.snapshot()
        seen.clear()
        assert snapshot == {1: START}
        assert len(seen) == 0


# =============================================================================
# Watches
# =============================================================================


class TestWatchTracker:
    def test_first_tick_then_duplicate(self) -> None:
        """Watch 100 is announced once, then absorbed."""
        tracker = WatchTracker()
        w = watch(100, START + timedelta(minutes=5))

        assert tracker.admit(w, START, now=START + timedelta(minutes=6)).is_new is True
        assert tracker.admit(w, START, now=START + timedelta(minutes=16)).is_new is False

    def test_stale_watch_after_eviction_is_not_reannounced(self) -> None:
        tracker = WatchTracker()
        w = watch(100, START + timedelta(minutes=5))
        tracker.admit(w, START, now=START + timedelta(minutes=6))

        later = START + timedelta(hours=25, minutes=5)
        assert tracker.sweep(later) == [100]
        assert 100 not in tracker.seen

        # Same old sent-time: outside the freshness window
        assert tracker.admit(w, START, now=later).is_new is False

    def test_reissued_number_after_eviction_is_new(self) -> None:
        tracker = WatchTracker()
        tracker.admit(watch(100, START + timedelta(minutes=5)), START, now=START + timedelta(minutes=6))
        later = START + timedelta(days=3)
        tracker.sweep(later)

        reissued = watch(100, later - timedelta(minutes=1))
        assert tracker.admit(reissued, START, now=later).is_new is True

    def test_eviction_boundary(self) -> None:
        tracker = WatchTracker()
        sent = START + timedelta(hours=1)
        tracker.admit(watch(7, sent), START, now=sent)

        assert tracker.sweep(sent + timedelta(days=1)) == []
        assert tracker.sweep(sent + timedelta(days=1, seconds=1)) == [7]

    def test_pre_existing_watch_absorbed(self) -> None:
        tracker = WatchTracker()
        old = watch(50, START - timedelta(hours=2))

        assert tracker.admit(old, START, now=START).is_new is False
        assert 50 in tracker.seen

    def test_sent_equal_to_start_is_not_new(self) -> None:
        assert WatchTracker().admit(watch(51, START), START, now=START).is_new is False

    @pytest.mark.parametrize("status", [AlertLifecycle.UPDATE, AlertLifecycle.CANCEL])
    def test_updates_recorded_without_announcement(self, status: AlertLifecycle) -> None:
        tracker = WatchTracker()
        sent = START + timedelta(minutes=10)

        assert tracker.admit(watch(60, sent, status), START, now=sent).is_new is False
        assert 60 in tracker.seen
        # A later new-issue record of the same number is already known
        assert tracker.admit(watch(60, sent), START, now=sent).is_new is False

    def test_batch(self) -> None:
        tracker = WatchTracker()
        sent = START + timedelta(minutes=1)
        batch = [watch(1, sent), watch(2, START - timedelta(minutes=1)), watch(3, sent)]

        assert [w.number for w in tracker.admit_batch(batch, START, now=sent)] == [1, 3]
        assert len(tracker) == 3


# =============================================================================
# Watch boxes and mesoscale discussions
# =============================================================================


class TestBoxAndDiscussionTrackers:
    def test_box_new_once(self) -> None:
        tracker = WatchBoxTracker()
        b = box(212, START + timedelta(minutes=1))
        assert tracker.admit(b, START, START).is_new is True
        assert tracker.admit(b, START, START).is_new is False

    def test_pre_existing_recorded(self) -> None:
        tracker = MesoscaleTracker()
        assert tracker.admit(discussion(800, START - timedelta(hours=1)), START, START).is_new is False
        assert 800 in tracker.seen

    def test_seen_sets_are_independent(self) -> None:
        watches, boxes = WatchTracker(), WatchBoxTracker()
        sent = START + timedelta(minutes=5)

        assert watches.admit(watch(42, sent), START, sent).is_new is True
        assert boxes.admit(box(42, sent), START, sent).is_new is True
        assert MesoscaleTracker().admit(discussion(42, sent), START, sent).is_new is True

    def test_tracker_base_requires_admit(self) -> None:
        class Incomplete(_Tracker):
            pass

        with pytest.raises(TypeError):
            Incomplete()


# =============================================================================
# Warnings
# =============================================================================


class TestWarningTracker:
    def test_new_once(self) -> None:
        tracker = WarningTracker()
        w = warning("urn:1", START + timedelta(minutes=1))
        now = START + timedelta(minutes=2)

        assert tracker.admit(w, START, now).is_new is True
        assert tracker.admit(w, START, now).is_new is False

    def test_pre_existing_recorded_silently(self) -> None:
        tracker = WarningTracker()
        w = warning("urn:old", START - timedelta(minutes=30))

        assert tracker.admit(w, START, START).is_new is False
        assert "urn:old" in tracker.seen

    def test_thunderstorm_statement_is_reannounced_after_six_hours(self) -> None:
        """Known quirk: an aged-out statement still in the feed is announced again."""
        tracker = WarningTracker()
        sent = START + timedelta(minutes=5)
        statement = warning(
            "ABC123",
            sent,
            event="Special Weather Statement",
            description="A strong thunderstorm will impact portions of central Oklahoma.",
        )

        assert tracker.admit(statement, START, sent).is_new is True
        assert tracker.admit(statement, START, sent + timedelta(hours=5, minutes=59)).is_new is False

        at_seven_hours = tracker.admit(statement, START, sent + timedelta(hours=7))
        assert at_seven_hours.is_new is True
        assert at_seven_hours.evicted is True

        # Every later poll evicts and re-announces it again
        assert tracker.admit(statement, START, sent + timedelta(hours=7, minutes=1)).is_new is True

    def test_other_warnings_are_retained(self) -> None:
        tracker = WarningTracker()
        sent = START + timedelta(minutes=5)
        flood = warning("urn:flood", sent, event="Flood Warning", description="thunderstorm rainfall")
        statement = warning("urn:sws", sent, event="Special Weather Statement", description="Dense fog")

        for w in (flood, statement):
            tracker.admit(w, START, sent)
            assert tracker.admit(w, START, sent + timedelta(days=3)).is_new is False

    def test_is_thunderstorm_statement(self) -> None:
        assert is_thunderstorm_statement(
            warning("a", START, event="Special Weather Statement", description="THUNDERSTORMS with gusty winds")
        )
        assert not is_thunderstorm_statement(warning("b", START, event="Severe Thunderstorm Warning"))
