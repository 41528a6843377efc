"""Tests for PeriodicTimer."""

from __future__ import annotations

import asyncio
import logging

import pytest

from stormspine.scheduler import PeriodicTimer, TimerState


class Counter:
    def __init__(self) -> None:
        self.calls = 0

    async def __call__(self) -> None:
        self.calls += 1


async def wait_for_calls(counter: Counter, calls: int) -> None:
    async def poll() -> None:
        while counter.calls < calls:
            await asyncio.sleep(0.001)

    await asyncio.wait_for(poll(), timeout=2.0)


# =============================================================================
# Creation
# =============================================================================


class TestTimerCreation:
    def test_starts_stopped(self) -> None:
        timer = PeriodicTimer(Counter(), interval=1.0)
        assert timer.state is TimerState.STOPPED
        assert timer.tick_count == 0

    @pytest.mark.parametrize("interval", [0, -1.0])
    def test_interval_must_be_positive(self, interval: float) -> None:
        with pytest.raises(ValueError, match="interval must be positive"):
            PeriodicTimer(Counter(), interval=interval)

    def test_start_requires_running_loop(self) -> None:
        with pytest.raises(RuntimeError):
            PeriodicTimer(Counter(), interval=1.0).start()


# =============================================================================
# Lifecycle
# =============================================================================


class TestTimerLifecycle:
    async def test_ticks_immediately_then_periodically(self) -> None:
        counter = Counter()
        timer = PeriodicTimer(counter, interval=0.01)

        timer.start()
        await wait_for_calls(counter, 3)
        await timer.stop()

        assert timer.state is TimerState.STOPPED
        assert timer.tick_count >= 3

    async def test_first_tick_waits_without_tick_on_start(self) -> None:
        counter = Counter()
        timer = PeriodicTimer(counter, interval=60.0, tick_on_start=False)

        timer.start()
        await asyncio.sleep(0.02)

        assert counter.calls == 0
        await timer.stop()

    async def test_start_is_idempotent(self) -> None:
        counter = Counter()
        timer = PeriodicTimer(counter, interval=60.0)

        timer.start()
        timer.start()
        await wait_for_calls(counter, 1)
        await asyncio.sleep(0.02)

        assert counter.calls == 1
        await timer.stop()

    async def test_pause_and_resume(self) -> None:
        counter = Counter()
        timer = PeriodicTimer(counter, interval=0.01)
        timer.start()
        await wait_for_calls(counter, 1)

        timer.pause()
        assert timer.state is TimerState.PAUSED
        await asyncio.sleep(0.02)
        paused_at = counter.calls
        await asyncio.sleep(0.05)
        assert counter.calls == paused_at

        timer.start()
        assert timer.state is TimerState.RUNNING
        await wait_for_calls(counter, paused_at + 1)
        await timer.stop()

    async def test_stop_is_idempotent(self) -> None:
        timer = PeriodicTimer(Counter(), interval=0.01)
        await timer.stop()
        timer.start()
        await timer.stop()
        await timer.stop()
        assert timer.state is TimerState.STOPPED

    async def test_ticks_do_not_overlap(self) -> None:
        active = 0
        overlap = False
        done = Counter()

        async def slow() -> None:
            nonlocal active, overlap
            active += 1
            overlap = overlap or active > 1
            await asyncio.sleep(0.02)
            active -= 1
            done.calls += 1

        timer = PeriodicTimer(slow, interval=0.001)
        timer.start()
        await wait_for_calls(done, 3)
        await timer.stop()

        assert overlap is False


# =============================================================================
# Failure handling
# =============================================================================


class TestTimerFailures:
    async def test_callback_failure_logged_and_ticking_continues(self, caplog) -> None:
        counter = Counter()

        async def flaky() -> None:
            await counter()
            if counter.calls == 1:
                raise RuntimeError("feed exploded")

        timer = PeriodicTimer(flaky, interval=0.01, name="flaky")
        with caplog.at_level(logging.ERROR, logger="stormspine.scheduler.timer"):
            timer.start()
            await wait_for_calls(counter, 2)
            await timer.stop()

        assert "flaky tick 1 failed" in caplog.text
        assert "feed exploded" in caplog.text
