"""Scheduling primitives."""

from stormspine.scheduler.timer import PeriodicTimer, TimerState

__all__ = ["PeriodicTimer", "TimerState"]
