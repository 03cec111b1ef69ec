"""Shared fixtures for KidLearn tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from kidlearn.engine.adaptive import PerformanceSnapshot
from kidlearn.engine.controller import DifficultyController
from kidlearn.state.store import MemorySettingsStore


class FakeClock:
    """Advances one minute per call so adjustment stamps are distinguishable."""

    def __init__(self) -> None:
        self.now = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(minutes=1)
        return self.now


def make_snapshot(
    accuracy: float = 0.75,
    speed: float = 0.6,
    engagement: float = 0.7,
    attempts: int = 2,
    hints_used: int = 0,
    activity: str = "a",
) -> PerformanceSnapshot:
    """A snapshot that triggers none of the threshold rules by default."""
    return PerformanceSnapshot(
        timestamp="2024-03-01T09:00:00+00:00",
        module="reading",
        activity=activity,
        accuracy=accuracy,
        speed=speed,
        engagement=engagement,
        time_spent=30.0,
        attempts=attempts,
        hints_used=hints_used,
    )


@pytest.fixture
def snapshot_factory():
    return make_snapshot


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemorySettingsStore()


@pytest.fixture
def controller(store, clock):
    return DifficultyController(store=store, clock=clock)


@pytest.fixture
def fast_controller(store, clock):
    """Undamped controller so each call can move a whole level."""
    return DifficultyController(
        store=store, learning_curve=1.0, adjustment_sensitivity=1.0, clock=clock
    )
