"""Pytest configuration and fixtures for timelane tests."""

from __future__ import annotations

import random
from collections.abc import Callable
from datetime import date, timedelta

import pytest

from timelane.lanes import LaneAssignment, group_by_lane
from timelane.logger import reset_logger
from timelane.models import Priority, Tracker, TrackerType

MakeTracker = Callable[..., Tracker]


def _make_tracker(
    tracker_id: str,
    start: date,
    end: date,
    *,
    priority: Priority = Priority.MEDIUM,
    tracker_type: TrackerType = TrackerType.FEATURE,
    status: str = "",
) -> Tracker:
    return Tracker(
        id=tracker_id,
        title=f"Tracker {tracker_id}",
        type=tracker_type,
        start_date=start,
        end_date=end,
        priority=priority,
        status=status,
    )


@pytest.fixture
def make_tracker() -> MakeTracker:
    """Factory for trackers with a generated title."""
    return _make_tracker


@pytest.fixture
def random_trackers() -> Callable[[int, int], list[Tracker]]:
    """Factory for reproducible random tracker sets: (seed, count) -> trackers."""

    def _generate(seed: int, count: int) -> list[Tracker]:
        rng = random.Random(seed)
        priorities = list(Priority)
        base = date(2025, 1, 1)
        trackers: list[Tracker] = []
        for i in range(count):
            start = base + timedelta(days=rng.randint(0, 120))
            end = start + timedelta(days=rng.randint(0, 30))
            trackers.append(
                _make_tracker(f"t{i:03d}", start, end, priority=rng.choice(priorities))
            )
        return trackers

    return _generate


@pytest.fixture(autouse=True)
def _clean_logger() -> None:
    """Keep logger configuration from leaking between tests."""
    reset_logger()


def assert_no_overlaps(assignments: list[LaneAssignment]) -> None:
    """Fail if two assignments in the same lane share a day."""
    for lane_index, group in group_by_lane(assignments).items():
        for current, following in zip(group, group[1:]):
            assert current.end_date < following.start_date, (
                f"{current.tracker_id} and {following.tracker_id} overlap in lane {lane_index}"
            )


@pytest.fixture
def no_overlaps() -> Callable[[list[LaneAssignment]], None]:
    """The no-overlap invariant as an assertion helper."""
    return assert_no_overlaps
