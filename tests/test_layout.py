"""Tests for converting lane assignments into pixel geometry."""

from datetime import date

import pytest

from timelane.lanes import LaneAssignment
from timelane.layout import (
    TrackerPosition,
    calculate_timeline_layout,
    calculate_tracker_positions,
    find_tracker_at_position,
)
from timelane.viewport import ViewMode, create_viewport


@pytest.fixture
def monthly_viewport():
    return create_viewport(date(2025, 1, 1), ViewMode.MONTHLY)


@pytest.fixture
def assignments() -> list[LaneAssignment]:
    return [
        LaneAssignment("A", 0, date(2025, 1, 1), date(2025, 1, 5)),
        LaneAssignment("B", 1, date(2025, 1, 3), date(2025, 1, 8)),
    ]


def test_positions_follow_dates_and_lanes(assignments, monthly_viewport):
    positions = {
        p.tracker_id: p for p in calculate_tracker_positions(assignments, monthly_viewport, 36)
    }

    a, b = positions["A"], positions["B"]
    assert (a.left, a.width, a.top, a.height) == (0, 200, 4, 36)
    assert (b.left, b.width, b.top) == (80, 240, 44)
    assert a.is_visible
    assert b.is_visible


def test_range_starting_before_viewport_is_clipped(monthly_viewport):
    early = [LaneAssignment("C", 0, date(2024, 12, 25), date(2025, 1, 2))]
    (position,) = calculate_tracker_positions(early, monthly_viewport, 36)

    assert position.left == -280
    assert position.width == 360
    assert position.clip_left == 280
    assert position.clip_right == 0
    assert position.is_visible


def test_range_past_viewport_end_is_clipped(monthly_viewport):
    late = [LaneAssignment("D", 0, date(2025, 1, 28), date(2025, 2, 3))]
    (position,) = calculate_tracker_positions(late, monthly_viewport, 36)
    # Viewport is 1200px wide; the range spans 27..34 days in
    assert position.clip_right == 34 * 40 - 1200


def test_layout_totals(assignments, monthly_viewport):
    hidden = LaneAssignment("E", 0, date(2025, 3, 1), date(2025, 3, 5))
    layout = calculate_timeline_layout([*assignments, hidden], monthly_viewport)

    assert layout.total_height == 2 * (36 + 4) + 4
    assert layout.total_width == 1200
    assert layout.visible_count == 2
    assert len(layout.positions) == 3


def test_empty_layout(monthly_viewport):
    layout = calculate_timeline_layout([], monthly_viewport)
    assert layout.positions == []
    assert layout.visible_count == 0


def test_find_tracker_at_position(assignments, monthly_viewport):
    positions = calculate_tracker_positions(assignments, monthly_viewport, 36)

    hit = find_tracker_at_position(100, 20, positions)
    assert hit is not None
    assert hit.tracker_id == "A"

    hit = find_tracker_at_position(100, 60, positions)
    assert hit is not None
    assert hit.tracker_id == "B"

    # Spacing between lanes
    assert find_tracker_at_position(100, 42, positions) is None


def test_find_tracker_prefers_highest_lane():
    def _position(tracker_id: str, lane: int) -> TrackerPosition:
        return TrackerPosition(tracker_id, lane, 0, 0, 100, 50, True, 0, 0)

    hit = find_tracker_at_position(10, 10, [_position("low", 0), _position("high", 2)])
    assert hit is not None
    assert hit.tracker_id == "high"


def test_find_tracker_ignores_hidden():
    hidden = TrackerPosition("x", 0, 0, 0, 100, 50, False, 0, 0)
    assert find_tracker_at_position(10, 10, [hidden]) is None
