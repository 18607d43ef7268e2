"""Pixel geometry for rendering a lane assignment inside a viewport."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from .lanes import LaneAssignment, lane_count
from .viewport import (
    VIEW_MODE_CONFIGS,
    TimelineViewport,
    date_to_pixel,
    is_visible,
    range_width_pixels,
)

DEFAULT_LANE_SPACING = 4


@dataclass(slots=True, frozen=True)
class TrackerPosition:
    """Rectangle of one tracker, in pixels relative to the viewport origin."""

    tracker_id: str
    lane_index: int
    left: float
    top: float
    width: float
    height: float
    is_visible: bool
    clip_left: float  # Pixels hidden past the viewport's left edge
    clip_right: float  # Pixels hidden past the viewport's right edge

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x <= self.left + self.width and self.top <= y <= self.top + self.height


@dataclass(slots=True, frozen=True)
class TimelineLayout:
    """All tracker rectangles plus the overall canvas size."""

    positions: list[TrackerPosition] = field(default_factory=list)
    total_height: float = 0
    total_width: float = 0
    visible_count: int = 0


def calculate_tracker_positions(
    assignments: Iterable[LaneAssignment],
    viewport: TimelineViewport,
    lane_height: float,
    lane_spacing: float = DEFAULT_LANE_SPACING,
) -> list[TrackerPosition]:
    """Convert lane assignments into pixel rectangles."""
    viewport_right = viewport.width_pixels
    positions: list[TrackerPosition] = []

    for assignment in assignments:
        left = date_to_pixel(assignment.start_date, viewport.start_date, viewport.pixels_per_day)
        width = range_width_pixels(
            assignment.start_date, assignment.end_date, viewport.pixels_per_day
        )
        positions.append(
            TrackerPosition(
                tracker_id=assignment.tracker_id,
                lane_index=assignment.lane_index,
                left=left,
                top=assignment.lane_index * (lane_height + lane_spacing) + lane_spacing,
                width=width,
                height=lane_height,
                is_visible=is_visible(
                    assignment.start_date,
                    assignment.end_date,
                    viewport.start_date,
                    viewport.end_date,
                ),
                clip_left=max(0, -left),
                clip_right=max(0, left + width - viewport_right),
            )
        )

    return positions


def calculate_timeline_layout(
    assignments: Iterable[LaneAssignment],
    viewport: TimelineViewport,
    lane_spacing: float = DEFAULT_LANE_SPACING,
) -> TimelineLayout:
    """Lay out every assignment using the view mode's lane height."""
    items = list(assignments)
    lane_height = VIEW_MODE_CONFIGS[viewport.view_mode].lane_height
    positions = calculate_tracker_positions(items, viewport, lane_height, lane_spacing)

    return TimelineLayout(
        positions=positions,
        total_height=lane_count(items) * (lane_height + lane_spacing) + lane_spacing,
        total_width=viewport.width_pixels,
        visible_count=sum(1 for p in positions if p.is_visible),
    )


def find_tracker_at_position(
    x: float, y: float, positions: Iterable[TrackerPosition]
) -> TrackerPosition | None:
    """Visible tracker under a point; the highest lane wins if several match."""
    hits = [p for p in positions if p.is_visible and p.contains(x, y)]
    if not hits:
        return None
    return max(hits, key=lambda p: p.lane_index)
