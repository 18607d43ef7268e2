"""Timelane - lane assignment, optimization and resizing for timeline trackers."""

from .exceptions import ParseError, ResizeStateError, TimelaneError, ValidationError
from .intervals import days_between, duration_days, overlaps
from .lanes import (
    LaneAssignment,
    LaneOptimizer,
    OptimizationConfig,
    OptimizationResult,
    assign_lanes,
    optimize_lane_assignments,
)
from .models import DateRange, Priority, Tracker, TrackerType
from .resize import ResizeConstraints, ResizeResult, resize_from_end, resize_from_start
from .viewport import TimelineViewport, ViewMode

__version__ = "0.1.0"

__all__ = [
    "DateRange",
    "LaneAssignment",
    "LaneOptimizer",
    "OptimizationConfig",
    "OptimizationResult",
    "ParseError",
    "Priority",
    "ResizeConstraints",
    "ResizeResult",
    "ResizeStateError",
    "TimelaneError",
    "TimelineViewport",
    "Tracker",
    "TrackerType",
    "ValidationError",
    "ViewMode",
    "assign_lanes",
    "days_between",
    "duration_days",
    "optimize_lane_assignments",
    "overlaps",
    "resize_from_end",
    "resize_from_start",
]
