"""Core dataclasses for lane assignment and optimization."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from timelane.models import Tracker

    from .config import OptimizationObjective


@dataclass(slots=True, frozen=True)
class LaneAssignment:
    """Placement of one tracker on a lane.

    The dates are a denormalized copy of the tracker's range at assignment
    time; sync_assignments() refreshes them after the tracker is edited.
    """

    tracker_id: str
    lane_index: int
    start_date: date
    end_date: date

    def moved_to(self, lane_index: int) -> LaneAssignment:
        return LaneAssignment(self.tracker_id, lane_index, self.start_date, self.end_date)


@dataclass(slots=True)
class TrackerLane:
    """Trackers grouped under one lane index, sorted by start date."""

    lane_index: int
    trackers: list[Tracker] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.trackers


@dataclass(slots=True)
class Improvements:
    """Counters accumulated over optimization passes."""

    lanes_reduced: int = 0
    spacing_improved: int = 0
    conflicts_resolved: int = 0

    def add(self, other: Improvements) -> None:
        self.lanes_reduced += other.lanes_reduced
        self.spacing_improved += other.spacing_improved
        self.conflicts_resolved += other.conflicts_resolved


@dataclass(slots=True, frozen=True)
class PackingMetrics:
    """Quality measures of an assignment.

    packing_efficiency: occupied days / (span days x lanes)
    average_gap_size: mean idle days between neighbours within a lane
    total_wasted_space: span days x lanes - occupied days
    balance_score: 1 - stddev/mean of trackers per lane, floored at 0
    """

    packing_efficiency: float
    average_gap_size: float
    total_wasted_space: int
    balance_score: float
    lane_count: int


@dataclass(slots=True, frozen=True)
class PassReport:
    """Outcome of a single optimization pass."""

    pass_number: int
    objective: OptimizationObjective
    improvements: Improvements
    metrics: PackingMetrics


@dataclass(slots=True)
class OptimizationResult:
    """Complete result of an optimization run."""

    original_assignments: list[LaneAssignment]
    optimized_assignments: list[LaneAssignment]
    improvements: Improvements
    metrics: PackingMetrics
    passes: list[PassReport] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class LaneValidationResult:
    """Consistency check of a set of assignments against its trackers."""

    is_valid: bool
    errors: list[str] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class Recommendation:
    """A human-readable hint derived from optimization metrics."""

    kind: str  # "lanes" | "gaps" | "balance" | "efficiency"
    severity: str  # "low" | "medium" | "high"
    message: str
    impact: str
