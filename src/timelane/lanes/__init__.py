"""Lane package - non-overlapping lane layout for timeline trackers.

This package provides:
- Greedy first-fit lane assignment (classic interval partitioning)
- A bounded multi-pass optimizer (compaction, gap minimization, balancing)
- Packing metrics and recommendations

Main entry points:
- assign_lanes: Initial conflict-free assignment
- LaneOptimizer / optimize_lane_assignments: Refine an assignment
- calculate_packing_metrics: Score an assignment
"""

from .assigner import (
    assign_lanes,
    build_lanes,
    compact_lanes,
    find_available_lane,
    get_tracker_lanes,
    group_by_lane,
    lane_count,
    optimal_lane_count,
    reassign_tracker_lane,
    sort_trackers,
    sync_assignments,
    validate_lane_assignments,
)
from .config import OptimizationConfig, OptimizationObjective, SortStrategy
from .core import (
    Improvements,
    LaneAssignment,
    LaneValidationResult,
    OptimizationResult,
    PackingMetrics,
    PassReport,
    Recommendation,
    TrackerLane,
)
from .lane import Lane, Slot
from .metrics import calculate_packing_metrics, generate_recommendations
from .optimizer import LaneOptimizer, optimize_lane_assignments

__all__ = [
    # Core dataclasses
    "LaneAssignment",
    "TrackerLane",
    "Improvements",
    "PackingMetrics",
    "PassReport",
    "OptimizationResult",
    "LaneValidationResult",
    "Recommendation",
    # Configuration
    "OptimizationConfig",
    "OptimizationObjective",
    "SortStrategy",
    # Lane storage
    "Lane",
    "Slot",
    # Assignment
    "assign_lanes",
    "build_lanes",
    "compact_lanes",
    "find_available_lane",
    "get_tracker_lanes",
    "group_by_lane",
    "lane_count",
    "optimal_lane_count",
    "reassign_tracker_lane",
    "sort_trackers",
    "sync_assignments",
    "validate_lane_assignments",
    # Optimization
    "LaneOptimizer",
    "optimize_lane_assignments",
    "calculate_packing_metrics",
    "generate_recommendations",
]
