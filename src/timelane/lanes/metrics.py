"""Packing-quality metrics and the recommendations derived from them."""

from __future__ import annotations

import math
from collections.abc import Iterable

from timelane.intervals import duration_days, gap_days

from .assigner import group_by_lane, lane_count, span
from .core import LaneAssignment, OptimizationResult, PackingMetrics, Recommendation

# Recommendation thresholds
LARGE_GAP_DAYS = 5.0
LOW_BALANCE_SCORE = 0.6
LOW_PACKING_EFFICIENCY = 0.5

EMPTY_METRICS = PackingMetrics(
    packing_efficiency=0.0,
    average_gap_size=0.0,
    total_wasted_space=0,
    balance_score=0.0,
    lane_count=0,
)


def calculate_packing_metrics(assignments: Iterable[LaneAssignment]) -> PackingMetrics:
    """Compute packing metrics for an assignment.

    Uses the assignments' own (denormalized) dates, so callers should sync
    them with the trackers first.

    Args:
        assignments: A no-overlap lane assignment

    Returns:
        PackingMetrics; all zeros for an empty assignment
    """
    items = list(assignments)
    bounds = span(items)
    if bounds is None:
        return EMPTY_METRICS

    lanes = lane_count(items)
    span_start, span_end = bounds
    total_span_days = (span_end - span_start).days + 1
    total_available = total_span_days * lanes
    total_occupied = sum(duration_days(a) for a in items)

    groups = group_by_lane(items)
    gaps = [
        gap
        for group in groups.values()
        for current, following in zip(group, group[1:])
        if (gap := gap_days(current, following)) > 0
    ]
    average_gap = sum(gaps) / len(gaps) if gaps else 0.0

    # Empty lanes below the top lane count as zero-tracker lanes
    per_lane = [len(groups.get(idx, [])) for idx in range(lanes)]
    mean = len(items) / lanes
    stddev = math.sqrt(sum((count - mean) ** 2 for count in per_lane) / lanes)

    return PackingMetrics(
        packing_efficiency=total_occupied / total_available,
        average_gap_size=average_gap,
        total_wasted_space=total_available - total_occupied,
        balance_score=max(0.0, 1.0 - stddev / mean),
        lane_count=lanes,
    )


def generate_recommendations(result: OptimizationResult) -> list[Recommendation]:
    """Turn an optimization result into user-facing hints."""
    metrics = result.metrics
    recommendations: list[Recommendation] = []

    if result.improvements.lanes_reduced > 0:
        recommendations.append(
            Recommendation(
                kind="lanes",
                severity="medium",
                message=f"Reduced {result.improvements.lanes_reduced} lanes through optimization",
                impact="Improved visual compactness and reduced scrolling",
            )
        )

    if metrics.average_gap_size > LARGE_GAP_DAYS:
        recommendations.append(
            Recommendation(
                kind="gaps",
                severity="medium",
                message=f"Large gaps detected (average {metrics.average_gap_size:.1f} days)",
                impact="Consider redistributing trackers to minimize empty space",
            )
        )

    if metrics.lane_count and metrics.balance_score < LOW_BALANCE_SCORE:
        recommendations.append(
            Recommendation(
                kind="balance",
                severity="low",
                message="Lane distribution is uneven",
                impact="Rebalancing lanes could improve visual organization",
            )
        )

    if metrics.lane_count and metrics.packing_efficiency < LOW_PACKING_EFFICIENCY:
        recommendations.append(
            Recommendation(
                kind="efficiency",
                severity="high",
                message=f"Low packing efficiency ({metrics.packing_efficiency * 100:.1f}%)",
                impact="Consider consolidating or rescheduling trackers",
            )
        )

    return recommendations
