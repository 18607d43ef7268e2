"""Tests for packing metrics and recommendations."""

from datetime import date

import pytest

from timelane.lanes import (
    Improvements,
    LaneAssignment,
    OptimizationResult,
    PackingMetrics,
    assign_lanes,
    calculate_packing_metrics,
    generate_recommendations,
)


def test_single_tracker_packs_perfectly():
    metrics = calculate_packing_metrics(
        [LaneAssignment("A", 0, date(2025, 1, 1), date(2025, 1, 10))]
    )
    assert metrics.packing_efficiency == 1.0
    assert metrics.total_wasted_space == 0
    assert metrics.average_gap_size == 0.0
    assert metrics.balance_score == 1.0
    assert metrics.lane_count == 1


def test_empty_assignment_is_all_zero():
    metrics = calculate_packing_metrics([])
    assert metrics.packing_efficiency == 0.0
    assert metrics.total_wasted_space == 0
    assert metrics.lane_count == 0


def test_two_lane_metrics():
    assignments = [
        LaneAssignment("A", 0, date(2025, 1, 1), date(2025, 1, 5)),
        LaneAssignment("B", 0, date(2025, 1, 11), date(2025, 1, 15)),
        LaneAssignment("C", 1, date(2025, 1, 1), date(2025, 1, 5)),
    ]
    metrics = calculate_packing_metrics(assignments)

    # Span is 15 days across 2 lanes, 15 days occupied
    assert metrics.packing_efficiency == pytest.approx(0.5)
    assert metrics.total_wasted_space == 15
    assert metrics.average_gap_size == pytest.approx(5.0)
    # 2 and 1 trackers per lane: mean 1.5, stddev 0.5
    assert metrics.balance_score == pytest.approx(1 - 0.5 / 1.5)
    assert metrics.lane_count == 2


def test_back_to_back_trackers_have_no_gap():
    assignments = [
        LaneAssignment("A", 0, date(2025, 1, 1), date(2025, 1, 5)),
        LaneAssignment("B", 0, date(2025, 1, 6), date(2025, 1, 9)),
    ]
    metrics = calculate_packing_metrics(assignments)
    assert metrics.average_gap_size == 0.0
    assert metrics.packing_efficiency == 1.0


def test_empty_lanes_count_against_balance():
    assignments = [
        LaneAssignment("A", 0, date(2025, 1, 1), date(2025, 1, 5)),
        LaneAssignment("B", 2, date(2025, 1, 1), date(2025, 1, 5)),
    ]
    metrics = calculate_packing_metrics(assignments)
    assert metrics.lane_count == 3
    assert metrics.balance_score < 1.0


def test_efficiency_stays_in_unit_range(random_trackers):
    for seed in range(5):
        metrics = calculate_packing_metrics(assign_lanes(random_trackers(seed, 30)))
        assert 0.0 < metrics.packing_efficiency <= 1.0
        assert 0.0 <= metrics.balance_score <= 1.0
        assert metrics.total_wasted_space >= 0


def _result(metrics: PackingMetrics, improvements: Improvements | None = None):
    return OptimizationResult(
        original_assignments=[],
        optimized_assignments=[],
        improvements=improvements or Improvements(),
        metrics=metrics,
    )


class TestRecommendations:
    """Hints derived from an optimization result."""

    def test_healthy_layout_has_none(self) -> None:
        metrics = PackingMetrics(0.9, 1.0, 2, 0.95, 2)
        assert generate_recommendations(_result(metrics)) == []

    def test_all_thresholds_trigger(self) -> None:
        metrics = PackingMetrics(0.3, 8.0, 40, 0.4, 4)
        recommendations = generate_recommendations(
            _result(metrics, Improvements(lanes_reduced=2))
        )

        by_kind = {r.kind: r for r in recommendations}
        assert list(by_kind) == ["lanes", "gaps", "balance", "efficiency"]
        assert by_kind["lanes"].severity == "medium"
        assert "Reduced 2 lanes" in by_kind["lanes"].message
        assert by_kind["gaps"].severity == "medium"
        assert "8.0 days" in by_kind["gaps"].message
        assert by_kind["balance"].severity == "low"
        assert by_kind["efficiency"].severity == "high"
        assert "30.0%" in by_kind["efficiency"].message

    def test_empty_layout_skips_ratio_hints(self) -> None:
        metrics = calculate_packing_metrics([])
        assert generate_recommendations(_result(metrics)) == []
