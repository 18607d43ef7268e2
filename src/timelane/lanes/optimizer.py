"""Bounded local-search optimizer for lane assignments.

Starting from a valid assignment, the optimizer runs a fixed number of passes.
Each pass targets one objective, cycling compaction -> gap minimization ->
balancing, and the run stops early once the packing efficiency target is met.
Every move preserves the no-overlap rule, and no pass ever increases the lane
count. The result is a heuristic improvement, not a guaranteed optimum:
optimal packing under these objectives is NP-hard, so effort is capped at
``max_optimization_passes`` rather than searched exhaustively.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import timedelta

from timelane.logger import changes_enabled, get_logger
from timelane.models import Tracker

from .assigner import assign_lanes, build_lanes, compact_lanes, lane_count, sync_assignments
from .config import OptimizationConfig, OptimizationObjective
from .core import Improvements, LaneAssignment, OptimizationResult, PackingMetrics, PassReport
from .lane import Lane, Slot
from .metrics import calculate_packing_metrics

logger = get_logger()

PASS_ORDER = (
    OptimizationObjective.COMPACTION,
    OptimizationObjective.GAP_MINIMIZATION,
    OptimizationObjective.BALANCING,
)


def _relabel(
    assignments: list[LaneAssignment], lanes: list[Lane]
) -> list[LaneAssignment]:
    """Rebuild assignments in their original order from mutated lanes."""
    lane_of = {slot.tracker_id: lane.index for lane in lanes for slot in lane.slots}
    relabeled = [
        a if lane_of[a.tracker_id] == a.lane_index else a.moved_to(lane_of[a.tracker_id])
        for a in assignments
    ]
    return compact_lanes(relabeled)


class LaneOptimizer:
    """Improves lane assignments with compaction, gap filling and balancing."""

    def __init__(self, config: OptimizationConfig | None = None) -> None:
        self.config = config or OptimizationConfig()

    def optimize(
        self,
        trackers: Iterable[Tracker],
        assignments: Iterable[LaneAssignment] | None = None,
    ) -> OptimizationResult:
        """Run the optimization passes.

        Args:
            trackers: Current trackers (source of truth for dates)
            assignments: Starting assignment; computed with the greedy
                assigner when omitted

        Returns:
            OptimizationResult with both assignments, accumulated
            improvements, per-pass reports and final metrics
        """
        tracker_list = list(trackers)
        original = (
            list(assignments) if assignments is not None else assign_lanes(tracker_list)
        )

        working, conflicts = sync_assignments(tracker_list, original)
        improvements = Improvements(conflicts_resolved=conflicts)
        passes: list[PassReport] = []
        metrics = calculate_packing_metrics(working)

        for pass_number in range(self.config.max_optimization_passes):
            objective = PASS_ORDER[pass_number % len(PASS_ORDER)]
            logger.changes(f"Pass {pass_number}: {objective.value}")

            working, pass_improvements = self.run_pass(objective, tracker_list, working)
            improvements.add(pass_improvements)
            metrics = calculate_packing_metrics(working)
            passes.append(PassReport(pass_number, objective, pass_improvements, metrics))

            if changes_enabled():
                logger.changes(
                    f"  lanes={metrics.lane_count} "
                    f"efficiency={metrics.packing_efficiency:.3f} "
                    f"balance={metrics.balance_score:.3f}"
                )

            if metrics.packing_efficiency >= self.config.target_packing_efficiency:
                logger.changes("  Target packing efficiency reached, stopping")
                break

        return OptimizationResult(
            original_assignments=original,
            optimized_assignments=working,
            improvements=improvements,
            metrics=metrics,
            passes=passes,
        )

    def run_pass(
        self,
        objective: OptimizationObjective,
        trackers: list[Tracker],
        assignments: list[LaneAssignment],
    ) -> tuple[list[LaneAssignment], Improvements]:
        """Run one pass. A disabled pass or one with no improving move is a no-op."""
        if not self.config.pass_enabled(objective):
            logger.checks(f"  {objective.value} disabled, skipping")
            return assignments, Improvements()

        if objective == OptimizationObjective.COMPACTION:
            return self.compact(trackers, assignments)
        if objective == OptimizationObjective.GAP_MINIMIZATION:
            return self.minimize_gaps(assignments)
        return self.balance(assignments)

    @staticmethod
    def _selection_key(metrics: PackingMetrics) -> tuple[int, float, float, float]:
        # Fewest lanes, then denser, better balanced and with smaller gaps
        return (
            metrics.lane_count,
            -metrics.packing_efficiency,
            -metrics.balance_score,
            metrics.average_gap_size,
        )

    def compact(
        self, trackers: list[Tracker], assignments: list[LaneAssignment]
    ) -> tuple[list[LaneAssignment], Improvements]:
        """Repack with every configured sort strategy and keep the best layout.

        The current assignment is the incumbent; a candidate replaces it only
        if it is strictly better, so compaction never adds lanes.
        """
        before = lane_count(assignments)
        best = assignments
        best_key = self._selection_key(calculate_packing_metrics(assignments))

        for strategy in self.config.compaction_strategies:
            candidate = assign_lanes(
                trackers, strategy, critical_lane_bias=self.config.critical_lane_bias
            )
            key = self._selection_key(calculate_packing_metrics(candidate))
            logger.checks(f"  Strategy {strategy.value}: {key[0]} lanes")
            if key < best_key:
                best, best_key = candidate, key

        after = lane_count(best)
        if after < before:
            logger.changes(f"  Compaction reduced lanes {before} -> {after}")
        return best, Improvements(lanes_reduced=before - after)

    def _find_gap_filler(
        self, lanes: list[Lane], target: Lane, current: Slot, following: Slot
    ) -> tuple[Lane, Slot] | None:
        """First tracker in a higher lane lying strictly inside the gap."""
        gap_start = current.end_date + timedelta(days=1)
        gap_end = following.start_date - timedelta(days=1)
        idle_days = (gap_end - gap_start).days + 1

        for higher in lanes[target.index + 1 :]:
            for slot in higher.slots:
                if slot.start_date >= gap_end:
                    break
                duration = (slot.end_date - slot.start_date).days + 1
                logger.checks(
                    f"    Checking {slot.tracker_id} (lane {higher.index}) "
                    f"for gap {gap_start} - {gap_end} in lane {target.index}"
                )
                if (
                    slot.start_date > gap_start
                    and slot.end_date < gap_end
                    and duration <= idle_days
                    and target.fits(slot.start_date, slot.end_date)
                ):
                    return higher, slot
        return None

    def minimize_gaps(
        self, assignments: list[LaneAssignment]
    ) -> tuple[list[LaneAssignment], Improvements]:
        """Pull trackers from higher lanes into idle gaps of lower lanes.

        For each pair of neighbours with idle days between them, the first
        higher-lane tracker strictly inside the gap moves down. Lanes emptied
        this way are removed.
        """
        before = lane_count(assignments)
        lanes = build_lanes(assignments)
        moves = 0

        for lane in lanes:
            for current, following in lane.gaps():
                found = self._find_gap_filler(lanes, lane, current, following)
                if found is None:
                    continue
                source, slot = found
                source.remove(slot.tracker_id)
                lane.add(slot.start_date, slot.end_date, slot.tracker_id)
                moves += 1
                logger.changes(
                    f"  Moved {slot.tracker_id} lane {source.index} -> {lane.index} "
                    f"(between {current.tracker_id} and {following.tracker_id})"
                )

        if not moves:
            return assignments, Improvements()

        result = _relabel(assignments, lanes)
        return result, Improvements(
            lanes_reduced=before - lane_count(result), spacing_improved=moves
        )

    def balance(
        self, assignments: list[LaneAssignment]
    ) -> tuple[list[LaneAssignment], Improvements]:
        """Move trackers from overloaded lanes into underloaded ones.

        A lane is overloaded above ``overload_factor`` x the average trackers
        per lane and underloaded below ``underload_factor`` x average. Moves
        into a destination stop once it reaches the average, and moves out of
        a source stop once it is at or below ``settle_factor`` x average.
        """
        lanes = build_lanes(assignments)
        occupied = [lane for lane in lanes if len(lane)]
        if len(occupied) < 2:  # noqa: PLR2004 - need a source and a destination
            return assignments, Improvements()

        average = len(assignments) / len(occupied)
        overloaded = [
            lane for lane in occupied if len(lane) > average * self.config.overload_factor
        ]
        underloaded = [
            lane for lane in occupied if len(lane) < average * self.config.underload_factor
        ]
        settled = average * self.config.settle_factor
        moves = 0

        for source in overloaded:
            for destination in underloaded:
                for slot in list(source.slots):
                    if len(source) <= settled or len(destination) >= average:
                        break
                    if not destination.fits(slot.start_date, slot.end_date):
                        continue
                    source.remove(slot.tracker_id)
                    destination.add(slot.start_date, slot.end_date, slot.tracker_id)
                    moves += 1
                    logger.changes(
                        f"  Balanced {slot.tracker_id} lane {source.index} -> {destination.index}"
                    )
                if len(source) <= settled:
                    break

        if not moves:
            return assignments, Improvements()
        return _relabel(assignments, lanes), Improvements(spacing_improved=moves)


def optimize_lane_assignments(
    trackers: Iterable[Tracker],
    assignments: Iterable[LaneAssignment] | None = None,
    config: OptimizationConfig | None = None,
) -> OptimizationResult:
    """Functional wrapper around LaneOptimizer.optimize()."""
    return LaneOptimizer(config).optimize(trackers, assignments)
