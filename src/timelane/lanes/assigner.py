"""Greedy first-fit lane assignment.

Trackers are swept in a chosen order and each one lands in the lowest-indexed
lane where it overlaps nothing, opening a new lane only when every existing
lane conflicts. Sweeping by start date is the classic interval-partitioning
algorithm and uses the minimum possible number of lanes; other orders exist
for the optimizer's compaction pass.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from datetime import date
from typing import Any

from timelane.intervals import Interval, overlaps
from timelane.logger import debug_enabled, get_logger
from timelane.models import Priority, Tracker

from .config import SortStrategy
from .core import LaneAssignment, LaneValidationResult, TrackerLane
from .lane import Lane

logger = get_logger()

_SORT_KEYS: dict[SortStrategy, Callable[[Tracker], tuple[Any, ...]]] = {
    SortStrategy.START_DATE: lambda t: (t.start_date, t.id),
    SortStrategy.DURATION: lambda t: (t.duration_days, t.start_date, t.id),
    SortStrategy.END_DATE: lambda t: (t.end_date, t.start_date, t.id),
    SortStrategy.PRIORITY: lambda t: (t.priority.rank, t.start_date, t.id),
}


def sort_trackers(trackers: Iterable[Tracker], strategy: SortStrategy) -> list[Tracker]:
    """Order trackers for a greedy sweep. Ties always fall back to start date then id."""
    return sorted(trackers, key=_SORT_KEYS[strategy])


def find_available_lane(
    interval: Interval, lanes: Sequence[Lane], preferred: Iterable[int] = ()
) -> int:
    """Index of the first lane the interval fits in, or len(lanes) for a new lane.

    Args:
        interval: Range to place
        lanes: Existing lanes, indexed from 0
        preferred: Lane indices to try before the normal bottom-up scan

    Returns:
        Lane index (may equal len(lanes), meaning "open a new lane")
    """
    for idx in preferred:
        if idx < len(lanes) and lanes[idx].fits(interval.start_date, interval.end_date):
            return idx
    for lane in lanes:
        if lane.fits(interval.start_date, interval.end_date):
            return lane.index
    return len(lanes)


def assign_lanes(
    trackers: Iterable[Tracker],
    strategy: SortStrategy = SortStrategy.START_DATE,
    *,
    critical_lane_bias: int = 3,
) -> list[LaneAssignment]:
    """Assign every tracker to a lane with greedy first-fit.

    With the PRIORITY strategy, critical trackers are swept first and try the
    lowest ``critical_lane_bias`` lanes before the normal scan. Because the
    normal scan also starts at lane 0, the preference never changes where a
    tracker lands: the bias toward low lanes comes from the sweep order alone.
    It never overrides the no-overlap rule.

    Args:
        trackers: Trackers to lay out (start_date <= end_date)
        strategy: Sweep order
        critical_lane_bias: Number of low lanes critical trackers prefer

    Returns:
        Assignments in placement order
    """
    lanes: list[Lane] = []
    assignments: list[LaneAssignment] = []

    for tracker in sort_trackers(trackers, strategy):
        preferred: Iterable[int] = ()
        if strategy == SortStrategy.PRIORITY and tracker.priority == Priority.CRITICAL:
            preferred = range(critical_lane_bias)

        lane_index = find_available_lane(tracker, lanes, preferred)
        if lane_index == len(lanes):
            lanes.append(Lane(lane_index))
        lanes[lane_index].add(tracker.start_date, tracker.end_date, tracker.id)

        if debug_enabled():
            logger.debug(
                f"  {strategy.value}: {tracker.id} "
                f"({tracker.start_date} - {tracker.end_date}) -> lane {lane_index}"
            )

        assignments.append(
            LaneAssignment(
                tracker_id=tracker.id,
                lane_index=lane_index,
                start_date=tracker.start_date,
                end_date=tracker.end_date,
            )
        )

    return assignments


def lane_count(assignments: Iterable[LaneAssignment]) -> int:
    """Number of lanes spanned (highest index + 1, 0 when empty)."""
    return max((a.lane_index for a in assignments), default=-1) + 1


def group_by_lane(assignments: Iterable[LaneAssignment]) -> dict[int, list[LaneAssignment]]:
    """Group assignments by lane index, each lane sorted by start date then id."""
    groups: dict[int, list[LaneAssignment]] = {}
    for assignment in assignments:
        groups.setdefault(assignment.lane_index, []).append(assignment)
    return {
        idx: sorted(group, key=lambda a: (a.start_date, a.tracker_id))
        for idx, group in sorted(groups.items())
    }


def build_lanes(assignments: Iterable[LaneAssignment]) -> list[Lane]:
    """Materialize Lane objects (including empty ones) from assignments."""
    items = list(assignments)
    lanes = [Lane(idx) for idx in range(lane_count(items))]
    for assignment in items:
        lanes[assignment.lane_index].add(
            assignment.start_date, assignment.end_date, assignment.tracker_id
        )
    return lanes


def get_tracker_lanes(
    trackers: Iterable[Tracker], assignments: Iterable[LaneAssignment]
) -> list[TrackerLane]:
    """Trackers organized by lane, with empty placeholders for unused indices.

    Trackers without an assignment are shown in lane 0.
    """
    lane_of = {a.tracker_id: a.lane_index for a in assignments}
    grouped: dict[int, list[Tracker]] = {}
    for tracker in trackers:
        grouped.setdefault(lane_of.get(tracker.id, 0), []).append(tracker)

    return [
        TrackerLane(
            lane_index=idx,
            trackers=sorted(grouped.get(idx, []), key=lambda t: (t.start_date, t.id)),
        )
        for idx in range(max(grouped, default=-1) + 1)
    ]


def compact_lanes(assignments: Iterable[LaneAssignment]) -> list[LaneAssignment]:
    """Renumber lanes densely from 0, dropping empty lanes and keeping their order."""
    items = list(assignments)
    used = sorted({a.lane_index for a in items})
    mapping = {old: new for new, old in enumerate(used)}
    return [
        a if mapping[a.lane_index] == a.lane_index else a.moved_to(mapping[a.lane_index])
        for a in items
    ]


def reassign_tracker_lane(
    tracker_id: str,
    lane_index: int,
    assignments: Iterable[LaneAssignment],
    trackers: Iterable[Tracker],
) -> list[LaneAssignment]:
    """Move a tracker to a requested lane (e.g. after a vertical drag).

    If the tracker would overlap something in the requested lane, it goes to
    the first lane that fits instead. Unknown tracker ids leave the
    assignments unchanged.
    """
    items = list(assignments)
    tracker = next((t for t in trackers if t.id == tracker_id), None)
    if tracker is None:
        return items

    remaining = [a for a in items if a.tracker_id != tracker_id]
    lanes = build_lanes(remaining)

    if lane_index < len(lanes) and not lanes[lane_index].fits(
        tracker.start_date, tracker.end_date
    ):
        lane_index = find_available_lane(tracker, lanes)
    elif lane_index > len(lanes):
        # No holes beyond the current top lane
        lane_index = len(lanes)

    return [
        *remaining,
        LaneAssignment(tracker_id, lane_index, tracker.start_date, tracker.end_date),
    ]


def sync_assignments(
    trackers: Iterable[Tracker], assignments: Iterable[LaneAssignment]
) -> tuple[list[LaneAssignment], int]:
    """Refresh assignment dates from the trackers' current ranges.

    Trackers may be edited between assignment and optimization. This copies
    each tracker's dates into its assignment, drops assignments whose tracker
    disappeared, places new trackers first-fit, and moves any tracker whose
    refreshed range now collides with its lane to the first lane that fits.

    Returns:
        Tuple of (synced assignments in input order, number of trackers moved
        to resolve a collision)
    """
    by_id = {t.id: t for t in trackers}
    seen: set[str] = set()
    kept: list[LaneAssignment] = []
    for assignment in assignments:
        tracker = by_id.get(assignment.tracker_id)
        if tracker is None or tracker.id in seen:
            continue
        seen.add(tracker.id)
        kept.append(
            LaneAssignment(tracker.id, assignment.lane_index, tracker.start_date, tracker.end_date)
        )

    # Re-place colliding trackers in a deterministic order
    lanes = [Lane(idx) for idx in range(lane_count(kept))]
    placed: dict[str, LaneAssignment] = {}
    conflicts = 0
    for assignment in sorted(kept, key=lambda a: (a.lane_index, a.start_date, a.tracker_id)):
        lane = lanes[assignment.lane_index]
        if lane.fits(assignment.start_date, assignment.end_date):
            lane.add(assignment.start_date, assignment.end_date, assignment.tracker_id)
            placed[assignment.tracker_id] = assignment
            continue

        new_index = find_available_lane(assignment, lanes)
        if new_index == len(lanes):
            lanes.append(Lane(new_index))
        lanes[new_index].add(assignment.start_date, assignment.end_date, assignment.tracker_id)
        placed[assignment.tracker_id] = assignment.moved_to(new_index)
        conflicts += 1
        logger.changes(
            f"  Resolved conflict: {assignment.tracker_id} "
            f"lane {assignment.lane_index} -> {new_index}"
        )

    result = [placed[a.tracker_id] for a in kept]

    for tracker in sort_trackers(
        (t for t in by_id.values() if t.id not in seen), SortStrategy.START_DATE
    ):
        new_index = find_available_lane(tracker, lanes)
        if new_index == len(lanes):
            lanes.append(Lane(new_index))
        lanes[new_index].add(tracker.start_date, tracker.end_date, tracker.id)
        result.append(LaneAssignment(tracker.id, new_index, tracker.start_date, tracker.end_date))

    return result, conflicts


def optimal_lane_count(trackers: Iterable[Tracker]) -> int:
    """Lanes needed by a start-date sweep, which is the minimum possible."""
    return lane_count(assign_lanes(trackers))


def validate_lane_assignments(
    assignments: Iterable[LaneAssignment], trackers: Iterable[Tracker]
) -> LaneValidationResult:
    """Check assignments for completeness and the no-overlap rule."""
    items = list(assignments)
    tracker_ids = [t.id for t in trackers]
    errors: list[str] = []

    assigned: dict[str, int] = {}
    for assignment in items:
        assigned[assignment.tracker_id] = assigned.get(assignment.tracker_id, 0) + 1

    for tracker_id in tracker_ids:
        if tracker_id not in assigned:
            errors.append(f"Tracker {tracker_id} is missing lane assignment")
    known = set(tracker_ids)
    for tracker_id, count in assigned.items():
        if tracker_id not in known:
            errors.append(f"Assignment references unknown tracker {tracker_id}")
        if count > 1:
            errors.append(f"Tracker {tracker_id} is assigned {count} times")

    for assignment in items:
        if assignment.end_date < assignment.start_date:
            errors.append(f"Tracker {assignment.tracker_id} ends before it starts")

    for lane_index, group in group_by_lane(items).items():
        for i, first in enumerate(group):
            for second in group[i + 1 :]:
                if second.start_date > first.end_date:
                    break
                if overlaps(first, second):
                    errors.append(
                        f"Trackers {first.tracker_id} and {second.tracker_id} "
                        f"overlap in lane {lane_index}"
                    )

    return LaneValidationResult(is_valid=not errors, errors=errors)


def span(intervals: Iterable[Interval]) -> tuple[date, date] | None:
    """Earliest start and latest end across intervals, or None if empty."""
    items = list(intervals)
    if not items:
        return None
    return min(i.start_date for i in items), max(i.end_date for i in items)
