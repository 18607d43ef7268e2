"""Tests for interval predicates and tracker value types."""

from datetime import date

from timelane.intervals import (
    days_between,
    duration_days,
    gap_days,
    overlap_days,
    overlaps,
    ranges_overlap,
)
from timelane.models import DateRange, Priority, Tracker, TrackerType


def test_shared_single_day_counts_as_overlap():
    """Ranges touching on one day overlap (closed-closed intervals)."""
    a = DateRange(date(2025, 1, 1), date(2025, 1, 5))
    b = DateRange(date(2025, 1, 5), date(2025, 1, 9))
    assert overlaps(a, b)
    assert overlaps(b, a)


def test_adjacent_ranges_do_not_overlap():
    a = DateRange(date(2025, 1, 1), date(2025, 1, 5))
    b = DateRange(date(2025, 1, 6), date(2025, 1, 9))
    assert not overlaps(a, b)
    assert not ranges_overlap(a.start_date, a.end_date, b.start_date, b.end_date)


def test_containment_is_overlap():
    outer = DateRange(date(2025, 1, 1), date(2025, 1, 31))
    inner = DateRange(date(2025, 1, 10), date(2025, 1, 12))
    assert overlaps(outer, inner)
    assert overlap_days(outer, inner) == 3


def test_duration_is_inclusive():
    assert duration_days(DateRange(date(2025, 1, 1), date(2025, 1, 1))) == 1
    assert duration_days(DateRange(date(2025, 1, 1), date(2025, 1, 5))) == 5
    assert duration_days(DateRange(date(2024, 2, 28), date(2024, 3, 1))) == 3


def test_days_between_is_signed():
    assert days_between(date(2025, 1, 10), date(2025, 1, 1)) == 9
    assert days_between(date(2025, 1, 1), date(2025, 1, 10)) == -9


def test_gap_days_counts_idle_days_only():
    a = DateRange(date(2025, 1, 1), date(2025, 1, 5))
    assert gap_days(a, DateRange(date(2025, 1, 6), date(2025, 1, 8))) == 0
    assert gap_days(a, DateRange(date(2025, 1, 20), date(2025, 1, 25))) == 14
    assert gap_days(a, DateRange(date(2025, 1, 3), date(2025, 1, 8))) == 0


def test_overlap_days_disjoint_is_zero():
    a = DateRange(date(2025, 1, 1), date(2025, 1, 5))
    b = DateRange(date(2025, 2, 1), date(2025, 2, 5))
    assert overlap_days(a, b) == 0


def test_tracker_duration_and_with_dates():
    tracker = Tracker(
        id="t1",
        title="API",
        type=TrackerType.PROJECT,
        start_date=date(2025, 1, 1),
        end_date=date(2025, 1, 10),
        priority=Priority.HIGH,
    )
    assert tracker.duration_days == 10

    edited = tracker.with_dates(date(2025, 1, 5), date(2025, 1, 6))
    assert edited.duration_days == 2
    assert edited.id == "t1"
    assert edited.priority == Priority.HIGH
    # Original is untouched
    assert tracker.start_date == date(2025, 1, 1)


def test_priority_rank_orders_critical_first():
    ranked = sorted(Priority, key=lambda p: p.rank)
    assert ranked == [Priority.CRITICAL, Priority.HIGH, Priority.MEDIUM, Priority.LOW]
