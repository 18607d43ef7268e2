"""Pure predicates over closed day intervals."""

from __future__ import annotations

from datetime import date
from typing import Protocol


class Interval(Protocol):
    """Anything with an inclusive ``start_date``/``end_date`` pair."""

    @property
    def start_date(self) -> date: ...

    @property
    def end_date(self) -> date: ...


def days_between(later: date, earlier: date) -> int:
    """Signed whole days from ``earlier`` to ``later``."""
    return (later - earlier).days


def ranges_overlap(start1: date, end1: date, start2: date, end2: date) -> bool:
    """True iff the closed ranges share at least one day."""
    return max(start1, start2) <= min(end1, end2)


def overlaps(a: Interval, b: Interval) -> bool:
    """True iff two intervals intersect; a single shared day counts."""
    return ranges_overlap(a.start_date, a.end_date, b.start_date, b.end_date)


def duration_days(interval: Interval) -> int:
    """Inclusive duration in days (a same-day interval has duration 1)."""
    return days_between(interval.end_date, interval.start_date) + 1


def overlap_days(a: Interval, b: Interval) -> int:
    """Number of days shared by both intervals, 0 if disjoint."""
    start = max(a.start_date, b.start_date)
    end = min(a.end_date, b.end_date)
    if start > end:
        return 0
    return days_between(end, start) + 1


def gap_days(earlier: Interval, later: Interval) -> int:
    """Idle days strictly between ``earlier`` ending and ``later`` starting."""
    return max(0, days_between(later.start_date, earlier.end_date) - 1)
