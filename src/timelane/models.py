"""Value types for trackers and their date ranges."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from enum import Enum


class TrackerType(str, Enum):
    """Kind of work item. Drives presentation only, never scheduling."""

    PROJECT = "project"
    FEATURE = "feature"
    BUG = "bug"


class Priority(str, Enum):
    """Tracker priority, used as a tie-break hint during optimization."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        """Sort rank, most urgent first (critical=0 ... low=3)."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    Priority.CRITICAL: 0,
    Priority.HIGH: 1,
    Priority.MEDIUM: 2,
    Priority.LOW: 3,
}


@dataclass(slots=True, frozen=True)
class DateRange:
    """A closed, day-granular date range."""

    start_date: date
    end_date: date


@dataclass(slots=True, frozen=True)
class Tracker:
    """A date-ranged work item laid out on the timeline.

    Callers guarantee ``start_date <= end_date``; the engine does not repair
    malformed ranges (see loader.load_trackers for the validation boundary).
    """

    id: str
    title: str
    type: TrackerType
    start_date: date
    end_date: date
    priority: Priority = Priority.MEDIUM
    status: str = ""

    @property
    def duration_days(self) -> int:
        """Inclusive day count; a same-day tracker lasts 1 day."""
        return (self.end_date - self.start_date).days + 1

    def with_dates(self, start_date: date, end_date: date) -> Tracker:
        """Return a copy of this tracker with a new date range."""
        return replace(self, start_date=start_date, end_date=end_date)
