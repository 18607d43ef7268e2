"""Constrained resizing of a tracker's start or end edge.

A drag on either edge proposes a new date. The engine snaps it to the grid,
clamps it to the allowed past/future window, keeps it on the correct side of
the fixed edge and enforces minimum/maximum duration. Constraint violations are
reported as errors alongside an already-corrected range; they never raise.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from .exceptions import ResizeStateError
from .logger import get_logger
from .models import Tracker
from .viewport import ViewMode, add_years, snap

logger = get_logger()

DAYS_PER_WEEK = 7
DEFAULT_HANDLE_WIDTH = 8


class ResizeEdge(str, Enum):
    """Which edge of a tracker a gesture drags."""

    START = "start"
    END = "end"


class ResizeConstraints(BaseModel):
    """Rules applied to every resize."""

    min_duration: int = Field(default=1, ge=1)  # days
    max_duration: int = Field(default=365, ge=1)  # days
    snap_to_grid: bool = True
    allow_past_dates: bool = True
    allow_future_dates: bool = True
    max_future_years: int = Field(default=2, ge=0)

    @model_validator(mode="after")
    def validate_duration_bounds(self) -> ResizeConstraints:
        """Ensure the duration bounds are consistent."""
        if self.max_duration < self.min_duration:
            raise ValueError("max_duration must be at least min_duration")
        return self


@dataclass(slots=True, frozen=True)
class ResizeResult:
    """Corrected range for a resize, with any rule violations.

    ``is_valid`` is False iff a correction was applied; the range is usable
    either way and the caller decides whether to accept it.
    """

    is_valid: bool
    new_start_date: date
    new_end_date: date
    duration: int
    errors: list[str] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class HandleArea:
    """Horizontal pixel extents of a tracker's two resize handles."""

    start_left: float
    start_right: float
    end_left: float
    end_right: float


def _clamp_to_window(
    proposed: date, label: str, constraints: ResizeConstraints, today: date, errors: list[str]
) -> date:
    if not constraints.allow_past_dates and proposed < today:
        errors.append(f"{label} date cannot be in the past")
        proposed = today

    max_future = add_years(today, constraints.max_future_years)
    if not constraints.allow_future_dates and proposed > max_future:
        errors.append(
            f"{label} date cannot be more than {constraints.max_future_years} years in the future"
        )
        proposed = max_future
    return proposed


def _snap_moved_edge(
    proposed: date, current: date, view_mode: ViewMode, constraints: ResizeConstraints
) -> date:
    # An unmoved edge keeps its date, even when it is off the grid
    if proposed == current:
        return proposed
    return snap(proposed, view_mode, constraints.snap_to_grid)


def _result(start: date, end: date, errors: list[str]) -> ResizeResult:
    return ResizeResult(
        is_valid=not errors,
        new_start_date=start,
        new_end_date=end,
        duration=(end - start).days + 1,
        errors=errors,
    )


def resize_from_start(
    tracker: Tracker,
    proposed_start: date,
    constraints: ResizeConstraints | None = None,
    view_mode: ViewMode = ViewMode.WEEKLY,
    *,
    today: date | None = None,
) -> ResizeResult:
    """Compute the constrained range for dragging the start edge.

    The end date stays fixed; only the start moves. A proposed date equal to
    the current start is not snapped.

    Args:
        tracker: Tracker being resized
        proposed_start: Date under the pointer
        constraints: Resize rules (defaults apply when omitted)
        view_mode: Determines the snap unit
        today: Reference date for past/future clamping (defaults to today)

    Returns:
        ResizeResult with the corrected range and any violated rules
    """
    constraints = constraints or ResizeConstraints()
    today = today or date.today()  # noqa: DTZ011
    errors: list[str] = []
    end = tracker.end_date

    start = _snap_moved_edge(proposed_start, tracker.start_date, view_mode, constraints)
    start = _clamp_to_window(start, "Start", constraints, today, errors)

    if start > end:
        errors.append("Start date cannot be after end date")
        start = end - timedelta(days=constraints.min_duration - 1)

    duration = (end - start).days + 1
    if duration < constraints.min_duration:
        errors.append(f"Duration must be at least {constraints.min_duration} day(s)")
        start = end - timedelta(days=constraints.min_duration - 1)
    elif duration > constraints.max_duration:
        errors.append(f"Duration cannot exceed {constraints.max_duration} days")
        start = end - timedelta(days=constraints.max_duration - 1)

    return _result(start, end, errors)


def resize_from_end(
    tracker: Tracker,
    proposed_end: date,
    constraints: ResizeConstraints | None = None,
    view_mode: ViewMode = ViewMode.WEEKLY,
    *,
    today: date | None = None,
) -> ResizeResult:
    """Compute the constrained range for dragging the end edge (start stays fixed)."""
    constraints = constraints or ResizeConstraints()
    today = today or date.today()  # noqa: DTZ011
    errors: list[str] = []
    start = tracker.start_date

    end = _snap_moved_edge(proposed_end, tracker.end_date, view_mode, constraints)
    end = _clamp_to_window(end, "End", constraints, today, errors)

    if end < start:
        errors.append("End date cannot be before start date")
        end = start + timedelta(days=constraints.min_duration - 1)

    duration = (end - start).days + 1
    if duration < constraints.min_duration:
        errors.append(f"Duration must be at least {constraints.min_duration} day(s)")
        end = start + timedelta(days=constraints.min_duration - 1)
    elif duration > constraints.max_duration:
        errors.append(f"Duration cannot exceed {constraints.max_duration} days")
        end = start + timedelta(days=constraints.max_duration - 1)

    return _result(start, end, errors)


def resize(
    tracker: Tracker,
    edge: ResizeEdge,
    proposed: date,
    constraints: ResizeConstraints | None = None,
    view_mode: ViewMode = ViewMode.WEEKLY,
    *,
    today: date | None = None,
) -> ResizeResult:
    """Dispatch to resize_from_start or resize_from_end."""
    if edge == ResizeEdge.START:
        return resize_from_start(tracker, proposed, constraints, view_mode, today=today)
    return resize_from_end(tracker, proposed, constraints, view_mode, today=today)


def resize_handle_area(
    tracker_left: float, tracker_width: float, handle_width: float = DEFAULT_HANDLE_WIDTH
) -> HandleArea:
    return HandleArea(
        start_left=tracker_left,
        start_right=tracker_left + handle_width,
        end_left=tracker_left + tracker_width - handle_width,
        end_right=tracker_left + tracker_width,
    )


def resize_handle_type(
    mouse_x: float,
    tracker_left: float,
    tracker_width: float,
    handle_width: float = DEFAULT_HANDLE_WIDTH,
) -> ResizeEdge | None:
    """Which handle, if any, a pointer-down at ``mouse_x`` grabs.

    The start handle wins when the two overlap on very narrow trackers.
    """
    area = resize_handle_area(tracker_left, tracker_width, handle_width)
    if area.start_left <= mouse_x <= area.start_right:
        return ResizeEdge.START
    if area.end_left <= mouse_x <= area.end_right:
        return ResizeEdge.END
    return None


def resize_preview(  # noqa: PLR0913 - mirrors the pointer event plus resize inputs
    tracker: Tracker,
    edge: ResizeEdge,
    mouse_x: float,
    viewport_start: date,
    pixels_per_day: float,
    constraints: ResizeConstraints | None = None,
    view_mode: ViewMode = ViewMode.WEEKLY,
    *,
    today: date | None = None,
) -> ResizeResult:
    """Resize result for a pointer at ``mouse_x`` pixels into the viewport."""
    target = viewport_start + timedelta(days=math.floor(mouse_x / pixels_per_day))
    return resize(tracker, edge, target, constraints, view_mode, today=today)


def format_duration(days: int) -> str:
    """Human-readable duration, e.g. "5 days" or "2 weeks, 3 days"."""
    if days == 1:
        return "1 day"
    if days < DAYS_PER_WEEK:
        return f"{days} days"

    weeks, remaining = divmod(days, DAYS_PER_WEEK)
    week_label = "1 week" if weeks == 1 else f"{weeks} weeks"
    if remaining == 0:
        return week_label
    return f"{week_label}, {remaining} day{'s' if remaining != 1 else ''}"


class ResizeState(str, Enum):
    """States of a single drag gesture."""

    IDLE = "idle"
    RESIZING_START = "resizing_start"
    RESIZING_END = "resizing_end"
    COMMITTED = "committed"
    CANCELLED = "cancelled"


class ResizeSession:
    """State machine for one resize gesture.

    begin() enters RESIZING_START or RESIZING_END, update() may be called any
    number of times while dragging, and the gesture ends with commit() or
    cancel().
    """

    def __init__(
        self,
        constraints: ResizeConstraints | None = None,
        view_mode: ViewMode = ViewMode.WEEKLY,
        *,
        today: date | None = None,
    ) -> None:
        self.constraints = constraints or ResizeConstraints()
        self.view_mode = view_mode
        self.today = today
        self.state = ResizeState.IDLE
        self.tracker: Tracker | None = None
        self.preview: ResizeResult | None = None

    @property
    def edge(self) -> ResizeEdge | None:
        return {
            ResizeState.RESIZING_START: ResizeEdge.START,
            ResizeState.RESIZING_END: ResizeEdge.END,
        }.get(self.state)

    @property
    def is_active(self) -> bool:
        return self.edge is not None

    def begin(self, tracker: Tracker, edge: ResizeEdge) -> None:
        if self.is_active:
            raise ResizeStateError(f"Resize of {self.tracker and self.tracker.id} already active")
        self.tracker = tracker
        self.preview = None
        self.state = (
            ResizeState.RESIZING_START if edge == ResizeEdge.START else ResizeState.RESIZING_END
        )
        logger.checks(f"Resize {edge.value} of {tracker.id} started")

    def update(self, proposed: date) -> ResizeResult:
        """Recompute the preview for the date currently under the pointer."""
        edge = self.edge
        if edge is None or self.tracker is None:
            raise ResizeStateError(f"Cannot update resize in state {self.state.value}")
        self.preview = resize(
            self.tracker, edge, proposed, self.constraints, self.view_mode, today=self.today
        )
        return self.preview

    def commit(self) -> Tracker:
        """Finish the gesture, returning the tracker with its corrected range.

        Committing without any update() returns the tracker unchanged.
        """
        if not self.is_active or self.tracker is None:
            raise ResizeStateError(f"Cannot commit resize in state {self.state.value}")
        self.state = ResizeState.COMMITTED
        if self.preview is None:
            return self.tracker
        logger.changes(
            f"Resized {self.tracker.id}: "
            f"{self.preview.new_start_date} - {self.preview.new_end_date}"
        )
        return self.tracker.with_dates(self.preview.new_start_date, self.preview.new_end_date)

    def cancel(self) -> None:
        if not self.is_active:
            raise ResizeStateError(f"Cannot cancel resize in state {self.state.value}")
        self.state = ResizeState.CANCELLED
        self.preview = None
