"""Viewport and date-grid mapping between calendar days and pixels."""

from __future__ import annotations

import calendar
import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum

from .intervals import Interval, days_between

MONTHS_PER_YEAR = 12
MONTHS_PER_QUARTER = 3


class ViewMode(str, Enum):
    """Timeline zoom level."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"


class GridUnit(str, Enum):
    """Calendar units used for snapping and navigation."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"


class Direction(str, Enum):
    """Viewport navigation direction."""

    PREV = "prev"
    NEXT = "next"


@dataclass(slots=True, frozen=True)
class ViewModeConfig:
    """Scale and grid settings for one view mode."""

    visible_days: int
    pixels_per_day: int
    snap_unit: GridUnit
    navigation_unit: GridUnit
    lane_height: int


VIEW_MODE_CONFIGS: dict[ViewMode, ViewModeConfig] = {
    ViewMode.WEEKLY: ViewModeConfig(
        visible_days=7,
        pixels_per_day=120,
        snap_unit=GridUnit.DAY,
        navigation_unit=GridUnit.WEEK,
        lane_height=48,
    ),
    ViewMode.MONTHLY: ViewModeConfig(
        visible_days=30,
        pixels_per_day=40,
        snap_unit=GridUnit.DAY,
        navigation_unit=GridUnit.MONTH,
        lane_height=36,
    ),
    ViewMode.QUARTERLY: ViewModeConfig(
        visible_days=90,
        pixels_per_day=15,
        snap_unit=GridUnit.WEEK,
        navigation_unit=GridUnit.QUARTER,
        lane_height=24,
    ),
}


@dataclass(slots=True, frozen=True)
class TimelineViewport:
    """Visible window of the timeline for one rendering session."""

    start_date: date
    end_date: date
    view_mode: ViewMode
    pixels_per_day: int
    visible_days: int

    @property
    def width_pixels(self) -> int:
        return self.visible_days * self.pixels_per_day


def add_months(day: date, months: int) -> date:
    """Shift a date by whole months, clamping the day to the target month."""
    month_index = day.year * MONTHS_PER_YEAR + (day.month - 1) + months
    year, month0 = divmod(month_index, MONTHS_PER_YEAR)
    last_day = calendar.monthrange(year, month0 + 1)[1]
    return date(year, month0 + 1, min(day.day, last_day))


def add_years(day: date, years: int) -> date:
    """Shift a date by whole years (Feb 29 falls back to Feb 28)."""
    return add_months(day, years * MONTHS_PER_YEAR)


def floor_to_unit(day: date, unit: GridUnit) -> date:
    """Floor a date to the start of its grid unit (weeks start on Monday)."""
    if unit == GridUnit.DAY:
        return day
    if unit == GridUnit.WEEK:
        return day - timedelta(days=day.weekday())
    if unit == GridUnit.MONTH:
        return day.replace(day=1)
    quarter_month = (day.month - 1) // MONTHS_PER_QUARTER * MONTHS_PER_QUARTER + 1
    return date(day.year, quarter_month, 1)


def timeline_start(day: date, view_mode: ViewMode) -> date:
    """Start of the viewport containing ``day``.

    Monday of the week (weekly), first of the month (monthly) or first day of
    the quarter (quarterly).
    """
    unit = {
        ViewMode.WEEKLY: GridUnit.WEEK,
        ViewMode.MONTHLY: GridUnit.MONTH,
        ViewMode.QUARTERLY: GridUnit.QUARTER,
    }[view_mode]
    return floor_to_unit(day, unit)


def timeline_end(start: date, view_mode: ViewMode) -> date:
    """Last visible day of a viewport starting at ``start``."""
    return start + timedelta(days=VIEW_MODE_CONFIGS[view_mode].visible_days - 1)


def navigate(
    start: date, direction: Direction, view_mode: ViewMode, *, fine: bool = False
) -> date:
    """Step the viewport start by one navigation unit.

    Args:
        start: Current viewport start
        direction: PREV or NEXT
        view_mode: Determines the unit (week, month or quarter)
        fine: Step a single day instead (fine control in the weekly view)

    Returns:
        The new viewport start
    """
    step = 1 if direction == Direction.NEXT else -1
    unit = GridUnit.DAY if fine else VIEW_MODE_CONFIGS[view_mode].navigation_unit

    if unit == GridUnit.DAY:
        return start + timedelta(days=step)
    if unit == GridUnit.WEEK:
        return start + timedelta(weeks=step)
    if unit == GridUnit.MONTH:
        return add_months(start, step)
    return add_months(start, step * MONTHS_PER_QUARTER)


def date_to_pixel(day: date, viewport_start: date, pixels_per_day: float) -> float:
    """Horizontal offset of ``day`` from the viewport's left edge."""
    return days_between(day, viewport_start) * pixels_per_day


def pixel_to_date(pixel: float, viewport_start: date, pixels_per_day: float) -> date:
    """Calendar day under a pixel offset, floored to whole days."""
    return viewport_start + timedelta(days=math.floor(pixel / pixels_per_day))


def snap(day: date, view_mode: ViewMode, enabled: bool = True) -> date:
    """Floor ``day`` to the view mode's snap unit; identity when disabled."""
    if not enabled:
        return day
    return floor_to_unit(day, VIEW_MODE_CONFIGS[view_mode].snap_unit)


def range_width_pixels(start: date, end: date, pixels_per_day: float) -> float:
    """Pixel width of an inclusive date range, never narrower than one day."""
    return max(pixels_per_day, (days_between(end, start) + 1) * pixels_per_day)


def is_visible(
    range_start: date, range_end: date, viewport_start: date, viewport_end: date
) -> bool:
    return range_start <= viewport_end and range_end >= viewport_start


def create_viewport(start: date, view_mode: ViewMode) -> TimelineViewport:
    """Build a viewport starting at ``start`` with the mode's scale."""
    config = VIEW_MODE_CONFIGS[view_mode]
    return TimelineViewport(
        start_date=start,
        end_date=timeline_end(start, view_mode),
        view_mode=view_mode,
        pixels_per_day=config.pixels_per_day,
        visible_days=config.visible_days,
    )


def jump_to_date(target: date, view_mode: ViewMode) -> date:
    """Viewport start that brings ``target`` into view."""
    return timeline_start(target, view_mode)


def jump_to_today(view_mode: ViewMode, today: date | None = None) -> date:
    """Viewport start containing today."""
    return timeline_start(today or date.today(), view_mode)  # noqa: DTZ011


def optimal_viewport(
    intervals: Iterable[Interval], view_mode: ViewMode, today: date | None = None
) -> tuple[date, date]:
    """Smallest grid-aligned window covering every interval.

    With no intervals, the window around today is returned.
    """
    items = list(intervals)
    if not items:
        start = jump_to_today(view_mode, today)
        return start, timeline_end(start, view_mode)

    earliest = min(item.start_date for item in items)
    latest = max(item.end_date for item in items)
    return (
        timeline_start(earliest, view_mode),
        timeline_end(timeline_start(latest, view_mode), view_mode),
    )


def visible_date_range(
    scroll_x: float, container_width: float, viewport_start: date, pixels_per_day: float
) -> tuple[date, date]:
    """Dates at the left and right edges of a scrolled container."""
    left = math.floor(scroll_x / pixels_per_day)
    right = math.ceil((scroll_x + container_width) / pixels_per_day)
    return viewport_start + timedelta(days=left), viewport_start + timedelta(days=right)
