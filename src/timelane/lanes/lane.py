"""Sorted interval storage for a single timeline lane."""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from datetime import date


@dataclass(slots=True, frozen=True)
class Slot:
    """One tracker's occupancy of a lane."""

    start_date: date
    end_date: date
    tracker_id: str


class Lane:
    """Tracks the occupied ranges of a lane as sorted, non-overlapping slots.

    Because slots never overlap, sorting by start also sorts by end, so a fit
    test only has to look at the two neighbours of the insertion point.
    """

    def __init__(self, index: int) -> None:
        self.index = index
        self.slots: list[Slot] = []

    def __len__(self) -> int:
        return len(self.slots)

    def __repr__(self) -> str:
        return f"Lane(index={self.index}, slots={len(self.slots)})"

    def _insertion_point(self, start: date, tracker_id: str) -> int:
        return bisect.bisect_left(
            self.slots, (start, tracker_id), key=lambda s: (s.start_date, s.tracker_id)
        )

    def fits(self, start: date, end: date, *, ignore_id: str | None = None) -> bool:
        """Check whether [start, end] is free in this lane.

        Args:
            start: First day of the candidate range (inclusive)
            end: Last day of the candidate range (inclusive)
            ignore_id: Tracker whose own slot should not count as a conflict

        Returns:
            True if no slot shares a day with the range
        """
        idx = bisect.bisect_left(self.slots, start, key=lambda s: s.start_date)

        # Previous slot must end before we start
        prev = idx - 1
        while prev >= 0 and self.slots[prev].tracker_id == ignore_id:
            prev -= 1
        if prev >= 0 and self.slots[prev].end_date >= start:
            return False

        # Following slots must start after we end
        nxt = idx
        while nxt < len(self.slots) and self.slots[nxt].tracker_id == ignore_id:
            nxt += 1
        return not (nxt < len(self.slots) and self.slots[nxt].start_date <= end)

    def add(self, start: date, end: date, tracker_id: str) -> None:
        """Occupy [start, end]. The caller must have checked fits()."""
        idx = self._insertion_point(start, tracker_id)
        self.slots.insert(idx, Slot(start, end, tracker_id))

    def remove(self, tracker_id: str) -> Slot | None:
        """Release a tracker's slot, returning it if present."""
        for idx, slot in enumerate(self.slots):
            if slot.tracker_id == tracker_id:
                del self.slots[idx]
                return slot
        return None

    def gaps(self) -> list[tuple[Slot, Slot]]:
        """Adjacent slot pairs with at least one idle day between them."""
        return [
            (current, following)
            for current, following in zip(self.slots, self.slots[1:])
            if (following.start_date - current.end_date).days > 1
        ]
