"""Time <-> pixel mapping inside one resource/day column.

Forward: appointment interval -> Placement(top, height).
Inverse: pixel offset -> time, snapped to the time axis for drop targets.
"""

from collections.abc import Sequence
from datetime import date, datetime, timedelta
from typing import TypeVar

from clinicgrid.models import Placement, SchedulerSettings
from clinicgrid.scheduling.time_axis import (
    day_start,
    minutes_since_midnight,
    snap_minutes,
)


class LayoutMapper:
    """Linear mapping between minutes of day and column pixels.

    Args:
        slot_start_minutes: Top of the visible window, minutes since midnight
        slot_end_minutes: Bottom of the visible window, minutes since midnight
        slot_minutes: Slot duration
        slot_height: Pixels per slot
    """

    def __init__(
        self,
        slot_start_minutes: int,
        slot_end_minutes: int,
        slot_minutes: int,
        slot_height: float,
    ):
        if slot_start_minutes % 60 or slot_end_minutes % 60:
            raise ValueError("Visible window must start and end on the hour")
        if slot_start_minutes >= slot_end_minutes:
            raise ValueError("Visible window is empty")
        if slot_minutes <= 0 or slot_height <= 0:
            raise ValueError("slot_minutes and slot_height must be positive")
        self.slot_start_minutes = slot_start_minutes
        self.slot_end_minutes = slot_end_minutes
        self.slot_minutes = slot_minutes
        self.slot_height = slot_height

    @classmethod
    def from_settings(cls, settings: SchedulerSettings) -> "LayoutMapper":
        return cls(
            settings.slot_start_minutes,
            settings.slot_end_minutes,
            settings.slot_minutes,
            settings.slot_height,
        )

    @property
    def min_height(self) -> float:
        """Floor that keeps very short appointments tappable."""
        return self.slot_height / 2

    @property
    def column_height(self) -> float:
        return self.minutes_to_pixels(self.slot_end_minutes)

    def minutes_to_pixels(self, minutes: float) -> float:
        return (minutes - self.slot_start_minutes) / self.slot_minutes * self.slot_height

    def pixels_to_minutes(self, y: float) -> float:
        return self.slot_start_minutes + y / self.slot_height * self.slot_minutes

    def place(self, start: datetime, end: datetime, day: date) -> Placement | None:
        """Position an interval on the column of `day`.

        Returns:
            Placement, or None if the interval is degenerate or entirely
            outside the visible window
        """
        if start >= end:
            return None
        start_min = minutes_since_midnight(start, day)
        end_min = minutes_since_midnight(end, day)
        clipped_start = max(start_min, self.slot_start_minutes)
        clipped_end = min(end_min, self.slot_end_minutes)
        if clipped_end <= clipped_start:
            return None

        top = self.minutes_to_pixels(clipped_start)
        height = max(
            self.min_height,
            (clipped_end - clipped_start) / self.slot_minutes * self.slot_height,
        )
        return Placement(top=top, height=height)

    def is_clipped(self, start: datetime, end: datetime, day: date) -> bool:
        """True when the interval runs past either edge of the window."""
        return (
            minutes_since_midnight(start, day) < self.slot_start_minutes
            or minutes_since_midnight(end, day) > self.slot_end_minutes
        )

    def time_at(self, y: float, day: date) -> datetime:
        """Unsnapped inverse of the top formula."""
        return day_start(day) + timedelta(minutes=self.pixels_to_minutes(y))

    def snap_time(self, y: float, day: date, include_end: bool = False) -> datetime:
        """Inverse mapping snapped to the nearest time-axis boundary."""
        snapped = snap_minutes(
            self.pixels_to_minutes(y),
            self.slot_start_minutes // 60,
            self.slot_end_minutes // 60,
            self.slot_minutes,
            include_end=include_end,
        )
        return day_start(day) + timedelta(minutes=snapped)


T = TypeVar("T")


def assign_lanes(
    items: Sequence[T], start_of, end_of
) -> list[tuple[T, int, int]]:
    """Lay out overlapping items side by side.

    Groups transitively overlapping items and assigns each a lane with
    greedy first-fit by start time.

    Args:
        items: Items in one column
        start_of: Callable returning an item's start
        end_of: Callable returning an item's end

    Returns:
        List of (item, lane_index, lane_count), sorted by start
    """
    ordered = sorted(items, key=lambda it: (start_of(it), end_of(it)))

    groups: list[list[T]] = []
    current: list[T] = []
    group_end = None
    for item in ordered:
        if current and start_of(item) < group_end:
            current.append(item)
            group_end = max(group_end, end_of(item))
        else:
            if current:
                groups.append(current)
            current = [item]
            group_end = end_of(item)
    if current:
        groups.append(current)

    out = []
    for group in groups:
        lane_ends: list = []
        assigned = []
        for item in group:
            for index, lane_end in enumerate(lane_ends):
                if lane_end <= start_of(item):
                    lane_ends[index] = end_of(item)
                    break
            else:
                index = len(lane_ends)
                lane_ends.append(end_of(item))
            assigned.append((item, index))
        lane_count = len(lane_ends) or 1
        out.extend((item, index, lane_count) for item, index in assigned)
    return out
