"""Time axis generation.

Produces the ordered slot boundaries of one day. The same sequence is used
for drawing rows and for snapping drop positions, so it must stay pure.

Examples:
    >>> [t.strftime("%H:%M") for t in generate_time_axis(date(2025, 1, 6), 9, 11, 30)]
    ['09:00', '09:30', '10:00', '10:30']
"""

import math
from datetime import date, datetime, time, timedelta

from clinicgrid.models import TimeSlot


def _validate_axis(start_hour: int, end_hour: int, slot_minutes: int) -> None:
    if slot_minutes <= 0:
        raise ValueError(f"slot_minutes must be positive, got {slot_minutes}")
    if not (0 <= start_hour < end_hour <= 24):
        raise ValueError(
            f"Invalid hour range [{start_hour}, {end_hour}): need 0 <= start < end <= 24"
        )


def day_start(day: date) -> datetime:
    """Midnight at the beginning of a day."""
    return datetime.combine(day, time.min)


def minutes_since_midnight(ts: datetime, day: date) -> float:
    """Minutes between the day's midnight and ts (negative if earlier)."""
    return (ts - day_start(day)).total_seconds() / 60


def axis_minutes(start_hour: int, end_hour: int, slot_minutes: int) -> list[int]:
    """Slot start offsets in minutes since midnight."""
    _validate_axis(start_hour, end_hour, slot_minutes)
    return list(range(start_hour * 60, end_hour * 60, slot_minutes))


def generate_time_axis(
    day: date, start_hour: int, end_hour: int, slot_minutes: int
) -> list[datetime]:
    """Generate slot start timestamps covering [start_hour:00, end_hour:00).

    Args:
        day: Reference day
        start_hour: First visible hour
        end_hour: End of the visible window (exclusive)
        slot_minutes: Step between boundaries

    Returns:
        Ordered, finite list of slot starts

    Raises:
        ValueError: If the hour range or slot size is invalid
    """
    midnight = day_start(day)
    return [
        midnight + timedelta(minutes=m)
        for m in axis_minutes(start_hour, end_hour, slot_minutes)
    ]


def build_slots(
    day: date, start_hour: int, end_hour: int, slot_minutes: int
) -> list[TimeSlot]:
    """Same axis as generate_time_axis, wrapped as TimeSlot cells."""
    return [
        TimeSlot(start=ts, duration_minutes=slot_minutes)
        for ts in generate_time_axis(day, start_hour, end_hour, slot_minutes)
    ]


def snap_minutes(
    minutes: float,
    start_hour: int,
    end_hour: int,
    slot_minutes: int,
    include_end: bool = False,
) -> int:
    """Snap a minute offset to the nearest boundary of the axis.

    The result is clamped to the first slot start and to the last slot start,
    or to the window end when include_end is set (end handles may rest there).
    Ties round up, matching pointer snapping in the browser.

    Args:
        minutes: Minutes since midnight, possibly fractional
        start_hour: First visible hour
        end_hour: End of the visible window (exclusive)
        slot_minutes: Slot size
        include_end: Allow the window end as a boundary

    Returns:
        Snapped minutes since midnight
    """
    _validate_axis(start_hour, end_hour, slot_minutes)
    first = start_hour * 60
    last = end_hour * 60 if include_end else end_hour * 60 - slot_minutes
    # float noise from the pixel inverse must not flip a tie
    steps = math.floor(round((minutes - first) / slot_minutes, 6) + 0.5)
    snapped = first + steps * slot_minutes
    return max(first, min(last, snapped))
