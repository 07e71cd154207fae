"""Business-hours classification of slots.

Visual highlight only; it never blocks a booking. Holidays and other
calendars are composed by the caller with all_of().
"""

from collections.abc import Callable, Iterable
from datetime import date, datetime

from clinicgrid.config import BUSINESS_END_HOUR, BUSINESS_START_HOUR

# Monday=0 .. Friday=4
WEEKDAYS = frozenset(range(5))

SlotPolicy = Callable[[datetime], bool]


class BusinessHoursPolicy:
    """weekday in weekdays AND hour in [business_start, business_end)."""

    def __init__(
        self,
        business_start: int = BUSINESS_START_HOUR,
        business_end: int = BUSINESS_END_HOUR,
        weekdays: Iterable[int] = WEEKDAYS,
    ):
        if not (0 <= business_start < business_end <= 24):
            raise ValueError(
                f"Invalid business hours [{business_start}, {business_end})"
            )
        self.business_start = business_start
        self.business_end = business_end
        self.weekdays = frozenset(weekdays)

    def is_business(self, ts: datetime) -> bool:
        return (
            ts.weekday() in self.weekdays
            and self.business_start <= ts.hour < self.business_end
        )

    __call__ = is_business

    def __repr__(self) -> str:
        return (
            f"BusinessHoursPolicy({self.business_start}, {self.business_end}, "
            f"weekdays={sorted(self.weekdays)})"
        )


class HolidayPolicy:
    """False on listed dates, True otherwise."""

    def __init__(self, holidays: Iterable[date]):
        self.holidays = frozenset(holidays)

    def __call__(self, ts: datetime) -> bool:
        return ts.date() not in self.holidays


def all_of(*policies: SlotPolicy) -> SlotPolicy:
    """Compose policies; a slot is business only if every policy agrees."""

    def combined(ts: datetime) -> bool:
        return all(policy(ts) for policy in policies)

    return combined
