"""Day/week paging.

Computes the visible date range and emits it on every navigation so the
caller can refetch. Never fetches data itself; no bounds are enforced.
"""

import logging
from collections.abc import Callable
from datetime import date, timedelta

from clinicgrid.constants import ViewType
from clinicgrid.models import DateRange
from clinicgrid.scheduling.time_axis import day_start

logger = logging.getLogger(__name__)


def week_start(day: date) -> date:
    """Monday of the week containing day."""
    return day - timedelta(days=day.weekday())


class ViewNavigator:
    """Tracks current_date and view, pages through ranges.

    Args:
        current_date: Initial focus date (defaults to clock())
        view: Initial view
        on_dates_change: Called with the new DateRange after each navigation
        clock: Returns "today"; injectable for tests
    """

    def __init__(
        self,
        current_date: date | None = None,
        view: ViewType | str = ViewType.WEEK,
        on_dates_change: Callable[[DateRange], None] | None = None,
        clock: Callable[[], date] = date.today,
    ):
        self.clock = clock
        self.current_date = current_date or clock()
        self.view = ViewType(view)
        self.on_dates_change = on_dates_change

    def compute_range(self) -> DateRange:
        """Half-open range of the current page.

        Day view: [current_date, current_date + 1).
        Week view: the Monday-aligned 7 days containing current_date.
        """
        first = week_start(self.current_date) if self.view == ViewType.WEEK else self.current_date
        last = first + timedelta(days=self.view.span_days)
        return DateRange(start=day_start(first), end=day_start(last), view_type=self.view)

    def days(self) -> list[date]:
        """Dates covered by the current page, in order."""
        rng = self.compute_range()
        first = rng.start.date()
        return [first + timedelta(days=i) for i in range(self.view.span_days)]

    def next(self) -> DateRange:
        return self._move(self.view.span_days)

    def previous(self) -> DateRange:
        return self._move(-self.view.span_days)

    def today(self) -> DateRange:
        self.current_date = self.clock()
        return self._emit()

    def go_to(self, target: date) -> DateRange:
        self.current_date = target
        return self._emit()

    def set_view(self, view: ViewType | str) -> DateRange:
        self.view = ViewType(view)
        return self._emit()

    def _move(self, days: int) -> DateRange:
        self.current_date += timedelta(days=days)
        return self._emit()

    def _emit(self) -> DateRange:
        rng = self.compute_range()
        logger.debug(
            f"Navigated to {rng.view_type} {rng.start.date()} .. {rng.end.date()}"
        )
        if self.on_dates_change is not None:
            self.on_dates_change(rng)
        return rng
