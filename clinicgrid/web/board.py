"""Board: the web adapter's caller of the scheduler.

Owns one RenderScheduler plus the authoritative event list. Intents coming
back from the scheduler are applied to that list and re-supplied, and
optionally written back to the schedule file. Failed writes are reverted.
"""

import logging
import threading
from datetime import date
from pathlib import Path

from clinicgrid.models import (
    Appointment,
    DateRange,
    MoveIntent,
    Rejection,
    ResizeIntent,
    SlotSelection,
)
from clinicgrid.scheduling import SchedulerCallbacks
from clinicgrid.storage import ScheduleFile, load_schedule, save_schedule

logger = logging.getLogger(__name__)


class Board:
    """One shared scheduler behind a lock.

    Args:
        schedule: Schedule document providing resources, events and settings
        path: File the schedule was loaded from
        autosave: Write committed moves back to path
        current_date: Initial focus date (defaults to the file's date, then today)
    """

    def __init__(
        self,
        schedule: ScheduleFile,
        path: str | Path | None = None,
        autosave: bool = False,
        current_date: date | None = None,
    ):
        self.schedule = schedule
        self.path = Path(path) if path else None
        self.autosave = autosave and self.path is not None
        self.lock = threading.Lock()

        self.notice: str | None = None
        self.last_rejection: Rejection | None = None
        self.last_selection: SlotSelection | None = None
        self.selected_event: Appointment | None = None
        self.current_range: DateRange | None = None

        self.scheduler = schedule.build_scheduler(
            callbacks=SchedulerCallbacks(
                on_move=self._on_move,
                on_resize=self._on_resize,
                on_select_slot=self._on_select_slot,
                on_dates_change=self._on_dates_change,
                on_select_event=self._on_select_event,
                on_reject=self._on_reject,
            ),
            current_date=current_date,
        )

    @classmethod
    def from_file(cls, path: str | Path, autosave: bool = False) -> "Board":
        """Load a schedule file and wrap it.

        Raises:
            ScheduleLoadError: If the file cannot be loaded
        """
        return cls(load_schedule(path), path=path, autosave=autosave)

    def clear_messages(self) -> None:
        self.notice = None
        self.last_rejection = None

    # =========================================================================
    # Scheduler callbacks
    # =========================================================================

    def _on_move(self, appointment: Appointment, intent: MoveIntent) -> None:
        self._apply(
            intent.appointment_id,
            {
                "start": intent.new_start,
                "end": intent.new_end,
                "resource_id": intent.new_resource_id,
            },
        )

    def _on_resize(self, appointment: Appointment, intent: ResizeIntent) -> None:
        self._apply(
            intent.appointment_id, {"start": intent.new_start, "end": intent.new_end}
        )

    def _on_select_slot(self, selection: SlotSelection) -> None:
        self.last_selection = selection
        self.notice = (
            f"Selected {selection.start:%a %d %b %H:%M}-{selection.end:%H:%M} "
            f"with {selection.resource.title}"
        )

    def _on_dates_change(self, rng: DateRange) -> None:
        self.current_range = rng

    def _on_select_event(self, appointment: Appointment) -> None:
        self.selected_event = appointment

    def _on_reject(self, rejection: Rejection) -> None:
        self.last_rejection = rejection
        self.notice = rejection.message

    def _apply(self, appointment_id: str, update: dict) -> None:
        """Persist an intent, then re-supply the authoritative list."""
        events = [
            e.model_copy(update=update) if e.id == appointment_id else e
            for e in self.schedule.events
        ]
        candidate = self.schedule.model_copy(update={"events": events})

        if self.autosave:
            try:
                save_schedule(candidate, self.path)
            except OSError as e:
                logger.error(f"Could not save {self.path}: {e}")
                self.scheduler.revert(appointment_id)
                self.notice = f"Save failed, change reverted: {e}"
                return

        self.schedule = candidate
        self.scheduler.update(events=events)
        self.notice = "Appointment updated."
        logger.info(f"Applied change to '{appointment_id}'")


__all__ = ["Board"]
