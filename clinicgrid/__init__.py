"""clinicgrid - multi-resource appointment scheduler core.

Renders a resource x time grid for clinic bookings, detects double
bookings, and turns drag-and-drop gestures into move/resize intents for
the caller to persist.
"""

from clinicgrid.constants import AppointmentStatus, DragState, ViewType
from clinicgrid.models import (
    Appointment,
    DateRange,
    Grid,
    MoveIntent,
    Rejection,
    ResizeIntent,
    Resource,
    SchedulerSettings,
    SlotSelection,
)
from clinicgrid.scheduling import RenderScheduler, SchedulerCallbacks
from clinicgrid.storage import (
    ScheduleFile,
    ScheduleLoadError,
    load_schedule,
    save_schedule,
)

__all__ = [
    # Scheduler
    "RenderScheduler",
    "SchedulerCallbacks",
    # Inputs
    "Appointment",
    "Resource",
    "SchedulerSettings",
    "AppointmentStatus",
    "ViewType",
    # Outputs
    "Grid",
    "DateRange",
    "DragState",
    "MoveIntent",
    "ResizeIntent",
    "Rejection",
    "SlotSelection",
    # Schedule files
    "ScheduleFile",
    "ScheduleLoadError",
    "load_schedule",
    "save_schedule",
]
