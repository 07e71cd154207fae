"""Scheduling core: time axis, conflicts, layout, navigation and gestures."""

from clinicgrid.scheduling.arena import AppointmentArena
from clinicgrid.scheduling.business_hours import (
    BusinessHoursPolicy,
    HolidayPolicy,
    all_of,
)
from clinicgrid.scheduling.conflicts import (
    conflict_pairs,
    find_conflicts,
    has_conflict,
    overlaps,
)
from clinicgrid.scheduling.drag import (
    VALID_TRANSITIONS,
    DragMoveController,
    InvalidTransitionError,
    validate_transition,
)
from clinicgrid.scheduling.layout import LayoutMapper, assign_lanes
from clinicgrid.scheduling.navigator import ViewNavigator, week_start
from clinicgrid.scheduling.render import RenderScheduler, SchedulerCallbacks
from clinicgrid.scheduling.time_axis import (
    build_slots,
    generate_time_axis,
    snap_minutes,
)

__all__ = [
    # Time axis
    "generate_time_axis",
    "build_slots",
    "snap_minutes",
    # Policies
    "BusinessHoursPolicy",
    "HolidayPolicy",
    "all_of",
    # Conflicts
    "has_conflict",
    "find_conflicts",
    "conflict_pairs",
    "overlaps",
    # Layout
    "LayoutMapper",
    "assign_lanes",
    # Navigation
    "ViewNavigator",
    "week_start",
    # Gestures
    "AppointmentArena",
    "DragMoveController",
    "InvalidTransitionError",
    "VALID_TRANSITIONS",
    "validate_transition",
    # Orchestration
    "RenderScheduler",
    "SchedulerCallbacks",
]
