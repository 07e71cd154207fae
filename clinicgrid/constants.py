"""Type-safe constants for the scheduling grid.

Provides enums for views, appointment statuses, drag states and outcomes
used throughout the codebase in place of magic strings.
"""

from enum import StrEnum
from typing import NamedTuple, assert_never

# Bucket shared by every appointment without a resource
DEFAULT_RESOURCE_ID = "default"
UNASSIGNED_TITLE = "Unassigned"


class ViewType(StrEnum):
    """Visible calendar range."""

    DAY = "day"
    WEEK = "week"

    @property
    def span_days(self) -> int:
        """Number of days covered by one page of this view."""
        return 7 if self == ViewType.WEEK else 1


class StatusStyle(NamedTuple):
    """Presentation for one appointment status."""

    color: str
    label: str


class AppointmentStatus(StrEnum):
    """Appointment lifecycle as shown on the grid."""

    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    CHECKED_IN = "checked_in"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"
    RESCHEDULED = "rescheduled"

    def style(self) -> StatusStyle:
        """Return the color and label used to draw this status.

        Exhaustive: adding a member without a case fails type checking.
        """
        match self:
            case AppointmentStatus.SCHEDULED:
                return StatusStyle("secondary", "Scheduled")
            case AppointmentStatus.CONFIRMED:
                return StatusStyle("success", "Confirmed")
            case AppointmentStatus.CHECKED_IN:
                return StatusStyle("primary", "Checked in")
            case AppointmentStatus.IN_PROGRESS:
                return StatusStyle("info", "In progress")
            case AppointmentStatus.COMPLETED:
                return StatusStyle("light", "Completed")
            case AppointmentStatus.CANCELLED:
                return StatusStyle("danger", "Cancelled")
            case AppointmentStatus.NO_SHOW:
                return StatusStyle("warning", "No show")
            case AppointmentStatus.RESCHEDULED:
                return StatusStyle("dark", "Rescheduled")
            case _:
                assert_never(self)


class DragState(StrEnum):
    """States of the drag/resize gesture machine."""

    IDLE = "idle"
    DRAGGING = "dragging"
    AWAITING_DROP = "awaiting_drop"
    COMMITTING = "committing"
    REVERTING = "reverting"


class DragMode(StrEnum):
    """What a gesture changes."""

    MOVE = "move"  # start, end and resource
    RESIZE = "resize"  # one edge only


class DragHandle(StrEnum):
    """Edge grabbed by a resize gesture."""

    START = "start"
    END = "end"


class DropOutcome(StrEnum):
    """Terminal result of a gesture."""

    COMMITTED = "committed"
    REVERTED = "reverted"


class RejectionReason(StrEnum):
    """Why a gesture was reverted."""

    CONFLICT = "conflict"
    OUTSIDE_GRID = "outside_grid"
    CANCELLED = "cancelled"
    EXTERNAL = "external"  # caller reported a failed persistence call


__all__ = [
    "DEFAULT_RESOURCE_ID",
    "UNASSIGNED_TITLE",
    "ViewType",
    "StatusStyle",
    "AppointmentStatus",
    "DragState",
    "DragMode",
    "DragHandle",
    "DropOutcome",
    "RejectionReason",
]
