"""Scheduler data models."""

from clinicgrid.models.grid import (
    Column,
    Grid,
    GridRow,
    PlacedEvent,
    Placement,
    column_key,
    parse_column_key,
)
from clinicgrid.models.schemas import (
    Appointment,
    DateRange,
    DragSession,
    DropResult,
    MoveIntent,
    Position,
    Rejection,
    ResizeIntent,
    Resource,
    SchedulerSettings,
    SlotSelection,
    TimeSlot,
    ViewWindow,
)

__all__ = [
    # Inputs
    "Appointment",
    "Resource",
    "SchedulerSettings",
    # Grid primitives
    "TimeSlot",
    "ViewWindow",
    "DateRange",
    "Position",
    # Gestures and intents
    "DragSession",
    "DropResult",
    "MoveIntent",
    "ResizeIntent",
    "SlotSelection",
    "Rejection",
    # Renderable grid
    "Column",
    "Grid",
    "GridRow",
    "PlacedEvent",
    "Placement",
    "column_key",
    "parse_column_key",
]
