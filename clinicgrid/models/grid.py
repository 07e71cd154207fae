"""Renderable grid produced by the scheduler.

Framework-agnostic: adapters turn a Grid into text, HTML or JSON.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field

from clinicgrid.constants import DragState
from clinicgrid.models.schemas import (
    Appointment,
    DateRange,
    Resource,
    TimeSlot,
    ViewWindow,
)


def column_key(day: date, resource_id: str) -> str:
    """Stable identifier for a day x resource column."""
    return f"{day.isoformat()}|{resource_id}"


def parse_column_key(key: str) -> tuple[date, str]:
    """Inverse of column_key.

    Raises:
        ValueError: If the key is malformed
    """
    day_part, sep, resource_id = key.partition("|")
    if not sep or not resource_id:
        raise ValueError(f"Invalid column key: '{key}'")
    return date.fromisoformat(day_part), resource_id


class Placement(BaseModel):
    """Vertical pixel placement inside a column."""

    top: float
    height: float


class PlacedEvent(BaseModel):
    """An appointment positioned on a column."""

    appointment: Appointment
    top: float
    height: float
    lane_index: int = 0
    lane_count: int = 1
    color: str
    label: str
    high_risk: bool = False
    in_conflict: bool = False
    clipped: bool = False  # partially outside visible hours
    pending: bool = False  # optimistic position awaiting the caller
    dragging: bool = False


class GridRow(BaseModel):
    """One time-axis row label."""

    label: str
    minutes: int
    top: float


class Column(BaseModel):
    """One resource on one day."""

    key: str
    day: date
    resource: Resource
    slots: list[TimeSlot]
    events: list[PlacedEvent] = Field(default_factory=list)


class Grid(BaseModel):
    """Everything an adapter needs to draw the scheduler."""

    range: DateRange
    window: ViewWindow
    rows: list[GridRow]
    columns: list[Column]
    height: float
    slot_height: float
    enforce_availability: bool
    drag_state: DragState = DragState.IDLE
    generated_at: datetime = Field(default_factory=datetime.now)

    def columns_for(self, day: date) -> list[Column]:
        return [c for c in self.columns if c.day == day]

    def column(self, key: str) -> Column | None:
        for col in self.columns:
            if col.key == key:
                return col
        return None
