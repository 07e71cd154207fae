"""Pydantic models for scheduler inputs, gestures and intents.

FHIR-inspired vocabulary: Resource -> TimeSlot -> Appointment.
Inputs come from the caller; intents go back to it.
"""

from datetime import date, datetime, timedelta

from pydantic import BaseModel, Field, field_validator, model_validator

from clinicgrid.config import (
    BUSINESS_END_HOUR,
    BUSINESS_START_HOUR,
    DEFAULT_END_HOUR,
    DEFAULT_SLOT_HEIGHT,
    DEFAULT_SLOT_MINUTES,
    DEFAULT_START_HOUR,
    HIGH_RISK_THRESHOLD,
)
from clinicgrid.constants import (
    DEFAULT_RESOURCE_ID,
    AppointmentStatus,
    DragHandle,
    DragMode,
    DropOutcome,
    RejectionReason,
    ViewType,
)

# =============================================================================
# Caller-supplied data
# =============================================================================


class Resource(BaseModel):
    """A bookable provider or chair."""

    id: str
    title: str

    model_config = {"frozen": True}


class Appointment(BaseModel):
    """Scheduler-local view of a booking.

    start < end is expected but not enforced here: degenerate intervals
    from the caller are skipped at render time instead of failing.
    """

    id: str
    title: str
    start: datetime
    end: datetime
    resource_id: str | None = None
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    risk_score: float | None = Field(default=None, ge=0.0, le=100.0)
    patient_name: str | None = None
    provider_name: str | None = None

    @field_validator("start", "end")
    @classmethod
    def to_local_naive(cls, value: datetime) -> datetime:
        """Convert offset-aware timestamps (e.g. ``...Z`` from a REST layer) to local time."""
        if value.tzinfo is None:
            return value
        return value.astimezone().replace(tzinfo=None)

    @property
    def effective_resource_id(self) -> str:
        """Resource id with the unassigned case folded into the default bucket."""
        return self.resource_id or DEFAULT_RESOURCE_ID

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def is_valid(self) -> bool:
        return self.start < self.end

    @property
    def position(self) -> "Position":
        return Position(start=self.start, end=self.end, resource_id=self.resource_id)


class SchedulerSettings(BaseModel):
    """Grid geometry and highlight hours for one scheduler instance."""

    start_hour: int = Field(default=DEFAULT_START_HOUR, ge=0, le=23)
    end_hour: int = Field(default=DEFAULT_END_HOUR, ge=1, le=24)
    slot_minutes: int = Field(default=DEFAULT_SLOT_MINUTES, ge=5, le=240)
    slot_height: float = Field(default=DEFAULT_SLOT_HEIGHT, gt=0)
    business_start_hour: int = Field(default=BUSINESS_START_HOUR, ge=0, le=23)
    business_end_hour: int = Field(default=BUSINESS_END_HOUR, ge=1, le=24)
    high_risk_threshold: float = Field(default=HIGH_RISK_THRESHOLD, ge=0.0, le=100.0)

    @model_validator(mode="after")
    def validate_hours(self) -> "SchedulerSettings":
        """Validate hour ranges and slot granularity."""
        if self.start_hour >= self.end_hour:
            raise ValueError(
                f"start_hour ({self.start_hour}) must be before end_hour ({self.end_hour})"
            )
        if self.business_start_hour >= self.business_end_hour:
            raise ValueError("business_start_hour must be before business_end_hour")
        window = (self.end_hour - self.start_hour) * 60
        if window % self.slot_minutes:
            raise ValueError(
                f"slot_minutes ({self.slot_minutes}) must divide the visible window"
            )
        return self

    @property
    def slot_start_minutes(self) -> int:
        return self.start_hour * 60

    @property
    def slot_end_minutes(self) -> int:
        return self.end_hour * 60


# =============================================================================
# Grid primitives
# =============================================================================


class TimeSlot(BaseModel):
    """A fixed-granularity cell on the time axis. Generated, never persisted."""

    start: datetime
    duration_minutes: int
    is_business: bool = False

    @property
    def end(self) -> datetime:
        return self.start + timedelta(minutes=self.duration_minutes)


class ViewWindow(BaseModel):
    """Visible hours and days."""

    start_hour: int
    end_hour: int
    days: list[date]


class DateRange(BaseModel):
    """Half-open date range of the current page, emitted on navigation."""

    start: datetime
    end: datetime
    view_type: ViewType


class Position(BaseModel):
    """Where an appointment sits: interval plus resource."""

    start: datetime
    end: datetime
    resource_id: str | None = None


# =============================================================================
# Gestures
# =============================================================================


class DragSession(BaseModel):
    """Transient state of one move/resize gesture.

    References the appointment by id only.
    """

    appointment_id: str
    mode: DragMode = DragMode.MOVE
    handle: DragHandle | None = None
    original_start: datetime
    original_end: datetime
    original_resource_id: str | None = None
    proposed_start: datetime | None = None
    proposed_end: datetime | None = None
    proposed_resource_id: str | None = None

    @property
    def original(self) -> Position:
        return Position(
            start=self.original_start,
            end=self.original_end,
            resource_id=self.original_resource_id,
        )

    @property
    def has_proposal(self) -> bool:
        return self.proposed_start is not None and self.proposed_end is not None


# =============================================================================
# Intents (scheduler -> caller)
# =============================================================================


class MoveIntent(BaseModel):
    """Request to move an appointment; the caller persists it."""

    appointment_id: str
    new_start: datetime
    new_end: datetime
    new_resource_id: str | None = None


class ResizeIntent(BaseModel):
    """Request to change an appointment's start or end."""

    appointment_id: str
    new_start: datetime
    new_end: datetime


class SlotSelection(BaseModel):
    """Click-to-create selection."""

    start: datetime
    end: datetime
    resource: Resource


class Rejection(BaseModel):
    """A reverted gesture, with the message to show the user."""

    appointment_id: str
    reason: RejectionReason
    message: str
    restored: Position
    conflicting_ids: list[str] = Field(default_factory=list)


class DropResult(BaseModel):
    """Outcome of drop() or cancel()."""

    outcome: DropOutcome
    session: DragSession
    intent: MoveIntent | ResizeIntent | None = None
    rejection: Rejection | None = None

    @property
    def committed(self) -> bool:
        return self.outcome == DropOutcome.COMMITTED
