"""Render scheduler: orchestrates the grid and the callback surface.

Builds day x resource columns with time-axis cells and positioned events,
routes pointer input to the drag controller, and reports intents to the
caller. It never persists anything itself.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date, timedelta

from clinicgrid.config import ENFORCE_AVAILABILITY
from clinicgrid.constants import (
    DEFAULT_RESOURCE_ID,
    UNASSIGNED_TITLE,
    DragMode,
    ViewType,
)
from clinicgrid.models import (
    Appointment,
    Column,
    DateRange,
    DragSession,
    DropResult,
    Grid,
    GridRow,
    MoveIntent,
    PlacedEvent,
    Placement,
    Position,
    Rejection,
    ResizeIntent,
    Resource,
    SchedulerSettings,
    SlotSelection,
    ViewWindow,
    column_key,
    parse_column_key,
)
from clinicgrid.scheduling.arena import AppointmentArena
from clinicgrid.scheduling.business_hours import BusinessHoursPolicy, SlotPolicy
from clinicgrid.scheduling.conflicts import conflict_pairs
from clinicgrid.scheduling.drag import DragMoveController
from clinicgrid.scheduling.layout import LayoutMapper, assign_lanes
from clinicgrid.scheduling.navigator import ViewNavigator
from clinicgrid.scheduling.time_axis import axis_minutes, build_slots, day_start

logger = logging.getLogger(__name__)


@dataclass
class SchedulerCallbacks:
    """Everything the scheduler reports to its caller."""

    on_move: Callable[[Appointment, MoveIntent], None] | None = None
    on_resize: Callable[[Appointment, ResizeIntent], None] | None = None
    on_select_slot: Callable[[SlotSelection], None] | None = None
    on_dates_change: Callable[[DateRange], None] | None = None
    on_select_event: Callable[[Appointment], None] | None = None
    on_reject: Callable[[Rejection], None] | None = None


class RenderScheduler:
    """Multi-resource time-grid scheduler.

    Args:
        resources: Bookable resources, one column each per day
        events: Appointments from the caller's data layer
        view: Day or week
        enforce_availability: Reject drops that double-book a resource
        settings: Grid geometry (defaults from clinicgrid.config)
        callbacks: Caller hooks
        current_date: Initial focus date (defaults to today)
        business_policy: Slot highlight policy (defaults to settings hours)
        clock: Returns today's date
    """

    def __init__(
        self,
        resources: Iterable[Resource] = (),
        events: Iterable[Appointment] = (),
        view: ViewType | str = ViewType.WEEK,
        enforce_availability: bool = ENFORCE_AVAILABILITY,
        settings: SchedulerSettings | None = None,
        callbacks: SchedulerCallbacks | None = None,
        current_date: date | None = None,
        business_policy: SlotPolicy | None = None,
        clock: Callable[[], date] = date.today,
    ):
        self.settings = settings or SchedulerSettings()
        self.callbacks = callbacks or SchedulerCallbacks()
        self.layout = LayoutMapper.from_settings(self.settings)
        self.business_policy = business_policy or BusinessHoursPolicy(
            self.settings.business_start_hour, self.settings.business_end_hour
        )
        self.resources: list[Resource] = list(resources)
        self.arena = AppointmentArena(events)
        self.navigator = ViewNavigator(
            current_date=current_date,
            view=view,
            on_dates_change=self._emit_dates_change,
            clock=clock,
        )
        self.controller = DragMoveController(
            self.arena,
            self.layout,
            enforce_availability=enforce_availability,
            on_commit=self._dispatch_commit,
            on_reject=self._dispatch_reject,
        )

    # =========================================================================
    # Caller inputs
    # =========================================================================

    @property
    def enforce_availability(self) -> bool:
        return self.controller.enforce_availability

    @enforce_availability.setter
    def enforce_availability(self, value: bool) -> None:
        self.controller.enforce_availability = value

    @property
    def view(self) -> ViewType:
        return self.navigator.view

    def update(
        self,
        resources: Iterable[Resource] | None = None,
        events: Iterable[Appointment] | None = None,
        enforce_availability: bool | None = None,
    ) -> None:
        """Accept re-supplied authoritative data; clears optimistic overlays."""
        if resources is not None:
            self.resources = list(resources)
        if events is not None:
            self.arena.replace_all(events)
        if enforce_availability is not None:
            self.enforce_availability = enforce_availability

    def revert(self, appointment_id: str) -> Position | None:
        """External revert request, e.g. after the caller's save failed."""
        restored = self.arena.revert(appointment_id)
        if restored is not None:
            logger.info(f"Reverted '{appointment_id}' on caller request")
        return restored

    # =========================================================================
    # Navigation
    # =========================================================================

    def next(self) -> DateRange:
        return self.navigator.next()

    def previous(self) -> DateRange:
        return self.navigator.previous()

    def today(self) -> DateRange:
        return self.navigator.today()

    def go_to(self, target: date) -> DateRange:
        return self.navigator.go_to(target)

    def set_view(self, view: ViewType | str) -> DateRange:
        return self.navigator.set_view(view)

    def _emit_dates_change(self, rng: DateRange) -> None:
        if self.callbacks.on_dates_change is not None:
            self.callbacks.on_dates_change(rng)

    # =========================================================================
    # Rendering
    # =========================================================================

    def window(self) -> ViewWindow:
        return ViewWindow(
            start_hour=self.settings.start_hour,
            end_hour=self.settings.end_hour,
            days=self.navigator.days(),
        )

    def column_resources(self) -> list[Resource]:
        """Resources that get a column, plus the unassigned bucket if needed."""
        if not self.resources:
            return [Resource(id=DEFAULT_RESOURCE_ID, title=UNASSIGNED_TITLE)]

        columns = list(self.resources)
        known = {r.id for r in columns}
        if DEFAULT_RESOURCE_ID in known:
            return columns

        rng = self.navigator.compute_range()
        has_unassigned = any(
            appt.resource_id is None
            and appt.is_valid
            and appt.start < rng.end
            and rng.start < appt.end
            for appt in self.arena
        )
        if has_unassigned:
            columns.append(Resource(id=DEFAULT_RESOURCE_ID, title=UNASSIGNED_TITLE))
        return columns

    def render(self) -> Grid:
        """Build the renderable grid for the current page."""
        settings = self.settings
        window = self.window()

        rows = [
            GridRow(
                label=f"{m // 60:02d}:{m % 60:02d}",
                minutes=m,
                top=self.layout.minutes_to_pixels(m),
            )
            for m in axis_minutes(settings.start_hour, settings.end_hour, settings.slot_minutes)
        ]

        valid: list[Appointment] = []
        for appt in self.arena:
            if appt.is_valid:
                valid.append(appt)
            else:
                logger.warning(
                    f"Skipping appointment '{appt.id}': end {appt.end} is not after start {appt.start}"
                )
        in_conflict = {a.id for pair in conflict_pairs(valid) for a in pair}

        session = self.controller.session
        columns = []
        for day in window.days:
            for resource in self.column_resources():
                columns.append(
                    self._build_column(day, resource, valid, in_conflict, session)
                )

        return Grid(
            range=self.navigator.compute_range(),
            window=window,
            rows=rows,
            columns=columns,
            height=self.layout.column_height,
            slot_height=settings.slot_height,
            enforce_availability=self.enforce_availability,
            drag_state=self.controller.state,
        )

    def _build_column(
        self,
        day: date,
        resource: Resource,
        appointments: list[Appointment],
        in_conflict: set[str],
        session: DragSession | None,
    ) -> Column:
        settings = self.settings
        slots = build_slots(day, settings.start_hour, settings.end_hour, settings.slot_minutes)
        for slot in slots:
            slot.is_business = self.business_policy(slot.start)

        placed: list[tuple[Appointment, Placement, bool]] = []
        for appt in appointments:
            start, end, resource_id = appt.start, appt.end, appt.effective_resource_id
            dragging = session is not None and session.appointment_id == appt.id
            if dragging and session.has_proposal:
                start, end = session.proposed_start, session.proposed_end
                resource_id = session.proposed_resource_id or DEFAULT_RESOURCE_ID
            if resource_id != resource.id:
                continue
            placement = self.layout.place(start, end, day)
            if placement is None:
                continue
            shown = appt.model_copy(update={"start": start, "end": end}) if dragging else appt
            placed.append((shown, placement, dragging))

        events = []
        for (appt, placement, dragging), lane, lanes in assign_lanes(
            placed, lambda p: p[0].start, lambda p: p[0].end
        ):
            style = appt.status.style()
            events.append(
                PlacedEvent(
                    appointment=appt,
                    top=placement.top,
                    height=placement.height,
                    lane_index=lane,
                    lane_count=lanes,
                    color=style.color,
                    label=style.label,
                    high_risk=(
                        appt.risk_score is not None
                        and appt.risk_score >= settings.high_risk_threshold
                    ),
                    in_conflict=appt.id in in_conflict,
                    clipped=self.layout.is_clipped(appt.start, appt.end, day),
                    pending=self.arena.is_pending(appt.id),
                    dragging=dragging,
                )
            )

        return Column(
            key=column_key(day, resource.id),
            day=day,
            resource=resource,
            slots=slots,
            events=events,
        )

    # =========================================================================
    # Pointer wiring
    # =========================================================================

    def resolve_column(self, key: str | None) -> tuple[date, Resource] | None:
        """Map a column key to (day, resource) if it is on the current page."""
        if not key:
            return None
        try:
            day, resource_id = parse_column_key(key)
        except ValueError:
            logger.debug(f"Unparseable column key '{key}'")
            return None
        if day not in self.navigator.days():
            return None
        for resource in self.column_resources():
            if resource.id == resource_id:
                return day, resource
        return None

    def pointer_down(self, appointment_id: str, handle: str | None = None) -> DragSession | None:
        """Grab an event body (move) or one of its edges (resize)."""
        mode = DragMode.RESIZE if handle else DragMode.MOVE
        return self.controller.begin(appointment_id, mode=mode, handle=handle)

    def pointer_move(self, key: str | None, y: float) -> DragSession | None:
        resolved = self.resolve_column(key)
        if resolved is None:
            return self.controller.hover(None, y)
        day, resource = resolved
        declared = {r.id for r in self.resources}
        # the synthesized unassigned column moves appointments to no resource
        resource_id = resource.id if resource.id in declared else None
        return self.controller.hover((day, resource_id), y)

    def pointer_up(self) -> DropResult | None:
        return self.controller.drop()

    def escape(self) -> DropResult | None:
        return self.controller.cancel()

    def click_slot(
        self, key: str, y: float, end_y: float | None = None
    ) -> SlotSelection | None:
        """Click (or drag-select) empty grid space to create an appointment."""
        if self.controller.active:
            return None
        resolved = self.resolve_column(key)
        if resolved is None:
            return None
        day, resource = resolved

        slot = timedelta(minutes=self.settings.slot_minutes)
        first, last = (y, end_y) if end_y is None or end_y >= y else (end_y, y)
        start = self.layout.snap_time(first, day)
        if last is None:
            end = start + slot
        else:
            end = max(self.layout.snap_time(last, day, include_end=True), start + slot)
        end = min(end, day_start(day) + timedelta(minutes=self.settings.slot_end_minutes))

        selection = SlotSelection(start=start, end=end, resource=resource)
        if self.callbacks.on_select_slot is not None:
            self.callbacks.on_select_slot(selection)
        return selection

    def click_event(self, appointment_id: str) -> Appointment | None:
        appt = self.arena.get(appointment_id)
        if appt is not None and self.callbacks.on_select_event is not None:
            self.callbacks.on_select_event(appt)
        return appt

    def _dispatch_commit(
        self, appointment: Appointment, intent: MoveIntent | ResizeIntent
    ) -> None:
        if isinstance(intent, MoveIntent):
            if self.callbacks.on_move is not None:
                self.callbacks.on_move(appointment, intent)
        elif self.callbacks.on_resize is not None:
            self.callbacks.on_resize(appointment, intent)

    def _dispatch_reject(self, rejection: Rejection) -> None:
        if self.callbacks.on_reject is not None:
            self.callbacks.on_reject(rejection)
