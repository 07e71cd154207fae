"""Drag-to-move and resize gestures as a pure state machine.

States:
    IDLE -> DRAGGING -> AWAITING_DROP -> {COMMITTING | REVERTING} -> IDLE

A drop is checked against the conflict detector before anything is
committed. Conflicts, drops outside every column and cancellations revert
to the original position; nothing partial is ever committed. At most one
session is active per controller.
"""

import logging
from collections.abc import Callable
from datetime import date, datetime, timedelta

from clinicgrid.constants import (
    DEFAULT_RESOURCE_ID,
    DragHandle,
    DragMode,
    DragState,
    DropOutcome,
    RejectionReason,
)
from clinicgrid.models import (
    Appointment,
    DragSession,
    DropResult,
    MoveIntent,
    Position,
    Rejection,
    ResizeIntent,
)
from clinicgrid.scheduling.arena import AppointmentArena
from clinicgrid.scheduling.conflicts import find_conflicts
from clinicgrid.scheduling.layout import LayoutMapper

logger = logging.getLogger(__name__)

# Current state -> allowed next states
VALID_TRANSITIONS: dict[DragState, list[DragState]] = {
    DragState.IDLE: [DragState.DRAGGING],
    DragState.DRAGGING: [DragState.AWAITING_DROP, DragState.REVERTING],
    DragState.AWAITING_DROP: [
        DragState.AWAITING_DROP,
        DragState.COMMITTING,
        DragState.REVERTING,
    ],
    DragState.COMMITTING: [DragState.IDLE],
    DragState.REVERTING: [DragState.IDLE],
}


def validate_transition(current: DragState, intended: DragState) -> bool:
    """Check a transition against VALID_TRANSITIONS."""
    return intended in VALID_TRANSITIONS.get(current, [])


class InvalidTransitionError(RuntimeError):
    """Internal transition outside VALID_TRANSITIONS."""


CommitCallback = Callable[[Appointment, MoveIntent | ResizeIntent], None]
RejectCallback = Callable[[Rejection], None]


class DragMoveController:
    """Owns at most one DragSession and drives it to commit or revert.

    Args:
        arena: Shared appointment arena (read, plus optimistic overlays)
        layout: Pixel <-> time mapping used to resolve pointer positions
        enforce_availability: Conflict policy toggle
        on_commit: Receives (appointment before the change, intent)
        on_reject: Receives the Rejection to show to the user
    """

    def __init__(
        self,
        arena: AppointmentArena,
        layout: LayoutMapper,
        enforce_availability: bool = True,
        on_commit: CommitCallback | None = None,
        on_reject: RejectCallback | None = None,
    ):
        self.arena = arena
        self.layout = layout
        self.enforce_availability = enforce_availability
        self.on_commit = on_commit
        self.on_reject = on_reject
        self._state = DragState.IDLE
        self._session: DragSession | None = None

    @property
    def state(self) -> DragState:
        return self._state

    @property
    def session(self) -> DragSession | None:
        return self._session

    @property
    def active(self) -> bool:
        return self._session is not None

    def _transition(self, intended: DragState) -> None:
        if not validate_transition(self._state, intended):
            raise InvalidTransitionError(f"{self._state} -> {intended}")
        logger.debug(f"Drag state {self._state} -> {intended}")
        self._state = intended

    # =========================================================================
    # Gesture lifecycle
    # =========================================================================

    def begin(
        self,
        appointment_id: str,
        mode: DragMode | str = DragMode.MOVE,
        handle: DragHandle | str | None = None,
    ) -> DragSession | None:
        """Grab an appointment.

        Returns:
            The new session, or None when the grab is rejected (a session is
            already active, unknown id, or degenerate interval)
        """
        if self._state != DragState.IDLE:
            logger.warning(
                f"Ignoring drag of '{appointment_id}': "
                f"session for '{self._session.appointment_id}' still active"
            )
            return None

        appt = self.arena.get(appointment_id)
        if appt is None:
            logger.warning(f"Ignoring drag of unknown appointment '{appointment_id}'")
            return None
        if not appt.is_valid:
            logger.warning(f"Ignoring drag of degenerate appointment '{appointment_id}'")
            return None

        mode = DragMode(mode)
        if mode == DragMode.RESIZE:
            handle = DragHandle(handle or DragHandle.END)
        else:
            handle = None

        self._session = DragSession(
            appointment_id=appt.id,
            mode=mode,
            handle=handle,
            original_start=appt.start,
            original_end=appt.end,
            original_resource_id=appt.resource_id,
        )
        self._transition(DragState.DRAGGING)
        return self._session

    def hover(self, column: tuple[date, str | None] | None, y: float) -> DragSession | None:
        """Update the proposal from the pointer position.

        Args:
            column: (day, resource_id) under the pointer, None if outside
                every column. A None resource_id is the unassigned column.
            y: Pointer offset in pixels from the top of the column (the top
                edge of the block for moves, the grabbed edge for resizes)

        Returns:
            The updated session, or None when no gesture is active
        """
        if self._session is None:
            return None
        session = self._session

        if column is None:
            session.proposed_start = None
            session.proposed_end = None
            session.proposed_resource_id = None
        elif session.mode == DragMode.MOVE:
            day, resource_id = column
            start = self.layout.snap_time(y, day)
            session.proposed_start = start
            session.proposed_end = start + (session.original_end - session.original_start)
            session.proposed_resource_id = resource_id
        else:
            self._propose_resize(session, y)

        self._transition(DragState.AWAITING_DROP)
        return session

    def _propose_resize(self, session: DragSession, y: float) -> None:
        # edges stay on the appointment's own day whichever day column is hovered
        day = session.original_start.date()
        min_duration = timedelta(minutes=self.layout.slot_minutes)
        start, end = session.original_start, session.original_end
        if session.handle == DragHandle.START:
            start = min(self.layout.snap_time(y, day), end - min_duration)
        else:
            end = max(self.layout.snap_time(y, day, include_end=True), start + min_duration)
        session.proposed_start = start
        session.proposed_end = end
        session.proposed_resource_id = session.original_resource_id

    def drop(self) -> DropResult | None:
        """Release the pointer: commit the proposal or revert.

        Returns:
            DropResult, or None when no gesture is active
        """
        session = self._session
        if session is None:
            return None

        if not session.has_proposal:
            return self._revert(
                RejectionReason.OUTSIDE_GRID,
                "Dropped outside the calendar; appointment left where it was.",
            )

        appt = self.arena.get(session.appointment_id)
        if appt is None:
            # data was re-supplied mid-gesture without this appointment
            return self._revert(
                RejectionReason.EXTERNAL,
                "Appointment no longer exists; move discarded.",
            )

        target_resource = session.proposed_resource_id
        conflicts = find_conflicts(
            session.appointment_id,
            target_resource,
            session.proposed_start,
            session.proposed_end,
            self.arena.all(),
            self.enforce_availability,
        )
        if conflicts:
            return self._revert(
                RejectionReason.CONFLICT,
                _conflict_message(appt, session, conflicts),
                conflicting_ids=[c.id for c in conflicts],
            )
        return self._commit(appt, session)

    def cancel(self) -> DropResult | None:
        """Abort the gesture (escape key, pointer cancel). Always reverts."""
        if self._session is None:
            return None
        return self._revert(RejectionReason.CANCELLED, "Move cancelled.")

    # =========================================================================
    # Terminal transitions
    # =========================================================================

    def _commit(self, appt: Appointment, session: DragSession) -> DropResult:
        self._transition(DragState.COMMITTING)
        try:
            new_start = session.proposed_start
            new_end = session.proposed_end
            if session.mode == DragMode.MOVE:
                intent = MoveIntent(
                    appointment_id=appt.id,
                    new_start=new_start,
                    new_end=new_end,
                    new_resource_id=session.proposed_resource_id,
                )
            else:
                intent = ResizeIntent(
                    appointment_id=appt.id, new_start=new_start, new_end=new_end
                )

            unchanged = (
                new_start == session.original_start
                and new_end == session.original_end
                and session.proposed_resource_id == session.original_resource_id
            )
            if unchanged:
                logger.debug(f"Drop of '{appt.id}' on its own position, nothing to emit")
                return DropResult(outcome=DropOutcome.COMMITTED, session=session)

            self.arena.apply_optimistic(
                appt.id,
                Position(
                    start=new_start,
                    end=new_end,
                    resource_id=session.proposed_resource_id,
                ),
            )
            logger.info(
                f"Committed {session.mode} of '{appt.id}' to "
                f"{new_start:%Y-%m-%d %H:%M}-{new_end:%H:%M} "
                f"on {session.proposed_resource_id or DEFAULT_RESOURCE_ID}"
            )
            result = DropResult(outcome=DropOutcome.COMMITTED, session=session, intent=intent)
            if self.on_commit is not None:
                self.on_commit(appt, intent)
            return result
        finally:
            self._finish()

    def _revert(
        self,
        reason: RejectionReason,
        message: str,
        conflicting_ids: list[str] | None = None,
    ) -> DropResult:
        session = self._session
        self._transition(DragState.REVERTING)
        try:
            rejection = Rejection(
                appointment_id=session.appointment_id,
                reason=reason,
                message=message,
                restored=session.original,
                conflicting_ids=conflicting_ids or [],
            )
            logger.info(f"Reverted drag of '{session.appointment_id}': {reason}")
            result = DropResult(
                outcome=DropOutcome.REVERTED, session=session, rejection=rejection
            )
            if self.on_reject is not None:
                self.on_reject(rejection)
            return result
        finally:
            self._finish()

    def _finish(self) -> None:
        self._transition(DragState.IDLE)
        self._session = None


def _conflict_message(
    appt: Appointment, session: DragSession, conflicts: list[Appointment]
) -> str:
    first = conflicts[0]
    when = _fmt_interval(first.start, first.end)
    extra = f" and {len(conflicts) - 1} more" if len(conflicts) > 1 else ""
    verb = "move" if session.mode == DragMode.MOVE else "resize"
    return (
        f"Cannot {verb} '{appt.title}' to "
        f"{_fmt_interval(session.proposed_start, session.proposed_end)}: "
        f"overlaps '{first.title}' ({when}){extra}."
    )


def _fmt_interval(start: datetime, end: datetime) -> str:
    return f"{start:%a %d %b %H:%M}-{end:%H:%M}"
