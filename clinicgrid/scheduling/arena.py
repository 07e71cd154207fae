"""Appointment arena: one id -> Appointment map shared by all components.

The caller's data is kept as supplied. Optimistic moves are stored as
overlays keyed by id and dropped when the caller re-supplies authoritative
data or asks for a revert.
"""

import logging
from collections.abc import Iterable, Iterator

from clinicgrid.models import Appointment, Position

logger = logging.getLogger(__name__)


class AppointmentArena:
    """Effective view of the caller's appointments plus pending overlays."""

    def __init__(self, appointments: Iterable[Appointment] = ()):
        self._base: dict[str, Appointment] = {}
        self._pending: dict[str, Position] = {}
        self.replace_all(appointments)

    def replace_all(self, appointments: Iterable[Appointment]) -> None:
        """Load authoritative data from the caller; clears every overlay."""
        base: dict[str, Appointment] = {}
        for appt in appointments:
            if appt.id in base:
                logger.warning(f"Duplicate appointment id '{appt.id}', keeping the last one")
            base[appt.id] = appt
        self._base = base
        self._pending.clear()

    def __contains__(self, appointment_id: str) -> bool:
        return appointment_id in self._base

    def __len__(self) -> int:
        return len(self._base)

    def __iter__(self) -> Iterator[Appointment]:
        for appointment_id in self._base:
            yield self.get(appointment_id)

    def get(self, appointment_id: str) -> Appointment | None:
        """Appointment with any optimistic overlay applied."""
        appt = self._base.get(appointment_id)
        if appt is None:
            return None
        pending = self._pending.get(appointment_id)
        if pending is None:
            return appt
        return appt.model_copy(
            update={
                "start": pending.start,
                "end": pending.end,
                "resource_id": pending.resource_id,
            }
        )

    def original(self, appointment_id: str) -> Appointment | None:
        """Appointment exactly as the caller supplied it."""
        return self._base.get(appointment_id)

    def all(self) -> list[Appointment]:
        return list(self)

    def is_pending(self, appointment_id: str) -> bool:
        return appointment_id in self._pending

    def apply_optimistic(self, appointment_id: str, position: Position) -> None:
        if appointment_id not in self._base:
            raise KeyError(appointment_id)
        self._pending[appointment_id] = position

    def revert(self, appointment_id: str) -> Position | None:
        """Drop the overlay; returns the restored position, None if unknown."""
        self._pending.pop(appointment_id, None)
        appt = self._base.get(appointment_id)
        return appt.position if appt is not None else None
