"""Double-booking detection.

Half-open interval overlap per resource:
    existing.start < end AND start < existing.end

Appointments without a resource share the "default" bucket. Zero-length
intervals never conflict, and touching intervals are not conflicts.
Checking is a policy toggle: with enforce_availability=False nothing
conflicts, so callers can overbook on purpose.
"""

from collections.abc import Iterable, Iterator
from datetime import datetime
from itertools import combinations

from clinicgrid.constants import DEFAULT_RESOURCE_ID
from clinicgrid.models import Appointment


def normalize_resource_id(resource_id: str | None) -> str:
    """Fold the unassigned case into the shared default bucket."""
    return resource_id or DEFAULT_RESOURCE_ID


def overlaps(
    start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime
) -> bool:
    """Half-open overlap test; degenerate intervals never overlap."""
    if start_a >= end_a or start_b >= end_b:
        return False
    return start_b < end_a and start_a < end_b


def _same_resource_others(
    candidate_id: str | None,
    resource_id: str | None,
    appointments: Iterable[Appointment],
) -> Iterator[Appointment]:
    bucket = normalize_resource_id(resource_id)
    for existing in appointments:
        if existing.id == candidate_id:
            continue
        if existing.effective_resource_id != bucket:
            continue
        yield existing


def has_conflict(
    candidate_id: str | None,
    resource_id: str | None,
    start: datetime,
    end: datetime,
    appointments: Iterable[Appointment],
    enforce_availability: bool = True,
) -> bool:
    """Check whether [start, end) collides with another booking on the resource.

    Args:
        candidate_id: Appointment being placed (excluded from the check),
            or None for a new booking
        resource_id: Target resource, None for unassigned
        start: Proposed start
        end: Proposed end
        appointments: Bookings to test against
        enforce_availability: Conflict policy toggle

    Returns:
        True on the first overlapping booking
    """
    if not enforce_availability:
        return False
    return any(
        overlaps(existing.start, existing.end, start, end)
        for existing in _same_resource_others(candidate_id, resource_id, appointments)
    )


def find_conflicts(
    candidate_id: str | None,
    resource_id: str | None,
    start: datetime,
    end: datetime,
    appointments: Iterable[Appointment],
    enforce_availability: bool = True,
) -> list[Appointment]:
    """Like has_conflict, but return every colliding booking in input order."""
    if not enforce_availability:
        return []
    return [
        existing
        for existing in _same_resource_others(candidate_id, resource_id, appointments)
        if overlaps(existing.start, existing.end, start, end)
    ]


def conflict_pairs(
    appointments: Iterable[Appointment],
) -> list[tuple[Appointment, Appointment]]:
    """List every overlapping pair on the same resource.

    Ignores the enforcement toggle: this reports data as it is, e.g. a
    schedule that arrived already overbooked.
    """
    by_resource: dict[str, list[Appointment]] = {}
    for appt in appointments:
        by_resource.setdefault(appt.effective_resource_id, []).append(appt)

    pairs = []
    for bucket in by_resource.values():
        bucket.sort(key=lambda a: (a.start, a.end, a.id))
        for a, b in combinations(bucket, 2):
            if overlaps(a.start, a.end, b.start, b.end):
                pairs.append((a, b))
    return pairs
