"""Plain-text rendering of a scheduler grid.

One block per day, one column per resource, one row per slot:

    Mon 13 Jan 2025
    time  | Dr. Maria        | Dr. Andrei
    09:00 | Consultation     |
    09:30 | |                | !Follow-up
"""

from clinicgrid.models import Column, Grid, TimeSlot

CELL_WIDTH = 18
TIME_WIDTH = 5

# Cell markers
CONTINUES = "|"
OFF_HOURS = "."
CONFLICT = "!"
HIGH_RISK = "^"
PENDING = "~"


def _fit(text: str, width: int) -> str:
    if len(text) > width:
        return text[: width - 1] + "…"
    return text.ljust(width)


def _cell(column: Column, slot: TimeSlot, first: bool) -> str:
    covering = [
        e
        for e in column.events
        if e.appointment.start < slot.end and e.appointment.end > slot.start
    ]
    if not covering:
        return "" if slot.is_business else OFF_HOURS

    beginning = [e for e in covering if first or e.appointment.start >= slot.start]
    if not beginning:
        return CONTINUES

    event = beginning[0]
    flags = ""
    if event.in_conflict:
        flags += CONFLICT
    if event.high_risk:
        flags += HIGH_RISK
    if event.pending:
        flags += PENDING
    text = f"{flags}{event.appointment.title}"
    if len(covering) > 1:
        text += f" +{len(covering) - 1}"
    return text


def generate_text_grid(grid: Grid, cell_width: int = CELL_WIDTH) -> str:
    """Render a Grid as fixed-width text.

    Args:
        grid: Output of RenderScheduler.render()
        cell_width: Characters per resource column

    Returns:
        Multi-line string, one block per visible day
    """
    rng = grid.range
    mode = "enforced" if grid.enforce_availability else "overbooking allowed"
    lines = [
        f"{rng.view_type.title()} of {rng.start:%a %d %b %Y} "
        f"({rng.start:%Y-%m-%d} to {rng.end:%Y-%m-%d}), availability {mode}"
    ]

    for day in grid.window.days:
        columns = grid.columns_for(day)
        lines.append("")
        lines.append(f"{day:%a %d %b %Y}")
        header = " | ".join(_fit(c.resource.title, cell_width) for c in columns)
        lines.append(f"{'time'.ljust(TIME_WIDTH)} | {header}".rstrip())
        lines.append("-" * (TIME_WIDTH + (cell_width + 3) * len(columns)))

        for index, row in enumerate(grid.rows):
            cells = [
                _fit(_cell(c, c.slots[index], first=index == 0), cell_width)
                for c in columns
            ]
            lines.append(f"{row.label.ljust(TIME_WIDTH)} | {' | '.join(cells)}".rstrip())

    lines.append("")
    lines.append(
        f"Legend: {CONFLICT} conflict  {HIGH_RISK} high risk  "
        f"{PENDING} pending  {CONTINUES} continues  {OFF_HOURS} outside business hours"
    )
    return "\n".join(lines)


def format_event_list(grid: Grid) -> list[str]:
    """One line per placed event, for summaries."""
    lines = []
    for column in grid.columns:
        for event in column.events:
            appt = event.appointment
            lines.append(
                f"{appt.start:%Y-%m-%d %H:%M}-{appt.end:%H:%M}  "
                f"{column.resource.title:<20} {appt.title} [{event.label}]"
            )
    return sorted(lines)


__all__ = ["generate_text_grid", "format_event_list"]
