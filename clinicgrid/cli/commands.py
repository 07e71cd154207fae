"""CLI command implementations.

Contains all cmd_* functions for CLI subcommands.
"""

import sys
from argparse import Namespace
from datetime import date, datetime
from pathlib import Path

from clinicgrid.cli.grid_text import format_event_list, generate_text_grid
from clinicgrid.constants import DEFAULT_RESOURCE_ID
from clinicgrid.models import column_key
from clinicgrid.scheduling import conflict_pairs
from clinicgrid.scheduling.time_axis import minutes_since_midnight
from clinicgrid.storage import (
    ScheduleFile,
    ScheduleLoadError,
    load_schedule,
    save_schedule,
)


def _load_or_exit(path: str | Path) -> ScheduleFile:
    try:
        return load_schedule(path)
    except ScheduleLoadError as e:
        print(f"❌ {e}")
        sys.exit(1)


def _parse_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        print(f"❌ Invalid date '{value}' (expected YYYY-MM-DD)")
        sys.exit(1)


def _write_or_print(text: str, output: str | None, what: str) -> None:
    if output:
        output_path = Path(output)
        output_path.write_text(text)
        print(f"✅ {what} written to {output_path}")
    else:
        print(text)


def cmd_render(args: Namespace) -> None:
    """Render a schedule as a text grid or a standalone HTML page."""
    schedule = _load_or_exit(args.schedule_path)
    scheduler = schedule.build_scheduler(
        current_date=_parse_date(args.date), view=args.view
    )
    grid = scheduler.render()

    if args.format == "html":
        from clinicgrid.web.templating import render_grid_html

        _write_or_print(render_grid_html(grid, title=schedule.name), args.output, "HTML")
        return

    text = generate_text_grid(grid)
    if args.list:
        text += "\n\n" + "\n".join(format_event_list(grid))
    _write_or_print(text, args.output, "Grid")


def cmd_conflicts(args: Namespace) -> None:
    """Report overlapping appointments per resource."""
    schedule = _load_or_exit(args.schedule_path)
    valid = [e for e in schedule.events if e.is_valid]
    pairs = conflict_pairs(valid)

    if not pairs:
        print(f"✅ No conflicts in {args.schedule_path}")
        return

    titles = {r.id: r.title for r in schedule.resources}
    print(f"\n⚠️  {len(pairs)} conflict(s) in {args.schedule_path}\n")
    for a, b in pairs:
        resource = titles.get(a.effective_resource_id, a.effective_resource_id)
        print(f"  {resource}:")
        print(f"    {a.id}: {a.title} {a.start:%Y-%m-%d %H:%M}-{a.end:%H:%M}")
        print(f"    {b.id}: {b.title} {b.start:%Y-%m-%d %H:%M}-{b.end:%H:%M}")
    if args.strict:
        sys.exit(1)


def cmd_move(args: Namespace) -> None:
    """Simulate dragging one appointment and print the outcome."""
    schedule = _load_or_exit(args.schedule_path)
    appt = next((e for e in schedule.events if e.id == args.event_id), None)
    if appt is None:
        print(f"❌ Unknown event '{args.event_id}'")
        sys.exit(1)

    try:
        target = datetime.fromisoformat(args.to)
    except ValueError:
        print(f"❌ Invalid target '{args.to}' (expected YYYY-MM-DDTHH:MM)")
        sys.exit(1)

    resource_id = args.resource or appt.effective_resource_id
    scheduler = schedule.build_scheduler(current_date=target.date())
    if args.allow_overbooking:
        scheduler.enforce_availability = False

    layout = scheduler.layout
    y = layout.minutes_to_pixels(minutes_since_midnight(target, target.date()))
    key = column_key(target.date(), resource_id)

    scheduler.pointer_down(appt.id)
    scheduler.pointer_move(key, y)
    result = scheduler.pointer_up()

    if result is None or not result.committed:
        message = result.rejection.message if result and result.rejection else "Move failed"
        print(f"❌ {message}")
        sys.exit(1)

    if result.intent is None:
        print(f"✅ '{appt.title}' is already at {appt.start:%Y-%m-%d %H:%M}")
        return

    intent = result.intent
    print(
        f"✅ '{appt.title}' -> {intent.new_start:%Y-%m-%d %H:%M}-{intent.new_end:%H:%M} "
        f"on {intent.new_resource_id or DEFAULT_RESOURCE_ID}"
    )

    if args.save:
        events = [
            e.model_copy(
                update={
                    "start": intent.new_start,
                    "end": intent.new_end,
                    "resource_id": intent.new_resource_id,
                }
            )
            if e.id == appt.id
            else e
            for e in schedule.events
        ]
        try:
            path = save_schedule(
                schedule.model_copy(update={"events": events}), args.schedule_path
            )
        except OSError as e:
            print(f"❌ Could not save {args.schedule_path}: {e}")
            sys.exit(1)
        print(f"💾 Saved to {path}")


def cmd_validate(args: Namespace) -> None:
    """Validate a schedule file."""
    print(f"\n🔍 Validating: {args.schedule_path}\n")
    schedule = _load_or_exit(args.schedule_path)

    warnings = []
    for appt in schedule.unknown_resource_events():
        warnings.append(
            f"Event '{appt.id}' uses undeclared resource '{appt.resource_id}' and will not be shown"
        )
    for appt in schedule.events:
        if not appt.is_valid:
            warnings.append(f"Event '{appt.id}' ends before it starts and will be skipped")
    valid = [e for e in schedule.events if e.is_valid]
    for a, b in conflict_pairs(valid):
        warnings.append(f"Events '{a.id}' and '{b.id}' overlap on the same resource")

    print(
        f"   {len(schedule.resources)} resources, {len(schedule.events)} events, "
        f"{schedule.settings.start_hour:02d}:00-{schedule.settings.end_hour:02d}:00 "
        f"in {schedule.settings.slot_minutes}-minute slots"
    )
    if warnings:
        print("\n⚠️  Warnings:")
        for warning in warnings:
            print(f"   • {warning}")

    print(f"\n✅ {schedule.name} is valid")


def cmd_serve(args: Namespace) -> None:
    """Run the web UI."""
    from clinicgrid.web.app import serve

    try:
        serve(args.schedule_path, host=args.host, port=args.port, autosave=args.save)
    except ScheduleLoadError as e:
        print(f"❌ {e}")
        sys.exit(1)


__all__ = [
    "cmd_render",
    "cmd_conflicts",
    "cmd_move",
    "cmd_validate",
    "cmd_serve",
]
