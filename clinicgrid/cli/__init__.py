"""clinicgrid CLI - Command-line interface for schedule files.

This package provides the CLI entry point and command implementations.

Usage:
    clinicgrid render schedules/demo-clinic.yaml --view day --date 2025-01-15
    clinicgrid render schedules/demo-clinic.yaml --format html -o week.html
    clinicgrid conflicts schedules/demo-clinic.yaml
    clinicgrid move schedules/demo-clinic.yaml 1 --to 2025-01-15T11:00
    clinicgrid validate schedules/demo-clinic.yaml
    clinicgrid serve schedules/demo-clinic.yaml --port 8080
"""

import argparse

# Import submodules for package access
from clinicgrid.cli import commands, grid_text
from clinicgrid.cli.commands import (
    cmd_conflicts,
    cmd_move,
    cmd_render,
    cmd_serve,
    cmd_validate,
)
from clinicgrid.config import DEFAULT_HOST, DEFAULT_PORT
from clinicgrid.constants import ViewType
from clinicgrid.utils.logging import setup_logging

__all__ = [
    # Submodules
    "commands",
    "grid_text",
    # Entry points
    "main",
    "create_parser",
]


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the CLI argument parser.

    Returns:
        Configured ArgumentParser for testing and main().
    """
    parser = argparse.ArgumentParser(
        description="clinicgrid - multi-resource appointment scheduler",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--log-level", default=None, help="Logging level (default: CLINICGRID_LOG_LEVEL)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # render
    render_parser = subparsers.add_parser("render", help="Render a schedule grid")
    render_parser.add_argument("schedule_path", help="Path to schedule YAML file")
    render_parser.add_argument(
        "--date", "-d", type=str, default=None, help="Focus date (YYYY-MM-DD)"
    )
    render_parser.add_argument(
        "--view",
        choices=[v.value for v in ViewType],
        default=None,
        help="Day or week (default: from the file)",
    )
    render_parser.add_argument(
        "--format", "-f", choices=["text", "html"], default="text", help="Output format"
    )
    render_parser.add_argument(
        "--list", "-l", action="store_true", help="Append a list of placed events"
    )
    render_parser.add_argument(
        "--output", "-o", type=str, help="Output file (default: stdout)"
    )
    render_parser.set_defaults(func=cmd_render)

    # conflicts
    conflicts_parser = subparsers.add_parser(
        "conflicts", help="Report double-booked resources"
    )
    conflicts_parser.add_argument("schedule_path", help="Path to schedule YAML file")
    conflicts_parser.add_argument(
        "--strict", action="store_true", help="Exit with status 1 if any conflict"
    )
    conflicts_parser.set_defaults(func=cmd_conflicts)

    # move
    move_parser = subparsers.add_parser(
        "move", help="Simulate dragging an appointment to a new slot"
    )
    move_parser.add_argument("schedule_path", help="Path to schedule YAML file")
    move_parser.add_argument("event_id", help="Appointment id")
    move_parser.add_argument(
        "--to", "-t", required=True, help="New start (YYYY-MM-DDTHH:MM)"
    )
    move_parser.add_argument(
        "--resource", "-r", default=None, help="Target resource id (default: unchanged)"
    )
    move_parser.add_argument(
        "--allow-overbooking",
        action="store_true",
        help="Skip the availability check",
    )
    move_parser.add_argument(
        "--save", "-s", action="store_true", help="Write the result back to the file"
    )
    move_parser.set_defaults(func=cmd_move)

    # validate
    validate_parser = subparsers.add_parser(
        "validate", help="Validate schedule YAML schema"
    )
    validate_parser.add_argument("schedule_path", help="Path to schedule YAML file")
    validate_parser.set_defaults(func=cmd_validate)

    # serve
    serve_parser = subparsers.add_parser("serve", help="Run the web UI")
    serve_parser.add_argument("schedule_path", help="Path to schedule YAML file")
    serve_parser.add_argument("--host", default=DEFAULT_HOST, help="Bind address")
    serve_parser.add_argument("--port", "-p", type=int, default=DEFAULT_PORT, help="Port")
    serve_parser.add_argument(
        "--save", "-s", action="store_true", help="Persist committed moves to the file"
    )
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None):
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    setup_logging(args.log_level)
    args.func(args)


if __name__ == "__main__":
    main()
