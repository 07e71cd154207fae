"""Jinja2 templates shared by the web routes and the CLI HTML export."""

from fastapi.templating import Jinja2Templates

from clinicgrid.config import TEMPLATES_DIR
from clinicgrid.models import Grid, PlacedEvent

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def event_style(event: PlacedEvent) -> str:
    """Inline CSS placing an event block inside its column."""
    width = 100 / event.lane_count
    return (
        f"top: {event.top:.1f}px; height: {event.height:.1f}px; "
        f"left: {event.lane_index * width:.3f}%; width: {width:.3f}%;"
    )


templates.env.filters["event_style"] = event_style


def render_grid_html(
    grid: Grid, title: str = "Schedule", interactive: bool = False
) -> str:
    """Render a complete standalone HTML page for a grid."""
    template = templates.get_template("scheduler.html")
    return template.render(
        grid=grid, title=title, interactive=interactive, notice=None, selected=None
    )


__all__ = ["templates", "event_style", "render_grid_html"]
