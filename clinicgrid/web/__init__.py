"""Web adapter: FastAPI routes and Jinja2/HTMX templates over one Board."""

from clinicgrid.web.app import create_app, serve
from clinicgrid.web.board import Board
from clinicgrid.web.templating import render_grid_html

__all__ = ["Board", "create_app", "render_grid_html", "serve"]
