"""Clinic scheduler web UI - FastAPI application.

HTMX-powered drag-and-drop grid over one schedule file.

Usage:
    clinicgrid serve schedules/demo-clinic.yaml --port 8080
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI

from clinicgrid.config import DEFAULT_HOST, DEFAULT_PORT, TEMPLATES_DIR
from clinicgrid.storage import ScheduleFile
from clinicgrid.utils.logging import setup_logging
from clinicgrid.web.board import Board
from clinicgrid.web.routes import router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle handler."""
    board: Board = app.state.board
    logger.info(f"🚀 Starting clinicgrid for '{board.schedule.name}'")
    logger.info(f"📍 Templates: {TEMPLATES_DIR}")
    if board.autosave:
        logger.info(f"💾 Saving changes to {board.path}")
    yield
    logger.info("👋 Shutting down clinicgrid")


def create_app(
    board: Board | None = None,
    schedule_path: str | Path | None = None,
    autosave: bool = False,
) -> FastAPI:
    """Create the FastAPI app with an optional board injection.

    Args:
        board: Board to serve. If None, one is loaded from schedule_path,
            or an empty schedule is used.
        schedule_path: Schedule YAML file to load when no board is given
        autosave: Write committed moves back to schedule_path

    Returns:
        Configured FastAPI application.

    Raises:
        ScheduleLoadError: If schedule_path cannot be loaded
    """
    if board is None:
        if schedule_path is not None:
            board = Board.from_file(schedule_path, autosave=autosave)
        else:
            board = Board(ScheduleFile())

    app = FastAPI(
        title="clinicgrid",
        description="Multi-resource appointment scheduler",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.board = board
    app.include_router(router)
    return app


def serve(
    schedule_path: str | Path,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    autosave: bool = False,
) -> None:
    """Run the web UI with uvicorn (blocking)."""
    import uvicorn

    setup_logging()
    app = create_app(schedule_path=schedule_path, autosave=autosave)
    uvicorn.run(app, host=host, port=port)


__all__ = ["create_app", "serve", "lifespan"]
