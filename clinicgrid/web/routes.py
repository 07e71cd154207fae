"""Scheduler API routes.

HTMX-powered endpoints. Page-level actions return the grid partial; pointer
updates during a drag return JSON so the browser can move the ghost block.
"""

import logging
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import HTMLResponse

from clinicgrid.constants import DragHandle, ViewType
from clinicgrid.web.board import Board
from clinicgrid.web.templating import templates

logger = logging.getLogger(__name__)

router = APIRouter(tags=["scheduler"])

NAVIGATE_ACTIONS = ("next", "previous", "today", "go_to")


def get_board(request: Request) -> Board:
    """Board configured on the app at startup."""
    return request.app.state.board


BoardDep = Annotated[Board, Depends(get_board)]


def _render_grid(
    request: Request, board: Board, name: str = "components/grid.html"
) -> HTMLResponse:
    """Render the grid with the board's pending notice, then clear it."""
    grid = board.scheduler.render()
    context = {
        "grid": grid,
        "title": board.schedule.name,
        "interactive": True,
        "notice": board.notice,
        "rejected": board.last_rejection is not None,
        "selected": board.selected_event,
    }
    board.clear_messages()
    return templates.TemplateResponse(
        request=request,
        name=name,
        context=context,
        headers={"HX-Trigger": "grid-updated"},
    )


@router.get("/", response_class=HTMLResponse)
def index(request: Request, board: BoardDep):
    """Render the full scheduler page."""
    with board.lock:
        return _render_grid(request, board, name="scheduler.html")


@router.get("/grid", response_class=HTMLResponse)
def grid_partial(request: Request, board: BoardDep):
    """Render the grid fragment."""
    with board.lock:
        return _render_grid(request, board)


@router.get("/api/grid")
def grid_json(board: BoardDep):
    """Grid as JSON for non-HTML clients."""
    with board.lock:
        return board.scheduler.render().model_dump(mode="json")


@router.post("/navigate/{action}", response_class=HTMLResponse)
def navigate(
    request: Request,
    action: str,
    board: BoardDep,
    target: Annotated[date | None, Form()] = None,
):
    """Page through dates: next, previous, today, or go_to a target date."""
    if action not in NAVIGATE_ACTIONS:
        raise HTTPException(status_code=404, detail=f"Unknown action '{action}'")
    with board.lock:
        scheduler = board.scheduler
        if action == "go_to":
            if target is None:
                raise HTTPException(status_code=422, detail="go_to requires a target date")
            scheduler.go_to(target)
        else:
            getattr(scheduler, action)()
        logger.debug(f"Navigated {action} to {board.current_range}")
        return _render_grid(request, board)


@router.post("/view/{view}", response_class=HTMLResponse)
def switch_view(request: Request, view: ViewType, board: BoardDep):
    """Switch between day and week view."""
    with board.lock:
        board.scheduler.set_view(view)
        return _render_grid(request, board)


@router.post("/drag/start")
def drag_start(
    board: BoardDep,
    appointment_id: Annotated[str, Form()],
    handle: Annotated[DragHandle | None, Form()] = None,
):
    """Pointer down on an event body, or on one of its edges to resize."""
    with board.lock:
        session = board.scheduler.pointer_down(appointment_id, handle=handle)
        if session is None:
            raise HTTPException(
                status_code=409, detail=f"Cannot start dragging '{appointment_id}'"
            )
        return {
            "state": board.scheduler.controller.state,
            "session": session.model_dump(mode="json"),
        }


@router.post("/drag/hover")
def drag_hover(
    board: BoardDep,
    y: Annotated[float, Form()],
    column: Annotated[str | None, Form()] = None,
):
    """Pointer move: update the proposed drop target."""
    with board.lock:
        session = board.scheduler.pointer_move(column, y)
        if session is None:
            raise HTTPException(status_code=409, detail="No drag in progress")
        return {
            "state": board.scheduler.controller.state,
            "session": session.model_dump(mode="json"),
        }


@router.post("/drag/drop", response_class=HTMLResponse)
def drag_drop(request: Request, board: BoardDep):
    """Pointer up: commit or revert, then redraw."""
    with board.lock:
        result = board.scheduler.pointer_up()
        if result is None:
            raise HTTPException(status_code=409, detail="No drag in progress")
        return _render_grid(request, board)


@router.post("/drag/cancel", response_class=HTMLResponse)
def drag_cancel(request: Request, board: BoardDep):
    """Escape key: abandon the gesture."""
    with board.lock:
        if board.scheduler.escape() is None:
            raise HTTPException(status_code=409, detail="No drag in progress")
        return _render_grid(request, board)


@router.post("/slots/select", response_class=HTMLResponse)
def select_slot(
    request: Request,
    board: BoardDep,
    column: Annotated[str, Form()],
    y: Annotated[float, Form()],
    end_y: Annotated[float | None, Form()] = None,
):
    """Click or drag-select empty space to request a new appointment."""
    with board.lock:
        selection = board.scheduler.click_slot(column, y, end_y)
        if selection is None:
            raise HTTPException(status_code=409, detail="Selection ignored")
        return _render_grid(request, board)


@router.post("/events/{appointment_id}/select", response_class=HTMLResponse)
def select_event(request: Request, appointment_id: str, board: BoardDep):
    """Click an event to show its details."""
    with board.lock:
        appt = board.scheduler.click_event(appointment_id)
        if appt is None:
            raise HTTPException(
                status_code=404, detail=f"Appointment '{appointment_id}' not found"
            )
        style = appt.status.style()
        return templates.TemplateResponse(
            request=request,
            name="components/event_detail.html",
            context={"appointment": appt, "style": style},
        )


@router.get("/health")
def health(board: BoardDep):
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "clinicgrid",
        "drag_state": board.scheduler.controller.state,
    }
