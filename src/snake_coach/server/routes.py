"""REST API route handlers for session lifecycle management."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, Response

from snake_coach.server.models import (
    ActionResponse,
    CreateSessionRequest,
    SessionSummary,
)
from snake_coach.server.session_manager import SessionInstance, SessionManager

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _get_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def _require(request: Request, session_id: str) -> SessionInstance:
    try:
        return _get_manager(request).require_session(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Session not found.") from exc


def _action(session: SessionInstance, changed: bool) -> ActionResponse:
    return ActionResponse(
        session_id=session.session_id,
        changed=changed,
        state=session.engine.state,
    )


@router.post("", status_code=201)
async def create_session(
    body: CreateSessionRequest, request: Request,
) -> SessionSummary:
    """Create a new game session in the READY state."""
    manager = _get_manager(request)
    try:
        session = manager.create_session(
            grid_width=body.grid_width,
            grid_height=body.grid_height,
            initial_interval_ms=body.initial_interval_ms,
            interval_decrement_ms=body.interval_decrement_ms,
            min_interval_ms=body.min_interval_ms,
            seed=body.seed,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except OverflowError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return session.summary()


@router.get("")
async def list_sessions(request: Request) -> list[SessionSummary]:
    """List all sessions."""
    return _get_manager(request).list_sessions()


@router.get("/{session_id}")
async def get_session(session_id: str, request: Request) -> dict:
    """Get the session summary plus the full board state."""
    session = _require(request, session_id)
    result = session.summary().model_dump(mode="json")
    result["board"] = session.engine.get_state()
    hint = session.engine.last_hint
    result["last_hint"] = hint.to_dict() if hint is not None else None
    return result


@router.post("/{session_id}/start")
async def start_session(session_id: str, request: Request) -> ActionResponse:
    """Start play (or restart an ended game)."""
    session = _require(request, session_id)
    return _action(session, session.runner.start())


@router.post("/{session_id}/pause")
async def pause_session(session_id: str, request: Request) -> ActionResponse:
    """Toggle between PLAYING and PAUSED."""
    session = _require(request, session_id)
    return _action(session, session.runner.toggle_pause())


@router.post("/{session_id}/restart")
async def restart_session(session_id: str, request: Request) -> ActionResponse:
    """Reset score, pace, snake and food, then start again."""
    session = _require(request, session_id)
    return _action(session, session.runner.restart())


@router.delete("/{session_id}", status_code=204)
async def delete_session(session_id: str, request: Request) -> Response:
    """Stop the session's timer and remove it."""
    try:
        await _get_manager(request).remove_session(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Session not found.") from exc
    return Response(status_code=204)
