"""Pydantic models for API request/response schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field

from snake_coach.engine import GameState


class CreateSessionRequest(BaseModel):
    """Request body for POST /sessions."""

    grid_width: int = Field(default=20, ge=4, le=100)
    grid_height: int = Field(default=20, ge=4, le=100)
    initial_interval_ms: int = Field(default=150, ge=10, le=2000)
    interval_decrement_ms: int = Field(default=5, ge=0, le=500)
    min_interval_ms: int = Field(default=50, ge=10, le=2000)
    seed: int | None = None


class SessionSummary(BaseModel):
    """Compact session info for list endpoints."""

    session_id: str
    state: GameState
    score: int
    high_score: int
    tick_interval_ms: int


class ActionResponse(BaseModel):
    """Result of a start/pause/restart request."""

    session_id: str
    changed: bool
    state: GameState
