"""In-memory session registry and lifecycle management."""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field

from snake_coach.config import GameConfig
from snake_coach.engine import GameEngine, GameState
from snake_coach.persistence import HighScoreStore, MemoryHighScoreStore
from snake_coach.runner import GameRunner
from snake_coach.server.models import SessionSummary

logger = logging.getLogger(__name__)

_MAX_SESSIONS = 100


@dataclass
class SessionInstance:
    """One player's game and the runner ticking it."""

    session_id: str
    runner: GameRunner
    created_at: float = field(default_factory=time.monotonic)

    @property
    def engine(self) -> GameEngine:
        return self.runner.engine

    def summary(self) -> SessionSummary:
        engine = self.engine
        return SessionSummary(
            session_id=self.session_id,
            state=engine.state,
            score=engine.score,
            high_score=engine.high_score,
            tick_interval_ms=engine.tick_interval_ms,
        )


class SessionManager:
    """Central registry managing all sessions.

    All sessions share one high-score store.
    """

    def __init__(
        self,
        store: HighScoreStore | None = None,
        max_sessions: int = _MAX_SESSIONS,
    ) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1.")
        self.store = store if store is not None else MemoryHighScoreStore()
        self._sessions: dict[str, SessionInstance] = {}
        self._max_sessions = max_sessions

    def create_session(
        self,
        grid_width: int = 20,
        grid_height: int = 20,
        initial_interval_ms: int = 150,
        interval_decrement_ms: int = 5,
        min_interval_ms: int = 50,
        seed: int | None = None,
    ) -> SessionInstance:
        """Create a new READY session and return it."""
        config = GameConfig(
            grid_width=grid_width,
            grid_height=grid_height,
            initial_interval_ms=initial_interval_ms,
            interval_decrement_ms=interval_decrement_ms,
            min_interval_ms=min_interval_ms,
        )
        if len(self._sessions) >= self._max_sessions:
            self._prune_ended_sessions()
        if len(self._sessions) >= self._max_sessions:
            raise OverflowError("Too many active sessions. Try again later.")

        engine = GameEngine(config=config, seed=seed, store=self.store)
        session_id = uuid.uuid4().hex[:12]
        instance = SessionInstance(session_id=session_id, runner=GameRunner(engine))
        self._sessions[session_id] = instance
        logger.info(
            "Session %s created (%dx%d).", session_id, grid_width, grid_height,
        )
        return instance

    def get_session(self, session_id: str) -> SessionInstance | None:
        return self._sessions.get(session_id)

    def require_session(self, session_id: str) -> SessionInstance:
        session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(f"Session {session_id} not found.")
        return session

    def list_sessions(self) -> list[SessionSummary]:
        return [s.summary() for s in self._sessions.values()]

    async def remove_session(self, session_id: str) -> None:
        """Stop a session's timer and forget it."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise KeyError(f"Session {session_id} not found.")
        await session.runner.close()
        logger.info("Session %s removed.", session_id)

    def _prune_ended_sessions(self) -> None:
        """Drop the oldest ended sessions until there is room for one more."""
        ended = sorted(
            (s for s in self._sessions.values() if s.engine.state is GameState.ENDED),
            key=lambda s: s.created_at,
        )
        overflow = len(self._sessions) - self._max_sessions + 1
        for stale in ended[:overflow]:
            self._sessions.pop(stale.session_id, None)
        if ended[:overflow]:
            logger.info("Pruned %d ended sessions.", len(ended[:overflow]))

    async def cleanup(self) -> None:
        """Cancel every running timer."""
        for session in list(self._sessions.values()):
            await session.runner.close()
        logger.info("SessionManager cleanup complete.")
