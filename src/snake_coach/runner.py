"""Drives a :class:`GameEngine` in real time on the asyncio event loop."""

from __future__ import annotations

import logging
from collections.abc import Callable

from snake_coach.advisor import Hint
from snake_coach.engine import GameEngine, GameState
from snake_coach.scheduler import TickScheduler
from snake_coach.snake import Direction

logger = logging.getLogger(__name__)

Listener = Callable[[dict], None]


class GameRunner:
    """Binds an engine to a tick scheduler and fans out frames and hints.

    The timer only runs while the engine is PLAYING: pausing, ending and
    restarting cancel it, and a speed-up after eating reschedules it with
    the new interval before the next tick can fire.

    Listeners receive ``{"type": "frame", "state": {...}}`` after every tick
    or control change and ``{"type": "hint", "text": ..., "category": ...}``
    whenever the coach says something.
    """

    def __init__(self, engine: GameEngine) -> None:
        self.engine = engine
        self.scheduler = TickScheduler(self._on_tick, engine.tick_interval_ms)
        self._listeners: list[Listener] = []
        engine.hint_sink = self._on_hint

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def start(self) -> bool:
        started = self.engine.start()
        self._sync()
        self._publish_frame(self.engine.get_state())
        return started

    def toggle_pause(self) -> bool:
        changed = self.engine.toggle_pause()
        self._sync()
        self._publish_frame(self.engine.get_state())
        return changed

    def restart(self) -> bool:
        self.scheduler.stop()
        restarted = self.engine.restart()
        self._sync()
        self._publish_frame(self.engine.get_state())
        return restarted

    def set_direction(self, direction: Direction) -> bool:
        return self.engine.set_direction(direction)

    async def close(self) -> None:
        await self.scheduler.aclose()
        self._listeners.clear()

    def _on_tick(self) -> None:
        state = self.engine.tick()
        self._sync()
        self._publish_frame(state)
        if self.engine.game_over:
            logger.info(
                "Runner stopped: game ended with score %d.", self.engine.score,
            )

    def _sync(self) -> None:
        """Make the timer match the engine's state and pace."""
        if self.engine.state is not GameState.PLAYING:
            self.scheduler.stop()
            return
        self.scheduler.set_interval(self.engine.tick_interval_ms)
        if not self.scheduler.running:
            self.scheduler.start()

    def _on_hint(self, hint: Hint) -> None:
        self._publish({"type": "hint", **hint.to_dict()})

    def _publish_frame(self, state: dict) -> None:
        self._publish({"type": "frame", "state": state})

    def _publish(self, message: dict) -> None:
        for listener in list(self._listeners):
            try:
                listener(message)
            except Exception:
                logger.warning("Dropping listener that raised.", exc_info=True)
                self.unsubscribe(listener)
