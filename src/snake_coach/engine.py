"""Tick-based game engine composing grid, snake, food, and coach."""

from __future__ import annotations

import enum
import logging
import math
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

from snake_coach.advisor import Advisor, BoardSnapshot, Hint, HintCategory
from snake_coach.config import GameConfig
from snake_coach.food import FoodSpawner
from snake_coach.grid import Cell, CellType, Grid
from snake_coach.persistence import HighScoreStore, MemoryHighScoreStore
from snake_coach.snake import Direction, Snake

logger = logging.getLogger(__name__)

START_MESSAGE = "Let's go! Stay alert!"
PAUSE_MESSAGE = "⏸ Game Paused"
RESUME_MESSAGE = "▶ Resumed! Stay focused!"


class GameState(str, enum.Enum):
    """Lifecycle of a single game."""

    READY = "ready"
    PLAYING = "playing"
    PAUSED = "paused"
    ENDED = "ended"


class EndCause(str, enum.Enum):
    """Why a game reached :attr:`GameState.ENDED`."""

    WALL = "wall"
    SELF = "self"
    BOARD_FULL = "board_full"


@dataclass
class GameSession:
    """Mutable per-game counters owned by the engine."""

    state: GameState = GameState.READY
    score: int = 0
    tick_interval_ms: int = 150
    cause: EndCause | None = None
    ticks: int = 0
    pending_direction: Direction = Direction.RIGHT

    def reset(self, config: GameConfig) -> None:
        self.state = GameState.READY
        self.score = 0
        self.tick_interval_ms = config.initial_interval_ms
        self.cause = None
        self.ticks = 0
        self.pending_direction = Direction.RIGHT


class GameEngine:
    """Single-snake game engine with an attached coach.

    The engine owns the grid, snake, food, and session counters. Each call
    to :meth:`tick` advances the game by one step and returns the updated
    state dictionary, including the coach's hint for that step if any.
    Hints are also pushed to *hint_sink*; *renderer* receives the state
    after every successful step.

    *clock* only configures the default coach; a caller supplying its own
    *advisor* sets the clock on that instead.

    The store may be shared with other engines, so the high score is
    re-read from it whenever a game starts or ends.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        seed: int | None = None,
        store: HighScoreStore | None = None,
        advisor: Advisor | None = None,
        clock: Callable[[], float] | None = None,
        hint_sink: Callable[[Hint], None] | None = None,
        renderer: Callable[[dict], None] | None = None,
    ) -> None:
        if advisor is not None and clock is not None:
            raise ValueError("Pass clock to the Advisor, not alongside it.")
        self.config = config if config is not None else GameConfig()
        self.rng = np.random.default_rng(seed)
        self.grid = Grid(
            width=self.config.grid_width, height=self.config.grid_height,
        )
        self.food_spawner = FoodSpawner(rng=self.rng)
        self.advisor = advisor if advisor is not None else Advisor(
            self.config.advisor, rng=self.rng, clock=clock,
        )
        self.store = store if store is not None else MemoryHighScoreStore()
        self.high_score = self.store.load_high_score()
        self.hint_sink = hint_sink
        self.renderer = renderer

        self.session = GameSession()
        self.last_hint: Hint | None = None
        self.snake: Snake
        self.food: Cell | None = None
        self._new_game()

    # --- properties --------------------------------------------------------

    @property
    def state(self) -> GameState:
        return self.session.state

    @property
    def score(self) -> int:
        return self.session.score

    @property
    def tick_interval_ms(self) -> int:
        return self.session.tick_interval_ms

    @property
    def game_over(self) -> bool:
        return self.session.state is GameState.ENDED

    @property
    def speed_level(self) -> int:
        """1 at the starting pace, +1 for every interval decrement applied."""
        step = self.config.interval_decrement_ms
        if step <= 0:
            return 1
        gained = self.config.initial_interval_ms - self.session.tick_interval_ms
        return math.ceil(gained / step) + 1

    @property
    def new_high_score(self) -> bool:
        return self.game_over and 0 < self.session.score == self.high_score

    # --- input -------------------------------------------------------------

    def set_direction(self, direction: Direction) -> bool:
        """Queue *direction* for the next tick, replacing any earlier request.

        Requests are dropped outside play and when they would reverse the
        direction the snake actually moved last tick.
        """
        if self.session.state not in (GameState.PLAYING, GameState.PAUSED):
            return False
        if direction.is_reversal_of(self.snake.direction):
            return False
        self.session.pending_direction = direction
        return True

    # --- lifecycle ---------------------------------------------------------

    def start(self) -> bool:
        """Begin play from READY; from ENDED this is a restart."""
        if self.session.state is GameState.ENDED:
            return self.restart()
        if self.session.state is not GameState.READY:
            return False
        self.session.state = GameState.PLAYING
        self.advisor.reset()
        self._emit(self.advisor.notify(START_MESSAGE, HintCategory.INFO))
        logger.info("Game started on a %dx%d grid.", self.grid.width, self.grid.height)
        return True

    def pause(self) -> bool:
        if self.session.state is not GameState.PLAYING:
            return False
        self.session.state = GameState.PAUSED
        self._emit(self.advisor.notify(PAUSE_MESSAGE, HintCategory.INFO))
        return True

    def resume(self) -> bool:
        if self.session.state is not GameState.PAUSED:
            return False
        self.session.state = GameState.PLAYING
        self._emit(self.advisor.notify(RESUME_MESSAGE, HintCategory.INFO))
        return True

    def toggle_pause(self) -> bool:
        """Pause while playing, resume while paused."""
        if self.session.state is GameState.PLAYING:
            return self.pause()
        return self.resume()

    def restart(self) -> bool:
        """Throw the current game away and start a fresh one."""
        self._new_game()
        return self.start()

    # --- simulation --------------------------------------------------------

    def tick(self) -> dict:
        """Advance the game by one step.

        Returns the full game state as a serializable dict.
        """
        session = self.session
        if session.state is not GameState.PLAYING:
            return self.get_state()

        result = self.snake.advance(session.pending_direction, self.grid, self.food)
        session.ticks += 1

        if not result.ok:
            hint = self._end(EndCause(result.collision.value))
            return self.get_state(hint)

        hint = None
        if result.grew:
            session.score += self.config.food_reward
            session.tick_interval_ms = max(
                self.config.min_interval_ms,
                session.tick_interval_ms - self.config.interval_decrement_ms,
            )
            self.food = self.food_spawner.place(self.grid, self.snake.cells())
            if self.food is None:
                hint = self._end(EndCause.BOARD_FULL)

        self._repaint()
        if hint is None:
            hint = self.advisor.analyze(self.snapshot())
            if hint is not None:
                self._emit(hint)

        state = self.get_state(hint)
        if self.renderer is not None:
            self.renderer(state)
        return state

    def snapshot(self) -> BoardSnapshot:
        """Read-only view of the board for the coach."""
        return BoardSnapshot(
            head=self.snake.head,
            direction=self.snake.direction,
            body=tuple(self.snake.body),
            cols=self.grid.width,
            rows=self.grid.height,
        )

    def get_state(self, hint: Hint | None = None) -> dict:
        """Return the full, serializable game state."""
        session = self.session
        return {
            "tick": session.ticks,
            "state": session.state.value,
            "score": session.score,
            "high_score": self.high_score,
            "new_high_score": self.new_high_score,
            "speed_level": self.speed_level,
            "tick_interval_ms": session.tick_interval_ms,
            "cause": session.cause.value if session.cause else None,
            "grid": self.grid.to_dict(),
            "snake": self.snake.to_dict(),
            "food": list(self.food) if self.food is not None else None,
            "hint": hint.to_dict() if hint is not None else None,
        }

    # --- internals ---------------------------------------------------------

    def _new_game(self) -> None:
        self.session.reset(self.config)
        self.high_score = max(self.high_score, self.store.load_high_score())
        start_x, start_y = self.grid.center
        self.snake = Snake(
            start_x, start_y, Direction.RIGHT,
            length=self.config.initial_snake_length,
        )
        self.food = self.food_spawner.place(self.grid, self.snake.cells())
        self._repaint()

    def _repaint(self) -> None:
        self.grid.clear()
        self.grid.paint(self.snake.body, CellType.SNAKE)
        if self.food is not None:
            self.grid.set(self.food[0], self.food[1], CellType.FOOD)

    def _end(self, cause: EndCause) -> Hint:
        session = self.session
        session.state = GameState.ENDED
        session.cause = cause
        self.high_score = max(self.high_score, self.store.load_high_score())
        if session.score > self.high_score:
            self.high_score = session.score
            self.store.save_high_score(session.score)
        logger.info(
            "Game ended (%s) at tick %d with score %d.",
            cause.value, session.ticks, session.score,
        )
        return self._emit(self.advisor.on_game_over(session.score, cause))

    def _emit(self, hint: Hint) -> Hint:
        self.last_hint = hint
        if self.hint_sink is not None:
            self.hint_sink(hint)
        return hint
