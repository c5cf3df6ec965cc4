"""Rule-based coach that turns board geometry into short text hints.

The coach never changes the game. Each tick the engine hands it a
:class:`BoardSnapshot`; the coach checks three rules in priority order
(wall danger, self trap, good move) and returns at most one :class:`Hint`.
Spontaneous hints are rate limited by a cooldown and never repeat the
previously shown text. Notices pushed through :meth:`Advisor.notify` and
:meth:`Advisor.on_game_over` skip both checks.
"""

from __future__ import annotations

import enum
import logging
import time
from collections.abc import Callable, Collection
from dataclasses import dataclass

import numpy as np

from snake_coach.config import AdvisorConfig
from snake_coach.grid import Cell
from snake_coach.snake import Direction

logger = logging.getLogger(__name__)


class HintCategory(str, enum.Enum):
    """Severity tag attached to every hint; presentation is up to the sink."""

    DANGER = "danger"
    WARNING = "warning"
    SUCCESS = "success"
    INFO = "info"


DANGER_MESSAGES: tuple[str, ...] = (
    "⚠️ Wall ahead! Turn now!",
    "🚨 Danger zone! Change direction!",
    "⛔ You're heading into a wall!",
)
TRAP_MESSAGES: tuple[str, ...] = (
    "🔄 You're boxing yourself in!",
    "⚡ Tight space! Plan your escape!",
    "🎯 Leave yourself room to move!",
)
GOOD_MOVE_MESSAGES: tuple[str, ...] = (
    "✨ Nice move! Keep it up!",
    "👍 Good spacing!",
    "🎮 Smooth navigation!",
)

_GAME_OVER_MESSAGES: dict[str, str] = {
    "wall": "💥 Wall collision! Final score: {score}",
    "self": "🔄 Self collision! Final score: {score}",
    "board_full": "🏆 Board cleared! Final score: {score}",
}
_GAME_OVER_DEFAULT = "Game Over! Final score: {score}"


@dataclass(frozen=True)
class Hint:
    """A single message for the hint sink."""

    text: str
    category: HintCategory
    timestamp_ms: float

    def to_dict(self) -> dict:
        return {"text": self.text, "category": self.category.value}


@dataclass(frozen=True)
class BoardSnapshot:
    """Read-only view of the board handed to the coach each tick."""

    head: Cell
    direction: Direction
    body: tuple[Cell, ...]
    cols: int
    rows: int


@dataclass
class AdviceState:
    """What the coach last showed, and when."""

    last_text: str = ""
    last_timestamp_ms: float | None = None

    def reset(self) -> None:
        self.last_text = ""
        self.last_timestamp_ms = None


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


# --- rule predicates -------------------------------------------------------


def is_blocked(cell: Cell, cols: int, rows: int, body: Collection[Cell]) -> bool:
    """A cell is blocked when it is off the board or on the snake."""
    x, y = cell
    if x < 0 or x >= cols or y < 0 or y >= rows:
        return True
    return cell in body


def _neighbors(cell: Cell) -> list[Cell]:
    x, y = cell
    return [(x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)]


def count_blocked(cell: Cell, cols: int, rows: int, body: Collection[Cell]) -> int:
    """Number of the four orthogonal neighbours of *cell* that are blocked."""
    return sum(is_blocked(n, cols, rows, body) for n in _neighbors(cell))


def is_wall_danger(snapshot: BoardSnapshot, threshold: int = 3) -> bool:
    """Head is within *threshold* cells of the wall it is travelling toward."""
    x, y = snapshot.head
    direction = snapshot.direction
    if direction is Direction.RIGHT:
        return x >= snapshot.cols - threshold
    if direction is Direction.LEFT:
        return x < threshold
    if direction is Direction.DOWN:
        return y >= snapshot.rows - threshold
    return y < threshold


def is_self_trap(
    snapshot: BoardSnapshot,
    body: Collection[Cell] | None = None,
    min_blocked: int = 3,
) -> bool:
    """At least *min_blocked* of the head's neighbours are blocked."""
    occupied = body if body is not None else set(snapshot.body)
    blocked = count_blocked(snapshot.head, snapshot.cols, snapshot.rows, occupied)
    return blocked >= min_blocked


def is_good_move(
    snapshot: BoardSnapshot,
    body: Collection[Cell] | None = None,
    min_length: int = 10,
    min_open: int = 3,
) -> bool:
    """A long snake stepping toward the center into open space."""
    if len(snapshot.body) <= min_length:
        return False

    hx, hy = snapshot.head
    dx, dy = snapshot.direction.value
    nx, ny = hx + dx, hy + dy
    cx, cy = snapshot.cols // 2, snapshot.rows // 2
    if abs(nx - cx) + abs(ny - cy) >= abs(hx - cx) + abs(hy - cy):
        return False

    occupied = body if body is not None else set(snapshot.body)
    blocked = count_blocked((nx, ny), snapshot.cols, snapshot.rows, occupied)
    return 4 - blocked >= min_open


# --- coach -----------------------------------------------------------------


class Advisor:
    """Cooldown-gated, priority-ordered hint generator.

    *rng* drives message selection and *clock* returns milliseconds; both
    are injectable so tests can pin them down.
    """

    def __init__(
        self,
        config: AdvisorConfig | None = None,
        rng: np.random.Generator | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.config = config if config is not None else AdvisorConfig()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.clock = clock if clock is not None else _monotonic_ms
        self.state = AdviceState()

    def analyze(self, snapshot: BoardSnapshot) -> Hint | None:
        """Return a hint for this tick, or ``None``."""
        now = self.clock()
        last = self.state.last_timestamp_ms
        if last is not None and now - last < self.config.cooldown_ms:
            return None

        cfg = self.config
        body = set(snapshot.body)
        if is_wall_danger(snapshot, cfg.wall_danger_cells):
            pool, category = DANGER_MESSAGES, HintCategory.DANGER
        elif is_self_trap(snapshot, body, cfg.trap_blocked_min):
            pool, category = TRAP_MESSAGES, HintCategory.WARNING
        elif is_good_move(
            snapshot, body, cfg.good_move_min_length, cfg.good_move_open_min,
        ):
            pool, category = GOOD_MOVE_MESSAGES, HintCategory.SUCCESS
        else:
            return None

        text = pool[int(self.rng.integers(len(pool)))]
        if text == self.state.last_text:
            return None
        return self._record(text, category, now)

    def notify(self, text: str, category: HintCategory = HintCategory.INFO) -> Hint:
        """Emit *text* immediately, skipping cooldown and repeat checks."""
        return self._record(text, category, self.clock())

    def on_game_over(self, score: int, cause: str | None) -> Hint:
        """Announce the final score and why the game ended."""
        key = getattr(cause, "value", cause)
        template = _GAME_OVER_MESSAGES.get(key, _GAME_OVER_DEFAULT)
        return self.notify(template.format(score=score), HintCategory.DANGER)

    def reset(self) -> None:
        """Forget the last message so the next one is not suppressed."""
        self.state.reset()

    def _record(self, text: str, category: HintCategory, now: float) -> Hint:
        self.state.last_text = text
        self.state.last_timestamp_ms = now
        logger.debug("Coach hint (%s): %s", category.value, text)
        return Hint(text=text, category=category, timestamp_ms=now)
