"""Snake representation and movement logic."""

from __future__ import annotations

import enum
from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from snake_coach.grid import Cell, Grid


class Direction(enum.Enum):
    """Cardinal movement directions with (dx, dy) values."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def opposite(self) -> Direction:
        """The direction that would reverse travel."""
        return _OPPOSITES[self]

    def is_reversal_of(self, other: Direction) -> bool:
        """Return True if moving this way would turn 180° from *other*."""
        return _OPPOSITES[other] is self


# Pairs that would cause an instant 180° reversal.
_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


class Collision(str, enum.Enum):
    """What the head ran into."""

    WALL = "wall"
    SELF = "self"


@dataclass(frozen=True)
class AdvanceResult:
    """Outcome of a single :meth:`Snake.advance` call."""

    collision: Collision | None = None
    grew: bool = False

    @property
    def ok(self) -> bool:
        return self.collision is None


class Snake:
    """A snake represented as an ordered deque of (x, y) body segments.

    The head is ``body[0]``; the tail is ``body[-1]``. Only
    :meth:`advance` mutates the body once the snake is built.
    """

    def __init__(
        self,
        start_x: int,
        start_y: int,
        direction: Direction = Direction.RIGHT,
        length: int = 3,
    ) -> None:
        if length < 1:
            raise ValueError("Snake length must be at least 1.")
        dx, dy = direction.value
        self.body: deque[Cell] = deque()
        for i in range(length):
            self.body.append((start_x - dx * i, start_y - dy * i))
        self.direction = direction

    @property
    def head(self) -> Cell:
        """Return the head coordinate."""
        return self.body[0]

    def __len__(self) -> int:
        return len(self.body)

    def next_head(self, direction: Direction | None = None) -> Cell:
        """Compute the next head position without moving."""
        dx, dy = (direction or self.direction).value
        x, y = self.head
        return x + dx, y + dy

    def advance(
        self,
        requested: Direction,
        grid: Grid,
        food: Cell | None,
    ) -> AdvanceResult:
        """Move the snake one step, growing if the new head lands on *food*.

        *requested* is ignored when it would reverse the current direction.
        Self-collision is tested against the whole body, tail included, as
        it stood before this move. The body is left untouched on collision.
        """
        if not requested.is_reversal_of(self.direction):
            self.direction = requested

        new_head = self.next_head()
        if not grid.in_bounds(*new_head):
            return AdvanceResult(collision=Collision.WALL)
        if new_head in self.body:
            return AdvanceResult(collision=Collision.SELF)

        self.body.appendleft(new_head)
        if new_head == food:
            return AdvanceResult(grew=True)
        self.body.pop()
        return AdvanceResult()

    def cells(self) -> set[Cell]:
        """Return the body as a set for membership tests."""
        return set(self.body)

    def to_dict(self) -> dict:
        """Serialize snake state to a dictionary."""
        return {
            "body": [list(seg) for seg in self.body],
            "direction": self.direction.name.lower(),
            "length": len(self.body),
        }
