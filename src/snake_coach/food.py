"""Food placement logic."""

from __future__ import annotations

import logging
from collections.abc import Collection
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from snake_coach.grid import Cell, Grid

logger = logging.getLogger(__name__)

# Above this share of occupied cells, sample the free cells directly
# instead of rejection sampling the whole board.
_DENSE_THRESHOLD = 0.5


class FoodSpawner:
    """Picks food cells that the snake does not occupy.

    Uses a seeded NumPy RNG for deterministic, reproducible placement.
    """

    def __init__(
        self,
        rng: np.random.Generator | None = None,
        dense_threshold: float = _DENSE_THRESHOLD,
    ) -> None:
        if not 0.0 < dense_threshold <= 1.0:
            raise ValueError("dense_threshold must be in (0, 1].")
        self.rng = rng if rng is not None else np.random.default_rng()
        self.dense_threshold = dense_threshold

    def place(self, grid: Grid, occupied: Collection[Cell]) -> Cell | None:
        """Return a uniformly chosen cell of *grid* not in *occupied*.

        Returns ``None`` when every cell is occupied.
        """
        blocked = {c for c in occupied if grid.in_bounds(*c)}
        if len(blocked) >= grid.size:
            logger.warning("No free cells available for food placement.")
            return None

        if len(blocked) / grid.size >= self.dense_threshold:
            return self._place_from_free(grid, blocked)

        while True:
            x = int(self.rng.integers(grid.width))
            y = int(self.rng.integers(grid.height))
            if (x, y) not in blocked:
                return x, y

    def _place_from_free(self, grid: Grid, blocked: set[Cell]) -> Cell:
        mask = np.ones((grid.height, grid.width), dtype=bool)
        for x, y in blocked:
            mask[y, x] = False
        ys, xs = np.nonzero(mask)
        idx = int(self.rng.integers(len(xs)))
        return int(xs[idx]), int(ys[idx])
