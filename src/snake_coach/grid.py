"""Grid geometry for the snake game."""

from __future__ import annotations

import enum
from collections.abc import Iterable

import numpy as np

Cell = tuple[int, int]


class CellType(enum.IntEnum):
    """Integer codes stored in the grid array."""

    EMPTY = 0
    SNAKE = 1
    FOOD = 2


class Grid:
    """NumPy-backed game grid with configurable dimensions.

    Coordinates are ``(x, y)`` pairs: ``x`` is the column and ``y`` the row.
    The backing array is indexed ``cells[y, x]`` so it reads naturally when
    printed row by row.
    """

    def __init__(self, width: int = 20, height: int = 20) -> None:
        if width < 4 or height < 4:
            raise ValueError("Grid dimensions must be at least 4×4.")
        self.width = width
        self.height = height
        self.cells = np.zeros((height, width), dtype=np.int8)

    @property
    def size(self) -> int:
        """Total number of cells."""
        return self.width * self.height

    @property
    def center(self) -> Cell:
        """Middle cell; new snakes spawn here."""
        return self.width // 2, self.height // 2

    def clear(self) -> None:
        """Reset all cells to empty."""
        self.cells[:] = CellType.EMPTY

    def in_bounds(self, x: int, y: int) -> bool:
        """Check whether a coordinate lies within the grid."""
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> CellType:
        """Return the cell type at the given coordinate."""
        return CellType(self.cells[y, x])

    def set(self, x: int, y: int, cell_type: CellType) -> None:
        """Set the cell type at the given coordinate."""
        self.cells[y, x] = cell_type

    def paint(self, cells: Iterable[Cell], cell_type: CellType) -> None:
        """Set every coordinate in *cells* to *cell_type*."""
        for x, y in cells:
            self.cells[y, x] = cell_type

    def to_dict(self) -> dict:
        """Serialize grid state to a dictionary."""
        return {
            "width": self.width,
            "height": self.height,
            "cells": self.cells.tolist(),
        }
