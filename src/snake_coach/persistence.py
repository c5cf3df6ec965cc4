"""High-score storage backends."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class HighScoreStore(Protocol):
    """Where the engine keeps the best score between sessions."""

    def load_high_score(self) -> int: ...

    def save_high_score(self, score: int) -> None: ...


class MemoryHighScoreStore:
    """Process-local store, handy for tests and throwaway sessions."""

    def __init__(self, initial: int = 0) -> None:
        self.high_score = initial
        self.saves = 0

    def load_high_score(self) -> int:
        return self.high_score

    def save_high_score(self, score: int) -> None:
        self.high_score = score
        self.saves += 1


class JsonHighScoreStore:
    """Keeps the high score in a small JSON file.

    A missing or unreadable file counts as a high score of 0.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load_high_score(self) -> int:
        if not self.path.exists():
            return 0
        try:
            raw = json.loads(self.path.read_text())
            score = int(raw.get("high_score", 0))
        except (ValueError, TypeError, AttributeError):
            logger.warning("Ignoring unreadable high score file %s", self.path)
            return 0
        return max(score, 0)

    def save_high_score(self, score: int) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"high_score": score}))
        logger.info("High score %d saved to %s", score, self.path)
