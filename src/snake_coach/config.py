"""Game and coach configuration."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdvisorConfig:
    """Thresholds for the rule-based coach."""

    cooldown_ms: int = 3000
    wall_danger_cells: int = 3
    trap_blocked_min: int = 3
    good_move_min_length: int = 10
    good_move_open_min: int = 3

    def __post_init__(self) -> None:
        if self.cooldown_ms < 0:
            raise ValueError("cooldown_ms must be >= 0.")
        if self.wall_danger_cells < 1:
            raise ValueError("wall_danger_cells must be at least 1.")
        if not 1 <= self.trap_blocked_min <= 4:
            raise ValueError("trap_blocked_min must be between 1 and 4.")
        if not 1 <= self.good_move_open_min <= 4:
            raise ValueError("good_move_open_min must be between 1 and 4.")


@dataclass(frozen=True)
class GameConfig:
    """Full game configuration.

    Supports JSON serialization so a tuned setup can be reused.
    """

    # Board
    grid_width: int = 20
    grid_height: int = 20
    initial_snake_length: int = 3

    # Pace (milliseconds per tick)
    initial_interval_ms: int = 150
    interval_decrement_ms: int = 5
    min_interval_ms: int = 50

    # Scoring
    food_reward: int = 10

    # Coach
    advisor: AdvisorConfig = field(default_factory=AdvisorConfig)

    def __post_init__(self) -> None:
        if self.grid_width < 4 or self.grid_height < 4:
            raise ValueError("grid_width and grid_height must each be at least 4.")
        if self.initial_snake_length < 1:
            raise ValueError("initial_snake_length must be at least 1.")
        if self.initial_snake_length > self.grid_width // 2 + 1:
            raise ValueError(
                "initial_snake_length does not fit the configured grid; "
                "increase grid_width or reduce the length."
            )
        if self.min_interval_ms < 1:
            raise ValueError("min_interval_ms must be at least 1.")
        if self.initial_interval_ms < self.min_interval_ms:
            raise ValueError("initial_interval_ms must be >= min_interval_ms.")
        if self.interval_decrement_ms < 0:
            raise ValueError("interval_decrement_ms must be >= 0.")
        if self.food_reward < 0:
            raise ValueError("food_reward must be >= 0.")

    def to_dict(self) -> dict:
        """Serialize to a plain dict."""
        return asdict(self)

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def from_dict(cls, raw: dict) -> GameConfig:
        data = dict(raw)
        advisor_data = data.pop("advisor", {})
        return cls(advisor=AdvisorConfig(**advisor_data), **data)

    @classmethod
    def load(cls, path: str | Path) -> GameConfig:
        """Load config from a JSON file."""
        return cls.from_dict(json.loads(Path(path).read_text()))
