"""Snake Coach — snake game engine with a rule-based coach."""

from snake_coach.advisor import Advisor, BoardSnapshot, Hint, HintCategory
from snake_coach.config import AdvisorConfig, GameConfig
from snake_coach.engine import EndCause, GameEngine, GameState
from snake_coach.grid import Grid
from snake_coach.snake import Direction, Snake

__all__ = [
    "Advisor",
    "AdvisorConfig",
    "BoardSnapshot",
    "Direction",
    "EndCause",
    "GameConfig",
    "GameEngine",
    "GameState",
    "Grid",
    "Hint",
    "HintCategory",
    "Snake",
]
