"""
Common bot contract.

Every bot, search based or not, answers ``get_best_move(state, player)`` with
a Move and exposes a name and a difficulty, so a match runner can swap
implementations freely.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from vertex_isolation.envs.isolation.types import GameState, Move, Player


class BotDifficulty(str, Enum):
    """Standard difficulty levels; each bot decides what they mean for it."""
    EASY = 'easy'
    MEDIUM = 'medium'
    HARD = 'hard'


@dataclass
class BotConfig:
    """Options accepted by every bot constructor.

    Attributes:
        difficulty: Difficulty name, 'medium' by default
        move_delay_ms: Minimum time a move takes, None for the bot's default
        verbose: Log the bot's reasoning at INFO instead of DEBUG
    """
    difficulty: str = BotDifficulty.MEDIUM.value
    move_delay_ms: Optional[float] = None
    verbose: bool = False


class GameBot(ABC):
    """Interface all bot implementations follow."""

    @abstractmethod
    def get_best_move(self, state: GameState, player: Player) -> Move:
        """Calculate the move for ``player`` in ``state``."""

    @abstractmethod
    def get_difficulty(self) -> str:
        ...

    @abstractmethod
    def set_difficulty(self, difficulty: str) -> None:
        ...

    @abstractmethod
    def get_name(self) -> str:
        """Human-readable name for this bot."""
