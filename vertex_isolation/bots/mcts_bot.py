import logging
import time
from dataclasses import replace
from typing import Optional

from vertex_isolation.algos.mcts.config import MCTSConfig, get_preset_config
from vertex_isolation.algos.mcts.tree_search import MCTS
from vertex_isolation.bots.base import BotConfig, BotDifficulty, GameBot
from vertex_isolation.bots.utils import add_bot_thinking_delay
from vertex_isolation.envs.isolation.cloning import deep_clone
from vertex_isolation.envs.isolation.rules import get_valid_moves
from vertex_isolation.envs.isolation.types import GameState, Move, Player
from vertex_isolation.errors import NoLegalMoveError

logger = logging.getLogger(__name__)

_MOVE_DELAYS = {
    BotDifficulty.EASY.value: 800,
    BotDifficulty.MEDIUM.value: 1500,
    BotDifficulty.HARD.value: 3000,
}


class MCTSBot(GameBot):
    """
    Bot that picks its moves with Monte Carlo Tree Search.

    The answer always takes at least ``move_delay_ms``; when the engine fails
    for any reason the bot plays the first legal action instead and counts it
    in ``fallback_count``.
    """

    def __init__(self, config: Optional[BotConfig] = None, mcts_config: Optional[MCTSConfig] = None):
        config = config or BotConfig()
        self.difficulty = config.difficulty
        self.move_delay_ms = config.move_delay_ms if config.move_delay_ms is not None else 500
        self.verbose = config.verbose
        self.fallback_count = 0

        self.config = mcts_config if mcts_config is not None else get_preset_config(self.difficulty)
        if self.verbose:
            self.config = replace(self.config, enable_debug_logging=True)

        self.engine = MCTS(self.config)
        self._log("%s initialized: %d sims, %.0f ms time limit", self.get_name(),
                  self.config.max_simulations, self.config.max_thinking_time_ms)

    def _log(self, msg, *args):
        logger.log(logging.INFO if self.verbose else logging.DEBUG, msg, *args)

    def get_name(self) -> str:
        return f"MCTS Bot ({self.difficulty})"

    def get_difficulty(self) -> str:
        return self.difficulty

    def set_difficulty(self, difficulty: str) -> None:
        self.difficulty = difficulty
        self.config = get_preset_config(difficulty)
        if self.verbose:
            self.config = replace(self.config, enable_debug_logging=True)
        self.engine = MCTS(self.config)
        self.move_delay_ms = _MOVE_DELAYS.get(difficulty, 1500)
        self._log("%s difficulty changed to %s", self.get_name(), difficulty)

    def get_best_move(self, state: GameState, player: Player) -> Move:
        self._log("%s calculating move for %s at %s", self.get_name(), player.name, player.position)
        start = time.perf_counter()

        try:
            # the engine never sees the caller's state object
            best_move = self.engine.search(deep_clone(state), player)
        except Exception:
            logger.exception("%s search failed", self.get_name())
            self.fallback_count += 1
            fallback = self.get_emergency_move(state, player)
            self._log("Using emergency fallback move: %s", fallback.describe())
            return fallback

        search_ms = (time.perf_counter() - start) * 1000.0
        stats = self.engine.get_statistics()
        self._log("%s selected %s in %.0f ms (%d total simulations, avg depth %.1f)",
                  self.get_name(), best_move.describe(), search_ms,
                  stats['total_simulations'], stats['average_depth'])

        add_bot_thinking_delay(self.move_delay_ms - search_ms)
        return best_move

    def get_emergency_move(self, state: GameState, player: Player) -> Move:
        """First legal action from a fresh enumeration: a step if any, else a cut."""
        valid = get_valid_moves(state, player)
        position = state.players[state.player_index(player.id)].position
        if valid.moves:
            return Move.step(player.id, position, valid.moves[0])
        if valid.cuts:
            start, end = valid.cuts[0]
            return Move.cut(player.id, start, end)
        raise NoLegalMoveError(f"{self.get_name()}: no valid moves available - player is isolated",
                               context={'player': player.id})

    def get_config(self) -> MCTSConfig:
        return replace(self.config)

    def update_config(self, **updates) -> None:
        """Change search parameters at runtime; the engine is rebuilt."""
        self.config = replace(self.config, **updates)
        self.engine = MCTS(self.config)
        self._log("%s configuration updated: %s", self.get_name(), updates)

    def get_stats(self) -> dict:
        stats = self.engine.get_statistics()
        stats['fallback_count'] = self.fallback_count
        return stats

    def reset(self) -> None:
        """Prepare for a new game."""
        self.engine.reset()
        self.fallback_count = 0
        self._log("%s reset for new game", self.get_name())

    def set_verbose(self, verbose: bool) -> None:
        self.verbose = verbose
        self.config = replace(self.config, enable_debug_logging=verbose)
        self.engine = MCTS(self.config)
