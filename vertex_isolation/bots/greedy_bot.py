import logging
import random
from typing import Optional

from vertex_isolation.bots.base import BotConfig, BotDifficulty, GameBot
from vertex_isolation.bots.utils import add_bot_thinking_delay, best_by_degree, get_enhanced_valid_moves
from vertex_isolation.envs.isolation.types import GameState, Move, Player
from vertex_isolation.errors import NoLegalMoveError

logger = logging.getLogger(__name__)

_MOVE_DELAYS = {
    BotDifficulty.EASY.value: 800,
    BotDifficulty.MEDIUM.value: 500,
    BotDifficulty.HARD.value: 300,
}


class GreedyBot(GameBot):
    """
    Always steps to the adjacent vertex with the most remaining edges.
    Ties are broken at random.
    """

    def __init__(self, config: Optional[BotConfig] = None):
        config = config or BotConfig()
        self.difficulty = config.difficulty
        self.move_delay_ms = config.move_delay_ms if config.move_delay_ms is not None else 500
        self.verbose = config.verbose

    def get_name(self) -> str:
        return 'Greedy Bot'

    def get_difficulty(self) -> str:
        return self.difficulty

    def set_difficulty(self, difficulty: str) -> None:
        self.difficulty = difficulty
        if difficulty in _MOVE_DELAYS:
            self.move_delay_ms = _MOVE_DELAYS[difficulty]

    def get_best_move(self, state: GameState, player: Player) -> Move:
        add_bot_thinking_delay(self.move_delay_ms)

        enhanced = get_enhanced_valid_moves(state, player)
        best = best_by_degree(enhanced['moves'])
        position = state.players[state.player_index(player.id)].position

        if best:
            choice = random.choice(best)
            if self.verbose:
                logger.info("%s chose move to %s with degree %d (%d tied)",
                            self.get_name(), choice['destination'], choice['degree'], len(best))
            return Move.step(player.id, position, choice['destination'])

        # No step left: cut an edge rather than give up the turn
        cuts = enhanced['raw_valid_moves'].cuts
        if cuts:
            start, end = cuts[0]
            return Move.cut(player.id, start, end)

        raise NoLegalMoveError(f"{self.get_name()}: no valid moves available - player is isolated",
                               context={'player': player.id})
