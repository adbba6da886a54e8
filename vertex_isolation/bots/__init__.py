"""
Bots for the vertex isolation game.

- base.py: GameBot interface, BotConfig and BotDifficulty
- mcts_bot.py: MCTSBot, the search-backed bot
- greedy_bot.py: GreedyBot, a one-ply mobility heuristic
- utils.py: Helpers shared by the bots
"""

from vertex_isolation.bots.base import BotConfig, BotDifficulty, GameBot
from vertex_isolation.bots.greedy_bot import GreedyBot
from vertex_isolation.bots.mcts_bot import MCTSBot
from vertex_isolation.bots.utils import (
    add_bot_thinking_delay,
    break_ties_consistently,
    calculate_vertex_degree,
    get_enhanced_valid_moves,
)

__all__ = [
    'BotConfig',
    'BotDifficulty',
    'GameBot',
    'GreedyBot',
    'MCTSBot',
    'add_bot_thinking_delay',
    'break_ties_consistently',
    'calculate_vertex_degree',
    'get_enhanced_valid_moves',
]
