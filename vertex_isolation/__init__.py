"""
Vertex Isolation

Monte Carlo Tree Search for a two-player isolation game on a triangular
lattice: players occupy vertices and alternately step along an edge (removing
it) or cut an edge next to them. A player with neither option loses.

Packages:
- envs.isolation: lattice geometry, game types and the rules engine
- algos.mcts: search tree, rollout kernels, search engine and presets
- bots: bot adapters around the engine
- experiment: bot-vs-bot match runner
"""

from vertex_isolation.algos.mcts import MCTS, MCTSConfig, get_preset_config
from vertex_isolation.bots import GreedyBot, MCTSBot
from vertex_isolation.envs.isolation import (
    Coordinate,
    GameConfig,
    GameState,
    Move,
    PlayerIdentity,
    apply_move,
    create_game,
    get_valid_moves,
    is_valid_move,
)

__version__ = '0.1.0'

__all__ = [
    'Coordinate',
    'GameConfig',
    'GameState',
    'GreedyBot',
    'MCTS',
    'MCTSBot',
    'MCTSConfig',
    'Move',
    'PlayerIdentity',
    'apply_move',
    'create_game',
    'get_preset_config',
    'get_valid_moves',
    'is_valid_move',
]
