"""
Environments Package

This package contains the game environments searched by the MCTS engine.
Currently includes the vertex isolation game.
"""

from vertex_isolation.envs.isolation import (
    Coordinate,
    GameConfig,
    GameState,
    Move,
    Player,
    PlayerIdentity,
    ValidMoves,
    apply_move,
    check_game_end,
    create_game,
    get_valid_moves,
    is_valid_move,
)

__all__ = [
    'Coordinate',
    'GameConfig',
    'GameState',
    'Move',
    'Player',
    'PlayerIdentity',
    'ValidMoves',
    'apply_move',
    'check_game_end',
    'create_game',
    'get_valid_moves',
    'is_valid_move',
]
