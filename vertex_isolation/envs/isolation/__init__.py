"""
Vertex Isolation Environment Package

Rules engine and board geometry for the two-player vertex isolation game
on a triangular lattice.

Main Components:
- types.py: Coordinates, edges, players, moves and the game state
- lattice.py: Lattice geometry and the numpy index tables used by rollouts
- rules.py: Move validation, application, enumeration and end detection
- cloning.py: State cloning tiers
"""

from vertex_isolation.envs.isolation.types import (
    CENTER,
    Coordinate,
    Edge,
    GameConfig,
    GameEndReason,
    GamePhase,
    GameState,
    Move,
    MoveType,
    Network,
    Player,
    PlayerIdentity,
    ValidMoves,
)
from vertex_isolation.envs.isolation.lattice import (
    LatticeTables,
    build_lattice_tables,
    coord_to_key,
    distance,
    generate_edges,
    generate_vertices,
    get_edge_key,
    get_neighbors,
    is_in_radius,
    key_to_coord,
)
from vertex_isolation.envs.isolation.rules import (
    GameEnd,
    apply_move,
    check_game_end,
    create_game,
    get_game_stats,
    get_valid_moves,
    get_vertex_degree,
    is_valid_move,
)
from vertex_isolation.envs.isolation.cloning import deep_clone, simulation_clone

__all__ = [
    'CENTER',
    'Coordinate',
    'Edge',
    'GameConfig',
    'GameEnd',
    'GameEndReason',
    'GamePhase',
    'GameState',
    'LatticeTables',
    'Move',
    'MoveType',
    'Network',
    'Player',
    'PlayerIdentity',
    'ValidMoves',
    'apply_move',
    'build_lattice_tables',
    'check_game_end',
    'coord_to_key',
    'create_game',
    'deep_clone',
    'distance',
    'generate_edges',
    'generate_vertices',
    'get_edge_key',
    'get_game_stats',
    'get_neighbors',
    'get_valid_moves',
    'get_vertex_degree',
    'is_in_radius',
    'is_valid_move',
    'key_to_coord',
    'simulation_clone',
]
