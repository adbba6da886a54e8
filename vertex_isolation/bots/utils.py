"""Shared helpers for bot implementations."""

import time
from typing import Dict, List, Sequence

from vertex_isolation.envs.isolation.rules import get_valid_moves, get_vertex_degree
from vertex_isolation.envs.isolation.types import Coordinate, GameState, Player


def calculate_vertex_degree(vertex: Coordinate, state: GameState) -> int:
    """Number of unremoved edges at ``vertex``; higher means more mobility."""
    return get_vertex_degree(state, vertex)


def get_enhanced_valid_moves(state: GameState, player: Player) -> Dict:
    """
    Valid moves for ``player`` with per-destination metadata.

    Returns:
        dict with 'moves' (one dict per destination: destination, degree,
        distance_from_center, is_edge_vertex) and 'raw_valid_moves'
    """
    valid = get_valid_moves(state, player)

    enhanced = []
    for destination in valid.moves:
        degree = calculate_vertex_degree(destination, state)
        enhanced.append({
            'destination': destination,
            'degree': degree,
            'distance_from_center': abs(destination.u) + abs(destination.v),
            'is_edge_vertex': degree < 6,
        })

    return {
        'moves': enhanced,
        'raw_valid_moves': valid,
    }


def add_bot_thinking_delay(ms: float = 500) -> None:
    """Block for ``ms`` milliseconds so a bot does not answer instantly."""
    if ms > 0:
        time.sleep(ms / 1000.0)


def break_ties_consistently(coordinates: Sequence[Coordinate]) -> Coordinate:
    """Smallest coordinate by (u, v), for deterministic choices among equals."""
    if not coordinates:
        raise ValueError('Cannot break ties for empty sequence')
    return min(coordinates, key=lambda c: (c.u, c.v))


def best_by_degree(moves: List[Dict]) -> List[Dict]:
    """Entries of ``get_enhanced_valid_moves(...)['moves']`` with the highest degree."""
    if not moves:
        return []
    max_degree = max(m['degree'] for m in moves)
    return [m for m in moves if m['degree'] == max_degree]
