"""
MCTS Package for the Vertex Isolation game

This package provides the search tree, the numba rollout kernels, the
search engine and its difficulty presets.
"""

from vertex_isolation.algos.mcts.config import (
    MCTSConfig,
    customize,
    get_development_config,
    get_easy_config,
    get_hard_config,
    get_medium_config,
    get_preset_config,
    validate_config,
)
from vertex_isolation.algos.mcts.node import Node, candidate_moves, parent_perspective_value, ucb1_score
from vertex_isolation.algos.mcts.tree_search import MCTS, SearchSession, SearchStats

__all__ = [
    'MCTS',
    'MCTSConfig',
    'Node',
    'SearchSession',
    'SearchStats',
    'candidate_moves',
    'customize',
    'get_development_config',
    'get_easy_config',
    'get_hard_config',
    'get_medium_config',
    'get_preset_config',
    'parent_perspective_value',
    'ucb1_score',
    'validate_config',
]
