"""
Position evaluation for rollouts.

Values are always in [0, 1] and taken from the point of view of one player
(the player to move at the node where the rollout started).
"""

from numba import njit

from vertex_isolation.algos.mcts.utils import count_moves_nb
from vertex_isolation.envs.isolation.types import GamePhase, GameState


@njit(cache=True, nogil=True)
def mobility_value_nb(neighbors, edge_ids, removed, positions, perspective):
    """
    Heuristic value of a non-terminal position.

    The share of destination moves that belong to ``perspective``. A side
    without moves scores 0 against a side with moves; when neither side can
    move the position counts as a draw.
    """
    own = count_moves_nb(neighbors, edge_ids, removed, positions, perspective)
    opp = count_moves_nb(neighbors, edge_ids, removed, positions, 1 - perspective)

    if own == 0 and opp == 0:
        return 0.5
    if own == 0:
        return 0.0
    if opp == 0:
        return 1.0
    return own / (own + opp)


def evaluate_terminal(state: GameState, player_id: str) -> float:
    """1 if ``player_id`` won, 0 if the other player won, 0.5 without a recorded winner."""
    if state.phase is not GamePhase.FINISHED or state.winner is None:
        return 0.5
    return 1.0 if state.winner == player_id else 0.0
