import numpy as np
from numba import njit

from vertex_isolation.algos.mcts.evaluation import mobility_value_nb
from vertex_isolation.algos.mcts.utils import vertex_degree_nb


@njit(cache=True, nogil=True)
def _simulate_nb_core(neighbors, edge_ids, removed, positions, to_move, max_depth, biased):
    """
    Play random steps until a player is stuck or ``max_depth`` steps were made.
    ``removed`` and ``positions`` are modified in place.

    Args:
        neighbors: (V, 6) neighbour vertex table
        edge_ids: (V, 6) edge index table
        removed: bool[E] removed flag per edge (will be modified)
        positions: int64[2] player vertex indices (will be modified)
        to_move: Index of the player to move
        max_depth: Maximum number of steps
        biased: Prefer destinations with many remaining edges

    Returns:
        Index of the winning player, or -1 when the depth cutoff was reached

    Note: This function uses numba's random number generator which is seeded
    separately from NumPy's (see vertex_isolation.utils.seed.set_seeds).
    """
    steps = np.empty(6, np.int64)
    depth = 0
    while depth < max_depth:
        p = positions[to_move]
        other = positions[1 - to_move]

        k = 0
        for d in range(6):
            n = neighbors[p, d]
            if n < 0 or n == other:
                continue
            if removed[edge_ids[p, d]]:
                continue
            steps[k] = d
            k += 1

        # No step left: the player to move is isolated
        if k == 0:
            return 1 - to_move

        if biased:
            pick = steps[0]
            best = -1.0
            for i in range(k):
                n = neighbors[p, steps[i]]
                score = vertex_degree_nb(neighbors, edge_ids, removed, n) + np.random.random() * 0.5
                if score > best:
                    best = score
                    pick = steps[i]
        else:
            pick = steps[np.random.randint(0, k)]

        removed[edge_ids[p, pick]] = True
        positions[to_move] = neighbors[p, pick]
        to_move = 1 - to_move
        depth += 1

    return -1


def simulate_nb(neighbors, edge_ids, removed, positions, to_move, max_depth, biased=False):
    """
    Run one rollout on private copies of the board arrays and score it.

    Args:
        neighbors: (V, 6) neighbour vertex table
        edge_ids: (V, 6) edge index table
        removed: bool[E] removed flags of the starting position (not modified)
        positions: int64[2] player vertex indices (not modified)
        to_move: Index of the player to move; the value is from their side
        max_depth: Maximum number of rollout steps
        biased: Use the degree-biased rollout policy

    Returns:
        float: Value in [0, 1] for the player ``to_move``
    """
    sim_removed = removed.copy()
    sim_positions = positions.copy()
    winner = _simulate_nb_core(neighbors, edge_ids, sim_removed, sim_positions,
                               to_move, max_depth, biased)

    if winner >= 0:
        return 1.0 if winner == to_move else 0.0
    return mobility_value_nb(neighbors, edge_ids, sim_removed, sim_positions, to_move)


def _rollout_many(neighbors, edge_ids, removed, positions, to_move, max_depth, biased, R: int):
    """Run R rollouts in the same worker thread; return the list of values."""
    return [simulate_nb(neighbors, edge_ids, removed, positions, to_move, max_depth, biased)
            for _ in range(R)]
