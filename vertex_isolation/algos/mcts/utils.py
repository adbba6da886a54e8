import numpy as np
from numba import njit

from vertex_isolation.envs.isolation.lattice import LatticeTables

# Exploration decay modes understood by exploration_decay_nb
DECAY_MODES = {
    'none': 0,
    'sqrt': 1,
    'linear': 2,
}


@njit(cache=True, nogil=True)
def exploration_decay_nb(x, mode):
    """
    Multiplier for the exploration constant as the search progresses.

    Args:
        x: Search progress ratio in [0, 1]
        mode: 0 = no decay, 1 = square root decay, 2 = linear decay

    Returns:
        Decay multiplier, 1.0 at x = 0
    """
    if mode == 1:
        return 1.0 - 0.85 * np.sqrt(x)
    elif mode == 2:
        return 1.0 - x
    return 1.0


@njit(cache=True, nogil=True)
def count_moves_nb(neighbors, edge_ids, removed, positions, who):
    """Number of destinations player ``who`` can step to."""
    p = positions[who]
    other = positions[1 - who]
    count = 0
    for d in range(6):
        n = neighbors[p, d]
        if n < 0 or n == other:
            continue
        if removed[edge_ids[p, d]]:
            continue
        count += 1
    return count


@njit(cache=True, nogil=True)
def vertex_degree_nb(neighbors, edge_ids, removed, vertex):
    """Unremoved edges touching ``vertex``."""
    degree = 0
    for d in range(6):
        e = edge_ids[vertex, d]
        if e >= 0 and not removed[e]:
            degree += 1
    return degree


def state_to_arrays(state, tables: LatticeTables):
    """
    Convert a GameState into the arrays the rollout kernels work on.

    Returns:
        positions: int64[2] vertex index of each player
        removed: bool[E] removed flag per edge index
    """
    positions = np.array(
        [tables.index[player.position] for player in state.players],
        dtype=np.int64,
    )
    edges = state.network.edges
    removed = np.array([edges[key].removed for key in tables.edge_keys], dtype=np.bool_)
    return positions, removed
