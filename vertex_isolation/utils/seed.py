"""Random seed management and numba warmup for reproducibility."""
import random

import numpy as np
from numba import njit


@njit(cache=True)
def _seed_nb(seed):
    # numba keeps its own generator state, separate from NumPy's
    np.random.seed(seed)


def set_seeds(seed: int, worker_id: int = 0) -> int:
    """
    Set random seeds for Python, NumPy and the numba rollout kernels.

    Args:
        seed: Base random seed
        worker_id: Worker ID for deterministic per-worker seeding (default 0)

    Returns:
        effective_seed: The actual seed used (seed + worker_id * 10000)
    """
    effective_seed = seed + worker_id * 10000
    np.random.seed(effective_seed)
    random.seed(effective_seed)
    _seed_nb(effective_seed)
    return effective_seed


def warmup_numba(radius: int = 1):
    """
    Compile the rollout kernels ahead of the first search.
    Call once after set_seeds() at process startup.
    """
    # Import here to avoid circular dependencies
    from vertex_isolation.algos.mcts.simulation import simulate_nb
    from vertex_isolation.envs.isolation.lattice import build_lattice_tables

    tables = build_lattice_tables(radius)
    positions = np.array([0, 1], dtype=np.int64)
    removed = np.zeros(tables.num_edges, dtype=np.bool_)
    simulate_nb(tables.neighbors, tables.edge_ids, removed, positions, 0, 2, False)
    simulate_nb(tables.neighbors, tables.edge_ids, removed, positions, 0, 2, True)
