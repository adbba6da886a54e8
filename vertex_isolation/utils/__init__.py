from vertex_isolation.utils.seed import set_seeds, warmup_numba

__all__ = ['set_seeds', 'warmup_numba']
