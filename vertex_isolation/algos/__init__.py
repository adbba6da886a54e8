from vertex_isolation.algos.mcts import MCTS, MCTSConfig, get_preset_config

__all__ = ['MCTS', 'MCTSConfig', 'get_preset_config']
