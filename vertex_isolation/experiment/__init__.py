"""
Experiment module for bot-vs-bot matches.

Usage:
    from vertex_isolation.experiment import MatchRunner, run_match

    config = {
        'bot1': 'mcts',
        'bot2': 'greedy',
        'grid_radius': 3,
        ...
    }

    # Option 1: Use the runner class
    result = MatchRunner(config).run()

    # Option 2: Use the convenience function
    result = run_match(config)
"""

from vertex_isolation.experiment.registry import BOT_REGISTRY, get_bot_class, list_bots, register_bot
from vertex_isolation.experiment.runner import GameResult, MatchRunner, record_to_table, run_match

__all__ = [
    'BOT_REGISTRY',
    'GameResult',
    'MatchRunner',
    'get_bot_class',
    'list_bots',
    'record_to_table',
    'register_bot',
    'run_match',
]
