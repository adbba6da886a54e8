"""
Registry for bots.

This module maps bot names used in match configurations to bot classes.
"""

from typing import Dict, List, Type

# Bot registry - maps bot names to their classes
BOT_REGISTRY: Dict[str, Type] = {}
_populated = False


def register_bot(name: str):
    """
    Decorator to register a bot class.

    Usage:
        @register_bot('mcts')
        class MCTSBot(GameBot):
            ...
    """
    def decorator(cls):
        BOT_REGISTRY[name] = cls
        return cls
    return decorator


def get_bot_class(name: str) -> Type:
    """
    Get bot class by name.

    Args:
        name: Bot name (e.g., 'mcts', 'greedy')

    Returns:
        Bot class

    Raises:
        ValueError: If bot name is not registered
    """
    _populate_registry()  # Lazy initialization
    if name not in BOT_REGISTRY:
        available = ', '.join(BOT_REGISTRY.keys())
        raise ValueError(
            f"Unknown bot: {name}. "
            f"Available bots: {available}"
        )
    return BOT_REGISTRY[name]


def _populate_registry():
    """
    Register the built-in bots.
    Called lazily on first use to avoid circular imports.
    """
    global _populated
    if _populated:
        return  # Already populated

    from vertex_isolation.bots.greedy_bot import GreedyBot
    from vertex_isolation.bots.mcts_bot import MCTSBot
    BOT_REGISTRY.setdefault('mcts', MCTSBot)
    BOT_REGISTRY.setdefault('greedy', GreedyBot)
    _populated = True


def list_bots() -> List[str]:
    """List all registered bots."""
    _populate_registry()  # Lazy initialization
    return list(BOT_REGISTRY.keys())
