"""
Configuration module for the MCTS engine.

This module provides the search parameter struct, the difficulty presets
and a validator that reports unreasonable combinations as warnings.
"""

import logging
import math
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

SIMULATION_POLICIES = ('random', 'biased')
EXPANSION_POLICIES = ('single', 'all')
FINAL_MOVE_SELECTIONS = ('most_visits', 'best_winrate', 'robust')
EXPLORATION_DECAYS = ('none', 'sqrt', 'linear')


@dataclass
class MCTSConfig:
    """Tunable search parameters.

    Out-of-range values are accepted; ``validate_config`` reports them and the
    engine runs with them anyway.
    """

    # Core MCTS parameters
    max_simulations: int = 1000
    exploration_constant: float = math.sqrt(2)

    # Time and depth limits
    max_thinking_time_ms: float = 3000
    max_tree_depth: int = 25

    # Rollouts
    simulation_policy: str = 'biased'
    max_simulation_depth: int = 30

    # Tree growth and final choice
    expansion_policy: str = 'single'
    final_move_selection: str = 'robust'
    include_cuts: bool = False
    exploration_decay: str = 'none'

    # Optimizations
    enable_tree_reuse: bool = False
    enable_parallelization: bool = False
    simulations_per_leaf: int = 1
    num_workers: int = 4

    # Diagnostics
    enable_debug_logging: bool = False
    log_interval: int = 200
    progress_bar: bool = False
    random_seed: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, args: Dict[str, Any]) -> "MCTSConfig":
        """Build a config from a dict, ignoring keys that are not config fields."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(args) - known)
        if unknown:
            logger.warning("Ignoring unknown MCTS config keys: %s", ', '.join(unknown))
        return cls(**{k: v for k, v in args.items() if k in known})


def get_easy_config() -> MCTSConfig:
    """Fast and shallow play."""
    return MCTSConfig(
        max_simulations=100,
        exploration_constant=0.8,
        max_thinking_time_ms=1000,
        max_tree_depth=15,
        simulation_policy='random',
        max_simulation_depth=20,
        expansion_policy='single',
        final_move_selection='most_visits',
        enable_tree_reuse=False,
        enable_debug_logging=True,
        log_interval=50,
    )


def get_medium_config() -> MCTSConfig:
    return MCTSConfig(
        max_simulations=1000,
        exploration_constant=math.sqrt(2),
        max_thinking_time_ms=3000,
        max_tree_depth=25,
        simulation_policy='biased',
        max_simulation_depth=30,
        expansion_policy='single',
        final_move_selection='robust',
        enable_tree_reuse=True,
        enable_debug_logging=True,
        log_interval=200,
    )


def get_hard_config() -> MCTSConfig:
    """Deep search with a long thinking budget."""
    return MCTSConfig(
        max_simulations=5000,
        exploration_constant=1.4,
        max_thinking_time_ms=10000,
        max_tree_depth=40,
        simulation_policy='biased',
        max_simulation_depth=50,
        expansion_policy='single',
        final_move_selection='robust',
        enable_tree_reuse=True,
        enable_debug_logging=False,
        log_interval=1000,
    )


def get_development_config() -> MCTSConfig:
    """Tiny budget with frequent progress logging."""
    return MCTSConfig(
        max_simulations=50,
        exploration_constant=math.sqrt(2),
        max_thinking_time_ms=5000,
        max_tree_depth=10,
        simulation_policy='random',
        max_simulation_depth=15,
        expansion_policy='single',
        final_move_selection='most_visits',
        enable_tree_reuse=False,
        enable_debug_logging=True,
        log_interval=10,
    )


PRESETS: Dict[str, Callable[[], MCTSConfig]] = {
    'easy': get_easy_config,
    'medium': get_medium_config,
    'hard': get_hard_config,
    'development': get_development_config,
    'dev': get_development_config,
}


def get_preset_config(name: str) -> MCTSConfig:
    """
    Get the preset for a difficulty name.

    Args:
        name: 'easy', 'medium', 'hard' or 'development' (case-insensitive)

    Returns:
        A fresh MCTSConfig; unknown names fall back to 'medium'
    """
    factory = PRESETS.get(str(name).lower())
    if factory is None:
        logger.warning("Unknown difficulty '%s', using medium", name)
        factory = get_medium_config
    return factory()


def customize(base: MCTSConfig, **overrides) -> MCTSConfig:
    """Copy of ``base`` with some fields replaced."""
    return replace(base, **overrides)


def validate_config(config: MCTSConfig) -> List[str]:
    """
    Check a configuration for unreasonable values.

    Returns:
        List of warnings; empty when nothing looks off
    """
    warnings = []

    if config.max_simulations < 10:
        warnings.append('max_simulations is very low - bot may play poorly')
    if config.max_simulations > 50000:
        warnings.append('max_simulations is very high - may cause performance issues')
    if config.exploration_constant <= 0:
        warnings.append('exploration_constant should be positive')
    if config.max_thinking_time_ms < 100:
        warnings.append('max_thinking_time_ms is very low - may not complete simulations')
    if config.max_tree_depth < 5:
        warnings.append('max_tree_depth is very shallow - may limit search quality')
    if config.max_simulation_depth < config.max_tree_depth:
        warnings.append('max_simulation_depth should be >= max_tree_depth')
    if config.simulation_policy not in SIMULATION_POLICIES:
        warnings.append(f"unknown simulation_policy '{config.simulation_policy}', rollouts will be random")
    if config.expansion_policy not in EXPANSION_POLICIES:
        warnings.append(f"unknown expansion_policy '{config.expansion_policy}', expanding one child at a time")
    if config.final_move_selection not in FINAL_MOVE_SELECTIONS:
        warnings.append(f"unknown final_move_selection '{config.final_move_selection}', using most visits")
    if config.exploration_decay not in EXPLORATION_DECAYS:
        warnings.append(f"unknown exploration_decay '{config.exploration_decay}', using no decay")
    if config.simulations_per_leaf < 1:
        warnings.append('simulations_per_leaf should be at least 1')
    if config.simulations_per_leaf > 1 and not config.enable_parallelization:
        warnings.append('simulations_per_leaf > 1 runs serially without enable_parallelization')
    if config.log_interval < 1:
        warnings.append('log_interval should be at least 1')

    return warnings
