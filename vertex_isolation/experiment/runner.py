"""
Match runner for bot evaluation.

This module plays complete bot-vs-bot games with the rules engine and
records the outcome, optionally appending it to a CSV table.
"""

import datetime
import logging
import os
import time
import uuid
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

import pandas as pd

from vertex_isolation.bots.base import BotConfig
from vertex_isolation.envs.isolation.rules import apply_move, create_game, get_game_stats, is_valid_move
from vertex_isolation.envs.isolation.types import Coordinate, GameConfig, GameEndReason, GameState, PlayerIdentity
from vertex_isolation.errors import IllegalMoveError
from vertex_isolation.experiment.registry import get_bot_class
from vertex_isolation.utils.seed import set_seeds

logger = logging.getLogger(__name__)

DEFAULT_MATCH_CONFIG: Dict[str, Any] = {
    'bot1': 'mcts',
    'bot2': 'greedy',
    'difficulty1': 'medium',
    'difficulty2': 'medium',
    'grid_radius': 3,
    'start_positions': None,
    'move_delay_ms': 0,
    'record_table': False,
    'table_dir': 'results',
}


@dataclass
class GameResult:
    """How and why one game ended."""
    game_id: str
    winner: Optional[str]
    loser: Optional[str]
    reason: Optional[str]
    duration: float
    total_moves: int
    edges_remaining: int
    moves: List[str] = field(default_factory=list)

    def to_row(self) -> Dict[str, Any]:
        row = asdict(self)
        row.pop('moves')
        return row


class MatchRunner:
    """
    Plays one game between two registered bots.

    Example:
        config = {
            'bot1': 'mcts',
            'bot2': 'greedy',
            'difficulty1': 'easy',
            'grid_radius': 2,
        }
        runner = MatchRunner(config)
        result = runner.run()
    """

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize match runner.

        Args:
            config: Configuration dictionary containing:
                - bot1, bot2: Registered bot names
                - difficulty1, difficulty2: Difficulty per bot
                - grid_radius: Board radius
                - start_positions: Optional pair of (u, v) start coordinates
                - move_delay_ms: Minimum time per bot move
                - mcts_overrides: Optional MCTSConfig fields applied to search bots
                - random_seed: Optional seed for all random generators
                - record_table / table_dir: Append the result to a CSV table
        """
        self.config = {**DEFAULT_MATCH_CONFIG, **config}
        self.bots = None
        self.identities = None

    def setup(self):
        """Create both bots and player identities."""
        if self.config.get('random_seed') is not None:
            set_seeds(self.config['random_seed'])

        self.bots = []
        self.identities = []
        for i in (1, 2):
            name = self.config[f'bot{i}']
            bot_cls = get_bot_class(name)
            bot = bot_cls(BotConfig(
                difficulty=self.config[f'difficulty{i}'],
                move_delay_ms=self.config['move_delay_ms'],
                verbose=self.config.get('verbose', False),
            ))
            overrides = self.config.get('mcts_overrides')
            if overrides and hasattr(bot, 'update_config'):
                bot.update_config(**overrides)
            self.bots.append(bot)
            self.identities.append(PlayerIdentity(id=f'p{i}', name=f'{bot.get_name()} #{i}'))

    def initial_state(self) -> GameState:
        starts = self.config.get('start_positions')
        custom = None
        if starts is not None:
            custom = tuple(Coordinate(u, v) for u, v in starts)
        game_config = GameConfig(grid_radius=self.config['grid_radius'], custom_start_positions=custom)
        return create_game(f"match-{uuid.uuid4().hex[:8]}", self.identities[0], self.identities[1], game_config)

    def run(self) -> GameResult:
        """
        Play the game to the end.

        Every action removes an edge, so a game lasts at most as many
        moves as the board has edges.
        """
        if self.bots is None:
            self.setup()

        state = self.initial_state()
        start = time.time()
        logger.info("Starting %s: %s vs %s on radius %d", state.id,
                    self.identities[0].name, self.identities[1].name, state.network.radius)

        while not state.is_finished:
            player = state.current_player
            bot = self.bots[state.current_player_index]
            move = bot.get_best_move(state, player)
            if not is_valid_move(state, move):
                raise IllegalMoveError(f"{bot.get_name()} returned an illegal move: {move.describe()}",
                                       context={'game': state.id, 'move_number': len(state.move_history)})
            logger.debug("%s: %s", player.name, move.describe())
            state = apply_move(state, move)

        duration = time.time() - start
        result = self._build_result(state, duration)
        logger.info("%s finished after %d moves: %s wins (%s)",
                    state.id, result.total_moves, result.winner, result.reason)

        if self.config.get('record_table', False):
            record_to_table(result, self.config)
        return result

    @staticmethod
    def _build_result(state: GameState, duration: float) -> GameResult:
        stats = get_game_stats(state)
        winner = state.winner
        loser = state.opponent_of(winner).id if winner is not None else None
        return GameResult(
            game_id=state.id,
            winner=winner,
            loser=loser,
            reason=GameEndReason.PLAYER_ISOLATED.value if winner is not None else None,
            duration=duration,
            total_moves=stats['move_count'],
            edges_remaining=stats['edges_remaining'],
            moves=[m.describe() for m in state.move_history],
        )


def record_to_table(result: GameResult, config: Dict[str, Any]) -> str:
    """
    Record a match result to a CSV table in the table_dir directory.
    Creates the CSV file if it doesn't exist, otherwise appends data.

    Returns:
        Path of the CSV file
    """
    table_dir = config.get('table_dir', 'results')
    os.makedirs(table_dir, exist_ok=True)
    csv_file = os.path.join(table_dir, 'match_results.csv')

    # Scalar config values become columns next to the result
    data_row = {k: v for k, v in config.items() if isinstance(v, (str, int, float, bool)) or v is None}
    data_row.update(result.to_row())
    data_row['recorded_at'] = datetime.datetime.now().isoformat(timespec='seconds')

    if os.path.exists(csv_file):
        existing_df = pd.read_csv(csv_file)
        combined = pd.concat([existing_df, pd.DataFrame([data_row])], ignore_index=True)
        combined.to_csv(csv_file, index=False)
    else:
        pd.DataFrame([data_row]).to_csv(csv_file, index=False)

    logger.info("Results recorded to: %s", csv_file)
    return csv_file


def run_match(config: Dict[str, Any]) -> GameResult:
    """
    Play a single match with the given configuration.

    This is a convenience function that creates and runs a MatchRunner.
    """
    runner = MatchRunner(config)
    return runner.run()
