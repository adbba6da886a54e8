"""Integration tests for bot-vs-bot matches."""
import os
import sys

import pandas as pd
import pytest

# Ensure the package is importable
ROOT = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
sys.path.append(ROOT)

from vertex_isolation.__main__ import main
from vertex_isolation.bots import GreedyBot, MCTSBot
from vertex_isolation.envs.isolation import GameEndReason, Move
from vertex_isolation.errors import IllegalMoveError
from vertex_isolation.experiment import (
    BOT_REGISTRY,
    MatchRunner,
    get_bot_class,
    list_bots,
    record_to_table,
    register_bot,
    run_match,
)


@pytest.fixture
def greedy_config():
    return {
        'bot1': 'greedy',
        'bot2': 'greedy',
        'grid_radius': 2,
        'move_delay_ms': 0,
        'random_seed': 5,
    }


class TestRegistry:
    """Tests for the bot registry."""

    def test_builtin_bots(self):
        assert {'mcts', 'greedy'} <= set(list_bots())
        assert get_bot_class('mcts') is MCTSBot
        assert get_bot_class('greedy') is GreedyBot

    def test_unknown_bot(self):
        with pytest.raises(ValueError, match='Unknown bot'):
            get_bot_class('oracle')

    def test_register_custom_bot(self):
        @register_bot('lazy_greedy')
        class LazyGreedy(GreedyBot):
            pass

        try:
            assert get_bot_class('lazy_greedy') is LazyGreedy
        finally:
            BOT_REGISTRY.pop('lazy_greedy')


class TestMatchRunner:
    """Full games between bots."""

    def test_greedy_vs_greedy(self, greedy_config):
        result = run_match(greedy_config)
        assert result.winner in ('p1', 'p2')
        assert result.loser in ('p1', 'p2')
        assert result.winner != result.loser
        assert result.reason == GameEndReason.PLAYER_ISOLATED.value
        assert result.total_moves == len(result.moves) > 0
        assert 0 <= result.edges_remaining < 42

    def test_mcts_vs_greedy(self):
        config = {
            'bot1': 'mcts',
            'bot2': 'greedy',
            'difficulty1': 'easy',
            'grid_radius': 2,
            'start_positions': [(0, 0), (1, 0)],
            'move_delay_ms': 0,
            'mcts_overrides': {'max_simulations': 30, 'max_thinking_time_ms': 20000},
            'random_seed': 1,
        }
        runner = MatchRunner(config)
        result = runner.run()
        assert result.winner in ('p1', 'p2')
        assert runner.bots[0].fallback_count == 0
        assert runner.bots[0].get_config().max_simulations == 30

    def test_illegal_move_is_reported(self, greedy_config):
        runner = MatchRunner(greedy_config)
        runner.setup()

        class Cheater(GreedyBot):
            def get_best_move(self, state, player):
                return Move.cut(player.id, player.position, player.position)

        runner.bots[0] = Cheater()
        with pytest.raises(IllegalMoveError):
            runner.run()

    def test_record_to_table(self, greedy_config, tmp_path):
        greedy_config['table_dir'] = str(tmp_path)
        first = run_match(greedy_config)
        path = record_to_table(first, greedy_config)
        record_to_table(run_match(greedy_config), greedy_config)

        table = pd.read_csv(path)
        assert len(table) == 2
        assert table['winner'].iloc[0] == first.winner
        assert {'bot1', 'grid_radius', 'total_moves', 'duration'} <= set(table.columns)

    def test_record_flag(self, greedy_config, tmp_path):
        greedy_config.update(record_table=True, table_dir=str(tmp_path))
        run_match(greedy_config)
        assert (tmp_path / 'match_results.csv').exists()


class TestCLI:
    """Tests for python -m vertex_isolation."""

    def test_runs_games(self, tmp_path):
        wins = main(['--bot1', 'greedy', '--bot2', 'greedy', '--radius', '1', '--games', '3',
                     '--random_seed', '0', '--table_dir', str(tmp_path)])
        assert sum(wins.values()) == 3
        assert len(pd.read_csv(tmp_path / 'match_results.csv')) == 3
