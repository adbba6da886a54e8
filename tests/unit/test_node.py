"""Unit tests for the search tree."""
import math
import os
import sys

import pytest

# Ensure the package is importable
ROOT = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
sys.path.append(ROOT)

from vertex_isolation.algos.mcts.node import Node, candidate_moves, parent_perspective_value, ucb1_score
from vertex_isolation.envs.isolation import (
    CENTER,
    Coordinate,
    GameConfig,
    Move,
    PlayerIdentity,
    create_game,
    is_valid_move,
)
from vertex_isolation.envs.isolation.types import MoveType
from vertex_isolation.utils.seed import set_seeds


@pytest.fixture
def state():
    return create_game('n', PlayerIdentity('a', 'A'), PlayerIdentity('b', 'B'),
                       GameConfig(grid_radius=2, custom_start_positions=(CENTER, Coordinate(1, 0))))


def child_with_stats(parent, visits, wins):
    child = Node(parent.state, parent=parent, move=Move.step('a', CENTER, Coordinate(0, 1)))
    child.visits = visits
    child.wins = wins
    return child


class TestCandidateMoves:
    """Tests for candidate move generation."""

    def test_steps_only_by_default(self, state):
        moves = candidate_moves(state)
        assert len(moves) == 5
        assert all(m.move_type is MoveType.MOVE for m in moves)
        assert all(is_valid_move(state, m) for m in moves)

    def test_with_cuts(self, state):
        moves = candidate_moves(state, include_cuts=True)
        cuts = [m for m in moves if m.is_cut]
        assert len(moves) == 5 + len(cuts)
        assert cuts
        assert all(is_valid_move(state, m) for m in moves)


class TestUCB:
    """Tests for UCB1 scoring and child selection."""

    def test_unvisited_is_infinite(self, state):
        root = Node(state)
        root.visits = 10
        child = child_with_stats(root, 0, 0.0)
        assert ucb1_score(child, root.visits, 1.4) == math.inf

    def test_unvisited_selected_first(self, state):
        """An unvisited child beats any visited child, whatever the constant."""
        for c in (0.0, 0.5, 100.0):
            root = Node(state)
            root.visits = 100
            child_with_stats(root, 50, 0.0)
            unvisited = child_with_stats(root, 0, 0.0)
            child_with_stats(root, 50, 0.0)
            assert root.select_best_child(c) is unvisited

    def test_inversion_applied_once(self, state):
        """Selection prefers the child where the opponent (to move there) scores low."""
        root = Node(state)
        root.visits = 10
        good_for_opponent = child_with_stats(root, 5, 4.0)
        good_for_us = child_with_stats(root, 5, 1.0)

        assert parent_perspective_value(good_for_opponent) == pytest.approx(0.2)
        assert parent_perspective_value(good_for_us) == pytest.approx(0.8)
        assert root.select_best_child(0.0) is good_for_us
        assert root.select_best_child(1.4) is good_for_us
        assert root.get_best_win_rate_child() is good_for_us

    def test_exploration_term(self, state):
        root = Node(state)
        root.visits = 20
        child = child_with_stats(root, 4, 1.0)
        expected = 0.75 + 2.0 * math.sqrt(math.log(20) / 4)
        assert ucb1_score(child, root.visits, 2.0) == pytest.approx(expected)

    def test_ties_go_to_first_child(self, state):
        root = Node(state)
        root.visits = 6
        first = child_with_stats(root, 3, 1.5)
        child_with_stats(root, 3, 1.5)
        assert root.select_best_child(1.0) is first
        assert root.get_most_visited_child() is first
        assert root.get_robust_child() is first

    def test_robust_breaks_visit_ties_by_win_rate(self, state):
        root = Node(state)
        root.visits = 20
        child_with_stats(root, 8, 6.0)
        better = child_with_stats(root, 8, 2.0)
        child_with_stats(root, 4, 0.0)
        assert root.get_robust_child() is better

    def test_empty_children_raise(self, state):
        root = Node(state)
        with pytest.raises(ValueError):
            root.select_best_child(1.0)
        with pytest.raises(ValueError):
            root.get_most_visited_child()


class TestBackpropagation:
    """The result flips at every ply on the way to the root."""

    def test_depth_three_flip(self, state):
        root = Node(state)
        c1 = child_with_stats(root, 0, 0.0)
        c2 = child_with_stats(c1, 0, 0.0)
        c3 = child_with_stats(c2, 0, 0.0)
        assert c3.depth == 3

        c3.backpropagate(0.75)

        assert [n.visits for n in (root, c1, c2, c3)] == [1, 1, 1, 1]
        assert c3.wins == pytest.approx(0.75)
        assert c2.wins == pytest.approx(0.25)
        assert c1.wins == pytest.approx(0.75)
        assert root.wins == pytest.approx(0.25)

    def test_repeated_backpropagation(self, state):
        root = Node(state)
        leaf = child_with_stats(root, 0, 0.0)
        leaf.backpropagate(1.0)
        leaf.backpropagate(0.0)
        leaf.backpropagate(0.5)
        assert leaf.visits == 3
        assert leaf.wins == pytest.approx(1.5)
        assert root.wins == pytest.approx(1.5)
        assert leaf.get_win_rate() == pytest.approx(0.5)


class TestExpansion:
    """Tests for expand / expand_all and rollouts from a node."""

    def test_expand_one_at_a_time(self, state):
        set_seeds(0)
        root = Node(state)
        assert root.has_untried_moves()
        seen = set()
        for i in range(5):
            child = root.expand()
            assert child.parent is root
            assert child.depth == 1
            assert child.state.current_player_index == 1
            assert is_valid_move(state, child.move)
            seen.add(child.move.to_coord)
        assert len(seen) == 5
        assert root.is_fully_expanded
        assert not root.has_untried_moves()
        assert root.expand() is root

    def test_expand_leaves_parent_state_untouched(self, state):
        root = Node(state)
        child = root.expand()
        assert root.state.players[0].position == CENTER
        assert not any(e.removed for e in root.state.network.edges.values())
        assert sum(e.removed for e in child.state.network.edges.values()) == 1

    def test_expand_all(self, state):
        root = Node(state)
        child = root.expand_all()
        assert len(root.children) == 5
        assert child in root.children
        assert root.is_fully_expanded

    def test_simulate_value_range(self, state):
        set_seeds(5)
        root = Node(state)
        for biased in (False, True):
            value = root.simulate(max_depth=20, biased=biased)
            assert 0.0 <= value <= 1.0
        values = root.simulate_many(4, max_depth=20)
        assert len(values) == 4

    def test_debug_info(self, state):
        root = Node(state)
        assert root.debug_info().startswith('Node[root]')
