import math
from typing import List, Optional

import numpy as np

from vertex_isolation.algos.mcts.evaluation import evaluate_terminal
from vertex_isolation.algos.mcts.simulation import _rollout_many, simulate_nb
from vertex_isolation.algos.mcts.utils import state_to_arrays
from vertex_isolation.envs.isolation.cloning import simulation_clone
from vertex_isolation.envs.isolation.lattice import build_lattice_tables
from vertex_isolation.envs.isolation.rules import apply_move, get_valid_moves
from vertex_isolation.envs.isolation.types import GamePhase, GameState, Move


def candidate_moves(state: GameState, include_cuts: bool = False) -> List[Move]:
    """
    Moves the search tries from ``state``, for the player to move.

    Steps to adjacent vertices always; cuts when ``include_cuts`` is set or
    when the player has no step, so a node with any legal action has children.
    """
    if state.phase is GamePhase.FINISHED:
        return []
    player = state.players[state.current_player_index]
    valid = get_valid_moves(state, player)
    moves = [Move.step(player.id, player.position, dest) for dest in valid.moves]
    if include_cuts or not moves:
        moves.extend(Move.cut(player.id, start, end) for start, end in valid.cuts)
    return moves


def parent_perspective_value(child: "Node") -> float:
    """
    Win rate of ``child`` as seen by the player who chose it.

    ``child.wins`` is accumulated for the player to move at the child, which
    is the opponent of the player choosing among siblings, hence ``1 - rate``.
    Both tree selection and the final move choice compare siblings through
    this function.
    """
    return 1.0 - child.wins / child.visits


def ucb1_score(child: "Node", parent_visits: int, exploration_constant: float) -> float:
    if child.visits == 0:
        return math.inf
    # avoid log(0)
    log_n = math.log(parent_visits) if parent_visits > 0 else 0.0
    exploration = exploration_constant * math.sqrt(log_n / child.visits)
    return parent_perspective_value(child) + exploration


class Node:
    def __init__(self, state: GameState, parent: Optional["Node"] = None,
                 move: Optional[Move] = None, include_cuts: bool = False):
        self.state = state
        self.parent = parent
        self.move = move
        self.include_cuts = include_cuts

        self.children: List["Node"] = []
        self.visits = 0
        self.wins = 0.0

        self.player_to_move = state.players[state.current_player_index]
        self.depth = 0 if parent is None else parent.depth + 1

        self.is_fully_expanded = False
        self.untried_moves: Optional[List[Move]] = None
        self._arrays = None

        if parent is not None:
            parent.children.append(self)

    def is_terminal(self) -> bool:
        return self.state.phase is GamePhase.FINISHED

    def prepare_untried_moves(self) -> List[Move]:
        """Compute the untried moves on first use."""
        if self.untried_moves is None:
            self.untried_moves = candidate_moves(self.state, self.include_cuts)
            if not self.untried_moves and not self.children:
                self.is_fully_expanded = True
        return self.untried_moves

    def has_untried_moves(self) -> bool:
        return len(self.prepare_untried_moves()) > 0

    def select_best_child(self, exploration_constant: float) -> "Node":
        if not self.children:
            raise ValueError('Cannot select child from node with no children')

        best_child = self.children[0]
        best_ucb = ucb1_score(best_child, self.visits, exploration_constant)
        for child in self.children[1:]:
            ucb = ucb1_score(child, self.visits, exploration_constant)
            if ucb > best_ucb:
                best_child = child
                best_ucb = ucb
        return best_child

    def expand(self) -> "Node":
        untried = self.prepare_untried_moves()
        if not untried:
            self.is_fully_expanded = True
            return self

        move = untried.pop(np.random.randint(len(untried)))
        if not untried:
            self.is_fully_expanded = True

        child_state = apply_move(simulation_clone(self.state), move)
        return Node(child_state, parent=self, move=move, include_cuts=self.include_cuts)

    def expand_all(self) -> "Node":
        """Expand every untried move at once and return one new child at random."""
        untried = self.prepare_untried_moves()
        if not untried:
            self.is_fully_expanded = True
            return self

        new_children = []
        while untried:
            move = untried.pop(0)
            child_state = apply_move(simulation_clone(self.state), move)
            new_children.append(Node(child_state, parent=self, move=move, include_cuts=self.include_cuts))
        self.is_fully_expanded = True
        return new_children[np.random.randint(len(new_children))]

    def _board_arrays(self):
        if self._arrays is None:
            tables = build_lattice_tables(self.state.network.radius)
            positions, removed = state_to_arrays(self.state, tables)
            self._arrays = (tables, positions, removed)
        return self._arrays

    def simulate(self, max_depth: int, biased: bool = False) -> float:
        """One rollout from this node, valued for ``player_to_move``."""
        if self.is_terminal():
            return evaluate_terminal(self.state, self.player_to_move.id)
        tables, positions, removed = self._board_arrays()
        return simulate_nb(tables.neighbors, tables.edge_ids, removed, positions,
                           self.state.current_player_index, max_depth, biased)

    def simulate_many(self, R: int, max_depth: int, biased: bool = False) -> List[float]:
        if self.is_terminal() or R <= 1:
            return [self.simulate(max_depth, biased)]
        tables, positions, removed = self._board_arrays()
        return _rollout_many(tables.neighbors, tables.edge_ids, removed, positions,
                             self.state.current_player_index, max_depth, biased, R)

    def backpropagate(self, result: float) -> None:
        """
        Add ``result`` (from this node's side) here, then walk to the root
        flipping it at every ply.
        """
        node = self
        while node is not None:
            node.visits += 1
            node.wins += result
            result = 1.0 - result
            node = node.parent

    def get_most_visited_child(self) -> "Node":
        if not self.children:
            raise ValueError('Cannot get most visited child from node with no children')

        best_child = self.children[0]
        for child in self.children[1:]:
            if child.visits > best_child.visits:
                best_child = child
        return best_child

    def get_best_win_rate_child(self) -> "Node":
        """Child with the best win rate for the player choosing here (unvisited counts as 0)."""
        if not self.children:
            raise ValueError('Cannot get best win rate child from node with no children')

        def our_rate(child):
            return parent_perspective_value(child) if child.visits > 0 else 0.0

        best_child = self.children[0]
        best_rate = our_rate(best_child)
        for child in self.children[1:]:
            rate = our_rate(child)
            if rate > best_rate:
                best_child = child
                best_rate = rate
        return best_child

    def get_robust_child(self) -> "Node":
        """Most visits; equal visit counts are broken by win rate for the chooser."""
        if not self.children:
            raise ValueError('Cannot get robust child from node with no children')

        def rank(child):
            rate = parent_perspective_value(child) if child.visits > 0 else 0.0
            return (child.visits, rate)

        best_child = self.children[0]
        best_rank = rank(best_child)
        for child in self.children[1:]:
            r = rank(child)
            if r > best_rank:
                best_child = child
                best_rank = r
        return best_child

    def get_win_rate(self) -> float:
        return self.wins / self.visits if self.visits > 0 else 0.0

    def debug_info(self) -> str:
        move_str = self.move.describe() if self.move is not None else 'root'
        return (f"Node[{move_str}]: {self.visits} visits, "
                f"{self.get_win_rate() * 100:.1f}% win rate, {len(self.children)} children")

    def __repr__(self) -> str:
        return self.debug_info()
