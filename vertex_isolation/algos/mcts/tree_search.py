import asyncio
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass
from typing import Iterator, List, Optional

from tqdm import tqdm

from vertex_isolation.algos.mcts.config import MCTSConfig, validate_config
from vertex_isolation.algos.mcts.node import Node, parent_perspective_value
from vertex_isolation.algos.mcts.utils import DECAY_MODES, exploration_decay_nb
from vertex_isolation.envs.isolation.types import GameState, Move, Player
from vertex_isolation.errors import SearchExhaustedError
from vertex_isolation.utils.seed import set_seeds

logger = logging.getLogger(__name__)


@dataclass
class SearchStats:
    """Counters accumulated over the lifetime of one engine."""
    total_simulations: int = 0
    total_time_ms: float = 0.0
    average_depth: float = 0.0
    tree_size: int = 0
    last_iterations: int = 0
    last_time_ms: float = 0.0
    cache_hits: int = 0
    cache_misses: int = 0
    searches: int = 0


class SearchSession:
    """
    Everything one search invocation reads and writes: the tree, the
    perspective player, the budget and the running counters.

    A session belongs to a single search; the engine creates one per call.
    """

    def __init__(self, root: Node, player: Player, config: MCTSConfig):
        self.root = root
        self.player = player
        self.config = config

        self.started_at = time.perf_counter()
        self.deadline = self.started_at + config.max_thinking_time_ms / 1000.0
        self.iterations = 0
        self.rollouts = 0
        self.depth_total = 0
        self.pool: Optional[ThreadPoolExecutor] = None

    def should_continue(self) -> bool:
        return (self.iterations < self.config.max_simulations
                and time.perf_counter() < self.deadline)

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self.started_at) * 1000.0

    def relative_depth(self, node: Node) -> int:
        return node.depth - self.root.depth


class MCTS:
    """
    Monte Carlo Tree Search for the vertex isolation game.

    Usage:
        engine = MCTS(get_preset_config('medium'))
        move = engine.search(state, state.current_player)
    """

    def __init__(self, config: Optional[MCTSConfig] = None):
        self.config = config if config is not None else MCTSConfig()
        self.stats = SearchStats()
        self._last_root: Optional[Node] = None

        for warning in validate_config(self.config):
            logger.warning("MCTS config: %s", warning)

        if self.config.random_seed is not None:
            set_seeds(self.config.random_seed)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def search(self, state: GameState, player: Player) -> Move:
        """Run the search to its budget and return the chosen move."""
        session = self.start_session(state, player)
        with tqdm(total=self.config.max_simulations, disable=not self.config.progress_bar,
                  desc='MCTS', leave=False) as bar:
            for _ in self.steps(session):
                bar.update(1)
        return self.finish_session(session)

    async def search_async(self, state: GameState, player: Player) -> Move:
        """Same as ``search`` but gives control back to the event loop after every iteration."""
        session = self.start_session(state, player)
        for _ in self.steps(session):
            await asyncio.sleep(0)
        return self.finish_session(session)

    def start_session(self, state: GameState, player: Player) -> SearchSession:
        current = state.players[state.current_player_index]
        if current.id != player.id:
            logger.warning("Searching for %s but %s is to move; the search optimizes for the player to move",
                           player.name, current.name)

        root = self._reuse_root(state) if self.config.enable_tree_reuse else None
        if root is None:
            root = Node(state, include_cuts=self.config.include_cuts)
        root.prepare_untried_moves()

        session = SearchSession(root, player, self.config)
        if self.config.enable_parallelization and self.config.simulations_per_leaf > 1:
            session.pool = ThreadPoolExecutor(max_workers=self.config.num_workers)

        if self.config.enable_debug_logging:
            logger.debug("MCTS search for %s: %d candidate moves, budget %d iterations / %.0f ms",
                         player.name, len(root.untried_moves) + len(root.children),
                         self.config.max_simulations, self.config.max_thinking_time_ms)
        return session

    def steps(self, session: SearchSession) -> Iterator[int]:
        """Run iterations until the budget is spent, yielding after each one."""
        try:
            while session.should_continue():
                self._run_iteration(session)
                session.iterations += 1
                if self.config.enable_debug_logging and session.iterations % max(1, self.config.log_interval) == 0:
                    self._log_progress(session)
                yield session.iterations
        finally:
            if session.pool is not None:
                session.pool.shutdown(wait=True)
                session.pool = None

    def finish_session(self, session: SearchSession) -> Move:
        """Record statistics and pick the move from the root's children."""
        elapsed_ms = session.elapsed_ms
        self._update_stats(session, elapsed_ms)
        self._last_root = session.root

        root = session.root
        if not root.children:
            raise SearchExhaustedError(iterations=session.iterations,
                                       context={'elapsed_ms': round(elapsed_ms, 1)})

        best = self._select_final_child(root)

        if self.config.enable_debug_logging:
            self._log_move_analysis(root, best)
            logger.debug("MCTS completed %d iterations in %.0f ms, chose %s",
                         session.iterations, elapsed_ms, best.move.describe())
        return best.move

    def get_statistics(self) -> dict:
        return asdict(self.stats)

    def reset(self) -> None:
        """Discard the retained tree and all counters."""
        self._last_root = None
        self.stats = SearchStats()

    # ------------------------------------------------------------------
    # Iteration phases
    # ------------------------------------------------------------------

    def _run_iteration(self, session: SearchSession) -> None:
        config = self.config
        c = config.exploration_constant
        decay_mode = DECAY_MODES.get(config.exploration_decay, 0)
        if decay_mode:
            progress = session.iterations / max(1, config.max_simulations)
            c *= exploration_decay_nb(progress, decay_mode)

        # 1. selection
        node = session.root
        while (not node.is_terminal() and node.children
               and not node.has_untried_moves()):
            node = node.select_best_child(c)

        # 2. expansion
        if (not node.is_terminal()
                and session.relative_depth(node) < config.max_tree_depth
                and node.has_untried_moves()):
            if config.expansion_policy == 'all':
                node = node.expand_all()
            else:
                node = node.expand()

        # 3. simulation
        values = self._simulate(session, node)

        # 4. backpropagation
        for value in values:
            node.backpropagate(value)

        session.rollouts += len(values)
        session.depth_total += session.relative_depth(node)

    def _simulate(self, session: SearchSession, node: Node) -> List[float]:
        biased = self.config.simulation_policy == 'biased'
        depth = self.config.max_simulation_depth
        R = max(1, self.config.simulations_per_leaf)

        if R == 1 or node.is_terminal():
            return [node.simulate(depth, biased)]
        if session.pool is None:
            return node.simulate_many(R, depth, biased)

        # board arrays are built once here so the workers only read them
        node._board_arrays()
        futures = [session.pool.submit(node.simulate, depth, biased) for _ in range(R)]
        return [f.result() for f in futures]

    # ------------------------------------------------------------------
    # Final choice
    # ------------------------------------------------------------------

    def _select_final_child(self, root: Node) -> Node:
        policy = self.config.final_move_selection
        if policy == 'best_winrate':
            return root.get_best_win_rate_child()
        if policy == 'robust':
            return root.get_robust_child()
        return root.get_most_visited_child()

    # ------------------------------------------------------------------
    # Tree reuse
    # ------------------------------------------------------------------

    def _reuse_root(self, state: GameState) -> Optional[Node]:
        """
        Find ``state`` among the children and grandchildren of the previous
        root and promote it to be the new root.
        """
        old_root = self._last_root
        self._last_root = None
        if old_root is None:
            self.stats.cache_misses += 1
            return None

        target = state.key()
        for child in old_root.children:
            candidates = [child] + child.children
            for node in candidates:
                if node.state.key() == target:
                    node.parent = None
                    self.stats.cache_hits += 1
                    if self.config.enable_debug_logging:
                        logger.debug("Reusing subtree with %d visits", node.visits)
                    return node

        self.stats.cache_misses += 1
        return None

    # ------------------------------------------------------------------
    # Bookkeeping
    # ------------------------------------------------------------------

    def _update_stats(self, session: SearchSession, elapsed_ms: float) -> None:
        stats = self.stats
        previous = stats.total_simulations
        stats.total_simulations += session.iterations
        stats.total_time_ms += elapsed_ms
        stats.last_iterations = session.iterations
        stats.last_time_ms = elapsed_ms
        stats.searches += 1
        stats.tree_size = _count_nodes(session.root)
        if stats.total_simulations > 0:
            stats.average_depth = (stats.average_depth * previous
                                   + session.depth_total) / stats.total_simulations

    def _log_progress(self, session: SearchSession) -> None:
        root = session.root
        if not root.children:
            return
        leader = root.get_most_visited_child()
        logger.debug("Iteration %d: %d root children, leader %s (%d visits, %.1f%% for %s)",
                     session.iterations, len(root.children), leader.move.describe(),
                     leader.visits, 100.0 * parent_perspective_value(leader) if leader.visits else 0.0,
                     root.player_to_move.name)

    def _log_move_analysis(self, root: Node, chosen: Node) -> None:
        ranked = sorted(root.children, key=lambda n: n.visits, reverse=True)
        logger.debug("Move analysis (%d children, %d root visits):", len(ranked), root.visits)
        for rank, child in enumerate(ranked[:5], start=1):
            rate = parent_perspective_value(child) if child.visits else 0.0
            marker = ' *' if child is chosen else ''
            logger.debug("  %d. %s: %d visits, %.1f%% win rate%s",
                         rank, child.move.describe(), child.visits, 100.0 * rate, marker)


def _count_nodes(root: Node) -> int:
    count = 0
    stack = [root]
    while stack:
        node = stack.pop()
        count += 1
        stack.extend(node.children)
    return count
