"""
Rules engine for the vertex isolation game.

This module is the single source of truth for legal states and transitions:
- create_game: build the board and place both players
- is_valid_move: check a candidate action (never raises)
- apply_move: produce the next state (input is left untouched)
- get_valid_moves: enumerate every legal move and cut for a player
- check_game_end: isolation check for the player to move

Every function is free of side effects on its inputs, so many rollouts may
call into it concurrently as long as each works on its own state.
"""

from typing import NamedTuple, Optional

from vertex_isolation.envs.isolation.lattice import (
    coord_to_key,
    distance,
    generate_edges,
    generate_vertices,
    get_edge_key,
    get_neighbors,
    is_in_radius,
)
from vertex_isolation.envs.isolation.types import (
    CENTER,
    Coordinate,
    Edge,
    GameConfig,
    GameEndReason,
    GamePhase,
    GameState,
    Move,
    MoveType,
    Network,
    Player,
    PlayerIdentity,
    ValidMoves,
)
from vertex_isolation.errors import InvalidConfigError


class GameEnd(NamedTuple):
    winner: str
    reason: GameEndReason


def create_game(game_id: str, player1: PlayerIdentity, player2: PlayerIdentity,
                config: GameConfig) -> GameState:
    """Create a new game: full vertex/edge network, both players placed, player 0 to move.

    Without custom start positions both players start on the centre vertex.
    """
    radius = config.grid_radius
    if not isinstance(radius, int) or radius <= 0:
        raise InvalidConfigError(
            f"grid_radius must be a positive integer, got {radius!r}",
            context={'grid_radius': radius},
        )
    if config.time_limit is not None:
        raise InvalidConfigError(
            "time_limit is not supported; game end is decided by isolation only",
            context={'time_limit': config.time_limit},
        )

    if config.custom_start_positions is not None:
        start1, start2 = config.custom_start_positions
        for start in (start1, start2):
            if not is_in_radius(start, radius):
                raise InvalidConfigError(
                    f"start position {start} lies outside radius {radius}",
                    context={'position': str(start), 'grid_radius': radius},
                )
    else:
        start1 = start2 = CENTER

    vertices = frozenset(coord_to_key(v) for v in generate_vertices(radius))
    edges = {get_edge_key(a, b): Edge(a, b) for a, b in generate_edges(radius)}

    players = (
        Player.from_identity(player1, start1),
        Player.from_identity(player2, start2),
    )
    return GameState(
        id=game_id,
        players=players,
        current_player_index=0,
        network=Network(radius=radius, vertices=vertices, edges=edges),
        phase=GamePhase.PLAYING,
        winner=None,
        move_history=[],
    )


def _is_occupied_by_other(state: GameState, player_id: str, coord: Coordinate) -> bool:
    for other in state.players:
        if other.id != player_id and other.position == coord:
            return True
    return False


def _edge_available(state: GameState, a: Coordinate, b: Coordinate) -> bool:
    edge = state.network.edges.get(get_edge_key(a, b))
    return edge is not None and not edge.removed


def is_valid_move(state: GameState, move: Move) -> bool:
    """Whether ``move`` is legal for the player whose turn it is."""
    if state.phase is not GamePhase.PLAYING:
        return False

    current = state.players[state.current_player_index]
    if move.player != current.id:
        return False

    if move.move_type is MoveType.MOVE:
        return _validate_move_action(state, current, move)
    if move.move_type is MoveType.CUT:
        return _validate_cut_action(state, current, move)
    return False


def _validate_move_action(state: GameState, player: Player, move: Move) -> bool:
    target = move.to_coord
    if target is None:
        return False
    if not is_in_radius(target, state.network.radius):
        return False
    if distance(player.position, target) != 1:
        return False
    if _is_occupied_by_other(state, player.id, target):
        return False
    return _edge_available(state, player.position, target)


def _validate_cut_action(state: GameState, player: Player, move: Move) -> bool:
    if move.edge_cut is None:
        return False
    start, end = move.edge_cut
    radius = state.network.radius
    if not is_in_radius(start, radius) or not is_in_radius(end, radius):
        return False
    # The cutter must stand next to at least one endpoint
    if distance(player.position, start) != 1 and distance(player.position, end) != 1:
        return False
    if distance(start, end) != 1:
        return False
    return _edge_available(state, start, end)


def apply_move(state: GameState, move: Move) -> GameState:
    """Apply an already validated move and return the resulting state.

    The players tuple, edge map and history are copied, so references to
    ``state`` stay valid. The turn always passes to the other player; if that
    player is isolated the game finishes with the mover as winner.
    """
    idx = state.current_player_index
    mover = state.players[idx]
    players = list(state.players)
    edges = dict(state.network.edges)

    if move.move_type is MoveType.MOVE and move.to_coord is not None:
        players[idx] = mover.moved_to(move.to_coord)
        key = get_edge_key(mover.position, move.to_coord)
        edge = edges.get(key)
        if edge is not None:
            edges[key] = Edge(edge.start, edge.end, removed=True)
    elif move.move_type is MoveType.CUT and move.edge_cut is not None:
        key = get_edge_key(*move.edge_cut)
        edge = edges.get(key)
        if edge is not None:
            edges[key] = Edge(edge.start, edge.end, removed=True)

    next_state = GameState(
        id=state.id,
        players=(players[0], players[1]),
        current_player_index=1 - idx,
        network=Network(
            radius=state.network.radius,
            vertices=state.network.vertices,
            edges=edges,
        ),
        phase=state.phase,
        winner=state.winner,
        move_history=state.move_history + [move],
    )

    game_end = check_game_end(next_state)
    if game_end is not None:
        next_state.phase = GamePhase.FINISHED
        next_state.winner = game_end.winner
    return next_state


def get_valid_moves(state: GameState, player: Player) -> ValidMoves:
    """Every destination ``player`` can step to and every edge they can cut.

    The player's position is read from ``state`` (by id) when present there.
    """
    try:
        position = state.players[state.player_index(player.id)].position
    except KeyError:
        position = player.position
    radius = state.network.radius

    moves = []
    for neighbor in get_neighbors(position):
        if not is_in_radius(neighbor, radius):
            continue
        if _is_occupied_by_other(state, player.id, neighbor):
            continue
        if _edge_available(state, position, neighbor):
            moves.append(neighbor)

    cuts = []
    for edge in state.network.edges.values():
        if edge.removed:
            continue
        if distance(position, edge.start) == 1 or distance(position, edge.end) == 1:
            cuts.append((edge.start, edge.end))

    return ValidMoves(moves=moves, cuts=cuts)


def check_game_end(state: GameState) -> Optional[GameEnd]:
    """If the player to move is isolated, the opponent wins."""
    current = state.players[state.current_player_index]
    valid = get_valid_moves(state, current)
    if valid.is_empty():
        opponent = state.players[1 - state.current_player_index]
        return GameEnd(winner=opponent.id, reason=GameEndReason.PLAYER_ISOLATED)
    return None


def get_vertex_degree(state: GameState, coord: Coordinate) -> int:
    """Number of unremoved edges touching ``coord``."""
    degree = 0
    for neighbor in get_neighbors(coord):
        if is_in_radius(neighbor, state.network.radius) and _edge_available(state, coord, neighbor):
            degree += 1
    return degree


def get_game_stats(state: GameState) -> dict:
    total_edges = len(state.network.edges)
    edges_removed = sum(1 for edge in state.network.edges.values() if edge.removed)
    return {
        'total_vertices': len(state.network.vertices),
        'total_edges': total_edges,
        'edges_removed': edges_removed,
        'edges_remaining': total_edges - edges_removed,
        'move_count': len(state.move_history),
    }
