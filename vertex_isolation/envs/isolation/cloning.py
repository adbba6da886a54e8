"""
Game state cloning tiers.

- deep_clone: independent edge map, vertex set, players and history
- simulation_clone: independent edge map and players; the radius and the
  vertex set (never modified after creation) are shared

Both tiers copy the edge map, because moves and cuts remove edges.
"""

from vertex_isolation.envs.isolation.types import GameState, Network


def deep_clone(state: GameState) -> GameState:
    return GameState(
        id=state.id,
        players=(state.players[0], state.players[1]),
        current_player_index=state.current_player_index,
        network=Network(
            radius=state.network.radius,
            vertices=frozenset(state.network.vertices),
            edges=dict(state.network.edges),
        ),
        phase=state.phase,
        winner=state.winner,
        move_history=list(state.move_history),
    )


def simulation_clone(state: GameState) -> GameState:
    return GameState(
        id=state.id,
        players=(state.players[0], state.players[1]),
        current_player_index=state.current_player_index,
        network=Network(
            radius=state.network.radius,
            vertices=state.network.vertices,
            edges=dict(state.network.edges),
        ),
        phase=state.phase,
        winner=state.winner,
        move_history=state.move_history,
    )
