"""
Core data structures for the vertex isolation game.

Rule reminders:
- The board is a hexagonal patch of a triangular lattice, bounded by a radius.
- Players stand on vertices and either traverse an unremoved edge to an
  adjacent free vertex (the edge is removed behind them) or cut an edge
  next to their position without moving.
- A player with neither a move nor a cut on their turn is isolated and loses.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple


class GamePhase(str, Enum):
    PLAYING = 'playing'
    FINISHED = 'finished'


class MoveType(str, Enum):
    MOVE = 'move'
    CUT = 'cut'


class GameEndReason(str, Enum):
    PLAYER_ISOLATED = 'player_isolated'


@dataclass(frozen=True)
class Coordinate:
    """A lattice vertex. The third cube axis is implicit: ``w = -(u + v)``."""

    u: int
    v: int

    @property
    def w(self) -> int:
        return -(self.u + self.v)

    def key(self) -> str:
        return f"{self.u},{self.v}"

    def __str__(self) -> str:
        return f"({self.u},{self.v})"


CENTER = Coordinate(0, 0)


@dataclass(frozen=True)
class Edge:
    """An edge between two adjacent vertices. Only ever goes from present to removed."""

    start: Coordinate
    end: Coordinate
    removed: bool = False

    def touches(self, coord: Coordinate) -> bool:
        return self.start == coord or self.end == coord


@dataclass(frozen=True)
class PlayerIdentity:
    """Who a player is, before they are placed on the board."""

    id: str
    name: str
    color: str = '#3b82f6'


@dataclass(frozen=True)
class Player:
    """A player standing on a vertex."""

    id: str
    name: str
    position: Coordinate
    color: str = '#3b82f6'

    @classmethod
    def from_identity(cls, identity: PlayerIdentity, position: Coordinate) -> "Player":
        return cls(id=identity.id, name=identity.name, position=position, color=identity.color)

    def moved_to(self, position: Coordinate) -> "Player":
        return Player(id=self.id, name=self.name, position=position, color=self.color)


@dataclass(frozen=True)
class Move:
    """A single action: traverse an edge (``move``) or remove one (``cut``).

    The timestamp is informational and does not take part in equality, so two
    moves describing the same action compare equal.
    """

    move_type: MoveType
    player: str
    from_coord: Optional[Coordinate] = None
    to_coord: Optional[Coordinate] = None
    edge_cut: Optional[Tuple[Coordinate, Coordinate]] = None
    timestamp: float = field(default_factory=time.time, compare=False)

    @classmethod
    def step(cls, player: str, from_coord: Coordinate, to_coord: Coordinate) -> "Move":
        return cls(MoveType.MOVE, player, from_coord=from_coord, to_coord=to_coord)

    @classmethod
    def cut(cls, player: str, start: Coordinate, end: Coordinate) -> "Move":
        return cls(MoveType.CUT, player, edge_cut=(start, end))

    @property
    def is_cut(self) -> bool:
        return self.move_type is MoveType.CUT

    def describe(self) -> str:
        if self.move_type is MoveType.MOVE:
            return f"move to {self.to_coord}"
        start, end = self.edge_cut if self.edge_cut else (None, None)
        return f"cut {start}-{end}"


@dataclass
class ValidMoves:
    """Legal actions for one player: destination vertices and cuttable edges."""

    moves: List[Coordinate] = field(default_factory=list)
    cuts: List[Tuple[Coordinate, Coordinate]] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.moves and not self.cuts

    @property
    def total(self) -> int:
        return len(self.moves) + len(self.cuts)


@dataclass
class Network:
    """The board: a fixed vertex set and the edge map whose ``removed`` flags change."""

    radius: int
    vertices: FrozenSet[str]
    edges: Dict[str, Edge]


@dataclass
class GameConfig:
    """Options for a new game."""

    grid_radius: int
    custom_start_positions: Optional[Tuple[Coordinate, Coordinate]] = None
    time_limit: Optional[float] = None


@dataclass
class GameState:
    """Complete state of one game.

    ``winner`` is set exactly when ``phase`` is ``FINISHED``. Each applied move
    produces a new ``GameState``; earlier states stay valid.
    """

    id: str
    players: Tuple[Player, Player]
    current_player_index: int
    network: Network
    phase: GamePhase = GamePhase.PLAYING
    winner: Optional[str] = None
    move_history: List[Move] = field(default_factory=list)

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_index]

    @property
    def is_finished(self) -> bool:
        return self.phase is GamePhase.FINISHED

    def player_index(self, player_id: str) -> int:
        for idx, player in enumerate(self.players):
            if player.id == player_id:
                return idx
        raise KeyError(player_id)

    def opponent_of(self, player_id: str) -> Player:
        return self.players[1 - self.player_index(player_id)]

    def key(self) -> Tuple:
        """Hashable key capturing player ids and positions, turn, phase and removed edges."""

        removed = frozenset(k for k, edge in self.network.edges.items() if edge.removed)
        players = tuple((p.id, p.position) for p in self.players)
        return (self.current_player_index, players, self.phase, removed)
