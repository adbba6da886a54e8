"""
Triangular lattice geometry.

Vertices use two integer axes ``(u, v)``; the third cube axis is
``w = -(u + v)``. A board of radius ``r`` holds every vertex with
``max(|u|, |v|, |w|) <= r``, which is a hexagon of ``3r^2 + 3r + 1`` vertices.

Besides the pure coordinate helpers this module builds ``LatticeTables``,
the integer index tables the numba rollout kernels work on.
"""

import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List, Tuple

import numpy as np

from vertex_isolation.envs.isolation.types import Coordinate
from vertex_isolation.errors import InvalidCoordinateKeyError

# The six unit steps, in a fixed order shared with the neighbour tables.
DIRECTIONS: Tuple[Tuple[int, int], ...] = (
    (1, 0),
    (1, -1),
    (0, -1),
    (-1, 0),
    (-1, 1),
    (0, 1),
)

EDGE_KEY_SEPARATOR = '-'


def coord_to_key(coord: Coordinate) -> str:
    return f"{coord.u},{coord.v}"


def key_to_coord(key: str) -> Coordinate:
    """Parse a ``"u,v"`` key. Raises ``InvalidCoordinateKeyError`` on corrupt input."""
    parts = key.split(',') if isinstance(key, str) else []
    if len(parts) != 2:
        raise InvalidCoordinateKeyError(key)
    try:
        u, v = int(parts[0]), int(parts[1])
    except ValueError:
        raise InvalidCoordinateKeyError(key) from None
    return Coordinate(u, v)


def get_neighbors(coord: Coordinate) -> List[Coordinate]:
    """The six lattice neighbours, on or off the board."""
    return [Coordinate(coord.u + du, coord.v + dv) for du, dv in DIRECTIONS]


def is_in_radius(coord: Coordinate, radius: int) -> bool:
    w = -(coord.u + coord.v)
    return abs(coord.u) <= radius and abs(coord.v) <= radius and abs(w) <= radius


def distance(a: Coordinate, b: Coordinate) -> int:
    """Cube distance; adjacent vertices are at distance 1."""
    aw = -(a.u + a.v)
    bw = -(b.u + b.v)
    return max(abs(a.u - b.u), abs(a.v - b.v), abs(aw - bw))


def are_adjacent(a: Coordinate, b: Coordinate) -> bool:
    return distance(a, b) == 1


def get_edge_key(a: Coordinate, b: Coordinate) -> str:
    """Order-independent key: ``get_edge_key(a, b) == get_edge_key(b, a)``."""
    key_a = coord_to_key(a)
    key_b = coord_to_key(b)
    if key_a < key_b:
        return f"{key_a}{EDGE_KEY_SEPARATOR}{key_b}"
    return f"{key_b}{EDGE_KEY_SEPARATOR}{key_a}"


def generate_vertices(radius: int) -> List[Coordinate]:
    vertices = []
    for u in range(-radius, radius + 1):
        for v in range(-radius, radius + 1):
            coord = Coordinate(u, v)
            if is_in_radius(coord, radius):
                vertices.append(coord)
    return vertices


def generate_edges(radius: int) -> List[Tuple[Coordinate, Coordinate]]:
    """Every adjacent pair on the board exactly once, smaller key first."""
    edges = []
    for vertex in generate_vertices(radius):
        from_key = coord_to_key(vertex)
        for neighbor in get_neighbors(vertex):
            if not is_in_radius(neighbor, radius):
                continue
            if from_key < coord_to_key(neighbor):
                edges.append((vertex, neighbor))
    return edges


def get_neighbor_count(coord: Coordinate, radius: int) -> int:
    return sum(1 for n in get_neighbors(coord) if is_in_radius(n, radius))


def is_boundary_vertex(coord: Coordinate, radius: int) -> bool:
    return get_neighbor_count(coord, radius) < 6


def is_corner_vertex(coord: Coordinate, radius: int) -> bool:
    return get_neighbor_count(coord, radius) == 3


def coordinate_to_pixel(coord: Coordinate, scale: float) -> Tuple[float, float]:
    """Presentation helper: lattice coordinate to Cartesian point."""
    x = scale * (coord.u + 0.5 * coord.v)
    y = scale * (math.sqrt(3) / 2 * coord.v)
    return x, y


def pixel_to_coordinate(x: float, y: float, scale: float) -> Coordinate:
    """Presentation helper: snap a Cartesian point to the nearest vertex."""
    v = (2 / math.sqrt(3)) * y / scale
    u = (x / scale) - 0.5 * v
    w = -(u + v)

    ru, rv, rw = round(u), round(v), round(w)
    u_diff = abs(ru - u)
    v_diff = abs(rv - v)
    w_diff = abs(rw - w)

    # Fix the component with the largest rounding error
    if u_diff > v_diff and u_diff > w_diff:
        ru = -rv - rw
    elif v_diff > w_diff:
        rv = -ru - rw
    return Coordinate(int(ru), int(rv))


@dataclass(frozen=True)
class LatticeTables:
    """Index tables for one board radius.

    Attributes:
        coords: (V, 2) int64 vertex coordinates
        index: coordinate -> vertex index
        neighbors: (V, 6) int64 neighbour vertex index per direction, -1 off-board
        edge_ids: (V, 6) int64 edge index per direction, -1 off-board
        edge_keys: edge keys, position i is edge index i
        edge_index: edge key -> edge index
    """

    radius: int
    coords: np.ndarray
    index: Dict[Coordinate, int]
    neighbors: np.ndarray
    edge_ids: np.ndarray
    edge_keys: Tuple[str, ...]
    edge_index: Dict[str, int]

    @property
    def num_vertices(self) -> int:
        return self.coords.shape[0]

    @property
    def num_edges(self) -> int:
        return len(self.edge_keys)


@lru_cache(maxsize=16)
def build_lattice_tables(radius: int) -> LatticeTables:
    vertices = generate_vertices(radius)
    index = {coord: i for i, coord in enumerate(vertices)}

    edge_keys = tuple(get_edge_key(a, b) for a, b in generate_edges(radius))
    edge_index = {key: i for i, key in enumerate(edge_keys)}

    coords = np.empty((len(vertices), 2), dtype=np.int64)
    neighbors = np.full((len(vertices), 6), -1, dtype=np.int64)
    edge_ids = np.full((len(vertices), 6), -1, dtype=np.int64)
    for i, vertex in enumerate(vertices):
        coords[i, 0] = vertex.u
        coords[i, 1] = vertex.v
        for d, neighbor in enumerate(get_neighbors(vertex)):
            if neighbor in index:
                neighbors[i, d] = index[neighbor]
                edge_ids[i, d] = edge_index[get_edge_key(vertex, neighbor)]

    # Tables are shared across searches; keep them read-only
    for arr in (coords, neighbors, edge_ids):
        arr.flags.writeable = False

    return LatticeTables(
        radius=radius,
        coords=coords,
        index=index,
        neighbors=neighbors,
        edge_ids=edge_ids,
        edge_keys=edge_keys,
        edge_index=edge_index,
    )
