"""Unit tests for lattice geometry."""
import os
import sys
import numpy as np
import pytest

# Ensure the package is importable
ROOT = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
sys.path.append(ROOT)

from vertex_isolation.envs.isolation.lattice import (
    DIRECTIONS,
    are_adjacent,
    build_lattice_tables,
    coord_to_key,
    coordinate_to_pixel,
    distance,
    generate_edges,
    generate_vertices,
    get_edge_key,
    get_neighbor_count,
    get_neighbors,
    is_boundary_vertex,
    is_corner_vertex,
    is_in_radius,
    key_to_coord,
    pixel_to_coordinate,
)
from vertex_isolation.envs.isolation.types import CENTER, Coordinate
from vertex_isolation.errors import InvalidCoordinateKeyError


class TestCoordinateKeys:
    """Tests for the "u,v" key format."""

    def test_key_format(self):
        assert coord_to_key(Coordinate(2, -1)) == "2,-1"
        assert Coordinate(2, -1).key() == "2,-1"

    def test_parse_key(self):
        assert key_to_coord("-3,2") == Coordinate(-3, 2)
        assert key_to_coord(coord_to_key(Coordinate(0, 4))) == Coordinate(0, 4)

    @pytest.mark.parametrize("bad_key", ["", "1", "1,2,3", "a,b", "1,", None])
    def test_malformed_key_raises(self, bad_key):
        """Corrupt keys are a hard error."""
        with pytest.raises(InvalidCoordinateKeyError):
            key_to_coord(bad_key)

    def test_malformed_key_is_value_error(self):
        with pytest.raises(ValueError):
            key_to_coord("x")


class TestGeometry:
    """Tests for neighbours, radius and distance."""

    def test_six_neighbors_in_fixed_order(self):
        neighbors = get_neighbors(CENTER)
        assert [(n.u, n.v) for n in neighbors] == list(DIRECTIONS)

    def test_neighbors_are_adjacent(self):
        coord = Coordinate(1, -2)
        for n in get_neighbors(coord):
            assert distance(coord, n) == 1
            assert are_adjacent(coord, n)

    def test_cube_axis(self):
        assert Coordinate(2, -5).w == 3

    def test_distance(self):
        assert distance(CENTER, CENTER) == 0
        assert distance(CENTER, Coordinate(2, -1)) == 2
        assert distance(Coordinate(1, 1), Coordinate(-1, -1)) == 4
        assert distance(Coordinate(3, 0), Coordinate(0, 3)) == 3

    def test_in_radius(self):
        assert is_in_radius(Coordinate(2, -2), 2)
        assert not is_in_radius(Coordinate(2, 1), 2)
        assert not is_in_radius(Coordinate(-3, 0), 2)

    @pytest.mark.parametrize("radius", [1, 2, 3, 4])
    def test_vertex_and_edge_counts(self, radius):
        """A hexagon of radius r has 3r^2+3r+1 vertices and 3r(3r+1) edges."""
        assert len(generate_vertices(radius)) == 3 * radius * radius + 3 * radius + 1
        assert len(generate_edges(radius)) == 3 * radius * (3 * radius + 1)

    def test_edges_are_unique_and_adjacent(self):
        edges = generate_edges(3)
        keys = [get_edge_key(a, b) for a, b in edges]
        assert len(keys) == len(set(keys))
        assert all(are_adjacent(a, b) for a, b in edges)

    def test_boundary_and_corner(self):
        assert not is_boundary_vertex(CENTER, 2)
        assert is_boundary_vertex(Coordinate(2, -1), 2)
        assert is_corner_vertex(Coordinate(2, 0), 2)
        assert not is_corner_vertex(Coordinate(2, -1), 2)
        assert get_neighbor_count(Coordinate(2, -1), 2) == 4


class TestEdgeKeys:
    """Edge keys do not depend on endpoint order."""

    def test_edge_symmetry_for_all_adjacent_pairs(self):
        for radius in (1, 2, 3):
            for vertex in generate_vertices(radius):
                for n in get_neighbors(vertex):
                    if is_in_radius(n, radius):
                        assert get_edge_key(vertex, n) == get_edge_key(n, vertex)

    def test_smaller_key_first(self):
        assert get_edge_key(Coordinate(1, 0), Coordinate(0, 0)) == "0,0-1,0"


class TestPixels:
    """Presentation helpers."""

    def test_center_maps_to_origin(self):
        assert coordinate_to_pixel(CENTER, 30.0) == (0.0, 0.0)

    def test_snap_to_nearest_vertex(self):
        x, y = coordinate_to_pixel(Coordinate(2, -1), 30.0)
        assert pixel_to_coordinate(x + 3.0, y - 2.0, 30.0) == Coordinate(2, -1)


class TestLatticeTables:
    """Tests for the index tables used by the rollout kernels."""

    def test_shapes(self):
        tables = build_lattice_tables(2)
        assert tables.num_vertices == 19
        assert tables.num_edges == 42
        assert tables.neighbors.shape == (19, 6)
        assert tables.edge_ids.shape == (19, 6)
        assert tables.neighbors.dtype == np.int64

    def test_cached_per_radius(self):
        assert build_lattice_tables(3) is build_lattice_tables(3)

    def test_read_only(self):
        tables = build_lattice_tables(1)
        with pytest.raises(ValueError):
            tables.neighbors[0, 0] = 5

    def test_opposite_directions_agree(self):
        """Stepping in direction d and back in d+3 returns to the start over the same edge."""
        tables = build_lattice_tables(3)
        for i in range(tables.num_vertices):
            for d in range(6):
                j = tables.neighbors[i, d]
                if j < 0:
                    assert tables.edge_ids[i, d] == -1
                    continue
                assert tables.neighbors[j, (d + 3) % 6] == i
                assert tables.edge_ids[j, (d + 3) % 6] == tables.edge_ids[i, d]

    def test_edge_index_matches_keys(self):
        tables = build_lattice_tables(2)
        center = tables.index[CENTER]
        for d, n in enumerate(get_neighbors(CENTER)):
            key = get_edge_key(CENTER, n)
            assert tables.edge_keys[tables.edge_ids[center, d]] == key
            assert tables.edge_index[key] == tables.edge_ids[center, d]
