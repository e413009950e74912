"""Tests for render snapshots (vertexpuzzle/snapshot.py)."""

import numpy as np

from vertexpuzzle.mesh import parse_mesh
from vertexpuzzle.snapshot import get_dynamic_graphics_data, get_static_graphics_data
from vertexpuzzle.state import PuzzleState

TWO_TRIANGLES = ["0 0", "1 0", "0 1", "1 1", "255 0 0", "0 0 255", "0 1 2 0", "1 2 3 1"]


class TestStaticGeometry:
    def test_shapes(self):
        mesh = parse_mesh(TWO_TRIANGLES)
        static = get_static_graphics_data(mesh)

        assert static.vertex_positions.shape == (4, 2)
        assert static.triangle_positions.shape == (6, 2)
        assert static.triangle_color_indices.shape == (6,)
        assert static.point_positions.shape == (4, 2)
        assert static.colors.shape == (6,)
        assert static.triangle_positions.dtype == np.float32

    def test_color_indices_repeat_per_corner(self):
        static = get_static_graphics_data(parse_mesh(TWO_TRIANGLES))
        np.testing.assert_array_equal(static.triangle_color_indices, [0, 0, 0, 1, 1, 1])

    def test_color_table_is_flattened(self):
        static = get_static_graphics_data(parse_mesh(TWO_TRIANGLES))
        np.testing.assert_allclose(static.colors, [1, 0, 0, 0, 0, 1])

    def test_point_indices(self):
        static = get_static_graphics_data(parse_mesh(TWO_TRIANGLES))
        np.testing.assert_array_equal(static.point_indices, [0, 1, 2, 3])

    def test_triangles_are_counterclockwise(self):
        """A clockwise triangle is reordered, a counterclockwise one is kept."""
        mesh = parse_mesh(["0 0", "1 0", "0 1", "9 9 9", "0 2 1 0"])
        static = get_static_graphics_data(mesh)
        np.testing.assert_allclose(static.triangle_positions, [[0, 0], [1, 0], [0, 1]])

    def test_bounds(self):
        static = get_static_graphics_data(parse_mesh(TWO_TRIANGLES))
        assert static.lower == (0.0, 0.0)
        assert static.upper == (1.0, 1.0)

    def test_empty_mesh(self):
        static = get_static_graphics_data(parse_mesh([]))
        assert static.triangle_positions.shape == (0, 2)
        assert static.colors.shape == (0,)


class TestDynamicGeometry:
    def test_initial_state_is_empty(self):
        mesh = parse_mesh(TWO_TRIANGLES)
        dynamic = get_dynamic_graphics_data(mesh, PuzzleState(mesh))
        assert dynamic.edge_segments.shape == (0, 2, 2)
        assert dynamic.unlocked_triangles.shape == (0, 3)
        assert dynamic.highlighted_vertices.shape == (0,)
        assert dynamic.pending_segments.shape == (0, 2, 2)

    def test_edge_segments_use_vertex_coordinates(self):
        mesh = parse_mesh(TWO_TRIANGLES)
        state = PuzzleState(mesh)
        state.connect_edge(mesh, (3, 0))
        state.connect_edge(mesh, (1, 2))

        dynamic = get_dynamic_graphics_data(mesh, state)

        np.testing.assert_allclose(
            dynamic.edge_segments,
            [[[0, 0], [1, 1]], [[1, 0], [0, 1]]],
        )

    def test_unlocked_triangle_triples(self):
        mesh = parse_mesh(TWO_TRIANGLES)
        state = PuzzleState(mesh)
        for edge in [(1, 2), (2, 3), (1, 3)]:
            state.connect_edge(mesh, edge)

        dynamic = get_dynamic_graphics_data(mesh, state)

        np.testing.assert_array_equal(dynamic.unlocked_triangles, [[1, 2, 3]])

    def test_highlight_and_pending(self):
        mesh = parse_mesh(TWO_TRIANGLES)
        dynamic = get_dynamic_graphics_data(
            mesh, PuzzleState(mesh), highlighted=[2], pending=(2, (0.5, 0.25))
        )
        np.testing.assert_array_equal(dynamic.highlighted_vertices, [2])
        np.testing.assert_allclose(dynamic.pending_segments, [[[0, 1], [0.5, 0.25]]])

    def test_solved_puzzle_round_trip(self):
        """Connecting every edge yields one triple per triangle and no pending edge."""
        mesh = parse_mesh(TWO_TRIANGLES)
        state = PuzzleState(mesh)
        for t in range(mesh.triangle_count()):
            for edge in mesh.edges_of_triangle(t):
                state.connect_edge(mesh, edge)

        dynamic = get_dynamic_graphics_data(mesh, state)

        assert state.is_finished()
        assert dynamic.unlocked_triangles.shape == (mesh.triangle_count(), 3)
        np.testing.assert_array_equal(dynamic.unlocked_triangles, mesh.triangles)
        assert len(dynamic.pending_segments) == 0
        assert len(dynamic.edge_segments) == 5
