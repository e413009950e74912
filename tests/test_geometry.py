"""Tests for geometric helpers (vertexpuzzle/geometry.py)."""

import numpy as np

from vertexpuzzle.geometry import (
    distances_to,
    ensure_ccw_triangle,
    is_degenerate_triangle,
    orient2d,
)


def test_orient2d_signs():
    assert orient2d((0.0, 0.0), (1.0, 0.0), (0.0, 1.0)) > 0
    assert orient2d((0.0, 0.0), (0.0, 1.0), (1.0, 0.0)) < 0
    assert orient2d((0.0, 0.0), (1.0, 1.0), (2.0, 2.0)) == 0


def test_is_degenerate_triangle():
    assert is_degenerate_triangle([(0.0, 0.0), (1.0, 1.0), (3.0, 3.0)])
    assert not is_degenerate_triangle([(0.0, 0.0), (1.0, 0.0), (0.0, 1.0)])


def test_ensure_ccw_triangle_swaps_clockwise():
    points = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]])
    np.testing.assert_array_equal(ensure_ccw_triangle(np.array([0, 2, 1]), points), [0, 1, 2])
    np.testing.assert_array_equal(ensure_ccw_triangle(np.array([1, 2, 0]), points), [1, 2, 0])


def test_distances_to():
    points = np.array([[0.0, 0.0], [3.0, 4.0]])
    np.testing.assert_allclose(distances_to(points, (0.0, 0.0)), [0.0, 5.0])
