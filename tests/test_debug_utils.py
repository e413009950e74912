"""Smoke tests for the matplotlib debug renderer."""

import matplotlib

matplotlib.use("Agg")

import numpy as np  # noqa: E402

from vertexpuzzle.debug_utils import plot_puzzle  # noqa: E402
from vertexpuzzle.mesh import parse_mesh  # noqa: E402
from vertexpuzzle.state import PuzzleState  # noqa: E402


def test_plot_returns_rgb_image():
    # Color index 1 is one past the table and falls back to gray.
    mesh = parse_mesh(["0 0", "1 0", "0 1", "1 1", "255 0 0", "0 1 2 0", "1 2 3 1"])
    state = PuzzleState(mesh)
    for edge in mesh.mesh_edges():
        state.connect_edge(mesh, edge)
    state.connect_edge(mesh, (0, 3))

    img = plot_puzzle(mesh, state, point_labels=True)

    assert img.ndim == 3
    assert img.shape[2] == 3
    assert img.dtype == np.uint8


def test_plot_without_state():
    mesh = parse_mesh(["0 0", "1 0", "0 1", "0 128 0", "0 1 2 0"])
    img = plot_puzzle(mesh)
    assert img.shape[2] == 3
