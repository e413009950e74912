"""Render-ready geometry derived from a mesh and its puzzle state."""

from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from vertexpuzzle.geometry import ensure_ccw_triangle
from vertexpuzzle.mesh import PuzzleData
from vertexpuzzle.state import PuzzleState
from vertexpuzzle.utils import Vec2d


@dataclass(frozen=True, eq=False)
class StaticGeometry:
    """Per-mesh data that never changes during a session.

    Attributes
    ----------
    vertex_positions : NDArray[np.float32]
        (V, 2) vertex coordinates.
    triangle_positions : NDArray[np.float32]
        (3T, 2) triangle corners, three rows per triangle, counterclockwise.
    triangle_color_indices : NDArray[np.int64]
        (3T,) color index of the triangle owning each corner.
    point_positions : NDArray[np.float32]
        (V, 2) positions of the vertex markers.
    point_indices : NDArray[np.int64]
        (V,) vertex index of each marker.
    colors : NDArray[np.float32]
        (3K,) flattened RGB color table.
    """

    vertex_positions: NDArray[np.float32]
    triangle_positions: NDArray[np.float32]
    triangle_color_indices: NDArray[np.int64]
    point_positions: NDArray[np.float32]
    point_indices: NDArray[np.int64]
    colors: NDArray[np.float32]
    lower: tuple[float, float]
    upper: tuple[float, float]


@dataclass(frozen=True, eq=False)
class DynamicGeometry:
    """Per-frame data.

    Attributes
    ----------
    edge_segments : NDArray[np.float32]
        (E, 2, 2) endpoints of every connected edge.
    unlocked_triangles : NDArray[np.int64]
        (U, 3) vertex indices of every unlocked triangle.
    highlighted_vertices : NDArray[np.int64]
        (H,) vertices to draw emphasized.
    pending_segments : NDArray[np.float32]
        (0, 2, 2) or (1, 2, 2): the edge being dragged, if any.
    """

    edge_segments: NDArray[np.float32]
    unlocked_triangles: NDArray[np.int64]
    highlighted_vertices: NDArray[np.int64]
    pending_segments: NDArray[np.float32]


def get_static_graphics_data(data: PuzzleData) -> StaticGeometry:
    points = data.vertices
    if data.triangle_count():
        ccw = np.array([ensure_ccw_triangle(tri, points) for tri in data.triangles])
    else:
        ccw = np.empty((0, 3), dtype=np.int64)

    return StaticGeometry(
        vertex_positions=points.copy(),
        triangle_positions=points[ccw.reshape(-1)].astype(np.float32),
        triangle_color_indices=np.repeat(data.triangle_colors, 3),
        point_positions=points.copy(),
        point_indices=np.arange(data.vertex_count(), dtype=np.int64),
        colors=data.colors.reshape(-1).copy(),
        lower=data.lower,
        upper=data.upper,
    )


def get_dynamic_graphics_data(
    data: PuzzleData,
    state: PuzzleState,
    highlighted: Iterable[int] = (),
    pending: tuple[int, Vec2d] | None = None,
) -> DynamicGeometry:
    """
    Build the per-frame snapshot for the current state.

    Parameters
    ----------
    data : PuzzleData
        The mesh.
    state : PuzzleState
        Current puzzle progress.
    highlighted : Iterable[int]
        Vertices to emphasize (e.g. the one under the pointer).
    pending : tuple[int, Vec2d] | None
        In-progress edge as (start vertex, free end in model coordinates).

    Returns
    -------
    DynamicGeometry
        Edges sorted by vertex pair, triangles sorted by id.
    """
    edges = sorted(state.connected_edges)
    if edges:
        edge_segments = data.vertices[np.array(edges, dtype=np.int64)]
    else:
        edge_segments = np.empty((0, 2, 2), dtype=np.float32)

    unlocked = sorted(state.unlocked_triangles)
    unlocked_triangles = data.triangles[np.array(unlocked, dtype=np.int64)].reshape(
        -1, 3
    )

    if pending is None:
        pending_segments = np.empty((0, 2, 2), dtype=np.float32)
    else:
        start, end = pending
        pending_segments = np.array(
            [[data.vertices[start], np.asarray(end, dtype=np.float32)]],
            dtype=np.float32,
        )

    return DynamicGeometry(
        edge_segments=edge_segments.astype(np.float32),
        unlocked_triangles=unlocked_triangles.copy(),
        highlighted_vertices=np.array(list(highlighted), dtype=np.int64),
        pending_segments=pending_segments,
    )
