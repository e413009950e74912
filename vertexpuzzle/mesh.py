"""Triangulated puzzle mesh: parsing and adjacency queries."""

import math
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np
from loguru import logger
from numpy.typing import NDArray

from vertexpuzzle.geometry import distances_to, is_degenerate_triangle
from vertexpuzzle.utils import Edge, Vec2d, canonical_edge

_UINT = re.compile(r"\+?[0-9]+")


class MeshError(Exception):
    """Base class for every failure raised while loading a mesh."""

    def __init__(self, message: str, line_no: int | None = None, line: str = ""):
        self.line_no = line_no
        self.line = line
        if line_no is not None:
            message = f"line {line_no}: {message} ({line.strip()!r})"
        super().__init__(message)


class ParseFailure(MeshError): ...


class InvalidVertex(MeshError): ...


class InvalidColor(MeshError): ...


class InvalidTriangle(MeshError): ...


def _parse_uint(token: str) -> int | None:
    if _UINT.fullmatch(token) is None:
        return None
    return int(token)


@dataclass(frozen=True, eq=False)
class PuzzleData:
    """
    Immutable triangulated mesh with precomputed adjacency.

    Attributes
    ----------
    vertices : NDArray[np.float32]
        Array of shape (V, 2) with vertex coordinates in model space.
    triangles : NDArray[np.int64]
        Array of shape (T, 3) with the vertex indices of each triangle, in
        file order.
    triangle_colors : NDArray[np.int64]
        Array of shape (T,) with the color index of each triangle.
    colors : NDArray[np.float32]
        Array of shape (K, 3) with RGB colors normalized to [0, 1].
    lower, upper : tuple[float, float]
        Bounding box of the vertices.
    """

    vertices: NDArray[np.float32]
    triangles: NDArray[np.int64]
    triangle_colors: NDArray[np.int64]
    colors: NDArray[np.float32]
    lower: tuple[float, float] = (math.inf, math.inf)
    upper: tuple[float, float] = (-math.inf, -math.inf)
    edge_to_triangles: dict[Edge, tuple[int, ...]] = field(
        default_factory=dict, repr=False
    )
    triangle_edges: tuple[tuple[Edge, Edge, Edge], ...] = field(
        default=(), repr=False
    )
    vertex_edges: dict[int, frozenset[Edge]] = field(default_factory=dict, repr=False)

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "PuzzleData":
        return parse_mesh(lines)

    @classmethod
    def from_text(cls, text: str) -> "PuzzleData":
        return parse_mesh(text.splitlines())

    def vertex_count(self) -> int:
        return len(self.vertices)

    def triangle_count(self) -> int:
        return len(self.triangles)

    def color_count(self) -> int:
        return len(self.colors)

    def triangles_with_edge(self, edge: Edge) -> tuple[int, ...]:
        """Ids of the triangles bounded by `edge`, empty if it is not a mesh edge."""
        return self.edge_to_triangles.get(canonical_edge(*edge), ())

    def edges_of_triangle(self, triangle_id: int) -> tuple[Edge, Edge, Edge]:
        return self.triangle_edges[triangle_id]

    def incident_edge_count(self, vertex: int) -> int:
        return len(self.vertex_edges.get(int(vertex), ()))

    def mesh_edges(self) -> list[Edge]:
        """All canonical mesh edges, in the order they were first seen."""
        return list(self.edge_to_triangles)

    def is_valid_edge(self, edge: Edge) -> bool:
        """
        Whether both endpoints are vertices of this mesh.

        The pair does not need to be a mesh edge: players may draw any
        segment between two vertices.
        """
        n = self.vertex_count()
        return all(0 <= int(v) < n for v in edge)

    def nearest_vertex(self, point: Vec2d, threshold: float) -> int | None:
        """
        Return the first vertex (in index order) within `threshold` of `point`.

        Parameters
        ----------
        point : Vec2d
            Query point in model coordinates.
        threshold : float
            Maximum Euclidean distance, inclusive.

        Returns
        -------
        int | None
            The lowest qualifying vertex index, or None if no vertex is close
            enough.
        """
        if self.vertex_count() == 0:
            return None
        dist = distances_to(self.vertices.astype(np.float64), point)
        hits = np.flatnonzero(dist <= threshold)
        if hits.size == 0:
            return None
        return int(hits[0])

    def bounds(self) -> tuple[tuple[float, float], tuple[float, float]]:
        return self.lower, self.upper


def _build_adjacency(
    triangles: list[tuple[int, int, int]],
) -> tuple[
    dict[Edge, tuple[int, ...]],
    tuple[tuple[Edge, Edge, Edge], ...],
    dict[int, frozenset[Edge]],
]:
    edge_to_triangles: dict[Edge, list[int]] = {}
    triangle_edges: list[tuple[Edge, Edge, Edge]] = []
    vertex_edges: dict[int, set[Edge]] = {}

    for idx, tri in enumerate(triangles):
        s0, s1, s2 = sorted(tri)
        edges = ((s0, s1), (s1, s2), (s0, s2))
        for edge in edges:
            edge_to_triangles.setdefault(edge, []).append(idx)
            for v in edge:
                vertex_edges.setdefault(v, set()).add(edge)
        triangle_edges.append(edges)

    return (
        {edge: tuple(ids) for edge, ids in edge_to_triangles.items()},
        tuple(triangle_edges),
        {v: frozenset(edges) for v, edges in vertex_edges.items()},
    )


def parse_mesh(lines: Iterable[str]) -> PuzzleData:
    """
    Build a PuzzleData from the line-oriented mesh format.

    Every line is classified by its number of whitespace separated tokens:
    2 is a vertex ``x y``, 3 is a color ``r g b`` (bytes), 4 is a triangle
    ``v0 v1 v2 color``. A triangle may only reference vertices and colors from
    earlier lines.

    Raises
    ------
    ParseFailure
        If a line has any other number of tokens.
    InvalidVertex
        If a vertex coordinate is not a number.
    InvalidColor
        If a color component is not a byte.
    InvalidTriangle
        If a triangle references an undefined or repeated vertex, or a color
        index past the color table.
    """
    vertices: list[tuple[float, float]] = []
    colors: list[tuple[float, float, float]] = []
    triangles: list[tuple[int, int, int]] = []
    triangle_colors: list[int] = []
    min_x = min_y = math.inf
    max_x = max_y = -math.inf

    for line_no, line in enumerate(lines, start=1):
        tokens = line.split()

        if len(tokens) == 2:
            try:
                x, y = (float(np.float32(float(t))) for t in tokens)
            except ValueError:
                raise InvalidVertex("invalid vertex coordinate", line_no, line) from None
            vertices.append((x, y))
            min_x, max_x = min(min_x, x), max(max_x, x)
            min_y, max_y = min(min_y, y), max(max_y, y)

        elif len(tokens) == 3:
            rgb = [_parse_uint(t) for t in tokens]
            if any(c is None or c > 255 for c in rgb):
                raise InvalidColor("color components must be bytes", line_no, line)
            r, g, b = (c / 255.0 for c in rgb)  # type: ignore[operator]
            colors.append((r, g, b))

        elif len(tokens) == 4:
            indices = [_parse_uint(t) for t in tokens[:3]]
            for idx in indices:
                if idx is None or idx >= len(vertices):
                    raise InvalidTriangle(
                        "triangle references an undefined vertex", line_no, line
                    )
            if len(set(indices)) < 3:
                raise InvalidTriangle(
                    "triangle repeats a vertex", line_no, line
                )

            color_idx = _parse_uint(tokens[3])
            # One past the end of the color table is accepted.
            if color_idx is None or color_idx > len(colors):
                raise InvalidTriangle(
                    "triangle references an undefined color", line_no, line
                )
            if color_idx == len(colors):
                logger.warning(
                    f"Line {line_no}: color index {color_idx} is one past the last color"
                )

            tri = (indices[0], indices[1], indices[2])
            if is_degenerate_triangle([vertices[v] for v in tri]):
                logger.warning(f"Line {line_no}: triangle {tri} is degenerate")
            triangles.append(tri)  # type: ignore[arg-type]
            triangle_colors.append(color_idx)

        else:
            raise ParseFailure(
                f"expected 2, 3 or 4 tokens, got {len(tokens)}", line_no, line
            )

    edge_to_triangles, triangle_edges, vertex_edges = _build_adjacency(triangles)

    def _frozen(arr: NDArray) -> NDArray:
        arr.flags.writeable = False
        return arr

    mesh = PuzzleData(
        vertices=_frozen(np.array(vertices, dtype=np.float32).reshape(-1, 2)),
        triangles=_frozen(np.array(triangles, dtype=np.int64).reshape(-1, 3)),
        triangle_colors=_frozen(np.array(triangle_colors, dtype=np.int64)),
        colors=_frozen(np.array(colors, dtype=np.float32).reshape(-1, 3)),
        lower=(min_x, min_y),
        upper=(max_x, max_y),
        edge_to_triangles=edge_to_triangles,
        triangle_edges=triangle_edges,
        vertex_edges=vertex_edges,
    )
    logger.debug(
        f"Parsed mesh: {mesh.vertex_count()} vertices, {mesh.color_count()} colors, "
        f"{mesh.triangle_count()} triangles, {len(edge_to_triangles)} edges"
    )
    return mesh


def load_mesh(filepath: str | Path) -> PuzzleData:
    """Read and parse a mesh file."""
    filepath = Path(filepath)
    with filepath.open() as f:
        return parse_mesh(f)
