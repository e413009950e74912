"""Mutable per-session puzzle state."""

from collections import defaultdict

from loguru import logger

from vertexpuzzle.mesh import PuzzleData
from vertexpuzzle.utils import Edge, canonical_edge


class PuzzleState:
    """
    Tracks drawn edges, unlocked triangles and permanence for one puzzle.

    A triangle unlocks once all three of its edges are connected. Unlocking
    marks its edges permanent, and a vertex becomes permanent once every mesh
    edge around it is permanent. Permanence is a one-way ratchet: later
    disconnects may re-lock a triangle but never un-mark an edge or vertex.

    All derived indices are updated together inside `connect_edge` and
    `disconnect_edge`; nothing else mutates them.
    """

    def __init__(self, data: PuzzleData) -> None:
        self.triangle_remaining: list[int] = [3] * data.triangle_count()
        self._unlocked_triangles: set[int] = set()
        self._connected_edges: set[Edge] = set()
        self._connected_edges_by_vertex: defaultdict[int, set[Edge]] = defaultdict(
            set
        )
        self._permanent_edges: set[Edge] = set()
        self._permanent_edge_count_by_vertex: defaultdict[int, int] = defaultdict(int)
        self._permanent_vertices: set[int] = set()

    @classmethod
    def from_data(cls, data: PuzzleData) -> "PuzzleState":
        return cls(data)

    def connect_edge(self, data: PuzzleData, edge: Edge) -> None:
        """
        Draw `edge`. Connecting an already connected edge does nothing.

        Edges that bound no triangle are still recorded as connected.
        """
        edge = canonical_edge(*edge)
        if edge in self._connected_edges:
            return
        logger.trace(f"Connecting edge {edge}")

        self._connected_edges.add(edge)
        for v in edge:
            self._connected_edges_by_vertex[v].add(edge)

        unlocked = False
        for triangle in data.triangles_with_edge(edge):
            self.triangle_remaining[triangle] -= 1
            if self.triangle_remaining[triangle] == 0:
                self._unlock_triangle(data, triangle)
                unlocked = True

        if unlocked and self.is_finished():
            logger.info("Puzzle finished")

    def _unlock_triangle(self, data: PuzzleData, triangle: int) -> None:
        logger.debug(f"Triangle {triangle} unlocked")
        self._unlocked_triangles.add(triangle)
        for e_perm in data.edges_of_triangle(triangle):
            self._permanent_edges.add(e_perm)
            for v in e_perm:
                self._permanent_edge_count_by_vertex[v] += 1
                if self._permanent_edge_count_by_vertex[v] == data.incident_edge_count(
                    v
                ):
                    self._permanent_vertices.add(v)

    def disconnect_edge(self, data: PuzzleData, edge: Edge) -> None:
        """
        Erase `edge`, re-locking any unlocked triangle it bounds.

        Does nothing if the edge is not connected. Permanent marks are kept.
        """
        edge = canonical_edge(*edge)
        if edge not in self._connected_edges:
            return
        logger.trace(f"Disconnecting edge {edge}")

        self._connected_edges.remove(edge)
        for v in edge:
            self._connected_edges_by_vertex[v].discard(edge)

        for triangle in data.triangles_with_edge(edge):
            if self.triangle_remaining[triangle] == 0:
                logger.debug(f"Triangle {triangle} locked again")
                self._unlocked_triangles.remove(triangle)
            self.triangle_remaining[triangle] += 1
            if self.triangle_remaining[triangle] > 3:
                raise RuntimeError(
                    f"Triangle {triangle} has more than 3 missing edges"
                )

    def disconnect_from_vertex(self, data: PuzzleData, vertex: int) -> None:
        """
        Erase every non-permanent edge connected at `vertex`.

        Nothing happens when the vertex is permanent and all of its connected
        edges are permanent too.
        """
        vertex = int(vertex)
        connected = self._connected_edges_by_vertex.get(vertex, set())
        if vertex in self._permanent_vertices and connected <= self._permanent_edges:
            return

        for edge in list(connected):
            if edge in self._permanent_edges:
                continue
            self.disconnect_edge(data, edge)

    def is_finished(self) -> bool:
        return len(self._unlocked_triangles) == len(self.triangle_remaining)

    def remaining(self, triangle_id: int) -> int:
        """Number of edges of the triangle still to be drawn."""
        return self.triangle_remaining[triangle_id]

    def is_connected(self, edge: Edge) -> bool:
        return canonical_edge(*edge) in self._connected_edges

    def is_permanent_edge(self, edge: Edge) -> bool:
        return canonical_edge(*edge) in self._permanent_edges

    def connected_edges_at(self, vertex: int) -> frozenset[Edge]:
        return frozenset(self._connected_edges_by_vertex.get(int(vertex), ()))

    @property
    def connected_edges(self) -> frozenset[Edge]:
        return frozenset(self._connected_edges)

    @property
    def unlocked_triangles(self) -> frozenset[int]:
        return frozenset(self._unlocked_triangles)

    @property
    def permanent_edges(self) -> frozenset[Edge]:
        return frozenset(self._permanent_edges)

    @property
    def permanent_vertices(self) -> frozenset[int]:
        return frozenset(self._permanent_vertices)
