"""Pointer input: event queue, screen/model transform and gesture handling."""

from dataclasses import dataclass, field
from enum import Enum, auto

import numpy as np
from loguru import logger

from vertexpuzzle.mesh import PuzzleData
from vertexpuzzle.snapshot import DynamicGeometry, get_dynamic_graphics_data
from vertexpuzzle.state import PuzzleState
from vertexpuzzle.utils import (
    DEFAULT_PICK_RADIUS,
    DEFAULT_VIEWPORT_MARGIN,
    EPS,
    Vec2d,
)


class EventKind(Enum):
    press = auto()
    move = auto()
    release = auto()
    leave = auto()


@dataclass(frozen=True)
class PointerEvent:
    kind: EventKind
    x: float = 0.0
    y: float = 0.0


@dataclass
class EventQueue:
    events: list[PointerEvent] = field(default_factory=list)

    def push(self, event: PointerEvent) -> None:
        self.events.append(event)

    def pending(self) -> list[PointerEvent]:
        """Remove and return every queued event, oldest first."""
        events, self.events = self.events, []
        return events

    def __len__(self) -> int:
        return len(self.events)


@dataclass(frozen=True)
class Viewport:
    """
    Uniform scale + translation fitting the mesh bounds into a canvas.

    Screen coordinates are pixels from the top-left corner of the canvas;
    model coordinates are those of the mesh file. Both axes point the same
    way, so no flip is applied.
    """

    width: float
    height: float
    lower: tuple[float, float]
    upper: tuple[float, float]
    margin: float = DEFAULT_VIEWPORT_MARGIN

    @classmethod
    def for_mesh(
        cls,
        data: PuzzleData,
        width: float,
        height: float,
        margin: float = DEFAULT_VIEWPORT_MARGIN,
    ) -> "Viewport":
        lower, upper = data.bounds()
        if data.vertex_count() == 0:
            lower, upper = (0.0, 0.0), (0.0, 0.0)
        return cls(width, height, lower, upper, margin)

    @property
    def scale(self) -> float:
        dx = self.upper[0] - self.lower[0]
        dy = self.upper[1] - self.lower[1]
        avail_w = max(self.width - 2 * self.margin, EPS)
        avail_h = max(self.height - 2 * self.margin, EPS)
        candidates = [avail_w / dx if dx > EPS else np.inf]
        candidates.append(avail_h / dy if dy > EPS else np.inf)
        s = min(candidates)
        return 1.0 if np.isinf(s) else float(s)

    @property
    def offset(self) -> tuple[float, float]:
        """Screen position of the model-space lower corner."""
        s = self.scale
        dx = (self.upper[0] - self.lower[0]) * s
        dy = (self.upper[1] - self.lower[1]) * s
        return (self.width - dx) / 2, (self.height - dy) / 2

    def to_model(self, x: float, y: float) -> tuple[float, float]:
        s = self.scale
        ox, oy = self.offset
        return (x - ox) / s + self.lower[0], (y - oy) / s + self.lower[1]

    def to_screen(self, x: float, y: float) -> tuple[float, float]:
        s = self.scale
        ox, oy = self.offset
        return (x - self.lower[0]) * s + ox, (y - self.lower[1]) * s + oy


class InteractionController:
    """
    Turns pointer events into puzzle state changes.

    Gestures:
    - drag from one vertex and release on another: connect the two,
    - click a vertex, then click another: connect the two,
    - click the same vertex twice: disconnect its non-permanent edges,
    - release away from any vertex, or leave the canvas: cancel the drag.
    """

    def __init__(
        self,
        data: PuzzleData,
        state: PuzzleState,
        viewport: Viewport,
        pick_radius: float = DEFAULT_PICK_RADIUS,
    ) -> None:
        self.data = data
        self.state = state
        self.viewport = viewport
        self.pick_radius = pick_radius
        self.pressed: int | None = None
        self.selected: int | None = None
        self.hovered: int | None = None
        self.pointer: Vec2d | None = None

    @property
    def threshold(self) -> float:
        """Pick radius in model units."""
        return self.pick_radius / self.viewport.scale

    def pick(self, x: float, y: float) -> int | None:
        point = self.viewport.to_model(x, y)
        return self.data.nearest_vertex(point, self.threshold)

    def process(self, queue: EventQueue) -> bool:
        """Handle every pending event. True if the puzzle state changed."""
        changed = False
        for event in queue.pending():
            changed |= self.handle(event)
        return changed

    def handle(self, event: PointerEvent) -> bool:
        logger.trace(f"Pointer event {event}")
        if event.kind is EventKind.leave:
            self.pressed = None
            self.hovered = None
            self.pointer = None
            return False

        self.pointer = self.viewport.to_model(event.x, event.y)
        vertex = self.pick(event.x, event.y)
        self.hovered = vertex

        if event.kind is EventKind.press:
            self.pressed = vertex
            if vertex is None:
                self.selected = None
            return False

        if event.kind is EventKind.move:
            return False

        if event.kind is EventKind.release:
            return self._release(vertex)

        raise RuntimeError(f"Unhandled event kind {event.kind}")

    def _release(self, vertex: int | None) -> bool:
        start, self.pressed = self.pressed, None
        if start is None:
            return False

        if vertex is None:
            logger.debug(f"Drag from vertex {start} cancelled")
            self.selected = None
            return False

        if vertex != start:
            self.selected = None
            return self._connect(start, vertex)

        # Click on a single vertex
        if self.selected is None:
            self.selected = vertex
            return False
        if self.selected == vertex:
            self.selected = None
            logger.debug(f"Clearing edges at vertex {vertex}")
            before = self.state.connected_edges
            self.state.disconnect_from_vertex(self.data, vertex)
            return self.state.connected_edges != before

        anchor, self.selected = self.selected, None
        return self._connect(anchor, vertex)

    def _connect(self, a: int, b: int) -> bool:
        edge = (a, b)
        if not self.data.is_valid_edge(edge):
            logger.warning(f"Ignoring invalid edge {edge}")
            return False
        if self.state.is_connected(edge):
            return False
        logger.debug(f"Drawing edge {edge}")
        self.state.connect_edge(self.data, edge)
        return True

    def pending_edge(self) -> tuple[int, Vec2d] | None:
        anchor = self.pressed if self.pressed is not None else self.selected
        if anchor is None or self.pointer is None:
            return None
        return anchor, self.pointer

    def dynamic_geometry(self) -> DynamicGeometry:
        highlighted = [
            v for v in (self.selected, self.pressed, self.hovered) if v is not None
        ]
        return get_dynamic_graphics_data(
            self.data,
            self.state,
            highlighted=sorted(set(highlighted)),
            pending=self.pending_edge(),
        )
