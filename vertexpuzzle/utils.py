from typing import TypeAlias
from numpy.typing import NDArray
import numpy as np

EPS = 1e-6
DEFAULT_PICK_RADIUS = 12.0  # screen pixels
DEFAULT_VIEWPORT_MARGIN = 16.0  # screen pixels

Vec2d: TypeAlias = tuple[float, float] | NDArray[np.floating]
Triangle: TypeAlias = tuple[Vec2d, Vec2d, Vec2d] | NDArray[np.floating]
Edge: TypeAlias = tuple[int, int]


def canonical_edge(a: int, b: int) -> Edge:
    """Return the vertex pair with the lower index first."""
    a, b = int(a), int(b)
    return (a, b) if a <= b else (b, a)
