import numpy as np
from numpy.typing import NDArray
from shewchuk import orientation

from vertexpuzzle.utils import Vec2d, Triangle


def is_degenerate_triangle(triangle: Triangle) -> bool:
    """True if the three corners are collinear (exact predicate)."""
    a, b, c = triangle
    return (
        orientation(
            float(a[0]), float(a[1]), float(b[0]), float(b[1]), float(c[0]), float(c[1])
        )
        == 0
    )


def orient2d(pa: Vec2d, pb: Vec2d, pc: Vec2d) -> float:
    """
    Signed area test for three points.
    Returns > 0 if points are in counterclockwise order
    Returns < 0 if points are in clockwise order
    Returns = 0 if points are collinear
    """
    detleft = (pa[0] - pc[0]) * (pb[1] - pc[1])
    detright = (pa[1] - pc[1]) * (pb[0] - pc[0])
    return float(detleft - detright)


def ensure_ccw_triangle(vertices: NDArray, points: NDArray) -> NDArray:
    """Ensure triangle vertices are in counterclockwise order"""
    p0, p1, p2 = points[vertices]
    if orient2d(p0, p1, p2) < 0:
        return np.array([vertices[0], vertices[2], vertices[1]])
    return np.asarray(vertices)


def distances_to(points: NDArray[np.floating], point: Vec2d) -> NDArray[np.floating]:
    """Euclidean distance from every row of `points` to `point`."""
    diff = points - np.asarray(point, dtype=points.dtype)
    return np.hypot(diff[:, 0], diff[:, 1])
