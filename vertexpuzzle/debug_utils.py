import typing

import numpy as np
from numpy.typing import NDArray

from vertexpuzzle.mesh import PuzzleData

if typing.TYPE_CHECKING:
    from vertexpuzzle.state import PuzzleState

MISSING_COLOR = (0.5, 0.5, 0.5)


def _triangle_color(data: PuzzleData, triangle_id: int) -> tuple[float, float, float]:
    color_idx = int(data.triangle_colors[triangle_id])
    # Triangles may point one past the color table.
    if color_idx >= data.color_count():
        return MISSING_COLOR
    r, g, b = data.colors[color_idx]
    return float(r), float(g), float(b)


def plot_puzzle(
    data: PuzzleData,
    state: typing.Optional["PuzzleState"] = None,
    show: bool = False,
    title: str = "Puzzle",
    point_labels: bool = False,
    fontsize: int = 7,
) -> NDArray[np.uint8]:
    """
    Plot the puzzle using matplotlib.

    Unlocked triangles are filled with their color, locked ones are outlined.
    Connected edges are drawn on top, permanent ones thicker.

    :param data: The mesh
    :param state: Puzzle progress; if None nothing is unlocked or connected
    :param show: Whether to call plt.show() after plotting
    :param title: Title of the plot
    :param point_labels: Whether to label vertices with their indices
    :param fontsize: Font size for labels
    :return: The rendered figure as an RGB image of shape (H, W, 3)
    """
    import matplotlib.pyplot as plt
    from matplotlib.patches import Polygon

    fig, ax = plt.subplots()
    points = data.vertices
    unlocked = state.unlocked_triangles if state is not None else frozenset()

    for tri_idx, tri in enumerate(data.triangles):
        pts = points[tri]
        if tri_idx in unlocked:
            poly = Polygon(
                pts,
                facecolor=_triangle_color(data, tri_idx),
                edgecolor="none",
                zorder=1,
            )
        else:
            poly = Polygon(
                pts,
                fill=False,
                edgecolor="lightgray",
                linewidth=0.5,
                linestyle="--",
                zorder=1,
            )
        ax.add_patch(poly)

    if state is not None:
        for v0, v1 in sorted(state.connected_edges):
            p0, p1 = points[v0], points[v1]
            permanent = state.is_permanent_edge((v0, v1))
            ax.plot(
                [p0[0], p1[0]],
                [p0[1], p1[1]],
                "k-",
                linewidth=2.0 if permanent else 1.0,
                zorder=2,
            )

    if len(points):
        permanent_vertices = state.permanent_vertices if state is not None else ()
        colors = [
            "darkgreen" if v in permanent_vertices else "black"
            for v in range(len(points))
        ]
        ax.scatter(points[:, 0], points[:, 1], c=colors, s=9, zorder=3)

    if point_labels:
        offset = 0.01
        for idx, (x, y) in enumerate(points):
            ax.text(
                x + offset,
                y + offset,
                str(idx),
                fontsize=fontsize,
                ha="left",
                va="bottom",
                color="purple",
            )

    ax.set_aspect("equal")
    # Mesh files use screen orientation (y grows downwards)
    ax.invert_yaxis()
    ax.set_title(title)

    if show:
        plt.show()

    fig.canvas.draw()
    buf = fig.canvas.buffer_rgba()  # type: ignore[reportAttributeAccessIssue]
    img = np.asarray(buf)[:, :, :3].copy()
    plt.close(fig)
    return img
