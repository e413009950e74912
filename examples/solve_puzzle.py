"""Load a puzzle file, draw its edges one by one and plot the progress."""

import sys
from pathlib import Path

from vertexpuzzle.debug_utils import plot_puzzle
from vertexpuzzle.mesh import load_mesh
from vertexpuzzle.state import PuzzleState


def main():
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(__file__).parent / "puzzles" / "hexagon.txt"
    mesh = load_mesh(path)
    state = PuzzleState.from_data(mesh)
    print(f"Loaded {path.name}: {mesh.vertex_count()} vertices, {mesh.triangle_count()} triangles")

    for i, edge in enumerate(mesh.mesh_edges()):
        state.connect_edge(mesh, edge)
        print(f"  {i + 1}. connected {edge}: {len(state.unlocked_triangles)} unlocked")
        if i == len(mesh.mesh_edges()) // 2:
            plot_puzzle(mesh, state, show=True, title="Half way", point_labels=True)

    print(f"\nFinished: {state.is_finished()}")
    plot_puzzle(mesh, state, show=True, title="Solved")


if __name__ == "__main__":
    main()
