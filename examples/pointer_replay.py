"""Drive a puzzle through simulated pointer events, as a canvas front end would."""

from pathlib import Path

from vertexpuzzle.events import EventKind, EventQueue, InteractionController, PointerEvent, Viewport
from vertexpuzzle.mesh import load_mesh
from vertexpuzzle.snapshot import get_static_graphics_data
from vertexpuzzle.state import PuzzleState

WIDTH, HEIGHT = 640, 480


def main():
    mesh = load_mesh(Path(__file__).parent / "puzzles" / "hexagon.txt")
    state = PuzzleState(mesh)
    viewport = Viewport.for_mesh(mesh, WIDTH, HEIGHT)
    controller = InteractionController(mesh, state, viewport)
    static = get_static_graphics_data(mesh)
    print(f"Static geometry: {len(static.triangle_positions)} triangle corners, {len(static.colors) // 3} colors")

    queue = EventQueue()
    for v0, v1 in mesh.mesh_edges():
        start = viewport.to_screen(*mesh.vertices[v0])
        end = viewport.to_screen(*mesh.vertices[v1])
        queue.push(PointerEvent(EventKind.press, *start))
        queue.push(PointerEvent(EventKind.move, (start[0] + end[0]) / 2, (start[1] + end[1]) / 2))
        queue.push(PointerEvent(EventKind.release, *end))

    controller.process(queue)
    dynamic = controller.dynamic_geometry()
    print(f"Connected edges: {len(dynamic.edge_segments)}")
    print(f"Unlocked triangles: {len(dynamic.unlocked_triangles)} / {mesh.triangle_count()}")
    print(f"Finished: {state.is_finished()}")


if __name__ == "__main__":
    main()
