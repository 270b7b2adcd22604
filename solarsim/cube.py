"""A solid-colored cube."""

from __future__ import annotations

from typing import Any

from solarsim.components import DrawComponent
from solarsim.tigl import QUADS, Vertex

_FACES = (
    # front
    ((-1, -1, 1), (1, -1, 1), (1, 1, 1), (-1, 1, 1)),
    # right
    ((1, -1, 1), (1, -1, -1), (1, 1, -1), (1, 1, 1)),
    # top
    ((-1, 1, 1), (1, 1, 1), (1, 1, -1), (-1, 1, -1)),
    # rear
    ((-1, -1, -1), (1, -1, -1), (1, 1, -1), (-1, 1, -1)),
    # left
    ((-1, -1, 1), (-1, -1, -1), (-1, 1, -1), (-1, 1, 1)),
    # bottom
    ((-1, -1, -1), (1, -1, 1), (1, -1, -1), (-1, -1, -1)),
)


class Cube(DrawComponent):
    """Draws a cube of half-size ``radius`` in a single color."""

    def __init__(self, radius: float, color) -> None:
        super().__init__()
        self.radius = float(radius)
        self.color = tuple(float(c) for c in color)
        self.vertices: tuple[Vertex, ...] = tuple(
            Vertex.pc(tuple(sign * self.radius for sign in corner), self.color)
            for face in _FACES
            for corner in face
        )

    def draw(self, renderer: Any) -> None:
        """Emit the cube as colored quads."""
        renderer.begin(QUADS)
        renderer.shader.enable_texture(False)
        renderer.shader.enable_color(True)
        renderer.draw_vertices(QUADS, self.vertices)
        renderer.end()