"""The interactive solar system viewer."""

from __future__ import annotations

import argparse
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from solarsim import tigl, transform
from solarsim.camera import FpsCam
from solarsim.components import DrawComponent, RelativeLock
from solarsim.galaxy import generate
from solarsim.gameobject import GameObject
from solarsim.objmodel import GraphicModel

WINDOW_WIDTH = 1200
WINDOW_HEIGHT = 800
WINDOW_TITLE = "Cool 3D graphics project!"
SHIP_MODEL = "models/ship/shipA_OBJ.obj"
FIELD_OF_VIEW = 100.0
NEAR_PLANE = 0.01
FAR_PLANE = 10000.0
CLEAR_COLOR = (0.3, 0.4, 0.6, 1.0)


@dataclass
class Scene:
    """A camera and the objects it looks at."""

    camera: FpsCam = field(default_factory=FpsCam)
    game_objects: list[GameObject] = field(default_factory=list)

    def update(
        self,
        delta_time: float,
        cursor_x: float,
        cursor_y: float,
        pressed_keys: Iterable[str] = (),
    ) -> None:
        """Move the camera, then advance every object by ``delta_time`` seconds."""
        self.camera.update(cursor_x, cursor_y, pressed_keys)
        for game_object in self.game_objects:
            game_object.update(delta_time)

    def draw(self, renderer: Any, width: int, height: int) -> None:
        """Draw every object into a viewport of ``width`` by ``height`` pixels."""
        if width <= 0 or height <= 0:
            raise ValueError(f"viewport size must be positive, got {width}x{height}")
        projection = transform.perspective(
            math.radians(FIELD_OF_VIEW), width / height, NEAR_PLANE, FAR_PLANE
        )
        shader = renderer.shader
        shader.set_projection_matrix(projection)
        shader.set_view_matrix(self.camera.matrix())
        shader.set_model_matrix(transform.identity())
        for game_object in self.game_objects:
            game_object.draw(renderer)


def configure_shader(shader: tigl.Shader) -> None:
    """Set up the fog and the single point light of the scene."""
    shader.enable_fog(True)
    shader.set_fog_linear(1, 10000)

    shader.enable_lighting(True)
    shader.set_light_count(1)
    shader.set_light_directional(0, False)
    shader.set_light_position(0, (0.0, 375.0, 0.0))
    shader.set_light_ambient(0, (0.1, 0.1, 0.15))
    shader.set_light_diffuse(0, (0.8, 0.8, 0.8))
    shader.set_light_specular(0, (0.0, 0.0, 0.0))
    shader.set_shinyness(32.0)


def build_scene(model_factory: Callable[[str], DrawComponent] = GraphicModel) -> Scene:
    """Create the camera, the solar system and the ship that follows the camera."""
    camera = FpsCam()
    game_objects = generate([], model_factory)
    spaceship = GameObject()
    spaceship.add_component(model_factory(SHIP_MODEL))
    spaceship.add_component(RelativeLock(0.75, 1.5, camera))
    game_objects.append(spaceship)
    return Scene(camera=camera, game_objects=game_objects)


def main(argv=None) -> int:
    """Open the window and run the viewer until it is closed."""
    parser = argparse.ArgumentParser(
        prog="solarsim",
        description="Fly around a small solar system with the mouse and the W, A, S and D keys.",
    )
    parser.parse_args(argv)

    import pyglet
    from pyglet import gl
    from pyglet.window import key

    window = pyglet.window.Window(WINDOW_WIDTH, WINDOW_HEIGHT, WINDOW_TITLE)
    window.set_exclusive_mouse(True)
    keys = key.KeyStateHandler()
    window.push_handlers(keys)

    gl.glEnable(gl.GL_DEPTH_TEST)
    renderer = tigl.init()
    configure_shader(renderer.shader)
    scene = build_scene()

    cursor = [0.0, 0.0]
    movement_keys = {"a": key.A, "d": key.D, "w": key.W, "s": key.S}

    @window.event
    def on_key_press(symbol, modifiers):
        if symbol == key.ESCAPE:
            window.close()
            return pyglet.event.EVENT_HANDLED
        return None

    @window.event
    def on_mouse_motion(x, y, dx, dy):
        # Cursor y grows downwards in the camera's convention.
        cursor[0] += dx
        cursor[1] -= dy

    @window.event
    def on_draw():
        gl.glClearColor(*CLEAR_COLOR)
        gl.glClear(gl.GL_COLOR_BUFFER_BIT | gl.GL_DEPTH_BUFFER_BIT)
        width, height = window.get_framebuffer_size()
        if width > 0 and height > 0:
            scene.draw(renderer, width, height)

    def tick(delta_time: float) -> None:
        pressed = [name for name, symbol in movement_keys.items() if keys[symbol]]
        scene.update(delta_time, cursor[0], cursor[1], pressed)

    pyglet.clock.schedule(tick)
    pyglet.app.run()
    return 0