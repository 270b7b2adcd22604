import math

import numpy as np
import pytest

from solarsim import tigl, transform
from solarsim.app import Scene, build_scene, configure_shader
from solarsim.camera import FpsCam
from solarsim.components import DrawComponent, RelativeLock
from solarsim.cube import Cube
from solarsim.gameobject import GameObject


class FakeModel(DrawComponent):
    drawn: list = []

    def __init__(self, path):
        super().__init__()
        self.path = path

    def draw(self, renderer):
        FakeModel.drawn.append(self.path)


class RecordingBackend:
    def __init__(self):
        self.draws = []

    def upload(self, vertices):
        return list(vertices)

    def draw(self, handle, shape):
        self.draws.append((len(handle), shape))

    def release(self, handle):
        pass


@pytest.fixture
def renderer():
    return tigl.Renderer(tigl.Shader(), RecordingBackend())


@pytest.fixture(autouse=True)
def reset_drawn():
    FakeModel.drawn = []


def test_configure_shader_sets_fog_and_light():
    shader = tigl.Shader()
    configure_shader(shader)
    uniforms = shader.uniforms
    assert uniforms["useFog"] is True
    assert uniforms["fogType"] == tigl.FOG_LINEAR
    assert uniforms["fogLinNear"] == 1.0
    assert uniforms["fogLinFar"] == 10000.0
    assert uniforms["useLighting"] is True
    assert uniforms["lightCount"] == 1
    assert uniforms["lights[0].directional"] is False
    assert uniforms["lights[0].position"] == (0.0, 375.0, 0.0)
    assert uniforms["lights[0].specular"] == (0.0, 0.0, 0.0)
    assert uniforms["shinyness"] == 32.0


def test_build_scene_adds_ship_locked_to_camera():
    scene = build_scene(FakeModel)
    assert len(scene.game_objects) == 11
    ship = scene.game_objects[-1]
    assert ship.get_component(FakeModel).path == "models/ship/shipA_OBJ.obj"
    assert ship.get_component(RelativeLock).parent is scene.camera


def test_scene_update_moves_ship_with_camera():
    scene = build_scene(FakeModel)
    scene.update(0.1, 0.0, 0.0, ["w"])
    ship = scene.game_objects[-1]
    assert ship.position[1] == pytest.approx(1.5)
    assert ship.rotation[1] == pytest.approx(-scene.camera.rotation[1])
    assert ship.position[0] == pytest.approx(
        -scene.camera.position[0] + math.degrees(math.sin(scene.camera.rotation[1])) * 0.75
    )


def test_scene_update_advances_objects():
    scene = build_scene(FakeModel)
    scene.update(0.5, 0.0, 0.0)
    cube = scene.game_objects[0]
    assert math.hypot(cube.position[0], cube.position[2]) == pytest.approx(300.0)


def test_scene_draw_sets_matrices_and_draws_everything(renderer):
    scene = build_scene(FakeModel)
    scene.update(0.2, 3.0, 4.0)
    scene.draw(renderer, 1200, 800)
    shader = renderer.shader
    expected = transform.perspective(math.radians(100.0), 1200 / 800, 0.01, 10000.0)
    assert np.allclose(shader.projection_matrix, expected)
    assert np.allclose(shader.view_matrix, scene.camera.matrix())
    assert len(FakeModel.drawn) == 10
    assert renderer.backend.draws == [(24, tigl.QUADS)]


def test_scene_draw_skips_objects_without_draw_component(renderer):
    scene = Scene(camera=FpsCam(), game_objects=[GameObject()])
    scene.draw(renderer, 640, 480)
    assert renderer.backend.draws == []
    assert np.allclose(renderer.shader.model_matrix, transform.identity())


def test_scene_draw_rejects_empty_viewport(renderer):
    scene = Scene()
    with pytest.raises(ValueError):
        scene.draw(renderer, 100, 0)


def test_cube_is_first_object_in_scene(renderer):
    scene = build_scene(FakeModel)
    cube_object = scene.game_objects[0]
    cube = cube_object.draw_component
    assert isinstance(cube, Cube)
    cube.draw(renderer)
    assert renderer.backend.draws == [(24, tigl.QUADS)]
    scene.update(0.5, 0.0, 0.0)
    assert cube_object.rotation[1] == pytest.approx(-2.5)