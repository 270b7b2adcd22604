import numpy as np
import pytest

from solarsim import transform
from solarsim.tigl import (
    FOG_EXP,
    FOG_EXP2,
    FOG_LINEAR,
    QUADS,
    TRIANGLES,
    VBO,
    Renderer,
    Shader,
    Vertex,
    _quads_to_triangles,
)


class FakeProgram:
    def __init__(self, names):
        self.uniforms = {name: {} for name in names}
        self.values = {}
        self.used = 0

    def __setitem__(self, key, value):
        self.values[key] = value

    def use(self):
        self.used += 1


class FakeBackend:
    def __init__(self):
        self.uploads = []
        self.draws = []
        self.released = []

    def upload(self, vertices):
        self.uploads.append(list(vertices))
        return len(self.uploads) - 1

    def draw(self, handle, shape):
        self.draws.append((handle, shape))

    def release(self, handle):
        self.released.append(handle)


def make_renderer():
    backend = FakeBackend()
    return Renderer(Shader(), backend), backend


def test_vertex_p_defaults():
    v = Vertex.p((1, 2, 3))
    assert v.position == (1.0, 2.0, 3.0)
    assert v.normal == (0.0, 1.0, 0.0)
    assert v.color == (1.0, 1.0, 1.0, 1.0)
    assert v.texcoord == (0.0, 0.0)


def test_vertex_factories_place_arguments():
    pos, col, tex, nor = (1, 2, 3), (0.1, 0.2, 0.3, 0.4), (0.5, 0.6), (0, 0, 1)
    v = Vertex.pctn(pos, col, tex, nor)
    assert v.color == col
    assert v.texcoord == tex
    assert v.normal == (0.0, 0.0, 1.0)
    assert Vertex.ptc(pos, tex, col) == Vertex.pctn(pos, col, tex, (0, 1, 0))
    assert Vertex.pcn(pos, col, nor) == Vertex.pctn(pos, col, (0, 0), nor)
    assert Vertex.ptn(pos, tex, nor) == Vertex.pctn(pos, (1, 1, 1, 1), tex, nor)
    assert Vertex.pc(pos, col).color == col
    assert Vertex.pt(pos, tex).texcoord == tex
    assert Vertex.pn(pos, nor).normal == (0.0, 0.0, 1.0)


def test_vertex_equality_compares_all_fields():
    assert Vertex.p((1, 2, 3)) == Vertex.p((1.0, 2.0, 3.0))
    assert not Vertex.pc((1, 2, 3), (1, 0, 0, 1)) == Vertex.p((1, 2, 3))


def test_vertex_rejects_wrong_sizes():
    with pytest.raises(ValueError):
        Vertex.p((1, 2))
    with pytest.raises(ValueError):
        Vertex.pc((1, 2, 3), (1, 1, 1))


def test_shader_defaults():
    shader = Shader()
    assert shader.uniforms["fogLinFar"] == 100.0
    assert shader.uniforms["lightCount"] == 1
    assert shader.uniforms["useFog"] is False


def test_fog_modes():
    shader = Shader()
    shader.set_fog_linear(1, 10000)
    assert shader.uniforms["fogType"] == FOG_LINEAR
    assert shader.uniforms["fogLinNear"] == 1.0
    assert shader.uniforms["fogLinFar"] == 10000.0
    shader.set_fog_exp(0.5)
    assert shader.uniforms["fogType"] == FOG_EXP
    assert shader.uniforms["fogExpDensity"] == 0.5
    shader.set_fog_exp2(0.25)
    assert shader.uniforms["fogType"] == FOG_EXP2
    assert shader.uniforms["fogExpDensity"] == 0.25


def test_flags_and_parameters():
    shader = Shader()
    shader.enable_color(True)
    shader.enable_texture(True)
    shader.enable_lighting(True)
    shader.enable_alpha_test(True)
    shader.enable_color_mult(True)
    shader.set_color_mult((0.5, 0.5, 0.5, 1))
    shader.set_fog_color((0, 0, 0))
    shader.set_shinyness(32)
    shader.set_light_count(2)
    assert shader.uniforms["useColor"] is True
    assert shader.uniforms["useTexture"] is True
    assert shader.uniforms["useLighting"] is True
    assert shader.uniforms["useAlphaTest"] is True
    assert shader.uniforms["useColorMult"] is True
    assert shader.uniforms["colorMult"] == (0.5, 0.5, 0.5, 1.0)
    assert shader.uniforms["fogColor"] == (0.0, 0.0, 0.0)
    assert shader.uniforms["shinyness"] == 32.0
    assert shader.uniforms["lightCount"] == 2


def test_light_uniform_names():
    shader = Shader()
    shader.set_light_directional(0, False)
    shader.set_light_position(0, (0, 375, 0))
    shader.set_light_ambient(1, (0.1, 0.1, 0.15))
    shader.set_light_diffuse(2, (0.8, 0.8, 0.8))
    shader.set_light_specular(4, (0, 0, 0))
    assert shader.uniforms["lights[0].directional"] is False
    assert shader.uniforms["lights[0].position"] == (0.0, 375.0, 0.0)
    assert shader.uniforms["lights[1].ambient"] == (0.1, 0.1, 0.15)
    assert shader.uniforms["lights[2].diffuse"] == (0.8, 0.8, 0.8)
    assert shader.uniforms["lights[4].specular"] == (0.0, 0.0, 0.0)


@pytest.mark.parametrize("light", [-1, 5])
def test_light_out_of_range(light):
    with pytest.raises(IndexError):
        Shader().set_light_position(light, (0, 0, 0))


def test_view_matrix_sets_camera_position():
    offset = (1.0, 2.0, 3.0)
    shader = Shader()
    shader.set_view_matrix(transform.translate(transform.identity(), offset))
    assert np.allclose(shader.uniforms["cameraPosition"], -np.array(offset))


def test_singular_view_matrix_raises():
    with pytest.raises(ValueError):
        Shader().set_view_matrix(np.zeros((4, 4)))


def test_model_matrix_sets_normal_matrix_for_rotation():
    model = transform.rotate(transform.identity(), 0.7, (0, 1, 0))
    shader = Shader()
    shader.set_model_matrix(model)
    assert np.allclose(shader.uniforms["normalMatrix"], model[:3, :3])
    assert np.allclose(shader.model_matrix, model)


def test_projection_matrix_stored():
    proj = transform.perspective(1.0, 1.5, 0.01, 10000.0)
    shader = Shader()
    shader.set_projection_matrix(proj)
    assert np.allclose(shader.projection_matrix, proj)
    assert np.allclose(shader.uniforms["projectionMatrix"], proj)


def test_program_receives_known_uniforms_column_major():
    program = FakeProgram(["modelMatrix", "normalMatrix", "useFog"])
    shader = Shader(program)
    shader.set_model_matrix(transform.translate(transform.identity(), (1, 2, 3)))
    shader.enable_fog(True)
    shader.set_shinyness(8)
    assert program.values["modelMatrix"][12:15] == (1.0, 2.0, 3.0)
    assert program.values["useFog"] == 1
    assert "shinyness" not in program.values
    assert shader.uniforms["shinyness"] == 8.0


def test_use_calls_program():
    program = FakeProgram([])
    Shader(program).use()
    assert program.used == 1


def test_begin_end_draws_once():
    renderer, backend = make_renderer()
    verts = [Vertex.p((0, 0, 0)), Vertex.p((1, 0, 0)), Vertex.p((0, 1, 0))]
    renderer.begin(TRIANGLES)
    assert renderer.drawing
    for v in verts:
        renderer.add_vertex(v)
    renderer.end()
    assert not renderer.drawing
    assert backend.uploads == [verts]
    assert backend.draws == [(0, TRIANGLES)]
    assert backend.released == [0]


def test_begin_twice_raises():
    renderer, _ = make_renderer()
    renderer.begin(TRIANGLES)
    with pytest.raises(RuntimeError):
        renderer.begin(TRIANGLES)


def test_end_without_begin_raises():
    renderer, _ = make_renderer()
    with pytest.raises(RuntimeError):
        renderer.end()


def test_begin_clears_previous_vertices():
    renderer, backend = make_renderer()
    renderer.begin(TRIANGLES)
    renderer.add_vertex(Vertex.p((0, 0, 0)))
    renderer.end()
    renderer.begin(TRIANGLES)
    renderer.add_vertex(Vertex.p((5, 5, 5)))
    renderer.end()
    assert backend.uploads[1] == [Vertex.p((5, 5, 5))]


def test_empty_draw_does_nothing():
    renderer, backend = make_renderer()
    renderer.draw_vertices(QUADS, [])
    renderer.begin(QUADS)
    renderer.end()
    assert backend.uploads == []
    assert backend.draws == []


def test_vbo_draws_without_reupload():
    renderer, backend = make_renderer()
    verts = [Vertex.p((i, 0, 0)) for i in range(4)]
    vbo = renderer.create_vbo(verts)
    assert vbo.size == 4
    renderer.draw_vbo(QUADS, vbo)
    renderer.draw_vbo(QUADS, vbo)
    assert len(backend.uploads) == 1
    assert backend.draws == [(vbo.handle, QUADS), (vbo.handle, QUADS)]
    assert backend.released == []


def test_empty_vbo_not_drawn():
    renderer, backend = make_renderer()
    vbo = renderer.create_vbo([])
    renderer.draw_vbo(TRIANGLES, vbo)
    assert vbo == VBO(handle=0, size=0)
    assert backend.draws == []


def test_quads_to_triangles():
    a, b, c, d, e = (Vertex.p((i, 0, 0)) for i in range(5))
    assert list(_quads_to_triangles([a, b, c, d, e])) == [a, b, c, a, c, d]