"""Minimal immediate-mode rendering layer: vertices, a fixed shader and a renderer."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Protocol, Sequence

import numpy as np

from solarsim import transform

# Primitive kinds, with the values OpenGL uses for them.
POINTS = 0
LINES = 1
LINE_LOOP = 2
LINE_STRIP = 3
TRIANGLES = 4
TRIANGLE_STRIP = 5
TRIANGLE_FAN = 6
QUADS = 7

MAX_LIGHTS = 5

FOG_LINEAR = 0
FOG_EXP = 1
FOG_EXP2 = 2

VERTEX_SHADER = """#version 330 core
layout (location = 0) in vec3 a_position;
layout (location = 1) in vec4 a_color;
layout (location = 2) in vec2 a_texcoord;
layout (location = 3) in vec3 a_normal;

uniform mat4 modelMatrix = mat4(1.0);
uniform mat4 viewMatrix = mat4(1.0);
uniform mat4 projectionMatrix = mat4(1.0);
uniform mat3 normalMatrix = mat3(1.0);

out vec4 color;
out vec2 texCoord;
out vec3 normal;
out vec3 position;

void main()
{
    vec4 world = modelMatrix * vec4(a_position, 1.0);
    color = a_color;
    texCoord = a_texcoord;
    normal = normalMatrix * a_normal;
    position = world.xyz;
    gl_Position = projectionMatrix * viewMatrix * world;
}
"""

FRAGMENT_SHADER = """#version 330 core
layout (location = 0) out vec4 fragColor;

struct Light
{
    bool directional;
    vec3 position;
    vec3 diffuse;
    vec3 ambient;
    vec3 specular;
};

uniform sampler2D s_texture;

uniform bool useColor = false;
uniform bool useColorMult = false;
uniform bool useTexture = false;
uniform bool useLighting = false;
uniform bool useAlphaTest = false;
uniform bool useFog = false;

uniform vec4 colorMult = vec4(1.0);
uniform vec3 fogColor = vec3(1.0);
uniform vec3 cameraPosition;
uniform int fogType = 0;
uniform float fogLinNear = 0.0;
uniform float fogLinFar = 100.0;
uniform float fogExpDensity = 0.0;
uniform float shinyness = 0.0;
uniform Light lights[5];
uniform int lightCount = 1;

in vec4 color;
in vec2 texCoord;
in vec3 normal;
in vec3 position;

float fogAmount(float dist)
{
    if (fogType == 0)
        return 1.0 - clamp((fogLinFar - dist) / (fogLinFar - fogLinNear), 0.0, 1.0);
    if (fogType == 1)
        return 1.0 - clamp(exp(-fogExpDensity * dist), 0.0, 1.0);
    float d = fogExpDensity * dist;
    return 1.0 - clamp(exp2(-1.442695 * d * d), 0.0, 1.0);
}

vec3 shade(vec3 base)
{
    vec3 n = normalize(normal);
    vec3 toCamera = normalize(cameraPosition - position);
    vec3 total = vec3(0.0);
    for (int i = 0; i < lightCount; i++) {
        vec3 dir = lights[i].directional
            ? normalize(lights[i].position)
            : normalize(lights[i].position - position);
        float diffuse = max(0.0, dot(dir, n));
        float specular = pow(max(dot(toCamera, reflect(-dir, n)), 0.0), shinyness);
        total += lights[i].ambient + diffuse * lights[i].diffuse + specular * lights[i].specular;
    }
    return total * base;
}

void main()
{
    vec4 result = vec4(1.0);
    if (useColor)
        result *= color;
    if (useColorMult)
        result *= colorMult;
    if (useTexture)
        result *= texture(s_texture, texCoord);
    if (useLighting)
        result.rgb = shade(result.rgb);
    if (useFog && fogType >= 0 && fogType <= 2)
        result.rgb = mix(result.rgb, fogColor, fogAmount(gl_FragCoord.z / gl_FragCoord.w));
    if (useAlphaTest && result.a < 0.01)
        discard;
    fragColor = result;
}
"""


def _vec(values: Iterable[float], size: int, what: str) -> tuple[float, ...]:
    result = tuple(float(v) for v in values)
    if len(result) != size:
        raise ValueError(f"{what} must have {size} components, got {len(result)}")
    return result


_UP = (0.0, 1.0, 0.0)
_WHITE = (1.0, 1.0, 1.0, 1.0)
_ORIGIN2 = (0.0, 0.0)


@dataclass(frozen=True)
class Vertex:
    """A vertex with position, normal, RGBA color and texture coordinate."""

    position: tuple[float, float, float]
    normal: tuple[float, float, float] = _UP
    color: tuple[float, float, float, float] = _WHITE
    texcoord: tuple[float, float] = _ORIGIN2

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", _vec(self.position, 3, "position"))
        object.__setattr__(self, "normal", _vec(self.normal, 3, "normal"))
        object.__setattr__(self, "color", _vec(self.color, 4, "color"))
        object.__setattr__(self, "texcoord", _vec(self.texcoord, 2, "texcoord"))

    @classmethod
    def p(cls, position) -> "Vertex":
        """Vertex with a position only."""
        return cls(position)

    @classmethod
    def pc(cls, position, color) -> "Vertex":
        """Vertex with a position and a color."""
        return cls(position, color=color)

    @classmethod
    def pt(cls, position, texcoord) -> "Vertex":
        """Vertex with a position and a texture coordinate."""
        return cls(position, texcoord=texcoord)

    @classmethod
    def pn(cls, position, normal) -> "Vertex":
        """Vertex with a position and a normal."""
        return cls(position, normal=normal)

    @classmethod
    def ptc(cls, position, texcoord, color) -> "Vertex":
        """Vertex with a position, a texture coordinate and a color."""
        return cls(position, color=color, texcoord=texcoord)

    @classmethod
    def pcn(cls, position, color, normal) -> "Vertex":
        """Vertex with a position, a color and a normal."""
        return cls(position, normal=normal, color=color)

    @classmethod
    def ptn(cls, position, texcoord, normal) -> "Vertex":
        """Vertex with a position, a texture coordinate and a normal."""
        return cls(position, normal=normal, texcoord=texcoord)

    @classmethod
    def pctn(cls, position, color, texcoord, normal) -> "Vertex":
        """Vertex with every attribute given."""
        return cls(position, normal=normal, color=color, texcoord=texcoord)


_DEFAULT_UNIFORMS: dict[str, Any] = {
    "useColor": False,
    "useColorMult": False,
    "useTexture": False,
    "useLighting": False,
    "useAlphaTest": False,
    "useFog": False,
    "colorMult": (1.0, 1.0, 1.0, 1.0),
    "fogColor": (1.0, 1.0, 1.0),
    "fogType": FOG_LINEAR,
    "fogLinNear": 0.0,
    "fogLinFar": 100.0,
    "fogExpDensity": 0.0,
    "shinyness": 0.0,
    "lightCount": 1,
}


def _gl_value(value: Any) -> Any:
    if isinstance(value, np.ndarray):
        # OpenGL reads matrices column by column.
        return tuple(float(v) for v in value.T.ravel())
    if isinstance(value, bool):
        return int(value)
    return value


class Shader:
    """Holds the state of the fixed shader and forwards it to a GPU program, if any.

    ``program`` is any object with a ``uniforms`` mapping of known names,
    item assignment of uniform values and a ``use()`` method.
    """

    def __init__(self, program: Any = None) -> None:
        self._program = program
        self._known = frozenset(program.uniforms) if program is not None else frozenset()
        self._uniforms: dict[str, Any] = dict(_DEFAULT_UNIFORMS)
        self.projection_matrix = transform.identity()
        self.view_matrix = transform.identity()
        self.model_matrix = transform.identity()

    @property
    def uniforms(self) -> Mapping[str, Any]:
        """The current value of every uniform set so far, by name."""
        return MappingProxyType(self._uniforms)

    def _set(self, name: str, value: Any) -> None:
        self._uniforms[name] = value
        if self._program is not None and name in self._known:
            self._program[name] = _gl_value(value)

    @staticmethod
    def _light_name(light: int, attribute: str) -> str:
        index = int(light)
        if not 0 <= index < MAX_LIGHTS:
            raise IndexError(f"light number {light} out of range 0..{MAX_LIGHTS - 1}")
        return f"lights[{index}].{attribute}"

    def use(self) -> None:
        """Make the program current."""
        if self._program is not None:
            self._program.use()

    def set_projection_matrix(self, matrix) -> None:
        """Set the projection matrix."""
        self.projection_matrix = np.array(matrix, dtype=float)
        self._set("projectionMatrix", self.projection_matrix.copy())

    def set_view_matrix(self, matrix) -> None:
        """Set the camera matrix and the camera position derived from it."""
        self.view_matrix = np.array(matrix, dtype=float)
        self._set("viewMatrix", self.view_matrix.copy())
        try:
            eye = np.linalg.inv(self.view_matrix) @ np.array([0.0, 0.0, 0.0, 1.0])
        except np.linalg.LinAlgError as exc:
            raise ValueError("view matrix is singular") from exc
        self._set("cameraPosition", tuple(float(v) for v in eye[:3]))

    def set_model_matrix(self, matrix) -> None:
        """Set the model matrix and the normal matrix derived from it."""
        self.model_matrix = np.array(matrix, dtype=float)
        self._set("modelMatrix", self.model_matrix.copy())
        self._set("normalMatrix", transform.normal_matrix(self.model_matrix))

    def enable_color(self, enabled: bool) -> None:
        """Use the vertex colors."""
        self._set("useColor", bool(enabled))

    def enable_texture(self, enabled: bool) -> None:
        """Use the bound texture sampled at the vertex texture coordinates."""
        self._set("useTexture", bool(enabled))

    def enable_lighting(self, enabled: bool) -> None:
        """Turn lighting on or off."""
        self._set("useLighting", bool(enabled))

    def set_light_count(self, count: int) -> None:
        """Set how many lights take part in lighting."""
        self._set("lightCount", int(count))

    def set_light_directional(self, light: int, directional: bool) -> None:
        """Treat the light's position as a direction when ``directional`` is true."""
        self._set(self._light_name(light, "directional"), bool(directional))

    def set_light_position(self, light: int, position) -> None:
        """Set the light's position, or direction for a directional light."""
        self._set(self._light_name(light, "position"), _vec(position, 3, "position"))

    def set_light_ambient(self, light: int, color) -> None:
        """Set the light's ambient color."""
        self._set(self._light_name(light, "ambient"), _vec(color, 3, "color"))

    def set_light_diffuse(self, light: int, color) -> None:
        """Set the light's diffuse color."""
        self._set(self._light_name(light, "diffuse"), _vec(color, 3, "color"))

    def set_light_specular(self, light: int, color) -> None:
        """Set the light's specular color."""
        self._set(self._light_name(light, "specular"), _vec(color, 3, "color"))

    def set_shinyness(self, shinyness: float) -> None:
        """Set the specular exponent of the drawn material."""
        self._set("shinyness", float(shinyness))

    def enable_color_mult(self, enabled: bool) -> None:
        """Multiply every output color by the color-multiply color."""
        self._set("useColorMult", bool(enabled))

    def set_color_mult(self, color) -> None:
        """Set the color used by color multiplication."""
        self._set("colorMult", _vec(color, 4, "color"))

    def enable_alpha_test(self, enabled: bool) -> None:
        """Discard fragments that are nearly transparent."""
        self._set("useAlphaTest", bool(enabled))

    def enable_fog(self, enabled: bool) -> None:
        """Turn fog on or off."""
        self._set("useFog", bool(enabled))

    def set_fog_linear(self, begin: float, end: float) -> None:
        """Use linear fog between distances ``begin`` and ``end``."""
        self._set("fogType", FOG_LINEAR)
        self._set("fogLinNear", float(begin))
        self._set("fogLinFar", float(end))

    def set_fog_exp(self, density: float) -> None:
        """Use exponential fog."""
        self._set("fogType", FOG_EXP)
        self._set("fogExpDensity", float(density))

    def set_fog_exp2(self, density: float) -> None:
        """Use squared exponential fog."""
        self._set("fogType", FOG_EXP2)
        self._set("fogExpDensity", float(density))

    def set_fog_color(self, color) -> None:
        """Set the fog color."""
        self._set("fogColor", _vec(color, 3, "color"))


class Backend(Protocol):
    """What a renderer needs from the graphics device."""

    def upload(self, vertices: Sequence[Vertex]) -> Any: ...

    def draw(self, handle: Any, shape: int) -> None: ...

    def release(self, handle: Any) -> None: ...


@dataclass(frozen=True)
class VBO:
    """Vertices kept on the graphics device for repeated drawing."""

    handle: Any
    size: int


class Renderer:
    """Collects vertices between ``begin`` and ``end`` and draws them."""

    def __init__(self, shader: Shader, backend: Backend) -> None:
        self.shader = shader
        self.backend = backend
        self._shape: int | None = None
        self._pending: list[Vertex] = []

    @property
    def drawing(self) -> bool:
        """Whether a ``begin`` is waiting for its ``end``."""
        return self._shape is not None

    def begin(self, shape: int) -> None:
        """Start a set of primitives of kind ``shape``."""
        if self._shape is not None:
            raise RuntimeError("begin() called before the previous set was ended")
        self._shape = shape
        self._pending = []

    def add_vertex(self, vertex: Vertex) -> None:
        """Add one vertex to the current set."""
        self._pending.append(vertex)

    def end(self) -> None:
        """Draw the vertices added since ``begin``."""
        if self._shape is None:
            raise RuntimeError("end() called without begin()")
        shape, self._shape = self._shape, None
        self.draw_vertices(shape, self._pending)

    def draw_vertices(self, shape: int, vertices: Iterable[Vertex]) -> None:
        """Draw ``vertices`` as primitives of kind ``shape``."""
        batch = list(vertices)
        if not batch:
            return
        handle = self.backend.upload(batch)
        try:
            self.backend.draw(handle, shape)
        finally:
            self.backend.release(handle)

    def create_vbo(self, vertices: Iterable[Vertex]) -> VBO:
        """Upload ``vertices`` once for later drawing with :meth:`draw_vbo`."""
        batch = list(vertices)
        return VBO(handle=self.backend.upload(batch), size=len(batch))

    def draw_vbo(self, shape: int, vbo: VBO) -> None:
        """Draw the vertices held by ``vbo``."""
        if vbo.size > 0:
            self.backend.draw(vbo.handle, shape)


def _quads_to_triangles(vertices: Sequence[Vertex]) -> Iterator[Vertex]:
    """Split each run of four vertices into two triangles; a trailing partial quad is dropped."""
    corners = iter(vertices)
    for a, b, c, d in zip(corners, corners, corners, corners):
        yield from (a, b, c, a, c, d)


@dataclass
class _GLBuffer:
    vertices: tuple[Vertex, ...]
    lists: dict[int, Any] = field(default_factory=dict)


class _GLBackend:
    """Draws through a pyglet shader program; needs a current OpenGL context."""

    def __init__(self, program: Any) -> None:
        self._program = program

    def upload(self, vertices: Sequence[Vertex]) -> _GLBuffer:
        return _GLBuffer(tuple(vertices))

    def _build(self, vertices: Sequence[Vertex], shape: int) -> tuple[Any, int]:
        from pyglet import gl

        if shape == QUADS:
            ordered = list(_quads_to_triangles(vertices))
            mode = gl.GL_TRIANGLES
        else:
            ordered = list(vertices)
            mode = shape
        vertex_list = self._program.vertex_list(
            len(ordered),
            mode,
            a_position=("f", [c for v in ordered for c in v.position]),
            a_color=("f", [c for v in ordered for c in v.color]),
            a_texcoord=("f", [c for v in ordered for c in v.texcoord]),
            a_normal=("f", [c for v in ordered for c in v.normal]),
        )
        return vertex_list, mode

    def draw(self, handle: _GLBuffer, shape: int) -> None:
        if shape not in handle.lists:
            handle.lists[shape] = self._build(handle.vertices, shape)
        vertex_list, mode = handle.lists[shape]
        vertex_list.draw(mode)

    def release(self, handle: _GLBuffer) -> None:
        for vertex_list, _ in handle.lists.values():
            vertex_list.delete()
        handle.lists.clear()


def init() -> Renderer:
    """Compile the shader in the current OpenGL context and return a renderer using it."""
    from pyglet.graphics.shader import Shader as ShaderStage
    from pyglet.graphics.shader import ShaderProgram

    program = ShaderProgram(
        ShaderStage(VERTEX_SHADER, "vertex"),
        ShaderStage(FRAGMENT_SHADER, "fragment"),
    )
    shader = Shader(program)
    shader.use()
    return Renderer(shader, _GLBackend(program))