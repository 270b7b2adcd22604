"""Wavefront OBJ models with MTL materials, drawn as textured triangles."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from solarsim.components import DrawComponent
from solarsim.texture import Texture
from solarsim.tigl import TRIANGLES, Vertex

logger = logging.getLogger(__name__)

_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_SPACES = re.compile(" {2,}")

_IGNORED_MATERIAL_KEYS = frozenset(
    {"kd", "ka", "ks", "illum", "map_bump", "map_ke", "map_ka", "map_d",
     "d", "ke", "ns", "ni", "td", "tf", "tr"}
)


def clean_line(line: str) -> str:
    """Turn tabs into spaces, collapse runs of spaces and trim the ends."""
    return _SPACES.sub(" ", line.replace("\t", " ")).strip(" ")


def _atof(text: str) -> float:
    match = _FLOAT_PREFIX.match(text)
    return float(match.group(1)) if match else 0.0


def _atoi(text: str) -> int:
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def _directory_of(file_name: str) -> str:
    dir_name = file_name
    if "/" in dir_name:
        dir_name = dir_name[: dir_name.rfind("/")]
    if "\\" in dir_name:
        dir_name = dir_name[: dir_name.rfind("\\")]
    return "" if dir_name == file_name else dir_name


def _join(dir_name: str, name: str) -> str:
    return f"{dir_name}/{name}" if dir_name else name


def _tokens(lines: Iterable[str]):
    """Yield line numbers and parameter lists of non-empty, non-comment lines."""
    for number, raw in enumerate(lines, 1):
        line = clean_line(raw.rstrip("\r\n"))
        if not line or line.startswith("#"):
            continue
        params = line.split(" ")
        params[0] = params[0].lower()
        yield number, params


@dataclass
class ObjVertex:
    """Zero-based indices of one face corner; absent attributes are ``None``."""

    position: int
    normal: int | None = None
    texcoord: int | None = None


@dataclass
class Face:
    """A triangle of a model."""

    vertices: list[ObjVertex] = field(default_factory=list)


@dataclass
class MaterialInfo:
    """A named material, possibly with a diffuse texture."""

    name: str
    texture: Any = None


@dataclass
class ObjGroup:
    """Faces sharing one material; ``material_index`` is -1 without a material."""

    name: str = ""
    material_index: int = -1
    faces: list[Face] = field(default_factory=list)


def _parse_corner(text: str) -> ObjVertex:
    parts = text.split("/")
    vertex = ObjVertex(position=_atoi(parts[0]) - 1)
    if len(parts) == 2:
        vertex.texcoord = _atoi(parts[1]) - 1
    elif len(parts) == 3:
        if parts[1]:
            vertex.texcoord = _atoi(parts[1]) - 1
        vertex.normal = _atoi(parts[2]) - 1
    return vertex


class GraphicModel(DrawComponent):
    """A model loaded from an OBJ file.

    ``texture_factory`` is called with the path of every diffuse texture map.
    """

    def __init__(self, file_name: str, texture_factory: Callable[[str], Any] = Texture) -> None:
        super().__init__()
        self.file_name = file_name
        self.vertices: list[tuple[float, float, float]] = []
        self.normals: list[tuple[float, float, float]] = []
        self.texcoords: list[tuple[float, float]] = []
        self.groups: list[ObjGroup] = []
        self.materials: list[MaterialInfo] = []
        self._texture_factory = texture_factory

        logger.info("Loading %s", file_name)
        dir_name = _directory_of(file_name)
        with open(file_name, encoding="utf-8", errors="replace") as handle:
            self._parse_model(handle, dir_name)

    def _parse_model(self, lines: Iterable[str], dir_name: str) -> None:
        current = ObjGroup()
        for number, params in _tokens(lines):
            keyword = params[0]
            try:
                if keyword == "v":
                    self.vertices.append(tuple(_atof(p) for p in params[1:4]))
                    _ = params[3]
                elif keyword == "vn":
                    _ = params[3]
                    self.normals.append(tuple(_atof(p) for p in params[1:4]))
                elif keyword == "vt":
                    _ = params[2]
                    self.texcoords.append(tuple(_atof(p) for p in params[1:3]))
                elif keyword == "f":
                    corners = params[1:]
                    for second, third in zip(corners[1:], corners[2:]):
                        current.faces.append(
                            Face([_parse_corner(c) for c in (corners[0], second, third)])
                        )
                elif keyword == "mtllib":
                    self.load_material_file(_join(dir_name, params[1]), dir_name)
                elif keyword == "usemtl":
                    name = params[1]
                    if current.faces:
                        self.groups.append(current)
                    index = next(
                        (i for i, material in enumerate(self.materials) if material.name == name),
                        -1,
                    )
                    current = ObjGroup(material_index=index)
                    if index == -1:
                        logger.warning("Could not find material name %s", name)
            except IndexError:
                if keyword == "v":
                    self.vertices.pop()
                raise ValueError(
                    f"{self.file_name}:{number}: malformed '{keyword}' line"
                ) from None
        self.groups.append(current)

    def load_material_file(self, file_name: str, dir_name: str) -> None:
        """Read the materials of an MTL file; a missing file is logged and skipped."""
        logger.info("Loading %s", file_name)
        try:
            handle = open(file_name, encoding="utf-8", errors="replace")
        except OSError:
            logger.warning("Could not open file %s", file_name)
            return

        current: MaterialInfo | None = None
        with handle:
            for number, params in _tokens(handle):
                keyword = params[0]
                if keyword == "newmtl":
                    if len(params) < 2:
                        raise ValueError(f"{file_name}:{number}: material without a name")
                    if current is not None:
                        self.materials.append(current)
                    current = MaterialInfo(params[1])
                elif keyword == "map_kd":
                    if len(params) < 2:
                        raise ValueError(f"{file_name}:{number}: texture map without a file")
                    if current is None:
                        raise ValueError(f"{file_name}:{number}: texture map before any material")
                    tex = params[1]
                    if not tex.startswith("/"):
                        tex = tex.rsplit("/", 1)[-1]
                    if not tex.startswith("\\"):
                        tex = tex.rsplit("\\", 1)[-1]
                    current.texture = self._texture_factory(_join(dir_name, tex))
                elif keyword not in _IGNORED_MATERIAL_KEYS:
                    logger.info("Didn't parse %s in material file", keyword)
        if current is not None:
            self.materials.append(current)

    def _material(self, group: ObjGroup) -> MaterialInfo | None:
        if 0 <= group.material_index < len(self.materials):
            return self.materials[group.material_index]
        return None

    def _position(self, vertex: ObjVertex) -> tuple[float, float, float]:
        if not 0 <= vertex.position < len(self.vertices):
            raise IndexError(f"vertex index {vertex.position + 1} out of range")
        return self.vertices[vertex.position]

    def _texcoord(self, vertex: ObjVertex) -> tuple[float, float]:
        if vertex.texcoord is None:
            return (0.0, 0.0)
        if not 0 <= vertex.texcoord < len(self.texcoords):
            raise IndexError(f"texture coordinate index {vertex.texcoord + 1} out of range")
        return self.texcoords[vertex.texcoord]

    def draw(self, renderer: Any) -> None:
        """Emit every face as textured triangles."""
        renderer.shader.enable_texture(True)
        renderer.begin(TRIANGLES)
        for group in self.groups:
            material = self._material(group)
            if material is not None and material.texture is not None:
                material.texture.bind()
            for face in group.faces:
                for vertex in face.vertices:
                    renderer.add_vertex(Vertex.pt(self._position(vertex), self._texcoord(vertex)))
        renderer.end()