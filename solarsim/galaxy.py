"""The solar system scene: an orbiting cube, the sun and the planets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable

from solarsim.components import DistanceRotateComponent, DrawComponent, LocalRotateComponent
from solarsim.cube import Cube
from solarsim.gameobject import GameObject
from solarsim.objmodel import GraphicModel


@dataclass(frozen=True)
class _Body:
    model: str
    scale: float
    distance: float
    speed: float


BODIES = (
    _Body("models/sun/sun.obj", 250.0, 0.0, 0.40),
    _Body("models/mercury/mercury.obj", 20.0, 570.0, 0.50),
    _Body("models/venus/venus.obj", 5.0, 650.0, 0.60),
    _Body("models/earth/earth.obj", 50.0, 750.0, 0.75),
    _Body("models/mars/mars.obj", 28.0, 850.0, 0.85),
    _Body("models/jupiter/jupiter.obj", 500.0, 1000.0, 1.0),
    _Body("models/saturn/saturnus.obj", 400.0, 1200.0, 1.3),
    _Body("models/uranus/uranus.obj", 200.0, 1300.0, 1.5),
    _Body("models/neptun/neptun.obj", 200.0, 1400.0, 2.0),
)


def _cube() -> GameObject:
    cube = GameObject()
    cube.add_component(Cube(10.0, (1.0, 0.5, 0.0, 1.0)))
    cube.add_component(DistanceRotateComponent(300.0, 1.0))
    cube.add_component(LocalRotateComponent((0.0, -5.0, 0.0)))
    return cube


def generate(
    game_objects: Iterable[GameObject] = (),
    model_factory: Callable[[str], DrawComponent] = GraphicModel,
) -> list[GameObject]:
    """Return ``game_objects`` followed by the cube, the sun and the planets.

    ``model_factory`` is called with the path of each body's model file.
    The given collection is not changed.
    """
    result = list(game_objects)
    result.append(_cube())
    for body in BODIES:
        planet = GameObject(scale=(body.scale, body.scale, body.scale))
        planet.add_component(model_factory(body.model))
        planet.add_component(DistanceRotateComponent(body.distance, body.speed))
        result.append(planet)
    return result