"""Behaviours that can be attached to a game object."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

import numpy as np

if TYPE_CHECKING:
    from solarsim.gameobject import GameObject


class Component:
    """Base class of everything attached to a :class:`GameObject`."""

    def __init__(self) -> None:
        self.game_object: GameObject | None = None

    @property
    def owner(self) -> "GameObject":
        """The game object this component belongs to."""
        if self.game_object is None:
            raise RuntimeError(f"{type(self).__name__} is not attached to a game object")
        return self.game_object

    def update(self, delta_time: float) -> None:
        """Advance the component by ``delta_time`` seconds. Does nothing by default."""


class DrawComponent(Component, ABC):
    """A component able to render its owner."""

    @abstractmethod
    def draw(self, renderer: Any) -> None:
        """Emit the geometry of this component through ``renderer``."""


class DistanceRotateComponent(Component):
    """Moves its owner on a circle of ``distance`` around the origin in the XZ plane."""

    def __init__(self, distance: float, speed: float) -> None:
        super().__init__()
        self.distance = float(distance)
        self.speed = float(speed)
        self.time = 0.0

    def update(self, delta_time: float) -> None:
        owner = self.owner
        self.time += delta_time
        angle = self.time * self.speed
        owner.position[0] = math.sin(angle) * self.distance
        owner.position[2] = math.cos(angle) * self.distance


class LocalRotateComponent(Component):
    """Spins its owner by ``rotation_increment`` radians per second."""

    def __init__(self, rotation_increment) -> None:
        super().__init__()
        self.rotation_increment = np.asarray(rotation_increment, dtype=float).copy()

    def update(self, delta_time: float) -> None:
        owner = self.owner
        owner.rotation += delta_time * self.rotation_increment


class RelativeLock(Component):
    """Keeps its owner in front of a camera at a fixed height."""

    def __init__(self, distance: float, height: float, parent: Any) -> None:
        super().__init__()
        self.distance = float(distance)
        self.height = float(height)
        self.parent = parent

    def update(self, delta_time: float) -> None:
        owner = self.owner
        yaw = float(self.parent.rotation[1])
        owner.position[0] = -self.parent.position[0] + math.degrees(math.sin(yaw)) * self.distance
        owner.position[2] = -self.parent.position[2] - math.degrees(math.cos(yaw)) * self.distance
        owner.position[1] = self.height
        owner.rotation[1] = -yaw