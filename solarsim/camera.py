"""First-person camera driven by mouse movement and WASD keys."""

from __future__ import annotations

import math
from typing import Iterable

import numpy as np

from solarsim import transform

MOVEMENT_SPEED = 4.0

_KEY_ANGLES = (("a", 0.0), ("d", 180.0), ("w", 90.0), ("s", -90.0))


class FpsCam:
    """A free-flying camera; ``rotation`` holds pitch and yaw in radians."""

    def __init__(self, position=(0.0, -20.0, 0.0), rotation=(0.0, 0.0)) -> None:
        self.position = np.array(position, dtype=float)
        self.rotation = np.array(rotation, dtype=float)
        self._last_cursor: tuple[float, float] | None = None

    def matrix(self) -> np.ndarray:
        """Return the view matrix."""
        result = transform.rotate(transform.identity(), self.rotation[0], (1, 0, 0))
        result = transform.rotate(result, self.rotation[1], (0, 1, 0))
        return transform.translate(result, self.position)

    def move(self, angle: float, factor: float) -> None:
        """Move ``factor`` units in the XZ plane, ``angle`` degrees off the yaw."""
        heading = self.rotation[1] + math.radians(angle)
        self.position[0] += math.cos(heading) * factor
        self.position[2] += math.sin(heading) * factor

    def update(self, cursor_x: float, cursor_y: float, pressed_keys: Iterable[str] = ()) -> None:
        """Turn by cursor movement since the last call and move for pressed keys.

        ``pressed_keys`` holds key characters; only a, d, w and s have effect.
        """
        if self._last_cursor is None:
            self._last_cursor = (cursor_x, cursor_y)
        last_x, last_y = self._last_cursor
        self.rotation[0] -= (last_y - cursor_y) / 100.0
        self.rotation[1] -= (last_x - cursor_x) / 100.0
        self._last_cursor = (cursor_x, cursor_y)

        keys = {str(key).lower() for key in pressed_keys}
        for key, angle in _KEY_ANGLES:
            if key in keys:
                self.move(angle, MOVEMENT_SPEED)