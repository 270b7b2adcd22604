"""4x4 homogeneous matrix helpers for column vectors (math convention)."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

Matrix = np.ndarray


def identity() -> Matrix:
    """Return a fresh 4x4 identity matrix."""
    return np.identity(4, dtype=float)


def _as_matrix(matrix) -> Matrix:
    result = np.asarray(matrix, dtype=float)
    if result.shape != (4, 4):
        raise ValueError(f"expected a 4x4 matrix, got shape {result.shape}")
    return result


def _as_vec3(values: Sequence[float], what: str) -> np.ndarray:
    result = np.asarray(values, dtype=float)
    if result.shape != (3,):
        raise ValueError(f"{what} must have three components, got shape {result.shape}")
    return result


def translate(matrix, offset) -> Matrix:
    """Return ``matrix`` post-multiplied by a translation by ``offset``."""
    translation = identity()
    translation[:3, 3] = _as_vec3(offset, "offset")
    return _as_matrix(matrix) @ translation


def rotate(matrix, angle: float, axis) -> Matrix:
    """Return ``matrix`` post-multiplied by a rotation of ``angle`` radians about ``axis``."""
    direction = _as_vec3(axis, "axis")
    length = float(np.linalg.norm(direction))
    if length == 0.0:
        raise ValueError("rotation axis must not be the zero vector")
    x, y, z = direction / length
    c = math.cos(angle)
    s = math.sin(angle)
    t = 1.0 - c
    rotation = identity()
    rotation[:3, :3] = [
        [c + x * x * t, x * y * t - z * s, x * z * t + y * s],
        [y * x * t + z * s, c + y * y * t, y * z * t - x * s],
        [z * x * t - y * s, z * y * t + x * s, c + z * z * t],
    ]
    return _as_matrix(matrix) @ rotation


def scale(matrix, factors) -> Matrix:
    """Return ``matrix`` post-multiplied by a scaling by ``factors``."""
    scaling = np.diag([*_as_vec3(factors, "factors"), 1.0])
    return _as_matrix(matrix) @ scaling


def perspective(fovy: float, aspect: float, near: float, far: float) -> Matrix:
    """Right-handed perspective projection mapping depth to [-1, 1]."""
    if aspect == 0:
        raise ValueError("aspect ratio must not be zero")
    if near == far:
        raise ValueError("near and far planes must differ")
    tan_half = math.tan(fovy / 2.0)
    if tan_half == 0:
        raise ValueError("field of view must not be zero")
    result = np.zeros((4, 4), dtype=float)
    result[0, 0] = 1.0 / (aspect * tan_half)
    result[1, 1] = 1.0 / tan_half
    result[2, 2] = -(far + near) / (far - near)
    result[2, 3] = -(2.0 * far * near) / (far - near)
    result[3, 2] = -1.0
    return result


def normal_matrix(model) -> np.ndarray:
    """Return the 3x3 inverse-transpose of the model matrix's upper-left block."""
    try:
        inverse = np.linalg.inv(_as_matrix(model))
    except np.linalg.LinAlgError as exc:
        raise ValueError("model matrix is singular") from exc
    return inverse.T[:3, :3].copy()