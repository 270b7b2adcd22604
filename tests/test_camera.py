import math

import numpy as np
import pytest

from solarsim.camera import MOVEMENT_SPEED, FpsCam


def test_default_position_and_rotation():
    cam = FpsCam()
    assert np.allclose(cam.position, (0, -20, 0))
    assert np.allclose(cam.rotation, (0, 0))


def test_first_update_does_not_rotate():
    cam = FpsCam()
    cam.update(640.0, 480.0)
    assert np.allclose(cam.rotation, (0, 0))


def test_cursor_motion_rotates():
    cam = FpsCam()
    cam.update(0.0, 0.0)
    cam.update(100.0, 50.0)
    assert math.isclose(cam.rotation[1], 100.0 / 100.0)
    assert math.isclose(cam.rotation[0], 50.0 / 100.0)


def test_rotation_accumulates_relative_motion():
    cam = FpsCam()
    cam.update(10.0, 10.0)
    cam.update(30.0, 10.0)
    cam.update(30.0, 10.0)
    assert math.isclose(cam.rotation[1], 20.0 / 100.0)


@pytest.mark.parametrize(
    "key,expected",
    [
        ("a", (MOVEMENT_SPEED, 0.0)),
        ("d", (-MOVEMENT_SPEED, 0.0)),
        ("w", (0.0, MOVEMENT_SPEED)),
        ("s", (0.0, -MOVEMENT_SPEED)),
        ("W", (0.0, MOVEMENT_SPEED)),
    ],
)
def test_keys_move_in_xz_plane(key, expected):
    cam = FpsCam(position=(0.0, 0.0, 0.0))
    cam.update(0.0, 0.0, {key})
    assert np.allclose((cam.position[0], cam.position[2]), expected, atol=1e-9)
    assert cam.position[1] == 0.0


def test_opposite_keys_cancel():
    cam = FpsCam(position=(1.0, 2.0, 3.0))
    cam.update(0.0, 0.0, ["a", "d", "w", "s"])
    assert np.allclose(cam.position, (1.0, 2.0, 3.0))


def test_unknown_keys_are_ignored():
    cam = FpsCam()
    cam.update(0.0, 0.0, ["q", "space"])
    assert np.allclose(cam.position, (0, -20, 0))


def test_move_distance_matches_factor():
    cam = FpsCam(position=(0.0, 0.0, 0.0), rotation=(0.2, 1.3))
    cam.move(37.0, 2.5)
    assert math.isclose(math.hypot(cam.position[0], cam.position[2]), 2.5)


def test_matrix_without_rotation_is_translation():
    cam = FpsCam(position=(5.0, -20.0, 7.0))
    origin = cam.matrix() @ np.array([0, 0, 0, 1.0])
    assert np.allclose(origin[:3], (5.0, -20.0, 7.0))


def test_matrix_rotation_part_is_orthonormal():
    cam = FpsCam(rotation=(0.4, -1.1))
    block = cam.matrix()[:3, :3]
    assert np.allclose(block @ block.T, np.identity(3))