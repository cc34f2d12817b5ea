import math

import numpy as np
import pytest

from mauengine.camera import Camera, CameraManager


def test_default_camera_keeps_identity_matrices():
    cam = Camera()
    assert cam.aspect_ratio == pytest.approx(16.0 / 9.0)
    assert np.allclose(cam.view_matrix, np.identity(4))
    assert np.allclose(cam.projection_matrix, np.identity(4))
    assert cam.yaw == -90.0


def test_positioned_camera_defaults():
    cam = Camera([1, 2, 3])
    assert cam.aspect_ratio == pytest.approx(19.0 / 6.0)
    assert np.allclose(cam.forward, [0, 0, -1])
    assert cam.is_dirty is False


def test_view_matrix_maps_eye_to_origin():
    cam = Camera([1, 2, 3])
    out = cam.view_matrix @ np.array([1.0, 2.0, 3.0, 1.0])
    assert np.allclose(out, [0, 0, 0, 1])


def test_view_matrix_looks_down_negative_z():
    cam = Camera([4, -1, 2])
    target = np.append(cam.position + cam.forward, 1.0)
    out = cam.view_matrix @ target
    assert np.allclose(out[:3], [0, 0, -1])


def test_projection_is_flipped_and_consistent():
    cam = Camera([0, 0, 0], fov=70.0, aspect=2.0)
    p = cam.projection_matrix
    assert p[1, 1] < 0
    assert p[0, 0] == pytest.approx(-p[1, 1] / 2.0)
    assert p[3, 2] == -1.0


def test_basis_is_orthonormal():
    cam = Camera([0, 0, 0])
    cam.rotate_x(37.0)
    cam.rotate_y(20.0)
    cam.update()
    for v in (cam.forward, cam.right, cam.up):
        assert np.linalg.norm(v) == pytest.approx(1.0)
    assert np.dot(cam.forward, cam.right) == pytest.approx(0.0, abs=1e-9)
    assert np.dot(cam.forward, cam.up) == pytest.approx(0.0, abs=1e-9)


def test_rotate_y_is_clamped():
    cam = Camera([0, 0, 0])
    cam.rotate_y(500.0)
    assert cam.pitch == Camera.MAX_PITCH
    cam.rotate_y(-1000.0)
    assert cam.pitch == Camera.MIN_PITCH


def test_rotate_x_accumulates_yaw():
    cam = Camera([0, 0, 0])
    start = cam.yaw
    cam.rotate_x(10.0)
    cam.rotate_x(5.0)
    assert cam.yaw == pytest.approx(start + 15.0)
    assert cam.is_dirty


def test_translate_moves_along_basis():
    cam = Camera([0, 0, 0])
    forward, right, up = cam.forward.copy(), cam.right.copy(), cam.up.copy()
    cam.translate([2, 3, 4])
    assert np.allclose(cam.position, right * 2 + up * 3 + forward * 4)
    assert cam.is_dirty


def test_update_clears_dirty_and_applies_changes():
    cam = Camera([0, 0, 0])
    old_projection = cam.projection_matrix.copy()
    cam.fov = 90.0
    assert cam.is_dirty
    cam.update()
    assert cam.is_dirty is False
    assert not np.allclose(cam.projection_matrix, old_projection)
    assert cam.projection_matrix[1, 1] == pytest.approx(-1.0 / math.tan(math.radians(45.0)))


def test_setters_mark_dirty():
    cam = Camera([0, 0, 0])
    cam.near = 0.5
    assert cam.is_dirty
    cam.update()
    cam.far = 50.0
    assert cam.is_dirty
    cam.update()
    cam.position = [1, 1, 1]
    assert cam.is_dirty
    assert np.allclose(cam.position, [1, 1, 1])


def test_focus_points_at_target():
    cam = Camera([0, 0, 0])
    cam.focus([3, 0, 0])
    assert np.allclose(cam.forward, [1, 0, 0])
    assert cam.yaw == pytest.approx(0.0)
    assert cam.pitch == pytest.approx(0.0)
    out = cam.view_matrix @ np.array([3.0, 0.0, 0.0, 1.0])
    assert np.allclose(out[:3], [0, 0, -3])


def test_manager_tick_updates_active_camera():
    manager = CameraManager()
    cam = manager.active_camera
    cam.position = [0, 0, 5]
    manager.tick()
    assert cam.is_dirty is False
    out = cam.view_matrix @ np.array([0.0, 0.0, 5.0, 1.0])
    assert np.allclose(out, [0, 0, 0, 1])