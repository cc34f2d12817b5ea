"""A perspective fly camera driven by pitch and yaw, and its manager."""

from __future__ import annotations

import math
from typing import Any

import numpy as np

_WORLD_UP = np.array([0.0, 1.0, 0.0])


def _vec3(value: Any) -> np.ndarray:
    return np.asarray(value, dtype=float).reshape(3).copy()


def _normalize(v: np.ndarray) -> np.ndarray:
    return v / np.linalg.norm(v)


def _look_at(eye: np.ndarray, center: np.ndarray, up: np.ndarray) -> np.ndarray:
    f = _normalize(center - eye)
    s = _normalize(np.cross(f, up))
    u = np.cross(s, f)
    m = np.identity(4)
    m[0, :3] = s
    m[1, :3] = u
    m[2, :3] = -f
    m[0, 3] = -np.dot(s, eye)
    m[1, 3] = -np.dot(u, eye)
    m[2, 3] = np.dot(f, eye)
    return m


def _perspective(fov_radians: float, aspect: float, near: float, far: float) -> np.ndarray:
    tan_half = math.tan(fov_radians / 2.0)
    m = np.zeros((4, 4))
    m[0, 0] = 1.0 / (aspect * tan_half)
    m[1, 1] = 1.0 / tan_half
    m[2, 2] = -(far + near) / (far - near)
    m[3, 2] = -1.0
    m[2, 3] = -(2.0 * far * near) / (far - near)
    return m


class Camera:
    """Right-handed perspective camera with a Y-flipped projection.

    Built without a position it keeps identity matrices and a 16:9 aspect
    until the first update; built with one, its matrices are computed at once
    and the aspect ratio defaults to 19:6.
    """

    MIN_PITCH = -89.0
    MAX_PITCH = 89.0

    def __init__(
        self,
        position: Any = None,
        fov: float = 60.0,
        aspect: float | None = None,
        near: float = 0.1,
        far: float = 100.0,
    ) -> None:
        self._position = np.zeros(3) if position is None else _vec3(position)
        self._forward = np.array([0.0, 0.0, -1.0])
        self._right = np.array([1.0, 0.0, 0.0])
        self._up = np.array([0.0, 1.0, 0.0])
        self._fov = float(fov)
        if aspect is None:
            aspect = 16.0 / 9.0 if position is None else 19.0 / 6.0
        self._aspect_ratio = float(aspect)
        self._near = float(near)
        self._far = float(far)
        self._view_matrix = np.identity(4)
        self._projection_matrix = np.identity(4)
        self._pitch = 0.0
        self._yaw = -90.0
        self._is_dirty = False
        if position is not None:
            self._update_projection_matrix()
            self._update_view_matrix()

    # Read-only state

    @property
    def view_matrix(self) -> np.ndarray:
        return self._view_matrix

    @property
    def projection_matrix(self) -> np.ndarray:
        return self._projection_matrix

    @property
    def forward(self) -> np.ndarray:
        return self._forward

    @property
    def right(self) -> np.ndarray:
        return self._right

    @property
    def up(self) -> np.ndarray:
        return self._up

    @property
    def pitch(self) -> float:
        return self._pitch

    @property
    def yaw(self) -> float:
        return self._yaw

    @property
    def is_dirty(self) -> bool:
        return self._is_dirty

    # Settable state; each change is applied on the next update.

    @property
    def position(self) -> np.ndarray:
        return self._position

    @position.setter
    def position(self, value: Any) -> None:
        self._position = _vec3(value)
        self._is_dirty = True

    @property
    def fov(self) -> float:
        return self._fov

    @fov.setter
    def fov(self, value: float) -> None:
        self._fov = float(value)
        self._is_dirty = True

    @property
    def aspect_ratio(self) -> float:
        return self._aspect_ratio

    @aspect_ratio.setter
    def aspect_ratio(self, value: float) -> None:
        self._aspect_ratio = float(value)
        self._is_dirty = True

    @property
    def near(self) -> float:
        return self._near

    @near.setter
    def near(self, value: float) -> None:
        self._near = float(value)
        self._is_dirty = True

    @property
    def far(self) -> float:
        return self._far

    @far.setter
    def far(self, value: float) -> None:
        self._far = float(value)
        self._is_dirty = True

    # Behaviour

    def update(self) -> None:
        """Recompute the matrices if anything changed since the last update."""
        if not self._is_dirty:
            return
        self._update_view_matrix()
        self._update_projection_matrix()
        self._is_dirty = False

    def focus(self, position: Any) -> None:
        """Turn to look at ``position``."""
        self._forward = _normalize(_vec3(position) - self._position)
        self._pitch = math.degrees(math.asin(float(self._forward[1])))
        self._yaw = math.degrees(math.atan2(float(self._forward[2]), float(self._forward[0])))
        self._update_view_matrix()

    def translate(self, delta: Any) -> None:
        """Move relative to the view: x along right, y along up, z along forward."""
        d = _vec3(delta)
        self._position = self._position + self._forward * d[2] + self._right * d[0] + self._up * d[1]
        self._is_dirty = True

    def rotate_x(self, degrees: float) -> None:
        """Turn left or right (yaw)."""
        self._yaw += degrees
        self._is_dirty = True

    def rotate_y(self, degrees: float) -> None:
        """Look up or down (pitch), clamped short of straight up and down."""
        self._pitch = min(max(self._pitch + degrees, self.MIN_PITCH), self.MAX_PITCH)
        self._is_dirty = True

    def _update_view_matrix(self) -> None:
        self._update_direction_from_euler()
        self._view_matrix = _look_at(self._position, self._position + self._forward, _WORLD_UP)

    def _update_projection_matrix(self) -> None:
        m = _perspective(math.radians(self._fov), self._aspect_ratio, self._near, self._far)
        m[1, 1] *= -1.0
        self._projection_matrix = m

    def _update_direction_from_euler(self) -> None:
        pitch = math.radians(self._pitch)
        yaw = math.radians(self._yaw)
        self._forward = _normalize(
            np.array(
                [
                    math.cos(pitch) * math.cos(yaw),
                    math.sin(pitch),
                    math.cos(pitch) * math.sin(yaw),
                ]
            )
        )
        self._right = _normalize(np.cross(self._forward, _WORLD_UP))
        self._up = _normalize(np.cross(self._right, self._forward))


class CameraManager:
    """Holds the active camera and updates it every tick."""

    def __init__(self) -> None:
        self._camera = Camera()

    @property
    def active_camera(self) -> Camera:
        return self._camera

    def tick(self) -> None:
        """Apply pending camera changes."""
        self._camera.update()