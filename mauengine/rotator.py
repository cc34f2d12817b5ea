"""Quaternion rotation built from pitch, yaw and roll in degrees."""

from __future__ import annotations

import math
from typing import Any

import numpy as np


def _quat_mul(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    w1, x1, y1, z1 = a
    w2, x2, y2, z2 = b
    return np.array(
        [
            w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
            w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
            w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
            w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
        ]
    )


def _angle_axis(degrees: float, axis: tuple[float, float, float]) -> np.ndarray:
    half = math.radians(degrees) / 2.0
    s = math.sin(half)
    return np.array([math.cos(half), axis[0] * s, axis[1] * s, axis[2] * s])


class Rotator:
    """A rotation held as a quaternion ``[w, x, y, z]``."""

    __slots__ = ("rotation",)

    def __init__(self, pitch: float = 0.0, yaw: float = 0.0, roll: float = 0.0) -> None:
        pitch_q = _angle_axis(pitch, (1.0, 0.0, 0.0))
        yaw_q = _angle_axis(yaw, (0.0, 1.0, 0.0))
        roll_q = _angle_axis(roll, (0.0, 0.0, 1.0))
        q = _quat_mul(_quat_mul(roll_q, yaw_q), pitch_q)
        self.rotation: np.ndarray = q / np.linalg.norm(q)

    @classmethod
    def from_quat(cls, quat: Any) -> Rotator:
        """Wrap an existing ``[w, x, y, z]`` quaternion as-is."""
        obj = cls.__new__(cls)
        obj.rotation = np.array(quat, dtype=float).reshape(4)
        return obj

    def __imul__(self, other: Rotator) -> Rotator:
        self.rotation = _quat_mul(self.rotation, other.rotation)
        return self

    def __mul__(self, other: Any) -> Any:
        """Concatenate with another rotator, or rotate a 3-vector."""
        if isinstance(other, Rotator):
            return Rotator.from_quat(_quat_mul(self.rotation, other.rotation))
        return self.rotate_vector(other)

    def rotate_vector(self, vec: Any) -> np.ndarray:
        """Apply this rotation to a 3-vector."""
        v = np.asarray(vec, dtype=float).reshape(3)
        w = self.rotation[0]
        q = self.rotation[1:]
        uv = np.cross(q, v)
        uuv = np.cross(q, uv)
        return v + (uv * w + uuv) * 2.0

    def to_matrix(self) -> np.ndarray:
        """Homogeneous 4x4 rotation matrix acting on column vectors."""
        w, x, y, z = self.rotation
        m = np.identity(4)
        m[0, 0] = 1 - 2 * (y * y + z * z)
        m[0, 1] = 2 * (x * y - w * z)
        m[0, 2] = 2 * (x * z + w * y)
        m[1, 0] = 2 * (x * y + w * z)
        m[1, 1] = 1 - 2 * (x * x + z * z)
        m[1, 2] = 2 * (y * z - w * x)
        m[2, 0] = 2 * (x * z - w * y)
        m[2, 1] = 2 * (y * z + w * x)
        m[2, 2] = 1 - 2 * (x * x + y * y)
        return m

    def __repr__(self) -> str:
        w, x, y, z = self.rotation
        return f"Rotator(w={w:.6g}, x={x:.6g}, y={y:.6g}, z={z:.6g})"