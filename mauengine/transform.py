"""Translation, rotation and scale of an object, with a cached model matrix."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np

from mauengine.rotator import Rotator


def _vec3(value: Any) -> np.ndarray:
    return np.asarray(value, dtype=float).reshape(3).copy()


@dataclass
class Transform:
    """Position, orientation and size of an entity.

    The model matrix is rebuilt lazily: changes mark the transform dirty and
    :meth:`update_matrix` recomputes ``mat`` only when needed.
    """

    translation: np.ndarray = field(default_factory=lambda: np.zeros(3))
    rotation: Rotator = field(default_factory=Rotator)
    scale: np.ndarray = field(default_factory=lambda: np.ones(3))
    mat: np.ndarray = field(default_factory=lambda: np.identity(4))
    is_dirty: bool = False

    def __post_init__(self) -> None:
        self.translation = _vec3(self.translation)
        self.scale = _vec3(self.scale)
        self.mat = np.asarray(self.mat, dtype=float).reshape(4, 4).copy()

    def translate(self, offset: Any) -> None:
        """Move by ``offset``."""
        self.translation = self.translation + _vec3(offset)
        self.is_dirty = True

    def reset_transformation(self) -> None:
        """Back to no translation, no rotation and unit scale."""
        self.translation = np.zeros(3)
        self.rotation = Rotator()
        self.scale = np.ones(3)
        self.is_dirty = True

    def rotate(self, rotator: Rotator) -> None:
        """Concatenate ``rotator`` onto the current rotation."""
        self.rotation = self.rotation * rotator
        self.is_dirty = True

    def apply_scale(self, factors: Any) -> None:
        """Multiply the current scale component-wise by ``factors``."""
        self.scale = self.scale * _vec3(factors)
        self.is_dirty = True

    def update_matrix(self) -> None:
        """Rebuild the model matrix (translation * rotation * scale) if dirty."""
        if not self.is_dirty:
            return
        translation = np.identity(4)
        translation[:3, 3] = self.translation
        scaling = np.diag([*self.scale, 1.0])
        self.mat = translation @ self.rotation.to_matrix() @ scaling
        self.is_dirty = False

    def get_matrix(self) -> np.ndarray:
        """The up-to-date model matrix."""
        self.update_matrix()
        return self.mat