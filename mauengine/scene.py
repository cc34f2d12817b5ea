"""Scenes that own an entity world and a camera, and the manager that runs one."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from mauengine.camera import CameraManager
from mauengine.entity import Entity
from mauengine.transform import Transform
from mauengine.world import ECSWorld


class Renderer(Protocol):
    """What a scene needs from a renderer."""

    def load_or_get_mesh_id(self, path: str) -> int: ...

    def queue_draw(self, matrix: Any, mesh: StaticMesh) -> None: ...

    def render(self, view_matrix: Any, projection_matrix: Any) -> None: ...


@dataclass
class StaticMesh:
    """Component referring to a mesh loaded by the renderer.

    ``mesh_id`` is ``None`` until a mesh has been assigned.
    """

    mesh_id: int | None = None

    @classmethod
    def from_path(cls, path: str, renderer: Renderer) -> StaticMesh:
        """A component for the mesh at ``path``, loading it if needed."""
        return cls(renderer.load_or_get_mesh_id(path))


class Scene:
    """Base class for game scenes; override the ``on_*`` hooks and ``tick``."""

    def __init__(self) -> None:
        self._camera_manager = CameraManager()
        self._world = ECSWorld()

    @property
    def ecs_world(self) -> ECSWorld:
        return self._world

    @property
    def camera_manager(self) -> CameraManager:
        return self._camera_manager

    def on_load(self) -> None:
        """Called when the scene is loaded."""

    def tick(self) -> None:
        """Called every frame; applies pending camera changes."""
        self._camera_manager.tick()

    def on_render(self, renderer: Renderer) -> None:
        """Refresh every transform matrix and queue a draw for each static mesh."""
        self._world.view(Transform).each(lambda t: t.update_matrix(), parallel=True)
        self._world.group(StaticMesh, Transform).each(
            lambda mesh, transform: renderer.queue_draw(transform.mat, mesh)
        )

    def on_unload(self) -> None:
        """Called when the scene is unloaded."""

    def create_entity(self) -> Entity:
        """Create an entity that already carries a :class:`Transform`."""
        entity = self._world.create_entity()
        entity.add_component(Transform)
        return entity

    def destroy_entity(self, entity: Entity) -> None:
        """Remove ``entity`` and all its components from the scene."""
        self._world.destroy_entity(entity)


class SceneManager:
    """Runs a single loaded scene against a renderer."""

    def __init__(self, renderer: Renderer) -> None:
        self._renderer = renderer
        self._scene: Scene | None = None

    @property
    def scene(self) -> Scene | None:
        return self._scene

    def _require_scene(self) -> Scene:
        if self._scene is None:
            raise RuntimeError("no scene loaded")
        return self._scene

    def load_scene(self, scene: Scene) -> None:
        """Make ``scene`` the active scene and let it load."""
        self._scene = scene
        scene.on_load()

    def fixed_update(self) -> None:
        """Fixed-timestep step; scenes have no fixed-rate work, so this only checks one is loaded."""
        self._require_scene()

    def render(self) -> None:
        """Queue the scene's draws, then render with the active camera."""
        scene = self._require_scene()
        scene.on_render(self._renderer)
        camera = scene.camera_manager.active_camera
        self._renderer.render(camera.view_matrix, camera.projection_matrix)

    def tick(self) -> None:
        """Advance the scene by one frame."""
        self._require_scene().tick()

    def update_cameras_aspect_ratio(self, aspect_ratio: float) -> None:
        """Give the active camera a new aspect ratio."""
        self._require_scene().camera_manager.active_camera.aspect_ratio = aspect_ratio

    def close(self) -> None:
        """Unload the active scene, if any."""
        if self._scene is not None:
            scene, self._scene = self._scene, None
            scene.on_unload()

    def __enter__(self) -> SceneManager:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()