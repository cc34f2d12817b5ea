import numpy as np
import pytest

from mauengine.scene import Scene, SceneManager, StaticMesh
from mauengine.transform import Transform


class FakeRenderer:
    def __init__(self):
        self.draws = []
        self.renders = []
        self.loaded = []

    def load_or_get_mesh_id(self, path):
        self.loaded.append(path)
        return len(self.loaded) - 1

    def queue_draw(self, matrix, mesh):
        self.draws.append((np.array(matrix), mesh))

    def render(self, view, projection):
        self.renders.append((np.array(view), np.array(projection)))


class RecordingScene(Scene):
    def __init__(self):
        super().__init__()
        self.events = []

    def on_load(self):
        self.events.append("load")

    def on_unload(self):
        self.events.append("unload")


def test_create_entity_has_transform():
    scene = Scene()
    entity = scene.create_entity()
    assert entity.has_component(Transform)
    assert scene.ecs_world.component_count(Transform) == 1


def test_destroy_entity_invalidates():
    scene = Scene()
    entity = scene.create_entity()
    scene.destroy_entity(entity)
    assert not scene.ecs_world.is_valid(entity.id)
    assert scene.ecs_world.component_count(Transform) == 0


def test_static_mesh_from_path_uses_renderer():
    renderer = FakeRenderer()
    first = StaticMesh.from_path("a.obj", renderer)
    second = StaticMesh.from_path("b.obj", renderer)
    assert renderer.loaded == ["a.obj", "b.obj"]
    assert (first.mesh_id, second.mesh_id) == (0, 1)
    assert StaticMesh().mesh_id is None


def test_on_render_queues_meshes_with_updated_matrices():
    renderer = FakeRenderer()
    scene = Scene()
    drawn = scene.create_entity()
    scene.create_entity()  # no mesh: not drawn
    drawn.add_component(StaticMesh, 7)
    drawn.get_component(Transform).translate([1.0, 2.0, 3.0])

    scene.on_render(renderer)

    assert len(renderer.draws) == 1
    matrix, mesh = renderer.draws[0]
    assert mesh is drawn.get_component(StaticMesh)
    assert mesh.mesh_id == 7
    assert np.allclose(matrix[:3, 3], [1.0, 2.0, 3.0])
    assert not drawn.get_component(Transform).is_dirty


def test_on_render_updates_transforms_without_mesh():
    scene = Scene()
    entity = scene.create_entity()
    transform = entity.get_component(Transform)
    transform.translate([4.0, 0.0, 0.0])
    scene.on_render(FakeRenderer())
    assert not transform.is_dirty
    assert np.allclose(transform.mat[:3, 3], [4.0, 0.0, 0.0])


def test_load_and_close_call_hooks():
    scene = RecordingScene()
    manager = SceneManager(FakeRenderer())
    manager.load_scene(scene)
    assert scene.events == ["load"]
    assert manager.scene is scene
    manager.close()
    assert scene.events == ["load", "unload"]
    assert manager.scene is None


def test_context_manager_unloads():
    scene = RecordingScene()
    with SceneManager(FakeRenderer()) as manager:
        manager.load_scene(scene)
    assert scene.events[-1] == "unload"


def test_render_passes_camera_matrices():
    renderer = FakeRenderer()
    manager = SceneManager(renderer)
    scene = Scene()
    manager.load_scene(scene)
    manager.render()
    camera = scene.camera_manager.active_camera
    assert len(renderer.renders) == 1
    view, projection = renderer.renders[0]
    assert np.array_equal(view, camera.view_matrix)
    assert np.array_equal(projection, camera.projection_matrix)


def test_tick_applies_camera_changes():
    manager = SceneManager(FakeRenderer())
    scene = Scene()
    manager.load_scene(scene)
    camera = scene.camera_manager.active_camera
    camera.position = [0.0, 0.0, 5.0]
    assert camera.is_dirty
    manager.tick()
    assert not camera.is_dirty


def test_update_cameras_aspect_ratio():
    manager = SceneManager(FakeRenderer())
    scene = Scene()
    manager.load_scene(scene)
    manager.update_cameras_aspect_ratio(2.5)
    assert scene.camera_manager.active_camera.aspect_ratio == 2.5


def test_render_without_scene_raises():
    manager = SceneManager(FakeRenderer())
    with pytest.raises(RuntimeError):
        manager.render()


def test_tick_without_scene_raises():
    manager = SceneManager(FakeRenderer())
    with pytest.raises(RuntimeError):
        manager.tick()


def test_fixed_update_without_scene_raises():
    manager = SceneManager(FakeRenderer())
    with pytest.raises(RuntimeError):
        manager.fixed_update()


def test_aspect_ratio_without_scene_raises():
    with pytest.raises(RuntimeError):
        SceneManager(FakeRenderer()).update_cameras_aspect_ratio(1.0)