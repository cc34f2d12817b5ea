# mauengine

The core services of a small game engine, for use from Python code.

## What is in it

- `mauengine.logger`: `Logger` filters by `LogPriority` (`TRACE` to `FATAL`)
  and tags messages with a `LogCategory` (`CORE`, `ENGINE`, `RENDERER`,
  `GAME`). `ConsoleLogger` writes coloured lines to a stream (standard output
  by default). `FileLogger` appends timestamped lines and moves the file to
  `<path>.1` once it reaches 5000 bytes. `NullLogger` discards everything.
  `create_console_logger()` and `create_file_logger(path)` build them.
- `mauengine.services`: `get_logger()`, `register_logger()`,
  `get_profiler()` and `register_profiler()` hold the active logger and
  profiler; registering `None` installs the null one. `Singleton` gives each
  subclass one shared instance through `get_instance()`.
- `mauengine.asserts`: `me_assert`, `me_check` and `me_verify` log the
  failure through the active logger and raise `AssertionFailure` (a
  subclass of `AssertionError`). `me_verify` logs at warning level.
- `mauengine.profiling`: `GoogleProfiler` writes sessions as Chrome
  trace-event JSON to `<file>.json`; `start(path)` captures the next 5 frames
  counted by `update()`. `NullProfiler` records nothing. `InstrumentorTimer`
  is a context manager that reports the timed block to the active profiler.
- `mauengine.rotator`: `Rotator`, a quaternion rotation built from pitch,
  yaw and roll in degrees; `*` concatenates rotators or rotates a 3-vector,
  `to_matrix()` gives a 4x4 matrix.
- Entity-component system: `mauengine.registry.Registry` (sparse-set
  storages), `mauengine.world.ECSWorld`, `mauengine.entity.Entity`, and
  `mauengine.views.View` / `Group` with `Exclude` and `Get`.
- Scene layer: `mauengine.transform.Transform`, `mauengine.camera.Camera`
  and `CameraManager`, `mauengine.gametime.GameTime` (fixed-timestep lag),
  `mauengine.input.InputManager` (actions bound with `KeyInfo` or
  `MouseInfo`, resolved from `InputEvent`s), and `mauengine.scene.Scene`,
  `SceneManager` and the `StaticMesh` component.
- `mauengine.assets`: `Material`, `EmbeddedTexture`, `LoadedModel`,
  `SubMeshData`, `MeshData`, `MeshInstanceData`, `DrawCommand`,
  `hash_embedded_texture` (64-bit FNV-1a as 16 hex digits) and
  `extract_embedded_texture`.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from mauengine.world import ECSWorld
from mauengine.transform import Transform

world = ECSWorld()
player = world.create_entity()
player.add_component(Transform)
player.get_component(Transform).translate((1.0, 0.0, 0.0))

for entity_id in world.view(Transform):
    print(entity_id, world.get_component(entity_id, Transform).get_matrix())
```

Logging goes through the registered logger:

```python
from mauengine import services
from mauengine.logger import LogCategory, LogPriority, create_console_logger

services.register_logger(create_console_logger())
services.get_logger().log(LogPriority.INFO, LogCategory.GAME, "FPS: {}", 60.0)
```

Input is fed in as events each frame:

```python
from mauengine.input import EventType, InputEvent, InputManager, KeyInfo

inputs = InputManager.get_instance()
inputs.bind_action("jump", KeyInfo(key=32))
inputs.process_input([InputEvent(EventType.KEY_DOWN, key=32)])
assert inputs.is_action_executed("jump")
```

## What it does not do

There is no window, no renderer and no main loop here. `SceneManager` takes
any object with `load_or_get_mesh_id`, `queue_draw` and `render` methods, and
`InputManager` resolves events and held keys that the caller supplies. Model
files are not read: `mauengine.assets` only holds the data records and the
embedded-texture helpers.