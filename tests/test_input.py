import pytest

from mauengine.input import (
    EventType,
    InputEvent,
    InputManager,
    KeyAction,
    KeyInfo,
    MouseAction,
    MouseButton,
    MouseInfo,
)

KEY_W = ord("w")
KEY_S = ord("s")


@pytest.fixture
def manager():
    return InputManager()


def test_key_down_fires_bound_action(manager):
    assert manager.bind_action("Jump", KeyInfo(KEY_W, KeyAction.DOWN)) is True
    assert manager.process_input([InputEvent(EventType.KEY_DOWN, key=KEY_W)]) is True
    assert manager.is_action_executed("Jump")
    assert not manager.is_action_executed("Other")


def test_repeated_key_down_is_ignored(manager):
    manager.bind_action("Jump", KeyInfo(KEY_W, KeyAction.DOWN))
    manager.process_input([InputEvent(EventType.KEY_DOWN, key=KEY_W, repeat=True)])
    assert not manager.is_action_executed("Jump")


def test_key_up_uses_up_bindings(manager):
    manager.bind_action("Release", KeyInfo(KEY_W, KeyAction.UP))
    manager.process_input([InputEvent(EventType.KEY_DOWN, key=KEY_W)])
    assert not manager.is_action_executed("Release")
    manager.process_input([InputEvent(EventType.KEY_UP, key=KEY_W)])
    assert manager.is_action_executed("Release")


def test_held_keys(manager):
    manager.bind_action("Forward", KeyInfo(KEY_W, KeyAction.HELD))
    manager.bind_action("Back", KeyInfo(KEY_S, KeyAction.HELD))
    manager.process_input([], held_keys=[KEY_W])
    assert manager.executed_actions == frozenset({"Forward"})


def test_multiple_actions_on_one_key(manager):
    manager.bind_action("A", KeyInfo(KEY_W))
    manager.bind_action("B", KeyInfo(KEY_W))
    manager.process_input([InputEvent(EventType.KEY_DOWN, key=KEY_W)])
    assert manager.executed_actions == frozenset({"A", "B"})


def test_actions_reset_each_frame(manager):
    manager.bind_action("Jump", KeyInfo(KEY_W))
    manager.process_input([InputEvent(EventType.KEY_DOWN, key=KEY_W)])
    manager.process_input([])
    assert manager.executed_actions == frozenset()


def test_mouse_button_down(manager):
    manager.bind_action("Fire", MouseInfo(MouseButton.LEFT, MouseAction.DOWN))
    manager.process_input([InputEvent(EventType.MOUSE_BUTTON_DOWN, button=MouseButton.RIGHT)])
    assert not manager.is_action_executed("Fire")
    manager.process_input([InputEvent(EventType.MOUSE_BUTTON_DOWN, button=MouseButton.LEFT)])
    assert manager.is_action_executed("Fire")


def test_mouse_held(manager):
    manager.bind_action("Aim", MouseInfo(MouseButton.RIGHT, MouseAction.HELD))
    manager.process_input([], held_buttons=[MouseButton.RIGHT])
    assert manager.is_action_executed("Aim")


def test_mouse_motion_sets_delta_and_fires(manager):
    manager.bind_action("Look", MouseInfo(0, MouseAction.MOVED))
    manager.process_input([InputEvent(EventType.MOUSE_MOTION, x=3.5, y=-2.0)])
    assert manager.mouse_delta == (3.5, -2.0)
    assert manager.is_action_executed("Look")
    manager.process_input([])
    assert manager.mouse_delta == (0.0, 0.0)


def test_mouse_wheel_sets_scroll(manager):
    manager.bind_action("Zoom", MouseInfo(0, MouseAction.SCROLLED))
    manager.process_input([InputEvent(EventType.MOUSE_WHEEL, x=0.0, y=1.0)])
    assert manager.mouse_scroll == (0.0, 1.0)
    assert manager.is_action_executed("Zoom")


def test_window_enter_and_leave(manager):
    manager.bind_action("In", MouseInfo(0, MouseAction.ENTERED_WINDOW))
    manager.bind_action("Out", MouseInfo(0, MouseAction.LEFT_WINDOW))
    manager.process_input([InputEvent(EventType.WINDOW_MOUSE_LEAVE)])
    assert manager.executed_actions == frozenset({"Out"})


@pytest.mark.parametrize("quit_type", [EventType.QUIT, EventType.WINDOW_CLOSE_REQUESTED])
def test_quit_stops_processing(manager, quit_type):
    manager.bind_action("Jump", KeyInfo(KEY_W))
    manager.bind_action("Forward", KeyInfo(KEY_S, KeyAction.HELD))
    result = manager.process_input(
        [InputEvent(quit_type), InputEvent(EventType.KEY_DOWN, key=KEY_W)],
        held_keys=[KEY_S],
    )
    assert result is False
    assert not manager.is_action_executed("Jump")
    assert not manager.is_action_executed("Forward")


def test_bind_rejects_unknown_info(manager):
    with pytest.raises(TypeError):
        manager.bind_action("Bad", "not an input")


def test_mouse_position_starts_at_origin(manager):
    manager.process_input([InputEvent(EventType.MOUSE_MOTION, x=1.0, y=1.0)])
    assert manager.mouse_position == (0.0, 0.0)