"""Binding named actions to keys and mouse events, and resolving them each frame."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Iterable, Union

from mauengine.services import Singleton


class KeyAction(Enum):
    """When a key binding fires."""

    DOWN = 0
    UP = 1
    HELD = 2


class MouseAction(Enum):
    """When a mouse binding fires."""

    DOWN = 0
    UP = 1
    HELD = 2
    MOVED = 3
    SCROLLED = 4
    ENTERED_WINDOW = 5
    LEFT_WINDOW = 6


class MouseButton(IntEnum):
    """Mouse button numbers."""

    LEFT = 1
    MIDDLE = 2
    RIGHT = 3
    X1 = 4
    X2 = 5


class EventType(Enum):
    """Kinds of input event the manager understands."""

    QUIT = "quit"
    WINDOW_CLOSE_REQUESTED = "window_close_requested"
    MOUSE_BUTTON_DOWN = "mouse_button_down"
    MOUSE_BUTTON_UP = "mouse_button_up"
    MOUSE_WHEEL = "mouse_wheel"
    MOUSE_MOTION = "mouse_motion"
    WINDOW_MOUSE_ENTER = "window_mouse_enter"
    WINDOW_MOUSE_LEAVE = "window_mouse_leave"
    KEY_DOWN = "key_down"
    KEY_UP = "key_up"


@dataclass(frozen=True)
class InputEvent:
    """One input event.

    ``key`` and ``repeat`` apply to key events, ``button`` to mouse button
    events; ``x`` and ``y`` hold the relative motion of a motion event or the
    scroll amounts of a wheel event.
    """

    type: EventType
    key: int = 0
    repeat: bool = False
    button: int = 0
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class KeyInfo:
    """A key and when it should trigger an action."""

    key: int
    type: KeyAction = KeyAction.DOWN


@dataclass(frozen=True)
class MouseInfo:
    """A mouse button (0 for motion, wheel and window events) and when it triggers."""

    button: int = 0
    type: MouseAction = MouseAction.DOWN


_MOUSE_EVENTS = {
    EventType.MOUSE_BUTTON_DOWN: MouseAction.DOWN,
    EventType.MOUSE_BUTTON_UP: MouseAction.UP,
    EventType.MOUSE_WHEEL: MouseAction.SCROLLED,
    EventType.MOUSE_MOTION: MouseAction.MOVED,
    EventType.WINDOW_MOUSE_ENTER: MouseAction.ENTERED_WINDOW,
    EventType.WINDOW_MOUSE_LEAVE: MouseAction.LEFT_WINDOW,
}

_BUTTONLESS_EVENTS = {
    EventType.MOUSE_WHEEL,
    EventType.MOUSE_MOTION,
    EventType.WINDOW_MOUSE_ENTER,
    EventType.WINDOW_MOUSE_LEAVE,
}

_QUIT_EVENTS = {EventType.QUIT, EventType.WINDOW_CLOSE_REQUESTED}


class InputManager(Singleton):
    """Maps input to named actions and reports which actions fired this frame."""

    def __init__(self) -> None:
        self._executed: set[str] = set()
        self._keyboard: dict[KeyAction, dict[int, list[str]]] = {
            action: defaultdict(list) for action in KeyAction
        }
        self._mouse: dict[MouseAction, dict[int, list[str]]] = {
            action: defaultdict(list) for action in MouseAction
        }
        self._mouse_x = 0.0
        self._mouse_y = 0.0
        self._mouse_delta_x = 0.0
        self._mouse_delta_y = 0.0
        self._mouse_scroll_x = 0.0
        self._mouse_scroll_y = 0.0

    @property
    def mouse_position(self) -> tuple[float, float]:
        return (self._mouse_x, self._mouse_y)

    @property
    def mouse_delta(self) -> tuple[float, float]:
        """Relative mouse motion of the last motion event this frame."""
        return (self._mouse_delta_x, self._mouse_delta_y)

    @property
    def mouse_scroll(self) -> tuple[float, float]:
        """Scroll amounts of the last wheel event this frame."""
        return (self._mouse_scroll_x, self._mouse_scroll_y)

    @property
    def executed_actions(self) -> frozenset[str]:
        return frozenset(self._executed)

    def _fire(self, names: Iterable[str]) -> None:
        self._executed.update(names)

    def process_input(
        self,
        events: Iterable[InputEvent],
        held_keys: Iterable[int] = (),
        held_buttons: Iterable[int] = (),
    ) -> bool:
        """Resolve this frame's actions; False as soon as a quit event is seen."""
        self._executed.clear()
        self._mouse_delta_x = self._mouse_delta_y = 0.0
        self._mouse_scroll_x = self._mouse_scroll_y = 0.0

        for event in events:
            if event.type in _QUIT_EVENTS:
                return False

            mouse_action = _MOUSE_EVENTS.get(event.type)
            if mouse_action is not None:
                if event.type is EventType.MOUSE_MOTION:
                    self._mouse_delta_x, self._mouse_delta_y = event.x, event.y
                elif event.type is EventType.MOUSE_WHEEL:
                    self._mouse_scroll_x, self._mouse_scroll_y = event.x, event.y
                button = 0 if event.type in _BUTTONLESS_EVENTS else event.button
                self._fire(self._mouse[mouse_action].get(button, ()))
            elif event.type is EventType.KEY_DOWN and not event.repeat:
                self._fire(self._keyboard[KeyAction.DOWN].get(event.key, ()))
            elif event.type is EventType.KEY_UP:
                self._fire(self._keyboard[KeyAction.UP].get(event.key, ()))

        held_mouse = self._mouse[MouseAction.HELD]
        for button in set(held_buttons):
            self._fire(held_mouse.get(int(button), ()))

        held = set(held_keys)
        for key, names in self._keyboard[KeyAction.HELD].items():
            if key in held:
                self._fire(names)
        return True

    def bind_action(self, action_name: str, info: Union[KeyInfo, MouseInfo]) -> bool:
        """Fire ``action_name`` whenever the input described by ``info`` happens."""
        if isinstance(info, KeyInfo):
            self._keyboard[info.type][int(info.key)].append(action_name)
        elif isinstance(info, MouseInfo):
            self._mouse[info.type][int(info.button)].append(action_name)
        else:
            raise TypeError(f"cannot bind an action to {type(info).__name__}")
        return True

    def is_action_executed(self, action_name: str) -> bool:
        """Whether ``action_name`` fired during the last processed frame."""
        return action_name in self._executed