"""Messages passed between the input bridge, screens and the control loop."""
from __future__ import annotations

import enum
from dataclasses import dataclass


class Key(enum.Enum):
    CHAR = "char"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    ENTER = "enter"
    ESC = "esc"
    BACKSPACE = "backspace"
    DELETE = "delete"
    HOME = "home"
    END = "end"
    TAB = "tab"
    OTHER = "other"


@dataclass(frozen=True)
class KeyEvent:
    """A decoded key press.

    ``char`` holds the character for :attr:`Key.CHAR`. Control chords such as
    Ctrl-C arrive as ``Key.CHAR`` with the lower-case letter and ``ctrl=True``.
    """

    key: Key
    char: str = ""
    ctrl: bool = False

    def is_char(self, *chars: str) -> bool:
        return self.key is Key.CHAR and not self.ctrl and self.char in chars

    @property
    def printable(self) -> bool:
        return self.key is Key.CHAR and not self.ctrl and self.char.isprintable()


CTRL_C = KeyEvent(Key.CHAR, "c", ctrl=True)


@dataclass(frozen=True)
class ResizeEvent:
    """The terminal changed size."""


@dataclass(frozen=True)
class QuitSignal:
    """High-priority request to leave the application immediately."""


class NavEvent(enum.Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    INTERACT = "interact"
    CANCEL = "cancel"


NAV_KEYS = {
    Key.UP: NavEvent.UP,
    Key.DOWN: NavEvent.DOWN,
    Key.LEFT: NavEvent.LEFT,
    Key.RIGHT: NavEvent.RIGHT,
    Key.ENTER: NavEvent.INTERACT,
    Key.ESC: NavEvent.CANCEL,
}

NAV_CHARS = {
    "j": NavEvent.DOWN,
    "J": NavEvent.DOWN,
    "k": NavEvent.UP,
    "K": NavEvent.UP,
    "h": NavEvent.LEFT,
    "H": NavEvent.LEFT,
    "l": NavEvent.RIGHT,
}


def to_nav(event: KeyEvent) -> NavEvent | None:
    """Map a key press onto a navigation command, if it is one."""

    if event.key is Key.CHAR:
        if event.ctrl:
            return None
        return NAV_CHARS.get(event.char)
    return NAV_KEYS.get(event.key)


@dataclass(frozen=True)
class Notification:
    text: str


@dataclass(frozen=True)
class ExitScreen:
    """Sent by a screen that wants to be popped."""
