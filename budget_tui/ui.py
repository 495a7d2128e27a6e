"""Curses drawing and keyboard helpers."""
from __future__ import annotations

import curses
import time
from contextlib import contextmanager
from dataclasses import dataclass

from .errors import RenderError
from .events import Key, KeyEvent, ResizeEvent

NOTICE_PAIR = 1
_colors_ready = False

BORDER = {
    "tl": "╭",
    "tr": "╮",
    "bl": "╰",
    "br": "╯",
    "h": "─",
    "v": "│",
}


@dataclass(frozen=True)
class Rect:
    y: int
    x: int
    height: int
    width: int

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def right(self) -> int:
        return self.x + self.width

    def inner(self, horizontal: int = 1, vertical: int = 1) -> "Rect":
        """Shrink by the given margins on every side (never below zero)."""
        return Rect(
            self.y + vertical,
            self.x + horizontal,
            max(0, self.height - 2 * vertical),
            max(0, self.width - 2 * horizontal),
        )

    def split_footer(self, lines: int = 1) -> tuple["Rect", "Rect"]:
        """Split off ``lines`` rows at the bottom."""
        if self.height < 0 or self.width < 0:
            raise RenderError(f"cannot lay out area {self}")
        lines = min(lines, self.height)
        body = Rect(self.y, self.x, self.height - lines, self.width)
        footer = Rect(self.y + self.height - lines, self.x, lines, self.width)
        return body, footer


def popup_area(area: Rect, percent_x: int, percent_y: int) -> Rect:
    """Centered rectangle covering the given percentage of ``area``."""
    height = max(3, area.height * percent_y // 100)
    width = max(10, area.width * percent_x // 100)
    height = min(height, area.height)
    width = min(width, area.width)
    y = area.y + max(0, (area.height - height) // 2)
    x = area.x + max(0, (area.width - width) // 2)
    return Rect(y, x, height, width)


@contextmanager
def temp_cursor(state: int):
    """Temporarily set cursor visibility and restore on exit."""

    prev = None
    try:
        prev = curses.curs_set(state)
    except curses.error:  # pragma: no cover - some terminals
        prev = None
    try:
        yield
    finally:
        if prev is not None:
            try:
                curses.curs_set(prev)
            except curses.error:  # pragma: no cover - cleanup best effort
                pass


@contextmanager
def keypad_mode(win):
    """Enable keypad mode and ensure it is disabled afterwards."""

    try:
        win.keypad(True)
    except curses.error:  # pragma: no cover - fake windows
        pass
    try:
        yield
    finally:
        try:
            win.keypad(False)
        except curses.error:  # pragma: no cover - fake windows
            pass


def init_colors() -> None:
    global _colors_ready
    try:
        curses.use_default_colors()
        curses.init_pair(NOTICE_PAIR, curses.COLOR_RED, -1)
    except curses.error:  # pragma: no cover - terminals without color
        return
    _colors_ready = True


def notice_attr() -> int:
    if _colors_ready:
        return curses.color_pair(NOTICE_PAIR)
    return curses.A_BOLD


def safe_addnstr(win, y: int, x: int, text: str, n: int, attr: int = 0) -> None:
    """``addnstr`` that ignores writes falling outside the window."""
    if n <= 0:
        return
    try:
        win.addnstr(y, x, text, n, attr)
    except curses.error:
        pass


def align(text: str, width: int, right: bool = False) -> str:
    text = text[:width]
    return text.rjust(width) if right else text.ljust(width)


def clear_area(win, area: Rect) -> None:
    blank = " " * area.width
    for y in range(area.y, area.bottom):
        safe_addnstr(win, y, area.x, blank, area.width)


def draw_box(
    win,
    area: Rect,
    title: str | None = None,
    bottom: str | None = None,
    attr: int = 0,
) -> None:
    """Draw a rounded border around ``area`` with optional titles.

    ``title`` sits left-aligned on the top edge and ``bottom`` right-aligned
    on the bottom edge.
    """

    if area.height < 2 or area.width < 2:
        return
    inner_w = area.width - 2
    top = BORDER["tl"] + BORDER["h"] * inner_w + BORDER["tr"]
    low = BORDER["bl"] + BORDER["h"] * inner_w + BORDER["br"]
    safe_addnstr(win, area.y, area.x, top, area.width, attr)
    for y in range(area.y + 1, area.bottom - 1):
        safe_addnstr(win, y, area.x, BORDER["v"], 1, attr)
        safe_addnstr(win, y, area.right - 1, BORDER["v"], 1, attr)
    safe_addnstr(win, area.bottom - 1, area.x, low, area.width, attr)
    if title:
        safe_addnstr(win, area.y, area.x + 1, title, inner_w, attr)
    if bottom:
        text = bottom[:inner_w]
        safe_addnstr(win, area.bottom - 1, area.right - 1 - len(text), text, len(text), attr)


class CursesTerminal:
    """Rendering target wrapping the ``stdscr`` window."""

    def __init__(self, stdscr):
        self.stdscr = stdscr

    def area(self) -> Rect:
        h, w = self.stdscr.getmaxyx()
        return Rect(0, 0, max(0, h), max(0, w))

    @contextmanager
    def frame(self):
        """Erase, yield ``(window, area)`` for drawing, then refresh."""
        self.stdscr.erase()
        yield self.stdscr, self.area()
        try:
            self.stdscr.refresh()
        except curses.error:  # pragma: no cover - terminal vanished
            pass

    def resized(self) -> None:
        try:
            curses.update_lines_cols()
            curses.resize_term(0, 0)
        except curses.error:  # pragma: no cover - not a real terminal
            pass
        self.stdscr.clearok(True)


SPECIAL_KEYS = {
    curses.KEY_UP: Key.UP,
    curses.KEY_DOWN: Key.DOWN,
    curses.KEY_LEFT: Key.LEFT,
    curses.KEY_RIGHT: Key.RIGHT,
    curses.KEY_ENTER: Key.ENTER,
    curses.KEY_BACKSPACE: Key.BACKSPACE,
    curses.KEY_DC: Key.DELETE,
    curses.KEY_HOME: Key.HOME,
    curses.KEY_END: Key.END,
}

CONTROL_CHARS = {
    "\n": Key.ENTER,
    "\r": Key.ENTER,
    "\x1b": Key.ESC,
    "\x7f": Key.BACKSPACE,
    "\x08": Key.BACKSPACE,
    "\t": Key.TAB,
}


def decode_key(raw):
    """Translate a ``get_wch`` result into a :class:`KeyEvent` or :class:`ResizeEvent`."""

    if isinstance(raw, int):
        if raw == curses.KEY_RESIZE:
            return ResizeEvent()
        return KeyEvent(SPECIAL_KEYS.get(raw, Key.OTHER))
    if raw in CONTROL_CHARS:
        return KeyEvent(CONTROL_CHARS[raw])
    code = ord(raw[0]) if raw else 0
    if 0 < code < 27:
        return KeyEvent(Key.CHAR, chr(code + 96), ctrl=True)
    if code < 32:
        return KeyEvent(Key.OTHER)
    return KeyEvent(Key.CHAR, raw)


def curses_reader(win, retry_delay: float = 0.01):
    """Return a blocking callable producing the next raw key from ``win``.

    Once curses has been torn down the callable raises ``EOFError`` instead
    of retrying, which ends the input bridge.
    """

    def _read():
        while True:
            try:
                return win.get_wch()
            except curses.error:
                if curses.isendwin():
                    raise EOFError("curses session ended") from None
                time.sleep(retry_delay)

    return _read
