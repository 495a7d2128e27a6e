"""Screens and the stack that holds them."""
from __future__ import annotations

import enum
from typing import Callable

from .events import ExitScreen, KeyEvent, NavEvent, Notification
from .logging_setup import get_logger
from .selection import Mode
from .table import TableController
from .ui import Rect, clear_area, draw_box, notice_attr, safe_addnstr

log = get_logger(__name__)


class ScreenKind(enum.Enum):
    ACCOUNT = "account"
    NOTIFICATIONS = "notifications"


class Screen:
    """A full-viewport unit of UI.

    Subclasses must implement :meth:`render`; the other hooks default to
    doing nothing. ``emit`` delivers :class:`Notification` and
    :class:`ExitScreen` messages to the control loop.
    """

    is_popup = False

    def __init__(self, emit: Callable[[object], None]):
        self.emit = emit

    def render(self, win, area: Rect) -> None:
        raise NotImplementedError

    def handle_nav(self, event: NavEvent) -> None:
        pass

    def handle_event(self, event: KeyEvent) -> None:
        pass

    def sync(self) -> None:
        pass

    @property
    def captures_text(self) -> bool:
        """``True`` while typed characters belong to the screen, not to hotkeys."""
        return False

    @property
    def has_unsaved_changes(self) -> bool:
        return False


class AccountScreen(Screen):
    """The transactions table."""

    def __init__(self, emit, store):
        super().__init__(emit)
        self.table = TableController(store, lambda text: emit(Notification(text)))

    def render(self, win, area: Rect) -> None:
        self.table.render(win, area)

    def handle_nav(self, event: NavEvent) -> None:
        self.table.handle_nav(event)

    def handle_event(self, event: KeyEvent) -> None:
        self.table.handle_input(event)
        if self.table.mode is not Mode.BROWSING:
            return
        if event.is_char("q", "Q"):
            self.emit(ExitScreen())
        elif event.is_char("d", "D"):
            self.table.delete_selected()

    def sync(self) -> None:
        self.table.sync()

    @property
    def captures_text(self) -> bool:
        return self.table.mode is Mode.EDITING

    @property
    def has_unsaved_changes(self) -> bool:
        return self.table.unsaved_changes


class NotificationsScreen(Screen):
    """Popup listing every notification, newest first."""

    is_popup = True
    title = "Notifications"
    hint = " <Esc> to close this window "

    def __init__(self, emit, notifications):
        super().__init__(emit)
        self.notifications = notifications

    def render(self, win, area: Rect) -> None:
        box = area.inner(20, 3)
        if box.height < 2 or box.width < 2:
            box = area
        clear_area(win, box)
        draw_box(win, box, self.title, self.hint)
        body = box.inner(2, 1)
        for i, line in enumerate(list(reversed(self.notifications))[: body.height]):
            safe_addnstr(win, body.y + i, body.x, line, body.width, notice_attr())

    def handle_nav(self, event: NavEvent) -> None:
        if event is NavEvent.CANCEL:
            self.emit(ExitScreen())

    def handle_event(self, event: KeyEvent) -> None:
        if event.is_char("q", "Q"):
            self.emit(ExitScreen())


class ScreenStack:
    """Ordered stack of ``(kind, screen)`` entries; only the top is active."""

    def __init__(self, factory: Callable[[ScreenKind], Screen]):
        self._factory = factory
        self._entries: list[tuple[ScreenKind, Screen]] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return (screen for _, screen in self._entries)

    @property
    def empty(self) -> bool:
        return not self._entries

    @property
    def top(self) -> Screen | None:
        return self._entries[-1][1] if self._entries else None

    @property
    def top_kind(self) -> ScreenKind | None:
        return self._entries[-1][0] if self._entries else None

    def push(self, kind: ScreenKind) -> Screen:
        """Build and push a screen of ``kind`` unless it is already on top.

        The new screen is synced after being pushed; a sync failure
        propagates but leaves the screen on the stack.
        """

        if self.top_kind is kind:
            return self.top
        screen = self._factory(kind)
        self._entries.append((kind, screen))
        log.debug("pushed %s screen, depth %d", kind.value, len(self._entries))
        screen.sync()
        return screen

    def pop(self) -> Screen | None:
        if not self._entries:
            return None
        kind, screen = self._entries.pop()
        log.debug("popped %s screen, depth %d", kind.value, len(self._entries))
        return screen
