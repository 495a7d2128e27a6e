"""Top-level control loop."""
from __future__ import annotations

import enum
from collections import deque

from .errors import ChannelClosed, RecoverableError
from .events import (
    CTRL_C,
    ExitScreen,
    Key,
    KeyEvent,
    NavEvent,
    Notification,
    QuitSignal,
    ResizeEvent,
    to_nav,
)
from .logging_setup import get_logger
from .models import generate_sample_transactions
from .screens import AccountScreen, NotificationsScreen, ScreenKind, ScreenStack
from .ui import clear_area, draw_box, notice_attr, popup_area, safe_addnstr

log = get_logger(__name__)


class AppState(enum.Enum):
    RUNNING = "running"
    QUITTING = "quitting"
    EXITED = "exited"


class NotificationLog:
    """Most recent notifications, oldest first."""

    def __init__(self, limit: int | None = None):
        self._items: deque[str] = deque(maxlen=limit)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    def __reversed__(self):
        return reversed(self._items)

    def append(self, text: str) -> None:
        self._items.append(text)

    @property
    def latest(self) -> str | None:
        return self._items[-1] if self._items else None


class AppController:
    """Own the screen stack, notification log and quit confirmation.

    ``terminal`` provides ``frame()`` (a context manager yielding the window
    and its area) and ``resized()``. ``store`` is handed to the screens.
    """

    def __init__(self, store, terminal, notification_limit: int | None = 500, sample_size: int = 5):
        self.store = store
        self.terminal = terminal
        self.sample_size = sample_size
        self.state = AppState.RUNNING
        self.notifications = NotificationLog(notification_limit)
        self.events: deque = deque()
        self.screens = ScreenStack(self._build_screen)
        self.frames_count = 0

    def _build_screen(self, kind: ScreenKind):
        if kind is ScreenKind.ACCOUNT:
            return AccountScreen(self.events.append, self.store)
        if kind is ScreenKind.NOTIFICATIONS:
            return NotificationsScreen(self.events.append, self.notifications)
        raise ValueError(f"unknown screen {kind!r}")

    def notify(self, text: str) -> None:
        log.info("notification: %s", text)
        self.notifications.append(text)

    def load_screen(self, kind: ScreenKind) -> None:
        try:
            self.screens.push(kind)
        except RecoverableError as exc:
            log.warning("loading %s screen failed: %s", kind.value, exc)
            self.notify(f"Error: {exc}")

    def run(self, channel) -> None:
        if self.screens.empty:
            self.load_screen(ScreenKind.ACCOUNT)
        try:
            while self.state is not AppState.EXITED:
                self.frames_count += 1
                self.draw()
                self.handle_events(channel)
                if self.screens.empty:
                    self.exit()
        finally:
            channel.close()
        log.info("exited after %d frames", self.frames_count)

    def exit(self) -> None:
        self.state = AppState.EXITED

    def request_exit(self) -> None:
        """Exit, or ask for confirmation when local changes never reached storage."""
        if any(screen.has_unsaved_changes for screen in self.screens):
            self.state = AppState.QUITTING
        else:
            self.state = AppState.EXITED

    def handle_events(self, channel) -> None:
        try:
            message = channel.recv()
        except ChannelClosed:
            log.info("input channel closed")
            self.exit()
            return

        if isinstance(message, QuitSignal):
            self.exit()
            return
        if isinstance(message, ResizeEvent):
            self.terminal.resized()
            return
        if not isinstance(message, KeyEvent):
            return

        try:
            self.handle_key(message)
            self.drain_events()
        except RecoverableError as exc:
            log.warning("recovered from %s", exc)
            self.notify(f"Error: {exc}")

    def handle_key(self, event: KeyEvent) -> None:
        if event == CTRL_C:
            self.exit()
            return

        if self.state is AppState.QUITTING:
            if event.is_char("y", "Y") or event.key is Key.ENTER:
                self.exit()
            elif event.is_char("n", "N") or event.key is Key.ESC:
                self.state = AppState.RUNNING
            return

        screen = self.screens.top
        if screen is None:
            return

        if screen.is_popup:
            if event.key is Key.ESC:
                screen.handle_nav(NavEvent.CANCEL)
            elif event.is_char("q", "Q"):
                screen.handle_event(event)
            return

        if not screen.captures_text:
            if event.is_char("n", "N"):
                self.load_screen(ScreenKind.NOTIFICATIONS)
                return
            if event.is_char("g", "G"):
                self.generate_samples()
                return

        nav = to_nav(event)
        if nav is not None:
            screen.handle_nav(nav)
        screen.handle_event(event)

    def generate_samples(self) -> None:
        count = self.sample_size
        self.notify(f"Generating {count} sample transactions")
        self.store.put_many(generate_sample_transactions(count))
        top = self.screens.top
        if top is not None:
            top.sync()

    def drain_events(self) -> None:
        while self.events:
            event = self.events.popleft()
            if isinstance(event, Notification):
                self.notify(event.text)
            elif isinstance(event, ExitScreen):
                if len(self.screens) > 1:
                    self.screens.pop()
                else:
                    self.request_exit()
                    if self.state is AppState.EXITED:
                        self.screens.pop()

    def draw(self) -> None:
        with self.terminal.frame() as (win, area):
            content, footer = area.split_footer(1)
            top = self.screens.top
            if top is not None:
                top.render(win, content)

            latest = self.notifications.latest
            if latest is not None and footer.height:
                safe_addnstr(win, footer.y, footer.x, latest, footer.width, notice_attr())

            if self.state is AppState.QUITTING:
                self._draw_quit_popup(win, content)

    def _draw_quit_popup(self, win, area) -> None:
        box = popup_area(area, 60, 20)
        clear_area(win, box)
        draw_box(win, box, "Quit?", "y / n")
        body = box.inner(2, 1)
        if body.height > 0:
            safe_addnstr(
                win,
                body.y,
                body.x,
                "Some changes were not saved to the database.",
                body.width,
            )
