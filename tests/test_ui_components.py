import curses

import pytest

from tests.helpers import FakeWin, MemoryStore, make_items, typed
from budget_tui import ui
from budget_tui.errors import RenderError
from budget_tui.events import Key, KeyEvent, NavEvent, ResizeEvent
from budget_tui.table import SCROLLBAR_THUMB, TableController


def make_table(count):
    table = TableController(MemoryStore(make_items(count)), lambda text: None)
    table.sync()
    return table


def test_decode_key_variants():
    assert ui.decode_key("a") == KeyEvent(Key.CHAR, "a")
    assert ui.decode_key("é") == KeyEvent(Key.CHAR, "é")
    assert ui.decode_key("\n") == KeyEvent(Key.ENTER)
    assert ui.decode_key("\x1b") == KeyEvent(Key.ESC)
    assert ui.decode_key("\x7f") == KeyEvent(Key.BACKSPACE)
    assert ui.decode_key("\x03") == KeyEvent(Key.CHAR, "c", ctrl=True)
    assert ui.decode_key(curses.KEY_UP) == KeyEvent(Key.UP)
    assert ui.decode_key(curses.KEY_DC) == KeyEvent(Key.DELETE)
    assert ui.decode_key(curses.KEY_F1) == KeyEvent(Key.OTHER)
    assert ui.decode_key(curses.KEY_RESIZE) == ResizeEvent()


def test_curses_reader_retries_on_error(monkeypatch):
    monkeypatch.setattr(ui.curses, "isendwin", lambda: False)
    sleeps = []
    monkeypatch.setattr(ui.time, "sleep", sleeps.append)
    results = [curses.error, "x"]

    class FakeInput:
        def get_wch(self):
            item = results.pop(0)
            if item is curses.error:
                raise curses.error
            return item

    assert ui.curses_reader(FakeInput(), retry_delay=0.5)() == "x"
    assert sleeps == [0.5]


def test_curses_reader_stops_after_endwin(monkeypatch):
    monkeypatch.setattr(ui.curses, "isendwin", lambda: True)

    class FakeInput:
        def get_wch(self):
            raise curses.error

    with pytest.raises(EOFError):
        ui.curses_reader(FakeInput())()


def test_safe_addnstr_handles_curses_error():
    class FakeWindow:
        def addnstr(self, *args, **kwargs):
            raise curses.error

    ui.safe_addnstr(FakeWindow(), 0, 0, "text", 4)


def test_temp_cursor_and_keypad_restore(monkeypatch):
    calls = []
    monkeypatch.setattr(ui.curses, "curs_set", lambda n: calls.append(n) or 1)

    class FakeWindow:
        def __init__(self):
            self.keypad_calls = []

        def keypad(self, flag):
            self.keypad_calls.append(flag)

    win = FakeWindow()
    with ui.temp_cursor(0), ui.keypad_mode(win):
        pass
    assert calls == [0, 1]
    assert win.keypad_calls == [True, False]


def test_curses_terminal_resize(monkeypatch):
    calls = []
    monkeypatch.setattr(ui.curses, "update_lines_cols", lambda: calls.append("update"))
    monkeypatch.setattr(ui.curses, "resize_term", lambda h, w: calls.append("resize"))

    class FakeStdScr(FakeWin):
        def clearok(self, flag):
            calls.append(("clearok", flag))

    term = ui.CursesTerminal(FakeStdScr(10, 40))
    term.resized()
    assert calls == ["update", "resize", ("clearok", True)]
    with term.frame() as (win, area):
        assert area == ui.Rect(0, 0, 10, 40)


def test_rect_helpers():
    area = ui.Rect(0, 0, 24, 80)
    body, footer = area.split_footer()
    assert body == ui.Rect(0, 0, 23, 80)
    assert footer == ui.Rect(23, 0, 1, 80)
    assert area.inner(20, 3) == ui.Rect(3, 20, 18, 40)
    assert ui.Rect(0, 0, 2, 2).inner(5, 5) == ui.Rect(5, 5, 0, 0)
    popup = ui.popup_area(area, 60, 20)
    assert popup.width == 48
    assert popup.x == 16
    with pytest.raises(RenderError):
        ui.Rect(0, 0, -1, 10).split_footer()


def test_table_render_header_and_selection():
    win = FakeWin(24, 80)
    table = make_table(3)
    table.handle_nav(NavEvent.DOWN)
    table.handle_nav(NavEvent.RIGHT)
    table.render(win, ui.Rect(0, 0, 23, 80))

    header = win.text_at(1)
    for title in ("Date", "Category", "Description", "Amount"):
        assert title in header
    assert win.attr_at(1, 5) == curses.A_REVERSE
    row = win.text_at(3)
    assert " > " in row
    assert "2024-01-02" in row
    assert row.rstrip("│ ").endswith("2.00")
    assert win.attr_at(3, 5) == curses.A_REVERSE
    assert " > " not in win.text_at(2)


def test_table_render_editor_cursor():
    win = FakeWin(24, 80)
    table = make_table(2)
    table.selection.select(0, 2)
    table.handle_nav(NavEvent.INTERACT)
    for event in typed("Lunch"):
        table.handle_input(event)
    table.render(win, ui.Rect(0, 0, 23, 80))
    assert "Lunch" in win.text_at(2)
    reversed_cells = [
        (y, x) for y, x, text, attr in win.writes if y == 2 and attr == curses.A_REVERSE
    ]
    assert len(reversed_cells) == 1


def test_table_scrollbar_only_when_overflowing():
    win = FakeWin(10, 60)
    table = make_table(3)
    table.render(win, ui.Rect(0, 0, 10, 60))
    assert not any(text == SCROLLBAR_THUMB for _, _, text, _ in win.writes)

    win = FakeWin(10, 60)
    table = make_table(30)
    for _ in range(29):
        table.handle_nav(NavEvent.DOWN)
    table.render(win, ui.Rect(0, 0, 10, 60))
    thumbs = [y for y, x, text, _ in win.writes if text == SCROLLBAR_THUMB]
    assert thumbs and max(thumbs) == 8
    assert table.selection.scroll_offset == 23
    assert "2024-01-30" in win.text_at(8)


def test_table_render_tiny_area_does_not_fail():
    table = make_table(3)
    table.render(FakeWin(2, 3), ui.Rect(0, 0, 2, 3))
    table.render(FakeWin(3, 10), ui.Rect(0, 0, 3, 10))
