"""Navigable, editable transactions table."""
from __future__ import annotations

import curses
from dataclasses import dataclass, replace
from datetime import datetime, time
from decimal import Decimal, InvalidOperation
from typing import Callable

from .edit_buffer import EditBuffer
from .errors import InvalidValueError, StorageError
from .events import KeyEvent, NavEvent
from .logging_setup import get_logger
from .models import Transaction
from .selection import Mode, SelectionModel
from .ui import Rect, align, draw_box, safe_addnstr

log = get_logger(__name__)

TABLE_TITLE = "Transactions"
TABLE_HINT = " ← ↑ ↓ → to move selection "
HIGHLIGHT_SYMBOL = " > "
COLUMN_SPACING = 1
SCROLLBAR_THUMB = "▐"
DATE_FORMAT = "%Y-%m-%d"
# SQLite INTEGER bounds, in cents
MIN_AMOUNT = -(2**63)
MAX_AMOUNT = 2**63 - 1


def format_amount(cents: int) -> str:
    sign = "-" if cents < 0 else ""
    whole, frac = divmod(abs(cents), 100)
    return f"{sign}{whole}.{frac:02}"


def parse_amount(text: str) -> int:
    """Convert ``"50.00"`` style text into minor units (``5000``)."""
    cleaned = text.strip().replace(",", "")
    try:
        value = Decimal(cleaned) * 100
    except InvalidOperation:
        raise InvalidValueError(f"invalid amount {text!r}") from None
    if not value.is_finite() or value != value.to_integral_value():
        raise InvalidValueError(f"invalid amount {text!r}")
    if not MIN_AMOUNT <= value <= MAX_AMOUNT:
        raise InvalidValueError(f"amount {text!r} is out of range")
    return int(value)


def _format_date(t: Transaction) -> str:
    return t.timestamp.strftime(DATE_FORMAT) if t.timestamp else ""


def _parse_date(t: Transaction, text: str) -> Transaction:
    try:
        day = datetime.strptime(text.strip(), DATE_FORMAT).date()
    except ValueError:
        raise InvalidValueError(f"invalid date {text!r}, expected YYYY-MM-DD") from None
    clock = t.timestamp.time() if t.timestamp else time()
    return replace(t, timestamp=datetime.combine(day, clock))


def _optional(text: str) -> str | None:
    return text if text.strip() else None


@dataclass(frozen=True)
class Column:
    title: str
    fmt: Callable[[Transaction], str]
    parse: Callable[[Transaction, str], Transaction]
    width: int = 0
    flex: int = 0
    right: bool = False


COLUMNS = (
    Column("Date", _format_date, _parse_date, width=12),
    Column(
        "Category",
        lambda t: t.category or "",
        lambda t, s: replace(t, category=_optional(s)),
        flex=1,
    ),
    Column(
        "Description",
        lambda t: t.description or "",
        lambda t, s: replace(t, description=_optional(s)),
        flex=9,
    ),
    Column(
        "Amount",
        lambda t: format_amount(t.amount),
        lambda t, s: replace(t, amount=parse_amount(s)),
        width=13,
        right=True,
    ),
)


def column_widths(total: int, columns=COLUMNS, spacing: int = COLUMN_SPACING) -> list[int]:
    """Split ``total`` cells between ``columns``.

    Fixed columns get their width, flexible columns share what is left in
    proportion to ``flex``. When the space is too small columns are squeezed
    from the right.
    """

    gaps = spacing * (len(columns) - 1)
    room = max(0, total - gaps)
    fixed = sum(c.width for c in columns if not c.flex)
    flex_total = sum(c.flex for c in columns)
    free = max(0, room - fixed)

    widths = [free * c.flex // flex_total if c.flex else c.width for c in columns]
    flex_idx = [i for i, c in enumerate(columns) if c.flex]
    if flex_idx:
        widths[flex_idx[-1]] += free - sum(widths[i] for i in flex_idx)

    overflow = sum(widths) - room
    for i in reversed(range(len(widths))):
        if overflow <= 0:
            break
        take = min(widths[i], overflow)
        widths[i] -= take
        overflow -= take
    return widths


class TableController:
    """Transactions table with 2-D selection and in-place editing.

    ``emit`` receives notification strings. Edits and deletes are applied to
    the in-memory list first and then written to ``store``; a failed write is
    reported but not rolled back, and :attr:`unsaved_changes` stays set until
    the next successful :meth:`sync`.
    """

    def __init__(self, store, emit: Callable[[str], None], items=()):
        self.store = store
        self._emit = emit
        self.items: list[Transaction] = list(items)
        self.selection = SelectionModel(len(self.items), len(COLUMNS))
        self.buffer: EditBuffer | None = None
        self.unsaved_changes = False

    @property
    def mode(self) -> Mode:
        return self.selection.mode

    def notify(self, text: str) -> None:
        self._emit(text)

    def cell_text(self, row: int, column: int) -> str:
        return COLUMNS[column].fmt(self.items[row])

    def selected_item(self) -> Transaction | None:
        row = self.selection.row
        return self.items[row] if row is not None else None

    def handle_nav(self, nav: NavEvent) -> str | None:
        """Apply a navigation command; return the committed text on accept."""

        sel = self.selection
        if sel.editing:
            if nav is NavEvent.INTERACT:
                return self.accept_edit()
            if nav is NavEvent.CANCEL:
                self.cancel_edit()
            return None

        if nav is NavEvent.DOWN:
            sel.next_row()
        elif nav is NavEvent.UP:
            sel.previous_row()
        elif nav is NavEvent.RIGHT:
            sel.next_column()
        elif nav is NavEvent.LEFT:
            sel.previous_column()
        elif nav is NavEvent.INTERACT:
            self.start_editing()
        elif nav is NavEvent.CANCEL:
            sel.deselect()
        return None

    def handle_input(self, event: KeyEvent) -> bool:
        if not self.selection.editing or self.buffer is None:
            return False
        return self.buffer.handle_raw_input(event)

    def start_editing(self) -> bool:
        if not self.selection.start_editing():
            return False
        row, col = self.selection.selected
        self.buffer = EditBuffer(self.cell_text(row, col))
        return True

    def cancel_edit(self) -> None:
        if self.buffer is not None:
            self.buffer.cancel()
        self.buffer = None
        self.selection.stop_editing()

    def accept_edit(self) -> str | None:
        row, col = self.selection.selected
        text = self.buffer.accept() if self.buffer is not None else ""
        self.buffer = None
        self.selection.stop_editing()
        if row is None or col is None:
            return None

        item = self.items[row]
        try:
            updated = COLUMNS[col].parse(item, text)
        except InvalidValueError as exc:
            self.notify(f"Error: {exc}")
            return None
        if updated == item:
            return text

        self.items[row] = updated
        self._persist(row, updated)
        return text

    def _persist(self, row: int, item: Transaction) -> None:
        try:
            new_id = self.store.put(item)
        except StorageError as exc:
            self.unsaved_changes = True
            self.notify(f"Error: {exc}")
            return
        if item.id is None:
            self.items[row] = replace(item, id=new_id)

    def delete_selected(self) -> Transaction | None:
        """Remove the selected row locally and ask storage to delete it."""

        row = self.selection.row
        if self.selection.editing or row is None:
            return None

        item = self.items.pop(row)
        if item.id is not None:
            try:
                self.store.delete({item.id})
            except StorageError as exc:
                self.unsaved_changes = True
                self.notify(f"Error: {exc}")
        self.notify(f"Deleting transaction {item.id}")
        self.selection.resize(len(self.items))
        return item

    def sync(self) -> None:
        """Reload items from storage keeping the closest valid selection."""

        items = self.store.list()
        row, col = self.selection.selected
        self.buffer = None
        self.items = items
        self.selection.stop_editing()
        self.selection.resize(len(items))
        self.selection.select(row, col)
        self.unsaved_changes = False
        log.debug("synced %d transactions, selection %s", len(items), self.selection)

    def render(self, win, area: Rect) -> None:
        draw_box(win, area, TABLE_TITLE, TABLE_HINT)
        body = area.inner(1, 1)
        if body.height <= 0 or body.width <= len(HIGHLIGHT_SYMBOL):
            return

        pad = len(HIGHLIGHT_SYMBOL)
        widths = column_widths(body.width - pad)
        xs = []
        x = body.x + pad
        for w in widths:
            xs.append(x)
            x += w + COLUMN_SPACING

        safe_addnstr(win, body.y, body.x, " " * body.width, body.width, curses.A_REVERSE)
        for column, w, cx in zip(COLUMNS, widths, xs):
            safe_addnstr(win, body.y, cx, align(column.title, w, column.right), w, curses.A_REVERSE)

        viewport = body.height - 1
        if viewport <= 0:
            return
        sel = self.selection
        sel.set_viewport(viewport)

        start = sel.scroll_offset
        for i, item in enumerate(self.items[start : start + viewport]):
            row = start + i
            y = body.y + 1 + i
            base = curses.A_DIM if row % 2 else curses.A_NORMAL
            is_selected = row == sel.row
            if is_selected:
                base = curses.A_BOLD
            symbol = HIGHLIGHT_SYMBOL if is_selected else " " * pad
            safe_addnstr(win, y, body.x, symbol, pad, base)
            for idx, (column, w, cx) in enumerate(zip(COLUMNS, widths, xs)):
                if is_selected and idx == sel.column:
                    if sel.editing and self.buffer is not None:
                        self._render_editor(win, y, cx, w)
                        continue
                    attr = curses.A_REVERSE
                else:
                    attr = base
                safe_addnstr(win, y, cx, align(column.fmt(item), w, column.right), w, attr)

        if len(self.items) > viewport:
            self._render_scrollbar(win, area, viewport)

    def _render_editor(self, win, y: int, x: int, width: int) -> None:
        visible, cursor = self.buffer.visible_slice(width)
        safe_addnstr(win, y, x, visible.ljust(width), width, curses.A_UNDERLINE | curses.A_BOLD)
        under = visible[cursor] if cursor < len(visible) else " "
        safe_addnstr(win, y, x + cursor, under, 1, curses.A_REVERSE)

    def _render_scrollbar(self, win, area: Rect, viewport: int) -> None:
        track = area.height - 2
        count = len(self.items)
        if track <= 0 or count == 0:
            return
        thumb = max(1, track * viewport // count)
        pos = (track - thumb) * self.selection.scroll_position // max(1, count - 1)
        for i in range(thumb):
            safe_addnstr(win, area.y + 1 + pos + i, area.right - 1, SCROLLBAR_THUMB, 1)
