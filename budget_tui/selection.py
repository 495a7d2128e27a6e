"""Row/column selection state for a scrollable table."""
from __future__ import annotations

import enum


class Mode(enum.Enum):
    BROWSING = "browsing"
    EDITING = "editing"


class SelectionModel:
    """Track the selected cell, scroll offset and edit mode for ``item_count`` rows.

    The row is only unset while the table is empty. Whenever the row moves the
    scroll offset is recomputed so the row stays inside a viewport of
    ``viewport_height`` rows (reported by the renderer via
    :meth:`set_viewport`).
    """

    def __init__(self, item_count: int, column_count: int, viewport_height: int = 1):
        self.item_count = max(0, item_count)
        self.column_count = max(1, column_count)
        self.viewport_height = max(1, viewport_height)
        self.row: int | None = 0 if self.item_count else None
        self.column: int | None = None
        self.scroll_offset = 0
        self.mode = Mode.BROWSING

    def __repr__(self) -> str:
        return (
            f"SelectionModel(row={self.row}, column={self.column}, "
            f"offset={self.scroll_offset}, count={self.item_count}, mode={self.mode.name})"
        )

    @property
    def selected(self) -> tuple[int | None, int | None]:
        return self.row, self.column

    @property
    def editing(self) -> bool:
        return self.mode is Mode.EDITING

    @property
    def scroll_position(self) -> int:
        """Position of the scrollbar thumb."""
        return self.row or 0

    def _set_row(self, row: int | None) -> None:
        self.row = row
        self._sync_scroll()

    def _sync_scroll(self) -> None:
        max_offset = max(0, self.item_count - self.viewport_height)
        if self.row is None:
            self.scroll_offset = 0
            return
        offset = self.scroll_offset
        if self.row < offset:
            offset = self.row
        elif self.row >= offset + self.viewport_height:
            offset = self.row - self.viewport_height + 1
        self.scroll_offset = min(max(0, offset), max_offset)

    def set_viewport(self, height: int) -> None:
        self.viewport_height = max(1, height)
        self._sync_scroll()

    def next_row(self) -> None:
        if self.item_count == 0:
            return
        if self.row is None:
            self._set_row(0)
        else:
            self._set_row(min(self.row + 1, self.item_count - 1))

    def previous_row(self) -> None:
        if self.item_count == 0:
            return
        if self.row is None:
            self._set_row(0)
        else:
            self._set_row(max(self.row - 1, 0))

    def next_column(self) -> None:
        if self.column is None:
            self.column = 0
        else:
            self.column = min(self.column + 1, self.column_count - 1)

    def previous_column(self) -> None:
        if self.column is None:
            self.column = self.column_count - 1
        else:
            self.column = max(self.column - 1, 0)

    def deselect(self) -> None:
        """Drop the column selection but keep the focused row."""
        self.column = None

    def select(self, row: int | None, column: int | None) -> None:
        """Select an absolute cell, clamped to the current bounds."""
        if self.item_count == 0:
            row = None
        elif row is not None:
            row = min(max(0, row), self.item_count - 1)
        else:
            row = 0
        if column is not None:
            column = min(max(0, column), self.column_count - 1)
        self.column = column
        self._set_row(row)
        if self.row is None or self.column is None:
            self.mode = Mode.BROWSING

    def start_editing(self) -> bool:
        if self.row is None or self.column is None:
            return False
        self.mode = Mode.EDITING
        return True

    def stop_editing(self) -> None:
        self.mode = Mode.BROWSING

    def resize(self, new_count: int) -> None:
        """Adopt a new item count, keeping the row within bounds."""
        self.item_count = max(0, new_count)
        if self.item_count == 0:
            self.row = None
            self.mode = Mode.BROWSING
            self.scroll_offset = 0
            return
        if self.row is None:
            self._set_row(0)
        else:
            self._set_row(min(self.row, self.item_count - 1))
