"""Single-line text input used while a table cell is being edited."""
from __future__ import annotations

from .events import Key, KeyEvent


class EditBuffer:
    """Text plus a cursor, indexed by character.

    A buffer created with ``seed`` starts out *pristine*: typing a character
    replaces the whole seed, while moving the cursor or deleting edits the
    seed in place.
    """

    def __init__(self, seed: str = ""):
        self.text = seed
        self.cursor = len(seed)
        self.pristine = bool(seed)

    def __repr__(self) -> str:
        return f"EditBuffer(text={self.text!r}, cursor={self.cursor})"

    def reset(self) -> None:
        self.text = ""
        self.cursor = 0
        self.pristine = False

    def accept(self) -> str:
        value = self.text
        self.reset()
        return value

    def cancel(self) -> None:
        self.reset()

    def insert(self, chars: str) -> None:
        if self.pristine:
            self.reset()
        self.text = self.text[: self.cursor] + chars + self.text[self.cursor :]
        self.cursor += len(chars)

    def handle_raw_input(self, event: KeyEvent) -> bool:
        """Apply one key press; return ``True`` when the buffer used it."""

        if event.key is Key.CHAR and event.ctrl:
            return self._handle_chord(event.char)
        if event.printable:
            self.insert(event.char)
            return True

        key = event.key
        if key not in (Key.BACKSPACE, Key.DELETE, Key.LEFT, Key.RIGHT, Key.HOME, Key.END):
            return False
        self.pristine = False
        if key is Key.BACKSPACE:
            if self.cursor > 0:
                self.text = self.text[: self.cursor - 1] + self.text[self.cursor :]
                self.cursor -= 1
        elif key is Key.DELETE:
            self.text = self.text[: self.cursor] + self.text[self.cursor + 1 :]
        elif key is Key.LEFT:
            self.cursor = max(0, self.cursor - 1)
        elif key is Key.RIGHT:
            self.cursor = min(len(self.text), self.cursor + 1)
        elif key is Key.HOME:
            self.cursor = 0
        elif key is Key.END:
            self.cursor = len(self.text)
        return True

    def _handle_chord(self, char: str) -> bool:
        if char not in ("a", "e", "k", "u", "w"):
            return False
        self.pristine = False
        if char == "a":
            self.cursor = 0
        elif char == "e":
            self.cursor = len(self.text)
        elif char == "u":
            self.text = self.text[self.cursor :]
            self.cursor = 0
        elif char == "k":
            self.text = self.text[: self.cursor]
        elif char == "w":
            head = self.text[: self.cursor].rstrip()
            cut = len(head)
            while cut > 0 and not head[cut - 1].isspace():
                cut -= 1
            self.text = self.text[:cut] + self.text[self.cursor :]
            self.cursor = cut
        return True

    def visible_slice(self, width: int) -> tuple[str, int]:
        """Return the part of the text that fits in ``width`` columns and the
        cursor column inside it.

        One column is kept free for the cursor so it can sit after the last
        character.
        """

        if width <= 0:
            return "", 0
        room = width - 1
        scroll = max(self.cursor, room) - room
        return self.text[scroll : scroll + width], self.cursor - scroll
