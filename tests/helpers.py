import os
import sys
import tempfile
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

# Ensure the project root is on the Python path
sys.path.append(str(Path(__file__).resolve().parents[1]))

from budget_tui import database
from budget_tui.errors import StorageError
from budget_tui.events import Key, KeyEvent
from budget_tui.models import Transaction
from budget_tui.storage import TransactionStore
from budget_tui.ui import Rect


def get_temp_store():
    db_fd, db_path = tempfile.mkstemp()
    os.close(db_fd)
    engine = database.make_engine(db_path)
    database.Base.metadata.create_all(engine)
    store = TransactionStore(database.make_session_factory(engine))
    return store, engine, Path(db_path)


def make_items(count):
    return [
        Transaction(
            id=i + 1,
            timestamp=datetime(2024, 1, i + 1, 9, 30),
            amount=(i + 1) * 100,
            category=f"Cat {i + 1}",
            description=f"Item {i + 1}",
        )
        for i in range(count)
    ]


class MemoryStore:
    """In-memory stand-in for ``TransactionStore`` that records calls."""

    def __init__(self, items=()):
        self.rows = {}
        self.next_id = 1
        self.puts = []
        self.deletes = []
        for item in items:
            self.put(item)
        self.puts.clear()

    def list(self):
        return [self.rows[k] for k in sorted(self.rows)]

    def put(self, item):
        self.puts.append(item)
        ident = item.id
        if ident is None:
            ident = self.next_id
        self.next_id = max(self.next_id, ident + 1)
        self.rows[ident] = Transaction(
            id=ident,
            timestamp=item.timestamp,
            amount=item.amount,
            category=item.category,
            description=item.description,
            credit_account_id=item.credit_account_id,
            debit_account_id=item.debit_account_id,
        )
        return ident

    def put_many(self, items):
        return [self.put(item) for item in items]

    def delete(self, ids):
        self.deletes.append(set(ids))
        for ident in ids:
            self.rows.pop(ident, None)


class FailingStore(MemoryStore):
    """Reads work, every write raises ``StorageError``."""

    def put(self, item):
        if getattr(self, "armed", False):
            raise StorageError("disk full")
        return super().put(item)

    def put_many(self, items):
        raise StorageError("disk full")

    def delete(self, ids):
        raise StorageError("database is locked")


def failing_store(items=()):
    store = FailingStore(items)
    store.armed = True
    return store


class FakeWin:
    """Records every ``addnstr`` call as ``(y, x, text, attr)``."""

    def __init__(self, height=24, width=80):
        self.height = height
        self.width = width
        self.writes = []

    def getmaxyx(self):
        return (self.height, self.width)

    def addnstr(self, y, x, text, n, attr=0):
        self.writes.append((y, x, text[:n], attr))

    def erase(self):
        self.writes.clear()

    def refresh(self):
        pass

    def keypad(self, flag):
        pass

    def clearok(self, flag):
        pass

    def text_at(self, y):
        """Return the last text written on row ``y`` joined left to right."""
        line = {}
        for wy, x, text, _ in self.writes:
            if wy == y:
                for i, ch in enumerate(text):
                    line[x + i] = ch
        if not line:
            return ""
        return "".join(line.get(i, " ") for i in range(max(line) + 1))

    def attr_at(self, y, x):
        attr = None
        for wy, wx, text, a in self.writes:
            if wy == y and wx <= x < wx + len(text):
                attr = a
        return attr


class FakeTerminal:
    def __init__(self, height=24, width=80):
        self.win = FakeWin(height, width)
        self.frames = 0
        self.resizes = 0

    @contextmanager
    def frame(self):
        self.frames += 1
        self.win.erase()
        yield self.win, Rect(0, 0, self.win.height, self.win.width)

    def resized(self):
        self.resizes += 1


def key(name, char="", ctrl=False):
    return KeyEvent(Key[name.upper()], char, ctrl)


def char(c):
    return KeyEvent(Key.CHAR, c)


def typed(text):
    return [char(c) for c in text]
