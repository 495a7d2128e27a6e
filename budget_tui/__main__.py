"""Module entry point for running the dashboard via ``python -m budget_tui``.

Settings and the database are prepared before curses takes over the
terminal, so the confirmation prompt for a new database file can use a normal
``questionary`` prompt. :func:`curses.wrapper` then initializes and tears
down the curses session around :func:`main`.
"""

import curses
import sys

import questionary

from .app import AppController
from .bridge import Channel, InputBridge
from .config import Settings
from .database import init_db, make_engine, make_session_factory
from .logging_setup import configure_logging, get_logger
from .storage import TransactionStore
from .ui import CursesTerminal, curses_reader, init_colors, keypad_mode, temp_cursor

log = get_logger(__name__)


def main(stdscr, store: TransactionStore, settings: Settings) -> None:
    """Run the dashboard inside an initialized curses session."""
    curses.raw()
    init_colors()
    input_win = curses.newwin(1, 1, 0, 0)
    with temp_cursor(0), keypad_mode(input_win):
        channel = Channel()
        InputBridge(curses_reader(input_win), channel).start()
        app = AppController(
            store,
            CursesTerminal(stdscr),
            notification_limit=settings.notification_limit,
            sample_size=settings.sample_size,
        )
        app.run(channel)


def entry_point() -> None:
    settings = Settings.from_env()
    configure_logging(settings.log_file, settings.log_level)

    if not settings.db_path.exists():
        create = questionary.confirm(
            f"Database {settings.db_path} does not exist. Create it?", default=True
        ).ask()
        if not create:
            sys.exit(1)

    engine = make_engine(settings.db_path)
    init_db(engine)
    store = TransactionStore(make_session_factory(engine))
    log.info("starting with database %s", settings.db_path)
    try:
        curses.wrapper(main, store, settings)
    finally:
        engine.dispose()


if __name__ == "__main__":  # pragma: no cover - manual execution entry
    entry_point()
