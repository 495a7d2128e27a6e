from pathlib import Path
from sqlalchemy import create_engine, text, inspect
from sqlalchemy.orm import sessionmaker, declarative_base

Base = declarative_base()

# Columns added after the first release of the table; legacy databases are
# upgraded in place by ``init_db``.
LATE_COLUMNS = {
    "category": "TEXT",
    "credit_acc_id": "INTEGER",
    "debit_acc_id": "INTEGER",
}


def make_engine(db_path: Path | str):
    """Create a SQLite engine for ``db_path`` (``":memory:"`` is allowed)."""
    return create_engine(f"sqlite:///{db_path}", echo=False, future=True)


def make_session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


def init_db(engine) -> None:
    """Create the transactions table and add any missing columns."""
    from . import models  # noqa: F401

    insp = inspect(engine)
    if "fin_transaction" not in set(insp.get_table_names()):
        Base.metadata.create_all(engine)
        return

    with engine.begin() as conn:
        cols = [r[1] for r in conn.execute(text("PRAGMA table_info(fin_transaction)"))]
        for name, sql_type in LATE_COLUMNS.items():
            if name not in cols:
                conn.execute(
                    text(f"ALTER TABLE fin_transaction ADD COLUMN {name} {sql_type}")
                )
        conn.execute(
            text(
                "CREATE INDEX IF NOT EXISTS ix_fin_transaction_timestamp ON fin_transaction(timestamp)"
            )
        )
