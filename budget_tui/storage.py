"""SQLAlchemy-backed transaction store."""
from __future__ import annotations

from typing import Iterable

from sqlalchemy import delete as sa_delete
from sqlalchemy.exc import SQLAlchemyError

from .errors import StorageError
from .logging_setup import get_logger
from .models import Transaction, TransactionRecord

log = get_logger(__name__)


class TransactionStore:
    """Create, read, update and delete transactions by id.

    Every method opens its own session from ``session_factory`` so the store
    can be shared by several screens. Database failures surface as
    :class:`StorageError`.
    """

    def __init__(self, session_factory) -> None:
        self._session_factory = session_factory

    def list(self) -> list[Transaction]:
        try:
            with self._session_factory() as session:
                rows = (
                    session.query(TransactionRecord)
                    .order_by(TransactionRecord.timestamp, TransactionRecord.id)
                    .all()
                )
                return [Transaction.from_record(r) for r in rows]
        except SQLAlchemyError as exc:
            log.exception("listing transactions failed")
            raise StorageError(f"could not load transactions: {exc}") from exc

    def put(self, item: Transaction) -> int:
        """Insert ``item`` when it has no id, update it otherwise; return the id."""
        try:
            with self._session_factory() as session:
                rec = self._put(session, item)
                session.commit()
                return rec.id
        except (SQLAlchemyError, OverflowError) as exc:
            log.exception("saving transaction %s failed", item.id)
            raise StorageError(f"could not save transaction: {exc}") from exc

    def put_many(self, items: Iterable[Transaction]) -> list[int]:
        try:
            with self._session_factory() as session:
                recs = [self._put(session, item) for item in items]
                session.commit()
                return [r.id for r in recs]
        except (SQLAlchemyError, OverflowError) as exc:
            log.exception("bulk insert failed")
            raise StorageError(f"could not save transactions: {exc}") from exc

    def delete(self, ids: Iterable[int]) -> None:
        ids = set(ids)
        if not ids:
            return
        try:
            with self._session_factory() as session:
                session.execute(
                    sa_delete(TransactionRecord).where(TransactionRecord.id.in_(ids))
                )
                session.commit()
        except SQLAlchemyError as exc:
            log.exception("deleting transactions %s failed", sorted(ids))
            raise StorageError(f"could not delete transactions: {exc}") from exc

    @staticmethod
    def _put(session, item: Transaction) -> TransactionRecord:
        rec = None
        if item.id is not None:
            rec = session.get(TransactionRecord, item.id)
        if rec is None:
            rec = TransactionRecord(id=item.id)
            session.add(rec)
        item.apply_to(rec)
        session.flush()
        return rec
