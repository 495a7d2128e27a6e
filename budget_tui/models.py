from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Index,
)

from .database import Base


class TransactionRecord(Base):
    """Database row for a financial transaction."""

    __tablename__ = "fin_transaction"

    id = Column("transaction_id", Integer, primary_key=True, autoincrement=True)
    timestamp = Column(DateTime, default=datetime.now)
    credit_acc_id = Column(Integer)
    debit_acc_id = Column(Integer)
    amount = Column(Integer, nullable=False, default=0)
    category = Column(String)
    description = Column(String)

    __table_args__ = (Index("ix_fin_transaction_timestamp", "timestamp"),)


@dataclass(frozen=True)
class Transaction:
    """A transaction as seen by the UI.

    ``amount`` is stored in minor units (cents). ``id`` is ``None`` until the
    storage layer has persisted the item.
    """

    timestamp: datetime
    amount: int = 0
    category: str | None = None
    description: str | None = None
    id: int | None = None
    credit_account_id: int | None = None
    debit_account_id: int | None = None

    @classmethod
    def from_record(cls, rec: TransactionRecord) -> "Transaction":
        return cls(
            id=rec.id,
            timestamp=rec.timestamp,
            amount=rec.amount or 0,
            category=rec.category,
            description=rec.description,
            credit_account_id=rec.credit_acc_id,
            debit_account_id=rec.debit_acc_id,
        )

    def apply_to(self, rec: TransactionRecord) -> TransactionRecord:
        """Copy every field except the id onto ``rec``."""
        rec.timestamp = self.timestamp
        rec.amount = self.amount
        rec.category = self.category
        rec.description = self.description
        rec.credit_acc_id = self.credit_account_id
        rec.debit_acc_id = self.debit_account_id
        return rec


def generate_sample_transactions(count: int, start: int = 0) -> list[Transaction]:
    """Build ``count`` throwaway transactions for the debug hotkey."""

    return [
        Transaction(
            timestamp=datetime(2000 + num, 2, 3, 4, 5, 6),
            amount=num * 100,
            category=f"Category #{num + 1}",
            description=f"Description #{num + 1}",
            credit_account_id=1,
            debit_account_id=2,
        )
        for num in range(start, start + count)
    ]
