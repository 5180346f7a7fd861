# models.py
# Role: SQLAlchemy ORM models for the finance tracker domain.
#       Defines transactions, debts and investments. Derived figures
#       (debt progress, ROI, summary) are never stored; see app/services/finance.py.

import enum
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    DateTime,
    Enum,
    Integer,
    Numeric,
    String,
    Text,
)

from db import Base

# Precision/scale shared by every monetary column
MONEY = Numeric(12, 2, asdecimal=True)


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (the storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TransactionType(str, enum.Enum):
    """Closed set of transaction kinds."""

    INCOME = "income"
    EXPENSE = "expense"
    DEBT_PAYMENT = "debt_payment"


class Transaction(Base):
    """
    ORM model representing a single financial transaction.

    Transactions are immutable once created: they are inserted and deleted,
    never updated. A debt_payment row points at the debt it pays off through
    debt_id; the link is a weak reference, so deleting the debt leaves the
    payment in place.
    """

    __tablename__ = "transactions"

    # Primary key
    id = Column(Integer, primary_key=True, index=True)

    # When the money moved (defaults to insertion time)
    date = Column(DateTime, nullable=False, default=utcnow, index=True)

    type = Column(
        Enum(
            TransactionType,
            name="transaction_type",
            values_callable=lambda e: [m.value for m in e],
            native_enum=False,
            validate_strings=True,
        ),
        nullable=False,
        index=True,
    )

    # Free-text category, e.g. "Salary", "Rent"
    category = Column(String, nullable=False)

    # Always positive; the type decides the direction
    amount = Column(MONEY, nullable=False)

    # Optional free-text notes
    notes = Column(Text, nullable=True)

    # Only set for debt_payment. No FOREIGN KEY: payments outlive their debt.
    debt_id = Column(Integer, nullable=True, index=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)


class Debt(Base):
    """A debt being paid down through debt_payment transactions."""

    __tablename__ = "debts"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    initial_amount = Column(MONEY, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)


class Investment(Base):
    """An investment position, valued by hand."""

    __tablename__ = "investments"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    invested_amount = Column(MONEY, nullable=False)
    current_value = Column(MONEY, nullable=False)

    # Refreshed on every update
    last_updated = Column(DateTime, nullable=False, default=utcnow)
