# app/services/store.py
#
# Record store
# Repository over a SQLAlchemy Session for transactions, debts and investments.
# Writes are one commit each. Debt progress is read in a single statement.
# The summary snapshot reads all three tables in one session transaction; it is
# isolated from concurrent writes on server databases (REPEATABLE READ), while
# pysqlite issues no BEGIN for plain SELECTs.

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import structlog
from sqlalchemy import and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models import Debt, Investment, Transaction, TransactionType, utcnow
from app.errors import InternalError, NotFoundError
from app.schemas import DebtCreate, InvestmentCreate, InvestmentUpdate, TransactionCreate
from app.services.finance import DebtProgress, debt_progress
from app.services.validation import TransactionFilters

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RecordSnapshot:
    """Every record in the store, as read at one point in time."""

    transactions: Tuple[Transaction, ...]
    debts: Tuple[Debt, ...]
    investments: Tuple[Investment, ...]


class RecordStore:
    """Persistent mapping of Transaction, Debt and Investment records."""

    def __init__(self, db: Session):
        self.db = db

    # ---- write helpers ----

    def _commit(self, action: str, entity: str, obj=None) -> None:
        try:
            self.db.commit()
            if obj is not None:
                self.db.refresh(obj)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("store_write_failed", action=action, entity=entity, exc_info=exc)
            raise InternalError(f"Could not {action} {entity}") from exc

    def _delete_by_id(self, model, entity: str, record_id: int) -> bool:
        """
        Delete one row by id.

        Deleting a missing id is a silent no-op; the return value tells the
        caller whether anything was removed.
        """
        obj = self.db.get(model, record_id)
        if obj is None:
            logger.debug("delete_missing", entity=entity, id=record_id)
            return False
        self.db.delete(obj)
        self._commit("delete", entity)
        logger.info("deleted", entity=entity, id=record_id)
        return True

    # ---- Transactions ----

    def list_transactions(self, filters: Optional[TransactionFilters] = None) -> List[Transaction]:
        """Transactions matching the filters, most recent first."""
        query = self.db.query(Transaction)

        if filters is not None:
            if filters.start is not None:
                query = query.filter(Transaction.date >= filters.start)
            if filters.end_exclusive is not None:
                query = query.filter(Transaction.date < filters.end_exclusive)
            if filters.type is not None:
                query = query.filter(Transaction.type == filters.type)

        # id breaks ties between same-timestamp rows (later insert first)
        query = query.order_by(Transaction.date.desc(), Transaction.id.desc())

        if filters is not None and filters.limit is not None:
            query = query.limit(filters.limit)

        return query.all()

    def get_transaction(self, transaction_id: int) -> Transaction:
        tx = self.db.get(Transaction, transaction_id)
        if tx is None:
            raise NotFoundError("Transaction not found")
        return tx

    def create_transaction(self, data: TransactionCreate) -> Transaction:
        tx = self._build_transaction(data)
        self.db.add(tx)
        self._commit("create", "transaction", tx)
        logger.info("created", entity="transaction", id=tx.id, type=tx.type.value, amount=str(tx.amount))
        return tx

    def create_transactions(self, records: List[TransactionCreate]) -> List[Transaction]:
        """Insert several validated transactions in one commit."""
        objs = [self._build_transaction(r) for r in records]
        if not objs:
            return []
        self.db.add_all(objs)
        self._commit("create", "transactions")
        logger.info("created_batch", entity="transaction", count=len(objs))
        return objs

    @staticmethod
    def _build_transaction(data: TransactionCreate) -> Transaction:
        return Transaction(
            date=data.date or utcnow(),
            type=data.type,
            category=data.category,
            amount=data.amount,
            notes=data.notes,
            debt_id=data.debt_id,
        )

    def delete_transaction(self, transaction_id: int) -> bool:
        return self._delete_by_id(Transaction, "transaction", transaction_id)

    # ---- Debts ----

    def debt_exists(self, debt_id: int) -> bool:
        return self.db.get(Debt, debt_id) is not None

    def find_debt_by_name(self, name: str) -> Optional[Debt]:
        return (
            self.db.query(Debt)
            .filter(Debt.name == name)
            .order_by(Debt.id)
            .first()
        )

    def list_debts(self) -> List[Debt]:
        return self.db.query(Debt).order_by(Debt.id).all()

    def get_debt(self, debt_id: int) -> Debt:
        debt = self.db.get(Debt, debt_id)
        if debt is None:
            raise NotFoundError("Debt not found")
        return debt

    def debts_with_progress(self, debt_id: Optional[int] = None) -> List[Tuple[Debt, DebtProgress]]:
        """
        Every debt (or just one) with its payment progress.

        One LEFT JOIN of debts to their debt_payment rows; the sums are done
        in Decimal afterwards. No per-debt queries.
        """
        query = (
            self.db.query(Debt, Transaction)
            .outerjoin(
                Transaction,
                and_(
                    Transaction.debt_id == Debt.id,
                    Transaction.type == TransactionType.DEBT_PAYMENT,
                ),
            )
            .order_by(Debt.id, Transaction.id)
        )
        if debt_id is not None:
            query = query.filter(Debt.id == debt_id)

        debts: Dict[int, Debt] = {}
        payments: Dict[int, List[Transaction]] = {}
        for debt, payment in query.all():
            debts.setdefault(debt.id, debt)
            bucket = payments.setdefault(debt.id, [])
            if payment is not None:
                bucket.append(payment)

        return [(debt, debt_progress(debt, payments[did])) for did, debt in debts.items()]

    def debt_with_progress(self, debt_id: int) -> Tuple[Debt, DebtProgress]:
        rows = self.debts_with_progress(debt_id)
        if not rows:
            raise NotFoundError("Debt not found")
        return rows[0]

    def create_debt(self, data: DebtCreate) -> Debt:
        debt = Debt(name=data.name, initial_amount=data.initial_amount)
        self.db.add(debt)
        self._commit("create", "debt", debt)
        logger.info("created", entity="debt", id=debt.id, initial_amount=str(debt.initial_amount))
        return debt

    def delete_debt(self, debt_id: int) -> bool:
        """Remove the debt only. Its payment transactions stay as they are."""
        return self._delete_by_id(Debt, "debt", debt_id)

    # ---- Investments ----

    def list_investments(self) -> List[Investment]:
        return self.db.query(Investment).order_by(Investment.id).all()

    def create_investment(self, data: InvestmentCreate) -> Investment:
        inv = Investment(
            name=data.name,
            invested_amount=data.invested_amount,
            current_value=data.current_value,
            last_updated=utcnow(),
        )
        self.db.add(inv)
        self._commit("create", "investment", inv)
        logger.info("created", entity="investment", id=inv.id)
        return inv

    def update_investment(self, investment_id: int, data: InvestmentUpdate) -> Investment:
        """Apply the fields present in `data`; last_updated is always refreshed."""
        inv = self.db.get(Investment, investment_id)
        if inv is None:
            raise NotFoundError("Investment not found")

        changes = data.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(inv, field, value)
        inv.last_updated = utcnow()

        self._commit("update", "investment", inv)
        logger.info("updated", entity="investment", id=inv.id, fields=sorted(changes))
        return inv

    def delete_investment(self, investment_id: int) -> bool:
        return self._delete_by_id(Investment, "investment", investment_id)

    # ---- Snapshot ----

    def snapshot(self) -> RecordSnapshot:
        """
        Load all three record sets inside one session transaction.

        On server databases the engine runs at REPEATABLE READ, so the three
        reads see the same committed state. SQLite gives no such guarantee
        here: the driver does not open a transaction for SELECTs.
        """
        try:
            return RecordSnapshot(
                transactions=tuple(self.db.query(Transaction).order_by(Transaction.id).all()),
                debts=tuple(self.db.query(Debt).order_by(Debt.id).all()),
                investments=tuple(self.db.query(Investment).order_by(Investment.id).all()),
            )
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("store_read_failed", action="snapshot", exc_info=exc)
            raise InternalError("Could not read records") from exc
