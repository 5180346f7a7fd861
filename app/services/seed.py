# app/services/seed.py
#
# Demo data
# Fills an empty database with one debt, one investment and a few
# transactions so the dashboard has something to show on first run.

from datetime import timedelta

import structlog

from models import utcnow
from app.services.store import RecordStore
from app.services.validation import (
    TransactionFilters,
    validate_debt,
    validate_investment,
    validate_transaction,
)

logger = structlog.get_logger(__name__)


def seed_database(store: RecordStore) -> bool:
    """
    Seed demo records when there are no transactions yet.

    Returns True if anything was inserted.
    """
    if store.list_transactions(TransactionFilters(limit=1)):
        return False

    car_loan = store.create_debt(validate_debt({"name": "Car Loan", "initialAmount": "50000.00"}))

    store.create_investment(
        validate_investment(
            {"name": "S&P 500 ETF", "investedAmount": "10000.00", "currentValue": "12500.00"}
        )
    )

    now = utcnow()
    rows = [
        {"type": "income", "category": "Salary", "amount": "8500.00",
         "date": now - timedelta(days=5), "notes": "Monthly salary"},
        {"type": "expense", "category": "Rent", "amount": "2500.00",
         "date": now - timedelta(days=4), "notes": "Apartment rent"},
        {"type": "expense", "category": "Groceries", "amount": "450.50",
         "date": now - timedelta(days=2), "notes": "Weekly shopping"},
        {"type": "debt_payment", "category": "Loan Repayment", "amount": "1000.00",
         "date": now - timedelta(days=1), "notes": "Car loan installment", "debtId": car_loan.id},
    ]
    store.create_transactions([validate_transaction(r, store.debt_exists) for r in rows])

    logger.info("seeded_demo_data", debts=1, investments=1, transactions=len(rows))
    return True
