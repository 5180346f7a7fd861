# app/services/finance.py
#
# Financial calculations
# Pure functions over records already loaded from the store: debt progress,
# investment ROI and the overall summary. Nothing here touches the database
# and nothing is cached; callers recompute on every read.

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from models import TransactionType

ZERO = Decimal("0.00")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class DebtProgress:
    paid_amount: Decimal
    remaining_amount: Decimal
    progress: Decimal  # percent of the initial amount paid, may exceed 100


@dataclass(frozen=True)
class Summary:
    total_income: Decimal
    total_expenses: Decimal
    total_debt_payments: Decimal
    cash_balance: Decimal
    total_initial_debt: Decimal
    remaining_debt: Decimal
    total_investments_value: Decimal
    net_position: Decimal


def _money(value) -> Decimal:
    # Numeric columns hand back Decimal; str and int are accepted too.
    if isinstance(value, float):
        raise TypeError("Monetary values must not be floats")
    return Decimal(value)


def percentage(part: Decimal, whole: Decimal) -> Decimal:
    """part / whole * 100, rounded half-up to 2 places; 0 when whole is 0."""
    if whole == 0:
        return ZERO
    return (_money(part) / _money(whole) * HUNDRED).quantize(CENT, rounding=ROUND_HALF_UP)


# ---- Debts ----

def debt_progress(debt, transactions: Iterable) -> DebtProgress:
    """
    Derive paid/remaining/progress for one debt.

    `transactions` may be the full transaction set or only this debt's
    payments; anything that is not a debt_payment for this debt is ignored.
    Over-payment is reported as-is: remaining floors at 0, progress goes past 100.
    """
    paid = ZERO
    for tx in transactions:
        if TransactionType(tx.type) is TransactionType.DEBT_PAYMENT and tx.debt_id == debt.id:
            paid += _money(tx.amount)

    initial = _money(debt.initial_amount)
    remaining = max(ZERO, initial - paid)

    return DebtProgress(
        paid_amount=paid,
        remaining_amount=remaining,
        progress=percentage(paid, initial) if initial > 0 else ZERO,
    )


# ---- Investments ----

def investment_roi(investment) -> Decimal:
    """(current - invested) / invested * 100; 0 when nothing was invested."""
    invested = _money(investment.invested_amount)
    if invested == 0:
        return ZERO
    return percentage(_money(investment.current_value) - invested, invested)


# ---- Summary ----

def summarize(transactions: Iterable, debts: Iterable, investments: Iterable) -> Summary:
    """
    Full recomputation of the summary from one set of records.

    Every transaction type must be accounted for; an unknown type raises
    ValueError instead of being left out of the totals.
    """
    income = expenses = debt_payments = ZERO

    for tx in transactions:
        kind = TransactionType(tx.type)
        amount = _money(tx.amount)
        if kind is TransactionType.INCOME:
            income += amount
        elif kind is TransactionType.EXPENSE:
            expenses += amount
        elif kind is TransactionType.DEBT_PAYMENT:
            debt_payments += amount
        else:
            raise ValueError(f"Unhandled transaction type: {kind!r}")

    cash_balance = income - (expenses + debt_payments)

    total_initial_debt = sum((_money(d.initial_amount) for d in debts), ZERO)
    remaining_debt = max(ZERO, total_initial_debt - debt_payments)

    investments_value = sum((_money(i.current_value) for i in investments), ZERO)

    return Summary(
        total_income=income,
        total_expenses=expenses,
        total_debt_payments=debt_payments,
        cash_balance=cash_balance,
        total_initial_debt=total_initial_debt,
        remaining_debt=remaining_debt,
        total_investments_value=investments_value,
        net_position=cash_balance + investments_value - remaining_debt,
    )
