"""
Request and response schemas for the finance tracker API.

Wire names are camelCase (initialAmount, debtId, totalIncome, ...).
Monetary values are Decimal end to end and serialize as decimal strings.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    field_validator,
)
from pydantic.alias_generators import to_camel

from models import Debt, Investment, TransactionType
from app.services.finance import DebtProgress, investment_roi

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# Numeric(12, 2) columns: at most 12 digits, 2 of them after the point
PositiveMoney = Annotated[Decimal, Field(gt=0, max_digits=12, decimal_places=2)]
NonNegativeMoney = Annotated[Decimal, Field(ge=0, max_digits=12, decimal_places=2)]

# Integer columns are signed 64-bit
MIN_RECORD_ID = -(2**63)
MAX_RECORD_ID = 2**63 - 1
RecordId = Annotated[int, Field(ge=1, le=MAX_RECORD_ID)]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def parse_timestamp(value):
    """
    Accept ISO-8601 dates or datetimes; return a naive UTC datetime.

    A bare date ("2025-01-31") becomes midnight of that day.
    """
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip())
        except ValueError:
            raise ValueError("Invalid date, expected ISO-8601 (YYYY-MM-DD or YYYY-MM-DDTHH:MM:SS)")
    if isinstance(value, datetime) and value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# -------------------------------------------------------------------
# Requests
# -------------------------------------------------------------------

class TransactionCreate(CamelModel):
    """Body of POST /api/transactions."""

    type: TransactionType = Field(
        validation_alias=AliasChoices("type", "kind"),
        description="income | expense | debt_payment",
    )
    category: NonEmptyStr = Field(..., description="Category (e.g., Salary, Rent)")
    amount: PositiveMoney = Field(..., description="Strictly positive amount")
    date: Optional[datetime] = Field(None, description="When it happened; defaults to now")
    notes: Optional[str] = Field(None, description="Optional notes")
    debt_id: Optional[RecordId] = Field(None, description="Debt paid off; only for debt_payment")

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, v):
        return None if v is None else parse_timestamp(v)

    @field_validator("notes")
    @classmethod
    def _blank_notes_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class DebtCreate(CamelModel):
    """Body of POST /api/debts."""

    name: NonEmptyStr
    initial_amount: PositiveMoney


class InvestmentCreate(CamelModel):
    """Body of POST /api/investments."""

    name: NonEmptyStr
    invested_amount: NonNegativeMoney
    current_value: NonNegativeMoney


class InvestmentUpdate(CamelModel):
    """
    Body of PUT /api/investments/{id}.

    Any subset of the fields; fields left out keep their value.
    An explicit null is rejected by the field types.
    """

    name: NonEmptyStr = None
    invested_amount: NonNegativeMoney = None
    current_value: NonNegativeMoney = None


# -------------------------------------------------------------------
# Responses
# -------------------------------------------------------------------

class TransactionOut(CamelModel):
    id: int
    date: datetime
    type: TransactionType
    category: str
    amount: Decimal
    notes: Optional[str] = None
    debt_id: Optional[int] = None
    created_at: datetime


class DebtOut(CamelModel):
    id: int
    name: str
    initial_amount: Decimal
    created_at: datetime


class DebtWithProgressOut(DebtOut):
    paid_amount: Decimal
    remaining_amount: Decimal
    progress: Decimal

    @classmethod
    def from_record(cls, debt: Debt, progress: DebtProgress) -> "DebtWithProgressOut":
        return cls(
            id=debt.id,
            name=debt.name,
            initial_amount=debt.initial_amount,
            created_at=debt.created_at,
            paid_amount=progress.paid_amount,
            remaining_amount=progress.remaining_amount,
            progress=progress.progress,
        )


class InvestmentOut(CamelModel):
    id: int
    name: str
    invested_amount: Decimal
    current_value: Decimal
    last_updated: datetime
    roi: Decimal

    @classmethod
    def from_record(cls, investment: Investment) -> "InvestmentOut":
        return cls(
            id=investment.id,
            name=investment.name,
            invested_amount=investment.invested_amount,
            current_value=investment.current_value,
            last_updated=investment.last_updated,
            roi=investment_roi(investment),
        )


class SummaryOut(CamelModel):
    total_income: Decimal
    total_expenses: Decimal
    total_debt_payments: Decimal
    cash_balance: Decimal
    total_initial_debt: Decimal
    remaining_debt: Decimal
    total_investments_value: Decimal
    net_position: Decimal


class ErrorOut(BaseModel):
    message: str
    field: Optional[str] = None
