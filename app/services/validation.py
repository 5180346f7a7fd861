# app/services/validation.py
#
# Validation layer
# Turns raw client input (parsed JSON bodies, query strings, CSV rows) into
# well-typed records ready for the store, or raises ValidationError naming
# the first offending field. Nothing here writes to the database.

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Callable, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from models import TransactionType
from app.errors import ValidationError
from app.schemas import (
    MAX_RECORD_ID,
    CamelModel,
    DebtCreate,
    InvestmentCreate,
    InvestmentUpdate,
    TransactionCreate,
    parse_timestamp,
)

ModelT = TypeVar("ModelT", bound=BaseModel)

CENT = Decimal("0.01")


@dataclass(frozen=True)
class TransactionFilters:
    """Parsed query of GET /api/transactions. Bounds are [start, end_exclusive)."""

    start: Optional[datetime] = None
    end_exclusive: Optional[datetime] = None
    type: Optional[TransactionType] = None
    limit: Optional[int] = None


def _first_error(exc: PydanticValidationError) -> ValidationError:
    err = exc.errors()[0]
    field = ".".join(str(p) for p in err.get("loc", ())) or None
    message = str(err.get("msg", "Invalid value"))
    # Custom validators surface as "Value error, <our message>"
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return ValidationError(field, message)


def parse_model(model_cls: Type[ModelT], raw: Any) -> ModelT:
    """Validate `raw` against a schema, failing on the first bad field."""
    if not isinstance(raw, Mapping):
        raise ValidationError(None, "Request body must be a JSON object")
    try:
        return model_cls.model_validate(dict(raw))
    except PydanticValidationError as exc:
        raise _first_error(exc) from None


def _quantize_money(record: CamelModel, *fields: str) -> None:
    for name in fields:
        value = getattr(record, name, None)
        if value is not None:
            setattr(record, name, value.quantize(CENT))


# ---- Entities ----

def validate_transaction(raw: Any, debt_exists: Callable[[int], bool]) -> TransactionCreate:
    """
    Validate a new transaction.

    The debt reference must be present for debt_payment (and point to an
    existing debt) and absent for every other type.
    """
    tx = parse_model(TransactionCreate, raw)

    if tx.type is TransactionType.DEBT_PAYMENT:
        if tx.debt_id is None:
            raise ValidationError("debtId", "Debt payments must reference a debt")
        if not debt_exists(tx.debt_id):
            raise ValidationError("debtId", f"Debt {tx.debt_id} does not exist")
    elif tx.debt_id is not None:
        raise ValidationError("debtId", "Only debt payments can reference a debt")

    _quantize_money(tx, "amount")
    return tx


def validate_debt(raw: Any) -> DebtCreate:
    debt = parse_model(DebtCreate, raw)
    _quantize_money(debt, "initial_amount")
    return debt


def validate_investment(raw: Any) -> InvestmentCreate:
    inv = parse_model(InvestmentCreate, raw)
    _quantize_money(inv, "invested_amount", "current_value")
    return inv


def validate_investment_update(raw: Any) -> InvestmentUpdate:
    upd = parse_model(InvestmentUpdate, raw)
    _quantize_money(upd, "invested_amount", "current_value")
    return upd


# ---- Query parameters ----

def parse_optional_bound(name: str, value: Optional[str]) -> Optional[datetime]:
    if value is None or not value.strip():
        return None
    try:
        return parse_timestamp(value)
    except ValueError as exc:
        raise ValidationError(name, str(exc)) from None


def _is_date_only(value: str) -> bool:
    try:
        date.fromisoformat(value.strip())
    except ValueError:
        return False
    return True


def validate_transaction_filters(
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    type: Optional[str] = None,
    limit: Optional[str] = None,
) -> TransactionFilters:
    """
    Parse the transaction listing query.

    Both bounds are inclusive. A date-only endDate covers the whole day.
    """
    start = parse_optional_bound("startDate", start_date)
    end = parse_optional_bound("endDate", end_date)

    end_exclusive = None
    if end is not None:
        if _is_date_only(end_date):
            end_exclusive = end + timedelta(days=1)
        else:
            end_exclusive = end + timedelta(microseconds=1)

    kind = None
    if type is not None and type.strip():
        try:
            kind = TransactionType(type.strip())
        except ValueError:
            allowed = ", ".join(t.value for t in TransactionType)
            raise ValidationError("type", f"Type must be one of: {allowed}") from None

    limit_val = None
    if limit is not None and str(limit).strip():
        try:
            limit_val = int(str(limit).strip())
        except ValueError:
            raise ValidationError("limit", "Limit must be an integer") from None
        if limit_val < 1:
            raise ValidationError("limit", "Limit must be at least 1")
        if limit_val > MAX_RECORD_ID:
            raise ValidationError("limit", f"Limit must be at most {MAX_RECORD_ID}")

    return TransactionFilters(start=start, end_exclusive=end_exclusive, type=kind, limit=limit_val)
