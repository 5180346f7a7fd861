# routes_debts.py
"""
Routes for debts and their repayment progress.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, Response

from app.deps import RecordIdPath, get_store
from app.schemas import DebtOut, DebtWithProgressOut, ErrorOut
from app.services.store import RecordStore
from app.services.validation import validate_debt

router = APIRouter(prefix="/api/debts")


@router.get("", response_model=List[DebtWithProgressOut])
def list_debts(store: RecordStore = Depends(get_store)):
    """
    All debts, each with paidAmount, remainingAmount and progress (percent).
    """
    return [
        DebtWithProgressOut.from_record(debt, progress)
        for debt, progress in store.debts_with_progress()
    ]


@router.get(
    "/{debt_id}",
    response_model=DebtWithProgressOut,
    responses={404: {"model": ErrorOut}},
)
def get_debt(debt_id: RecordIdPath, store: RecordStore = Depends(get_store)):
    debt, progress = store.debt_with_progress(debt_id)
    return DebtWithProgressOut.from_record(debt, progress)


@router.post(
    "",
    response_model=DebtOut,
    status_code=201,
    responses={400: {"model": ErrorOut}},
)
def create_debt(
    payload: Dict[str, Any] = Body(...),
    store: RecordStore = Depends(get_store),
):
    data = validate_debt(payload)
    return store.create_debt(data)


@router.delete("/{debt_id}", status_code=204)
def delete_debt(debt_id: RecordIdPath, store: RecordStore = Depends(get_store)):
    """
    Delete the debt. Payment transactions that reference it are kept.
    A missing id is a no-op and still answers 204.
    """
    store.delete_debt(debt_id)
    return Response(status_code=204)
