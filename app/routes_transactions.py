# routes_transactions.py
"""
Routes for listing, creating and deleting transactions.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, Query, Response

from app.deps import RecordIdPath, get_store
from app.schemas import ErrorOut, TransactionOut
from app.services.store import RecordStore
from app.services.validation import validate_transaction, validate_transaction_filters

router = APIRouter(prefix="/api/transactions")


@router.get("", response_model=List[TransactionOut])
def list_transactions(
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    type: str | None = Query(None),
    limit: str | None = Query(None),
    store: RecordStore = Depends(get_store),
):
    """
    Transactions, newest first.

    Optional filters: inclusive date range (startDate/endDate), type, limit.
    """
    filters = validate_transaction_filters(start_date, end_date, type, limit)
    return store.list_transactions(filters)


@router.get(
    "/{transaction_id}",
    response_model=TransactionOut,
    responses={404: {"model": ErrorOut}},
)
def get_transaction(transaction_id: RecordIdPath, store: RecordStore = Depends(get_store)):
    return store.get_transaction(transaction_id)


@router.post(
    "",
    response_model=TransactionOut,
    status_code=201,
    responses={400: {"model": ErrorOut}},
)
def create_transaction(
    payload: Dict[str, Any] = Body(...),
    store: RecordStore = Depends(get_store),
):
    """
    Record income, an expense or a debt payment.

    Debt payments must carry debtId of an existing debt; other types must not.
    """
    data = validate_transaction(payload, store.debt_exists)
    return store.create_transaction(data)


@router.delete("/{transaction_id}", status_code=204)
def delete_transaction(transaction_id: RecordIdPath, store: RecordStore = Depends(get_store)):
    """
    Delete by id. A missing id is a no-op and still answers 204.
    """
    store.delete_transaction(transaction_id)
    return Response(status_code=204)
