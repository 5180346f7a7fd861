# routes_investments.py
"""
Routes for investments. Each investment is returned with its ROI (percent).
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, Response

from app.deps import RecordIdPath, get_store
from app.schemas import ErrorOut, InvestmentOut
from app.services.store import RecordStore
from app.services.validation import validate_investment, validate_investment_update

router = APIRouter(prefix="/api/investments")


@router.get("", response_model=List[InvestmentOut])
def list_investments(store: RecordStore = Depends(get_store)):
    return [InvestmentOut.from_record(inv) for inv in store.list_investments()]


@router.post(
    "",
    response_model=InvestmentOut,
    status_code=201,
    responses={400: {"model": ErrorOut}},
)
def create_investment(
    payload: Dict[str, Any] = Body(...),
    store: RecordStore = Depends(get_store),
):
    data = validate_investment(payload)
    return InvestmentOut.from_record(store.create_investment(data))


@router.put(
    "/{investment_id}",
    response_model=InvestmentOut,
    responses={400: {"model": ErrorOut}, 404: {"model": ErrorOut}},
)
def update_investment(
    investment_id: RecordIdPath,
    payload: Dict[str, Any] = Body(...),
    store: RecordStore = Depends(get_store),
):
    """
    Partial update: any of name, investedAmount, currentValue.
    lastUpdated is refreshed even when the body is empty.
    """
    data = validate_investment_update(payload)
    return InvestmentOut.from_record(store.update_investment(investment_id, data))


@router.delete("/{investment_id}", status_code=204)
def delete_investment(investment_id: RecordIdPath, store: RecordStore = Depends(get_store)):
    store.delete_investment(investment_id)
    return Response(status_code=204)
