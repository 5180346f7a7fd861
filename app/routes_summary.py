# routes_summary.py
"""
Financial summary endpoint.
"""

from fastapi import APIRouter, Depends

from app.deps import get_store
from app.schemas import SummaryOut
from app.services.finance import summarize
from app.services.store import RecordStore

router = APIRouter(prefix="/api")


@router.get("/summary", response_model=SummaryOut)
def get_summary(store: RecordStore = Depends(get_store)):
    """
    Income, expenses, debt and investment totals, recomputed from one
    snapshot of every record on each call.
    """
    snap = store.snapshot()
    return SummaryOut.model_validate(summarize(snap.transactions, snap.debts, snap.investments))
