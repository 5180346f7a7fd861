# app/routes_dashboard.py

from fastapi import APIRouter, Request, Depends

from .deps import templates, get_store
from app.schemas import DebtWithProgressOut, InvestmentOut
from app.services.finance import debt_progress, summarize
from app.services.store import RecordStore

router = APIRouter()

# Number of rows in the "Recent activity" panel
RECENT_LIMIT = 5


@router.get("/dashboard")
def dashboard_page(
    request: Request,
    store: RecordStore = Depends(get_store),
):
    # Every panel is computed from the same snapshot
    snap = store.snapshot()
    summary = summarize(snap.transactions, snap.debts, snap.investments)

    recent_transactions = sorted(
        snap.transactions,
        key=lambda tx: (tx.date, tx.id),
        reverse=True,
    )[:RECENT_LIMIT]

    debts = [
        DebtWithProgressOut.from_record(debt, debt_progress(debt, snap.transactions))
        for debt in snap.debts
    ]
    investments = [InvestmentOut.from_record(inv) for inv in snap.investments]

    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "summary": summary,
            "recent_transactions": recent_transactions,
            "debts": debts,
            "investments": investments,
        },
    )
