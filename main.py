# main.py
# Role: Application entry point for the finance tracker.
#       Initializes the FastAPI app, configures logging, creates database
#       tables, seeds demo data, and registers all route modules.

"""
Main FastAPI app for the personal finance tracker.

Here we only:
- configure logging
- create the FastAPI app and its error handlers
- create DB tables (and seed demo data) on startup
- include route modules
"""

import os
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from config import SEED_ON_STARTUP
from db import Base, SessionLocal, engine
from app.errors import register_error_handlers
from app.log import configure_logging
from app.routes_dashboard import router as dashboard_router
from app.routes_debts import router as debts_router
from app.routes_investments import router as investments_router
from app.routes_root import router as root_router
from app.routes_summary import router as summary_router
from app.routes_transactions import router as transactions_router
from app.services.seed import seed_database
from app.services.store import RecordStore

configure_logging()
logger = structlog.get_logger(__name__)


# -------------------------------------------------------------------
# App & DB setup
# -------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create database tables (only if they don't exist yet).
    Base.metadata.create_all(bind=engine)
    logger.info("database_ready", url=engine.url.render_as_string(hide_password=True))

    if SEED_ON_STARTUP:
        db = SessionLocal()
        try:
            seed_database(RecordStore(db))
        finally:
            db.close()

    yield


# FastAPI application instance
app = FastAPI(title="Finance Tracker", lifespan=lifespan)

register_error_handlers(app)

# -------------------------------------------------------------------
# Include routers
# -------------------------------------------------------------------

# Root / landing routes and health check
app.include_router(root_router)

# JSON API: summary, transactions, debts, investments
app.include_router(summary_router)
app.include_router(transactions_router)
app.include_router(debts_router)
app.include_router(investments_router)

# Dashboard (KPI cards, recent activity, debts, investments)
app.include_router(dashboard_router)


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
