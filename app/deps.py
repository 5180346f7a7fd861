# app/deps.py
# Role: Shared application-level dependencies.
#       Provides the Jinja2 templates loader, the standard SQLAlchemy
#       database session dependency, and the record store built on top of it.

"""
Shared dependencies for the finance tracker app.
"""

import os
from typing import Annotated, Generator

from fastapi import Depends, Path
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from db import SessionLocal
from app.schemas import MAX_RECORD_ID, MIN_RECORD_ID
from app.services.store import RecordStore

# -------------------------------------------------------------------
# Templates
# -------------------------------------------------------------------

# Jinja2 templates loader (used by the HTML dashboard)
TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "templates")
templates = Jinja2Templates(directory=TEMPLATES_DIR)

# -------------------------------------------------------------------
# Database dependency
# -------------------------------------------------------------------

def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session and ensures it is closed.

    Typical usage in routes:
        db: Session = Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_store(db: Session = Depends(get_db)) -> RecordStore:
    """Record store bound to the request's session."""
    return RecordStore(db)


# Path ids outside the 64-bit column range are rejected with a 400
RecordIdPath = Annotated[int, Path(ge=MIN_RECORD_ID, le=MAX_RECORD_ID)]
