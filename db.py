# db.py
# Role: Database bootstrap for the FastAPI finance tracker.
#       Defines the SQLAlchemy engine, session factory, and declarative Base.
#       Also ensures the on-disk database directory exists for the default SQLite URL.

"""
Database setup for the finance tracker.

- Uses DATABASE_URL from config (defaults to <project_root>/database/finance.db)
- Ensures the 'database' folder exists when the default SQLite file is used.
"""

import os

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from config import DATABASE_URL, DEFAULT_DB_PATH


def build_engine(url: str):
    """
    Create an engine for the given URL.

    SQLite needs check_same_thread=False for FastAPI (threaded request handling).
    Server databases run at REPEATABLE READ so one aggregation read sees one snapshot.
    """
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url, isolation_level="REPEATABLE READ")


if DATABASE_URL == f"sqlite:///{DEFAULT_DB_PATH}":
    os.makedirs(os.path.dirname(DEFAULT_DB_PATH), exist_ok=True)  # ensure folder exists

engine = build_engine(DATABASE_URL)

# Standard session factory used via dependency injection (see app/deps.py:get_db)
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

# Declarative base class for ORM models
Base = declarative_base()
