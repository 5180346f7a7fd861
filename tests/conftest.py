"""
Shared fixtures.

Every test gets a fresh in-memory SQLite database. The API client uses the
same session through a get_db override, so tests can arrange records with
the store and assert through HTTP (or the other way round).
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from db import Base
from main import app
from app.deps import get_db
from app.services.store import RecordStore


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db):
    return RecordStore(db)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        # No context manager: startup (table creation on the real DB, seeding) is skipped
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
