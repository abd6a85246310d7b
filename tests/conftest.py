"""
Shared test configuration: a throwaway SQLite database per test, a store on
top of it, and a TestClient whose requests use the same database.
"""

import os

import pytest

# read once at import time by app.db.base
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENV", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from app.db.base import Base, build_engine, get_db  # noqa: E402
from app.db.store import EntityStore  # noqa: E402
from app.main import app  # noqa: E402


@pytest.fixture
def engine(tmp_path):
    test_engine = build_engine(f"sqlite:///{tmp_path / 'marketplace-test.db'}")
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db):
    return EntityStore(db)


@pytest.fixture
def fresh_store(session_factory):
    """Returns a store on a brand-new session, to observe committed state only."""
    sessions = []

    def _make():
        session = session_factory()
        sessions.append(session)
        return EntityStore(session)

    yield _make
    for session in sessions:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
