"""
Shared fixtures: an in-memory SQLite database per test, with foreign keys
enabled, exposed both as a session and through the FastAPI app.
"""

import os

# Keep the application engine off the working directory during tests
os.environ.setdefault("BOOKMARKS_DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from bookmark_manager.database import Base, get_db, init_db, make_engine
from bookmark_manager.main import app


def _memory_engine():
    return make_engine("sqlite://", poolclass=StaticPool)


@pytest.fixture(scope="function")
def session_factory():
    """Session factory bound to a fresh in-memory database."""
    engine = _memory_engine()
    init_db(engine)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def db(session_factory):
    """Create a fresh database session for each test."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(session_factory):
    """Create a test client with a fresh database for each test."""

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
