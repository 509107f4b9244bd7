"""Pytest fixtures and configuration for surveylog tests."""

import os

# Point the module-level engine at a throwaway in-memory DB before the app is imported.
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from surveylog.database.database import Base
from surveylog.database import models  # noqa: F401
from surveylog.database.survey_event_repository import SurveyEventRepository
from surveylog.database.user_repository import UserRepository
from surveylog.models.constants import DeletePolicy


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_session():
    """Create a database session for testing.

    Uses an in-memory SQLite database that is created fresh for each test.
    Foreign keys are switched on by the connect listener in
    surveylog.database.database.
    """
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def user_repository(db_session: Session):
    """UserRepository with the default (cascade) delete policy."""
    return UserRepository(db_session, delete_policy=DeletePolicy.CASCADE)


@pytest.fixture
def restrict_user_repository(db_session: Session):
    """UserRepository that refuses to delete users who own events."""
    return UserRepository(db_session, delete_policy=DeletePolicy.RESTRICT)


@pytest.fixture
def event_repository(db_session: Session):
    """Create a SurveyEventRepository instance for testing."""
    return SurveyEventRepository(db_session)


@pytest.fixture
def test_user(user_repository):
    """A persisted user."""
    return user_repository.create()


@pytest.fixture
def sample_payload():
    """Nested payload exercising every JSON value kind."""
    return {
        "plan": "free",
        "score": 4.5,
        "count": 3,
        "opted_in": True,
        "referrer": None,
        "answers": [
            {"question": "q1", "choice": ["a", "c"]},
            {"question": "q2", "choice": [], "meta": {"skipped": False}},
        ],
    }


@pytest.fixture
def test_client(db_session: Session, monkeypatch):
    """Create a FastAPI test client with overridden database dependency."""
    from surveylog.api.app import app
    from surveylog.database.database import get_db

    monkeypatch.delenv("USER_DELETE_POLICY", raising=False)

    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close the session here, let the fixture handle it

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
