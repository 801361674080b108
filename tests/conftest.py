"""Shared fixtures for the loan eligibility tests."""
import os

# Must be set before loan_eligibility.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from loan_eligibility.database import Base, get_db
from loan_eligibility.main import app
from loan_eligibility.api.routes import get_engine
from loan_eligibility.scoring import EligibilityEngine
from tests.helpers import FixedRandom


@pytest.fixture
def db_session():
    """In-memory SQLite session with the schema created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def jitter():
    """Jitter drawn by the API's engine; tests may reassign ``jitter.delta``."""
    return FixedRandom(0)


@pytest.fixture
def app_overrides(db_session, jitter):
    """Route the app's DB session and engine to the test doubles."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_engine] = lambda: EligibilityEngine(jitter)
    try:
        yield app
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def client(app_overrides):
    """Test client wired to the SQLite session and a fixed-jitter engine."""
    return TestClient(app_overrides)


@pytest.fixture
def server_error_client(app_overrides):
    """Like ``client``, but returns 500 responses instead of raising."""
    return TestClient(app_overrides, raise_server_exceptions=False)
