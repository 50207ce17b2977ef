"""
Test configuration and fixtures for pytest.

This module provides shared fixtures used across all tests:
- Test database (SQLite in-memory for speed)
- Test client (FastAPI TestClient)
- Security components (hasher, issuer)
- User factories and authentication helpers
"""

import os

# Settings are read at import time: configure the environment first
os.environ.setdefault("SECRET_KEY", "test-secret-key-0123456789abcdef")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("GOOGLE_OAUTH_ENABLED", "false")

import pytest
from typing import Generator

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from starter_api.core.security import PasswordHasher, TokenClaims, TokenIssuer
from starter_api.db.base import Base
from starter_api.db.session import get_db
from starter_api.db.user_store import UserStore
from starter_api.main import app
from starter_api.models.user import User


TEST_SECRET = os.environ["SECRET_KEY"]
TEST_PASSWORD = "testpassword"


# ---------------------------------------------------------------------------
# TEST DATABASE SETUP
# ---------------------------------------------------------------------------
# StaticPool keeps the same in-memory connection across all operations

SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},  # Required for SQLite
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# ---------------------------------------------------------------------------
# DATABASE FIXTURES
# ---------------------------------------------------------------------------

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Create a fresh database for each test function.

    - Creates all tables
    - Yields a session for the test
    - Drops all tables after test (clean slate)
    """
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store(db: Session) -> UserStore:
    return UserStore(db)


@pytest.fixture
def client(db: Session) -> Generator[TestClient, None, None]:
    """
    Create a test client with the test database.

    Overrides the get_db dependency to use our test database.
    """
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# SECURITY FIXTURES
# ---------------------------------------------------------------------------

@pytest.fixture
def hasher() -> PasswordHasher:
    """Low work factor keeps the suite fast."""
    return PasswordHasher(rounds=4)


@pytest.fixture
def issuer() -> TokenIssuer:
    return TokenIssuer(secret_key=TEST_SECRET)


# ---------------------------------------------------------------------------
# USER FIXTURES
# ---------------------------------------------------------------------------

@pytest.fixture
def test_user(db: Session, hasher: PasswordHasher) -> User:
    """
    A local account.

    Returns:
        User "testuser" with password "testpassword"
    """
    user = User(
        username="testuser",
        fullname="Test User",
        hashed_password=hasher.hash(TEST_PASSWORD),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def google_user(db: Session) -> User:
    """A Google-only account (no password hash)."""
    user = User(
        username="jane@example.com",
        fullname="Jane Google",
        google_id="google-sub-42",
        avatar="https://example.com/jane.png",
        hashed_password=None,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def test_user_token(test_user: User, issuer: TokenIssuer) -> str:
    return issuer.issue(TokenClaims(subject=str(test_user.id), username=test_user.username))


@pytest.fixture
def auth_headers(test_user_token: str) -> dict:
    """
    Create authorization headers with the test user's token.
    """
    return {"Authorization": f"Bearer {test_user_token}"}
