# backend/tests/conftest.py
"""
Pytest configuration for the FarmDirect messaging backend.

Every test runs against a fresh in-memory SQLite database. The engine uses a
StaticPool so the app, the TestClient worker threads and the test body all
see the same connection.
"""

import os
import sys

# Set test configuration BEFORE any farmdirect imports
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("MESSAGE_BROADCAST_SCOPE", "participants")

# Add the backend directory to Python path so imports work
backend_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, backend_dir)

from datetime import timedelta
from typing import Callable, Dict, Iterator

from fastapi.testclient import TestClient
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from farmdirect.auth import get_password_hash
from farmdirect.core.config import settings
from farmdirect.database import Base, get_db, get_session_factory
from farmdirect.main import app
from farmdirect.models.farm_space import FarmSpace
from farmdirect.models.message import Message
from farmdirect.models.user import User
from farmdirect.services.session_service import SessionService
from farmdirect.utils.time_utils import utcnow

TEST_PASSWORD = "TestPassword123!"

test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=test_engine, expire_on_commit=False
)


@pytest.fixture
def test_password() -> str:
    """Standard test password for all test users."""
    return TEST_PASSWORD


@pytest.fixture
def session_factory() -> sessionmaker:
    """Factory for handlers that open their own short-lived sessions."""
    return TestSessionLocal


@pytest.fixture(scope="session")
def password_hash() -> str:
    """Bcrypt is slow; hash the shared test password once."""
    return get_password_hash(TEST_PASSWORD)


@pytest.fixture(scope="function")
def db() -> Iterator[Session]:
    """Create tables, hand out a session, then drop everything."""
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()

    yield session

    session.rollback()
    session.close()
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(db: Session) -> Iterator[TestClient]:
    """
    Create a test client bound to the test database.

    The client is entered as a context manager so HTTP requests and relay
    sockets share one event loop.
    """

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: TestSessionLocal

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db: Session, password_hash: str) -> Callable[..., User]:
    def _make_user(
        name: str,
        email: str,
        image: str | None = None,
        is_active: bool = True,
    ) -> User:
        user = User(
            name=name,
            email=email,
            hashed_password=password_hash,
            image=image,
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        return user

    return _make_user


@pytest.fixture
def grower(make_user) -> User:
    return make_user("Green Acres", "grower@example.com", image="https://img.example.com/g.png")


@pytest.fixture
def buyer(make_user) -> User:
    return make_user("Betty Buyer", "buyer@example.com")


@pytest.fixture
def outsider(make_user) -> User:
    return make_user("Otto Outsider", "outsider@example.com")


@pytest.fixture
def farm_space(db: Session, grower: User) -> FarmSpace:
    space = FarmSpace(owner_id=grower.id, title="Sunny raised beds")
    db.add(space)
    db.commit()
    return space


@pytest.fixture
def session_token(db: Session) -> Callable[[User], str]:
    """Open a real session for a user and return the raw cookie token."""

    def _session_token(user: User) -> str:
        return SessionService(db).create_session(user.id).token

    return _session_token


@pytest.fixture
def auth_headers(session_token) -> Callable[[User], Dict[str, str]]:
    """Build a fresh Cookie header for a user on every call."""

    def _auth_headers(user: User) -> Dict[str, str]:
        return {"Cookie": f"{settings.session_cookie_name}={session_token(user)}"}

    return _auth_headers


@pytest.fixture
def make_message(db: Session) -> Callable[..., Message]:
    """Insert a message directly, with an optional age for ordering tests."""

    def _make_message(
        sender: User,
        recipient: User,
        body: str = "Hello",
        is_read: bool = False,
        minutes_ago: int = 0,
        context_id: str | None = None,
    ) -> Message:
        message = Message(
            sender_id=sender.id,
            recipient_id=recipient.id,
            subject="Property Inquiry",
            body=body,
            is_read=is_read,
            context_id=context_id,
            created_at=utcnow() - timedelta(minutes=minutes_ago),
        )
        db.add(message)
        db.commit()
        return message

    return _make_message
