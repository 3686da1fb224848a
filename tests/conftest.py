from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from practice_starter.app.core.config import get_settings
from practice_starter.app.core.email import EmailService, get_email_service
from practice_starter.app.core.security import get_password_hash
from practice_starter.app.database.database import get_db
from practice_starter.app.main import create_app
from practice_starter.app.models import Base
from practice_starter.app.models.user import User, UserData


@pytest.fixture
def db_session():
    """Fixture providing a session on a fresh in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def make_user(db_session):
    """Fixture returning a factory that stores users in the test database."""

    def _make_user(
        email: str = "jane@example.com",
        name: str = "Jane Doe",
        password: str | None = None,
        **kwargs,
    ) -> User:
        user = User(
            data=UserData(
                email=email,
                name=name,
                hashed_password=get_password_hash(password) if password else None,
                **kwargs,
            ),
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def mock_email_service():
    """Fixture for an e-mail service that records calls instead of sending."""
    return MagicMock(spec=EmailService)


@pytest.fixture
def app(db_session, mock_email_service) -> FastAPI:
    """Fixture to create a new app bound to the test database."""
    get_settings.cache_clear()
    _app = create_app()

    def get_test_db():
        yield db_session

    _app.dependency_overrides[get_db] = get_test_db
    _app.dependency_overrides[get_email_service] = lambda: mock_email_service
    yield _app
    _app.dependency_overrides.clear()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Fixture to create a test client for each test."""
    with TestClient(app) as c:
        yield c
