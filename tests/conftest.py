"""Pytest configuration and fixtures."""

import os

# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use a separate PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.environ["DATABASE_URL"].rsplit("/", 1)[0] + "/last_leaf_test"
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
    os.environ["DATABASE_URL"] = SQLALCHEMY_DATABASE_URL

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from last_leaf.database import Base, build_engine, get_db  # noqa: E402
from last_leaf.main import app  # noqa: E402
from last_leaf.models import User  # noqa: E402
from last_leaf.services.auth import create_access_token, get_password_hash  # noqa: E402
from tests.helpers import AUTH_COOKIE, TEST_PASSWORD  # noqa: E402

engine = build_engine(SQLALCHEMY_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)
    else:
        # Local SQLite file may hold an older schema
        Base.metadata.drop_all(bind=engine)

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Factory that inserts a user and returns (user, session token)."""

    def _make_user(email: str, nickname: str = "Tester", password: str | None = TEST_PASSWORD):
        user = User(
            email=email,
            nickname=nickname,
            password_hash=get_password_hash(password) if password else None,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user, create_access_token(user.id, user.email)

    return _make_user


@pytest.fixture
def auth_client(client):
    """Sign up a user through the API; the client then carries its session cookie."""
    response = client.post(
        "/api/auth/signup",
        json={
            "email": "test@example.com",
            "password": TEST_PASSWORD,
            "passwordConfirm": TEST_PASSWORD,
            "nickname": "Test User",
        },
    )
    assert response.status_code == 201
    assert AUTH_COOKIE in client.cookies
    return client
