"""Pytest fixtures: a file-backed SQLite database, fresh for every test."""
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from moviehub.database import Base, get_db
from moviehub.main import app

# Import all models so they register with Base.metadata
from moviehub.models.user import User                                # noqa: F401
from moviehub.models.group import Group, GroupMember, GroupContent   # noqa: F401
from moviehub.models.join_request import JoinRequest                 # noqa: F401
from moviehub.models.favorite import Favorite                        # noqa: F401
from moviehub.models.review import Review                            # noqa: F401

SQLITE_URL = "sqlite:///./test.db"
DEFAULT_PASSWORD = "Password123"


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    # Cascades rely on foreign keys, which SQLite leaves off by default
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """Yield a database session for service-level tests and assertions."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_engine):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers: register users and create groups through the API
# ---------------------------------------------------------------------------
def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register_user(client: TestClient, email: str = "user@example.com", password: str = DEFAULT_PASSWORD) -> tuple:
    """POST /api/auth/register and return (user, token)."""
    resp = client.post("/api/auth/register", json={"email": email, "password": password})
    assert resp.status_code == 201, resp.text
    data = resp.json()["data"]
    return data["user"], data["token"]


def create_test_group(client: TestClient, token: str, name: str = "Test Group", description: str = None) -> dict:
    """POST /api/groups and return the created group."""
    payload = {"name": name}
    if description is not None:
        payload["description"] = description
    resp = client.post("/api/groups/", json=payload, headers=auth_headers(token))
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def join_and_approve(client: TestClient, owner_token: str, user_token: str, group_id: str) -> dict:
    """Request to join as ``user_token`` and approve it as ``owner_token``; returns the approved request."""
    resp = client.post(f"/api/groups/{group_id}/join", headers=auth_headers(user_token))
    assert resp.status_code == 201, resp.text
    request_id = resp.json()["data"]["request_id"]
    resp = client.post(
        f"/api/groups/{group_id}/requests/{request_id}/approve",
        headers=auth_headers(owner_token),
    )
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]
