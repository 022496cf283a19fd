"""Pytest fixtures — fresh SQLite database per test."""
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from quorumboard.database import Base, get_db
from quorumboard.main import app

# Import all models so they register with Base.metadata
from quorumboard.models.user import User, AuthSession, PasswordReset  # noqa: F401
from quorumboard.models.room import Room, RoomMember                  # noqa: F401
from quorumboard.models.candidate import Candidate, Response, Guest   # noqa: F401
from quorumboard.models.event import Event                            # noqa: F401

SQLITE_URL = "sqlite:///./test.db"


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """Yield a database session bound to the test engine."""
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
# Helpers: drive the API the way the web client does
# ---------------------------------------------------------------------------
def auth_headers(user: dict) -> dict:
    return {"Authorization": f"Bearer {user['access_token']}"}


def create_test_user(client: TestClient, name: str = "Test User", email: str | None = None,
                     password: str = "secret123") -> dict:
    """Helper — POST /api/auth/signup and return the token response JSON."""
    email = email or f"{name.lower().replace(' ', '.')}@mahjong.jp"
    resp = client.post("/api/auth/signup", json={
        "email": email,
        "password": password,
        "display_name": name,
    })
    assert resp.status_code == 201, resp.text
    data = resp.json()
    data["user_id"] = data["user"]["user_id"]
    return data


def create_test_room(client: TestClient, owner: dict, name: str = "Test Room") -> dict:
    """Helper — POST /api/rooms and return response JSON."""
    resp = client.post("/api/rooms/", json={"name": name}, headers=auth_headers(owner))
    assert resp.status_code == 201, resp.text
    return resp.json()


def join_room(client: TestClient, user: dict, room: dict) -> dict:
    resp = client.post("/api/rooms/join", json={"invite_code": room["invite_code"]}, headers=auth_headers(user))
    assert resp.status_code == 200, resp.text
    return resp.json()


def create_test_candidate(client: TestClient, user: dict, room: dict, day: str = "2099-12-19",
                          min_players: int = 4) -> dict:
    """Helper — POST /api/rooms/{id}/candidates and return response JSON."""
    resp = client.post(
        f"/api/rooms/{room['room_id']}/candidates",
        json={"date": day, "min_players": min_players},
        headers=auth_headers(user),
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def respond(client: TestClient, user: dict, candidate: dict, status: str):
    return client.put(
        f"/api/candidates/{candidate['candidate_id']}/responses/me",
        json={"status": status},
        headers=auth_headers(user),
    )


def room_with_members(client: TestClient, count: int, name: str = "Test Room"):
    """Owner plus ``count - 1`` joined members. Returns (room, [owner, *members])."""
    owner = create_test_user(client, name="Owner")
    room = create_test_room(client, owner, name=name)
    users = [owner]
    for i in range(1, count):
        user = create_test_user(client, name=f"Member {i}")
        join_room(client, user, room)
        users.append(user)
    return room, users
