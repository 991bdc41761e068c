"""Pytest fixtures — file-backed SQLite database, TestClient and an in-process async client."""
import asyncio
import uuid
from dataclasses import dataclass

import httpx
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient
from werkzeug.security import generate_password_hash

from clix.client.gateway import Gateway
from clix.client.notifications import Notifier
from clix.client.optimistic import OptimisticProtocol
from clix.client.session import SessionContext
from clix.client.store import EntityStore
from clix.database import Base, get_db
from clix.main import app

# Import all models so they register with Base.metadata
from clix.models.user import User, UserRole                    # noqa: F401
from clix.models.club import Club, Venue                       # noqa: F401
from clix.models.event import Event, Registration              # noqa: F401
from clix.models.post import Post, MediaPost                   # noqa: F401
from clix.models.volunteer import VolunteerApplication         # noqa: F401
from clix.models.announcement import Announcement              # noqa: F401

SQLITE_URL = "sqlite:///./test.db"
PASSWORD = "secret123"


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    # WAL lets the threadpool and the test session read concurrently
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


@pytest.fixture(scope="function")
def college_admin(db) -> str:
    """Insert the first college admin directly; every other account is created through the API."""
    user = User(
        name="Dean",
        email=f"dean-{uuid.uuid4().hex[:8]}@college.edu",
        password_hash=generate_password_hash(PASSWORD),
        role=UserRole.college_admin,
        joined_club_ids=[],
    )
    db.add(user)
    db.commit()
    return user.user_id


@pytest.fixture(scope="function")
def campus(client, college_admin) -> dict:
    """A club with its admin, one student, an approved event and a post."""
    admin = create_test_user(client, college_admin, name="Club Admin", role="CLUB_ADMIN")
    club = create_test_club(client, college_admin, admin_id=admin["user_id"])
    student = signup(client, name="Alex Student")
    event_ = create_test_event(client, admin["user_id"], club["club_id"], capacity=2, price=100)
    event_ = approve_event(client, college_admin, event_["event_id"])
    post = create_test_post(client, club["club_id"], admin["user_id"])
    return {
        "college_admin": college_admin,
        "admin": admin,
        "club": club,
        "student": student,
        "event": event_,
        "post": post,
    }


# ---------------------------------------------------------------------------
# Async client core against the app, in-process
# ---------------------------------------------------------------------------
@dataclass
class ClientHarness:
    gateway: Gateway
    store: EntityStore
    protocol: OptimisticProtocol
    session: SessionContext
    notifier: Notifier


@pytest.fixture(scope="function")
def run_client(client):
    """Return ``run(scenario, rollback_social=None)``; ``scenario`` is an async
    function taking a ``ClientHarness`` wired to the app over ASGI.
    """
    def _run(scenario, rollback_social=None):
        async def _main():
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http:
                gateway = Gateway(http=http)
                store = EntityStore()
                harness = ClientHarness(
                    gateway=gateway,
                    store=store,
                    protocol=OptimisticProtocol(store, gateway, rollback_social=rollback_social),
                    session=SessionContext(gateway, store),
                    notifier=Notifier(),
                )
                return await scenario(harness)

        return asyncio.run(_main())

    return _run


# ---------------------------------------------------------------------------
# Helpers: create records via the API, return the response JSON
# ---------------------------------------------------------------------------
def _email(name: str) -> str:
    return f"{name.lower().replace(' ', '.')}-{uuid.uuid4().hex[:6]}@college.edu"


def signup(client: TestClient, name: str = "Test Student", email: str = None) -> dict:
    """Helper — POST /api/auth/signup (always a student)."""
    resp = client.post("/api/auth/signup", json={
        "name": name,
        "email": email or _email(name),
        "password": PASSWORD,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_test_user(client: TestClient, actor_id: str, name: str = "Test User",
                     role: str = "STUDENT", email: str = None) -> dict:
    """Helper — POST /api/users as a college admin."""
    resp = client.post(f"/api/users/?actor_user_id={actor_id}", json={
        "name": name,
        "email": email or _email(name),
        "password": PASSWORD,
        "role": role,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_test_club(client: TestClient, actor_id: str, admin_id: str = None, name: str = None) -> dict:
    resp = client.post(f"/api/clubs/?actor_user_id={actor_id}", json={
        "name": name or f"Club {uuid.uuid4().hex[:6]}",
        "description": "A test club",
        "admin_id": admin_id,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_test_event(client: TestClient, admin_id: str, club_id: str, title: str = "Test Event",
                      capacity: int = 100, price: int = 0, **fields) -> dict:
    """Helper — propose an event; it comes back PENDING."""
    resp = client.post(f"/api/events/?actor_user_id={admin_id}", json={
        "title": title,
        "club_id": club_id,
        "date": "2026-11-20",
        "time": "18:00",
        "capacity": capacity,
        "price": price,
        **fields,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def approve_event(client: TestClient, college_admin_id: str, event_id: str) -> dict:
    resp = client.post(f"/api/events/{event_id}/status?actor_user_id={college_admin_id}", json={
        "status": "APPROVED",
    })
    assert resp.status_code == 200, resp.text
    return resp.json()


def create_test_post(client: TestClient, club_id: str, user_id: str, content: str = "Hello club!") -> dict:
    resp = client.post("/api/posts/", json={"club_id": club_id, "user_id": user_id, "content": content})
    assert resp.status_code == 201, resp.text
    return resp.json()
