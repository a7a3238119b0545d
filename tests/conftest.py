"""Shared pytest fixtures: SQLite in-memory store, fake Redis and scripted outbound HTTP."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Tuple, Union

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from mindnotes.api.dependencies import get_http_client
from mindnotes.config import Settings
from mindnotes.core.models import BaseModel, Note, User
from mindnotes.core.redis_client import RedisClient, get_redis_client
from mindnotes.database import get_db_session
from mindnotes.main import app
from mindnotes.security.jwt import create_access_token

# Silence extremely verbose DEBUG logs from aiosqlite to keep test output readable
logging.getLogger("aiosqlite").setLevel(logging.WARNING)


@pytest.fixture
def test_settings():
    """Settings with Google OAuth configured and the default refresh leeway."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        secret_key="test-secret-key",
        google_client_id="client-id",
        google_client_secret="client-secret",
        frontend_url="http://frontend.test",
    )


@pytest.fixture
async def test_engine():
    """Fresh SQLite in-memory engine per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,  # keep the same memory DB across connections
        connect_args={"check_same_thread": False},
    )

    # SQLite only enforces ON DELETE CASCADE with this pragma
    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):  # noqa: ANN001
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
        finally:
            cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def test_session(test_engine):
    session_maker = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        try:
            yield session
        finally:
            await session.rollback()


class FakeRedis:
    """The handful of redis.asyncio calls RedisClient makes."""

    def __init__(self):
        self.storage: Dict[str, str] = {}
        self.ttls: Dict[str, int] = {}

    async def get(self, key):
        return self.storage.get(key)

    async def set(self, key, value):
        self.storage[key] = value
        return True

    async def setex(self, key, seconds, value):
        self.storage[key] = value
        self.ttls[key] = seconds
        return True

    async def getdel(self, key):
        return self.storage.pop(key, None)

    async def ping(self):
        return True

    async def aclose(self):
        pass


@pytest.fixture
def fake_redis():
    """RedisClient wired to an in-memory fake."""
    client = RedisClient()
    client.redis = FakeRedis()
    return client


Responder = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class MockApi:
    """Scripted responses for outbound calls, keyed by method and URL path.

    Responses queued for a route are served in order; the last one keeps
    being served once the queue is down to it.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], List[Responder]] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, path: str, *responses: Responder) -> None:
        self.routes.setdefault((method.upper(), path), []).extend(responses)

    def calls(self, method: str, path: str = None) -> List[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method.upper() and (path is None or r.url.path == path)
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(500, json={"message": f"no mock for {request.method} {request.url.path}"})
        responder = queue.pop(0) if len(queue) > 1 else queue[0]
        if callable(responder):
            return responder(request)
        return responder


@pytest.fixture
def mock_api():
    return MockApi()


@pytest.fixture
async def http_client(mock_api):
    async with httpx.AsyncClient(transport=httpx.MockTransport(mock_api.handler)) as client:
        yield client


@pytest.fixture
async def test_user(test_session):
    """Plain user without any provider connected."""
    user = User(email="ada@example.com", name="Ada")
    test_session.add(user)
    await test_session.commit()
    await test_session.refresh(user)
    return user


@pytest.fixture
async def other_user(test_session):
    user = User(email="grace@example.com", name="Grace")
    test_session.add(user)
    await test_session.commit()
    await test_session.refresh(user)
    return user


@pytest.fixture
async def drive_user(test_session, test_user):
    """test_user with a Drive credential that is good for an hour."""
    test_user.drive_access_token = "drive-access"
    test_user.drive_refresh_token = "drive-refresh"
    test_user.drive_token_expires_at = datetime.now(timezone.utc) + timedelta(hours=1)
    await test_session.commit()
    return test_user


@pytest.fixture
async def github_user(test_session, test_user):
    """test_user with a GitHub token and a default repository."""
    test_user.github_token = "gh-token"
    test_user.github_owner = "ada"
    test_user.github_repo = "notes"
    await test_session.commit()
    return test_user


@pytest.fixture
def make_note(test_session):
    """Factory inserting a note straight into the store."""

    async def _make(owner, title="Note", **fields):
        note = Note(
            title=title,
            content=fields.pop("content", ""),
            x=fields.pop("x", 0.0),
            y=fields.pop("y", 0.0),
            color=fields.pop("color", "#6B7280"),
            tags=fields.pop("tags", []),
            owner_id=owner.id,
            **fields,
        )
        test_session.add(note)
        await test_session.commit()
        await test_session.refresh(note)
        return note

    return _make


@pytest.fixture
def test_app(test_session, http_client, fake_redis):
    """The app with store, outbound HTTP and Redis swapped for test doubles."""

    async def _override_get_db():
        yield test_session

    async def _override_http_client():
        yield http_client

    app.dependency_overrides[get_db_session] = _override_get_db
    app.dependency_overrides[get_http_client] = _override_http_client
    app.dependency_overrides[get_redis_client] = lambda: fake_redis
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(test_app):
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers(test_user):
    """Bearer header for test_user."""
    token = create_access_token({"sub": str(test_user.id)})
    return {"Authorization": f"Bearer {token}"}
