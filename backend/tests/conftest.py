# backend/tests/conftest.py
import os

# Settings are cached on first use, so the environment is fixed before any app import
os.environ["DATABASE_URL"] = ""
os.environ["JWT_SECRET"] = "test-secret"
os.environ["ADMIN_API_KEY"] = "test-admin-key"
os.environ["OPENAI_API_KEY"] = ""

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from research_hub.main import app
from research_hub.models import Base
from research_hub.models.base import get_optional_db

ADMIN_HEADERS = {"X-Admin-Key": "test-admin-key"}


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    """A session for arranging and inspecting rows directly."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_optional_db] = override_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def sync_db():
    """Sync session on its own in-memory database, as ingestion workers use."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()
    engine.dispose()


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


async def register(client, username: str = "alice", password: str = "secret123", email: str | None = None) -> dict:
    """Register a user and return {"token", "user", "headers"}."""
    r = await client.post(
        "/api/v1/auth/register",
        json={"username": username, "email": email or f"{username}@example.com", "password": password},
    )
    assert r.status_code == 201, r.text
    # Tests pass tokens explicitly; keep the jar from sending someone else's cookie
    client.cookies.clear()
    data = r.json()
    return {"token": data["token"], "user": data["user"], "headers": auth(data["token"])}


async def create_job(client, headers: dict, job_id: str = "acme-1", **fields) -> dict:
    body = {"id": job_id, "title": "ML Engineer", "company": "Acme", **fields}
    r = await client.post("/api/v1/jobs", json=body, headers=headers)
    assert r.status_code == 200, r.text
    return r.json()["job"]


async def create_paper(client, headers: dict, url: str = "https://example.com/paper-1", **fields) -> dict:
    body = {"title": "Scaling Laws", "url": url, **fields}
    r = await client.post("/api/v1/research/papers", json=body, headers=headers)
    assert r.status_code == 200, r.text
    return r.json()["paper"]


GREENHOUSE_PAYLOAD = {
    "jobs": [
        {
            "id": 4012345008,
            "title": "Research Engineer, Interpretability",
            "absolute_url": "https://job-boards.greenhouse.io/anthropic/jobs/4012345008",
            "location": {"name": "San Francisco, CA"},
            "departments": [{"name": "Research"}],
            "content": (
                "&lt;p&gt;You will write Python and PyTorch every day.&lt;/p&gt;"
                "&lt;p&gt;The annual compensation range for this role is $315,000 - $560,000 USD.&lt;/p&gt;"
            ),
        },
        {
            "id": 4012345009,
            "title": "Security Engineer",
            "absolute_url": "https://job-boards.greenhouse.io/anthropic/jobs/4012345009",
            "location": {"name": "Remote"},
            "departments": [],
            "content": None,
        },
        {"id": 4012345010, "title": ""},
    ]
}


def mock_client(routes: dict) -> httpx.Client:
    """httpx client answering from {path: response kwargs}; anything else is a 404."""
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path in routes:
            return httpx.Response(200, **routes[request.url.path])
        return httpx.Response(404)
    return httpx.Client(transport=httpx.MockTransport(handler))
