# backend/tests/test_auth.py
from datetime import timedelta
from uuid import UUID

import jwt
import pytest
from sqlalchemy import func, select, update

from research_hub.models.base import utcnow
from research_hub.models.user import User
from research_hub.models.user_session import UserSession
from tests.conftest import auth, register


@pytest.mark.asyncio
async def test_register_returns_token_and_user(client):
    r = await client.post(
        "/api/v1/auth/register",
        json={"username": "alice", "email": "Alice@Example.com", "password": "secret123", "displayName": "Alice A"},
    )
    assert r.status_code == 201
    data = r.json()
    assert data["success"] is True
    assert data["token"]
    assert data["user"]["username"] == "alice"
    assert data["user"]["email"] == "alice@example.com"
    assert data["user"]["display_name"] == "Alice A"
    assert "password_hash" not in data["user"]

    cookie = r.headers["set-cookie"]
    assert cookie.startswith("token=")
    assert "HttpOnly" in cookie
    assert "samesite=strict" in cookie.lower()


@pytest.mark.asyncio
async def test_register_short_password(client):
    r = await client.post(
        "/api/v1/auth/register",
        json={"username": "bob", "email": "bob@example.com", "password": "12345"},
    )
    assert r.status_code == 400
    assert r.json() == {
        "error": "Password too short",
        "details": "Password must be at least 6 characters long",
    }


@pytest.mark.asyncio
async def test_register_missing_fields(client):
    r = await client.post("/api/v1/auth/register", json={"username": "bob"})
    assert r.status_code == 400
    body = r.json()
    assert body["error"] == "Missing required fields"
    assert "email" in body["details"]
    assert "password" in body["details"]


@pytest.mark.asyncio
async def test_register_blank_username(client):
    r = await client.post(
        "/api/v1/auth/register",
        json={"username": "  ", "email": "bob@example.com", "password": "secret123"},
    )
    assert r.status_code == 400
    assert r.json()["error"] == "Missing required fields"


@pytest.mark.asyncio
async def test_register_invalid_email(client):
    r = await client.post(
        "/api/v1/auth/register",
        json={"username": "bob", "email": "not-an-email", "password": "secret123"},
    )
    assert r.status_code == 400
    assert r.json()["error"] == "Invalid email format"


@pytest.mark.asyncio
async def test_register_conflicts(client, db):
    await register(client, "alice")

    r = await client.post(
        "/api/v1/auth/register",
        json={"username": "someone", "email": "alice@example.com", "password": "secret123"},
    )
    assert r.status_code == 409
    assert r.json()["error"] == "Email already registered"

    r = await client.post(
        "/api/v1/auth/register",
        json={"username": "ALICE", "email": "other@example.com", "password": "secret123"},
    )
    assert r.status_code == 409
    assert r.json()["error"] == "Username already exists"

    count = (await db.execute(select(func.count()).select_from(User))).scalar_one()
    assert count == 1


@pytest.mark.asyncio
async def test_login_bad_credentials_look_the_same(client):
    await register(client, "alice")

    wrong_password = await client.post(
        "/api/v1/auth/login", json={"email": "alice@example.com", "password": "wrong-pass"}
    )
    unknown_email = await client.post(
        "/api/v1/auth/login", json={"email": "nobody@example.com", "password": "secret123"}
    )
    assert wrong_password.status_code == 401
    assert unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()
    assert wrong_password.json()["error"] == "Invalid credentials"


@pytest.mark.asyncio
async def test_login_disabled_account(client, db):
    await register(client, "alice")
    await db.execute(update(User).where(User.username == "alice").values(is_active=False))
    await db.commit()

    r = await client.post("/api/v1/auth/login", json={"email": "alice@example.com", "password": "secret123"})
    assert r.status_code == 403
    assert r.json()["error"] == "Account disabled"


@pytest.mark.asyncio
async def test_login_issues_new_session(client, db):
    await register(client, "alice")
    r = await client.post("/api/v1/auth/login", json={"email": "ALICE@example.com", "password": "secret123"})
    client.cookies.clear()
    assert r.status_code == 200
    assert r.json()["user"]["username"] == "alice"

    sessions = (await db.execute(select(func.count()).select_from(UserSession))).scalar_one()
    assert sessions == 2


@pytest.mark.asyncio
async def test_me_requires_token(client):
    r = await client.get("/api/v1/auth/me")
    assert r.status_code == 401
    assert r.json()["error"] == "Authentication required"

    r = await client.get("/api/v1/auth/me", headers=auth("garbage"))
    assert r.status_code == 401
    assert r.json()["error"] == "Invalid or expired token"


@pytest.mark.asyncio
async def test_me_with_bearer_and_cookie(client):
    alice = await register(client, "alice")

    r = await client.get("/api/v1/auth/me", headers=alice["headers"])
    assert r.status_code == 200
    user = r.json()["user"]
    assert user["username"] == "alice"
    assert user["stats"] == {"bookmarks": 0, "comments": 0, "resources": 0, "publicResources": 0}

    r = await client.get("/api/v1/auth/me", headers={"Cookie": f"token={alice['token']}"})
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_logout_revokes_token(client):
    alice = await register(client, "alice")

    r = await client.post("/api/v1/auth/logout", headers=alice["headers"])
    assert r.status_code == 200
    assert r.json()["success"] is True

    r = await client.get("/api/v1/auth/me", headers=alice["headers"])
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_logout_without_token_succeeds(client):
    r = await client.post("/api/v1/auth/logout")
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_logout_all_revokes_every_session(client):
    first = await register(client, "alice")
    r = await client.post("/api/v1/auth/login", json={"email": "alice@example.com", "password": "secret123"})
    client.cookies.clear()
    second = r.json()["token"]

    r = await client.post("/api/v1/auth/logout", json={"logoutAll": True}, headers=first["headers"])
    assert r.status_code == 200

    r = await client.get("/api/v1/auth/me", headers=auth(second))
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_expired_session_is_rejected_and_removed(client, db):
    alice = await register(client, "alice")
    await db.execute(
        update(UserSession)
        .where(UserSession.session_token == alice["token"])
        .values(expires_at=utcnow() - timedelta(minutes=1))
    )
    await db.commit()

    r = await client.get("/api/v1/auth/me", headers=alice["headers"])
    assert r.status_code == 401

    remaining = (
        await db.execute(select(func.count()).select_from(UserSession).where(UserSession.session_token == alice["token"]))
    ).scalar_one()
    assert remaining == 0


@pytest.mark.asyncio
async def test_expired_token_removes_its_session(client, db):
    alice = await register(client, "alice")
    past = utcnow() - timedelta(days=1)
    token = jwt.encode(
        {
            "userId": alice["user"]["id"],
            "username": "alice",
            "email": "alice@example.com",
            "iat": past - timedelta(days=30),
            "exp": past,
        },
        "test-secret",
        algorithm="HS256",
    )
    db.add(UserSession(user_id=UUID(alice["user"]["id"]), session_token=token, expires_at=past))
    await db.commit()

    r = await client.get("/api/v1/auth/me", headers=auth(token))
    assert r.status_code == 401

    remaining = (
        await db.execute(select(func.count()).select_from(UserSession).where(UserSession.session_token == token))
    ).scalar_one()
    assert remaining == 0


@pytest.mark.asyncio
async def test_deactivated_account_token_stops_working(client, db):
    alice = await register(client, "alice")
    r = await client.get("/api/v1/auth/me", headers=alice["headers"])
    assert r.status_code == 200

    await db.execute(update(User).where(User.username == "alice").values(is_active=False))
    await db.commit()

    r = await client.get("/api/v1/auth/me", headers=alice["headers"])
    assert r.status_code == 401
    r = await client.post("/api/v1/projects", json={"title": "Side project"}, headers=alice["headers"])
    assert r.status_code == 401
