# backend/tests/test_jobs.py
import pytest
from sqlalchemy import func, select

from research_hub.config import get_settings
from research_hub.models.job import Job
from tests.conftest import ADMIN_HEADERS, create_job, register


@pytest.mark.asyncio
async def test_save_job_creates_then_updates(client, db):
    alice = await register(client, "alice")

    r = await client.post(
        "/api/v1/jobs",
        json={"id": "acme-1", "title": "ML Engineer", "company": "Acme", "salary_max": 250, "skills": ["Python"]},
        headers=alice["headers"],
    )
    assert r.status_code == 200
    assert r.json()["action"] == "created"
    assert r.json()["job"]["user_id"] == alice["user"]["id"]

    r = await client.post(
        "/api/v1/jobs",
        json={"id": "acme-1", "title": "Senior ML Engineer", "company": "Acme"},
        headers=alice["headers"],
    )
    assert r.status_code == 200
    assert r.json()["action"] == "updated"
    assert r.json()["job"]["title"] == "Senior ML Engineer"

    count = (await db.execute(select(func.count()).select_from(Job))).scalar_one()
    assert count == 1


@pytest.mark.asyncio
async def test_save_job_without_id_generates_one(client):
    alice = await register(client, "alice")
    job = await create_job(client, alice["headers"], job_id=None, company="Big Lab")
    assert job["id"].startswith("big-lab-")


@pytest.mark.asyncio
async def test_save_job_owned_by_someone_else_conflicts(client):
    alice = await register(client, "alice")
    bob = await register(client, "bob")
    await create_job(client, alice["headers"])

    r = await client.post(
        "/api/v1/jobs",
        json={"id": "acme-1", "title": "Hijacked", "company": "Acme"},
        headers=bob["headers"],
    )
    assert r.status_code == 409


@pytest.mark.asyncio
async def test_save_job_requires_auth_and_fields(client):
    r = await client.post("/api/v1/jobs", json={"title": "x", "company": "y"})
    assert r.status_code == 401

    alice = await register(client, "alice")
    r = await client.post("/api/v1/jobs", json={"title": "ML Engineer"}, headers=alice["headers"])
    assert r.status_code == 400
    assert r.json()["error"] == "Missing required fields"


@pytest.mark.asyncio
async def test_get_job(client):
    alice = await register(client, "alice")
    await create_job(client, alice["headers"], location="London")

    r = await client.get("/api/v1/jobs/acme-1")
    assert r.status_code == 200
    assert r.json()["job"]["location"] == "London"

    r = await client.get("/api/v1/jobs/missing")
    assert r.status_code == 404
    assert r.json()["error"] == "Job not found"


@pytest.mark.asyncio
async def test_update_job_only_by_owner(client):
    alice = await register(client, "alice")
    bob = await register(client, "bob")
    await create_job(client, alice["headers"])

    r = await client.put("/api/v1/jobs/acme-1", json={"salary": "$200K"}, headers=alice["headers"])
    assert r.status_code == 200
    assert r.json()["job"]["salary"] == "$200K"

    foreign = await client.put("/api/v1/jobs/acme-1", json={"salary": "$1K"}, headers=bob["headers"])
    missing = await client.put("/api/v1/jobs/nope", json={"salary": "$1K"}, headers=bob["headers"])
    assert foreign.status_code == missing.status_code == 404
    assert foreign.json()["error"] == missing.json()["error"]

    r = await client.get("/api/v1/jobs/acme-1")
    assert r.json()["job"]["salary"] == "$200K"


@pytest.mark.asyncio
async def test_delete_job_is_idempotent_and_owner_scoped(client):
    alice = await register(client, "alice")
    bob = await register(client, "bob")
    await create_job(client, alice["headers"])

    r = await client.delete("/api/v1/jobs/acme-1", headers=bob["headers"])
    assert r.status_code == 200
    assert r.json() == {"success": True, "deleted": False}
    assert (await client.get("/api/v1/jobs/acme-1")).status_code == 200

    r = await client.delete("/api/v1/jobs/acme-1", headers=alice["headers"])
    assert r.json()["deleted"] is True
    r = await client.delete("/api/v1/jobs/acme-1", headers=alice["headers"])
    assert r.json()["deleted"] is False
    assert (await client.get("/api/v1/jobs/acme-1")).status_code == 404


@pytest.mark.asyncio
async def test_list_jobs_filters(client):
    alice = await register(client, "alice")
    await create_job(client, alice["headers"], "acme-1", title="Research Engineer", skills=["Python", "PyTorch"])
    await create_job(client, alice["headers"], "acme-2", title="Product Manager", location="Paris")
    await create_job(client, alice["headers"], "lab-1", title="Research Scientist", company="Other Lab", skills=["JAX"])

    r = await client.get("/api/v1/jobs")
    assert r.status_code == 200
    assert r.json()["total"] == 3

    r = await client.get("/api/v1/jobs", params={"company": "acme"})
    assert {j["id"] for j in r.json()["jobs"]} == {"acme-1", "acme-2"}

    r = await client.get("/api/v1/jobs", params={"skill": "pytorch"})
    assert [j["id"] for j in r.json()["jobs"]] == ["acme-1"]

    r = await client.get("/api/v1/jobs", params={"search": "research"})
    assert {j["id"] for j in r.json()["jobs"]} == {"acme-1", "lab-1"}

    r = await client.get("/api/v1/jobs", params={"location": "paris"})
    assert [j["id"] for j in r.json()["jobs"]] == ["acme-2"]

    r = await client.get("/api/v1/jobs", params={"company": "nobody"})
    assert r.status_code == 200
    assert r.json()["jobs"] == []
    assert r.json()["total"] == 0

    r = await client.get("/api/v1/jobs", params={"limit": 2, "offset": 2})
    assert len(r.json()["jobs"]) == 1
    assert r.json()["total"] == 3


@pytest.mark.asyncio
async def test_list_jobs_annotates_bookmarks_and_votes(client):
    alice = await register(client, "alice")
    await create_job(client, alice["headers"], "acme-1")
    await create_job(client, alice["headers"], "acme-2")

    await client.post("/api/v1/user/bookmarks", json={"bookmark_type": "job", "job_id": "acme-1"}, headers=alice["headers"])
    await client.post("/api/v1/votes", json={"target_type": "job", "job_id": "acme-2", "vote_type": 1}, headers=alice["headers"])

    r = await client.get("/api/v1/jobs", headers=alice["headers"])
    jobs = {j["id"]: j for j in r.json()["jobs"]}
    assert jobs["acme-1"]["isBookmarked"] is True
    assert jobs["acme-1"]["userVote"] is None
    assert jobs["acme-2"]["isBookmarked"] is False
    assert jobs["acme-2"]["userVote"] == 1

    r = await client.get("/api/v1/jobs")
    assert "isBookmarked" not in r.json()["jobs"][0]


async def _ingested(db, *jobs):
    for job_id, title in jobs:
        db.add(Job(id=job_id, title=title, company="Acme", location="Remote", skills=[]))
        await db.commit()


@pytest.mark.asyncio
async def test_duplicate_endpoints_need_admin_key(client):
    r = await client.get("/api/v1/jobs/check-duplicates")
    assert r.status_code == 401
    assert r.json()["error"] == "Invalid admin key"

    r = await client.post("/api/v1/jobs/clean-duplicates", headers={"X-Admin-Key": "wrong"})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_admin_key_not_configured(client, monkeypatch):
    monkeypatch.setattr(get_settings(), "admin_api_key", None)
    r = await client.get("/api/v1/jobs/check-duplicates", headers=ADMIN_HEADERS)
    assert r.status_code == 503
    assert r.json()["error"] == "Admin access not configured"


@pytest.mark.asyncio
async def test_check_and_clean_duplicates(client, db):
    await _ingested(db, ("acme-1", "ML Engineer"), ("acme-2", "ml engineer "), ("acme-3", "Designer"))

    r = await client.get("/api/v1/jobs/check-duplicates", headers=ADMIN_HEADERS)
    assert r.status_code == 200
    data = r.json()
    assert data["duplicate_groups"] == 1
    assert data["duplicate_jobs"] == 1
    assert set(data["groups"][0]["ids"]) == {"acme-1", "acme-2"}

    r = await client.post("/api/v1/jobs/clean-duplicates", headers=ADMIN_HEADERS)
    assert r.json()["deleted"] == 1

    remaining = set((await db.execute(select(Job.id))).scalars().all())
    assert "acme-3" in remaining
    assert len(remaining & {"acme-1", "acme-2"}) == 1


@pytest.mark.asyncio
async def test_clean_duplicates_keeps_manual_saves(client, db):
    alice = await register(client, "alice")
    await create_job(client, alice["headers"], "acme-manual", location="Remote")
    await _ingested(db, ("acme-scraped", "ML Engineer"))

    r = await client.post("/api/v1/jobs/clean-duplicates", headers=ADMIN_HEADERS)
    assert r.json()["ids"] == ["acme-scraped"]
    assert (await client.get("/api/v1/jobs/acme-manual")).status_code == 200
