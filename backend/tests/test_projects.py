# backend/tests/test_projects.py
import pytest

from tests.conftest import register


async def _project(client, headers, **fields):
    r = await client.post("/api/v1/projects", json={"title": "Land an ML role", **fields}, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()["project"]


@pytest.mark.asyncio
async def test_create_project_defaults(client):
    alice = await register(client, "alice")
    project = await _project(client, alice["headers"])
    assert project["status"] == "planning"
    assert project["priority"] == "medium"
    assert project["category"] == "job_search"
    assert project["progress"] == 0
    assert project["is_public"] is False
    assert project["linked_jobs"] == []
    assert project["canEdit"] is True


@pytest.mark.asyncio
async def test_create_project_validation(client):
    alice = await register(client, "alice")
    r = await client.post("/api/v1/projects", json={"title": "  "}, headers=alice["headers"])
    assert r.status_code == 400

    r = await client.post("/api/v1/projects", json={"title": "x", "status": "abandoned"}, headers=alice["headers"])
    assert r.status_code == 400
    assert r.json()["error"] == "Invalid request"

    r = await client.post("/api/v1/projects", json={"title": "x"})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_linked_lists_are_replaced_and_deduped(client):
    alice = await register(client, "alice")
    project = await _project(client, alice["headers"], linked_jobs=["a", "b", "a"])
    assert project["linked_jobs"] == ["a", "b"]

    r = await client.put(f"/api/v1/projects/{project['id']}", json={"linked_jobs": ["c"]}, headers=alice["headers"])
    assert r.json()["project"]["linked_jobs"] == ["c"]

    r = await client.put(f"/api/v1/projects/{project['id']}", json={"notes": "keep going"}, headers=alice["headers"])
    assert r.json()["project"]["linked_jobs"] == ["c"]
    assert r.json()["project"]["notes"] == "keep going"


@pytest.mark.asyncio
async def test_progress_100_completes_project(client):
    alice = await register(client, "alice")
    project = await _project(client, alice["headers"], status="in_progress")

    r = await client.put(f"/api/v1/projects/{project['id']}/progress", json={"progress": 60}, headers=alice["headers"])
    assert r.json()["project"]["progress"] == 60
    assert r.json()["project"]["status"] == "in_progress"

    r = await client.put(f"/api/v1/projects/{project['id']}/progress", json={"progress": 100}, headers=alice["headers"])
    assert r.json()["project"]["status"] == "completed"

    r = await client.put(f"/api/v1/projects/{project['id']}/progress", json={"progress": 150}, headers=alice["headers"])
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_progress_100_in_general_update(client):
    alice = await register(client, "alice")
    project = await _project(client, alice["headers"])
    r = await client.put(
        f"/api/v1/projects/{project['id']}",
        json={"progress": 100, "status": "on_hold"},
        headers=alice["headers"],
    )
    assert r.json()["project"]["status"] == "completed"


@pytest.mark.asyncio
async def test_only_owner_can_modify(client):
    alice = await register(client, "alice")
    bob = await register(client, "bob")
    project = await _project(client, alice["headers"], is_public=True)

    foreign = await client.put(f"/api/v1/projects/{project['id']}", json={"title": "Mine"}, headers=bob["headers"])
    missing = await client.put(
        "/api/v1/projects/00000000-0000-0000-0000-000000000000", json={"title": "Mine"}, headers=bob["headers"]
    )
    assert foreign.status_code == missing.status_code == 404
    assert foreign.json() == missing.json()

    r = await client.put(f"/api/v1/projects/{project['id']}/progress", json={"progress": 10}, headers=bob["headers"])
    assert r.status_code == 404

    r = await client.delete(f"/api/v1/projects/{project['id']}", headers=bob["headers"])
    assert r.json()["deleted"] is False

    r = await client.delete(f"/api/v1/projects/{project['id']}", headers=alice["headers"])
    assert r.json()["deleted"] is True
    r = await client.delete(f"/api/v1/projects/{project['id']}", headers=alice["headers"])
    assert r.json()["deleted"] is False


@pytest.mark.asyncio
async def test_visibility(client):
    alice = await register(client, "alice")
    bob = await register(client, "bob")
    public = await _project(client, alice["headers"], title="Public plan", is_public=True)
    private = await _project(client, alice["headers"], title="Private plan")
    await _project(client, bob["headers"], title="Bob's plan")

    r = await client.get("/api/v1/projects", headers=bob["headers"])
    titles = {p["title"]: p for p in r.json()["projects"]}
    assert set(titles) == {"Public plan", "Bob's plan"}
    assert titles["Public plan"]["canEdit"] is False
    assert titles["Bob's plan"]["canEdit"] is True

    r = await client.get("/api/v1/projects", params={"mine_only": True}, headers=bob["headers"])
    assert [p["title"] for p in r.json()["projects"]] == ["Bob's plan"]

    assert (await client.get(f"/api/v1/projects/{public['id']}")).status_code == 200
    assert (await client.get(f"/api/v1/projects/{private['id']}", headers=bob["headers"])).status_code == 404

    r = await client.get(f"/api/v1/projects/{private['id']}", headers=alice["headers"])
    assert r.status_code == 200
    assert r.json()["project"]["canDelete"] is True
