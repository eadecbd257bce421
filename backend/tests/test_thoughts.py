# backend/tests/test_thoughts.py
import pytest

from tests.conftest import create_job, create_paper, register


@pytest.fixture
async def alice(client):
    user = await register(client, "alice")
    await create_job(client, user["headers"])
    return user


async def _thought(client, headers, content="Strong team, remote friendly", **fields):
    body = {"job_id": "acme-1", "content": content, **fields}
    return await client.post("/api/v1/job-thoughts", json=body, headers=headers)


@pytest.mark.asyncio
async def test_create_job_thought(client, alice):
    r = await _thought(client, alice["headers"], "  Strong team  ", rating=4)
    assert r.status_code == 201
    thought = r.json()["thought"]
    assert thought["content"] == "Strong team"
    assert thought["target_type"] == "job"
    assert thought["target_id"] == "acme-1"
    assert thought["thought_type"] == "general"
    assert thought["rating"] == 4
    assert thought["is_interested"] is True
    assert thought["visibility"] == "private"
    assert thought["canEdit"] is True


@pytest.mark.asyncio
async def test_thought_validation(client, alice):
    r = await client.post("/api/v1/job-thoughts", json={"content": "No target"}, headers=alice["headers"])
    assert r.status_code == 400
    assert r.json()["details"] == "Required: job_id"

    r = await _thought(client, alice["headers"], "   ")
    assert r.status_code == 400

    r = await _thought(client, alice["headers"], rating=6)
    assert r.status_code == 400

    r = await _thought(client, alice["headers"], job_id="missing")
    assert r.status_code == 404
    assert r.json()["error"] == "Target not found"

    r = await client.post("/api/v1/job-thoughts", json={"job_id": "acme-1", "content": "hi"})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_thought_visibility(client, alice):
    bob = await register(client, "bob")
    await _thought(client, alice["headers"], "Private note")
    await _thought(client, alice["headers"], "Shared note", visibility="public")
    await _thought(client, bob["headers"], "Bob's note")

    r = await client.get("/api/v1/job-thoughts", params={"job_id": "acme-1"}, headers=alice["headers"])
    assert sorted(t["content"] for t in r.json()["thoughts"]) == ["Private note", "Shared note"]

    r = await client.get("/api/v1/job-thoughts", params={"job_id": "acme-1"}, headers=bob["headers"])
    thoughts = {t["content"]: t for t in r.json()["thoughts"]}
    assert set(thoughts) == {"Shared note", "Bob's note"}
    assert thoughts["Shared note"]["canEdit"] is False
    assert thoughts["Bob's note"]["canDelete"] is True

    r = await client.get("/api/v1/job-thoughts", params={"job_id": "acme-1"})
    assert [t["content"] for t in r.json()["thoughts"]] == ["Shared note"]

    r = await client.get("/api/v1/job-thoughts", params={"mine_only": True}, headers=bob["headers"])
    assert r.json()["total"] == 1


@pytest.mark.asyncio
async def test_update_and_delete_are_owner_only(client, alice):
    bob = await register(client, "bob")
    thought = (await _thought(client, alice["headers"])).json()["thought"]
    url = f"/api/v1/job-thoughts/{thought['id']}"

    r = await client.put(url, json={"content": "Hijacked"}, headers=bob["headers"])
    assert r.status_code == 404
    assert r.json()["error"] == "Thought not found"

    r = await client.put(url, json={"rating": 2, "is_interested": False, "thought_type": "cons"}, headers=alice["headers"])
    assert r.status_code == 200
    updated = r.json()["thought"]
    assert (updated["rating"], updated["is_interested"], updated["thought_type"]) == (2, False, "cons")
    assert updated["content"] == thought["content"]

    r = await client.delete(url, headers=bob["headers"])
    assert r.json()["deleted"] is False
    r = await client.delete(url, headers=alice["headers"])
    assert r.json()["deleted"] is True
    r = await client.delete(url, headers=alice["headers"])
    assert r.json() == {"success": True, "deleted": False}


@pytest.mark.asyncio
async def test_paper_insight_and_resource_thought(client, alice):
    paper = await create_paper(client, alice["headers"])
    r = await client.post(
        "/api/v1/paper-insights",
        json={"paper_id": paper["id"].upper(), "content": "Compute-optimal scaling", "thought_type": "note"},
        headers=alice["headers"],
    )
    assert r.status_code == 201
    assert r.json()["thought"]["target_id"] == paper["id"]

    r = await client.get("/api/v1/paper-insights", params={"paper_id": paper["id"]}, headers=alice["headers"])
    assert [t["content"] for t in r.json()["thoughts"]] == ["Compute-optimal scaling"]

    r = await client.post(
        "/api/v1/interview-resources",
        json={"title": "Loop prep", "content": "Practice questions"},
        headers=alice["headers"],
    )
    resource_id = r.json()["resource"]["id"]
    r = await client.post(
        "/api/v1/resource-thoughts",
        json={"resource_id": resource_id, "content": "Helped a lot", "rating": 5},
        headers=alice["headers"],
    )
    assert r.status_code == 201

    # A job thought id is not reachable through another target's routes
    job_thought = (await _thought(client, alice["headers"])).json()["thought"]
    r = await client.put(
        f"/api/v1/paper-insights/{job_thought['id']}", json={"content": "x"}, headers=alice["headers"]
    )
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_user_activity_feed(client, alice):
    r = await client.get("/api/v1/user/activity")
    assert r.status_code == 401

    paper = await create_paper(client, alice["headers"])
    await _thought(client, alice["headers"], "Worth applying", rating=5)
    await client.post(
        "/api/v1/paper-insights",
        json={"paper_id": paper["id"], "content": "Read the appendix"},
        headers=alice["headers"],
    )
    await client.post(
        "/api/v1/comments",
        json={"target_type": "job", "job_id": "acme-1", "content": "Anyone interviewed here?"},
        headers=alice["headers"],
    )
    bob = await register(client, "bob")
    await _thought(client, bob["headers"], "Not mine")

    r = await client.get("/api/v1/user/activity", headers=alice["headers"])
    assert r.status_code == 200
    body = r.json()
    assert body["total"] == 3
    by_type = {a["type"]: a for a in body["activities"]}
    assert set(by_type) == {"job_thought", "paper_insight", "comment"}
    assert by_type["job_thought"]["rating"] == 5
    assert by_type["job_thought"]["target"]["title"] == "ML Engineer"
    assert by_type["paper_insight"]["target"]["title"] == "Scaling Laws"
    assert by_type["comment"]["target"]["type"] == "job"

    r = await client.get("/api/v1/user/activity", params={"limit": 1}, headers=alice["headers"])
    assert len(r.json()["activities"]) == 1
    assert r.json()["total"] == 3
