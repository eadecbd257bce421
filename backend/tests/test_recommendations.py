# backend/tests/test_recommendations.py
from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from research_hub.services.recommendation_service import UserProfile, build_profile, score
from tests.conftest import create_job, create_paper, register

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def _job(**fields):
    base = {"company": "Acme", "skills": [], "salary_max": None}
    return SimpleNamespace(**{**base, **fields})


def _paper(**fields):
    base = {"company": None, "tags": [], "publication_date": None}
    return SimpleNamespace(**{**base, **fields})


def test_score_job_adds_company_skills_and_salary():
    profile = UserProfile(companies={"acme"}, skills={"python", "pytorch"})
    points, reasons = score(_job(skills=["Python", "PyTorch", "Go"], salary_max=250), profile, NOW)
    assert points == 30 + 2 * 10 + 5
    assert len(reasons) == 3


def test_score_job_salary_threshold_is_exclusive():
    profile = UserProfile(companies={"acme"})
    assert score(_job(salary_max=200), profile, NOW)[0] == 30
    assert score(_job(salary_max=201), profile, NOW)[0] == 35


def test_score_unrelated_job_is_zero():
    profile = UserProfile(companies={"other"}, skills={"rust"})
    assert score(_job(skills=["Python"]), profile, NOW) == (0, [])


def test_score_paper_recency_bonus():
    profile = UserProfile(skills={"interpretability"})
    recent = _paper(tags=["Interpretability"], publication_date=date(2024, 5, 22))
    old = _paper(tags=["Interpretability"], publication_date=NOW.date() - timedelta(days=45))
    assert score(recent, profile, NOW)[0] == 15
    assert score(old, profile, NOW)[0] == 10


def test_build_profile_normalizes_case():
    profile = build_profile(
        jobs=[_job(company=" Acme ", skills=["Python"])],
        papers=[_paper(company="Big Lab", tags=["RLHF"])],
    )
    assert profile.companies == {"acme", "big lab"}
    assert profile.skills == {"python", "rlhf"}


@pytest.mark.asyncio
async def test_recommendations_require_auth(client):
    r = await client.get("/api/v1/recommendations")
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_recommendations_empty_without_history(client):
    alice = await register(client, "alice")
    await create_job(client, alice["headers"])
    r = await client.get("/api/v1/recommendations", headers=alice["headers"])
    assert r.json() == {"success": True, "recommendations": [], "total": 0}


@pytest.mark.asyncio
async def test_recommendations_from_bookmarks(client):
    alice = await register(client, "alice")
    await create_job(client, alice["headers"], "acme-1", skills=["Python"])
    await create_job(client, alice["headers"], "acme-2", title="Infra Engineer", skills=["Python", "Go"], salary_max=300)
    await create_job(client, alice["headers"], "acme-3", title="Recruiter")
    await create_job(client, alice["headers"], "far-1", company="Elsewhere", skills=["Python"])
    await create_job(client, alice["headers"], "far-2", company="Elsewhere", skills=["Cobol"])
    await create_paper(client, alice["headers"], company="Acme", tags=["agents"])

    await client.post("/api/v1/user/bookmarks", json={"bookmark_type": "job", "job_id": "acme-1"}, headers=alice["headers"])

    r = await client.get("/api/v1/recommendations", headers=alice["headers"])
    items = r.json()["recommendations"]
    ids = [item["item"]["id"] for item in items if item["type"] == "job"]
    assert ids == ["acme-2", "acme-3", "far-1"]
    assert items[0]["score"] == 30 + 10 + 5
    assert "acme-1" not in ids
    assert "far-2" not in ids

    papers = [item for item in items if item["type"] == "paper"]
    assert len(papers) == 1
    assert papers[0]["score"] == 30

    r = await client.get("/api/v1/recommendations", params={"type": "paper"}, headers=alice["headers"])
    assert [item["type"] for item in r.json()["recommendations"]] == ["paper"]

    r = await client.get("/api/v1/recommendations", params={"limit": 1}, headers=alice["headers"])
    assert r.json()["total"] == 1


@pytest.mark.asyncio
async def test_downvoted_jobs_are_excluded_but_not_learned_from(client):
    alice = await register(client, "alice")
    await create_job(client, alice["headers"], "acme-1", skills=["Python"])
    await create_job(client, alice["headers"], "acme-2", skills=["Python"])

    await client.post(
        "/api/v1/votes", json={"target_type": "job", "job_id": "acme-1", "vote_type": -1}, headers=alice["headers"]
    )
    r = await client.get("/api/v1/recommendations", headers=alice["headers"])
    assert r.json()["recommendations"] == []
