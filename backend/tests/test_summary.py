# backend/tests/test_summary.py
import pytest

from research_hub.services.summary_service import classify_role
from tests.conftest import create_job, register


@pytest.mark.asyncio
async def test_summary_unknown_company_is_empty(client):
    r = await client.get("/api/v1/get-summary", params={"company": "Nobody"})
    assert r.status_code == 200
    summary = r.json()["summary"]
    assert summary["total_jobs"] == 0
    assert summary["highest_paying_jobs"] == []
    assert summary["most_common_skills"] == []
    assert summary["average_salary_max"] is None


@pytest.mark.asyncio
async def test_summary_for_company(client):
    alice = await register(client, "alice")
    await create_job(client, alice["headers"], "acme-1", salary_min=150, salary_max=200, skills=["Python", "SQL"])
    await create_job(client, alice["headers"], "acme-2", salary_min=300, salary_max=400, skills=["Python"])
    await create_job(client, alice["headers"], "acme-3", skills=["Go"])
    await create_job(client, alice["headers"], "lab-1", company="Other Lab", salary_max=900)

    r = await client.get("/api/v1/get-summary", params={"company": "ACME"})
    summary = r.json()["summary"]
    assert summary["total_jobs"] == 3
    assert summary["jobs_with_salary"] == 2
    assert summary["average_salary_max"] == 300
    assert [j["id"] for j in summary["highest_paying_jobs"]] == ["acme-2", "acme-1"]
    assert summary["most_common_skills"][0] == {"skill": "Python", "count": 2}

    r = await client.get("/api/v1/get-summary")
    assert r.json()["summary"]["total_jobs"] == 4


@pytest.mark.parametrize("title,role", [
    ("ML Engineer", "Machine Learning Engineer"),
    ("Research Scientist, Alignment", "Research Scientist/Engineer"),
    ("Software Engineer, Infrastructure", "Infrastructure Engineer"),
    ("Software Engineer", "Software Engineer"),
    ("Product Designer", "Design"),
    ("Technical Recruiter", "People/HR"),
    ("Chief of Staff", "Other"),
    (None, "Other"),
])
def test_classify_role(title, role):
    assert classify_role(title) == role


async def _two_companies(client):
    alice = await register(client, "alice")
    headers = alice["headers"]
    await create_job(client, headers, "acme-1", salary_min=150, salary_max=200,
                     skills=["Python", "SQL"], department="Research")
    await create_job(client, headers, "acme-2", title="Research Scientist", salary_min=300, salary_max=400,
                     skills=["python"], department="Research")
    await create_job(client, headers, "lab-1", company="Other Lab", title="Security Engineer",
                     salary_min=200, salary_max=300, skills=["Python", "Rust"], department="Security")
    await create_job(client, headers, "lab-2", company="Other Lab", title="Recruiter", department="People")


@pytest.mark.asyncio
async def test_compare_companies(client):
    await _two_companies(client)

    r = await client.post("/api/v1/compare-companies", json={"companies": ["acme", "OTHER LAB", "Nobody"]})
    assert r.status_code == 200
    body = r.json()
    assert body["missing"] == ["nobody"]

    acme, lab = body["companies"]
    assert acme["name"] == "Acme"
    assert (acme["total_jobs"], acme["jobs_with_salary"]) == (2, 2)
    assert (acme["avg_salary_min"], acme["avg_salary_max"]) == (225, 300)
    assert (acme["highest_salary"], acme["lowest_salary"]) == (400, 150)
    assert acme["top_skills"][0] == {"skill": "Python", "count": 2, "percentage": 100}
    assert acme["departments"] == [{"department": "Research", "count": 2}]
    assert {r["role"] for r in acme["roles"]} == {"Machine Learning Engineer", "Research Scientist/Engineer"}

    assert lab["jobs_with_salary"] == 1
    assert [d["department"] for d in lab["departments"]] == ["Security", "People"]

    assert body["skill_overlap"] == {"common": ["python"], "by_company": {"Acme": ["sql"], "Other Lab": ["rust"]}}
    insights = body["insights"]
    assert insights[0] == "Acme has the most jobs with 2 positions"
    assert insights[1].startswith("Acme offers the highest average salary")
    assert "Common skills across companies: python" in insights
    assert insights[-1] == "Other Lab has the most diverse departments with 2 different teams"


@pytest.mark.asyncio
async def test_compare_companies_needs_two_with_data(client):
    await _two_companies(client)

    r = await client.post("/api/v1/compare-companies", json={"companies": ["acme", " ACME "]})
    assert r.status_code == 400
    assert r.json()["error"] == "Please select at least 2 companies to compare"

    r = await client.post("/api/v1/compare-companies", json={"companies": ["acme", "nobody"]})
    assert r.status_code == 400
    assert r.json()["error"] == "Not enough companies with job data to compare"
    assert r.json()["details"] == "No jobs found for: nobody"
