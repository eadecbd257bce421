"""Company summaries and side-by-side comparisons."""

import re
from collections import Counter

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from research_hub.errors import ValidationError
from research_hub.models.job import Job

TOP_PAYING_LIMIT = 20
TOP_SKILLS_LIMIT = 15


def empty_summary(company: str | None) -> dict:
    return {
        "company": company,
        "total_jobs": 0,
        "jobs_with_salary": 0,
        "average_salary_max": None,
        "highest_paying_jobs": [],
        "most_common_skills": [],
    }


async def get_summary(db: AsyncSession, company: str | None = None) -> dict:
    """Summary of jobs, optionally for one company (case-insensitive)."""
    query = select(Job)
    if company:
        query = query.where(func.lower(Job.company) == company.strip().lower())
    jobs = (await db.execute(query)).scalars().all()

    summary = empty_summary(company)
    if not jobs:
        return summary

    paid = [j for j in jobs if j.salary_max is not None or j.salary_min is not None]
    paid.sort(key=lambda j: j.salary_max or j.salary_min or 0, reverse=True)
    maxes = [j.salary_max for j in paid if j.salary_max is not None]

    skills = Counter()
    for job in jobs:
        skills.update(s.strip() for s in (job.skills or []) if s and s.strip())

    summary.update(
        total_jobs=len(jobs),
        jobs_with_salary=len(paid),
        average_salary_max=round(sum(maxes) / len(maxes)) if maxes else None,
        highest_paying_jobs=[
            {
                "id": j.id,
                "title": j.title,
                "company": j.company,
                "salary": j.salary,
                "salary_min": j.salary_min,
                "salary_max": j.salary_max,
            }
            for j in paid[:TOP_PAYING_LIMIT]
        ],
        most_common_skills=[
            {"skill": skill, "count": count} for skill, count in skills.most_common(TOP_SKILLS_LIMIT)
        ],
    )
    return summary


# First match wins: (role, any of these title words, all of these title words)
ROLE_RULES = (
    ("Machine Learning Engineer", ("machine learning", "ml engineer"), ()),
    ("Research Scientist/Engineer", ("scientist", "engineer"), ("research",)),
    ("Infrastructure Engineer", ("infrastructure",), ("software engineer",)),
    ("Frontend Engineer", ("frontend", "front end"), ("software engineer",)),
    ("Software Engineer", ("software engineer",), ()),
    ("Data Scientist", ("data scientist",), ()),
    ("Product Manager", ("product manager",), ()),
    ("Security Engineer", ("security",), ()),
    ("DevOps/Platform", ("devops", "platform"), ()),
    ("Sales/Business", ("sales", "business development"), ()),
    ("Design", ("design",), ()),
    ("Finance", ("finance", "accounting"), ()),
    ("Legal", ("legal",), ()),
    ("People/HR", ("people", "hr", "recruit"), ()),
)
COMPARE_SKILLS_LIMIT = 15
OVERLAP_LIMIT = 10


def _mentions(title: str, word: str) -> bool:
    return re.search(rf"\b{re.escape(word)}", title) is not None


def classify_role(title: str | None) -> str:
    """Coarse role family for a job title, "Other" when nothing matches."""
    text = (title or "").lower()
    for role, any_of, all_of in ROLE_RULES:
        if any(_mentions(text, w) for w in any_of) and all(_mentions(text, w) for w in all_of):
            return role
    return "Other"


def _average(values: list[int]) -> int | None:
    return round(sum(values) / len(values)) if values else None


def company_stats(jobs: list) -> dict:
    """Salary, skill, department and role breakdown for one company's jobs."""
    paid = [j for j in jobs if j.salary_min and j.salary_max]

    skills = Counter()
    display = {}
    for job in jobs:
        for skill in job.skills or []:
            key = (skill or "").strip().lower()
            if key:
                display.setdefault(key, skill.strip())
                skills[key] += 1

    departments = Counter(j.department for j in jobs if j.department)

    roles: dict[str, list] = {}
    for job in jobs:
        roles.setdefault(classify_role(job.title), []).append(job)

    return {
        "name": jobs[0].company,
        "total_jobs": len(jobs),
        "jobs_with_salary": len(paid),
        "avg_salary_min": _average([j.salary_min for j in paid]),
        "avg_salary_max": _average([j.salary_max for j in paid]),
        "highest_salary": max((j.salary_max for j in paid), default=None),
        "lowest_salary": min((j.salary_min for j in paid), default=None),
        "top_skills": [
            {"skill": display[key], "count": count, "percentage": round(count * 100 / len(jobs))}
            for key, count in skills.most_common(COMPARE_SKILLS_LIMIT)
        ],
        "departments": [{"department": d, "count": c} for d, c in departments.most_common()],
        "roles": sorted(
            (
                {
                    "role": role,
                    "count": len(members),
                    "avg_salary_max": _average([j.salary_max for j in members if j.salary_max]),
                }
                for role, members in roles.items()
            ),
            key=lambda r: r["count"],
            reverse=True,
        ),
    }


def _midpoint(stats: dict) -> float:
    return ((stats["avg_salary_min"] or 0) + (stats["avg_salary_max"] or 0)) / 2


def comparison_insights(companies: list[dict], common_skills: list[str]) -> list[str]:
    insights = []
    busiest = max(companies, key=lambda c: c["total_jobs"])
    insights.append(f"{busiest['name']} has the most jobs with {busiest['total_jobs']} positions")

    with_salary = [c for c in companies if c["avg_salary_max"]]
    if len(with_salary) >= 2:
        best = max(with_salary, key=_midpoint)
        insights.append(f"{best['name']} offers the highest average salary at ~${round(_midpoint(best))}k")

    if common_skills:
        insights.append(f"Common skills across companies: {', '.join(common_skills[:3])}")

    widest = max(companies, key=lambda c: len(c["departments"]))
    if widest["departments"]:
        insights.append(
            f"{widest['name']} has the most diverse departments with {len(widest['departments'])} different teams"
        )
    return insights


async def compare_companies(db: AsyncSession, names: list[str]) -> dict:
    """Side-by-side stats for two or more companies (case-insensitive names)."""
    wanted = []
    for name in names:
        key = (name or "").strip().lower()
        if key and key not in wanted:
            wanted.append(key)
    if len(wanted) < 2:
        raise ValidationError("Please select at least 2 companies to compare")

    result = await db.execute(select(Job).where(func.lower(Job.company).in_(wanted)).order_by(Job.id))
    by_company: dict[str, list] = {}
    for job in result.scalars().all():
        by_company.setdefault(job.company.lower(), []).append(job)

    companies = [company_stats(by_company[key]) for key in wanted if key in by_company]
    missing = [key for key in wanted if key not in by_company]
    if len(companies) < 2:
        raise ValidationError(
            "Not enough companies with job data to compare",
            f"No jobs found for: {', '.join(missing)}" if missing else None,
        )

    owners: dict[str, set] = {}
    for company in companies:
        for skill in company["top_skills"]:
            owners.setdefault(skill["skill"].lower(), set()).add(company["name"])
    common = [skill for skill, seen_at in owners.items() if len(seen_at) >= 2]

    return {
        "companies": companies,
        "missing": missing,
        "insights": comparison_insights(companies, common),
        "skill_overlap": {
            "common": common[:OVERLAP_LIMIT],
            "by_company": {
                c["name"]: [
                    s["skill"].lower() for s in c["top_skills"] if s["skill"].lower() not in common
                ][:OVERLAP_LIMIT]
                for c in companies
            },
        },
    }
