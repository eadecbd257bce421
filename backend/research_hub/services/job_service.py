"""Job identity and duplicate detection, shared by the API and workers."""

import re
import uuid
from collections import defaultdict

from research_hub.models.base import as_utc


def slugify(value: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", (value or "").lower()).strip("-") or "job"


def make_job_id(company: str, external_id: str | None = None) -> str:
    """Natural key `<company-slug>-<external id>`; random suffix when there is no external id."""
    suffix = slugify(str(external_id)) if external_id else uuid.uuid4().hex[:12]
    return f"{slugify(company)}-{suffix}"


def duplicate_key(job) -> tuple[str, str, str]:
    return (
        (job.company or "").strip().lower(),
        (job.title or "").strip().lower(),
        (job.location or "").strip().lower(),
    )


def find_duplicate_groups(jobs) -> list[list]:
    """Groups of jobs sharing company, title and location, newest first."""
    groups = defaultdict(list)
    for job in jobs:
        groups[duplicate_key(job)].append(job)

    duplicates = []
    for members in groups.values():
        if len(members) > 1:
            members.sort(key=lambda j: (as_utc(j.updated_at), j.id), reverse=True)
            duplicates.append(members)
    return duplicates


def redundant_job_ids(jobs) -> list[str]:
    """Ids to delete so that only the newest job in each duplicate group survives.

    Manually saved rows are never picked while an ingested copy can go instead.
    """
    doomed = []
    for group in find_duplicate_groups(jobs):
        keeper = next((j for j in group if j.user_id is not None), group[0])
        doomed.extend(j.id for j in group if j is not keeper and j.user_id is None)
    return doomed
