"""Base extractor abstract classes."""

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx
from celery.exceptions import SoftTimeLimitExceeded
from sqlalchemy import select

from research_hub.config import get_settings
from research_hub.extractors.rules import Source
from research_hub.extractors.salary import format_salary, parse_salary
from research_hub.extractors.skills import detect_skills, merge_labels
from research_hub.models.job import Job
from research_hub.models.research_paper import ResearchPaper
from research_hub.services import llm_client
from research_hub.services.job_service import make_job_id

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36"

JOB_FIELDS = ("title", "company", "location", "department", "salary", "salary_min", "salary_max", "skills", "description", "url")
PAPER_FIELDS = ("title", "authors", "publication_date", "abstract", "arxiv_id", "github_url", "company", "tags")


class Extractor(ABC):
    """Abstract base class for all ingestion sources.

    Subclasses must implement:
        scrape() -> list[dict]  fetch raw items from the source
        normalize(raw) -> dict  convert source-specific fields to row fields
    and inherit save() from JobExtractor or PaperExtractor.

    Every item is committed as it is saved, so an interrupted run keeps
    what it already wrote.
    """

    kind = "jobs"

    def __init__(self, source: Source, db, client: httpx.Client | None = None, enrich: bool = True):
        self.source = source
        self.db = db
        self.client = client
        self.enrich = enrich
        self.stats = {"items_found": 0, "items_new": 0, "items_updated": 0}

    @abstractmethod
    def scrape(self) -> list[dict]:
        ...

    @abstractmethod
    def normalize(self, raw: dict) -> dict | None:
        """Return row fields, or None to skip the item."""
        ...

    @abstractmethod
    def save(self, data: dict) -> str:
        """Upsert one normalized item. Returns 'new', 'updated' or 'existing'."""
        ...

    def fetch(self, url: str, **params) -> httpx.Response:
        """GET with the configured per-request timeout; raises on HTTP errors."""
        timeout = get_settings().scrape_request_timeout
        headers = {"User-Agent": USER_AGENT, "Accept": "application/json, text/html;q=0.9"}
        if self.client is not None:
            resp = self.client.get(url, params=params or None, headers=headers, timeout=timeout)
        else:
            resp = httpx.get(url, params=params or None, headers=headers, timeout=timeout, follow_redirects=True)
        resp.raise_for_status()
        return resp

    def run(self) -> dict[str, Any]:
        """Execute the full cycle: fetch, normalize, save."""
        raw_items = self.scrape()
        logger.info(f"[{self.source.key}] Fetched {len(raw_items)} raw listings")

        self.stats["items_found"] = len(raw_items)

        for raw in raw_items:
            try:
                normalized = self.normalize(raw)
                if normalized is None:
                    continue
                result = self.save(normalized)
                if result == "new":
                    self.stats["items_new"] += 1
                elif result == "updated":
                    self.stats["items_updated"] += 1
            except SoftTimeLimitExceeded:
                raise
            except Exception as e:
                self.db.rollback()
                logger.warning(f"[{self.source.key}] Failed to process listing: {e}")

        logger.info(f"[{self.source.key}] {self.stats}")
        return dict(self.stats)


def _apply(row, data: dict, fields) -> bool:
    changed = False
    for key in fields:
        if key in data and data[key] is not None and getattr(row, key) != data[key]:
            setattr(row, key, data[key])
            changed = True
    return changed


class JobExtractor(Extractor):
    """Jobs are upserted by natural id `<company>-<external id>`."""

    kind = "jobs"

    def complete(self, data: dict) -> dict:
        """Fill salary and skills from the text, then from the LLM if still missing."""
        data.setdefault("company", self.source.name)

        if data.get("salary_min") is None and data.get("salary_max") is None:
            low, high = parse_salary(data.get("salary") or data.get("description"))
            data["salary_min"], data["salary_max"] = low, high
        if not data.get("salary"):
            data["salary"] = format_salary(data.get("salary_min"), data.get("salary_max"))

        data["skills"] = merge_labels(
            data.get("skills"), detect_skills(data.get("title"), data.get("description"))
        )

        needs_llm = not data["skills"] or data.get("salary_max") is None
        if self.enrich and needs_llm:
            extra = llm_client.enrich_job(data["title"], data.get("description"))
            if extra:
                data["skills"] = merge_labels(data["skills"], extra["skills"])
                if data.get("salary_max") is None and extra["salary_max"] is not None:
                    data["salary_min"] = extra["salary_min"]
                    data["salary_max"] = extra["salary_max"]
                    data["salary"] = format_salary(extra["salary_min"], extra["salary_max"])
        return data

    def save(self, data: dict) -> str:
        data = self.complete(dict(data))
        job_id = data.pop("id", None) or make_job_id(data["company"], data.pop("external_id", None))
        data.pop("external_id", None)

        existing = self.db.get(Job, job_id)
        if existing is not None:
            changed = _apply(existing, data, JOB_FIELDS)
            self.db.commit()
            return "updated" if changed else "existing"

        job = Job(id=job_id, **{k: data.get(k) for k in JOB_FIELDS})
        if job.skills is None:
            job.skills = []
        self.db.add(job)
        self.db.commit()
        return "new"


class PaperExtractor(Extractor):
    """Papers are upserted by url."""

    kind = "papers"

    def save(self, data: dict) -> str:
        data = dict(data)
        data.setdefault("company", self.source.name)
        data["tags"] = merge_labels(data.get("tags"), self.source.default_tags)
        url = data["url"].strip()

        existing = self.db.execute(
            select(ResearchPaper).where(ResearchPaper.url == url)
        ).scalar_one_or_none()
        if existing is not None:
            changed = _apply(existing, data, PAPER_FIELDS)
            self.db.commit()
            return "updated" if changed else "existing"

        paper = ResearchPaper(url=url, **{k: data.get(k) for k in PAPER_FIELDS})
        if paper.authors is None:
            paper.authors = []
        self.db.add(paper)
        self.db.commit()
        return "new"
