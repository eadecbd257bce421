"""Ashby job board scraper.

Ashby's public posting API returns every listed job, with compensation
when `includeCompensation` is set.
"""

import logging

from research_hub.extractors.base import JobExtractor
from research_hub.extractors.registry import register_extractor

logger = logging.getLogger(__name__)

API_URL = "https://api.ashbyhq.com/posting-api/job-board/{board}"


@register_extractor("ashby")
class AshbyExtractor(JobExtractor):

    def scrape(self) -> list[dict]:
        board = self.source.board or self.source.key
        logger.info(f"Fetching Ashby job board {board}")
        data = self.fetch(API_URL.format(board=board), includeCompensation="true").json()
        jobs = data.get("jobs", [])
        return [job for job in jobs if job.get("isListed", True)]

    def normalize(self, raw: dict) -> dict | None:
        if not raw.get("title") or not raw.get("id"):
            return None
        compensation = raw.get("compensation") or {}
        return {
            "external_id": raw["id"],
            "title": raw["title"].strip(),
            "location": raw.get("location"),
            "department": raw.get("department") or raw.get("team"),
            "salary": compensation.get("compensationTierSummary") or compensation.get("scrapeableCompensationSalarySummary"),
            "description": raw.get("descriptionPlain"),
            "url": raw.get("jobUrl") or raw.get("applyUrl") or self.source.url,
        }
