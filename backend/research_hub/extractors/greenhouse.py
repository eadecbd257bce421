"""Greenhouse job board scraper.

Greenhouse exposes a public JSON API per board token:
https://boards-api.greenhouse.io/v1/boards/{token}/jobs?content=true
"""

import html
import logging

from bs4 import BeautifulSoup

from research_hub.extractors.base import JobExtractor
from research_hub.extractors.registry import register_extractor

logger = logging.getLogger(__name__)

API_URL = "https://boards-api.greenhouse.io/v1/boards/{board}/jobs"


def html_to_text(markup: str | None) -> str | None:
    """Greenhouse sends entity-escaped HTML; unescape then strip tags."""
    if not markup:
        return None
    soup = BeautifulSoup(html.unescape(markup), "lxml")
    text = soup.get_text("\n", strip=True)
    return text or None


@register_extractor("greenhouse")
class GreenhouseExtractor(JobExtractor):

    def scrape(self) -> list[dict]:
        board = self.source.board or self.source.key
        logger.info(f"Fetching Greenhouse board {board}")
        data = self.fetch(API_URL.format(board=board), content="true").json()
        return data.get("jobs", [])

    def normalize(self, raw: dict) -> dict | None:
        if not raw.get("title") or raw.get("id") is None:
            return None
        location = raw.get("location") or {}
        departments = raw.get("departments") or []
        return {
            "external_id": str(raw["id"]),
            "title": raw["title"].strip(),
            "location": location.get("name") if isinstance(location, dict) else None,
            "department": departments[0].get("name") if departments else None,
            "description": html_to_text(raw.get("content")),
            "url": raw.get("absolute_url") or self.source.url,
        }
