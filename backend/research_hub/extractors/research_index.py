"""Research index scraper: paper listings on a lab's publications page."""

import logging
import re
from datetime import date, datetime

from research_hub.extractors.base import PaperExtractor
from research_hub.extractors.html_listing import listing_items
from research_hub.extractors.registry import register_extractor

logger = logging.getLogger(__name__)

ARXIV_ID = re.compile(r"arxiv\.org/(?:abs|pdf)/(\d{4}\.\d{4,5})")


def parse_date(text: str | None, formats) -> date | None:
    if not text:
        return None
    text = text.strip()
    for fmt in formats:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def split_authors(text: str | None) -> list[str]:
    if not text:
        return []
    parts = re.split(r",|\band\b|;", text)
    return [p.strip() for p in parts if p.strip()]


@register_extractor("research_index")
class ResearchIndexExtractor(PaperExtractor):

    def scrape(self) -> list[dict]:
        logger.info(f"Fetching research index: {self.source.url}")
        return listing_items(self.fetch(self.source.url).text, self.source.rules, self.source.url)

    def normalize(self, raw: dict) -> dict | None:
        match = ARXIV_ID.search(raw["url"])
        return {
            "title": raw["title"],
            "url": raw["url"],
            "authors": split_authors(raw.get("authors")),
            "publication_date": parse_date(raw.get("date"), self.source.rules.date_formats),
            "abstract": raw.get("abstract"),
            "arxiv_id": match.group(1) if match else None,
            "tags": raw.get("tags") or [],
        }
