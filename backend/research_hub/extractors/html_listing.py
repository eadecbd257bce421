"""Generic HTML careers-page scraper driven by ExtractionRules."""

import logging
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup
from celery.exceptions import SoftTimeLimitExceeded

from research_hub.extractors.base import JobExtractor
from research_hub.extractors.registry import register_extractor

logger = logging.getLogger(__name__)


def select_text(element, selector: str | None) -> str | None:
    if not selector:
        return None
    found = element.select_one(selector)
    if found is None:
        return None
    return found.get_text(" ", strip=True) or None


def select_link(element, selector: str | None, base_url: str) -> str | None:
    if selector:
        link = element.select_one(selector)
    elif element.name == "a":
        link = element
    else:
        link = element.find("a")
    if link is None or not link.get("href"):
        return None
    return urljoin(base_url, link["href"])


def listing_items(page_html: str, rules, base_url: str) -> list[dict]:
    """Apply rules to an index page; one dict per item with a title and url."""
    soup = BeautifulSoup(page_html, "lxml")
    items = []
    seen = set()
    for element in soup.select(rules.item_selector):
        title = select_text(element, rules.title_selector) if rules.title_selector else element.get_text(" ", strip=True)
        url = select_link(element, rules.link_selector, base_url)
        if not title or not url:
            continue
        if rules.link_must_contain and rules.link_must_contain not in url:
            continue
        if url in seen:
            continue
        seen.add(url)
        items.append({
            "title": title,
            "url": url,
            "location": select_text(element, rules.location_selector),
            "department": select_text(element, rules.department_selector),
            "salary": select_text(element, rules.salary_selector),
            "date": select_text(element, rules.date_selector),
            "authors": select_text(element, rules.authors_selector),
            "abstract": select_text(element, rules.abstract_selector),
            "tags": [t.get_text(strip=True) for t in element.select(rules.tags_selector)] if rules.tags_selector else [],
        })
    return items


@register_extractor("html_listing")
class HtmlListingExtractor(JobExtractor):

    def scrape(self) -> list[dict]:
        rules = self.source.rules
        logger.info(f"Fetching careers page: {self.source.url}")
        items = listing_items(self.fetch(self.source.url).text, rules, self.source.url)

        if rules.detail_selector:
            for item in items[:rules.max_details]:
                try:
                    detail = BeautifulSoup(self.fetch(item["url"]).text, "lxml")
                except SoftTimeLimitExceeded:
                    raise
                except Exception as e:
                    logger.warning(f"[{self.source.key}] Detail page failed for {item['url']}: {e}")
                    continue
                for tag in detail(["script", "style"]):
                    tag.decompose()
                item["description"] = select_text(detail, rules.detail_selector)
        return items

    def normalize(self, raw: dict) -> dict | None:
        path = urlparse(raw["url"]).path.rstrip("/")
        external_id = path.rsplit("/", 1)[-1] or raw["title"]
        return {
            "external_id": external_id,
            "title": raw["title"],
            "location": raw.get("location"),
            "department": raw.get("department"),
            "salary": raw.get("salary"),
            "description": raw.get("description"),
            "url": raw["url"],
        }
