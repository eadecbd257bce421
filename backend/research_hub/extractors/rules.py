"""Declarative per-source extraction rules."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ExtractionRules:
    """CSS selectors that pull listings out of an HTML index page.

    Selectors are evaluated relative to each element matched by
    `item_selector`. A missing selector means the field is not extracted.
    """

    item_selector: str
    title_selector: str | None = None  # None: the item's own text
    link_selector: str | None = None  # None: the item itself if it is an <a>, else its first <a>
    link_must_contain: str | None = None
    location_selector: str | None = None
    department_selector: str | None = None
    salary_selector: str | None = None
    date_selector: str | None = None
    date_formats: tuple[str, ...] = ("%Y-%m-%d", "%B %d, %Y", "%b %d, %Y", "%d %B %Y")
    authors_selector: str | None = None
    abstract_selector: str | None = None
    tags_selector: str | None = None
    # Detail pages are fetched for descriptions when set
    detail_selector: str | None = None
    max_details: int = 30


@dataclass(frozen=True)
class Source:
    """One ingestion source: where to fetch and how to read it."""

    key: str
    name: str  # company shown on saved rows
    kind: str  # jobs, papers
    platform: str  # extractor registry key
    url: str
    board: str | None = None  # Greenhouse board token / Ashby organisation
    rules: ExtractionRules | None = None
    default_tags: tuple[str, ...] = field(default_factory=tuple)
