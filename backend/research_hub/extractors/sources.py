"""Ingestion source table.

Adding a source means adding a row here; extractors stay untouched.
"""

from research_hub.extractors.rules import ExtractionRules, Source

SOURCES: dict[str, Source] = {
    source.key: source
    for source in (
        Source(
            key="anthropic",
            name="Anthropic",
            kind="jobs",
            platform="greenhouse",
            url="https://www.anthropic.com/careers",
            board="anthropic",
        ),
        Source(
            key="deepmind",
            name="Google DeepMind",
            kind="jobs",
            platform="greenhouse",
            url="https://deepmind.google/about/careers/",
            board="deepmind",
        ),
        Source(
            key="openai",
            name="OpenAI",
            kind="jobs",
            platform="ashby",
            url="https://openai.com/careers",
            board="openai",
        ),
        Source(
            key="huggingface",
            name="Hugging Face",
            kind="jobs",
            platform="html_listing",
            url="https://apply.workable.com/huggingface/",
            rules=ExtractionRules(
                item_selector="li[data-ui='job']",
                title_selector="h3",
                link_selector="a",
                location_selector="[data-ui='job-location']",
                department_selector="[data-ui='job-department']",
            ),
        ),
        Source(
            key="anthropic-research",
            name="Anthropic",
            kind="papers",
            platform="research_index",
            url="https://www.anthropic.com/research",
            rules=ExtractionRules(
                item_selector="a[href*='/research/']",
                title_selector="h3, h4, span[class*='title']",
                link_must_contain="/research/",
                date_selector="time, div[class*='date']",
                tags_selector="span[class*='subject']",
            ),
            default_tags=("ai safety",),
        ),
        Source(
            key="deepmind-research",
            name="Google DeepMind",
            kind="papers",
            platform="research_index",
            url="https://deepmind.google/research/publications/",
            rules=ExtractionRules(
                item_selector="li.list-compact__item",
                title_selector="a",
                link_selector="a",
                date_selector="time",
                authors_selector="p.list-compact__authors",
                tags_selector="span.glue-label",
                date_formats=("%d %B %Y", "%B %d, %Y", "%Y-%m-%d"),
            ),
        ),
    )
}


def get_source(key: str) -> Source | None:
    return SOURCES.get((key or "").strip().lower())


def list_sources(kind: str | None = None) -> list[Source]:
    return [s for s in SOURCES.values() if kind is None or s.kind == kind]
