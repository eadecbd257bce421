"""Optional OpenAI enrichment for scraped job descriptions.

Used only by ingestion workers. Without an API key every call returns None
and ingestion carries on with the rule-based extraction.
"""

import json
import logging

from openai import OpenAI, OpenAIError

from research_hub.config import get_settings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You extract structured data from job postings. Respond with a JSON object "
    'of the form {"skills": [string], "salary_min": int|null, "salary_max": int|null}. '
    "Salaries are annual, in thousands of the posting's currency."
)
MAX_DESCRIPTION_CHARS = 12000

_client: OpenAI | None = None


def get_client() -> OpenAI | None:
    global _client
    settings = get_settings()
    if not settings.openai_api_key:
        return None
    if _client is None:
        _client = OpenAI(api_key=settings.openai_api_key, timeout=settings.scrape_request_timeout)
    return _client


def _as_int(value) -> int | None:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def parse_enrichment(raw: str) -> dict | None:
    """Validate the model's JSON reply into {skills, salary_min, salary_max}."""
    try:
        data = json.loads(raw)
    except (TypeError, json.JSONDecodeError):
        return None
    if not isinstance(data, dict):
        return None
    skills = data.get("skills") or []
    if not isinstance(skills, list):
        skills = []
    return {
        "skills": [str(s).strip() for s in skills if str(s).strip()],
        "salary_min": _as_int(data.get("salary_min")),
        "salary_max": _as_int(data.get("salary_max")),
    }


def enrich_job(title: str, description: str | None) -> dict | None:
    """Ask the chat model for skills and salary bounds. None on any failure."""
    client = get_client()
    if client is None or not description:
        return None

    try:
        response = client.chat.completions.create(
            model=get_settings().openai_model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": f"Title: {title}\n\n{description[:MAX_DESCRIPTION_CHARS]}"},
            ],
            response_format={"type": "json_object"},
            temperature=0,
        )
    except OpenAIError as e:
        logger.warning("LLM enrichment failed for %r: %s", title, e)
        return None

    result = parse_enrichment(response.choices[0].message.content)
    if result is None:
        logger.warning("LLM enrichment returned unparseable output for %r", title)
    return result
