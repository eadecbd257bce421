"""Extractor package: import all extractors to trigger @register_extractor decorators."""

from research_hub.extractors.greenhouse import GreenhouseExtractor  # noqa: F401
from research_hub.extractors.ashby import AshbyExtractor  # noqa: F401
from research_hub.extractors.html_listing import HtmlListingExtractor  # noqa: F401
from research_hub.extractors.research_index import ResearchIndexExtractor  # noqa: F401
