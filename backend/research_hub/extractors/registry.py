"""Extractor registry: maps platform names to extractor classes."""

import logging
from typing import Type

from research_hub.extractors.base import Extractor

logger = logging.getLogger(__name__)

# Platform name -> extractor class mapping
_REGISTRY: dict[str, Type[Extractor]] = {}


def register_extractor(platform: str):
    """Decorator to register an extractor class for a platform."""
    def decorator(cls: Type[Extractor]):
        _REGISTRY[platform] = cls
        logger.debug(f"Registered extractor for platform: {platform}")
        return cls
    return decorator


def get_extractor_class(platform: str) -> Type[Extractor] | None:
    return _REGISTRY.get(platform)


def list_platforms() -> list[str]:
    return list(_REGISTRY.keys())
