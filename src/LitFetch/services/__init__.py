"""Search service layer for LitFetch.

Provides abstraction over literature sources and the factory used by the CLI.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from LitFetch.services.search import LiteratureSearchService, LiteratureSource

if TYPE_CHECKING:
    from LitFetch.config import AppConfig


def create_search_service(config: AppConfig) -> LiteratureSearchService:
    """Create a search service for the configured provider.

    Args:
        config: Application configuration containing provider settings.

    Returns:
        Configured LiteratureSearchService instance.
    """
    from LitFetch.sources.registry import build_source

    return LiteratureSearchService(source=build_source(config.provider.name, config=config))


__all__ = [
    "LiteratureSearchService",
    "LiteratureSource",
    "create_search_service",
]
