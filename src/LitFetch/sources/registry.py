"""Source registry and builders for literature sources."""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import TYPE_CHECKING

from LitFetch.utils.log import log

if TYPE_CHECKING:
    from LitFetch.config import AppConfig
    from LitFetch.services.search import LiteratureSource

SourceBuilder = Callable[["AppConfig"], "LiteratureSource"]


def build_source(source_name: str, *, config: AppConfig) -> LiteratureSource:
    """Build a literature source instance from the registered source name.

    Args:
        source_name: Source identifier from ``provider.name``.
        config: Parsed application configuration.

    Returns:
        LiteratureSource: Initialized source implementation for the given name.

    Raises:
        ValueError: If ``source_name`` is not registered.
    """
    builder = _source_builders().get(source_name)
    if builder is None:
        raise ValueError(f"Unsupported source in config.provider.name: {source_name}")
    return builder(config)


def supported_source_names() -> tuple[str, ...]:
    """Return all source names that can be built by the registry."""
    return tuple(_source_builders().keys())


def _source_builders() -> dict[str, SourceBuilder]:
    return {
        "medline": _build_medline_source,
    }


def _build_medline_source(config: AppConfig) -> LiteratureSource:
    """Build MEDLINE source; the API key is read from the configured env var."""
    from LitFetch.sources.medline.client import EutilsApiClient
    from LitFetch.sources.medline.source import MedlineSource

    provider = config.provider
    api_key = None
    if provider.api_key_env:
        api_key = os.getenv(provider.api_key_env) or None
        if api_key is None:
            log.warning("%s is not set; using the anonymous E-utilities rate limit", provider.api_key_env)

    client = EutilsApiClient(
        search_url=provider.search_url,
        fetch_url=provider.fetch_url,
        database=provider.database,
        timeout=provider.timeout,
        tool=provider.tool,
        email=provider.email,
        api_key=api_key,
    )
    return MedlineSource(client=client, name="medline", max_results=provider.max_results)
