"""Provider domain configuration (endpoints, page size, NCBI identity)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from LitFetch.config.common import (
    check_http_url,
    expect_float,
    expect_int,
    expect_optional_str,
    expect_str,
    get_section,
)
from LitFetch.sources.medline.client import (
    DEFAULT_DATABASE,
    DEFAULT_TIMEOUT,
    DEFAULT_TOOL,
    EFETCH_URL,
    ESEARCH_URL,
    NUMBER_TO_FETCH,
)
from LitFetch.sources.registry import supported_source_names

# E-utilities refuses retmax above 10000
_MAX_PAGE_SIZE = 10000


@dataclass(frozen=True, slots=True)
class ProviderConfig:
    """Store validated provider settings.

    Attributes:
        name: Registered source name.
        database: Entrez database queried by both calls.
        search_url: Search endpoint.
        fetch_url: Fetch endpoint.
        max_results: Page-size cap of the single search page.
        timeout: HTTP timeout in seconds.
        tool: Tool name reported to NCBI.
        email: Contact email reported to NCBI.
        api_key_env: Environment variable holding the NCBI API key.
    """

    name: str
    database: str
    search_url: str
    fetch_url: str
    max_results: int
    timeout: float
    tool: str | None
    email: str | None
    api_key_env: str | None


def load_provider(raw: Mapping[str, Any]) -> ProviderConfig:
    """Load the ``provider`` section; every key has a default.

    Raises:
        TypeError: If config types are invalid.
    """
    section = get_section(raw, "provider", required=False)
    return ProviderConfig(
        name=expect_str(section.get("name", "medline"), "provider.name").strip().lower(),
        database=expect_str(section.get("database", DEFAULT_DATABASE), "provider.database"),
        search_url=expect_str(section.get("search_url", ESEARCH_URL), "provider.search_url"),
        fetch_url=expect_str(section.get("fetch_url", EFETCH_URL), "provider.fetch_url"),
        max_results=expect_int(section.get("max_results", NUMBER_TO_FETCH), "provider.max_results"),
        timeout=expect_float(section.get("timeout", DEFAULT_TIMEOUT), "provider.timeout"),
        tool=expect_optional_str(section.get("tool", DEFAULT_TOOL), "provider.tool"),
        email=expect_optional_str(section.get("email"), "provider.email"),
        api_key_env=expect_optional_str(section.get("api_key_env"), "provider.api_key_env"),
    )


def check_provider(config: ProviderConfig) -> None:
    """Validate provider domain constraints.

    Raises:
        ValueError: If values violate provider constraints.
    """
    if config.name not in supported_source_names():
        raise ValueError(f"provider.name has unknown source: {config.name}")
    if not config.database.strip():
        raise ValueError("provider.database must not be empty")
    check_http_url(config.search_url, "provider.search_url")
    check_http_url(config.fetch_url, "provider.fetch_url")
    if not 1 <= config.max_results <= _MAX_PAGE_SIZE:
        raise ValueError(f"provider.max_results must be between 1 and {_MAX_PAGE_SIZE}")
    if config.timeout <= 0:
        raise ValueError("provider.timeout must be positive")
