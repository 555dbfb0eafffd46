from __future__ import annotations

"""Public configuration API for LitFetch."""

from LitFetch.config.app import (
    AppConfig,
    load_config,
    load_config_with_defaults,
    merge_config_dicts,
    parse_config_dict,
)
from LitFetch.config.output import OutputConfig
from LitFetch.config.provider import ProviderConfig
from LitFetch.config.runtime import RuntimeConfig
from LitFetch.config.search import SearchConfig, parse_named_query

__all__ = [
    "RuntimeConfig",
    "ProviderConfig",
    "SearchConfig",
    "OutputConfig",
    "AppConfig",
    "load_config",
    "load_config_with_defaults",
    "merge_config_dicts",
    "parse_config_dict",
    "parse_named_query",
]
