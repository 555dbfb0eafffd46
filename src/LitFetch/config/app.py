"""Application config: YAML loading, default layering and per-domain parsing.

Each config domain contributes a ``load_*`` function (shape and types) and a
``check_*`` function (value constraints). All domains are loaded before any is
checked, so a type error anywhere is reported before a range error.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from LitFetch.config.output import OutputConfig, check_output, load_output
from LitFetch.config.provider import ProviderConfig, check_provider, load_provider
from LitFetch.config.runtime import RuntimeConfig, check_runtime, load_runtime
from LitFetch.config.search import SearchConfig, check_search, load_search

DEFAULT_CONFIG_PATH = Path("config/default.yml")

# attribute name on AppConfig -> (loader, checker)
_DOMAINS = {
    "runtime": (load_runtime, check_runtime),
    "provider": (load_provider, check_provider),
    "search": (load_search, check_search),
    "output": (load_output, check_output),
}


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application root configuration."""

    runtime: RuntimeConfig
    provider: ProviderConfig
    search: SearchConfig
    output: OutputConfig


def parse_config_dict(raw: Mapping[str, Any]) -> AppConfig:
    """Parse a config mapping into AppConfig.

    Raises:
        TypeError: If a value has the wrong type.
        ValueError: If a value is missing or violates a constraint.
    """
    loaded = {name: loader(raw) for name, (loader, _) in _DOMAINS.items()}
    for name, (_, checker) in _DOMAINS.items():
        checker(loaded[name])
    return AppConfig(**loaded)


def load_config(path: Path) -> AppConfig:
    """Load a single YAML config file as-is."""
    return parse_config_dict(parse_yaml(path.read_text(encoding="utf-8")))


def load_config_with_defaults(config_path: Path, default_path: Path = DEFAULT_CONFIG_PATH) -> AppConfig:
    """Load `config_path` layered over the defaults file.

    Sections merge key by key; lists (such as ``queries``) are replaced.
    """
    base = parse_yaml(default_path.read_text(encoding="utf-8"))
    if config_path.resolve() == default_path.resolve():
        return parse_config_dict(base)
    override = parse_yaml(config_path.read_text(encoding="utf-8"))
    return parse_config_dict(merge_config_dicts(base, override))


def parse_yaml(text: str) -> dict[str, Any]:
    data = yaml.safe_load(text) or {}
    if not isinstance(data, Mapping):
        raise ValueError("Config root must be a mapping/object")
    return dict(data)


def merge_config_dicts(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge two config mappings; lists and scalars in `override` win."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_config_dicts(current, value)
        else:
            merged[key] = value
    return merged
