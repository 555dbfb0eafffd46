"""Output domain configuration for multi-format rendering."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from LitFetch.config.common import expect_str, expect_str_list, get_section, normalize_choices

_ALLOWED_FORMATS = {"console", "json", "bibtex"}


@dataclass(frozen=True, slots=True)
class OutputConfig:
    """Output configuration."""

    base_dir: str
    formats: tuple[str, ...]


def load_output(raw: Mapping[str, Any]) -> OutputConfig:
    """Load the ``output`` section; defaults to console output under ``output/``.

    Raises:
        TypeError: If config types are invalid.
    """
    section = get_section(raw, "output", required=False)
    formats = expect_str_list(section.get("formats", ["console"]), "output.formats")
    return OutputConfig(
        base_dir=expect_str(section.get("base_dir", "output"), "output.base_dir"),
        formats=normalize_choices(formats),
    )


def check_output(config: OutputConfig) -> None:
    """Validate output domain constraints.

    Raises:
        ValueError: If formats are empty or unknown.
    """
    if not config.formats:
        raise ValueError("output.formats must include at least one format")
    unknown = set(config.formats) - _ALLOWED_FORMATS
    if unknown:
        raise ValueError(f"output.formats has unknown formats: {sorted(unknown)}")
    if not config.base_dir.strip():
        raise ValueError("output.base_dir must not be empty")
