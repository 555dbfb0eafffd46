"""Output renderers for command results.

Provides the OutputWriter protocol and implementations for console, JSON and
BibTeX output, plus a factory that instantiates writers from configuration.
"""

from __future__ import annotations

from LitFetch.config import AppConfig
from LitFetch.renderers.base import MultiOutputWriter, OutputWriter
from LitFetch.renderers.bibtex import BibtexFileWriter, render_bibtex
from LitFetch.renderers.console import ConsoleOutputWriter, render_text
from LitFetch.renderers.json import JsonFileWriter, render_json


def create_output_writer(config: AppConfig) -> OutputWriter:
    """Create output writer based on config.

    Args:
        config: Application configuration.

    Returns:
        A MultiOutputWriter over every configured format.
    """
    writers: list[OutputWriter] = []
    if "console" in config.output.formats:
        writers.append(ConsoleOutputWriter())
    if "json" in config.output.formats:
        writers.append(JsonFileWriter(config.output.base_dir))
    if "bibtex" in config.output.formats:
        writers.append(BibtexFileWriter(config.output.base_dir))

    if not writers:
        raise ValueError("No output writers configured")
    return MultiOutputWriter(writers)


__all__ = [
    "OutputWriter",
    "BibtexFileWriter",
    "ConsoleOutputWriter",
    "JsonFileWriter",
    "MultiOutputWriter",
    "render_bibtex",
    "render_json",
    "render_text",
    "create_output_writer",
]
