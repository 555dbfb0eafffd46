"""CLI package for LitFetch command orchestration."""

from __future__ import annotations

__all__ = ["CommandRunner", "main"]

from LitFetch.cli.runner import CommandRunner
from LitFetch.cli.ui import cli


def main() -> None:
    """Run LitFetch CLI.

    Entry point referenced by console script in pyproject.toml.
    """
    cli()
