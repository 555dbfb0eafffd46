"""Smoke test for LitFetch CLI.

Run:
  python test/smoke_test.py

This script patches the E-utilities HTTP client to avoid network access and
validates that the CLI can execute a basic query and render the fetched records.
"""

from __future__ import annotations

import sys
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner


REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = REPO_ROOT / "src"
sys.path.insert(0, str(SRC_DIR))

FIXTURES = REPO_ROOT / "test" / "fixtures"


def _make_runner() -> CliRunner:
    """Create CliRunner with best-effort stderr capture."""
    try:
        return CliRunner(mix_stderr=True)
    except TypeError:
        # Newer Click versions always mix stderr into output.
        return CliRunner()


def main() -> int:
    from LitFetch.cli import cli
    from LitFetch.core.models import SearchResult
    from LitFetch.sources.medline.parser import MedlineXmlParser

    records = MedlineXmlParser().parse((FIXTURES / "efetch_articles.xml").read_bytes())
    runner = _make_runner()
    with patch(
        "LitFetch.sources.medline.client.EutilsApiClient.search_ids",
        return_value=SearchResult(ids=["31452104", "30833741"], total_count=2),
    ), patch(
        "LitFetch.sources.medline.client.EutilsApiClient.fetch_records",
        return_value=records,
    ):
        result = runner.invoke(
            cli,
            [
                "--config",
                str(REPO_ROOT / "config" / "default.yml"),
                "search",
                "--query",
                "title:CRISPR",
            ],
            catch_exceptions=False,
        )

    output = result.output
    assert result.exit_code == 0, output
    assert "Fetched 2 records" in output, output
    assert "Genome editing with CRISPR systems." in output, output
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
