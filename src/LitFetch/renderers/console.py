"""Console text output.

Renders records into human-friendly text, printed line by line via logging.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from LitFetch.core.models import BibEntry
from LitFetch.renderers.base import OutputWriter
from LitFetch.utils.log import log

_PUBMED_URL = "https://pubmed.ncbi.nlm.nih.gov/{pmid}/"


def _venue(entry: BibEntry) -> str:
    parts = [entry.get("journal") or "-"]
    volume = entry.get("volume")
    if volume:
        number = entry.get("number")
        parts.append(f"{volume}({number})" if number else volume)
    pages = entry.get("pages")
    if pages:
        parts.append(pages)
    return ", ".join(parts)


def _date(entry: BibEntry) -> str:
    year = entry.get("year")
    if not year:
        return "-"
    month = entry.get("month")
    return f"{year} {month.capitalize()}" if month else year


def render_text(entries: Iterable[BibEntry]) -> str:
    """Render records into a human-readable text block.

    Args:
        entries: Iterable of records.

    Returns:
        A formatted string ready to be printed.
    """
    lines: list[str] = []
    for idx, entry in enumerate(entries, start=1):
        lines.append(f"{idx}. {entry.get('title') or 'Untitled'}")
        lines.append(f"   Authors: {entry.get('author') or '-'}")
        lines.append(f"   Journal: {_venue(entry)}")
        lines.append(f"   Published: {_date(entry)}")
        if entry.get("doi"):
            lines.append(f"   DOI: {entry.get('doi')}")
        if entry.identifier:
            lines.append(f"   PubMed: {_PUBMED_URL.format(pmid=entry.identifier)}")
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"


class ConsoleOutputWriter(OutputWriter):
    """Write results to console via logging."""

    def write_query_result(self, entries: Sequence[BibEntry], *, name: str | None, query: str) -> None:
        log.info("=== %s ===", name or query)
        if not entries:
            log.info("(no records)")
            return
        for line in render_text(entries).splitlines():
            log.info(line)

    def finalize(self, action: str) -> None:
        """No-op for console output."""
