"""BibTeX output.

Renders records as BibTeX entries and writes one ``.bib`` file per run.
Citation keys are ``<FirstAuthorLastName><year>`` with a letter suffix on
collisions, falling back to ``pmid<PMID>``.
"""

from __future__ import annotations

import re
import unicodedata
from datetime import datetime
from pathlib import Path
from typing import Iterable, Sequence

from LitFetch.core.cleanup import MONTH_ABBREVIATIONS
from LitFetch.core.models import BibEntry
from LitFetch.renderers.base import OutputWriter
from LitFetch.utils.log import log

_FIELD_ORDER = (
    "author", "title", "journal", "year", "month", "volume", "number", "pages",
    "doi", "issn", "pmid", "pmc", "abstract", "keywords", "mesh", "language", "pubtype",
)
_KEY_STRIP_RE = re.compile(r"[^A-Za-z0-9]")
_ESCAPE_RE = re.compile(r"(?<!\\)([&%#_])")


def _ascii(text: str) -> str:
    return unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")


def citation_key(entry: BibEntry) -> str:
    """Build the base citation key for an entry."""
    author = entry.get("author") or ""
    first = author.split(" and ")[0].strip().strip("{}")
    last = first.split(",")[0] if "," in first else (first.split(" ")[-1] if first else "")
    last = _KEY_STRIP_RE.sub("", _ascii(last))
    year = entry.get("year") or ""
    if last:
        return f"{last}{year}"
    return f"pmid{entry.identifier}" if entry.identifier else "entry"


def _format_value(name: str, value: str) -> str:
    if name == "month" and value in MONTH_ABBREVIATIONS:
        return value
    return "{" + _ESCAPE_RE.sub(r"\\\1", value) + "}"


def render_bibtex(entries: Iterable[BibEntry]) -> str:
    """Render records into a BibTeX document.

    Args:
        entries: Iterable of records.

    Returns:
        BibTeX text, entries separated by blank lines.
    """
    used: dict[str, int] = {}
    blocks: list[str] = []
    for entry in entries:
        base = citation_key(entry)
        count = used.get(base, 0)
        used[base] = count + 1
        key = base if count == 0 else f"{base}{chr(ord('a') + count - 1)}"

        names = [n for n in _FIELD_ORDER if entry.has(n)]
        names.extend(sorted(n for n in entry.fields if n not in _FIELD_ORDER))
        lines = [f"@{entry.entry_type}{{{key},"]
        lines.extend(f"  {name} = {_format_value(name, entry.fields[name])}," for name in names)
        lines.append("}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks) + ("\n" if blocks else "")


class BibtexFileWriter(OutputWriter):
    """Accumulate records and write a single ``.bib`` file on finalize."""

    def __init__(self, base_dir: str) -> None:
        self.output_dir = Path(base_dir) / "bibtex"
        self.entries: list[BibEntry] = []

    def write_query_result(self, entries: Sequence[BibEntry], *, name: str | None, query: str) -> None:
        self.entries.extend(entries)

    def finalize(self, action: str) -> None:
        """Write ``<base_dir>/bibtex/<action>_<timestamp>.bib``; nothing when empty."""
        if not self.entries:
            log.info("No records to write as BibTeX")
            return
        self.output_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output_path = self.output_dir / f"{action}_{timestamp}.bib"
        output_path.write_text(render_bibtex(self.entries), encoding="utf-8")
        log.info("BibTeX saved to %s (%d entries)", output_path, len(self.entries))
