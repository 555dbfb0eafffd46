"""JSON output.

Renders records into JSON-serializable objects and writes one file per run.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Iterable, Sequence

from LitFetch.core.models import BibEntry
from LitFetch.renderers.base import OutputWriter
from LitFetch.utils.log import log


def render_json(entries: Iterable[BibEntry]) -> list[dict]:
    """Render records into JSON-serializable dicts.

    Authors are split into a list; all other fields are copied as strings.
    """
    out: list[dict] = []
    for entry in entries:
        fields = dict(entry.fields)
        authors = fields.pop("author", "")
        out.append(
            {
                "type": entry.entry_type,
                "id": entry.identifier,
                "authors": [a for a in authors.split(" and ") if a] if authors else [],
                "fields": fields,
            }
        )
    return out


class JsonFileWriter(OutputWriter):
    """Accumulate results and write to a JSON file on finalize."""

    def __init__(self, base_dir: str) -> None:
        self.output_dir = Path(base_dir) / "json"
        self.all_results: list[dict] = []

    def write_query_result(self, entries: Sequence[BibEntry], *, name: str | None, query: str) -> None:
        self.all_results.append(
            {
                "name": name,
                "query": query,
                "records": render_json(entries),
            }
        )

    def finalize(self, action: str) -> None:
        """Write accumulated results to ``<base_dir>/json/<action>_<timestamp>.json``."""
        payload = json.dumps(self.all_results, ensure_ascii=False, indent=2)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output_path = self.output_dir / f"{action}_{timestamp}.json"
        output_path.write_text(payload, encoding="utf-8")
        log.info("JSON saved to %s", output_path)
