"""Command implementations for the LitFetch CLI.

Encapsulates command logic, separated from CLI parameter handling and
output formatting.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from LitFetch.core.query import NamedQuery
from LitFetch.renderers import OutputWriter
from LitFetch.services.search import LiteratureSearchService
from LitFetch.utils.log import log


@dataclass(slots=True)
class SearchCommand:
    """Run every query against the search service and hand results to the writer."""

    queries: Sequence[NamedQuery]
    search_service: LiteratureSearchService
    output_writer: OutputWriter

    def execute(self) -> int:
        """Execute all queries in order.

        Returns:
            Total number of records written.
        """
        total = 0
        multiple = len(self.queries) > 1
        for idx, query in enumerate(self.queries, start=1):
            if multiple:
                log.info("=== Query %d/%d ===", idx, len(self.queries))
            if query.name:
                log.info("name=%s", query.name)
            log.info("query=%s", query.text)

            entries = self.search_service.search(query)
            log.info("Fetched %d records", len(entries))
            total += len(entries)
            self.output_writer.write_query_result(entries, name=query.name, query=query.text)
        return total


@dataclass(slots=True)
class FetchCommand:
    """Look up records by identifier in a single batch request."""

    identifiers: Sequence[str]
    search_service: LiteratureSearchService
    output_writer: OutputWriter

    def execute(self) -> int:
        """Fetch every identifier.

        Returns:
            Number of identifiers that produced a record.
        """
        by_id = {e.identifier: e for e in self.search_service.fetch_by_ids(self.identifiers)}
        found = 0
        for identifier in self.identifiers:
            entry = by_id.get(identifier.strip())
            entries = [entry] if entry is not None else []
            found += len(entries)
            self.output_writer.write_query_result(entries, name=f"id {identifier}", query=identifier)
        return found
