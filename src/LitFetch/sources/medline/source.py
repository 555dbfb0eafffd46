"""MEDLINE/PubMed data source adapter.

Composes query compilation, identifier search, batch fetching and
post-fetch cleanup into a `LiteratureSource` implementation.

Pipeline: transform -> search (one page, capped) -> batch fetch -> cleanup.
An empty transformed query or an empty id list ends the pipeline early with
no records; neither is an error.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from LitFetch.core.cleanup import CleanupRule, apply_cleanup
from LitFetch.core.models import BibEntry
from LitFetch.core.query import QueryNode
from LitFetch.sources.medline.cleanup import MEDLINE_CLEANUP_RULES
from LitFetch.sources.medline.client import NUMBER_TO_FETCH, EutilsApiClient
from LitFetch.sources.medline.query import compile_search_query
from LitFetch.utils.log import log


@dataclass(slots=True)
class MedlineSource:
    """`LiteratureSource` implementation backed by NCBI E-utilities.

    Holds no per-call state, so one instance can serve independent searches.
    """

    client: EutilsApiClient
    name: str = "medline"
    max_results: int = NUMBER_TO_FETCH
    cleanup_rules: Sequence[CleanupRule] = MEDLINE_CLEANUP_RULES

    def search(self, query: QueryNode) -> list[BibEntry]:
        """Search MEDLINE and return cleaned records.

        Args:
            query: Parsed query tree.

        Returns:
            Cleaned records in relevance order; empty when the query has no
            searchable content or nothing matched.

        Raises:
            RetrievalError: On transport failure in either call.
            ParseError: On a malformed response in either call.
        """
        term = compile_search_query(query)
        if term is None or not term.strip():
            log.info("Query has no searchable content; no request sent.")
            return []

        log.debug("MEDLINE query: %s (max_results=%s)", term, self.max_results)
        result = self.client.search_ids(term, max_results=self.max_results)
        if result.is_empty:
            log.info("No results found.")
            return []
        if result.total_count > self.max_results:
            log.info(
                "%d results found. Only %d relevant results will be fetched.",
                result.total_count,
                self.max_results,
            )

        return self.fetch(result.ids)

    def fetch(self, ids: Sequence[str]) -> list[BibEntry]:
        """Fetch a batch of records in one request and clean each of them.

        Args:
            ids: PubMed identifiers.

        Returns:
            Cleaned records; parser warnings are logged, not raised.
        """
        parsed = self.client.fetch_records(ids)
        if parsed.has_warnings:
            log.warning("MEDLINE parser warnings: %s", parsed.error_message)
        entries = parsed.entries
        for entry in entries:
            apply_cleanup(entry, self.cleanup_rules)
        log.debug("MEDLINE fetched %d entries for %d ids", len(entries), len(ids))
        return entries

    def fetch_by_id(self, identifier: str) -> BibEntry | None:
        """Fetch a single record by PubMed identifier, skipping the search step.

        Args:
            identifier: PubMed identifier.

        Returns:
            The cleaned record, or None when nothing was found.
        """
        identifier = identifier.strip()
        if not identifier:
            return None
        entries = self.fetch([identifier])
        return entries[0] if entries else None

    def fetch_by_ids(self, identifiers: Sequence[str]) -> list[BibEntry]:
        """Fetch several records by PubMed identifier in one request.

        Blank and repeated identifiers are dropped; no request is sent when
        nothing is left.
        """
        ids = list(dict.fromkeys(i.strip() for i in identifiers if i.strip()))
        if not ids:
            return []
        return self.fetch(ids)

    def close(self) -> None:
        """Close resources held by the MEDLINE source adapter."""
        self.client.close()
