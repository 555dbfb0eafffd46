"""Search service layer over a configured literature source."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from LitFetch.core.models import BibEntry
from LitFetch.core.query import NamedQuery, QueryNode
from LitFetch.utils.log import log


class LiteratureSource(Protocol):
    """Protocol for an external bibliographic data source."""

    name: str

    def search(self, query: QueryNode) -> Sequence[BibEntry]:
        """Search records matching a query tree."""
        raise NotImplementedError

    def fetch_by_id(self, identifier: str) -> BibEntry | None:
        """Fetch one record by its provider-native identifier."""
        raise NotImplementedError

    def fetch_by_ids(self, identifiers: Sequence[str]) -> Sequence[BibEntry]:
        """Fetch several records by identifier in one batch."""
        raise NotImplementedError

    def close(self) -> None:
        """Close resources held by source."""
        raise NotImplementedError


@dataclass(slots=True)
class LiteratureSearchService:
    """Application service that runs queries and id lookups against one source.

    Retrieval errors propagate unchanged so the caller can tell transport
    failures from unreadable payloads.
    """

    source: LiteratureSource

    def search(self, query: NamedQuery) -> list[BibEntry]:
        """Run one configured query.

        Args:
            query: Named query with its parsed tree.

        Returns:
            Records found by the source.
        """
        source_name = getattr(self.source, "name", "unknown")
        log.debug("Search start: source=%s name=%s text=%s", source_name, query.name, query.text)
        entries = list(self.source.search(query.node))
        log.info("Search source completed: source=%s count=%d", source_name, len(entries))
        return entries

    def fetch_by_id(self, identifier: str) -> BibEntry | None:
        """Fetch one record by identifier.

        Args:
            identifier: Provider-native identifier.

        Returns:
            The record, or None when the source has no such record.
        """
        entry = self.source.fetch_by_id(identifier)
        if entry is None:
            log.info("No record found for id=%s", identifier)
        return entry

    def fetch_by_ids(self, identifiers: Sequence[str]) -> list[BibEntry]:
        """Fetch several records by identifier in one batch.

        Args:
            identifiers: Provider-native identifiers.

        Returns:
            Records the source found; missing identifiers are logged.
        """
        entries = list(self.source.fetch_by_ids(identifiers))
        found = {entry.identifier for entry in entries}
        for identifier in identifiers:
            if identifier.strip() not in found:
                log.info("No record found for id=%s", identifier)
        return entries

    def close(self) -> None:
        """Close the source and release external resources."""
        try:
            self.source.close()
        except Exception as error:  # noqa: BLE001 - close failure must be isolated
            log.warning(
                "Search source close failed: source=%s error=%s",
                getattr(self.source, "name", "unknown"),
                error,
            )
