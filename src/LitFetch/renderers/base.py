"""Base classes for output writers.

Separates control flow from output logic so commands stay testable.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence

from LitFetch.core.models import BibEntry


class OutputWriter(ABC):
    """Abstract base class for command output writers."""

    @abstractmethod
    def write_query_result(self, entries: Sequence[BibEntry], *, name: str | None, query: str) -> None:
        """Write the records produced by one query or id lookup.

        Args:
            entries: Records to write.
            name: Optional display name of the query.
            query: Raw query text (or the looked-up identifier).
        """

    @abstractmethod
    def finalize(self, action: str) -> None:
        """Finalize output (e.g., write accumulated results to file).

        Args:
            action: The CLI command name (e.g., 'search').
        """


@dataclass(slots=True)
class MultiOutputWriter(OutputWriter):
    """Delegate output to multiple writers."""

    writers: Sequence[OutputWriter]

    def write_query_result(self, entries: Sequence[BibEntry], *, name: str | None, query: str) -> None:
        for writer in self.writers:
            writer.write_query_result(entries, name=name, query=query)

    def finalize(self, action: str) -> None:
        for writer in self.writers:
            writer.finalize(action)
