from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from typing import Sequence


@dataclass(slots=True)
class BibEntry:
    """Bibliographic record produced by a record parser.

    Field names are lower-case BibTeX-style keys (author, title, journal,
    year, month, pmid, ...). Values are plain strings; multiple authors are
    kept in one ``author`` value joined with `` and ``.

    Unlike most models in this package the entry is mutable: provider cleanup
    rewrites fields in place after fetching.

    Attributes:
        entry_type: BibTeX entry type (e.g. "article").
        fields: Field name to value mapping.
    """

    entry_type: str = "article"
    fields: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.fields = {k.lower(): v for k, v in self.fields.items() if v}

    def get(self, name: str) -> str | None:
        """Return the value of a field, or None when absent."""
        return self.fields.get(name.lower())

    def set(self, name: str, value: str | None) -> None:
        """Set a field. An empty or None value removes the field."""
        key = name.lower()
        if value:
            self.fields[key] = value
        else:
            self.fields.pop(key, None)

    def clear(self, name: str) -> None:
        """Remove a field if present."""
        self.fields.pop(name.lower(), None)

    def has(self, name: str) -> bool:
        return name.lower() in self.fields

    @property
    def identifier(self) -> str | None:
        """Provider-native identifier (PMID) if the record carries one."""
        return self.fields.get("pmid")


@dataclass(frozen=True, slots=True)
class SearchResult:
    """Outcome of one identifier search call.

    Attributes:
        ids: Provider-native identifiers in server relevance order.
        total_count: Total number of matches reported by the server. May be
            larger than ``len(ids)`` because the server caps the page size.
    """

    ids: Sequence[str] = ()
    total_count: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "ids", tuple(self.ids))

    @property
    def is_empty(self) -> bool:
        return not self.ids


@dataclass(slots=True)
class ParserResult:
    """Records and non-fatal warnings produced by a record parser."""

    entries: list[BibEntry] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    @property
    def error_message(self) -> str:
        """All warnings joined into a single log-friendly line."""
        return "; ".join(self.warnings)

