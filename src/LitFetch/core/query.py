from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union


@dataclass(frozen=True, slots=True)
class And:
    """Conjunction of child nodes. An empty conjunction carries no content."""

    children: Sequence[QueryNode] = ()


@dataclass(frozen=True, slots=True)
class Or:
    """Disjunction of child nodes."""

    children: Sequence[QueryNode] = ()


@dataclass(frozen=True, slots=True)
class Not:
    """Negation of a single child node."""

    child: QueryNode


@dataclass(frozen=True, slots=True)
class FieldTerm:
    """A value bound to a named field, e.g. ``author:Smith``.

    Field names are semantic and lower-case (author/title/journal/year/...).
    How a field maps onto a provider is decided by the provider's transformer.
    """

    field: str
    value: str


@dataclass(frozen=True, slots=True)
class UnfieldedTerm:
    """A free-text value searched in the provider's default fields."""

    value: str


@dataclass(frozen=True, slots=True)
class RangeTerm:
    """An inclusive range on a field, e.g. ``year:[2018 TO 2021]``.

    Either bound may be None for an open-ended range.
    """

    field: str
    lower: str | None
    upper: str | None


QueryNode = Union[And, Or, Not, FieldTerm, UnfieldedTerm, RangeTerm]


@dataclass(frozen=True, slots=True)
class NamedQuery:
    """A configured query: display name, raw text and parsed tree.

    Attributes:
        name: Optional query name for display.
        text: Raw query text as written by the user.
        node: Parsed query tree.
    """

    name: str | None
    text: str
    node: QueryNode
