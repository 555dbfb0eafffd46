"""Query tree to provider query string.

The transformer is driven entirely by a `ProviderSyntax` table, so supporting
another provider means declaring another table rather than another code path.

Rules
- Boolean nodes render with the provider's infix operators. A child whose
  operator differs from its parent's is wrapped in parentheses; NOT wraps any
  compound operand. The top level is never wrapped.
- Field names map to provider prefixes; unknown fields pass through as
  ``field:value``; values containing whitespace are double-quoted.
- ``year:Y`` becomes ``<start>:Y AND <end>:Y`` and ``year-range:Y1-Y2`` (or
  ``year:[Y1 TO Y2]``) becomes ``<start>:Y1 AND <end>:Y2``. Years must be four
  digits or the term is dropped; reversed bounds are swapped.
- Blank terms and empty groups vanish; if nothing is left the result is None.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from dataclasses import field as dc_field
from typing import Mapping

from LitFetch.core.query import And, FieldTerm, Not, Or, QueryNode, RangeTerm, UnfieldedTerm

_RE_NEEDS_QUOTE = re.compile(r"\s")
_YEAR_RE = re.compile(r"^\d{4}$")
_YEAR_RANGE_RE = re.compile(r"^\s*(\d{4})?\s*-\s*(\d{4})?\s*$")

_ATOM = "atom"
_AND = "and"
_OR = "or"
_NOT = "not"


@dataclass(frozen=True, slots=True)
class ProviderSyntax:
    """Declarative description of a provider's textual query syntax.

    Attributes:
        name: Provider identifier.
        field_prefixes: Semantic field name to provider prefix. An empty
            prefix means the value is emitted without a field.
        start_year_field: Provider field constraining the start date.
        end_year_field: Provider field constraining the end date.
        and_operator: Infix AND operator including surrounding spaces.
        or_operator: Infix OR operator including surrounding spaces.
        not_operator: Prefix NOT operator including trailing space.
    """

    name: str
    field_prefixes: Mapping[str, str] = dc_field(default_factory=dict)
    start_year_field: str = "sd"
    end_year_field: str = "ed"
    and_operator: str = " AND "
    or_operator: str = " OR "
    not_operator: str = "NOT "


@dataclass(frozen=True, slots=True)
class _Rendered:
    text: str
    kind: str


def _quote(term: str) -> str:
    t = term.strip()
    if not t:
        return ""
    if t.startswith('"') and t.endswith('"') and len(t) > 1:
        return t
    if _RE_NEEDS_QUOTE.search(t):
        return f'"{t}"'
    return t


def parse_year_range(value: str) -> tuple[str | None, str | None] | None:
    """Split ``YYYY-YYYY`` into its bounds.

    Either bound may be missing (``2018-`` or ``-2021``). Returns None when the
    value is not a year range at all.
    """
    m = _YEAR_RANGE_RE.match(value)
    if m is None or (m.group(1) is None and m.group(2) is None):
        return None
    return m.group(1), m.group(2)


class QueryTransformer:
    """Render query trees into one provider's query syntax."""

    def __init__(self, syntax: ProviderSyntax) -> None:
        self.syntax = syntax

    def transform(self, node: QueryNode) -> str | None:
        """Render a query tree.

        Args:
            node: Parsed query tree; it is only read.

        Returns:
            Provider query string, or None when the tree has no translatable
            content.
        """
        rendered = self._render(node)
        if rendered is None or not rendered.text.strip():
            return None
        return rendered.text

    def _render(self, node: QueryNode) -> _Rendered | None:
        if isinstance(node, And):
            return self._join(node.children, _AND, self.syntax.and_operator)
        if isinstance(node, Or):
            return self._join(node.children, _OR, self.syntax.or_operator)
        if isinstance(node, Not):
            inner = self._render(node.child)
            if inner is None:
                return None
            text = f"({inner.text})" if inner.kind in (_AND, _OR) else inner.text
            return _Rendered(self.syntax.not_operator + text, _NOT)
        if isinstance(node, UnfieldedTerm):
            return self._term("", node.value)
        if isinstance(node, FieldTerm):
            return self._field_term(node.field, node.value)
        if isinstance(node, RangeTerm):
            return self._range_term(node.field, node.lower, node.upper)
        raise TypeError(f"Unsupported query node: {type(node).__name__}")

    def _join(self, children, kind: str, operator: str) -> _Rendered | None:
        rendered = [r for r in (self._render(child) for child in children) if r is not None]
        if not rendered:
            return None
        if len(rendered) == 1:
            # a lone survivor keeps its own kind so the parent groups it correctly
            return rendered[0]
        parts = [
            f"({r.text})" if r.kind in (_AND, _OR) and r.kind != kind else r.text
            for r in rendered
        ]
        return _Rendered(operator.join(parts), kind)

    def _term(self, prefix: str, value: str) -> _Rendered | None:
        quoted = _quote(value)
        if not quoted:
            return None
        return _Rendered(f"{prefix}:{quoted}" if prefix else quoted, _ATOM)

    def _field_term(self, field: str, value: str) -> _Rendered | None:
        field = field.strip().lower()
        if field == "year":
            return self._year_bounds(value, value)
        if field == "year-range":
            bounds = parse_year_range(value)
            if bounds is None:
                return None
            return self._year_bounds(*bounds)
        prefix = self.syntax.field_prefixes.get(field, field)
        return self._term(prefix, value)

    def _range_term(self, field: str, lower: str | None, upper: str | None) -> _Rendered | None:
        if field.strip().lower() in ("year", "year-range"):
            return self._year_bounds(lower, upper)
        return None

    def _year_bounds(self, start: str | None, end: str | None) -> _Rendered | None:
        start = start.strip() if start else None
        end = end.strip() if end else None
        if any(b is not None and not _YEAR_RE.match(b) for b in (start, end)):
            return None
        if start is not None and end is not None and start > end:
            start, end = end, start
        parts = [
            r.text
            for r in (
                self._term(self.syntax.start_year_field, start or ""),
                self._term(self.syntax.end_year_field, end or ""),
            )
            if r is not None
        ]
        if not parts:
            return None
        if len(parts) == 1:
            return _Rendered(parts[0], _ATOM)
        return _Rendered(self.syntax.and_operator.join(parts), _AND)
