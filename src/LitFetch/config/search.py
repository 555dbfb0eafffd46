"""Search domain configuration: named queries in Lucene-style syntax."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from LitFetch.config.common import expect_str
from LitFetch.core.errors import QuerySyntaxError
from LitFetch.core.query import NamedQuery
from LitFetch.core.query_parser import parse_query

_ALLOWED_KEYS = {"NAME", "QUERY"}


@dataclass(frozen=True, slots=True)
class SearchConfig:
    """Store validated queries."""

    queries: tuple[NamedQuery, ...]


def load_search(raw: Mapping[str, Any]) -> SearchConfig:
    """Load the ``queries`` list. A missing list means no configured queries.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If a query has unknown keys or cannot be parsed.
    """
    queries_obj = raw.get("queries")
    if queries_obj is None:
        return SearchConfig(queries=())
    if not isinstance(queries_obj, list):
        raise TypeError("queries must be a list")
    return SearchConfig(
        queries=tuple(parse_named_query(item, f"queries[{idx}]") for idx, item in enumerate(queries_obj))
    )


def check_search(config: SearchConfig) -> None:
    """Validate search domain constraints.

    Raises:
        ValueError: If query names are duplicated.
    """
    seen: set[str] = set()
    for query in config.queries:
        if query.name is None:
            continue
        if query.name in seen:
            raise ValueError(f"queries has duplicate NAME: {query.name}")
        seen.add(query.name)


def parse_named_query(value: Any, config_key: str) -> NamedQuery:
    """Parse a ``{NAME, QUERY}`` mapping (or a bare query string).

    Args:
        value: Query mapping or string.
        config_key: Full key path used in error messages.

    Returns:
        Parsed named query.

    Raises:
        TypeError: If the shape/types are invalid.
        ValueError: If keys are unknown or the query text is malformed.
    """
    if isinstance(value, str):
        value = {"QUERY": value}
    if not isinstance(value, Mapping):
        raise TypeError(f"{config_key} must be an object or a string")

    unknown = {str(k) for k in value.keys()} - _ALLOWED_KEYS
    if unknown:
        raise ValueError(f"{config_key} has unknown keys: {sorted(unknown)}")
    if "QUERY" not in value:
        raise ValueError(f"Missing required config: {config_key}.QUERY")

    name = None
    if "NAME" in value:
        name = expect_str(value["NAME"], f"{config_key}.NAME").strip() or None
    text = expect_str(value["QUERY"], f"{config_key}.QUERY").strip()
    if not text:
        raise ValueError(f"{config_key}.QUERY must not be empty")
    try:
        node = parse_query(text)
    except QuerySyntaxError as e:
        raise ValueError(f"{config_key}.QUERY is invalid: {e}") from e
    return NamedQuery(name=name, text=text, node=node)
