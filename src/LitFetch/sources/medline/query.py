"""MEDLINE query syntax.

Mapping to provider fields
- author          -> au
- title           -> ti
- journal         -> pt
- unfielded       -> (no prefix)
- year            -> sd AND ed (same year)
- year-range      -> sd AND ed (start/end year)
"""

from __future__ import annotations

from LitFetch.core.query import QueryNode
from LitFetch.core.transformer import ProviderSyntax, QueryTransformer

MEDLINE_SYNTAX = ProviderSyntax(
    name="medline",
    field_prefixes={
        "author": "au",
        "title": "ti",
        "journal": "pt",
        "default": "",
    },
    start_year_field="sd",
    end_year_field="ed",
)


def compile_search_query(node: QueryNode) -> str | None:
    """Compile a query tree into a MEDLINE search term.

    Args:
        node: Parsed query tree.

    Returns:
        Search term, or None when the query has nothing to search for.
    """
    return QueryTransformer(MEDLINE_SYNTAX).transform(node)
