"""MEDLINE post-fetch cleanup rules, applied in this order."""

from __future__ import annotations

from LitFetch.core.cleanup import CleanupRule, clear, normalize_month, normalize_names

MEDLINE_CLEANUP_RULES: tuple[CleanupRule, ...] = (
    CleanupRule("journal-abbreviation", clear),
    CleanupRule("status", clear),
    CleanupRule("copyright", clear),
    CleanupRule("month", normalize_month),
    CleanupRule("author", normalize_names),
)
