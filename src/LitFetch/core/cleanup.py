"""Field formatters and post-fetch cleanup rules.

A cleanup rule binds one formatter to one field. Providers declare their rules
as an ordered tuple; `apply_cleanup` runs them against an entry in place.
Every formatter is idempotent, so running a rule list twice changes nothing.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Sequence

from dateutil.parser import parserinfo

from LitFetch.core.models import BibEntry

Formatter = Callable[[str], str]

MONTH_ABBREVIATIONS = (
    "jan", "feb", "mar", "apr", "may", "jun",
    "jul", "aug", "sep", "oct", "nov", "dec",
)

_MONTH_NAMES = parserinfo()
_WS_RE = re.compile(r"\s+")
_AND_SPLIT_RE = re.compile(r"\s+and\s+|\s*;\s*", re.IGNORECASE)
_BRACED_RE = re.compile(r"\{[^{}]*\}|[^{}]+")
_INITIALS_RE = re.compile(r"^(?:[A-Z]\.?){1,3}$")


def clear(value: str) -> str:
    """Drop the value entirely."""
    return ""


def normalize_month(value: str) -> str:
    """Normalize a month to its lower-case three-letter BibTeX abbreviation.

    Accepts numbers ("3", "03"), English names or abbreviations ("March",
    "Mar.") and JabRef-style macros ("#mar#"). Ranges such as "Mar-Apr" keep
    the first month. Unrecognized values are returned unchanged.
    """
    raw = value.strip()
    token = re.split(r"[-/]", raw.strip("#"), maxsplit=1)[0].strip().rstrip(".")
    if not token:
        return raw
    if token.isdigit():
        number = int(token)
        if 1 <= number <= 12:
            return MONTH_ABBREVIATIONS[number - 1]
        return raw
    number = _MONTH_NAMES.month(token)
    if number is None:
        return raw
    return MONTH_ABBREVIATIONS[number - 1]


def _normalize_name(name: str) -> str:
    name = _WS_RE.sub(" ", name).strip().rstrip(",")
    if not name or name.startswith("{"):
        return name
    if "," in name:
        parts = [p.strip() for p in name.split(",")]
        return ", ".join(p for p in parts if p)
    tokens = name.split(" ")
    if len(tokens) == 1:
        return name
    # MEDLINE display form "Smith JA": trailing initials are the first name
    if _INITIALS_RE.match(tokens[-1]):
        return f"{' '.join(tokens[:-1])}, {tokens[-1]}"
    # "Ludwig van Beethoven": the last name starts at the first lower-case particle
    last_start = len(tokens) - 1
    for idx in range(1, len(tokens) - 1):
        if tokens[idx][:1].islower():
            last_start = idx
            break
    first = " ".join(tokens[:last_start])
    last = " ".join(tokens[last_start:])
    return f"{last}, {first}"


def normalize_names(value: str) -> str:
    """Normalize a person list to ``Last, First and Last, First``.

    Accepts ``and``- or semicolon-separated lists in either "First Last" or
    "Last, First" form. Braced corporate names are kept verbatim.
    """
    names = [_normalize_name(n) for n in _split_names(value.strip())]
    return " and ".join(n for n in names if n)


def _split_names(value: str) -> list[str]:
    # separators inside {braced names} do not split
    names = [""]
    for piece in _BRACED_RE.finditer(value):
        text = piece.group(0)
        if text.startswith("{"):
            names[-1] += text
            continue
        parts = _AND_SPLIT_RE.split(text)
        names[-1] += parts[0]
        names.extend(parts[1:])
    return names


@dataclass(frozen=True, slots=True)
class CleanupRule:
    """Apply `formatter` to `field` when the entry carries that field."""

    field: str
    formatter: Formatter

    def apply(self, entry: BibEntry) -> None:
        value = entry.get(self.field)
        if value is None:
            return
        entry.set(self.field, self.formatter(value))


def apply_cleanup(entry: BibEntry, rules: Sequence[CleanupRule]) -> BibEntry:
    """Run rules in order against an entry, in place.

    Args:
        entry: Entry to clean.
        rules: Ordered provider-specific cleanup rules.

    Returns:
        The same entry, for chaining.
    """
    for rule in rules:
        rule.apply(entry)
    return entry
