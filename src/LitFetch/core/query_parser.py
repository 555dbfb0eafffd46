"""Lucene-style query parser.

Parses raw user text into the query tree defined in `LitFetch.core.query`.

Syntax
- Terms: bare words, "quoted phrases", `field:value`, `field:"a phrase"`
- Ranges: `field:[lower TO upper]` (`*` for an open bound)
- Operators: AND / && , OR / || , NOT / ! / leading `-`
- Adjacent terms are joined with AND
- Precedence: NOT > AND > OR; parentheses group, `field:(a OR b)` applies the
  field to every term inside the group

Range shorthands such as `year-range:2018-2021` are kept as plain field terms;
expanding them is up to the provider transformer.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence

from LitFetch.core.errors import QuerySyntaxError
from LitFetch.core.query import And, FieldTerm, Not, Or, QueryNode, RangeTerm, UnfieldedTerm

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
  | (?P<lparen>\()
  | (?P<rparen>\))
  | (?P<field>[A-Za-z][\w.-]*):(?=\S)
  | "(?P<phrase>[^"]*)"
  | \[(?P<range>[^\]]*)\]
  | (?P<word>[^\s()"\[\]]+)
    """,
    re.VERBOSE,
)
_RANGE_SPLIT_RE = re.compile(r"\s+TO\s+")
# a field prefix with nothing after it ("author:" or "author: Smith")
_DANGLING_FIELD_RE = re.compile(r"^[A-Za-z][\w.-]*:$")

_OPERATOR_WORDS = {
    "AND": "AND",
    "&&": "AND",
    "OR": "OR",
    "||": "OR",
    "NOT": "NOT",
    "!": "NOT",
    "-": "NOT",
}
_UNFIELDED_NAMES = {"default", "any", "all"}
_TERM_START = {"NOT", "LPAREN", "FIELD", "PHRASE", "RANGE", "WORD"}


@dataclass(frozen=True, slots=True)
class _Token:
    kind: str
    value: str
    position: int


def _tokenize(text: str) -> list[_Token]:
    tokens: list[_Token] = []
    pos = 0
    while pos < len(text):
        m = _TOKEN_RE.match(text, pos)
        if m is None:
            if text[pos] == '"':
                raise QuerySyntaxError("Unterminated phrase", position=pos)
            if text[pos] == "[":
                raise QuerySyntaxError("Unterminated range", position=pos)
            raise QuerySyntaxError(f"Unexpected character {text[pos]!r}", position=pos)
        kind = m.lastgroup
        pos = m.end()
        if kind == "ws":
            continue
        value = m.group(kind)
        if kind == "word":
            if _DANGLING_FIELD_RE.match(value):
                raise QuerySyntaxError(f"Dangling field {value!r}", position=m.start())
            if value in _OPERATOR_WORDS:
                tokens.append(_Token(_OPERATOR_WORDS[value], value, m.start()))
                continue
            if value[0] in "-!":
                # re-scan after the prefix so "-title:x" still sees the field
                tokens.append(_Token("NOT", value[0], m.start()))
                pos = m.start() + 1
                continue
        tokens.append(_Token(kind.upper(), value, m.start()))
    return tokens


class _Parser:
    def __init__(self, tokens: Sequence[_Token], length: int) -> None:
        self._tokens = tokens
        self._length = length
        self._pos = 0

    def parse(self) -> QueryNode:
        if not self._tokens:
            return And(())
        node = self._or(None)
        tok = self._peek()
        if tok is not None:
            raise QuerySyntaxError(f"Unexpected {tok.value!r}", position=tok.position)
        return node

    def _peek(self) -> _Token | None:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _next(self) -> _Token:
        tok = self._peek()
        if tok is None:
            raise QuerySyntaxError("Unexpected end of query", position=self._length)
        self._pos += 1
        return tok

    def _or(self, field: str | None) -> QueryNode:
        children = [self._and(field)]
        while (tok := self._peek()) is not None and tok.kind == "OR":
            self._pos += 1
            children.append(self._and(field))
        return children[0] if len(children) == 1 else Or(tuple(children))

    def _and(self, field: str | None) -> QueryNode:
        children = [self._unary(field)]
        while (tok := self._peek()) is not None:
            if tok.kind == "AND":
                self._pos += 1
            elif tok.kind not in _TERM_START:
                break
            children.append(self._unary(field))
        return children[0] if len(children) == 1 else And(tuple(children))

    def _unary(self, field: str | None) -> QueryNode:
        tok = self._peek()
        if tok is not None and tok.kind == "NOT":
            self._pos += 1
            return Not(self._unary(field))
        return self._primary(field)

    def _primary(self, field: str | None) -> QueryNode:
        tok = self._next()
        if tok.kind == "LPAREN":
            node = self._or(field)
            closing = self._peek()
            if closing is None or closing.kind != "RPAREN":
                raise QuerySyntaxError("Missing closing parenthesis", position=tok.position)
            self._pos += 1
            return node
        if tok.kind == "FIELD":
            return self._primary(tok.value.lower())
        if tok.kind in ("WORD", "PHRASE"):
            return _term(field, tok.value)
        if tok.kind == "RANGE":
            return _range(field, tok)
        raise QuerySyntaxError(f"Unexpected {tok.value!r}", position=tok.position)


def _term(field: str | None, value: str) -> QueryNode:
    if field is None or field in _UNFIELDED_NAMES:
        return UnfieldedTerm(value)
    return FieldTerm(field, value)


def _range(field: str | None, tok: _Token) -> RangeTerm:
    if field is None or field in _UNFIELDED_NAMES:
        raise QuerySyntaxError("Range requires a field", position=tok.position)
    parts = _RANGE_SPLIT_RE.split(tok.value.strip())
    if len(parts) != 2:
        raise QuerySyntaxError("Range must look like [lower TO upper]", position=tok.position)
    lower, upper = (None if p.strip() in ("", "*") else p.strip() for p in parts)
    return RangeTerm(field, lower, upper)


def parse_query(text: str) -> QueryNode:
    """Parse raw query text into a query tree.

    Args:
        text: Raw query text, e.g. ``author:Smith AND year:2020``.

    Returns:
        Parsed query tree. Blank text yields an empty `And`.

    Raises:
        QuerySyntaxError: If the text is not a well-formed query.
    """
    return _Parser(_tokenize(text), len(text)).parse()
