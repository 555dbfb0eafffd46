"""MEDLINE XML record parser.

Parses an E-utilities fetch response (``PubmedArticleSet``) into `BibEntry`
records. The document is consumed incrementally and every article element is
released once converted, so large batches do not build a full tree.

Problems with individual records (no PMID, unsupported record types, server
error elements) become warnings in the `ParserResult`; only malformed XML is
fatal.
"""

from __future__ import annotations

import re
from typing import Iterable
from xml.etree import ElementTree as ET

from LitFetch.core.errors import ParseError
from LitFetch.core.models import BibEntry, ParserResult

_WS_RE = re.compile(r"\s+")
_YEAR_RE = re.compile(r"\b(\d{4})\b")
_MONTH_RE = re.compile(r"\b([A-Za-z]{3,})\b")

_EXPECTED_ROOTS = {"PubmedArticleSet", "eFetchResult"}
_UNSUPPORTED_RECORDS = {"PubmedBookArticle"}


def _text(elem: ET.Element | None) -> str:
    """Return the whitespace-normalized text of an element including inline markup."""
    if elem is None:
        return ""
    return _WS_RE.sub(" ", "".join(elem.itertext())).strip()


def _join(values: Iterable[str], sep: str) -> str:
    return sep.join(v for v in values if v)


def _parse_medline_date(value: str) -> tuple[str, str]:
    """Extract year and first month from free-form dates like ``2019 Mar-Apr``."""
    year_match = _YEAR_RE.search(value)
    month_match = _MONTH_RE.search(value)
    return (
        year_match.group(1) if year_match else "",
        month_match.group(1) if month_match else "",
    )


def _authors(article: ET.Element) -> str:
    names: list[str] = []
    for author in article.findall("AuthorList/Author"):
        if author.get("ValidYN", "Y") == "N":
            continue
        collective = _text(author.find("CollectiveName"))
        if collective:
            names.append("{" + collective + "}")
            continue
        last = _text(author.find("LastName"))
        first = _text(author.find("ForeName")) or _text(author.find("Initials"))
        if last and first:
            names.append(f"{last}, {first}")
        elif last:
            names.append(last)
    return " and ".join(names)


def _abstract(article: ET.Element) -> str:
    sections: list[str] = []
    for part in article.findall("Abstract/AbstractText"):
        text = _text(part)
        if not text:
            continue
        label = part.get("Label")
        sections.append(f"{label}: {text}" if label else text)
    return " ".join(sections)


def _article_ids(pubmed_article: ET.Element) -> dict[str, str]:
    ids: dict[str, str] = {}
    for article_id in pubmed_article.findall("PubmedData/ArticleIdList/ArticleId"):
        id_type = article_id.get("IdType", "")
        value = _text(article_id)
        if id_type and value and id_type not in ids:
            ids[id_type] = value
    return ids


def convert_article(pubmed_article: ET.Element) -> BibEntry | None:
    """Convert one ``PubmedArticle`` element into an entry.

    Returns:
        The entry, or None when the article carries no PMID.
    """
    citation = pubmed_article.find("MedlineCitation")
    if citation is None:
        return None
    pmid = _text(citation.find("PMID"))
    if not pmid:
        return None

    article = citation.find("Article")
    if article is None:
        article = ET.Element("Article")
    journal = article.find("Journal")
    if journal is None:
        journal = ET.Element("Journal")

    year = _text(journal.find("JournalIssue/PubDate/Year"))
    month = _text(journal.find("JournalIssue/PubDate/Month"))
    medline_date = _text(journal.find("JournalIssue/PubDate/MedlineDate"))
    if medline_date and not year:
        year, month = _parse_medline_date(medline_date)

    ids = _article_ids(pubmed_article)
    doi = ""
    for location in article.findall("ELocationID"):
        if location.get("EIdType") == "doi":
            doi = _text(location)
            break
    doi = doi or ids.get("doi", "")

    fields = {
        "pmid": pmid,
        "title": _text(article.find("ArticleTitle")),
        "abstract": _abstract(article),
        "author": _authors(article),
        "journal": _text(journal.find("Title")),
        "journal-abbreviation": _text(journal.find("ISOAbbreviation")),
        "issn": _text(journal.find("ISSN")),
        "volume": _text(journal.find("JournalIssue/Volume")),
        "number": _text(journal.find("JournalIssue/Issue")),
        "pages": _text(article.find("Pagination/MedlinePgn")),
        "year": year,
        "month": month,
        "doi": doi,
        "pmc": ids.get("pmc", ""),
        "keywords": _join((_text(k) for k in citation.findall("KeywordList/Keyword")), ", "),
        "mesh": _join(
            (_text(d) for d in citation.findall("MeshHeadingList/MeshHeading/DescriptorName")), ", "
        ),
        "language": _join((_text(lang) for lang in article.findall("Language")), ", "),
        "pubtype": _join(
            (_text(t) for t in article.findall("PublicationTypeList/PublicationType")), ", "
        ),
        "status": citation.get("Status", ""),
        "copyright": _text(article.find("Abstract/CopyrightInformation")),
    }
    return BibEntry(entry_type="article", fields=fields)


class MedlineXmlParser:
    """Parser for MEDLINE XML fetch responses."""

    def parse(self, source: bytes | str | Iterable[bytes]) -> ParserResult:
        """Parse a MEDLINE XML document.

        Args:
            source: Whole document as bytes/str, or an iterable of byte chunks.

        Returns:
            Parsed entries in document order plus non-fatal warnings.

        Raises:
            ParseError: If the XML is malformed.
        """
        chunks = [source] if isinstance(source, (bytes, str)) else source
        result = ParserResult()
        parser = ET.XMLPullParser(events=("start", "end"))
        state = {"depth": 0}
        try:
            for chunk in chunks:
                if not chunk:
                    continue
                parser.feed(chunk)
                self._drain(parser, result, state)
            parser.close()
            self._drain(parser, result, state)
        except ET.ParseError as e:
            raise ParseError(
                f"Malformed MEDLINE response: {e}",
                user_message="Error while fetching from Medline",
            ) from e
        return result

    def _drain(self, parser: ET.XMLPullParser, result: ParserResult, state: dict[str, int]) -> None:
        for event, elem in parser.read_events():
            if event == "start":
                if state["depth"] == 0 and elem.tag not in _EXPECTED_ROOTS:
                    result.warnings.append(f"Unexpected document root <{elem.tag}>")
                state["depth"] += 1
                continue

            state["depth"] -= 1
            if state["depth"] != 1:
                continue
            if elem.tag == "PubmedArticle":
                entry = convert_article(elem)
                if entry is None:
                    result.warnings.append("Skipped an article without PMID")
                else:
                    result.entries.append(entry)
                elem.clear()
            elif elem.tag in _UNSUPPORTED_RECORDS:
                pmid = _text(elem.find(".//PMID")) or "unknown"
                result.warnings.append(f"Skipped unsupported record {elem.tag} (PMID {pmid})")
                elem.clear()
            elif elem.tag == "ERROR":
                result.warnings.append(f"Server error: {_text(elem)}")
