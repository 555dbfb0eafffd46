"""Streaming scan of E-utilities search responses.

Only the first ``Count`` element and the ``IdList`` element matter. The
server emits the count before the id list and nothing of interest after it,
so the scan stops as soon as ``IdList`` closes and never reads further chunks.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable
from xml.etree import ElementTree as ET

from LitFetch.core.errors import ParseError
from LitFetch.core.models import SearchResult
from LitFetch.utils.log import log

COUNT_TAG = "Count"
ID_LIST_TAG = "IdList"
ID_TAG = "Id"
ERROR_TAG = "ERROR"

_USER_MESSAGE = "Error while parsing ID list"


class ScanState(Enum):
    BEFORE_COUNT = "before-count"
    IN_COUNT = "in-count"
    BEFORE_LIST = "before-list"
    IN_LIST = "in-list"
    DONE = "done"


class SearchResponseScanner:
    """Incremental state machine over search response events.

    Feed raw byte chunks with `feed`; check `done` after each chunk and stop
    reading once it is True. Call `result` to obtain the final `SearchResult`.
    """

    def __init__(self) -> None:
        self.state = ScanState.BEFORE_COUNT
        self.total_count: int | None = None
        self.ids: list[str] = []
        self._parser = ET.XMLPullParser(events=("start", "end"))

    @property
    def done(self) -> bool:
        return self.state is ScanState.DONE

    def feed(self, chunk: bytes) -> None:
        """Feed one chunk of the response body and advance the state machine.

        Raises:
            ParseError: If the XML is malformed or out of the expected order.
        """
        try:
            self._parser.feed(chunk)
            self._drain()
        except ET.ParseError as e:
            raise ParseError(f"Malformed search response: {e}", user_message=_USER_MESSAGE) from e

    def result(self) -> SearchResult:
        """Return the scanned result, validating the document if not short-circuited.

        Raises:
            ParseError: If the document ended early or is malformed.
        """
        if not self.done:
            try:
                self._parser.close()
                self._drain()
            except ET.ParseError as e:
                raise ParseError(f"Malformed search response: {e}", user_message=_USER_MESSAGE) from e
        return SearchResult(ids=self.ids, total_count=self.total_count or 0)

    def _drain(self) -> None:
        for event, elem in self._parser.read_events():
            if self.done:
                return
            if event == "start":
                self._on_start(elem.tag)
            else:
                self._on_end(elem)

    def _on_start(self, tag: str) -> None:
        if tag == COUNT_TAG and self.state is ScanState.BEFORE_COUNT:
            self.state = ScanState.IN_COUNT
        elif tag == ID_LIST_TAG:
            if self.state is ScanState.BEFORE_COUNT:
                raise ParseError(
                    "Search response lists ids before the result count",
                    user_message=_USER_MESSAGE,
                )
            if self.state is ScanState.BEFORE_LIST:
                self.state = ScanState.IN_LIST

    def _on_end(self, elem: ET.Element) -> None:
        tag = elem.tag
        if self.state is ScanState.IN_COUNT and tag == COUNT_TAG:
            text = (elem.text or "").strip()
            try:
                self.total_count = int(text)
            except ValueError as e:
                raise ParseError(
                    f"Invalid result count in search response: {text!r}",
                    user_message=_USER_MESSAGE,
                ) from e
            self.state = ScanState.BEFORE_LIST
        elif self.state is ScanState.IN_LIST:
            if tag == ID_TAG:
                value = (elem.text or "").strip()
                if value:
                    self.ids.append(value)
                elem.clear()
            elif tag == ID_LIST_TAG:
                self.state = ScanState.DONE
        elif tag == ERROR_TAG:
            log.warning("Search service reported an error: %s", (elem.text or "").strip())


def scan_search_response(chunks: Iterable[bytes]) -> SearchResult:
    """Scan a search response body for the total count and the id list.

    Args:
        chunks: Response body as an iterable of byte chunks. No chunk is
            requested after the one that closes ``IdList``.

    Returns:
        Ids in document order and the first reported count. A missing or
        empty id list yields no ids, which is not an error.

    Raises:
        ParseError: If the XML is malformed, the count is not an integer, or
            the id list appears before any count.
    """
    scanner = SearchResponseScanner()
    for chunk in chunks:
        if not chunk:
            continue
        scanner.feed(chunk)
        if scanner.done:
            log.debug("Search scan short-circuited after %d ids", len(scanner.ids))
            break
    return scanner.result()
