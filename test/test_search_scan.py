"""Tests for the streaming search response scan."""

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from LitFetch.core.errors import ParseError
from LitFetch.sources.medline.search import ScanState, SearchResponseScanner, scan_search_response

FIXTURES = Path(__file__).resolve().parent / "fixtures"


def _chunks(data: bytes, size: int):
    for start in range(0, len(data), size):
        yield data[start : start + size]


class TestScanSearchResponse(unittest.TestCase):
    def setUp(self) -> None:
        self.body = (FIXTURES / "esearch_result.xml").read_bytes()

    def test_fixture_count_and_ids(self) -> None:
        result = scan_search_response([self.body])
        self.assertEqual(result.total_count, 120)
        self.assertEqual(result.ids, ("31452104", "30833741", "29348612"))

    def test_small_chunks_give_same_result(self) -> None:
        result = scan_search_response(_chunks(self.body, 7))
        self.assertEqual(result.total_count, 120)
        self.assertEqual(result.ids, ("31452104", "30833741", "29348612"))

    def test_stops_reading_after_id_list(self) -> None:
        end = self.body.index(b"</IdList>") + len(b"</IdList>")
        head = self.body[:end]

        def stream():
            yield from _chunks(head, 16)
            raise AssertionError("chunk requested after the id list closed")

        result = scan_search_response(stream())
        self.assertEqual(result.ids, ("31452104", "30833741", "29348612"))
        self.assertEqual(result.total_count, 120)

    def test_later_count_elements_are_ignored(self) -> None:
        # the TranslationStack count (9876) comes after the id list
        result = scan_search_response(_chunks(self.body, 5))
        self.assertEqual(result.total_count, 120)

    def test_empty_id_list(self) -> None:
        body = b"<eSearchResult><Count>0</Count><RetMax>0</RetMax><IdList/></eSearchResult>"
        result = scan_search_response([body])
        self.assertTrue(result.is_empty)
        self.assertEqual(result.total_count, 0)

    def test_missing_id_list_is_empty(self) -> None:
        body = b"<eSearchResult><Count>0</Count></eSearchResult>"
        result = scan_search_response([body])
        self.assertEqual(result.ids, ())

    def test_error_element_is_logged(self) -> None:
        body = b"<eSearchResult><ERROR>Invalid query</ERROR></eSearchResult>"
        with self.assertLogs("LitFetch", level="WARNING") as captured:
            result = scan_search_response([body])
        self.assertTrue(result.is_empty)
        self.assertIn("Invalid query", "\n".join(captured.output))

    def test_id_list_before_count_fails(self) -> None:
        body = b"<eSearchResult><IdList><Id>1</Id></IdList><Count>1</Count></eSearchResult>"
        with self.assertRaises(ParseError) as ctx:
            scan_search_response([body])
        self.assertEqual(ctx.exception.user_message, "Error while parsing ID list")

    def test_non_integer_count_fails(self) -> None:
        body = b"<eSearchResult><Count>many</Count><IdList/></eSearchResult>"
        with self.assertRaises(ParseError):
            scan_search_response([body])

    def test_malformed_xml_fails(self) -> None:
        body = b"<eSearchResult><Count>3</Count><IdList><Id>1</Id></Idlist>"
        with self.assertRaises(ParseError):
            scan_search_response([body])

    def test_truncated_document_fails(self) -> None:
        with self.assertRaises(ParseError):
            scan_search_response([b"<eSearchResult><Count>3</Count>"])


class TestSearchResponseScanner(unittest.TestCase):
    def test_state_progression(self) -> None:
        scanner = SearchResponseScanner()
        self.assertIs(scanner.state, ScanState.BEFORE_COUNT)
        scanner.feed(b"<eSearchResult><Count>2")
        self.assertIs(scanner.state, ScanState.IN_COUNT)
        scanner.feed(b"</Count><IdList><Id>5</Id>")
        self.assertIs(scanner.state, ScanState.IN_LIST)
        scanner.feed(b"<Id>6</Id></IdList>")
        self.assertTrue(scanner.done)
        result = scanner.result()
        self.assertEqual(result.ids, ("5", "6"))
        self.assertEqual(result.total_count, 2)


if __name__ == "__main__":
    unittest.main()
