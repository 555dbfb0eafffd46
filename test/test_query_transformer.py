import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from LitFetch.core.query import And, FieldTerm, Not, Or, RangeTerm, UnfieldedTerm
from LitFetch.core.query_parser import parse_query
from LitFetch.core.transformer import ProviderSyntax, QueryTransformer, parse_year_range
from LitFetch.sources.medline.query import compile_search_query


def _compile(text: str) -> str | None:
    return compile_search_query(parse_query(text))


class TestMedlineFieldMapping(unittest.TestCase):
    def test_author(self) -> None:
        self.assertEqual(_compile("author:Smith"), "au:Smith")

    def test_author_with_space_is_quoted(self) -> None:
        self.assertEqual(_compile('author:"Igor Steinmacher"'), 'au:"Igor Steinmacher"')

    def test_title(self) -> None:
        self.assertEqual(_compile("title:CRISPR"), "ti:CRISPR")

    def test_journal(self) -> None:
        self.assertEqual(_compile("journal:Nature"), "pt:Nature")

    def test_unfielded(self) -> None:
        self.assertEqual(_compile("cancer"), "cancer")
        self.assertEqual(_compile('"gene therapy"'), '"gene therapy"')

    def test_unknown_field_passes_through(self) -> None:
        self.assertEqual(_compile("mesh:Neoplasms"), "mesh:Neoplasms")


class TestMedlineYears(unittest.TestCase):
    def test_single_year(self) -> None:
        self.assertEqual(_compile("year:2018"), "sd:2018 AND ed:2018")

    def test_year_range(self) -> None:
        self.assertEqual(_compile("year-range:2018-2021"), "sd:2018 AND ed:2021")

    def test_open_year_ranges(self) -> None:
        self.assertEqual(_compile("year-range:2018-"), "sd:2018")
        self.assertEqual(_compile("year-range:-2021"), "ed:2021")

    def test_malformed_year_range_is_dropped(self) -> None:
        self.assertIsNone(_compile("year-range:recent"))
        self.assertEqual(_compile("title:x AND year-range:recent"), "ti:x")

    def test_bracket_year_range(self) -> None:
        self.assertEqual(_compile("year:[2018 TO 2021]"), "sd:2018 AND ed:2021")
        self.assertEqual(_compile("year:[2018 TO *]"), "sd:2018")

    def test_non_numeric_year_is_dropped(self) -> None:
        self.assertIsNone(_compile("year:recent"))
        self.assertEqual(_compile("title:x AND year:recent"), "ti:x")

    def test_short_or_multi_word_year_is_dropped(self) -> None:
        self.assertIsNone(_compile("year:20"))
        self.assertIsNone(_compile('year:"2018 2019"'))
        self.assertEqual(_compile('year:" 2019 "'), "sd:2019 AND ed:2019")

    def test_bracket_year_must_be_numeric(self) -> None:
        self.assertIsNone(_compile("year:[soon TO 2021]"))

    def test_reversed_year_range_is_swapped(self) -> None:
        self.assertEqual(_compile("year-range:2021-2018"), "sd:2018 AND ed:2021")
        self.assertEqual(_compile("year:[2021 TO 2018]"), "sd:2018 AND ed:2021")

    def test_non_year_range_is_dropped(self) -> None:
        node = And((FieldTerm("title", "x"), RangeTerm("volume", "1", "5")))
        self.assertEqual(compile_search_query(node), "ti:x")

    def test_year_inside_or_is_grouped(self) -> None:
        self.assertEqual(
            _compile("title:x OR year:2018"),
            "ti:x OR (sd:2018 AND ed:2018)",
        )

    def test_year_inside_and_is_flat(self) -> None:
        self.assertEqual(
            _compile("author:Smith AND year:2020"),
            "au:Smith AND sd:2020 AND ed:2020",
        )

    def test_parse_year_range(self) -> None:
        self.assertEqual(parse_year_range("2018-2021"), ("2018", "2021"))
        self.assertEqual(parse_year_range(" 2018 - "), ("2018", None))
        self.assertIsNone(parse_year_range("-"))
        self.assertIsNone(parse_year_range("18-21"))


class TestBooleanStructure(unittest.TestCase):
    def test_precedence_is_preserved(self) -> None:
        self.assertEqual(
            _compile('author:"Igor Steinmacher" OR author:"Christoph Treude" AND author:"Christoph Freunde"'),
            'au:"Igor Steinmacher" OR (au:"Christoph Treude" AND au:"Christoph Freunde")',
        )

    def test_explicit_group(self) -> None:
        self.assertEqual(
            _compile("(author:a OR author:b) AND title:c"),
            "(au:a OR au:b) AND ti:c",
        )

    def test_nested_same_operator_is_flat(self) -> None:
        self.assertEqual(_compile("a AND (b AND c)"), "a AND b AND c")

    def test_not(self) -> None:
        self.assertEqual(_compile("NOT title:review"), "NOT ti:review")
        self.assertEqual(_compile("cancer -mouse"), "cancer AND NOT mouse")

    def test_not_wraps_compound(self) -> None:
        self.assertEqual(_compile("NOT (title:a OR title:b)"), "NOT (ti:a OR ti:b)")
        self.assertEqual(_compile("NOT year:2018"), "NOT (sd:2018 AND ed:2018)")

    def test_field_group(self) -> None:
        self.assertEqual(_compile("title:(cancer OR tumor)"), "ti:cancer OR ti:tumor")


class TestAbsentQuery(unittest.TestCase):
    def test_blank_query_is_absent(self) -> None:
        self.assertIsNone(_compile(""))

    def test_blank_terms_vanish(self) -> None:
        self.assertIsNone(compile_search_query(And((UnfieldedTerm("  "),))))
        self.assertIsNone(compile_search_query(Not(And(()))))

    def test_surviving_child_is_kept(self) -> None:
        node = Or((UnfieldedTerm(" "), FieldTerm("author", "Smith")))
        self.assertEqual(compile_search_query(node), "au:Smith")

    def test_lone_survivor_keeps_grouping(self) -> None:
        node = Or((FieldTerm("title", "x"), And((FieldTerm("year-range", "bad"), FieldTerm("year", "2018")))))
        self.assertEqual(compile_search_query(node), "ti:x OR (sd:2018 AND ed:2018)")


class TestTransformerBehaviour(unittest.TestCase):
    def test_is_deterministic_and_does_not_mutate(self) -> None:
        node = parse_query("author:Smith AND (title:a OR year-range:2010-2012)")
        first = compile_search_query(node)
        second = compile_search_query(node)
        self.assertEqual(first, second)
        self.assertEqual(node, parse_query("author:Smith AND (title:a OR year-range:2010-2012)"))

    def test_custom_syntax_table(self) -> None:
        syntax = ProviderSyntax(
            name="other",
            field_prefixes={"author": "AU"},
            start_year_field="from",
            end_year_field="until",
            and_operator=" && ",
        )
        transformer = QueryTransformer(syntax)
        self.assertEqual(
            transformer.transform(parse_query("author:Smith year:2020")),
            "AU:Smith && from:2020 && until:2020",
        )

    def test_unknown_node_type(self) -> None:
        with self.assertRaises(TypeError):
            compile_search_query("author:Smith")  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
