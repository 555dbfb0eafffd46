"""Tests for console, JSON and BibTeX rendering."""

import json
import sys
import tempfile
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from LitFetch.core.models import BibEntry
from LitFetch.renderers.bibtex import BibtexFileWriter, citation_key, render_bibtex
from LitFetch.renderers.json import JsonFileWriter, render_json
from LitFetch.renderers.console import render_text


def _entry(**fields: str) -> BibEntry:
    base = {
        "pmid": "31452104",
        "title": "Genome editing with CRISPR systems.",
        "author": "Müller, Karl and {CRISPR Screening Consortium}",
        "journal": "Nature",
        "year": "2019",
        "month": "aug",
        "volume": "572",
        "number": "7770",
        "pages": "E1-E10",
        "doi": "10.1038/s41586-019-1234-5",
    }
    base.update(fields)
    return BibEntry(fields=base)


class TestBibtex(unittest.TestCase):
    def test_citation_key(self) -> None:
        self.assertEqual(citation_key(_entry()), "Muller2019")
        self.assertEqual(citation_key(BibEntry(fields={"pmid": "7"})), "pmid7")

    def test_render_entry(self) -> None:
        text = render_bibtex([_entry()])
        self.assertTrue(text.startswith("@article{Muller2019,\n"))
        self.assertIn("  month = aug,\n", text)
        self.assertIn("  author = {Müller, Karl and {CRISPR Screening Consortium}},\n", text)
        self.assertIn("  pmid = {31452104},\n", text)
        self.assertTrue(text.endswith("}\n"))

    def test_special_characters_are_escaped(self) -> None:
        text = render_bibtex([_entry(title="R&D at 100% of cost_basis")])
        self.assertIn(r"title = {R\&D at 100\% of cost\_basis}", text)

    def test_unknown_month_is_braced(self) -> None:
        text = render_bibtex([_entry(month="Spring")])
        self.assertIn("month = {Spring}", text)

    def test_key_collisions_get_suffixes(self) -> None:
        text = render_bibtex([_entry(), _entry(pmid="2"), _entry(pmid="3")])
        self.assertIn("@article{Muller2019,", text)
        self.assertIn("@article{Muller2019a,", text)
        self.assertIn("@article{Muller2019b,", text)

    def test_empty(self) -> None:
        self.assertEqual(render_bibtex([]), "")

    def test_file_writer(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            writer = BibtexFileWriter(tmpdir)
            writer.write_query_result([_entry()], name="q", query="title:x")
            writer.finalize("search")
            files = list((Path(tmpdir) / "bibtex").glob("search_*.bib"))
            self.assertEqual(len(files), 1)
            self.assertIn("@article{Muller2019,", files[0].read_text(encoding="utf-8"))

    def test_file_writer_skips_empty_run(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            BibtexFileWriter(tmpdir).finalize("search")
            self.assertFalse((Path(tmpdir) / "bibtex").exists())


class TestJson(unittest.TestCase):
    def test_render_json(self) -> None:
        (record,) = render_json([_entry()])
        self.assertEqual(record["type"], "article")
        self.assertEqual(record["id"], "31452104")
        self.assertEqual(record["authors"], ["Müller, Karl", "{CRISPR Screening Consortium}"])
        self.assertNotIn("author", record["fields"])
        self.assertEqual(record["fields"]["journal"], "Nature")

    def test_file_writer_groups_by_query(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            writer = JsonFileWriter(tmpdir)
            writer.write_query_result([_entry()], name="q1", query="title:x")
            writer.write_query_result([], name=None, query="title:y")
            writer.finalize("search")
            (path,) = list((Path(tmpdir) / "json").glob("search_*.json"))
            payload = json.loads(path.read_text(encoding="utf-8"))
        self.assertEqual([item["name"] for item in payload], ["q1", None])
        self.assertEqual(len(payload[0]["records"]), 1)
        self.assertEqual(payload[1]["records"], [])


class TestConsole(unittest.TestCase):
    def test_render_text(self) -> None:
        text = render_text([_entry()])
        self.assertIn("1. Genome editing with CRISPR systems.", text)
        self.assertIn("Journal: Nature, 572(7770), E1-E10", text)
        self.assertIn("Published: 2019 Aug", text)
        self.assertIn("PubMed: https://pubmed.ncbi.nlm.nih.gov/31452104/", text)


if __name__ == "__main__":
    unittest.main()
