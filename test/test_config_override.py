"""Tests for config override behavior with defaults."""

import sys
import tempfile
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from LitFetch.config import load_config, load_config_with_defaults


_BASE_YAML = """
log:
  level: INFO
  to_file: true
  dir: log

provider:
  name: medline
  max_results: 50
  timeout: 30
  tool: litfetch

queries:
  - NAME: base
    QUERY: title:base

output:
  base_dir: output
  formats: [console]
"""


class TestConfigOverride(unittest.TestCase):
    def _write(self, tmpdir: str, name: str, text: str) -> Path:
        path = Path(tmpdir) / name
        path.write_text(text, encoding="utf-8")
        return path

    def test_override_merges_nested_sections(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            default_path = self._write(tmpdir, "default.yml", _BASE_YAML)
            override_path = self._write(
                tmpdir,
                "custom.yml",
                "log:\n  level: DEBUG\nprovider:\n  max_results: 10\n",
            )
            cfg = load_config_with_defaults(override_path, default_path=default_path)

        self.assertEqual(cfg.runtime.level, "DEBUG")
        self.assertTrue(cfg.runtime.to_file)
        self.assertEqual(cfg.provider.max_results, 10)
        self.assertEqual(cfg.provider.timeout, 30.0)
        self.assertEqual(cfg.search.queries[0].name, "base")

    def test_override_replaces_query_list(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            default_path = self._write(tmpdir, "default.yml", _BASE_YAML)
            override_path = self._write(
                tmpdir,
                "custom.yml",
                "queries:\n  - NAME: mine\n    QUERY: 'author:Smith'\n",
            )
            cfg = load_config_with_defaults(override_path, default_path=default_path)

        self.assertEqual([q.name for q in cfg.search.queries], ["mine"])

    def test_non_mapping_root(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = self._write(tmpdir, "bad.yml", "- just\n- a list\n")
            with self.assertRaisesRegex(ValueError, "mapping"):
                load_config(path)

    def test_shipped_default_config_loads(self) -> None:
        cfg = load_config(REPO_ROOT / "config" / "default.yml")
        self.assertEqual(cfg.provider.name, "medline")
        self.assertEqual(cfg.provider.api_key_env, "NCBI_API_KEY")
        self.assertIsNone(cfg.provider.email)
        self.assertEqual(cfg.search.queries[0].name, "crispr-reviews")


if __name__ == "__main__":
    unittest.main()
