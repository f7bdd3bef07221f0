"""Unit tests for configuration parsing.

Tests cover:
- parse_categories: comma lists, YAML lists, empty input, unknown names
- parse_excludes: trimming and blank entries
- parse_duration: bare numbers, unit suffixes, compound and invalid values
- load_scan_config: YAML files, pattern tables, type errors
"""

import tempfile
import unittest
from pathlib import Path

from juicyurls.core.config import (
    load_scan_config,
    parse_categories,
    parse_duration,
    parse_excludes,
    scan_config_from_dict,
)
from juicyurls.core.constants import DEFAULT_EXTENSIONS, Category
from juicyurls.core.exceptions import ConfigError, InvalidCategoryError


class TestParseCategories(unittest.TestCase):
    """Test category flag parsing."""

    def test_comma_separated(self):
        """Test parsing a comma-separated category list."""
        self.assertEqual(
            parse_categories("keywords, Paths"),
            frozenset([Category.KEYWORDS, Category.PATHS]),
        )

    def test_list(self):
        """Test parsing a YAML-style list."""
        self.assertEqual(
            parse_categories(["hidden"]),
            frozenset([Category.HIDDEN]),
        )

    def test_empty_enables_all(self):
        """Test that empty input enables every category."""
        for value in (None, "", [], " , "):
            with self.subTest(value=value):
                self.assertEqual(parse_categories(value), frozenset(Category))

    def test_unknown_category(self):
        """Test that an unknown name raises InvalidCategoryError."""
        with self.assertRaises(InvalidCategoryError) as ctx:
            parse_categories("keywords,secrets")

        self.assertIn("secrets", str(ctx.exception))
        self.assertIsInstance(ctx.exception, ConfigError)


class TestParseExcludes(unittest.TestCase):
    """Test exclusion flag parsing."""

    def test_trims_and_drops_blanks(self):
        self.assertEqual(parse_excludes(" cdn., ,static. "), ["cdn.", "static."])

    def test_empty(self):
        self.assertEqual(parse_excludes(None), [])
        self.assertEqual(parse_excludes(""), [])


class TestParseDuration(unittest.TestCase):
    """Test duration parsing."""

    def test_valid_durations(self):
        """Test the accepted duration forms."""
        cases = [
            (None, 0.0),
            ("", 0.0),
            (0, 0.0),
            (45, 45.0),
            ("60", 60.0),
            ("300s", 300.0),
            ("5m", 300.0),
            ("1m30s", 90.0),
            ("500ms", 0.5),
            ("1h", 3600.0),
            ("1.5s", 1.5),
        ]

        for value, expected in cases:
            with self.subTest(value=value):
                self.assertAlmostEqual(parse_duration(value), expected)

    def test_invalid_durations(self):
        """Test that malformed or negative durations raise ConfigError."""
        for value in ("abc", "5x", "m5", "5m junk", "-5", -1):
            with self.subTest(value=value):
                with self.assertRaises(ConfigError):
                    parse_duration(value)


class TestLoadScanConfig(unittest.TestCase):
    """Test loading scan configuration from YAML."""

    def setUp(self):
        """Create temporary directory for each test."""
        self.temp_dir = tempfile.TemporaryDirectory()
        self.config_path = Path(self.temp_dir.name) / "scan.yaml"

    def tearDown(self):
        """Clean up temporary directory."""
        self.temp_dir.cleanup()

    def write_config(self, text: str) -> Path:
        self.config_path.write_text(text, encoding="utf-8")
        return self.config_path

    def test_full_config(self):
        """Test that every recognised key is applied."""
        path = self.write_config(
            "categories: [keywords, hidden]\n"
            "excludes: [cdn., 're:^https://static\\.']\n"
            "validate: true\n"
            "verbose: true\n"
            "workers: 8\n"
            "timeout: 1m30s\n"
            "max_url_length: 512\n"
            "chunk_size: 1000\n"
            "patterns:\n"
            "  keywords: [secret, token]\n"
        )

        config = load_scan_config(path)

        self.assertEqual(config.categories, frozenset([Category.KEYWORDS, Category.HIDDEN]))
        self.assertEqual(config.excludes, ["cdn.", r"re:^https://static\."])
        self.assertTrue(config.validate_urls)
        self.assertTrue(config.verbose)
        self.assertEqual(config.workers, 8)
        self.assertEqual(config.timeout, 90.0)
        self.assertEqual(config.max_url_length, 512)
        self.assertEqual(config.chunk_size, 1000)
        self.assertEqual(config.patterns.keywords, ("secret", "token"))
        self.assertEqual(config.patterns.extensions, DEFAULT_EXTENSIONS)

    def test_empty_file_gives_defaults(self):
        """Test that an empty file yields the default configuration."""
        config = load_scan_config(self.write_config(""))

        self.assertEqual(config.categories, frozenset(Category))
        self.assertEqual(config.timeout, 300.0)
        self.assertFalse(config.validate_urls)
        self.assertIsNone(config.chunk_size)

    def test_missing_file(self):
        """Test that a missing file raises ConfigError."""
        with self.assertRaises(ConfigError):
            load_scan_config(Path(self.temp_dir.name) / "missing.yaml")

    def test_invalid_yaml(self):
        """Test that malformed YAML raises ConfigError."""
        with self.assertRaises(ConfigError):
            load_scan_config(self.write_config("categories: [keywords\n"))

    def test_non_mapping(self):
        """Test that a top-level list is rejected."""
        with self.assertRaises(ConfigError):
            load_scan_config(self.write_config("- keywords\n"))

    def test_invalid_values(self):
        """Test that wrongly typed values raise ConfigError."""
        cases = [
            {"workers": "many"},
            {"workers": True},
            {"workers": -1},
            {"max_url_length": 0},
            {"chunk_size": 0},
            {"timeout": "soon"},
            {"categories": "bogus"},
            {"patterns": ["keywords"]},
            {"patterns": {"secrets": ["x"]}},
            {"patterns": {"keywords": "admin"}},
        ]

        for data in cases:
            with self.subTest(data=data):
                with self.assertRaises(ConfigError):
                    scan_config_from_dict(data)


if __name__ == "__main__":
    unittest.main()
