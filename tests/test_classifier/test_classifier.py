"""Unit tests for URL classifier module.

Tests for URLClassifier and is_valid_url, including the validation gate
in front of the pattern matcher.
"""

import unittest
from unittest.mock import MagicMock

from juicyurls.classifier.classifier import URLClassifier, is_valid_url
from juicyurls.classifier.matcher import PatternMatcher
from juicyurls.core.constants import MAX_URL_LENGTH, Category
from juicyurls.core.models import ClassificationResult, PatternSet, ScanConfig, Verdict


TEST_PATTERNS = PatternSet(
    keywords=(),
    extensions=(".exe",),
    paths=("/evil",),
    hidden=(),
)


class TestIsValidURL(unittest.TestCase):
    """Test suite for is_valid_url."""

    def test_valid_and_invalid_urls(self):
        """Test the documented validity cases."""
        long_url = "http://" + "x" * MAX_URL_LENGTH
        cases = [
            ("http://example.com", True),
            ("https://foo.bar/baz", True),
            ("ftp://fileserver.local", True),
            ("no-scheme.com", True),
            ("justtext", False),
            ("", False),
            (long_url, False),
            ("://invalid-url", False),
        ]

        for url, expected in cases:
            with self.subTest(url=url[:40]):
                self.assertEqual(is_valid_url(url), expected)

    def test_custom_max_length(self):
        """Test that the maximum length is configurable."""
        self.assertTrue(is_valid_url("http://a.io", max_length=11))
        self.assertFalse(is_valid_url("http://a.io", max_length=10))

    def test_control_characters_are_invalid(self):
        """Test that URLs with control characters are rejected."""
        self.assertFalse(is_valid_url("http://example.com/\x00"))

    def test_unparseable_url_is_invalid(self):
        """Test that URLs the parser rejects are invalid."""
        self.assertFalse(is_valid_url("http://[::1/broken"))


class TestURLClassifier(unittest.TestCase):
    """Test suite for URLClassifier class."""

    def setUp(self):
        """Set up test fixtures."""
        self.matcher = PatternMatcher(
            TEST_PATTERNS,
            categories=[Category.EXTENSIONS, Category.PATHS],
        )
        self.classifier = URLClassifier(self.matcher, validate_urls=True)

    def test_suspicious_url(self):
        """Test that a matching URL yields a result."""
        verdict, result = self.classifier.classify("http://bad.com/evil.exe")

        self.assertEqual(verdict, Verdict.SUSPICIOUS)
        self.assertIsInstance(result, ClassificationResult)
        self.assertEqual(result.url, "http://bad.com/evil.exe")
        self.assertEqual(result.category, "extensions")
        self.assertEqual(result.reason, "Suspicious file extension")

    def test_clean_url(self):
        """Test that a non-matching URL is clean."""
        verdict, result = self.classifier.classify("http://clean.com")

        self.assertEqual(verdict, Verdict.CLEAN)
        self.assertIsNone(result)

    def test_invalid_url_skips_matcher(self):
        """Test that validation failures never reach the matcher."""
        matcher = MagicMock(spec=PatternMatcher)
        classifier = URLClassifier(matcher, validate_urls=True)

        verdict, result = classifier.classify("justtext/evil")

        self.assertEqual(verdict, Verdict.INVALID)
        self.assertIsNone(result)
        matcher.classify.assert_not_called()

    def test_validation_disabled(self):
        """Test that without validation, syntactically odd URLs are still matched."""
        classifier = URLClassifier(self.matcher, validate_urls=False)

        verdict, _ = classifier.classify("justtext/evil")

        self.assertEqual(verdict, Verdict.SUSPICIOUS)

    def test_overlong_url_is_always_rejected(self):
        """Test that overlong URLs are invalid even with validation off."""
        classifier = URLClassifier(self.matcher, validate_urls=False, max_url_length=20)

        verdict, result = classifier.classify("http://bad.com/evil/" + "x" * 20)

        self.assertEqual(verdict, Verdict.INVALID)
        self.assertIsNone(result)

    def test_from_config(self):
        """Test building a classifier from scan configuration."""
        config = ScanConfig(
            categories=frozenset([Category.PATHS]),
            excludes=["trusted"],
            validate_urls=True,
            max_url_length=100,
            patterns=TEST_PATTERNS,
        )

        classifier = URLClassifier.from_config(config)

        self.assertTrue(classifier.validate_urls)
        self.assertEqual(classifier.max_url_length, 100)
        self.assertEqual(classifier.matcher.categories, frozenset([Category.PATHS]))
        self.assertEqual(classifier.classify("http://trusted.com/evil")[0], Verdict.CLEAN)
        self.assertEqual(classifier.classify("http://bad.com/evil.exe")[1].category, "paths")


if __name__ == "__main__":
    unittest.main()
