"""Unit tests for TextResultSink."""

import io
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from juicyurls.core.exceptions import OutputError
from juicyurls.core.models import ClassificationResult
from juicyurls.reporting.sink import TextResultSink


RESULTS = [
    ClassificationResult(url="http://a.com/.git", category="hidden", reason="Hidden file or directory"),
    ClassificationResult(url="http://b.com/x.exe", category="extensions", reason="Suspicious file extension"),
]


class TestTextResultSink(unittest.TestCase):
    """Test line-oriented result output."""

    def setUp(self):
        """Create temporary directory for each test."""
        self.temp_dir = tempfile.TemporaryDirectory()
        self.output_path = Path(self.temp_dir.name) / "out" / "results.txt"

    def tearDown(self):
        """Clean up temporary directory."""
        self.temp_dir.cleanup()

    def test_terse_file_output(self):
        """Test that terse mode writes one bare URL per line."""
        with TextResultSink(self.output_path) as sink:
            written = sink.write_all(RESULTS)

        self.assertEqual(written, 2)
        self.assertEqual(
            self.output_path.read_text(encoding="utf-8"),
            "http://a.com/.git\nhttp://b.com/x.exe\n",
        )

    def test_verbose_output(self):
        """Test that verbose mode adds category and reason."""
        stream = io.StringIO()

        with TextResultSink(verbose=True, stream=stream) as sink:
            sink.write(RESULTS[0])

        self.assertEqual(
            stream.getvalue(),
            "http://a.com/.git [hidden: Hidden file or directory]\n",
        )

    def test_stdout_by_default(self):
        stdout = io.StringIO()

        with patch("sys.stdout", stdout):
            with TextResultSink() as sink:
                sink.write(RESULTS[1])

        self.assertEqual(stdout.getvalue(), "http://b.com/x.exe\n")
        self.assertFalse(stdout.closed)

    def test_file_is_truncated(self):
        """Test that an existing output file is replaced."""
        self.output_path.parent.mkdir(parents=True)
        self.output_path.write_text("stale\n", encoding="utf-8")

        with TextResultSink(self.output_path) as sink:
            sink.write(RESULTS[0])

        self.assertEqual(self.output_path.read_text(encoding="utf-8"), "http://a.com/.git\n")

    def test_write_opens_lazily(self):
        sink = TextResultSink(self.output_path)
        sink.write(RESULTS[0])
        sink.close()

        self.assertTrue(self.output_path.exists())

    def test_unwritable_path(self):
        """Test that an uncreatable output file raises OutputError."""
        blocker = Path(self.temp_dir.name) / "blocker"
        blocker.write_text("", encoding="utf-8")

        with self.assertRaises(OutputError):
            TextResultSink(blocker / "results.txt").open()

    def test_close_is_idempotent(self):
        sink = TextResultSink(self.output_path)
        sink.open()
        sink.close()
        sink.close()


if __name__ == "__main__":
    unittest.main()
