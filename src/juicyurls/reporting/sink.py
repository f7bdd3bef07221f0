"""Text result sink.

Writes suspicious URLs one per line, either bare (terse mode) or with their
category and reason (verbose mode), to stdout or a file.
"""

import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Optional, TextIO

from juicyurls.core.exceptions import OutputError
from juicyurls.core.models import ClassificationResult


class TextResultSink:
    """Line-oriented result writer.

    Example:
        >>> with TextResultSink(Path("out.txt"), verbose=True) as sink:
        ...     sink.write_all(report.sorted_results())
    """

    def __init__(
        self,
        output_path: Optional[Path] = None,
        *,
        verbose: bool = False,
        stream: Optional[TextIO] = None,
    ) -> None:
        """Initialize the sink.

        Args:
            output_path: File to write (truncated on open); stdout if None
            verbose: Include category and reason on each line
            stream: Explicit stream to write to instead of stdout
        """
        self.output_path = output_path
        self.verbose = verbose
        self._stream = stream
        self._owns_stream = False

    def __enter__(self) -> "TextResultSink":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def open(self) -> None:
        """Open the output file, or fall back to stdout.

        Raises:
            OutputError: If the output file cannot be created
        """
        if self._stream is not None:
            return

        if self.output_path is None:
            self._stream = sys.stdout
            return

        try:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)
            self._stream = self.output_path.open("w", encoding="utf-8")
        except OSError as e:
            raise OutputError(f"Error creating output file: {e}") from e
        self._owns_stream = True

    def write(self, result: ClassificationResult) -> None:
        """Write a single result line.

        Raises:
            OutputError: If writing fails
        """
        if self._stream is None:
            self.open()
        try:
            self._stream.write(result.format(self.verbose) + "\n")
        except OSError as e:
            raise OutputError(f"Error writing results: {e}") from e

    def write_all(self, results: Iterable[ClassificationResult]) -> int:
        """Write several results.

        Returns:
            Number of results written
        """
        written = 0
        for result in results:
            self.write(result)
            written += 1
        return written

    def close(self) -> None:
        """Flush and, for files, close the stream."""
        if self._stream is None:
            return
        try:
            self._stream.flush()
            if self._owns_stream:
                self._stream.close()
        except OSError as e:
            raise OutputError(f"Error closing output: {e}") from e
        finally:
            self._stream = None
            self._owns_stream = False
