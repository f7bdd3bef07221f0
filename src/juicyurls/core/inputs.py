"""Input file loading.

Validates the URL list before any pipeline work starts and streams its
lines lazily so large files never have to fit in memory.
"""

import logging
from collections.abc import Iterator
from pathlib import Path

from juicyurls.core.constants import (
    LARGE_INPUT_THRESHOLD,
    MAX_FILE_SIZE,
    MAX_LINE_LENGTH,
)
from juicyurls.core.exceptions import InputError, InputTooLargeError


logger = logging.getLogger(__name__)


def validate_input_file(
    path: Path,
    *,
    max_size: int = MAX_FILE_SIZE,
    max_line_length: int = MAX_LINE_LENGTH,
) -> int:
    """Check that the input file exists and is safe to process.

    The line check is a streaming pass over the file, so a bad line deep in
    a large input is reported before any classification starts.

    Args:
        path: Path to the URL list
        max_size: Maximum accepted size in bytes
        max_line_length: Maximum accepted line length in bytes

    Returns:
        File size in bytes

    Raises:
        InputError: If the file is missing or not a regular file, or a line
            exceeds max_line_length
        InputTooLargeError: If the file exceeds max_size
    """
    try:
        info = path.stat()
    except OSError as e:
        raise InputError(f"Error accessing file: {e}") from e

    if not path.is_file():
        raise InputError(f"Not a regular file: {path}")

    if info.st_size > max_size:
        raise InputTooLargeError(
            f"File too large: {info.st_size} bytes (max: {max_size} bytes)"
        )

    check_line_lengths(path, max_line_length)
    return info.st_size


def check_line_lengths(path: Path, max_line_length: int = MAX_LINE_LENGTH) -> None:
    """Scan the file once and reject it if any line is too long.

    Lines are read with a bounded readline, so an overlong line is never
    held in memory in full.

    Raises:
        InputError: If the file cannot be read or a line is too long
    """
    try:
        with path.open("rb") as f:
            line_number = 0
            while True:
                line = f.readline(max_line_length + 1)
                if not line:
                    return
                line_number += 1
                if len(line) > max_line_length:
                    raise InputError(
                        f"Line {line_number} exceeds maximum length of {max_line_length} bytes"
                    )
    except OSError as e:
        raise InputError(f"Error reading file: {e}") from e


def is_large_input(size: int) -> bool:
    """Check whether an input of this size should be processed in chunks."""
    return size > LARGE_INPUT_THRESHOLD


def iter_lines(path: Path, *, max_line_length: int = MAX_LINE_LENGTH) -> Iterator[str]:
    """Yield stripped lines from a UTF-8 text file.

    Blank and comment lines are yielded too; filtering and counting them is
    the pipeline's job.

    Raises:
        InputError: If the file cannot be read or a line is too long
    """
    try:
        with path.open("r", encoding="utf-8", errors="replace") as f:
            for line_number, line in enumerate(f, start=1):
                if len(line) > max_line_length:
                    raise InputError(
                        f"Line {line_number} exceeds maximum length of {max_line_length} bytes"
                    )
                yield line.strip()
    except OSError as e:
        raise InputError(f"Error reading file: {e}") from e


def load_lines(path: Path, *, max_line_length: int = MAX_LINE_LENGTH) -> list[str]:
    """Read every line of a small input file into memory."""
    lines = list(iter_lines(path, max_line_length=max_line_length))
    logger.info(f"Loaded {len(lines)} lines from {path}")
    return lines
