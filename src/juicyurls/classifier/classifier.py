"""URL classification with optional syntactic validation.

URLClassifier wraps a PatternMatcher and gates it behind an optional
validity check. A URL that fails validation is reported as invalid and is
never handed to the matcher.
"""

import logging
from typing import Optional
from urllib.parse import urlsplit

from juicyurls.core.constants import MAX_URL_LENGTH, VALID_URL_PREFIXES
from juicyurls.core.models import ClassificationResult, ScanConfig, Verdict
from juicyurls.classifier.matcher import PatternMatcher


logger = logging.getLogger(__name__)


def is_valid_url(url: str, *, max_length: int = MAX_URL_LENGTH) -> bool:
    """Perform basic syntactic URL validation.

    A URL is valid when it is non-empty, within max_length, parses, and
    either starts with http://, https:// or ftp:// or contains a dot.

    Args:
        url: URL to check
        max_length: Maximum accepted length

    Returns:
        True if URL looks valid, False otherwise
    """
    if not url or len(url) > max_length:
        return False

    # Leading colon means the scheme is missing; control characters never parse
    if url.startswith(":") or any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in url):
        return False

    try:
        urlsplit(url)
    except ValueError:
        return False

    return url.startswith(VALID_URL_PREFIXES) or "." in url


class URLClassifier:
    """Classify URLs as suspicious, clean or invalid.

    Stateless per call; one instance is shared by every pipeline worker.
    """

    def __init__(
        self,
        matcher: PatternMatcher,
        *,
        validate_urls: bool = False,
        max_url_length: int = MAX_URL_LENGTH,
    ) -> None:
        """Initialize URLClassifier.

        Args:
            matcher: Compiled pattern matcher
            validate_urls: Reject syntactically invalid URLs before matching
            max_url_length: Longer URLs are always rejected
        """
        self.matcher = matcher
        self.validate_urls = validate_urls
        self.max_url_length = max_url_length

    @classmethod
    def from_config(cls, config: ScanConfig) -> "URLClassifier":
        """Build a classifier and its matcher from scan configuration."""
        matcher = PatternMatcher(
            config.patterns,
            categories=config.categories,
            excludes=config.excludes,
        )
        logger.debug(
            f"Classifier: validation {'on' if config.validate_urls else 'off'}, "
            f"max URL length {config.max_url_length}"
        )
        return cls(
            matcher,
            validate_urls=config.validate_urls,
            max_url_length=config.max_url_length,
        )

    def is_valid(self, url: str) -> bool:
        return is_valid_url(url, max_length=self.max_url_length)

    def classify(self, url: str) -> tuple[Verdict, Optional[ClassificationResult]]:
        """Classify a single URL.

        Args:
            url: URL to classify

        Returns:
            Tuple of verdict and, for suspicious URLs, the result to emit
        """
        if len(url) > self.max_url_length:
            return Verdict.INVALID, None

        if self.validate_urls and not self.is_valid(url):
            return Verdict.INVALID, None

        match = self.matcher.classify(url)
        if not match.matched:
            return Verdict.CLEAN, None

        return Verdict.SUSPICIOUS, ClassificationResult.from_match(url, match)

