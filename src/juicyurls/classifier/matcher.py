"""Pattern matching for suspicious URL detection.

This module compiles the category pattern tables and the exclusion list into
regular expressions once, at construction, and answers one classification
query per URL. Categories are tested in a fixed precedence order and the
first hit wins.
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional

from juicyurls.core.constants import REGEX_PATTERN_PREFIX, Category
from juicyurls.core.models import NO_MATCH, MatchResult, PatternSet, reason_for


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledCategory:
    """Compiled patterns for one enabled category."""
    category: Category
    regexes: tuple[re.Pattern, ...]
    reason: str

    def search(self, url: str) -> bool:
        for regex in self.regexes:
            if regex.search(url):
                return True
        return False


def compile_pattern(pattern: str, *, anchor_end: bool = False) -> Optional[re.Pattern]:
    """Compile a single pattern, case-insensitively.

    Plain patterns are matched literally. Patterns prefixed with ``re:`` are
    treated as regular expressions.

    Args:
        pattern: Pattern text
        anchor_end: Require the match to end at the end of the URL

    Returns:
        Compiled regex, or None if the pattern is empty or malformed
    """
    if pattern.startswith(REGEX_PATTERN_PREFIX):
        source = pattern[len(REGEX_PATTERN_PREFIX):]
    else:
        source = re.escape(pattern)

    if not source:
        return None

    if anchor_end:
        source = f"(?:{source})$"

    try:
        return re.compile(source, re.IGNORECASE)
    except re.error as e:
        logger.warning(f"Skipping invalid pattern {pattern!r}: {e}")
        return None


def compile_patterns(patterns: Iterable[str], *, anchor_end: bool = False) -> tuple[re.Pattern, ...]:
    """Compile a pattern list, dropping empty and malformed entries."""
    compiled = []
    for pattern in patterns:
        regex = compile_pattern(pattern.strip(), anchor_end=anchor_end)
        if regex is not None:
            compiled.append(regex)
    return tuple(compiled)


class PatternMatcher:
    """Match URLs against exclusion and category patterns.

    Precedence:
    1. Exclusions - any hit makes the URL clean, regardless of categories
    2. keywords - substring match
    3. extensions - match anchored at the end of the URL
    4. paths - substring match
    5. hidden - substring match

    The matcher is immutable once constructed and safe to share between
    workers.

    Example:
        >>> matcher = PatternMatcher(PatternSet(extensions=(".exe",)), excludes=["cdn"])
        >>> matcher.classify("https://example.com/setup.exe").category
        <Category.EXTENSIONS: 'extensions'>
    """

    def __init__(
        self,
        patterns: Optional[PatternSet] = None,
        *,
        categories: Optional[Iterable[Category]] = None,
        excludes: Optional[Iterable[str]] = None,
    ) -> None:
        """Initialize and compile the matcher.

        Args:
            patterns: Pattern tables (built-in tables if None)
            categories: Enabled categories (all if None)
            excludes: Exclusion patterns
        """
        self.patterns = patterns or PatternSet()
        enabled = frozenset(Category) if categories is None else frozenset(categories)
        self.categories = enabled

        self._exclude_regexes = compile_patterns(excludes or [])
        self._compiled: tuple[CompiledCategory, ...] = tuple(
            CompiledCategory(
                category=category,
                regexes=compile_patterns(
                    self.patterns.for_category(category),
                    anchor_end=category == Category.EXTENSIONS,
                ),
                reason=reason_for(category),
            )
            for category in Category
            if category in enabled
        )

        logger.debug(
            f"Compiled matcher: {self.exclusion_count} exclusions, "
            f"{self.pattern_count} category patterns"
        )

    @property
    def pattern_count(self) -> int:
        """Number of compiled category patterns across enabled categories."""
        return sum(len(compiled.regexes) for compiled in self._compiled)

    @property
    def exclusion_count(self) -> int:
        return len(self._exclude_regexes)

    def is_excluded(self, url: str) -> bool:
        """Check if URL matches any exclusion pattern."""
        for regex in self._exclude_regexes:
            if regex.search(url):
                return True
        return False

    def classify(self, url: str) -> MatchResult:
        """Classify a single URL.

        Args:
            url: URL to classify

        Returns:
            MatchResult naming the first matching category, or a negative
            result for empty, excluded or clean URLs
        """
        if not url or self.is_excluded(url):
            return NO_MATCH

        for compiled in self._compiled:
            if compiled.search(url):
                return MatchResult(
                    matched=True,
                    category=compiled.category,
                    reason=compiled.reason,
                )

        return NO_MATCH
