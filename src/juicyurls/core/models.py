"""Core data models for JuicyURLs.

This module defines the data structures shared by the classifier, the
pipeline and the reporting layer: pattern tables, classification results,
run statistics, scan configuration and the final scan report.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from juicyurls.core.constants import (
    CATEGORY_REASONS,
    DEFAULT_EXTENSIONS,
    DEFAULT_HIDDEN,
    DEFAULT_KEYWORDS,
    DEFAULT_PATHS,
    DEFAULTS,
    MAX_URL_LENGTH,
    Category,
    RunOutcome,
)


# ============================================================================
# Pattern Models
# ============================================================================

@dataclass(frozen=True)
class PatternSet:
    """Suspicious pattern tables, one tuple per category.

    Passed explicitly into the matcher so no pattern state is shared
    process-wide.
    """
    keywords: tuple[str, ...] = DEFAULT_KEYWORDS
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    paths: tuple[str, ...] = DEFAULT_PATHS
    hidden: tuple[str, ...] = DEFAULT_HIDDEN

    def for_category(self, category: Category) -> tuple[str, ...]:
        """Get the pattern table for a category."""
        return getattr(self, category.value)

    def replace(self, **tables: list[str]) -> "PatternSet":
        """Return a copy with the given tables replaced.

        Args:
            **tables: Category name -> list of patterns

        Returns:
            New PatternSet
        """
        current = {category.value: self.for_category(category) for category in Category}
        for name, patterns in tables.items():
            if name not in current:
                raise KeyError(f"Unknown pattern table: {name}")
            current[name] = tuple(patterns)
        return PatternSet(**current)


# ============================================================================
# Classification Models
# ============================================================================

class Verdict(Enum):
    """Per-URL classification verdict."""
    SUSPICIOUS = "suspicious"
    CLEAN = "clean"
    INVALID = "invalid"


@dataclass(frozen=True)
class MatchResult:
    """Answer of a single pattern-matcher query."""
    matched: bool
    category: Optional[Category] = None
    reason: str = ""


NO_MATCH = MatchResult(matched=False)


@dataclass(frozen=True)
class ClassificationResult:
    """A suspicious URL and why it was flagged."""
    url: str
    category: str
    reason: str

    @classmethod
    def from_match(cls, url: str, match: MatchResult) -> "ClassificationResult":
        """Build a result from a positive matcher answer."""
        category = match.category.value if match.category else ""
        return cls(url=url, category=category, reason=match.reason)

    def format(self, verbose: bool = False) -> str:
        """Render the result as an output line (without newline)."""
        if verbose:
            return f"{self.url} [{self.category}: {self.reason}]"
        return self.url

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary."""
        return {"url": self.url, "category": self.category, "reason": self.reason}


# ============================================================================
# Statistics Model
# ============================================================================

@dataclass
class RunStats:
    """Counters for a run.

    Invariants: processed == suspicious + clean, suspicious <= processed <= total,
    and on a completed run total == skipped + invalid + processed.
    """
    total: int = 0                          # Raw lines seen
    processed: int = 0                      # Valid URLs run through the matcher
    suspicious: int = 0                     # Matched URLs handed to the collector
    invalid: int = 0                        # Rejected by validation or length
    skipped: int = 0                        # Blank and comment lines

    @property
    def clean(self) -> int:
        """Valid URLs that matched nothing."""
        return self.processed - self.suspicious

    @property
    def suspicious_ratio(self) -> float:
        """Suspicious URLs as a percentage of processed URLs."""
        return self.suspicious * 100 / max(self.processed, 1)

    def to_dict(self) -> dict[str, int]:
        """Convert to dictionary."""
        return {
            "total": self.total,
            "processed": self.processed,
            "suspicious": self.suspicious,
            "invalid": self.invalid,
            "skipped": self.skipped,
        }


# ============================================================================
# Scan Configuration Model
# ============================================================================

@dataclass
class ScanConfig:
    """Configuration for a classification run."""
    categories: frozenset[Category] = field(default_factory=lambda: frozenset(Category))
    excludes: list[str] = field(default_factory=list)
    validate_urls: bool = DEFAULTS["validate_urls"]
    workers: int = DEFAULTS["workers"]      # 0 = derive from CPU count
    timeout: float = DEFAULTS["timeout"]    # Seconds, 0 = no timeout
    verbose: bool = DEFAULTS["verbose"]
    max_url_length: int = MAX_URL_LENGTH
    chunk_size: Optional[int] = None        # None = single streaming cycle
    patterns: PatternSet = field(default_factory=PatternSet)

    def is_enabled(self, category: Category) -> bool:
        """Check if a category is enabled."""
        return category in self.categories


# ============================================================================
# Scan Report Model
# ============================================================================

@dataclass
class ScanReport:
    """Outcome of a pipeline run, complete or partial."""
    results: list[ClassificationResult]
    stats: RunStats
    outcome: RunOutcome = RunOutcome.COMPLETED
    duration: float = 0.0                   # Seconds
    chunks: int = 0

    @property
    def processing_rate(self) -> float:
        """Processed URLs per second."""
        if self.duration <= 0:
            return 0.0
        return self.stats.processed / self.duration

    @property
    def timed_out(self) -> bool:
        return self.outcome == RunOutcome.TIMED_OUT

    @property
    def is_partial(self) -> bool:
        """Check if the run stopped before consuming all input."""
        return self.outcome != RunOutcome.COMPLETED

    def sorted_results(self) -> list[ClassificationResult]:
        """Results ordered by URL for deterministic output."""
        return sorted(self.results, key=lambda result: result.url)


def reason_for(category: Category) -> str:
    """Get the human-readable reason reported for a category."""
    return CATEGORY_REASONS[category]
