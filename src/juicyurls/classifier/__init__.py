"""URL pattern matching, classification, and result deduplication.

This package provides the per-URL classification logic:
- PatternMatcher: Compile category and exclusion patterns, answer one query per URL
- URLClassifier: Gate the matcher behind optional URL validation
- ResultDeduper: Drop repeated results, first occurrence wins
"""

from juicyurls.classifier.matcher import PatternMatcher
from juicyurls.classifier.classifier import URLClassifier, is_valid_url
from juicyurls.classifier.deduper import ResultDeduper

__all__ = [
    "PatternMatcher",
    "URLClassifier",
    "ResultDeduper",
    "is_valid_url",
]
