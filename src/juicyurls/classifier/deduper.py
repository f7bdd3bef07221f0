"""Result deduplication.

The collector owns one ResultDeduper per run; it is the only writer, so the
seen-set needs no locking.
"""

from juicyurls.core.models import ClassificationResult


class ResultDeduper:
    """Deduplicate classification results by URL.

    The first result seen for a URL wins. The seen-set only grows for the
    lifetime of the deduper, so one instance spans every chunk of a run.
    """

    def __init__(self) -> None:
        self._seen: set[str] = set()

    def add(self, result: ClassificationResult) -> bool:
        """Record a result.

        Args:
            result: Result to record

        Returns:
            True if this is the first result for its URL, False for duplicates
        """
        if result.url in self._seen:
            return False
        self._seen.add(result.url)
        return True
