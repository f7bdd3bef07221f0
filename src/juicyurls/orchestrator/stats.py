"""Run statistics aggregation.

Workers never touch the shared counters per URL. Each keeps a private
StatsDelta and flushes it into the StatsAggregator on a time cadence and
once more when it exits, so the lock is taken a handful of times per worker
rather than once per URL.
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Callable

from juicyurls.core.constants import STATS_FLUSH_INTERVAL
from juicyurls.core.models import RunStats


class StatsAggregator:
    """Thread-safe run counters.

    Writers call record_batch() with accumulated deltas; readers call
    snapshot(). Both hold the lock only for a few integer additions or copies.
    """

    def __init__(self) -> None:
        self._stats = RunStats()
        self._lock = threading.Lock()

    def record_batch(
        self,
        suspicious: int = 0,
        invalid: int = 0,
        processed: int = 0,
        skipped: int = 0,
        *,
        total: int = 0,
    ) -> None:
        """Add a batch of counts to the shared totals."""
        with self._lock:
            self._stats.suspicious += suspicious
            self._stats.invalid += invalid
            self._stats.processed += processed
            self._stats.skipped += skipped
            self._stats.total += total

    def snapshot(self) -> RunStats:
        """Get a consistent copy of the current totals."""
        with self._lock:
            return RunStats(
                total=self._stats.total,
                processed=self._stats.processed,
                suspicious=self._stats.suspicious,
                invalid=self._stats.invalid,
                skipped=self._stats.skipped,
            )


@dataclass
class StatsDelta:
    """Worker-local counters awaiting a flush.

    Attributes:
        aggregator: Shared aggregator to flush into
        interval: Seconds between time-based flushes
        clock: Monotonic time source
    """
    aggregator: StatsAggregator
    interval: float = STATS_FLUSH_INTERVAL
    clock: Callable[[], float] = time.monotonic
    total: int = 0
    processed: int = 0
    suspicious: int = 0
    invalid: int = 0
    skipped: int = 0
    _last_flush: float = field(default=0.0, init=False)

    def __post_init__(self) -> None:
        self._last_flush = self.clock()

    @property
    def is_empty(self) -> bool:
        return not (self.total or self.processed or self.suspicious or self.invalid or self.skipped)

    def maybe_flush(self) -> bool:
        """Flush if the flush interval has elapsed.

        Returns:
            True if a flush happened
        """
        if self.clock() - self._last_flush < self.interval:
            return False
        self.flush()
        return True

    def flush(self) -> None:
        """Push pending counts to the aggregator and reset."""
        self._last_flush = self.clock()
        if self.is_empty:
            return
        self.aggregator.record_batch(
            self.suspicious,
            self.invalid,
            self.processed,
            self.skipped,
            total=self.total,
        )
        self.total = self.processed = self.suspicious = self.invalid = self.skipped = 0
