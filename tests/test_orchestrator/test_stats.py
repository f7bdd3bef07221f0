"""Unit tests for run statistics aggregation."""

import threading
import unittest
from unittest.mock import patch

from juicyurls.orchestrator.stats import StatsAggregator, StatsDelta


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TestStatsAggregator(unittest.TestCase):
    """Test StatsAggregator class."""

    def test_record_batch(self):
        aggregator = StatsAggregator()

        aggregator.record_batch(1, 2, 3, 4, total=10)
        aggregator.record_batch(suspicious=1, processed=1, total=1)

        snapshot = aggregator.snapshot()
        self.assertEqual(snapshot.suspicious, 2)
        self.assertEqual(snapshot.invalid, 2)
        self.assertEqual(snapshot.processed, 4)
        self.assertEqual(snapshot.skipped, 4)
        self.assertEqual(snapshot.total, 11)

    def test_snapshot_is_a_copy(self):
        """Test that mutating a snapshot does not affect the totals."""
        aggregator = StatsAggregator()
        aggregator.record_batch(processed=1)

        snapshot = aggregator.snapshot()
        snapshot.processed = 100

        self.assertEqual(aggregator.snapshot().processed, 1)

    def test_concurrent_writers(self):
        """Test that concurrent flushes lose no counts."""
        aggregator = StatsAggregator()

        def writer():
            for _ in range(1000):
                aggregator.record_batch(processed=1, total=1)

        threads = [threading.Thread(target=writer) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        snapshot = aggregator.snapshot()
        self.assertEqual(snapshot.processed, 8000)
        self.assertEqual(snapshot.total, 8000)


class TestStatsDelta(unittest.TestCase):
    """Test StatsDelta flushing."""

    def setUp(self):
        self.aggregator = StatsAggregator()
        self.clock = FakeClock()
        self.delta = StatsDelta(self.aggregator, interval=5.0, clock=self.clock)

    def test_maybe_flush_waits_for_interval(self):
        """Test that counts stay local until the interval elapses."""
        self.delta.processed += 3

        self.clock.advance(4.9)
        self.assertFalse(self.delta.maybe_flush())
        self.assertEqual(self.aggregator.snapshot().processed, 0)

        self.clock.advance(0.1)
        self.assertTrue(self.delta.maybe_flush())
        self.assertEqual(self.aggregator.snapshot().processed, 3)
        self.assertTrue(self.delta.is_empty)

    def test_flush_resets_interval(self):
        """Test that a flush restarts the interval."""
        self.delta.invalid += 1
        self.clock.advance(5.0)
        self.delta.maybe_flush()

        self.delta.invalid += 1
        self.clock.advance(1.0)

        self.assertFalse(self.delta.maybe_flush())
        self.assertEqual(self.aggregator.snapshot().invalid, 1)

    def test_final_flush(self):
        """Test that an explicit flush pushes every counter."""
        self.delta.total += 5
        self.delta.skipped += 1
        self.delta.invalid += 1
        self.delta.processed += 3
        self.delta.suspicious += 2

        self.delta.flush()

        self.assertEqual(
            self.aggregator.snapshot().to_dict(),
            {"total": 5, "processed": 3, "suspicious": 2, "invalid": 1, "skipped": 1},
        )

    def test_empty_flush_is_skipped(self):
        """Test that flushing nothing does not touch the aggregator."""
        with patch.object(self.aggregator, "record_batch") as record_batch:
            self.delta.flush()

        record_batch.assert_not_called()


if __name__ == "__main__":
    unittest.main()
