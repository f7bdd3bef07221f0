"""Concurrent URL classification pipeline.

This module provides the ClassificationPipeline class that fans input lines
out to a bounded pool of classification workers and fans the suspicious
results back in through a deduplicating collector:

    lines -> producer -> input queue -> N workers -> results queue -> collector

Both queues are bounded, so a slow stage applies backpressure upstream.
Every stage is an asyncio task and every blocking point is a queue await,
which is where cancellation (timeout or external abort) is delivered.
"""

import asyncio
import logging
import os
import time
from collections.abc import Callable, Iterable, Iterator, Sized
from itertools import islice
from typing import Optional

from juicyurls.core.constants import (
    COMMENT_PREFIXES,
    INPUT_QUEUE_FACTOR,
    MAX_WORKERS,
    PROGRESS_INTERVAL,
    RESULTS_QUEUE_FACTOR,
    SMALL_INPUT_LINES,
    STATS_FLUSH_INTERVAL,
    PipelineState,
    RunOutcome,
)
from juicyurls.core.exceptions import JuicyURLsError, PipelineError
from juicyurls.core.models import (
    ClassificationResult,
    RunStats,
    ScanConfig,
    ScanReport,
    Verdict,
)
from juicyurls.classifier.classifier import URLClassifier
from juicyurls.classifier.deduper import ResultDeduper
from juicyurls.orchestrator.stats import StatsAggregator, StatsDelta


logger = logging.getLogger(__name__)


# Queue closure marker
_CLOSED = object()


def effective_worker_count(requested: int, input_size: Optional[int] = None) -> int:
    """Derive the number of workers for a cycle.

    Args:
        requested: Configured worker count (0 or less = CPU count)
        input_size: Number of input lines, if known

    Returns:
        Worker count between 1 and MAX_WORKERS, scaled down for small inputs
    """
    workers = requested if requested > 0 else (os.cpu_count() or 1)
    workers = min(workers, MAX_WORKERS)

    if input_size is not None and input_size < SMALL_INPUT_LINES:
        workers = min(workers, input_size // 10 + 1)

    return max(workers, 1)


def iter_chunks(lines: Iterable[str], size: int) -> Iterator[list[str]]:
    """Split an iterable of lines into lists of at most size lines."""
    iterator = iter(lines)
    while True:
        chunk = list(islice(iterator, size))
        if not chunk:
            return
        yield chunk


def is_skippable(line: str) -> bool:
    """Check if a line is blank or a comment."""
    return not line or line.startswith(COMMENT_PREFIXES)


class ClassificationPipeline:
    """Bounded-parallelism classification pipeline.

    States: IDLE -> RUNNING -> DRAINING -> DONE, or CANCELLED when the
    timeout expires or cancel() is called, or FAILED on an internal error.
    A timed-out or cancelled run still returns its partial results and
    stats.

    All stages share one event loop and classification is CPU-bound, so the
    worker pool bounds how much input is in flight rather than adding CPU
    parallelism. Lines are pulled from the input iterable on the event loop;
    pass a list (or use chunk_size, whose chunks are read in a thread) when
    the source is a slow file.

    Example:
        >>> classifier = URLClassifier.from_config(ScanConfig())
        >>> pipeline = ClassificationPipeline(classifier, workers=4, timeout=60)
        >>> report = asyncio.run(pipeline.run(["https://example.com/.git/config"]))
        >>> report.stats.suspicious
        1
    """

    def __init__(
        self,
        classifier: URLClassifier,
        *,
        workers: int = 0,
        timeout: float = 0,
        chunk_size: Optional[int] = None,
        on_result: Optional[Callable[[ClassificationResult], None]] = None,
        progress_callback: Optional[Callable[[RunStats], None]] = None,
        progress_interval: float = PROGRESS_INTERVAL,
        stats_flush_interval: float = STATS_FLUSH_INTERVAL,
    ) -> None:
        """Initialize the pipeline.

        Args:
            classifier: Shared, read-only URL classifier
            workers: Worker count (0 = CPU count)
            timeout: Run deadline in seconds (0 = no deadline)
            chunk_size: Process input in cycles of this many lines (None = one cycle)
            on_result: Called by the collector for every deduplicated result
            progress_callback: Called periodically with a stats snapshot
            progress_interval: Seconds between progress callbacks
            stats_flush_interval: Seconds between worker stats flushes
        """
        if chunk_size is not None and chunk_size <= 0:
            raise PipelineError(f"chunk_size must be positive, got {chunk_size}")

        self.classifier = classifier
        self.workers = workers
        self.timeout = timeout
        self.chunk_size = chunk_size
        self.on_result = on_result
        self.progress_callback = progress_callback
        self.progress_interval = progress_interval
        self.stats_flush_interval = stats_flush_interval

        self.state = PipelineState.IDLE
        self.stats = StatsAggregator()
        self.deduper = ResultDeduper()
        self.results: list[ClassificationResult] = []
        self._chunks = 0
        self._abort: Optional[asyncio.Event] = None

    @classmethod
    def from_config(cls, config: ScanConfig, **kwargs) -> "ClassificationPipeline":
        """Create a pipeline and its classifier from scan configuration.

        Args:
            config: Scan configuration
            **kwargs: Extra keyword arguments for the constructor

        Returns:
            Configured ClassificationPipeline instance
        """
        return cls(
            URLClassifier.from_config(config),
            workers=config.workers,
            timeout=config.timeout,
            chunk_size=config.chunk_size,
            **kwargs,
        )

    @property
    def is_running(self) -> bool:
        return self.state in (PipelineState.RUNNING, PipelineState.DRAINING)

    def cancel(self) -> None:
        """Abort the running pipeline.

        In-flight items finish, no new items are accepted, and run() returns
        the partial report with a CANCELLED outcome. Must be called from the
        event loop thread (use loop.call_soon_threadsafe otherwise).
        """
        if self._abort is not None:
            self._abort.set()

    async def run(self, lines: Iterable[str]) -> ScanReport:
        """Classify every line and collect the suspicious results.

        Args:
            lines: Raw input lines; blank and comment lines are skipped

        Returns:
            ScanReport with deduplicated results, stats and the run outcome

        Raises:
            PipelineError: If the pipeline is already running or fails internally
            InputError: If reading the input fails
        """
        if self.is_running:
            raise PipelineError("Pipeline is already running")

        self.stats = StatsAggregator()
        self.deduper = ResultDeduper()
        self.results = []
        self._chunks = 0
        self._abort = asyncio.Event()
        self.state = PipelineState.RUNNING

        start_time = time.monotonic()
        outcome = RunOutcome.COMPLETED

        work = asyncio.create_task(self._run_cycles(lines), name="juicyurls-pipeline")
        abort_waiter = asyncio.create_task(self._abort.wait(), name="juicyurls-abort")
        helpers = [abort_waiter]
        if self.progress_callback is not None:
            helpers.append(
                asyncio.create_task(self._report_progress(), name="juicyurls-progress")
            )

        try:
            done, _ = await asyncio.wait(
                {work, abort_waiter},
                timeout=self.timeout if self.timeout > 0 else None,
                return_when=asyncio.FIRST_COMPLETED,
            )

            if work in done:
                work.result()
            else:
                outcome = RunOutcome.CANCELLED if self._abort.is_set() else RunOutcome.TIMED_OUT
                logger.warning(
                    "Pipeline cancelled, keeping partial results"
                    if outcome == RunOutcome.CANCELLED
                    else f"Timeout of {self.timeout}s reached, keeping partial results"
                )
                await self._stop(work)

        except asyncio.CancelledError:
            await self._stop(work)
            self.state = PipelineState.CANCELLED
            raise
        except JuicyURLsError:
            self.state = PipelineState.FAILED
            raise
        except Exception as e:
            logger.exception(f"Pipeline failed: {e}")
            self.state = PipelineState.FAILED
            raise PipelineError(f"Pipeline execution failed: {e}") from e
        finally:
            for helper in helpers:
                helper.cancel()
            await asyncio.gather(*helpers, return_exceptions=True)

        self.state = (
            PipelineState.DONE if outcome == RunOutcome.COMPLETED else PipelineState.CANCELLED
        )

        report = ScanReport(
            results=list(self.results),
            stats=self.stats.snapshot(),
            outcome=outcome,
            duration=time.monotonic() - start_time,
            chunks=self._chunks,
        )

        logger.info(
            f"Pipeline {outcome.value}: {report.stats.processed} processed, "
            f"{report.stats.suspicious} suspicious, {report.stats.invalid} invalid, "
            f"{report.stats.skipped} skipped in {report.duration:.2f}s"
        )

        return report

    async def _stop(self, work: asyncio.Task) -> None:
        """Cancel the work task and wait for every stage to unwind."""
        work.cancel()
        results = await asyncio.gather(work, return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                logger.warning(f"Error while stopping pipeline: {result}")

    async def _run_cycles(self, lines: Iterable[str]) -> None:
        """Run one cycle for the whole input, or one per chunk.

        Chunks are read in a worker thread so a slow read never holds up the
        event loop and the deadline can still fire while the next chunk loads.
        """
        if self.chunk_size is None:
            size = len(lines) if isinstance(lines, Sized) else None
            await self._run_cycle(lines, size)
            return

        chunks = iter_chunks(lines, self.chunk_size)
        while True:
            chunk = await asyncio.to_thread(next, chunks, None)
            if chunk is None:
                return
            logger.info(
                f"Processing chunk {self._chunks + 1} ({len(chunk)} lines)"
            )
            await self._run_cycle(chunk, len(chunk))

    async def _run_cycle(self, lines: Iterable[str], size: Optional[int]) -> None:
        """Run producer, workers and collector over one batch of lines.

        When the cycle is cancelled (timeout or abort) the producer and the
        workers are stopped first and every result already on the results
        queue is still collected, so each counted result is kept. Queued
        results are only dropped when the cycle fails.

        Args:
            lines: Lines for this cycle
            size: Number of lines, if known (used to scale the worker pool)
        """
        if size == 0:
            return

        self._chunks += 1
        self.state = PipelineState.RUNNING

        worker_count = effective_worker_count(self.workers, size)
        input_queue: asyncio.Queue = asyncio.Queue(maxsize=worker_count * INPUT_QUEUE_FACTOR)
        results_queue: asyncio.Queue = asyncio.Queue(maxsize=worker_count * RESULTS_QUEUE_FACTOR)

        logger.info(f"Starting cycle with {worker_count} workers")

        collector = asyncio.create_task(self._collect(results_queue), name="juicyurls-collector")
        workers = [
            asyncio.create_task(
                self._worker(input_queue, results_queue),
                name=f"juicyurls-worker-{i}",
            )
            for i in range(worker_count)
        ]
        producer = asyncio.create_task(
            self._produce(lines, input_queue, worker_count),
            name="juicyurls-producer",
        )
        feeders = [producer, *workers]
        feed = asyncio.gather(*feeders)

        try:
            done, _ = await asyncio.wait({feed, collector}, return_when=asyncio.FIRST_COMPLETED)

            if collector in done:
                collector.result()
                raise PipelineError("Collector stopped before workers finished")

            # Raises the first producer or worker error
            feed.result()

            self.state = PipelineState.DRAINING
            await results_queue.put(_CLOSED)
            await collector

        except asyncio.CancelledError:
            await self._drain(feeders, collector, results_queue)
            raise

        finally:
            for task in [*feeders, collector]:
                if not task.done():
                    task.cancel()
            await asyncio.gather(feed, *feeders, collector, return_exceptions=True)

    async def _drain(
        self,
        feeders: list[asyncio.Task],
        collector: asyncio.Task,
        results_queue: asyncio.Queue,
    ) -> None:
        """Stop the cycle without losing results that are already queued.

        Producer and workers are stopped first, which fixes the contents of
        the results queue. The collector only ever waits in queue.get(), so
        cancelling it consumes nothing; the queue is then emptied here.
        """
        self.state = PipelineState.DRAINING

        for task in feeders:
            task.cancel()
        await asyncio.gather(*feeders, return_exceptions=True)

        collector.cancel()
        outcome = (await asyncio.gather(collector, return_exceptions=True))[0]
        if isinstance(outcome, Exception):
            logger.warning(f"Collector failed while draining: {outcome}")

        while not results_queue.empty():
            result = results_queue.get_nowait()
            if result is not _CLOSED:
                self._accept(result)

    async def _produce(
        self,
        lines: Iterable[str],
        queue: asyncio.Queue,
        worker_count: int,
    ) -> None:
        """Feed non-empty, non-comment lines to the input queue.

        Blocks when the queue is full. Pending counts are flushed before
        every blocking put, so a line is always included in the shared total
        before any worker can pick it up. Closes the queue with one marker
        per worker once input is exhausted.
        """
        delta = StatsDelta(self.stats, interval=self.stats_flush_interval)
        try:
            for raw in lines:
                line = raw.strip()
                delta.total += 1
                if is_skippable(line):
                    delta.skipped += 1
                    continue
                if queue.full():
                    delta.flush()
                await queue.put(line)
                delta.maybe_flush()
        finally:
            delta.flush()

        for _ in range(worker_count):
            await queue.put(_CLOSED)

    async def _worker(self, input_queue: asyncio.Queue, results_queue: asyncio.Queue) -> None:
        """Classify URLs until the input queue is closed.

        Suspicious results are pushed onto the results queue; the push is a
        cancellation point like the pull, so a full results queue cannot
        block shutdown.
        """
        delta = StatsDelta(self.stats, interval=self.stats_flush_interval)
        classifier = self.classifier
        try:
            while True:
                url = await input_queue.get()
                if url is _CLOSED:
                    break

                verdict, result = classifier.classify(url)
                if verdict == Verdict.INVALID:
                    delta.invalid += 1
                else:
                    delta.processed += 1
                    if result is not None:
                        await results_queue.put(result)
                        delta.suspicious += 1

                delta.maybe_flush()
        finally:
            delta.flush()

    async def _collect(self, queue: asyncio.Queue) -> None:
        """Drain the results queue, keeping the first result per URL."""
        while True:
            result = await queue.get()
            if result is _CLOSED:
                return
            self._accept(result)

    def _accept(self, result: ClassificationResult) -> None:
        if not self.deduper.add(result):
            return

        self.results.append(result)
        if self.on_result is not None:
            self.on_result(result)

    async def _report_progress(self) -> None:
        """Invoke the progress callback on a fixed interval."""
        while True:
            await asyncio.sleep(self.progress_interval)
            try:
                self.progress_callback(self.stats.snapshot())
            except Exception as e:
                logger.warning(f"Progress callback failed: {e}")
