"""Orchestrator module for pipeline execution.

This module provides the concurrent classification pipeline and the
statistics aggregation it reports through.
"""

from juicyurls.orchestrator.stats import (
    StatsAggregator,
    StatsDelta,
)
from juicyurls.orchestrator.pipeline import (
    ClassificationPipeline,
    effective_worker_count,
    iter_chunks,
)


__all__ = [
    # Statistics
    "StatsAggregator",
    "StatsDelta",
    # Pipeline
    "ClassificationPipeline",
    "effective_worker_count",
    "iter_chunks",
]
