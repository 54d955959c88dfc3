"""Repository activity collection for commentstats."""

from __future__ import annotations

from .aggregator import fold_comments, fold_commit_stats, sort_by_comments
from .collector import ActivityCollector, ProgressReporter

__all__ = [
    "ActivityCollector",
    "ProgressReporter",
    "fold_comments",
    "fold_commit_stats",
    "sort_by_comments",
]
