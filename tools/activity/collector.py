"""Collect commit and comment activity for a repository."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Protocol

from integrations.github.github import RestAPI, RetryOrchestrator, describe_retry
from integrations.github.models import (
    COMMENT_ENDPOINTS,
    CONTRIBUTOR_STATS_PATH,
    QuotaExceeded,
    TimedOut,
)
from integrations.github.pagination import Page, PaginationWalker
from models import ContributorMap, RepositoryRef

from .aggregator import fold_comments, fold_commit_stats


class ProgressReporter(Protocol):
    """Receives progress while a collection runs."""

    def update(self, label: str, completed: int, total: int, rate_remaining: int | None) -> None: ...

    def close(self) -> None: ...


class NullProgress:
    """Progress reporter that discards everything."""

    def update(self, label: str, completed: int, total: int, rate_remaining: int | None) -> None:
        pass

    def close(self) -> None:
        pass


class ActivityCollector:
    """Runs the collection pipeline for one repository.

    Steps run strictly in order: contributor statistics, then every comment
    endpoint page by page. Progress is counted in units: one for the
    statistics, one per endpoint, one for the final step, plus one per extra
    page GitHub announces through the ``last`` link of an endpoint's first
    page. The total only ever grows.
    """

    def __init__(
        self,
        client: RestAPI,
        progress: ProgressReporter | None = None,
        sleep: Callable[[float], None] = time.sleep,
        endpoints: Iterable[str] = COMMENT_ENDPOINTS,
    ) -> None:
        self.client = client
        self.progress = progress or NullProgress()
        self.orchestrator = RetryOrchestrator(client, sleep=sleep, on_retry=self._on_retry)
        self.endpoints = tuple(endpoints)
        self.completed = 0
        self.total = 0
        self.rate_remaining: int | None = None
        self.contributors: ContributorMap = {}

    def _report(self, label: str, rate_remaining: int | None = None) -> None:
        if rate_remaining is not None:
            self.rate_remaining = rate_remaining
        self.total = max(self.total, self.completed)
        self.progress.update(label, self.completed, self.total, self.rate_remaining)

    def _on_retry(self, target: str, outcome: QuotaExceeded | TimedOut) -> None:
        rate_remaining = outcome.rate_remaining if isinstance(outcome, QuotaExceeded) else None
        self._report(describe_retry(outcome), rate_remaining)

    def _collect_endpoint(self, repo: RepositoryRef, path: str, cutoff: datetime | None) -> None:
        def on_estimate(last_page: int) -> None:
            self.total += max(0, last_page - 1)
            self._report(f"Get {path} (page 1 of {last_page})")

        def on_page(page: Page) -> None:
            if page.number > 1:
                self.completed += 1
            self._report(f"Get {path} (page {page.number})", page.rate_remaining)

        walker = PaginationWalker(self.orchestrator, on_estimate=on_estimate, on_page=on_page)
        comments, _ = walker.walk_comments(f"{repo.route}/{path}", cutoff)
        self.contributors = fold_comments(comments, self.contributors)

        self.completed += 1
        self._report(f"Finished Get {path}")

    def run(self, repo: RepositoryRef, cutoff: datetime | None = None) -> ContributorMap:
        """Collect activity for *repo*, counting comments created at or after *cutoff*.

        Returns:
            Mapping of login to ``ContributorRecord``.

        Raises:
            GitHubAPIError: When any request fails for good. Nothing partial
                is returned.
        """
        self.completed = 0
        self.total = len(self.endpoints) + 2
        self.contributors = {}

        self.rate_remaining = self.client.get_rate_limit()
        self._report("Getting Collaborator Statistics")

        stats = self.orchestrator.get(f"{repo.route}/{CONTRIBUTOR_STATS_PATH}")
        self.contributors = fold_commit_stats(stats.body)
        self.completed += 1
        self._report("Finished Getting Collaborator Statistics", stats.rate_remaining)

        for path in self.endpoints:
            self._collect_endpoint(repo, path, cutoff)

        self.completed += 1
        self._report("Finished")
        return self.contributors
