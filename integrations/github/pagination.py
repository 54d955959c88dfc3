"""Walking link-paginated comment listings."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .github import RetryOrchestrator
from .models import Fatal, GitHubAPIError


@dataclass
class Page:
    """Comments kept from one page of a listing."""

    number: int
    comments: list[dict[str, Any]] = field(default_factory=list)
    rate_remaining: int | None = None


def _created_at(comment: dict[str, Any]) -> datetime:
    # GitHub timestamps look like 2024-01-31T12:00:00Z
    return datetime.fromisoformat(comment["created_at"].replace("Z", "+00:00"))


def filter_comments(
    comments: Iterable[dict[str, Any]], cutoff: datetime | None = None
) -> list[dict[str, Any]]:
    """Keep comments created at or after *cutoff*; keep all when it is None."""
    if cutoff is None:
        return list(comments)
    return [comment for comment in comments if _created_at(comment) >= cutoff]


class PaginationWalker:
    """Follows ``next`` links through a listing, one request at a time.

    ``on_estimate`` is called once, after the first page, with the page number
    of the ``last`` relation when GitHub reports one. ``on_page`` is called
    after every page.
    """

    def __init__(
        self,
        orchestrator: RetryOrchestrator,
        on_estimate: Callable[[int], None] | None = None,
        on_page: Callable[[Page], None] | None = None,
    ) -> None:
        self.orchestrator = orchestrator
        self.on_estimate = on_estimate
        self.on_page = on_page

    def iter_pages(self, endpoint: str, cutoff: datetime | None = None) -> Iterator[Page]:
        """Yield filtered pages of *endpoint* until no ``next`` link remains.

        Raises:
            GitHubAPIError: When any page resolves to a fatal outcome.
        """
        target: str | None = endpoint
        number = 1
        while target is not None:
            outcome = self.orchestrator.execute(target)
            if isinstance(outcome, Fatal):
                raise outcome.to_exception()

            body = outcome.body
            if not isinstance(body, list):
                raise GitHubAPIError(f"Expected a list of comments from {target}, got {type(body).__name__}")

            if number == 1 and self.on_estimate is not None and "last" in outcome.links:
                last_page = outcome.links["last"].page
                if last_page is not None:
                    self.on_estimate(last_page)

            page = Page(
                number=number,
                comments=filter_comments(body, cutoff),
                rate_remaining=outcome.rate_remaining,
            )
            if self.on_page is not None:
                self.on_page(page)
            yield page

            next_link = outcome.links.get("next")
            target = next_link.url if next_link else None
            number = next_link.page if next_link and next_link.page else number + 1

    def walk_comments(
        self, endpoint: str, cutoff: datetime | None = None
    ) -> tuple[list[dict[str, Any]], int | None]:
        """Collect every comment of *endpoint*.

        Returns:
            The accumulated comments and the last rate limit value seen.
            A failure on any page propagates and nothing is returned.
        """
        comments: list[dict[str, Any]] = []
        rate_remaining: int | None = None
        for page in self.iter_pages(endpoint, cutoff):
            comments.extend(page.comments)
            if page.rate_remaining is not None:
                rate_remaining = page.rate_remaining
        return comments, rate_remaining
