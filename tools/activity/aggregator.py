"""Folding commit statistics and comments into per-contributor counters."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import replace
from typing import Any

from models import ContributorMap, ContributorRecord


def _login(entry: dict[str, Any], key: str) -> str | None:
    account = entry.get(key)
    # Deleted accounts come back as null
    if not isinstance(account, dict):
        return None
    return account.get("login")


def fold_commit_stats(stats: Any) -> ContributorMap:
    """Build a contributor map from a ``stats/contributors`` response.

    Each author gets ``total_commits`` from the response and zero comments.
    A body that is not a list (GitHub answers 202 while it computes the
    statistics) yields an empty map.
    """
    contributors: ContributorMap = {}
    if not isinstance(stats, list):
        return contributors

    for statistic in stats:
        login = _login(statistic, "author")
        if login is None:
            continue
        record = contributors.get(login, ContributorRecord())
        contributors[login] = replace(
            record, total_commits=record.total_commits + int(statistic.get("total", 0))
        )
    return contributors


def fold_comments(
    comments: Iterable[dict[str, Any]], existing: Mapping[str, ContributorRecord]
) -> ContributorMap:
    """Count *comments* per author on top of *existing*.

    Returns a new map; *existing* is left untouched. Authors not seen
    before get a record with zero commits.
    """
    contributors: ContributorMap = dict(existing)
    for comment in comments:
        login = _login(comment, "user")
        if login is None:
            continue
        record = contributors.get(login, ContributorRecord())
        contributors[login] = replace(record, total_comments=record.total_comments + 1)
    return contributors


def sort_by_comments(contributors: Mapping[str, ContributorRecord]) -> list[tuple[str, ContributorRecord]]:
    """Return contributors ordered by comment count, highest first."""
    return sorted(contributors.items(), key=lambda item: item[1].total_comments, reverse=True)
