"""GitHub REST API integration: fetching, retrying and pagination."""

from __future__ import annotations

from .github import RestAPI, RetryOrchestrator
from .links import parse_link_header
from .pagination import PaginationWalker, filter_comments

__all__ = [
    "PaginationWalker",
    "RestAPI",
    "RetryOrchestrator",
    "filter_comments",
    "parse_link_header",
]
