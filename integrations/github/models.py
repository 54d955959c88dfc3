"""
Models and constants for the GitHub integration.

This module contains exception classes, constants, request outcome types
and configuration values used by the GitHub API clients.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any

# =============================================================================
# Constants
# =============================================================================

GITHUB_API_BASE_URL = "https://api.github.com"
RATE_LIMIT_PATH = "rate_limit"
CONTRIBUTOR_STATS_PATH = "stats/contributors"

# Comment endpoints, relative to the repository route
COMMENT_ENDPOINTS = ("comments", "pulls/comments", "issues/comments")

# Timeouts (seconds)
DEFAULT_TIMEOUT = 10.0

# Retry configuration
RETRY_DELAY = 1.0  # Delay before retrying a timed out request (seconds)
MAX_ATTEMPTS = 2  # Original request plus one retry
READ_CHUNK_SIZE = 1024  # Bytes read between wall-clock deadline checks

# Response headers
RATE_LIMIT_REMAINING_HEADER = "X-RateLimit-Remaining"
RATE_LIMIT_RESET_HEADER = "X-RateLimit-Reset"
LINK_HEADER = "Link"


# =============================================================================
# Exceptions
# =============================================================================


class GitHubAPIError(Exception):
    """Raised when a GitHub API request fails."""


class GitHubNetworkError(GitHubAPIError):
    """Raised when a network error occurs (DNS, connection)."""


class GitHubRateLimitError(GitHubAPIError):
    """Raised when GitHub API rate limit is exceeded."""


class GitHubTimeoutError(GitHubAPIError):
    """Raised when a request does not complete within its timeout."""


# =============================================================================
# Configuration
# =============================================================================


@dataclass
class ClientConfig:
    """Connection settings handed to the REST client."""

    base_url: str = GITHUB_API_BASE_URL
    token: str | None = None
    timeout: float = DEFAULT_TIMEOUT  # seconds
    retry_delay: float = RETRY_DELAY  # seconds

    @classmethod
    def from_env(cls) -> ClientConfig:
        """Create configuration from environment variables."""
        return cls(
            base_url=os.getenv("GITHUB_API_URL", GITHUB_API_BASE_URL),
            token=os.getenv("GITHUB_TOKEN") or os.getenv("GITHUB_PERSONAL_ACCESS_TOKEN"),
            timeout=float(os.getenv("GITHUB_TIMEOUT", str(DEFAULT_TIMEOUT))),
            retry_delay=float(os.getenv("GITHUB_RETRY_DELAY", str(RETRY_DELAY))),
        )


# =============================================================================
# Pagination links
# =============================================================================


@dataclass(frozen=True)
class Link:
    """A single relation taken from a ``Link`` response header."""

    rel: str
    url: str
    page: int | None = None


LinkSet = dict[str, Link]


# =============================================================================
# Request outcomes
# =============================================================================


@dataclass(frozen=True)
class Success:
    """A request that returned a usable response."""

    body: Any
    rate_remaining: int | None = None
    links: LinkSet = field(default_factory=dict)


@dataclass(frozen=True)
class QuotaExceeded:
    """GitHub refused the request because the rate limit is used up."""

    rate_remaining: int
    retry_delay: float  # seconds until the limit resets


@dataclass(frozen=True)
class TimedOut:
    """The request did not complete before its timeout."""

    retry_delay: float


@dataclass(frozen=True)
class Fatal:
    """A failure that will not be retried."""

    cause: str
    status_code: int | None = None
    error: type[GitHubAPIError] = GitHubAPIError

    def to_exception(self) -> GitHubAPIError:
        return self.error(self.cause)


RequestOutcome = Success | QuotaExceeded | TimedOut | Fatal
FinalOutcome = Success | Fatal
