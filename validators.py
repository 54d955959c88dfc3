"""Input validation for command line arguments."""

from __future__ import annotations

import math
import re
from datetime import UTC, datetime, timedelta
from urllib.parse import urlparse

from integrations.github.models import ClientConfig
from models import PERIOD_SUFFIX, RepositoryRef

_PERIOD_PATTERN = re.compile(rf"^\s*(\d+)\s*{PERIOD_SUFFIX}\s*$")
# GitHub caps owner and repository names at 100 characters
_REPOSITORY_PATTERN = re.compile(r"^([A-Za-z0-9._-]{1,100})/([A-Za-z0-9._-]{1,100})$")


def parse_repository(value: str) -> RepositoryRef:
    """Parse ``owner/repo`` or a ``https://github.com/owner/repo`` URL.

    Raises:
        ValueError: If the value does not name a repository
    """
    value = (value or "").strip()
    if not value:
        raise ValueError("Repository cannot be empty")

    parsed = urlparse(value)
    if parsed.scheme in ("http", "https"):
        if parsed.netloc not in ("github.com", "www.github.com"):
            raise ValueError(
                f"Invalid repository URL: {value}. Only GitHub repositories are supported (github.com)"
            )
        path_parts = [p for p in parsed.path.split("/") if p]
        if len(path_parts) < 2:
            raise ValueError(
                f"Invalid repository URL format: {value}. Expected: https://github.com/owner/repo"
            )
        value = f"{path_parts[0]}/{path_parts[1].removesuffix('.git')}"

    match = _REPOSITORY_PATTERN.match(value)
    if not match:
        raise ValueError(
            f"Invalid repository name format: {value}. Expected 'owner/name' of at most 100 "
            "letters, digits, '.', '-' or '_' each"
        )
    return RepositoryRef(owner=match.group(1), name=match.group(2))


def parse_period(period: str, now: datetime | None = None) -> tuple[int, datetime]:
    """Turn a ``<days>d`` period into a day count and a cutoff instant.

    Args:
        period: Period such as ``"30d"``
        now: Reference instant; defaults to the current UTC time

    Returns:
        Number of days and the instant that many days before *now*

    Raises:
        ValueError: If the period is not in the ``<days>d`` form
    """
    match = _PERIOD_PATTERN.match(period or "")
    if not match:
        raise ValueError("Option '--period' must be in the form '<# days>d'")
    days = int(match.group(1))
    now = now or datetime.now(UTC)
    return days, now - timedelta(days=days)


def validate_client_config(config: ClientConfig) -> ClientConfig:
    """Reject timeouts and retry delays no request could honour.

    Raises:
        ValueError: If the timeout is not a positive number of seconds or the
            retry delay is negative
    """
    if not (math.isfinite(config.timeout) and config.timeout > 0):
        raise ValueError(f"Timeout must be a positive number of seconds, got {config.timeout}")
    if not (math.isfinite(config.retry_delay) and config.retry_delay >= 0):
        raise ValueError(f"Retry delay must be zero or more seconds, got {config.retry_delay}")
    return config
