"""Shared data models, constants and console colors for commentstats."""

from __future__ import annotations

from dataclasses import dataclass

from colorama import Fore, Style

# =============================================================================
# Constants
# =============================================================================

COMMENT_COUNT_WIDTH = 5
PERIOD_SUFFIX = "d"


# =============================================================================
# Colors
# =============================================================================


class Colors:
    """Console palette used by the CLI."""

    HEADER = Fore.CYAN + Style.BRIGHT
    SUCCESS = Fore.GREEN + Style.BRIGHT
    WARNING = Fore.YELLOW + Style.BRIGHT
    ERROR = Fore.RED + Style.BRIGHT
    INFO = Fore.BLUE + Style.BRIGHT
    PROGRESS = Fore.CYAN
    LOGIN = Fore.MAGENTA + Style.BRIGHT
    COUNT = Fore.YELLOW + Style.BRIGHT
    RESET = Style.RESET_ALL


# =============================================================================
# Domain models
# =============================================================================


@dataclass(frozen=True)
class RepositoryRef:
    """An ``owner/name`` pair identifying a GitHub repository."""

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def route(self) -> str:
        """API route of the repository, e.g. ``/repos/owner/name``."""
        return f"/repos/{self.owner}/{self.name}"


@dataclass(frozen=True)
class ContributorRecord:
    """Activity counters for one account."""

    total_commits: int = 0
    total_comments: int = 0


ContributorMap = dict[str, ContributorRecord]
