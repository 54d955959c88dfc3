#!/usr/bin/env python3
"""Command line entry point: rank a repository's contributors by comments."""

from __future__ import annotations

import argparse
import sys
from datetime import datetime

from colorama import init
from tqdm import tqdm

from integrations.github.github import RestAPI
from integrations.github.models import ClientConfig, GitHubAPIError
from models import COMMENT_COUNT_WIDTH, Colors, ContributorMap, ContributorRecord, RepositoryRef
from tools.activity import ActivityCollector, sort_by_comments
from validators import parse_period, parse_repository, validate_client_config

# Initialize colorama for cross-platform color support
init(autoreset=True)


class TqdmProgress:
    """Progress bar showing the current step and remaining rate limit."""

    def __init__(self, verbose: bool = False) -> None:
        self.verbose = verbose
        self._bar: tqdm | None = None

    def update(self, label: str, completed: int, total: int, rate_remaining: int | None) -> None:
        if self._bar is None:
            self._bar = tqdm(total=total, unit="step", leave=False)
        if self._bar.total != total:
            self._bar.total = total
        self._bar.n = completed
        self._bar.set_description(label)
        self._bar.set_postfix(rate_limit="?" if rate_remaining is None else rate_remaining)
        self._bar.refresh()
        if self.verbose and "Retrying" in label:
            tqdm.write(f"{Colors.WARNING}⏳ {label}{Colors.RESET}")

    def close(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None


class Display:
    """Console output helpers."""

    @staticmethod
    def pluralize(count: int, word: str) -> str:
        return f"{word}{'' if count == 1 else 's'}"

    @staticmethod
    def print_banner() -> None:
        print(f"{Colors.HEADER}💬 commentstats: who talks the most in a repository{Colors.RESET}")
        print()

    @staticmethod
    def print_run_info(repo: RepositoryRef, days: int | None) -> None:
        period = days if days is not None else "*"
        print(f"{Colors.INFO}  Fetching comments for past {period} days for \"{repo.full_name}\"...{Colors.RESET}")
        print()

    @staticmethod
    def format_contributor(login: str, record: ContributorRecord) -> str:
        """Format one output line, e.g. ``    3 comments, alice (10 commits)``."""
        comments = record.total_comments
        commits = record.total_commits
        return (
            f"{comments:>{COMMENT_COUNT_WIDTH}} {Display.pluralize(comments, 'comment')}, "
            f"{login} ({commits} {Display.pluralize(commits, 'commit')})"
        )

    @staticmethod
    def print_results(contributors: ContributorMap) -> None:
        if not contributors:
            print(f"{Colors.WARNING}📭 No contributors found.{Colors.RESET}")
            return
        for login, record in sort_by_comments(contributors):
            print(Display.format_contributor(login, record))

    @staticmethod
    def print_error(message: str) -> None:
        print(f"{Colors.ERROR}❌ Error: {message}{Colors.RESET}")


def create_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="commentstats",
        description="Rank a GitHub repository's contributors by the number of comments they wrote.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:

    # Every comment ever written
    commentstats --repo psf/requests

    # Only the last 30 days
    commentstats --repo psf/requests --period 30d
    """,
    )
    parser.add_argument(
        "--repo",
        "-r",
        required=True,
        help='Repository to inspect, as "owner/name" or a github.com URL',
    )
    parser.add_argument(
        "--period",
        "-p",
        default=None,
        help='Only count comments from the last N days, written as "<N>d" (e.g. "30d")',
    )
    parser.add_argument(
        "--github-token",
        help="GitHub personal access token (also can be set via GITHUB_TOKEN env variable)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait for each request (default: 10)",
    )
    parser.add_argument(
        "--retry-delay",
        type=float,
        default=None,
        help="Seconds to wait before retrying a timed out request (default: 1)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Print retry notices as they happen",
    )
    return parser


def build_config_from_args(
    args: argparse.Namespace,
) -> tuple[ClientConfig, RepositoryRef, int | None, datetime | None]:
    """Validate *args* and build the client configuration.

    Raises:
        ValueError: If the repository, period, timeout or retry delay is malformed
    """
    repo = parse_repository(args.repo)
    days, cutoff = parse_period(args.period) if args.period else (None, None)

    config = ClientConfig.from_env()
    if args.github_token:
        config.token = args.github_token
    if args.timeout is not None:
        config.timeout = args.timeout
    if args.retry_delay is not None:
        config.retry_delay = args.retry_delay
    return validate_client_config(config), repo, days, cutoff


def collect_activity(
    config: ClientConfig, repo: RepositoryRef, cutoff: datetime | None, verbose: bool = False
) -> ContributorMap:
    """Run the collection with a progress bar, closing it on every path."""
    progress = TqdmProgress(verbose=verbose)
    try:
        return ActivityCollector(RestAPI(config), progress=progress).run(repo, cutoff)
    finally:
        progress.close()


def main() -> int:
    args = create_argument_parser().parse_args()

    try:
        config, repo, days, cutoff = build_config_from_args(args)
    except ValueError as exc:
        Display.print_error(str(exc))
        return 1

    if not config.token:
        Display.print_error("GITHUB_TOKEN environment variable or --github-token argument must be set.")
        return 1

    Display.print_banner()
    Display.print_run_info(repo, days)

    try:
        contributors = collect_activity(config, repo, cutoff, verbose=args.verbose)
    except GitHubAPIError as exc:
        Display.print_error(str(exc))
        return 1

    Display.print_results(contributors)
    return 0


if __name__ == "__main__":
    sys.exit(main())
