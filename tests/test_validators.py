"""Tests for command line input validation."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from integrations.github.models import ClientConfig
from models import RepositoryRef
from validators import parse_period, parse_repository, validate_client_config

NOW = datetime(2024, 6, 30, 12, 0, tzinfo=UTC)


class TestParseRepositoryName:
    """Tests for owner/name validation in parse_repository."""

    def test_valid_names(self):
        """Test letters, digits, dots, hyphens and underscores are accepted."""
        assert parse_repository("owner/repo-name").full_name == "owner/repo-name"
        assert parse_repository("owner_name/repo.name") == RepositoryRef("owner_name", "repo.name")

    def test_empty(self):
        """Test an empty value is rejected."""
        with pytest.raises(ValueError, match="cannot be empty"):
            parse_repository("   ")

    def test_no_slash(self):
        """Test a value without a slash is rejected."""
        with pytest.raises(ValueError, match="Invalid repository name format"):
            parse_repository("ownerrepo")

    def test_multiple_slashes(self):
        """Test a value with more than one slash is rejected."""
        with pytest.raises(ValueError, match="Invalid repository name format"):
            parse_repository("owner/repo/sub")

    def test_invalid_chars(self):
        """Test characters outside the allowed set are rejected."""
        with pytest.raises(ValueError, match="Invalid repository name format"):
            parse_repository("owner/repo@name")

    def test_name_length_limit(self):
        """Test owner and name are capped at 100 characters each."""
        assert parse_repository(f"{'a' * 100}/repo").owner == "a" * 100
        with pytest.raises(ValueError, match="at most 100"):
            parse_repository(f"{'a' * 101}/repo")


class TestParseRepository:
    """Tests for parse_repository function."""

    def test_owner_and_name(self):
        """Test an owner/name pair is parsed."""
        assert parse_repository("psf/requests") == RepositoryRef(owner="psf", name="requests")

    def test_surrounding_whitespace(self):
        """Test surrounding whitespace is ignored."""
        assert parse_repository("  psf/requests \n").full_name == "psf/requests"

    def test_github_url(self):
        """Test a github.com URL is accepted."""
        assert parse_repository("https://github.com/psf/requests") == RepositoryRef("psf", "requests")

    def test_github_url_with_git_suffix_and_path(self):
        """Test .git suffixes and deeper paths are dropped."""
        assert parse_repository("https://github.com/psf/requests.git").name == "requests"
        assert parse_repository("https://www.github.com/psf/requests/pulls").name == "requests"

    def test_other_host_rejected(self):
        """Test URLs on other hosts are rejected."""
        with pytest.raises(ValueError, match="Only GitHub repositories"):
            parse_repository("https://gitlab.com/owner/repo")

    def test_url_without_repo_rejected(self):
        """Test a URL naming only an owner is rejected."""
        with pytest.raises(ValueError, match="Invalid repository URL format"):
            parse_repository("https://github.com/owner")

    def test_route(self):
        """Test the API route of the parsed repository."""
        assert parse_repository("psf/requests").route == "/repos/psf/requests"


class TestParsePeriod:
    """Tests for parse_period function."""

    def test_thirty_days(self):
        """Test 30d gives a cutoff exactly 30 days before now."""
        days, cutoff = parse_period("30d", NOW)
        assert days == 30
        assert cutoff == NOW - timedelta(days=30)

    def test_zero_days(self):
        """Test 0d gives a cutoff of now."""
        assert parse_period("0d", NOW) == (0, NOW)

    def test_whitespace(self):
        """Test whitespace around the period is tolerated."""
        assert parse_period(" 7 d ", NOW)[0] == 7

    def test_defaults_to_current_time(self):
        """Test the cutoff is relative to the current UTC time by default."""
        before = datetime.now(UTC)
        _, cutoff = parse_period("1d")
        after = datetime.now(UTC)
        assert before - timedelta(days=1) <= cutoff <= after - timedelta(days=1)

    @pytest.mark.parametrize("period", ["xd", "d", "30", "30w", "-3d", "3.5d", ""])
    def test_invalid(self, period):
        """Test malformed periods are rejected."""
        with pytest.raises(ValueError, match="must be in the form"):
            parse_period(period, NOW)


class TestValidateClientConfig:
    """Tests for validate_client_config function."""

    def test_valid_config_returned(self):
        """Test a sane config is returned unchanged."""
        config = ClientConfig(token="t", timeout=0.5, retry_delay=0.0)
        assert validate_client_config(config) is config

    @pytest.mark.parametrize("timeout", [0.0, -1.0, float("nan"), float("inf")])
    def test_bad_timeout(self, timeout):
        """Test zero, negative and non-finite timeouts are rejected."""
        with pytest.raises(ValueError, match="Timeout must be a positive"):
            validate_client_config(ClientConfig(token="t", timeout=timeout))

    @pytest.mark.parametrize("retry_delay", [-1.0, -0.001, float("nan")])
    def test_bad_retry_delay(self, retry_delay):
        """Test negative and non-finite retry delays are rejected."""
        with pytest.raises(ValueError, match="Retry delay must be zero or more"):
            validate_client_config(ClientConfig(token="t", retry_delay=retry_delay))
