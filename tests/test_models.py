"""Tests for the models module."""

from dataclasses import FrozenInstanceError

import pytest

from models import COMMENT_COUNT_WIDTH, Colors, ContributorRecord, RepositoryRef


class TestConstants:
    """Tests for module constants."""

    def test_comment_count_width(self):
        """Test COMMENT_COUNT_WIDTH has expected value."""
        assert COMMENT_COUNT_WIDTH == 5


class TestColors:
    """Tests for the Colors class."""

    @pytest.mark.parametrize("name", ["HEADER", "SUCCESS", "WARNING", "ERROR", "INFO", "PROGRESS", "RESET"])
    def test_colors_has_attribute(self, name):
        """Test Colors exposes the palette entries."""
        assert getattr(Colors, name) is not None


class TestRepositoryRef:
    """Tests for RepositoryRef."""

    def test_full_name_and_route(self):
        """Test full_name and route are derived from owner and name."""
        repo = RepositoryRef(owner="octo", name="hello")
        assert repo.full_name == "octo/hello"
        assert repo.route == "/repos/octo/hello"

    def test_immutable(self):
        """Test RepositoryRef cannot be changed once built."""
        repo = RepositoryRef(owner="octo", name="hello")
        with pytest.raises(FrozenInstanceError):
            repo.owner = "other"


class TestContributorRecord:
    """Tests for ContributorRecord."""

    def test_defaults(self):
        """Test counters start at zero."""
        record = ContributorRecord()
        assert record.total_commits == 0
        assert record.total_comments == 0
