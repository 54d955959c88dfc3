"""Pytest configuration and shared fixtures for commentstats tests."""

from __future__ import annotations

import json
import os
import sys
from unittest.mock import MagicMock, patch

import pytest

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

API = "https://api.github.com"


def make_response(status_code=200, json_data=None, headers=None, json_error=False):
    """Build a mock ``requests.Response``."""
    response = MagicMock()
    response.status_code = status_code
    response.headers = headers or {}
    if json_error:
        response.iter_content.return_value = [b"not json"]
    else:
        response.iter_content.return_value = [json.dumps(json_data).encode()]
    return response


def make_comment(login, created_at="2024-06-01T12:00:00Z"):
    """Build a minimal comment payload."""
    return {"user": {"login": login}, "created_at": created_at, "body": "LGTM"}


@pytest.fixture
def mock_github_token():
    """Provide a mock GitHub token."""
    return "ghp_test_token_1234567890"


@pytest.fixture
def mock_env_token(mock_github_token):
    """Set up environment with mock GitHub token."""
    with patch.dict(os.environ, {"GITHUB_TOKEN": mock_github_token}):
        yield mock_github_token


@pytest.fixture
def client_config(mock_github_token):
    """Create a ClientConfig pointing at the public API."""
    from integrations.github.models import ClientConfig

    return ClientConfig(base_url=API, token=mock_github_token, timeout=10.0, retry_delay=1.0)


@pytest.fixture
def rest_client(client_config):
    """Create a RestAPI with a frozen clock."""
    from integrations.github.github import RestAPI

    return RestAPI(client_config, clock=lambda: 1_700_000_000.0)


@pytest.fixture
def repo():
    """Create a sample repository reference."""
    from models import RepositoryRef

    return RepositoryRef(owner="octo", name="hello")


@pytest.fixture
def sample_stats():
    """Create a sample stats/contributors payload."""
    return [
        {"author": {"login": "alice"}, "total": 10, "weeks": []},
        {"author": {"login": "bob"}, "total": 3, "weeks": []},
    ]

