"""Shared pytest fixtures for github-models tests.

Fixture Organization:
    - github_client: real GitHubClient (httpx client never reaches the network)
    - fake_github: GitHubClient.request patched with an in-memory router
"""

import sys
from collections.abc import Generator
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from github_models.client import GitHubClient
from github_models.config import reset_config

# Add tests directory to sys.path so tests can import github_fakes
tests_dir = Path(__file__).parent
if str(tests_dir) not in sys.path:
    sys.path.insert(0, str(tests_dir))

from github_fakes import FakeGitHub  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch) -> Generator[None, None, None]:
    """Keep environment configuration out of tests."""
    for name in (
        "GITHUB_TOKEN",
        "GITHUB_MODELS_TOKEN",
        "GITHUB_MODELS_BASE_URL",
        "GITHUB_MODELS_PAGE_SIZE",
        "GITHUB_MODELS_LOG_LEVEL",
        "GITHUB_MODELS_LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def github_client() -> GitHubClient:
    """Create GitHubClient instance for testing."""
    return GitHubClient(token="ghp_test_token_123")


@pytest.fixture
def fake_github(github_client) -> Generator[FakeGitHub, None, None]:
    """Route github_client requests to an in-memory FakeGitHub."""
    fake = FakeGitHub()
    with patch.object(github_client, "request", new=AsyncMock(side_effect=fake.request)):
        yield fake
