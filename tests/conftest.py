"""Shared pytest fixtures for github-mcp-server tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest
from click.testing import CliRunner

from github_mcp_server.github_client import GitHubClient
from tests._github_fake import FakeGitHub


@pytest.fixture
def fake_github() -> FakeGitHub:
    """Empty in-memory GitHub; tests add the routes they need."""
    return FakeGitHub()


@pytest.fixture
async def gh_client(fake_github: FakeGitHub) -> AsyncGenerator[GitHubClient, None]:
    """GitHubClient wired to ``fake_github``."""
    client = fake_github.client()
    yield client
    await client.aclose()


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()
