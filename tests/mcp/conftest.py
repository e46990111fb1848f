"""Fixtures for MCP server tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest

from github_mcp_server.config import ServerConfig
from github_mcp_server.sanitize import DEFAULT_CONFIG
from github_mcp_server.translations import null_translation
from tests._github_fake import FakeGitHub


@pytest.fixture
async def mcp_github(fake_github: FakeGitHub) -> AsyncGenerator[FakeGitHub, None]:
    """Point the MCP module globals at ``fake_github`` with every toolset on."""
    import github_mcp_server.mcp_server as mcp_mod

    saved = (
        mcp_mod.client,
        mcp_mod._toolset_group,
        mcp_mod._dynamic_entries,
        mcp_mod._content_filter,
        mcp_mod._sanitize_config,
    )
    client = fake_github.client()
    group, extra = mcp_mod.build_registry(ServerConfig(token="test-token"), null_translation)
    mcp_mod.client = client
    mcp_mod._toolset_group = group
    mcp_mod._dynamic_entries = extra
    mcp_mod._content_filter = None
    mcp_mod._sanitize_config = DEFAULT_CONFIG

    yield fake_github

    (
        mcp_mod.client,
        mcp_mod._toolset_group,
        mcp_mod._dynamic_entries,
        mcp_mod._content_filter,
        mcp_mod._sanitize_config,
    ) = saved
    await client.aclose()


@pytest.fixture
async def dynamic_github(mcp_github: FakeGitHub) -> FakeGitHub:
    """Like ``mcp_github`` but in dynamic-toolset mode (only ``context`` enabled)."""
    import github_mcp_server.mcp_server as mcp_mod

    group, extra = mcp_mod.build_registry(
        ServerConfig(token="test-token", dynamic_toolsets=True), null_translation
    )
    mcp_mod._toolset_group = group
    mcp_mod._dynamic_entries = extra
    return mcp_github
