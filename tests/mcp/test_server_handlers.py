"""Resource, prompt and completion handlers registered on the MCP server."""

from __future__ import annotations

import base64

import pytest
from mcp import types

import github_mcp_server.mcp_server as mcp_mod
from github_mcp_server.completions import UnsupportedReferenceError
from github_mcp_server.mcp_server import (
    _complete_request,
    _read_resource,
    get_prompt,
    list_prompts,
    list_resource_templates,
    list_resources,
)
from tests._github_fake import FakeGitHub


class TestResources:
    async def test_no_static_resources(self, mcp_github: FakeGitHub) -> None:
        assert await list_resources() == []

    async def test_templates(self, mcp_github: FakeGitHub) -> None:
        names = [t.name for t in await list_resource_templates()]
        assert names[0] == "repository_content"
        assert len(names) == 5

    async def test_read_resource(self, mcp_github: FakeGitHub) -> None:
        mcp_github.add(
            "GET",
            "/repos/octo/hello/contents/a.txt",
            {"name": "a.txt", "encoding": "base64", "content": base64.b64encode(b"A").decode()},
        )
        request = types.ReadResourceRequest(
            method="resources/read", params=types.ReadResourceRequestParams(uri="repo://octo/hello/contents/a.txt")
        )

        result = await _read_resource(request)

        assert isinstance(result.root, types.ReadResourceResult)
        (contents,) = result.root.contents
        assert contents.text == "A"  # type: ignore[union-attr]

    def test_read_handler_is_registered(self) -> None:
        assert mcp_mod.server.request_handlers[types.ReadResourceRequest] is _read_resource


class TestPrompts:
    async def test_list(self, mcp_github: FakeGitHub) -> None:
        (prompt,) = await list_prompts()
        assert prompt.name == "github_me"

    async def test_github_me(self, mcp_github: FakeGitHub) -> None:
        mcp_github.add("GET", "/user", {"login": "octocat"})

        result = await get_prompt("github_me", {})

        assert result.description == "Your GitHub Identity"
        (message,) = result.messages
        assert message.role == "user"
        assert '"login":"octocat"' in message.content.text.replace(" ", "")  # type: ignore[union-attr]

    async def test_unknown_prompt(self, mcp_github: FakeGitHub) -> None:
        with pytest.raises(ValueError, match="Unknown prompt: nope"):
            await get_prompt("nope", {})


class TestCompletion:
    async def test_branch_completion(self, mcp_github: FakeGitHub) -> None:
        mcp_github.add("GET", "/repos/octo/hello/branches", [{"name": "main"}, {"name": "maint"}, {"name": "dev"}])
        request = types.CompleteRequest(
            method="completion/complete",
            params=types.CompleteRequestParams(
                ref=types.ResourceTemplateReference(
                    type="ref/resource", uri="repo://octo/hello/refs/heads/{branch}/contents{/path*}"
                ),
                argument=types.CompletionArgument(name="branch", value="ma"),
            ),
        )

        result = await _complete_request(request)

        assert result.completion.values == ["main", "maint"]
        assert result.completion.hasMore is False

    async def test_prompt_reference_is_rejected(self, mcp_github: FakeGitHub) -> None:
        request = types.CompleteRequest(
            method="completion/complete",
            params=types.CompleteRequestParams(
                ref=types.PromptReference(type="ref/prompt", name="github_me"),
                argument=types.CompletionArgument(name="x", value=""),
            ),
        )
        with pytest.raises(UnsupportedReferenceError):
            await _complete_request(request)
