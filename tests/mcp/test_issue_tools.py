"""Issue tools: listing, creation, comments and updates."""

from __future__ import annotations

from github_mcp_server.mcp_server import call_tool
from tests._github_fake import FakeGitHub
from tests.mcp._helpers import _parse

REPO = {"owner": "octo", "repo": "hello"}


class TestIssueTools:
    async def test_list_issues_joins_labels(self, mcp_github: FakeGitHub) -> None:
        mcp_github.add("GET", "/repos/octo/hello/issues", [{"number": 1, "title": "One"}])

        result = await call_tool("list_issues", {**REPO, "state": "closed", "labels": ["bug", "ui"]})

        assert _parse(result) == [{"number": 1, "title": "One"}]
        params = mcp_github.calls("GET", "/repos/octo/hello/issues")[0].url.params
        assert params["state"] == "closed"
        assert params["labels"] == "bug,ui"
        assert "sort" not in params

    async def test_create_issue_drops_empty_fields(self, mcp_github: FakeGitHub) -> None:
        mcp_github.add("POST", "/repos/octo/hello/issues", {"number": 9, "title": "Crash"}, status=201)

        result = await call_tool("create_issue", {**REPO, "title": "Crash", "labels": ["bug"], "milestone": 2})

        assert _parse(result)["number"] == 9
        (request,) = mcp_github.calls("POST")
        assert FakeGitHub.json_body(request) == {"title": "Crash", "labels": ["bug"], "milestone": 2}

    async def test_create_issue_requires_title(self, mcp_github: FakeGitHub) -> None:
        result = await call_tool("create_issue", {**REPO, "title": ""})
        assert result.isError
        assert _parse(result) == "missing required parameter: title"

    async def test_add_issue_comment(self, mcp_github: FakeGitHub) -> None:
        mcp_github.add("POST", "/repos/octo/hello/issues/4/comments", {"id": 1, "body": "thanks"}, status=201)

        result = await call_tool("add_issue_comment", {**REPO, "issue_number": 4, "body": "thanks"})

        assert _parse(result) == {"id": 1, "body": "thanks"}

    async def test_update_issue_can_clear_labels(self, mcp_github: FakeGitHub) -> None:
        mcp_github.add("PATCH", "/repos/octo/hello/issues/4", {"number": 4, "state": "closed"})

        await call_tool("update_issue", {**REPO, "issue_number": 4, "state": "closed", "labels": []})

        (request,) = mcp_github.calls("PATCH")
        assert FakeGitHub.json_body(request) == {"state": "closed", "labels": []}

    async def test_update_issue_rejects_bad_state(self, mcp_github: FakeGitHub) -> None:
        result = await call_tool("update_issue", {**REPO, "issue_number": 4, "state": "reopened"})
        assert result.isError
        assert _parse(result) == "state must be 'open' or 'closed'"
        assert mcp_github.requests == []
