"""Tests for the request-scoped GitHub error holder."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from github_mcp_server.errors import (
    GitHubAPIError,
    MissingErrorContext,
    error_result,
    error_tracking,
    get_api_errors,
    get_graphql_errors,
    new_api_error,
    new_api_error_response,
    new_graphql_error_response,
    with_error_tracking,
)


class TestErrorValues:
    def test_api_error_str(self) -> None:
        err = GitHubAPIError("failed to get issue", None, "404 Not Found")
        assert str(err) == "failed to get issue: 404 Not Found"

    def test_error_result(self) -> None:
        result = error_result("boom")
        assert result.isError is True
        assert result.content[0].text == "boom"  # type: ignore[union-attr]


class TestErrorTracking:
    def test_readers_need_a_holder(self) -> None:
        with pytest.raises(MissingErrorContext, match="context does not contain GitHubCtxErrors"):
            get_api_errors()
        with pytest.raises(MissingErrorContext):
            get_graphql_errors()

    def test_recording_without_holder_is_noop(self) -> None:
        err = new_api_error("failed", None, "cause")
        assert err.message == "failed"

    def test_records_inside_scope(self) -> None:
        response = httpx.Response(404, request=httpx.Request("GET", "https://api.github.com/x"))
        with error_tracking() as holder:
            result = new_api_error_response("failed to get x", response, "not found")
            new_graphql_error_response("failed to query", "bad field")
            assert [e.message for e in get_api_errors()] == ["failed to get x"]
            assert get_api_errors()[0].response is response
            assert [str(e) for e in get_graphql_errors()] == ["failed to query: bad field"]
        assert result.isError
        assert result.content[0].text == "failed to get x: not found"  # type: ignore[union-attr]
        assert len(holder.api_errors) == 1
        with pytest.raises(MissingErrorContext):
            get_api_errors()

    def test_snapshot_is_a_copy(self) -> None:
        with error_tracking():
            new_api_error("a", None, "x")
            snapshot = get_api_errors()
            new_api_error("b", None, "y")
            assert len(snapshot) == 1
            assert len(get_api_errors()) == 2

    def test_with_error_tracking_clears_existing_holder(self) -> None:
        with error_tracking() as outer:
            new_api_error("stale", None, "x")
            holder = with_error_tracking()
            assert holder is outer
            assert get_api_errors() == []

    async def test_child_tasks_share_the_holder(self) -> None:
        async def fail(n: int) -> None:
            new_api_error(f"failed {n}", None, "x")

        with error_tracking():
            await asyncio.gather(*(fail(n) for n in range(3)))
            assert sorted(e.message for e in get_api_errors()) == ["failed 0", "failed 1", "failed 2"]
