"""Tests for the GitHub REST/GraphQL/raw transports."""

from __future__ import annotations

import httpx
import pytest

from github_mcp_server.github_client import (
    GitHubClient,
    GitHubHTTPError,
    GraphQLQueryError,
    endpoints_for,
    repo_path,
)
from tests._github_fake import FakeGitHub


class TestEndpoints:
    @pytest.mark.parametrize("host", [None, "", "github.com", "https://github.com"])
    def test_dotcom(self, host: str | None) -> None:
        assert endpoints_for(host) == (
            "https://api.github.com",
            "https://api.github.com/graphql",
            "https://raw.githubusercontent.com",
        )

    def test_ghe_cloud(self) -> None:
        assert endpoints_for("https://acme.ghe.com") == (
            "https://api.acme.ghe.com",
            "https://api.acme.ghe.com/graphql",
            "https://raw.acme.ghe.com",
        )

    def test_enterprise_server(self) -> None:
        assert endpoints_for("ghes.example.com") == (
            "https://ghes.example.com/api/v3",
            "https://ghes.example.com/api/graphql",
            "https://ghes.example.com/raw",
        )

    def test_repo_path_quotes_segments(self) -> None:
        assert repo_path("octo", "hello", "contents", "docs/a b.md") == "repos/octo/hello/contents/docs/a%20b.md"
        assert repo_path("o/x", "r", "issues", 3) == "repos/o%2Fx/r/issues/3"


class TestRest:
    async def test_headers_and_params(self, fake_github: FakeGitHub, gh_client: GitHubClient) -> None:
        fake_github.add("GET", "/repos/octo/hello/issues", [])

        await gh_client.rest("GET", "repos/octo/hello/issues", params={"state": "open", "labels": None, "sort": ""})

        (request,) = fake_github.requests
        assert request.url.host == "api.github.com"
        assert request.headers["Authorization"] == "Bearer test-token"
        assert request.headers["X-GitHub-Api-Version"] == "2022-11-28"
        assert dict(request.url.params) == {"state": "open"}

    async def test_non_2xx_raises(self, gh_client: GitHubClient) -> None:
        with pytest.raises(GitHubHTTPError, match="404 Not Found") as info:
            await gh_client.rest("GET", "repos/octo/missing")
        assert info.value.status_code == 404

    async def test_transport_failure_raises(self, fake_github: FakeGitHub, gh_client: GitHubClient) -> None:
        def down(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        fake_github.add_responder("GET", "/user", down)

        with pytest.raises(GitHubHTTPError, match="connection refused") as info:
            await gh_client.rest("GET", "user")
        assert info.value.response is None
        assert info.value.status_code is None


class TestGraphQL:
    async def test_returns_data(self, fake_github: FakeGitHub, gh_client: GitHubClient) -> None:
        fake_github.add_graphql("viewer { login }", {"viewer": {"login": "me"}})

        data = await gh_client.graphql("query { viewer { login } }")

        assert data == {"viewer": {"login": "me"}}
        (body,) = fake_github.graphql_calls()
        assert body["variables"] == {}

    async def test_errors_raise(self, gh_client: GitHubClient) -> None:
        with pytest.raises(GraphQLQueryError, match="unrouted query") as info:
            await gh_client.graphql("query { nothing }")
        assert info.value.errors == [{"message": "unrouted query"}]
        assert isinstance(info.value, GitHubHTTPError)

    async def test_non_json_reply_raises_http_error(self, fake_github: FakeGitHub, gh_client: GitHubClient) -> None:
        def responder(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"<html>oops</html>")

        fake_github.graphql_routes.append(("viewer", responder))

        with pytest.raises(GitHubHTTPError, match="invalid JSON response") as info:
            await gh_client.graphql("query { viewer { login } }")
        assert info.value.status_code == 200
        assert not isinstance(info.value, GraphQLQueryError)

    async def test_non_object_reply_raises_http_error(self, fake_github: FakeGitHub, gh_client: GitHubClient) -> None:
        fake_github.graphql_routes.append(("viewer", lambda request: httpx.Response(200, json=[1, 2])))

        with pytest.raises(GitHubHTTPError, match="unexpected GraphQL response"):
            await gh_client.graphql("query { viewer { login } }")


class TestRaw:
    async def test_raw_url(self, fake_github: FakeGitHub, gh_client: GitHubClient) -> None:
        fake_github.add("GET", "/octo/hello/HEAD/docs/a.md", content=b"hi")

        response = await gh_client.raw("octo", "hello", "/docs/a.md")

        assert response.content == b"hi"
        assert fake_github.requests[0].url.host == "raw.githubusercontent.com"

    async def test_sha_beats_ref(self, fake_github: FakeGitHub, gh_client: GitHubClient) -> None:
        fake_github.add("GET", "/octo/hello/abc/a.md", content=b"pinned")

        response = await gh_client.raw("octo", "hello", "a.md", sha="abc", ref="main")

        assert response.content == b"pinned"

    async def test_enterprise_raw_base(self, fake_github: FakeGitHub) -> None:
        client = GitHubClient("t", "ghes.example.com", transport=httpx.MockTransport(fake_github.handle))
        try:
            with pytest.raises(GitHubHTTPError):
                await client.raw("octo", "hello", "a.md", ref="main")
        finally:
            await client.aclose()
        assert str(fake_github.requests[0].url) == "https://ghes.example.com/raw/octo/hello/main/a.md"
