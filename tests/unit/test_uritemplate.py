"""Tests for the repo:// URI template matcher."""

from __future__ import annotations

import pytest

from github_mcp_server.uritemplate import TemplateError, UriTemplate


class TestUriTemplate:
    def test_variables(self) -> None:
        tpl = UriTemplate("repo://{owner}/{repo}/refs/heads/{branch}/contents{/path*}")
        assert tpl.variables == ("owner", "repo", "branch", "path")
        assert tpl.tail == "path"

    def test_match_with_path(self) -> None:
        tpl = UriTemplate("repo://{owner}/{repo}/contents{/path*}")
        assert tpl.match("repo://octo/hello/contents/docs/read%20me.md") == {
            "owner": "octo",
            "repo": "hello",
            "path": ["docs", "read me.md"],
        }

    def test_match_without_path(self) -> None:
        tpl = UriTemplate("repo://{owner}/{repo}/contents{/path*}")
        assert tpl.match("repo://octo/hello/contents") == {"owner": "octo", "repo": "hello", "path": []}

    def test_placeholder_is_one_segment(self) -> None:
        tpl = UriTemplate("repo://{owner}/{repo}/sha/{sha}/contents{/path*}")
        assert tpl.match("repo://octo/hello/sha/a/b/contents/x") is None

    def test_literal_mismatch(self) -> None:
        tpl = UriTemplate("repo://{owner}/{repo}/contents{/path*}")
        assert tpl.match("repo://octo/hello/refs/tags/v1/contents/x") is None

    def test_no_tail(self) -> None:
        tpl = UriTemplate("repo://{owner}/{repo}/refs/pull/{prNumber}/head")
        assert tpl.tail is None
        assert tpl.match("repo://octo/hello/refs/pull/7/head") == {"owner": "octo", "repo": "hello", "prNumber": "7"}

    @pytest.mark.parametrize(
        "template",
        [
            "repo://{owner}/{owner}",
            "repo://{owner}{/path*}/{repo}",
            "repo://{owner}{/path}",
            "repo://{owner}{path*}",
            "repo://{owner}{/path*}/suffix",
        ],
    )
    def test_unsupported_templates(self, template: str) -> None:
        with pytest.raises(TemplateError):
            UriTemplate(template)
