"""MCP tools for repository discussions (GraphQL only)."""

from __future__ import annotations

from typing import Any

from mcp.types import CallToolResult

from github_mcp_server.errors import error_result
from github_mcp_server.mcp_tools.common import OWNER, REPO, _graphql, _result
from github_mcp_server.params import optional, optional_int, required, required_int
from github_mcp_server.toolsets import Access, Category, ToolEntry, tool
from github_mcp_server.translations import TranslationHelperFunc

# A null $categoryId means "every category", so one query serves both cases.
LIST_DISCUSSIONS_QUERY = """
query($owner: String!, $repo: String!, $categoryId: ID) {
  repository(owner: $owner, name: $repo) {
    discussions(first: 100, categoryId: $categoryId) {
      nodes { number title createdAt url category { name } }
    }
  }
}
"""

GET_DISCUSSION_QUERY = """
query($owner: String!, $repo: String!, $discussionNumber: Int!) {
  repository(owner: $owner, name: $repo) {
    discussion(number: $discussionNumber) { number body state createdAt url category { name } }
  }
}
"""

GET_DISCUSSION_COMMENTS_QUERY = """
query($owner: String!, $repo: String!, $discussionNumber: Int!) {
  repository(owner: $owner, name: $repo) {
    discussion(number: $discussionNumber) { comments(first: 100) { nodes { body } } }
  }
}
"""

LIST_CATEGORIES_QUERY = """
query($owner: String!, $repo: String!, $first: Int, $last: Int, $after: String, $before: String) {
  repository(owner: $owner, name: $repo) {
    discussionCategories(first: $first, last: $last, after: $after, before: $before) { nodes { id name } }
  }
}
"""

_DISCUSSION_NUMBER = {"type": "number", "description": "Discussion Number"}
_PAGE_SIZE = {"type": "number", "minimum": 1, "maximum": 100}


def register(t: TranslationHelperFunc) -> list[ToolEntry]:
    def entry(name: str, desc: str, title: str, handler: Any, **schema: Any) -> ToolEntry:
        key = name.upper()
        return ToolEntry(
            tool(name, t(f"TOOL_{key}_DESCRIPTION", desc), title=t(f"TOOL_{key}_USER_TITLE", title), read_only=True, **schema),
            handler,
            Category.DISCUSSIONS,
            Access.READ,
            "discussions",
        )

    return [
        entry(
            "list_discussions",
            "List discussions for a repository",
            "List discussions",
            _handle_list_discussions,
            properties={
                "owner": OWNER,
                "repo": REPO,
                "category": {
                    "type": "string",
                    "description": "Optional filter by discussion category ID. If provided, only discussions with "
                    "this category are listed.",
                },
            },
            required=["owner", "repo"],
        ),
        entry(
            "get_discussion",
            "Get a specific discussion by ID",
            "Get discussion",
            _handle_get_discussion,
            properties={"owner": OWNER, "repo": REPO, "discussionNumber": _DISCUSSION_NUMBER},
            required=["owner", "repo", "discussionNumber"],
        ),
        entry(
            "get_discussion_comments",
            "Get comments from a discussion",
            "Get discussion comments",
            _handle_get_discussion_comments,
            properties={"owner": OWNER, "repo": REPO, "discussionNumber": _DISCUSSION_NUMBER},
            required=["owner", "repo", "discussionNumber"],
        ),
        entry(
            "list_discussion_categories",
            "List discussion categories with their id and name, for a repository",
            "List discussion categories",
            _handle_list_discussion_categories,
            properties={
                "owner": OWNER,
                "repo": REPO,
                "first": {**_PAGE_SIZE, "description": "Number of categories to return per page (min 1, max 100)"},
                "last": {**_PAGE_SIZE, "description": "Number of categories to return from the end (min 1, max 100)"},
                "after": {
                    "type": "string",
                    "description": "Cursor for pagination, use the 'after' field from the previous response",
                },
                "before": {
                    "type": "string",
                    "description": "Cursor for pagination, use the 'before' field from the previous response",
                },
            },
            required=["owner", "repo"],
        ),
    ]


def _discussion_summary(node: dict[str, Any]) -> dict[str, Any]:
    """Issue-shaped projection with the category carried as a label."""
    out: dict[str, Any] = {
        "number": node.get("number"),
        "html_url": node.get("url"),
        "created_at": node.get("createdAt"),
        "labels": [{"name": f"category:{(node.get('category') or {}).get('name', '')}"}],
    }
    for key in ("title", "body", "state"):
        if key in node:
            out[key] = node[key]
    return out


async def _handle_list_discussions(arguments: dict[str, Any]) -> CallToolResult:
    owner = required(arguments, "owner", str)
    repo = required(arguments, "repo", str)
    category = optional(arguments, "category", str)

    data, err = await _graphql(
        LIST_DISCUSSIONS_QUERY,
        {"owner": owner, "repo": repo, "categoryId": category or None},
        "failed to list discussions",
    )
    if err:
        return err
    nodes = ((data.get("repository") or {}).get("discussions") or {}).get("nodes") or []
    return _result([_discussion_summary(n) for n in nodes])


async def _handle_get_discussion(arguments: dict[str, Any]) -> CallToolResult:
    owner = required(arguments, "owner", str)
    repo = required(arguments, "repo", str)
    number = required_int(arguments, "discussionNumber")

    data, err = await _graphql(
        GET_DISCUSSION_QUERY,
        {"owner": owner, "repo": repo, "discussionNumber": number},
        "failed to get discussion",
    )
    if err:
        return err
    discussion = (data.get("repository") or {}).get("discussion") or {}
    return _result(_discussion_summary(discussion))


async def _handle_get_discussion_comments(arguments: dict[str, Any]) -> CallToolResult:
    owner = required(arguments, "owner", str)
    repo = required(arguments, "repo", str)
    number = required_int(arguments, "discussionNumber")

    data, err = await _graphql(
        GET_DISCUSSION_COMMENTS_QUERY,
        {"owner": owner, "repo": repo, "discussionNumber": number},
        "failed to get discussion comments",
    )
    if err:
        return err
    discussion = (data.get("repository") or {}).get("discussion") or {}
    nodes = (discussion.get("comments") or {}).get("nodes") or []
    return _result([{"body": n.get("body", "")} for n in nodes])


async def _handle_list_discussion_categories(arguments: dict[str, Any]) -> CallToolResult:
    owner = required(arguments, "owner", str)
    repo = required(arguments, "repo", str)
    first = optional_int(arguments, "first")
    last = optional_int(arguments, "last")
    after = optional(arguments, "after", str)
    before = optional(arguments, "before", str)

    if first and last:
        return error_result("only one of 'first' or 'last' may be specified")
    if after and before:
        return error_result("only one of 'after' or 'before' may be specified")
    if after and last:
        return error_result("'after' cannot be used with 'last'. Did you mean to use 'before' instead?")
    if before and first:
        return error_result("'before' cannot be used with 'first'. Did you mean to use 'after' instead?")
    if not first and not last:
        first = 100

    data, err = await _graphql(
        LIST_CATEGORIES_QUERY,
        {
            "owner": owner,
            "repo": repo,
            "first": first or None,
            "last": last or None,
            "after": after or None,
            "before": before or None,
        },
        "failed to list discussion categories",
    )
    if err:
        return err
    nodes = ((data.get("repository") or {}).get("discussionCategories") or {}).get("nodes") or []
    return _result([{"id": str(n.get("id", "")), "name": n.get("name", "")} for n in nodes])
