"""MCP tools for the authenticated user and user/organization search."""

from __future__ import annotations

import logging
from typing import Any

from mcp.types import CallToolResult

from github_mcp_server.mcp_tools.common import _rest, _result
from github_mcp_server.params import optional, optional_pagination, pagination_schema, required
from github_mcp_server.toolsets import Access, Category, ToolEntry, tool
from github_mcp_server.translations import TranslationHelperFunc

logger = logging.getLogger(__name__)

_DETAIL_FIELDS = (
    "name",
    "company",
    "blog",
    "location",
    "email",
    "hireable",
    "bio",
    "twitter_username",
    "public_repos",
    "public_gists",
    "followers",
    "following",
    "created_at",
    "updated_at",
    "private_gists",
    "total_private_repos",
    "owned_private_repos",
)

# Kept even when zero or empty.
_ALWAYS_PRESENT = frozenset({"public_repos", "public_gists", "followers", "following", "created_at", "updated_at"})


def minimal_user(user: dict[str, Any], *, details: bool = False) -> dict[str, Any]:
    """Project a GitHub user object onto login, id, profile and avatar URLs."""
    out: dict[str, Any] = {"login": user.get("login", "")}
    for key, source in (("id", "id"), ("profile_url", "html_url"), ("avatar_url", "avatar_url")):
        if user.get(source):
            out[key] = user[source]
    if details:
        out["details"] = {
            name: user.get(name)
            for name in _DETAIL_FIELDS
            if name in _ALWAYS_PRESENT or user.get(name) not in (None, "", 0, False)
        }
    return out


def _search_properties(account: str) -> dict[str, Any]:
    return {
        "query": {
            "type": "string",
            "description": f"Search query using GitHub {account}s search syntax scoped to type:{account}",
        },
        "sort": {"type": "string", "description": "Sort field by category", "enum": ["followers", "repositories", "joined"]},
        "order": {"type": "string", "description": "Sort order", "enum": ["asc", "desc"]},
        **pagination_schema(),
    }


def register(t: TranslationHelperFunc) -> list[ToolEntry]:
    """Return the ``get_me`` context tool and the user/org search tools."""
    return [
        ToolEntry(
            tool(
                "get_me",
                t(
                    "TOOL_GET_ME_DESCRIPTION",
                    'Get details of the authenticated GitHub user. Use this when a request includes "me", "my". '
                    "The output will not change unless the user changes their profile, so only call this once.",
                ),
                title=t("TOOL_GET_ME_USER_TITLE", "Get my user profile"),
                read_only=True,
                properties={
                    "reason": {"type": "string", "description": "Optional: the reason for requesting the user information"},
                },
            ),
            _handle_get_me,
            Category.USERS,
            Access.READ,
            "context",
        ),
        ToolEntry(
            tool(
                "search_users",
                t("TOOL_SEARCH_USERS_DESCRIPTION", "Search for GitHub users exclusively"),
                title=t("TOOL_SEARCH_USERS_USER_TITLE", "Search users"),
                read_only=True,
                properties=_search_properties("user"),
                required=["query"],
            ),
            _handle_search_users,
            Category.SEARCH,
            Access.READ,
            "users",
        ),
        ToolEntry(
            tool(
                "search_orgs",
                t("TOOL_SEARCH_ORGS_DESCRIPTION", "Search for GitHub organizations exclusively"),
                title=t("TOOL_SEARCH_ORGS_USER_TITLE", "Search organizations"),
                read_only=True,
                properties=_search_properties("org"),
                required=["query"],
            ),
            _handle_search_orgs,
            Category.SEARCH,
            Access.READ,
            "users",
        ),
    ]


async def _handle_get_me(arguments: dict[str, Any]) -> CallToolResult:
    user, err = await _rest("GET", "user", "failed to get user")
    if err:
        return err
    return _result(minimal_user(user, details=True))


async def _search_accounts(arguments: dict[str, Any], account: str) -> CallToolResult:
    query = required(arguments, "query", str)
    sort = optional(arguments, "sort", str)
    order = optional(arguments, "order", str)
    pagination = optional_pagination(arguments)

    result, err = await _rest(
        "GET",
        "search/users",
        f"failed to search {account}s with query '{query}'",
        params={
            "q": f"type:{account} {query}",
            "sort": sort,
            "order": order,
            "page": pagination.page,
            "per_page": pagination.per_page,
        },
    )
    if err:
        return err
    items = [minimal_user(u) for u in result.get("items") or [] if u.get("login")]
    return _result(
        {
            "total_count": result.get("total_count", 0),
            "incomplete_results": result.get("incomplete_results", False),
            "items": items,
        }
    )


async def _handle_search_users(arguments: dict[str, Any]) -> CallToolResult:
    return await _search_accounts(arguments, "user")


async def _handle_search_orgs(arguments: dict[str, Any]) -> CallToolResult:
    return await _search_accounts(arguments, "org")
