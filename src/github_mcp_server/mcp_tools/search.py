"""MCP tools for repository and code search."""

from __future__ import annotations

from typing import Any

from mcp.types import CallToolResult

from github_mcp_server.mcp_tools.common import _rest, _result
from github_mcp_server.params import optional, optional_pagination, pagination_schema, required
from github_mcp_server.toolsets import Access, Category, ToolEntry, tool
from github_mcp_server.translations import TranslationHelperFunc


def register(t: TranslationHelperFunc) -> list[ToolEntry]:
    return [
        ToolEntry(
            tool(
                "search_repositories",
                t("TOOL_SEARCH_REPOSITORIES_DESCRIPTION", "Search for GitHub repositories"),
                title=t("TOOL_SEARCH_REPOSITORIES_USER_TITLE", "Search repositories"),
                read_only=True,
                properties={"query": {"type": "string", "description": "Search query"}, **pagination_schema()},
                required=["query"],
            ),
            _handle_search_repositories,
            Category.SEARCH,
            Access.READ,
            "repos",
        ),
        ToolEntry(
            tool(
                "search_code",
                t("TOOL_SEARCH_CODE_DESCRIPTION", "Search for code across GitHub repositories"),
                title=t("TOOL_SEARCH_CODE_USER_TITLE", "Search code"),
                read_only=True,
                properties={
                    "q": {"type": "string", "description": "Search query using GitHub code search syntax"},
                    "sort": {"type": "string", "description": "Sort field ('indexed' only)"},
                    "order": {"type": "string", "description": "Sort order", "enum": ["asc", "desc"]},
                    **pagination_schema(),
                },
                required=["q"],
            ),
            _handle_search_code,
            Category.SEARCH,
            Access.READ,
            "repos",
        ),
    ]


async def _handle_search_repositories(arguments: dict[str, Any]) -> CallToolResult:
    query = required(arguments, "query", str)
    pagination = optional_pagination(arguments)
    result, err = await _rest(
        "GET",
        "search/repositories",
        f"failed to search repositories with query '{query}'",
        params={"q": query, "page": pagination.page, "per_page": pagination.per_page},
    )
    if err:
        return err
    return _result(result)


async def _handle_search_code(arguments: dict[str, Any]) -> CallToolResult:
    query = required(arguments, "q", str)
    sort = optional(arguments, "sort", str)
    order = optional(arguments, "order", str)
    pagination = optional_pagination(arguments)
    result, err = await _rest(
        "GET",
        "search/code",
        f"failed to search code with query '{query}'",
        params={"q": query, "sort": sort, "order": order, "page": pagination.page, "per_page": pagination.per_page},
    )
    if err:
        return err
    return _result(result)
