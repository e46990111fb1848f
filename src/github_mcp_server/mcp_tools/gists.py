"""MCP tools for gists."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from mcp.types import CallToolResult

from github_mcp_server.mcp_tools.common import _rest, _result
from github_mcp_server.mcp_tools.notifications import parse_rfc3339
from github_mcp_server.params import optional, optional_pagination, pagination_schema, required
from github_mcp_server.toolsets import Access, Category, ToolEntry, tool
from github_mcp_server.translations import TranslationHelperFunc


def register(t: TranslationHelperFunc) -> list[ToolEntry]:
    return [
        ToolEntry(
            tool(
                "list_gists",
                t("TOOL_LIST_GISTS_DESCRIPTION", "List gists for a user"),
                title=t("TOOL_LIST_GISTS_USER_TITLE", "List gists"),
                read_only=True,
                properties={
                    "username": {"type": "string", "description": "GitHub username (omit for authenticated user's gists)"},
                    "since": {"type": "string", "description": "Only gists updated after this time (ISO 8601 timestamp)"},
                    **pagination_schema(),
                },
            ),
            _handle_list_gists,
            Category.GISTS,
            Access.READ,
            "gists",
        ),
        ToolEntry(
            tool(
                "create_gist",
                t("TOOL_CREATE_GIST_DESCRIPTION", "Create a new gist"),
                title=t("TOOL_CREATE_GIST_USER_TITLE", "Create gist"),
                read_only=False,
                properties={
                    "description": {"type": "string", "description": "Description of the gist"},
                    "filename": {"type": "string", "description": "Filename for simple single-file gist creation"},
                    "content": {"type": "string", "description": "Content for simple single-file gist creation"},
                    "public": {"type": "boolean", "description": "Whether the gist is public", "default": False},
                },
                required=["filename", "content"],
            ),
            _handle_create_gist,
            Category.GISTS,
            Access.WRITE,
            "gists",
        ),
        ToolEntry(
            tool(
                "update_gist",
                t("TOOL_UPDATE_GIST_DESCRIPTION", "Update an existing gist"),
                title=t("TOOL_UPDATE_GIST_USER_TITLE", "Update gist"),
                read_only=False,
                properties={
                    "gist_id": {"type": "string", "description": "ID of the gist to update"},
                    "description": {"type": "string", "description": "Updated description of the gist"},
                    "filename": {"type": "string", "description": "Filename to update or create"},
                    "content": {"type": "string", "description": "Content for the file"},
                },
                required=["gist_id", "filename", "content"],
            ),
            _handle_update_gist,
            Category.GISTS,
            Access.WRITE,
            "gists",
        ),
    ]


async def _handle_list_gists(arguments: dict[str, Any]) -> CallToolResult:
    username = optional(arguments, "username", str)
    since = optional(arguments, "since", str)
    pagination = optional_pagination(arguments)

    path = f"users/{quote(username, safe='')}/gists" if username else "gists"
    gists, err = await _rest(
        "GET",
        path,
        "failed to list gists",
        params={
            "since": parse_rfc3339(since, "since") if since else None,
            "page": pagination.page,
            "per_page": pagination.per_page,
        },
    )
    if err:
        return err
    return _result(gists)


async def _handle_create_gist(arguments: dict[str, Any]) -> CallToolResult:
    description = optional(arguments, "description", str)
    filename = required(arguments, "filename", str)
    content = required(arguments, "content", str)
    public = optional(arguments, "public", bool)

    payload = {"description": description, "public": public, "files": {filename: {"content": content}}}
    gist, err = await _rest("POST", "gists", "failed to create gist", expected=(201,), json_body=payload)
    if err:
        return err
    return _result(gist)


async def _handle_update_gist(arguments: dict[str, Any]) -> CallToolResult:
    gist_id = required(arguments, "gist_id", str)
    description = optional(arguments, "description", str)
    filename = required(arguments, "filename", str)
    content = required(arguments, "content", str)

    payload: dict[str, Any] = {"files": {filename: {"content": content}}}
    if description:
        payload["description"] = description
    gist, err = await _rest("PATCH", f"gists/{quote(gist_id, safe='')}", "failed to update gist", json_body=payload)
    if err:
        return err
    return _result(gist)
