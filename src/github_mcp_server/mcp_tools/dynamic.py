"""Tools that let a client discover and enable toolsets at runtime.

Only registered when the server runs with dynamic toolsets. The toolset group
and the list-changed notification come from ``mcp_server`` lazily, like the
GitHub client in :mod:`github_mcp_server.mcp_tools.common`.
"""

from __future__ import annotations

from typing import Any

from mcp.types import CallToolResult

from github_mcp_server.errors import error_result
from github_mcp_server.mcp_tools.common import _result
from github_mcp_server.params import required
from github_mcp_server.toolsets import Access, Category, ToolEntry, ToolsetDoesNotExistError, tool
from github_mcp_server.translations import TranslationHelperFunc

_TOOLSET_NAME = {"type": "string", "description": "The name of the toolset"}


def register(t: TranslationHelperFunc) -> list[ToolEntry]:
    return [
        ToolEntry(
            tool(
                "list_available_toolsets",
                t(
                    "TOOL_LIST_AVAILABLE_TOOLSETS_DESCRIPTION",
                    "List all available toolsets this GitHub MCP server can offer, providing the enabled status of each. "
                    "Use this when a task could be achieved with a GitHub tool and the currently available tools "
                    "aren't enough. Call get_toolset_tools with these toolset names to discover specific tools you can call",
                ),
                title=t("TOOL_LIST_AVAILABLE_TOOLSETS_USER_TITLE", "List available toolsets"),
                read_only=True,
            ),
            _handle_list_available_toolsets,
            Category.TOOLSETS,
            Access.READ,
            "dynamic",
        ),
        ToolEntry(
            tool(
                "get_toolset_tools",
                t(
                    "TOOL_GET_TOOLSET_TOOLS_DESCRIPTION",
                    "Lists all the capabilities that are enabled with the specified toolset. "
                    "Use this to get clarity on whether enabling a toolset would help you to complete a task",
                ),
                title=t("TOOL_GET_TOOLSET_TOOLS_USER_TITLE", "List all tools in a toolset"),
                read_only=True,
                properties={"toolset": _TOOLSET_NAME},
                required=["toolset"],
            ),
            _handle_get_toolset_tools,
            Category.TOOLSETS,
            Access.READ,
            "dynamic",
        ),
        ToolEntry(
            tool(
                "enable_toolset",
                t(
                    "TOOL_ENABLE_TOOLSET_DESCRIPTION",
                    "Enable one of the sets of tools the GitHub MCP server provides, use get_toolset_tools and "
                    "list_available_toolsets first to see what this will enable",
                ),
                title=t("TOOL_ENABLE_TOOLSET_USER_TITLE", "Enable a toolset"),
                # Enabling a toolset changes no GitHub state.
                read_only=True,
                properties={"toolset": _TOOLSET_NAME},
                required=["toolset"],
            ),
            _handle_enable_toolset,
            Category.TOOLSETS,
            Access.READ,
            "dynamic",
        ),
    ]


async def _handle_list_available_toolsets(arguments: dict[str, Any]) -> CallToolResult:
    from github_mcp_server.mcp_server import _get_toolset_group

    group = _get_toolset_group()
    payload = [
        {
            "name": toolset.name,
            "description": toolset.description,
            "can_enable": "true",
            "currently_enabled": "true" if toolset.enabled else "false",
        }
        for toolset in group.toolsets.values()
    ]
    return _result(payload)


async def _handle_get_toolset_tools(arguments: dict[str, Any]) -> CallToolResult:
    from github_mcp_server.mcp_server import _get_toolset_group

    name = required(arguments, "toolset", str)
    try:
        toolset = _get_toolset_group().get(name)
    except ToolsetDoesNotExistError as exc:
        return error_result(str(exc))
    payload = [
        {"name": e.name, "description": e.definition.description, "can_enable": "true", "toolset": name}
        for e in toolset.all_tools()
    ]
    return _result(payload)


async def _handle_enable_toolset(arguments: dict[str, Any]) -> CallToolResult:
    from github_mcp_server.mcp_server import _get_toolset_group, _notify_tools_changed

    name = required(arguments, "toolset", str)
    group = _get_toolset_group()
    try:
        toolset = group.get(name)
    except ToolsetDoesNotExistError as exc:
        return error_result(str(exc))
    if toolset.enabled:
        return _result(f"Toolset {name} is already enabled")

    group.enable_toolset(name)
    await _notify_tools_changed()
    return _result(f"Toolset {name} enabled")
