"""MCP tools for repository security alerts: code scanning, Dependabot, secret scanning."""

from __future__ import annotations

from typing import Any

from mcp.types import CallToolResult

from github_mcp_server.github_client import repo_path
from github_mcp_server.mcp_tools.common import _rest, _result
from github_mcp_server.params import optional, required, required_int
from github_mcp_server.toolsets import Access, Category, ToolEntry, tool
from github_mcp_server.translations import TranslationHelperFunc

_OWNER = {"type": "string", "description": "The owner of the repository."}
_REPO = {"type": "string", "description": "The name of the repository."}
_ALERT_NUMBER = {"type": "number", "description": "The number of the alert."}


def register(t: TranslationHelperFunc) -> list[ToolEntry]:
    def entry(
        name: str, desc: str, title: str, handler: Any, category: Category, toolset: str, **schema: Any
    ) -> ToolEntry:
        key = name.upper()
        return ToolEntry(
            tool(name, t(f"TOOL_{key}_DESCRIPTION", desc), title=t(f"TOOL_{key}_USER_TITLE", title), read_only=True, **schema),
            handler,
            category,
            Access.READ,
            toolset,
        )

    return [
        entry(
            "get_code_scanning_alert",
            "Get details of a specific code scanning alert in a GitHub repository.",
            "Get code scanning alert",
            _handle_get_code_scanning_alert,
            Category.CODE_SCANNING,
            "code_scanning",
            properties={"owner": _OWNER, "repo": _REPO, "alertNumber": _ALERT_NUMBER},
            required=["owner", "repo", "alertNumber"],
        ),
        entry(
            "list_code_scanning_alerts",
            "List code scanning alerts in a GitHub repository.",
            "List code scanning alerts",
            _handle_list_code_scanning_alerts,
            Category.CODE_SCANNING,
            "code_scanning",
            properties={
                "owner": _OWNER,
                "repo": _REPO,
                "state": {
                    "type": "string",
                    "description": "Filter code scanning alerts by state. Defaults to open",
                    "default": "open",
                    "enum": ["open", "closed", "dismissed", "fixed"],
                },
                "ref": {"type": "string", "description": "The Git reference for the results you want to list."},
                "severity": {
                    "type": "string",
                    "description": "Filter code scanning alerts by severity",
                    "enum": ["critical", "high", "medium", "low", "warning", "note", "error"],
                },
                "tool_name": {"type": "string", "description": "The name of the tool used for code scanning."},
            },
            required=["owner", "repo"],
        ),
        entry(
            "get_dependabot_alert",
            "Get details of a specific dependabot alert in a GitHub repository.",
            "Get dependabot alert",
            _handle_get_dependabot_alert,
            Category.DEPENDABOT,
            "dependabot",
            properties={"owner": _OWNER, "repo": _REPO, "alertNumber": _ALERT_NUMBER},
            required=["owner", "repo", "alertNumber"],
        ),
        entry(
            "list_dependabot_alerts",
            "List dependabot alerts in a GitHub repository.",
            "List dependabot alerts",
            _handle_list_dependabot_alerts,
            Category.DEPENDABOT,
            "dependabot",
            properties={
                "owner": _OWNER,
                "repo": _REPO,
                "state": {
                    "type": "string",
                    "description": "Filter dependabot alerts by state. Defaults to open",
                    "default": "open",
                    "enum": ["open", "fixed", "dismissed", "auto_dismissed"],
                },
                "severity": {
                    "type": "string",
                    "description": "Filter dependabot alerts by severity",
                    "enum": ["low", "medium", "high", "critical"],
                },
            },
            required=["owner", "repo"],
        ),
        entry(
            "get_secret_scanning_alert",
            "Get details of a specific secret scanning alert in a GitHub repository.",
            "Get secret scanning alert",
            _handle_get_secret_scanning_alert,
            Category.SECRET_SCANNING,
            "secret_scanning",
            properties={"owner": _OWNER, "repo": _REPO, "alertNumber": _ALERT_NUMBER},
            required=["owner", "repo", "alertNumber"],
        ),
        entry(
            "list_secret_scanning_alerts",
            "List secret scanning alerts in a GitHub repository.",
            "List secret scanning alerts",
            _handle_list_secret_scanning_alerts,
            Category.SECRET_SCANNING,
            "secret_scanning",
            properties={
                "owner": _OWNER,
                "repo": _REPO,
                "state": {
                    "type": "string",
                    "description": "Filter by state",
                    "enum": ["open", "resolved"],
                },
                "secret_type": {
                    "type": "string",
                    "description": "A comma-separated list of secret types to return. All default secret patterns "
                    "are returned. To return generic patterns, pass the token name(s) in the parameter.",
                },
                "resolution": {
                    "type": "string",
                    "description": "Filter by resolution",
                    "enum": ["false_positive", "wont_fix", "revoked", "pattern_edited", "pattern_deleted", "used_in_tests"],
                },
            },
            required=["owner", "repo"],
        ),
    ]


async def _get_alert(arguments: dict[str, Any], kind: str) -> CallToolResult:
    owner = required(arguments, "owner", str)
    repo = required(arguments, "repo", str)
    number = required_int(arguments, "alertNumber")

    alert, err = await _rest(
        "GET", repo_path(owner, repo, kind, "alerts", number), f"failed to get alert with number '{number}'"
    )
    if err:
        return err
    return _result(alert)


async def _list_alerts(arguments: dict[str, Any], kind: str, filters: tuple[str, ...]) -> CallToolResult:
    owner = required(arguments, "owner", str)
    repo = required(arguments, "repo", str)
    params = {name: optional(arguments, name, str) for name in filters}

    alerts, err = await _rest(
        "GET",
        repo_path(owner, repo, kind, "alerts"),
        f"failed to list alerts for repository '{owner}/{repo}'",
        params=params,
    )
    if err:
        return err
    return _result(alerts)


async def _handle_get_code_scanning_alert(arguments: dict[str, Any]) -> CallToolResult:
    return await _get_alert(arguments, "code-scanning")


async def _handle_list_code_scanning_alerts(arguments: dict[str, Any]) -> CallToolResult:
    return await _list_alerts(arguments, "code-scanning", ("state", "ref", "severity", "tool_name"))


async def _handle_get_dependabot_alert(arguments: dict[str, Any]) -> CallToolResult:
    return await _get_alert(arguments, "dependabot")


async def _handle_list_dependabot_alerts(arguments: dict[str, Any]) -> CallToolResult:
    return await _list_alerts(arguments, "dependabot", ("state", "severity"))


async def _handle_get_secret_scanning_alert(arguments: dict[str, Any]) -> CallToolResult:
    return await _get_alert(arguments, "secret-scanning")


async def _handle_list_secret_scanning_alerts(arguments: dict[str, Any]) -> CallToolResult:
    return await _list_alerts(arguments, "secret-scanning", ("state", "secret_type", "resolution"))
