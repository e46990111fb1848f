"""MCP tools for the authenticated user's notifications."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from mcp.types import CallToolResult

from github_mcp_server.errors import error_result
from github_mcp_server.mcp_tools.common import _rest, _result
from github_mcp_server.params import (
    ParameterError,
    optional,
    optional_bool_with_default,
    optional_pagination,
    pagination_schema,
    required,
)
from github_mcp_server.toolsets import Access, Category, ToolEntry, tool
from github_mcp_server.translations import TranslationHelperFunc

_ACTIONS = ("mark_read", "mark_all_read", "mark_done")
_MARKED = (200, 202, 204, 205)


def register(t: TranslationHelperFunc) -> list[ToolEntry]:
    return [
        ToolEntry(
            tool(
                "get_notifications",
                t("TOOL_GET_NOTIFICATIONS_DESCRIPTION", "Get notifications for the authenticated GitHub user"),
                title=t("TOOL_GET_NOTIFICATIONS_USER_TITLE", "List notifications"),
                read_only=True,
                properties={
                    "all": {"type": "boolean", "description": "If true, show notifications marked as read. Default: false"},
                    "participating": {
                        "type": "boolean",
                        "description": "If true, only shows notifications in which the user is directly participating "
                        "or mentioned. Default: false",
                    },
                    "since": {
                        "type": "string",
                        "description": "Only show notifications updated after the given time (ISO 8601 format)",
                    },
                    "before": {
                        "type": "string",
                        "description": "Only show notifications updated before the given time (ISO 8601 format)",
                    },
                    **pagination_schema("per_page"),
                },
            ),
            _handle_get_notifications,
            Category.NOTIFICATIONS,
            Access.READ,
            "notifications",
        ),
        ToolEntry(
            tool(
                "manage_notifications",
                t(
                    "TOOL_MANAGE_NOTIFICATIONS_DESCRIPTION",
                    "Manage notifications (mark as read, mark all as read, or mark as done)",
                ),
                title=t("TOOL_MANAGE_NOTIFICATIONS_USER_TITLE", "Manage notifications"),
                read_only=False,
                properties={
                    "action": {
                        "type": "string",
                        "description": "The action to perform: 'mark_read', 'mark_all_read', or 'mark_done'",
                        "enum": list(_ACTIONS),
                    },
                    "threadID": {
                        "type": "string",
                        "description": "The ID of the notification thread (required for 'mark_read' and 'mark_done')",
                    },
                    "lastReadAt": {
                        "type": "string",
                        "description": "Describes the last point that notifications were checked "
                        "(optional, for 'mark_all_read'). Default: Now",
                    },
                },
                required=["action"],
            ),
            _handle_manage_notifications,
            Category.NOTIFICATIONS,
            Access.WRITE,
            "notifications",
        ),
    ]


def parse_rfc3339(value: str, name: str) -> str:
    """Validate an RFC3339 timestamp and return it normalised to ISO 8601."""
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        raise ParameterError(f"invalid {name} time format, should be RFC3339/ISO8601: {exc}") from exc
    if parsed.tzinfo is None:
        raise ParameterError(f"invalid {name} time format, should be RFC3339/ISO8601: missing timezone offset")
    return parsed.isoformat()


async def _handle_get_notifications(arguments: dict[str, Any]) -> CallToolResult:
    show_all = optional_bool_with_default(arguments, "all", False)
    participating = optional_bool_with_default(arguments, "participating", False)
    since = optional(arguments, "since", str)
    before = optional(arguments, "before", str)
    pagination = optional_pagination(arguments, per_page_key="per_page")

    params: dict[str, Any] = {
        "all": "true" if show_all else None,
        "participating": "true" if participating else None,
        "since": parse_rfc3339(since, "since") if since else None,
        "before": parse_rfc3339(before, "before") if before else None,
        "page": pagination.page,
        "per_page": pagination.per_page,
    }
    notifications, err = await _rest("GET", "notifications", "failed to get notifications", params=params)
    if err:
        return err
    return _result(notifications)


async def _handle_manage_notifications(arguments: dict[str, Any]) -> CallToolResult:
    action = required(arguments, "action", str)

    if action == "mark_read":
        thread_id = required(arguments, "threadID", str)
        _, err = await _rest(
            "PATCH", f"notifications/threads/{thread_id}", "failed to mark notification as read", expected=_MARKED
        )
        if err:
            return err
        return _result("Notification marked as read")

    if action == "mark_done":
        thread_id = required(arguments, "threadID", str)
        if not thread_id.isdigit():
            return error_result("Invalid threadID: must be a numeric value")
        _, err = await _rest(
            "DELETE", f"notifications/threads/{int(thread_id)}", "failed to mark notification as done", expected=_MARKED
        )
        if err:
            return err
        return _result("Notification marked as done")

    if action == "mark_all_read":
        last_read_at = optional(arguments, "lastReadAt", str)
        payload = {"last_read_at": parse_rfc3339(last_read_at, "lastReadAt")} if last_read_at else {}
        _, err = await _rest(
            "PUT", "notifications", "failed to mark all notifications as read", expected=_MARKED, json_body=payload
        )
        if err:
            return err
        return _result("All notifications marked as read")

    return error_result("Invalid action: must be 'mark_read', 'mark_all_read', or 'mark_done'")
