"""MCP tools for issues and issue comments."""

from __future__ import annotations

import logging
from typing import Any

from mcp.types import CallToolResult

from github_mcp_server.content_filter import filter_issue, filter_issue_comment, filter_issue_comments, filter_issues
from github_mcp_server.github_client import repo_path
from github_mcp_server.mcp_tools.common import OWNER, REPO, _drop_empty, _rest, _result, _sanitize_config, _trusted_only
from github_mcp_server.params import (
    ParameterError,
    optional,
    optional_int,
    optional_ok,
    optional_pagination,
    optional_string_array,
    pagination_schema,
    required,
    required_int,
)
from github_mcp_server.toolsets import Access, Category, ToolEntry, tool
from github_mcp_server.translations import TranslationHelperFunc

logger = logging.getLogger(__name__)

_STRING_ARRAY = {"type": "array", "items": {"type": "string"}}


def register(t: TranslationHelperFunc) -> list[ToolEntry]:
    """Return the issue tools; ``search_issues`` is listed under Search."""
    return [
        ToolEntry(
            tool(
                "get_issue",
                t("TOOL_GET_ISSUE_DESCRIPTION", "Get details of a specific issue in a GitHub repository."),
                title=t("TOOL_GET_ISSUE_USER_TITLE", "Get issue details"),
                read_only=True,
                properties={
                    "owner": {"type": "string", "description": "The owner of the repository"},
                    "repo": {"type": "string", "description": "The name of the repository"},
                    "issue_number": {"type": "number", "description": "The number of the issue"},
                },
                required=["owner", "repo", "issue_number"],
            ),
            _handle_get_issue,
            Category.ISSUES,
            Access.READ,
            "issues",
        ),
        ToolEntry(
            tool(
                "search_issues",
                t("TOOL_SEARCH_ISSUES_DESCRIPTION", "Search for issues in GitHub repositories."),
                title=t("TOOL_SEARCH_ISSUES_USER_TITLE", "Search issues"),
                read_only=True,
                properties={
                    "q": {"type": "string", "description": "Search query using GitHub issues search syntax"},
                    "sort": {
                        "type": "string",
                        "description": "Sort field by number of matches of categories, defaults to best match",
                        "enum": [
                            "comments",
                            "reactions",
                            "reactions-+1",
                            "reactions--1",
                            "reactions-smile",
                            "reactions-thinking_face",
                            "reactions-heart",
                            "reactions-tada",
                            "interactions",
                            "created",
                            "updated",
                        ],
                    },
                    "order": {"type": "string", "description": "Sort order", "enum": ["asc", "desc"]},
                    **pagination_schema(),
                },
                required=["q"],
            ),
            _handle_search_issues,
            Category.SEARCH,
            Access.READ,
            "issues",
        ),
        ToolEntry(
            tool(
                "list_issues",
                t("TOOL_LIST_ISSUES_DESCRIPTION", "List issues in a GitHub repository."),
                title=t("TOOL_LIST_ISSUES_USER_TITLE", "List issues"),
                read_only=True,
                properties={
                    "owner": OWNER,
                    "repo": REPO,
                    "state": {"type": "string", "description": "Filter by state", "enum": ["open", "closed", "all"]},
                    "labels": {**_STRING_ARRAY, "description": "Filter by labels"},
                    "sort": {"type": "string", "description": "Sort order", "enum": ["created", "updated", "comments"]},
                    "direction": {"type": "string", "description": "Sort direction", "enum": ["asc", "desc"]},
                    "since": {"type": "string", "description": "Filter by date (ISO 8601 timestamp)"},
                    **pagination_schema(),
                },
                required=["owner", "repo"],
            ),
            _handle_list_issues,
            Category.ISSUES,
            Access.READ,
            "issues",
        ),
        ToolEntry(
            tool(
                "get_issue_comments",
                t("TOOL_GET_ISSUE_COMMENTS_DESCRIPTION", "Get comments for a specific issue in a GitHub repository."),
                title=t("TOOL_GET_ISSUE_COMMENTS_USER_TITLE", "Get issue comments"),
                read_only=True,
                properties={
                    "owner": OWNER,
                    "repo": REPO,
                    "issue_number": {"type": "number", "description": "Issue number"},
                    **pagination_schema(),
                },
                required=["owner", "repo", "issue_number"],
            ),
            _handle_get_issue_comments,
            Category.ISSUES,
            Access.READ,
            "issues",
        ),
        ToolEntry(
            tool(
                "create_issue",
                t("TOOL_CREATE_ISSUE_DESCRIPTION", "Create a new issue in a GitHub repository."),
                title=t("TOOL_CREATE_ISSUE_USER_TITLE", "Open new issue"),
                read_only=False,
                properties={
                    "owner": OWNER,
                    "repo": REPO,
                    "title": {"type": "string", "description": "Issue title"},
                    "body": {"type": "string", "description": "Issue body content"},
                    "assignees": {**_STRING_ARRAY, "description": "Usernames to assign to this issue"},
                    "labels": {**_STRING_ARRAY, "description": "Labels to apply to this issue"},
                    "milestone": {"type": "number", "description": "Milestone number"},
                },
                required=["owner", "repo", "title"],
            ),
            _handle_create_issue,
            Category.ISSUES,
            Access.WRITE,
            "issues",
        ),
        ToolEntry(
            tool(
                "add_issue_comment",
                t("TOOL_ADD_ISSUE_COMMENT_DESCRIPTION", "Add a comment to a specific issue in a GitHub repository."),
                title=t("TOOL_ADD_ISSUE_COMMENT_USER_TITLE", "Add comment to issue"),
                read_only=False,
                properties={
                    "owner": OWNER,
                    "repo": REPO,
                    "issue_number": {"type": "number", "description": "Issue number to comment on"},
                    "body": {"type": "string", "description": "Comment content"},
                },
                required=["owner", "repo", "issue_number", "body"],
            ),
            _handle_add_issue_comment,
            Category.ISSUES,
            Access.WRITE,
            "issues",
        ),
        ToolEntry(
            tool(
                "update_issue",
                t("TOOL_UPDATE_ISSUE_DESCRIPTION", "Update an existing issue in a GitHub repository."),
                title=t("TOOL_UPDATE_ISSUE_USER_TITLE", "Edit issue"),
                read_only=False,
                properties={
                    "owner": OWNER,
                    "repo": REPO,
                    "issue_number": {"type": "number", "description": "Issue number to update"},
                    "title": {"type": "string", "description": "New title"},
                    "body": {"type": "string", "description": "New description"},
                    "state": {"type": "string", "description": "New state", "enum": ["open", "closed"]},
                    "labels": {**_STRING_ARRAY, "description": "New labels"},
                    "assignees": {**_STRING_ARRAY, "description": "New assignees"},
                    "milestone": {"type": "number", "description": "New milestone number"},
                },
                required=["owner", "repo", "issue_number"],
            ),
            _handle_update_issue,
            Category.ISSUES,
            Access.WRITE,
            "issues",
        ),
    ]


async def _handle_get_issue(arguments: dict[str, Any]) -> CallToolResult:
    owner = required(arguments, "owner", str)
    repo = required(arguments, "repo", str)
    number = required_int(arguments, "issue_number")

    issue, err = await _rest("GET", repo_path(owner, repo, "issues", number), "failed to get issue")
    if err:
        return err
    return _result(filter_issue(issue, _sanitize_config()))


async def _handle_search_issues(arguments: dict[str, Any]) -> CallToolResult:
    query = required(arguments, "q", str)
    sort = optional(arguments, "sort", str)
    order = optional(arguments, "order", str)
    pagination = optional_pagination(arguments)

    if "is:issue" not in query:
        query = f"is:issue {query}"
    result, err = await _rest(
        "GET",
        "search/issues",
        "failed to search issues",
        params={"q": query, "sort": sort, "order": order, "page": pagination.page, "per_page": pagination.per_page},
    )
    if err:
        return err
    result["items"] = filter_issues(result.get("items") or [], _sanitize_config())
    return _result(result)


async def _handle_list_issues(arguments: dict[str, Any]) -> CallToolResult:
    owner = required(arguments, "owner", str)
    repo = required(arguments, "repo", str)
    state = optional(arguments, "state", str)
    labels = optional_string_array(arguments, "labels")
    sort = optional(arguments, "sort", str)
    direction = optional(arguments, "direction", str)
    since = optional(arguments, "since", str)
    pagination = optional_pagination(arguments)

    issues, err = await _rest(
        "GET",
        repo_path(owner, repo, "issues"),
        "failed to list issues",
        params={
            "state": state,
            "labels": ",".join(labels),
            "sort": sort,
            "direction": direction,
            "since": since,
            "page": pagination.page,
            "per_page": pagination.per_page,
        },
    )
    if err:
        return err
    return _result(filter_issues(issues, _sanitize_config()))


async def _handle_get_issue_comments(arguments: dict[str, Any]) -> CallToolResult:
    owner = required(arguments, "owner", str)
    repo = required(arguments, "repo", str)
    number = required_int(arguments, "issue_number")
    pagination = optional_pagination(arguments)

    comments, err = await _rest(
        "GET",
        repo_path(owner, repo, "issues", number, "comments"),
        "failed to get issue comments",
        params={"page": pagination.page, "per_page": pagination.per_page},
    )
    if err:
        return err
    trusted = await _trusted_only(comments)
    return _result(filter_issue_comments(trusted, _sanitize_config()))


async def _handle_create_issue(arguments: dict[str, Any]) -> CallToolResult:
    owner = required(arguments, "owner", str)
    repo = required(arguments, "repo", str)
    title = required(arguments, "title", str)
    body = optional(arguments, "body", str)
    assignees = optional_string_array(arguments, "assignees")
    labels = optional_string_array(arguments, "labels")
    milestone = optional_int(arguments, "milestone")

    payload = _drop_empty({"title": title, "body": body, "assignees": assignees, "labels": labels})
    if milestone:
        payload["milestone"] = milestone

    issue, err = await _rest(
        "POST", repo_path(owner, repo, "issues"), "failed to create issue", expected=(201,), json_body=payload
    )
    if err:
        return err
    return _result(filter_issue(issue, _sanitize_config()))


async def _handle_add_issue_comment(arguments: dict[str, Any]) -> CallToolResult:
    owner = required(arguments, "owner", str)
    repo = required(arguments, "repo", str)
    number = required_int(arguments, "issue_number")
    body = required(arguments, "body", str)

    comment, err = await _rest(
        "POST",
        repo_path(owner, repo, "issues", number, "comments"),
        "failed to create comment",
        expected=(201,),
        json_body={"body": body},
    )
    if err:
        return err
    return _result(filter_issue_comment(comment, _sanitize_config()))


async def _handle_update_issue(arguments: dict[str, Any]) -> CallToolResult:
    owner = required(arguments, "owner", str)
    repo = required(arguments, "repo", str)
    number = required_int(arguments, "issue_number")

    payload: dict[str, Any] = {}
    for name in ("title", "body", "state"):
        value, present = optional_ok(arguments, name, str)
        if present and value:
            payload[name] = value
    if payload.get("state") not in (None, "open", "closed"):
        raise ParameterError("state must be 'open' or 'closed'")
    for name in ("labels", "assignees"):
        if arguments.get(name) is not None:
            payload[name] = optional_string_array(arguments, name)
    milestone = optional_int(arguments, "milestone")
    if milestone:
        payload["milestone"] = milestone

    issue, err = await _rest(
        "PATCH", repo_path(owner, repo, "issues", number), "failed to update issue", json_body=payload
    )
    if err:
        return err
    return _result(filter_issue(issue, _sanitize_config()))
