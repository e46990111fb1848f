"""MCP tools for pull requests, review comments and the GraphQL review flow."""

from __future__ import annotations

import logging
from typing import Any

from mcp.types import CallToolResult

from github_mcp_server.content_filter import (
    filter_pull_request,
    filter_pull_request_comment,
    filter_pull_request_comments,
    filter_pull_request_reviews,
    filter_pull_requests,
)
from github_mcp_server.errors import error_result
from github_mcp_server.github_client import repo_path
from github_mcp_server.mcp_tools.common import OWNER, REPO, _graphql, _rest, _result, _sanitize_config, _trusted_only
from github_mcp_server.params import (
    optional,
    optional_int,
    optional_ok,
    optional_pagination,
    pagination_schema,
    required,
    required_int,
)
from github_mcp_server.toolsets import Access, Category, ToolEntry, tool
from github_mcp_server.translations import TranslationHelperFunc

logger = logging.getLogger(__name__)

_PULL_NUMBER = {"type": "number", "description": "Pull request number"}
_SIDE = {"type": "string", "enum": ["LEFT", "RIGHT"]}

_PR_ID_QUERY = """
query($owner: String!, $repo: String!, $prNum: Int!) {
  repository(owner: $owner, name: $repo) { pullRequest(number: $prNum) { id } }
}
"""

_VIEWER_QUERY = "query { viewer { login } }"

_LATEST_REVIEW_QUERY = """
query($author: String!, $owner: String!, $name: String!, $number: Int!) {
  repository(owner: $owner, name: $name) {
    pullRequest(number: $number) {
      reviews(first: 1, author: $author) {
        nodes { id state url body submittedAt author { login } }
      }
    }
  }
}
"""

_ADD_REVIEW_MUTATION = """
mutation($input: AddPullRequestReviewInput!) {
  addPullRequestReview(input: $input) { pullRequestReview { id } }
}
"""

_ADD_THREAD_MUTATION = """
mutation($input: AddPullRequestReviewThreadInput!) {
  addPullRequestReviewThread(input: $input) { thread { id } }
}
"""

_SUBMIT_REVIEW_MUTATION = """
mutation($input: SubmitPullRequestReviewInput!) {
  submitPullRequestReview(input: $input) { pullRequestReview { state submittedAt } }
}
"""

_DELETE_REVIEW_MUTATION = """
mutation($input: DeletePullRequestReviewInput!) {
  deletePullRequestReview(input: $input) { pullRequestReview { id } }
}
"""


def _pr_properties(**extra: Any) -> dict[str, Any]:
    return {"owner": OWNER, "repo": REPO, "pullNumber": _PULL_NUMBER, **extra}


_PR_REQUIRED = ("owner", "repo", "pullNumber")


def register(t: TranslationHelperFunc) -> list[ToolEntry]:
    """Return every pull request tool (REST reads/writes plus the GraphQL review flow)."""

    def entry(name: str, desc: str, title: str, handler: Any, access: Access, **schema: Any) -> ToolEntry:
        key = name.upper()
        return ToolEntry(
            tool(
                name,
                t(f"TOOL_{key}_DESCRIPTION", desc),
                title=t(f"TOOL_{key}_USER_TITLE", title),
                read_only=access is Access.READ,
                **schema,
            ),
            handler,
            Category.PULL_REQUESTS,
            access,
            "pull_requests",
        )

    return [
        entry(
            "get_pull_request",
            "Get details of a specific pull request in a GitHub repository.",
            "Get pull request details",
            _handle_get_pull_request,
            Access.READ,
            properties=_pr_properties(),
            required=_PR_REQUIRED,
        ),
        entry(
            "list_pull_requests",
            "List pull requests in a GitHub repository.",
            "List pull requests",
            _handle_list_pull_requests,
            Access.READ,
            properties={
                "owner": OWNER,
                "repo": REPO,
                "state": {"type": "string", "description": "Filter by state", "enum": ["open", "closed", "all"]},
                "head": {"type": "string", "description": "Filter by head user/org and branch"},
                "base": {"type": "string", "description": "Filter by base branch"},
                "sort": {"type": "string", "description": "Sort by", "enum": ["created", "updated", "popularity", "long-running"]},
                "direction": {"type": "string", "description": "Sort direction", "enum": ["asc", "desc"]},
                **pagination_schema(),
            },
            required=["owner", "repo"],
        ),
        entry(
            "get_pull_request_files",
            "Get the files changed in a specific pull request.",
            "Get pull request files",
            _handle_get_pull_request_files,
            Access.READ,
            properties=_pr_properties(),
            required=_PR_REQUIRED,
        ),
        entry(
            "get_pull_request_status",
            "Get the status of a specific pull request.",
            "Get pull request status checks",
            _handle_get_pull_request_status,
            Access.READ,
            properties=_pr_properties(),
            required=_PR_REQUIRED,
        ),
        entry(
            "get_pull_request_comments",
            "Get comments for a specific pull request.",
            "Get pull request comments",
            _handle_get_pull_request_comments,
            Access.READ,
            properties=_pr_properties(),
            required=_PR_REQUIRED,
        ),
        entry(
            "get_pull_request_reviews",
            "Get reviews for a specific pull request.",
            "Get pull request reviews",
            _handle_get_pull_request_reviews,
            Access.READ,
            properties=_pr_properties(),
            required=_PR_REQUIRED,
        ),
        entry(
            "merge_pull_request",
            "Merge a pull request in a GitHub repository.",
            "Merge pull request",
            _handle_merge_pull_request,
            Access.WRITE,
            properties=_pr_properties(
                commit_title={"type": "string", "description": "Title for merge commit"},
                commit_message={"type": "string", "description": "Extra detail for merge commit"},
                merge_method={"type": "string", "description": "Merge method", "enum": ["merge", "squash", "rebase"]},
            ),
            required=_PR_REQUIRED,
        ),
        entry(
            "update_pull_request_branch",
            "Update the branch of a pull request with the latest changes from the base branch.",
            "Update pull request branch",
            _handle_update_pull_request_branch,
            Access.WRITE,
            properties=_pr_properties(
                expectedHeadSha={"type": "string", "description": "The expected SHA of the pull request's HEAD ref"},
            ),
            required=_PR_REQUIRED,
        ),
        entry(
            "create_pull_request",
            "Create a new pull request in a GitHub repository.",
            "Open new pull request",
            _handle_create_pull_request,
            Access.WRITE,
            properties={
                "owner": OWNER,
                "repo": REPO,
                "title": {"type": "string", "description": "PR title"},
                "body": {"type": "string", "description": "PR description"},
                "head": {"type": "string", "description": "Branch containing changes"},
                "base": {"type": "string", "description": "Branch to merge into"},
                "draft": {"type": "boolean", "description": "Create as draft PR"},
                "maintainer_can_modify": {"type": "boolean", "description": "Allow maintainer edits"},
            },
            required=["owner", "repo", "title", "head", "base"],
        ),
        entry(
            "update_pull_request",
            "Update an existing pull request in a GitHub repository.",
            "Edit pull request",
            _handle_update_pull_request,
            Access.WRITE,
            properties=_pr_properties(
                pullNumber={"type": "number", "description": "Pull request number to update"},
                title={"type": "string", "description": "New title"},
                body={"type": "string", "description": "New description"},
                state={"type": "string", "description": "New state", "enum": ["open", "closed"]},
                base={"type": "string", "description": "New base branch name"},
                maintainer_can_modify={"type": "boolean", "description": "Allow maintainer edits"},
            ),
            required=_PR_REQUIRED,
        ),
        entry(
            "add_pull_request_review_comment",
            "Add a review comment to a pull request.",
            "Add review comment to pull request",
            _handle_add_pull_request_review_comment,
            Access.WRITE,
            properties={
                "owner": OWNER,
                "repo": REPO,
                "pull_number": _PULL_NUMBER,
                "body": {"type": "string", "description": "The text of the review comment"},
                "commit_id": {
                    "type": "string",
                    "description": "The SHA of the commit to comment on. Required unless in_reply_to is specified.",
                },
                "path": {
                    "type": "string",
                    "description": "The relative path to the file that necessitates a comment. Required unless in_reply_to is specified.",
                },
                "subject_type": {"type": "string", "description": "The level at which the comment is targeted", "enum": ["line", "file"]},
                "line": {
                    "type": "number",
                    "description": "The line of the blob in the pull request diff that the comment applies to. "
                    "For multi-line comments, the last line of the range",
                },
                "side": {**_SIDE, "description": "The side of the diff to comment on"},
                "start_line": {
                    "type": "number",
                    "description": "For multi-line comments, the first line of the range that the comment applies to",
                },
                "start_side": {
                    **_SIDE,
                    "description": "For multi-line comments, the starting side of the diff that the comment applies to",
                },
                "in_reply_to": {
                    "type": "number",
                    "description": "The ID of the review comment to reply to. When specified, only body is required "
                    "and all other parameters are ignored",
                },
            },
            required=["owner", "repo", "pull_number", "body"],
        ),
        entry(
            "create_and_submit_pull_request_review",
            "Create and submit a review for a pull request without review comments.",
            "Create and submit a pull request review without comments",
            _handle_create_and_submit_pull_request_review,
            Access.WRITE,
            properties=_pr_properties(
                body={"type": "string", "description": "Review comment text"},
                event={"type": "string", "description": "Review action to perform", "enum": ["APPROVE", "REQUEST_CHANGES", "COMMENT"]},
                commitId={"type": "string", "description": "SHA of commit to review"},
            ),
            required=[*_PR_REQUIRED, "body", "event"],
        ),
        entry(
            "create_pending_pull_request_review",
            "Create a pending review for a pull request. Call this first before attempting to add comments to a "
            "pending review, and ultimately submitting it. A pending pull request review means a pull request review, "
            "it is pending because you create it first and submit it later, and the PR author will not see it until it is submitted.",
            "Create pending pull request review",
            _handle_create_pending_pull_request_review,
            Access.WRITE,
            properties=_pr_properties(
                commitID={"type": "string", "description": "SHA of commit to review"},
            ),
            required=_PR_REQUIRED,
        ),
        entry(
            "add_pull_request_review_comment_to_pending_review",
            "Add a comment to the requester's latest pending pull request review, a pending review needs to already "
            "exist to call this (check with the user if not sure).",
            "Add comment to the requester's latest pending pull request review",
            _handle_add_comment_to_pending_review,
            Access.WRITE,
            properties=_pr_properties(
                path={"type": "string", "description": "The relative path to the file that necessitates a comment"},
                body={"type": "string", "description": "The text of the review comment"},
                subjectType={"type": "string", "description": "The level at which the comment is targeted", "enum": ["FILE", "LINE"]},
                line={
                    "type": "number",
                    "description": "The line of the blob in the pull request diff that the comment applies to. "
                    "For multi-line comments, the last line of the range",
                },
                side={**_SIDE, "description": "The side of the diff to comment on"},
                startLine={
                    "type": "number",
                    "description": "For multi-line comments, the first line of the range that the comment applies to",
                },
                startSide={
                    **_SIDE,
                    "description": "For multi-line comments, the starting side of the diff that the comment applies to",
                },
            ),
            required=[*_PR_REQUIRED, "path", "body", "subjectType"],
        ),
        entry(
            "submit_pending_pull_request_review",
            "Submit the requester's latest pending pull request review, normally this is a final step after creating "
            "a pending review, adding comments first, unless you know that the user already did the first two steps.",
            "Submit the requester's latest pending pull request review",
            _handle_submit_pending_pull_request_review,
            Access.WRITE,
            properties=_pr_properties(
                event={"type": "string", "description": "The event to perform", "enum": ["APPROVE", "REQUEST_CHANGES", "COMMENT"]},
                body={"type": "string", "description": "The text of the review comment"},
            ),
            required=[*_PR_REQUIRED, "event"],
        ),
        entry(
            "delete_pending_pull_request_review",
            "Delete the requester's latest pending pull request review. Use this after the user decides not to submit "
            "a pending review, if you don't know if they already created one then check first.",
            "Delete the requester's latest pending pull request review",
            _handle_delete_pending_pull_request_review,
            Access.WRITE,
            properties=_pr_properties(),
            required=_PR_REQUIRED,
        ),
        entry(
            "request_copilot_review",
            "Request a GitHub Copilot review for a pull request. Note: This feature depends on GitHub API support "
            "and may not be available for all users.",
            "Request Copilot review",
            _handle_request_copilot_review,
            Access.WRITE,
            properties={"owner": OWNER, "repo": REPO, "pull_number": _PULL_NUMBER},
            required=["owner", "repo", "pull_number"],
        ),
    ]


def _pr_coordinates(arguments: dict[str, Any], number_key: str = "pullNumber") -> tuple[str, str, int]:
    return required(arguments, "owner", str), required(arguments, "repo", str), required_int(arguments, number_key)


# ---------------------------------------------------------------------------
# REST handlers
# ---------------------------------------------------------------------------


async def _handle_get_pull_request(arguments: dict[str, Any]) -> CallToolResult:
    owner, repo, number = _pr_coordinates(arguments)
    pr, err = await _rest("GET", repo_path(owner, repo, "pulls", number), "failed to get pull request")
    if err:
        return err
    return _result(filter_pull_request(pr, _sanitize_config()))


async def _handle_list_pull_requests(arguments: dict[str, Any]) -> CallToolResult:
    owner = required(arguments, "owner", str)
    repo = required(arguments, "repo", str)
    pagination = optional_pagination(arguments)
    params: dict[str, Any] = {name: optional(arguments, name, str) for name in ("state", "head", "base", "sort", "direction")}
    params.update(page=pagination.page, per_page=pagination.per_page)

    prs, err = await _rest("GET", repo_path(owner, repo, "pulls"), "failed to list pull requests", params=params)
    if err:
        return err
    return _result(filter_pull_requests(prs, _sanitize_config()))


async def _handle_get_pull_request_files(arguments: dict[str, Any]) -> CallToolResult:
    owner, repo, number = _pr_coordinates(arguments)
    files, err = await _rest("GET", repo_path(owner, repo, "pulls", number, "files"), "failed to get pull request files")
    if err:
        return err
    return _result(files)


async def _handle_get_pull_request_status(arguments: dict[str, Any]) -> CallToolResult:
    owner, repo, number = _pr_coordinates(arguments)
    pr, err = await _rest("GET", repo_path(owner, repo, "pulls", number), "failed to get pull request")
    if err:
        return err
    head_sha = (pr.get("head") or {}).get("sha") or ""
    status, err = await _rest(
        "GET", repo_path(owner, repo, "commits", head_sha, "status"), "failed to get combined status"
    )
    if err:
        return err
    return _result(status)


async def _handle_get_pull_request_comments(arguments: dict[str, Any]) -> CallToolResult:
    owner, repo, number = _pr_coordinates(arguments)
    comments, err = await _rest(
        "GET",
        repo_path(owner, repo, "pulls", number, "comments"),
        "failed to get pull request comments",
        params={"per_page": 100},
    )
    if err:
        return err
    trusted = await _trusted_only(comments)
    return _result(filter_pull_request_comments(trusted, _sanitize_config()))


async def _handle_get_pull_request_reviews(arguments: dict[str, Any]) -> CallToolResult:
    owner, repo, number = _pr_coordinates(arguments)
    reviews, err = await _rest(
        "GET", repo_path(owner, repo, "pulls", number, "reviews"), "failed to get pull request reviews"
    )
    if err:
        return err
    trusted = await _trusted_only(reviews)
    return _result(filter_pull_request_reviews(trusted, _sanitize_config()))


async def _handle_merge_pull_request(arguments: dict[str, Any]) -> CallToolResult:
    owner, repo, number = _pr_coordinates(arguments)
    payload = {
        "commit_title": optional(arguments, "commit_title", str),
        "commit_message": optional(arguments, "commit_message", str),
        "merge_method": optional(arguments, "merge_method", str),
    }
    result, err = await _rest(
        "PUT",
        repo_path(owner, repo, "pulls", number, "merge"),
        "failed to merge pull request",
        json_body={k: v for k, v in payload.items() if v},
    )
    if err:
        return err
    return _result(result)


async def _handle_update_pull_request_branch(arguments: dict[str, Any]) -> CallToolResult:
    owner, repo, number = _pr_coordinates(arguments)
    expected_sha = optional(arguments, "expectedHeadSha", str)
    payload = {"expected_head_sha": expected_sha} if expected_sha else {}

    result, err = await _rest(
        "PUT",
        repo_path(owner, repo, "pulls", number, "update-branch"),
        "failed to update pull request branch",
        expected=(202,),
        json_body=payload,
    )
    if err:
        return err
    return _result(result)


async def _handle_create_pull_request(arguments: dict[str, Any]) -> CallToolResult:
    owner = required(arguments, "owner", str)
    repo = required(arguments, "repo", str)
    payload: dict[str, Any] = {
        "title": required(arguments, "title", str),
        "head": required(arguments, "head", str),
        "base": required(arguments, "base", str),
    }
    body = optional(arguments, "body", str)
    if body:
        payload["body"] = body
    payload["draft"] = optional(arguments, "draft", bool)
    payload["maintainer_can_modify"] = optional(arguments, "maintainer_can_modify", bool)

    pr, err = await _rest(
        "POST", repo_path(owner, repo, "pulls"), "failed to create pull request", expected=(201,), json_body=payload
    )
    if err:
        return err
    return _result(filter_pull_request(pr, _sanitize_config()))


async def _handle_update_pull_request(arguments: dict[str, Any]) -> CallToolResult:
    owner, repo, number = _pr_coordinates(arguments)

    update: dict[str, Any] = {}
    for name in ("title", "body", "state", "base"):
        value, present = optional_ok(arguments, name, str)
        if present:
            update[name] = value
    can_modify, present = optional_ok(arguments, "maintainer_can_modify", bool)
    if present:
        update["maintainer_can_modify"] = can_modify

    if not update:
        return error_result("No update parameters provided.")

    pr, err = await _rest("PATCH", repo_path(owner, repo, "pulls", number), "failed to update pull request", json_body=update)
    if err:
        return err
    return _result(filter_pull_request(pr, _sanitize_config()))


async def _handle_add_pull_request_review_comment(arguments: dict[str, Any]) -> CallToolResult:
    owner, repo, number = _pr_coordinates(arguments, "pull_number")
    body = required(arguments, "body", str)

    reply_to = optional_int(arguments, "in_reply_to")
    if reply_to:
        reply, err = await _rest(
            "POST",
            repo_path(owner, repo, "pulls", number, "comments", reply_to, "replies"),
            "failed to reply to pull request comment",
            expected=(201,),
            json_body={"body": body},
        )
        if err:
            return err
        return _result(filter_pull_request_comment(reply, _sanitize_config()))

    comment: dict[str, Any] = {
        "body": body,
        "commit_id": required(arguments, "commit_id", str),
        "path": required(arguments, "path", str),
    }
    subject_type = optional(arguments, "subject_type", str)
    if subject_type == "file":
        comment["subject_type"] = "file"
    else:
        line, has_line = optional_ok(arguments, "line", int)
        start_line, has_start_line = optional_ok(arguments, "start_line", int)
        side, has_side = optional_ok(arguments, "side", str)
        start_side, has_start_side = optional_ok(arguments, "start_side", str)

        if has_start_line and not has_line:
            return error_result("if start_line is provided, line must also be provided")
        if not has_line:
            return error_result("line parameter is required unless using subject_type:file")
        if has_start_side and not has_side:
            return error_result("if start_side is provided, side must also be provided")

        comment["line"] = line
        if has_side:
            comment["side"] = side
        if has_start_line:
            comment["start_line"] = start_line
        if has_start_side:
            comment["start_side"] = start_side

    created, err = await _rest(
        "POST",
        repo_path(owner, repo, "pulls", number, "comments"),
        "failed to create pull request comment",
        expected=(201,),
        json_body=comment,
    )
    if err:
        return err
    return _result(filter_pull_request_comment(created, _sanitize_config()))


async def _handle_request_copilot_review(arguments: dict[str, Any]) -> CallToolResult:
    owner, repo, number = _pr_coordinates(arguments, "pull_number")
    return error_result(
        f"Requesting a Copilot review for PR #{number} in {owner}/{repo} is not currently supported by the GitHub API. "
        "Please request a Copilot review via the GitHub UI."
    )


# ---------------------------------------------------------------------------
# GraphQL review flow
# ---------------------------------------------------------------------------


async def _pull_request_node_id(owner: str, repo: str, number: int) -> tuple[str, CallToolResult | None]:
    data, err = await _graphql(_PR_ID_QUERY, {"owner": owner, "repo": repo, "prNum": number}, "failed to get pull request")
    if err:
        return "", err
    node_id = ((data.get("repository") or {}).get("pullRequest") or {}).get("id") or ""
    return node_id, None


async def _latest_pending_review(owner: str, repo: str, number: int) -> tuple[dict[str, Any], CallToolResult | None]:
    """Resolve the viewer's latest review and require it to be PENDING."""
    viewer, err = await _graphql(_VIEWER_QUERY, {}, "failed to get current user")
    if err:
        return {}, err
    login = (viewer.get("viewer") or {}).get("login") or ""

    data, err = await _graphql(
        _LATEST_REVIEW_QUERY,
        {"author": login, "owner": owner, "name": repo, "number": number},
        "failed to get latest review for current user",
    )
    if err:
        return {}, err
    pull = (data.get("repository") or {}).get("pullRequest") or {}
    nodes = (pull.get("reviews") or {}).get("nodes") or []
    if not nodes:
        return {}, error_result("No pending review found for the viewer")
    review = nodes[0]
    if review.get("state") != "PENDING":
        return {}, error_result(f"The latest review, found at {review.get('url', '')} is not pending")
    return review, None


async def _handle_create_and_submit_pull_request_review(arguments: dict[str, Any]) -> CallToolResult:
    owner, repo, number = _pr_coordinates(arguments)
    body = required(arguments, "body", str)
    event = required(arguments, "event", str)
    commit_id = optional(arguments, "commitId", str)

    pr_id, err = await _pull_request_node_id(owner, repo, number)
    if err:
        return err
    review_input: dict[str, Any] = {"pullRequestId": pr_id, "body": body, "event": event}
    if commit_id:
        review_input["commitOID"] = commit_id

    _, err = await _graphql(_ADD_REVIEW_MUTATION, {"input": review_input}, "failed to create pull request review")
    if err:
        return err
    return _result("pull request review submitted successfully")


async def _handle_create_pending_pull_request_review(arguments: dict[str, Any]) -> CallToolResult:
    owner, repo, number = _pr_coordinates(arguments)
    commit_id = optional(arguments, "commitID", str)

    pr_id, err = await _pull_request_node_id(owner, repo, number)
    if err:
        return err
    review_input: dict[str, Any] = {"pullRequestId": pr_id}
    if commit_id:
        review_input["commitOID"] = commit_id

    # Omitting the event leaves the review in the PENDING state.
    _, err = await _graphql(_ADD_REVIEW_MUTATION, {"input": review_input}, "failed to create pending pull request review")
    if err:
        return err
    return _result("pending pull request review created successfully")


async def _handle_add_comment_to_pending_review(arguments: dict[str, Any]) -> CallToolResult:
    owner, repo, number = _pr_coordinates(arguments)
    path = required(arguments, "path", str)
    body = required(arguments, "body", str)
    subject_type = required(arguments, "subjectType", str)
    line = optional_int(arguments, "line")
    side = optional(arguments, "side", str)
    start_line = optional_int(arguments, "startLine")
    start_side = optional(arguments, "startSide", str)

    review, err = await _latest_pending_review(owner, repo, number)
    if err:
        return err

    thread_input: dict[str, Any] = {
        "pullRequestReviewId": review["id"],
        "path": path,
        "body": body,
        "subjectType": subject_type,
    }
    for key, value in (("line", line), ("side", side), ("startLine", start_line), ("startSide", start_side)):
        if value:
            thread_input[key] = value

    _, err = await _graphql(_ADD_THREAD_MUTATION, {"input": thread_input}, "failed to add pull request review comment")
    if err:
        return err
    return _result("pull request review comment added to pending review")


async def _handle_submit_pending_pull_request_review(arguments: dict[str, Any]) -> CallToolResult:
    owner, repo, number = _pr_coordinates(arguments)
    event = required(arguments, "event", str)
    body = optional(arguments, "body", str)

    review, err = await _latest_pending_review(owner, repo, number)
    if err:
        return err

    submit_input: dict[str, Any] = {"pullRequestReviewId": review["id"], "event": event}
    if body:
        submit_input["body"] = body
    data, err = await _graphql(_SUBMIT_REVIEW_MUTATION, {"input": submit_input}, "failed to submit pull request review")
    if err:
        return err
    submitted = (data.get("submitPullRequestReview") or {}).get("pullRequestReview") or {}
    return _result({"state": submitted.get("state"), "submittedAt": submitted.get("submittedAt")})


async def _handle_delete_pending_pull_request_review(arguments: dict[str, Any]) -> CallToolResult:
    owner, repo, number = _pr_coordinates(arguments)

    review, err = await _latest_pending_review(owner, repo, number)
    if err:
        return err
    _, err = await _graphql(
        _DELETE_REVIEW_MUTATION, {"input": {"pullRequestReviewId": review["id"]}}, "failed to delete pull request review"
    )
    if err:
        return err
    return _result("pending pull request review deleted successfully")
