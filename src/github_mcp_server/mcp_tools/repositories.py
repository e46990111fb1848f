"""MCP tools for repository contents, commits, branches and tags."""

from __future__ import annotations

import base64
import binascii
import json
import logging
import mimetypes
from typing import Any
from urllib.parse import quote

from mcp.types import BlobResourceContents, CallToolResult, EmbeddedResource, TextContent, TextResourceContents

from github_mcp_server.errors import error_result, new_api_error_response
from github_mcp_server.github_client import GitHubHTTPError, repo_path
from github_mcp_server.mcp_tools.common import OWNER, REPO, _rest, _result
from github_mcp_server.params import (
    ParameterError,
    optional,
    optional_pagination,
    pagination_schema,
    required,
)
from github_mcp_server.toolsets import Access, Category, ToolEntry, tool
from github_mcp_server.translations import TranslationHelperFunc

logger = logging.getLogger(__name__)

_FILE_MODE = "100644"


# ---------------------------------------------------------------------------
# MIME helpers (shared with resources)
# ---------------------------------------------------------------------------


def sniff_mime(data: bytes) -> str:
    """Best-effort content sniff: NUL bytes or invalid UTF-8 mean binary."""
    if not data:
        return "text/plain"
    head = data[:512]
    if b"\x00" in head:
        return "application/octet-stream"
    try:
        head.decode("utf-8")
    except UnicodeDecodeError:
        # A multi-byte sequence cut at the 512-byte boundary is still text.
        try:
            data.decode("utf-8")
        except UnicodeDecodeError:
            return "application/octet-stream"
    return "text/plain"


def detect_mime(path: str, data: bytes, content_type: str | None = None) -> str:
    """MIME type from the Content-Type header, then the extension, then the bytes."""
    if content_type:
        mime = content_type.split(";", 1)[0].strip()
        if mime:
            return mime
    guessed, _ = mimetypes.guess_type(path)
    if guessed:
        return guessed
    return sniff_mime(data)


def is_text_mime(mime: str) -> bool:
    return mime.startswith("text/") or mime == "application/json"


def resource_contents(uri: str, data: bytes, mime: str) -> TextResourceContents | BlobResourceContents:
    """Text contents for text-like MIME types, base64 blob otherwise."""
    if is_text_mime(mime):
        return TextResourceContents(uri=uri, mimeType=mime, text=data.decode("utf-8", errors="replace"))
    return BlobResourceContents(uri=uri, mimeType=mime, blob=base64.b64encode(data).decode("ascii"))


def sha_resource_uri(owner: str, repo: str, sha: str, path: str) -> str:
    return f"repo://{quote(owner, safe='')}/{quote(repo, safe='')}/sha/{sha}/contents/{quote(path.lstrip('/'), safe='/')}"


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


def register(t: TranslationHelperFunc) -> list[ToolEntry]:
    """Return the repository tools (``search_*`` for repos and code live in ``search``)."""

    def entry(
        name: str,
        desc: str,
        title: str,
        handler: Any,
        access: Access,
        *,
        destructive: bool | None = None,
        **schema: Any,
    ) -> ToolEntry:
        key = name.upper()
        return ToolEntry(
            tool(
                name,
                t(f"TOOL_{key}_DESCRIPTION", desc),
                title=t(f"TOOL_{key}_USER_TITLE", title),
                read_only=access is Access.READ,
                destructive=destructive,
                **schema,
            ),
            handler,
            Category.REPOSITORIES,
            access,
            "repos",
        )

    owner_repo = {"owner": OWNER, "repo": REPO}
    return [
        entry(
            "get_file_contents",
            "Get the contents of a file or directory from a GitHub repository",
            "Get file or directory contents",
            _handle_get_file_contents,
            Access.READ,
            properties={
                **owner_repo,
                "path": {"type": "string", "description": "Path to file/directory (directories must end with a slash '/')"},
                "ref": {
                    "type": "string",
                    "description": "Accepts optional git refs such as `refs/tags/{tag}`, `refs/heads/{branch}` "
                    "or `refs/pull/{pr_number}/head`",
                },
                "sha": {
                    "type": "string",
                    "description": "Accepts optional git sha, if sha is specified it will be used instead of ref",
                },
            },
            required=["owner", "repo", "path"],
        ),
        entry(
            "get_commit",
            "Get details for a commit from a GitHub repository",
            "Get commit details",
            _handle_get_commit,
            Access.READ,
            properties={
                **owner_repo,
                "sha": {"type": "string", "description": "Commit SHA, branch name, or tag name"},
                **pagination_schema(),
            },
            required=["owner", "repo", "sha"],
        ),
        entry(
            "list_commits",
            "Get list of commits of a branch in a GitHub repository",
            "List commits",
            _handle_list_commits,
            Access.READ,
            properties={
                **owner_repo,
                "sha": {"type": "string", "description": "SHA or Branch name"},
                "author": {"type": "string", "description": "Author username or email address"},
                **pagination_schema(),
            },
            required=["owner", "repo"],
        ),
        entry(
            "list_branches",
            "List branches in a GitHub repository",
            "List branches",
            _handle_list_branches,
            Access.READ,
            properties={**owner_repo, **pagination_schema()},
            required=["owner", "repo"],
        ),
        entry(
            "list_tags",
            "List git tags in a GitHub repository",
            "List tags",
            _handle_list_tags,
            Access.READ,
            properties={**owner_repo, **pagination_schema()},
            required=["owner", "repo"],
        ),
        entry(
            "get_tag",
            "Get details about a specific git tag in a GitHub repository",
            "Get tag details",
            _handle_get_tag,
            Access.READ,
            properties={**owner_repo, "tag": {"type": "string", "description": "Tag name"}},
            required=["owner", "repo", "tag"],
        ),
        entry(
            "create_or_update_file",
            "Create or update a single file in a GitHub repository. If updating, you must provide the SHA of the "
            "file you want to update. Use this tool to create or update a file in a GitHub repository remotely; "
            "do not use it for local file operations.",
            "Create or update file",
            _handle_create_or_update_file,
            Access.WRITE,
            properties={
                **owner_repo,
                "path": {"type": "string", "description": "Path where to create/update the file"},
                "content": {"type": "string", "description": "Content of the file"},
                "message": {"type": "string", "description": "Commit message"},
                "branch": {"type": "string", "description": "Branch to create/update the file in"},
                "sha": {"type": "string", "description": "SHA of file being replaced (for updates)"},
            },
            required=["owner", "repo", "path", "content", "message", "branch"],
        ),
        entry(
            "create_repository",
            "Create a new GitHub repository in your account",
            "Create repository",
            _handle_create_repository,
            Access.WRITE,
            properties={
                "name": {"type": "string", "description": "Repository name"},
                "description": {"type": "string", "description": "Repository description"},
                "private": {"type": "boolean", "description": "Whether repo should be private"},
                "autoInit": {"type": "boolean", "description": "Initialize with README"},
            },
            required=["name"],
        ),
        entry(
            "fork_repository",
            "Fork a GitHub repository to your account or specified organization",
            "Fork repository",
            _handle_fork_repository,
            Access.WRITE,
            properties={**owner_repo, "organization": {"type": "string", "description": "Organization to fork to"}},
            required=["owner", "repo"],
        ),
        entry(
            "create_branch",
            "Create a new branch in a GitHub repository",
            "Create branch",
            _handle_create_branch,
            Access.WRITE,
            properties={
                **owner_repo,
                "branch": {"type": "string", "description": "Name for new branch"},
                "from_branch": {"type": "string", "description": "Source branch (defaults to repo default)"},
            },
            required=["owner", "repo", "branch"],
        ),
        entry(
            "push_files",
            "Push multiple files to a GitHub repository in a single commit",
            "Push files to repository",
            _handle_push_files,
            Access.WRITE,
            properties={
                **owner_repo,
                "branch": {"type": "string", "description": "Branch to push to"},
                "files": {
                    "type": "array",
                    "description": "Array of file objects to push, each object with path (string) and content (string)",
                    "items": {
                        "type": "object",
                        "additionalProperties": False,
                        "required": ["path", "content"],
                        "properties": {
                            "path": {"type": "string", "description": "path to the file"},
                            "content": {"type": "string", "description": "file content"},
                        },
                    },
                },
                "message": {"type": "string", "description": "Commit message"},
            },
            required=["owner", "repo", "branch", "files", "message"],
        ),
        entry(
            "delete_file",
            "Delete a file from a GitHub repository",
            "Delete file",
            _handle_delete_file,
            Access.WRITE,
            destructive=True,
            properties={
                **owner_repo,
                "path": {"type": "string", "description": "Path to the file to delete"},
                "message": {"type": "string", "description": "Commit message"},
                "branch": {"type": "string", "description": "Branch to delete the file from"},
            },
            required=["owner", "repo", "path", "message", "branch"],
        ),
    ]


# ---------------------------------------------------------------------------
# Contents
# ---------------------------------------------------------------------------


def _contents_path(owner: str, repo: str, path: str) -> str:
    return repo_path(owner, repo, "contents", path.strip("/"))


def _decode_metadata_content(metadata: dict[str, Any]) -> bytes | None:
    if metadata.get("encoding") != "base64" or not metadata.get("content"):
        return None
    try:
        return base64.b64decode(metadata["content"])
    except (binascii.Error, ValueError):
        logger.debug("invalid base64 content in contents metadata", exc_info=True)
        return None


async def _handle_get_file_contents(arguments: dict[str, Any]) -> CallToolResult:
    from github_mcp_server.mcp_server import _get_client

    owner = required(arguments, "owner", str)
    repo = required(arguments, "repo", str)
    path = required(arguments, "path", str)
    ref = optional(arguments, "ref", str)
    sha = optional(arguments, "sha", str)

    if path.endswith("/"):
        listing, err = await _rest(
            "GET", _contents_path(owner, repo, path), "failed to get file contents", params={"ref": sha or ref}
        )
        if err:
            return err
        return _result(listing)

    metadata: dict[str, Any] = {}
    if not sha:
        fetched, err = await _rest(
            "GET", _contents_path(owner, repo, path), "failed to get file SHA", params={"ref": ref}
        )
        if err:
            return err
        if isinstance(fetched, list):
            # No trailing slash, but the path names a directory.
            return _result(fetched)
        metadata = fetched or {}
        sha = metadata.get("sha") or ""
        if not sha:
            return error_result(f"failed to get file SHA: no sha returned for {path}")

    content_type: str | None = None
    try:
        resp = await _get_client().raw(owner, repo, path, sha=sha)
        data = resp.content
        content_type = resp.headers.get("Content-Type")
    except GitHubHTTPError as exc:
        fallback = _decode_metadata_content(metadata)
        if fallback is None:
            return new_api_error_response("failed to get raw repository content", exc.response, exc)
        logger.debug("raw fetch failed, using contents metadata for %s", path)
        data = fallback

    mime = detect_mime(path, data, content_type)
    uri = sha_resource_uri(owner, repo, sha, path)
    return CallToolResult(
        content=[
            TextContent(type="text", text=json.dumps({"sha": sha})),
            EmbeddedResource(type="resource", resource=resource_contents(uri, data, mime)),
        ]
    )


async def _handle_create_or_update_file(arguments: dict[str, Any]) -> CallToolResult:
    owner = required(arguments, "owner", str)
    repo = required(arguments, "repo", str)
    path = required(arguments, "path", str)
    content = required(arguments, "content", str)
    message = required(arguments, "message", str)
    branch = required(arguments, "branch", str)
    sha = optional(arguments, "sha", str)

    payload: dict[str, Any] = {
        "message": message,
        "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
        "branch": branch,
    }
    if sha:
        payload["sha"] = sha

    result, err = await _rest(
        "PUT",
        _contents_path(owner, repo, path),
        "failed to create/update file",
        expected=(200, 201),
        json_body=payload,
    )
    if err:
        return err
    return _result(result)


# ---------------------------------------------------------------------------
# Commits, branches, tags
# ---------------------------------------------------------------------------


async def _handle_get_commit(arguments: dict[str, Any]) -> CallToolResult:
    owner = required(arguments, "owner", str)
    repo = required(arguments, "repo", str)
    sha = required(arguments, "sha", str)
    pagination = optional_pagination(arguments)

    commit, err = await _rest(
        "GET",
        repo_path(owner, repo, "commits", sha),
        f"failed to get commit: {sha}",
        params={"page": pagination.page, "per_page": pagination.per_page},
    )
    if err:
        return err
    return _result(commit)


async def _handle_list_commits(arguments: dict[str, Any]) -> CallToolResult:
    owner = required(arguments, "owner", str)
    repo = required(arguments, "repo", str)
    sha = optional(arguments, "sha", str)
    author = optional(arguments, "author", str)
    pagination = optional_pagination(arguments)

    commits, err = await _rest(
        "GET",
        repo_path(owner, repo, "commits"),
        f"failed to list commits: {sha}",
        params={"sha": sha, "author": author, "page": pagination.page, "per_page": pagination.per_page},
    )
    if err:
        return err
    return _result(commits)


async def _handle_list_branches(arguments: dict[str, Any]) -> CallToolResult:
    owner = required(arguments, "owner", str)
    repo = required(arguments, "repo", str)
    pagination = optional_pagination(arguments)

    branches, err = await _rest(
        "GET",
        repo_path(owner, repo, "branches"),
        "failed to list branches",
        params={"page": pagination.page, "per_page": pagination.per_page},
    )
    if err:
        return err
    return _result(branches)


async def _handle_list_tags(arguments: dict[str, Any]) -> CallToolResult:
    owner = required(arguments, "owner", str)
    repo = required(arguments, "repo", str)
    pagination = optional_pagination(arguments)

    tags, err = await _rest(
        "GET",
        repo_path(owner, repo, "tags"),
        "failed to list tags",
        params={"page": pagination.page, "per_page": pagination.per_page},
    )
    if err:
        return err
    return _result(tags)


async def _handle_get_tag(arguments: dict[str, Any]) -> CallToolResult:
    owner = required(arguments, "owner", str)
    repo = required(arguments, "repo", str)
    tag = required(arguments, "tag", str)

    ref, err = await _rest("GET", repo_path(owner, repo, "git", "ref", f"tags/{tag}"), "failed to get tag reference")
    if err:
        return err
    tag_sha = (ref.get("object") or {}).get("sha") or ""
    tag_obj, err = await _rest("GET", repo_path(owner, repo, "git", "tags", tag_sha), "failed to get tag object")
    if err:
        return err
    return _result(tag_obj)


async def _handle_create_repository(arguments: dict[str, Any]) -> CallToolResult:
    payload = {
        "name": required(arguments, "name", str),
        "description": optional(arguments, "description", str),
        "private": optional(arguments, "private", bool),
        "auto_init": optional(arguments, "autoInit", bool),
    }
    created, err = await _rest("POST", "user/repos", "failed to create repository", expected=(201,), json_body=payload)
    if err:
        return err
    return _result(created)


async def _handle_fork_repository(arguments: dict[str, Any]) -> CallToolResult:
    owner = required(arguments, "owner", str)
    repo = required(arguments, "repo", str)
    org = optional(arguments, "organization", str)

    payload = {"organization": org} if org else {}
    forked, err = await _rest(
        "POST", repo_path(owner, repo, "forks"), "failed to fork repository", expected=(202,), json_body=payload
    )
    if err:
        return err
    if not forked:
        return _result("Fork is in progress")
    return _result(forked)


async def _handle_create_branch(arguments: dict[str, Any]) -> CallToolResult:
    owner = required(arguments, "owner", str)
    repo = required(arguments, "repo", str)
    branch = required(arguments, "branch", str)
    from_branch = optional(arguments, "from_branch", str)

    if not from_branch:
        repository, err = await _rest("GET", repo_path(owner, repo), "failed to get repository")
        if err:
            return err
        from_branch = repository.get("default_branch") or ""

    ref, err = await _rest("GET", repo_path(owner, repo, "git", "ref", f"heads/{from_branch}"), "failed to get reference")
    if err:
        return err

    created, err = await _rest(
        "POST",
        repo_path(owner, repo, "git", "refs"),
        "failed to create branch",
        expected=(201,),
        json_body={"ref": f"refs/heads/{branch}", "sha": (ref.get("object") or {}).get("sha")},
    )
    if err:
        return err
    return _result(created)


# ---------------------------------------------------------------------------
# Tree-based commits (push_files, delete_file)
# ---------------------------------------------------------------------------


def _tree_entries(files: Any) -> list[dict[str, Any]]:
    if not isinstance(files, list):
        raise ParameterError("files parameter must be an array of objects with path and content")
    entries: list[dict[str, Any]] = []
    for item in files:
        if not isinstance(item, dict):
            raise ParameterError("each file must be an object with path and content")
        path = item.get("path")
        if not isinstance(path, str) or not path:
            raise ParameterError("each file must have a path")
        content = item.get("content")
        if not isinstance(content, str):
            raise ParameterError("each file must have content")
        entries.append({"path": path, "mode": _FILE_MODE, "type": "blob", "content": content})
    return entries


async def _commit_tree(
    owner: str, repo: str, branch: str, message: str, entries: list[dict[str, Any]]
) -> tuple[dict[str, Any], dict[str, Any], CallToolResult | None]:
    """Create a tree on top of *branch*, commit it, and move the branch.

    Returns ``(new_commit, updated_ref, None)`` or ``({}, {}, error_result)``.
    """
    ref, err = await _rest("GET", repo_path(owner, repo, "git", "ref", f"heads/{branch}"), "failed to get branch reference")
    if err:
        return {}, {}, err
    head_sha = (ref.get("object") or {}).get("sha") or ""

    base, err = await _rest("GET", repo_path(owner, repo, "git", "commits", head_sha), "failed to get base commit")
    if err:
        return {}, {}, err

    tree, err = await _rest(
        "POST",
        repo_path(owner, repo, "git", "trees"),
        "failed to create tree",
        expected=(201,),
        json_body={"base_tree": (base.get("tree") or {}).get("sha"), "tree": entries},
    )
    if err:
        return {}, {}, err

    commit, err = await _rest(
        "POST",
        repo_path(owner, repo, "git", "commits"),
        "failed to create commit",
        expected=(201,),
        json_body={"message": message, "tree": tree.get("sha"), "parents": [base.get("sha")]},
    )
    if err:
        return {}, {}, err

    updated, err = await _rest(
        "PATCH",
        repo_path(owner, repo, "git", "refs", f"heads/{branch}"),
        "failed to update reference",
        json_body={"sha": commit.get("sha"), "force": False},
    )
    if err:
        return {}, {}, err
    return commit, updated, None


async def _handle_push_files(arguments: dict[str, Any]) -> CallToolResult:
    owner = required(arguments, "owner", str)
    repo = required(arguments, "repo", str)
    branch = required(arguments, "branch", str)
    message = required(arguments, "message", str)
    entries = _tree_entries(arguments.get("files"))

    _, updated, err = await _commit_tree(owner, repo, branch, message, entries)
    if err:
        return err
    return _result(updated)


async def _handle_delete_file(arguments: dict[str, Any]) -> CallToolResult:
    owner = required(arguments, "owner", str)
    repo = required(arguments, "repo", str)
    path = required(arguments, "path", str)
    message = required(arguments, "message", str)
    branch = required(arguments, "branch", str)

    # A null sha removes the path from the new tree.
    entries = [{"path": path, "mode": _FILE_MODE, "type": "blob", "sha": None}]
    commit, _, err = await _commit_tree(owner, repo, branch, message, entries)
    if err:
        return err
    return _result({"commit": commit, "content": None})
