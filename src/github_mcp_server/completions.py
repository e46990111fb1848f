"""Argument completion for the ``repo://`` resource templates.

:func:`complete_repository_argument` is transport-agnostic: the MCP
``completion/complete`` handler and the stdio shim both call it with the
reference type, URI, argument name and partial value.
"""

from __future__ import annotations

import logging
from typing import Any

from mcp.types import Completion

from github_mcp_server.github_client import GitHubClient, GitHubHTTPError, decode_json, repo_path

logger = logging.getLogger(__name__)

RESOURCE_REF = "ref/resource"
_SCHEME = "repo://"

_OWNER_PAGE = 10
_REPO_PAGE = 10
_BRANCH_PAGE = 30
_COMMIT_PAGE = 10
_TAG_PAGE = 30
_PR_PAGE = 20
_MIN_SHA_PREFIX = 3


class UnsupportedReferenceError(ValueError):
    def __init__(self, ref_type: str) -> None:
        super().__init__(f"unsupported ref type: {ref_type}")
        self.ref_type = ref_type


def empty() -> Completion:
    return Completion(values=[], total=0, hasMore=False)


def _prefixed(names: list[str], value: str) -> list[str]:
    lowered = value.lower()
    return [n for n in names if n.lower().startswith(lowered)]


# ---------------------------------------------------------------------------
# URI inspection
# ---------------------------------------------------------------------------


def _segments(uri: str) -> list[str]:
    if not uri.startswith(_SCHEME):
        return []
    return uri[len(_SCHEME) :].split("/")


def owner_from_uri(uri: str) -> str:
    """First path segment, or ``""`` while it is still a ``{placeholder}``."""
    parts = _segments(uri)
    if not parts or "{" in parts[0]:
        return ""
    return parts[0]


def owner_repo_from_uri(uri: str) -> tuple[str, str]:
    parts = _segments(uri)
    if len(parts) < 2 or "{" in parts[0] or "{" in parts[1]:
        return "", ""
    return parts[0], parts[1]


def _segment_after(path: str, marker: str) -> str:
    return path.split(marker, 1)[1].split("/", 1)[0]


def ref_from_uri(uri: str) -> str:
    """Git ref named by a filled-in ``repo://`` URI, or ``""``."""
    if not uri.startswith(_SCHEME):
        return ""
    path = uri[len(_SCHEME) :]
    if "/refs/heads/" in path:
        branch = _segment_after(path, "/refs/heads/")
        return "" if "{" in branch else f"refs/heads/{branch}"
    if "/sha/" in path:
        sha = _segment_after(path, "/sha/")
        return "" if "{" in sha else sha
    if "/refs/tags/" in path:
        tag = _segment_after(path, "/refs/tags/")
        return "" if "{" in tag else f"refs/tags/{tag}"
    if "/refs/pull/" in path and "/head" in path:
        number = path.split("/refs/pull/", 1)[1].split("/head", 1)[0]
        return "" if "{" in number else f"refs/pull/{number}/head"
    return ""


# ---------------------------------------------------------------------------
# Per-argument completers
# ---------------------------------------------------------------------------


async def _get_json(client: GitHubClient, path: str, params: dict[str, Any]) -> Any:
    resp = await client.rest("GET", path, params=params)
    return decode_json(resp)


async def complete_owner(client: GitHubClient, value: str) -> Completion:
    if not value:
        return empty()
    result = await _get_json(client, "search/users", {"q": f"{value} in:login", "page": 1, "per_page": _OWNER_PAGE})
    if not isinstance(result, dict):
        return empty()
    logins = [u["login"] for u in result.get("items") or [] if u.get("login")]
    values = _prefixed(logins, value)
    total = int(result.get("total_count") or 0)
    return Completion(values=values, total=total, hasMore=total > len(values))


async def complete_repo(client: GitHubClient, value: str, uri: str) -> Completion:
    owner = owner_from_uri(uri)
    if not owner:
        return empty()
    query = f"user:{owner} {value} in:name" if value else f"user:{owner}"
    result = await _get_json(client, "search/repositories", {"q": query, "page": 1, "per_page": _REPO_PAGE})
    if not isinstance(result, dict):
        return empty()
    names = [r["name"] for r in result.get("items") or [] if r.get("name")]
    values = _prefixed(names, value)
    total = int(result.get("total_count") or 0)
    return Completion(values=values, total=total, hasMore=total > len(values))


async def _complete_listing(
    client: GitHubClient, uri: str, value: str, suffix: str, page_size: int, key: str, params: dict[str, Any] | None = None
) -> Completion:
    owner, repo = owner_repo_from_uri(uri)
    if not owner or not repo:
        return empty()
    page = await _get_json(client, repo_path(owner, repo, suffix), {"page": 1, "per_page": page_size, **(params or {})})
    if not isinstance(page, list):
        return empty()
    names = [str(item[key]) for item in page if isinstance(item, dict) and item.get(key) is not None]
    values = _prefixed(names, value)
    return Completion(values=values, total=len(values), hasMore=len(page) >= page_size)


async def complete_branch(client: GitHubClient, value: str, uri: str) -> Completion:
    return await _complete_listing(client, uri, value, "branches", _BRANCH_PAGE, "name")


async def complete_sha(client: GitHubClient, value: str, uri: str) -> Completion:
    if len(value) < _MIN_SHA_PREFIX:
        return empty()
    return await _complete_listing(client, uri, value, "commits", _COMMIT_PAGE, "sha")


async def complete_tag(client: GitHubClient, value: str, uri: str) -> Completion:
    return await _complete_listing(client, uri, value, "tags", _TAG_PAGE, "name")


async def complete_pr_number(client: GitHubClient, value: str, uri: str) -> Completion:
    owner, repo = owner_repo_from_uri(uri)
    if not owner or not repo:
        return empty()
    prs = await _get_json(client, repo_path(owner, repo, "pulls"), {"state": "all", "page": 1, "per_page": _PR_PAGE})
    if not isinstance(prs, list):
        return empty()
    numbers = [str(pr["number"]) for pr in prs if isinstance(pr, dict) and pr.get("number") is not None]
    values = [n for n in numbers if n.startswith(value)]
    return Completion(values=values, total=len(values), hasMore=len(prs) >= _PR_PAGE)


def split_path_value(value: str) -> tuple[str, str]:
    """Split a partial path into ``(directory, name_prefix)`` on the last ``/``."""
    if not value:
        return "", ""
    if value.endswith("/"):
        return value.rstrip("/"), ""
    head, sep, tail = value.rpartition("/")
    if not sep:
        return "", value
    return head, tail


async def complete_path(client: GitHubClient, value: str, uri: str) -> Completion:
    owner, repo = owner_repo_from_uri(uri)
    if not owner or not repo:
        return empty()
    directory, prefix = split_path_value(value)
    try:
        listing = await _get_json(
            client, repo_path(owner, repo, "contents", directory), {"ref": ref_from_uri(uri) or None}
        )
    except GitHubHTTPError:
        logger.debug("path completion: cannot list %s/%s:%s", owner, repo, directory, exc_info=True)
        return empty()
    if not isinstance(listing, list):
        return empty()

    values: list[str] = []
    for entry in listing:
        name = entry.get("name")
        if not name or not name.lower().startswith(prefix.lower()):
            continue
        full = f"{directory}/{name}" if directory else name
        if entry.get("type") == "dir":
            full += "/"
        values.append(full)
    return Completion(values=values, total=len(values), hasMore=False)


async def complete_repository_argument(
    client: GitHubClient, ref_type: str, uri: str, name: str, value: str
) -> Completion:
    """Complete one argument of a ``repo://`` resource template.

    Raises :class:`UnsupportedReferenceError` for non-resource references;
    unknown arguments and non-``repo://`` URIs complete to nothing.
    """
    if ref_type != RESOURCE_REF:
        raise UnsupportedReferenceError(ref_type)
    if not uri.startswith(_SCHEME):
        return empty()

    match name:
        case "owner":
            return await complete_owner(client, value)
        case "repo":
            return await complete_repo(client, value, uri)
        case "branch":
            return await complete_branch(client, value, uri)
        case "sha":
            return await complete_sha(client, value, uri)
        case "tag":
            return await complete_tag(client, value, uri)
        case "pr_number":
            return await complete_pr_number(client, value, uri)
        case "path":
            return await complete_path(client, value, uri)
        case _:
            return empty()
