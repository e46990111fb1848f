"""Trusted-collaborator filtering and sanitized copies of GitHub objects.

When a public *trusted repo* is configured, user-authored content (comments,
reviews) is only surfaced if its author has push access to that repository.
Permission checks go through GraphQL once per user and are cached for the
life of the process.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from github_mcp_server.github_client import GitHubHTTPError
from github_mcp_server.sanitize import SanitizeConfig, sanitize

if TYPE_CHECKING:
    from github_mcp_server.github_client import GitHubClient

logger = logging.getLogger(__name__)

PUSH_PERMISSIONS = frozenset({"WRITE", "ADMIN", "MAINTAIN"})

_IS_PRIVATE_QUERY = """
query($owner: String!, $name: String!) {
  repository(owner: $owner, name: $name) { isPrivate }
}
"""

_VIEWER_QUERY = "query { viewer { login } }"

_COLLABORATOR_QUERY = """
query($owner: String!, $name: String!, $username: String!) {
  repository(owner: $owner, name: $name) {
    collaborators(query: $username, first: 1) {
      edges { permission node { login } }
    }
  }
}
"""


class ContentFilterInitError(RuntimeError):
    """The trusted repository's visibility could not be determined."""


@dataclass(frozen=True)
class OwnerRepo:
    owner: str
    repo: str


def parse_owner_repo(s: str) -> OwnerRepo:
    parts = s.split("/")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise ValueError(f"invalid format for owner/repo: {s}")
    return OwnerRepo(owner=parts[0], repo=parts[1])


@dataclass
class ContentFilterSettings:
    """Process-wide trust policy built once at startup."""

    trusted_repo: str
    owner_repo: OwnerRepo
    enabled: bool = True
    is_private: bool = False
    authenticated_user: str = ""
    trusted_users: dict[str, bool] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def cached(self, username: str) -> bool | None:
        with self._lock:
            return self.trusted_users.get(username)

    def remember(self, username: str, trusted: bool) -> None:
        with self._lock:
            self.trusted_users[username] = trusted


# ---------------------------------------------------------------------------
# GraphQL lookups
# ---------------------------------------------------------------------------


async def is_repo_private(client: GitHubClient, owner_repo: OwnerRepo) -> bool:
    data = await client.graphql(_IS_PRIVATE_QUERY, {"owner": owner_repo.owner, "name": owner_repo.repo})
    return bool((data.get("repository") or {}).get("isPrivate"))


async def get_authenticated_user(client: GitHubClient) -> str:
    data = await client.graphql(_VIEWER_QUERY)
    return str((data.get("viewer") or {}).get("login") or "")


async def init_filter(client: GitHubClient, trusted_repo: str) -> ContentFilterSettings | None:
    """Build the trust policy for *trusted_repo*; ``None`` when unset.

    A malformed coordinate raises ``ValueError``. Failure to read the
    repository's visibility raises :class:`ContentFilterInitError`. Failure
    to resolve the viewer is logged and tolerated.
    """
    if not trusted_repo:
        return None

    owner_repo = parse_owner_repo(trusted_repo)
    settings = ContentFilterSettings(trusted_repo=trusted_repo, owner_repo=owner_repo)

    try:
        settings.is_private = await is_repo_private(client, owner_repo)
    except GitHubHTTPError as exc:
        raise ContentFilterInitError(f"failed to check repository visibility: {exc}") from exc

    try:
        login = await get_authenticated_user(client)
    except GitHubHTTPError as exc:
        logger.warning("failed to get authenticated user: %s", exc)
    else:
        if login:
            settings.authenticated_user = login
            settings.remember(login, True)

    logger.info(
        "content_filter_enabled",
        extra={"args_data": {"trusted_repo": trusted_repo, "is_private": settings.is_private}},
    )
    return settings


async def has_push_access(settings: ContentFilterSettings | None, client: GitHubClient, username: str) -> bool:
    """Whether *username* may push to the trusted repo (cached per user).

    The cache lock is never held across the GraphQL call; two concurrent
    misses for one user may both query, and the last write wins.
    """
    if settings is None or not settings.enabled or settings.is_private:
        return True

    cached = settings.cached(username)
    if cached is not None:
        return cached

    data = await client.graphql(
        _COLLABORATOR_QUERY,
        {"owner": settings.owner_repo.owner, "name": settings.owner_repo.repo, "username": username},
    )
    edges = ((data.get("repository") or {}).get("collaborators") or {}).get("edges") or []
    has_push = False
    for edge in edges:
        login = ((edge or {}).get("node") or {}).get("login") or ""
        if login.casefold() == username.casefold():
            has_push = edge.get("permission") in PUSH_PERMISSIONS
            break

    settings.remember(username, has_push)
    return has_push


async def should_include(settings: ContentFilterSettings | None, client: GitHubClient, username: str) -> bool:
    """Decide whether content authored by *username* may be shown; deny on error."""
    if settings is None or not settings.enabled or settings.is_private:
        return True
    if settings.authenticated_user and username.casefold() == settings.authenticated_user.casefold():
        return True
    try:
        return await has_push_access(settings, client, username)
    except GitHubHTTPError as exc:
        logger.debug("permission lookup for %s failed, excluding content: %s", username, exc)
        return False


def _author(item: dict[str, Any]) -> str:
    user = item.get("user") or item.get("author") or {}
    return str(user.get("login") or "") if isinstance(user, dict) else ""


async def filter_trusted(
    items: Iterable[dict[str, Any]],
    settings: ContentFilterSettings | None,
    client: GitHubClient,
) -> list[dict[str, Any]]:
    """Drop items whose author is not trusted under *settings*."""
    kept: list[dict[str, Any]] = []
    for item in items:
        if await should_include(settings, client, _author(item)):
            kept.append(item)
    return kept


# ---------------------------------------------------------------------------
# Sanitized copies
# ---------------------------------------------------------------------------


def _sanitized_copy(obj: dict[str, Any] | None, fields: tuple[str, ...], config: SanitizeConfig) -> dict[str, Any] | None:
    if obj is None:
        return None
    copy = dict(obj)
    for name in fields:
        value = copy.get(name)
        if isinstance(value, str):
            copy[name] = sanitize(value, config)
    return copy


def _sanitized_list(objs: list[dict[str, Any]] | None, fields: tuple[str, ...], config: SanitizeConfig) -> list[dict[str, Any]] | None:
    if objs is None:
        return None
    return [_sanitized_copy(o, fields, config) for o in objs]  # type: ignore[misc]


def filter_issue(issue: dict[str, Any] | None, config: SanitizeConfig) -> dict[str, Any] | None:
    return _sanitized_copy(issue, ("title", "body"), config)


def filter_issues(issues: list[dict[str, Any]] | None, config: SanitizeConfig) -> list[dict[str, Any]] | None:
    return _sanitized_list(issues, ("title", "body"), config)


def filter_pull_request(pr: dict[str, Any] | None, config: SanitizeConfig) -> dict[str, Any] | None:
    return _sanitized_copy(pr, ("title", "body"), config)


def filter_pull_requests(prs: list[dict[str, Any]] | None, config: SanitizeConfig) -> list[dict[str, Any]] | None:
    return _sanitized_list(prs, ("title", "body"), config)


def filter_issue_comment(comment: dict[str, Any] | None, config: SanitizeConfig) -> dict[str, Any] | None:
    return _sanitized_copy(comment, ("body",), config)


def filter_issue_comments(comments: list[dict[str, Any]] | None, config: SanitizeConfig) -> list[dict[str, Any]] | None:
    return _sanitized_list(comments, ("body",), config)


def filter_pull_request_comment(comment: dict[str, Any] | None, config: SanitizeConfig) -> dict[str, Any] | None:
    return _sanitized_copy(comment, ("body",), config)


def filter_pull_request_comments(comments: list[dict[str, Any]] | None, config: SanitizeConfig) -> list[dict[str, Any]] | None:
    return _sanitized_list(comments, ("body",), config)


def filter_pull_request_review(review: dict[str, Any] | None, config: SanitizeConfig) -> dict[str, Any] | None:
    return _sanitized_copy(review, ("body",), config)


def filter_pull_request_reviews(reviews: list[dict[str, Any]] | None, config: SanitizeConfig) -> list[dict[str, Any]] | None:
    return _sanitized_list(reviews, ("body",), config)
