"""Repository-content resource templates and their read handler."""

from __future__ import annotations

import base64
import logging
import mimetypes
from dataclasses import dataclass

from mcp.types import BlobResourceContents, ResourceTemplate, TextResourceContents

from github_mcp_server.github_client import GitHubClient, decode_json, repo_path
from github_mcp_server.mcp_tools.repositories import resource_contents, sniff_mime
from github_mcp_server.translations import TranslationHelperFunc
from github_mcp_server.uritemplate import UriTemplate

logger = logging.getLogger(__name__)

DIRECTORY_MIME = "text/directory"


@dataclass(frozen=True)
class RepositoryTemplate:
    name: str
    template: UriTemplate
    description_key: str
    description: str


REPOSITORY_TEMPLATES: tuple[RepositoryTemplate, ...] = (
    RepositoryTemplate(
        "repository_content",
        UriTemplate("repo://{owner}/{repo}/contents{/path*}"),
        "RESOURCE_REPOSITORY_CONTENT_DESCRIPTION",
        "Repository Content",
    ),
    RepositoryTemplate(
        "repository_content_branch",
        UriTemplate("repo://{owner}/{repo}/refs/heads/{branch}/contents{/path*}"),
        "RESOURCE_REPOSITORY_CONTENT_BRANCH_DESCRIPTION",
        "Repository Content for specific branch",
    ),
    RepositoryTemplate(
        "repository_content_commit",
        UriTemplate("repo://{owner}/{repo}/sha/{sha}/contents{/path*}"),
        "RESOURCE_REPOSITORY_CONTENT_COMMIT_DESCRIPTION",
        "Repository Content for specific commit",
    ),
    RepositoryTemplate(
        "repository_content_tag",
        UriTemplate("repo://{owner}/{repo}/refs/tags/{tag}/contents{/path*}"),
        "RESOURCE_REPOSITORY_CONTENT_TAG_DESCRIPTION",
        "Repository Content for specific tag",
    ),
    RepositoryTemplate(
        "repository_content_pr",
        UriTemplate("repo://{owner}/{repo}/refs/pull/{pr_number}/head/contents{/path*}"),
        "RESOURCE_REPOSITORY_CONTENT_PR_DESCRIPTION",
        "Repository Content for specific pull request",
    ),
)


class ResourceNotFoundError(ValueError):
    """No repository template matches the requested URI."""


def resource_templates(t: TranslationHelperFunc) -> list[ResourceTemplate]:
    return [
        ResourceTemplate(
            name=rt.name,
            uriTemplate=rt.template.template,
            description=t(rt.description_key, rt.description),
        )
        for rt in REPOSITORY_TEMPLATES
    ]


def match_repository_uri(uri: str) -> dict[str, str | list[str]]:
    """Bind *uri* against the repository templates, first match wins."""
    for rt in REPOSITORY_TEMPLATES:
        bound = rt.template.match(uri)
        if bound is not None:
            return bound
    raise ResourceNotFoundError(f"no resource template matches {uri}")


def ref_for(bound: dict[str, str | list[str]]) -> str | None:
    """The git ref implied by a template match (sha, branch, tag or PR head)."""
    if bound.get("sha"):
        return str(bound["sha"])
    if bound.get("branch"):
        return f"refs/heads/{bound['branch']}"
    if bound.get("tag"):
        return f"refs/tags/{bound['tag']}"
    if bound.get("pr_number"):
        return f"refs/pull/{bound['pr_number']}/head"
    return None


def _file_mime(name: str, data: bytes) -> str:
    guessed, _ = mimetypes.guess_type(name)
    return guessed or sniff_mime(data)


async def read_repository_resource(
    client: GitHubClient, uri: str
) -> list[TextResourceContents | BlobResourceContents]:
    """Resolve a ``repo://`` URI to directory entries or a single file's contents.

    Directories yield one text entry per child (``text/directory`` for
    subdirectories). Files are returned as text or base64 blob depending on
    the MIME type guessed from the name. Transport errors propagate.
    """
    bound = match_repository_uri(uri)
    owner, repo = str(bound["owner"]), str(bound["repo"])
    segments = bound.get("path") or []
    path = "/".join(segments) if isinstance(segments, list) else str(segments)

    resp = await client.rest("GET", repo_path(owner, repo, "contents", path), params={"ref": ref_for(bound)})
    payload = decode_json(resp)

    if isinstance(payload, list):
        contents: list[TextResourceContents | BlobResourceContents] = []
        for entry in payload:
            name = entry.get("name", "")
            mime = DIRECTORY_MIME if entry.get("type") != "file" else (mimetypes.guess_type(name)[0] or "")
            entry_uri = entry.get("html_url") or f"{uri.rstrip('/')}/{name}"
            contents.append(TextResourceContents(uri=entry_uri, mimeType=mime or None, text=name))
        return contents

    if payload.get("encoding") == "base64" and payload.get("content") is not None:
        data = base64.b64decode(payload["content"])
    else:
        logger.debug("contents response for %s carried no inline content", uri)
        data = b""
    return [resource_contents(uri, data, _file_mime(payload.get("name", path), data))]
