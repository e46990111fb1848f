"""Async transports for the GitHub REST, GraphQL and raw-content endpoints.

One :class:`GitHubClient` wraps a single ``httpx.AsyncClient`` that carries
the bearer token. Non-2xx responses and transport failures raise
:class:`GitHubHTTPError`; handlers translate those into recorded
:mod:`github_mcp_server.errors` values and ``isError`` tool results.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from github_mcp_server import __version__

logger = logging.getLogger(__name__)

DEFAULT_HOST = "github.com"
_DEFAULT_TIMEOUT = 30.0
_API_VERSION = "2022-11-28"


class GitHubHTTPError(Exception):
    """A GitHub request that failed at the transport or returned non-2xx."""

    def __init__(self, message: str, response: httpx.Response | None = None) -> None:
        super().__init__(message)
        self.response = response

    @property
    def status_code(self) -> int | None:
        return self.response.status_code if self.response is not None else None


class GraphQLQueryError(GitHubHTTPError):
    """A GraphQL request that returned an ``errors`` array."""

    def __init__(self, errors: list[dict[str, Any]], response: httpx.Response | None = None) -> None:
        messages = "; ".join(str(e.get("message", e)) for e in errors) or "unknown GraphQL error"
        super().__init__(messages, response)
        self.errors = errors


def _normalise_host(host: str | None) -> str:
    if not host:
        return DEFAULT_HOST
    raw = host if "://" in host else f"https://{host}"
    parsed = httpx.URL(raw)
    return parsed.host or DEFAULT_HOST


def endpoints_for(host: str | None) -> tuple[str, str, str]:
    """Return ``(rest_base, graphql_url, raw_base)`` for a GitHub host.

    github.com and GHE.com tenants use the ``api.`` subdomain; any other host
    is treated as GitHub Enterprise Server.
    """
    name = _normalise_host(host)
    if name == DEFAULT_HOST:
        return "https://api.github.com", "https://api.github.com/graphql", "https://raw.githubusercontent.com"
    if name.endswith(".ghe.com"):
        return f"https://api.{name}", f"https://api.{name}/graphql", f"https://raw.{name}"
    return f"https://{name}/api/v3", f"https://{name}/api/graphql", f"https://{name}/raw"


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text.strip() or response.reason_phrase
    if isinstance(payload, dict) and "message" in payload:
        return str(payload["message"])
    return response.text.strip()


def decode_json(response: httpx.Response) -> Any:
    """Parse a 2xx body as JSON; a body that is not JSON raises :class:`GitHubHTTPError`."""
    try:
        return response.json()
    except ValueError as exc:
        request = response.request
        raise GitHubHTTPError(f"{request.method} {request.url}: invalid JSON response", response) from exc


class GitHubClient:
    """Thin async facade over the three GitHub transports."""

    def __init__(
        self,
        token: str,
        host: str | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = _DEFAULT_TIMEOUT,
    ) -> None:
        self.host = _normalise_host(host)
        self.rest_base, self.graphql_url, self.raw_base = endpoints_for(host)
        self._http = httpx.AsyncClient(
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "User-Agent": f"github-mcp-server/{__version__}",
                "X-GitHub-Api-Version": _API_VERSION,
            },
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()

    # -- transports ---------------------------------------------------------

    async def _send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        clean = {k: v for k, v in (params or {}).items() if v is not None and v != ""}
        try:
            response = await self._http.request(method, url, params=clean or None, json=json_body, headers=headers)
        except httpx.HTTPError as exc:
            raise GitHubHTTPError(f"{method} {url}: {exc}") from exc
        if response.status_code >= 400:
            raise GitHubHTTPError(
                f"{method} {response.request.url}: {response.status_code} {_error_message(response)}",
                response,
            )
        logger.debug("github_request", extra={"args_data": {"method": method, "url": url}})
        return response

    async def rest(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
    ) -> httpx.Response:
        """Issue a REST call; *path* is relative to the API root."""
        url = f"{self.rest_base}/{path.lstrip('/')}"
        return await self._send(method, url, params=params, json_body=json_body)

    async def graphql(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Run a GraphQL query or mutation and return its ``data`` object."""
        response = await self._send("POST", self.graphql_url, json_body={"query": query, "variables": variables or {}})
        payload = decode_json(response)
        if not isinstance(payload, dict):
            raise GitHubHTTPError(f"POST {self.graphql_url}: unexpected GraphQL response", response)
        errors = payload.get("errors")
        if errors:
            raise GraphQLQueryError(errors, response)
        data = payload.get("data")
        return data if isinstance(data, dict) else {}

    async def raw(self, owner: str, repo: str, path: str, *, sha: str | None = None, ref: str | None = None) -> httpx.Response:
        """Fetch file bytes from the raw-content host at *sha* or *ref*."""
        at = sha or ref or "HEAD"
        url = f"{self.raw_base}/{quote(owner)}/{quote(repo)}/{quote(at, safe='/')}/{quote(path.lstrip('/'), safe='/')}"
        return await self._send("GET", url)


def repo_path(owner: str, repo: str, *parts: object) -> str:
    """Build ``repos/{owner}/{repo}/...`` with each segment URL-quoted."""
    segments = [quote(owner, safe=""), quote(repo, safe="")]
    segments.extend(quote(str(p), safe="/") for p in parts)
    return "repos/" + "/".join(segments)
