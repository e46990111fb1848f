"""Pure helpers and constants shared across MCP tool modules.

This module has NO dependency on ``mcp_server`` module globals at import
time; the GitHub client is fetched lazily so it can be imported freely
without triggering circular-import issues.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx
from mcp.types import CallToolResult, TextContent

from github_mcp_server.content_filter import filter_trusted
from github_mcp_server.errors import error_result, new_api_error_response, new_graphql_error_response
from github_mcp_server.github_client import GitHubHTTPError, decode_json
from github_mcp_server.params import PaginationParams
from github_mcp_server.sanitize import SanitizeConfig

logger = logging.getLogger(__name__)

OWNER = {"type": "string", "description": "Repository owner"}
REPO = {"type": "string", "description": "Repository name"}


def _text(content: object) -> list[TextContent]:
    if isinstance(content, str):
        return [TextContent(type="text", text=content)]
    return [TextContent(type="text", text=json.dumps(content, indent=2, default=str))]


def _result(content: object) -> CallToolResult:
    """Successful tool result: strings verbatim, anything else as JSON."""
    return CallToolResult(content=_text(content))


def _page_params(pagination: PaginationParams, per_page_key: str = "per_page") -> dict[str, int]:
    return {"page": pagination.page, per_page_key: pagination.per_page}


def _decode(resp: httpx.Response) -> Any:
    if not resp.content:
        return None
    return decode_json(resp)


async def _rest(
    method: str,
    path: str,
    failure: str,
    *,
    expected: tuple[int, ...] = (200,),
    params: dict[str, Any] | None = None,
    json_body: Any = None,
) -> tuple[Any, CallToolResult | None]:
    """Run a REST call, returning ``(decoded_body, None)`` or ``(None, error_result)``.

    Transport failures, non-2xx responses and non-JSON bodies are recorded
    in the request's error context under *failure*; a 2xx status outside *expected* becomes
    ``"{failure}: {body}"``.
    """
    from github_mcp_server.mcp_server import _get_client

    try:
        resp = await _get_client().rest(method, path, params=params, json_body=json_body)
    except GitHubHTTPError as exc:
        return None, new_api_error_response(failure, exc.response, exc)
    if resp.status_code not in expected:
        return None, error_result(f"{failure}: {resp.text}")
    try:
        return _decode(resp), None
    except GitHubHTTPError as exc:
        return None, new_api_error_response(failure, exc.response, exc)


async def _graphql(query: str, variables: dict[str, Any], failure: str) -> tuple[dict[str, Any], CallToolResult | None]:
    """Run a GraphQL operation, returning ``(data, None)`` or ``({}, error_result)``."""
    from github_mcp_server.mcp_server import _get_client

    try:
        data = await _get_client().graphql(query, variables)
    except GitHubHTTPError as exc:
        return {}, new_graphql_error_response(failure, exc)
    return data, None


def _drop_empty(payload: dict[str, Any]) -> dict[str, Any]:
    """Remove keys whose value is ``None``, ``""`` or an empty list."""
    return {k: v for k, v in payload.items() if v is not None and v != "" and v != []}


def _sanitize_config() -> SanitizeConfig:
    from github_mcp_server.mcp_server import _get_sanitize_config

    return _get_sanitize_config()


async def _trusted_only(items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Keep only items authored by users the content filter trusts."""
    from github_mcp_server.mcp_server import _get_client, _get_content_filter

    return await filter_trusted(items, _get_content_filter(), _get_client())
