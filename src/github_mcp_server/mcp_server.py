"""MCP server exposing GitHub as tools, resources and a prompt.

Speaks MCP over stdio. Tool handlers live in :mod:`github_mcp_server.mcp_tools`
and reach the GitHub client, sanitizer settings and trust filter through the
lazy accessors below, so they can be imported (and tested) without a running
server.

Usage:
    github-mcp-server stdio                       # token from GITHUB_PERSONAL_ACCESS_TOKEN
    github-mcp-server stdio --read-only --toolsets repos,issues
"""

from __future__ import annotations

import logging
import sys
import time
from typing import Any

from mcp import types
from mcp.server.lowlevel import NotificationOptions, Server
from mcp.types import (
    CallToolResult,
    Completion,
    CompletionArgument,
    CompletionContext,
    GetPromptResult,
    Prompt,
    PromptMessage,
    PromptReference,
    Resource,
    ResourceTemplate,
    ResourceTemplateReference,
    TextContent,
    Tool,
)

from github_mcp_server.completion_stdio import completion_aware_stdio_server
from github_mcp_server.completions import complete_repository_argument
from github_mcp_server.config import ConfigError, ServerConfig
from github_mcp_server.content_filter import ContentFilterInitError, ContentFilterSettings, init_filter
from github_mcp_server.errors import error_result, error_tracking
from github_mcp_server.github_client import GitHubClient
from github_mcp_server.mcp_tools import (
    alerts,
    discussions,
    dynamic,
    gists,
    issues,
    notifications,
    pullrequests,
    repositories,
    search,
    security_advisories,
    users,
)
from github_mcp_server.params import ParameterError
from github_mcp_server.resources import read_repository_resource, resource_templates
from github_mcp_server.sanitize import DEFAULT_CONFIG, SanitizeConfig
from github_mcp_server.toolsets import (
    TOOLSET_DESCRIPTIONS,
    ToolEntry,
    Toolset,
    ToolsetDoesNotExistError,
    ToolsetGroup,
)
from github_mcp_server.translations import TranslationHelperFunc, Translations, null_translation

SERVER_NAME = "github-mcp-server"
ALWAYS_ON = "context"

_TOOL_MODULES = (
    users,
    repositories,
    issues,
    pullrequests,
    search,
    alerts,
    notifications,
    discussions,
    gists,
    security_advisories,
)

# ---------------------------------------------------------------------------
# Server state
# ---------------------------------------------------------------------------

server = Server(SERVER_NAME)
client: GitHubClient | None = None
_sanitize_config: SanitizeConfig = DEFAULT_CONFIG
_content_filter: ContentFilterSettings | None = None
_toolset_group: ToolsetGroup | None = None
_dynamic_entries: list[ToolEntry] = []
_translations: TranslationHelperFunc = null_translation
_logger: logging.Logger | None = None


def _get_client() -> GitHubClient:
    if client is None:
        msg = "GitHub client not initialized"
        raise RuntimeError(msg)
    return client


def _get_sanitize_config() -> SanitizeConfig:
    return _sanitize_config


def _get_content_filter() -> ContentFilterSettings | None:
    return _content_filter


def _get_toolset_group() -> ToolsetGroup:
    if _toolset_group is None:
        msg = "Toolsets not initialized"
        raise RuntimeError(msg)
    return _toolset_group


async def _notify_tools_changed() -> None:
    """Tell the connected client that the tool list changed."""
    try:
        session = server.request_context.session
    except LookupError:
        logging.getLogger(__name__).debug("no active request; skipping tools/list_changed")
        return
    await session.send_tool_list_changed()


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


def default_toolset_group(read_only: bool, t: TranslationHelperFunc) -> ToolsetGroup:
    """Every toolset with its tools registered, none enabled yet."""
    group = ToolsetGroup(read_only=read_only)
    for name, description in TOOLSET_DESCRIPTIONS.items():
        group.add_toolset(Toolset(name, t(f"TOOLSET_{name.upper()}_DESCRIPTION", description)))
    for module in _TOOL_MODULES:
        for entry in module.register(t):
            group.get(entry.toolset).add([entry])
    return group


def build_registry(config: ServerConfig, t: TranslationHelperFunc) -> tuple[ToolsetGroup, list[ToolEntry]]:
    """Build the toolset group for *config* plus the dynamic-discovery tools.

    With dynamic toolsets, ``"all"`` is ignored so the client starts small
    and enables toolsets on demand. Unknown names raise
    :class:`ToolsetDoesNotExistError`.
    """
    group = default_toolset_group(config.read_only, t)
    enabled = list(config.enabled_toolsets)
    if config.dynamic_toolsets:
        enabled = [name for name in enabled if name != "all"]
    group.enable_toolsets(enabled)
    group.enable_toolset(ALWAYS_ON)
    extra = dynamic.register(t) if config.dynamic_toolsets else []
    return group, extra


def _active_entries() -> list[ToolEntry]:
    return [*_get_toolset_group().active_tools(), *_dynamic_entries]


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


@server.list_tools()  # type: ignore[untyped-decorator,no-untyped-call]
async def list_tools() -> list[Tool]:
    return [entry.definition for entry in _active_entries()]


@server.call_tool(validate_input=False)  # type: ignore[untyped-decorator]
async def call_tool(name: str, arguments: dict[str, Any]) -> CallToolResult:
    entries = {entry.name: entry for entry in _active_entries()}
    entry = entries.get(name)
    if entry is None:
        return error_result(f"Unknown tool: {name}")

    t0 = time.monotonic()
    with error_tracking() as errors:
        try:
            result = await entry.handler(arguments or {})
        except ParameterError as exc:
            result = error_result(str(exc))
        except Exception:
            if _logger:
                _logger.error("tool_error", extra={"tool": name, "args_data": arguments}, exc_info=True)
            raise
        api_errors, graphql_errors = errors.snapshot()

    duration_ms = round((time.monotonic() - t0) * 1000, 1)
    if _logger:
        _logger.info("tool_call", extra={"tool": name, "args_data": arguments, "duration_ms": duration_ms})
        if api_errors:
            _logger.warning("github_api_errors", extra={"tool": name, "error": [str(e) for e in api_errors]})
        if graphql_errors:
            _logger.warning("github_graphql_errors", extra={"tool": name, "error": [str(e) for e in graphql_errors]})
    return result


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------


@server.list_resources()  # type: ignore[untyped-decorator,no-untyped-call]
async def list_resources() -> list[Resource]:
    return []


@server.list_resource_templates()  # type: ignore[untyped-decorator,no-untyped-call]
async def list_resource_templates() -> list[ResourceTemplate]:
    return resource_templates(_translations)


async def _read_resource(req: types.ReadResourceRequest) -> types.ServerResult:
    # Registered directly so each directory entry keeps its own URI.
    contents = await read_repository_resource(_get_client(), str(req.params.uri))
    return types.ServerResult(types.ReadResourceResult(contents=contents))


server.request_handlers[types.ReadResourceRequest] = _read_resource


# ---------------------------------------------------------------------------
# Completion
# ---------------------------------------------------------------------------


@server.completion()  # type: ignore[untyped-decorator,no-untyped-call]
async def complete(
    ref: PromptReference | ResourceTemplateReference,
    argument: CompletionArgument,
    context: CompletionContext | None,
) -> Completion:
    uri = ref.uri if isinstance(ref, ResourceTemplateReference) else ""
    return await complete_repository_argument(_get_client(), ref.type, uri, argument.name, argument.value)


async def _complete_request(request: types.CompleteRequest) -> types.CompleteResult:
    params = request.params
    completion = await complete(params.ref, params.argument, params.context)
    return types.CompleteResult(completion=completion)


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------

GITHUB_ME_PROMPT = "github_me"


@server.list_prompts()  # type: ignore[untyped-decorator,no-untyped-call]
async def list_prompts() -> list[Prompt]:
    return [Prompt(name=GITHUB_ME_PROMPT, description="GitHub Prompt", arguments=[])]


@server.get_prompt()  # type: ignore[untyped-decorator,no-untyped-call]
async def get_prompt(name: str, arguments: dict[str, str] | None = None) -> GetPromptResult:
    if name != GITHUB_ME_PROMPT:
        msg = f"Unknown prompt: {name}"
        raise ValueError(msg)
    resp = await _get_client().rest("GET", "user")
    return GetPromptResult(
        description="Your GitHub Identity",
        messages=[PromptMessage(role="user", content=TextContent(type="text", text=resp.text))],
    )


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


async def _run(config: ServerConfig) -> None:
    global client, _sanitize_config, _content_filter, _toolset_group, _dynamic_entries, _translations, _logger

    from github_mcp_server.logging import setup_logging

    _logger = setup_logging(config.log_file or None)

    translations = Translations()
    try:
        _toolset_group, _dynamic_entries = build_registry(config, translations)
    except ToolsetDoesNotExistError as exc:
        raise ConfigError(str(exc)) from exc
    _translations = translations
    resource_templates(translations)
    if config.export_translations:
        path = translations.export()
        _logger.info("translations_exported", extra={"args_data": {"path": str(path)}})

    _sanitize_config = SanitizeConfig(disabled=config.disable_content_filtering)
    client = GitHubClient(config.token, config.host or None)
    try:
        try:
            _content_filter = await init_filter(client, config.content_filter_trusted_repo)
        except (ContentFilterInitError, ValueError) as exc:
            raise ConfigError(f"failed to initialize content filter: {exc}") from exc

        _logger.info(
            "mcp_server_start",
            extra={
                "tool": "server",
                "args_data": {
                    "host": client.host,
                    "read_only": config.read_only,
                    "toolsets": config.enabled_toolsets,
                    "dynamic_toolsets": config.dynamic_toolsets,
                },
            },
        )
        print("GitHub MCP Server running on stdio", file=sys.stderr)

        options = server.create_initialization_options(
            notification_options=NotificationOptions(tools_changed=config.dynamic_toolsets),
        )
        async with completion_aware_stdio_server(
            _complete_request, log_commands=config.enable_command_logging
        ) as (read_stream, write_stream):
            await server.run(read_stream, write_stream, options)
    finally:
        await client.aclose()
