"""CLI for the GitHub MCP server.

Usage:
    github-mcp-server stdio                              # Serve MCP over stdio
    github-mcp-server stdio --read-only                  # Hide write tools
    github-mcp-server stdio --toolsets repos,issues      # Only these toolsets
    github-mcp-server stdio --config server.toml         # Defaults from a TOML file
    github-mcp-server tools2md --filepath tools.md       # Markdown tool catalogue
"""

from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path
from typing import Any

import click

from github_mcp_server import __version__
from github_mcp_server.config import ConfigError, ServerConfig, load_config
from github_mcp_server.translations import null_translation


@click.group()
@click.version_option(version=__version__, prog_name="github-mcp-server")
def cli() -> None:
    """GitHub MCP server: GitHub tools for MCP clients."""


@cli.command()
@click.option("--toolsets", "enabled_toolsets", default=None, help="Comma-separated toolsets to enable (default: all)")
@click.option("--dynamic-toolsets/--no-dynamic-toolsets", default=None, help="Let the client enable toolsets at runtime")
@click.option("--read-only/--no-read-only", default=None, help="Restrict the server to read-only operations")
@click.option("--gh-host", "host", default=None, help="GitHub hostname (GitHub Enterprise etc.)")
@click.option("--log-file", default=None, type=click.Path(dir_okay=False), help="Path to log file")
@click.option(
    "--enable-command-logging/--no-enable-command-logging",
    default=None,
    help="Log every JSON-RPC request and response",
)
@click.option(
    "--export-translations/--no-export-translations", default=None, help="Save translations to a JSON file"
)
@click.option("--content-filter-trusted-repo", default=None, help="owner/repo whose collaborators are trusted authors")
@click.option(
    "--disable-content-filtering/--no-disable-content-filtering",
    default=None,
    help="Return user content without sanitizing it",
)
@click.option(
    "--config",
    "config_file",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="TOML file with a [server] table",
)
def stdio(config_file: Path | None, **flags: Any) -> None:
    """Start the MCP server on stdin/stdout."""
    from github_mcp_server.mcp_server import _run

    try:
        config = load_config(flags, os.environ, config_file)
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    try:
        asyncio.run(_run(config))
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        pass


@cli.command()
@click.option("--filepath", default=None, type=click.Path(dir_okay=False), help="Write to this file instead of stdout")
@click.option("--read-only", is_flag=True, help="Only document read-only tools")
def tools2md(filepath: str | None, read_only: bool) -> None:
    """Write the Markdown catalogue of every tool."""
    from github_mcp_server.mcp_server import build_registry
    from github_mcp_server.tools2md import convert

    group, extra = build_registry(ServerConfig(read_only=read_only, dynamic_toolsets=True), null_translation)
    group.enable_toolsets(["all"])
    markdown = convert([*group.active_tools(), *extra])
    if filepath:
        Path(filepath).write_text(markdown, encoding="utf-8")
        click.echo(f"Wrote {filepath}")
    else:
        click.echo(markdown, nl=False)
