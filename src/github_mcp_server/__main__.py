"""Allow ``python -m github_mcp_server``."""

from github_mcp_server.cli import cli

cli()
