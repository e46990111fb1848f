"""GitHub MCP server: GitHub issues, pull requests and repositories as MCP tools."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("github-mcp-server")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = ["__version__"]
