"""MCP tools for the global GitHub security advisory database."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from mcp.types import CallToolResult

from github_mcp_server.mcp_tools.common import _rest, _result
from github_mcp_server.params import optional, optional_ok, optional_string_array, required
from github_mcp_server.toolsets import Access, Category, ToolEntry, tool
from github_mcp_server.translations import TranslationHelperFunc

_ECOSYSTEMS = ["actions", "composer", "erlang", "go", "maven", "npm", "nuget", "other", "pip", "pub", "rubygems", "rust"]

# Tool argument -> REST query parameter.
_STRING_FILTERS = {
    "ghsaId": "ghsa_id",
    "type": "type",
    "cveId": "cve_id",
    "ecosystem": "ecosystem",
    "severity": "severity",
    "affects": "affects",
    "published": "published",
    "updated": "updated",
    "modified": "modified",
}


def register(t: TranslationHelperFunc) -> list[ToolEntry]:
    return [
        ToolEntry(
            tool(
                "list_global_security_advisories",
                t("TOOL_LIST_GLOBAL_SECURITY_ADVISORIES_DESCRIPTION", "List global security advisories from GitHub."),
                title=t("TOOL_LIST_GLOBAL_SECURITY_ADVISORIES_USER_TITLE", "List global security advisories"),
                read_only=True,
                properties={
                    "ghsaId": {
                        "type": "string",
                        "description": "Filter by GitHub Security Advisory ID (format: GHSA-xxxx-xxxx-xxxx).",
                    },
                    "type": {"type": "string", "description": "Advisory type.", "enum": ["reviewed", "malware", "unreviewed"]},
                    "cveId": {"type": "string", "description": "Filter by CVE ID."},
                    "ecosystem": {"type": "string", "description": "Filter by package ecosystem.", "enum": _ECOSYSTEMS},
                    "severity": {
                        "type": "string",
                        "description": "Filter by severity.",
                        "enum": ["unknown", "low", "medium", "high", "critical"],
                    },
                    "cwes": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": 'Filter by Common Weakness Enumeration IDs (e.g. ["79", "284", "22"]).',
                    },
                    "isWithdrawn": {"type": "boolean", "description": "Whether to only return withdrawn advisories."},
                    "affects": {
                        "type": "string",
                        "description": 'Filter advisories by affected package or version (e.g. "package1,package2@1.0.0").',
                    },
                    "published": {
                        "type": "string",
                        "description": "Filter by publish date or date range (ISO 8601 date or range).",
                    },
                    "updated": {
                        "type": "string",
                        "description": "Filter by update date or date range (ISO 8601 date or range).",
                    },
                    "modified": {
                        "type": "string",
                        "description": "Filter by publish or update date or date range (ISO 8601 date or range).",
                    },
                },
            ),
            _handle_list_global_security_advisories,
            Category.SECURITY_ADVISORIES,
            Access.READ,
            "security_advisories",
        ),
        ToolEntry(
            tool(
                "get_global_security_advisory",
                t("TOOL_GET_GLOBAL_SECURITY_ADVISORY_DESCRIPTION", "Get a global security advisory"),
                title=t("TOOL_GET_GLOBAL_SECURITY_ADVISORY_USER_TITLE", "Get a global security advisory"),
                read_only=True,
                properties={
                    "ghsaId": {
                        "type": "string",
                        "description": "GitHub Security Advisory ID (format: GHSA-xxxx-xxxx-xxxx).",
                    },
                },
                required=["ghsaId"],
            ),
            _handle_get_global_security_advisory,
            Category.SECURITY_ADVISORIES,
            Access.READ,
            "security_advisories",
        ),
    ]


async def _handle_list_global_security_advisories(arguments: dict[str, Any]) -> CallToolResult:
    params: dict[str, Any] = {query: optional(arguments, name, str) for name, query in _STRING_FILTERS.items()}
    cwes = optional_string_array(arguments, "cwes")
    if cwes:
        params["cwes"] = ",".join(cwes)
    withdrawn, present = optional_ok(arguments, "isWithdrawn", bool)
    if present:
        params["is_withdrawn"] = "true" if withdrawn else "false"

    advisories, err = await _rest("GET", "advisories", "failed to list advisories", params=params)
    if err:
        return err
    return _result(advisories)


async def _handle_get_global_security_advisory(arguments: dict[str, Any]) -> CallToolResult:
    ghsa_id = required(arguments, "ghsaId", str)

    advisory, err = await _rest("GET", f"advisories/{quote(ghsa_id, safe='')}", "failed to get advisory")
    if err:
        return err
    return _result(advisory)
