"""Render the tool catalogue as Markdown, grouped by category."""

from __future__ import annotations

from collections.abc import Iterable

from github_mcp_server.toolsets import ToolEntry, by_category


def _parameter_line(name: str, schema: dict[str, object], required: set[str]) -> str:
    description = schema.get("description", "")
    kind = schema.get("type", "")
    flag = "required" if name in required else "optional"
    return f" - `{name}`: {description} ({kind}, {flag})\n"


def convert(tools: Iterable[ToolEntry]) -> str:
    """Return the Markdown catalogue for *tools*; ``""`` when there are none.

    Categories follow the fixed presentation order; tools within a category
    and their parameters are listed alphabetically, so the output depends
    only on the set of tools.
    """
    groups = by_category(tools)
    if not groups:
        return ""

    sections: list[str] = []
    for category, entries in groups:
        blocks: list[str] = []
        for entry in entries:
            schema = entry.definition.inputSchema
            properties: dict[str, dict[str, object]] = schema.get("properties") or {}
            required = set(schema.get("required") or [])
            lines = [f"- **{entry.name}** - {entry.definition.description}\n"]
            if not properties:
                lines.append(" - No parameters required\n")
            else:
                lines.extend(_parameter_line(name, properties[name], required) for name in sorted(properties))
            blocks.append("".join(lines))
        sections.append(f"### {category.value}\n\n" + "\n".join(blocks))
    return "## Tools\n\n" + "\n".join(sections)
