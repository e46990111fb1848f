"""Tool registry: categories, access classes, toolsets.

Every tool module under :mod:`github_mcp_server.mcp_tools` returns a list of
:class:`ToolEntry` from its ``register(t)`` function. A
:class:`ToolsetGroup` collects them by toolset name and decides which are
active for the configured toolsets and read-only mode.
"""

from __future__ import annotations

import enum
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from mcp.types import CallToolResult, Tool, ToolAnnotations

ToolHandler = Callable[[dict[str, Any]], Awaitable[CallToolResult]]


class Category(enum.StrEnum):
    USERS = "Users"
    ISSUES = "Issues"
    PULL_REQUESTS = "Pull Requests"
    REPOSITORIES = "Repositories"
    SEARCH = "Search"
    CODE_SCANNING = "Code Scanning"
    DEPENDABOT = "Dependabot"
    DISCUSSIONS = "Discussions"
    GISTS = "Gists"
    NOTIFICATIONS = "Notifications"
    SECRET_SCANNING = "Secret Scanning"
    SECURITY_ADVISORIES = "Security Advisories"
    TOOLSETS = "Toolsets"


# Fixed presentation order; everything else follows alphabetically.
_CATEGORY_ORDER: tuple[Category, ...] = (
    Category.USERS,
    Category.ISSUES,
    Category.PULL_REQUESTS,
    Category.REPOSITORIES,
    Category.SEARCH,
    Category.CODE_SCANNING,
)


def category_sort_key(category: Category) -> tuple[int, str]:
    try:
        return _CATEGORY_ORDER.index(category), ""
    except ValueError:
        return len(_CATEGORY_ORDER), category.value


class Access(enum.StrEnum):
    READ = "read"
    WRITE = "write"


@dataclass(frozen=True)
class ToolEntry:
    definition: Tool
    handler: ToolHandler
    category: Category
    access: Access
    toolset: str = ""

    @property
    def name(self) -> str:
        return self.definition.name


def tool(
    name: str,
    description: str,
    *,
    title: str,
    read_only: bool,
    destructive: bool | None = None,
    properties: dict[str, Any] | None = None,
    required: Sequence[str] = (),
) -> Tool:
    """Build a ``Tool`` definition with annotations and an object schema."""
    schema: dict[str, Any] = {"type": "object", "properties": properties or {}}
    if required:
        schema["required"] = list(required)
    return Tool(
        name=name,
        description=description,
        inputSchema=schema,
        annotations=ToolAnnotations(title=title, readOnlyHint=read_only, destructiveHint=destructive),
    )


def by_category(tools: Iterable[ToolEntry]) -> list[tuple[Category, list[ToolEntry]]]:
    """Group *tools* by category in presentation order, sorted by name within."""
    groups: dict[Category, list[ToolEntry]] = {}
    for entry in tools:
        groups.setdefault(entry.category, []).append(entry)
    return [(cat, sorted(groups[cat], key=lambda e: e.name)) for cat in sorted(groups, key=category_sort_key)]


# ---------------------------------------------------------------------------
# Toolsets
# ---------------------------------------------------------------------------


class ToolsetDoesNotExistError(ValueError):
    def __init__(self, name: str) -> None:
        super().__init__(f"toolset {name} does not exist")
        self.name = name


@dataclass
class Toolset:
    name: str
    description: str
    enabled: bool = False
    read_only: bool = False
    read_tools: list[ToolEntry] = field(default_factory=list)
    write_tools: list[ToolEntry] = field(default_factory=list)

    def add(self, entries: Iterable[ToolEntry]) -> Toolset:
        for entry in entries:
            if entry.access is Access.READ:
                self.read_tools.append(entry)
            else:
                self.write_tools.append(entry)
        return self

    def active_tools(self) -> list[ToolEntry]:
        """Tools this toolset exposes; write tools are withheld in read-only mode."""
        if not self.enabled:
            return []
        if self.read_only:
            return list(self.read_tools)
        return [*self.read_tools, *self.write_tools]

    def all_tools(self) -> list[ToolEntry]:
        if self.read_only:
            return list(self.read_tools)
        return [*self.read_tools, *self.write_tools]


@dataclass
class ToolsetGroup:
    read_only: bool = False
    toolsets: dict[str, Toolset] = field(default_factory=dict)
    everything_on: bool = False

    def add_toolset(self, toolset: Toolset) -> None:
        if self.read_only:
            toolset.read_only = True
        self.toolsets[toolset.name] = toolset

    def is_enabled(self, name: str) -> bool:
        if self.everything_on:
            return True
        toolset = self.toolsets.get(name)
        return toolset is not None and toolset.enabled

    def enable_toolset(self, name: str) -> None:
        toolset = self.toolsets.get(name)
        if toolset is None:
            raise ToolsetDoesNotExistError(name)
        toolset.enabled = True

    def enable_toolsets(self, names: Iterable[str]) -> None:
        """Enable each named toolset; ``"all"`` switches every toolset on."""
        for name in names:
            if name == "all":
                self.everything_on = True
                break
            self.enable_toolset(name)
        if self.everything_on:
            for toolset in self.toolsets.values():
                toolset.enabled = True

    def active_tools(self) -> list[ToolEntry]:
        entries: list[ToolEntry] = []
        for toolset in self.toolsets.values():
            entries.extend(toolset.active_tools())
        return entries

    def get(self, name: str) -> Toolset:
        toolset = self.toolsets.get(name)
        if toolset is None:
            raise ToolsetDoesNotExistError(name)
        return toolset


TOOLSET_DESCRIPTIONS: dict[str, str] = {
    "context": "Tools that provide context about the current user and GitHub context you are operating in",
    "repos": "GitHub Repository related tools",
    "issues": "GitHub Issues related tools",
    "users": "GitHub User related tools",
    "pull_requests": "GitHub Pull Request related tools",
    "code_scanning": "Code scanning alerts",
    "dependabot": "Dependabot alerts",
    "secret_scanning": "Secret scanning alerts",
    "notifications": "GitHub Notifications related tools",
    "discussions": "GitHub Discussions related tools",
    "gists": "GitHub Gist related tools",
    "security_advisories": "Global security advisories",
}

DEFAULT_TOOLSETS: tuple[str, ...] = ("all",)
