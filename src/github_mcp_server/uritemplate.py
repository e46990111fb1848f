"""Minimal RFC 6570 matcher for the ``repo://`` resource templates.

Supports literal text, simple ``{name}`` placeholders (one path segment
each) and a single trailing ``{/name*}`` path-segment explosion. A match
returns one string per placeholder and a list of segments for the tail.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from urllib.parse import unquote

_EXPRESSION = re.compile(r"\{(/?)([A-Za-z0-9_]+)(\*?)\}")


class TemplateError(ValueError):
    """The template uses syntax this matcher does not support."""


@dataclass(frozen=True)
class UriTemplate:
    template: str
    variables: tuple[str, ...] = field(init=False)
    tail: str | None = field(init=False)
    _pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        parts: list[str] = []
        names: list[str] = []
        tail: str | None = None
        pos = 0
        for m in _EXPRESSION.finditer(self.template):
            if tail is not None:
                raise TemplateError(f"path expansion must be the last expression in {self.template!r}")
            parts.append(re.escape(self.template[pos : m.start()]))
            slash, name, explode = m.groups()
            if name in names:
                raise TemplateError(f"duplicate variable {name!r} in {self.template!r}")
            names.append(name)
            if slash and explode:
                tail = name
                parts.append(f"(?:/(?P<{name}>.*))?")
            elif slash or explode:
                raise TemplateError(f"unsupported expression {m.group(0)!r} in {self.template!r}")
            else:
                parts.append(f"(?P<{name}>[^/]+)")
            pos = m.end()
        if tail is not None and pos != len(self.template):
            raise TemplateError(f"path expansion must end the template {self.template!r}")
        parts.append(re.escape(self.template[pos:]))
        object.__setattr__(self, "variables", tuple(names))
        object.__setattr__(self, "tail", tail)
        object.__setattr__(self, "_pattern", re.compile("".join(parts) + r"\Z"))

    def match(self, uri: str) -> dict[str, str | list[str]] | None:
        """Return the variable bindings for *uri*, or ``None`` when it does not fit."""
        m = self._pattern.match(uri)
        if m is None:
            return None
        result: dict[str, str | list[str]] = {}
        for name in self.variables:
            value = m.group(name)
            if name == self.tail:
                result[name] = [unquote(s) for s in value.split("/") if s] if value else []
            else:
                result[name] = unquote(value)
        return result
