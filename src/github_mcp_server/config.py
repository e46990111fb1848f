"""Server configuration: CLI flags > environment > TOML file.

The TOML file (``--config``) holds a ``[server]`` table whose keys mirror the
:class:`ServerConfig` field names, e.g.::

    [server]
    read_only = true
    toolsets = ["repos", "issues"]
    host = "github.example.com"
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from github_mcp_server.toolsets import DEFAULT_TOOLSETS

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})

# Environment variable -> ServerConfig field. Earlier entries win.
_ENV_KEYS: tuple[tuple[str, str], ...] = (
    ("GITHUB_PERSONAL_ACCESS_TOKEN", "token"),
    ("GH_HOST", "host"),
    ("GITHUB_HOST", "host"),
    ("GITHUB_READ_ONLY", "read_only"),
    ("GITHUB_TOOLSETS", "enabled_toolsets"),
    ("GITHUB_DYNAMIC_TOOLSETS", "dynamic_toolsets"),
    ("GITHUB_EXPORT_TRANSLATIONS", "export_translations"),
    ("GITHUB_CONTENT_FILTER_TRUSTED_REPO", "content_filter_trusted_repo"),
    ("GITHUB_DISABLE_CONTENT_FILTERING", "disable_content_filtering"),
    ("GITHUB_LOG_FILE", "log_file"),
    ("GITHUB_ENABLE_COMMAND_LOGGING", "enable_command_logging"),
)

# File keys that differ from the field names.
_FILE_ALIASES = {"toolsets": "enabled_toolsets", "gh_host": "host"}


class ConfigError(Exception):
    """Configuration is missing or malformed; the server cannot start."""


@dataclass
class ServerConfig:
    token: str = ""
    host: str = ""
    read_only: bool = False
    enabled_toolsets: list[str] = field(default_factory=lambda: list(DEFAULT_TOOLSETS))
    dynamic_toolsets: bool = False
    export_translations: bool = False
    content_filter_trusted_repo: str = ""
    disable_content_filtering: bool = False
    log_file: str = ""
    enable_command_logging: bool = False


_FIELD_TYPES = {f.name: f.type for f in fields(ServerConfig)}


def parse_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigError(f"invalid boolean for {name}: {value!r}")


def parse_toolsets(value: Any) -> list[str]:
    """Accept a comma-separated string or a list of names."""
    items = value.split(",") if isinstance(value, str) else list(value)
    return [str(item).strip() for item in items if str(item).strip()]


def _coerce(name: str, value: Any) -> Any:
    kind = _FIELD_TYPES[name]
    if kind == "bool":
        return parse_bool(value, name)
    if kind == "list[str]":
        return parse_toolsets(value)
    return str(value)


def _read_file(config_file: Path) -> dict[str, Any]:
    try:
        with config_file.open("rb") as fh:
            data = tomllib.load(fh)
    except FileNotFoundError as exc:
        raise ConfigError(f"config file not found: {config_file}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid TOML in {config_file}: {exc}") from exc
    table = data.get("server", {})
    if not isinstance(table, dict):
        raise ConfigError(f"[server] in {config_file} must be a table")
    values: dict[str, Any] = {}
    for key, value in table.items():
        name = _FILE_ALIASES.get(key, key)
        if name not in _FIELD_TYPES:
            raise ConfigError(f"unknown key in [server]: {key}")
        values[name] = _coerce(name, value)
    return values


def _read_env(environ: Mapping[str, str]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for var, name in _ENV_KEYS:
        if name in values or var not in environ:
            continue
        raw = environ[var]
        if name == "host" and not raw:
            continue
        values[name] = _coerce(name, raw)
    return values


def load_config(
    flags: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
    config_file: Path | None = None,
    *,
    require_token: bool = True,
) -> ServerConfig:
    """Merge the three sources; ``None`` flag values mean "not given"."""
    merged: dict[str, Any] = {}
    if config_file is not None:
        merged.update(_read_file(config_file))
    merged.update(_read_env(environ or {}))
    for name, value in (flags or {}).items():
        if value is None:
            continue
        if name not in _FIELD_TYPES:
            raise ConfigError(f"unknown option: {name}")
        merged[name] = _coerce(name, value)

    cfg = ServerConfig(**merged)
    cfg.token = cfg.token.strip()
    if require_token and not cfg.token:
        raise ConfigError("GITHUB_PERSONAL_ACCESS_TOKEN not set")
    if not cfg.enabled_toolsets:
        cfg.enabled_toolsets = list(DEFAULT_TOOLSETS)
    return cfg
