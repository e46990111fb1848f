"""Overridable tool titles and descriptions.

Tool modules call ``t(key, default)`` for every user-facing string. An
override comes from the ``GITHUB_MCP_<KEY>`` environment variable, then from
``github-mcp-server-config.json`` in the working directory, then the
default. ``export`` writes every key seen so far back to that file.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from collections.abc import Callable, Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "github-mcp-server-config.json"
ENV_PREFIX = "GITHUB_MCP_"

TranslationHelperFunc = Callable[[str, str], str]


def null_translation(_key: str, default: str) -> str:
    return default


class Translations:
    """Callable translation helper that remembers every key it served."""

    def __init__(self, *, environ: Mapping[str, str] | None = None, config_path: Path | None = None) -> None:
        self._environ = os.environ if environ is None else environ
        self._path = config_path or Path.cwd() / CONFIG_FILENAME
        self._overrides = self._load(self._path)
        self._used: dict[str, str] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _load(path: Path) -> dict[str, str]:
        if not path.is_file():
            return {}
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("ignoring unreadable translations file %s: %s", path, exc)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def __call__(self, key: str, default: str) -> str:
        key = key.upper()
        value = self._environ.get(ENV_PREFIX + key)
        if value is None:
            value = self._overrides.get(key, default)
        with self._lock:
            self._used[key] = value
        return value

    @property
    def used(self) -> dict[str, str]:
        with self._lock:
            return dict(self._used)

    def export(self, path: Path | None = None) -> Path:
        """Write every key served so far (with its effective value) as JSON."""
        target = path or self._path
        target.write_text(json.dumps(self.used, indent=2, sort_keys=True) + "\n", encoding="utf-8")
        return target
