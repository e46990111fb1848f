"""Tests for overridable tool strings."""

from __future__ import annotations

import json
from pathlib import Path

from github_mcp_server.translations import CONFIG_FILENAME, Translations, null_translation


class TestTranslations:
    def test_null_translation_returns_default(self) -> None:
        assert null_translation("ANY_KEY", "fallback") == "fallback"

    def test_default_when_no_override(self, tmp_path: Path) -> None:
        t = Translations(environ={}, config_path=tmp_path / CONFIG_FILENAME)
        assert t("TOOL_GET_ME_DESCRIPTION", "Get me") == "Get me"

    def test_environment_override_uses_upper_key(self, tmp_path: Path) -> None:
        t = Translations(
            environ={"GITHUB_MCP_TOOL_GET_ME_DESCRIPTION": "Who am I"}, config_path=tmp_path / CONFIG_FILENAME
        )
        assert t("tool_get_me_description", "Get me") == "Who am I"

    def test_file_override(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text(json.dumps({"TOOL_GET_ME_DESCRIPTION": "From file"}))
        t = Translations(environ={}, config_path=path)
        assert t("TOOL_GET_ME_DESCRIPTION", "Get me") == "From file"

    def test_environment_beats_file(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text(json.dumps({"KEY": "file"}))
        t = Translations(environ={"GITHUB_MCP_KEY": "env"}, config_path=path)
        assert t("KEY", "default") == "env"

    def test_unreadable_file_is_ignored(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("{not json")
        t = Translations(environ={}, config_path=path)
        assert t("KEY", "default") == "default"

    def test_export_writes_used_keys(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        t = Translations(environ={"GITHUB_MCP_B": "override"}, config_path=path)
        t("b", "bee")
        t("A", "ay")

        written = t.export()

        assert written == path
        assert json.loads(path.read_text()) == {"A": "ay", "B": "override"}
        assert list(t.used) == ["B", "A"]
