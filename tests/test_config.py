"""Tests for configuration loading: flags > environment > TOML file."""

from __future__ import annotations

from pathlib import Path

import pytest

from github_mcp_server.config import ConfigError, ServerConfig, load_config, parse_bool, parse_toolsets


class TestParsers:
    @pytest.mark.parametrize("raw", ["1", "true", "TRUE", " yes ", "on"])
    def test_truthy(self, raw: str) -> None:
        assert parse_bool(raw, "x") is True

    @pytest.mark.parametrize("raw", ["0", "false", "no", "off", ""])
    def test_falsy(self, raw: str) -> None:
        assert parse_bool(raw, "x") is False

    def test_invalid_bool(self) -> None:
        with pytest.raises(ConfigError, match="invalid boolean for read_only"):
            parse_bool("maybe", "read_only")

    def test_toolsets_from_string_and_list(self) -> None:
        assert parse_toolsets("repos, issues,,") == ["repos", "issues"]
        assert parse_toolsets(["repos", " users "]) == ["repos", "users"]


class TestLoadConfig:
    def test_defaults(self) -> None:
        cfg = load_config({}, {"GITHUB_PERSONAL_ACCESS_TOKEN": " ghp_x "})
        assert cfg == ServerConfig(token="ghp_x")
        assert cfg.enabled_toolsets == ["all"]

    def test_missing_token(self) -> None:
        with pytest.raises(ConfigError, match="GITHUB_PERSONAL_ACCESS_TOKEN not set"):
            load_config({}, {})

    def test_token_optional_when_not_required(self) -> None:
        assert load_config({}, {}, require_token=False).token == ""

    def test_environment_values(self) -> None:
        cfg = load_config(
            {},
            {
                "GITHUB_PERSONAL_ACCESS_TOKEN": "t",
                "GITHUB_HOST": "ghe.example.com",
                "GITHUB_READ_ONLY": "1",
                "GITHUB_TOOLSETS": "repos,issues",
                "GITHUB_DYNAMIC_TOOLSETS": "true",
            },
        )
        assert cfg.host == "ghe.example.com"
        assert cfg.read_only is True
        assert cfg.enabled_toolsets == ["repos", "issues"]
        assert cfg.dynamic_toolsets is True

    def test_gh_host_wins_over_github_host(self) -> None:
        cfg = load_config({}, {"GITHUB_PERSONAL_ACCESS_TOKEN": "t", "GH_HOST": "a.example", "GITHUB_HOST": "b.example"})
        assert cfg.host == "a.example"

    def test_empty_gh_host_falls_through(self) -> None:
        cfg = load_config({}, {"GITHUB_PERSONAL_ACCESS_TOKEN": "t", "GH_HOST": "", "GITHUB_HOST": "b.example"})
        assert cfg.host == "b.example"

    def test_flags_beat_environment(self) -> None:
        cfg = load_config(
            {"read_only": False, "enabled_toolsets": "users", "host": None},
            {"GITHUB_PERSONAL_ACCESS_TOKEN": "t", "GITHUB_READ_ONLY": "true", "GITHUB_HOST": "ghe.example.com"},
        )
        assert cfg.read_only is False
        assert cfg.enabled_toolsets == ["users"]
        assert cfg.host == "ghe.example.com"

    def test_empty_toolsets_fall_back_to_default(self) -> None:
        cfg = load_config({"enabled_toolsets": ""}, {"GITHUB_PERSONAL_ACCESS_TOKEN": "t"})
        assert cfg.enabled_toolsets == ["all"]

    def test_unknown_flag(self) -> None:
        with pytest.raises(ConfigError, match="unknown option: colour"):
            load_config({"colour": "blue"}, {"GITHUB_PERSONAL_ACCESS_TOKEN": "t"})


class TestConfigFile:
    def test_file_is_lowest_precedence(self, tmp_path: Path) -> None:
        path = tmp_path / "server.toml"
        path.write_text(
            '[server]\ntoken = "from-file"\nread_only = true\ntoolsets = ["repos"]\ngh_host = "file.example"\n'
        )
        cfg = load_config({}, {"GITHUB_PERSONAL_ACCESS_TOKEN": "from-env"}, path)
        assert cfg.token == "from-env"
        assert cfg.read_only is True
        assert cfg.enabled_toolsets == ["repos"]
        assert cfg.host == "file.example"

    def test_token_from_file(self, tmp_path: Path) -> None:
        path = tmp_path / "server.toml"
        path.write_text('[server]\ntoken = "from-file"\n')
        assert load_config({}, {}, path).token == "from-file"

    def test_unknown_key(self, tmp_path: Path) -> None:
        path = tmp_path / "server.toml"
        path.write_text("[server]\nport = 8080\n")
        with pytest.raises(ConfigError, match="unknown key in \\[server\\]: port"):
            load_config({}, {"GITHUB_PERSONAL_ACCESS_TOKEN": "t"}, path)

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "server.toml"
        path.write_text("[server\n")
        with pytest.raises(ConfigError, match="invalid TOML"):
            load_config({}, {"GITHUB_PERSONAL_ACCESS_TOKEN": "t"}, path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="config file not found"):
            load_config({}, {"GITHUB_PERSONAL_ACCESS_TOKEN": "t"}, tmp_path / "nope.toml")

    def test_server_must_be_table(self, tmp_path: Path) -> None:
        path = tmp_path / "server.toml"
        path.write_text('server = "x"\n')
        with pytest.raises(ConfigError, match="must be a table"):
            load_config({}, {"GITHUB_PERSONAL_ACCESS_TOKEN": "t"}, path)
