"""CLI integration tests using Click's CliRunner."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

from github_mcp_server import __version__
from github_mcp_server.cli import cli
from github_mcp_server.config import ConfigError, ServerConfig


class TestVersion:
    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestStdio:
    def test_missing_token_exits_1(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["stdio"], env={"GITHUB_PERSONAL_ACCESS_TOKEN": ""})
        assert result.exit_code == 1
        assert "GITHUB_PERSONAL_ACCESS_TOKEN not set" in result.output

    def test_flags_reach_the_server(self, cli_runner: CliRunner) -> None:
        seen: list[ServerConfig] = []

        async def fake_run(config: ServerConfig) -> None:
            seen.append(config)

        with patch("github_mcp_server.mcp_server._run", fake_run):
            result = cli_runner.invoke(
                cli,
                ["stdio", "--toolsets", "repos,issues", "--read-only", "--gh-host", "ghe.example.com"],
                env={"GITHUB_PERSONAL_ACCESS_TOKEN": "ghp_test"},
            )

        assert result.exit_code == 0, result.output
        (config,) = seen
        assert config.token == "ghp_test"
        assert config.enabled_toolsets == ["repos", "issues"]
        assert config.read_only is True
        assert config.host == "ghe.example.com"
        assert config.dynamic_toolsets is False

    def test_startup_config_error_exits_1(self, cli_runner: CliRunner) -> None:
        async def fake_run(config: ServerConfig) -> None:
            raise ConfigError("toolset wiki does not exist")

        with patch("github_mcp_server.mcp_server._run", fake_run):
            result = cli_runner.invoke(
                cli, ["stdio", "--toolsets", "wiki"], env={"GITHUB_PERSONAL_ACCESS_TOKEN": "ghp_test"}
            )

        assert result.exit_code == 1
        assert "Error: toolset wiki does not exist" in result.output

    def test_config_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "server.toml"
        path.write_text('[server]\ntoken = "from-file"\ndynamic_toolsets = true\n')
        seen: list[ServerConfig] = []

        async def fake_run(config: ServerConfig) -> None:
            seen.append(config)

        with patch("github_mcp_server.mcp_server._run", fake_run):
            result = cli_runner.invoke(
                cli, ["stdio", "--config", str(path)], env={"GITHUB_PERSONAL_ACCESS_TOKEN": None}
            )

        assert result.exit_code == 0, result.output
        assert seen[0].token == "from-file"
        assert seen[0].dynamic_toolsets is True


class TestTools2Md:
    def test_stdout(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["tools2md"])
        assert result.exit_code == 0
        assert result.output.startswith("## Tools\n\n### Users\n\n")
        assert "- **get_me** - " in result.output
        assert "- **enable_toolset** - " in result.output

    def test_read_only_omits_write_tools(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["tools2md", "--read-only"])
        assert result.exit_code == 0
        assert "- **get_issue** - " in result.output
        assert "- **create_issue** - " not in result.output

    def test_filepath(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        target = tmp_path / "tools.md"
        result = cli_runner.invoke(cli, ["tools2md", "--filepath", str(target)])
        assert result.exit_code == 0
        assert f"Wrote {target}" in result.output
        assert "### Pull Requests" in target.read_text()
