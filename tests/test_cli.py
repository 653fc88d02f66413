"""Tests for SVGLint CLI."""
from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

import svglint.cli as cli_mod
from svglint.cli import cli
from svglint.config import normalize_config
from svglint.constants import ExitCode, __version__
from svglint.types import NormalizedConfig, SVGLintConfig

from conftest import BROKEN_SVG, VALID_SVG

_RC: str = """
[rules.elm]
title = true
"""


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A working directory with a config, a passing and a failing icon."""
    (tmp_path / ".svglintrc.toml").write_text(_RC)
    (tmp_path / "good.svg").write_text(VALID_SVG)
    (tmp_path / "bad.svg").write_text("<svg><rect/></svg>")
    (tmp_path / "broken.svg").write_text(BROKEN_SVG)
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_help_shows_usage(self) -> None:
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "SVGLint" in result.output
        assert "--config" in result.output
        assert "--ci" in result.output

    def test_version_shows_version(self) -> None:
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output


class TestLinting:
    def test_passing_file(self, project: Path) -> None:
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["good.svg"])

        assert result.exit_code == ExitCode.SUCCESS
        assert "good.svg: passing" in result.output
        assert "Linted 1 file: 1 passing" in result.output

    def test_failing_file(self, project: Path) -> None:
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["good.svg", "bad.svg"])

        assert result.exit_code == ExitCode.VIOLATIONS
        assert "bad.svg: error" in result.output
        assert "Expected element 'title', none found" in result.output

    def test_glob_input(self, project: Path) -> None:
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["*.svg"])

        assert result.exit_code == ExitCode.VIOLATIONS
        assert "Linted 2 files" in result.output
        assert "Skipped 1 unparsable file." in result.output

    def test_unparsable_file_only(self, project: Path) -> None:
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["broken.svg"])

        assert result.exit_code == ExitCode.SUCCESS
        assert "broken.svg" in result.output

    def test_no_files(self, project: Path) -> None:
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, [])

        assert result.exit_code == ExitCode.SUCCESS
        assert "No files to lint." in result.output

    def test_ignore_from_config(self, project: Path) -> None:
        (project / ".svglintrc.toml").write_text('ignore = ["bad.svg"]\n' + _RC)
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["good.svg", "bad.svg"])

        assert result.exit_code == ExitCode.SUCCESS
        assert "bad.svg" not in result.output

    def test_ci_mode(self, project: Path) -> None:
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["--ci", "good.svg", "bad.svg"])

        assert result.exit_code == ExitCode.VIOLATIONS
        assert result.output.index("good.svg: passing") < result.output.index(
            "bad.svg: error"
        )

    def test_json_format(self, project: Path) -> None:
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["--format", "json", "bad.svg"])

        assert result.exit_code == ExitCode.VIOLATIONS
        data = json.loads(result.output)
        assert data["lintings"][0]["state"] == "error"


class TestConfiguration:
    def test_explicit_config(self, project: Path) -> None:
        other: Path = project / "other.toml"
        other.write_text("[rules.elm]\ndesc = true\n")
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["--config", str(other), "good.svg"])

        assert result.exit_code == ExitCode.VIOLATIONS
        assert "'desc'" in result.output

    def test_missing_config(self, project: Path) -> None:
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["--config", "nope.toml", "good.svg"])

        assert result.exit_code == ExitCode.CONFIGURATION
        assert "Configuration file not found" in result.output

    def test_invalid_config(self, project: Path) -> None:
        (project / ".svglintrc.toml").write_text("timeout = -3\n")
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["good.svg"])

        assert result.exit_code == ExitCode.CONFIGURATION
        assert "timeout must be a positive number" in result.output

    def test_invalid_rule_config(self, project: Path) -> None:
        (project / ".svglintrc.toml").write_text('[rules]\nelm = "title"\n')
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["good.svg"])

        assert result.exit_code == ExitCode.CONFIGURATION

    def test_unknown_rule_is_not_fatal(self, project: Path) -> None:
        (project / ".svglintrc.toml").write_text("[rules.nope]\nx = 1\n" + _RC)
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["good.svg"])

        assert result.exit_code == ExitCode.SUCCESS

    def test_timeout_option(self, project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        seen: list[float | None] = []
        original = cli_mod.normalize_config

        def _spy(config: SVGLintConfig) -> NormalizedConfig:
            seen.append(config.timeout)
            return original(config)

        monkeypatch.setattr(cli_mod, "normalize_config", _spy)
        runner: CliRunner = CliRunner()
        runner.invoke(cli, ["--timeout", "1.5", "good.svg"])

        assert seen == [1.5]

    def test_tool_table_of_wrong_type(self, project: Path) -> None:
        (project / "pyproject.toml").write_text("[tool]\nsvglint = 1\n")
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["-c", "pyproject.toml", "good.svg"])

        assert result.exit_code == ExitCode.CONFIGURATION
        assert "[tool.svglint] must be a table" in result.output

    def test_non_table_tool_in_discovered_pyproject(self, project: Path) -> None:
        (project / ".svglintrc.toml").unlink()
        (project / "pyproject.toml").write_text("tool = 1\n")
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["good.svg"])

        assert result.exit_code in (ExitCode.SUCCESS, ExitCode.VIOLATIONS)
        assert result.exception is None or isinstance(result.exception, SystemExit)

    def test_unexpected_error_while_loading(
        self, project: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        def _boom(**kwargs: object) -> None:
            raise RuntimeError("boom")

        monkeypatch.setattr(cli_mod, "_load", _boom)
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["good.svg"])

        assert result.exit_code == ExitCode.UNEXPECTED


class TestExitCodes:
    def test_unexpected_error(
        self, project: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        async def _boom(**kwargs: object) -> None:
            raise RuntimeError("boom")

        monkeypatch.setattr(cli_mod, "run_lintings", _boom)
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["good.svg"])

        assert result.exit_code == ExitCode.UNEXPECTED

    def test_interrupted(
        self, project: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        async def _interrupt(**kwargs: object) -> None:
            raise KeyboardInterrupt

        monkeypatch.setattr(cli_mod, "run_lintings", _interrupt)
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["good.svg"])

        assert result.exit_code == ExitCode.INTERRUPTED


class TestLogging:
    def test_debug_shows_lifecycle(
        self, project: Path, caplog: pytest.LogCaptureFixture,
    ) -> None:
        runner: CliRunner = CliRunner()
        with caplog.at_level("DEBUG", logger="svglint"):
            runner.invoke(cli, ["--debug", "good.svg"])

        assert "Linting done, 0 to go" in caplog.text
        assert "finished: passing" in caplog.text

    def test_unknown_rule_logs_warning(
        self, project: Path, caplog: pytest.LogCaptureFixture,
    ) -> None:
        (project / ".svglintrc.toml").write_text("[rules.nope]\nx = 1\n")
        runner: CliRunner = CliRunner()
        with caplog.at_level("WARNING", logger="svglint"):
            runner.invoke(cli, ["good.svg"])

        assert "Unknown rule 'nope'" in caplog.text

    def test_unparsable_file_logs_error(
        self, project: Path, caplog: pytest.LogCaptureFixture,
    ) -> None:
        runner: CliRunner = CliRunner()
        with caplog.at_level("ERROR", logger="svglint"):
            runner.invoke(cli, ["broken.svg"])

        assert "Failed to lint file" in caplog.text


def test_normalize_config_is_pure() -> None:
    first = normalize_config(None)
    second = normalize_config(None)
    assert first is not second
    assert dict(first.rules) == dict(second.rules) == {}
