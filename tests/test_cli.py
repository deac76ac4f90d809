"""Tests for the root CLI group."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from notealias import __version__
from notealias.cli import cli


class TestRootGroup:
    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    @pytest.mark.usefixtures("_isolated_workspace")
    def test_no_subcommand_prints_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, [])
        assert result.exit_code == 0
        assert "Usage" in result.output

    def test_help_does_not_create_database(
        self, cli_runner: CliRunner, workspace_root: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(workspace_root)
        cli_runner.invoke(cli, ["alias", "--help"])
        assert not (workspace_root / ".notealias").exists()


class TestConfigOption:
    def test_explicit_config_sets_forbidden_names(
        self, cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        cfg = tmp_path / "custom.toml"
        cfg.write_text('[aliases]\nforbidden_names = ["reserved"]\n', encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        result = cli_runner.invoke(
            cli, ["--json", "-c", str(cfg), "create", "--alias", "reserved"]
        )
        assert result.exit_code == 1
        assert json.loads(result.output)["error"]["code"] == "FORBIDDEN_NAME"

    def test_env_overrides_forbidden_names(
        self, cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("NOTEALIAS_ALIASES__FORBIDDEN_NAMES", '["blocked"]')
        result = cli_runner.invoke(cli, ["--json", "create", "--alias", "blocked"])
        assert result.exit_code == 1
        assert json.loads(result.output)["error"]["code"] == "FORBIDDEN_NAME"

    def test_default_forbidden_names_apply_without_config(
        self, cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        result = cli_runner.invoke(cli, ["--json", "create", "--alias", "settings"])
        assert result.exit_code == 1
        assert json.loads(result.output)["error"]["code"] == "FORBIDDEN_NAME"
