"""Tests for the root stepdoc CLI."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from stepdoc import __version__
from stepdoc.cli import cli
from tests.conftest import invoke_json


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "stepdoc" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


@pytest.mark.parametrize("flag", ["--json", "-q", "-v", "--log-json"])
def test_global_flags_accepted(cli_runner: CliRunner, flag: str) -> None:
    assert cli_runner.invoke(cli, [flag, "--version"]).exit_code == 0


@pytest.mark.parametrize("name", ["group", "step", "init", "show"])
def test_commands_registered(name: str) -> None:
    assert name in cli.commands


@pytest.mark.usefixtures("_isolated_workdir")
class TestDocumentLocation:
    def test_file_option(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        invoke_json(cli_runner, "--file", "docs/guide.json", "group", "add", "G")
        assert (tmp_path / "docs" / "guide.json").is_file()
        assert not (tmp_path / "stepdoc.json").exists()

    def test_storage_path_from_config(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "stepdoc.toml").write_text('[storage]\npath = "guide.yaml"\n')
        invoke_json(cli_runner, "group", "add", "G")
        assert "title: G" in (tmp_path / "guide.yaml").read_text()

    def test_autosave_disabled(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "stepdoc.toml").write_text("[storage]\nautosave = false\n")
        invoke_json(cli_runner, "group", "add", "G")
        assert not (tmp_path / "stepdoc.json").exists()

    def test_state_survives_between_invocations(self, cli_runner: CliRunner) -> None:
        group_id = invoke_json(cli_runner, "group", "add", "G")["data"]["id"]
        data = invoke_json(cli_runner, "show", "--groups")
        assert [item["id"] for item in data["data"]["items"]] == [group_id]


@pytest.mark.usefixtures("_isolated_workdir")
def test_verbose_includes_telemetry(cli_runner: CliRunner) -> None:
    data = invoke_json(cli_runner, "-v", "group", "add", "G")
    assert data["meta"]["telemetry"]["name"] == "GroupService.add_group"
