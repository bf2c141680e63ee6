"""Tests for the init command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from tests.conftest import invoke_json


@pytest.mark.usefixtures("_isolated_workdir")
class TestInit:
    def test_creates_empty_document(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        data = invoke_json(cli_runner, "init")
        assert data["op"] == "init_document"
        saved = json.loads((tmp_path / "stepdoc.json").read_text())
        assert saved == {"version": 1, "groups": []}

    def test_refuses_overwrite(self, cli_runner: CliRunner) -> None:
        invoke_json(cli_runner, "init")
        data = invoke_json(cli_runner, "init", exit_code=1)
        assert data["error"]["code"] == "ALREADY_EXISTS"

    def test_force(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        invoke_json(cli_runner, "group", "add", "G")
        invoke_json(cli_runner, "init", "--force")
        assert json.loads((tmp_path / "stepdoc.json").read_text())["groups"] == []

    def test_yaml_file_option(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        invoke_json(cli_runner, "--file", "guide.yaml", "init")
        assert (tmp_path / "guide.yaml").read_text().startswith("version: 1")

    def test_examples_flag(self, cli_runner: CliRunner) -> None:
        from stepdoc.cli import cli

        result = cli_runner.invoke(cli, ["init", "--examples"])
        assert result.exit_code == 0
        assert "stepdoc init --force" in result.output
