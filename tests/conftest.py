"""Shared pytest fixtures and test helpers for stepdoc tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from stepdoc.domain.document import Document, Step, StepGroup
from stepdoc.services.session import EditorSession
from stepdoc.services.telemetry import disable_telemetry


@pytest.fixture(autouse=True)
def _reset_cli_state() -> Generator[None]:
    """Undo process-wide state the CLI sets up (log handlers, telemetry)."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def session() -> EditorSession:
    """Editing session over an empty document, no plugins."""
    return EditorSession()


@pytest.fixture
def two_group_doc() -> Document:
    """A = [s1, s2, s3], B = [s4]."""
    return make_document({"A": ["s1", "s2", "s3"], "B": ["s4"]})


@pytest.fixture
def seeded_session(two_group_doc: Document) -> EditorSession:
    return EditorSession(two_group_doc)


@pytest.fixture
def _isolated_workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI reads and writes there.

    Use via ``@pytest.mark.usefixtures("_isolated_workdir")`` on command
    test classes.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("STEPDOC_CONFIG", raising=False)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def make_document(layout: dict[str, list[str]], **group_fields: Any) -> Document:
    """Build a document from ``{group_id: [step_id, ...]}`` using text steps."""
    return Document(
        groups=[
            StepGroup(
                id=group_id,
                title=f"Group {group_id}",
                steps=[Step(id=s, type="text", payload={"content": s}) for s in step_ids],
                **group_fields,
            )
            for group_id, step_ids in layout.items()
        ]
    )


def step_ids(doc: Document, group_id: str) -> list[str]:
    """Step ids of one group, in order."""
    group = doc.get_group(group_id)
    assert group is not None
    return [s.id for s in group.steps]


def snapshot_ids(snapshot: dict[str, Any], group_id: str) -> list[str]:
    """Step ids of one group inside a serialized snapshot."""
    for group in snapshot["groups"]:
        if group["id"] == group_id:
            return [s["id"] for s in group["steps"]]
    msg = f"group {group_id} not in snapshot"
    raise AssertionError(msg)


def invoke_json(runner: CliRunner, *args: str, exit_code: int = 0) -> dict[str, Any]:
    """Run ``stepdoc --json ARGS`` and parse the result envelope.

    Successes are read from stdout, failures from stderr.
    """
    import json

    from stepdoc.cli import cli

    result = runner.invoke(cli, ["--json", *args])
    assert result.exit_code == exit_code, result.output
    return json.loads(result.stdout if exit_code == 0 else result.stderr)
