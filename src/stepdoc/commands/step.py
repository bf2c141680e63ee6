"""Command group: add, update, copy, move and delete steps."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import click

from stepdoc.commands._base import StepdocGroup
from stepdoc.domain.types import StepType

if TYPE_CHECKING:
    from stepdoc.commands._context import AppContext


def _parse_assignment(raw: str) -> tuple[str, Any]:
    """Split ``key=value``; values that parse as JSON keep their JSON type."""
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise click.BadParameter(f"Expected key=value, got {raw!r}", param_hint="--set")
    try:
        return key, json.loads(value)
    except json.JSONDecodeError:
        return key, value


def _current_step(app: AppContext, step_id: str) -> dict[str, Any]:
    """Fetch the full step value, emitting NOT_FOUND if it is gone."""
    from stepdoc.services.query import QueryService

    result = QueryService(app.session).get_step(step_id)
    if not result.ok:
        app.emit(result)
    return {k: result.data[k] for k in ("id", "type", "payload")}


def _current_step_group(app: AppContext, step_id: str) -> str:
    from stepdoc.services.query import QueryService

    result = QueryService(app.session).get_step(step_id)
    if not result.ok:
        app.emit(result)
    return str(result.data["group_id"])


@click.group(
    cls=StepdocGroup,
    examples="""\
  stepdoc step add grp_0123456789ab code
  stepdoc step update stp_0123456789ab --set content="Run the installer"
  stepdoc step update stp_0123456789ab --payload '{"code": "ls", "language": "bash"}'
  stepdoc step copy stp_0123456789ab
  stepdoc step move stp_0123456789ab --to grp_ba9876543210 --index 0
  stepdoc step drop '{"draggableId": "stp_0123456789ab", "source": {"droppableId": "group-grp_0123456789ab", "index": 0}, "destination": {"droppableId": "group-grp_ba9876543210", "index": 1}}'
  stepdoc step delete stp_0123456789ab""",
)
def step() -> None:
    """Manage steps inside groups."""


@step.command()
@click.argument("group_id")
@click.argument("step_type", metavar="TYPE", type=click.Choice([t.value for t in StepType]))
@click.pass_obj
def add(app: AppContext, group_id: str, step_type: str) -> None:
    """Append a new TYPE step to a group."""
    from stepdoc.services.steps import StepService

    app.emit(StepService(app.session).add_step(group_id, step_type))


@step.command()
@click.argument("step_id")
@click.option("--set", "assignments", multiple=True, help="Set one payload key (key=value).")
@click.option("--payload", "payload_json", default=None, help="Replace the whole payload (JSON).")
@click.pass_obj
def update(
    app: AppContext,
    step_id: str,
    assignments: tuple[str, ...],
    payload_json: str | None,
) -> None:
    """Edit a step's payload."""
    from stepdoc.services.steps import StepService

    if not assignments and payload_json is None:
        click.echo("No changes specified. Use --help for options.", err=True)
        raise SystemExit(1)

    value = _current_step(app, step_id)
    if payload_json is not None:
        try:
            payload = json.loads(payload_json)
        except json.JSONDecodeError as exc:
            raise click.BadParameter(str(exc), param_hint="--payload") from exc
        if not isinstance(payload, dict):
            raise click.BadParameter("must be a JSON object", param_hint="--payload")
        value["payload"] = payload
    else:
        value["payload"] = dict(value["payload"])
    for raw in assignments:
        key, parsed = _parse_assignment(raw)
        value["payload"][key] = parsed

    app.emit(StepService(app.session).update_step(value))


@step.command()
@click.argument("step_id")
@click.pass_obj
def copy(app: AppContext, step_id: str) -> None:
    """Duplicate a step right after itself."""
    from stepdoc.services.steps import StepService

    app.emit(StepService(app.session).copy_step(_current_step(app, step_id)))


@step.command()
@click.argument("step_id")
@click.option("--to", "to_group_id", default=None, help="Destination group (default: same group).")
@click.option("--from", "from_group_id", default=None, help="Source group (default: current).")
@click.option("--index", type=int, required=True, help="Destination position.")
@click.option(
    "--before-removal",
    is_flag=True,
    help="INDEX was counted before the step leaves its group.",
)
@click.pass_obj
def move(
    app: AppContext,
    step_id: str,
    to_group_id: str | None,
    from_group_id: str | None,
    index: int,
    before_removal: bool,
) -> None:
    """Move a step within its group or into another group."""
    from stepdoc.services.steps import StepService

    if from_group_id is None:
        from_group_id = _current_step_group(app, step_id)
    basis = "before_removal" if before_removal else "after_removal"
    app.emit(
        StepService(app.session).move_step(
            step_id,
            from_group_id,
            to_group_id or from_group_id,
            index,
            basis=basis,
        )
    )


@step.command()
@click.argument("event")
@click.pass_obj
def drop(app: AppContext, event: str) -> None:
    """Apply a drag-and-drop result given as JSON (``-`` reads stdin)."""
    from stepdoc.services.steps import StepService

    raw = click.get_text_stream("stdin").read() if event == "-" else event
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(str(exc), param_hint="EVENT") from exc
    app.emit(StepService(app.session).apply_drop(data))


@step.command()
@click.argument("step_id")
@click.pass_obj
def delete(app: AppContext, step_id: str) -> None:
    """Delete a step."""
    from stepdoc.services.steps import StepService

    app.emit(StepService(app.session).delete_step(step_id))
