"""Command: display the document, a group, or a step."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from stepdoc.commands._base import StepdocCommand

if TYPE_CHECKING:
    from stepdoc.commands._context import AppContext


@click.command(
    cls=StepdocCommand,
    examples="""\
  stepdoc show
  stepdoc show --groups
  stepdoc show --group grp_0123456789ab
  stepdoc --json show --step stp_0123456789ab""",
)
@click.option("--groups", "list_groups", is_flag=True, help="Summarize groups as a table.")
@click.option("--group", "group_id", default=None, help="Show one group.")
@click.option("--step", "step_id", default=None, help="Show one step.")
@click.pass_obj
def show(app: AppContext, list_groups: bool, group_id: str | None, step_id: str | None) -> None:
    """Show the current document."""
    from stepdoc.services.query import QueryService

    svc = QueryService(app.session)
    if step_id is not None:
        app.emit(svc.get_step(step_id))
    elif group_id is not None:
        app.emit(svc.get_group(group_id))
    elif list_groups:
        app.emit(svc.list_groups())
    else:
        app.emit(svc.get_document())
