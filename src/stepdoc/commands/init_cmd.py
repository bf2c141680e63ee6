"""Command: create an empty document file."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from stepdoc.commands._base import StepdocCommand

if TYPE_CHECKING:
    from stepdoc.commands._context import AppContext


@click.command(
    "init",
    cls=StepdocCommand,
    examples="""\
  stepdoc init
  stepdoc --file guide.yaml init
  stepdoc init --force""",
)
@click.option("--force", is_flag=True, help="Overwrite an existing document.")
@click.pass_obj
def init_cmd(app: AppContext, force: bool) -> None:
    """Create an empty document at the configured path."""
    from stepdoc.domain.document import Document
    from stepdoc.services.result import ServiceError, ServiceResult

    store = app.store
    op = "init_document"
    if store.exists() and not force:
        app.emit(
            ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="ALREADY_EXISTS",
                    message=f"Document already exists: {store.path} (use --force)",
                    detail={"path": str(store.path)},
                ),
            )
        )
        return
    path = store.save(Document())
    app.emit(ServiceResult(ok=True, op=op, data={"path": str(path)}))
