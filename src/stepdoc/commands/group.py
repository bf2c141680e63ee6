"""Command group: add, update, toggle, move and delete step groups."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from stepdoc.commands._base import StepdocGroup
from stepdoc.domain.types import GroupStyle

if TYPE_CHECKING:
    from stepdoc.commands._context import AppContext

_STYLE_CHOICE = click.Choice([s.value for s in GroupStyle])


@click.group(
    cls=StepdocGroup,
    examples="""\
  stepdoc group add "Setup"
  stepdoc group add "Caveats" --style warning --index 0
  stepdoc group update grp_0123456789ab --title "Install"
  stepdoc group toggle grp_0123456789ab
  stepdoc group move grp_0123456789ab 2
  stepdoc group delete grp_0123456789ab""",
)
def group() -> None:
    """Manage step groups."""


@group.command()
@click.argument("title", required=False)
@click.option("--style", type=_STYLE_CHOICE, default="default", help="Visual style.")
@click.option("--index", type=int, default=None, help="Insert position (default: end).")
@click.pass_obj
def add(app: AppContext, title: str | None, style: str, index: int | None) -> None:
    """Add an empty group."""
    from stepdoc.services.groups import GroupService

    app.emit(GroupService(app.session).add_group(title, style=style, index=index))


@group.command()
@click.argument("group_id")
@click.option("--title", default=None, help="New title.")
@click.option("--style", type=_STYLE_CHOICE, default=None, help="New visual style.")
@click.option("--collapsed/--expanded", "is_collapsed", default=None, help="Collapse state.")
@click.pass_obj
def update(
    app: AppContext,
    group_id: str,
    title: str | None,
    style: str | None,
    is_collapsed: bool | None,
) -> None:
    """Update a group's title, style or collapse state."""
    from stepdoc.services.groups import GroupService

    changes: dict[str, object] = {}
    if title is not None:
        changes["title"] = title
    if style is not None:
        changes["style"] = style
    if is_collapsed is not None:
        changes["is_collapsed"] = is_collapsed

    if not changes:
        click.echo("No changes specified. Use --help for options.", err=True)
        raise SystemExit(1)

    app.emit(GroupService(app.session).update_group(group_id, changes))


@group.command()
@click.argument("group_id")
@click.pass_obj
def toggle(app: AppContext, group_id: str) -> None:
    """Flip a group between collapsed and expanded."""
    from stepdoc.services.groups import GroupService

    app.emit(GroupService(app.session).toggle_collapse(group_id))


@group.command()
@click.argument("group_id")
@click.argument("index", type=int)
@click.option(
    "--before-removal",
    is_flag=True,
    help="INDEX counts the group's current slot (adjusted after removal).",
)
@click.pass_obj
def move(app: AppContext, group_id: str, index: int, before_removal: bool) -> None:
    """Move a group to INDEX in the document."""
    from stepdoc.services.groups import GroupService

    basis = "before_removal" if before_removal else "after_removal"
    app.emit(GroupService(app.session).move_group(group_id, index, basis=basis))


@group.command()
@click.argument("group_id")
@click.pass_obj
def delete(app: AppContext, group_id: str) -> None:
    """Delete a group and every step in it."""
    from stepdoc.services.groups import GroupService

    app.emit(GroupService(app.session).delete_group(group_id))
