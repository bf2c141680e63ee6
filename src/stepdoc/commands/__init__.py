"""Subcommand modules for stepdoc.

Provides register_commands() which uses deferred imports to keep
``stepdoc --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    from stepdoc.commands.group import group
    from stepdoc.commands.step import step

    cli.add_command(group)
    cli.add_command(step)

    from stepdoc.commands.init_cmd import init_cmd
    from stepdoc.commands.show import show

    cli.add_command(init_cmd)
    cli.add_command(show)
