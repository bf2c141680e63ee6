"""``stepdoc`` entry point: global flags, settings, subcommand registration."""

from __future__ import annotations

from pathlib import Path

import click

from stepdoc import __version__
from stepdoc.commands import register_commands
from stepdoc.commands._context import AppContext
from stepdoc.config.settings import StepdocSettings


@click.group(invoke_without_command=True)
@click.version_option(__version__, prog_name="stepdoc")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON envelopes.")
@click.option("-q", "--quiet", is_flag=True, help="Print only affected ids.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logs and timing spans.")
@click.option("--log-json", is_flag=True, help="Emit logs to stderr as JSON lines.")
@click.option(
    "-c",
    "--config",
    "config_path",
    default=None,
    help="Use this stepdoc.toml instead of searching for one.",
)
@click.option(
    "-f",
    "--file",
    "document_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Document file (.json or .yaml); overrides [storage] path.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    document_file: Path | None,
) -> None:
    """stepdoc — build step-by-step documents from groups of typed steps."""
    settings = StepdocSettings.from_cli(
        config_path=config_path,
        document_file=document_file,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
