"""AppContext — what every subcommand receives through ``@click.pass_obj``.

The root group builds one per invocation. The document is only read
from disk when a command first asks for :attr:`AppContext.session`, so
``--help`` and ``init`` never parse it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from stepdoc.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from stepdoc.config.settings import StepdocSettings
    from stepdoc.infrastructure.store import DocumentStore
    from stepdoc.services.result import ServiceResult
    from stepdoc.services.session import EditorSession


class AppContext:
    """Settings, the lazily opened editing session, and result output."""

    def __init__(self, settings: StepdocSettings) -> None:
        from stepdoc.config.logging import configure_logging
        from stepdoc.services.telemetry import enable_telemetry

        self.settings = settings
        self._session: EditorSession | None = None
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        if settings.verbose:
            enable_telemetry()

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    @property
    def store(self) -> DocumentStore:
        from stepdoc.infrastructure.store import DocumentStore

        return DocumentStore(self.settings.document_path)

    @property
    def session(self) -> EditorSession:
        if self._session is None:
            self._session = self._open_session()
        return self._session

    def _open_session(self) -> EditorSession:
        """Load the document and wire the autosave plugin to its store."""
        from stepdoc.infrastructure.store import StoreError
        from stepdoc.plugins.builtins.autosave import AutosavePlugin
        from stepdoc.plugins.manager import PluginManager
        from stepdoc.services.session import EditorSession

        store = self.store
        try:
            document = store.load()
        except StoreError as exc:
            raise click.ClickException(str(exc)) from exc

        pm = PluginManager()
        autosave = AutosavePlugin(store, enabled=self.settings.storage.autosave)
        pm.register_plugin(autosave, name="autosave")
        pm.discover_and_load()
        pm.notify_loaded(store.path, document)
        return EditorSession(document, editor=self.settings.editor, plugin_manager=pm)

    def emit(self, result: ServiceResult) -> None:
        """Print *result*; a failed result exits with status 1.

        Successful output goes to stdout and warnings to stderr (omitted in
        JSON mode, where they are part of the envelope). Failures go to
        stderr.
        """
        settings = self.output_settings
        text = format_result(result, settings=settings)
        if not result.ok:
            click.echo(text, err=True)
            raise SystemExit(1)
        click.echo(text)
        if settings.json_output:
            return
        for warning in result.warnings:
            click.echo(f"WARNING: {warning}", err=True)
