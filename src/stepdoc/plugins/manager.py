"""PluginManager — a thin wrapper around pluggy for stepdoc hooks.

Built-ins (the autosave plugin) are registered by the CLI. Third-party
plugins are advertised as entry points in the ``stepdoc.plugins`` group.
"""

from __future__ import annotations

import inspect
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import pluggy

from stepdoc.plugins.hookspecs import StepdocHookSpec

if TYPE_CHECKING:
    from stepdoc.domain.document import Document

PROJECT_NAME = "stepdoc"
ENTRY_POINT_GROUP = "stepdoc.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Registers plugins and relays the stepdoc hooks to them."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(StepdocHookSpec)
        self._loaded = False

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    @property
    def is_loaded(self) -> bool:
        """True once entry-point discovery has run."""
        return self._loaded

    def discover_and_load(self) -> list[str]:
        """Load entry-point plugins; return the names of everything registered."""
        count = self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._normalize_plugin_instances()
        self._loaded = True
        logger.debug("Loaded %d entry-point plugin(s)", count)
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        name = name or type(plugin).__name__
        self._pm.register(plugin, name=name)
        logger.debug("Registered plugin: %s", name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    def get_plugins(self) -> list[object]:
        return list(self._pm.get_plugins())

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or type(p).__name__ for p in self._pm.get_plugins()]

    def notify_loaded(self, path: Path, document: Document) -> None:
        """Fire ``post_load`` for a document just read from *path*."""
        self.hook.post_load(
            path=str(path),
            group_count=len(document.groups),
            step_count=document.step_count,
        )

    def _normalize_plugin_instances(self) -> None:
        """Swap plugin classes registered by entry points for instances.

        A class registered as-is would call its hookimpls unbound.
        """
        for plugin in self.get_plugins():
            if not inspect.isclass(plugin):
                continue
            name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning("Could not instantiate plugin %s; skipped", name, exc_info=True)
                continue
            self._pm.register(instance, name=name)
