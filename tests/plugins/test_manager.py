"""Tests for PluginManager — registration and hook relay."""

from __future__ import annotations

from typing import Any

import pluggy

from stepdoc.plugins.manager import PluginManager

hookimpl = pluggy.HookimplMarker("stepdoc")


class _LoadWatcher:
    def __init__(self) -> None:
        self.loaded: list[tuple[str, int, int]] = []

    @hookimpl
    def post_load(self, path: str, group_count: int, step_count: int) -> None:
        self.loaded.append((path, group_count, step_count))


class _MutationWatcher:
    @hookimpl
    def post_mutation(self, op: str, affected_ids: list[str], snapshot: dict[str, Any]) -> None:
        pass


class TestPluginManager:
    def test_hook_relay_accessible(self) -> None:
        pm = PluginManager()
        assert hasattr(pm.hook, "post_mutation")
        assert hasattr(pm.hook, "post_load")

    def test_register_plugin(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_MutationWatcher(), name="watcher")
        assert "watcher" in pm.list_plugin_names()

    def test_register_plugin_default_name(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_MutationWatcher())
        assert "_MutationWatcher" in pm.list_plugin_names()

    def test_unregister_plugin(self) -> None:
        pm = PluginManager()
        plugin = _MutationWatcher()
        pm.register_plugin(plugin)
        pm.unregister(plugin)
        assert plugin not in pm.get_plugins()

    def test_discover_marks_loaded(self) -> None:
        pm = PluginManager()
        assert not pm.is_loaded
        pm.discover_and_load()
        assert pm.is_loaded

    def test_post_load_dispatch(self) -> None:
        pm = PluginManager()
        watcher = _LoadWatcher()
        pm.register_plugin(watcher)
        pm.hook.post_load(path="stepdoc.json", group_count=2, step_count=4)
        assert watcher.loaded == [("stepdoc.json", 2, 4)]

    def test_entry_point_classes_are_instantiated(self) -> None:
        pm = PluginManager()
        pm._pm.register(_LoadWatcher, name="ep-watcher")
        pm._normalize_plugin_instances()
        plugins = pm.get_plugins()
        assert len(plugins) == 1
        assert isinstance(plugins[0], _LoadWatcher)

    def test_notify_loaded(self) -> None:
        from pathlib import Path

        from tests.conftest import make_document

        pm = PluginManager()
        watcher = _LoadWatcher()
        pm.register_plugin(watcher)
        pm.notify_loaded(Path("guide.json"), make_document({"A": ["s1", "s2"], "B": []}))
        assert watcher.loaded == [("guide.json", 2, 2)]
