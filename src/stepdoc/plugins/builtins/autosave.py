"""Built-in autosave plugin: persists a snapshot after every change.

This is the reference persistence collaborator. It receives the
serialized document through ``post_mutation`` and hands it to a
:class:`DocumentStore`; the session itself never touches disk.
"""

from __future__ import annotations

import logging
from typing import Any

import pluggy

from stepdoc.infrastructure.store import DocumentStore

hookimpl = pluggy.HookimplMarker("stepdoc")

logger = logging.getLogger(__name__)


class AutosavePlugin:
    """Write each committed snapshot to the configured store."""

    def __init__(self, store: DocumentStore, *, enabled: bool = True) -> None:
        self._store = store
        self._enabled = enabled
        self.saves = 0

    @hookimpl
    def post_mutation(
        self,
        op: str,
        affected_ids: list[str],
        snapshot: dict[str, Any],
    ) -> None:
        if not self._enabled:
            return
        path = self._store.save(snapshot)
        self.saves += 1
        logger.debug("Autosaved after %s (%d ids) to %s", op, len(affected_ids), path)
