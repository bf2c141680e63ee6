"""EditorSession — the single writer that owns the current document.

Every command flows through :meth:`EditorSession.transaction`. The block
works on a draft reference; only when it exits normally is the draft
published as the session's document. An exception (including a
``NotFoundError`` from the engine) leaves the published document exactly
as it was, so there is never a partially applied state.

The session performs no I/O. Persistence collaborators subscribe to the
``post_mutation`` hook through the plugin manager.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog

from stepdoc.config.models import EditorConfig
from stepdoc.domain.document import Document

if TYPE_CHECKING:
    from stepdoc.plugins.manager import PluginManager

log = structlog.get_logger(__name__)


@dataclass
class EditTransaction:
    """Draft handle yielded by :meth:`EditorSession.transaction`.

    Callers replace ``document`` with the engine's result and record the
    ids they touched in ``affected_ids``.
    """

    document: Document
    affected_ids: list[str] = field(default_factory=list)


class EditorSession:
    """Holds the authoritative document for one editing session.

    Usage::

        with session.transaction() as txn:
            txn.document = mutations.toggle_collapse(txn.document, group_id)
    """

    def __init__(
        self,
        document: Document | None = None,
        *,
        editor: EditorConfig | None = None,
        plugin_manager: PluginManager | None = None,
    ) -> None:
        self._document = document if document is not None else Document()
        self._editor = editor or EditorConfig()
        self._plugin_manager = plugin_manager
        self._revision = 0

    @property
    def document(self) -> Document:
        """The current published document."""
        return self._document

    @property
    def editor(self) -> EditorConfig:
        return self._editor

    @property
    def plugin_manager(self) -> PluginManager | None:
        return self._plugin_manager

    @property
    def revision(self) -> int:
        """Number of committed changes since the session was opened."""
        return self._revision

    @contextmanager
    def transaction(self) -> Iterator[EditTransaction]:
        """Apply a change atomically; publish only on normal exit."""
        txn = EditTransaction(document=self._document)
        yield txn
        if txn.document is self._document:
            return
        self._document = txn.document
        self._revision += 1
        log.debug(
            "document.committed",
            revision=self._revision,
            groups=len(txn.document.groups),
            steps=txn.document.step_count,
            affected=txn.affected_ids,
        )
