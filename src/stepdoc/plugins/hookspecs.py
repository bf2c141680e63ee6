"""Pluggy hook specifications for stepdoc document events.

Hooks are dispatched synchronously after a change has been committed to
the session, so implementations always observe a valid document.
"""

from __future__ import annotations

from typing import Any

import pluggy

hookspec = pluggy.HookspecMarker("stepdoc")


class StepdocHookSpec:
    """Hook specifications for the stepdoc plugin system."""

    @hookspec
    def post_mutation(
        self,
        op: str,
        affected_ids: list[str],
        snapshot: dict[str, Any],
    ) -> None:
        """Called after every successful command with the new document snapshot."""

    @hookspec
    def post_load(self, path: str, group_count: int, step_count: int) -> None:
        """Called after a document has been loaded from storage."""
