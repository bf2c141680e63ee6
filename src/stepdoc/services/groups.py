"""GroupService — add, update, collapse, reorder and delete step groups."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from stepdoc.domain import mutations
from stepdoc.domain.document import StepGroup
from stepdoc.domain.errors import NotFoundError
from stepdoc.domain.ordering import IndexBasis
from stepdoc.services.base import BaseService
from stepdoc.services.commands import AddGroup, GroupChanges, MoveGroup
from stepdoc.services.result import ServiceResult
from stepdoc.services.telemetry import traced


def _group_data(group: StepGroup | None) -> dict[str, Any]:
    assert group is not None
    return group.model_dump(mode="json", by_alias=True, exclude={"steps"}) | {
        "step_count": group.step_count
    }


class GroupService(BaseService):
    """Group-level commands."""

    @traced
    def add_group(
        self,
        title: str | None = None,
        *,
        style: str = "default",
        index: int | None = None,
    ) -> ServiceResult:
        """Create an empty group, appended unless *index* is given."""
        op = "add_group"
        try:
            cmd = self._parse(AddGroup, {"title": title, "style": style, "index": index})
        except ValidationError as exc:
            return self._invalid(op, exc)

        with self._session.transaction() as txn:
            txn.document, group = mutations.add_group(
                txn.document,
                cmd.title if cmd.title is not None else self._session.editor.default_group_title,
                style=cmd.style,
                index=cmd.index,
            )
            txn.affected_ids.append(group.id)

        return self._committed(op, _group_data(group), [group.id])

    @traced
    def update_group(self, group_id: str, changes: dict[str, Any]) -> ServiceResult:
        """Merge a subset of title/isCollapsed/style into a group.

        Last write wins, so retrying the same update is safe.
        """
        op = "update_group"
        try:
            cmd = self._parse(GroupChanges, changes)
        except ValidationError as exc:
            return self._invalid(op, exc)
        fields = cmd.to_changes()

        try:
            with self._session.transaction() as txn:
                txn.document = mutations.update_group(txn.document, group_id, fields)
                txn.affected_ids.append(group_id)
        except NotFoundError as exc:
            return self._failed(op, exc)

        group = self._session.document.get_group(group_id)
        data = _group_data(group) | {"fields_changed": sorted(fields)}
        if not fields:
            return ServiceResult(
                ok=True,
                op=op,
                data={**data, "document": self._session.document.to_snapshot()},
                warnings=["No fields to change"],
                meta={"revision": self._session.revision},
            )
        return self._committed(op, data, [group_id])

    @traced
    def toggle_collapse(self, group_id: str) -> ServiceResult:
        op = "toggle_collapse"
        try:
            with self._session.transaction() as txn:
                txn.document = mutations.toggle_collapse(txn.document, group_id)
                txn.affected_ids.append(group_id)
        except NotFoundError as exc:
            return self._failed(op, exc)

        group = self._session.document.get_group(group_id)
        return self._committed(op, _group_data(group), [group_id])

    @traced
    def delete_group(self, group_id: str) -> ServiceResult:
        """Delete a group and, by cascade, every step in it."""
        op = "delete_group"
        group = self._session.document.get_group(group_id)
        try:
            with self._session.transaction() as txn:
                txn.document = mutations.delete_group(txn.document, group_id)
                txn.affected_ids.append(group_id)
        except NotFoundError as exc:
            return self._failed(op, exc)

        assert group is not None
        deleted_steps = [s.id for s in group.steps]
        return self._committed(
            op,
            {"id": group_id, "deleted_steps": deleted_steps},
            [group_id, *deleted_steps],
        )

    @traced
    def move_group(
        self,
        group_id: str,
        destination_index: int,
        *,
        basis: str = IndexBasis.AFTER_REMOVAL,
    ) -> ServiceResult:
        """Reorder a group within the document."""
        op = "move_group"
        try:
            cmd = self._parse(
                MoveGroup,
                {"group_id": group_id, "destination_index": destination_index, "basis": basis},
            )
        except ValidationError as exc:
            return self._invalid(op, exc)
        return self._apply_move_group(cmd)

    def _apply_move_group(self, cmd: MoveGroup, warnings: list[str] | None = None) -> ServiceResult:
        op = "move_group"
        try:
            with self._session.transaction() as txn:
                txn.document = mutations.move_group(
                    txn.document, cmd.group_id, cmd.destination_index, basis=cmd.basis
                )
                txn.affected_ids.append(cmd.group_id)
        except NotFoundError as exc:
            return self._failed(op, exc)

        index = self._session.document.group_index(cmd.group_id)
        return self._committed(
            op, {"id": cmd.group_id, "index": index}, [cmd.group_id], warnings=warnings
        )
