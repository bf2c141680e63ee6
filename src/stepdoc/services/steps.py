"""StepService — add, update, copy, delete and move steps.

``apply_drop`` adapts the drag-and-drop layer's drop result into a
``move_step`` (or ``move_group``) command. The core never sees pointer
coordinates. A drop released outside every container is a no-op. A drop
at its origin is one too, but still fails with ``NOT_FOUND`` when the
dragged step or its group does not exist.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from stepdoc.domain import mutations
from stepdoc.domain.document import Step
from stepdoc.domain.errors import ImmutableFieldError, NotFoundError
from stepdoc.domain.ordering import IndexBasis
from stepdoc.domain.types import EntityKind
from stepdoc.services.base import BaseService
from stepdoc.services.commands import AddStep, DropEvent, MoveStep, group_id_from_droppable
from stepdoc.services.result import ServiceResult
from stepdoc.services.telemetry import trace_span, traced


def _step_data(step: Step, group_id: str, index: int) -> dict[str, Any]:
    return step.model_dump(mode="json") | {"group_id": group_id, "index": index}


class StepService(BaseService):
    """Step-level commands."""

    def _located(self, step_id: str) -> dict[str, Any]:
        doc = self._session.document
        loc = doc.locate_step(step_id)
        assert loc is not None
        step = doc.groups[loc.group_index].steps[loc.step_index]
        return _step_data(step, loc.group_id, loc.step_index)

    @traced
    def add_step(self, group_id: str, step_type: str) -> ServiceResult:
        """Append a new step of *step_type* with its default payload.

        Not idempotent: every call creates a new step.
        """
        op = "add_step"
        try:
            cmd = self._parse(AddStep, {"group_id": group_id, "type": step_type})
        except ValidationError as exc:
            return self._invalid(op, exc)

        payload_defaults: dict[str, Any] = {}
        if cmd.type == "code":
            payload_defaults["language"] = self._session.editor.default_code_language

        try:
            with self._session.transaction() as txn:
                txn.document, step = mutations.add_step(
                    txn.document, cmd.group_id, cmd.type, payload_defaults=payload_defaults
                )
                txn.affected_ids.append(step.id)
        except NotFoundError as exc:
            return self._failed(op, exc)

        return self._committed(op, self._located(step.id), [step.id])

    @traced
    def update_step(self, step: Step | dict[str, Any]) -> ServiceResult:
        """Replace a step by id with the full modified value.

        Editors call this with the whole step. Last write wins.
        """
        op = "update_step"
        try:
            value = self._parse(Step, step)
        except ValidationError as exc:
            return self._invalid(op, exc)

        try:
            with self._session.transaction() as txn:
                txn.document = mutations.update_step(txn.document, value)
                txn.affected_ids.append(value.id)
        except (NotFoundError, ImmutableFieldError) as exc:
            return self._failed(op, exc)

        return self._committed(op, self._located(value.id), [value.id])

    @traced
    def delete_step(self, step_id: str) -> ServiceResult:
        op = "delete_step"
        loc = self._session.document.locate_step(step_id)
        try:
            with self._session.transaction() as txn:
                txn.document = mutations.delete_step(txn.document, step_id)
                txn.affected_ids.append(step_id)
        except NotFoundError as exc:
            return self._failed(op, exc)

        assert loc is not None
        return self._committed(op, {"id": step_id, "group_id": loc.group_id}, [step_id])

    @traced
    def copy_step(self, step: Step | dict[str, Any]) -> ServiceResult:
        """Duplicate *step* right after its source. Not idempotent."""
        op = "copy_step"
        try:
            source = self._parse(Step, step)
        except ValidationError as exc:
            return self._invalid(op, exc)

        try:
            with self._session.transaction() as txn:
                txn.document, duplicate = mutations.copy_step(txn.document, source)
                txn.affected_ids.append(duplicate.id)
        except NotFoundError as exc:
            return self._failed(op, exc)

        data = self._located(duplicate.id) | {"source_id": source.id}
        return self._committed(op, data, [duplicate.id])

    @traced
    def move_step(
        self,
        step_id: str,
        from_group_id: str,
        to_group_id: str,
        destination_index: int,
        *,
        basis: str = IndexBasis.AFTER_REMOVAL,
    ) -> ServiceResult:
        """Move a step to a position in the same or another group.

        The index is clamped to the destination's post-removal length.
        """
        op = "move_step"
        try:
            cmd = self._parse(
                MoveStep,
                {
                    "step_id": step_id,
                    "from_group_id": from_group_id,
                    "to_group_id": to_group_id,
                    "destination_index": destination_index,
                    "basis": basis,
                },
            )
        except ValidationError as exc:
            return self._invalid(op, exc)
        return self._apply_move_step(cmd)

    def _apply_move_step(self, cmd: MoveStep) -> ServiceResult:
        op = "move_step"
        try:
            with self._session.transaction() as txn:
                txn.document = mutations.move_step(
                    txn.document,
                    cmd.step_id,
                    cmd.from_group_id,
                    cmd.to_group_id,
                    cmd.destination_index,
                    basis=cmd.basis,
                )
                txn.affected_ids.extend([cmd.step_id, cmd.from_group_id, cmd.to_group_id])
        except NotFoundError as exc:
            return self._failed(op, exc)

        data = self._located(cmd.step_id) | {
            "from_group_id": cmd.from_group_id,
            "cross_group": cmd.from_group_id != cmd.to_group_id,
        }
        return self._committed(op, data, [cmd.step_id])

    @traced
    def apply_drop(self, event: DropEvent | dict[str, Any]) -> ServiceResult:
        """Resolve a drag-and-drop result into a move.

        Steps are dropped into ``group-<id>`` containers. A drop of
        ``type == "group"`` reorders groups instead.
        """
        op = "apply_drop"
        try:
            drop = self._parse(DropEvent, event)
        except ValidationError as exc:
            return self._invalid(op, exc)

        if drop.is_noop:
            if drop.destination is not None:
                missing = self._missing_at_origin(drop)
                if missing is not None:
                    return self._failed(op, missing)
            reason = "outside any container" if drop.destination is None else "at its origin"
            return ServiceResult(
                ok=True,
                op=op,
                data={"moved": False, "id": drop.draggable_id},
                warnings=[f"Dropped {reason}; nothing changed"],
            )

        with trace_span("resolve_drop") as span:
            if span is not None:
                span.annotate("type", drop.type)
            if drop.type == "group":
                from stepdoc.services.groups import GroupService

                move_group = drop.to_move_group()
                assert move_group is not None
                return GroupService(self._session)._apply_move_group(move_group)

            move_step = drop.to_move_step()
            assert move_step is not None
            return self._apply_move_step(move_step)

    def _missing_at_origin(self, drop: DropEvent) -> NotFoundError | None:
        """Existence checks the equivalent move would make, for an unmoved drop."""
        doc = self._session.document
        if drop.type == "group":
            group_id = group_id_from_droppable(drop.draggable_id)
            if doc.get_group(group_id) is None:
                return NotFoundError(EntityKind.GROUP, group_id)
            return None
        group_id = group_id_from_droppable(drop.source.droppable_id)
        group = doc.get_group(group_id)
        if group is None:
            return NotFoundError(EntityKind.GROUP, group_id)
        if group.index_of(drop.draggable_id) is None:
            known = doc.locate_step(drop.draggable_id) is not None
            return NotFoundError(
                EntityKind.STEP, drop.draggable_id, f"not in group {group_id}" if known else None
            )
        return None
