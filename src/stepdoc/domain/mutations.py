"""Mutation engine — pure state transitions over a :class:`Document`.

Every function takes the current document plus plain command values and
either returns a new, fully valid document or raises
:class:`~stepdoc.domain.errors.NotFoundError`. Inputs are never modified,
so on failure the caller still holds the exact pre-call document.

Operations that create an entity return ``(document, entity)`` so the
caller learns the freshly generated id.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from stepdoc.domain.document import Document, Step, StepGroup
from stepdoc.domain.errors import ImmutableFieldError, NotFoundError
from stepdoc.domain.ids import generate_id
from stepdoc.domain.ordering import (
    IndexBasis,
    clamp_index,
    normalize_destination,
    reorder,
    transfer,
)
from stepdoc.domain.payloads import default_payload
from stepdoc.domain.types import EntityKind, GroupStyle, StepType

MUTABLE_GROUP_FIELDS: frozenset[str] = frozenset({"title", "is_collapsed", "style"})


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _require_group(doc: Document, group_id: str) -> int:
    index = doc.group_index(group_id)
    if index is None:
        raise NotFoundError(EntityKind.GROUP, group_id)
    return index


def _with_group(doc: Document, index: int, group: StepGroup) -> Document:
    groups = list(doc.groups)
    groups[index] = group
    return Document(groups=groups)


def _with_steps(doc: Document, index: int, steps: tuple[Step, ...]) -> Document:
    return _with_group(doc, index, doc.groups[index].model_copy(update={"steps": steps}))


# ---------------------------------------------------------------------------
# Group operations
# ---------------------------------------------------------------------------


def add_group(
    doc: Document,
    title: str,
    *,
    style: GroupStyle = GroupStyle.DEFAULT,
    index: int | None = None,
) -> tuple[Document, StepGroup]:
    """Insert an empty group at *index* (clamped), or append it."""
    group = StepGroup(
        id=generate_id("group", taken=set(doc.group_ids())),
        title=title,
        style=style,
    )
    groups = list(doc.groups)
    position = len(groups) if index is None else clamp_index(index, len(groups))
    groups.insert(position, group)
    return Document(groups=groups), group


def update_group(doc: Document, group_id: str, changes: Mapping[str, Any]) -> Document:
    """Merge *changes* (a subset of title/is_collapsed/style) into a group.

    Empty *changes* return *doc* itself, so nothing is committed.

    Raises:
        NotFoundError: If *group_id* is absent.
        ValueError: If *changes* names a field outside MUTABLE_GROUP_FIELDS.
    """
    unknown = set(changes) - MUTABLE_GROUP_FIELDS
    if unknown:
        msg = f"Unknown group fields: {', '.join(sorted(unknown))}"
        raise ValueError(msg)
    index = _require_group(doc, group_id)
    if not changes:
        return doc
    current = doc.groups[index]
    merged = current.model_dump()
    merged.update(changes)
    merged["steps"] = current.steps
    return _with_group(doc, index, StepGroup.model_validate(merged))


def toggle_collapse(doc: Document, group_id: str) -> Document:
    """Flip ``is_collapsed`` on a group."""
    index = _require_group(doc, group_id)
    group = doc.groups[index]
    return _with_group(doc, index, group.model_copy(update={"is_collapsed": not group.is_collapsed}))


def delete_group(doc: Document, group_id: str) -> Document:
    """Remove a group together with every step it contains."""
    index = _require_group(doc, group_id)
    return Document(groups=doc.groups[:index] + doc.groups[index + 1 :])


def move_group(
    doc: Document,
    group_id: str,
    destination_index: int,
    *,
    basis: IndexBasis = IndexBasis.AFTER_REMOVAL,
) -> Document:
    """Reorder a group within the document."""
    from_index = _require_group(doc, group_id)
    to_index = normalize_destination(
        from_index, destination_index, same_sequence=True, basis=basis
    )
    return Document(groups=reorder(doc.groups, from_index, to_index))


# ---------------------------------------------------------------------------
# Step operations
# ---------------------------------------------------------------------------


def add_step(
    doc: Document,
    group_id: str,
    step_type: StepType,
    *,
    payload_defaults: Mapping[str, Any] | None = None,
) -> tuple[Document, Step]:
    """Append a new step with the type's default payload to a group."""
    index = _require_group(doc, group_id)
    step_type = StepType(step_type)
    step = Step(
        id=generate_id("step", taken=set(doc.step_ids())),
        type=step_type,
        payload=default_payload(step_type, **(payload_defaults or {})),
    )
    return _with_steps(doc, index, (*doc.groups[index].steps, step)), step


def update_step(doc: Document, step: Step) -> Document:
    """Replace the step with the same id, keeping its position.

    Raises:
        NotFoundError: If no group contains ``step.id``.
        ImmutableFieldError: If ``step.type`` differs from the stored type.
    """
    loc = doc.locate_step(step.id)
    if loc is None:
        raise NotFoundError(EntityKind.STEP, step.id)
    steps = list(doc.groups[loc.group_index].steps)
    current = steps[loc.step_index]
    if current.type != step.type:
        raise ImmutableFieldError(step.id, "type", str(current.type), str(step.type))
    steps[loc.step_index] = Step.model_validate(step)
    return _with_steps(doc, loc.group_index, tuple(steps))


def delete_step(doc: Document, step_id: str) -> Document:
    """Remove a step from whichever group holds it."""
    loc = doc.locate_step(step_id)
    if loc is None:
        raise NotFoundError(EntityKind.STEP, step_id)
    steps = doc.groups[loc.group_index].steps
    return _with_steps(doc, loc.group_index, steps[: loc.step_index] + steps[loc.step_index + 1 :])


def copy_step(doc: Document, step: Step) -> tuple[Document, Step]:
    """Insert a duplicate of *step* with a fresh id right after the source.

    The duplicate takes its type and payload from the given value.
    """
    loc = doc.locate_step(step.id)
    if loc is None:
        raise NotFoundError(EntityKind.STEP, step.id, "source position no longer exists")
    duplicate = Step(
        id=generate_id("step", taken=set(doc.step_ids())),
        type=step.type,
        payload=step.payload,
    )
    steps = list(doc.groups[loc.group_index].steps)
    steps.insert(loc.step_index + 1, duplicate)
    return _with_steps(doc, loc.group_index, tuple(steps)), duplicate


def move_step(
    doc: Document,
    step_id: str,
    from_group_id: str,
    to_group_id: str,
    destination_index: int,
    *,
    basis: IndexBasis = IndexBasis.AFTER_REMOVAL,
) -> Document:
    """Move a step to *destination_index* of *to_group_id*.

    ``from_group_id == to_group_id`` reorders within one group. The index
    is clamped to the destination length after removal. Both affected
    sequences are rebuilt before the new document is constructed, so the
    step has exactly one owner in every observable state.

    Raises:
        NotFoundError: If either group is absent, or the step is not
            currently in *from_group_id*.
    """
    from_index = _require_group(doc, from_group_id)
    to_index = _require_group(doc, to_group_id)
    source = doc.groups[from_index]
    step_index = source.index_of(step_id)
    if step_index is None:
        detail = None if doc.locate_step(step_id) is None else f"not in group {from_group_id}"
        raise NotFoundError(EntityKind.STEP, step_id, detail)

    same_group = from_index == to_index
    insert_at = normalize_destination(
        step_index, destination_index, same_sequence=same_group, basis=basis
    )
    groups = list(doc.groups)
    if same_group:
        groups[from_index] = source.model_copy(
            update={"steps": reorder(source.steps, step_index, insert_at)}
        )
    else:
        destination = doc.groups[to_index]
        new_source, new_destination = transfer(
            source.steps, destination.steps, step_index, insert_at
        )
        groups[from_index] = source.model_copy(update={"steps": new_source})
        groups[to_index] = destination.model_copy(update={"steps": new_destination})
    return Document(groups=groups)
