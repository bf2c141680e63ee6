"""Command models validated at the service boundary.

Malformed commands (unknown step type or style, unknown group fields,
missing ids) fail here with ``INVALID_COMMAND`` and never reach the
engine. Indices are plain integers: the engine clamps out-of-range
values, negative ones included, to the nearest valid position. Only
a drop event location must be non-negative, as the drag-and-drop layer
never reports anything else. Field aliases accept the camelCase names
used on the wire.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from stepdoc.domain.ordering import IndexBasis
from stepdoc.domain.types import GroupStyle, StepType

DROPPABLE_GROUP_PREFIX = "group-"


def group_id_from_droppable(droppable_id: str) -> str:
    """Strip the ``group-`` container prefix used by the drag-and-drop layer."""
    if droppable_id.startswith(DROPPABLE_GROUP_PREFIX):
        return droppable_id[len(DROPPABLE_GROUP_PREFIX) :]
    return droppable_id


class _Command(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class AddGroup(_Command):
    title: str | None = None
    style: GroupStyle = GroupStyle.DEFAULT
    index: int | None = None


class GroupChanges(_Command):
    """Partial update for a group: any subset of title/isCollapsed/style."""

    title: str | None = None
    is_collapsed: bool | None = Field(default=None, alias="isCollapsed")
    style: GroupStyle | None = None

    @field_validator("style", mode="before")
    @classmethod
    def _unwrap_style(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return value.get("type") or GroupStyle.DEFAULT
        return value

    def to_changes(self) -> dict[str, Any]:
        """Only the fields the caller actually supplied."""
        return self.model_dump(exclude_none=True)


class AddStep(_Command):
    group_id: str = Field(alias="groupId", min_length=1)
    type: StepType


class MoveStep(_Command):
    step_id: str = Field(alias="stepId", min_length=1)
    from_group_id: str = Field(alias="fromGroupId", min_length=1)
    to_group_id: str = Field(alias="toGroupId", min_length=1)
    destination_index: int = Field(alias="destinationIndex")
    basis: IndexBasis = IndexBasis.AFTER_REMOVAL


class MoveGroup(_Command):
    group_id: str = Field(alias="groupId", min_length=1)
    destination_index: int = Field(alias="destinationIndex")
    basis: IndexBasis = IndexBasis.AFTER_REMOVAL


class DraggableLocation(_Command):
    droppable_id: str = Field(alias="droppableId")
    index: int = Field(ge=0)


class DropEvent(_Command):
    """Result record reported by the drag-and-drop layer on drop.

    ``destination`` is None when the item was released outside every
    container. The reported index already accounts for the removal of
    the dragged item.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    draggable_id: str = Field(alias="draggableId", min_length=1)
    type: Literal["step", "group"] = "step"
    source: DraggableLocation
    destination: DraggableLocation | None = None

    @property
    def is_noop(self) -> bool:
        """True when nothing should change."""
        if self.destination is None:
            return True
        return (
            self.destination.droppable_id == self.source.droppable_id
            and self.destination.index == self.source.index
        )

    def to_move_step(self) -> MoveStep | None:
        if self.destination is None or self.type != "step":
            return None
        return MoveStep(
            step_id=self.draggable_id,
            from_group_id=group_id_from_droppable(self.source.droppable_id),
            to_group_id=group_id_from_droppable(self.destination.droppable_id),
            destination_index=self.destination.index,
        )

    def to_move_group(self) -> MoveGroup | None:
        if self.destination is None or self.type != "group":
            return None
        return MoveGroup(
            group_id=group_id_from_droppable(self.draggable_id),
            destination_index=self.destination.index,
        )
