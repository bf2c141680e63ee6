"""Document model — steps, groups, and the document that owns them.

All three models are frozen and hold their children in tuples, so a
document can never be changed in place. New documents are produced by
:mod:`stepdoc.domain.mutations` and every one of them passes through the
``Document`` validator, which is the single place identity invariants
are checked:

- step ids are unique across the whole document, not just per group;
- group ids are unique.

Positions are never stored. A step's index is its position in
``StepGroup.steps`` and a group's index its position in
``Document.groups``.

Wire shape (see :meth:`Document.to_snapshot`)::

    {"version": 1,
     "groups": [{"id": "grp_...", "title": "...", "isCollapsed": false,
                 "style": "default",
                 "steps": [{"id": "stp_...", "type": "text",
                            "payload": {"content": ""}}]}]}
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any, NamedTuple, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

from stepdoc.domain.types import GroupStyle, StepType

SNAPSHOT_VERSION = 1


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_thaw(v) for v in value]
    return value


class Step(BaseModel):
    """A single typed content block.

    ``payload`` is a read-only copy of whatever mapping it was built from:
    nested mappings become ``MappingProxyType`` and lists become tuples.
    It serializes back to plain dicts and lists. Instances are revalidated
    wherever a model or command accepts them, so a step built with
    ``model_copy(update=...)`` is frozen again before it enters a document.
    """

    model_config = ConfigDict(frozen=True, revalidate_instances="always")

    id: str = Field(min_length=1)
    type: StepType
    payload: Mapping[str, Any] = Field(default_factory=lambda: MappingProxyType({}))

    @field_validator("payload", mode="after")
    @classmethod
    def _freeze_payload(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return _freeze(value)

    @field_serializer("payload")
    def _dump_payload(self, value: Mapping[str, Any]) -> dict[str, Any]:
        return _thaw(value)


class StepGroup(BaseModel):
    """An ordered, named, collapsible container of steps."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    title: str = ""
    is_collapsed: bool = Field(default=False, alias="isCollapsed")
    style: GroupStyle = GroupStyle.DEFAULT
    steps: tuple[Step, ...] = ()

    @field_validator("style", mode="before")
    @classmethod
    def _normalize_style(cls, value: Any) -> Any:
        """Accept a missing style and the ``{"type": ...}`` object form."""
        if value is None:
            return GroupStyle.DEFAULT
        if isinstance(value, dict):
            return value.get("type") or GroupStyle.DEFAULT
        return value

    @property
    def step_count(self) -> int:
        return len(self.steps)

    def index_of(self, step_id: str) -> int | None:
        """Position of *step_id* in this group, or None."""
        for index, step in enumerate(self.steps):
            if step.id == step_id:
                return index
        return None


class StepLocation(NamedTuple):
    """Where a step currently lives."""

    group_index: int
    step_index: int
    group_id: str


class Document(BaseModel):
    """Ordered sequence of step groups."""

    model_config = ConfigDict(frozen=True)

    groups: tuple[StepGroup, ...] = ()

    @model_validator(mode="after")
    def _check_unique_ids(self) -> Self:
        group_dupes = _duplicates(g.id for g in self.groups)
        if group_dupes:
            msg = f"Duplicate group ids: {', '.join(group_dupes)}"
            raise ValueError(msg)
        step_dupes = _duplicates(s.id for s in self.iter_steps())
        if step_dupes:
            msg = f"Duplicate step ids: {', '.join(step_dupes)}"
            raise ValueError(msg)
        return self

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    def iter_steps(self) -> Iterator[Step]:
        """All steps in document reading order."""
        for group in self.groups:
            yield from group.steps

    @property
    def step_count(self) -> int:
        return sum(len(g.steps) for g in self.groups)

    def group_ids(self) -> list[str]:
        return [g.id for g in self.groups]

    def step_ids(self) -> list[str]:
        return [s.id for s in self.iter_steps()]

    def group_index(self, group_id: str) -> int | None:
        for index, group in enumerate(self.groups):
            if group.id == group_id:
                return index
        return None

    def get_group(self, group_id: str) -> StepGroup | None:
        index = self.group_index(group_id)
        return None if index is None else self.groups[index]

    def locate_step(self, step_id: str) -> StepLocation | None:
        """Find the group and position currently holding *step_id*."""
        for group_index, group in enumerate(self.groups):
            step_index = group.index_of(step_id)
            if step_index is not None:
                return StepLocation(group_index, step_index, group.id)
        return None

    def get_step(self, step_id: str) -> Step | None:
        loc = self.locate_step(step_id)
        if loc is None:
            return None
        return self.groups[loc.group_index].steps[loc.step_index]

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_snapshot(self) -> dict[str, Any]:
        """Serialize to the JSON-compatible wire shape."""
        data = self.model_dump(mode="json", by_alias=True)
        return {"version": SNAPSHOT_VERSION, "groups": data["groups"]}

    @classmethod
    def from_snapshot(cls, data: dict[str, Any] | list[Any]) -> Document:
        """Build a document from a snapshot.

        A bare list is accepted as the group sequence itself.

        Raises:
            pydantic.ValidationError: If the data breaks the model or its
                identity invariants.
            ValueError: If the snapshot version is newer than supported.
        """
        if isinstance(data, list):
            return cls.model_validate({"groups": data})
        version = data.get("version", SNAPSHOT_VERSION)
        if version > SNAPSHOT_VERSION:
            msg = f"Unsupported snapshot version: {version}"
            raise ValueError(msg)
        return cls.model_validate({"groups": data.get("groups", [])})


def _duplicates(ids: Iterable[str]) -> list[str]:
    counts = Counter(ids)
    return sorted(i for i, n in counts.items() if n > 1)
