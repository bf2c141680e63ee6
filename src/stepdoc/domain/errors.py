"""Typed failures raised by the mutation engine."""

from __future__ import annotations

from stepdoc.domain.types import EntityKind


class StepdocError(Exception):
    """Base class for stepdoc domain errors."""

    code = "STEPDOC_ERROR"


class NotFoundError(StepdocError, LookupError):
    """A referenced group or step does not exist in the document.

    Always recoverable: the document the operation was given is unchanged.
    """

    code = "NOT_FOUND"

    def __init__(self, kind: EntityKind, entity_id: str, detail: str | None = None) -> None:
        self.kind = kind
        self.entity_id = entity_id
        message = f"No {kind} found with ID: {entity_id}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)

    @property
    def message(self) -> str:
        return str(self)


class ImmutableFieldError(StepdocError, ValueError):
    """An update tried to change a field that is fixed at creation."""

    code = "TYPE_IMMUTABLE"

    def __init__(self, entity_id: str, field: str, current: str, requested: str) -> None:
        self.entity_id = entity_id
        self.field = field
        super().__init__(
            f"Cannot change {field} of {entity_id} from {current!r} to {requested!r}; "
            "delete it and add a new one instead"
        )
