"""Step types and group style enums."""

from __future__ import annotations

from enum import StrEnum


class StepType(StrEnum):
    """Content block kinds a step can hold."""

    TEXT = "text"
    IMAGE = "image"
    CODE = "code"
    HTML = "html"
    FILE = "file"


class GroupStyle(StrEnum):
    """Presentational variant of a group. No behavioral effect."""

    DEFAULT = "default"
    INFO = "info"
    WARNING = "warning"
    SUCCESS = "success"
    ERROR = "error"


class EntityKind(StrEnum):
    """Kinds of addressable entities in a document."""

    STEP = "step"
    GROUP = "group"
