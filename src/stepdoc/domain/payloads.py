"""Default payloads for each step type.

The core treats a payload as an opaque mapping beyond the step's
``type`` tag. These models only describe what a freshly added step
starts with, so per-type editors always receive the keys they expect.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from stepdoc.domain.types import StepType


class TextPayload(BaseModel):
    """Free-form text block."""

    content: str = ""


class CodePayload(BaseModel):
    """Source snippet plus highlighting language."""

    code: str = ""
    language: str = "javascript"


class HtmlPayload(BaseModel):
    """Raw HTML markup."""

    html: str = ""


class ImagePayload(BaseModel):
    """Reference to an image plus its alt text and caption."""

    src: str = ""
    alt: str = ""
    caption: str = ""


class FilePayload(BaseModel):
    """Reference to an attached file."""

    name: str = ""
    url: str = ""
    size: int = 0


PAYLOAD_MODELS: dict[StepType, type[BaseModel]] = {
    StepType.TEXT: TextPayload,
    StepType.CODE: CodePayload,
    StepType.HTML: HtmlPayload,
    StepType.IMAGE: ImagePayload,
    StepType.FILE: FilePayload,
}


def default_payload(step_type: StepType, **overrides: Any) -> dict[str, Any]:
    """Return the empty payload for *step_type*.

    *overrides* replace individual defaults, e.g. the configured code
    language. Unknown keys are ignored.
    """
    model_cls = PAYLOAD_MODELS[StepType(step_type)]
    known = {k: v for k, v in overrides.items() if k in model_cls.model_fields}
    return model_cls(**known).model_dump()
