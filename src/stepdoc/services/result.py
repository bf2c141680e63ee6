"""Result envelope returned by every stepdoc service call.

Services never raise for expected failures. A missing group or step, a
type change, or a malformed command comes back as ``ok=False`` with a
:class:`ServiceError` whose ``code`` is one of ``NOT_FOUND``,
``TYPE_IMMUTABLE`` or ``INVALID_COMMAND``. The CLI and any embedding UI
read the same envelope.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Why an operation was refused.

    ``detail`` carries the ``kind``, ``entity_id`` and ``field`` of the
    engine error when it has them, or ``errors`` for an invalid command.
    """

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one service call.

    Attributes:
        ok: False when the document was left untouched because of *error*.
        op: Operation that actually ran. ``apply_drop`` reports
            ``move_step`` or ``move_group`` once it has resolved the drop,
            and keeps ``apply_drop`` for drops it rejects or that move
            nothing.
        data: The touched group or step, plus the full ``document``
            snapshot after a committed change.
        warnings: Non-fatal notes, such as an empty update or a failed
            plugin hook.
        error: Set exactly when ``ok`` is False.
        meta: ``revision`` after a mutation, and ``telemetry`` spans in
            verbose mode.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None
