"""BaseService — abstract foundation for all stepdoc services.

Every service receives an :class:`EditorSession` at construction time.
Services own their transaction boundaries via
``self._session.transaction()`` and translate engine errors into
:class:`ServiceResult` failures.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ValidationError

from stepdoc.domain.errors import StepdocError
from stepdoc.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from stepdoc.services.session import EditorSession

logger = logging.getLogger(__name__)

INVALID_COMMAND = "INVALID_COMMAND"


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class GroupService(BaseService):
            def toggle_collapse(self, group_id: str) -> ServiceResult:
                with self._session.transaction() as txn:
                    ...
    """

    def __init__(self, session: EditorSession) -> None:
        self._session = session

    def _parse[T: BaseModel](self, model_cls: type[T], data: Any) -> T:
        """Validate a command payload at the boundary.

        Model instances are validated again too, so a caller keeps no
        handle on mutable state inside the value the service stores.

        Raises:
            pydantic.ValidationError: Converted by callers via :meth:`_invalid`.
        """
        return model_cls.model_validate(data)

    def _committed(
        self,
        op: str,
        data: dict[str, Any],
        affected_ids: list[str],
        *,
        warnings: list[str] | None = None,
    ) -> ServiceResult:
        """Build the success result for a mutation and notify plugins."""
        warnings = list(warnings or [])
        snapshot = self._session.document.to_snapshot()
        self._dispatch_event(op, affected_ids, snapshot, warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={**data, "document": snapshot},
            warnings=warnings,
            meta={"revision": self._session.revision},
        )

    def _dispatch_event(
        self,
        op: str,
        affected_ids: list[str],
        snapshot: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Dispatch ``post_mutation``. No-op without a plugin manager.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        pm = self._session.plugin_manager
        if pm is None:
            return
        try:
            pm.hook.post_mutation(op=op, affected_ids=affected_ids, snapshot=snapshot)
        except Exception:
            logger.warning("post_mutation dispatch failed for %s", op, exc_info=True)
            warnings.append(f"Plugin dispatch failed for {op}")

    @staticmethod
    def _failed(op: str, exc: StepdocError) -> ServiceResult:
        detail: dict[str, Any] = {}
        for attr in ("kind", "entity_id", "field"):
            value = getattr(exc, attr, None)
            if value is not None:
                detail[attr] = str(value)
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(code=exc.code, message=str(exc), detail=detail),
        )

    @staticmethod
    def _invalid(op: str, exc: ValidationError | ValueError) -> ServiceResult:
        if isinstance(exc, ValidationError):
            errors = [
                f"{'.'.join(str(p) for p in err['loc']) or 'command'}: {err['msg']}"
                for err in exc.errors()
            ]
        else:
            errors = [str(exc)]
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(
                code=INVALID_COMMAND,
                message="; ".join(errors),
                detail={"errors": errors},
            ),
        )
