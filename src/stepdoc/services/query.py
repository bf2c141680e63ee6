"""QueryService — read access to the current document for rendering."""

from __future__ import annotations

from stepdoc.services.base import BaseService
from stepdoc.services.result import ServiceError, ServiceResult
from stepdoc.services.telemetry import traced


class QueryService(BaseService):
    """Read-only queries. Never opens a transaction."""

    @traced
    def get_document(self) -> ServiceResult:
        doc = self._session.document
        return ServiceResult(
            ok=True,
            op="get_document",
            data={
                "group_count": len(doc.groups),
                "step_count": doc.step_count,
                "document": doc.to_snapshot(),
            },
            meta={"revision": self._session.revision},
        )

    @traced
    def get_group(self, group_id: str) -> ServiceResult:
        op = "get_group"
        doc = self._session.document
        index = doc.group_index(group_id)
        if index is None:
            return _not_found(op, "group", group_id)
        group = doc.groups[index]
        data = group.model_dump(mode="json", by_alias=True)
        data.update(index=index, step_count=group.step_count)
        return ServiceResult(ok=True, op=op, data=data)

    @traced
    def get_step(self, step_id: str) -> ServiceResult:
        op = "get_step"
        doc = self._session.document
        loc = doc.locate_step(step_id)
        if loc is None:
            return _not_found(op, "step", step_id)
        step = doc.groups[loc.group_index].steps[loc.step_index]
        data = step.model_dump(mode="json")
        data.update(group_id=loc.group_id, index=loc.step_index)
        return ServiceResult(ok=True, op=op, data=data)

    @traced
    def list_groups(self) -> ServiceResult:
        """Group summaries in document order."""
        items = [
            {
                "id": g.id,
                "title": g.title,
                "style": str(g.style),
                "isCollapsed": g.is_collapsed,
                "step_count": g.step_count,
                "index": i,
            }
            for i, g in enumerate(self._session.document.groups)
        ]
        return ServiceResult(ok=True, op="list_groups", data={"count": len(items), "items": items})


def _not_found(op: str, kind: str, entity_id: str) -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(
            code="NOT_FOUND",
            message=f"No {kind} found with ID: {entity_id}",
            detail={"kind": kind, "entity_id": entity_id},
        ),
    )
