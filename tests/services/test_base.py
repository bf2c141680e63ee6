"""Tests for BaseService result helpers and post_mutation dispatch."""

from __future__ import annotations

from typing import Any

import pluggy
from pydantic import ValidationError

from stepdoc.domain.document import Document, Step
from stepdoc.domain.errors import ImmutableFieldError, NotFoundError
from stepdoc.domain.types import EntityKind
from stepdoc.plugins.manager import PluginManager
from stepdoc.services.base import BaseService
from stepdoc.services.commands import AddStep
from stepdoc.services.groups import GroupService
from stepdoc.services.session import EditorSession
from stepdoc.services.steps import StepService

hookimpl = pluggy.HookimplMarker("stepdoc")


class _Recorder:
    def __init__(self) -> None:
        self.events: list[tuple[str, list[str], dict[str, Any]]] = []

    @hookimpl
    def post_mutation(self, op: str, affected_ids: list[str], snapshot: dict[str, Any]) -> None:
        self.events.append((op, affected_ids, snapshot))


class _Broken:
    @hookimpl
    def post_mutation(self, op: str, affected_ids: list[str], snapshot: dict[str, Any]) -> None:
        raise RuntimeError("disk full")


def _session_with(plugin: object, document: Document) -> EditorSession:
    pm = PluginManager()
    pm.register_plugin(plugin)
    return EditorSession(document, plugin_manager=pm)


class TestBaseService:
    def test_session_stored(self, session: EditorSession) -> None:
        assert BaseService(session)._session is session

    def test_parse_passes_model_through(self, session: EditorSession) -> None:
        cmd = AddStep(group_id="A", type="text")
        assert BaseService(session)._parse(AddStep, cmd) is cmd

    def test_parse_copies_step_instances(self, session: EditorSession) -> None:
        payload = {"content": "draft"}
        step = Step(id="s1", type="text").model_copy(update={"payload": payload})
        parsed = BaseService(session)._parse(Step, step)
        assert parsed is not step
        payload["content"] = "changed"
        assert parsed.payload == {"content": "draft"}

    def test_failed_detail(self) -> None:
        result = BaseService._failed("delete_step", NotFoundError(EntityKind.STEP, "s9"))
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
        assert result.error.detail == {"kind": "step", "entity_id": "s9"}

    def test_failed_immutable(self) -> None:
        exc = ImmutableFieldError("s1", "type", "text", "code")
        result = BaseService._failed("update_step", exc)
        assert result.error is not None
        assert result.error.detail == {"entity_id": "s1", "field": "type"}

    def test_invalid_lists_errors(self) -> None:
        try:
            AddStep.model_validate({"groupId": "A", "type": "video"})
        except ValidationError as exc:
            result = BaseService._invalid("add_step", exc)
        assert result.error is not None
        assert result.error.code == "INVALID_COMMAND"
        assert result.error.detail["errors"][0].startswith("type:")

    def test_invalid_from_value_error(self) -> None:
        result = BaseService._invalid("op", ValueError("bad"))
        assert result.error is not None
        assert result.error.message == "bad"


class TestPostMutationDispatch:
    def test_dispatched_on_success(self, two_group_doc: Document) -> None:
        recorder = _Recorder()
        session = _session_with(recorder, two_group_doc)
        StepService(session).move_step("s2", "A", "B", 0)
        assert len(recorder.events) == 1
        op, affected, snapshot = recorder.events[0]
        assert op == "move_step"
        assert affected == ["s2"]
        assert snapshot == session.document.to_snapshot()

    def test_not_dispatched_on_failure(self, two_group_doc: Document) -> None:
        recorder = _Recorder()
        session = _session_with(recorder, two_group_doc)
        GroupService(session).delete_group("Z")
        assert recorder.events == []

    def test_plugin_failure_becomes_warning(self, two_group_doc: Document) -> None:
        session = _session_with(_Broken(), two_group_doc)
        result = GroupService(session).toggle_collapse("A")
        assert result.ok
        assert result.warnings == ["Plugin dispatch failed for toggle_collapse"]
        assert session.document.groups[0].is_collapsed is True

    def test_not_dispatched_for_empty_update(self, two_group_doc: Document) -> None:
        recorder = _Recorder()
        session = _session_with(recorder, two_group_doc)
        result = GroupService(session).update_group("A", {})
        assert result.ok
        assert recorder.events == []
        assert session.revision == 0

    def test_not_dispatched_for_drop_at_origin(self, two_group_doc: Document) -> None:
        recorder = _Recorder()
        session = _session_with(recorder, two_group_doc)
        StepService(session).apply_drop(
            {
                "draggableId": "s2",
                "source": {"droppableId": "group-A", "index": 1},
                "destination": {"droppableId": "group-A", "index": 1},
            }
        )
        assert recorder.events == []
