"""Tests for operation-specific Rich renderers."""

from __future__ import annotations

from typing import Any

from stepdoc.output.renderers import render_quiet, render_result
from stepdoc.services.result import ServiceError, ServiceResult


def _snapshot(*, collapsed: bool = False) -> dict[str, Any]:
    return {
        "version": 1,
        "groups": [
            {
                "id": "grp_aaaaaaaaaaaa",
                "title": "Install",
                "isCollapsed": collapsed,
                "style": "info",
                "steps": [
                    {"id": "stp_111111111111", "type": "text", "payload": {"content": "Download it"}},
                    {"id": "stp_222222222222", "type": "code", "payload": {"code": "make\nmake install"}},
                ],
            },
            {"id": "grp_bbbbbbbbbbbb", "title": "Done", "isCollapsed": False, "style": "success", "steps": []},
        ],
    }


class TestRenderMutation:
    def test_move_step(self) -> None:
        result = ServiceResult(
            ok=True,
            op="move_step",
            data={
                "id": "stp_111111111111",
                "group_id": "grp_bbbbbbbbbbbb",
                "from_group_id": "grp_aaaaaaaaaaaa",
                "index": 0,
                "document": _snapshot(),
            },
        )
        output = render_result(result)
        assert "OK" in output
        assert "move_step" in output
        assert "from_group_id: grp_aaaaaaaaaaaa" in output
        assert "index: 0" in output
        assert "Download it" not in output

    def test_list_values_compact(self) -> None:
        result = ServiceResult(
            ok=True,
            op="delete_group",
            data={"id": "grp_a", "deleted_steps": ["stp_1", "stp_2"]},
        )
        assert 'deleted_steps: ["stp_1","stp_2"]' in render_result(result)

    def test_verbose_shows_meta(self) -> None:
        result = ServiceResult(ok=True, op="add_group", data={"id": "grp_a"}, meta={"revision": 4})
        assert "revision: 4" in render_result(result, verbose=True)
        assert "revision" not in render_result(result)


class TestRenderDocument:
    def test_tree(self) -> None:
        result = ServiceResult(ok=True, op="get_document", data={"document": _snapshot()})
        output = render_result(result)
        assert "Document (2 groups)" in output
        assert "Install" in output
        assert "[2 steps]" in output
        assert "Download it" in output
        assert "make" in output
        assert "make install" not in output

    def test_collapsed_group_hides_steps(self) -> None:
        result = ServiceResult(
            ok=True, op="get_document", data={"document": _snapshot(collapsed=True)}
        )
        output = render_result(result)
        assert "▸ Install" in output
        assert "stp_111111111111" not in output


class TestRenderGroupTable:
    def test_table(self) -> None:
        items = [
            {"id": "grp_a", "title": "Intro", "style": "warning", "isCollapsed": True, "step_count": 3, "index": 0},
        ]
        result = ServiceResult(ok=True, op="list_groups", data={"count": 1, "items": items})
        output = render_result(result)
        assert "Intro" in output
        assert "warning" in output
        assert "yes" in output


class TestRenderGeneric:
    def test_skips_document(self) -> None:
        result = ServiceResult(
            ok=True, op="get_step", data={"id": "stp_1", "type": "text", "document": _snapshot()}
        )
        output = render_result(result)
        assert "type: text" in output
        assert "Install" not in output


class TestRenderError:
    def test_error_line(self) -> None:
        result = ServiceResult(
            ok=False,
            op="delete_step",
            error=ServiceError(
                code="NOT_FOUND",
                message="No step found with ID: stp_x",
                detail={"kind": "step"},
            ),
        )
        output = render_result(result)
        assert "ERROR" in output
        assert "No step found with ID: stp_x" in output
        assert "kind" not in output
        assert "kind: step" in render_result(result, verbose=True)


class TestRenderQuiet:
    def test_id(self) -> None:
        assert render_quiet(ServiceResult(ok=True, op="add_step", data={"id": "stp_1"})) == "stp_1"

    def test_items(self) -> None:
        result = ServiceResult(
            ok=True, op="list_groups", data={"items": [{"id": "grp_a"}, {"id": "grp_b"}]}
        )
        assert render_quiet(result) == "grp_a\ngrp_b"

    def test_no_id(self) -> None:
        assert render_quiet(ServiceResult(ok=True, op="get_document")) == "OK: get_document"

    def test_error(self) -> None:
        result = ServiceResult(ok=False, op="x", error=ServiceError(code="E", message="boom"))
        assert render_quiet(result) == "ERROR: x — boom"
