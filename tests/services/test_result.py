"""Tests for ServiceResult and ServiceError."""

import json

import pytest
from pydantic import ValidationError

from stepdoc.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_success_construction(self) -> None:
        result = ServiceResult(ok=True, op="add_step", data={"id": "stp_0123456789ab"})
        assert result.ok is True
        assert result.op == "add_step"
        assert result.data == {"id": "stp_0123456789ab"}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_error_construction(self) -> None:
        error = ServiceError(code="NOT_FOUND", message="No step found with ID: x")
        result = ServiceResult(ok=False, op="delete_step", error=error)
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_json_serialization(self) -> None:
        result = ServiceResult(ok=True, op="move_step", data={"index": 0}, meta={"revision": 3})
        parsed = json.loads(result.model_dump_json())
        assert parsed["ok"] is True
        assert parsed["data"]["index"] == 0
        assert parsed["meta"]["revision"] == 3

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="test")
        with pytest.raises(ValidationError):
            result.ok = False  # type: ignore[misc]


class TestServiceError:
    def test_default_detail(self) -> None:
        assert ServiceError(code="E", message="bad").detail == {}
