"""Tests for ServiceResult and ServiceError."""

import json

import pytest
from pydantic import ValidationError

from tasktrack.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_success_construction(self) -> None:
        result = ServiceResult.success("add_category", {"id": "cat_x"})
        assert result.ok is True
        assert result.op == "add_category"
        assert result.data == {"id": "cat_x"}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_failure_construction(self) -> None:
        result = ServiceResult.failure(
            "rename_task", "INVALID_LENGTH", "2 to 140 symbols", id="task_x"
        )
        assert result.ok is False
        assert result.data == {}
        assert result.error is not None
        assert result.error.code == "INVALID_LENGTH"
        assert result.error.message == "2 to 140 symbols"
        assert result.error.detail == {"id": "task_x"}

    def test_success_with_warnings(self) -> None:
        result = ServiceResult.success("toggle_task", warnings=["State not durably saved"])
        assert result.warnings == ["State not durably saved"]
        assert result.data == {}

    def test_json_serialization(self) -> None:
        result = ServiceResult.success("add_task", {"id": "task_x", "title": "Wash"})
        parsed = json.loads(result.model_dump_json())
        assert parsed["ok"] is True
        assert parsed["op"] == "add_task"
        assert parsed["data"]["title"] == "Wash"
        assert parsed["error"] is None

    def test_frozen(self) -> None:
        result = ServiceResult.success("show")
        with pytest.raises(ValidationError):
            result.ok = False  # type: ignore[misc]


class TestServiceError:
    def test_default_detail(self) -> None:
        error = ServiceError(code="DUPLICATE_NAME", message="Category already exists")
        assert error.detail == {}
