"""Tests for ServiceResult and ServiceError."""

import pytest

from rangepick.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_success_defaults(self) -> None:
        result = ServiceResult(ok=True, op="pick_date")
        assert result.data == {}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_failure_with_error(self) -> None:
        err = ServiceError(code="UNKNOWN_PRESET", message="Unknown preset: x")
        result = ServiceResult(ok=False, op="select_preset", error=err)
        assert result.error is not None
        assert result.error.code == "UNKNOWN_PRESET"
        assert result.error.detail == {}

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="clear")
        with pytest.raises(Exception):
            result.ok = False  # type: ignore[misc]

    def test_json_round_trip(self) -> None:
        result = ServiceResult(
            ok=True,
            op="detect",
            data={"range": {"start": "2024-06-09", "end": "2024-06-15"}, "preset": "last7"},
            warnings=["w"],
        )
        restored = ServiceResult.model_validate_json(result.model_dump_json())
        assert restored == result
