"""ServiceResult and ServiceError — the picker's operation contract.

INVARIANT: Every PickerService operation returns ServiceResult.
The CLI and any rendering shell consume this type. Incomplete ranges
are view state, never errors.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult.

    Codes: ``UNKNOWN_PRESET``, ``INVALID_FIELD``, ``INVALID_SIDE``,
    ``INVALID_NAVIGATION``, ``INVALID_MONTH``, ``INVALID_YEAR``,
    ``OUT_OF_RANGE``.
    """

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type for picker operations.

    Attributes:
        ok: Whether the operation was accepted.
        op: Name of the operation (e.g. ``"pick_date"``).
        data: Picker state snapshot after the operation.
        warnings: Non-fatal issues (e.g. a failing value listener).
        error: Structured error if ``ok`` is False.
        meta: Optional metadata.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None
