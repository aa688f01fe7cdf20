"""Core types and classification enums.

These define the range value, the editable fields, the selection modes,
the two calendar sides and the quick preset keys.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, field_validator


class ActiveField(StrEnum):
    """Which endpoint the next date click edits."""

    START = "start"
    END = "end"


class SelectionMode(StrEnum):
    """Selection modes, fixed at construction."""

    INDEPENDENT = "independent"
    DEPENDENT = "dependent"
    THREE_STATE = "three_state"


class Side(StrEnum):
    """The two displayed calendars."""

    TOP = "top"
    BOTTOM = "bottom"


class PresetKey(StrEnum):
    """Quick range keys."""

    LAST_7 = "last7"
    LAST_30 = "last30"
    LAST_90 = "last90"
    THIS_YEAR = "thisYear"
    LAST_YEAR = "lastYear"


# Highlight value when a complete range matches no catalog entry.
CUSTOM_PRESET = "custom"


class DateRange(BaseModel):
    """Start/end pair of calendar days. Either endpoint may be absent.

    The core only ever produces ``start <= end``; ranges arriving from
    outside are accepted as-is.
    """

    model_config = {"frozen": True}

    start: date | None = None
    end: date | None = None

    @field_validator("start", "end", mode="before")
    @classmethod
    def _truncate_time(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value.date()
        return value

    @property
    def is_empty(self) -> bool:
        return self.start is None and self.end is None

    @property
    def is_selecting(self) -> bool:
        """Start picked, end still pending."""
        return self.start is not None and self.end is None

    @property
    def is_complete(self) -> bool:
        return self.start is not None and self.end is not None

    def to_dict(self) -> dict[str, str | None]:
        return {
            "start": self.start.isoformat() if self.start else None,
            "end": self.end.isoformat() if self.end else None,
        }


EMPTY_RANGE = DateRange()
