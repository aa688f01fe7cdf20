"""PickerService — orchestrates selection, presets and the month pair.

Holds the picker state and exposes the operations a rendering shell
calls (open, close, clear, preset, date click, month navigation) plus
read accessors for all derived view state.

Every emitted range is announced through the ``value_change`` hook. The
owning shell keeps the canonical value and may push it back with
``set_value()``; the service never assumes its copy is authoritative.

Closing is two-phase: ``close()`` returns immediately and the validation
flag is computed by ``finalize_close()``, after the owner had a chance
to apply its own value update. With a ``scheduler`` (e.g. an asyncio
loop's ``call_soon``) the second phase is scheduled automatically.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from rangepick.config.models import PickerConfig
from rangepick.domain.dates import (
    MONTH_NAMES,
    WEEKDAY_LABELS,
    build_month_grid,
    is_same_day,
    month_label,
    normalize,
    year_options,
)
from rangepick.domain.months import MonthPairController
from rangepick.domain.presets import (
    Preset,
    build_catalog,
    compute_range,
    detect_preset,
    find_preset,
)
from rangepick.domain.selection import SelectionBehavior
from rangepick.domain.types import CUSTOM_PRESET, ActiveField, DateRange, Side
from rangepick.services._helpers import iso_or_none, local_today
from rangepick.services.base import BaseService
from rangepick.services.result import ServiceResult

if TYPE_CHECKING:
    from rangepick.plugins.manager import PluginManager

logger = logging.getLogger(__name__)

START_MISSING_MESSAGE = "Please select a start date."
END_MISSING_MESSAGE = "Please select an end date."
BOTH_MISSING_MESSAGE = "Please select a start and end date."

Scheduler = Callable[[Callable[[], Any]], Any]


class PickerState(BaseModel):
    """Snapshot of the picker, replaced wholesale on every transition."""

    model_config = {"frozen": True}

    range: DateRange = Field(default_factory=DateRange)
    active_field: ActiveField = ActiveField.START
    is_open: bool = False
    active_preset: str | None = None
    show_validation_error: bool = False


class PickerService(BaseService):
    """Date range picker orchestration.

    Parameters:
        config: Picker configuration (mode, presets, editing policy).
        value: Starting range. Falls back to ``config.initial_preset``,
            then to an empty range.
        today: Reference day for presets and initial months.
        plugin_manager: Receives ``value_change`` and lifecycle hooks.
        scheduler: Callable that runs a callback after the current turn.
        on_value_change: Shortcut for a value listener; a plugin manager
            is created when none is given.
    """

    def __init__(
        self,
        config: PickerConfig | None = None,
        *,
        value: DateRange | None = None,
        today: date | datetime | None = None,
        plugin_manager: PluginManager | None = None,
        scheduler: Scheduler | None = None,
        on_value_change: Callable[[DateRange], object] | None = None,
    ) -> None:
        if on_value_change is not None:
            if plugin_manager is None:
                from rangepick.plugins.manager import PluginManager

                plugin_manager = PluginManager()
            plugin_manager.add_value_listener(on_value_change)
        super().__init__(plugin_manager)
        self._config = config or PickerConfig()
        self._today = normalize(today) if today is not None else local_today()
        self._catalog = build_catalog(include_last_year=self._config.include_last_year_preset)
        self._behavior = SelectionBehavior(
            self._config.mode,
            editing_after_complete=self._config.editing_after_complete,
        )
        self._months = MonthPairController(self._config.mode, today=self._today)
        self._scheduler = scheduler
        self._close_pending = False

        if value is None and self._config.initial_preset is not None:
            value = compute_range(self._config.initial_preset, self._today)
        value = value or DateRange()
        self._state = PickerState(
            range=value,
            active_preset=detect_preset(value, self._today, self._catalog),
        )

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> PickerConfig:
        return self._config

    @property
    def today(self) -> date:
        return self._today

    @property
    def catalog(self) -> tuple[Preset, ...]:
        return self._catalog

    @property
    def months(self) -> MonthPairController:
        return self._months

    @property
    def state(self) -> PickerState:
        return self._state

    @property
    def range(self) -> DateRange:
        return self._state.range

    @property
    def active_field(self) -> ActiveField:
        return self._state.active_field

    @property
    def is_open(self) -> bool:
        return self._state.is_open

    @property
    def active_preset(self) -> str | None:
        return self._state.active_preset

    @property
    def show_validation_error(self) -> bool:
        return self._state.show_validation_error

    @property
    def close_pending(self) -> bool:
        """True between ``close()`` and ``finalize_close()``."""
        return self._close_pending

    # --- validation view ---

    @property
    def missing_start(self) -> bool:
        return self.range.start is None

    @property
    def missing_end(self) -> bool:
        return self.range.end is None

    @property
    def show_start_invalid(self) -> bool:
        return self.show_validation_error and self.missing_start

    @property
    def show_end_invalid(self) -> bool:
        return self.show_validation_error and self.missing_end

    @property
    def start_field_message(self) -> str:
        if self.show_validation_error and self.missing_start and not self.missing_end:
            return START_MISSING_MESSAGE
        return ""

    @property
    def end_field_message(self) -> str:
        if self.show_validation_error and not self.missing_start and self.missing_end:
            return END_MISSING_MESSAGE
        return ""

    @property
    def general_message(self) -> str:
        if self.show_validation_error and self.missing_start and self.missing_end:
            return BOTH_MISSING_MESSAGE
        return ""

    # --- calendar view ---

    @property
    def top_month(self) -> date:
        return self._months.top

    @property
    def bottom_month(self) -> date:
        return self._months.bottom

    @property
    def weekday_labels(self) -> tuple[str, ...]:
        return WEEKDAY_LABELS

    @property
    def month_options(self) -> tuple[str, ...]:
        return MONTH_NAMES

    def grid(self, side: Side) -> list[date | None]:
        return build_month_grid(self._months.anchor(side))

    def years(self, side: Side) -> list[int]:
        """Year selector options for *side*."""
        return year_options(self._months.anchor(side).year, self._config.year_radius)

    def month_index(self, side: Side) -> int:
        """Zero-based month shown on *side*."""
        return self._months.anchor(side).month - 1

    def year_value(self, side: Side) -> int:
        return self._months.anchor(side).year

    def label(self, side: Side) -> str:
        return month_label(self._months.anchor(side))

    def in_range(self, day: date | datetime) -> bool:
        """Whether *day* lies inside the complete range (inclusive)."""
        start, end = self.range.start, self.range.end
        if start is None or end is None:
            return False
        low, high = (start, end) if start <= end else (end, start)
        return low <= normalize(day) <= high

    def is_start(self, day: date | datetime) -> bool:
        return self.range.start is not None and is_same_day(day, self.range.start)

    def is_end(self, day: date | datetime) -> bool:
        return self.range.end is not None and is_same_day(day, self.range.end)

    def snapshot(self) -> dict[str, Any]:
        """Serializable view of the state, used as ServiceResult data."""
        return {
            "today": self._today.isoformat(),
            "range": self.range.to_dict(),
            "active_field": str(self.active_field),
            "is_open": self.is_open,
            "active_preset": self.active_preset,
            "show_validation_error": self.show_validation_error,
            "close_pending": self._close_pending,
            "top_month": iso_or_none(self.top_month),
            "bottom_month": iso_or_none(self.bottom_month),
            "messages": {
                "start": self.start_field_message,
                "end": self.end_field_message,
                "general": self.general_message,
            },
        }

    # ------------------------------------------------------------------
    # Panel lifecycle
    # ------------------------------------------------------------------

    def open(self, field: ActiveField | str | None = None) -> ServiceResult:
        """Open the panel, optionally targeting *field* for the next click."""
        op = "open"
        warnings: list[str] = []
        updates: dict[str, Any] = {"is_open": True}
        anchor: date | None = None

        if field is not None:
            try:
                field = ActiveField(field)
            except ValueError:
                return self._failure(op, "INVALID_FIELD", f"Unknown field: {field}", field=field)
            updates["active_field"] = field
            anchor = self._behavior.open_anchor(self.range, field, self._today)

        self._months.sync_to_range(self.range, self._today, anchor)
        preset = detect_preset(self.range, self._today, self._catalog)
        if preset is not None:
            updates["active_preset"] = preset
        self._state = self._state.model_copy(update=updates)

        logger.debug(
            "Picker opened",
            extra={"active_field": str(self.active_field), "value": self.range},
        )
        self._dispatch_event("picker_opened", {"active_field": str(self.active_field)}, warnings)
        return self._result(op, warnings)

    def open_for(self, field: ActiveField | str) -> ServiceResult:
        """Open the panel with *field* as the edit target."""
        return self.open(field)

    def close(self) -> ServiceResult:
        """Close the panel; validation is deferred to ``finalize_close()``."""
        return self._close("close")

    def outside_interaction(self) -> ServiceResult:
        """Interaction outside the picker closes it when open."""
        op = "outside_interaction"
        if not self.is_open:
            return self._result(op, [])
        return self._close(op)

    def _close(self, op: str) -> ServiceResult:
        self._state = self._state.model_copy(update={"is_open": False})
        self._close_pending = True
        if self._scheduler is not None:
            self._scheduler(self.finalize_close)
        logger.debug("Picker closed, validation pending", extra={"value": self.range})
        return self._result(op, [])

    def finalize_close(self) -> ServiceResult:
        """Second phase of close: flag an incomplete range."""
        op = "finalize_close"
        warnings: list[str] = []
        valid = self.range.is_complete
        self._close_pending = False
        self._state = self._state.model_copy(update={"show_validation_error": not valid})
        logger.debug("Close validation", extra={"value": self.range, "valid": valid})
        self._dispatch_event("picker_closed", {"valid": valid}, warnings)
        return self._result(op, warnings)

    # ------------------------------------------------------------------
    # Range changes
    # ------------------------------------------------------------------

    def clear(self) -> ServiceResult:
        """Empty the range, flag it invalid, and keep the panel open."""
        op = "clear"
        warnings: list[str] = []
        transition = self._behavior.clear()
        self._state = self._state.model_copy(
            update={
                "range": transition.range,
                "active_field": transition.active_field,
                "show_validation_error": True,
                "active_preset": None,
                "is_open": True,
            }
        )
        self._months.sync_to_range(transition.range, self._today)
        self._emit(transition.range, warnings)
        return self._result(op, warnings)

    def select_preset(self, key: str) -> ServiceResult:
        """Apply quick preset *key* from the configured catalog."""
        op = "select_preset"
        warnings: list[str] = []
        preset = find_preset(key, self._catalog)
        if preset is None:
            return self._failure(
                op,
                "UNKNOWN_PRESET",
                f"Unknown preset: {key}",
                key=key,
                available=[str(p.key) for p in self._catalog],
            )

        next_range = compute_range(preset.key, self._today)
        updates: dict[str, Any] = {
            "range": next_range,
            "show_validation_error": False,
            "active_preset": str(preset.key),
            "active_field": ActiveField.END,
        }
        if self._config.auto_close_on_preset_select:
            updates["is_open"] = False
        self._state = self._state.model_copy(update=updates)
        self._months.sync_to_range(next_range, self._today)
        self._emit(next_range, warnings)
        return self._result(op, warnings)

    def pick_date(self, day: date | datetime) -> ServiceResult:
        """Apply a click on calendar day *day*."""
        op = "pick_date"
        warnings: list[str] = []
        transition = self._behavior.pick_date(self.range, day, self.active_field)
        updates: dict[str, Any] = {
            "range": transition.range,
            "active_field": transition.active_field,
        }
        if transition.range.is_complete:
            updates["show_validation_error"] = False
            updates["active_preset"] = (
                detect_preset(transition.range, self._today, self._catalog) or CUSTOM_PRESET
            )
        self._state = self._state.model_copy(update=updates)
        logger.debug(
            "Date picked",
            extra={
                "clicked": normalize(day),
                "value": transition.range,
                "active_field": str(transition.active_field),
            },
        )
        self._emit(transition.range, warnings)
        return self._result(op, warnings)

    def set_value(self, value: DateRange) -> ServiceResult:
        """Accept the owner's canonical range without re-emitting it."""
        op = "set_value"
        updates: dict[str, Any] = {"range": value}
        if value.is_complete:
            updates["show_validation_error"] = False
            preset = detect_preset(value, self._today, self._catalog)
            if preset is not None:
                updates["active_preset"] = preset
        self._state = self._state.model_copy(update=updates)
        return self._result(op, [])

    # ------------------------------------------------------------------
    # Month navigation
    # ------------------------------------------------------------------

    def navigate(
        self,
        side: Side | str,
        *,
        step: int | None = None,
        month_index: int | None = None,
        year: int | None = None,
    ) -> ServiceResult:
        """Move one calendar by a month step, to a month index, or to a year.

        Exactly one of *step* (``-1``/``1``), *month_index* (0..11) or
        *year* must be given.
        """
        op = "navigate"
        try:
            side = Side(side)
        except ValueError:
            return self._failure(op, "INVALID_SIDE", f"Unknown calendar side: {side}", side=side)

        given = [v for v in (step, month_index, year) if v is not None]
        if len(given) != 1:
            return self._failure(
                op, "INVALID_NAVIGATION", "Give exactly one of step, month_index or year"
            )
        if step is not None and step not in (-1, 1):
            return self._failure(op, "INVALID_NAVIGATION", f"Step must be -1 or 1: {step}")
        if month_index is not None and not 0 <= month_index <= 11:
            return self._failure(
                op, "INVALID_MONTH", f"Month index out of range: {month_index}", month=month_index
            )
        if year is not None and not 1 <= year <= 9999:
            return self._failure(op, "INVALID_YEAR", f"Year out of range: {year}", year=year)

        try:
            if step == 1:
                self._months.next_month(side)
            elif step == -1:
                self._months.prev_month(side)
            elif month_index is not None:
                self._months.set_month_index(side, month_index)
            elif year is not None:
                self._months.set_year(side, year)
        except ValueError as exc:
            return self._failure(op, "OUT_OF_RANGE", str(exc), side=str(side))
        return self._result(op, [])

    def prev_month(self, side: Side | str) -> ServiceResult:
        return self.navigate(side, step=-1)

    def next_month(self, side: Side | str) -> ServiceResult:
        return self.navigate(side, step=1)

    def set_month_index(self, side: Side | str, index: int) -> ServiceResult:
        return self.navigate(side, month_index=index)

    def set_year(self, side: Side | str, year: int) -> ServiceResult:
        return self.navigate(side, year=year)

    # ------------------------------------------------------------------
    # Catalog and calendar queries
    # ------------------------------------------------------------------

    def describe_presets(self) -> ServiceResult:
        """List the configured presets with their ranges for today."""
        items: list[dict[str, Any]] = []
        for preset in self._catalog:
            computed = compute_range(preset.key, self._today)
            items.append({"key": str(preset.key), "label": preset.label, **computed.to_dict()})
        return ServiceResult(
            ok=True,
            op="presets",
            data={"today": self._today.isoformat(), "count": len(items), "items": items},
        )

    def detect(self, value: DateRange) -> ServiceResult:
        """Report which preset, if any, *value* matches."""
        return ServiceResult(
            ok=True,
            op="detect",
            data={
                "today": self._today.isoformat(),
                "range": value.to_dict(),
                "preset": detect_preset(value, self._today, self._catalog),
            },
        )

    def month_view(self, anchor: date | datetime) -> ServiceResult:
        """Grid, label and year options for *anchor*'s month."""
        first = normalize(anchor).replace(day=1)
        return ServiceResult(
            ok=True,
            op="month",
            data={
                "today": self._today.isoformat(),
                "month": first.isoformat(),
                "label": month_label(first),
                "weekdays": list(WEEKDAY_LABELS),
                "cells": [iso_or_none(cell) for cell in build_month_grid(first)],
                "years": year_options(first.year, self._config.year_radius),
            },
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _emit(self, value: DateRange, warnings: list[str]) -> None:
        self._dispatch_event("value_change", {"value": value}, warnings)

    def _result(self, op: str, warnings: list[str]) -> ServiceResult:
        return ServiceResult(ok=True, op=op, data=self.snapshot(), warnings=warnings)
