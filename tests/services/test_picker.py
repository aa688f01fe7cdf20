"""Tests for PickerService — the picker's operation surface."""

from __future__ import annotations

import asyncio
from datetime import date, datetime
from typing import Any

import pytest

from rangepick.domain.types import ActiveField, DateRange, Side
from rangepick.plugins.hookspecs import hookimpl
from rangepick.plugins.manager import PluginManager
from rangepick.services.picker import (
    BOTH_MISSING_MESSAGE,
    END_MISSING_MESSAGE,
    START_MISSING_MESSAGE,
    PickerService,
)

d = date.fromisoformat
COMPLETE = DateRange(start=d("2024-03-05"), end=d("2024-03-20"))


def _months(picker: PickerService) -> tuple[str, str]:
    return picker.top_month.isoformat()[:7], picker.bottom_month.isoformat()[:7]


class FailingPlugin:
    @hookimpl
    def value_change(self, value: DateRange) -> None:
        raise RuntimeError("listener exploded")


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstruction:
    def test_defaults(self, make_picker: Any) -> None:
        picker = make_picker()
        assert picker.range == DateRange()
        assert picker.active_field is ActiveField.START
        assert picker.is_open is False
        assert picker.active_preset is None
        assert picker.show_validation_error is False
        assert _months(picker) == ("2024-06", "2024-07")

    def test_initial_value_detects_preset(self, make_picker: Any) -> None:
        picker = make_picker(value=DateRange(start=d("2024-06-09"), end=d("2024-06-15")))
        assert picker.active_preset == "last7"

    def test_initial_custom_value(self, make_picker: Any) -> None:
        assert make_picker(value=COMPLETE).active_preset == "custom"

    def test_initial_preset_config(self, make_picker: Any) -> None:
        picker = make_picker(initial_preset="last30")
        assert picker.range == DateRange(start=d("2024-05-17"), end=d("2024-06-15"))
        assert picker.active_preset == "last30"

    def test_explicit_value_beats_initial_preset(self, make_picker: Any) -> None:
        picker = make_picker(value=COMPLETE, initial_preset="last30")
        assert picker.range == COMPLETE

    def test_without_plugins(self) -> None:
        picker = PickerService(today=date(2024, 6, 15))
        result = picker.pick_date(d("2024-06-01"))
        assert result.ok
        assert result.warnings == []

    def test_today_datetime_truncated(self) -> None:
        assert PickerService(today=datetime(2024, 6, 15, 22, 10)).today == d("2024-06-15")

    def test_catalog_follows_config(self, make_picker: Any) -> None:
        assert len(make_picker().catalog) == 4
        assert len(make_picker(include_last_year_preset=True).catalog) == 5


# ---------------------------------------------------------------------------
# Click scenarios
# ---------------------------------------------------------------------------


class TestPickDate:
    def test_first_click_sets_start(self, make_picker: Any, recorder: Any) -> None:
        picker = make_picker()
        picker.open()
        result = picker.pick_date(d("2024-03-10"))
        assert result.ok
        assert result.op == "pick_date"
        assert picker.range == DateRange(start=d("2024-03-10"))
        assert picker.active_field is ActiveField.END
        assert recorder.values == [DateRange(start=d("2024-03-10"))]

    def test_earlier_click_restarts(self, make_picker: Any) -> None:
        picker = make_picker(value=DateRange(start=d("2024-03-10")))
        picker.pick_date(d("2024-03-05"))
        assert picker.range == DateRange(start=d("2024-03-05"))
        assert picker.active_field is ActiveField.END

    def test_later_click_completes(self, make_picker: Any) -> None:
        picker = make_picker(value=DateRange(start=d("2024-03-05")))
        picker.pick_date(d("2024-03-20"))
        assert picker.range == COMPLETE
        assert picker.active_field is ActiveField.END
        assert picker.active_preset == "custom"

    def test_dependent_crossover(self, make_picker: Any) -> None:
        picker = make_picker(mode="dependent", value=COMPLETE)
        picker.open("start")
        picker.pick_date(d("2024-03-25"))
        assert picker.range == DateRange(start=d("2024-03-05"), end=d("2024-03-25"))
        assert picker.active_field is ActiveField.END

    def test_completing_a_preset_window_detects_it(self, make_picker: Any) -> None:
        picker = make_picker()
        picker.pick_date(d("2024-06-09"))
        picker.pick_date(d("2024-06-15"))
        assert picker.active_preset == "last7"

    def test_completion_clears_validation_error(self, make_picker: Any) -> None:
        picker = make_picker()
        picker.clear()
        picker.pick_date(d("2024-03-05"))
        assert picker.show_validation_error is True
        picker.pick_date(d("2024-03-20"))
        assert picker.show_validation_error is False

    def test_independent_restarts_after_complete(self, make_picker: Any) -> None:
        picker = make_picker(value=COMPLETE)
        picker.open("start")
        picker.pick_date(d("2024-03-10"))
        assert picker.range == DateRange(start=d("2024-03-10"))
        assert picker.active_field is ActiveField.END

    def test_independent_editing_enabled(self, make_picker: Any) -> None:
        picker = make_picker(value=COMPLETE, editing_after_complete=True)
        picker.open("start")
        picker.pick_date(d("2024-03-10"))
        assert picker.range == DateRange(start=d("2024-03-10"), end=d("2024-03-20"))
        assert picker.active_field is ActiveField.START

    def test_every_click_emits(self, make_picker: Any, recorder: Any) -> None:
        picker = make_picker()
        for day in ("2024-03-10", "2024-03-12", "2024-03-01"):
            picker.pick_date(d(day))
        assert len(recorder.values) == 3

    def test_failing_listener_becomes_warning(self, make_picker: Any) -> None:
        picker = make_picker()
        assert picker.plugins is not None
        picker.plugins.register_plugin(FailingPlugin(), name="failing")
        result = picker.pick_date(d("2024-03-10"))
        assert result.ok
        assert result.warnings == ["Event dispatch failed for value_change"]
        assert picker.range == DateRange(start=d("2024-03-10"))


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------


class TestSelectPreset:
    def test_last7(self, make_picker: Any, recorder: Any) -> None:
        picker = make_picker()
        picker.open()
        result = picker.select_preset("last7")
        assert result.ok
        assert picker.range == DateRange(start=d("2024-06-09"), end=d("2024-06-15"))
        assert picker.active_preset == "last7"
        assert picker.active_field is ActiveField.END
        assert picker.is_open is True
        assert recorder.values[-1] == picker.range

    def test_clears_validation_error(self, make_picker: Any) -> None:
        picker = make_picker()
        picker.clear()
        picker.select_preset("thisYear")
        assert picker.show_validation_error is False

    def test_auto_close(self, make_picker: Any) -> None:
        picker = make_picker(auto_close_on_preset_select=True)
        picker.open()
        picker.select_preset("last30")
        assert picker.is_open is False

    def test_months_follow_preset(self, make_picker: Any) -> None:
        picker = make_picker()
        picker.select_preset("last90")
        assert _months(picker) == ("2024-03", "2024-06")

    def test_last_year_requires_config(self, make_picker: Any, recorder: Any) -> None:
        result = make_picker().select_preset("lastYear")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "UNKNOWN_PRESET"
        assert result.error.detail["available"] == ["last7", "last30", "last90", "thisYear"]
        assert recorder.values == []

    def test_last_year_enabled(self, make_picker: Any) -> None:
        picker = make_picker(include_last_year_preset=True)
        assert picker.select_preset("lastYear").ok
        assert picker.range == DateRange(start=d("2023-01-01"), end=d("2023-12-31"))


# ---------------------------------------------------------------------------
# Open / close / clear
# ---------------------------------------------------------------------------


class TestLifecycle:
    def test_open(self, make_picker: Any, recorder: Any) -> None:
        picker = make_picker()
        result = picker.open()
        assert result.ok
        assert picker.is_open is True
        assert picker.active_field is ActiveField.START
        assert recorder.opened == ["start"]

    def test_open_for_end(self, make_picker: Any) -> None:
        picker = make_picker()
        picker.open_for("end")
        assert picker.active_field is ActiveField.END

    def test_open_invalid_field(self, make_picker: Any) -> None:
        result = make_picker().open("middle")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_FIELD"

    def test_open_syncs_months(self, make_picker: Any) -> None:
        picker = make_picker(value=DateRange(start=d("2024-03-05"), end=d("2024-05-10")))
        picker.open()
        assert _months(picker) == ("2024-03", "2024-05")

    def test_dependent_open_end_anchors_on_end(self, make_picker: Any) -> None:
        value = DateRange(start=d("2024-03-05"), end=d("2024-05-10"))
        picker = make_picker(mode="dependent", value=value)
        picker.open("end")
        assert _months(picker) == ("2024-05", "2024-06")
        picker.open("start")
        assert _months(picker) == ("2024-03", "2024-04")

    def test_open_detects_preset(self, make_picker: Any) -> None:
        picker = make_picker()
        picker.set_value(DateRange(start=d("2024-01-01"), end=d("2024-06-15")))
        picker.open()
        assert picker.active_preset == "thisYear"

    def test_close_defers_validation(self, make_picker: Any, recorder: Any) -> None:
        picker = make_picker()
        picker.open()
        picker.pick_date(d("2024-03-05"))
        result = picker.close()
        assert result.ok
        assert picker.is_open is False
        assert picker.close_pending is True
        assert picker.show_validation_error is False

        picker.finalize_close()
        assert picker.close_pending is False
        assert picker.show_validation_error is True
        assert picker.show_end_invalid is True
        assert picker.show_start_invalid is False
        assert picker.end_field_message == END_MISSING_MESSAGE
        assert picker.start_field_message == ""
        assert picker.general_message == ""
        assert recorder.closed == [False]

    def test_close_complete_range_is_valid(self, make_picker: Any, recorder: Any) -> None:
        picker = make_picker(value=COMPLETE)
        picker.open()
        picker.close()
        picker.finalize_close()
        assert picker.show_validation_error is False
        assert recorder.closed == [True]

    def test_owner_update_before_finalize_wins(self, make_picker: Any) -> None:
        picker = make_picker(value=DateRange(start=d("2024-03-05")))
        picker.open()
        picker.close()
        picker.set_value(COMPLETE)
        picker.finalize_close()
        assert picker.show_validation_error is False

    def test_missing_start_message(self, make_picker: Any) -> None:
        picker = make_picker(value=DateRange(end=d("2024-03-20")))
        picker.close()
        picker.finalize_close()
        assert picker.start_field_message == START_MISSING_MESSAGE
        assert picker.end_field_message == ""

    def test_scheduler_runs_finalize(self, make_picker: Any) -> None:
        queued: list[Any] = []
        picker = make_picker(scheduler=queued.append)
        picker.open()
        picker.close()
        assert len(queued) == 1
        assert picker.close_pending is True
        queued[0]()
        assert picker.close_pending is False
        assert picker.show_validation_error is True

    def test_asyncio_scheduler(self, make_picker: Any) -> None:
        async def scenario() -> PickerService:
            loop = asyncio.get_running_loop()
            picker = make_picker(value=DateRange(start=d("2024-03-05")), scheduler=loop.call_soon)
            picker.open()
            picker.close()
            # The owner applies its value in the same turn as the close.
            picker.set_value(COMPLETE)
            assert picker.close_pending is True
            await asyncio.sleep(0)
            return picker

        picker = asyncio.run(scenario())
        assert picker.close_pending is False
        assert picker.show_validation_error is False

    def test_outside_interaction_closes_when_open(self, make_picker: Any) -> None:
        picker = make_picker()
        picker.open()
        result = picker.outside_interaction()
        assert result.op == "outside_interaction"
        assert picker.is_open is False
        assert picker.close_pending is True

    def test_outside_interaction_ignored_when_closed(self, make_picker: Any) -> None:
        picker = make_picker()
        result = picker.outside_interaction()
        assert result.ok
        assert picker.close_pending is False

    def test_clear(self, make_picker: Any, recorder: Any) -> None:
        picker = make_picker(value=COMPLETE)
        picker.open("end")
        picker.next_month("top")
        picker.clear()
        assert picker.range == DateRange()
        assert picker.active_field is ActiveField.START
        assert picker.active_preset is None
        assert picker.is_open is True
        assert picker.show_validation_error is True
        assert picker.general_message == BOTH_MISSING_MESSAGE
        assert picker.start_field_message == ""
        assert picker.end_field_message == ""
        assert _months(picker) == ("2024-06", "2024-07")
        assert recorder.values == [DateRange()]

    def test_clear_twice(self, make_picker: Any) -> None:
        picker = make_picker()
        first = picker.clear().data
        second = picker.clear().data
        assert first == second


# ---------------------------------------------------------------------------
# Owner updates
# ---------------------------------------------------------------------------


class TestSetValue:
    def test_does_not_emit(self, make_picker: Any, recorder: Any) -> None:
        picker = make_picker()
        result = picker.set_value(COMPLETE)
        assert result.ok
        assert picker.range == COMPLETE
        assert recorder.values == []

    def test_detects_preset(self, make_picker: Any) -> None:
        picker = make_picker()
        picker.set_value(DateRange(start=d("2024-05-17"), end=d("2024-06-15")))
        assert picker.active_preset == "last30"

    def test_incomplete_keeps_preset(self, make_picker: Any) -> None:
        picker = make_picker()
        picker.select_preset("last7")
        picker.set_value(DateRange(start=d("2024-06-09")))
        assert picker.active_preset == "last7"


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------


class TestNavigate:
    def test_next_and_prev(self, make_picker: Any) -> None:
        picker = make_picker()
        assert picker.next_month("bottom").ok
        assert _months(picker) == ("2024-06", "2024-08")
        assert picker.prev_month(Side.TOP).ok
        assert _months(picker) == ("2024-05", "2024-08")

    def test_collision_nudges_other_side(self, make_picker: Any) -> None:
        picker = make_picker()
        picker.next_month("top")
        assert _months(picker) == ("2024-07", "2024-08")

    def test_dependent_pair_moves_together(self, make_picker: Any) -> None:
        picker = make_picker(mode="dependent")
        picker.set_month_index("bottom", 0)
        assert _months(picker) == ("2023-12", "2024-01")

    def test_set_year(self, make_picker: Any) -> None:
        picker = make_picker()
        picker.set_year("bottom", 2026)
        assert picker.year_value("bottom") == 2026
        assert picker.month_index("bottom") == 6

    def test_navigation_does_not_emit(self, make_picker: Any, recorder: Any) -> None:
        picker = make_picker()
        picker.next_month("top")
        assert recorder.values == []

    @pytest.mark.parametrize(
        "kwargs,code",
        [
            ({"side": "left", "step": 1}, "INVALID_SIDE"),
            ({"side": "top"}, "INVALID_NAVIGATION"),
            ({"side": "top", "step": 2}, "INVALID_NAVIGATION"),
            ({"side": "top", "step": 1, "year": 2020}, "INVALID_NAVIGATION"),
            ({"side": "top", "month_index": 12}, "INVALID_MONTH"),
            ({"side": "top", "year": 0}, "INVALID_YEAR"),
        ],
    )
    def test_errors(self, make_picker: Any, kwargs: dict[str, Any], code: str) -> None:
        picker = make_picker()
        result = picker.navigate(**kwargs)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == code
        assert _months(picker) == ("2024-06", "2024-07")

    def test_out_of_range(self, make_picker: Any) -> None:
        picker = make_picker()
        picker.set_year("top", 9999)
        picker.set_month_index("top", 11)
        result = picker.next_month("top")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "OUT_OF_RANGE"
        assert picker.top_month == d("9999-12-01")


# ---------------------------------------------------------------------------
# Derived view
# ---------------------------------------------------------------------------


class TestView:
    def test_day_predicates(self, make_picker: Any) -> None:
        picker = make_picker(value=COMPLETE)
        assert picker.in_range(d("2024-03-05"))
        assert picker.in_range(d("2024-03-12"))
        assert picker.in_range(d("2024-03-20"))
        assert not picker.in_range(d("2024-03-21"))
        assert picker.is_start(datetime(2024, 3, 5, 10, 0))
        assert picker.is_end(d("2024-03-20"))
        assert not picker.is_end(d("2024-03-05"))

    def test_in_range_needs_complete_range(self, make_picker: Any) -> None:
        picker = make_picker(value=DateRange(start=d("2024-03-05")))
        assert not picker.in_range(d("2024-03-05"))
        assert picker.is_start(d("2024-03-05"))

    def test_calendar_view(self, make_picker: Any) -> None:
        picker = make_picker()
        assert len(picker.grid("top")) == 42
        assert picker.years("top") == list(range(2018, 2031))
        assert picker.label("bottom") == "July 2024"
        assert picker.weekday_labels[0] == "Su"
        assert picker.month_options[5] == "June"

    def test_year_radius(self, make_picker: Any) -> None:
        assert make_picker(year_radius=1).years("top") == [2023, 2024, 2025]

    def test_snapshot(self, make_picker: Any) -> None:
        picker = make_picker(value=DateRange(start=d("2024-03-05")))
        snap = picker.snapshot()
        assert snap["range"] == {"start": "2024-03-05", "end": None}
        assert snap["active_field"] == "start"
        assert snap["today"] == "2024-06-15"
        assert snap["top_month"] == "2024-06-01"
        assert snap["messages"] == {"start": "", "end": "", "general": ""}


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


class TestQueries:
    def test_describe_presets(self, make_picker: Any) -> None:
        result = make_picker(include_last_year_preset=True).describe_presets()
        assert result.op == "presets"
        assert result.data["count"] == 5
        first = result.data["items"][0]
        assert first == {
            "key": "last7",
            "label": "Last 7 days",
            "start": "2024-06-09",
            "end": "2024-06-15",
        }

    def test_detect(self, make_picker: Any) -> None:
        picker = make_picker()
        result = picker.detect(DateRange(start=d("2024-03-18"), end=d("2024-06-15")))
        assert result.data["preset"] == "last90"
        assert picker.detect(COMPLETE).data["preset"] == "custom"
        assert picker.detect(DateRange()).data["preset"] is None

    def test_month_view(self, make_picker: Any) -> None:
        result = make_picker().month_view(d("2024-03-17"))
        assert result.data["month"] == "2024-03-01"
        assert result.data["label"] == "March 2024"
        assert result.data["cells"][5] == "2024-03-01"
        assert result.data["cells"][0] is None
        assert len(result.data["cells"]) == 42


def test_plugin_manager_is_optional_per_instance() -> None:
    plugins = PluginManager()
    picker = PickerService(today=date(2024, 6, 15), plugin_manager=plugins)
    assert picker.plugins is plugins


def test_on_value_change_callback() -> None:
    seen: list[DateRange] = []
    picker = PickerService(today=date(2024, 6, 15), on_value_change=seen.append)
    picker.pick_date(d("2024-03-10"))
    picker.pick_date(d("2024-03-20"))
    assert seen == [
        DateRange(start=d("2024-03-10")),
        DateRange(start=d("2024-03-10"), end=d("2024-03-20")),
    ]


def test_owner_round_trip_through_callback() -> None:
    """The owner stores every emitted value and pushes it back."""
    holder: dict[str, PickerService] = {}

    def owner(value: DateRange) -> None:
        holder["picker"].set_value(value)

    picker = PickerService(today=date(2024, 6, 15), on_value_change=owner)
    holder["picker"] = picker
    picker.select_preset("last30")
    assert picker.range == DateRange(start=d("2024-05-17"), end=d("2024-06-15"))
    assert picker.active_preset == "last30"


class TestLastSupportedMonth:
    def test_construct_in_last_month(self) -> None:
        picker = PickerService(today=date(9999, 12, 31))
        assert _months(picker) == ("9999-11", "9999-12")

    def test_open_dependent_on_last_month(self, make_picker: Any) -> None:
        value = DateRange(start=d("9999-12-01"), end=d("9999-12-05"))
        picker = make_picker(mode="dependent", today=d("9999-11-15"), value=value)
        assert picker.open().ok
        assert picker.open("end").ok
        assert _months(picker) == ("9999-11", "9999-12")

    def test_clear_and_preset_in_last_month(self, make_picker: Any) -> None:
        picker = make_picker(today=d("9999-12-31"))
        assert picker.clear().ok
        assert picker.select_preset("last7").ok
        assert _months(picker) == ("9999-11", "9999-12")
        assert not picker.next_month("bottom").ok
