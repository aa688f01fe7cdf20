"""Range selection rules — the click-by-click state machine.

One parametrized strategy covers every mode. The (range, active field)
transitions are shared by all modes:

- start absent                  -> start = clicked, edit end
- selecting, clicked < start    -> restart at clicked, edit end
- selecting, clicked >= start   -> end = clicked, edit end
- complete, editing start:
    clicked > end               -> crossover, end = clicked, edit end
    otherwise                   -> start = clicked, edit start
- complete, editing end:
    clicked < start             -> crossover, start = clicked, edit start
    otherwise                   -> end = clicked, edit end

When editing after completion is disabled, a click on a complete range
discards it and starts a new selection instead.

INVARIANT: every produced range with both endpoints has start <= end.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from rangepick.domain.dates import normalize
from rangepick.domain.types import ActiveField, DateRange, SelectionMode

# Modes in which a complete range can be edited field-by-field by default.
EDITING_MODES: frozenset[SelectionMode] = frozenset(
    {SelectionMode.DEPENDENT, SelectionMode.THREE_STATE}
)


@dataclass(frozen=True)
class Transition:
    """Outcome of a selection operation."""

    range: DateRange
    active_field: ActiveField


def _ordered(range_: DateRange) -> tuple[date | None, date | None]:
    """Read endpoints at day granularity without trusting their order."""
    start = normalize(range_.start) if range_.start else None
    end = normalize(range_.end) if range_.end else None
    if start is not None and end is not None and start > end:
        return end, start
    return start, end


class SelectionBehavior:
    """Selection strategy for one picker instance.

    Parameters:
        mode: Selection mode, fixed for the lifetime of the picker.
        editing_after_complete: Whether clicks on a complete range edit
            the active field (True) or restart the selection (False).
            None picks the mode default: disabled for independent,
            enabled for dependent and three-state.
    """

    def __init__(
        self,
        mode: SelectionMode = SelectionMode.INDEPENDENT,
        *,
        editing_after_complete: bool | None = None,
    ) -> None:
        self._mode = SelectionMode(mode)
        if editing_after_complete is None:
            editing_after_complete = self._mode in EDITING_MODES
        self._editing_after_complete = editing_after_complete

    @property
    def mode(self) -> SelectionMode:
        return self._mode

    @property
    def editing_after_complete(self) -> bool:
        return self._editing_after_complete

    def open_anchor(
        self,
        range_: DateRange,
        clicked_field: ActiveField,
        today: date | datetime,
    ) -> date | None:
        """Month hint for the top calendar when the picker opens on a field.

        Dependent mode anchors on the clicked field's endpoint once the
        range is complete. Other modes give no hint.
        """
        if self._mode is not SelectionMode.DEPENDENT:
            return None
        start, end = _ordered(range_)
        if start is None or end is None:
            return None
        return start if clicked_field == ActiveField.START else end

    def clear(self) -> Transition:
        return Transition(range=DateRange(), active_field=ActiveField.START)

    def pick_date(
        self,
        range_: DateRange,
        clicked_date: date | datetime,
        active_field: ActiveField,
    ) -> Transition:
        """Apply a click on *clicked_date* to *range_*."""
        clicked = normalize(clicked_date)
        start, end = _ordered(range_)

        if start is None:
            return Transition(DateRange(start=clicked), ActiveField.END)

        if end is None:
            if clicked < start:
                return Transition(DateRange(start=clicked), ActiveField.END)
            return Transition(DateRange(start=start, end=clicked), ActiveField.END)

        if not self._editing_after_complete:
            return Transition(DateRange(start=clicked), ActiveField.END)

        if active_field == ActiveField.START:
            if clicked > end:
                return Transition(DateRange(start=start, end=clicked), ActiveField.END)
            return Transition(DateRange(start=clicked, end=end), ActiveField.START)

        if clicked < start:
            return Transition(DateRange(start=clicked, end=end), ActiveField.START)
        return Transition(DateRange(start=start, end=clicked), ActiveField.END)
