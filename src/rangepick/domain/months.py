"""Two displayed calendar months and their consistency rules.

Month-pair invariant by mode:
- Dependent: bottom is always the month after top.
- Independent / three-state: top and bottom never show the same month.
"""

from __future__ import annotations

from datetime import date, datetime

from rangepick.domain.dates import add_months, is_same_month, normalize, start_of_month
from rangepick.domain.types import DateRange, SelectionMode, Side


def _pair_from(anchor: date | datetime) -> tuple[date, date]:
    """Anchor month and the one after it.

    The last supported month has no successor, so it is shown as the
    bottom of the pair instead.
    """
    top = start_of_month(anchor)
    if is_same_month(top, date.max):
        return add_months(top, -1), top
    return top, add_months(top, 1)


class MonthPairController:
    """Owns the ``(top, bottom)`` anchor months of the two calendars.

    Anchors are always first-of-month dates. The initial pair is
    ``today``'s month and the next one.
    """

    def __init__(
        self,
        mode: SelectionMode = SelectionMode.INDEPENDENT,
        *,
        today: date | datetime,
    ) -> None:
        self._mode = SelectionMode(mode)
        self._top, self._bottom = _pair_from(today)

    @property
    def mode(self) -> SelectionMode:
        return self._mode

    @property
    def top(self) -> date:
        return self._top

    @property
    def bottom(self) -> date:
        return self._bottom

    def anchor(self, side: Side) -> date:
        return self._top if Side(side) is Side.TOP else self._bottom

    # ------------------------------------------------------------------
    # Consistency
    # ------------------------------------------------------------------

    def ensure_consistency(self, changed: Side) -> None:
        """Restore the mode invariant after *changed* was moved."""
        self._top, self._bottom = self._consistent(self._top, self._bottom, Side(changed))

    def _consistent(self, top: date, bottom: date, changed: Side) -> tuple[date, date]:
        if self._mode is SelectionMode.DEPENDENT:
            if changed is Side.TOP:
                return top, add_months(top, 1)
            return add_months(bottom, -1), bottom

        if not is_same_month(top, bottom):
            return top, bottom
        if changed is Side.TOP:
            return top, add_months(top, 1)
        return add_months(bottom, -1), bottom

    def _set(self, side: Side, value: date) -> None:
        # Both anchors are computed before assignment so a calendar overflow
        # leaves the pair untouched.
        side = Side(side)
        if side is Side.TOP:
            pair = self._consistent(start_of_month(value), self._bottom, side)
        else:
            pair = self._consistent(self._top, start_of_month(value), side)
        self._top, self._bottom = pair

    # ------------------------------------------------------------------
    # Re-anchoring
    # ------------------------------------------------------------------

    def sync_to_range(
        self,
        range_: DateRange,
        today: date | datetime,
        explicit_anchor: date | datetime | None = None,
    ) -> None:
        """Re-anchor both months after the range changed from outside.

        A range mid-selection (start only) keeps the current months so the
        user is not thrown to another place while picking the end.
        """
        start = normalize(range_.start) if range_.start else None
        end = normalize(range_.end) if range_.end else None

        if start is not None and end is None:
            self.ensure_consistency(Side.BOTTOM)
            return

        if start is None and end is None:
            self._top, self._bottom = _pair_from(today)
            return

        if self._mode is SelectionMode.DEPENDENT:
            anchor = explicit_anchor or start or end or today
            self._top, self._bottom = _pair_from(anchor)
            return

        if start is None or end is None:
            # End without start only arrives malformed from outside.
            self._top, self._bottom = _pair_from(end or today)
            return

        first, last = (start, end) if start <= end else (end, start)
        if is_same_month(first, last):
            self._top, self._bottom = _pair_from(first)
        else:
            self._top, self._bottom = self._consistent(
                start_of_month(first), start_of_month(last), Side.BOTTOM
            )

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def prev_month(self, side: Side) -> None:
        self._set(side, add_months(self.anchor(side), -1))

    def next_month(self, side: Side) -> None:
        self._set(side, add_months(self.anchor(side), 1))

    def set_month_index(self, side: Side, index: int) -> None:
        """Show month *index* (0 = January) of the current year on *side*.

        Raises:
            ValueError: *index* is outside 0..11.
        """
        if not 0 <= index <= 11:
            msg = f"Month index out of range: {index}"
            raise ValueError(msg)
        self._set(side, self.anchor(side).replace(month=index + 1, day=1))

    def set_year(self, side: Side, year: int) -> None:
        """Show the current month of *year* on *side*.

        Raises:
            ValueError: *year* is outside the supported calendar.
        """
        if not 1 <= year <= 9999:
            msg = f"Year out of range: {year}"
            raise ValueError(msg)
        self._set(side, self.anchor(side).replace(year=year, day=1))
