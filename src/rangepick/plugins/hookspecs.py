"""Pluggy hook specifications for picker notifications.

``value_change`` fires every time the canonical range changes, so the
owning shell can store the new immutable value. The open/close hooks
report the panel lifecycle.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from rangepick.domain.types import DateRange

PROJECT_NAME = "rangepick"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class RangepickHookSpec:
    """Hook specifications for the rangepick plugin system."""

    @hookspec
    def value_change(self, value: DateRange) -> None:
        """Called with the new range whenever the picker emits one."""

    @hookspec
    def picker_opened(self, active_field: str) -> None:
        """Called after the picker panel opens."""

    @hookspec
    def picker_closed(self, valid: bool) -> None:
        """Called once the deferred close validation has run."""
