"""Quick range presets.

The catalog is a small static, ordered list. ``detect_preset`` scans it
in declared order, so the first matching key wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from rangepick.domain.dates import add_days, is_same_day, normalize
from rangepick.domain.types import CUSTOM_PRESET, DateRange, PresetKey


@dataclass(frozen=True)
class Preset:
    """A named quick range."""

    key: PresetKey
    label: str


BASE_PRESETS: tuple[Preset, ...] = (
    Preset(PresetKey.LAST_7, "Last 7 days"),
    Preset(PresetKey.LAST_30, "Last 30 days"),
    Preset(PresetKey.LAST_90, "Last 90 days"),
    Preset(PresetKey.THIS_YEAR, "This year"),
)

LAST_YEAR_PRESET = Preset(PresetKey.LAST_YEAR, "Last year")

# Inclusive window lengths for the trailing-days presets.
TRAILING_DAYS: dict[str, int] = {
    PresetKey.LAST_7: 7,
    PresetKey.LAST_30: 30,
    PresetKey.LAST_90: 90,
}


def build_catalog(*, include_last_year: bool = False) -> tuple[Preset, ...]:
    """Return the ordered preset catalog for a picker configuration."""
    if include_last_year:
        return (*BASE_PRESETS, LAST_YEAR_PRESET)
    return BASE_PRESETS


def compute_range(key: str, today: date | datetime) -> DateRange:
    """Concrete range for preset *key* relative to *today*.

    Raises:
        ValueError: *key* is not a known preset.
    """
    t = normalize(today)
    if key == PresetKey.THIS_YEAR:
        return DateRange(start=date(t.year, 1, 1), end=t)
    if key == PresetKey.LAST_YEAR:
        y = t.year - 1
        return DateRange(start=date(y, 1, 1), end=date(y, 12, 31))
    days = TRAILING_DAYS.get(key)
    if days is None:
        msg = f"Unknown preset: {key}"
        raise ValueError(msg)
    return DateRange(start=add_days(t, -(days - 1)), end=t)


def detect_preset(
    range_: DateRange,
    today: date | datetime,
    catalog: tuple[Preset, ...] = BASE_PRESETS,
) -> str | None:
    """Return the first catalog key matching *range_*, ``"custom"``, or None.

    None means the range is incomplete.
    """
    if range_.start is None or range_.end is None:
        return None
    for preset in catalog:
        candidate = compute_range(preset.key, today)
        assert candidate.start is not None and candidate.end is not None
        if is_same_day(candidate.start, range_.start) and is_same_day(
            candidate.end, range_.end
        ):
            return str(preset.key)
    return CUSTOM_PRESET


def find_preset(key: str, catalog: tuple[Preset, ...]) -> Preset | None:
    """Look up *key* in *catalog*."""
    for preset in catalog:
        if preset.key == key:
            return preset
    return None
