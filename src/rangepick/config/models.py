"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, rangepick.toml only contains
overrides. An empty file yields an independent-mode picker.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from rangepick.domain.types import PresetKey, SelectionMode

# --- rangepick.toml sections ---


class PickerConfig(BaseModel):
    """[picker] section. Fixed at construction, never switched at runtime.

    Attributes:
        mode: Selection and month-pair mode.
        include_last_year_preset: Append "Last year" to the quick presets.
        auto_close_on_preset_select: Close the panel after a preset click.
        editing_after_complete: Field editing on a complete range. None
            uses the mode default (off for independent, on otherwise).
        year_radius: Years shown either side of a calendar's year.
        initial_preset: Preset applied when no starting value is given.
    """

    model_config = {"frozen": True}

    mode: SelectionMode = SelectionMode.INDEPENDENT
    include_last_year_preset: bool = False
    auto_close_on_preset_select: bool = False
    editing_after_complete: bool | None = None
    year_radius: int = Field(default=6, ge=0)
    initial_preset: PresetKey | None = None


class RangepickConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    picker: PickerConfig = Field(default_factory=PickerConfig)
