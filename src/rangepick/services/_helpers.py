"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import date

from rangepick.domain.dates import normalize


def local_today() -> date:
    """Today's local calendar day."""
    return normalize(date.today())


def iso_or_none(d: date | None) -> str | None:
    """ISO string for *d*, or None."""
    return d.isoformat() if d is not None else None
