"""Clock helpers shared by the stage and advancement rules."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

# June, as a 1-based month number.
ACADEMIC_YEAR_CUTOFF_MONTH = 6


def resolve_now(now: datetime | None = None) -> datetime:
    """Return ``now`` as an aware UTC datetime, reading the clock if omitted."""
    now_dt = now or datetime.now(timezone.utc)
    if now_dt.tzinfo is None:
        now_dt = now_dt.replace(tzinfo=timezone.utc)
    return now_dt.astimezone(timezone.utc)


def parse_timestamp(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return resolve_now(value)
    if not value or not isinstance(value, str):
        return None
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(raw)
    except ValueError:
        return None
    return resolve_now(dt)


def academic_year(now: datetime) -> int:
    """Calendar year in which the current academic year started (June cutoff)."""
    if now.month >= ACADEMIC_YEAR_CUTOFF_MONTH:
        return now.year
    return now.year - 1
