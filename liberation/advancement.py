"""Auto-advancement gate: one automatic promotion per academic year."""

from __future__ import annotations

from datetime import datetime

from .clock import ACADEMIC_YEAR_CUTOFF_MONTH, parse_timestamp, resolve_now
from .models import AlumniRecord


def should_auto_advance_stage(record: AlumniRecord, now: datetime | None = None) -> bool:
    """True when the record's stage is due for recalculation.

    Due means: never persisted, or last persisted before this year's June 1st
    while today is on or after it. A manual stage override freezes the stage.
    This only decides; recalculating and saving is up to the caller.
    """
    if record.current_stage_modified:
        return False

    last_update = parse_timestamp(record.updated_at)
    if last_update is None:
        return True

    now_dt = resolve_now(now)
    if now_dt.month >= ACADEMIC_YEAR_CUTOFF_MONTH:
        if last_update.year < now_dt.year:
            return True
        if last_update.year == now_dt.year and last_update.month < ACADEMIC_YEAR_CUTOFF_MONTH:
            return True

    return False
