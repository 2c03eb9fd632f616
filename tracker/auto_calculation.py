"""Auto-calculated path, stage and tracking-status suggestions for a record."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from liberation import (
    PathType,
    Stage,
    TrackingStatus,
    calculate_current_stage,
    calculate_expected_stage,
    should_auto_advance_stage,
)
from liberation.clock import resolve_now
from liberation.models import AlumniRecord
from liberation.paths import as_stage

logger = logging.getLogger(__name__)


@dataclass
class AutoCalculationResult:
    suggested_path_type: PathType | None
    suggested_current_stage: Stage | str | None
    suggested_tracking_status: TrackingStatus
    should_update: bool
    reasoning: str


# Progression order used by bulk suggestions. Narrower than the display
# ladders: college stops at graduation, employment tracks employed/above-median.
_BULK_STAGE_ORDER: dict[PathType, tuple[Stage, ...]] = {
    PathType.COLLEGE: (
        Stage.YR1_ENROLLED,
        Stage.YR2,
        Stage.YR3,
        Stage.YR4,
        Stage.YR5_PLUS,
        Stage.GRADUATED,
    ),
    PathType.VOCATION: (
        Stage.IN_PROGRAM,
        Stage.CREDENTIALED,
        Stage.EMPLOYED,
        Stage.ABOVE_MEDIAN,
    ),
    PathType.EMPLOYMENT: (
        Stage.EMPLOYED,
        Stage.ABOVE_MEDIAN,
    ),
}


def _bulk_index(path: PathType, stage: Any) -> int:
    resolved = as_stage(stage)
    order = _BULK_STAGE_ORDER[path]
    return order.index(resolved) if resolved in order else -1


def calculate_suggested_path_type(record: AlumniRecord) -> PathType | None:
    """Suggest a path from the record's current activity. None when unclear."""
    if record.currently_enrolled:
        path = PathType.COLLEGE
    elif record.training_program_name or record.training_start_date:
        path = PathType.VOCATION
    elif record.employed:
        path = PathType.EMPLOYMENT
    else:
        path = None

    logger.debug(
        "Suggested path for %s: %s",
        record.display_name,
        path.value if path else "none (no clear indicators)",
    )
    return path


def calculate_suggested_current_stage(
    record: AlumniRecord,
    path: PathType | None = None,
    now: datetime | None = None,
) -> Stage | str | None:
    # ``path`` is accepted for call-site symmetry; stage logic reads the record.
    return calculate_current_stage(record, now=now)


def calculate_suggested_tracking_status(
    record: AlumniRecord,
    suggested_stage: Any,
    path: PathType | None,
    now: datetime | None = None,
) -> TrackingStatus:
    """Expected-vs-actual status for bulk suggestions.

    UNKNOWN means the record could not be evaluated (no path, no stage, or no
    expected stage for the cohort); OFF_TRACK means evaluated and behind.
    """
    if path is None or not suggested_stage:
        return TrackingStatus.UNKNOWN

    expected = calculate_expected_stage(record.cohort_year, path, now=now)
    if expected is None:
        return TrackingStatus.UNKNOWN

    expected_idx = _bulk_index(path, expected)
    actual_idx = _bulk_index(path, suggested_stage)
    if expected_idx < 0 or actual_idx < 0:
        return TrackingStatus.OFF_TRACK

    if actual_idx >= expected_idx:
        return TrackingStatus.ON_TRACK
    if actual_idx == expected_idx - 1:
        return TrackingStatus.NEAR_TRACK
    return TrackingStatus.OFF_TRACK


def should_auto_update(record: AlumniRecord, now: datetime | None = None) -> bool:
    """Bulk gate: like should_auto_advance_stage, but a manual path also freezes."""
    if record.path_type_modified:
        return False
    return should_auto_advance_stage(record, now=now)


def _reasoning(record: AlumniRecord) -> str:
    if record.currently_enrolled:
        return "Currently enrolled in college"
    if record.employed:
        return "Employed and not enrolled"
    if record.training_program_name:
        return "In training program"
    return "Based on graduation timeline"


def calculate_auto_update(record: AlumniRecord, now: datetime | None = None) -> AutoCalculationResult:
    now_dt = resolve_now(now)
    path = calculate_suggested_path_type(record)
    stage = calculate_suggested_current_stage(record, path, now=now_dt)
    status = calculate_suggested_tracking_status(record, stage, path, now=now_dt)

    return AutoCalculationResult(
        suggested_path_type=path,
        suggested_current_stage=stage,
        suggested_tracking_status=status,
        should_update=should_auto_update(record, now=now_dt),
        reasoning=_reasoning(record),
    )
