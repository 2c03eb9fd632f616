"""Milestone status for the analytics heat map and funnels."""

from __future__ import annotations

from datetime import datetime

from .models import AlumniRecord
from .paths import MilestoneStatus, PathType, Stage, as_stage, stage_index
from .stages import calculate_current_stage

_EMPLOYED_STAGES = {
    Stage.EMPLOYED,
    Stage.ABOVE_MEDIAN,
    Stage.PERCENT_25,
    Stage.PERCENT_50,
    Stage.PERCENT_75,
}

# Minimum college stage per academic milestone. Heat map and funnel names
# are both accepted.
_MILESTONE_MIN_STAGE = {
    "enrollment": Stage.YR1_ENROLLED,
    "retainedYr1": Stage.YR2,
    "persistYr2": Stage.YR3,
    "persistYr3": Stage.YR4,
    "credential": Stage.GRADUATED,
    "year1": Stage.YR1_ENROLLED,
    "year2": Stage.YR2,
    "year3": Stage.YR3,
    "year4": Stage.YR4,
    "graduation": Stage.GRADUATED,
}


def get_milestone_status(
    record: AlumniRecord,
    milestone: str,
    now: datetime | None = None,
) -> MilestoneStatus:
    # A stored stage (import or admin edit) is trusted over the calculator.
    stage = record.current_stage or calculate_current_stage(record, now=now)
    if not stage:
        return MilestoneStatus.NOT_REACHED

    if milestone == "employment":
        # The employed flag decides; stages alone can claim employment
        # for someone who has since lost the job.
        if record.employed:
            return MilestoneStatus.ON_TRACK
        if as_stage(stage) in _EMPLOYED_STAGES:
            return MilestoneStatus.OFF_TRACK
        return MilestoneStatus.NOT_REACHED

    if milestone == "salary":
        if not record.employed:
            return MilestoneStatus.NOT_REACHED
        if as_stage(stage) is Stage.ABOVE_MEDIAN or record.on_course_economic_liberation:
            return MilestoneStatus.ON_TRACK
        return MilestoneStatus.NEAR_TRACK

    required = _MILESTONE_MIN_STAGE.get(milestone)
    if required is None:
        return MilestoneStatus.NOT_REACHED

    current_idx = stage_index(PathType.COLLEGE, stage)
    if current_idx < 0 or current_idx < stage_index(PathType.COLLEGE, required):
        return MilestoneStatus.NOT_REACHED

    if record.tracking_status == "on-track":
        return MilestoneStatus.ON_TRACK
    if record.tracking_status == "near-track":
        return MilestoneStatus.NEAR_TRACK
    return MilestoneStatus.OFF_TRACK
