"""Liberation path engine: path, stage, tracking status, advancement."""

from .advancement import should_auto_advance_stage
from .milestones import get_milestone_status
from .models import AlumniRecord, EmploymentEntry
from .paths import (
    STAGE_OPTIONS,
    MilestoneStatus,
    PathType,
    Stage,
    TrackingStatus,
    coerce_path_for_stage,
    map_db_path_to_logic_path,
    stage_percent,
    suggest_path_type,
)
from .stages import (
    NATIONAL_MEDIAN,
    ResolvedStage,
    calculate_current_stage,
    calculate_expected_stage,
    college_year,
    filter_by_stage,
    infer_path_type,
    resolve_stage_and_path,
)
from .tracking import get_tracking_status

__all__ = [
    "NATIONAL_MEDIAN",
    "AlumniRecord",
    "EmploymentEntry",
    "STAGE_OPTIONS",
    "MilestoneStatus",
    "PathType",
    "ResolvedStage",
    "Stage",
    "TrackingStatus",
    "calculate_current_stage",
    "calculate_expected_stage",
    "coerce_path_for_stage",
    "college_year",
    "filter_by_stage",
    "get_milestone_status",
    "get_tracking_status",
    "infer_path_type",
    "map_db_path_to_logic_path",
    "resolve_stage_and_path",
    "should_auto_advance_stage",
    "stage_percent",
    "suggest_path_type",
]
