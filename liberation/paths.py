"""Path and stage vocabulary for the liberation path.

Persisted records use a five-value ``pathType`` (college / work / training /
military / other); the stage logic works on three logic paths. Each logic path
owns an ordered ladder of stages, and a stage value is only meaningful
together with a path whose ladder contains it.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class PathType(str, Enum):
    """Logic path an alumni record is measured against."""

    COLLEGE = "college"
    VOCATION = "vocation"
    EMPLOYMENT = "employment"


class Stage(str, Enum):
    YR1_ENROLLED = "yr1-enrolled"
    YR2 = "yr2"
    YR3 = "yr3"
    YR4 = "yr4"
    YR5_PLUS = "yr5-plus"
    GRADUATED = "graduated"
    IN_PROGRAM = "in-program"
    CREDENTIALED = "credentialed"
    EMPLOYED = "employed"
    PERCENT_25 = "25-percent"
    PERCENT_50 = "50-percent"
    PERCENT_75 = "75-percent"
    ABOVE_MEDIAN = "above-median"


class TrackingStatus(str, Enum):
    ON_TRACK = "on-track"
    NEAR_TRACK = "near-track"
    OFF_TRACK = "off-track"
    UNKNOWN = "unknown"  # could not be evaluated at all


class MilestoneStatus(str, Enum):
    ON_TRACK = "on-track"
    NEAR_TRACK = "near-track"
    OFF_TRACK = "off-track"
    NOT_REACHED = "not-reached"


# Ordered ladders, earliest stage first.
STAGE_OPTIONS: dict[PathType, tuple[tuple[Stage, str], ...]] = {
    PathType.COLLEGE: (
        (Stage.YR1_ENROLLED, "Year 1"),
        (Stage.YR2, "Year 2"),
        (Stage.YR3, "Year 3"),
        (Stage.YR4, "Year 4"),
        (Stage.YR5_PLUS, "Year 5+"),
        (Stage.GRADUATED, "Graduated"),
        (Stage.EMPLOYED, "Employed"),
        (Stage.ABOVE_MEDIAN, "> Median"),
    ),
    PathType.VOCATION: (
        (Stage.IN_PROGRAM, "In Program"),
        (Stage.CREDENTIALED, "Credentialed"),
        (Stage.EMPLOYED, "Employed"),
        (Stage.ABOVE_MEDIAN, "> Median"),
    ),
    PathType.EMPLOYMENT: (
        (Stage.PERCENT_25, "25% Median"),
        (Stage.PERCENT_50, "50% Median"),
        (Stage.PERCENT_75, "75% Median"),
        (Stage.ABOVE_MEDIAN, "> Median"),
    ),
}

# Scan order used when a stage has to be re-homed onto another path.
_PATH_SCAN_ORDER = (PathType.COLLEGE, PathType.VOCATION, PathType.EMPLOYMENT)

_DB_PATH_TO_LOGIC_PATH = {
    "college": PathType.COLLEGE,
    "work": PathType.EMPLOYMENT,
    "training": PathType.VOCATION,
    "military": PathType.VOCATION,
    "other": PathType.EMPLOYMENT,
}


def as_stage(value: Any) -> Stage | None:
    """Return the Stage for a raw value, or None if it is not a known stage."""
    if value is None:
        return None
    try:
        return Stage(value)
    except ValueError:
        return None


def stages_for(path: PathType) -> tuple[Stage, ...]:
    return tuple(stage for stage, _ in STAGE_OPTIONS[path])


def stage_index(path: PathType, stage: Any) -> int:
    """Ordinal position of ``stage`` on ``path``'s ladder, -1 if absent."""
    resolved = as_stage(stage)
    if resolved is None:
        return -1
    ladder = stages_for(path)
    return ladder.index(resolved) if resolved in ladder else -1


def stage_label(path: PathType, stage: Any) -> str:
    resolved = as_stage(stage)
    for option, label in STAGE_OPTIONS[path]:
        if option is resolved:
            return label
    return "" if stage is None else str(stage)


def map_db_path_to_logic_path(db_path_type: str | None) -> PathType | None:
    """Map a persisted pathType onto a logic path; unrecognized values map to None."""
    if db_path_type is None:
        return None
    return _DB_PATH_TO_LOGIC_PATH.get(str(db_path_type))


def suggest_path_type(record: Any) -> PathType:
    """Display fallback when no path is persisted. Defaults to college."""
    if getattr(record, "currently_enrolled", False):
        return PathType.COLLEGE
    if getattr(record, "training_program_name", None):
        return PathType.VOCATION
    if getattr(record, "employed", False):
        return PathType.EMPLOYMENT
    return PathType.COLLEGE


def coerce_path_for_stage(fallback_path: PathType, stage: Any) -> PathType:
    """Return a path whose ladder contains ``stage``.

    ``fallback_path`` wins whenever it already contains the stage; otherwise
    the first path in college, vocation, employment order that does. A stage
    found on no ladder leaves ``fallback_path`` unchanged.
    """
    if stage_index(fallback_path, stage) >= 0:
        return fallback_path
    for path in _PATH_SCAN_ORDER:
        if stage_index(path, stage) >= 0:
            return path
    return fallback_path


def stage_percent(path: PathType, stage: Any) -> float:
    """Progress along ``path`` as a fraction in [0, 1]."""
    if not stage:
        return 0.0
    ladder = stages_for(path)
    idx = max(0, stage_index(path, stage))
    denom = max(1, len(ladder) - 1)
    return min(1.0, max(0.0, idx / denom))
