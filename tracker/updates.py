"""PATCH payloads for liberation path edits.

Each builder returns the camelCase field dict to send to
``PATCH /alumni/{id}``. Builders never touch the network.
"""

from __future__ import annotations

import dataclasses
from datetime import datetime
from enum import Enum
from typing import Any

from liberation import PathType, TrackingStatus, calculate_current_stage, map_db_path_to_logic_path
from liberation.models import AlumniRecord
from liberation.paths import as_stage

from .auto_calculation import AutoCalculationResult, calculate_auto_update

# Persisted pathType for each logic path when a suggestion is saved.
_LOGIC_PATH_TO_DB_PATH = {
    PathType.COLLEGE: "college",
    PathType.VOCATION: "training",
    PathType.EMPLOYMENT: "work",
}


def _wire(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


def path_type_change_patch(
    record: AlumniRecord,
    new_path_type: str,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Change the path and re-suggest stage and status for the new path."""
    if map_db_path_to_logic_path(new_path_type) is None:
        raise ValueError(f"Unknown path type: {new_path_type!r}")

    updated = dataclasses.replace(record, path_type=new_path_type)
    result = calculate_auto_update(updated, now=now)
    return {
        "pathType": new_path_type,
        "currentStage": _wire(result.suggested_current_stage),
        "trackingStatus": _wire(result.suggested_tracking_status),
    }


def stage_override_patch(record: AlumniRecord, new_stage: str) -> dict[str, Any]:
    """Manually set the stage. The first override disables yearly progression."""
    stage = as_stage(new_stage)
    if stage is None:
        raise ValueError(f"Unknown stage: {new_stage!r}")

    patch: dict[str, Any] = {"currentStage": stage.value}
    if not record.current_stage_modified:
        patch["currentStageModified"] = True
    return patch


def reset_stage_patch(record: AlumniRecord, now: datetime | None = None) -> dict[str, Any]:
    """Drop a manual override and go back to the calculated stage."""
    unfrozen = dataclasses.replace(record, current_stage_modified=False)
    return {
        "currentStage": _wire(calculate_current_stage(unfrozen, now=now)),
        "currentStageModified": False,
    }


def auto_update_patch(record: AlumniRecord, result: AutoCalculationResult) -> dict[str, Any]:
    """Fields a bulk recalculation should persist; empty when nothing changes.

    Manually set values are left alone, and an UNKNOWN status never replaces
    a stored one.
    """
    patch: dict[str, Any] = {}

    stage = _wire(result.suggested_current_stage)
    if not record.current_stage_modified and stage and stage != record.current_stage:
        patch["currentStage"] = stage

    status = result.suggested_tracking_status
    if (
        not record.tracking_status_modified
        and status is not TrackingStatus.UNKNOWN
        and status.value != record.tracking_status
    ):
        patch["trackingStatus"] = status.value

    if map_db_path_to_logic_path(record.path_type) is None and result.suggested_path_type is not None:
        patch["pathType"] = _LOGIC_PATH_TO_DB_PATH[result.suggested_path_type]

    return patch
