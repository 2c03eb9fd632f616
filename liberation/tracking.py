"""Tracking status: how an actual stage compares with the expected one."""

from __future__ import annotations

from typing import Any

from .paths import PathType, TrackingStatus, coerce_path_for_stage, stage_index


def get_tracking_status(
    expected_stage: Any,
    actual_stage: Any,
    path: PathType,
) -> TrackingStatus:
    """Compare two stages on a shared ladder.

    Never returns UNKNOWN: a missing stage, stages that land on different
    ladders, or a stage found on no ladder are all OFF_TRACK.
    """
    if not expected_stage or not actual_stage:
        return TrackingStatus.OFF_TRACK

    expected_path = coerce_path_for_stage(path, expected_stage)
    actual_path = coerce_path_for_stage(path, actual_stage)
    if expected_path is not actual_path:
        return TrackingStatus.OFF_TRACK

    expected_idx = stage_index(expected_path, expected_stage)
    actual_idx = stage_index(expected_path, actual_stage)
    if expected_idx < 0 or actual_idx < 0:
        return TrackingStatus.OFF_TRACK

    if actual_idx >= expected_idx:
        return TrackingStatus.ON_TRACK
    if actual_idx == expected_idx - 1:
        return TrackingStatus.NEAR_TRACK
    return TrackingStatus.OFF_TRACK
