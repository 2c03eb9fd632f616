"""Tests for expected-vs-actual tracking status."""

from liberation import PathType, Stage, TrackingStatus, get_tracking_status
from liberation.paths import stages_for


def test_same_stage_is_on_track_for_every_ladder():
    for path in PathType:
        for stage in stages_for(path):
            assert get_tracking_status(stage, stage, path) is TrackingStatus.ON_TRACK


def test_ahead_is_on_track():
    assert get_tracking_status("yr2", "yr4", PathType.COLLEGE) is TrackingStatus.ON_TRACK
    assert get_tracking_status("credentialed", "employed", PathType.VOCATION) is TrackingStatus.ON_TRACK


def test_one_stage_behind_is_near_track():
    assert get_tracking_status(Stage.YR3, Stage.YR2, PathType.COLLEGE) is TrackingStatus.NEAR_TRACK
    assert get_tracking_status("75-percent", "50-percent", PathType.EMPLOYMENT) is TrackingStatus.NEAR_TRACK


def test_two_or_more_behind_is_off_track():
    assert get_tracking_status("yr3", "yr1-enrolled", PathType.COLLEGE) is TrackingStatus.OFF_TRACK


def test_missing_stage_is_off_track_not_unknown():
    assert get_tracking_status(None, "yr2", PathType.COLLEGE) is TrackingStatus.OFF_TRACK
    assert get_tracking_status("yr2", None, PathType.COLLEGE) is TrackingStatus.OFF_TRACK
    assert get_tracking_status("", "", PathType.COLLEGE) is TrackingStatus.OFF_TRACK


def test_stages_on_different_ladders_are_off_track():
    # in-program only lives on the vocation ladder
    assert get_tracking_status("yr2", "in-program", PathType.COLLEGE) is TrackingStatus.OFF_TRACK


def test_unrecognized_stages_are_off_track():
    assert get_tracking_status("yr2", "sophomore", PathType.COLLEGE) is TrackingStatus.OFF_TRACK
    assert get_tracking_status("sophomore", "sophomore", PathType.COLLEGE) is TrackingStatus.OFF_TRACK
