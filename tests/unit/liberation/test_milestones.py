"""Tests for analytics milestone status."""

from datetime import datetime, timezone

from liberation import MilestoneStatus, get_milestone_status
from liberation.models import AlumniRecord

NOW = datetime(2024, 7, 1, tzinfo=timezone.utc)


def _record(**kwargs) -> AlumniRecord:
    return AlumniRecord(cohort_year=2022, **kwargs)


def test_no_stage_means_not_reached():
    assert get_milestone_status(_record(), "enrollment", now=NOW) is MilestoneStatus.NOT_REACHED


class TestEmploymentMilestone:
    def test_employed_flag_decides(self):
        assert get_milestone_status(_record(employed=True), "employment", now=NOW) is MilestoneStatus.ON_TRACK

    def test_employment_stage_without_job_is_off_track(self):
        record = _record(current_stage="employed")
        assert get_milestone_status(record, "employment", now=NOW) is MilestoneStatus.OFF_TRACK

    def test_college_stage_without_job_is_not_reached(self):
        record = _record(current_stage="yr2")
        assert get_milestone_status(record, "employment", now=NOW) is MilestoneStatus.NOT_REACHED


class TestSalaryMilestone:
    def test_requires_employment(self):
        record = _record(current_stage="above-median")
        assert get_milestone_status(record, "salary", now=NOW) is MilestoneStatus.NOT_REACHED

    def test_above_median(self):
        assert get_milestone_status(
            _record(employed=True, current_stage="above-median"), "salary", now=NOW
        ) is MilestoneStatus.ON_TRACK
        assert get_milestone_status(
            _record(employed=True, on_course_economic_liberation=True), "salary", now=NOW
        ) is MilestoneStatus.ON_TRACK

    def test_below_median_is_near_track(self):
        record = _record(employed=True, current_stage="25-percent")
        assert get_milestone_status(record, "salary", now=NOW) is MilestoneStatus.NEAR_TRACK


class TestAcademicMilestones:
    def test_reached_uses_stored_tracking_status(self):
        record = _record(current_stage="yr3", tracking_status="near-track")
        assert get_milestone_status(record, "persistYr2", now=NOW) is MilestoneStatus.NEAR_TRACK
        assert get_milestone_status(record, "year2", now=NOW) is MilestoneStatus.NEAR_TRACK
        record = _record(current_stage="graduated", tracking_status="on-track")
        assert get_milestone_status(record, "credential", now=NOW) is MilestoneStatus.ON_TRACK

    def test_other_statuses_count_as_off_track(self):
        record = _record(current_stage="yr3", tracking_status="unknown")
        assert get_milestone_status(record, "enrollment", now=NOW) is MilestoneStatus.OFF_TRACK

    def test_not_yet_reached(self):
        record = _record(current_stage="yr3", tracking_status="on-track")
        assert get_milestone_status(record, "persistYr3", now=NOW) is MilestoneStatus.NOT_REACHED

    def test_calculated_stage_used_when_nothing_stored(self):
        record = _record(path_type="college", enrollment_status="enrolled", tracking_status="on-track")
        # cohort 2022 is in year 3 during 2024-25
        assert get_milestone_status(record, "year3", now=NOW) is MilestoneStatus.ON_TRACK
        assert get_milestone_status(record, "year4", now=NOW) is MilestoneStatus.NOT_REACHED

    def test_non_college_stage_or_unknown_milestone(self):
        record = _record(current_stage="in-program", tracking_status="on-track")
        assert get_milestone_status(record, "enrollment", now=NOW) is MilestoneStatus.NOT_REACHED
        record = _record(current_stage="yr2", tracking_status="on-track")
        assert get_milestone_status(record, "retention", now=NOW) is MilestoneStatus.NOT_REACHED
