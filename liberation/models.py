"""Alumni records as the liberation path engine reads them."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


def _as_text(value: Any) -> str | None:
    """Normalize optional text fields; blank strings count as unset."""
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return str(value)


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _as_int(value: Any, default: int | None = 0) -> int | None:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_amount(value: Any) -> str | int | float | None:
    """Salary fields arrive either as free text ("$52,000") or as numbers."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    return _as_text(value)


def _as_timestamp(value: Any) -> str | datetime | None:
    if isinstance(value, datetime):
        return value
    return _as_text(value)


@dataclass
class EmploymentEntry:
    type: str  # "job" | "training"
    is_current: bool = False
    annual_salary: str | int | float | None = None
    id: str = ""
    employer_name: str | None = None
    position: str | None = None
    program_name: str | None = None
    certification: str | None = None
    start_date: str | None = None
    end_date: str | None = None

    @classmethod
    def from_api(cls, data: dict) -> EmploymentEntry:
        return cls(
            type=_as_text(data.get("type")) or "",
            is_current=_as_bool(data.get("isCurrent", data.get("is_current", False))),
            annual_salary=_as_amount(data.get("annualSalary", data.get("annual_salary"))),
            id=_as_text(data.get("id")) or "",
            employer_name=_as_text(data.get("employerName")),
            position=_as_text(data.get("position")),
            program_name=_as_text(data.get("programName")),
            certification=_as_text(data.get("certification")),
            start_date=_as_text(data.get("startDate")),
            end_date=_as_text(data.get("endDate")),
        )


@dataclass
class AlumniRecord:
    """The subset of an alumni row the progression engine reads."""

    cohort_year: int
    id: int | None = None
    first_name: str = ""
    last_name: str = ""

    # Liberation path
    path_type: str | None = None  # "college" | "work" | "training" | "military" | "other"
    path_type_modified: bool = False
    current_stage: str | None = None
    current_stage_modified: bool = False
    tracking_status: str | None = None
    tracking_status_modified: bool = False

    # College
    enrollment_status: str | None = None
    currently_enrolled: bool = False
    college_attending: str | None = None
    college_attended: str | None = None

    # Job training
    training_program_name: str | None = None
    training_start_date: str | None = None
    training_degree_certification: str | None = None

    # Employment
    employed: bool = False
    employer_name: str | None = None
    latest_annual_income: str | int | float | None = None
    current_salary: str | int | float | None = None
    on_course_economic_liberation: bool = False
    employment_history: list[EmploymentEntry] = field(default_factory=list)

    updated_at: str | datetime | None = None

    @property
    def display_name(self) -> str:
        name = f"{self.first_name} {self.last_name}".strip()
        if name:
            return name
        return f"#{self.id}" if self.id is not None else "(unnamed)"

    @classmethod
    def from_api(cls, data: dict) -> AlumniRecord:
        history = data.get("employmentHistory") or []
        if not isinstance(history, list):
            history = []
        return cls(
            cohort_year=_as_int(data.get("cohortYear")),
            id=_as_int(data.get("id"), default=None),
            first_name=_as_text(data.get("firstName")) or "",
            last_name=_as_text(data.get("lastName")) or "",
            path_type=_as_text(data.get("pathType")),
            path_type_modified=_as_bool(data.get("pathTypeModified", False)),
            current_stage=_as_text(data.get("currentStage")),
            current_stage_modified=_as_bool(data.get("currentStageModified", False)),
            tracking_status=_as_text(data.get("trackingStatus")),
            tracking_status_modified=_as_bool(data.get("trackingStatusModified", False)),
            enrollment_status=_as_text(data.get("enrollmentStatus")),
            currently_enrolled=_as_bool(data.get("currentlyEnrolled", False)),
            college_attending=_as_text(data.get("collegeAttending")),
            college_attended=_as_text(data.get("collegeAttended")),
            training_program_name=_as_text(data.get("trainingProgramName")),
            training_start_date=_as_text(data.get("trainingStartDate")),
            training_degree_certification=_as_text(data.get("trainingDegreeCertification")),
            employed=_as_bool(data.get("employed", False)),
            employer_name=_as_text(data.get("employerName")),
            latest_annual_income=_as_amount(data.get("latestAnnualIncome")),
            current_salary=_as_amount(data.get("currentSalary")),
            on_course_economic_liberation=_as_bool(data.get("onCourseEconomicLiberation", False)),
            employment_history=[
                EmploymentEntry.from_api(entry) for entry in history if isinstance(entry, dict)
            ],
            updated_at=_as_timestamp(data.get("updatedAt")),
        )
