"""Stage calculation for alumni records.

Priority: a manual stage override always wins; otherwise the stage is derived
from the record's path, its cohort year and the June 1st academic-year cutoff.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable

from .clock import academic_year, resolve_now
from .models import AlumniRecord
from .paths import (
    PathType,
    Stage,
    coerce_path_for_stage,
    map_db_path_to_logic_path,
    stage_index,
    suggest_path_type,
)

logger = logging.getLogger(__name__)

# US median household income, the "economic liberation" line.
NATIONAL_MEDIAN = 74580

_NON_DIGITS = re.compile(r"[^0-9]")


@dataclass
class ResolvedStage:
    path: PathType
    stage: Stage | str | None
    stage_index: int  # -1 when there is no stage


def college_year(cohort_year: int, now: datetime | None = None) -> int:
    """1 during the academic year that starts the June the cohort graduates."""
    return academic_year(resolve_now(now)) - cohort_year + 1


def parse_salary(value: Any) -> int | None:
    """Parse a salary figure, stripping anything that is not a digit.

    Zero and unparsable values are not usable figures and return None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        # NaN fails the comparison as well
        return int(value) if value > 0 else None
    digits = _NON_DIGITS.sub("", str(value))
    if not digits:
        return None
    amount = int(digits)
    return amount if amount > 0 else None


def resolve_annual_salary(record: AlumniRecord | None) -> int | None:
    """Current annual salary: the current job in the history, then legacy fields."""
    if record is None:
        return None
    for entry in record.employment_history:
        if entry.type == "job" and entry.is_current:
            salary = parse_salary(entry.annual_salary)
            if salary is not None:
                return salary
            break
    # An unusable figure (blank, zero, "n/a") falls through to the next
    # source instead of counting as a salary of zero.
    return parse_salary(record.latest_annual_income) or parse_salary(record.current_salary)


def infer_path_type(record: AlumniRecord) -> PathType | None:
    """Path for a record whose persisted pathType is missing. First match wins."""
    if record.enrollment_status or record.college_attending or record.college_attended:
        return PathType.COLLEGE
    if (
        record.training_program_name
        or record.training_degree_certification
        or record.training_start_date
    ):
        return PathType.VOCATION
    if (
        record.employed
        or record.current_salary
        or record.latest_annual_income
        or record.employment_history
    ):
        return PathType.EMPLOYMENT
    return None


def resolve_logic_path(record: AlumniRecord) -> PathType | None:
    return map_db_path_to_logic_path(record.path_type) or infer_path_type(record)


def _college_stage(year: int, record: AlumniRecord | None) -> Stage:
    status = record.enrollment_status if record is not None else None

    if status == "enrolled":
        if year <= 1:
            return Stage.YR1_ENROLLED
        if year == 2:
            return Stage.YR2
        if year == 3:
            return Stage.YR3
        if year == 4:
            return Stage.YR4
        return Stage.YR5_PLUS

    if status == "graduated":
        if record.employed:
            income = parse_salary(record.latest_annual_income)
            if record.on_course_economic_liberation or (income is not None and income > NATIONAL_MEDIAN):
                return Stage.ABOVE_MEDIAN
            return Stage.EMPLOYED
        return Stage.GRADUATED

    if status == "dropped-out":
        if record.training_program_name:
            return Stage.IN_PROGRAM
        if record.employed:
            return Stage.EMPLOYED

    # Timeline by college year
    if year <= 1:
        return Stage.YR1_ENROLLED
    if year == 2:
        return Stage.YR2
    if year == 3:
        return Stage.YR3
    if year == 4:
        return Stage.YR4
    if year <= 7:
        return Stage.YR5_PLUS
    if year == 8:
        return Stage.GRADUATED
    if year == 9:
        return Stage.EMPLOYED
    return Stage.ABOVE_MEDIAN


def _vocation_stage(year: int, record: AlumniRecord | None) -> Stage:
    if record is not None and record.training_degree_certification:
        if record.employed:
            return Stage.ABOVE_MEDIAN if record.on_course_economic_liberation else Stage.EMPLOYED
        return Stage.CREDENTIALED

    if record is not None and (record.training_program_name or record.training_start_date):
        return Stage.IN_PROGRAM

    # Programs run six months to two years
    if year <= 1:
        return Stage.IN_PROGRAM
    if year <= 2:
        return Stage.CREDENTIALED
    if year <= 3:
        return Stage.EMPLOYED
    return Stage.ABOVE_MEDIAN


def _employment_stage(year: int, record: AlumniRecord | None) -> Stage | None:
    salary = resolve_annual_salary(record)
    if salary is not None:
        if salary >= NATIONAL_MEDIAN:
            return Stage.ABOVE_MEDIAN
        if salary >= NATIONAL_MEDIAN * 0.75:
            return Stage.PERCENT_75
        if salary >= NATIONAL_MEDIAN * 0.50:
            return Stage.PERCENT_50
        if salary >= NATIONAL_MEDIAN * 0.25:
            return Stage.PERCENT_25

    # Employed without a usable figure is treated as entry level
    if record is not None and record.employed:
        return Stage.PERCENT_25

    # Unemployed alumni are not placed on the employment ladder
    return None


def _auto_stage(
    cohort_year: int,
    path: PathType,
    record: AlumniRecord | None,
    now: datetime,
) -> Stage | None:
    year = college_year(cohort_year, now)
    if path is PathType.COLLEGE:
        return _college_stage(year, record)
    if path is PathType.VOCATION:
        return _vocation_stage(year, record)
    if path is PathType.EMPLOYMENT:
        return _employment_stage(year, record)
    raise ValueError(f"Unhandled path type: {path!r}")


def calculate_current_stage(
    record: AlumniRecord,
    now: datetime | None = None,
) -> Stage | str | None:
    """Stage the record is at right now, or None when it cannot be determined.

    A manual override is returned verbatim, even when it is not a known stage.
    """
    if record.current_stage_modified and record.current_stage:
        return record.current_stage

    path = resolve_logic_path(record)
    if path is None:
        logger.debug("No path for %s: insufficient data", record.display_name)
        return None

    return _auto_stage(record.cohort_year, path, record, resolve_now(now))


def calculate_expected_stage(
    cohort_year: int,
    path: PathType,
    now: datetime | None = None,
) -> Stage | None:
    """Stage a cohort should have reached on ``path`` from the timeline alone."""
    return _auto_stage(cohort_year, path, None, resolve_now(now))


def resolve_stage_and_path(
    record: AlumniRecord,
    now: datetime | None = None,
) -> ResolvedStage:
    """Stage plus a path whose ladder contains it, for rendering."""
    base_path = map_db_path_to_logic_path(record.path_type) or suggest_path_type(record)
    stage = calculate_current_stage(record, now=now)
    if not stage:
        return ResolvedStage(path=base_path, stage=None, stage_index=-1)

    path = coerce_path_for_stage(base_path, stage)
    return ResolvedStage(path=path, stage=stage, stage_index=max(0, stage_index(path, stage)))


def filter_by_stage(
    records: Iterable[AlumniRecord],
    stages: Iterable[str],
    now: datetime | None = None,
) -> list[AlumniRecord]:
    """Records whose calculated current stage is one of ``stages``."""
    wanted = {str(getattr(s, "value", s)) for s in stages}
    now_dt = resolve_now(now)
    matched = []
    for record in records:
        stage = calculate_current_stage(record, now=now_dt)
        if stage is not None and str(getattr(stage, "value", stage)) in wanted:
            matched.append(record)
    return matched
