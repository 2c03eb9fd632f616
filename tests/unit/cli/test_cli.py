"""Tests for the command-line entry point."""

from pathlib import Path

from click.testing import CliRunner

from main import cli

_RECORDS = """
- id: 1
  firstName: Ada
  lastName: Lopez
  cohortYear: 2023
  pathType: college
  enrollmentStatus: enrolled
  currentlyEnrolled: true
- id: 2
  firstName: Ben
  lastName: Okafor
  cohortYear: 2022
  pathType: work
  employed: true
  currentSalary: 50000
  updatedAt: "2024-06-10T12:00:00Z"
- id: 3
  firstName: Cy
  lastName: Park
  cohortYear: 2021
"""


def _write(tmp_path: Path, text: str, name: str = "alumni.yaml") -> str:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_inspect_prints_derived_fields(tmp_path: Path):
    result = CliRunner().invoke(cli, ["inspect", _write(tmp_path, _RECORDS), "--as-of", "2024-07-01"])

    assert result.exit_code == 0, result.output
    assert "Ada Lopez (cohort 2023): college / Year 2 [14%] expected=Year 2 status=on-track advance=yes" in result.output
    assert "Ben Okafor (cohort 2022): employment / 50% Median [33%] expected=- status=unknown advance=no" in result.output
    assert "Cy Park (cohort 2021): college / - [0%]" in result.output


def test_inspect_filters_by_stage(tmp_path: Path):
    result = CliRunner().invoke(
        cli, ["inspect", _write(tmp_path, _RECORDS), "--as-of", "2024-07-01", "--stage", "50-percent"]
    )

    assert result.exit_code == 0, result.output
    assert "Ben Okafor" in result.output
    assert "Ada Lopez" not in result.output


def test_inspect_accepts_json_envelope(tmp_path: Path):
    path = _write(tmp_path, '{"alumni": [{"id": 9, "cohortYear": 2024, "pathType": "training"}]}', "alumni.json")
    result = CliRunner().invoke(cli, ["inspect", path, "--as-of", "2024-09-01"])

    assert result.exit_code == 0, result.output
    assert "#9 (cohort 2024): vocation / In Program [0%]" in result.output


def test_inspect_no_matches(tmp_path: Path):
    result = CliRunner().invoke(
        cli, ["inspect", _write(tmp_path, _RECORDS), "--as-of", "2024-07-01", "--stage", "graduated"]
    )

    assert result.exit_code == 0
    assert "No matching records." in result.output


def test_recalculate_missing_config_exits_nonzero(tmp_path: Path):
    result = CliRunner().invoke(cli, ["recalculate", "--config-dir", str(tmp_path)])
    assert result.exit_code == 1


def test_recalculate_invalid_config_exits_nonzero(tmp_path: Path):
    (tmp_path / "settings.yaml").write_text("tracker:\n  page_size: 0\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ["recalculate", "--config-dir", str(tmp_path)])
    assert result.exit_code == 1
    assert "page_size" in result.output
