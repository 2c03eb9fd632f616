"""Entry point for the liberation path tools.

Usage:
    python main.py recalculate                   # Recalculate and save due records
    python main.py recalculate --dry-run         # Report changes without saving
    python main.py recalculate --as-of 2025-06-02
    python main.py inspect alumni.yaml           # Show derived fields for a file
    python main.py inspect alumni.json --stage yr2 --stage yr3
"""

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import datetime, timezone

import click
import httpx
import yaml

from batch.config import ConfigError, load_config
from batch.core import AutoCalculationRunner
from liberation import (
    calculate_expected_stage,
    filter_by_stage,
    resolve_stage_and_path,
    should_auto_advance_stage,
    stage_percent,
)
from liberation.clock import resolve_now
from liberation.models import AlumniRecord
from liberation.paths import stage_label
from tracker.auto_calculation import calculate_auto_update
from tracker.client import TrackerError


def _setup_logging(verbose: bool = False, log_file: str | None = None) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    fmt = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(level=level, format=fmt, handlers=handlers)

    # Quiet down noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def _parse_as_of(ctx: click.Context, param: click.Parameter, value: datetime | None) -> datetime | None:
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc)


_as_of_option = click.option(
    "--as-of",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    callback=_parse_as_of,
    help="Evaluate as if today were this date (YYYY-MM-DD)",
)


def _load_records(path: str) -> list[AlumniRecord]:
    with open(path, encoding="utf-8") as f:
        # JSON is valid YAML, so one loader covers both
        data = yaml.safe_load(f) or []
    if isinstance(data, dict):
        data = data.get("alumni", [])
    if not isinstance(data, list):
        raise click.BadParameter("expected a list of alumni records", param_hint="FILE")
    return [AlumniRecord.from_api(item) for item in data if isinstance(item, dict)]


@click.group()
def cli() -> None:
    """Liberation path stage tracking for alumni records."""


@cli.command()
@click.option("--dry-run", is_flag=True, help="Report changes without saving them")
@click.option("--verbose", is_flag=True, help="Enable debug logging")
@click.option("--config-dir", type=click.Path(), default=None, help="Config directory")
@_as_of_option
def recalculate(dry_run: bool, verbose: bool, config_dir: str | None, as_of: datetime | None) -> None:
    """Recalculate stage and tracking status for every record that is due."""
    try:
        cfg = load_config(config_dir)
    except (FileNotFoundError, ConfigError) as e:
        click.echo(str(e), err=True)
        sys.exit(1)

    log_file = cfg.get("storage", {}).get("log_file")
    _setup_logging(verbose=verbose, log_file=log_file)

    if dry_run:
        click.echo("DRY RUN - nothing will be saved.\n")

    runner = AutoCalculationRunner(config=cfg, dry_run=dry_run, now=as_of)
    try:
        summary = asyncio.run(runner.run())
    except (TrackerError, httpx.HTTPError, OSError) as e:
        click.echo(f"Recalculation failed: {e}", err=True)
        sys.exit(1)
    click.echo(f"\n  {summary}\n")


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--stage", "stages", multiple=True, help="Only show records at this stage (repeatable)")
@click.option("--verbose", is_flag=True, help="Enable debug logging")
@_as_of_option
def inspect(file: str, stages: tuple[str, ...], verbose: bool, as_of: datetime | None) -> None:
    """Show derived liberation path fields for records in a YAML/JSON FILE."""
    _setup_logging(verbose=verbose)
    now = resolve_now(as_of)

    records = _load_records(file)
    if stages:
        records = filter_by_stage(records, stages, now=now)

    if not records:
        click.echo("No matching records.")
        return

    for record in records:
        resolved = resolve_stage_and_path(record, now=now)
        expected = calculate_expected_stage(record.cohort_year, resolved.path, now=now)
        auto = calculate_auto_update(record, now=now)
        stage_text = stage_label(resolved.path, resolved.stage) if resolved.stage else "-"
        expected_text = stage_label(resolved.path, expected) if expected else "-"
        click.echo(
            f"{record.display_name} (cohort {record.cohort_year}): "
            f"{resolved.path.value} / {stage_text} "
            f"[{stage_percent(resolved.path, resolved.stage):.0%}] "
            f"expected={expected_text} "
            f"status={auto.suggested_tracking_status.value} "
            f"advance={'yes' if should_auto_advance_stage(record, now=now) else 'no'}"
        )


if __name__ == "__main__":
    cli()
