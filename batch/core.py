"""Bulk auto-calculation run.

Each run: fetch every alumni record -> gate -> recalculate -> persist.
Only records the gate lets through are written back; the tracker bumps
``updatedAt`` on save, which closes the gate until next June.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import httpx

from liberation.clock import resolve_now
from liberation.models import AlumniRecord
from tracker.auto_calculation import calculate_auto_update, should_auto_update
from tracker.client import RateLimitError, TrackerClient, TrackerError
from tracker.updates import auto_update_patch

from .config import DEFAULTS, load_config
from .history import HistoryDB

logger = logging.getLogger(__name__)


@dataclass
class RunStats:
    examined: int = 0
    updated: int = 0
    unchanged: int = 0
    skipped: int = 0
    failed: int = 0
    note: str = ""


class AutoCalculationRunner:
    """Recalculate and persist liberation path fields for every due record."""

    def __init__(
        self,
        config: dict | None = None,
        dry_run: bool = False,
        now: datetime | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._cfg = config or load_config()
        self._dry_run = dry_run
        self._now = now
        self._transport = transport

        root = Path(__file__).resolve().parent.parent
        tracker = self._cfg.get("tracker", {})
        storage = self._cfg.get("storage", {})

        self._base_url = tracker.get("base_url", DEFAULTS["tracker"]["base_url"])
        self._page_size = int(tracker.get("page_size", DEFAULTS["tracker"]["page_size"]))
        self._timeout = float(tracker.get("timeout_seconds", DEFAULTS["tracker"]["timeout_seconds"]))
        self._db_path = root / storage.get("history_db", DEFAULTS["storage"]["history_db"])
        self._api_key = self._cfg.get("_secrets", {}).get("tracker_api_key", "")

    async def run(self) -> str:
        """One full pass over the tracker. Returns a one-line summary."""
        now = resolve_now(self._now)
        stats = RunStats()
        logger.info("=== Recalculation === as of %s%s", now.date().isoformat(), " (dry run)" if self._dry_run else "")

        async with TrackerClient(
            self._base_url,
            api_key=self._api_key,
            timeout=self._timeout,
            transport=self._transport,
        ) as api, HistoryDB(self._db_path) as db:
            run_id = await db.start_run(now.isoformat(), dry_run=self._dry_run)
            try:
                async for record in api.iter_alumni(page_size=self._page_size):
                    stats.examined += 1
                    await self._process(record, now, run_id, api, db, stats)
            except RateLimitError as exc:
                logger.warning("Rate limited: %s (retry in %ds); stopping run", exc, exc.retry_after)
                stats.note = f"rate_limited: {exc.retry_after}s"
            finally:
                await db.finish_run(
                    run_id,
                    examined=stats.examined,
                    updated=stats.updated,
                    unchanged=stats.unchanged,
                    skipped=stats.skipped,
                    failed=stats.failed,
                    note=stats.note,
                )

        summary = (
            f"[{now.date().isoformat()}] examined={stats.examined} updated={stats.updated} "
            f"unchanged={stats.unchanged} skipped={stats.skipped} failed={stats.failed}"
        )
        if stats.note:
            summary += f" ({stats.note})"
        logger.info("Recalculation complete: %s", summary)
        return summary

    async def _process(
        self,
        record: AlumniRecord,
        now: datetime,
        run_id: str,
        api: TrackerClient,
        db: HistoryDB,
        stats: RunStats,
    ) -> None:
        if not should_auto_update(record, now=now):
            stats.skipped += 1
            return

        result = calculate_auto_update(record, now=now)
        patch = auto_update_patch(record, result)
        if not patch:
            stats.unchanged += 1
            return

        path_label = result.suggested_path_type.value if result.suggested_path_type else ""

        if record.id is None:
            logger.warning("Record %s has no id; not saving", record.display_name)
            stats.failed += 1
            return

        if self._dry_run:
            logger.info("[DRY RUN] Would update %s: %s", record.display_name, patch)
            await db.log_recalculation(
                run_id,
                record.id,
                patch,
                "dry_run",
                path_type=path_label,
                previous_stage=record.current_stage,
                previous_status=record.tracking_status,
            )
            stats.updated += 1
            return

        try:
            await api.update_alumni(record.id, patch)
        except RateLimitError:
            raise
        except (TrackerError, httpx.HTTPError) as exc:
            logger.warning("Failed to update %s: %s", record.display_name, exc)
            stats.failed += 1
            await db.log_recalculation(
                run_id,
                record.id,
                patch,
                "failed",
                path_type=path_label,
                previous_stage=record.current_stage,
                previous_status=record.tracking_status,
            )
            return

        stats.updated += 1
        await db.log_recalculation(
            run_id,
            record.id,
            patch,
            "updated",
            path_type=path_label,
            previous_stage=record.current_stage,
            previous_status=record.tracking_status,
        )
