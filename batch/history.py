"""Append-only history of batch recalculation runs (SQLite)."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import aiosqlite

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS runs (
    id TEXT PRIMARY KEY,
    as_of TEXT,
    dry_run INTEGER,
    started_at TEXT,
    finished_at TEXT,
    examined INTEGER DEFAULT 0,
    updated INTEGER DEFAULT 0,
    unchanged INTEGER DEFAULT 0,
    skipped INTEGER DEFAULT 0,
    failed INTEGER DEFAULT 0,
    note TEXT
);

CREATE TABLE IF NOT EXISTS recalculations (
    id TEXT PRIMARY KEY,
    run_id TEXT,
    alumni_id INTEGER,
    path_type TEXT,
    previous_stage TEXT,
    new_stage TEXT,
    previous_status TEXT,
    new_status TEXT,
    patch TEXT,               -- JSON blob
    result TEXT,              -- "updated" | "dry_run" | "failed"
    created_at TEXT
);
"""


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class HistoryDB:
    """Record of every run and every record the runner changed."""

    def __init__(self, db_path: str | Path):
        self._path = Path(db_path)
        self._db: aiosqlite.Connection | None = None

    async def open(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._db = await aiosqlite.connect(str(self._path))
        await self._db.executescript(_SCHEMA)
        await self._db.commit()
        logger.debug("History DB ready at %s", self._path)

    async def close(self) -> None:
        if self._db:
            await self._db.close()

    async def __aenter__(self) -> HistoryDB:
        await self.open()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    # ── Runs ────────────────────────────────────────────────────

    async def start_run(self, as_of: str, dry_run: bool = False) -> str:
        row_id = str(uuid.uuid4())
        await self._db.execute(
            "INSERT INTO runs (id, as_of, dry_run, started_at, finished_at, note) "
            "VALUES (?, ?, ?, ?, '', '')",
            (row_id, as_of, int(dry_run), _now_iso()),
        )
        await self._db.commit()
        return row_id

    async def finish_run(
        self,
        run_id: str,
        examined: int = 0,
        updated: int = 0,
        unchanged: int = 0,
        skipped: int = 0,
        failed: int = 0,
        note: str = "",
    ) -> None:
        await self._db.execute(
            "UPDATE runs SET finished_at = ?, examined = ?, updated = ?, unchanged = ?, "
            "skipped = ?, failed = ?, note = ? WHERE id = ?",
            (_now_iso(), examined, updated, unchanged, skipped, failed, note, run_id),
        )
        await self._db.commit()

    # ── Recalculations ──────────────────────────────────────────

    async def log_recalculation(
        self,
        run_id: str,
        alumni_id: int | None,
        patch: dict[str, Any],
        result: str,
        path_type: str = "",
        previous_stage: str | None = None,
        previous_status: str | None = None,
    ) -> str:
        row_id = str(uuid.uuid4())
        await self._db.execute(
            "INSERT INTO recalculations (id, run_id, alumni_id, path_type, previous_stage, new_stage, "
            "previous_status, new_status, patch, result, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                row_id,
                run_id,
                alumni_id,
                path_type,
                previous_stage or "",
                patch.get("currentStage") or previous_stage or "",
                previous_status or "",
                patch.get("trackingStatus") or previous_status or "",
                json.dumps(patch),
                result,
                _now_iso(),
            ),
        )
        await self._db.commit()
        return row_id

    # ── Queries ─────────────────────────────────────────────────

    async def get_recent_runs(self, limit: int = 10) -> list[dict]:
        cursor = await self._db.execute(
            "SELECT * FROM runs ORDER BY started_at DESC LIMIT ?", (limit,)
        )
        cols = [d[0] for d in cursor.description]
        rows = await cursor.fetchall()
        return [dict(zip(cols, row)) for row in rows]

    async def get_recent_recalculations(
        self,
        limit: int = 20,
        alumni_id: int | None = None,
        run_id: str = "",
    ) -> list[dict]:
        query = "SELECT * FROM recalculations"
        where: list[str] = []
        params: list[Any] = []

        if alumni_id is not None:
            where.append("alumni_id = ?")
            params.append(alumni_id)
        if run_id:
            where.append("run_id = ?")
            params.append(run_id)

        if where:
            query += " WHERE " + " AND ".join(where)
        query += " ORDER BY created_at DESC LIMIT ?"
        params.append(limit)

        cursor = await self._db.execute(query, tuple(params))
        cols = [d[0] for d in cursor.description]
        rows = await cursor.fetchall()
        return [dict(zip(cols, row)) for row in rows]
