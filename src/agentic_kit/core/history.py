"""Step run ledger.

Records each bootstrap step invocation in the ``step_runs`` table created by
the bundled migrations.  The ledger is what ``agentic-kit history`` reads.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import datetime

from agentic_kit.core.timestamps import parse_timestamp, to_iso8601, utc_now


@dataclass(frozen=True, slots=True)
class StepRun:
    """A single recorded step execution."""

    id: int
    request_id: str
    step: str
    status: str
    dry_run: bool
    detail: str | None
    started_at: datetime | None
    elapsed_ms: float


class StepLedger:
    """Read/write access to ``step_runs``.

    The table must exist; apply the bundled migrations first.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def record(
        self,
        *,
        request_id: str,
        step: str,
        status: str,
        dry_run: bool = False,
        detail: str | None = None,
        elapsed_ms: float = 0.0,
        started_at: datetime | None = None,
    ) -> int:
        """Insert one run; *started_at* defaults to now (UTC)."""
        cursor = self._conn.execute(
            "INSERT INTO step_runs "
            "(request_id, step, status, dry_run, detail, started_at, elapsed_ms) "
            "VALUES (?, ?, ?, ?, ?, ?, ?)",
            (
                request_id,
                step,
                status,
                int(dry_run),
                detail,
                to_iso8601(started_at or utc_now()),
                elapsed_ms,
            ),
        )
        self._conn.commit()
        return int(cursor.lastrowid)

    def recent(self, limit: int = 20, step: str | None = None) -> list[StepRun]:
        """Most recent runs first."""
        sql = (
            "SELECT id, request_id, step, status, dry_run, detail, started_at, elapsed_ms "
            "FROM step_runs"
        )
        params: tuple = ()
        if step:
            sql += " WHERE step = ?"
            params = (step,)
        sql += " ORDER BY id DESC LIMIT ?"
        params = (*params, limit)
        return [
            StepRun(
                id=row[0],
                request_id=row[1],
                step=row[2],
                status=row[3],
                dry_run=bool(row[4]),
                detail=row[5],
                started_at=parse_timestamp(row[6]),
                elapsed_ms=row[7],
            )
            for row in self._conn.execute(sql, params).fetchall()
        ]
