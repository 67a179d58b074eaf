"""
Database operations.

Thin wrappers around :class:`~agentic_kit.core.migrations.MigrationRunner`
and the step ledger for migration runs, status, and history.

Two databases are involved: the migration target (``--database``, else
``settings.database``) and the kit's own database at ``settings.database``,
which holds the step ledger.  Ledger tables never land in a target given
explicitly.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from agentic_kit.core.errors import ErrorCategory, KitError
from agentic_kit.core.history import StepLedger
from agentic_kit.core.logging import get_logger
from agentic_kit.core.migrations import MigrationRunner
from agentic_kit.core.timestamps import to_iso8601
from agentic_kit.ops.context import OperationContext
from agentic_kit.ops.requests import HistoryRequest, MigrateRequest
from agentic_kit.ops.responses import MigrationRunSummary, MigrationStatusRow, StepRunRow
from agentic_kit.ops.result import OperationResult, start_timer

logger = get_logger(__name__)

LEDGER_TABLE = "kit_schema_migrations"


@contextmanager
def _target_connection(
    ctx: OperationContext,
    request: MigrateRequest,
    *,
    read_only: bool,
) -> Iterator[sqlite3.Connection]:
    """Connection to the database migrations run against.

    Read-only access never creates the file; a missing file reads as an
    empty database.
    """
    if not request.database:
        yield ctx.connection()
        return

    path = ctx.settings.resolve(Path(request.database))
    if read_only:
        if path.exists():
            conn = sqlite3.connect(f"{path.as_uri()}?mode=ro", uri=True)
        else:
            conn = sqlite3.connect(":memory:")
    else:
        path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(path))
    try:
        yield conn
    finally:
        conn.close()


def _runner(
    ctx: OperationContext,
    request: MigrateRequest,
    conn: sqlite3.Connection,
    *,
    create: bool,
) -> MigrationRunner:
    """User migrations when a directory is configured, else the bundled schema."""
    migrations_dir: Path | None = None
    if request.migrations_dir:
        migrations_dir = ctx.settings.resolve(Path(request.migrations_dir))
    elif ctx.settings.migrations_dir is not None:
        migrations_dir = ctx.settings.resolve(ctx.settings.migrations_dir)
    if migrations_dir is None:
        # bundled schema is tracked apart from user migrations
        return MigrationRunner(conn, table=LEDGER_TABLE, create=create)
    return MigrationRunner(
        conn,
        migrations_dir,
        table=ctx.settings.migrations_table,
        create=create,
    )


def _ledger(ctx: OperationContext) -> StepLedger:
    conn = ctx.connection()
    MigrationRunner(conn, table=LEDGER_TABLE).apply_pending(raise_on_error=True)
    return StepLedger(conn)


def _database_failure(exc: sqlite3.Error, elapsed_ms: float) -> OperationResult:
    logger.error("database.failed", error=str(exc))
    return OperationResult.fail(
        "DATABASE_ERROR",
        f"Database error: {exc}",
        category=ErrorCategory.DATABASE,
        elapsed_ms=elapsed_ms,
    )


def apply_migrations(
    ctx: OperationContext,
    request: MigrateRequest | None = None,
) -> OperationResult[MigrationRunSummary]:
    """Apply pending migrations, stopping at the first failing file.

    A failed run still returns the partial summary as ``data`` so callers
    can see what committed.  A dry run only reads migration state.
    """
    request = request or MigrateRequest()
    timer = start_timer()

    try:
        with _target_connection(ctx, request, read_only=ctx.dry_run) as conn:
            runner = _runner(ctx, request, conn, create=not ctx.dry_run)
            if ctx.dry_run:
                return OperationResult.ok(
                    MigrationRunSummary(
                        applied=[], skipped=[], pending=runner.get_pending(), dry_run=True
                    ),
                    elapsed_ms=timer.elapsed_ms,
                )
            result = runner.apply_pending()
            pending = runner.get_pending()
    except KitError as exc:
        logger.error("migrate.failed", code=exc.code, error=exc.message)
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    except sqlite3.Error as exc:
        return _database_failure(exc, timer.elapsed_ms)

    summary = MigrationRunSummary(
        applied=result.applied,
        skipped=result.skipped,
        pending=pending,
        failed=result.failed,
    )
    if not result.success:
        return OperationResult.fail(
            "MIGRATION_FAILED",
            f"Migration {result.failed} failed: {result.error}",
            category=ErrorCategory.DATABASE,
            details={"migration": result.failed},
            data=summary,
            elapsed_ms=timer.elapsed_ms,
        )
    return OperationResult.ok(
        summary,
        elapsed_ms=timer.elapsed_ms,
        metadata={"migrations_dir": str(runner.migrations_dir)},
    )


def migration_status(
    ctx: OperationContext,
    request: MigrateRequest | None = None,
) -> OperationResult[list[MigrationStatusRow]]:
    """List applied migrations followed by pending ones, without writing."""
    request = request or MigrateRequest()
    timer = start_timer()
    try:
        with _target_connection(ctx, request, read_only=True) as conn:
            status = _runner(ctx, request, conn, create=False).status()
    except KitError as exc:
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    except sqlite3.Error as exc:
        return _database_failure(exc, timer.elapsed_ms)

    rows = [
        MigrationStatusRow(
            version=rec.version,
            state="applied",
            applied_at=to_iso8601(rec.applied_at),
        )
        for rec in status.applied
    ]
    rows.extend(MigrationStatusRow(version=name, state="pending") for name in status.pending)
    return OperationResult.ok(rows, elapsed_ms=timer.elapsed_ms)


def list_history(
    ctx: OperationContext,
    request: HistoryRequest | None = None,
) -> OperationResult[list[StepRunRow]]:
    """Return recent step runs from the ledger."""
    request = request or HistoryRequest()
    timer = start_timer()
    try:
        runs = _ledger(ctx).recent(limit=request.limit, step=request.step)
    except KitError as exc:
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    except sqlite3.Error as exc:
        return _database_failure(exc, timer.elapsed_ms)

    rows = [
        StepRunRow(
            id=r.id,
            step=r.step,
            status=r.status,
            dry_run=r.dry_run,
            started_at=to_iso8601(r.started_at),
            elapsed_ms=round(r.elapsed_ms, 2),
            detail=r.detail,
        )
        for r in runs
    ]
    return OperationResult.ok(rows, elapsed_ms=timer.elapsed_ms)


def record_step(ctx: OperationContext, step: str, result: OperationResult) -> None:
    """Append *result* to the step ledger in the kit's own database."""
    detail = result.error.message if result.error else None
    _ledger(ctx).record(
        request_id=ctx.request_id,
        step=step,
        status="ok" if result.success else "failed",
        dry_run=ctx.dry_run,
        detail=detail,
        elapsed_ms=result.elapsed_ms,
    )
