"""SQL migration runner.

Reads ``.sql`` files from a migrations directory, tracks applied versions
in the ``schema_migrations`` table, and applies pending ones in filename
order.

The version of a migration is its filename (``001_init.sql``).  Pending
migrations are the discovered filenames minus the recorded versions,
sorted lexicographically, so zero-padded numeric prefixes order correctly.

Each file runs in its own transaction together with the insert of its
tracking row.  A failing file is rolled back as a whole and the run stops
there: later files stay pending and the tracking table lists exactly what
committed.

Statements inside a migration file must not manage transactions
themselves (no ``BEGIN`` / ``COMMIT``).
"""

from __future__ import annotations

import re
import sqlite3
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from agentic_kit.core.errors import ConfigError, DatabaseError, MigrationError
from agentic_kit.core.logging import get_logger
from agentic_kit.core.timestamps import parse_timestamp

logger = get_logger(__name__)

# Bundled migrations for the kit's own database
_SCHEMA_DIR = Path(__file__).resolve().parent.parent / "schema"

DEFAULT_TABLE = "schema_migrations"

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass
class MigrationRecord:
    """Record of a single applied migration."""

    version: str
    applied_at: datetime | None


@dataclass
class MigrationResult:
    """Result of a migration run."""

    applied: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: str | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.failed is None


@dataclass
class MigrationStatus:
    """Applied records and pending filenames."""

    applied: list[MigrationRecord] = field(default_factory=list)
    pending: list[str] = field(default_factory=list)


class MigrationRunner:
    """Applies SQL migrations from a directory.

    Parameters
    ----------
    conn
        A ``sqlite3.Connection`` in its default transaction mode.
    migrations_dir
        Directory containing version-numbered ``.sql`` files.
        Defaults to the bundled ``agentic_kit/core/schema/``.
    table
        Name of the tracking table.
    create
        Create the tracking table up front.  Read-only callers (status,
        dry runs) pass ``False``; a missing table then reads as nothing
        applied.

    Example::

        import sqlite3
        from agentic_kit.core.migrations import MigrationRunner

        conn = sqlite3.connect("app.db")
        runner = MigrationRunner(conn, "migrations/")
        result = runner.apply_pending()
        print(f"Applied {len(result.applied)} migrations")
    """

    def __init__(
        self,
        conn: sqlite3.Connection,
        migrations_dir: Path | str | None = None,
        table: str = DEFAULT_TABLE,
        *,
        create: bool = True,
    ) -> None:
        if not _IDENTIFIER_RE.match(table):
            raise ConfigError(f"Invalid migrations table name: {table!r}")
        self._conn = conn
        self._dir = Path(migrations_dir) if migrations_dir else _SCHEMA_DIR
        self._table = table
        if create:
            self.ensure_table()

    @property
    def migrations_dir(self) -> Path:
        return self._dir

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def ensure_table(self) -> None:
        """Create the tracking table if it doesn't exist."""
        self._conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {self._table} (
                version TEXT PRIMARY KEY,
                applied_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP
            )
            """
        )
        self._conn.commit()

    def discover(self) -> list[Path]:
        """Return ``.sql`` files in the migrations directory, sorted by name."""
        if not self._dir.is_dir():
            return []
        files = [
            p for p in self._dir.glob("*.sql")
            if p.is_file() and not p.name.startswith(".")
        ]
        return sorted(files, key=lambda p: p.name)

    def get_applied(self) -> list[MigrationRecord]:
        """Return already-applied migrations ordered by version."""
        if not self._table_exists():
            return []
        cursor = self._conn.execute(
            f"SELECT version, applied_at FROM {self._table} ORDER BY version"
        )
        return [
            MigrationRecord(version=row[0], applied_at=parse_timestamp(row[1]))
            for row in cursor.fetchall()
        ]

    def get_pending(self) -> list[str]:
        """Return filenames of migrations not yet applied."""
        applied = {r.version for r in self.get_applied()}
        return [f.name for f in self.discover() if f.name not in applied]

    def status(self) -> MigrationStatus:
        return MigrationStatus(applied=self.get_applied(), pending=self.get_pending())

    def apply_pending(self, *, raise_on_error: bool = False) -> MigrationResult:
        """Apply all pending migrations in filename order.

        Stops at the first failure.  With ``raise_on_error`` a failure
        raises :class:`MigrationError` carrying the partial result;
        otherwise the failure is reported on the returned result.
        """
        self.ensure_table()
        result = MigrationResult()
        applied = {r.version for r in self.get_applied()}

        for sql_file in self.discover():
            name = sql_file.name
            if name in applied:
                result.skipped.append(name)
                continue

            try:
                self._apply_one(sql_file)
            except (sqlite3.Error, DatabaseError, OSError, UnicodeDecodeError) as exc:
                self._rollback()
                result.failed = name
                result.error = str(exc)
                logger.error("migration.failed", migration=name, error=str(exc))
                if raise_on_error:
                    raise MigrationError(
                        f"Migration {name} failed: {exc}", result=result, cause=exc
                    ) from exc
                break

            result.applied.append(name)
            logger.info("migration.applied", migration=name)

        return result

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _apply_one(self, sql_file: Path) -> None:
        """Run one file and record it, atomically."""
        sql = sql_file.read_text(encoding="utf-8")
        self._conn.commit()
        self._conn.executescript("BEGIN;\n" + sql)
        if not self._conn.in_transaction:
            raise DatabaseError(
                f"{sql_file.name} ended the migration transaction itself"
            ).with_context(migration=sql_file.name)
        self._conn.execute(
            f"INSERT INTO {self._table} (version) VALUES (?)", (sql_file.name,)
        )
        self._conn.commit()

    def _table_exists(self) -> bool:
        row = self._conn.execute(
            "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?",
            (self._table,),
        ).fetchone()
        return row is not None

    def _rollback(self) -> None:
        if self._conn.in_transaction:
            self._conn.execute("ROLLBACK")
