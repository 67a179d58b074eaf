"""
Request-scoped context for operations.

Every operation function receives an :class:`OperationContext` as its first
argument.  The context carries the resolved settings, the command runner,
caller identity, the dry-run flag, and (lazily) the kit's SQLite database.
"""

from __future__ import annotations

import sqlite3
import uuid
from dataclasses import dataclass, field
from typing import Any

from agentic_kit.core.config import KitSettings
from agentic_kit.core.logging import LogContext
from agentic_kit.core.shell import CommandRunner


@dataclass
class OperationContext:
    """Context passed to every operation function.

    Attributes:
        settings: Resolved :class:`KitSettings`.
        runner: Executes external commands; shares the dry-run flag.
        request_id: Unique ID for this operation invocation (auto-generated).
        caller: Origin of the request: ``"cli"`` or ``"sdk"``.
        dry_run: When ``True``, operations report planned changes only.
        conn: Optional pre-opened database connection (tests use ``:memory:``).
        metadata: Arbitrary key/value pairs bound into log lines by
            :meth:`log_context`.
    """

    settings: KitSettings
    runner: CommandRunner = field(default_factory=CommandRunner)
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    caller: str = "sdk"
    dry_run: bool = False
    conn: sqlite3.Connection | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.dry_run:
            self.runner.dry_run = True

    def log_context(self, step: str) -> LogContext:
        """Scope log lines to *step*, this request, and ``metadata``."""
        return LogContext(
            **{
                **self.metadata,
                "request_id": self.request_id,
                "caller": self.caller,
                "step": step,
            }
        )

    def connection(self) -> sqlite3.Connection:
        """Return the database connection, opening ``settings.database_path`` once."""
        if self.conn is None:
            path = self.settings.database_path
            path.parent.mkdir(parents=True, exist_ok=True)
            self.conn = sqlite3.connect(str(path))
        return self.conn

    def close(self) -> None:
        if self.conn is not None:
            self.conn.close()
            self.conn = None
