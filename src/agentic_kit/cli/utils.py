"""
CLI utility helpers: context creation, output formatting, step ledger.
"""

from __future__ import annotations

import json
import sqlite3
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from agentic_kit.core.config import KitSettings, get_settings
from agentic_kit.core.errors import KitError
from agentic_kit.core.logging import configure_logging, get_logger
from agentic_kit.core.shell import CommandRunner
from agentic_kit.ops.context import OperationContext
from agentic_kit.ops.migrations import record_step
from agentic_kit.ops.result import OperationResult

console = Console()
err_console = Console(stderr=True)

logger = get_logger(__name__)

# Populated by the root callback (--env-file, --log-level)
state: dict[str, Any] = {"env_file": None, "log_level": None}


# ── Context helpers ──────────────────────────────────────────────────────


def load_settings() -> KitSettings:
    """Resolve settings, turning validation errors into a clean exit."""
    try:
        return get_settings(env_file=state["env_file"], _force_reload=True)
    except ValidationError as exc:
        err_console.print(f"[bold red]Error[/bold red] (INVALID_CONFIG): {escape(str(exc))}")
        raise typer.Exit(code=1) from exc


def make_context(*, dry_run: bool = False, database: str | None = None) -> OperationContext:
    """Create an ``OperationContext`` for CLI commands and configure logging."""
    settings = load_settings()
    if database:
        settings = settings.model_copy(update={"database": Path(database)})
    configure_logging(
        level=state["log_level"] or settings.log_level,
        json_format=settings.json_logs,
    )
    return OperationContext(
        settings=settings,
        runner=CommandRunner(dry_run=dry_run),
        caller="cli",
        dry_run=dry_run,
    )


def finish(
    ctx: OperationContext,
    step: str,
    result: OperationResult,
    *,
    as_json: bool = False,
    title: str = "",
) -> None:
    """Record *result* in the step ledger, then render it."""
    try:
        record_step(ctx, step, result)
    except (KitError, sqlite3.Error, OSError) as exc:
        logger.warning("ledger.record_failed", step=step, error=str(exc))
    finally:
        ctx.close()
    output_result(result, as_json=as_json, title=title)


# ── Output helpers ───────────────────────────────────────────────────────


def _to_dict(obj: Any) -> dict[str, Any]:
    """Convert dataclass / pydantic model / dict to plain dict."""
    if hasattr(obj, "model_dump"):
        return obj.model_dump()
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    if isinstance(obj, dict):
        return obj
    return {"value": str(obj)}


def _jsonable(data: Any) -> Any:
    if data is None:
        return None
    if isinstance(data, list | tuple):
        return [_jsonable(d) for d in data]
    if isinstance(data, str | int | float | bool):
        return data
    return _to_dict(data)


def output_result(
    result: OperationResult,
    *,
    as_json: bool = False,
    title: str = "",
) -> None:
    """Render an ``OperationResult`` to the terminal.

    Failed results print the error (and any partial payload) and exit 1.
    """
    if as_json:
        payload = result.to_dict()
        payload["data"] = _jsonable(result.data)
        console.print_json(json.dumps(payload, default=str))
        if not result.success:
            raise typer.Exit(code=1)
        return

    for warning in result.warnings:
        err_console.print(f"[yellow]Warning:[/yellow] {escape(warning)}")

    data = result.data
    if data is not None:
        if isinstance(data, list):
            if not data:
                console.print("[dim]No items.[/dim]")
            else:
                _print_table(data, title=title)
        else:
            _print_dict(_to_dict(data), title=title)

    if not result.success:
        err = result.error
        msg = err.message if err else "Unknown error"
        code = err.code if err else "ERROR"
        err_console.print(f"[bold red]Error[/bold red] ({code}): {escape(msg)}")
        if err and err.details.get("stderr"):
            err_console.print(f"[dim]{escape(err.details['stderr'])}[/dim]")
        raise typer.Exit(code=1)


# ── Private helpers ──────────────────────────────────────────────────────


def _print_table(items: list, *, title: str = "") -> None:
    """Render a list of dataclasses/dicts as a Rich table."""
    first = _to_dict(items[0])
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in first:
        table.add_column(col, overflow="fold")
    for item in items:
        d = _to_dict(item)
        table.add_row(*(escape(str(v)) for v in d.values()))
    console.print(table)


def _print_dict(data: dict[str, Any], *, title: str = "") -> None:
    """Render a single dict as key-value pairs; lists of records become tables."""
    if title:
        console.print(f"[bold]{title}[/bold]")
    nested: list[tuple[str, list]] = []
    for k, v in data.items():
        if isinstance(v, list) and v and isinstance(v[0], dict):
            nested.append((k, v))
        elif isinstance(v, dict):
            _print_dict(v, title=k)
        else:
            console.print(f"  [cyan]{k}[/cyan]: {escape(str(v))}")
    for k, rows in nested:
        _print_table(rows, title=k)
