"""
CLI: ``agentic-kit history``: recorded step runs.
"""

from __future__ import annotations

import typer

from agentic_kit.cli.utils import make_context, output_result


def history(
    step: str | None = typer.Option(None, "--step", "-s", help="Filter by step name"),
    limit: int = typer.Option(20, "--limit", "-n", min=1),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Show recent link/devel/docker-reset/migrate runs."""
    from agentic_kit.ops.migrations import list_history
    from agentic_kit.ops.requests import HistoryRequest

    ctx = make_context(database=database)
    try:
        result = list_history(ctx, HistoryRequest(limit=limit, step=step))
    finally:
        ctx.close()
    output_result(result, as_json=json_out, title="History")
