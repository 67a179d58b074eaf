"""
CLI: ``agentic-kit db``: schema migrations.
"""

from __future__ import annotations

import typer

from agentic_kit.cli.utils import finish, make_context, output_result

app = typer.Typer(no_args_is_help=True)


@app.command()
def migrate(
    migrations_dir: str | None = typer.Option(
        None, "--dir", "-m", help="Directory of version-numbered .sql files"
    ),
    database: str | None = typer.Option(
        None, "--database", "-d", help="Database to migrate (default: the kit database)"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="List pending migrations only"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Apply pending migrations in order, stopping at the first failure."""
    from agentic_kit.ops.migrations import apply_migrations
    from agentic_kit.ops.requests import MigrateRequest

    ctx = make_context(dry_run=dry_run)
    request = MigrateRequest(migrations_dir=migrations_dir, database=database)
    result = apply_migrations(ctx, request)
    finish(ctx, "db-migrate", result, as_json=json_out, title="Migrations")


@app.command()
def status(
    migrations_dir: str | None = typer.Option(None, "--dir", "-m"),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Show applied and pending migrations."""
    from agentic_kit.ops.migrations import migration_status
    from agentic_kit.ops.requests import MigrateRequest

    ctx = make_context()
    request = MigrateRequest(migrations_dir=migrations_dir, database=database)
    try:
        result = migration_status(ctx, request)
    finally:
        ctx.close()
    output_result(result, as_json=json_out, title="Migration Status")
