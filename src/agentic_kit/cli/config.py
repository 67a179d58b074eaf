"""
CLI: ``agentic-kit config``: configuration inspection.
"""

from __future__ import annotations

import typer

from agentic_kit.cli.utils import console, load_settings

app = typer.Typer(no_args_is_help=True)


@app.command("show")
def show_config(
    format: str = typer.Option("table", "--format", "-f", help="Output format: table, json, env"),
) -> None:
    """Show resolved configuration."""
    settings = load_settings()

    if format == "json":
        console.print_json(settings.model_dump_json())
        return

    if format == "env":
        for key, value in sorted(settings.model_dump(mode="json").items()):
            console.print(f"AGENTIC_KIT_{key.upper()}={value}", markup=False)
        return

    from rich.table import Table

    table = Table(title="Paths")
    table.add_column("Name")
    table.add_column("Path")
    table.add_row("Home", str(settings.home))
    table.add_row("Agentic repo", str(settings.agentic_path))
    table.add_row("Claude dir", str(settings.claude_path))
    table.add_row("Skills dir", str(settings.skills_path))
    table.add_row("Devel dir", str(settings.devel_path))
    table.add_row("Database", str(settings.database_path))
    console.print(table)

    console.print(f"\n[bold]Repository:[/bold] {settings.agentic_repo}")
    console.print(f"[bold]Link mode:[/bold] {settings.link_mode.value}")
    console.print(f"[bold]Dev envs:[/bold] {', '.join(settings.dev_envs) or '-'}")
    console.print(f"[bold]Packages:[/bold] {', '.join(settings.packages) or '-'}")
    console.print(f"[bold]Docker bridge:[/bold] {settings.docker_bridge}")
