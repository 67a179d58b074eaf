"""
CLI: ``agentic-kit docker``: Docker host networking repair.
"""

from __future__ import annotations

import typer

from agentic_kit.cli.utils import finish, make_context

app = typer.Typer(no_args_is_help=True)


@app.command("reset-network")
def reset_network(
    bridge: str | None = typer.Option(None, "--bridge", "-b", help="Bridge interface (default docker0)"),
    no_verify: bool = typer.Option(False, "--no-verify", help="Skip checking the bridge came back"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print commands without running them"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Stop Docker, delete its bridge, and start it again (no reboot needed)."""
    from agentic_kit.ops.network import reset_docker_network
    from agentic_kit.ops.requests import BridgeResetRequest

    ctx = make_context(dry_run=dry_run)
    result = reset_docker_network(ctx, BridgeResetRequest(bridge=bridge, verify=not no_verify))
    finish(ctx, "docker-reset", result, as_json=json_out, title="Docker Network Reset")
