"""
CLI: ``agentic-kit link`` / ``devel`` / ``bootstrap``: workstation setup.
"""

from __future__ import annotations

import typer

from agentic_kit.cli.utils import finish, make_context
from agentic_kit.core.config import LinkMode


def link(
    mode: LinkMode | None = typer.Option(None, "--mode", help="symlink or stow (default from settings)"),
    force: bool = typer.Option(False, "--force", help="Replace real files that block a link"),
    skip_clone: bool = typer.Option(False, "--skip-clone", help="Do not clone a missing repository"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Preview without changes"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Clone the agentic repo if absent and link it into ~/.claude."""
    from agentic_kit.ops.agentic import link_agentic
    from agentic_kit.ops.requests import LinkRequest

    ctx = make_context(dry_run=dry_run)
    result = link_agentic(ctx, LinkRequest(mode=mode, force=force, skip_clone=skip_clone))
    finish(ctx, "link", result, as_json=json_out, title="Link")


def devel(
    skip_dev_envs: bool = typer.Option(False, "--skip-dev-envs"),
    skip_installer: bool = typer.Option(False, "--skip-installer"),
    skip_packages: bool = typer.Option(False, "--skip-packages"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print commands without running them"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Install language runtimes, the assistant CLI, and system packages."""
    from agentic_kit.ops.devel import setup_devel
    from agentic_kit.ops.requests import DevelRequest

    ctx = make_context(dry_run=dry_run)
    request = DevelRequest(
        skip_dev_envs=skip_dev_envs,
        skip_installer=skip_installer,
        skip_packages=skip_packages,
    )
    result = setup_devel(ctx, request)
    finish(ctx, "devel", result, as_json=json_out, title="Developer Environment")


def bootstrap(
    mode: LinkMode | None = typer.Option(None, "--mode"),
    force: bool = typer.Option(False, "--force"),
    skip_devel: bool = typer.Option(False, "--skip-devel", help="Only run the link step"),
    dry_run: bool = typer.Option(False, "--dry-run"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Run link then devel, stopping at the first failure."""
    from agentic_kit.ops.bootstrap import bootstrap_all
    from agentic_kit.ops.requests import BootstrapRequest, LinkRequest

    ctx = make_context(dry_run=dry_run)
    request = BootstrapRequest(link=LinkRequest(mode=mode, force=force), skip_devel=skip_devel)
    result = bootstrap_all(ctx, request)
    finish(ctx, "bootstrap", result, as_json=json_out, title="Bootstrap")
