"""
Root Typer application for the agentic-kit CLI.

Sub-command modules import their operations lazily so ``--help`` stays fast.
"""

from __future__ import annotations

import typer
from typer import Typer

from agentic_kit.cli.utils import state

app = Typer(
    name="agentic-kit",
    help="agentic-kit: workstation bootstrap and schema migrations.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        try:
            v = pkg_version("agentic-kit")
        except PackageNotFoundError:
            from agentic_kit import __version__ as v
        typer.echo(f"agentic-kit {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    env_file: str | None = typer.Option(None, "--env-file", help="Read settings from this .env file"),
    log_level: str | None = typer.Option(None, "--log-level", "-l", help="DEBUG, INFO, WARNING, ERROR"),
) -> None:
    """agentic-kit CLI: link config, set up tools, repair Docker, migrate databases."""
    state["env_file"] = env_file
    state["log_level"] = log_level


# ── Sub-command registration ─────────────────────────────────────────────

from agentic_kit.cli.config import app as config_app  # noqa: E402
from agentic_kit.cli.db import app as db_app  # noqa: E402
from agentic_kit.cli.docker import app as docker_app  # noqa: E402
from agentic_kit.cli.history import history  # noqa: E402
from agentic_kit.cli.link import bootstrap, devel, link  # noqa: E402

app.command("link")(link)
app.command("devel")(devel)
app.command("bootstrap")(bootstrap)
app.command("history")(history)

app.add_typer(db_app, name="db", help="Schema migrations.")
app.add_typer(docker_app, name="docker", help="Docker host networking.")
app.add_typer(config_app, name="config", help="Configuration inspection.")
