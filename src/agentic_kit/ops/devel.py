"""
Developer environment operations.

Prepares a workstation for agentic development:

1. ``mkdir -p ~/devel``
2. ``omarchy-install-dev-env <env>`` for each configured language runtime
3. The assistant's installer script (``curl -fsSL <url> | bash``)
4. ``pacman -S --noconfirm --needed <pkg>`` for each package

Every step is safe to repeat: the dev-env installer and ``--needed`` skip
what is already present.  The first failing command aborts the rest.
"""

from __future__ import annotations

from agentic_kit.core.errors import KitError
from agentic_kit.core.logging import get_logger
from agentic_kit.ops.context import OperationContext
from agentic_kit.ops.requests import DevelRequest
from agentic_kit.ops.responses import DevelSummary
from agentic_kit.ops.result import OperationResult, start_timer

logger = get_logger(__name__)


def install_dev_envs(ctx: OperationContext, installed: list[str] | None = None) -> list[str]:
    """Install each dev env, appending to *installed* as each one succeeds."""
    installed = [] if installed is None else installed
    for env in ctx.settings.dev_envs:
        ctx.runner.run([ctx.settings.dev_env_command, env], capture=False)
        logger.info("dev_env.installed", env=env)
        installed.append(env)
    return installed


def run_installer(ctx: OperationContext) -> None:
    """Fetch the installer script and feed it to ``bash`` on stdin."""
    url = ctx.settings.installer_url
    fetched = ctx.runner.run(["curl", "-fsSL", url])
    ctx.runner.run(["bash"], input=fetched.stdout)
    logger.info("installer.completed", url=url)


def install_packages(ctx: OperationContext, installed: list[str] | None = None) -> list[str]:
    installed = [] if installed is None else installed
    for package in ctx.settings.packages:
        ctx.runner.run(
            ["pacman", "-S", "--noconfirm", "--needed", package],
            sudo=True,
        )
        logger.info("package.installed", package=package)
        installed.append(package)
    return installed


def setup_devel(
    ctx: OperationContext,
    request: DevelRequest | None = None,
) -> OperationResult[DevelSummary]:
    """Run the developer environment steps in order, fail-fast."""
    request = request or DevelRequest()
    timer = start_timer()
    devel_dir = ctx.settings.devel_path
    dev_envs: list[str] = []
    packages: list[str] = []
    installer_ran = False

    with ctx.log_context("devel"):
        try:
            if not ctx.dry_run:
                devel_dir.mkdir(parents=True, exist_ok=True)
            if not request.skip_dev_envs:
                install_dev_envs(ctx, dev_envs)
            if not request.skip_installer:
                run_installer(ctx)
                installer_ran = True
            if not request.skip_packages:
                install_packages(ctx, packages)
        except KitError as exc:
            logger.error("devel.failed", code=exc.code, error=exc.message)
            return OperationResult.from_error(
                exc,
                data=DevelSummary(
                    devel_dir=str(devel_dir),
                    dev_envs=dev_envs,
                    installer_ran=installer_ran,
                    packages=packages,
                    dry_run=ctx.dry_run,
                ),
                elapsed_ms=timer.elapsed_ms,
            )

    return OperationResult.ok(
        DevelSummary(
            devel_dir=str(devel_dir),
            dev_envs=dev_envs,
            installer_ran=installer_ran,
            packages=packages,
            dry_run=ctx.dry_run,
        ),
        elapsed_ms=timer.elapsed_ms,
    )
