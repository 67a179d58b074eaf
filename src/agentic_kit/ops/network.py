"""
Docker network operations.

Some VPN clients rewrite routes or tear down interfaces in a way that
leaves Docker's default bridge unusable until reboot.  Restarting the
daemon alone does not help because the broken ``docker0`` survives, so
the reset sequence is::

    systemctl stop docker.socket docker
    ip link set docker0 down
    ip link delete docker0
    systemctl start docker

The daemon recreates the bridge on start.  If the bridge is already gone
the down/delete steps are skipped.
"""

from __future__ import annotations

from agentic_kit.core.errors import BridgeNotRecreatedError, KitError
from agentic_kit.core.logging import get_logger
from agentic_kit.core.shell import CommandRunner
from agentic_kit.ops.context import OperationContext
from agentic_kit.ops.requests import BridgeResetRequest
from agentic_kit.ops.responses import BridgeResetSummary
from agentic_kit.ops.result import OperationResult, start_timer

logger = get_logger(__name__)


def bridge_exists(ctx: OperationContext, bridge: str) -> bool:
    """Return whether the interface is present (``ip link show``).

    Always queries the host, even in dry-run.
    """
    if ctx.dry_run:
        # read-only query; bypass the dry-run recorder
        reader = CommandRunner(timeout=ctx.runner.timeout)
        return reader.run(["ip", "link", "show", bridge], check=False).ok
    return ctx.runner.run(["ip", "link", "show", bridge], check=False).ok


def reset_docker_network(
    ctx: OperationContext,
    request: BridgeResetRequest | None = None,
) -> OperationResult[BridgeResetSummary]:
    """Stop Docker, delete its bridge, and start Docker again."""
    request = request or BridgeResetRequest()
    timer = start_timer()
    bridge = request.bridge or ctx.settings.docker_bridge
    units = ctx.settings.docker_units
    warnings: list[str] = []
    start = len(ctx.runner.history)
    existed = False
    recreated: bool | None = None

    with ctx.log_context("docker-reset"):
        try:
            existed = bridge_exists(ctx, bridge)

            ctx.runner.run(["systemctl", "stop", *units], sudo=True)
            logger.info("docker.stopped", units=units)

            if existed:
                ctx.runner.run(["ip", "link", "set", bridge, "down"], sudo=True)
                ctx.runner.run(["ip", "link", "delete", bridge], sudo=True)
                logger.info("bridge.deleted", bridge=bridge)
            else:
                warnings.append(f"Bridge {bridge} not present; skipped delete")

            service = ctx.settings.docker_service
            ctx.runner.run(["systemctl", "start", service], sudo=True)
            logger.info("docker.started", unit=service)

            if request.verify and not ctx.dry_run:
                recreated = bridge_exists(ctx, bridge)
                if not recreated:
                    raise BridgeNotRecreatedError(
                        f"Docker started but {bridge} was not recreated"
                    ).with_context(step="verify")
        except KitError as exc:
            logger.error("docker_reset.failed", code=exc.code, error=exc.message)
            return OperationResult.from_error(
                exc,
                data=BridgeResetSummary(
                    bridge=bridge,
                    existed=existed,
                    recreated=recreated,
                    commands=_commands_since(ctx, start),
                    dry_run=ctx.dry_run,
                ),
                warnings=warnings,
                elapsed_ms=timer.elapsed_ms,
            )

    return OperationResult.ok(
        BridgeResetSummary(
            bridge=bridge,
            existed=existed,
            recreated=recreated,
            commands=_commands_since(ctx, start),
            dry_run=ctx.dry_run,
        ),
        warnings=warnings,
        elapsed_ms=timer.elapsed_ms,
    )


def _commands_since(ctx: OperationContext, start: int) -> list[str]:
    return [" ".join(cmd) for cmd in ctx.runner.history[start:]]
