"""
Full workstation bootstrap.

Runs the link step and then the developer environment step, stopping at the
first failure.  Equivalent to running ``agentic-kit link`` followed by
``agentic-kit devel``.
"""

from __future__ import annotations

from agentic_kit.core.logging import get_logger
from agentic_kit.ops.agentic import link_agentic
from agentic_kit.ops.context import OperationContext
from agentic_kit.ops.devel import setup_devel
from agentic_kit.ops.requests import BootstrapRequest
from agentic_kit.ops.responses import BootstrapSummary
from agentic_kit.ops.result import OperationResult, start_timer

logger = get_logger(__name__)


def _step_failed(
    step: str,
    result: OperationResult,
    summary: BootstrapSummary,
    warnings: list[str],
    elapsed_ms: float,
) -> OperationResult[BootstrapSummary]:
    """Carry a failed step's error into the bootstrap result."""
    error = result.error
    if error is None:
        return OperationResult.fail(
            "STEP_FAILED",
            f"{step}: failed without an error",
            data=summary,
            warnings=warnings,
            elapsed_ms=elapsed_ms,
        )
    return OperationResult.fail(
        error.code,
        f"{step}: {error.message}",
        category=error.category,
        details=error.details,
        data=summary,
        warnings=warnings,
        elapsed_ms=elapsed_ms,
    )


def bootstrap_all(
    ctx: OperationContext,
    request: BootstrapRequest | None = None,
) -> OperationResult[BootstrapSummary]:
    request = request or BootstrapRequest()
    timer = start_timer()
    warnings: list[str] = []

    link = link_agentic(ctx, request.link)
    warnings.extend(link.warnings)
    if not link.success:
        return _step_failed(
            "link",
            link,
            BootstrapSummary(steps=[], failed_step="link"),
            warnings,
            timer.elapsed_ms,
        )

    if request.skip_devel:
        return OperationResult.ok(
            BootstrapSummary(steps=["link"], link=link.data),
            warnings=warnings,
            elapsed_ms=timer.elapsed_ms,
        )

    devel = setup_devel(ctx, request.devel)
    warnings.extend(devel.warnings)
    if not devel.success:
        summary = BootstrapSummary(
            steps=["link"], link=link.data, devel=devel.data, failed_step="devel"
        )
        return _step_failed("devel", devel, summary, warnings, timer.elapsed_ms)

    logger.info("bootstrap.completed", request_id=ctx.request_id)
    return OperationResult.ok(
        BootstrapSummary(steps=["link", "devel"], link=link.data, devel=devel.data),
        warnings=warnings,
        elapsed_ms=timer.elapsed_ms,
    )
