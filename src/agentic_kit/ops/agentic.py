"""
Agentic repository operations.

Clones the agentic configuration repository (if absent) and deploys it into
the Claude directory, either as a hand-rolled symlink farm or through GNU
``stow``::

    ~/devel/agentic/CLAUDE.md        ← ~/.claude/CLAUDE.md
    ~/devel/agentic/settings.json    ← ~/.claude/settings.json
    ~/devel/agentic/skills/<name>/   ← ~/.claude/skills/<name>

Both modes are idempotent: an existing clone is left alone, symlinks that
already point at the right source are reported ``unchanged``, and stale
symlinks are replaced in place rather than nested inside their target.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from agentic_kit.core.config import LinkMode
from agentic_kit.core.errors import FilesystemError, KitError, LinkConflictError
from agentic_kit.core.logging import get_logger
from agentic_kit.ops.context import OperationContext
from agentic_kit.ops.requests import LinkRequest
from agentic_kit.ops.responses import LinkAction, LinkSummary
from agentic_kit.ops.result import OperationResult, start_timer

logger = get_logger(__name__)


def clone_repo(ctx: OperationContext) -> bool:
    """Clone ``settings.agentic_repo`` unless the target directory exists.

    Returns ``True`` when a clone was issued (or planned, in dry-run).
    """
    dest = ctx.settings.agentic_path
    if dest.is_dir():
        logger.info("repo.exists", path=str(dest))
        return False

    if not ctx.dry_run:
        dest.parent.mkdir(parents=True, exist_ok=True)
    logger.info("repo.cloning", repo=ctx.settings.agentic_repo, path=str(dest))
    ctx.runner.run(["git", "clone", ctx.settings.agentic_repo, str(dest)])
    return True


def ensure_symlink(
    source: Path,
    target: Path,
    *,
    force: bool = False,
    dry_run: bool = False,
) -> LinkAction:
    """Point *target* at *source*, replacing a stale symlink.

    Raises:
        LinkConflictError: *target* is a real file/directory and not *force*.
    """
    if target.is_symlink():
        if os.readlink(target) == str(source):
            action = "unchanged"
        else:
            action = "updated"
            if not dry_run:
                target.unlink()
                target.symlink_to(source)
    elif target.exists():
        if not force:
            raise LinkConflictError(
                f"Refusing to replace existing path with a symlink: {target}"
            ).with_context(path=str(target))
        action = "replaced"
        if not dry_run:
            if target.is_dir():
                shutil.rmtree(target)
            else:
                target.unlink()
            target.symlink_to(source)
    else:
        action = "created"
        if not dry_run:
            target.symlink_to(source)

    if action != "unchanged":
        logger.info(f"link.{action}", source=str(source), target=str(target))
    return LinkAction(source=str(source), target=str(target), action=action)


def _skill_dirs(repo: Path, subdir: str) -> list[Path]:
    skills = repo / subdir
    if not skills.is_dir():
        return []
    return sorted(
        p for p in skills.iterdir()
        if p.is_dir() and not p.name.startswith(".")
    )


def _link_symlinks(
    ctx: OperationContext,
    request: LinkRequest,
    warnings: list[str],
) -> list[LinkAction]:
    settings = ctx.settings
    repo = settings.agentic_path
    claude = settings.claude_path
    skills = settings.skills_path

    if not ctx.dry_run:
        skills.mkdir(parents=True, exist_ok=True)

    actions: list[LinkAction] = []
    for name in settings.link_files:
        source = repo / name
        if not source.exists():
            warnings.append(f"Skipped {name}: not present in {repo}")
            continue
        actions.append(
            ensure_symlink(source, claude / name, force=request.force, dry_run=ctx.dry_run)
        )

    for skill in _skill_dirs(repo, settings.skills_subdir):
        actions.append(
            ensure_symlink(skill, skills / skill.name, force=request.force, dry_run=ctx.dry_run)
        )
    return actions


def _link_stow(ctx: OperationContext) -> list[LinkAction]:
    settings = ctx.settings
    if not ctx.dry_run:
        settings.claude_path.mkdir(parents=True, exist_ok=True)

    actions: list[LinkAction] = []
    for package in settings.stow_packages:
        ctx.runner.run([
            "stow", "--restow",
            "--dir", str(settings.agentic_path),
            "--target", str(settings.claude_path),
            package,
        ])
        actions.append(
            LinkAction(
                source=str(settings.agentic_path / package),
                target=str(settings.claude_path),
                action="stowed",
            )
        )
        logger.info("link.stowed", package=package)
    return actions


def link_agentic(
    ctx: OperationContext,
    request: LinkRequest | None = None,
) -> OperationResult[LinkSummary]:
    """Clone-if-absent, then deploy the repository into the Claude directory."""
    request = request or LinkRequest()
    timer = start_timer()
    mode = request.mode or ctx.settings.link_mode
    warnings: list[str] = []
    cloned = False

    with ctx.log_context("link"):
        try:
            if not request.skip_clone:
                cloned = clone_repo(ctx)
            if not ctx.settings.agentic_path.is_dir():
                if not ctx.dry_run:
                    raise FilesystemError(
                        f"Agentic repository not found: {ctx.settings.agentic_path}"
                    ).with_context(path=str(ctx.settings.agentic_path))
                warnings.append("Repository not cloned yet (dry run); link plan is incomplete")

            if mode == LinkMode.STOW:
                actions = _link_stow(ctx)
            else:
                actions = _link_symlinks(ctx, request, warnings)
        except KitError as exc:
            logger.error("link.failed", code=exc.code, error=exc.message)
            return OperationResult.from_error(exc, warnings=warnings, elapsed_ms=timer.elapsed_ms)
        except OSError as exc:
            logger.error("link.failed", error=str(exc))
            return OperationResult.from_error(
                FilesystemError(str(exc), cause=exc).with_context(path=exc.filename),
                warnings=warnings,
                elapsed_ms=timer.elapsed_ms,
            )

    summary = LinkSummary(
        repo=str(ctx.settings.agentic_path),
        cloned=cloned,
        mode=mode.value,
        actions=actions,
        dry_run=ctx.dry_run,
    )
    return OperationResult.ok(summary, warnings=warnings, elapsed_ms=timer.elapsed_ms)
