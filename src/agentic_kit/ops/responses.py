"""
Typed response objects for operations.

Each dataclass represents the *output* of a single operation beyond the
generic :class:`OperationResult` envelope.  Responses carry only domain
data, no CLI formatting.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# ------------------------------------------------------------------ #
# Database responses
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class MigrationRunSummary:
    """Result payload for :func:`agentic_kit.ops.migrations.apply_migrations`."""

    applied: list[str]
    skipped: list[str]
    pending: list[str] = field(default_factory=list)
    failed: str | None = None
    dry_run: bool = False


@dataclass(frozen=True, slots=True)
class MigrationStatusRow:
    """One row of ``db status`` output."""

    version: str
    state: str  # "applied" | "pending"
    applied_at: str | None = None


@dataclass(frozen=True, slots=True)
class StepRunRow:
    """One row of ``history`` output."""

    id: int
    step: str
    status: str
    dry_run: bool
    started_at: str | None
    elapsed_ms: float
    detail: str | None = None


# ------------------------------------------------------------------ #
# Bootstrap responses
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class LinkAction:
    """A single symlink (or stow package) handled by the link step.

    ``action`` is ``created``, ``updated``, ``unchanged``, ``replaced`` or
    ``stowed``.
    """

    source: str
    target: str
    action: str


@dataclass(frozen=True, slots=True)
class LinkSummary:
    """Result payload for :func:`agentic_kit.ops.agentic.link_agentic`."""

    repo: str
    cloned: bool
    mode: str
    actions: list[LinkAction] = field(default_factory=list)
    dry_run: bool = False


@dataclass(frozen=True, slots=True)
class DevelSummary:
    """Result payload for :func:`agentic_kit.ops.devel.setup_devel`."""

    devel_dir: str
    dev_envs: list[str] = field(default_factory=list)
    installer_ran: bool = False
    packages: list[str] = field(default_factory=list)
    dry_run: bool = False


@dataclass(frozen=True, slots=True)
class BridgeResetSummary:
    """Result payload for :func:`agentic_kit.ops.network.reset_docker_network`."""

    bridge: str
    existed: bool
    recreated: bool | None
    commands: list[str] = field(default_factory=list)
    dry_run: bool = False


@dataclass(frozen=True, slots=True)
class BootstrapSummary:
    """Result payload for :func:`agentic_kit.ops.bootstrap.bootstrap_all`."""

    steps: list[str] = field(default_factory=list)
    link: LinkSummary | None = None
    devel: DevelSummary | None = None
    failed_step: str | None = None
