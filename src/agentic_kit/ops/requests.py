"""
Typed request objects for operations.

Each dataclass represents the *input* contract for a single operation
function.  Requests carry only validated, transport-agnostic data; no
Typer params.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from agentic_kit.core.config import LinkMode

# ------------------------------------------------------------------ #
# Database operations
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class MigrateRequest:
    """Request for :func:`agentic_kit.ops.migrations.apply_migrations`.

    ``migrations_dir`` overrides the configured/bundled directory and
    ``database`` the migration target (the step ledger stays in
    ``settings.database``).
    """

    migrations_dir: str | None = None
    database: str | None = None


@dataclass(frozen=True, slots=True)
class HistoryRequest:
    """Request for :func:`agentic_kit.ops.migrations.list_history`."""

    limit: int = 20
    step: str | None = None


# ------------------------------------------------------------------ #
# Bootstrap operations
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class LinkRequest:
    """Request for :func:`agentic_kit.ops.agentic.link_agentic`.

    Attributes:
        mode: Override ``settings.link_mode``.
        force: Replace real files/directories that sit on a link path.
        skip_clone: Do not clone when the repository is missing.
    """

    mode: LinkMode | None = None
    force: bool = False
    skip_clone: bool = False


@dataclass(frozen=True, slots=True)
class DevelRequest:
    """Request for :func:`agentic_kit.ops.devel.setup_devel`."""

    skip_dev_envs: bool = False
    skip_installer: bool = False
    skip_packages: bool = False


@dataclass(frozen=True, slots=True)
class BridgeResetRequest:
    """Request for :func:`agentic_kit.ops.network.reset_docker_network`.

    ``bridge`` overrides ``settings.docker_bridge``.
    """

    bridge: str | None = None
    verify: bool = True


@dataclass(frozen=True, slots=True)
class BootstrapRequest:
    """Request for :func:`agentic_kit.ops.bootstrap.bootstrap_all`."""

    link: LinkRequest = field(default_factory=LinkRequest)
    devel: DevelRequest = field(default_factory=DevelRequest)
    skip_devel: bool = False
