"""
Centralized settings for agentic-kit.

:class:`KitSettings` is the single, validated source of truth for every
path, URL, and package list the bootstrap steps use.  Values come from
``AGENTIC_KIT_*`` environment variables or a ``.env`` file; anything left
unset falls back to the stock workstation layout (``~/devel/agentic``, ``~/.claude``).

Relative directories resolve against ``home`` (``$HOME`` by default), so
``AGENTIC_KIT_HOME=/tmp/sandbox`` relocates the whole symlink farm.

Tags:
    agentic-kit, configuration, settings, pydantic, caching
"""

from __future__ import annotations

import os
import re
from enum import Enum
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class LinkMode(str, Enum):
    """How configuration is deployed into the Claude directory."""

    SYMLINK = "symlink"
    STOW = "stow"


def _default_home() -> Path:
    return Path(os.environ.get("HOME") or Path.home())


class KitSettings(BaseSettings):
    """agentic-kit configuration.

    All fields can be set via ``AGENTIC_KIT_*`` environment variables (e.g.
    ``AGENTIC_KIT_LINK_MODE=stow``) or a ``.env`` file.  List fields accept
    JSON (``'["go", "node", "python"]'``).
    """

    model_config = SettingsConfigDict(
        env_prefix="AGENTIC_KIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Paths ────────────────────────────────────────────────────
    home: Path = Field(default_factory=_default_home)
    agentic_dir: Path = Field(default=Path("devel/agentic"))
    claude_dir: Path = Field(default=Path(".claude"))
    devel_dir: Path = Field(default=Path("devel"))

    # ── Agentic repository ───────────────────────────────────────
    agentic_repo: str = Field(default="git@github.com:michaldziurowski/agentic.git")
    link_mode: LinkMode = Field(default=LinkMode.SYMLINK)
    link_files: list[str] = Field(default=["CLAUDE.md", "settings.json"])
    skills_subdir: str = Field(default="skills")
    stow_packages: list[str] = Field(default=["claude"])

    # ── Developer environment ────────────────────────────────────
    dev_env_command: str = Field(default="omarchy-install-dev-env")
    dev_envs: list[str] = Field(default=["go", "node"])
    installer_url: str = Field(default="https://claude.ai/install.sh")
    packages: list[str] = Field(default=["tree", "strace"])

    # ── Docker network ───────────────────────────────────────────
    docker_bridge: str = Field(default="docker0")
    docker_units: list[str] = Field(default=["docker.socket", "docker"], min_length=1)
    # started after the reset; docker.socket follows on demand
    docker_service: str = Field(default="docker")

    # ── Database ─────────────────────────────────────────────────
    database: Path = Field(default=Path(".agentic-kit/agentic_kit.db"))
    migrations_dir: Path | None = Field(
        default=None,
        description="Directory of NNN_name.sql files (defaults to the bundled set)",
    )
    migrations_table: str = Field(default="schema_migrations")

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="auto", description="auto, json, or console")

    @field_validator("migrations_table")
    @classmethod
    def _check_identifier(cls, value: str) -> str:
        if not _IDENTIFIER_RE.match(value):
            raise ValueError(f"not a plain SQL identifier: {value!r}")
        return value

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("auto", "json", "console"):
            raise ValueError("log_format must be one of: auto, json, console")
        return value

    # ── Derived paths ────────────────────────────────────────────

    def resolve(self, path: Path) -> Path:
        """Expand ``~`` and anchor relative paths at ``home``."""
        path = Path(os.path.expanduser(str(path)))
        return path if path.is_absolute() else self.home / path

    @property
    def agentic_path(self) -> Path:
        return self.resolve(self.agentic_dir)

    @property
    def claude_path(self) -> Path:
        return self.resolve(self.claude_dir)

    @property
    def skills_path(self) -> Path:
        return self.claude_path / "skills"

    @property
    def devel_path(self) -> Path:
        return self.resolve(self.devel_dir)

    @property
    def database_path(self) -> Path:
        return self.resolve(self.database)

    @property
    def json_logs(self) -> bool | None:
        if self.log_format == "auto":
            return None
        return self.log_format == "json"


# ── Settings factory with caching ────────────────────────────────────────

_settings_cache: dict[str, KitSettings] = {}


def get_settings(
    *,
    env_file: Path | str | None = None,
    _force_reload: bool = False,
) -> KitSettings:
    """Load, validate, and cache a :class:`KitSettings` instance.

    Parameters
    ----------
    env_file:
        Explicit ``.env`` file.  Defaults to ``.env`` in the working directory.
    _force_reload:
        Bypass cache and re-read the environment.
    """
    cache_key = str(env_file or "")
    if not _force_reload and cache_key in _settings_cache:
        return _settings_cache[cache_key]

    if env_file is not None:
        settings = KitSettings(_env_file=env_file)  # type: ignore[call-arg]
    else:
        settings = KitSettings()

    _settings_cache[cache_key] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()
