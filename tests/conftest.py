"""
Shared pytest fixtures for agentic-kit tests.

This module provides:
- Environment isolation (no AGENTIC_KIT_* leakage, HOME under tmp_path)
- A scripted ``subprocess.run`` replacement that records every command
- Settings/context factories rooted in a temporary home directory
- A sample agentic repository layout

Usage:
    def test_something(ctx, fake_proc):
        fake_proc.on("ip", "link", "show", returncode=1)
        ...
"""

from __future__ import annotations

import os
import sqlite3
import subprocess
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
import structlog

from agentic_kit.core.config import KitSettings, clear_settings_cache
from agentic_kit.core.shell import CommandRunner
from agentic_kit.ops.context import OperationContext


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark tests without explicit markers as unit tests."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_env(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[Path, None, None]:
    """Point HOME at a temp dir, drop AGENTIC_KIT_* vars, reset caches."""
    home = tmp_path / "home"
    home.mkdir()
    for key in list(os.environ):
        if key.startswith("AGENTIC_KIT_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("AGENTIC_KIT_LOG_LEVEL", "ERROR")
    monkeypatch.chdir(tmp_path)
    # sudo prefixing is covered explicitly in test_shell
    monkeypatch.setattr("agentic_kit.core.shell._is_root", lambda: True)
    clear_settings_cache()
    yield home
    clear_settings_cache()
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


# =============================================================================
# Subprocess Fake
# =============================================================================


class FakeProcesses:
    """Scripted stand-in for ``subprocess.run``.

    Rules match on a command prefix (ignoring a leading ``sudo``); the last
    matching rule wins and unmatched commands succeed with empty output.
    """

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.inputs: list[str | None] = []
        self._rules: list[tuple[tuple[str, ...], int, str, str, BaseException | None]] = []

    def on(
        self,
        *prefix: str,
        returncode: int = 0,
        stdout: str = "",
        stderr: str = "",
        raises: BaseException | None = None,
    ) -> None:
        self._rules.append((prefix, returncode, stdout, stderr, raises))

    def __call__(self, cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        cmd = list(cmd)
        self.calls.append(cmd)
        self.inputs.append(kwargs.get("input"))
        bare = cmd[1:] if cmd and cmd[0] == "sudo" else cmd
        returncode, stdout, stderr = 0, "", ""
        for prefix, rc, out, err, raises in self._rules:
            if tuple(bare[: len(prefix)]) == prefix:
                if raises is not None:
                    raise raises
                returncode, stdout, stderr = rc, out, err
        return subprocess.CompletedProcess(cmd, returncode, stdout, stderr)

    @property
    def commands(self) -> list[str]:
        return [" ".join(c) for c in self.calls]


@pytest.fixture
def fake_proc(monkeypatch: pytest.MonkeyPatch) -> FakeProcesses:
    fake = FakeProcesses()
    monkeypatch.setattr("agentic_kit.core.shell.subprocess.run", fake)
    return fake


# =============================================================================
# Settings / Context Fixtures
# =============================================================================


@pytest.fixture
def settings(isolated_env: Path) -> KitSettings:
    return KitSettings(home=isolated_env, installer_url="https://example.test/install.sh")


@pytest.fixture
def conn() -> Generator[sqlite3.Connection, None, None]:
    """In-memory SQLite connection."""
    c = sqlite3.connect(":memory:")
    yield c
    c.close()


@pytest.fixture
def make_ctx(settings: KitSettings, conn: sqlite3.Connection):
    """Factory for an ``OperationContext`` rooted at the temp home."""

    def _make(*, dry_run: bool = False, **overrides: Any) -> OperationContext:
        s = settings.model_copy(update=overrides) if overrides else settings
        return OperationContext(
            settings=s,
            runner=CommandRunner(),
            dry_run=dry_run,
            conn=conn,
        )

    return _make


@pytest.fixture
def ctx(make_ctx) -> OperationContext:
    return make_ctx()


@pytest.fixture
def agentic_repo(settings: KitSettings) -> Path:
    """A cloned-looking agentic repository with two skills and a hidden dir."""
    repo = settings.agentic_path
    (repo / "skills" / "go-web").mkdir(parents=True)
    (repo / "skills" / "code-review").mkdir()
    (repo / "skills" / ".templates").mkdir()
    (repo / "skills" / "README.md").write_text("not a skill\n")
    (repo / "CLAUDE.md").write_text("# conventions\n")
    (repo / "settings.json").write_text("{}\n")
    return repo
