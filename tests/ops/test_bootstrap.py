"""Tests for the full bootstrap sequence."""

from __future__ import annotations

from agentic_kit.ops.bootstrap import bootstrap_all
from agentic_kit.ops.requests import BootstrapRequest, DevelRequest
from agentic_kit.ops.result import OperationResult


def test_link_then_devel(ctx, agentic_repo, fake_proc):
    result = bootstrap_all(ctx)

    assert result.success, result.error
    assert result.data.steps == ["link", "devel"]
    assert result.data.failed_step is None
    assert result.data.link.cloned is False
    assert fake_proc.commands[0] == "omarchy-install-dev-env go"
    assert fake_proc.commands[-1] == "pacman -S --noconfirm --needed strace"


def test_skip_devel(ctx, agentic_repo, fake_proc):
    result = bootstrap_all(ctx, BootstrapRequest(skip_devel=True))
    assert result.data.steps == ["link"]
    assert result.data.devel is None
    assert fake_proc.calls == []


def test_link_failure_stops_before_devel(ctx, settings, agentic_repo, fake_proc):
    settings.claude_path.mkdir()
    (settings.claude_path / "settings.json").write_text("{}")

    result = bootstrap_all(ctx)
    assert result.success is False
    assert result.error.code == "LINK_CONFLICT"
    assert result.error.message.startswith("link: ")
    assert result.data.failed_step == "link"
    assert fake_proc.calls == []


def test_devel_failure(ctx, agentic_repo, fake_proc):
    fake_proc.on("pacman", returncode=1)
    result = bootstrap_all(ctx, BootstrapRequest(devel=DevelRequest(skip_dev_envs=True)))

    assert result.success is False
    assert result.data.failed_step == "devel"
    assert result.data.steps == ["link"]
    assert result.data.devel.installer_ran is True
    assert result.data.devel.packages == []


def test_warnings_are_collected(ctx, agentic_repo, fake_proc):
    (agentic_repo / "CLAUDE.md").unlink()
    result = bootstrap_all(ctx, BootstrapRequest(skip_devel=True))
    assert any("CLAUDE.md" in w for w in result.warnings)


def test_step_failure_without_error_detail(ctx, agentic_repo, fake_proc, monkeypatch):
    monkeypatch.setattr(
        "agentic_kit.ops.bootstrap.setup_devel", lambda ctx, request: OperationResult(success=False)
    )
    result = bootstrap_all(ctx)

    assert result.success is False
    assert result.error.code == "STEP_FAILED"
    assert result.data.failed_step == "devel"
