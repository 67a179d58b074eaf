"""Tests for CommandRunner."""

from __future__ import annotations

import subprocess

import pytest

from agentic_kit.core.errors import CommandError, CommandNotFoundError
from agentic_kit.core.shell import CommandResult, CommandRunner


class TestCommandResult:
    def test_ok_and_command(self):
        r = CommandResult(args=["git", "clone", "a b"], returncode=0)
        assert r.ok is True
        assert r.command == "git clone 'a b'"
        assert CommandResult(args=["false"], returncode=1).ok is False


class TestRun:
    def test_success_captures_output(self, fake_proc):
        fake_proc.on("git", "status", stdout="clean\n")
        result = CommandRunner().run(["git", "status"])
        assert result.ok
        assert result.stdout == "clean\n"
        assert fake_proc.calls == [["git", "status"]]

    def test_passes_input(self, fake_proc):
        CommandRunner().run(["bash"], input="echo hi\n")
        assert fake_proc.inputs == ["echo hi\n"]

    def test_nonzero_raises(self, fake_proc):
        fake_proc.on("pacman", returncode=1, stderr="target not found: nope\n")
        with pytest.raises(CommandError) as exc_info:
            CommandRunner().run(["pacman", "-S", "nope"])
        err = exc_info.value
        assert err.exit_code == 1
        assert "target not found" in err.stderr
        assert err.context.command == "pacman -S nope"

    def test_nonzero_without_check(self, fake_proc):
        fake_proc.on("ip", "link", "show", returncode=1)
        result = CommandRunner().run(["ip", "link", "show", "docker0"], check=False)
        assert result.returncode == 1
        assert not result.ok

    def test_missing_executable(self, fake_proc):
        fake_proc.on("stow", raises=FileNotFoundError(2, "No such file"))
        with pytest.raises(CommandNotFoundError) as exc_info:
            CommandRunner().run(["stow", "claude"])
        assert exc_info.value.code == "COMMAND_NOT_FOUND"
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    def test_timeout(self, fake_proc):
        fake_proc.on("curl", raises=subprocess.TimeoutExpired(["curl"], 5))
        with pytest.raises(CommandError, match="timed out"):
            CommandRunner(timeout=5).run(["curl", "-fsSL", "https://example.test"])

    def test_history_records_every_command(self, fake_proc):
        runner = CommandRunner()
        runner.run(["git", "--version"])
        runner.run(["stow", "--version"])
        assert runner.history == [["git", "--version"], ["stow", "--version"]]


class TestSudo:
    def test_prefixed_when_not_root(self, fake_proc, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr("agentic_kit.core.shell._is_root", lambda: False)
        CommandRunner().run(["systemctl", "stop", "docker"], sudo=True)
        assert fake_proc.calls == [["sudo", "systemctl", "stop", "docker"]]

    def test_not_prefixed_as_root(self, fake_proc):
        CommandRunner().run(["systemctl", "stop", "docker"], sudo=True)
        assert fake_proc.calls == [["systemctl", "stop", "docker"]]


class TestDryRun:
    def test_records_without_executing(self, fake_proc):
        runner = CommandRunner(dry_run=True)
        result = runner.run(["git", "clone", "repo", "dest"])
        assert result.dry_run is True
        assert result.ok
        assert fake_proc.calls == []
        assert runner.history == [["git", "clone", "repo", "dest"]]

    def test_failure_rules_are_not_consulted(self, fake_proc):
        fake_proc.on("pacman", returncode=1)
        CommandRunner(dry_run=True).run(["pacman", "-S", "tree"], sudo=True)
        assert fake_proc.calls == []
