"""External command execution.

Every side effect the kit has on the host (``git``, ``stow``, ``pacman``,
``systemctl``, ``ip``) goes through :class:`CommandRunner`, which wraps
``subprocess.run`` with:

- Fail-fast: a non-zero exit raises :class:`CommandError` unless ``check=False``
- Structured ``command.exec`` / ``command.failed`` log events
- ``sudo`` prefixing that is skipped when already running as root
- Dry-run mode that records the command without executing it

Usage::

    runner = CommandRunner()
    runner.run(["git", "clone", repo, str(dest)])
    runner.run(["systemctl", "stop", "docker"], sudo=True)
"""

from __future__ import annotations

import os
import shlex
import subprocess
from dataclasses import dataclass, field

from agentic_kit.core.errors import CommandError, CommandNotFoundError, ErrorContext
from agentic_kit.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Outcome of a single command."""

    args: list[str]
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""
    dry_run: bool = False

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def command(self) -> str:
        return shlex.join(self.args)


def _is_root() -> bool:
    return hasattr(os, "geteuid") and os.geteuid() == 0


@dataclass
class CommandRunner:
    """Runs external commands synchronously.

    Attributes:
        dry_run: Log and record commands but do not execute them.
        timeout: Per-command timeout in seconds (``None`` waits forever).
        history: Every command issued through this runner, in order.
    """

    dry_run: bool = False
    timeout: int | None = None
    history: list[list[str]] = field(default_factory=list)

    def run(
        self,
        args: list[str],
        *,
        check: bool = True,
        input: str | None = None,
        sudo: bool = False,
        capture: bool = True,
    ) -> CommandResult:
        """Run *args* and return its :class:`CommandResult`.

        Raises:
            CommandNotFoundError: The executable does not exist.
            CommandError: Non-zero exit (with ``check``) or timeout.
        """
        cmd = list(args)
        if sudo and not _is_root():
            cmd = ["sudo", *cmd]
        self.history.append(cmd)
        command = shlex.join(cmd)

        if self.dry_run:
            logger.info("command.dry_run", cmd=command)
            return CommandResult(args=cmd, dry_run=True)

        logger.debug("command.exec", cmd=command)
        try:
            proc = subprocess.run(
                cmd,
                input=input,
                capture_output=capture,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as exc:
            raise CommandNotFoundError(
                f"Command not found: {cmd[0]}",
                context=ErrorContext(command=command),
                cause=exc,
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise CommandError(
                f"Command timed out after {self.timeout}s: {command}",
                context=ErrorContext(command=command),
                cause=exc,
            ) from exc

        result = CommandResult(
            args=cmd,
            returncode=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
        )
        if check and not result.ok:
            logger.error(
                "command.failed",
                cmd=command,
                exit_code=result.returncode,
                stderr=result.stderr.strip(),
            )
            raise CommandError(
                f"Command failed (exit {result.returncode}): {command}",
                exit_code=result.returncode,
                stderr=result.stderr,
                context=ErrorContext(command=command),
            )
        return result
