"""
Structured error types for agentic-kit.

Every bootstrap step is fail-fast: the first error aborts the remaining
steps and surfaces to the caller.  Instead of bare ``RuntimeError`` or
``CalledProcessError`` leaking out of the ops layer, each failure is a
``KitError`` subclass carrying:

- **Category:** What kind of failure (command, filesystem, database, config)
- **Code:** Stable machine-readable code used by the CLI and JSON output
- **Context:** Structured metadata (command, path, migration, exit code)
- **Cause:** Chained underlying exception for root cause analysis

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                          KitError                             │
        │              (category, code, context, cause)                 │
        ├──────────────────────────────────────────────────────────────┤
        │                                                               │
        │  ConfigError          CommandError          DatabaseError     │
        │  (CONFIG)             (COMMAND)             (DATABASE)        │
        │                            │                     │            │
        │                   CommandNotFoundError     MigrationError     │
        │                                                               │
        │  FilesystemError      NetworkBridgeError                      │
        │  (FILESYSTEM)         (NETWORK)                               │
        │       │                    │                                  │
        │  LinkConflictError    BridgeNotRecreatedError                 │
        └──────────────────────────────────────────────────────────────┘

Nothing in this hierarchy is retryable: recovery is an operator re-running
the command once the cause is fixed.

Examples:
    >>> error = CommandError("git clone failed", exit_code=128)
    >>> error.code
    'COMMAND_FAILED'
    >>> error.with_context(path="/home/me/devel/agentic").context.path
    '/home/me/devel/agentic'

Tags:
    error-handling, exception-hierarchy, error-context, agentic-kit
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from agentic_kit.core.migrations.runner import MigrationResult


class ErrorCategory(str, Enum):
    """Standard error categories used for CLI output and log routing."""

    COMMAND = "COMMAND"          # External tool exited non-zero / missing
    FILESYSTEM = "FILESYSTEM"    # Symlink, mkdir, permission problems
    DATABASE = "DATABASE"        # SQLite / migration failures
    NETWORK = "NETWORK"          # Host network interfaces (docker0)
    CONFIG = "CONFIG"            # Missing or invalid settings
    INTERNAL = "INTERNAL"        # Bugs, unexpected state


@dataclass
class ErrorContext:
    """Structured metadata attached to an error.

    Only non-``None`` fields are emitted by :meth:`to_dict`; anything that
    does not have a dedicated field lands in ``metadata``.
    """

    step: str | None = None
    command: str | None = None
    exit_code: int | None = None
    path: str | None = None
    migration: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["step", "command", "exit_code", "path", "migration"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class KitError(Exception):
    """
    Base exception for all agentic-kit errors.

    Subclasses set ``default_category`` and ``default_code``; both can be
    overridden per instance.  Passing ``cause=`` chains the original
    exception so tracebacks still show the root failure.

    Examples:
        >>> error = KitError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.to_dict()["code"]
        'INTERNAL'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_code: str = "INTERNAL"

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        code: str | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.code = code or self.default_code
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> KitError:
        """
        Add context to this error (fluent API).

        Usage:
            raise LinkConflictError("Refusing to replace").with_context(
                path="/home/me/.claude/CLAUDE.md"
            )
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(KitError):
    """
    Configuration error.

    Raised for invalid settings values and unsafe identifiers.  Never
    something a re-run fixes on its own.
    """

    default_category = ErrorCategory.CONFIG
    default_code = "INVALID_CONFIG"


# =============================================================================
# COMMAND ERRORS
# =============================================================================


class CommandError(KitError):
    """An external command exited non-zero or timed out."""

    default_category = ErrorCategory.COMMAND
    default_code = "COMMAND_FAILED"

    def __init__(
        self,
        message: str,
        *,
        exit_code: int | None = None,
        stderr: str = "",
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.exit_code = exit_code
        self.stderr = stderr
        if exit_code is not None:
            self.context.exit_code = exit_code

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.stderr:
            result["stderr"] = self.stderr.strip()
        return result


class CommandNotFoundError(CommandError):
    """The executable is not installed or not on ``PATH``."""

    default_code = "COMMAND_NOT_FOUND"


# =============================================================================
# FILESYSTEM ERRORS
# =============================================================================


class FilesystemError(KitError):
    """Filesystem operation failed."""

    default_category = ErrorCategory.FILESYSTEM
    default_code = "FILESYSTEM_ERROR"


class LinkConflictError(FilesystemError):
    """A real file or directory occupies a path where a symlink belongs."""

    default_code = "LINK_CONFLICT"


# =============================================================================
# DATABASE ERRORS
# =============================================================================


class DatabaseError(KitError):
    """Database error."""

    default_category = ErrorCategory.DATABASE
    default_code = "DATABASE_ERROR"


class MigrationError(DatabaseError):
    """A migration file failed and was rolled back.

    ``result`` holds the partial run: what committed before the failure.
    """

    default_code = "MIGRATION_FAILED"

    def __init__(
        self,
        message: str,
        *,
        result: MigrationResult | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.result = result
        if result is not None and result.failed:
            self.context.migration = result.failed


# =============================================================================
# NETWORK ERRORS
# =============================================================================


class NetworkBridgeError(KitError):
    """Host network bridge manipulation failed."""

    default_category = ErrorCategory.NETWORK
    default_code = "BRIDGE_ERROR"


class BridgeNotRecreatedError(NetworkBridgeError):
    """Docker restarted but did not recreate its bridge interface."""

    default_code = "BRIDGE_NOT_RECREATED"


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "KitError",
    "ConfigError",
    "CommandError",
    "CommandNotFoundError",
    "FilesystemError",
    "LinkConflictError",
    "DatabaseError",
    "MigrationError",
    "NetworkBridgeError",
    "BridgeNotRecreatedError",
]
