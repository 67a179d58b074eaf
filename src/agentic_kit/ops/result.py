"""
Operation result envelope.

Provides :class:`OperationResult`, a typed success/failure envelope that
every operation function returns.  The CLI renders it as a table or as
JSON; typed :class:`~agentic_kit.core.errors.KitError` failures raised
inside an operation are folded into the envelope by :meth:`from_error`.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from agentic_kit.core.errors import ErrorCategory, KitError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class OperationError:
    """Structured error detail for failed operations.

    Attributes:
        code: Machine-readable code (``COMMAND_FAILED``, ``LINK_CONFLICT``, …).
        message: Human-readable description of the error.
        category: Optional :class:`ErrorCategory` for routing.
        details: Extra key/value context (command, path, exit code, …).
    """

    code: str
    message: str
    category: ErrorCategory | None = None
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class OperationResult(Generic[T]):
    """Envelope returned by every operation function.

    Factory methods :meth:`ok`, :meth:`fail` and :meth:`from_error` should
    be used instead of the constructor directly.

    Attributes:
        success: ``True`` when the operation completed without error.
        data: The typed payload.  Failed operations may still carry the
            partial payload (e.g. the migrations that committed).
        error: Structured error (``None`` on success).
        warnings: Non-fatal messages collected during the operation.
        elapsed_ms: Wall-clock time the operation took.
        metadata: Additional key/value pairs for debugging or tracing.
    """

    success: bool
    data: T | None = None
    error: OperationError | None = None
    warnings: list[str] = field(default_factory=list)
    elapsed_ms: float = 0.0
    metadata: dict[str, Any] = field(default_factory=dict)

    # ------------------------------------------------------------------ #
    # Factory helpers
    # ------------------------------------------------------------------ #

    @classmethod
    def ok(
        cls,
        data: T,
        *,
        warnings: list[str] | None = None,
        elapsed_ms: float = 0.0,
        metadata: dict[str, Any] | None = None,
    ) -> OperationResult[T]:
        """Create a successful result."""
        return cls(
            success=True,
            data=data,
            warnings=warnings or [],
            elapsed_ms=elapsed_ms,
            metadata=metadata or {},
        )

    @classmethod
    def fail(
        cls,
        code: str,
        message: str,
        *,
        category: ErrorCategory | None = None,
        details: dict[str, Any] | None = None,
        data: T | None = None,
        warnings: list[str] | None = None,
        elapsed_ms: float = 0.0,
        metadata: dict[str, Any] | None = None,
    ) -> OperationResult[T]:
        """Create a failed result."""
        return cls(
            success=False,
            data=data,
            error=OperationError(
                code=code,
                message=message,
                category=category,
                details=details or {},
            ),
            warnings=warnings or [],
            elapsed_ms=elapsed_ms,
            metadata=metadata or {},
        )

    @classmethod
    def from_error(
        cls,
        exc: KitError,
        *,
        data: T | None = None,
        warnings: list[str] | None = None,
        elapsed_ms: float = 0.0,
    ) -> OperationResult[T]:
        """Fold a typed :class:`KitError` into a failed result."""
        details = exc.context.to_dict()
        stderr = getattr(exc, "stderr", "")
        if stderr:
            details["stderr"] = stderr.strip()
        return cls.fail(
            exc.code,
            exc.message,
            category=exc.category,
            details=details,
            data=data,
            warnings=warnings,
            elapsed_ms=elapsed_ms,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a plain dict (for JSON output)."""
        d: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            d["data"] = self.data
        if self.error is not None:
            d["error"] = {
                "code": self.error.code,
                "message": self.error.message,
            }
            if self.error.category is not None:
                d["error"]["category"] = self.error.category.value
            if self.error.details:
                d["error"]["details"] = self.error.details
        if self.warnings:
            d["warnings"] = self.warnings
        if self.elapsed_ms:
            d["elapsed_ms"] = round(self.elapsed_ms, 2)
        if self.metadata:
            d["metadata"] = self.metadata
        return d


# ------------------------------------------------------------------ #
# Timing helper
# ------------------------------------------------------------------ #


class _Timer:
    """Minimal stopwatch for timing operations."""

    __slots__ = ("_start",)

    def __init__(self) -> None:
        self._start = time.perf_counter()

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self._start) * 1000


def start_timer() -> _Timer:
    """Return a lightweight timer.  Use ``timer.elapsed_ms`` when done."""
    return _Timer()
