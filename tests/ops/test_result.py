"""Tests for the OperationResult envelope."""

from __future__ import annotations

from agentic_kit.core.errors import CommandError, ErrorCategory, ErrorContext, LinkConflictError
from agentic_kit.ops.result import OperationError, OperationResult, start_timer


class TestFactories:
    def test_ok(self):
        r = OperationResult.ok({"x": 1}, warnings=["careful"], elapsed_ms=1.5)
        assert r.success is True
        assert r.data == {"x": 1}
        assert r.error is None
        assert r.warnings == ["careful"]

    def test_fail(self):
        r = OperationResult.fail("NOPE", "it broke", details={"k": "v"}, data=[1])
        assert r.success is False
        assert r.data == [1]
        assert r.error == OperationError(code="NOPE", message="it broke", details={"k": "v"})

    def test_from_error(self):
        exc = LinkConflictError("occupied", context=ErrorContext(path="/x"))
        r = OperationResult.from_error(exc)
        assert r.success is False
        assert r.error.code == "LINK_CONFLICT"
        assert r.error.category == ErrorCategory.FILESYSTEM
        assert r.error.details == {"path": "/x"}

    def test_from_error_includes_stderr(self):
        exc = CommandError("failed", exit_code=1, stderr="bad thing\n")
        r = OperationResult.from_error(exc)
        assert r.error.details == {"exit_code": 1, "stderr": "bad thing"}


class TestToDict:
    def test_success_minimal(self):
        assert OperationResult.ok(None).to_dict() == {"success": True}

    def test_failure(self):
        r = OperationResult.fail(
            "X",
            "msg",
            category=ErrorCategory.COMMAND,
            details={"command": "git"},
            warnings=["w"],
            elapsed_ms=1.23456,
        )
        assert r.to_dict() == {
            "success": False,
            "error": {
                "code": "X",
                "message": "msg",
                "category": "COMMAND",
                "details": {"command": "git"},
            },
            "warnings": ["w"],
            "elapsed_ms": 1.23,
        }


def test_timer_is_monotonic():
    timer = start_timer()
    first = timer.elapsed_ms
    assert first >= 0
    assert timer.elapsed_ms >= first
