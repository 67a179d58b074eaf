"""
Tests for the logging module.

Tests verify:
- JSON lines go to stderr, never stdout
- Bound context is merged into every event
- DEBUG logs are suppressed at INFO level
"""

from __future__ import annotations

import json

import pytest

from agentic_kit.core.logging import (
    LogContext,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)


@pytest.fixture(autouse=True)
def _clean_context():
    clear_context()
    yield
    clear_context()


def _events(err: str) -> list[dict]:
    return [json.loads(line) for line in err.splitlines() if line.strip()]


class TestConfigureLogging:
    def test_json_to_stderr(self, capsys):
        configure_logging(level="INFO", json_format=True)
        get_logger("test").info("link.created", target="/tmp/x")

        captured = capsys.readouterr()
        assert captured.out == ""
        [event] = _events(captured.err)
        assert event["event"] == "link.created"
        assert event["target"] == "/tmp/x"
        assert event["level"] == "info"
        assert event["service"] == "agentic-kit"
        assert "timestamp" in event
        assert event["logger_name"] == "test"

    def test_debug_suppressed_at_info(self, capsys):
        configure_logging(level="INFO", json_format=True)
        logger = get_logger("test")
        logger.debug("command.exec", cmd="git status")
        logger.warning("ledger.record_failed")

        events = _events(capsys.readouterr().err)
        assert [e["event"] for e in events] == ["ledger.record_failed"]

    def test_custom_service_without_timestamp(self, capsys):
        configure_logging(level="DEBUG", json_format=True, service="kit-test", add_timestamp=False)
        get_logger("test").debug("x")

        [event] = _events(capsys.readouterr().err)
        assert event["service"] == "kit-test"
        assert "timestamp" not in event

    def test_console_format(self, capsys):
        configure_logging(level="INFO", json_format=False)
        get_logger("test").info("docker.started", unit="docker")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "docker.started" in captured.err


class TestContext:
    def test_bind_and_unbind(self, capsys):
        configure_logging(level="INFO", json_format=True)
        logger = get_logger("test")

        bind_context(request_id="abc", step="link")
        logger.info("one")
        unbind_context("step")
        logger.info("two")

        first, second = _events(capsys.readouterr().err)
        assert first["request_id"] == "abc"
        assert first["step"] == "link"
        assert second["request_id"] == "abc"
        assert "step" not in second

    def test_log_context_is_scoped(self, capsys):
        configure_logging(level="INFO", json_format=True)
        logger = get_logger("test")

        with LogContext(step="devel"):
            logger.info("inside")
        logger.info("outside")

        inside, outside = _events(capsys.readouterr().err)
        assert inside["step"] == "devel"
        assert "step" not in outside
