"""Tests for the step run ledger."""

from __future__ import annotations

import sqlite3
from datetime import UTC, datetime, timedelta

import pytest

from agentic_kit.core.history import StepLedger, StepRun
from agentic_kit.core.migrations.runner import MigrationRunner


@pytest.fixture()
def ledger(conn: sqlite3.Connection) -> StepLedger:
    MigrationRunner(conn, table="kit_schema_migrations").apply_pending(raise_on_error=True)
    return StepLedger(conn)


def test_record_and_read_back(ledger: StepLedger):
    run_id = ledger.record(
        request_id="abc", step="link", status="ok", detail="3 links", elapsed_ms=12.5
    )
    runs = ledger.recent()
    assert len(runs) == 1
    run = runs[0]
    assert isinstance(run, StepRun)
    assert run.id == run_id
    assert run.step == "link"
    assert run.status == "ok"
    assert run.dry_run is False
    assert run.detail == "3 links"
    assert run.elapsed_ms == 12.5
    assert run.started_at is not None


def test_newest_first_and_limit(ledger: StepLedger):
    for i in range(5):
        ledger.record(request_id=f"r{i}", step="devel", status="ok")
    runs = ledger.recent(limit=3)
    assert [r.request_id for r in runs] == ["r4", "r3", "r2"]


def test_filter_by_step(ledger: StepLedger):
    ledger.record(request_id="a", step="link", status="ok")
    ledger.record(request_id="b", step="docker", status="error", dry_run=True)
    runs = ledger.recent(step="docker")
    assert [r.request_id for r in runs] == ["b"]
    assert runs[0].dry_run is True


def test_missing_table_raises(conn: sqlite3.Connection):
    with pytest.raises(sqlite3.OperationalError):
        StepLedger(conn).record(request_id="a", step="link", status="ok")


def test_started_at_is_utc(ledger: StepLedger):
    ledger.record(request_id="a", step="link", status="ok")
    started = ledger.recent()[0].started_at
    assert started.tzinfo == UTC
    assert abs(datetime.now(UTC) - started) < timedelta(minutes=1)


def test_explicit_started_at(ledger: StepLedger):
    when = datetime(2025, 3, 4, 5, 6, 7, tzinfo=UTC)
    ledger.record(request_id="a", step="link", status="ok", started_at=when)
    assert ledger.recent()[0].started_at == when
