"""Tests for the SQL order repository with a recording session.

Statements are compiled with the PostgreSQL dialect so the storage-level
guards (conditional assignment, in-SQL increment, set-once CASE) are checked
on the SQL that would actually be sent.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import IntegrityError, OperationalError

from orderdesk.adapters.persistence.repositories import SqlOrderRepository, SqlProductRepository
from orderdesk.domain.errors import ConflictError, DatastoreError
from orderdesk.domain.policies.status_transition import StatusChange

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

# ─── Recording session ──────────────────────────────────────────────


class _Result:
    def __init__(self, rowcount: int = 1, row=None):
        self.rowcount = rowcount
        self._row = row

    def scalar_one_or_none(self):
        return self._row

    def scalars(self):
        return iter([])


class RecordingSession:
    """Stands in for AsyncSession: records statements and savepoints."""

    def __init__(self, result: _Result | None = None, error: Exception | None = None):
        self.statements = []
        self.savepoints = 0
        self.savepoint_rollbacks = 0
        self._result = result or _Result()
        self._error = error

    @asynccontextmanager
    async def begin_nested(self):
        self.savepoints += 1
        try:
            yield
        except Exception:
            self.savepoint_rollbacks += 1
            raise

    async def execute(self, stmt, params=None):
        self.statements.append(stmt)
        if self._error is not None:
            raise self._error
        return self._result

    async def flush(self):
        pass

    def sql(self, index: int = -1) -> str:
        return str(self.statements[index].compile(dialect=postgresql.dialect()))


def _fk_violation() -> IntegrityError:
    return IntegrityError("UPDATE orders", {}, Exception("violates foreign key constraint"))


# ─── assign_agent ───────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_assign_is_conditional_on_unassigned():
    session = RecordingSession(_Result(rowcount=1))

    await SqlOrderRepository(session).assign_agent(7, 3)

    sql = session.sql()
    assert sql.startswith("UPDATE orders SET agent_id=")
    assert "orders.agent_id IS NULL" in sql
    assert session.savepoints == 1


@pytest.mark.asyncio
async def test_assign_lost_race_raises_conflict():
    session = RecordingSession(_Result(rowcount=0))
    with pytest.raises(ConflictError):
        await SqlOrderRepository(session).assign_agent(7, 3)


@pytest.mark.asyncio
async def test_assign_failure_is_contained_in_savepoint():
    """A failed assignment rolls back its savepoint only, the batch transaction survives."""
    session = RecordingSession(error=_fk_violation())

    with pytest.raises(DatastoreError):
        await SqlOrderRepository(session).assign_agent(7, 99)

    assert session.savepoints == 1
    assert session.savepoint_rollbacks == 1


@pytest.mark.asyncio
async def test_duplicate_lookup_failure_is_contained_in_savepoint():
    session = RecordingSession(error=OperationalError("SELECT", {}, Exception("timeout")))

    with pytest.raises(DatastoreError):
        await SqlOrderRepository(session).get_by_external_number(1001)

    assert session.savepoint_rollbacks == 1


@pytest.mark.asyncio
async def test_duplicate_lookup_miss_returns_none():
    session = RecordingSession(_Result(row=None))
    assert await SqlOrderRepository(session).get_by_external_number(1001) is None
    assert session.savepoints == 1


@pytest.mark.asyncio
async def test_product_lookup_runs_in_savepoint():
    session = RecordingSession(error=OperationalError("SELECT", {}, Exception("timeout")))

    with pytest.raises(DatastoreError):
        await SqlProductRepository(session).get_by_external_ids(["100"])

    assert session.savepoint_rollbacks == 1


# ─── apply_status_change ────────────────────────────────────────────


def _set_clause(sql: str) -> str:
    return sql.split(" WHERE ")[0]


@pytest.mark.asyncio
async def test_status_change_increments_attempts_in_sql():
    session = RecordingSession(_Result(row=None))
    change = StatusChange(status_id=1, recall_at=NOW + timedelta(hours=24))

    await SqlOrderRepository(session).apply_status_change(7, change)

    sets = _set_clause(session.sql())
    assert "recall_attempts=" in sets
    assert "orders.recall_attempts + " in sets
    assert "recall_at=" in sets
    assert "RETURNING" in session.sql()


@pytest.mark.asyncio
async def test_first_processing_guarded_by_case_when_null():
    session = RecordingSession(_Result(row=None))
    change = StatusChange(
        status_id=1, first_processed_at=NOW, processing_time_min=42,
    )

    await SqlOrderRepository(session).apply_status_change(7, change)

    sets = _set_clause(session.sql())
    assert "first_processed_at=" in sets
    assert "processing_time_min=" in sets
    assert sets.count("CASE WHEN") == 2
    assert sets.count("orders.first_processed_at IS NULL") == 2
    assert "ELSE orders.first_processed_at END" in sets
    assert "ELSE orders.processing_time_min END" in sets


@pytest.mark.asyncio
async def test_status_without_recall_leaves_recall_columns_alone():
    session = RecordingSession(_Result(row=None))

    await SqlOrderRepository(session).apply_status_change(7, StatusChange(status_id=None))

    sets = _set_clause(session.sql())
    assert "status_id=" in sets
    assert "recall_at" not in sets
    assert "recall_attempts" not in sets
    assert "first_processed_at" not in sets


@pytest.mark.asyncio
async def test_status_change_unknown_order_returns_none():
    session = RecordingSession(_Result(row=None))
    assert await SqlOrderRepository(session).apply_status_change(7, StatusChange(status_id=1)) is None


@pytest.mark.asyncio
async def test_status_change_driver_error_wrapped():
    session = RecordingSession(error=OperationalError("UPDATE", {}, Exception("gone")))
    with pytest.raises(DatastoreError):
        await SqlOrderRepository(session).apply_status_change(7, StatusChange(status_id=1))
