from __future__ import annotations

import asyncio
from datetime import date

import mysql.connector
import pytest

from src.planning_system.planning_system.core.enums import EventKind
from src.planning_system.planning_system.core.exceptions import EventStoreError, ShiftNotFoundError
from src.planning_system.planning_system.shifts.model import Shift, ShiftPatch
from src.planning_system.planning_system.shifts.mysql_event_store import MySQLEventStore


class FakeCursor:
    def __init__(self, conn):
        self._conn = conn
        self._result: list[dict] = []
        self.lastrowid = 0
        self.rowcount = 0

    def execute(self, sql, params=()):
        self._conn.executed.append((" ".join(sql.split()), params))
        if self._conn.fail_on_insert is not None and sql.strip().startswith("INSERT"):
            if len([e for e in self._conn.executed if e[0].startswith("INSERT")]) == self._conn.fail_on_insert:
                raise mysql.connector.Error("Duplicate entry")
        if sql.strip().startswith("INSERT"):
            self._conn.next_id += 1
            self.lastrowid = self._conn.next_id
        elif sql.strip().startswith("SELECT"):
            self._result = self._conn.matching(params)
        elif sql.strip().startswith(("DELETE", "UPDATE")):
            self.rowcount = len(self._conn.matching(params[-2:]))

    def fetchall(self):
        return self._result

    def fetchone(self):
        return self._result[0] if self._result else None

    def close(self):
        pass


class FakeConnection:
    def __init__(self, rows=(), fail_on_insert=None):
        self.rows = list(rows)
        self.fail_on_insert = fail_on_insert
        self.executed: list[tuple[str, tuple]] = []
        self.next_id = 100
        self.commits = 0
        self.rollbacks = 0

    def matching(self, params):
        # params end with (id, type) or hold only (type,)
        *ids, kind = params
        return [r for r in self.rows if r["type"] == kind and (not ids or r["id"] == ids[0])]

    def cursor(self, dictionary=True):
        return FakeCursor(self)

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        pass


class FakeConnFactory:
    def __init__(self, conn: FakeConnection):
        self.conn = conn

    def connect(self):
        return self.conn


ROW = {
    "id": 7,
    "title": "Morning",
    "date": date(2024, 3, 5),
    "time": "09:00 - 13:00",
    "description": None,
    "color": "#10b981",
    "assigned_to": "E1",
    "type": "planning",
}


def test_list_maps_rows_and_filters_by_kind():
    conn = FakeConnection(rows=[ROW])
    store = MySQLEventStore(FakeConnFactory(conn))

    shifts = asyncio.run(store.list(kind=EventKind.PLANNING))

    assert shifts == [
        Shift(
            shift_id=7,
            title="Morning",
            shift_date=date(2024, 3, 5),
            start_time="09:00",
            end_time="13:00",
            color="#10b981",
            assigned_to="E1",
            kind=EventKind.PLANNING,
        )
    ]
    assert conn.executed[0][1] == ("planning",)


def test_create_batch_uses_one_transaction_and_assigns_ids():
    conn = FakeConnection()
    store = MySQLEventStore(FakeConnFactory(conn))
    shifts = [Shift(title="Morning", shift_date=date(2024, 3, d)) for d in (4, 11, 18)]

    created = asyncio.run(store.create_batch(shifts))

    assert [s.shift_id for s in created] == [101, 102, 103]
    assert conn.commits == 1
    assert conn.executed[0][1][2] == "09:00 - 17:00"
    assert conn.executed[0][1][6] == "planning"


def test_create_batch_failure_rolls_back_and_wraps_error():
    conn = FakeConnection(fail_on_insert=2)
    store = MySQLEventStore(FakeConnFactory(conn))
    shifts = [Shift(title="Morning", shift_date=date(2024, 3, d)) for d in (4, 11, 18)]

    with pytest.raises(EventStoreError):
        asyncio.run(store.create_batch(shifts))

    assert conn.commits == 0
    assert conn.rollbacks == 1


def test_update_rewrites_combined_time_column():
    conn = FakeConnection(rows=[ROW])
    store = MySQLEventStore(FakeConnFactory(conn))

    asyncio.run(store.update(7, ShiftPatch(end_time="14:00", unassign=True)))

    update_sql, params = next(e for e in conn.executed if e[0].startswith("UPDATE"))
    assert update_sql == "UPDATE events SET assigned_to=%s, time=%s WHERE id=%s AND type=%s"
    assert params == (None, "09:00 - 14:00", 7, "planning")


def test_update_unknown_id_raises_not_found():
    conn = FakeConnection(rows=[])
    store = MySQLEventStore(FakeConnFactory(conn))

    with pytest.raises(ShiftNotFoundError):
        asyncio.run(store.update(42, ShiftPatch(title="Evening")))


def test_delete_reports_missing_row():
    conn = FakeConnection(rows=[ROW])
    store = MySQLEventStore(FakeConnFactory(conn))

    assert asyncio.run(store.delete(42)) is False
    assert conn.executed[-1] == ("DELETE FROM events WHERE id=%s AND type=%s", (42, "planning"))


def test_update_and_delete_leave_general_events_alone():
    calendar_event = {**ROW, "id": 3, "title": "Client call", "type": "general"}
    conn = FakeConnection(rows=[calendar_event])
    store = MySQLEventStore(FakeConnFactory(conn))

    with pytest.raises(ShiftNotFoundError):
        asyncio.run(store.update(3, ShiftPatch(title="Evening")))
    assert asyncio.run(store.delete(3)) is False

    assert not any(sql.startswith("UPDATE") for sql, _ in conn.executed)
    assert conn.executed[0] == (
        "SELECT id, title, date, time, description, color, assigned_to, type FROM events WHERE id=%s AND type=%s",
        (3, "planning"),
    )
