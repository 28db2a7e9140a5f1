from __future__ import annotations

import asyncio

import mysql.connector
import pytest

from src.planning_system.planning_system.core.exceptions import EventStoreError
from src.planning_system.planning_system.roster.model import RosterEntry
from src.planning_system.planning_system.roster.mysql_roster_repository import MySQLRosterProvider


class FakeCursor:
    def __init__(self, rows):
        self._rows = rows

    def execute(self, sql, params=()):
        pass

    def fetchall(self):
        return self._rows

    def close(self):
        pass


class FakeConnection:
    def __init__(self, rows):
        self._rows = rows

    def cursor(self, dictionary=True):
        return FakeCursor(self._rows)

    def commit(self):
        pass

    def rollback(self):
        pass

    def close(self):
        pass


class FakeConnFactory:
    def __init__(self, rows=None, error=None):
        self._rows = rows or []
        self._error = error

    def connect(self):
        if self._error:
            raise self._error
        return FakeConnection(self._rows)


def test_lists_employees_as_roster_entries():
    rows = [{"employee_id": 12, "first_name": "Alice", "last_name": "Martin", "color": "#10b981"}]
    provider = MySQLRosterProvider(FakeConnFactory(rows))

    entries = asyncio.run(provider.list())

    assert entries == [RosterEntry(employee_id="12", first_name="Alice", last_name="Martin", color="#10b981")]


def test_connection_failure_is_wrapped():
    provider = MySQLRosterProvider(FakeConnFactory(error=mysql.connector.Error("Can't connect")))

    with pytest.raises(EventStoreError):
        asyncio.run(provider.list())
