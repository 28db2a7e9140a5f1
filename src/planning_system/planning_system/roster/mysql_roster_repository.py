from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, run_blocking
from .model import RosterEntry
from .repository import RosterProvider


class MySQLRosterProvider(RosterProvider):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    async def list(self) -> Sequence[RosterEntry]:
        return await run_blocking(self._list)

    def _list(self) -> Sequence[RosterEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, first_name, last_name, color
                FROM employees
                WHERE is_active=1
                ORDER BY first_name, last_name
                """
            )
            rows = fetchall(cur)
            return [
                RosterEntry(
                    employee_id=str(r["employee_id"]),
                    first_name=r.get("first_name"),
                    last_name=r.get("last_name"),
                    color=r.get("color"),
                )
                for r in rows
            ]
