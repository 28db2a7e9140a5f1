from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import to_date
from ..core.enums import EventKind
from ..core.exceptions import ShiftNotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, run_blocking
from .model import Shift, ShiftPatch, format_time_range, parse_time_range
from .repository import EventStore

logger = logging.getLogger(__name__)

_COLUMNS = "id, title, date, time, description, color, assigned_to, type"

# Updates and deletes never reach events of another kind.
_PLANNING = EventKind.PLANNING.value

# start_time/end_time share the single `time` column and are handled apart.
_FIELD_COLUMNS = {
    "title": "title",
    "shift_date": "date",
    "description": "description",
    "color": "color",
    "assigned_to": "assigned_to",
}


def _row_to_shift(r: Dict[str, Any]) -> Shift:
    start_time, end_time = parse_time_range(r.get("time"))
    return Shift(
        shift_id=int(r["id"]),
        title=r["title"],
        shift_date=to_date(r["date"]),
        start_time=start_time,
        end_time=end_time,
        description=r.get("description"),
        color=r.get("color"),
        assigned_to=r.get("assigned_to"),
        kind=EventKind(r.get("type") or EventKind.GENERAL.value),
    )


class MySQLEventStore(EventStore):
    """Event store on the shared `events` table (calendar events and shifts)."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    async def list(self, *, kind: EventKind) -> Sequence[Shift]:
        return await run_blocking(self._list, kind)

    async def create(self, shift: Shift) -> Shift:
        created = await run_blocking(self._create_many, [shift])
        return created[0]

    async def create_batch(self, shifts: Sequence[Shift]) -> Sequence[Shift]:
        if not shifts:
            return []
        return await run_blocking(self._create_many, list(shifts))

    async def update(self, shift_id: int, patch: ShiftPatch) -> Shift:
        return await run_blocking(self._update, int(shift_id), patch)

    async def delete(self, shift_id: int) -> bool:
        return await run_blocking(self._delete, int(shift_id))

    def _list(self, kind: EventKind) -> Sequence[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM events
                WHERE type=%s
                ORDER BY date ASC, id ASC
                """,
                (kind.value,),
            )
            return [_row_to_shift(r) for r in fetchall(cur)]

    def _create_many(self, shifts: list[Shift]) -> list[Shift]:
        # One cursor => one transaction: a failing insert rolls back the whole batch.
        created: list[Shift] = []
        with db_cursor(self._conn_factory) as (_, cur):
            for s in shifts:
                cur.execute(
                    """
                    INSERT INTO events(title, date, time, description, color, assigned_to, type)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        s.title,
                        s.shift_date,
                        s.time_range,
                        s.description,
                        s.color,
                        s.assigned_to,
                        s.kind.value,
                    ),
                )
                created.append(replace(s, shift_id=int(cur.lastrowid)))
        logger.debug("Inserted %d event(s)", len(created))
        return created

    def _get(self, cur, shift_id: int) -> Optional[Shift]:
        cur.execute(f"SELECT {_COLUMNS} FROM events WHERE id=%s AND type=%s", (shift_id, _PLANNING))
        r = fetchone(cur)
        return _row_to_shift(r) if r else None

    def _update(self, shift_id: int, patch: ShiftPatch) -> Shift:
        with db_cursor(self._conn_factory) as (_, cur):
            current = self._get(cur, shift_id)
            if current is None:
                raise ShiftNotFoundError(f"Shift {shift_id} not found")

            changes = patch.changes()
            if not changes:
                return current

            updated = patch.apply(current)
            sets: list[str] = []
            params: list[object] = []
            for name, column in _FIELD_COLUMNS.items():
                if name in changes:
                    sets.append(f"{column}=%s")
                    params.append(getattr(updated, name))
            if "start_time" in changes or "end_time" in changes:
                sets.append("time=%s")
                params.append(format_time_range(updated.start_time, updated.end_time))

            params.extend((shift_id, _PLANNING))
            cur.execute(f"UPDATE events SET {', '.join(sets)} WHERE id=%s AND type=%s", tuple(params))
            return self._get(cur, shift_id) or updated

    def _delete(self, shift_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM events WHERE id=%s AND type=%s", (shift_id, _PLANNING))
            return cur.rowcount > 0
