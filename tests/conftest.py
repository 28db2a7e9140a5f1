from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Iterable, Optional, Sequence

import pytest

from src.planning_system.planning_system.core.enums import EventKind
from src.planning_system.planning_system.core.exceptions import EventStoreError, ShiftNotFoundError
from src.planning_system.planning_system.roster.model import RosterEntry
from src.planning_system.planning_system.shifts.model import Shift, ShiftPatch


class InMemoryEventStore:
    """Event store fake. Set `fail_with` to make the next calls raise it."""

    def __init__(self, shifts: Iterable[Shift] = ()):
        self._rows: dict[int, Shift] = {}
        self._next_id = 1
        self.calls: list[str] = []
        self.fail_with: Optional[Exception] = None
        for s in shifts:
            self._insert(s)

    def _insert(self, shift: Shift) -> Shift:
        shift_id = shift.shift_id if shift.shift_id is not None else self._next_id
        self._next_id = max(self._next_id, shift_id) + 1
        stored = replace(shift, shift_id=shift_id)
        self._rows[shift_id] = stored
        return stored

    def _enter(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_with is not None:
            raise self.fail_with

    def _planning_row(self, shift_id) -> Optional[Shift]:
        current = self._rows.get(int(shift_id))
        return current if current is not None and current.kind == EventKind.PLANNING else None

    @property
    def writes(self) -> list[str]:
        return [c for c in self.calls if c != "list"]

    async def list(self, *, kind: EventKind) -> Sequence[Shift]:
        self._enter("list")
        rows = [s for s in self._rows.values() if s.kind == kind]
        return sorted(rows, key=lambda s: (s.shift_date, s.shift_id))

    async def create(self, shift: Shift) -> Shift:
        self._enter("create")
        return self._insert(shift)

    async def create_batch(self, shifts: Sequence[Shift]) -> Sequence[Shift]:
        self._enter("create_batch")
        return [self._insert(s) for s in shifts]

    async def update(self, shift_id: int, patch: ShiftPatch) -> Shift:
        self._enter("update")
        current = self._planning_row(shift_id)
        if current is None:
            raise ShiftNotFoundError(f"Shift {shift_id} not found")
        self._rows[int(shift_id)] = patch.apply(current)
        return self._rows[int(shift_id)]

    async def delete(self, shift_id: int) -> bool:
        self._enter("delete")
        if self._planning_row(shift_id) is None:
            return False
        del self._rows[int(shift_id)]
        return True


class InMemoryRoster:
    def __init__(self, entries: Iterable[RosterEntry] = ()):
        self._entries = list(entries)

    async def list(self) -> Sequence[RosterEntry]:
        return sorted(self._entries, key=lambda e: e.display_name)


@pytest.fixture
def roster_entries() -> list[RosterEntry]:
    return [
        RosterEntry(employee_id="E1", first_name="Alice", last_name="Martin", color="#10b981"),
        RosterEntry(employee_id="E2", first_name="Bruno", last_name="Leroy", color="#f59e0b"),
    ]


@pytest.fixture
def roster(roster_entries) -> InMemoryRoster:
    return InMemoryRoster(roster_entries)


@pytest.fixture
def make_store():
    def _make(*shifts: Shift) -> InMemoryEventStore:
        return InMemoryEventStore(shifts)

    return _make


@pytest.fixture
def store_error() -> EventStoreError:
    return EventStoreError("connection timed out")


@pytest.fixture
def week_of_march_4() -> date:
    # Monday
    return date(2024, 3, 4)
