from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from functools import lru_cache
from typing import Iterable, Optional, Tuple

from ..common.datetime_utils import add_weeks, today_local, week_start
from ..core.constants import ALL_EMPLOYEES, DAYS_PER_WEEK
from ..core.enums import EventKind
from ..roster.model import RosterEntry
from ..shifts.model import Shift

UNASSIGNED_LABEL = "Unassigned"


@dataclass(frozen=True)
class WeekWindow:
    """Seven consecutive days starting on a Monday.

    Any anchor date is normalized to the Monday of its week.
    """

    start: date

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", week_start(self.start))

    @classmethod
    def containing(cls, day: date) -> "WeekWindow":
        return cls(day)

    @classmethod
    def current(cls, today: Optional[date] = None) -> "WeekWindow":
        return cls(today or today_local())

    @property
    def end(self) -> date:
        return self.start + timedelta(days=DAYS_PER_WEEK - 1)

    @property
    def days(self) -> Tuple[date, ...]:
        return tuple(self.start + timedelta(days=i) for i in range(DAYS_PER_WEEK))

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def next(self) -> "WeekWindow":
        return WeekWindow(add_weeks(self.start, 1))

    def previous(self) -> "WeekWindow":
        return WeekWindow(add_weeks(self.start, -1))


@dataclass(frozen=True)
class GridRow:
    employee_id: Optional[str]
    label: str
    color: Optional[str]
    cells: Tuple[Tuple[Shift, ...], ...]

    @property
    def is_unassigned(self) -> bool:
        return self.employee_id is None


@dataclass(frozen=True)
class WeekGrid:
    """Employee x weekday placement of shifts for one window."""

    window: WeekWindow
    rows: Tuple[GridRow, ...]

    def row(self, employee_id: Optional[str]) -> Optional[GridRow]:
        for r in self.rows:
            if r.employee_id == employee_id:
                return r
        return None

    def cell(self, employee_id: Optional[str], day: date) -> Tuple[Shift, ...]:
        r = self.row(employee_id)
        if r is None or not self.window.contains(day):
            return ()
        return r.cells[(day - self.window.start).days]


def _assignee(shift: Shift) -> Optional[str]:
    return shift.assigned_to or None


def _select_roster(roster: Tuple[RosterEntry, ...], employee_filter: Optional[str]) -> Tuple[RosterEntry, ...]:
    if employee_filter is None or employee_filter == ALL_EMPLOYEES:
        return roster
    return tuple(e for e in roster if e.employee_id == employee_filter)[:1]


@lru_cache(maxsize=64)
def _project(
    shifts: Tuple[Shift, ...],
    roster: Tuple[RosterEntry, ...],
    window: WeekWindow,
    employee_filter: Optional[str],
) -> WeekGrid:
    days = window.days
    visible = [s for s in shifts if s.kind == EventKind.PLANNING and window.contains(s.shift_date)]

    def cells_for(employee_id: Optional[str]) -> Tuple[Tuple[Shift, ...], ...]:
        mine = [s for s in visible if _assignee(s) == employee_id]
        return tuple(tuple(s for s in mine if s.shift_date == day) for day in days)

    rows = [GridRow(employee_id=None, label=UNASSIGNED_LABEL, color=None, cells=cells_for(None))]
    for entry in _select_roster(roster, employee_filter):
        rows.append(
            GridRow(
                employee_id=entry.employee_id,
                label=entry.display_name,
                color=entry.color,
                cells=cells_for(entry.employee_id),
            )
        )
    return WeekGrid(window=window, rows=tuple(rows))


def project_grid(
    shifts: Iterable[Shift],
    roster: Iterable[RosterEntry],
    window: WeekWindow,
    employee_filter: Optional[str] = ALL_EMPLOYEES,
) -> WeekGrid:
    """Rows to render for `window`: the unassigned row first, then the roster.

    `employee_filter` is "all" (or None) for every roster entry, or one
    employee id. Shifts keep their arrival order inside a cell.
    """
    return _project(tuple(shifts), tuple(roster), window, employee_filter)
