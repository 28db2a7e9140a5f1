from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, replace
from datetime import date
from typing import AsyncIterator, List, Optional, Sequence, Tuple

from ..common.datetime_utils import DateLike, parse_optional_date
from ..core.constants import ALL_EMPLOYEES, DEFAULT_SHIFT_COLOR
from ..core.enums import EventKind, ServiceState
from ..core.exceptions import BusyError, EventStoreError, ShiftNotFoundError
from ..roster.model import RosterEntry
from ..roster.repository import RosterProvider
from ..shifts.model import (
    Shift,
    ShiftPatch,
    ShiftTemplate,
    coerce_date,
    validate_patch,
    validate_shift,
    validate_template,
)
from ..shifts.repository import EventStore
from .duplicator import DuplicationPlan, duplicate_week
from .grid import WeekGrid, WeekWindow, project_grid
from .recurrence import generate_weekly

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShiftDefaults:
    """Colors used when a new shift has none of its own.

    `current_user_color` is the creating user's color; it wins over the
    fallback but not over the assigned employee's roster color.
    """

    fallback_color: str = DEFAULT_SHIFT_COLOR
    current_user_color: Optional[str] = None


@dataclass(frozen=True)
class DuplicationResult:
    plan: DuplicationPlan
    created: Tuple[Shift, ...] = ()

    @property
    def nothing_to_copy(self) -> bool:
        return self.plan.is_empty


class PlanningService:
    """Use case: the weekly Planning grid (create/edit/delete/duplicate shifts).

    Owns the in-memory shift collection; it only changes after a store call
    succeeded. One operation at a time: a call while LOADING raises BusyError.
    """

    def __init__(
        self,
        events: EventStore,
        roster: Optional[RosterProvider] = None,
        *,
        defaults: Optional[ShiftDefaults] = None,
        window: Optional[WeekWindow] = None,
    ):
        self._events = events
        self._roster_provider = roster
        self._defaults = defaults or ShiftDefaults()
        self._shifts: List[Shift] = []
        self._roster: Tuple[RosterEntry, ...] = ()
        self.window = window or WeekWindow.current()
        self.state = ServiceState.IDLE
        self.last_error: Optional[Exception] = None

    @property
    def shifts(self) -> Tuple[Shift, ...]:
        return tuple(self._shifts)

    @property
    def roster(self) -> Tuple[RosterEntry, ...]:
        return self._roster

    @asynccontextmanager
    async def _loading(self, action: str) -> AsyncIterator[None]:
        if self.state == ServiceState.LOADING:
            raise BusyError(f"Cannot {action}: another planning operation is in progress")

        self.state = ServiceState.LOADING
        self.last_error = None
        try:
            yield
        except (EventStoreError, ShiftNotFoundError) as e:
            self.last_error = e
            logger.error("Planning %s failed: %s", action, e)
            raise
        finally:
            self.state = ServiceState.IDLE

    async def _refresh(self) -> None:
        shifts = await self._events.list(kind=EventKind.PLANNING)
        self._shifts = [s for s in shifts if s.kind == EventKind.PLANNING]

    async def _refresh_after_batch(self, created: Sequence[Shift]) -> None:
        # The batch is committed: a failed reload must not report it as lost.
        try:
            await self._refresh()
        except EventStoreError as e:
            self.last_error = e
            logger.warning("Reload after batch write failed, keeping %d new shift(s) locally: %s", len(created), e)
            self._shifts.extend(created)

    # --- reads ---------------------------------------------------------

    async def list_window(self) -> Tuple[Shift, ...]:
        """Reload every planning shift (the whole set, not only the visible week)."""
        async with self._loading("list shifts"):
            await self._refresh()
        logger.info("Loaded %d planning shift(s)", len(self._shifts))
        return self.shifts

    async def load_roster(self) -> Tuple[RosterEntry, ...]:
        if self._roster_provider is None:
            return self._roster
        async with self._loading("load roster"):
            self._roster = tuple(await self._roster_provider.list())
        return self._roster

    def grid(self, employee_filter: Optional[str] = ALL_EMPLOYEES, window: Optional[WeekWindow] = None) -> WeekGrid:
        return project_grid(self._shifts, self._roster, window or self.window, employee_filter)

    # --- window navigation ---------------------------------------------

    def next_week(self) -> WeekWindow:
        self.window = self.window.next()
        return self.window

    def previous_week(self) -> WeekWindow:
        self.window = self.window.previous()
        return self.window

    def this_week(self, today: Optional[date] = None) -> WeekWindow:
        self.window = WeekWindow.current(today)
        return self.window

    # --- writes --------------------------------------------------------

    def _default_color(self, assigned_to: Optional[str]) -> str:
        if assigned_to:
            for entry in self._roster:
                if entry.employee_id == assigned_to and entry.color:
                    return entry.color
        return self._defaults.current_user_color or self._defaults.fallback_color

    def _colored(self, shift: Shift) -> Shift:
        if shift.color:
            return shift
        return replace(shift, color=self._default_color(shift.assigned_to))

    async def create_single(self, shift: Shift) -> Shift:
        shift = validate_shift(self._colored(shift))
        async with self._loading("create shift"):
            created = await self._events.create(shift)
            self._shifts.append(created)
        logger.info("Created shift %s on %s", created.shift_id, created.shift_date)
        return created

    async def create_recurring(
        self,
        template: ShiftTemplate,
        start: DateLike,
        end_date: Optional[DateLike] = None,
    ) -> List[Shift]:
        """One shift per week from `start` through `end_date`.

        Without a usable `end_date` this is a plain single create. An end
        before the start produces nothing and writes nothing.
        """
        start_date = coerce_date(start)
        end = parse_optional_date(end_date)
        if end is None:
            return [await self.create_single(template.at(start_date))]

        template = validate_template(template)
        if not template.color:
            template = replace(template, color=self._default_color(template.assigned_to))

        instances = [validate_shift(s) for s in generate_weekly(template, start_date, end)]
        if not instances:
            logger.info("Recurrence %s..%s is empty; nothing created", start_date, end)
            return []

        async with self._loading("create recurring shifts"):
            created = await self._events.create_batch(instances)
            await self._refresh_after_batch(created)
        logger.info("Created %d recurring shift(s) from %s to %s", len(created), start_date, end)
        return list(created)

    async def update(self, shift_id: int, patch: ShiftPatch) -> Shift:
        patch = validate_patch(patch)
        async with self._loading("update shift"):
            updated = await self._events.update(int(shift_id), patch)
            self._shifts = [updated if s.shift_id == updated.shift_id else s for s in self._shifts]
        logger.info("Updated shift %s", updated.shift_id)
        return updated

    async def delete(self, shift_id: int) -> None:
        async with self._loading("delete shift"):
            if not await self._events.delete(int(shift_id)):
                raise ShiftNotFoundError(f"Shift {shift_id} not found")
            self._shifts = [s for s in self._shifts if s.shift_id != int(shift_id)]
        logger.info("Deleted shift %s", shift_id)

    async def duplicate_previous_week(self, target_week_start: Optional[DateLike] = None) -> DuplicationResult:
        """Copy last week's shifts into the week starting `target_week_start`.

        Defaults to the current window. Works on the loaded collection only.
        """
        target = WeekWindow(coerce_date(target_week_start)) if target_week_start is not None else self.window
        plan = duplicate_week(self._shifts, target.start)
        if plan.is_empty:
            logger.info("No shifts between %s and %s to copy", plan.source_start, plan.source_end)
            return DuplicationResult(plan=plan)

        async with self._loading("duplicate week"):
            created = await self._events.create_batch(list(plan.copies))
            await self._refresh_after_batch(created)
        logger.info("Copied %d shift(s) into the week of %s", len(created), plan.target_start)
        return DuplicationResult(plan=plan, created=tuple(created))
