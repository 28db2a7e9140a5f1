from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Tuple

from ..core.constants import DAYS_PER_WEEK
from ..core.enums import EventKind
from ..shifts.model import Shift


@dataclass(frozen=True)
class DuplicationPlan:
    """What duplicating into the week starting `target_start` would write."""

    target_start: date
    source_start: date
    source_end: date
    sources: Tuple[Shift, ...]
    copies: Tuple[Shift, ...]

    @property
    def is_empty(self) -> bool:
        return not self.copies


def source_window(target_start: date) -> Tuple[date, date]:
    """The 7 days right before `target_start`, both ends inclusive."""
    source_start = target_start - timedelta(days=DAYS_PER_WEEK)
    return source_start, target_start - timedelta(days=1)


def duplicate_week(shifts: Iterable[Shift], target_start: date) -> DuplicationPlan:
    """Copy every planning shift of the previous week one week forward.

    Pure filter over `shifts`; the copies carry no id.
    """
    source_start, source_end = source_window(target_start)
    offset = timedelta(days=DAYS_PER_WEEK)

    sources = tuple(
        s for s in shifts if s.kind == EventKind.PLANNING and source_start <= s.shift_date <= source_end
    )
    copies = tuple(s.moved_to(s.shift_date + offset) for s in sources)

    return DuplicationPlan(
        target_start=target_start,
        source_start=source_start,
        source_end=source_end,
        sources=sources,
        copies=copies,
    )
