from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Dict, Optional, Tuple

from ..common.datetime_utils import DateLike, to_date
from ..common.validators import require_hhmm, require_non_empty
from ..core.constants import DEFAULT_END_TIME, DEFAULT_START_TIME, TIME_RANGE_SEPARATOR
from ..core.enums import EventKind
from ..core.exceptions import ValidationError


def format_time_range(start_time: str, end_time: str) -> str:
    """Combine two HH:MM values into the stored display string "HH:MM - HH:MM"."""
    return f"{start_time}{TIME_RANGE_SEPARATOR}{end_time}"


def parse_time_range(value: Optional[str]) -> Tuple[str, str]:
    """Split "HH:MM - HH:MM" back into (start, end).

    Without the separator both parts fall back to the 09:00-17:00 window.
    """
    if not value or TIME_RANGE_SEPARATOR not in value:
        return DEFAULT_START_TIME, DEFAULT_END_TIME
    start, _, end = value.partition(TIME_RANGE_SEPARATOR)
    return start.strip(), end.strip()


def coerce_date(value: DateLike, field_name: str = "Date") -> date:
    try:
        return to_date(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is not a valid calendar date")


@dataclass(frozen=True)
class Shift:
    """Thực thể miền (domain): một ca làm việc trên lưới Planning.

    Lưu ý: `shift_id` chỉ có sau khi event store tạo bản ghi.
    """

    title: str
    shift_date: date
    start_time: str = DEFAULT_START_TIME
    end_time: str = DEFAULT_END_TIME
    description: Optional[str] = None
    color: Optional[str] = None
    assigned_to: Optional[str] = None
    kind: EventKind = EventKind.PLANNING
    shift_id: Optional[int] = None

    @property
    def time_range(self) -> str:
        return format_time_range(self.start_time, self.end_time)

    @property
    def is_persisted(self) -> bool:
        return self.shift_id is not None

    def moved_to(self, shift_date: date) -> "Shift":
        """Unsaved copy of this shift on another date."""
        return replace(self, shift_date=shift_date, shift_id=None)


@dataclass(frozen=True)
class ShiftTemplate:
    """Everything a shift carries except its date (used for recurrence)."""

    title: str
    start_time: str = DEFAULT_START_TIME
    end_time: str = DEFAULT_END_TIME
    description: Optional[str] = None
    color: Optional[str] = None
    assigned_to: Optional[str] = None

    @classmethod
    def from_shift(cls, shift: Shift) -> "ShiftTemplate":
        return cls(
            title=shift.title,
            start_time=shift.start_time,
            end_time=shift.end_time,
            description=shift.description,
            color=shift.color,
            assigned_to=shift.assigned_to,
        )

    def at(self, shift_date: date) -> Shift:
        return Shift(
            title=self.title,
            shift_date=shift_date,
            start_time=self.start_time,
            end_time=self.end_time,
            description=self.description,
            color=self.color,
            assigned_to=self.assigned_to,
        )


@dataclass(frozen=True)
class ShiftPatch:
    """Partial edit of a shift. `None` leaves a field untouched.

    `unassign=True` clears `assigned_to` (None alone cannot express that).
    """

    title: Optional[str] = None
    shift_date: Optional[date] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    assigned_to: Optional[str] = None
    unassign: bool = field(default=False)

    def changes(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for name in ("title", "shift_date", "start_time", "end_time", "description", "color", "assigned_to"):
            value = getattr(self, name)
            if value is not None:
                out[name] = value
        if self.unassign:
            out["assigned_to"] = None
        return out

    def apply(self, shift: Shift) -> Shift:
        return replace(shift, **self.changes())


def validate_shift(shift: Shift) -> Shift:
    """Check a shift before it reaches the event store; returns a normalized copy.

    No ordering between start and end time is enforced.
    """
    title = require_non_empty(shift.title, "Title")
    if not isinstance(shift.shift_date, date):
        raise ValidationError("Date is not a valid calendar date")
    start_time = require_hhmm(shift.start_time, "Start time")
    end_time = require_hhmm(shift.end_time, "End time")
    return replace(
        shift,
        title=title,
        shift_date=to_date(shift.shift_date),
        start_time=start_time,
        end_time=end_time,
        kind=EventKind.PLANNING,
    )


def validate_template(template: ShiftTemplate) -> ShiftTemplate:
    return replace(
        template,
        title=require_non_empty(template.title, "Title"),
        start_time=require_hhmm(template.start_time, "Start time"),
        end_time=require_hhmm(template.end_time, "End time"),
    )


def validate_patch(patch: ShiftPatch) -> ShiftPatch:
    changes: Dict[str, Any] = {}
    if patch.title is not None:
        changes["title"] = require_non_empty(patch.title, "Title")
    if patch.shift_date is not None:
        changes["shift_date"] = coerce_date(patch.shift_date)
    if patch.start_time is not None:
        changes["start_time"] = require_hhmm(patch.start_time, "Start time")
    if patch.end_time is not None:
        changes["end_time"] = require_hhmm(patch.end_time, "End time")
    return replace(patch, **changes)
