from __future__ import annotations

from datetime import date, timedelta
from typing import Iterator, List

from ..core.constants import DAYS_PER_WEEK
from ..shifts.model import Shift, ShiftTemplate

WEEK = timedelta(days=DAYS_PER_WEEK)


class WeeklyRecurrence:
    """Weekly shifts from `start` to `end` (inclusive), built lazily.

    Every `iter()` starts over from `start`, and each yielded Shift is a new
    object built from the template. `end < start` yields nothing.
    """

    def __init__(self, template: ShiftTemplate, start: date, end: date):
        self.template = template
        self.start = start
        self.end = end

    def __iter__(self) -> Iterator[Shift]:
        current = self.start
        while current <= self.end:
            yield self.template.at(current)
            current += WEEK

    def __len__(self) -> int:
        if self.end < self.start:
            return 0
        return (self.end - self.start).days // DAYS_PER_WEEK + 1

    def dates(self) -> List[date]:
        return [s.shift_date for s in self]


def generate_weekly(template: ShiftTemplate, start: date, end: date) -> List[Shift]:
    return list(WeeklyRecurrence(template, start, end))
