from __future__ import annotations

from typing import Protocol, Sequence

from ..core.enums import EventKind
from .model import Shift, ShiftPatch


class EventStore(Protocol):
    """Giao diện event store dùng chung cho lịch và Planning.

    Lưu ý (DIP): PlanningService chỉ phụ thuộc vào interface này.
    Mọi lỗi truyền tải phải được bọc thành EventStoreError.
    """

    async def list(self, *, kind: EventKind) -> Sequence[Shift]:
        """Events of one kind, ordered by date."""

        raise NotImplementedError

    async def create(self, shift: Shift) -> Shift:
        """Persist one shift; returns it with the store-assigned id."""

        raise NotImplementedError

    async def create_batch(self, shifts: Sequence[Shift]) -> Sequence[Shift]:
        """Persist all shifts as one all-or-nothing unit."""

        raise NotImplementedError

    async def update(self, shift_id: int, patch: ShiftPatch) -> Shift:
        """Raises ShiftNotFoundError if no planning event has that id."""

        raise NotImplementedError

    async def delete(self, shift_id: int) -> bool:
        """False when no planning event has that id."""

        raise NotImplementedError
