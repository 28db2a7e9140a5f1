from __future__ import annotations

from typing import Protocol, Sequence

from .model import RosterEntry


class RosterProvider(Protocol):
    async def list(self) -> Sequence[RosterEntry]:
        """Staff eligible for shifts, ordered by display name."""

        raise NotImplementedError
