from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .core.constants import DEFAULT_SHIFT_COLOR
from .database.connection import DBConfig, DatabaseConnection
from .planning.service import PlanningService, ShiftDefaults
from .roster.mysql_roster_repository import MySQLRosterProvider
from .roster.repository import RosterProvider
from .shifts.mysql_event_store import MySQLEventStore
from .shifts.repository import EventStore


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    events_repo: EventStore
    roster_repo: RosterProvider

    shift_defaults: ShiftDefaults

    def planning_service(self, *, current_user_color: Optional[str] = None) -> PlanningService:
        """A fresh service per caller; its in-memory collection is not shared."""
        defaults = self.shift_defaults
        if current_user_color:
            defaults = ShiftDefaults(fallback_color=defaults.fallback_color, current_user_color=current_user_color)
        return PlanningService(self.events_repo, self.roster_repo, defaults=defaults)


def build_container(*, db_config: dict, fallback_color: str = DEFAULT_SHIFT_COLOR) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
        connection_timeout=int(db_config.get("connection_timeout", 10)),
    )
    conn = DatabaseConnection(config)

    return Container(
        conn=conn,
        events_repo=MySQLEventStore(conn),
        roster_repo=MySQLRosterProvider(conn),
        shift_defaults=ShiftDefaults(fallback_color=fallback_color),
    )
