from __future__ import annotations

from enum import Enum


class EventKind(str, Enum):
    """Loại sự kiện lưu chung trong event store (cột `type`)."""

    GENERAL = "general"
    PLANNING = "planning"


class ServiceState(str, Enum):
    """Trạng thái của PlanningService quanh mỗi lần gọi event store."""

    IDLE = "IDLE"
    LOADING = "LOADING"
