from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RosterEntry:
    """Thực thể miền (domain): nhân viên có thể được phân ca.

    Lưu ý: Chỉ đọc; danh sách do dịch vụ định danh bên ngoài quản lý.
    """

    employee_id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    color: Optional[str] = None

    @property
    def display_name(self) -> str:
        parts = [p.strip() for p in (self.first_name, self.last_name) if p and p.strip()]
        return " ".join(parts) or self.employee_id
