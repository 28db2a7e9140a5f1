from __future__ import annotations

from datetime import datetime

from ..core.constants import TIME_FORMAT
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_hhmm(value: str, field_name: str) -> str:
    """Validate a 24-hour HH:MM wall-clock time and return it zero-padded."""
    v = (value or "").strip()
    try:
        return datetime.strptime(v, TIME_FORMAT).strftime(TIME_FORMAT)
    except ValueError:
        raise ValidationError(f"{field_name} must be a HH:MM time")
