"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DAYS_PER_WEEK = 7

TIME_FORMAT = "%H:%M"
TIME_RANGE_SEPARATOR = " - "
DEFAULT_START_TIME = "09:00"
DEFAULT_END_TIME = "17:00"

DEFAULT_SHIFT_COLOR = "#3b82f6"

ALL_EMPLOYEES = "all"
