from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Normalized status of a daily attendance record."""

    ON_TIME = "ON_TIME"
    LATE = "LATE"
    ABSENT = "ABSENT"
    UNKNOWN = "UNKNOWN"


class DisplayMode(str, Enum):
    """Which side of the school day the view is categorizing."""

    TIME_IN = "time_in"
    TIME_OUT = "time_out"


class Category(str, Enum):
    """Bucket names produced by the derived view."""

    ON_TIME = "on_time"
    LATE = "late"
    ABSENT = "absent"
    PRESENT = "present"
    DEPARTED = "departed"
    UNKNOWN = "unknown"
