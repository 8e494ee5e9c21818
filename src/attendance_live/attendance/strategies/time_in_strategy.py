from __future__ import annotations

from typing import Optional

from ...core.enums import AttendanceStatus, Category, DisplayMode
from ..model import DailyRecord
from .base import ViewStrategy


class TimeInStrategy(ViewStrategy):
    """Arrival view: on time, late or absent."""

    mode = DisplayMode.TIME_IN
    categories = (Category.ON_TIME, Category.LATE, Category.ABSENT, Category.UNKNOWN)

    def decide(self, record: Optional[DailyRecord]) -> Category:
        if record is None:
            return Category.ABSENT
        if record.status == AttendanceStatus.ON_TIME:
            return Category.ON_TIME
        if record.status == AttendanceStatus.LATE:
            return Category.LATE
        return Category.ABSENT
