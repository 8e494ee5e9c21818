from __future__ import annotations

from typing import Optional

from ...core.enums import Category, DisplayMode
from ..model import DailyRecord
from .base import ViewStrategy


class TimeOutStrategy(ViewStrategy):
    """Departure view: anyone without a time-out stamp is still present."""

    mode = DisplayMode.TIME_OUT
    categories = (Category.PRESENT, Category.DEPARTED, Category.UNKNOWN)

    def decide(self, record: Optional[DailyRecord]) -> Category:
        if record is not None and record.time_out is not None:
            return Category.DEPARTED
        return Category.PRESENT
