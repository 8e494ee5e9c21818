from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, Optional

from ...core.enums import Category, DisplayMode
from ..model import DailyRecord


class ViewStrategy(ABC):
    """Strategy Pattern: encapsulate how one display mode categorizes a record.

    A missing record and an explicit ABSENT record are the same thing here;
    `decide` only ever sees None for both. Failed subscriptions
    never reach `decide`.
    """

    mode: ClassVar[DisplayMode]
    categories: ClassVar[tuple[Category, ...]]

    def classify(self, record: Optional[DailyRecord]) -> Category:
        if record is not None and record.is_unknown:
            return Category.UNKNOWN
        if record is not None and record.is_absent:
            record = None
        return self.decide(record)

    @abstractmethod
    def decide(self, record: Optional[DailyRecord]) -> Category:
        raise NotImplementedError
