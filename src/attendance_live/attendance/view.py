from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import is_non_attendance_day
from ..core.constants import DEFAULT_NON_ATTENDANCE_WEEKDAYS
from ..core.enums import Category, DisplayMode
from ..roster.model import Student
from .factory import ViewStrategyFactory
from .model import DailyRecord


@dataclass(frozen=True)
class Bucket:
    category: Category
    members: tuple[Student, ...]

    @property
    def count(self) -> int:
        return len(self.members)

    def to_dict(self) -> dict:
        return {
            "category": self.category.value,
            "count": self.count,
            "members": [s.to_dict() for s in self.members],
        }


@dataclass(frozen=True)
class DerivedView:
    """Categorized snapshot of the active subset for one display mode.

    When `no_attendance` is set the selected day is not a school day and
    there are no buckets at all.
    """

    mode: DisplayMode
    buckets: tuple[Bucket, ...]
    no_attendance: bool = False

    @property
    def counts(self) -> dict[str, int]:
        return {b.category.value: b.count for b in self.buckets}

    def members(self, category: Category) -> tuple[Student, ...]:
        for b in self.buckets:
            if b.category == category:
                return b.members
        return ()

    def names(self, category: Category) -> list[str]:
        return [s.name for s in self.members(category)]

    def to_dict(self) -> dict:
        return {
            "mode": self.mode.value,
            "no_attendance": self.no_attendance,
            "buckets": [b.to_dict() for b in self.buckets],
            "counts": self.counts,
        }

    @classmethod
    def empty(cls, mode: DisplayMode, *, no_attendance: bool = False) -> "DerivedView":
        return cls(mode=mode, buckets=(), no_attendance=no_attendance)


def compute(
    active: Sequence[Student],
    records: Mapping[str, Optional[DailyRecord]],
    mode: DisplayMode | str,
    *,
    day: Optional[date] = None,
    non_attendance_weekdays: Iterable[int] = DEFAULT_NON_ATTENDANCE_WEEKDAYS,
    factory: Optional[ViewStrategyFactory] = None,
) -> DerivedView:
    """Place every active student in exactly one bucket.

    Students with no entry in `records` have not been heard from yet and are
    treated like students without a record. Bucket order follows the
    strategy, member order follows `active`.
    """
    strategy = (factory or ViewStrategyFactory()).for_mode(mode)
    if day is not None and is_non_attendance_day(day, non_attendance_weekdays):
        return DerivedView.empty(strategy.mode, no_attendance=True)

    grouped: dict[Category, list[Student]] = {c: [] for c in strategy.categories}
    for student in active:
        grouped[strategy.classify(records.get(student.student_id))].append(student)

    return DerivedView(
        mode=strategy.mode,
        buckets=tuple(Bucket(category=c, members=tuple(grouped[c])) for c in strategy.categories),
    )
