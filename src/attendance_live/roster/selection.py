from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Sequence

from ..core.enums import DisplayMode
from .model import Student


@dataclass(frozen=True)
class SelectionState:
    """What the viewer asked for: one group, one day, one display mode."""

    group: str
    day: date
    mode: DisplayMode = DisplayMode.TIME_IN

    def with_changes(self, **changes) -> "SelectionState":
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {"group": self.group, "date": self.day.isoformat(), "mode": self.mode.value}


def filter_by_group(students: Sequence[Student], group: str) -> tuple[Student, ...]:
    """Active subset: members of `group`, in mirror order."""
    return tuple(s for s in students if s.group == group)


def available_groups(students: Sequence[Student]) -> list[str]:
    """Distinct non-empty group labels, in order of first appearance."""
    seen: dict[str, None] = {}
    for s in students:
        if s.group:
            seen.setdefault(s.group, None)
    return list(seen)
