from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import GROUP_FIELD, NAME_FIELD
from ..store.model import DocumentSnapshot


@dataclass(frozen=True)
class Student:
    """Domain entity: one roster member as mirrored from the remote store."""

    student_id: str
    name: str
    group: str

    @classmethod
    def from_snapshot(cls, snapshot: DocumentSnapshot) -> "Student":
        return cls(
            student_id=snapshot.doc_id,
            name=str(snapshot.get(NAME_FIELD) or ""),
            group=str(snapshot.get(GROUP_FIELD) or ""),
        )

    def to_dict(self) -> dict:
        return {"id": self.student_id, "name": self.name, "group": self.group}
