from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Mapping, Optional

from ..core.constants import ATTENDANCE_SUBCOLLECTION, STUDENTS_COLLECTION


@dataclass(frozen=True)
class DocumentSnapshot:
    """Point-in-time view of one stored document.

    `exists` is False when the document was never written or has been deleted;
    `data` is then empty.
    """

    doc_id: str
    exists: bool
    data: Mapping[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)


def join_path(*parts: str) -> str:
    return "/".join(str(p).strip("/") for p in parts)


def split_path(path: str) -> tuple[str, str]:
    """Split `a/b/c` into its parent collection `a/b` and document id `c`."""
    parent, _, doc_id = path.rpartition("/")
    return parent, doc_id


def student_path(student_id: str) -> str:
    return join_path(STUDENTS_COLLECTION, student_id)


def record_path(student_id: str, day: date, *, collection: Optional[str] = None) -> str:
    return join_path(collection or STUDENTS_COLLECTION, student_id, ATTENDANCE_SUBCOLLECTION, day.isoformat())
