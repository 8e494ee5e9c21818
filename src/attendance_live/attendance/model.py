from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from ..common.datetime_utils import coerce_timestamp
from ..core.constants import STATUS_FIELD, TIME_IN_FIELD, TIME_OUT_FIELD, WIRE_ABSENT, WIRE_LATE, WIRE_ON_TIME
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..store.model import DocumentSnapshot

_logger = logging.getLogger(__name__)

_WIRE_STATUSES = {
    WIRE_ON_TIME.lower(): AttendanceStatus.ON_TIME,
    "ontime": AttendanceStatus.ON_TIME,
    WIRE_LATE.lower(): AttendanceStatus.LATE,
    WIRE_ABSENT.lower(): AttendanceStatus.ABSENT,
    "absent implied": AttendanceStatus.ABSENT,
}


@dataclass(frozen=True)
class DailyRecord:
    """Domain entity: one student's attendance on one day."""

    student_id: str
    work_date: date
    status: AttendanceStatus
    time_in: Optional[datetime] = None
    time_out: Optional[datetime] = None
    note: Optional[str] = None
    failed: bool = False

    @property
    def is_absent(self) -> bool:
        return self.status == AttendanceStatus.ABSENT

    @property
    def is_unknown(self) -> bool:
        """True only for placeholders of failed subscriptions."""
        return self.failed

    @classmethod
    def unknown(cls, student_id: str, work_date: date, note: Optional[str] = None) -> "DailyRecord":
        """Placeholder for a record whose subscription failed."""
        return cls(student_id=student_id, work_date=work_date, status=AttendanceStatus.UNKNOWN, note=note, failed=True)

    @classmethod
    def from_snapshot(cls, student_id: str, work_date: date, snapshot: DocumentSnapshot) -> Optional["DailyRecord"]:
        """Decode a stored record; a missing document yields None (absent)."""
        if not snapshot.exists:
            return None
        try:
            time_in = coerce_timestamp(snapshot.get(TIME_IN_FIELD))
            time_out = coerce_timestamp(snapshot.get(TIME_OUT_FIELD))
        except ValueError as e:
            raise ValidationError(f"Malformed timestamp in record {student_id}/{work_date.isoformat()}: {e}") from e

        return cls(
            student_id=student_id,
            work_date=work_date,
            status=parse_wire_status(snapshot.get(STATUS_FIELD)),
            time_in=time_in,
            time_out=time_out,
        )


def parse_wire_status(value: Any) -> AttendanceStatus:
    """Map a stored status label ("On Time", "Late", "absent", ...) to the enum."""
    if isinstance(value, AttendanceStatus):
        return value
    if isinstance(value, str):
        key = " ".join(value.strip().lower().replace("_", " ").replace("-", " ").split())
        status = _WIRE_STATUSES.get(key)
        if status is not None:
            return status
    _logger.warning("Unrecognized attendance status %r", value)
    return AttendanceStatus.UNKNOWN
