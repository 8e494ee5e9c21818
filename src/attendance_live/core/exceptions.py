from __future__ import annotations

from datetime import date
from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ConfigurationError(ValidationError):
    """Raised when a selection input (mode, date, group) is not recognized."""


class SubscriptionError(DomainError):
    """Raised or reported when a remote store subscription fails."""


class MirrorSubscriptionError(SubscriptionError):
    """The roster subscription failed; the whole view is unusable until retried."""


class RecordSubscriptionError(SubscriptionError):
    """A single daily record subscription failed."""

    def __init__(self, student_id: str, day: date, reason: Optional[str] = None):
        message = f"Attendance record for {student_id} on {day.isoformat()} unavailable"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.student_id = student_id
        self.day = day
        self.reason = reason
