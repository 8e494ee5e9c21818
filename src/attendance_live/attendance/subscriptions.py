from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import is_non_attendance_day
from ..core.constants import DEFAULT_NON_ATTENDANCE_WEEKDAYS, STUDENTS_COLLECTION
from ..core.exceptions import RecordSubscriptionError, ValidationError
from ..roster.model import Student
from ..store.base import RemoteStore, Unsubscribe
from ..store.model import DocumentSnapshot, record_path
from .model import DailyRecord

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordKey:
    student_id: str
    day: date


class AttendanceSubscriptionManager:
    """Keeps exactly one live record subscription per active student and day.

    Every `reconcile` starts a new generation: all handles of the previous
    generation are cancelled, the record map is cleared and a fresh handle
    is opened for each desired key. Callbacks carry the generation they were
    opened in and are dropped once it is superseded, so a late delivery for
    an old day or an old group can never overwrite current state.

    `on_change` fires for deliveries that arrive outside `reconcile`; the
    caller is expected to recompute after `reconcile` returns.
    """

    def __init__(
        self,
        store: RemoteStore,
        *,
        on_change: Optional[Callable[[], None]] = None,
        collection: str = STUDENTS_COLLECTION,
        skip_non_attendance_days: bool = True,
        non_attendance_weekdays: Iterable[int] = DEFAULT_NON_ATTENDANCE_WEEKDAYS,
    ):
        self._store = store
        self._on_change = on_change
        self._collection = collection
        self._skip_non_attendance_days = bool(skip_non_attendance_days)
        self._non_attendance_weekdays = frozenset(non_attendance_weekdays)

        self._generation = 0
        self._day: Optional[date] = None
        self._desired: frozenset[RecordKey] = frozenset()
        self._handles: dict[RecordKey, Unsubscribe] = {}
        self._records: dict[str, Optional[DailyRecord]] = {}
        self._failures: dict[str, str] = {}
        self._pending: set[str] = set()

        self._reconciling = False
        self._queued: Optional[tuple[tuple[Student, ...], date]] = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def day(self) -> Optional[date]:
        return self._day

    @property
    def live_keys(self) -> frozenset[RecordKey]:
        return frozenset(self._handles)

    @property
    def live_count(self) -> int:
        return len(self._handles)

    @property
    def records(self) -> Mapping[str, Optional[DailyRecord]]:
        return MappingProxyType(self._records)

    @property
    def failures(self) -> dict[str, str]:
        return dict(self._failures)

    @property
    def settled(self) -> bool:
        """True once every live handle has delivered a snapshot or an error."""
        return not self._pending

    def reconcile(self, active: Sequence[Student], day: date) -> None:
        """Replace the live handle set with one handle per student in `active`.

        Single-flight: a call made while another reconcile is running (from a
        synchronous store callback) is queued and applied right after, with
        the latest arguments winning.
        """
        if self._reconciling:
            self._queued = (tuple(active), day)
            return

        self._reconciling = True
        try:
            request: Optional[tuple[tuple[Student, ...], date]] = (tuple(active), day)
            while request is not None:
                self._queued = None
                self._replace(*request)
                request = self._queued
        finally:
            self._reconciling = False

    def close(self) -> None:
        self._generation += 1
        self._cancel_all()
        self._desired = frozenset()
        self._records = {}
        self._failures = {}
        self._pending = set()
        self._day = None

    def _replace(self, active: tuple[Student, ...], day: date) -> None:
        self._generation += 1
        generation = self._generation
        cancelled = self._cancel_all()

        self._day = day
        self._records = {}
        self._failures = {}
        self._pending = set()

        if self._skip_non_attendance_days and is_non_attendance_day(day, self._non_attendance_weekdays):
            self._desired = frozenset()
            _logger.info(
                "Generation %d: %s is not an attendance day, no record subscriptions (cancelled %d)",
                generation, day.isoformat(), cancelled,
            )
            return

        keys = list(dict.fromkeys(RecordKey(s.student_id, day) for s in active))
        self._desired = frozenset(keys)
        self._pending = {k.student_id for k in keys}
        for key in keys:
            self._handles[key] = self._open(key, generation)

        _logger.info(
            "Generation %d: %d record subscriptions for %s (cancelled %d)",
            generation, len(self._handles), day.isoformat(), cancelled,
        )

    def _open(self, key: RecordKey, generation: int) -> Unsubscribe:
        def on_snapshot(snapshot: DocumentSnapshot) -> None:
            if not self._accepts(key, generation):
                return
            try:
                record = DailyRecord.from_snapshot(key.student_id, key.day, snapshot)
            except ValidationError as e:
                self._mark_unknown(key, RecordSubscriptionError(key.student_id, key.day, str(e)))
            else:
                self._records[key.student_id] = record
                self._failures.pop(key.student_id, None)
                self._pending.discard(key.student_id)
            self._changed()

        def on_error(exc: Exception) -> None:
            if not self._accepts(key, generation):
                return
            err = exc if isinstance(exc, RecordSubscriptionError) else RecordSubscriptionError(key.student_id, key.day, str(exc))
            self._mark_unknown(key, err)
            self._changed()

        path = record_path(key.student_id, key.day, collection=self._collection)
        try:
            return self._store.subscribe_document(path, on_snapshot, on_error)
        except Exception as e:
            self._mark_unknown(key, RecordSubscriptionError(key.student_id, key.day, str(e)))
            return _noop

    def _accepts(self, key: RecordKey, generation: int) -> bool:
        if generation != self._generation or key not in self._desired:
            _logger.debug("Discarding stale callback for %s (generation %d, current %d)", key, generation, self._generation)
            return False
        return True

    def _mark_unknown(self, key: RecordKey, err: RecordSubscriptionError) -> None:
        _logger.warning("%s", err)
        self._records[key.student_id] = DailyRecord.unknown(key.student_id, key.day, str(err))
        self._failures[key.student_id] = str(err)
        self._pending.discard(key.student_id)

    def _cancel_all(self) -> int:
        handles, self._handles = self._handles, {}
        for key, unsubscribe in handles.items():
            try:
                unsubscribe()
            except Exception:
                _logger.exception("Failed to cancel record subscription for %s", key)
        return len(handles)

    def _changed(self) -> None:
        if self._reconciling or self._on_change is None:
            return
        self._on_change()


def _noop() -> None:
    return None
