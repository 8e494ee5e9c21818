from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable, Optional

from .attendance.factory import ViewStrategyFactory
from .attendance.subscriptions import AttendanceSubscriptionManager
from .attendance.view import Bucket, DerivedView, compute
from .common.validators import parse_day, parse_group, parse_mode
from .core.constants import DEFAULT_NON_ATTENDANCE_WEEKDAYS, STUDENTS_COLLECTION
from .core.enums import DisplayMode
from .core.exceptions import MirrorSubscriptionError
from .roster.mirror import RosterMirror
from .roster.model import Student
from .roster.selection import SelectionState, available_groups, filter_by_group
from .store.base import RemoteStore

_logger = logging.getLogger(__name__)

StateListener = Callable[["ViewState"], None]


@dataclass(frozen=True)
class ViewState:
    """Everything the presentation layer needs to draw the current view."""

    selection: SelectionState
    view: DerivedView
    loading: bool
    error: Optional[str] = None
    failed_ids: tuple[str, ...] = ()
    groups: tuple[str, ...] = ()

    @property
    def buckets(self) -> tuple[Bucket, ...]:
        return self.view.buckets

    @property
    def counts(self) -> dict[str, int]:
        return self.view.counts

    @property
    def no_attendance(self) -> bool:
        return self.view.no_attendance

    def to_dict(self) -> dict:
        return {
            "loading": self.loading,
            "error": self.error,
            "selection": self.selection.to_dict(),
            "no_attendance": self.no_attendance,
            "buckets": [b.to_dict() for b in self.buckets],
            "counts": self.counts,
            "failed_ids": list(self.failed_ids),
            "groups": list(self.groups),
        }


class LiveAttendanceEngine:
    """Roster mirror -> group filter -> record subscriptions -> derived view.

    Single-threaded and callback driven: every store delivery and every
    selection change ends in one recomputation of `state`, after which
    registered listeners are notified.
    """

    def __init__(
        self,
        store: RemoteStore,
        selection: SelectionState,
        *,
        collection: str = STUDENTS_COLLECTION,
        skip_non_attendance_days: bool = True,
        non_attendance_weekdays: Iterable[int] = DEFAULT_NON_ATTENDANCE_WEEKDAYS,
        strategy_factory: ViewStrategyFactory | None = None,
    ):
        self._factory = strategy_factory or ViewStrategyFactory()
        self._selection = selection.with_changes(mode=parse_mode(selection.mode))
        self._non_attendance_weekdays = frozenset(non_attendance_weekdays)

        self._mirror = RosterMirror(store, collection=collection)
        self._manager = AttendanceSubscriptionManager(
            store,
            on_change=self._recompute,
            collection=collection,
            skip_non_attendance_days=skip_non_attendance_days,
            non_attendance_weekdays=self._non_attendance_weekdays,
        )

        self._active: tuple[Student, ...] = ()
        self._reconciled: Optional[tuple[tuple[str, ...], date]] = None
        self._error: Optional[str] = None
        self._started = False
        self._listeners: list[StateListener] = []
        self._state = self._build_state()

    @property
    def selection(self) -> SelectionState:
        return self._selection

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def active(self) -> tuple[Student, ...]:
        return self._active

    def add_listener(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def start(self) -> ViewState:
        self._error = None
        self._reconciled = None
        self._started = True
        self._mirror.subscribe(self._on_roster, self._on_roster_error)
        self._recompute()
        return self._state

    def retry(self) -> ViewState:
        """Re-subscribe after a failure; record subscriptions are reopened too."""
        _logger.info("Retrying roster subscription")
        return self.start()

    def stop(self) -> None:
        self._mirror.unsubscribe()
        self._manager.close()
        self._reconciled = None
        self._active = ()
        self._started = False
        self._recompute()

    def select(
        self,
        *,
        group: Optional[str] = None,
        day: date | str | None = None,
        mode: DisplayMode | str | None = None,
    ) -> ViewState:
        changes = {}
        if group is not None:
            changes["group"] = parse_group(group)
        if day is not None:
            changes["day"] = parse_day(day)
        if mode is not None:
            changes["mode"] = parse_mode(mode)
        if changes:
            self._selection = self._selection.with_changes(**changes)
            _logger.debug("Selection changed: %s", self._selection)
        self._sync(from_selection=True)
        return self._state

    def _on_roster(self, students: tuple[Student, ...]) -> None:
        self._sync()

    def _on_roster_error(self, err: MirrorSubscriptionError) -> None:
        self._error = str(err)
        self._recompute()

    def _sync(self, *, from_selection: bool = False) -> None:
        self._active = filter_by_group(self._mirror.students, self._selection.group)
        # after a roster failure only selection changes reconcile, against the last-known roster
        if self._started and self._mirror.loaded and (self._error is None or from_selection):
            target = (tuple(s.student_id for s in self._active), self._selection.day)
            if target != self._reconciled:
                self._reconciled = target
                self._manager.reconcile(self._active, self._selection.day)
        self._recompute()

    def _recompute(self) -> None:
        self._state = self._build_state()
        for listener in list(self._listeners):
            listener(self._state)

    def _build_state(self) -> ViewState:
        selection = self._selection
        view = compute(
            self._active,
            self._manager.records,
            selection.mode,
            day=selection.day,
            non_attendance_weekdays=self._non_attendance_weekdays,
            factory=self._factory,
        )
        failures = self._manager.failures
        loading = self._started and self._error is None and not (self._mirror.loaded and self._manager.settled)
        return ViewState(
            selection=selection,
            view=view,
            loading=loading,
            error=self._error,
            failed_ids=tuple(s.student_id for s in self._active if s.student_id in failures),
            groups=tuple(available_groups(self._mirror.students)),
        )
