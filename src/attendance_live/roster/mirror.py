from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from ..core.constants import STUDENTS_COLLECTION
from ..core.exceptions import MirrorSubscriptionError
from ..store.base import RemoteStore, Unsubscribe
from ..store.model import DocumentSnapshot
from .model import Student

_logger = logging.getLogger(__name__)


class RosterMirror:
    """Local read-only copy of the remote roster collection.

    Holds at most one standing subscription. Every snapshot replaces the
    mirror wholesale. A subscription error is terminal: the mirror keeps its
    last contents, records the error and ignores the store until `subscribe`
    is called again.
    """

    def __init__(self, store: RemoteStore, *, collection: str = STUDENTS_COLLECTION):
        self._store = store
        self._collection = collection
        self._students: tuple[Student, ...] = ()
        self._error: Optional[str] = None
        self._loaded = False
        self._unsubscribe: Optional[Unsubscribe] = None
        self._token = 0

    @property
    def students(self) -> tuple[Student, ...]:
        return self._students

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def is_subscribed(self) -> bool:
        return self._unsubscribe is not None

    def subscribe(
        self,
        on_update: Callable[[tuple[Student, ...]], None],
        on_error: Callable[[MirrorSubscriptionError], None],
    ) -> Unsubscribe:
        self.unsubscribe()
        self._token += 1
        token = self._token
        self._error = None

        def handle_snapshot(docs: Sequence[DocumentSnapshot]) -> None:
            if token != self._token:
                return
            self._students = tuple(Student.from_snapshot(d) for d in docs if d.exists)
            self._loaded = True
            _logger.debug("Roster snapshot: %d students", len(self._students))
            on_update(self._students)

        def handle_error(exc: Exception) -> None:
            if token != self._token:
                return
            self.unsubscribe()
            err = exc if isinstance(exc, MirrorSubscriptionError) else MirrorSubscriptionError(str(exc))
            self._error = str(err)
            _logger.error("Roster subscription on %r failed: %s", self._collection, err)
            on_error(err)

        unsubscribe = self._store.subscribe_collection(self._collection, handle_snapshot, handle_error)
        if token == self._token:
            self._unsubscribe = unsubscribe
            _logger.info("Subscribed to roster collection %r", self._collection)
        else:
            # failed while subscribing
            unsubscribe()

        def cancel() -> None:
            if token == self._token:
                self.unsubscribe()

        return cancel

    def unsubscribe(self) -> None:
        self._token += 1
        current, self._unsubscribe = self._unsubscribe, None
        if current is not None:
            current()
