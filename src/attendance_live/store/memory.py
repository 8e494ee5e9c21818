from __future__ import annotations

import json
import logging
from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Deque, Mapping, Optional, Union

from ..common.datetime_utils import parse_iso_date
from ..core.constants import STUDENTS_COLLECTION
from .base import CollectionCallback, DocumentCallback, ErrorCallback, Unsubscribe
from .model import DocumentSnapshot, record_path, split_path, student_path

_logger = logging.getLogger(__name__)


@dataclass
class _Listener:
    listener_id: int
    path: str
    kind: str
    on_snapshot: Callable[[Any], None]
    on_error: ErrorCallback
    active: bool = True


class InMemoryRemoteStore:
    """In-process document store with live listeners.

    Deliveries are synchronous by default. With `deferred=True` they are queued
    until `flush()` so callers can observe callbacks arriving after other work.
    A cancelled listener never receives a queued delivery.
    """

    def __init__(self, *, deferred: bool = False):
        self._documents: dict[str, dict[str, Any]] = {}
        self._listeners: dict[int, _Listener] = {}
        self._queue: Deque[Callable[[], None]] = deque()
        self._next_id = 0
        self._deferred = deferred

    # region Subscriptions
    def subscribe_collection(
        self,
        path: str,
        on_snapshot: CollectionCallback,
        on_error: ErrorCallback,
    ) -> Unsubscribe:
        listener = self._add_listener(path, "collection", on_snapshot, on_error)
        self._schedule_snapshot(listener, self._collection_snapshot(path))
        return self._unsubscriber(listener)

    def subscribe_document(
        self,
        path: str,
        on_snapshot: DocumentCallback,
        on_error: ErrorCallback,
    ) -> Unsubscribe:
        listener = self._add_listener(path, "document", on_snapshot, on_error)
        self._schedule_snapshot(listener, self._document_snapshot(path))
        return self._unsubscriber(listener)

    def listener_count(self, path_prefix: Optional[str] = None) -> int:
        if path_prefix is None:
            return len(self._listeners)
        return sum(1 for lst in self._listeners.values() if lst.path.startswith(path_prefix))

    def listening_paths(self) -> list[str]:
        return [lst.path for lst in self._listeners.values()]

    # endregion

    # region Writes
    def set_document(self, path: str, data: Mapping[str, Any]) -> None:
        self._documents[path] = dict(data)
        self._notify(path)

    def delete_document(self, path: str) -> None:
        if self._documents.pop(path, None) is not None:
            self._notify(path)

    def fail(self, path: str, error: Exception) -> None:
        """Terminate every listener on `path` with `error`."""
        for listener in list(self._listeners.values()):
            if listener.path == path:
                self._schedule_error(listener, error)

    def flush(self) -> int:
        delivered = 0
        while self._queue:
            self._queue.popleft()()
            delivered += 1
        return delivered

    # endregion

    # region Seeding
    @classmethod
    def from_seed(cls, seed: Mapping[str, Any], *, deferred: bool = False) -> "InMemoryRemoteStore":
        """Build a store from `{"students": {id: {...}}, "attendance": {id: {date: {...}}}}`."""
        store = cls(deferred=deferred)
        for student_id, fields in (seed.get(STUDENTS_COLLECTION) or {}).items():
            store._documents[student_path(str(student_id))] = dict(fields)
        for student_id, by_day in (seed.get("attendance") or {}).items():
            for day_s, fields in by_day.items():
                path = record_path(str(student_id), parse_iso_date(day_s))
                store._documents[path] = dict(fields)
        return store

    @classmethod
    def from_seed_file(cls, path: Union[str, Path], *, deferred: bool = False) -> "InMemoryRemoteStore":
        seed_path = Path(path).expanduser()
        with seed_path.open(encoding="utf-8") as handle:
            seed = json.load(handle)
        store = cls.from_seed(seed, deferred=deferred)
        _logger.info("Seeded in-memory store from %s (%d documents)", seed_path, len(store._documents))
        return store

    # endregion

    def _add_listener(self, path: str, kind: str, on_snapshot, on_error: ErrorCallback) -> _Listener:
        self._next_id += 1
        listener = _Listener(self._next_id, path, kind, on_snapshot, on_error)
        self._listeners[listener.listener_id] = listener
        return listener

    def _unsubscriber(self, listener: _Listener) -> Unsubscribe:
        def unsubscribe() -> None:
            listener.active = False
            self._listeners.pop(listener.listener_id, None)

        return unsubscribe

    def _collection_snapshot(self, path: str) -> list[DocumentSnapshot]:
        docs = []
        for doc_path, fields in self._documents.items():
            parent, doc_id = split_path(doc_path)
            if parent == path:
                docs.append(DocumentSnapshot(doc_id=doc_id, exists=True, data=dict(fields)))
        return docs

    def _document_snapshot(self, path: str) -> DocumentSnapshot:
        _, doc_id = split_path(path)
        fields = self._documents.get(path)
        if fields is None:
            return DocumentSnapshot(doc_id=doc_id, exists=False)
        return DocumentSnapshot(doc_id=doc_id, exists=True, data=dict(fields))

    def _notify(self, path: str) -> None:
        parent, _ = split_path(path)
        for listener in list(self._listeners.values()):
            if listener.kind == "document" and listener.path == path:
                self._schedule_snapshot(listener, self._document_snapshot(path))
            elif listener.kind == "collection" and listener.path == parent:
                self._schedule_snapshot(listener, self._collection_snapshot(parent))

    def _schedule_snapshot(self, listener: _Listener, payload: Any) -> None:
        def deliver() -> None:
            if listener.active:
                listener.on_snapshot(payload)

        self._dispatch(deliver)

    def _schedule_error(self, listener: _Listener, error: Exception) -> None:
        def deliver() -> None:
            if listener.active:
                listener.active = False
                self._listeners.pop(listener.listener_id, None)
                listener.on_error(error)

        self._dispatch(deliver)

    def _dispatch(self, deliver: Callable[[], None]) -> None:
        if self._deferred:
            self._queue.append(deliver)
        else:
            deliver()
