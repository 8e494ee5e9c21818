from __future__ import annotations

from typing import Callable, Protocol, Sequence

from .model import DocumentSnapshot

CollectionCallback = Callable[[Sequence[DocumentSnapshot]], None]
DocumentCallback = Callable[[DocumentSnapshot], None]
ErrorCallback = Callable[[Exception], None]
Unsubscribe = Callable[[], None]


class RemoteStore(Protocol):
    """The two listening primitives the engine needs from a document store.

    Both deliver full snapshots (never deltas) in emission order per
    subscription. After the returned unsubscribe function is called no more
    callbacks are expected, though the engine tolerates late ones. An error
    callback ends the subscription.
    """

    def subscribe_collection(
        self,
        path: str,
        on_snapshot: CollectionCallback,
        on_error: ErrorCallback,
    ) -> Unsubscribe:
        raise NotImplementedError

    def subscribe_document(
        self,
        path: str,
        on_snapshot: DocumentCallback,
        on_error: ErrorCallback,
    ) -> Unsubscribe:
        raise NotImplementedError
