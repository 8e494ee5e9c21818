from __future__ import annotations

from attendance_live.core.exceptions import MirrorSubscriptionError
from attendance_live.roster.mirror import RosterMirror
from attendance_live.store.memory import InMemoryRemoteStore


def _store() -> InMemoryRemoteStore:
    store = InMemoryRemoteStore()
    store.set_document("students/1", {"name": "A", "section": "G"})
    store.set_document("students/2", {"name": "B", "section": "G"})
    return store


def test_mirror_replaces_contents_on_every_snapshot():
    store = _store()
    updates = []
    mirror = RosterMirror(store)

    mirror.subscribe(updates.append, lambda err: None)
    store.set_document("students/3", {"name": "C", "section": "H"})
    store.delete_document("students/1")

    assert [s.name for s in mirror.students] == ["B", "C"]
    assert [len(u) for u in updates] == [2, 3, 2]
    assert mirror.loaded


def test_mirror_holds_a_single_subscription():
    store = _store()
    mirror = RosterMirror(store)

    mirror.subscribe(lambda s: None, lambda err: None)
    mirror.subscribe(lambda s: None, lambda err: None)

    assert store.listener_count() == 1


def test_mirror_error_is_terminal_until_resubscribed():
    store = _store()
    errors = []
    updates = []
    mirror = RosterMirror(store)
    mirror.subscribe(updates.append, errors.append)

    store.fail("students", RuntimeError("permission denied"))
    store.set_document("students/3", {"name": "C", "section": "G"})

    assert len(errors) == 1
    assert isinstance(errors[0], MirrorSubscriptionError)
    assert mirror.error == "permission denied"
    assert len(mirror.students) == 2
    assert len(updates) == 1
    assert not mirror.is_subscribed

    mirror.subscribe(updates.append, errors.append)

    assert mirror.error is None
    assert len(mirror.students) == 3


def test_stale_cancel_handle_does_not_cancel_new_subscription():
    store = _store()
    mirror = RosterMirror(store)

    old_cancel = mirror.subscribe(lambda s: None, lambda err: None)
    mirror.subscribe(lambda s: None, lambda err: None)
    old_cancel()

    assert mirror.is_subscribed
    assert store.listener_count() == 1


def test_unsubscribe_stops_updates():
    store = _store()
    updates = []
    mirror = RosterMirror(store)
    cancel = mirror.subscribe(updates.append, lambda err: None)

    cancel()
    store.set_document("students/3", {"name": "C", "section": "G"})

    assert len(updates) == 1
    assert store.listener_count() == 0
