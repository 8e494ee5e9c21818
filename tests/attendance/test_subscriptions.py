from __future__ import annotations

from datetime import date

from attendance_live.attendance.subscriptions import AttendanceSubscriptionManager, RecordKey
from attendance_live.core.enums import AttendanceStatus
from attendance_live.roster.model import Student
from attendance_live.store.memory import InMemoryRemoteStore
from attendance_live.store.model import DocumentSnapshot, record_path

D1 = date(2026, 2, 2)
D2 = date(2026, 2, 3)
SATURDAY = date(2026, 2, 7)

A = Student(student_id="1", name="A", group="G")
B = Student(student_id="2", name="B", group="G")
C = Student(student_id="3", name="C", group="H")


class SlowStore:
    """Keeps every callback and ignores cancellation, like a lagging transport."""

    def __init__(self):
        self.opened: list[tuple[str, object, object]] = []
        self.cancelled: list[str] = []

    def subscribe_document(self, path, on_snapshot, on_error):
        self.opened.append((path, on_snapshot, on_error))

        def unsubscribe():
            self.cancelled.append(path)

        return unsubscribe

    def deliver(self, index: int, data=None):
        path, on_snapshot, _ = self.opened[index]
        doc_id = path.rsplit("/", 1)[1]
        on_snapshot(DocumentSnapshot(doc_id=doc_id, exists=data is not None, data=data or {}))

    def fail(self, index: int, error: Exception):
        _, _, on_error = self.opened[index]
        on_error(error)


class ReentrantStore(SlowStore):
    """Triggers a nested reconcile from inside the first subscribe call."""

    def __init__(self):
        super().__init__()
        self.manager = None
        self.nested = None

    def subscribe_document(self, path, on_snapshot, on_error):
        unsubscribe = super().subscribe_document(path, on_snapshot, on_error)
        if self.nested is not None:
            args, self.nested = self.nested, None
            self.manager.reconcile(*args)
        return unsubscribe


def test_live_handles_match_active_subset_after_changes():
    store = InMemoryRemoteStore()
    mgr = AttendanceSubscriptionManager(store)

    mgr.reconcile([A, B], D1)
    assert mgr.live_keys == {RecordKey("1", D1), RecordKey("2", D1)}
    assert store.listener_count() == 2

    mgr.reconcile([C], D1)
    assert mgr.live_keys == {RecordKey("3", D1)}
    assert store.listener_count() == 1

    mgr.reconcile([A, B, C], D2)
    assert mgr.live_count == 3
    assert sorted(store.listening_paths()) == sorted(record_path(s.student_id, D2) for s in (A, B, C))


def test_empty_subset_leaves_no_subscriptions():
    store = InMemoryRemoteStore()
    mgr = AttendanceSubscriptionManager(store)

    mgr.reconcile([A, B], D1)
    mgr.reconcile([], D1)

    assert mgr.live_count == 0
    assert store.listener_count() == 0
    assert dict(mgr.records) == {}


def test_duplicate_students_get_one_handle():
    store = InMemoryRemoteStore()
    mgr = AttendanceSubscriptionManager(store)

    mgr.reconcile([A, A, B], D1)

    assert mgr.live_count == 2
    assert store.listener_count() == 2


def test_snapshots_update_records_and_notify():
    store = InMemoryRemoteStore()
    changes = []
    mgr = AttendanceSubscriptionManager(store, on_change=lambda: changes.append(mgr.generation))

    mgr.reconcile([A, B], D1)
    assert changes == []
    assert mgr.records["1"] is None
    assert mgr.settled

    store.set_document(record_path("1", D1), {"status": "On Time"})

    assert mgr.records["1"].status == AttendanceStatus.ON_TIME
    assert changes == [1]

    store.delete_document(record_path("1", D1))
    assert mgr.records["1"] is None


def test_late_callbacks_from_previous_date_are_discarded():
    store = SlowStore()
    changes = []
    mgr = AttendanceSubscriptionManager(store, on_change=lambda: changes.append(1))

    mgr.reconcile([A, B], D1)
    mgr.reconcile([A, B], D2)

    assert store.cancelled == [record_path("1", D1), record_path("2", D1)]
    assert mgr.live_keys == {RecordKey("1", D2), RecordKey("2", D2)}

    # D1 deliveries show up only now
    store.deliver(0, {"status": "Late"})
    store.fail(1, RuntimeError("gone"))
    assert dict(mgr.records) == {}
    assert mgr.failures == {}
    assert changes == []
    assert not mgr.settled

    store.deliver(2, {"status": "On Time"})
    store.deliver(3)
    assert mgr.records["1"].status == AttendanceStatus.ON_TIME
    assert mgr.records["1"].work_date == D2
    assert mgr.records["2"] is None
    assert mgr.settled
    assert len(changes) == 2


def test_reopened_key_ignores_callbacks_from_older_generation():
    store = SlowStore()
    mgr = AttendanceSubscriptionManager(store)

    mgr.reconcile([A], D1)
    mgr.reconcile([C], D1)
    mgr.reconcile([A], D1)

    store.deliver(2, {"status": "On Time"})
    store.deliver(0, {"status": "Late"})

    assert mgr.records["1"].status == AttendanceStatus.ON_TIME


def test_record_error_marks_only_that_student_unknown():
    store = InMemoryRemoteStore()
    mgr = AttendanceSubscriptionManager(store)
    store.set_document(record_path("2", D1), {"status": "Late"})

    mgr.reconcile([A, B], D1)
    store.fail(record_path("1", D1), RuntimeError("permission denied"))

    assert mgr.records["1"].status == AttendanceStatus.UNKNOWN
    assert mgr.records["2"].status == AttendanceStatus.LATE
    assert list(mgr.failures) == ["1"]
    assert "permission denied" in mgr.failures["1"]
    assert mgr.live_count == 2


def test_malformed_record_is_unknown_not_fatal():
    store = InMemoryRemoteStore()
    store.set_document(record_path("1", D1), {"status": "On Time", "timeInTime": "not-a-time"})
    mgr = AttendanceSubscriptionManager(store)

    mgr.reconcile([A, B], D1)

    assert mgr.records["1"].status == AttendanceStatus.UNKNOWN
    assert mgr.records["2"] is None


def test_weekend_skips_subscriptions():
    store = InMemoryRemoteStore()
    mgr = AttendanceSubscriptionManager(store)

    mgr.reconcile([A, B], D1)
    mgr.reconcile([A, B], SATURDAY)

    assert mgr.live_count == 0
    assert store.listener_count() == 0
    assert mgr.day == SATURDAY


def test_weekend_subscriptions_when_skip_disabled():
    store = InMemoryRemoteStore()
    mgr = AttendanceSubscriptionManager(store, skip_non_attendance_days=False)

    mgr.reconcile([A, B], SATURDAY)

    assert mgr.live_count == 2


def test_nested_reconcile_is_queued_and_latest_wins():
    store = ReentrantStore()
    mgr = AttendanceSubscriptionManager(store)
    store.manager = mgr
    store.nested = ([C], D2)

    mgr.reconcile([A, B], D1)

    assert mgr.live_keys == {RecordKey("3", D2)}
    assert store.cancelled == [record_path("1", D1), record_path("2", D1)]
    assert mgr.generation == 2


def test_failing_unsubscribe_does_not_leak_other_handles():
    cancelled = []

    class BrittleStore:
        def subscribe_document(self, path, on_snapshot, on_error):
            def unsubscribe():
                cancelled.append(path)
                if path.startswith("students/1/"):
                    raise RuntimeError("transport closed")

            return unsubscribe

    mgr = AttendanceSubscriptionManager(BrittleStore())
    mgr.reconcile([A, B], D1)
    mgr.reconcile([], D1)

    assert cancelled == [record_path("1", D1), record_path("2", D1)]
    assert mgr.live_count == 0


def test_close_cancels_everything():
    store = InMemoryRemoteStore()
    mgr = AttendanceSubscriptionManager(store)
    mgr.reconcile([A, B], D1)

    mgr.close()

    assert store.listener_count() == 0
    assert mgr.day is None
