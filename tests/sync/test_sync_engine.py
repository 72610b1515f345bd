from __future__ import annotations

import asyncio
from datetime import date, datetime

import pytest

from src.strata_checkin.strata_checkin.attendance.model import AttendanceRecord, BatchResponse
from src.strata_checkin.strata_checkin.attendance.reconciler import AttendanceReconciler
from src.strata_checkin.strata_checkin.attendance.view import AttendanceViewBuilder
from src.strata_checkin.strata_checkin.core.enums import AttendeeStatus, FlushOutcome, SyncState
from src.strata_checkin.strata_checkin.core.exceptions import GatewayError, QueuePersistenceError
from src.strata_checkin.strata_checkin.meetings.model import MeetingContext
from src.strata_checkin.strata_checkin.meetings.session import MeetingSession
from src.strata_checkin.strata_checkin.quorum.service import QuorumCalculator
from src.strata_checkin.strata_checkin.submissions.model import Submission
from src.strata_checkin.strata_checkin.submissions.queue import SubmissionQueue
from src.strata_checkin.strata_checkin.sync.engine import SyncEngine


class InMemoryQueueStore:
    def __init__(self):
        self.items = []

    def load(self):
        return list(self.items)

    def save(self, submissions):
        self.items = list(submissions)


class FlakyQueueStore(InMemoryQueueStore):
    """Fails the next ``failures`` saves, leaving the stored items untouched."""

    def __init__(self):
        super().__init__()
        self.failures = 0

    def save(self, submissions):
        if self.failures > 0:
            self.failures -= 1
            raise QueuePersistenceError("disk full")
        super().save(submissions)


class FakeGateway:
    """Remote store double that upserts by (plan, lot, meeting) like the real receiver."""

    def __init__(self):
        self.records: list[AttendanceRecord] = []
        self.batches: list[list[Submission]] = []
        self.raise_on_submit: Exception | None = None
        self.reject_with: str | None = None
        self.fetch_error: Exception | None = None
        self.during_submit = None
        self.block: asyncio.Event | None = None
        self._next_id = 1

    async def fetch_meeting_attendance(self, plan_id, meeting_id):
        if self.fetch_error:
            raise self.fetch_error
        return [r for r in self.records if r.plan_id == plan_id and r.meeting_id == meeting_id]

    async def submit_attendance_batch(self, meeting_id, submissions):
        self.batches.append(list(submissions))
        if self.during_submit:
            self.during_submit()
        if self.block is not None:
            await self.block.wait()
        if self.raise_on_submit:
            raise self.raise_on_submit
        if self.reject_with:
            return BatchResponse(success=False, error=self.reject_with)
        for s in submissions:
            self.records = [
                r for r in self.records if (r.plan_id, r.lot_id, r.meeting_id) != (s.plan_id, s.lot_id, meeting_id)
            ]
            self.records.append(
                AttendanceRecord(
                    server_id=self._next_id,
                    plan_id=s.plan_id,
                    meeting_id=meeting_id,
                    lot_id=s.lot_id,
                    owner_name=s.owner_name,
                    rep_name=s.rep_name,
                    is_financial=s.is_financial,
                    is_proxy=s.is_proxy,
                )
            )
            self._next_id += 1
        return BatchResponse(success=True, applied=len(submissions))


class RecordingNotifier:
    def __init__(self):
        self.notices = []

    def notify(self, message, *, level="info"):
        self.notices.append((level, message))


CONTEXT = MeetingContext(plan_id="SP1", meeting_id="M1", meeting_date=date(2026, 3, 1), meeting_type="AGM", quorum_total=10)


def _setup(gateway, store=None):
    queue = SubmissionQueue(store or InMemoryQueueStore(), clock=lambda: datetime(2026, 3, 1, 18, 0))
    reconciler = AttendanceReconciler(gateway)
    views = AttendanceViewBuilder(queue, reconciler, QuorumCalculator())
    notifier = RecordingNotifier()
    published = []
    engine = SyncEngine(queue, gateway, reconciler, views, notifier=notifier, on_view=published.append)
    return engine, queue, notifier, published


def _sub(lot, meeting_id="M1"):
    return Submission(plan_id="SP1", meeting_id=meeting_id, lot_id=lot, owner_name=f"Owner {lot}")


def test_successful_flush_empties_queue_and_confirms_attendees():
    gateway = FakeGateway()
    engine, queue, notifier, published = _setup(gateway)
    session = MeetingSession(context=CONTEXT)
    for lot in ("1", "2", "3"):
        queue.enqueue(_sub(lot))

    before = engine.view(session)
    assert before.quorum.percentage == 30
    assert before.quorum.threshold_met is True

    result = asyncio.run(engine.flush(session))

    assert result.outcome == FlushOutcome.SUCCEEDED
    assert result.batch_size == 3
    assert queue.size() == 0
    assert [r.lot_id for r in session.confirmed] == ["1", "2", "3"]
    view = published[-1]
    assert [a.status for a in view.attendees] == [AttendeeStatus.CONFIRMED] * 3
    assert view.sync.label == "Synced"
    assert view.person_count == 3
    assert notifier.notices[-1][0] == "success"


def test_rejected_batch_is_requeued_in_original_order():
    gateway = FakeGateway()
    gateway.reject_with = "database unavailable"
    engine, queue, notifier, published = _setup(gateway)
    session = MeetingSession(context=CONTEXT)
    queued = [queue.enqueue(_sub("8")), queue.enqueue(_sub("2"))]

    result = asyncio.run(engine.flush(session))

    assert result.outcome == FlushOutcome.FAILED
    assert result.error == "database unavailable"
    assert queue.peek_all() == queued
    assert engine.state == SyncState.IDLE
    assert all(a.status == AttendeeStatus.PENDING for a in published[-1].attendees)
    assert published[-1].sync.label == "Sync 2 Items"
    assert notifier.notices[-1][0] == "error"


@pytest.mark.parametrize("error", [GatewayError("connection refused"), RuntimeError("boom")])
def test_exception_during_submit_is_requeued(error):
    gateway = FakeGateway()
    gateway.raise_on_submit = error
    engine, queue, _, _ = _setup(gateway)
    session = MeetingSession(context=CONTEXT)
    queued = [queue.enqueue(_sub("1")), queue.enqueue(_sub("2"))]

    result = asyncio.run(engine.flush(session))

    assert result.outcome == FlushOutcome.FAILED
    assert queue.peek_all() == queued


def test_empty_scope_makes_no_network_call():
    gateway = FakeGateway()
    engine, queue, _, published = _setup(gateway)
    queue.enqueue(_sub("1", meeting_id="OTHER"))

    result = asyncio.run(engine.flush(MeetingSession(context=CONTEXT)))

    assert result.outcome == FlushOutcome.EMPTY
    assert gateway.batches == []
    assert published == []
    assert queue.size() == 1


def test_items_enqueued_during_io_are_not_in_the_batch():
    gateway = FakeGateway()
    engine, queue, _, _ = _setup(gateway)
    session = MeetingSession(context=CONTEXT)
    queue.enqueue(_sub("1"))
    gateway.during_submit = lambda: queue.enqueue(_sub("2"))

    asyncio.run(engine.flush(session))

    assert [s.lot_id for s in gateway.batches[0]] == ["1"]
    assert [s.lot_id for s in queue.peek_all()] == ["2"]


def test_items_enqueued_during_failed_io_stay_behind_the_requeued_batch():
    gateway = FakeGateway()
    gateway.reject_with = "nope"
    engine, queue, _, _ = _setup(gateway)
    session = MeetingSession(context=CONTEXT)
    queue.enqueue(_sub("1"))
    queue.enqueue(_sub("2"))
    gateway.during_submit = lambda: queue.enqueue(_sub("3"))

    asyncio.run(engine.flush(session))

    assert [s.lot_id for s in gateway.batches[0]] == ["1", "2"]
    assert [s.lot_id for s in queue.peek_all()] == ["1", "2", "3"]


def test_flush_while_flushing_is_dropped():
    gateway = FakeGateway()
    gateway.block = None
    engine, queue, _, _ = _setup(gateway)
    session = MeetingSession(context=CONTEXT)
    queue.enqueue(_sub("1"))

    async def scenario():
        gateway.block = asyncio.Event()
        first = asyncio.create_task(engine.flush(session))
        await asyncio.sleep(0)
        assert engine.state == SyncState.FLUSHING
        assert engine.status().label == "Syncing..."
        second = await engine.flush(session)
        gateway.block.set()
        return await first, second

    first, second = asyncio.run(scenario())

    assert second.outcome == FlushOutcome.SKIPPED
    assert first.outcome == FlushOutcome.SUCCEEDED
    assert len(gateway.batches) == 1


def test_cancelled_flush_returns_batch_to_queue():
    gateway = FakeGateway()
    engine, queue, _, _ = _setup(gateway)
    session = MeetingSession(context=CONTEXT)
    queued = [queue.enqueue(_sub("1")), queue.enqueue(_sub("2"))]

    async def scenario():
        gateway.block = asyncio.Event()
        task = asyncio.create_task(engine.flush(session))
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(scenario())

    assert queue.peek_all() == queued
    assert engine.state == SyncState.IDLE


def test_refresh_failure_after_success_keeps_flush_and_stale_view():
    gateway = FakeGateway()
    gateway.fetch_error = GatewayError("timeout")
    engine, queue, _, published = _setup(gateway)
    stale = AttendanceRecord(server_id=99, plan_id="SP1", meeting_id="M1", lot_id="9", owner_name="Earlier")
    session = MeetingSession(context=CONTEXT, confirmed=[stale])
    queue.enqueue(_sub("1"))

    result = asyncio.run(engine.flush(session))

    assert result.outcome == FlushOutcome.SUCCEEDED
    assert queue.size() == 0
    assert session.confirmed == [stale]
    assert [a.lot_id for a in published[-1].attendees] == ["9"]


def test_other_meetings_stay_queued():
    gateway = FakeGateway()
    engine, queue, _, _ = _setup(gateway)
    other = queue.enqueue(_sub("5", meeting_id="M2"))
    queue.enqueue(_sub("1"))

    asyncio.run(engine.flush(MeetingSession(context=CONTEXT)))

    assert queue.peek_all() == [other]


def test_failed_write_back_is_held_and_returned_on_next_flush():
    gateway = FakeGateway()
    gateway.reject_with = "database unavailable"
    store = FlakyQueueStore()
    engine, queue, notifier, published = _setup(gateway, store)
    session = MeetingSession(context=CONTEXT)
    first = queue.enqueue(_sub("1"))

    def disk_fills_up():
        store.failures = 1

    gateway.during_submit = disk_fills_up

    result = asyncio.run(engine.flush(session))

    assert result.outcome == FlushOutcome.FAILED
    assert engine.state == SyncState.IDLE
    assert queue.size() == 0
    assert engine.held == [first]
    assert engine.status().queue_length == 1
    assert [a.lot_id for a in published[-1].attendees] == ["1"]
    assert published[-1].attendees[0].is_pending
    assert any("could not be saved back" in message for level, message in notifier.notices if level == "error")

    gateway.reject_with = None
    gateway.during_submit = None
    second = queue.enqueue(_sub("2"))

    result = asyncio.run(engine.flush(session))

    assert result.outcome == FlushOutcome.SUCCEEDED
    assert [s.id for s in gateway.batches[-1]] == [first.id, second.id]
    assert engine.held == []
    assert queue.size() == 0
    assert sorted(r.lot_id for r in session.confirmed) == ["1", "2"]


def test_held_batch_stays_held_while_queue_is_unwritable():
    gateway = FakeGateway()
    gateway.reject_with = "database unavailable"
    store = FlakyQueueStore()
    engine, queue, _, _ = _setup(gateway, store)
    session = MeetingSession(context=CONTEXT)
    first = queue.enqueue(_sub("1"))
    gateway.during_submit = lambda: setattr(store, "failures", 10)

    asyncio.run(engine.flush(session))
    result = asyncio.run(engine.flush(session))

    assert result.outcome == FlushOutcome.FAILED
    assert result.error == "disk full"
    assert len(gateway.batches) == 1
    assert engine.held == [first]
    assert engine.state == SyncState.IDLE


def test_failed_drain_write_keeps_queue_and_returns_to_idle():
    gateway = FakeGateway()
    store = FlakyQueueStore()
    engine, queue, notifier, published = _setup(gateway, store)
    session = MeetingSession(context=CONTEXT)
    queued = queue.enqueue(_sub("1"))
    store.failures = 1

    result = asyncio.run(engine.flush(session))

    assert result.outcome == FlushOutcome.FAILED
    assert gateway.batches == []
    assert queue.peek_all() == [queued]
    assert engine.state == SyncState.IDLE
    assert notifier.notices[-1][0] == "error"
    assert published[-1].attendees[0].is_pending

    assert asyncio.run(engine.flush(session)).outcome == FlushOutcome.SUCCEEDED


def test_unexpected_refresh_error_after_success_still_reports_success():
    gateway = FakeGateway()
    gateway.fetch_error = KeyError("id")
    engine, queue, notifier, published = _setup(gateway)
    session = MeetingSession(context=CONTEXT)
    queue.enqueue(_sub("1"))

    result = asyncio.run(engine.flush(session))

    assert result.outcome == FlushOutcome.SUCCEEDED
    assert queue.size() == 0
    assert len(published) == 1
    assert notifier.notices[-1][0] == "success"
