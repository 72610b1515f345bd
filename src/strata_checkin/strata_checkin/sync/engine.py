"""Flushes the local submission queue to the remote attendance API.

A flush isolates its batch with ``drain`` before any network I/O, so check-ins
taken while a request is in flight stay queued and are never part of it. On
any failure the batch goes back to the front of the queue; the next timer tick
or a manual "sync now" retries it. Delivery is at-least-once: the server
upserts by (plan, lot, meeting), so a resent batch does not duplicate rows.

If the queue cannot be written when a batch goes back, the engine holds the
batch in memory, still shows it as pending, and writes it back before the
next drain.
"""

from __future__ import annotations

from typing import Callable, Optional

from ..attendance.reconciler import AttendanceReconciler
from ..attendance.repository import AttendanceGateway
from ..attendance.view import AttendanceView, AttendanceViewBuilder
from ..common.datetime_utils import now_local
from ..common.logging_setup import get_logger
from ..core.enums import FlushOutcome, SyncState
from ..core.exceptions import QueuePersistenceError
from ..meetings.session import MeetingSession
from ..submissions.model import Submission
from ..submissions.queue import SubmissionQueue
from .model import FlushResult, SyncStatus
from .notifier import LoggingNotifier, Notifier

log = get_logger("sync")

ViewListener = Callable[[AttendanceView], None]


class SyncEngine:
    def __init__(
        self,
        queue: SubmissionQueue,
        gateway: AttendanceGateway,
        reconciler: AttendanceReconciler,
        views: AttendanceViewBuilder,
        *,
        notifier: Optional[Notifier] = None,
        on_view: Optional[ViewListener] = None,
        clock: Callable = now_local,
    ):
        self._queue = queue
        self._gateway = gateway
        self._reconciler = reconciler
        self._views = views
        self._notifier = notifier or LoggingNotifier()
        self._on_view = on_view
        self._clock = clock
        self._state = SyncState.IDLE
        self._held: list[Submission] = []
        self._held_error: Optional[str] = None

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def held(self) -> list[Submission]:
        """Drained check-ins whose write back to the queue failed."""
        return list(self._held)

    def status(self) -> SyncStatus:
        return SyncStatus(state=self._state, queue_length=self._queue.size() + len(self._held))

    def view(self, session: MeetingSession) -> AttendanceView:
        return self._views.build(session, state=self._state, held=self._held)

    def publish(self, session: MeetingSession) -> AttendanceView:
        view = self.view(session)
        if self._on_view is not None:
            self._on_view(view)
        return view

    async def flush(self, session: MeetingSession) -> FlushResult:
        # Single flight: a request while flushing is dropped, not queued.
        if self._state == SyncState.FLUSHING:
            log.debug("Flush already in progress; request dropped")
            return FlushResult(FlushOutcome.SKIPPED)

        if self._held and not self._return_held():
            failed = FlushResult(FlushOutcome.FAILED, batch_size=len(self._held), error=self._held_error)
            return self._finish(session, failed)

        scope = session.context.queue_filter
        try:
            batch = self._queue.drain(scope)
        except QueuePersistenceError as exc:
            # The drain write failed, so nothing left the persisted queue.
            log.error("Could not take a batch from the queue: %s", exc)
            self._notifier.notify(f"Sync failed, will retry: {exc}", level="error")
            return self._finish(session, FlushResult(FlushOutcome.FAILED, error=str(exc)))
        if not batch:
            return FlushResult(FlushOutcome.EMPTY)

        self._state = SyncState.FLUSHING
        delivered = False
        error: Optional[str] = None
        log.info("Syncing %d check-ins for meeting %s", len(batch), session.meeting_id)
        try:
            try:
                try:
                    response = await self._gateway.submit_attendance_batch(session.meeting_id, batch)
                except Exception as exc:
                    error = str(exc) or exc.__class__.__name__
                else:
                    if response.success:
                        delivered = True
                    else:
                        error = response.error or "Server rejected the batch"

                if delivered:
                    await self._refresh_confirmed(session)
            finally:
                if not delivered:
                    self._give_back(batch)
        finally:
            self._state = SyncState.IDLE

        if delivered:
            log.info("Synced %d check-ins for meeting %s", len(batch), session.meeting_id)
            self._notifier.notify(f"Synced {len(batch)} check-in(s).", level="success")
            return self._finish(session, FlushResult(FlushOutcome.SUCCEEDED, batch_size=len(batch)))

        log.warning("Sync of %d check-ins failed: %s", len(batch), error)
        self._notifier.notify(f"Sync failed, will retry: {error}", level="error")
        return self._finish(session, FlushResult(FlushOutcome.FAILED, batch_size=len(batch), error=error))

    def _finish(self, session: MeetingSession, result: FlushResult) -> FlushResult:
        self.publish(session)
        return result

    def _give_back(self, batch: list[Submission]) -> None:
        try:
            self._queue.requeue(batch)
        except Exception as exc:
            # Held in memory until a later flush manages to write it back.
            self._held = list(batch)
            self._held_error = str(exc) or exc.__class__.__name__
            log.error("Could not return %d check-ins to the queue: %s", len(batch), exc)
            self._notifier.notify(
                f"{len(batch)} check-in(s) could not be saved back to the device queue; "
                "keep this app open so they can be retried.",
                level="error",
            )

    def _return_held(self) -> bool:
        try:
            self._queue.requeue(self._held)
        except Exception as exc:
            self._held_error = str(exc) or exc.__class__.__name__
            log.error("Still cannot return %d check-ins to the queue: %s", len(self._held), exc)
            self._notifier.notify(f"Sync failed, will retry: {self._held_error}", level="error")
            return False
        log.info("Returned %d held check-ins to the queue", len(self._held))
        self._held = []
        self._held_error = None
        return True

    async def _refresh_confirmed(self, session: MeetingSession) -> None:
        # The flush already succeeded; a failed re-read only leaves the view stale.
        try:
            records = await self._reconciler.refresh_confirmed(session.plan_id, session.meeting_id)
        except Exception as exc:
            log.warning("Could not refresh confirmed attendance: %s", exc)
            return
        session.replace_confirmed(records, at=self._clock())
