from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..core.enums import SyncState
from ..meetings.session import MeetingSession
from ..quorum.model import QuorumResult
from ..quorum.service import QuorumCalculator, quorum_total_label
from ..submissions.model import Submission
from ..submissions.queue import SubmissionQueue
from ..sync.model import SyncStatus
from .model import MergedAttendee
from .reconciler import AttendanceReconciler


@dataclass(frozen=True)
class AttendanceView:
    """Everything the check-in screen renders for the open meeting."""

    attendees: list[MergedAttendee]
    quorum: QuorumResult
    quorum_label: str
    sync: SyncStatus
    person_count: int
    pending_count: int


class AttendanceViewBuilder:
    def __init__(self, queue: SubmissionQueue, reconciler: AttendanceReconciler, calculator: QuorumCalculator):
        self._queue = queue
        self._reconciler = reconciler
        self._calculator = calculator

    def build(
        self,
        session: MeetingSession,
        *,
        state: SyncState = SyncState.IDLE,
        held: Sequence[Submission] = (),
    ) -> AttendanceView:
        scope = session.context.queue_filter
        pending = self._queue.peek_all(scope) + [s for s in held if scope.matches(s)]
        merged = self._reconciler.merge(session.confirmed, pending)
        attended = self._reconciler.attended_lots(merged)
        return AttendanceView(
            attendees=merged,
            quorum=self._calculator.compute(len(attended), session.context.quorum_total),
            quorum_label=quorum_total_label(session.context.meeting_type),
            # The indicator counts the whole device queue, not just this meeting.
            sync=SyncStatus(state=state, queue_length=self._queue.size() + len(held)),
            person_count=self._reconciler.person_count(merged),
            pending_count=len(pending),
        )
