from __future__ import annotations

from typing import Iterable, Sequence

from ..common.lots import lot_sort_key, normalize_lot
from ..common.logging_setup import get_logger
from ..core.enums import AttendeeStatus
from ..submissions.model import Submission
from .model import AttendanceRecord, MergedAttendee
from .repository import AttendanceGateway

log = get_logger("reconciler")

_STATUS_ORDER = {AttendeeStatus.CONFIRMED: 0, AttendeeStatus.PENDING: 1}


class AttendanceReconciler:
    """Combines server-confirmed attendance with queued check-ins for display.

    Duplicates across the two states are kept on purpose: the server's
    delete-then-insert upsert collapses them once the pending row is flushed.
    """

    def __init__(self, gateway: AttendanceGateway):
        self._gateway = gateway

    @staticmethod
    def merge(confirmed: Iterable[AttendanceRecord], pending: Iterable[Submission]) -> list[MergedAttendee]:
        rows = [MergedAttendee.confirmed(r) for r in confirmed]
        rows.extend(MergedAttendee.pending(s) for s in pending)
        # sort() is stable, so equal keys keep fetch/enqueue order.
        rows.sort(key=lambda a: (lot_sort_key(a.lot_id), _STATUS_ORDER[a.status]))
        return rows

    async def refresh_confirmed(self, plan_id: str, meeting_id: str) -> list[AttendanceRecord]:
        records = list(await self._gateway.fetch_meeting_attendance(plan_id, meeting_id))
        log.debug("Fetched %d confirmed attendance rows for %s/%s", len(records), plan_id, meeting_id)
        return records

    @staticmethod
    def attended_lots(merged: Sequence[MergedAttendee]) -> set[str]:
        return {normalize_lot(a.lot_id) for a in merged}

    @staticmethod
    def person_count(merged: Sequence[MergedAttendee]) -> int:
        return sum(1 for a in merged if a.status == AttendeeStatus.CONFIRMED)
