from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..owners.model import OwnerContactInfo, StrataPlan
from ..submissions.model import Submission
from .model import AttendanceRecord, BatchResponse


class AttendanceGateway(Protocol):
    """Client-side port to the remote attendance API."""

    async def fetch_strata_plans(self) -> Sequence[StrataPlan]:
        raise NotImplementedError

    async def fetch_owners(self, plan_id: str) -> Sequence[OwnerContactInfo]:
        raise NotImplementedError

    async def fetch_meeting_attendance(self, plan_id: str, meeting_id: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    async def submit_attendance_batch(self, meeting_id: str, submissions: Sequence[Submission]) -> BatchResponse:
        raise NotImplementedError

    async def delete_attendance(self, record_id: int) -> bool:
        raise NotImplementedError


class AttendanceStore(Protocol):
    """Server-side persistence behind the attendance API."""

    def list_strata_plans(self) -> Sequence[StrataPlan]:
        raise NotImplementedError

    def list_owners(self, plan_id: str) -> Sequence[OwnerContactInfo]:
        raise NotImplementedError

    def list_for_meeting(self, plan_id: str, meeting_id: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def apply_batch(self, meeting_id: str, submissions: Sequence[Submission]) -> int:
        """Upsert every submission keyed by (plan, lot, meeting) in one transaction.

        Any failure rolls back the whole batch and propagates.
        """

        raise NotImplementedError

    def delete(self, record_id: int) -> bool:
        raise NotImplementedError

    def get(self, record_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError
