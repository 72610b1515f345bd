from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.constants import NO_REP
from ..core.enums import AttendeeKind, AttendeeStatus
from ..submissions.model import Submission


@dataclass(frozen=True)
class AttendanceRecord:
    """Server-confirmed attendance row (owned by the remote store)."""

    server_id: int
    plan_id: str
    meeting_id: str
    lot_id: str
    owner_name: str
    rep_name: Optional[str] = None
    is_financial: bool = False
    is_proxy: bool = False
    recorded_at: Optional[datetime] = None


@dataclass(frozen=True)
class BatchResponse:
    success: bool
    error: Optional[str] = None
    applied: int = 0


@dataclass(frozen=True)
class MergedAttendee:
    """Display row: a confirmed record or a still-queued submission."""

    status: AttendeeStatus
    lot_id: str
    owner_name: str
    rep_name: Optional[str]
    is_financial: bool
    is_proxy: bool
    server_id: Optional[int] = None
    submission_id: Optional[str] = None

    @classmethod
    def confirmed(cls, record: AttendanceRecord) -> "MergedAttendee":
        return cls(
            status=AttendeeStatus.CONFIRMED,
            lot_id=record.lot_id,
            owner_name=record.owner_name,
            rep_name=record.rep_name,
            is_financial=record.is_financial,
            is_proxy=record.is_proxy,
            server_id=record.server_id,
        )

    @classmethod
    def pending(cls, submission: Submission) -> "MergedAttendee":
        return cls(
            status=AttendeeStatus.PENDING,
            lot_id=submission.lot_id,
            owner_name=submission.owner_name,
            rep_name=submission.rep_name,
            is_financial=submission.is_financial,
            is_proxy=submission.is_proxy,
            submission_id=submission.id,
        )

    @property
    def is_pending(self) -> bool:
        return self.status == AttendeeStatus.PENDING

    @property
    def kind(self) -> AttendeeKind:
        if self.is_proxy:
            return AttendeeKind.PROXY
        if self.rep_name and self.rep_name != NO_REP:
            return AttendeeKind.COMPANY
        return AttendeeKind.OWNER
