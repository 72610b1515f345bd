from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..owners.service import OwnerDirectory
from .model import MeetingContext


@dataclass
class MeetingSession:
    """Everything scoped to the meeting currently open on the device.

    Created when a meeting is selected and thrown away when another one is;
    nothing here outlives the selection except the persisted queue.
    """

    context: MeetingContext
    owners: Optional[OwnerDirectory] = None
    confirmed: list[AttendanceRecord] = field(default_factory=list)
    confirmed_at: Optional[datetime] = None

    @property
    def plan_id(self) -> str:
        return self.context.plan_id

    @property
    def meeting_id(self) -> str:
        return self.context.meeting_id

    def replace_confirmed(self, records: list[AttendanceRecord], *, at: datetime) -> None:
        self.confirmed = list(records)
        self.confirmed_at = at
