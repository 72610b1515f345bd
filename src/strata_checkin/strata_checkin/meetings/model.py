from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date

from ..submissions.model import QueueFilter


def make_meeting_id(plan_id: str, meeting_date: date, meeting_type: str) -> str:
    """Stable id so a restarted device finds the queue entries of the same meeting."""
    slug = re.sub(r"[^A-Za-z0-9]+", "-", str(meeting_type)).strip("-").lower() or "meeting"
    return f"{plan_id}-{meeting_date:%Y%m%d}-{slug}"


@dataclass(frozen=True)
class MeetingDetails:
    """What the clerk enters when opening a meeting."""

    meeting_type: str
    meeting_date: date
    quorum_total: int


@dataclass(frozen=True)
class MeetingContext:
    plan_id: str
    meeting_id: str
    meeting_date: date
    meeting_type: str
    quorum_total: int

    @classmethod
    def from_details(cls, plan_id: str, details: MeetingDetails) -> "MeetingContext":
        return cls(
            plan_id=plan_id,
            meeting_id=make_meeting_id(plan_id, details.meeting_date, details.meeting_type),
            meeting_date=details.meeting_date,
            meeting_type=details.meeting_type,
            quorum_total=details.quorum_total,
        )

    @property
    def queue_filter(self) -> QueueFilter:
        return QueueFilter(plan_id=self.plan_id, meeting_id=self.meeting_id)
