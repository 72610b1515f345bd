from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Optional


def new_submission_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Submission:
    """A check-in captured on the device and not yet confirmed by the server."""

    plan_id: str
    meeting_id: str
    lot_id: str
    owner_name: str
    rep_name: Optional[str] = None
    is_financial: bool = False
    is_proxy: bool = False
    enqueued_at: Optional[datetime] = None
    id: str = ""

    def with_defaults(self, *, now: datetime) -> "Submission":
        return replace(
            self,
            id=self.id or new_submission_id(),
            enqueued_at=self.enqueued_at or now,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "plan_id": self.plan_id,
            "meeting_id": self.meeting_id,
            "lot_id": self.lot_id,
            "owner_name": self.owner_name,
            "rep_name": self.rep_name,
            "is_financial": bool(self.is_financial),
            "is_proxy": bool(self.is_proxy),
            "enqueued_at": self.enqueued_at.isoformat() if self.enqueued_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Submission":
        enqueued_at = data.get("enqueued_at")
        return cls(
            id=str(data["id"]),
            plan_id=str(data["plan_id"]),
            meeting_id=str(data["meeting_id"]),
            lot_id=str(data["lot_id"]),
            owner_name=str(data.get("owner_name") or ""),
            rep_name=data.get("rep_name"),
            is_financial=bool(data.get("is_financial")),
            is_proxy=bool(data.get("is_proxy")),
            enqueued_at=datetime.fromisoformat(enqueued_at) if enqueued_at else None,
        )


@dataclass(frozen=True)
class QueueFilter:
    """Scope of a queue read/drain; ``None`` fields match everything."""

    plan_id: Optional[str] = None
    meeting_id: Optional[str] = None

    def matches(self, submission: Submission) -> bool:
        if self.plan_id is not None and submission.plan_id != self.plan_id:
            return False
        if self.meeting_id is not None and submission.meeting_id != self.meeting_id:
            return False
        return True
