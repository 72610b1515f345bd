from __future__ import annotations

from enum import Enum


class OwnerKind(str, Enum):
    """Result category of owner-contact classification."""

    COMPANY = "company"
    INDIVIDUALS = "individuals"
    UNKNOWN = "unknown"


class AttendeeStatus(str, Enum):
    """Whether a merged attendee row is server-confirmed or still queued."""

    CONFIRMED = "confirmed"
    PENDING = "pending"


class AttendeeKind(str, Enum):
    """How a lot is represented at the meeting."""

    OWNER = "owner"
    PROXY = "proxy"
    COMPANY = "company"


class MeetingType(str, Enum):
    AGM = "AGM"
    EGM = "EGM"
    SCM = "SCM"
    OTHER = "Other"


class SyncState(str, Enum):
    IDLE = "idle"
    FLUSHING = "flushing"


class FlushOutcome(str, Enum):
    """What a single flush attempt ended up doing."""

    SKIPPED = "skipped"
    EMPTY = "empty"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
