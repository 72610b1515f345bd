"""JSON shapes exchanged between the device and the attendance API."""

from __future__ import annotations

from typing import Any, Iterable

from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import parse_iso_datetime
from ..owners.model import OwnerContactInfo, StrataPlan
from ..submissions.model import Submission


def _bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "y"}
    return bool(value)


def submission_to_payload(s: Submission) -> dict[str, Any]:
    return {
        "submission_id": s.id,
        "plan_id": s.plan_id,
        "lot_id": s.lot_id,
        "owner_name": s.owner_name,
        "rep_name": s.rep_name,
        "is_financial": bool(s.is_financial),
        "is_proxy": bool(s.is_proxy),
        "enqueued_at": s.enqueued_at.isoformat() if s.enqueued_at else None,
    }


def submission_from_payload(data: dict[str, Any], *, meeting_id: str) -> Submission:
    return Submission(
        id=str(data.get("submission_id") or ""),
        plan_id=str(data["plan_id"]),
        meeting_id=meeting_id,
        lot_id=str(data["lot_id"]),
        owner_name=str(data.get("owner_name") or ""),
        rep_name=data.get("rep_name"),
        is_financial=_bool(data.get("is_financial")),
        is_proxy=_bool(data.get("is_proxy")),
        enqueued_at=parse_iso_datetime(data.get("enqueued_at")),
    )


def batch_payload(meeting_id: str, submissions: Iterable[Submission]) -> dict[str, Any]:
    return {
        "meeting_id": meeting_id,
        "submissions": [submission_to_payload(s) for s in submissions],
    }


def record_to_payload(r: AttendanceRecord) -> dict[str, Any]:
    return {
        "id": r.server_id,
        "plan_id": r.plan_id,
        "meeting_id": r.meeting_id,
        "lot_id": r.lot_id,
        "owner_name": r.owner_name,
        "rep_name": r.rep_name,
        "is_financial": bool(r.is_financial),
        "is_proxy": bool(r.is_proxy),
        "recorded_at": r.recorded_at.isoformat() if r.recorded_at else None,
    }


def record_from_payload(data: dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        server_id=int(data["id"]),
        plan_id=str(data["plan_id"]),
        meeting_id=str(data["meeting_id"]),
        lot_id=str(data["lot_id"]),
        owner_name=str(data.get("owner_name") or ""),
        rep_name=data.get("rep_name"),
        is_financial=_bool(data.get("is_financial")),
        is_proxy=_bool(data.get("is_proxy")),
        recorded_at=parse_iso_datetime(data.get("recorded_at")),
    )


def owner_to_payload(o: OwnerContactInfo) -> dict[str, Any]:
    return {
        "lot_id": o.lot_id,
        "main_contact": o.main_contact_raw,
        "title_name": o.title_name_raw,
        "unit_number": o.unit_number,
    }


def owner_from_payload(data: dict[str, Any]) -> OwnerContactInfo:
    return OwnerContactInfo(
        lot_id=str(data["lot_id"]),
        main_contact_raw=data.get("main_contact"),
        title_name_raw=data.get("title_name"),
        unit_number=data.get("unit_number"),
    )


def plan_to_payload(p: StrataPlan) -> dict[str, Any]:
    return {"sp": p.plan_id, "suburb": p.suburb}


def plan_from_payload(data: dict[str, Any]) -> StrataPlan:
    return StrataPlan(plan_id=str(data["sp"]), suburb=str(data.get("suburb") or ""))
