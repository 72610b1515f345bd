from datetime import datetime

from src.strata_checkin.strata_checkin.gateway.payloads import (
    batch_payload,
    plan_from_payload,
    record_from_payload,
    submission_from_payload,
)
from src.strata_checkin.strata_checkin.submissions.model import Submission


def test_batch_payload_carries_meeting_and_submission_ids():
    s = Submission(
        plan_id="SP1",
        meeting_id="M1",
        lot_id="4",
        owner_name="Jane",
        is_proxy=True,
        enqueued_at=datetime(2026, 3, 1, 18, 0),
        id="abc",
    )

    body = batch_payload("M1", [s])

    assert body["meeting_id"] == "M1"
    assert body["submissions"][0]["submission_id"] == "abc"
    assert body["submissions"][0]["enqueued_at"] == "2026-03-01T18:00:00"
    assert "meeting_id" not in body["submissions"][0]


def test_submission_from_payload_accepts_string_flags():
    s = submission_from_payload(
        {"plan_id": "SP1", "lot_id": 7, "owner_name": "Jane", "is_financial": "true", "is_proxy": "0"},
        meeting_id="M1",
    )

    assert s.lot_id == "7"
    assert s.meeting_id == "M1"
    assert s.is_financial is True
    assert s.is_proxy is False


def test_record_and_plan_from_payload():
    r = record_from_payload(
        {"id": "5", "plan_id": "SP1", "meeting_id": "M1", "lot_id": "2", "owner_name": "A", "recorded_at": "2026-03-01T18:05:00"}
    )
    plan = plan_from_payload({"sp": 1234, "suburb": "Bondi"})

    assert r.server_id == 5
    assert r.recorded_at == datetime(2026, 3, 1, 18, 5)
    assert plan.plan_id == "1234"
    assert plan.suburb == "Bondi"
