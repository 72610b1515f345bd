from __future__ import annotations

from functools import wraps

from flask import Flask, current_app, jsonify, request

from ..attendance.repository import AttendanceStore
from ..common.logging_setup import get_logger
from ..core.exceptions import ValidationError
from ..gateway.payloads import owner_to_payload, plan_to_payload, record_to_payload, submission_from_payload

log = get_logger("server")


def _error(message: str, status: int):
    return jsonify({"success": False, "error": message}), status


def _parse_batch(meeting_id: str, body) -> list:
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    if body.get("meeting_id") not in (None, meeting_id):
        raise ValidationError("meeting_id in body does not match the URL")
    items = body.get("submissions")
    if not isinstance(items, list):
        raise ValidationError("submissions must be a list")
    if not all(isinstance(item, dict) for item in items):
        raise ValidationError("Each submission must be a JSON object")
    try:
        submissions = [submission_from_payload(item, meeting_id=meeting_id) for item in items]
    except (KeyError, TypeError, ValueError) as exc:
        raise ValidationError(f"Malformed submission: {exc}")
    for s in submissions:
        if not s.plan_id.strip() or not s.lot_id.strip() or not s.owner_name.strip():
            raise ValidationError("Each submission needs plan_id, lot_id and owner_name")
    return submissions


def register(app: Flask, store: AttendanceStore) -> None:
    def token_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            expected = current_app.config.get("API_TOKEN")
            if expected and request.headers.get("Authorization") != f"Bearer {expected}":
                return _error("Unauthorized", 401)
            return view(*args, **kwargs)

        return wrapper

    @app.route("/api/strata-plans", methods=["GET"], endpoint="strata_plans")
    @token_required
    def strata_plans():
        plans = store.list_strata_plans()
        return jsonify({"success": True, "plans": [plan_to_payload(p) for p in plans]})

    @app.route("/api/plans/<plan_id>/owners", methods=["GET"], endpoint="plan_owners")
    @token_required
    def plan_owners(plan_id: str):
        owners = store.list_owners(plan_id)
        return jsonify({"success": True, "owners": [owner_to_payload(o) for o in owners]})

    @app.route("/api/plans/<plan_id>/meetings/<meeting_id>/attendance", methods=["GET"], endpoint="meeting_attendance")
    @token_required
    def meeting_attendance(plan_id: str, meeting_id: str):
        records = store.list_for_meeting(plan_id, meeting_id)
        return jsonify({"success": True, "attendees": [record_to_payload(r) for r in records]})

    @app.route("/api/meetings/<meeting_id>/attendance/batch", methods=["POST"], endpoint="attendance_batch")
    @token_required
    def attendance_batch(meeting_id: str):
        try:
            submissions = _parse_batch(meeting_id, request.get_json(silent=True))
        except ValidationError as e:
            return _error(str(e), 400)

        try:
            applied = store.apply_batch(meeting_id, submissions)
        except Exception:
            log.exception("Attendance batch for meeting %s rolled back", meeting_id)
            return _error("Batch rejected; no attendance was saved.", 500)

        log.info("Applied %d attendance rows for meeting %s", applied, meeting_id)
        return jsonify({"success": True, "applied": applied})

    @app.route("/api/attendance/<int:record_id>", methods=["DELETE"], endpoint="attendance_delete")
    @token_required
    def attendance_delete(record_id: int):
        if not store.delete(record_id):
            return _error("Attendance record not found", 404)
        return jsonify({"success": True})
