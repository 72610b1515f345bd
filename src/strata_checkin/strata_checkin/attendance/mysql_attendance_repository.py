from __future__ import annotations

from typing import Optional, Sequence

from ..common.lots import lot_sort_key
from ..database.connection import DatabaseConnection, transaction
from ..owners.model import OwnerContactInfo, StrataPlan
from ..submissions.model import Submission
from .model import AttendanceRecord
from .repository import AttendanceStore

_RECORD_COLUMNS = "id, plan_id, meeting_id, lot_id, owner_name, rep_name, is_financial, is_proxy, recorded_at"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        server_id=int(r["id"]),
        plan_id=str(r["plan_id"]),
        meeting_id=str(r["meeting_id"]),
        lot_id=str(r["lot_id"]),
        owner_name=r["owner_name"],
        rep_name=r.get("rep_name"),
        is_financial=bool(r.get("is_financial")),
        is_proxy=bool(r.get("is_proxy")),
        recorded_at=r.get("recorded_at"),
    )


class MySQLAttendanceStore(AttendanceStore):
    def __init__(self, db: DatabaseConnection):
        self._db = db

    def list_strata_plans(self) -> Sequence[StrataPlan]:
        with transaction(self._db) as cur:
            cur.execute("SELECT sp_number, suburb FROM strata_plans")
            plans = [StrataPlan(plan_id=str(r["sp_number"]), suburb=r.get("suburb") or "") for r in cur.fetchall()]
        plans.sort(key=lambda p: lot_sort_key(p.plan_id))
        return plans

    def list_owners(self, plan_id: str) -> Sequence[OwnerContactInfo]:
        with transaction(self._db) as cur:
            cur.execute(
                """
                SELECT lot_id, main_contact, title_name, unit_number
                FROM owners
                WHERE plan_id=%s
                """,
                (plan_id,),
            )
            return [
                OwnerContactInfo(
                    lot_id=str(r["lot_id"]),
                    main_contact_raw=r.get("main_contact"),
                    title_name_raw=r.get("title_name"),
                    unit_number=r.get("unit_number"),
                )
                for r in cur.fetchall()
            ]

    def list_for_meeting(self, plan_id: str, meeting_id: str) -> Sequence[AttendanceRecord]:
        with transaction(self._db) as cur:
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance
                WHERE plan_id=%s AND meeting_id=%s
                ORDER BY recorded_at ASC, id ASC
                """,
                (plan_id, meeting_id),
            )
            return [_to_record(r) for r in cur.fetchall()]

    def get(self, record_id: int) -> Optional[AttendanceRecord]:
        with transaction(self._db) as cur:
            cur.execute(f"SELECT {_RECORD_COLUMNS} FROM attendance WHERE id=%s", (int(record_id),))
            r = cur.fetchone()
            return _to_record(r) if r else None

    def apply_batch(self, meeting_id: str, submissions: Sequence[Submission]) -> int:
        # Delete-then-insert per (plan, lot, meeting) inside one transaction:
        # a resent submission replaces its earlier row, and any failure rolls
        # back the whole batch.
        with transaction(self._db) as cur:
            for s in submissions:
                cur.execute(
                    "DELETE FROM attendance WHERE plan_id=%s AND lot_id=%s AND meeting_id=%s",
                    (s.plan_id, s.lot_id, meeting_id),
                )
                cur.execute(
                    """
                    INSERT INTO attendance(plan_id, meeting_id, lot_id, owner_name, rep_name,
                                           is_financial, is_proxy, submission_id)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        s.plan_id,
                        meeting_id,
                        s.lot_id,
                        s.owner_name,
                        s.rep_name,
                        int(bool(s.is_financial)),
                        int(bool(s.is_proxy)),
                        s.id or None,
                    ),
                )
            return len(submissions)

    def delete(self, record_id: int) -> bool:
        with transaction(self._db) as cur:
            cur.execute("DELETE FROM attendance WHERE id=%s", (int(record_id),))
            return cur.rowcount > 0
