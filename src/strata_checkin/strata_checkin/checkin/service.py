from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from ..attendance.reconciler import AttendanceReconciler
from ..attendance.repository import AttendanceGateway
from ..attendance.view import AttendanceView
from ..common.datetime_utils import now_local
from ..common.lots import normalize_lot
from ..common.logging_setup import get_logger
from ..common.validators import require_non_empty, require_positive_int
from ..core.constants import DEFAULT_SYNC_INTERVAL_SECONDS, PLAN_CACHE_SECONDS
from ..core.enums import FlushOutcome
from ..core.exceptions import GatewayError, ValidationError
from ..meetings.model import MeetingContext, MeetingDetails
from ..meetings.prompt import MeetingPrompt
from ..meetings.session import MeetingSession
from ..owners.model import StrataPlan
from ..owners.service import OwnerDirectory
from ..submissions.model import Submission
from ..submissions.queue import SubmissionQueue
from ..sync.engine import SyncEngine
from ..sync.model import FlushResult
from ..sync.scheduler import PeriodicTask

log = get_logger("checkin")


@dataclass(frozen=True)
class CheckinForm:
    """What the clerk ticked/typed for one lot."""

    lot_id: str
    owner_names: tuple[str, ...] = ()
    is_financial: bool = False
    proxy_name: Optional[str] = None
    company_rep: Optional[str] = None


class CheckinService:
    """Use cases of the check-in screen for one device.

    Holds the open ``MeetingSession`` and the periodic sync timer; both are
    replaced whenever another meeting is opened.
    """

    def __init__(
        self,
        queue: SubmissionQueue,
        gateway: AttendanceGateway,
        reconciler: AttendanceReconciler,
        engine: SyncEngine,
        *,
        sync_interval_seconds: float = DEFAULT_SYNC_INTERVAL_SECONDS,
        timer_factory: Callable[..., PeriodicTask] = PeriodicTask,
        clock: Callable = now_local,
    ):
        self._queue = queue
        self._gateway = gateway
        self._reconciler = reconciler
        self._engine = engine
        self._sync_interval = sync_interval_seconds
        self._timer_factory = timer_factory
        self._clock = clock

        self._session: Optional[MeetingSession] = None
        self._timer: Optional[PeriodicTask] = None
        self._owners_cache: dict[str, OwnerDirectory] = {}
        self._plans: list[StrataPlan] = []
        self._plans_loaded_at: Optional[float] = None

    @property
    def session(self) -> Optional[MeetingSession]:
        return self._session

    @property
    def timer(self) -> Optional[PeriodicTask]:
        return self._timer

    def _require_session(self) -> MeetingSession:
        if self._session is None:
            raise ValidationError("Select a strata plan and meeting first")
        return self._session

    async def list_strata_plans(self, *, refresh: bool = False) -> list[StrataPlan]:
        fresh = self._plans_loaded_at is not None and time.monotonic() - self._plans_loaded_at < PLAN_CACHE_SECONDS
        if self._plans and fresh and not refresh:
            return list(self._plans)
        self._plans = list(await self._gateway.fetch_strata_plans())
        self._plans_loaded_at = time.monotonic()
        return list(self._plans)

    async def start_meeting(self, plan_id: str, prompt: MeetingPrompt) -> Optional[MeetingSession]:
        """Ask for the meeting details, then open it. ``None`` if the clerk cancels."""
        plan_id = require_non_empty(plan_id, "Strata plan")
        answer = await prompt.ask_meeting_details(plan_id)
        if answer.cancelled or answer.value is None:
            log.info("Meeting selection for plan %s cancelled", plan_id)
            return None

        details = answer.value
        details = MeetingDetails(
            meeting_type=require_non_empty(details.meeting_type, "Meeting type"),
            meeting_date=details.meeting_date,
            quorum_total=require_positive_int(details.quorum_total, "Quorum total"),
        )
        return await self.open_meeting(MeetingContext.from_details(plan_id, details))

    async def open_meeting(self, context: MeetingContext) -> MeetingSession:
        self.close()

        session = MeetingSession(context=context)
        session.owners = await self._load_owners(context.plan_id)
        try:
            records = await self._reconciler.refresh_confirmed(context.plan_id, context.meeting_id)
        except Exception as exc:
            log.warning("Working offline; confirmed attendance unavailable: %s", exc)
        else:
            session.replace_confirmed(records, at=self._clock())

        self._session = session
        self._timer = self._timer_factory(self.sync_now, self._sync_interval, name=f"sync:{context.meeting_id}")
        self._timer.start()
        log.info("Opened meeting %s (%s, quorum total %d)", context.meeting_id, context.meeting_type, context.quorum_total)
        self._engine.publish(session)
        return session

    async def _load_owners(self, plan_id: str) -> Optional[OwnerDirectory]:
        cached = self._owners_cache.get(plan_id)
        if cached is not None:
            return cached
        try:
            directory = await OwnerDirectory.load(self._gateway, plan_id)
        except GatewayError as exc:
            log.warning("Owners directory for plan %s unavailable: %s", plan_id, exc)
            return None
        self._owners_cache[plan_id] = directory
        return directory

    def check_in(self, form: CheckinForm) -> Submission:
        session = self._require_session()
        lot_id = normalize_lot(require_non_empty(form.lot_id, "Lot number"))
        owners = session.owners

        if owners is not None and lot_id not in owners:
            raise ValidationError(f"Lot {lot_id} not found in this strata plan")

        names = [n.strip() for n in form.owner_names if n and n.strip()]
        proxy_name = (form.proxy_name or "").strip()
        company_rep = (form.company_rep or "").strip()
        identity = owners.classify_lot(lot_id) if owners is not None else None

        if proxy_name:
            owner_name, rep_name, is_proxy = proxy_name, " & ".join(names) or None, True
        elif identity is not None and identity.is_company:
            if not company_rep:
                raise ValidationError("Enter the company representative's name")
            owner_name, rep_name, is_proxy = company_rep, identity.name, False
        elif company_rep and not names:
            owner_name, rep_name, is_proxy = company_rep, None, False
        else:
            if not names:
                raise ValidationError("Select at least one owner or enter a proxy name")
            owner_name, rep_name, is_proxy = " & ".join(names), None, False

        submission = self._queue.enqueue(
            Submission(
                plan_id=session.plan_id,
                meeting_id=session.meeting_id,
                lot_id=lot_id,
                owner_name=owner_name,
                rep_name=rep_name,
                is_financial=bool(form.is_financial),
                is_proxy=is_proxy,
            )
        )
        view = self._engine.publish(session)
        log.info("Lot %s checked in for %s; quorum %s", lot_id, session.meeting_id, view.quorum.summary)
        return submission

    def delete_pending(self, submission_id: str) -> bool:
        removed = self._queue.remove_by_id(submission_id)
        if self._session is not None:
            self._engine.publish(self._session)
        return removed

    async def delete_confirmed(self, record_id: int) -> bool:
        session = self._require_session()
        deleted = await self._gateway.delete_attendance(record_id)
        try:
            records = await self._reconciler.refresh_confirmed(session.plan_id, session.meeting_id)
        except Exception as exc:
            log.warning("Could not refresh confirmed attendance: %s", exc)
            records = [r for r in session.confirmed if r.server_id != int(record_id)] if deleted else session.confirmed
        session.replace_confirmed(records, at=self._clock())
        self._engine.publish(session)
        return deleted

    async def sync_now(self) -> FlushResult:
        if self._session is None:
            return FlushResult(FlushOutcome.EMPTY)
        return await self._engine.flush(self._session)

    def snapshot(self) -> AttendanceView:
        return self._engine.view(self._require_session())

    def pending(self) -> Sequence[Submission]:
        session = self._require_session()
        return self._queue.peek_all(session.context.queue_filter)

    def close(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer = None
        if self._session is not None:
            log.info("Closed meeting %s", self._session.meeting_id)
        self._session = None
