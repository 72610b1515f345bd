from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceStore
from .attendance.reconciler import AttendanceReconciler
from .attendance.repository import AttendanceGateway
from .attendance.view import AttendanceViewBuilder
from .checkin.service import CheckinService
from .core.constants import (
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_QUEUE_PATH,
    DEFAULT_QUORUM_RATIO,
    DEFAULT_SYNC_INTERVAL_SECONDS,
)
from .database.connection import DBConfig, DatabaseConnection
from .gateway.http_gateway import HttpAttendanceGateway
from .quorum.calculator.standard_rule import StandardQuorumRule
from .quorum.service import QuorumCalculator
from .submissions.json_queue_repository import JsonFileQueueStore
from .submissions.queue import SubmissionQueue
from .sync.engine import SyncEngine, ViewListener
from .sync.notifier import Notifier


@dataclass(frozen=True)
class ServerContainer:
    conn: DatabaseConnection
    attendance_store: MySQLAttendanceStore


def build_server_container(*, db_config: dict) -> ServerContainer:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return ServerContainer(conn=conn, attendance_store=MySQLAttendanceStore(conn))


@dataclass(frozen=True)
class ClientContainer:
    gateway: AttendanceGateway
    queue: SubmissionQueue
    reconciler: AttendanceReconciler
    quorum_calculator: QuorumCalculator
    views: AttendanceViewBuilder
    sync_engine: SyncEngine
    checkin_service: CheckinService


def build_client_container(
    settings: Any,
    *,
    gateway: Optional[AttendanceGateway] = None,
    notifier: Optional[Notifier] = None,
    on_view: Optional[ViewListener] = None,
) -> ClientContainer:
    """Wire the device-side services from a settings module (or any object with the same attributes)."""
    if gateway is None:
        gateway = HttpAttendanceGateway(
            str(getattr(settings, "API_BASE_URL")),
            token=getattr(settings, "API_TOKEN", None),
            timeout_seconds=float(getattr(settings, "HTTP_TIMEOUT_SECONDS", DEFAULT_HTTP_TIMEOUT_SECONDS)),
        )

    queue = SubmissionQueue(JsonFileQueueStore(getattr(settings, "QUEUE_PATH", DEFAULT_QUEUE_PATH)))
    reconciler = AttendanceReconciler(gateway)
    quorum_calculator = QuorumCalculator(
        rule=StandardQuorumRule(getattr(settings, "QUORUM_RATIO", DEFAULT_QUORUM_RATIO)),
    )
    views = AttendanceViewBuilder(queue, reconciler, quorum_calculator)
    sync_engine = SyncEngine(queue, gateway, reconciler, views, notifier=notifier, on_view=on_view)
    checkin_service = CheckinService(
        queue,
        gateway,
        reconciler,
        sync_engine,
        sync_interval_seconds=float(getattr(settings, "SYNC_INTERVAL_SECONDS", DEFAULT_SYNC_INTERVAL_SECONDS)),
    )

    return ClientContainer(
        gateway=gateway,
        queue=queue,
        reconciler=reconciler,
        quorum_calculator=quorum_calculator,
        views=views,
        sync_engine=sync_engine,
        checkin_service=checkin_service,
    )
