from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional, Sequence, TypeVar

import aiohttp

from ..attendance.model import AttendanceRecord, BatchResponse
from ..attendance.repository import AttendanceGateway
from ..common.lots import lot_sort_key
from ..common.logging_setup import get_logger
from ..core.constants import DEFAULT_HTTP_TIMEOUT_SECONDS
from ..core.exceptions import GatewayError
from ..owners.model import OwnerContactInfo, StrataPlan
from ..submissions.model import Submission
from .payloads import batch_payload, owner_from_payload, plan_from_payload, record_from_payload

log = get_logger("gateway")

T = TypeVar("T")


class HttpAttendanceGateway(AttendanceGateway):
    """aiohttp client for the attendance API.

    Network failures, timeouts, non-2xx answers and malformed bodies are raised as
    ``GatewayError``. A batch the server refuses (``success: false``) is
    returned as a failed ``BatchResponse`` so the caller can requeue it.
    """

    def __init__(self, base_url: str, *, token: Optional[str] = None, timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS):
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds, connect=min(10, timeout_seconds))

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _request(self, method: str, path: str, *, json_body: Any = None, allow_error_body: bool = False) -> dict:
        url = f"{self._base_url}{path}"
        try:
            async with aiohttp.ClientSession(timeout=self._timeout, headers=self._headers()) as session:
                async with session.request(method, url, json=json_body) as response:
                    try:
                        data = await response.json(content_type=None)
                    except ValueError:
                        data = None
                    if response.status >= 400 and not (allow_error_body and isinstance(data, dict)):
                        message = f"API request to {path} failed ({response.status})"
                        if isinstance(data, dict) and data.get("error"):
                            message = str(data["error"])
                        raise GatewayError(message, status=response.status)
        except aiohttp.ClientError as exc:
            raise GatewayError(f"API request to {path} failed: {exc}") from exc
        except asyncio.TimeoutError as exc:
            raise GatewayError(f"API request to {path} timed out") from exc

        if not isinstance(data, dict):
            raise GatewayError(f"API request to {path} returned an unexpected body")
        log.debug("%s %s -> ok", method, path)
        return data

    @staticmethod
    def _parse(path: str, items: Any, parse: Callable[[dict], T]) -> list[T]:
        try:
            return [parse(item) for item in items or []]
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise GatewayError(f"API request to {path} returned a malformed item: {exc!r}") from exc

    async def fetch_strata_plans(self) -> Sequence[StrataPlan]:
        data = await self._request("GET", "/api/strata-plans")
        plans = self._parse("/api/strata-plans", data.get("plans"), plan_from_payload)
        plans.sort(key=lambda p: lot_sort_key(p.plan_id))
        return plans

    async def fetch_owners(self, plan_id: str) -> Sequence[OwnerContactInfo]:
        path = f"/api/plans/{plan_id}/owners"
        data = await self._request("GET", path)
        return self._parse(path, data.get("owners"), owner_from_payload)

    async def fetch_meeting_attendance(self, plan_id: str, meeting_id: str) -> Sequence[AttendanceRecord]:
        path = f"/api/plans/{plan_id}/meetings/{meeting_id}/attendance"
        data = await self._request("GET", path)
        return self._parse(path, data.get("attendees"), record_from_payload)

    async def submit_attendance_batch(self, meeting_id: str, submissions: Sequence[Submission]) -> BatchResponse:
        data = await self._request(
            "POST",
            f"/api/meetings/{meeting_id}/attendance/batch",
            json_body=batch_payload(meeting_id, submissions),
            allow_error_body=True,
        )
        return BatchResponse(
            success=bool(data.get("success")),
            error=data.get("error"),
            applied=int(data.get("applied") or 0),
        )

    async def delete_attendance(self, record_id: int) -> bool:
        data = await self._request("DELETE", f"/api/attendance/{int(record_id)}", allow_error_body=True)
        return bool(data.get("success"))
