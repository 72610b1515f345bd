from __future__ import annotations

from datetime import datetime


def parse_iso_datetime(value) -> datetime | None:
    """Accept what the API or MySQL hands back: ``None``, a datetime, or an ISO string (``Z`` allowed)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def now_local() -> datetime:
    return datetime.now()
