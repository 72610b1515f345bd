"""Flush this device's queued check-ins for one meeting.

Usage: python scripts/sync_now.py <plan_id> <meeting_id>
       python scripts/sync_now.py --list
"""

from __future__ import annotations

import argparse
import asyncio
import importlib
import sys
from datetime import date
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.strata_checkin.strata_checkin.common.logging_setup import configure_logging
from src.strata_checkin.strata_checkin.container import build_client_container
from src.strata_checkin.strata_checkin.meetings.model import MeetingContext
from src.strata_checkin.strata_checkin.meetings.session import MeetingSession


def _list_queue(container) -> int:
    items = container.queue.peek_all()
    if not items:
        print("Queue is empty.")
        return 0
    for s in items:
        print(f"{s.plan_id}\t{s.meeting_id}\tlot {s.lot_id}\t{s.owner_name}\t{s.id}")
    return 0


async def _flush(container, plan_id: str, meeting_id: str) -> int:
    # Quorum details are irrelevant to a flush; only the queue scope matters.
    context = MeetingContext(
        plan_id=plan_id,
        meeting_id=meeting_id,
        meeting_date=date.today(),
        meeting_type="",
        quorum_total=0,
    )
    result = await container.sync_engine.flush(MeetingSession(context=context))
    print(f"{result.outcome.value}: {result.batch_size} check-in(s){' - ' + result.error if result.error else ''}")
    return 0 if result.ok else 1


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("plan_id", nargs="?")
    parser.add_argument("meeting_id", nargs="?")
    parser.add_argument("--list", action="store_true", help="show queued check-ins and exit")
    args = parser.parse_args(argv)

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", None))
    container = build_client_container(settings)

    if args.list:
        return _list_queue(container)
    if not args.plan_id or not args.meeting_id:
        parser.error("plan_id and meeting_id are required unless --list is given")
    return asyncio.run(_flush(container, args.plan_id, args.meeting_id))


if __name__ == "__main__":
    sys.exit(main())
