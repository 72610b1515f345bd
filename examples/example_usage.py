"""Example: drive the device-side services directly (no Flask, no UI).

Opens the queue configured by APP_ENV and prints what is still waiting to be
synced, grouped by meeting.
"""

import importlib
from collections import Counter

from config import get_settings_module

from src.strata_checkin.strata_checkin.container import build_client_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_client_container(settings)
    pending = container.queue.peek_all()
    print(container.sync_engine.status().label)
    for (plan_id, meeting_id), count in sorted(Counter((s.plan_id, s.meeting_id) for s in pending).items()):
        print(f"  {plan_id} / {meeting_id}: {count} check-in(s)")


if __name__ == "__main__":
    main()
