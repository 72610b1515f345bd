from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Sequence

from ..core.exceptions import QueuePersistenceError
from .model import Submission
from .repository import QueueStore

FORMAT_VERSION = 1


class JsonFileQueueStore(QueueStore):
    """Queue persisted as a single JSON document on the device.

    Writes go to a temp file in the same directory and are swapped in with
    ``os.replace`` so a crash never leaves a half-written queue.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[Submission]:
        if not self._path.exists():
            return []
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as exc:
            raise QueuePersistenceError(f"Cannot read submission queue at {self._path}: {exc}") from exc

        items = raw.get("submissions", []) if isinstance(raw, dict) else raw
        try:
            return [Submission.from_dict(item) for item in items]
        except (KeyError, TypeError, ValueError) as exc:
            raise QueuePersistenceError(f"Submission queue at {self._path} is malformed: {exc}") from exc

    def save(self, submissions: Sequence[Submission]) -> None:
        payload = {
            "version": FORMAT_VERSION,
            "submissions": [s.to_dict() for s in submissions],
        }
        tmp_name = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".queue-", suffix=".json", dir=str(self._path.parent))
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self._path)
        except OSError as exc:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise QueuePersistenceError(f"Cannot write submission queue at {self._path}: {exc}") from exc
