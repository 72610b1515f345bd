from __future__ import annotations

import threading
from typing import Callable, Iterable, Optional

from ..common.datetime_utils import now_local
from ..common.logging_setup import get_logger
from .model import QueueFilter, Submission
from .repository import QueueStore

log = get_logger("queue")


class SubmissionQueue:
    """Durable FIFO of check-ins awaiting server confirmation.

    The persisted store is the only source of truth: every operation re-reads
    it, and every mutation is a single ``save``. One lock serializes all
    operations so ``drain`` is atomic with respect to ``enqueue``.
    """

    def __init__(self, store: QueueStore, *, clock: Callable = now_local):
        self._store = store
        self._clock = clock
        self._lock = threading.RLock()

    def enqueue(self, submission: Submission) -> Submission:
        with self._lock:
            item = submission.with_defaults(now=self._clock())
            items = self._store.load()
            items.append(item)
            self._store.save(items)
        log.info("Queued check-in for lot %s (plan %s, id %s)", item.lot_id, item.plan_id, item.id)
        return item

    def peek_all(self, flt: Optional[QueueFilter] = None) -> list[Submission]:
        with self._lock:
            items = self._store.load()
        if flt is None:
            return items
        return [s for s in items if flt.matches(s)]

    def size(self, flt: Optional[QueueFilter] = None) -> int:
        return len(self.peek_all(flt))

    def remove_by_id(self, submission_id: str) -> bool:
        with self._lock:
            items = self._store.load()
            kept = [s for s in items if s.id != submission_id]
            if len(kept) == len(items):
                return False
            self._store.save(kept)
        log.info("Removed queued check-in %s", submission_id)
        return True

    def drain(self, flt: Optional[QueueFilter] = None) -> list[Submission]:
        with self._lock:
            items = self._store.load()
            batch = [s for s in items if flt is None or flt.matches(s)]
            if not batch:
                return []
            rest = [s for s in items if not (flt is None or flt.matches(s))]
            self._store.save(rest)
        log.debug("Drained %d queued check-ins", len(batch))
        return batch

    def requeue(self, submissions: Iterable[Submission]) -> int:
        """Put a drained batch back at the front of the whole queue.

        Order within the batch, and so within its meeting, is kept. Entries of
        other meetings that a filtered ``drain`` left behind end up after the
        batch even if they are older; each meeting is flushed on its own, so
        only per-meeting order matters. Ids already queued are skipped.
        """
        with self._lock:
            items = self._store.load()
            present = {s.id for s in items}
            returned = []
            for s in submissions:
                if s.id in present:
                    continue
                present.add(s.id)
                returned.append(s)
            if returned:
                self._store.save(returned + items)
        if returned:
            log.info("Requeued %d check-ins", len(returned))
        return len(returned)
