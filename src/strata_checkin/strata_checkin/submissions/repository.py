from __future__ import annotations

from typing import Protocol, Sequence

from .model import Submission


class QueueStore(Protocol):
    """Durable backing store for the submission queue.

    ``save`` replaces the whole persisted queue; it must either fully succeed
    or raise ``QueuePersistenceError``.
    """

    def load(self) -> list[Submission]:
        raise NotImplementedError

    def save(self, submissions: Sequence[Submission]) -> None:
        raise NotImplementedError
