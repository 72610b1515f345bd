from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import FlushOutcome, SyncState


@dataclass(frozen=True)
class SyncStatus:
    state: SyncState
    queue_length: int

    @property
    def is_flushing(self) -> bool:
        return self.state == SyncState.FLUSHING

    @property
    def label(self) -> str:
        if self.is_flushing:
            return "Syncing..."
        if self.queue_length <= 0:
            return "Synced"
        return f"Sync {self.queue_length} Item{'s' if self.queue_length > 1 else ''}"


@dataclass(frozen=True)
class FlushResult:
    outcome: FlushOutcome
    batch_size: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome in (FlushOutcome.SUCCEEDED, FlushOutcome.EMPTY)
