from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class QuorumResult:
    percentage: int
    threshold_met: bool
    attended: int = 0
    total: int = 0
    threshold: int = 0

    @property
    def summary(self) -> str:
        return f"{self.percentage}% ({self.attended}/{self.total})"
