from __future__ import annotations

from abc import ABC, abstractmethod


class QuorumRule(ABC):
    """Rule interface (Strategy Pattern for quorum policy)."""

    @abstractmethod
    def threshold(self, total_lots: int) -> int:
        """Minimum number of attending lots for the meeting to proceed."""
        raise NotImplementedError
