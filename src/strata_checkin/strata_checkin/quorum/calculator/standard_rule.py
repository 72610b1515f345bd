from __future__ import annotations

from fractions import Fraction

from ...core.constants import DEFAULT_QUORUM_RATIO
from .base import QuorumRule


class StandardQuorumRule(QuorumRule):
    """Standard rule: ceil(total * ratio) lots, ratio 25% unless configured."""

    def __init__(self, ratio: str | float | Fraction = DEFAULT_QUORUM_RATIO):
        # Fraction keeps ceil exact (no 0.1 + 0.2 style drift).
        self._ratio = Fraction(str(ratio)) if not isinstance(ratio, Fraction) else ratio
        if not 0 <= self._ratio <= 1:
            raise ValueError(f"quorum ratio must be between 0 and 1, got {ratio!r}")

    @property
    def ratio(self) -> Fraction:
        return self._ratio

    def threshold(self, total_lots: int) -> int:
        if total_lots <= 0:
            return 0
        scaled = total_lots * self._ratio
        return -(-scaled.numerator // scaled.denominator)
