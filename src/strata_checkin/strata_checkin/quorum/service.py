from __future__ import annotations

from typing import Optional

from ..core.enums import MeetingType
from .calculator.base import QuorumRule
from .calculator.standard_rule import StandardQuorumRule
from .model import QuorumResult


class QuorumCalculator:
    def __init__(self, *, rule: Optional[QuorumRule] = None):
        self._rule = rule or StandardQuorumRule()

    def compute(self, attended_lot_count: int, total_lots: int) -> QuorumResult:
        attended = max(int(attended_lot_count), 0)
        total = int(total_lots)
        if total <= 0:
            return QuorumResult(percentage=0, threshold_met=False, attended=attended, total=total)

        threshold = self._rule.threshold(total)
        percentage = min(attended * 100 // total, 100)
        return QuorumResult(
            percentage=percentage,
            threshold_met=attended >= threshold,
            attended=attended,
            total=total,
            threshold=threshold,
        )


def quorum_total_label(meeting_type) -> str:
    """Form label for the quorum denominator of a meeting type."""
    if meeting_type == MeetingType.SCM:
        return "Number of Committee Members"
    return "Number of Financial Units"


def compute(attended_lot_count: int, total_lots: int) -> QuorumResult:
    return QuorumCalculator().compute(attended_lot_count, total_lots)
