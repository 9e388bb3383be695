from __future__ import annotations

from datetime import datetime

from ..model import PenaltyDecision
from .base import PenaltyStrategy


class LateCancellationStrategy(PenaltyStrategy):
    """Opt-out submitted after the deadline; minutes are floored."""

    def decide(self, *, now: datetime, deadline: datetime) -> PenaltyDecision:
        minutes = int((now - deadline).total_seconds() // 60)
        return PenaltyDecision(deadline=deadline, is_late=True, minutes_late=minutes)
