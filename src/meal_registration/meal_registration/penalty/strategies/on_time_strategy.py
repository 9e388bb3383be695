from __future__ import annotations

from datetime import datetime

from ..model import PenaltyDecision
from .base import PenaltyStrategy


class OnTimeStrategy(PenaltyStrategy):
    """Before the deadline, or any switch back to eating."""

    def decide(self, *, now: datetime, deadline: datetime) -> PenaltyDecision:
        return PenaltyDecision(deadline=deadline, is_late=False, minutes_late=0)
