from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from ..model import PenaltyDecision


class PenaltyStrategy(ABC):
    """Strategy Pattern: encapsulate how a status change is classified against its deadline."""

    @abstractmethod
    def decide(self, *, now: datetime, deadline: datetime) -> PenaltyDecision:
        raise NotImplementedError
