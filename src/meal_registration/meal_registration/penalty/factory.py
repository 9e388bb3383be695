from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import OrderStatus
from .strategies.base import PenaltyStrategy
from .strategies.late_cancellation_strategy import LateCancellationStrategy
from .strategies.on_time_strategy import OnTimeStrategy


@dataclass
class PenaltyStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_action(self, *, now: datetime, deadline: datetime, new_status: OrderStatus) -> PenaltyStrategy:
        # Registrations never strand food preparation, only cancellations can be late.
        if new_status != OrderStatus.NOT_EATING:
            return OnTimeStrategy()
        # Strictly after: an action at exactly the deadline is on time.
        if now > deadline:
            return LateCancellationStrategy()
        return OnTimeStrategy()
