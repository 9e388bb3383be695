from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional

from ..common.datetime_utils import as_civil, civil_datetime
from ..core.enums import OrderStatus
from ..settings.model import DeadlineConfig
from .factory import PenaltyStrategyFactory
from .model import PenaltyDecision

_default_factory = PenaltyStrategyFactory()


def deadline_for(action_date: date, config: DeadlineConfig) -> datetime:
    """Deadline instant governing `action_date`: HH:MM (UTC+07:00) on action_date + offset."""
    target_date = action_date + timedelta(days=config.offset_days)
    return civil_datetime(target_date, config.deadline_time)


def evaluate_action(
    *,
    action_instant: datetime,
    action_date: date,
    new_status: OrderStatus,
    previous_status: Optional[OrderStatus],
    config: DeadlineConfig,
    factory: Optional[PenaltyStrategyFactory] = None,
) -> PenaltyDecision:
    """Classify a status change as on time or late.

    `previous_status` does not affect the outcome; it is accepted so callers pass the
    full transition and the audit trail stays in one place.
    """
    factory = factory or _default_factory
    now = as_civil(action_instant)
    deadline = deadline_for(action_date, config)
    strategy = factory.for_action(now=now, deadline=deadline, new_status=new_status)
    return strategy.decide(now=now, deadline=deadline)
