from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import as_civil, now_local
from ..common.logger import get_logger
from ..core.constants import AUTO_RESET_TOLERANCE_MINUTES
from ..orders.repository import OrderRepository
from ..roster.repository import RosterRepository
from ..settings.service import SettingsService
from .model import AutoResetOutcome, SkipReason

logger = get_logger(__name__)


class AutoResetService:
    """Body of the daily job that returns past opt-outs to the default (eating).

    Scheduling is external; the job may be triggered often and decides by itself
    whether it is due.
    """

    def __init__(
        self,
        orders: OrderRepository,
        roster: RosterRepository,
        settings: SettingsService,
        *,
        clock: Callable[[], datetime] = now_local,
        listeners: Sequence[Callable[[str], None]] = (),
    ):
        self._orders = orders
        self._roster = roster
        self._settings = settings
        self._clock = clock
        self._listeners = list(listeners)

    def run(self, *, now: Optional[datetime] = None) -> AutoResetOutcome:
        now = as_civil(now or self._clock())
        config = self._settings.auto_reset_config()

        if not config.enabled:
            logger.info("Auto-reset is disabled")
            return AutoResetOutcome(executed_at=now, skipped=SkipReason.DISABLED)

        current_minutes = now.hour * 60 + now.minute
        reset_minutes = config.reset_time.hour * 60 + config.reset_time.minute
        diff = abs(current_minutes - reset_minutes)
        if diff > AUTO_RESET_TOLERANCE_MINUTES:
            logger.info("Auto-reset not due (now=%s reset=%s)", now.strftime("%H:%M"), config.reset_time.strftime("%H:%M"))
            return AutoResetOutcome(executed_at=now, skipped=SkipReason.NOT_SCHEDULED_TIME)

        today = now.date()
        if config.last_run.startswith(today.isoformat()):
            logger.info("Auto-reset already ran today (last_run=%s)", config.last_run)
            return AutoResetOutcome(executed_at=now, skipped=SkipReason.ALREADY_RAN_TODAY)

        per_tenant: dict[str, int] = {}
        for tenant_id in self._roster.list_tenant_ids():
            count = self._orders.reset_not_eating_before(tenant_id=tenant_id, before=today, at=now)
            per_tenant[tenant_id] = count
            if count:
                for listener in self._listeners:
                    listener(tenant_id)

        self._settings.record_auto_reset_run(now)
        total = sum(per_tenant.values())
        logger.info("Auto-reset completed: %d order(s) reset across %d tenant(s)", total, len(per_tenant))
        return AutoResetOutcome(executed_at=now, reset_count=total, per_tenant=per_tenant)
