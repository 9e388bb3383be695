from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Callable, Iterable, Optional, Sequence

from ..activity.model import ActivityDetails, ActivityLogEntry
from ..activity.repository import ActivityLogRepository
from ..common.datetime_utils import as_civil, now_local
from ..common.logger import get_logger
from ..common.validators import require_positive_int, require_year_month
from ..core.constants import DEFAULT_HISTORY_DAYS, DEFAULT_PAGE_SIZE, MAX_HISTORY_DAYS
from ..core.enums import ActivityAction, OrderStatus
from ..core.exceptions import NotFoundError, StoreError, ValidationError
from ..cooking.calendar_grid import CalendarDay, build_month_calendar, month_bounds
from ..cooking.window import is_cooking_date
from ..orders.model import Order, effective_status
from ..orders.repository import OrderRepository
from ..penalty.calculator import evaluate_action
from ..penalty.model import PenaltyDecision
from ..roster.repository import RosterRepository
from ..settings.model import DeadlineConfig
from ..settings.service import SettingsService
from .model import BulkResult, Committed, DateOutcome, Failed, TodayStatus, ToggleResult

logger = get_logger(__name__)

ChangeListener = Callable[[str], None]


class RegistrationService:
    """Single-day toggle and multi-day bulk registration on top of the order store.

    Ordering per unit of work: settings parsed, state written, and only after the store
    confirms the write, one activity entry appended (single attempt).
    """

    def __init__(
        self,
        orders: OrderRepository,
        activity: ActivityLogRepository,
        roster: RosterRepository,
        settings: SettingsService,
        *,
        clock: Callable[[], datetime] = now_local,
        listeners: Sequence[ChangeListener] = (),
    ):
        self._orders = orders
        self._activity = activity
        self._roster = roster
        self._settings = settings
        self._clock = clock
        self._listeners = list(listeners)

    def add_listener(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def _now(self, now: Optional[datetime]) -> datetime:
        return as_civil(now or self._clock())

    def _require_member(self, tenant_id: str, employee_id: str) -> None:
        if not tenant_id or not employee_id:
            raise ValidationError("Thiếu tenant hoặc nhân viên")
        if not self._roster.get_member(tenant_id=tenant_id, employee_id=employee_id):
            raise NotFoundError("Nhân viên không tồn tại")

    def _notify(self, tenant_id: str) -> None:
        for listener in self._listeners:
            listener(tenant_id)

    def _append_activity(
        self,
        *,
        tenant_id: str,
        employee_id: str,
        target_date: date,
        new_status: OrderStatus,
        previous_status: Optional[OrderStatus],
        now: datetime,
        penalty: PenaltyDecision,
        context: Optional[dict[str, Any]],
    ) -> bool:
        entry = ActivityLogEntry(
            tenant_id=tenant_id,
            action=ActivityAction.for_status(new_status),
            performed_by=employee_id,
            details=ActivityDetails.for_change(
                target_date=target_date,
                status=new_status,
                previous_status=previous_status,
                action_timestamp=now,
                penalty=penalty,
                context=context,
            ),
            created_at=now,
        )
        try:
            self._activity.append(entry)
        except StoreError:
            # The order write is already committed; the audit sink gets no retry.
            logger.error(
                "Activity log write failed tenant=%s employee=%s date=%s",
                tenant_id,
                employee_id,
                target_date,
                exc_info=True,
            )
            return False
        return True

    # Queries

    def lookup(self, *, tenant_id: str, employee_id: str, order_date: date) -> Optional[OrderStatus]:
        """Stored status, or None when no row exists (which means eating)."""
        order = self._orders.lookup(tenant_id=tenant_id, employee_id=employee_id, order_date=order_date)
        return order.status if order else None

    def today_status(self, *, tenant_id: str, employee_id: str, now: Optional[datetime] = None) -> TodayStatus:
        today = self._now(now).date()
        order = self._orders.lookup(tenant_id=tenant_id, employee_id=employee_id, order_date=today)
        return TodayStatus(
            date=today,
            status=effective_status(order),
            has_record=order is not None,
            locked=bool(order and order.locked),
        )

    def month_calendar(
        self,
        *,
        tenant_id: str,
        employee_id: str,
        year: int,
        month: int,
        now: Optional[datetime] = None,
    ) -> list[CalendarDay]:
        year, month = require_year_month(year, month)
        window = self._settings.cooking_days()
        first, last = month_bounds(year, month)
        rows = self._orders.list_for_employee(tenant_id=tenant_id, employee_id=employee_id, start=first, end=last)
        return build_month_calendar(
            year=year,
            month=month,
            today=self._now(now).date(),
            window=window,
            explicit_statuses={o.date: o.status for o in rows},
        )

    def history(
        self,
        *,
        tenant_id: str,
        employee_id: str,
        days: int = DEFAULT_HISTORY_DAYS,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
        now: Optional[datetime] = None,
    ) -> dict:
        days = require_positive_int(days, "days")
        if days > MAX_HISTORY_DAYS:
            raise ValidationError(f"Max days is {MAX_HISTORY_DAYS}")
        page = require_positive_int(page, "page")
        page_size = require_positive_int(page_size, "page_size")

        since = self._now(now).date() - timedelta(days=days)
        rows, total = self._orders.history(
            tenant_id=tenant_id,
            employee_id=employee_id,
            since=since,
            offset=(page - 1) * page_size,
            limit=page_size,
        )
        return {
            "data": [o.to_dict() for o in rows],
            "pagination": {
                "page": page,
                "page_size": page_size,
                "total": total,
                "total_pages": -(-total // page_size),
            },
        }

    # Commands

    def toggle_today(
        self,
        *,
        tenant_id: str,
        employee_id: str,
        current_status: Optional[OrderStatus] = None,
        context: Optional[dict[str, Any]] = None,
        now: Optional[datetime] = None,
    ) -> ToggleResult:
        """Flip today's status (eating <-> not_eating).

        Raises on any failure before or during the order write; in that case nothing
        was logged. When `current_status` is omitted it is read from the store.
        """
        now = self._now(now)
        today = now.date()
        self._require_member(tenant_id, employee_id)
        config = self._settings.deadline_config()

        if current_status is None:
            current_status = effective_status(
                self._orders.lookup(tenant_id=tenant_id, employee_id=employee_id, order_date=today)
            )
        new_status = OrderStatus(current_status).toggled()
        penalty = evaluate_action(
            action_instant=now,
            action_date=today,
            new_status=new_status,
            previous_status=current_status,
            config=config,
        )

        order = self._orders.upsert(
            tenant_id=tenant_id,
            employee_id=employee_id,
            order_date=today,
            status=new_status,
            at=now,
        )

        logged = self._append_activity(
            tenant_id=tenant_id,
            employee_id=employee_id,
            target_date=today,
            new_status=new_status,
            previous_status=current_status,
            now=now,
            penalty=penalty,
            context=context,
        )
        self._notify(tenant_id)
        logger.info(
            "Toggle tenant=%s employee=%s date=%s %s -> %s late=%s",
            tenant_id,
            employee_id,
            today,
            current_status.value,
            new_status.value,
            penalty.is_late,
        )
        return ToggleResult(
            order=order,
            previous_status=current_status,
            new_status=new_status,
            penalty=penalty,
            activity_logged=logged,
        )

    def bulk_apply(
        self,
        *,
        tenant_id: str,
        employee_id: str,
        dates: Iterable[date],
        target_status: OrderStatus,
        context: Optional[dict[str, Any]] = None,
        now: Optional[datetime] = None,
    ) -> BulkResult:
        """Apply `target_status` to each selectable date independently.

        Past dates and non-cooking days are silently excluded (reported in `rejected`).
        A date whose stored row already has the target status is left untouched and
        produces no activity entry.
        """
        now = self._now(now)
        today = now.date()
        target_status = OrderStatus(target_status)
        self._require_member(tenant_id, employee_id)
        window = self._settings.cooking_days()
        config = self._settings.deadline_config()

        requested = set(dates)
        accepted = sorted(d for d in requested if d >= today and is_cooking_date(d, window))
        rejected = frozenset(requested.difference(accepted))

        outcomes: dict[date, DateOutcome] = {}
        for d in accepted:
            outcomes[d] = self._apply_one(
                tenant_id=tenant_id,
                employee_id=employee_id,
                order_date=d,
                target_status=target_status,
                config=config,
                context=context,
                now=now,
            )

        result = BulkResult(target_status=target_status, outcomes=outcomes, rejected=rejected)
        if result.changed:
            self._notify(tenant_id)
        logger.info(
            "Bulk %s tenant=%s employee=%s ok=%d failed=%d rejected=%d",
            target_status.value,
            tenant_id,
            employee_id,
            len(result.succeeded),
            len(result.failed_dates),
            len(rejected),
        )
        return result

    def _apply_one(
        self,
        *,
        tenant_id: str,
        employee_id: str,
        order_date: date,
        target_status: OrderStatus,
        config: DeadlineConfig,
        context: Optional[dict[str, Any]],
        now: datetime,
    ) -> DateOutcome:
        try:
            existing = self._orders.lookup(tenant_id=tenant_id, employee_id=employee_id, order_date=order_date)
            if existing is not None and existing.status == target_status:
                return Committed(order=existing, previous_status=existing.status, changed=False)

            previous = effective_status(existing)
            penalty = evaluate_action(
                action_instant=now,
                action_date=order_date,
                new_status=target_status,
                previous_status=previous,
                config=config,
            )
            order: Order = self._orders.upsert(
                tenant_id=tenant_id,
                employee_id=employee_id,
                order_date=order_date,
                status=target_status,
                at=now,
            )
        except StoreError as e:
            logger.warning(
                "Bulk date failed tenant=%s employee=%s date=%s",
                tenant_id,
                employee_id,
                order_date,
                exc_info=True,
            )
            return Failed(reason=str(e) or e.__class__.__name__)

        logged = self._append_activity(
            tenant_id=tenant_id,
            employee_id=employee_id,
            target_date=order_date,
            new_status=target_status,
            previous_status=previous,
            now=now,
            penalty=penalty,
            context=context,
        )
        return Committed(
            order=order,
            previous_status=existing.status if existing else None,
            changed=True,
            penalty=penalty,
            activity_logged=logged,
        )
