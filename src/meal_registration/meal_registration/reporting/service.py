from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Callable, Optional

from ..activity.model import ActivityLogEntry
from ..activity.repository import ActivityLogRepository
from ..common.datetime_utils import as_civil, now_local
from ..common.logger import get_logger
from ..common.validators import require_positive_int, require_year_month
from ..core.constants import (
    COST_PER_MEAL_VND,
    DAY_NAMES,
    DEFAULT_PAGE_SIZE,
    DEFAULT_TREND_DAYS,
    MAX_TREND_DAYS,
    UNASSIGNED_DEPARTMENT,
    WEEKLY_SERIES_DAYS,
)
from ..core.enums import BoardFilter, OrderStatus
from ..core.exceptions import ValidationError
from ..cooking.calendar_grid import month_bounds
from ..cooking.window import CookingWindow, cooking_days_in_range, day_of_week, is_cooking_date
from ..orders.model import Order, effective_status
from ..orders.repository import OrderRepository
from ..roster.model import RosterMember
from ..roster.repository import RosterRepository
from ..settings.service import SettingsService
from .cache import SummaryCache
from .model import (
    BoardPage,
    BoardRow,
    DailySummary,
    DepartmentBreakdown,
    Forecast,
    ManagerOverview,
    MonthlyStats,
    TrendPoint,
    WeeklyPoint,
)

logger = get_logger(__name__)


def _matches(member: RosterMember, needle: str) -> bool:
    return any(needle in (value or "").casefold() for value in (member.full_name, member.email, member.department))


class ReportingService:
    """Daily totals, the trailing weekly series, tomorrow's forecast and the admin board.

    Any read failure propagates: a summary is either complete or not returned at all.
    """

    def __init__(
        self,
        orders: OrderRepository,
        activity: ActivityLogRepository,
        roster: RosterRepository,
        settings: SettingsService,
        *,
        cache: Optional[SummaryCache] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._orders = orders
        self._activity = activity
        self._roster = roster
        self._settings = settings
        self._cache = cache if cache is not None else SummaryCache()
        self._clock = clock

    def _today(self, now: Optional[datetime]) -> date:
        return as_civil(now or self._clock()).date()

    def notify_changed(self, tenant_id: str) -> None:
        """Change signal from a registration or the store; the next read recomputes."""
        self._cache.invalidate(tenant_id)
        logger.debug("Summary cache invalidated tenant=%s", tenant_id)

    def daily_summary(self, tenant_id: str, day: date) -> DailySummary:
        cached = self._cache.get(tenant_id, day)
        if cached is not None:
            return cached
        total = self._roster.count_consumers(tenant_id=tenant_id)
        not_eating = self._orders.count_for_consumers(
            tenant_id=tenant_id, order_date=day, status=OrderStatus.NOT_EATING
        )
        summary = DailySummary(date=day, total_employees=total, not_eating_count=not_eating)
        self._cache.put(tenant_id, summary)
        return summary

    def weekly_series(
        self,
        tenant_id: str,
        window: Optional[CookingWindow] = None,
        *,
        now: Optional[datetime] = None,
    ) -> list[WeeklyPoint]:
        """Registered counts over the trailing 7 days (today included), cooking days only, oldest first."""
        today = self._today(now)
        window = window or self._settings.cooking_days()
        first = today - timedelta(days=WEEKLY_SERIES_DAYS - 1)
        days = cooking_days_in_range(first, today, window)
        points = []
        for d in days:
            summary = self.daily_summary(tenant_id, d)
            points.append(
                WeeklyPoint(date=d, day_name=DAY_NAMES[day_of_week(d)], registered_count=summary.registered_count)
            )
        return points

    def forecast_tomorrow(self, tenant_id: str, *, now: Optional[datetime] = None) -> Forecast:
        tomorrow = self._today(now) + timedelta(days=1)
        window = self._settings.cooking_days()
        return Forecast(
            summary=self.daily_summary(tenant_id, tomorrow),
            is_cooking_day=is_cooking_date(tomorrow, window),
        )

    def attendance_board(
        self,
        tenant_id: str,
        day: date,
        *,
        status_filter: BoardFilter = BoardFilter.ALL,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> BoardPage:
        """Roster joined in memory against the day's orders and latest activity, then paged.

        `search` keeps members whose name, email or department contains it (case-insensitive).
        The join set is bounded by the tenant's roster size.
        """
        page = require_positive_int(page, "page")
        page_size = require_positive_int(page_size, "page_size")
        try:
            status_filter = BoardFilter(status_filter)
        except ValueError as e:
            raise ValidationError(f"Bộ lọc không hợp lệ: {status_filter!r}") from e

        members = self._roster.list_members(tenant_id=tenant_id)
        needle = (search or "").strip().casefold()
        if needle:
            members = [m for m in members if _matches(m, needle)]
        orders_by_employee: dict[str, Order] = {
            o.employee_id: o for o in self._orders.list_for_date(tenant_id=tenant_id, order_date=day)
        }
        latest_activity: dict[str, ActivityLogEntry] = {}
        for entry in self._activity.list_for_date(tenant_id=tenant_id, target_date=day):
            # Entries arrive newest first; keep the first one per employee.
            latest_activity.setdefault(entry.performed_by, entry)

        rows: list[BoardRow] = []
        for m in members:
            order = orders_by_employee.get(m.employee_id)
            activity = latest_activity.get(m.employee_id)
            timestamp = None
            if activity is not None:
                timestamp = activity.created_at or activity.details.action_timestamp
            elif order is not None:
                timestamp = order.updated_at or order.created_at
            rows.append(
                BoardRow(
                    employee_id=m.employee_id,
                    full_name=m.full_name,
                    email=m.email,
                    department=m.department or "-",
                    shift=m.shift or "-",
                    group_name=m.group_name or "-",
                    is_active=m.is_active,
                    status=effective_status(order),
                    has_record=order is not None,
                    timestamp=as_civil(timestamp) if timestamp else None,
                )
            )

        if status_filter == BoardFilter.EATING:
            rows = [r for r in rows if r.status == OrderStatus.EATING]
        elif status_filter == BoardFilter.NOT_EATING:
            rows = [r for r in rows if r.status == OrderStatus.NOT_EATING]
        elif status_filter == BoardFilter.NOT_REGISTERED:
            # Row absence means eating, so nobody is unregistered.
            rows = []

        start = (page - 1) * page_size
        return BoardPage(
            date=day,
            rows=rows[start : start + page_size],
            page=page,
            page_size=page_size,
            total_count=len(rows),
        )

    def department_breakdown(self, tenant_id: str, day: date) -> list[DepartmentBreakdown]:
        members = [m for m in self._roster.list_members(tenant_id=tenant_id) if not m.is_kitchen]
        not_eating_ids = {
            o.employee_id
            for o in self._orders.list_for_date(tenant_id=tenant_id, order_date=day)
            if o.status == OrderStatus.NOT_EATING
        }

        totals: dict[str, list[int]] = {}
        for m in members:
            bucket = totals.setdefault(m.department or UNASSIGNED_DEPARTMENT, [0, 0])
            bucket[0] += 1
            if m.employee_id in not_eating_ids:
                bucket[1] += 1

        out = [DepartmentBreakdown(department=k, total=v[0], not_eating=v[1]) for k, v in totals.items()]
        out.sort(key=lambda x: (-x.total, x.department))
        return out

    def monthly_stats(
        self,
        *,
        tenant_id: str,
        employee_id: str,
        year: int,
        month: int,
        now: Optional[datetime] = None,
    ) -> MonthlyStats:
        """Per-employee stats over the month's cooking days up to today."""
        year, month = require_year_month(year, month)
        today = self._today(now)
        window = self._settings.cooking_days()
        first, last = month_bounds(year, month)
        days = cooking_days_in_range(first, min(last, today), window)

        stored = {
            o.date: o
            for o in self._orders.list_for_employee(tenant_id=tenant_id, employee_id=employee_id, start=first, end=last)
        }

        eating = not_eating = streak = top_streak = 0
        for d in days:
            if effective_status(stored.get(d)) == OrderStatus.EATING:
                eating += 1
                streak += 1
                top_streak = max(top_streak, streak)
            else:
                not_eating += 1
                streak = 0

        return MonthlyStats(
            year=year,
            month=month,
            cooking_days=len(days),
            eating_days=eating,
            not_eating_days=not_eating,
            top_streak=top_streak,
        )

    def manager_overview(
        self,
        tenant_id: str,
        days: int = DEFAULT_TREND_DAYS,
        *,
        now: Optional[datetime] = None,
    ) -> ManagerOverview:
        """KPIs and a per-day trend over [today - days, today], consumers only."""
        days = require_positive_int(days, "days")
        if days > MAX_TREND_DAYS:
            raise ValidationError(f"Max days is {MAX_TREND_DAYS}")
        today = self._today(now)
        start = today - timedelta(days=days)

        consumers = {m.employee_id for m in self._roster.list_members(tenant_id=tenant_id) if not m.is_kitchen}
        orders = [
            o
            for o in self._orders.list_for_range(tenant_id=tenant_id, start=start, end=today)
            if o.employee_id in consumers
        ]

        per_day: dict[date, list[int]] = {}
        for o in orders:
            bucket = per_day.setdefault(o.date, [0, 0])
            bucket[0] += 1
            if o.status == OrderStatus.NOT_EATING:
                bucket[1] += 1

        trend = []
        for offset in range(days + 1):
            d = start + timedelta(days=offset)
            total_orders, not_eating = per_day.get(d, (0, 0))
            trend.append(
                TrendPoint(
                    date=d,
                    total_employees=len(consumers),
                    total_orders=total_orders,
                    total_not_eating=not_eating,
                )
            )

        return ManagerOverview(
            start=start,
            end=today,
            days=days,
            total_employees=len(consumers),
            total_orders=len(orders),
            total_not_eating=sum(p.total_not_eating for p in trend),
            cost_per_meal=COST_PER_MEAL_VND,
            trend=trend,
        )
