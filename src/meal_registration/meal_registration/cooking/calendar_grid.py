from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from typing import Mapping, Optional

from ..core.constants import DAY_NAMES
from ..core.enums import OrderStatus
from .window import CookingWindow, day_of_week, is_cooking_day


@dataclass(frozen=True)
class CalendarDay:
    """Một ô trong lịch đăng ký suất ăn theo tháng."""

    date: date
    day_of_month: int
    day_name: str
    is_today: bool
    is_past: bool
    is_cooking_day: bool
    is_registered: bool
    is_opted_out: bool

    @property
    def is_selectable(self) -> bool:
        return not self.is_past and self.is_cooking_day

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "day_of_month": self.day_of_month,
            "day_name": self.day_name,
            "is_today": self.is_today,
            "is_past": self.is_past,
            "is_cooking_day": self.is_cooking_day,
            "is_registered": self.is_registered,
            "is_opted_out": self.is_opted_out,
            "is_selectable": self.is_selectable,
        }


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def build_month_calendar(
    *,
    year: int,
    month: int,
    today: date,
    window: CookingWindow,
    explicit_statuses: Mapping[date, Optional[OrderStatus]],
) -> list[CalendarDay]:
    """Lay out every day of the month.

    `explicit_statuses` holds only stored rows: a day without a row is neither
    registered nor opted out on the grid, even though it counts as eating.
    """
    first, last = month_bounds(year, month)
    days: list[CalendarDay] = []
    for n in range(1, last.day + 1):
        d = date(year, month, n)
        dow = day_of_week(d)
        status = explicit_statuses.get(d)
        days.append(
            CalendarDay(
                date=d,
                day_of_month=n,
                day_name=DAY_NAMES[dow],
                is_today=d == today,
                is_past=d < today,
                is_cooking_day=is_cooking_day(dow, window),
                is_registered=status == OrderStatus.EATING,
                is_opted_out=status == OrderStatus.NOT_EATING,
            )
        )
    return days
