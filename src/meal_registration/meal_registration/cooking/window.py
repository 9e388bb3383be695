"""Cooking-day window filter.

Days of week use the Sunday-first convention stored in settings:
0 = Sunday, 1 = Monday, ..., 6 = Saturday. A window with start > end wraps
around the weekend (start=6, end=1 means Sat, Sun, Mon).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator, Sequence

from ..core.constants import DEFAULT_COOKING_END_DAY, DEFAULT_COOKING_START_DAY
from ..core.exceptions import ConfigError


@dataclass(frozen=True)
class CookingWindow:
    start_day: int = DEFAULT_COOKING_START_DAY
    end_day: int = DEFAULT_COOKING_END_DAY

    def __post_init__(self) -> None:
        for name in ("start_day", "end_day"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 6:
                raise ConfigError(f"{name} phải trong khoảng 0-6, nhận {value!r}")

    @property
    def wraps(self) -> bool:
        return self.start_day > self.end_day

    def to_dict(self) -> dict:
        return {"start_day": self.start_day, "end_day": self.end_day}


def day_of_week(day: date) -> int:
    # date.weekday() is Monday=0; shift to Sunday=0.
    return (day.weekday() + 1) % 7


def is_cooking_day(dow: int, window: CookingWindow) -> bool:
    if window.start_day <= window.end_day:
        return window.start_day <= dow <= window.end_day
    return dow >= window.start_day or dow <= window.end_day


def is_cooking_date(day: date, window: CookingWindow) -> bool:
    return is_cooking_day(day_of_week(day), window)


def iter_dates(first: date, last: date) -> Iterator[date]:
    current = first
    while current <= last:
        yield current
        current += timedelta(days=1)


def cooking_days_in_range(first: date, last: date, window: CookingWindow) -> list[date]:
    """All cooking dates in [first, last], ascending. Empty when first > last."""
    return [d for d in iter_dates(first, last) if is_cooking_date(d, window)]


def filter_cooking_dates(dates: Sequence[date], window: CookingWindow) -> list[date]:
    """Keep the cooking dates of an already ordered sequence, preserving order."""
    return [d for d in dates if is_cooking_date(d, window)]
