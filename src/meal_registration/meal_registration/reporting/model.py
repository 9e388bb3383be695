from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import OrderStatus
from ..core.exceptions import DomainError


@dataclass(frozen=True)
class DailySummary:
    """Tổng hợp suất ăn của một ngày.

    There is no "unregistered" bucket: registered + not_eating == total, always.
    """

    date: date
    total_employees: int
    not_eating_count: int

    def __post_init__(self) -> None:
        if not 0 <= self.not_eating_count <= self.total_employees:
            raise DomainError(
                f"Số liệu không nhất quán ngày {self.date}: "
                f"not_eating={self.not_eating_count} total={self.total_employees}"
            )

    @property
    def registered_count(self) -> int:
        return self.total_employees - self.not_eating_count

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "total_employees": self.total_employees,
            "not_eating_count": self.not_eating_count,
            "registered_count": self.registered_count,
        }


@dataclass(frozen=True)
class WeeklyPoint:
    date: date
    day_name: str
    registered_count: int

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "day": self.day_name,
            "registered_count": self.registered_count,
        }


@dataclass(frozen=True)
class Forecast:
    summary: DailySummary
    is_cooking_day: bool

    def to_dict(self) -> dict:
        return {**self.summary.to_dict(), "is_cooking_day": self.is_cooking_day}


@dataclass(frozen=True)
class BoardRow:
    """Read-model: một dòng trên bảng điểm danh suất ăn (nhân viên + trạng thái trong ngày)."""

    employee_id: str
    full_name: str
    email: str
    department: str
    shift: str
    group_name: str
    is_active: bool
    status: OrderStatus
    has_record: bool
    timestamp: Optional[datetime]

    def to_dict(self) -> dict:
        return {
            "id": self.employee_id,
            "user_name": self.full_name,
            "email": self.email,
            "department": self.department,
            "shift": self.shift,
            "group_name": self.group_name,
            "is_active": self.is_active,
            "status": self.status.value,
            "has_record": self.has_record,
            "time": self.timestamp.strftime("%H:%M") if self.timestamp else "-",
        }


@dataclass(frozen=True)
class BoardPage:
    date: date
    rows: list[BoardRow]
    page: int
    page_size: int
    total_count: int

    @property
    def total_pages(self) -> int:
        return -(-self.total_count // self.page_size)

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "data": [r.to_dict() for r in self.rows],
            "pagination": {
                "page": self.page,
                "page_size": self.page_size,
                "total": self.total_count,
                "total_pages": self.total_pages,
            },
        }


@dataclass(frozen=True)
class DepartmentBreakdown:
    department: str
    total: int
    not_eating: int

    @property
    def eating(self) -> int:
        return self.total - self.not_eating

    def to_dict(self) -> dict:
        return {
            "department": self.department,
            "total": self.total,
            "eating": self.eating,
            "not_eating": self.not_eating,
        }


@dataclass(frozen=True)
class MonthlyStats:
    year: int
    month: int
    cooking_days: int
    eating_days: int
    not_eating_days: int
    top_streak: int

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "month": self.month,
            "cooking_days": self.cooking_days,
            "eating_days": self.eating_days,
            "not_eating_days": self.not_eating_days,
            "top_streak": self.top_streak,
        }


def percent(part: int, whole: float) -> float:
    return round(part / whole * 100, 1) if whole else 0.0


@dataclass(frozen=True)
class TrendPoint:
    """Một ngày trong xu hướng N ngày của quản lý."""

    date: date
    total_employees: int
    total_orders: int
    total_not_eating: int

    @property
    def total_eating(self) -> int:
        # Row absence means eating.
        return self.total_employees - self.total_not_eating

    @property
    def waste_rate(self) -> float:
        return percent(self.total_not_eating, self.total_orders)

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "total_employees": self.total_employees,
            "total_orders": self.total_orders,
            "total_eating": self.total_eating,
            "total_not_eating": self.total_not_eating,
            "waste_rate": self.waste_rate,
        }


@dataclass(frozen=True)
class ManagerOverview:
    """KPI tổng hợp + xu hướng theo ngày cho dashboard quản lý."""

    start: date
    end: date
    days: int
    total_employees: int
    total_orders: int
    total_not_eating: int
    cost_per_meal: int
    trend: list[TrendPoint]

    @property
    def waste_rate(self) -> float:
        return percent(self.total_not_eating, self.total_orders)

    @property
    def cost_savings(self) -> int:
        return self.total_not_eating * self.cost_per_meal

    @property
    def compliance_rate(self) -> float:
        if not self.total_orders:
            return 0.0
        return percent(self.total_orders, max(self.total_employees, 1) * self.days)

    def to_dict(self) -> dict:
        return {
            "kpis": {
                "waste_rate": self.waste_rate,
                "cost_savings": self.cost_savings,
                "compliance_rate": self.compliance_rate,
                "total_employees": self.total_employees,
                "total_orders": self.total_orders,
                "total_not_eating": self.total_not_eating,
            },
            "trend_data": [p.to_dict() for p in self.trend],
            "date_range": {"start": self.start.isoformat(), "end": self.end.isoformat(), "days": self.days},
        }
