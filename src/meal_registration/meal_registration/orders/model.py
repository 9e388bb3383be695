from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import OrderStatus


@dataclass(frozen=True)
class Order:
    """Thực thể miền (domain): Đăng ký suất ăn của một nhân viên cho một ngày.

    Unique on (tenant_id, employee_id, date). A missing row means the employee eats.
    """

    order_id: Optional[int]
    tenant_id: str
    employee_id: str
    date: date
    status: OrderStatus
    locked: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.order_id,
            "tenant_id": self.tenant_id,
            "user_id": self.employee_id,
            "date": self.date.isoformat(),
            "status": self.status.value,
            "locked": self.locked,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


def effective_status(order: Optional[Order]) -> OrderStatus:
    """The single place where "no row" becomes "eating"."""
    return order.status if order is not None else OrderStatus.EATING
