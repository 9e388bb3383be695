from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Vai trò người dùng (roster role category)."""

    EMPLOYEE = "Employee"
    MANAGER = "Manager"
    KITCHEN = "Kitchen"
    ADMIN_HR = "Admin HR"


class OrderStatus(str, Enum):
    """Trạng thái đăng ký suất ăn lưu trong CSDL."""

    EATING = "eating"
    NOT_EATING = "not_eating"

    def toggled(self) -> "OrderStatus":
        return OrderStatus.NOT_EATING if self is OrderStatus.EATING else OrderStatus.EATING


class ActivityAction(str, Enum):
    MEAL_REGISTRATION = "meal_registration"
    MEAL_CANCELLATION = "meal_cancellation"

    @classmethod
    def for_status(cls, status: OrderStatus) -> "ActivityAction":
        if status == OrderStatus.EATING:
            return cls.MEAL_REGISTRATION
        return cls.MEAL_CANCELLATION


class BoardFilter(str, Enum):
    """Bộ lọc bảng điểm danh suất ăn của admin."""

    ALL = "all"
    EATING = "eating"
    NOT_EATING = "not_eating"
    NOT_REGISTERED = "not_registered"
