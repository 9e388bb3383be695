from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import ActivityAction, OrderStatus
from ..penalty.model import PenaltyDecision


@dataclass(frozen=True)
class ActivityDetails:
    """Payload lưu kèm mỗi thay đổi trạng thái (phục vụ audit và tính phạt)."""

    date: date
    status: OrderStatus
    previous_status: Optional[OrderStatus]
    action_timestamp: datetime
    deadline: datetime
    is_late: bool
    minutes_late: int
    context: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def for_change(
        cls,
        *,
        target_date: date,
        status: OrderStatus,
        previous_status: Optional[OrderStatus],
        action_timestamp: datetime,
        penalty: PenaltyDecision,
        context: Optional[dict[str, Any]] = None,
    ) -> "ActivityDetails":
        return cls(
            date=target_date,
            status=status,
            previous_status=previous_status,
            action_timestamp=action_timestamp,
            deadline=penalty.deadline,
            is_late=penalty.is_late,
            minutes_late=penalty.minutes_late,
            context=dict(context or {}),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "status": self.status.value,
            "previous_status": self.previous_status.value if self.previous_status else None,
            "action_timestamp": self.action_timestamp.isoformat(),
            "deadline": self.deadline.isoformat(),
            "is_late": self.is_late,
            "minutes_late": self.minutes_late,
            **self.context,
        }


@dataclass(frozen=True)
class ActivityLogEntry:
    """Append-only audit record. Never mutated or deleted."""

    tenant_id: str
    action: ActivityAction
    performed_by: str
    details: ActivityDetails
    target_type: str = "order"
    created_at: Optional[datetime] = None
    entry_id: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.entry_id,
            "action": self.action.value,
            "target_type": self.target_type,
            "target_id": self.performed_by,
            "details": self.details.to_json(),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class ActivityLogView:
    """Một dòng nhật ký kèm thông tin người thực hiện (lấy từ roster)."""

    entry: ActivityLogEntry
    performer_name: Optional[str] = None
    performer_email: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.entry.to_dict(),
            "performed_by": {
                "id": self.entry.performed_by,
                "full_name": self.performer_name,
                "email": self.performer_email,
            },
        }


@dataclass(frozen=True)
class ActivityLogPage:
    items: list[ActivityLogView]
    page: int
    page_size: int
    total: int

    @property
    def total_pages(self) -> int:
        return -(-self.total // self.page_size)

    def to_dict(self) -> dict[str, Any]:
        return {
            "logs": [i.to_dict() for i in self.items],
            "total": self.total,
            "page": self.page,
            "limit": self.page_size,
            "total_pages": self.total_pages,
        }
