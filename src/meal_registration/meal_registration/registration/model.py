from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Union

from ..core.enums import OrderStatus
from ..core.exceptions import PartialBatchFailure
from ..orders.model import Order
from ..penalty.model import PenaltyDecision


@dataclass(frozen=True)
class Committed:
    """The state write was confirmed by the store."""

    order: Order
    previous_status: Optional[OrderStatus]
    changed: bool
    penalty: Optional[PenaltyDecision] = None
    activity_logged: bool = False

    ok = True


@dataclass(frozen=True)
class Failed:
    reason: str

    ok = False


DateOutcome = Union[Committed, Failed]


@dataclass(frozen=True)
class ToggleResult:
    order: Order
    previous_status: OrderStatus
    new_status: OrderStatus
    penalty: PenaltyDecision
    activity_logged: bool

    def to_dict(self) -> dict:
        return {
            "order": self.order.to_dict(),
            "previous_status": self.previous_status.value,
            "status": self.new_status.value,
            "deadline": self.penalty.deadline.isoformat(),
            "is_late": self.penalty.is_late,
            "minutes_late": self.penalty.minutes_late,
            "activity_logged": self.activity_logged,
        }


@dataclass(frozen=True)
class BulkResult:
    """Per-date outcome of a bulk operation. Not atomic: committed dates stay committed."""

    target_status: OrderStatus
    outcomes: dict[date, DateOutcome] = field(default_factory=dict)
    rejected: frozenset[date] = frozenset()

    @property
    def succeeded(self) -> set[date]:
        return {d for d, o in self.outcomes.items() if o.ok}

    @property
    def failed_dates(self) -> set[date]:
        return {d for d, o in self.outcomes.items() if not o.ok}

    @property
    def changed(self) -> set[date]:
        return {d for d, o in self.outcomes.items() if isinstance(o, Committed) and o.changed}

    def raise_for_failures(self) -> None:
        if self.failed_dates:
            raise PartialBatchFailure(self)

    def to_dict(self) -> dict:
        per_date: dict[str, dict] = {}
        for d, o in sorted(self.outcomes.items()):
            if isinstance(o, Committed):
                per_date[d.isoformat()] = {
                    "ok": True,
                    "changed": o.changed,
                    "is_late": bool(o.penalty and o.penalty.is_late),
                    "minutes_late": o.penalty.minutes_late if o.penalty else 0,
                }
            else:
                per_date[d.isoformat()] = {"ok": False, "reason": o.reason}
        return {
            "status": self.target_status.value,
            "succeeded": sorted(d.isoformat() for d in self.succeeded),
            "failed": sorted(d.isoformat() for d in self.failed_dates),
            "rejected": sorted(d.isoformat() for d in self.rejected),
            "per_date": per_date,
        }


@dataclass(frozen=True)
class TodayStatus:
    date: date
    status: OrderStatus
    has_record: bool
    locked: bool = False

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "status": self.status.value,
            "has_record": self.has_record,
            "locked": self.locked,
        }
