from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class SkipReason(str, Enum):
    DISABLED = "disabled"
    NOT_SCHEDULED_TIME = "not_scheduled_time"
    ALREADY_RAN_TODAY = "already_ran_today"


@dataclass(frozen=True)
class AutoResetOutcome:
    executed_at: datetime
    skipped: Optional[SkipReason] = None
    reset_count: int = 0
    per_tenant: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "success": True,
            "skipped": self.skipped is not None,
            "reason": self.skipped.value if self.skipped else None,
            "reset_count": self.reset_count,
            "executed_at": self.executed_at.isoformat(),
        }
