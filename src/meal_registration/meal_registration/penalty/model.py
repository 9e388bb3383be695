from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class PenaltyDecision:
    """Kết quả đánh giá hạn chót cho một lần thay đổi trạng thái."""

    deadline: datetime
    is_late: bool
    minutes_late: int = 0
